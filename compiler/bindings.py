# SymGA: Symbolic Geometric Algebra Code Generation
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.
# We believe Geometric Algebra is the future of AI, and we want
# the industry to build upon this "unbending" paradigm.

"""Binding table and expander.

A :class:`VariableInfo` holds named references and functions on top of the
read-only built-in table. :func:`expand` inlines all of them, leaving a tree
made only of literals, blades, host expressions, annotations and primitive
operations.
"""

import copy
import warnings
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

from core import blade
from compiler.builtins import BUILTIN_FUNCTIONS, BUILTIN_REFERENCES
from compiler.errors import (
    ArityError, BindingOverrideWarning, CyclicBindingError, InternalInvariantError,
    MalformedBindingError, UnboundReferenceError,
)
from compiler.expression import (
    Annotation, Argument, Blade, Call, FunctionBinding, HostExpr, Literal, Node,
    Operation, ReferenceBinding, Symbol, calls_to, max_argument,
)
from compiler.parser import parse_expression, parse_function
from log import get_logger

logger = get_logger(__name__)

ReferenceLike = Union[Node, str, ReferenceBinding]
FunctionLike = Union[FunctionBinding, Tuple[int, Node], str]


class VariableInfo:
    """Per-compilation binding table.

    Built-ins form the base layer; user references and functions shadow
    them. Overriding a built-in emits a :class:`BindingOverrideWarning`
    unless ``warn_override`` is False.

    Args:
        refs: Reference bindings, as expression trees or source text.
        funcs: Function bindings, as :class:`FunctionBinding`, ``(arity, body)``
            pairs, or ``def`` / ``lambda`` source text.
        warn_override: Warn when a user binding replaces a built-in.
        builtins: Start from the built-in table.

    Example:
        >>> info = VariableInfo(refs={"x": "Vector(x)"},
        ...                     funcs={"rot": "lambda r, v: r * v * ~r"})
    """

    def __init__(
        self,
        refs: Optional[Mapping[str, ReferenceLike]] = None,
        funcs: Optional[Mapping[str, FunctionLike]] = None,
        warn_override: bool = True,
        builtins: bool = True,
    ):
        self.warn_override = warn_override
        self.references: Dict[str, ReferenceBinding] = dict(BUILTIN_REFERENCES) if builtins else {}
        self.functions: Dict[str, FunctionBinding] = dict(BUILTIN_FUNCTIONS) if builtins else {}
        for name, rhs in (refs or {}).items():
            self.define_reference(name, rhs)
        for name, fn in (funcs or {}).items():
            binding = _as_function(fn)
            self.define_function(name, binding.arity, binding.body)

    def define_reference(self, name: str, rhs: ReferenceLike) -> None:
        """Registers ``name -> rhs``.

        Raises:
            MalformedBindingError: ``rhs`` contains argument placeholders.
        """
        if isinstance(rhs, ReferenceBinding):
            rhs = rhs.rhs
        elif isinstance(rhs, str):
            rhs = parse_expression(rhs)
        if max_argument(rhs) >= 0:
            raise MalformedBindingError(f"Reference {name!r} refers to function arguments: {rhs}")
        self._check_override(name)
        self.references[name] = ReferenceBinding(rhs)

    def define_function(self, name: str, arity: int, body: Node) -> None:
        """Registers a function of ``arity`` arguments.

        Raises:
            MalformedBindingError: Placeholders outside ``0..arity-1``.
            CyclicBindingError: The body calls ``name`` itself.
        """
        if arity < 0:
            raise MalformedBindingError(f"Function {name!r} has negative arity {arity}")
        highest = max_argument(body)
        if highest >= arity:
            raise MalformedBindingError(
                f"Function {name!r} of arity {arity} refers to argument {highest}"
            )
        if calls_to(body, name):
            raise CyclicBindingError(f"Function {name!r} calls itself")
        self._check_override(name)
        self.functions[name] = FunctionBinding(arity, body)

    def define(self, name: str, binding: Union[ReferenceBinding, FunctionBinding]) -> None:
        if isinstance(binding, FunctionBinding):
            self.define_function(name, binding.arity, binding.body)
        else:
            self.define_reference(name, binding.rhs)

    def extended(self, bindings: Iterable[Tuple[str, Union[ReferenceBinding, FunctionBinding]]]) -> "VariableInfo":
        """Copy of this table with ``bindings`` applied in order."""
        info = copy.copy(self)
        info.references = dict(self.references)
        info.functions = dict(self.functions)
        for name, binding in bindings:
            info.define(name, binding)
        return info

    def _check_override(self, name: str) -> None:
        if name in BUILTIN_FUNCTIONS or name in BUILTIN_REFERENCES:
            logger.debug("Binding %r overrides a built-in", name)
            if self.warn_override:
                warnings.warn(
                    f"Binding {name!r} overrides the built-in of the same name",
                    BindingOverrideWarning,
                    stacklevel=3,
                )

    def __repr__(self):
        return f"VariableInfo({len(self.references)} references, {len(self.functions)} functions)"


def _as_function(value: FunctionLike) -> FunctionBinding:
    if isinstance(value, FunctionBinding):
        return value
    if isinstance(value, str):
        return parse_function(value)
    if isinstance(value, tuple) and len(value) == 2 and isinstance(value[1], Node):
        return FunctionBinding(int(value[0]), value[1])
    raise MalformedBindingError(f"Cannot interpret {value!r} as a function binding")


# ----------------------------------------------------------------------
# Expansion
# ----------------------------------------------------------------------

def expand(node: Node, varinfo: Optional[VariableInfo] = None) -> Node:
    """Inlines every reference and function call in ``node``.

    Args:
        node: Parsed expression tree.
        varinfo: Binding table; the built-ins alone when omitted.

    Returns:
        Node: Tree of :class:`Literal`, :class:`Blade`, :class:`HostExpr`,
        :class:`Annotation` and :class:`Operation` nodes only.

    Raises:
        UnboundReferenceError: A name is neither bound nor a basis blade.
        CyclicBindingError: A binding refers back to itself.
        ArityError: A function is called with the wrong number of arguments.
    """
    expanded = _Expander(varinfo or VariableInfo()).visit(node)
    logger.debug("Expanded %s -> %s", node, expanded)
    return expanded


class _Expander:
    """Recursive rewrite with an explicit stack of bindings being expanded."""

    def __init__(self, varinfo: VariableInfo):
        self.varinfo = varinfo
        self.stack: List[Tuple[str, str]] = []

    def visit(self, node: Node, host: bool = False, frame: Optional[Tuple[Node, ...]] = None) -> Node:
        """Expands ``node``.

        Args:
            node: Subtree to expand.
            host: True for the direct operand of an annotation, where
                unbound names denote host values.
            frame: Expanded arguments of the innermost function call.
        """
        if isinstance(node, (Literal, Blade, HostExpr)):
            return node
        if isinstance(node, Argument):
            if frame is None:
                raise MalformedBindingError(f"Argument placeholder {node} outside of a function body")
            if node.index >= len(frame):
                raise MalformedBindingError(f"Argument placeholder {node} out of range")
            return frame[node.index]
        if isinstance(node, Symbol):
            return self._symbol(node, host)
        if isinstance(node, Call):
            return self._call(node, host, frame)
        if isinstance(node, Annotation):
            return Annotation(self.visit(node.operand, True, frame), node.spec)
        if isinstance(node, Operation):
            return Operation(node.op, tuple(self.visit(a, False, frame) for a in node.args))
        raise InternalInvariantError(f"Unknown expression node {node!r}")

    def _symbol(self, node: Symbol, host: bool) -> Node:
        name = node.name
        binding = self.varinfo.references.get(name)
        if binding is not None:
            key = ("reference", name)
            if key in self.stack:
                if host and self.stack[-1] == key and _self_annotated(binding.rhs, name):
                    return HostExpr(name)
                raise CyclicBindingError(f"Cyclic reference: {self._cycle(key)}")
            self.stack.append(key)
            try:
                return self.visit(binding.rhs)
            finally:
                self.stack.pop()

        if host:
            return HostExpr(name)
        indices = blade.parse_blade_name(name)
        if indices is not None:
            return Blade(indices)
        raise UnboundReferenceError(f"Unbound reference {name!r}")

    def _call(self, node: Call, host: bool, frame) -> Node:
        fn = self.varinfo.functions.get(node.name)
        if fn is None:
            if host:
                source = self._host_source(node)
                if source is not None:
                    return HostExpr(source)
            raise UnboundReferenceError(f"Unbound function {node.name!r}")
        if len(node.args) != fn.arity:
            raise ArityError(
                f"{node.name} takes {fn.arity} argument(s), got {len(node.args)}: {node}"
            )

        key = ("function", node.name)
        if key in self.stack:
            raise CyclicBindingError(f"Cyclic function call: {self._cycle(key)}")
        args = tuple(self.visit(a, False, frame) for a in node.args)
        self.stack.append(key)
        try:
            return self.visit(fn.body, False, args)
        finally:
            self.stack.pop()

    def _host_source(self, node: Node) -> Optional[str]:
        """Python source of a tree made of unbound names and calls, else None."""
        if isinstance(node, HostExpr):
            return node.source
        if isinstance(node, Literal):
            return str(node.value) if node.value.is_Integer else repr(float(node.value))
        if isinstance(node, Argument):
            raise MalformedBindingError(
                f"Function argument {node} cannot be passed to the host call"
            )
        if isinstance(node, Symbol):
            return None if node.name in self.varinfo.references else node.name
        if isinstance(node, Call) and node.name not in self.varinfo.functions:
            args = [self._host_source(a) for a in node.args]
            if any(a is None for a in args):
                return None
            return f"{node.name}({', '.join(args)})"
        return None

    def _cycle(self, key) -> str:
        start = self.stack.index(key)
        return " -> ".join(name for _, name in self.stack[start:] + [key])


def _self_annotated(rhs: Node, name: str) -> bool:
    """True for ``x = T(x)``: one mention of ``name``, as an annotation operand."""
    target = Symbol(name)
    mentions = sum(1 for n in rhs.walk() if n == target)
    annotated = sum(1 for n in rhs.walk() if isinstance(n, Annotation) and n.operand == target)
    return mentions == 1 and annotated == 1
