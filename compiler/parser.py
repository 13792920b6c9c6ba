# SymGA: Symbolic Geometric Algebra Code Generation
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.
# We believe Geometric Algebra is the future of AI, and we want
# the industry to build upon this "unbending" paradigm.

"""Surface syntax to expression tree.

The surface language is a subset of Python, read with :mod:`ast`. A program
is a sequence of binding statements followed by one expression::

    x: Vector
    rot = lambda r, v: r * v * ~r
    rot(e12, x)

Operators map onto built-in functions (``*`` is ``geometric_product``,
``^`` is ``outer_product``, ...), so that every operator can be overridden
like any other binding. Anything the algebra cannot see into (attribute
access, subscripts, calls on non-names) is kept as an opaque host
expression.
"""

import ast
import textwrap
from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Union

import sympy

from compiler.errors import ExpressionSyntaxError, MalformedBindingError
from compiler.expression import (
    ANTISCALAR, BIVECTOR, MULTIVECTOR, QUADVECTOR, SCALAR, TRIVECTOR, VECTOR,
    Annotation, Argument, Call, FunctionBinding, GradeSpec, HostExpr, Literal,
    Node, ReferenceBinding, Symbol,
)
from log import get_logger

logger = get_logger(__name__)

Binding = Union[ReferenceBinding, FunctionBinding]
Source = Union[str, ast.AST]

BINARY_OPERATORS = {
    ast.Add: "add",
    ast.Sub: "subtract",
    ast.Mult: "geometric_product",
    ast.BitXor: "outer_product",
    ast.BitOr: "inner_product",
    ast.LShift: "left_contraction",
    ast.RShift: "right_contraction",
    ast.BitAnd: "exterior_antiproduct",
    ast.Div: "division",
    ast.Pow: "power",
}

UNARY_OPERATORS = {
    ast.USub: "negate",
    ast.Invert: "reverse",
}

# Type names usable in ``x: T`` statements and as inline annotations ``T(x)``
TYPE_NAMES = {
    "Scalar": SCALAR,
    "int": SCALAR,
    "float": SCALAR,
    "Vector": VECTOR,
    "Bivector": BIVECTOR,
    "Trivector": TRIVECTOR,
    "Quadvector": QUADVECTOR,
    "Antiscalar": ANTISCALAR,
    "Pseudoscalar": ANTISCALAR,
    "Multivector": MULTIVECTOR,
}

INLINE_ANNOTATIONS = {
    "Scalar", "Vector", "Bivector", "Trivector", "Quadvector",
    "Antiscalar", "Pseudoscalar", "KVector", "Multivector",
}


@dataclass(frozen=True)
class Program:
    """Parsed program: bindings in definition order and the final expression."""
    bindings: Tuple[Tuple[str, Binding], ...]
    expression: Node


# ----------------------------------------------------------------------
# Entry points
# ----------------------------------------------------------------------

def parse_program(source: Source) -> Program:
    """Parses binding statements followed by a final expression.

    Args:
        source: Python source text (dedented automatically) or an
            :class:`ast.Module`, statement or expression node.

    Returns:
        Program: Bindings and the expression tree.

    Raises:
        ExpressionSyntaxError: Unsupported syntax, or a program whose last
            statement is not an expression.
        MalformedBindingError: Ill-formed function definitions.
    """
    statements = _statements(source)
    if not statements:
        raise ExpressionSyntaxError("Empty program: expected an expression")
    *definitions, last = statements
    if not isinstance(last, ast.Expr):
        raise ExpressionSyntaxError(
            f"The last statement must be an expression, got {type(last).__name__}: "
            f"{_snippet(last)}"
        )

    bindings = tuple(_parse_binding(stmt) for stmt in definitions)
    expression = _Converter().convert(last.value)
    logger.debug("Parsed %d binding(s), expression %s", len(bindings), expression)
    return Program(bindings, expression)


def parse_expression(source: Source) -> Node:
    """Parses a single expression (no binding statements)."""
    if isinstance(source, str):
        tree = _parse(source, mode="eval").body
    elif isinstance(source, ast.Expression):
        tree = source.body
    elif isinstance(source, ast.Expr):
        tree = source.value
    elif isinstance(source, ast.expr):
        tree = source
    else:
        raise ExpressionSyntaxError(f"Expected an expression, got {type(source).__name__}")
    return _Converter().convert(tree)


def parse_function(source: Source) -> FunctionBinding:
    """Parses one function definition.

    Accepts ``def f(a, b): ...``, ``f = lambda a, b: ...`` or a bare
    ``lambda a, b: ...``.
    """
    statements = _statements(source)
    if len(statements) != 1:
        raise MalformedBindingError("Expected exactly one function definition")
    stmt = statements[0]
    if isinstance(stmt, ast.Expr) and isinstance(stmt.value, ast.Lambda):
        return _parse_lambda(stmt.value)
    _, binding = _parse_binding(stmt)
    if not isinstance(binding, FunctionBinding):
        raise MalformedBindingError(f"Not a function definition: {_snippet(stmt)}")
    return binding


# ----------------------------------------------------------------------
# Statements
# ----------------------------------------------------------------------

def _parse(source: str, mode: str):
    try:
        return ast.parse(textwrap.dedent(source).strip(), mode=mode)
    except SyntaxError as e:
        raise ExpressionSyntaxError(f"Invalid syntax: {e.msg} (line {e.lineno})") from e


def _statements(source: Source):
    if isinstance(source, str):
        return _parse(source, mode="exec").body
    if isinstance(source, ast.Module):
        return source.body
    if isinstance(source, ast.Expression):
        return [ast.Expr(source.body)]
    if isinstance(source, ast.stmt):
        return [source]
    if isinstance(source, ast.expr):
        return [ast.Expr(source)]
    raise ExpressionSyntaxError(f"Cannot parse {type(source).__name__}")


def _parse_binding(stmt: ast.stmt) -> Tuple[str, Binding]:
    if isinstance(stmt, ast.FunctionDef):
        return stmt.name, _parse_def(stmt)

    if isinstance(stmt, ast.Assign):
        if len(stmt.targets) != 1 or not isinstance(stmt.targets[0], ast.Name):
            raise ExpressionSyntaxError(f"Only single-name assignments are supported: {_snippet(stmt)}")
        name = stmt.targets[0].id
        if isinstance(stmt.value, ast.Lambda):
            return name, _parse_lambda(stmt.value)
        return name, ReferenceBinding(_Converter().convert(stmt.value))

    if isinstance(stmt, ast.AnnAssign):
        if not isinstance(stmt.target, ast.Name):
            raise ExpressionSyntaxError(f"Only names can be annotated: {_snippet(stmt)}")
        name = stmt.target.id
        spec = parse_type(stmt.annotation)
        operand = Symbol(name) if stmt.value is None else _Converter().convert(stmt.value)
        return name, ReferenceBinding(Annotation(operand, spec))

    if isinstance(stmt, ast.Expr):
        raise ExpressionSyntaxError(
            f"Only the last statement may be an expression: {_snippet(stmt)}"
        )
    raise ExpressionSyntaxError(f"Unsupported statement {type(stmt).__name__}: {_snippet(stmt)}")


def _check_arguments(args: ast.arguments, where: str) -> Tuple[str, ...]:
    if args.posonlyargs or args.kwonlyargs or args.vararg or args.kwarg:
        raise MalformedBindingError(f"{where}: only plain positional arguments are allowed")
    if args.defaults or any(d is not None for d in args.kw_defaults):
        raise MalformedBindingError(f"{where}: arguments cannot have default values")
    for a in args.args:
        if a.annotation is not None:
            raise MalformedBindingError(
                f"{where}: argument {a.arg!r} is typed; function arguments must be untyped"
            )
    return tuple(a.arg for a in args.args)


def _parse_lambda(node: ast.Lambda) -> FunctionBinding:
    params = _check_arguments(node.args, "lambda")
    body = _Converter(params).convert(node.body)
    return FunctionBinding(len(params), body)


def _parse_def(fn: ast.FunctionDef) -> FunctionBinding:
    where = f"function {fn.name!r}"
    if fn.decorator_list:
        raise MalformedBindingError(f"{where}: decorators are not supported")
    if fn.returns is not None:
        raise MalformedBindingError(f"{where}: output type annotations are not supported")
    if getattr(fn, "type_params", None):
        raise MalformedBindingError(f"{where}: type parameters are not supported")
    params = _check_arguments(fn.args, where)

    body = list(fn.body)
    if body and isinstance(body[0], ast.Expr) and isinstance(body[0].value, ast.Constant) \
            and isinstance(body[0].value.value, str):
        body = body[1:]  # docstring
    if not body or not isinstance(body[-1], ast.Return) or body[-1].value is None:
        raise ExpressionSyntaxError(f"{where} must end with 'return <expression>'")

    local_values: Dict[str, Node] = {}
    for stmt in body[:-1]:
        name, value = _parse_local(stmt, params, local_values, where)
        local_values[name] = value
    converter = _Converter(params, local_values)
    return FunctionBinding(len(params), converter.convert(body[-1].value))


def _parse_local(stmt, params, local_values, where) -> Tuple[str, Node]:
    """Local ``name = expr`` / ``name: T = expr``, inlined into later statements."""
    if isinstance(stmt, ast.Assign) and len(stmt.targets) == 1 and isinstance(stmt.targets[0], ast.Name):
        name, annotation, value = stmt.targets[0].id, None, stmt.value
    elif isinstance(stmt, ast.AnnAssign) and isinstance(stmt.target, ast.Name) and stmt.value is not None:
        name, annotation, value = stmt.target.id, stmt.annotation, stmt.value
    elif isinstance(stmt, (ast.AugAssign, ast.AnnAssign)) and isinstance(stmt.target, ast.Name) \
            and stmt.target.id in params:
        raise MalformedBindingError(f"{where}: argument {stmt.target.id!r} cannot be reassigned")
    else:
        raise ExpressionSyntaxError(f"{where}: unsupported statement {_snippet(stmt)}")

    if name in params:
        raise MalformedBindingError(f"{where}: argument {name!r} cannot be reassigned")
    node = _Converter(params, local_values).convert(value)
    if annotation is not None:
        node = Annotation(node, parse_type(annotation))
    return name, node


# ----------------------------------------------------------------------
# Types
# ----------------------------------------------------------------------

def parse_type(node: ast.expr) -> GradeSpec:
    """Parses a type specification into the grades it selects.

    ``Vector``, ``int``, ``2``, ``(0, 2)``, ``KVector[3]`` and
    ``Multivector`` are all accepted.
    """
    if isinstance(node, ast.Name) and node.id in TYPE_NAMES:
        return TYPE_NAMES[node.id]
    if isinstance(node, ast.Constant) and isinstance(node.value, str):
        return parse_type(_parse(node.value, mode="eval").body)
    if isinstance(node, ast.Subscript) and isinstance(node.value, ast.Name) and node.value.id == "KVector":
        return GradeSpec((_grade_literal(node.slice),), name=f"KVector[{ast.unparse(node.slice)}]")
    if isinstance(node, (ast.Constant, ast.Tuple)):
        return GradeSpec(_grade_tuple(node))
    raise ExpressionSyntaxError(f"Unknown type specification {_snippet(node)}")


def _grade_literal(node: ast.expr) -> int:
    if isinstance(node, ast.Constant) and isinstance(node.value, int) and not isinstance(node.value, bool):
        if node.value < 0:
            raise ExpressionSyntaxError(f"Grades are non-negative, got {node.value}")
        return node.value
    raise ExpressionSyntaxError(f"Grade must be an integer literal, got {_snippet(node)}")


def _grade_tuple(node: ast.expr) -> Tuple[int, ...]:
    if isinstance(node, ast.Tuple):
        if not node.elts:
            raise ExpressionSyntaxError("Empty grade tuple")
        return tuple(_grade_literal(e) for e in node.elts)
    return (_grade_literal(node),)


# ----------------------------------------------------------------------
# Expressions
# ----------------------------------------------------------------------

class _Converter:
    """Python expression AST to algebraic expression tree.

    Args:
        params: Function argument names, mapped to placeholders by position.
        local_values: Local assignments of a ``def`` body, inlined by name.
    """

    def __init__(self, params: Tuple[str, ...] = (), local_values: Optional[Dict[str, Node]] = None):
        self.params = {name: i for i, name in enumerate(params)}
        self.local_values = local_values or {}

    def convert(self, node: ast.expr) -> Node:
        method = getattr(self, f"_convert_{type(node).__name__}", None)
        if method is None:
            raise ExpressionSyntaxError(f"Unsupported syntax {type(node).__name__}: {_snippet(node)}")
        return method(node)

    def _convert_Constant(self, node: ast.Constant) -> Node:
        value = node.value
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ExpressionSyntaxError(f"Unsupported literal {value!r}")
        return Literal(sympy.Integer(value) if isinstance(value, int) else sympy.Float(value))

    def _convert_Name(self, node: ast.Name) -> Node:
        if node.id in self.params:
            return Argument(self.params[node.id])
        if node.id in self.local_values:
            return self.local_values[node.id]
        return Symbol(node.id)

    def _convert_BinOp(self, node: ast.BinOp) -> Node:
        name = BINARY_OPERATORS.get(type(node.op))
        if name is None:
            raise ExpressionSyntaxError(f"Unsupported operator {type(node.op).__name__}: {_snippet(node)}")
        return Call(name, (self.convert(node.left), self.convert(node.right)))

    def _convert_UnaryOp(self, node: ast.UnaryOp) -> Node:
        if isinstance(node.op, ast.UAdd):
            return self.convert(node.operand)
        operand = self.convert(node.operand)
        if isinstance(node.op, ast.USub) and isinstance(operand, Literal):
            return Literal(-operand.value)
        name = UNARY_OPERATORS.get(type(node.op))
        if name is None:
            raise ExpressionSyntaxError(f"Unsupported operator {type(node.op).__name__}: {_snippet(node)}")
        return Call(name, (operand,))

    def _convert_Call(self, node: ast.Call) -> Node:
        if not isinstance(node.func, ast.Name):
            return self._host(node)
        name = node.func.id
        if node.keywords:
            raise ExpressionSyntaxError(f"Keyword arguments are not supported: {_snippet(node)}")
        if any(isinstance(a, ast.Starred) for a in node.args):
            raise ExpressionSyntaxError(f"Starred arguments are not supported: {_snippet(node)}")
        if name in self.params:
            raise MalformedBindingError(f"Argument {name!r} cannot be called")
        if name in INLINE_ANNOTATIONS:
            return self._annotation(name, node)
        return Call(name, tuple(self.convert(a) for a in node.args))

    def _annotation(self, name: str, node: ast.Call) -> Annotation:
        args = node.args
        if name == "KVector":
            if len(args) != 2:
                raise ExpressionSyntaxError(f"KVector(x, k) takes 2 arguments: {_snippet(node)}")
            k = _grade_literal(args[1])
            return Annotation(self.convert(args[0]), GradeSpec((k,), name=f"KVector[{k}]"))
        if name == "Multivector" and len(args) == 2:
            return Annotation(self.convert(args[0]), GradeSpec(_grade_tuple(args[1])))
        if len(args) != 1:
            raise ExpressionSyntaxError(f"{name}(x) takes 1 argument: {_snippet(node)}")
        return Annotation(self.convert(args[0]), TYPE_NAMES[name])

    def _convert_Attribute(self, node):
        return self._host(node)

    def _convert_Subscript(self, node):
        return self._host(node)

    def _host(self, node: ast.expr) -> HostExpr:
        for sub in ast.walk(node):
            if isinstance(sub, ast.Name) and (sub.id in self.params or sub.id in self.local_values):
                raise MalformedBindingError(
                    f"{sub.id!r} is a function argument or local and cannot appear "
                    f"inside the host expression {_snippet(node)}"
                )
        return HostExpr(ast.unparse(node))


def _snippet(node: ast.AST) -> str:
    return ast.unparse(node)
