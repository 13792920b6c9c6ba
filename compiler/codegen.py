# SymGA: Symbolic Geometric Algebra Code Generation
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.
# We believe Geometric Algebra is the future of AI, and we want
# the industry to build upon this "unbending" paradigm.

"""Code generation from evaluated multivectors to Python.

The generated expression only does arithmetic on components. Inputs are
read through ``getcomponent`` and outputs are built through ``construct``,
both resolved from the namespace the code runs in (see
:mod:`core.kvector`).

Two layouts are supported:

* ``nested``: one ``construct(KVector[g, n], (...))`` per present grade,
  a tuple of them when several grades are present;
* ``flattened``: a single tuple of every component, grades ascending.

Each present grade is laid out in full, in canonical blade order, with
absent blades filled by ``0``.
"""

import ast
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple, Union

import sympy

from core.multivector import Multivector
from compiler.errors import InternalInvariantError
from compiler.evaluate import Result, getcomponent
from log import get_logger

logger = get_logger(__name__)

TypeLike = Union[None, str, ast.expr]
Layout = List[Tuple[int, List[sympy.Expr]]]


class Flatten(str, Enum):
    """Output layout of generated code."""
    NESTED = "nested"
    FLATTENED = "flattened"


# ----------------------------------------------------------------------
# Layout
# ----------------------------------------------------------------------

def layout(result: Result) -> Tuple[int, Layout]:
    """Zero-filled components per present grade.

    Returns:
        Tuple[int, Layout]: The dimension and ``[(grade, components), ...]``,
        grades ascending. An empty result is the scalar zero.
    """
    if isinstance(result, Multivector):
        parts = result.partition()
        algebra = result.algebra
    else:
        parts = list(result)
        if not parts:
            raise InternalInvariantError("Empty grade partition")
        algebra = parts[0][1].algebra
    if not parts:
        return algebra.n, [(0, [sympy.S.Zero])]
    return algebra.n, [(k, part.components(k)) for k, part in parts]


def component_count(result: Result) -> int:
    """Number of components the flattened layout of ``result`` holds."""
    _, grades = layout(result)
    return sum(len(comps) for _, comps in grades)


# ----------------------------------------------------------------------
# Entry points
# ----------------------------------------------------------------------

def generate(result: Result, mode: Union[str, Flatten] = Flatten.NESTED, T: TypeLike = None) -> ast.expr:
    """Builds the Python expression computing ``result``.

    Args:
        result: Output of :func:`compiler.evaluate.evaluate`.
        mode: ``"nested"`` or ``"flattened"``.
        T: Output type as source text or an expression node. Flattened
            output is wrapped as ``construct(T, (...))``; nested output
            uses ``T`` instead of ``KVector[g, n]`` for every grade.

    Returns:
        ast.expr: Expression with locations filled in, ready for
        :func:`ast.unparse` or :func:`compile`.
    """
    n, grades = layout(result)
    return _build(n, grades, Flatten(mode), _type_node(T))


def generate_source(result: Result, mode: Union[str, Flatten] = Flatten.NESTED, T: TypeLike = None) -> str:
    return ast.unparse(generate(result, mode, T))


def generate_function(
    result: Result,
    args: Sequence[str],
    name: str = "kernel",
    mode: Union[str, Flatten] = Flatten.NESTED,
    T: TypeLike = None,
) -> ast.Module:
    """Wraps the generated expression into ``def name(*args): ...``.

    Host inputs that are not plain names (``obj.pos``, ``xs[0]``) are
    hoisted into ``_inputN`` locals so that each is evaluated once.

    Args:
        result: Evaluated multivector(s).
        args: Argument names of the generated function.
        name: Function name.
        mode: Output layout.
        T: Output type, as for :func:`generate`.

    Returns:
        ast.Module: Module holding the function definition.
    """
    n, grades = layout(result)

    hosts = sorted(
        {s for _, comps in grades for c in comps for s in c.free_symbols},
        key=lambda s: s.name,
    )
    hoisted: Dict[sympy.Symbol, sympy.Symbol] = {}
    body: List[ast.stmt] = []
    for s in hosts:
        if s.name.isidentifier():
            continue
        local = sympy.Symbol(f"_input{len(hoisted)}")
        hoisted[s] = local
        body.append(ast.Assign(
            targets=[ast.Name(id=local.name, ctx=ast.Store())],
            value=_host_expression(s.name),
        ))
    if hoisted:
        grades = [(k, [c.xreplace(hoisted) for c in comps]) for k, comps in grades]

    body.append(ast.Return(value=_build(n, grades, Flatten(mode), _type_node(T))))
    fn = ast.FunctionDef(
        name=name,
        args=ast.arguments(
            posonlyargs=[], args=[ast.arg(arg=a) for a in args], vararg=None,
            kwonlyargs=[], kw_defaults=[], kwarg=None, defaults=[],
        ),
        body=body,
        decorator_list=[],
        returns=None,
        type_params=[],
    )
    module = ast.Module(body=[fn], type_ignores=[])
    return ast.fix_missing_locations(module)


# ----------------------------------------------------------------------
# Assembly
# ----------------------------------------------------------------------

def _type_node(T: TypeLike) -> Optional[ast.expr]:
    if T is None or isinstance(T, ast.expr):
        return T
    return ast.parse(T, mode="eval").body


def _construct(type_node: ast.expr, elts: List[ast.expr]) -> ast.expr:
    return ast.Call(
        func=ast.Name(id="construct", ctx=ast.Load()),
        args=[type_node, ast.Tuple(elts=elts, ctx=ast.Load())],
        keywords=[],
    )


def _kvector_type(grade: int, n: int) -> ast.expr:
    return ast.Subscript(
        value=ast.Name(id="KVector", ctx=ast.Load()),
        slice=ast.Tuple(elts=[ast.Constant(grade), ast.Constant(n)], ctx=ast.Load()),
        ctx=ast.Load(),
    )


def _build(n: int, grades: Layout, mode: Flatten, type_node: Optional[ast.expr]) -> ast.expr:
    if mode is Flatten.FLATTENED:
        elts = [emit(c) for _, comps in grades for c in comps]
        node = _construct(type_node, elts) if type_node is not None else ast.Tuple(elts=elts, ctx=ast.Load())
    else:
        objects = [
            _construct(type_node if type_node is not None else _kvector_type(k, n), [emit(c) for c in comps])
            for k, comps in grades
        ]
        node = objects[0] if len(objects) == 1 else ast.Tuple(elts=objects, ctx=ast.Load())
    return ast.fix_missing_locations(node)


# ----------------------------------------------------------------------
# Coefficients
# ----------------------------------------------------------------------

def _host_expression(source: str) -> ast.expr:
    return ast.parse(source, mode="eval").body


def _constant(value) -> ast.expr:
    if value < 0:
        return ast.UnaryOp(op=ast.USub(), operand=ast.Constant(-value))
    return ast.Constant(value)


def emit(expr: sympy.Expr) -> ast.expr:
    """Translates a coefficient expression into Python arithmetic."""
    if expr.is_Integer:
        return _constant(int(expr))
    if expr.is_Rational:
        node = ast.BinOp(left=ast.Constant(abs(expr.p)), op=ast.Div(), right=ast.Constant(expr.q))
        return ast.UnaryOp(op=ast.USub(), operand=node) if expr.p < 0 else node
    if expr.is_Float:
        return _constant(float(expr))
    if expr.is_Symbol:
        return _host_expression(expr.name)
    if expr.func == getcomponent:
        return ast.Call(
            func=ast.Name(id="getcomponent", ctx=ast.Load()),
            args=[emit(a) for a in expr.args],
            keywords=[],
        )
    if expr.is_Add:
        return _emit_sum(expr)
    if expr.is_Mul:
        return _emit_product(expr)
    if expr.is_Pow:
        base, exponent = expr.as_base_exp()
        if exponent.is_Integer and exponent < 0:
            return ast.BinOp(left=ast.Constant(1), op=ast.Div(), right=emit(1 / expr))
        return ast.BinOp(left=emit(base), op=ast.Pow(), right=emit(exponent))
    raise InternalInvariantError(f"Cannot emit coefficient {expr!r} ({type(expr).__name__})")


def _emit_sum(expr: sympy.Add) -> ast.expr:
    terms = expr.as_ordered_terms()
    node = emit(terms[0])
    for term in terms[1:]:
        if term.could_extract_minus_sign():
            node = ast.BinOp(left=node, op=ast.Sub(), right=emit(-term))
        else:
            node = ast.BinOp(left=node, op=ast.Add(), right=emit(term))
    return node


def _emit_product(expr: sympy.Mul) -> ast.expr:
    coeff, _ = expr.as_coeff_Mul()
    if coeff < 0:
        return ast.UnaryOp(op=ast.USub(), operand=emit(-expr))

    numerator, denominator = sympy.fraction(expr)
    if denominator != 1:
        return ast.BinOp(left=emit(numerator), op=ast.Div(), right=emit(denominator))

    factors = expr.as_ordered_factors()
    node = emit(factors[0])
    for factor in factors[1:]:
        node = ast.BinOp(left=node, op=ast.Mult(), right=emit(factor))
    return node
