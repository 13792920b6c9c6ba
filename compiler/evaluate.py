# SymGA: Symbolic Geometric Algebra Code Generation
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.
# We believe Geometric Algebra is the future of AI, and we want
# the industry to build upon this "unbending" paradigm.

"""Symbolic evaluation of expanded expression trees.

Every node becomes a :class:`~core.multivector.Multivector` whose
coefficients are sympy expressions over the host inputs. Host values enter
as ``sympy.Symbol`` objects named by their Python source; components of
typed inputs as ``getcomponent(x, i)`` applications.
"""

from math import comb
from typing import Callable, Dict, List, Tuple, Union

import sympy

from core.algebra import CliffordAlgebra
from core.multivector import Multivector
from core.signature import SignatureSpec
from compiler.errors import AlgebraicTypeError, InternalInvariantError
from compiler.expression import (
    OP_ARITY, Annotation, Argument, Blade, Call, HostExpr, Literal, Node, Op,
    Operation, Symbol,
)
from log import get_logger

logger = get_logger(__name__)

# Undefined function standing for a component read in coefficient expressions
getcomponent = sympy.Function("getcomponent")

Result = Union[Multivector, List[Tuple[int, Multivector]]]


def host_symbol(source: str) -> sympy.Symbol:
    """Sympy symbol for an opaque host expression."""
    return sympy.Symbol(source)


def input_components(source: str, n: int, grades: Tuple[int, ...]) -> List[sympy.Expr]:
    """Coefficients of a typed host input, grades ascending, canonical order.

    A single-component input (a scalar or antiscalar) is read as
    ``getcomponent(x)``; otherwise component ``i`` is ``getcomponent(x, i)``
    with ``i`` running across all selected grades.
    """
    x = host_symbol(source)
    total = sum(comb(n, g) for g in grades)
    if total == 1:
        return [getcomponent(x)]
    return [getcomponent(x, i) for i in range(total)]


def evaluate_multivector(signature: SignatureSpec, node: Node) -> Multivector:
    """Evaluates an expanded tree into a single (possibly mixed-grade) multivector."""
    return _Evaluator(CliffordAlgebra(signature)).visit(node)


def evaluate(signature: SignatureSpec, node: Node) -> Result:
    """Evaluates an expanded tree.

    Args:
        signature: Metric signature of the algebra.
        node: Expanded expression tree.

    Returns:
        The multivector, or ``[(grade, part), ...]`` in ascending grade
        order when more than one grade is present.

    Raises:
        AlgebraicTypeError: Operands an operation is not defined for.
        InternalInvariantError: Unexpanded nodes.
    """
    mv = evaluate_multivector(signature, node)
    result = partition(mv)
    logger.debug("Evaluated %s -> %s", node, result)
    return result


def partition(mv: Multivector) -> Result:
    parts = mv.partition()
    if len(parts) <= 1:
        return mv
    return parts


class _Evaluator:
    """Explicit dispatch over node kinds and the closed :class:`Op` set."""

    def __init__(self, algebra: CliffordAlgebra):
        self.algebra = algebra
        self.n = algebra.n
        self._ops: Dict[Op, Callable] = {
            Op.ADD: self._add,
            Op.NEGATE: lambda a: -self.visit(a),
            Op.GEOMETRIC_PRODUCT: lambda a, b: self.visit(a) * self.visit(b),
            Op.OUTER_PRODUCT: lambda a, b: self.visit(a) ^ self.visit(b),
            Op.INNER_PRODUCT: lambda a, b: self.visit(a) | self.visit(b),
            Op.LEFT_CONTRACTION: lambda a, b: self.visit(a) << self.visit(b),
            Op.RIGHT_CONTRACTION: lambda a, b: self.visit(a) >> self.visit(b),
            Op.SCALAR_PRODUCT: self._scalar_product,
            Op.GRADE: self._grade,
            Op.REVERSE: lambda a: ~self.visit(a),
            Op.INVOLUTE: lambda a: self.visit(a).involute(),
            Op.DUAL: lambda a: self.visit(a).dual(),
            Op.RIGHT_COMPLEMENT: lambda a: self.visit(a).right_complement(),
            Op.LEFT_COMPLEMENT: lambda a: self.visit(a).left_complement(),
            Op.PSEUDOSCALAR: lambda: Multivector(self.algebra, self.algebra.pseudoscalar()),
            Op.SCALAR_DIVISION: self._scalar_division,
            Op.POWER: self._power,
        }

    def visit(self, node: Node) -> Multivector:
        if isinstance(node, Literal):
            return Multivector.scalar(self.algebra, node.value)
        if isinstance(node, HostExpr):
            return Multivector.scalar(self.algebra, host_symbol(node.source))
        if isinstance(node, Blade):
            return self._blade(node)
        if isinstance(node, Annotation):
            return self._annotation(node)
        if isinstance(node, Operation):
            if len(node.args) != OP_ARITY[node.op]:
                raise InternalInvariantError(
                    f"{node.op.value} expects {OP_ARITY[node.op]} operand(s), got {len(node.args)}"
                )
            return self._ops[node.op](*node.args)
        if isinstance(node, (Symbol, Call, Argument)):
            raise InternalInvariantError(f"Unexpanded node {node} reached the algebra engine")
        raise InternalInvariantError(f"Unknown expression node {node!r}")

    def _blade(self, node: Blade) -> Multivector:
        for i in node.indices:
            if i >= self.n:
                raise AlgebraicTypeError(
                    f"Basis blade {node} needs {i + 1} dimensions, {self.algebra.signature} has {self.n}"
                )
        return Multivector.basis(self.algebra, node.indices)

    def _annotation(self, node: Annotation) -> Multivector:
        grades = node.spec.resolve(self.n)
        bad = [g for g in grades if not 0 <= g <= self.n]
        if bad:
            raise AlgebraicTypeError(
                f"Annotation {node.spec} selects grade(s) {bad} outside {self.algebra.signature}"
            )

        if isinstance(node.operand, HostExpr):
            coeffs = iter(input_components(node.operand.source, self.n, grades))
            terms = {}
            for g in grades:
                for mask in self.algebra.grade_blades[g]:
                    terms[mask] = next(coeffs)
            return Multivector(self.algebra, terms)

        # Annotating an algebraic value keeps only the annotated grades
        value = self.visit(node.operand)
        terms = {}
        for g in grades:
            terms.update(self.algebra.grade_projection(value.terms, g))
        return Multivector(self.algebra, terms)

    def _add(self, a: Node, b: Node) -> Multivector:
        return self.visit(a) + self.visit(b)

    def _scalar_product(self, a: Node, b: Node) -> Multivector:
        A, B = self.visit(a), self.visit(b)
        return Multivector(self.algebra, self.algebra.scalar_product(A.terms, B.terms))

    def _grade(self, a: Node, k: Node) -> Multivector:
        return self.visit(a).grade(self._integer_literal(k, "Grade projection"))

    def _scalar_division(self, a: Node, s: Node) -> Multivector:
        A, S = self.visit(a), self.visit(s)
        return self._divide(A, S)

    def _divide(self, A: Multivector, S: Multivector) -> Multivector:
        if not S.is_scalar():
            raise AlgebraicTypeError(f"Division by a non-scalar: {S}")
        denominator = sympy.expand(S.scalar_part())
        if denominator == 0:
            raise AlgebraicTypeError("Division by zero")
        return Multivector(self.algebra, self.algebra.scale(A.terms, 1 / denominator))

    def _inverse(self, A: Multivector) -> Multivector:
        rev = ~A
        return self._divide(rev, A * rev)

    def _power(self, a: Node, e: Node) -> Multivector:
        exponent = self._integer_literal(e, "Exponent")
        base = self.visit(a)
        if exponent < 0:
            base, exponent = self._inverse(base), -exponent
        result = Multivector.scalar(self.algebra, 1)
        for _ in range(exponent):
            result = result * base
        return result

    @staticmethod
    def _integer_literal(node: Node, what: str) -> int:
        if isinstance(node, Literal) and node.value.is_Integer:
            return int(node.value)
        raise AlgebraicTypeError(f"{what} must be an integer literal, got {node}")
