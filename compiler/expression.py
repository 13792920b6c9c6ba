# SymGA: Symbolic Geometric Algebra Code Generation
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.
# We believe Geometric Algebra is the future of AI, and we want
# the industry to build upon this "unbending" paradigm.

"""Expression tree of the algebraic language.

Parsed source produces :class:`Symbol`, :class:`Call` and :class:`Argument`
nodes; expansion replaces every one of them so that the algebra engine only
sees :class:`Literal`, :class:`Blade`, :class:`HostExpr`,
:class:`Annotation` and :class:`Operation`. All nodes are frozen
dataclasses, so structural equality and hashing come for free.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Tuple

import sympy


class Op(Enum):
    """Closed set of primitive operations understood by the algebra engine.

    Values double as the names of the built-in functions backed by them.
    """
    ADD = "add"
    NEGATE = "negate"
    GEOMETRIC_PRODUCT = "geometric_product"
    OUTER_PRODUCT = "outer_product"
    INNER_PRODUCT = "inner_product"
    LEFT_CONTRACTION = "left_contraction"
    RIGHT_CONTRACTION = "right_contraction"
    SCALAR_PRODUCT = "scalar_product"
    GRADE = "grade"
    REVERSE = "reverse"
    INVOLUTE = "involute"
    DUAL = "dual"
    RIGHT_COMPLEMENT = "right_complement"
    LEFT_COMPLEMENT = "left_complement"
    PSEUDOSCALAR = "pseudoscalar"
    SCALAR_DIVISION = "scalar_division"
    POWER = "power"


# Number of operands each primitive takes
OP_ARITY = {
    Op.ADD: 2,
    Op.NEGATE: 1,
    Op.GEOMETRIC_PRODUCT: 2,
    Op.OUTER_PRODUCT: 2,
    Op.INNER_PRODUCT: 2,
    Op.LEFT_CONTRACTION: 2,
    Op.RIGHT_CONTRACTION: 2,
    Op.SCALAR_PRODUCT: 2,
    Op.GRADE: 2,
    Op.REVERSE: 1,
    Op.INVOLUTE: 1,
    Op.DUAL: 1,
    Op.RIGHT_COMPLEMENT: 1,
    Op.LEFT_COMPLEMENT: 1,
    Op.PSEUDOSCALAR: 0,
    Op.SCALAR_DIVISION: 2,
    Op.POWER: 2,
}


@dataclass(frozen=True)
class GradeSpec:
    """Grades an annotation selects.

    Attributes:
        grades: Selected grades, or ``None`` for every grade.
        complement: Count grades down from the dimension, so that
            ``GradeSpec((0,), complement=True)`` is the antiscalar.
        name: Display name.
    """
    grades: Optional[Tuple[int, ...]]
    complement: bool = False
    name: str = ""

    def resolve(self, n: int) -> Tuple[int, ...]:
        """Concrete ascending grades in an ``n``-dimensional algebra.

        Grades outside ``[0, n]`` are kept so that callers can reject them.
        """
        if self.grades is None:
            return tuple(range(n + 1))
        grades = (n - g for g in self.grades) if self.complement else self.grades
        return tuple(sorted(set(grades)))

    def __str__(self):
        if self.name:
            return self.name
        if self.grades is None:
            return "Multivector"
        return "KVector[" + ", ".join(map(str, self.grades)) + "]"


SCALAR = GradeSpec((0,), name="Scalar")
VECTOR = GradeSpec((1,), name="Vector")
BIVECTOR = GradeSpec((2,), name="Bivector")
TRIVECTOR = GradeSpec((3,), name="Trivector")
QUADVECTOR = GradeSpec((4,), name="Quadvector")
ANTISCALAR = GradeSpec((0,), complement=True, name="Antiscalar")
MULTIVECTOR = GradeSpec(None, name="Multivector")


class Node:
    """Base class of expression nodes."""

    def children(self) -> Tuple["Node", ...]:
        return ()

    def walk(self) -> Iterator["Node"]:
        """Pre-order traversal of the tree rooted here."""
        yield self
        for child in self.children():
            yield from child.walk()


@dataclass(frozen=True)
class Literal(Node):
    """Numeric constant, stored as a sympy number."""
    value: sympy.Expr

    def __str__(self):
        return str(self.value)


@dataclass(frozen=True)
class Symbol(Node):
    """Unresolved name."""
    name: str

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class Blade(Node):
    """Basis blade literal, 0-based indices in product order."""
    indices: Tuple[int, ...]

    def __str__(self):
        if all(i < 9 for i in self.indices):
            return "e" + "".join(str(i + 1) for i in self.indices)
        return "e_" + "_".join(str(i + 1) for i in self.indices)


@dataclass(frozen=True)
class Call(Node):
    """Call of a named function, built-in or user-defined."""
    name: str
    args: Tuple[Node, ...] = ()

    def children(self):
        return self.args

    def __str__(self):
        return f"{self.name}({', '.join(map(str, self.args))})"


@dataclass(frozen=True)
class Argument(Node):
    """Positional placeholder inside a function body."""
    index: int

    def __str__(self):
        return f"_{self.index}"


@dataclass(frozen=True)
class Operation(Node):
    """Primitive operation, the only callable node the engine evaluates."""
    op: Op
    args: Tuple[Node, ...] = ()

    def children(self):
        return self.args

    def __str__(self):
        return f"{self.op.value}({', '.join(map(str, self.args))})"


@dataclass(frozen=True)
class Annotation(Node):
    """``operand::spec``: a typed host input, or a grade projection."""
    operand: Node
    spec: GradeSpec

    def children(self):
        return (self.operand,)

    def __str__(self):
        return f"{self.operand}::{self.spec}"


@dataclass(frozen=True)
class HostExpr(Node):
    """Opaque host-language sub-expression, kept as Python source."""
    source: str

    def __str__(self):
        return self.source


# ----------------------------------------------------------------------
# Binding table entries
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class ReferenceBinding:
    """``name -> rhs`` substitution."""
    rhs: Node


@dataclass(frozen=True)
class FunctionBinding:
    """Callable of fixed arity whose body refers to its arguments by placeholder."""
    arity: int
    body: Node


def arg(i: int) -> Argument:
    return Argument(i)


def call(name: str, *args: Node) -> Call:
    return Call(name, tuple(args))


def operation(op: Op, *args: Node) -> Operation:
    return Operation(op, tuple(args))


def max_argument(node: Node) -> int:
    """Largest placeholder index in ``node``, or -1 without placeholders."""
    return max((n.index for n in node.walk() if isinstance(n, Argument)), default=-1)


def calls_to(node: Node, name: str) -> bool:
    return any(isinstance(n, Call) and n.name == name for n in node.walk())
