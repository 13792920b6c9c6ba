# SymGA: Symbolic Geometric Algebra Code Generation
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.
# We believe Geometric Algebra is the future of AI, and we want
# the industry to build upon this "unbending" paradigm.

"""Multivector Container Class.

Provides a high-level object-oriented wrapper around blade maps
to enable operator overloading (e.g., A * B for geometric product).
"""

from typing import Dict, List, Tuple

import sympy

from core import blade
from core.algebra import CliffordAlgebra, Terms


class Multivector:
    """Object-oriented wrapper for symbolic multivectors.

    Allows natural mathematical syntax like A * B, A ^ B, A | B, ~A.

    Attributes:
        algebra (CliffordAlgebra): The underlying algebra kernel.
        terms (Dict[int, sympy.Expr]): Blade mask to coefficient.
    """

    def __init__(self, algebra: CliffordAlgebra, terms: Terms = None):
        """Initializes a Multivector.

        Args:
            algebra (CliffordAlgebra): The algebra instance.
            terms (Terms, optional): Coefficients by blade mask.
        """
        self.algebra = algebra
        self.terms = {mask: sympy.sympify(c) for mask, c in (terms or {}).items()}

    @classmethod
    def scalar(cls, algebra: CliffordAlgebra, value) -> "Multivector":
        return cls(algebra, {0: value})

    @classmethod
    def basis(cls, algebra: CliffordAlgebra, idx, sign: int = 1) -> "Multivector":
        """Creates a basis blade from 0-based indices in product order.

        ``basis(alg, (1, 0))`` is ``e2 e1 = -e12``; repeated indices are
        contracted through the metric.
        """
        mask, s = blade.canonicalize(idx, algebra.signature)
        if s == 0:
            return cls(algebra)
        return cls(algebra, {mask: sign * s})

    @property
    def signature(self):
        return self.algebra.signature

    def grades(self) -> List[int]:
        """Grades with at least one blade present, ascending."""
        return sorted({blade.grade(mask) for mask in self.terms})

    def grade(self, k: int) -> "Multivector":
        """Projects to grade k."""
        return Multivector(self.algebra, self.algebra.grade_projection(self.terms, k))

    def components(self, k: int) -> List[sympy.Expr]:
        """All C(n, k) coefficients of grade k in canonical order, zero-filled."""
        return [self.terms.get(mask, sympy.S.Zero) for mask in self.algebra.grade_blades[k]]

    def partition(self) -> List[Tuple[int, "Multivector"]]:
        """Splits into ``(grade, homogeneous part)`` pairs, grades ascending."""
        return [(k, self.grade(k)) for k in self.grades()]

    def is_zero(self) -> bool:
        return all(c == 0 for c in self.terms.values())

    def is_scalar(self) -> bool:
        """True when every non-scalar coefficient is structurally zero."""
        return all(c == 0 for mask, c in self.terms.items() if mask != 0)

    def scalar_part(self) -> sympy.Expr:
        return self.terms.get(0, sympy.S.Zero)

    def to_dict(self) -> Dict[Tuple[int, ...], sympy.Expr]:
        """Coefficients keyed by 1-based index tuples, e.g. ``{(1, 2): 1}``."""
        return {tuple(i + 1 for i in blade.indices(m)): c for m, c in self.terms.items()}

    def _check(self, other: "Multivector") -> None:
        assert self.signature == other.signature, (
            f"Signatures must match: {self.signature} vs {other.signature}"
        )

    def _lift(self, other):
        if isinstance(other, Multivector):
            self._check(other)
            return other
        if isinstance(other, (int, float, sympy.Expr)):
            return Multivector.scalar(self.algebra, other)
        return None

    def __add__(self, other):
        """Blade-wise addition."""
        other = self._lift(other)
        if other is None:
            return NotImplemented
        return Multivector(self.algebra, self.algebra.add(self.terms, other.terms))

    __radd__ = __add__

    def __neg__(self):
        return Multivector(self.algebra, self.algebra.negate(self.terms))

    def __sub__(self, other):
        other = self._lift(other)
        if other is None:
            return NotImplemented
        return self + (-other)

    def __mul__(self, other):
        """Geometric Product (A * B)."""
        other = self._lift(other)
        if other is None:
            return NotImplemented
        return Multivector(self.algebra, self.algebra.geometric_product(self.terms, other.terms))

    def __rmul__(self, other):
        other = self._lift(other)
        if other is None:
            return NotImplemented
        return other * self

    def __xor__(self, other):
        """Outer Product (A ^ B)."""
        other = self._lift(other)
        if other is None:
            return NotImplemented
        return Multivector(self.algebra, self.algebra.wedge(self.terms, other.terms))

    def __or__(self, other):
        """Inner Product (A | B)."""
        other = self._lift(other)
        if other is None:
            return NotImplemented
        return Multivector(self.algebra, self.algebra.inner_product(self.terms, other.terms))

    def __lshift__(self, other):
        """Left contraction (A << B)."""
        other = self._lift(other)
        if other is None:
            return NotImplemented
        return Multivector(self.algebra, self.algebra.left_contraction(self.terms, other.terms))

    def __rshift__(self, other):
        """Right contraction (A >> B)."""
        other = self._lift(other)
        if other is None:
            return NotImplemented
        return Multivector(self.algebra, self.algebra.right_contraction(self.terms, other.terms))

    def __invert__(self):
        """Reversion (~A)."""
        return Multivector(self.algebra, self.algebra.reverse(self.terms))

    def involute(self):
        return Multivector(self.algebra, self.algebra.involute(self.terms))

    def dual(self):
        return Multivector(self.algebra, self.algebra.dual(self.terms))

    def right_complement(self):
        return Multivector(self.algebra, self.algebra.right_complement(self.terms))

    def left_complement(self):
        return Multivector(self.algebra, self.algebra.left_complement(self.terms))

    def __eq__(self, other):
        """Equality up to structurally zero coefficients."""
        other = self._lift(other)
        if other is None:
            return NotImplemented
        keys = set(self.terms) | set(other.terms)
        zero = sympy.S.Zero
        return all(
            sympy.expand(self.terms.get(k, zero) - other.terms.get(k, zero)) == 0
            for k in keys
        )

    __hash__ = None

    def __repr__(self):
        if not self.terms:
            return f"Multivector(0, {self.signature})"
        body = " + ".join(
            f"({c})*{blade.blade_name(m)}" if m else f"({c})"
            for m, c in sorted(self.terms.items(), key=lambda t: (blade.grade(t[0]), blade.indices(t[0])))
        )
        return f"Multivector({body}, {self.signature})"
