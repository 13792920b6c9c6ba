# SymGA: Symbolic Geometric Algebra Code Generation
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.
# We believe Geometric Algebra is the future of AI, and we want
# the industry to build upon this "unbending" paradigm.

from typing import Callable, Dict, Optional

import sympy

from core import blade
from core.signature import Signature, SignatureSpec

Terms = Dict[int, sympy.Expr]
GradeRule = Callable[[int, int], Optional[int]]


class CliffordAlgebra:
    """Symbolic Clifford algebra kernel over blade maps.

    Multivectors are plain ``{blade_mask: coefficient}`` dictionaries whose
    coefficients are sympy expressions. Blades absent from a map are zero.
    Coefficients are kept expanded so that structurally equal polynomials
    compare equal.

    Supports degenerate (null) dimensions via the ``r`` count of the
    signature: ``Cl(p, q, r)`` has ``p`` positive, ``q`` negative, and ``r``
    null basis vectors (``e_i^2 = 0``).

    Attributes:
        signature (Signature): Metric signature.
        p (int): Positive signature dimensions.
        q (int): Negative signature dimensions.
        r (int): Degenerate (null) dimensions.
        n (int): Total dimensions (p + q + r).
        dim (int): Total basis elements (2^n).
    """
    _CACHED_TABLES = {}

    def __init__(self, signature: SignatureSpec):
        """Initialize the algebra and share the blade tables per signature.

        Args:
            signature: Anything :meth:`Signature.from_spec` accepts.
        """
        self.signature = Signature.from_spec(signature)
        self.p = self.signature.positive
        self.q = self.signature.negative
        self.r = self.signature.degenerate
        self.n = self.signature.dimension
        self.dim = 2 ** self.n

        if self.signature not in CliffordAlgebra._CACHED_TABLES:
            CliffordAlgebra._CACHED_TABLES[self.signature] = self._generate_tables()

        (
            self.grade_blades,
            self.rev_signs,
            self._products,
        ) = CliffordAlgebra._CACHED_TABLES[self.signature]

    @property
    def num_grades(self) -> int:
        """Counts the number of grades (n + 1)."""
        return self.n + 1

    @property
    def pseudoscalar_mask(self) -> int:
        return self.dim - 1

    def _generate_tables(self):
        """Per-grade blade lists, reversion signs and an empty product memo."""
        grade_blades = [blade.blades_of_grade(self.n, k) for k in range(self.n + 1)]
        rev_signs = [blade.reverse_sign(k) for k in range(self.n + 1)]
        return grade_blades, rev_signs, {}

    def blade_product(self, a: int, b: int):
        """Memoised :func:`core.blade.blade_product` under this signature."""
        key = (a, b)
        hit = self._products.get(key)
        if hit is None:
            hit = blade.blade_product(a, b, self.signature)
            self._products[key] = hit
        return hit

    # ------------------------------------------------------------------
    # Linear structure
    # ------------------------------------------------------------------

    def add(self, A: Terms, B: Terms) -> Terms:
        """Blade-wise sum. Blades cancelling to zero stay as a literal 0."""
        out = dict(A)
        for mask, coeff in B.items():
            out[mask] = out[mask] + coeff if mask in out else coeff
        return out

    def negate(self, A: Terms) -> Terms:
        return {mask: -coeff for mask, coeff in A.items()}

    def scale(self, A: Terms, factor) -> Terms:
        return {mask: sympy.expand(coeff * factor) for mask, coeff in A.items()}

    def grade_projection(self, A: Terms, grade: int) -> Terms:
        """Isolates a specific grade."""
        return {mask: c for mask, c in A.items() if blade.grade(mask) == grade}

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    def geometric_product(self, A: Terms, B: Terms) -> Terms:
        """Computes the Geometric Product.

        Distributes over every blade pair; each pair contributes
        ``sign * metric * a * b`` to the blade given by the symmetric
        difference of the two masks. Pairs squaring a degenerate basis
        vector contribute nothing.

        Args:
            A (Terms): Left operand.
            B (Terms): Right operand.

        Returns:
            Terms: The product AB.
        """
        return self._graded_product(A, B, None)

    def wedge(self, A: Terms, B: Terms) -> Terms:
        """Computes the wedge (outer) product A ^ B.

        Only blade pairs without a shared basis vector survive, which is the
        grade ``g1 + g2`` part of the geometric product.
        """
        out: Terms = {}
        for a, ca in A.items():
            for b, cb in B.items():
                if a & b:
                    continue
                self._accumulate(out, a ^ b, blade.reordering_sign(a, b), ca, cb)
        return out

    def inner_product(self, A: Terms, B: Terms) -> Terms:
        """Computes the inner product: grade ``|g1 - g2|`` part per homogeneous pair."""
        return self._graded_product(A, B, lambda ga, gb: abs(ga - gb))

    def left_contraction(self, A: Terms, B: Terms) -> Terms:
        """Computes the left contraction A _| B (grade ``g2 - g1``, zero if g1 > g2)."""
        return self._graded_product(A, B, lambda ga, gb: gb - ga if gb >= ga else None)

    def right_contraction(self, A: Terms, B: Terms) -> Terms:
        """Computes the right contraction A |_ B (grade ``g1 - g2``, zero if g2 > g1)."""
        return self._graded_product(A, B, lambda ga, gb: ga - gb if ga >= gb else None)

    def scalar_product(self, A: Terms, B: Terms) -> Terms:
        """Scalar part of the geometric product, <AB>_0."""
        return self._graded_product(A, B, lambda ga, gb: 0 if ga == gb else None)

    def _graded_product(self, A: Terms, B: Terms, rule: Optional[GradeRule]) -> Terms:
        out: Terms = {}
        for a, ca in A.items():
            ga = blade.grade(a)
            for b, cb in B.items():
                if rule is not None:
                    target = rule(ga, blade.grade(b))
                    if target is None or blade.grade(a ^ b) != target:
                        continue
                mask, sign = self.blade_product(a, b)
                if sign == 0:
                    continue
                self._accumulate(out, mask, sign, ca, cb)
        return out

    @staticmethod
    def _accumulate(out: Terms, mask: int, sign: int, ca, cb) -> None:
        value = sympy.expand(sign * ca * cb)
        out[mask] = out[mask] + value if mask in out else value

    # ------------------------------------------------------------------
    # Involutions and duality
    # ------------------------------------------------------------------

    def reverse(self, A: Terms) -> Terms:
        """Computes the reversion: grade-g blades get (-1)^(g(g-1)/2)."""
        return {m: c if self.rev_signs[blade.grade(m)] > 0 else -c for m, c in A.items()}

    def involute(self, A: Terms) -> Terms:
        """Grade involution: grade-g blades get (-1)^g."""
        return {m: c if blade.involution_sign(blade.grade(m)) > 0 else -c for m, c in A.items()}

    def pseudoscalar(self) -> Terms:
        return {self.pseudoscalar_mask: sympy.S.One}

    def dual(self, A: Terms) -> Terms:
        """Right multiplication by the pseudoscalar, A I."""
        return self.geometric_product(A, self.pseudoscalar())

    def right_complement(self, A: Terms) -> Terms:
        """Metric-free complement with ``b ^ rc(b) = I`` for every basis blade b."""
        full = self.pseudoscalar_mask
        out: Terms = {}
        for mask, coeff in A.items():
            comp = full ^ mask
            out[comp] = coeff if blade.reordering_sign(mask, comp) > 0 else -coeff
        return out

    def left_complement(self, A: Terms) -> Terms:
        """Metric-free complement with ``lc(b) ^ b = I`` for every basis blade b."""
        full = self.pseudoscalar_mask
        out: Terms = {}
        for mask, coeff in A.items():
            comp = full ^ mask
            out[comp] = coeff if blade.reordering_sign(comp, mask) > 0 else -coeff
        return out

    def __repr__(self):
        return f"CliffordAlgebra({self.signature})"
