# SymGA: Symbolic Geometric Algebra Code Generation
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.
# We believe Geometric Algebra is the future of AI, and we want
# the industry to build upon this "unbending" paradigm.

import unittest
from itertools import combinations

import sympy

from core import blade
from core.algebra import CliffordAlgebra
from core.multivector import Multivector


def general(algebra, prefix):
    """Multivector with an independent symbol on every blade."""
    return Multivector(algebra, {m: sympy.Symbol(f"{prefix}{m}") for m in range(algebra.dim)})


class TestGeometricProperties(unittest.TestCase):
    def setUp(self):
        # Mixed signature with a null direction exercises every metric branch
        self.algebra = CliffordAlgebra((1, 1, 1))
        self.A = general(self.algebra, "a")
        self.B = general(self.algebra, "b")
        self.C = general(self.algebra, "c")

    def test_associativity(self):
        A, B, C = self.A, self.B, self.C
        self.assertEqual((A * B) * C, A * (B * C))

    def test_distributivity(self):
        A, B, C = self.A, self.B, self.C
        self.assertEqual(A * (B + C), A * B + A * C)

    def test_reverse_twice(self):
        self.assertEqual(~~self.A, self.A)

    def test_reverse_of_product(self):
        A, B = self.A, self.B
        self.assertEqual(~(A * B), ~B * ~A)

    def test_wedge_self_zero(self):
        v = Multivector(self.algebra, {1: sympy.Symbol("x"), 2: sympy.Symbol("y"), 4: sympy.Symbol("z")})
        self.assertTrue((v ^ v).is_zero())

    def test_wedge_is_top_grade_of_product(self):
        alg = CliffordAlgebra(3)
        u = general(alg, "u").grade(1)
        w = general(alg, "w").grade(2)
        self.assertEqual(u ^ w, (u * w).grade(3))

    def test_vector_inner_product_symmetric(self):
        alg = CliffordAlgebra((2, 1))
        u = general(alg, "u").grade(1)
        w = general(alg, "w").grade(1)
        self.assertEqual(u | w, w | u)
        # u . w = (uw + wu) / 2
        self.assertEqual(u | w, Multivector(alg, alg.scale((u * w + w * u).terms, sympy.Rational(1, 2))))

    def test_complements(self):
        alg = CliffordAlgebra(4)
        I = Multivector(alg, alg.pseudoscalar())
        for mask in range(alg.dim):
            b = Multivector(alg, {mask: 1})
            self.assertEqual(b ^ b.right_complement(), I)
            self.assertEqual(b.left_complement() ^ b, I)

    def test_dual_is_right_multiplication(self):
        alg = CliffordAlgebra(3)
        I = Multivector(alg, alg.pseudoscalar())
        A = general(alg, "a")
        dual = A.dual()
        self.assertEqual(dual, A * I)
        # Euclidean dual is invertible: every blade survives
        self.assertEqual(len(dual.terms), alg.dim)

    def test_blade_ordering(self):
        n = 5
        for k in range(n + 1):
            for i, idx in enumerate(combinations(range(n), k)):
                self.assertEqual(blade.linear_index(n, blade.mask_of(idx)), i)


if __name__ == '__main__':
    unittest.main()
