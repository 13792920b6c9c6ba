# SymGA: Symbolic Geometric Algebra Code Generation
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.
# We believe Geometric Algebra is the future of AI, and we want
# the industry to build upon this "unbending" paradigm.

import pytest
import sympy

from compiler.bindings import VariableInfo, expand
from compiler.errors import AlgebraicTypeError, InternalInvariantError
from compiler.evaluate import evaluate, evaluate_multivector, getcomponent
from compiler.expression import Argument, Call, Symbol
from compiler.parser import parse_program
from core.multivector import Multivector


def run(sig, source, varinfo=None):
    program = parse_program(source)
    info = (varinfo or VariableInfo()).extended(program.bindings)
    return evaluate(sig, expand(program.expression, info))


def run_mv(sig, source):
    program = parse_program(source)
    return evaluate_multivector(sig, expand(program.expression, VariableInfo().extended(program.bindings)))


def gc(name, *i):
    return getcomponent(sympy.Symbol(name), *i)


# ── Blade arithmetic ─────────────────────────────────────────────────

class TestBasisProducts:
    def test_square(self):
        assert run(3, "e1 * e1").to_dict() == {(): 1}

    def test_wedge(self):
        assert run(3, "e1 ^ e2").to_dict() == {(1, 2): 1}

    def test_inner_of_orthogonal_vectors(self):
        result = run(3, "e1 | e2")
        assert isinstance(result, Multivector)
        assert result.to_dict() == {}

    def test_degenerate(self):
        assert run((1, 0, 1), "e2 * e2").to_dict() == {}
        assert run((1, 0, 1), "e1 * e1").to_dict() == {(): 1}

    def test_blade_literal_reordering(self):
        assert run(3, "e21").to_dict() == {(1, 2): -1}
        assert run(3, "e121").to_dict() == {(2,): -1}

    def test_blade_out_of_range(self):
        with pytest.raises(AlgebraicTypeError):
            run(3, "e4")

    def test_contractions(self):
        assert run(3, "e1 << e12").to_dict() == {(2,): 1}
        assert run(3, "e12 >> e2").to_dict() == {(1,): 1}
        assert run(3, "e12 << e1").to_dict() == {}

    def test_dual(self):
        assert run(3, "dual(e1)").to_dict() == {(2, 3): 1}

    def test_pseudoscalar(self):
        assert run(4, "I").to_dict() == {(1, 2, 3, 4): 1}

    def test_exterior_antiproduct(self):
        # Planes e12 and e23 meet along e2
        assert run(3, "e12 & e23").to_dict() == {(2,): 1}

    def test_commutator(self):
        assert run(3, "commutator_product(e1, e2)").to_dict() == {(1, 2): 1}
        assert run(3, "anticommutator_product(e1, e2)").to_dict() == {(1, 2): 0}

    def test_sandwich(self):
        assert run(3, "sandwich_product(e12, e1)").to_dict() == {(1,): -1}

    def test_project_and_reject(self):
        assert run(3, "project(e1 + e2, e1)").to_dict() == {(1,): 1}
        assert run(3, "reject(e1 + e2, e1)").to_dict() == {(2,): 1}

    def test_antiscalar_builtin(self):
        assert run(3, "antiscalar(2 + e123)").to_dict() == {(1, 2, 3): 1}


# ── Sums and grades ──────────────────────────────────────────────────

class TestGrades:
    def test_mixed_grades_are_partitioned(self):
        result = run(3, "1 + e1")
        assert [k for k, _ in result] == [0, 1]
        assert result[0][1].to_dict() == {(): 1}
        assert result[1][1].to_dict() == {(1,): 1}

    def test_cancellation_keeps_blade(self):
        result = run(3, "e1 - e1")
        assert result.to_dict() == {(1,): 0}
        assert result.grades() == [1]

    def test_grade_projection(self):
        assert run(3, "grade(1 + e1 + e12, 2)").to_dict() == {(1, 2): 1}
        assert run(3, "scalar(3 + e1)").to_dict() == {(): 3}

    def test_grade_must_be_literal(self):
        with pytest.raises(AlgebraicTypeError):
            run(3, "grade(e1, a.k)")

    def test_annotation_projects_algebraic_operand(self):
        assert run(3, "Bivector(e1 * e2 + 3)").to_dict() == {(1, 2): 1}

    def test_reverse_and_involute(self):
        assert run(3, "~e12").to_dict() == {(1, 2): -1}
        parts = run(3, "involute(e1 + e12)")
        assert parts[0][1].to_dict() == {(1,): -1}
        assert parts[1][1].to_dict() == {(1, 2): 1}


# ── Host inputs ──────────────────────────────────────────────────────

class TestTypedInputs:
    def test_vector(self):
        mv = run(3, "x: Vector\nx")
        assert mv.terms == {0b001: gc("x", 0), 0b010: gc("x", 1), 0b100: gc("x", 2)}

    def test_scalar_and_antiscalar_read_whole_value(self):
        assert run(3, "Scalar(s)").terms == {0: gc("s")}
        assert run(3, "Antiscalar(p)").terms == {0b111: gc("p")}

    def test_running_index_across_grades(self):
        parts = run(3, "Multivector(x, (0, 2))")
        assert parts[0][1].terms == {0: gc("x", 0)}
        assert parts[1][1].terms == {0b011: gc("x", 1), 0b101: gc("x", 2), 0b110: gc("x", 3)}

    def test_unannotated_host_expression_is_scalar(self):
        assert run(3, "a.b * e1").terms == {0b001: sympy.Symbol("a.b")}

    def test_grade_above_dimension(self):
        with pytest.raises(AlgebraicTypeError):
            run(2, "KVector(x, 3)")

    def test_dot_product(self):
        mv = run(3, "x: Vector\ny: Vector\nx | y")
        expected = sum(gc("x", i) * gc("y", i) for i in range(3))
        assert mv.terms == {0: expected}

    def test_inverse(self):
        mv = run_mv(3, "x: Vector\nx * inverse(x)")
        assert sympy.simplify(mv.scalar_part()) == 1
        assert all(c == 0 for m, c in mv.terms.items() if m != 0)

    def test_rotor_preserves_grade_symbolically(self):
        # R x ~R of a vector: the trivector part cancels to zero
        parts = run(3, "R: (0, 2)\nx: Vector\nR * x * ~R")
        assert [k for k, _ in parts] == [1, 3]
        assert parts[1][1].is_zero()


# ── Division and powers ──────────────────────────────────────────────

class TestDivision:
    def test_power(self):
        assert run(3, "e1 ** 2").to_dict() == {(): 1}
        assert run(3, "e12 ** 0").to_dict() == {(): 1}
        assert run(3, "(e1 + e2) ** -1").to_dict() == {(1,): sympy.Rational(1, 2), (2,): sympy.Rational(1, 2)}

    def test_power_needs_integer_literal(self):
        with pytest.raises(AlgebraicTypeError):
            run(3, "e1 ** n.k")
        with pytest.raises(AlgebraicTypeError):
            run(3, "e1 ** 0.5")

    def test_division_by_scalar(self):
        assert run(3, "e1 / 2").to_dict() == {(1,): sympy.Rational(1, 2)}

    def test_division_by_zero(self):
        with pytest.raises(AlgebraicTypeError):
            run(3, "e1 / 0")

    def test_division_by_non_scalar(self):
        with pytest.raises(AlgebraicTypeError):
            run(3, "scalar_division(e1, e1)")

    def test_division_by_vector(self):
        assert run(3, "e1 / e1").to_dict() == {(): 1}


class TestInvariants:
    @pytest.mark.parametrize("node", [Symbol("x"), Call("f", ()), Argument(0)])
    def test_unexpanded_nodes(self, node):
        with pytest.raises(InternalInvariantError):
            evaluate(3, node)
