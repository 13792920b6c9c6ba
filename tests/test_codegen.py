# Tests for compiler/codegen.py

import ast

import pytest
import sympy

from compiler.bindings import VariableInfo, expand
from compiler.codegen import (
    Flatten, component_count, emit, generate, generate_function, generate_source,
)
from compiler.evaluate import evaluate, getcomponent
from compiler.parser import parse_program
from core.kvector import RUNTIME_NAMESPACE, KVector


def result_of(sig, source):
    program = parse_program(source)
    return evaluate(sig, expand(program.expression, VariableInfo().extended(program.bindings)))


def unparse(expr):
    return ast.unparse(emit(expr))


class TestLayout:
    def test_scalar(self):
        assert generate_source(result_of(3, "e1 * e1")) == "construct(KVector[0, 3], (1,))"

    def test_zero_filled_grade(self):
        result = result_of(3, "e1 ^ e2")
        assert generate_source(result) == "construct(KVector[2, 3], (1, 0, 0))"
        assert generate_source(result, "flattened") == "(1, 0, 0)"

    def test_empty_result_is_scalar_zero(self):
        result = result_of(3, "e1 | e2")
        assert generate_source(result) == "construct(KVector[0, 3], (0,))"
        assert generate_source(result, Flatten.FLATTENED) == "(0,)"

    def test_mixed_grades(self):
        result = result_of(3, "1 + e1")
        assert generate_source(result) == (
            "(construct(KVector[0, 3], (1,)), construct(KVector[1, 3], (1, 0, 0)))"
        )
        assert generate_source(result, "flattened") == "(1, 1, 0, 0)"

    def test_output_type(self):
        result = result_of(3, "e3")
        assert generate_source(result, "flattened", T="Point") == "construct(Point, (0, 0, 1))"
        assert generate_source(result, "nested", T="Point") == "construct(Point, (0, 0, 1))"

    def test_flattened_count_matches_nested(self):
        result = result_of(4, "x: Vector\ny: Bivector\nx * y")
        flat = generate(result, "flattened")
        nested = generate(result, "nested")
        assert len(flat.elts) == component_count(result)
        assert sum(len(obj.args[1].elts) for obj in nested.elts) == component_count(result)
        # grade 1 (4) + grade 3 (4)
        assert component_count(result) == 8

    def test_invalid_mode(self):
        with pytest.raises(ValueError):
            generate(result_of(3, "e1"), "sideways")


class TestEmit:
    x, y = sympy.symbols("x y")

    def test_arithmetic(self):
        x, y = self.x, self.y
        assert unparse(x - y) == "x - y"
        assert unparse(-x) == "-x"
        assert unparse(2 * x) == "2 * x"
        assert unparse(x / 2) == "x / 2"
        assert unparse(x ** 2) == "x ** 2"
        assert unparse(1 / x) == "1 / x"
        assert unparse(sympy.Rational(-3, 4)) == "-(3 / 4)"

    def test_component_reads(self):
        assert unparse(getcomponent(sympy.Symbol("v"), 1)) == "getcomponent(v, 1)"
        assert unparse(getcomponent(sympy.Symbol("p.w"))) == "getcomponent(p.w)"

    def test_host_symbol(self):
        assert unparse(sympy.Symbol("xs[0]") * 3) == "3 * xs[0]"

    def test_float(self):
        assert unparse(sympy.Float(0.25) * self.x) == "0.25 * x"


class TestEvaluateGenerated:
    def run(self, source, namespace, mode="nested"):
        code = generate(result_of(3, source), mode)
        env = {**RUNTIME_NAMESPACE, **namespace}
        return eval(compile(ast.Expression(body=code), "<test>", "eval"), env)

    def test_wedge(self):
        out = self.run("x: Vector\ny: Vector\nx ^ y", {"x": (1, 2, 3), "y": (4, 5, 6)})
        # e12: 1*5 - 2*4, e13: 1*6 - 3*4, e23: 2*6 - 3*5
        assert out == KVector(2, 3, (-3, -6, -3))

    def test_cross_product_via_dual(self):
        out = self.run("x: Vector\ny: Vector\n-dual(x ^ y)", {"x": (1, 0, 0), "y": (0, 1, 0)})
        assert out == KVector(1, 3, (0, 0, 1))

    def test_flattened_tuple(self):
        out = self.run("x: Vector\n2 * x", {"x": (1.0, 2.0, 3.0)}, "flattened")
        assert out == (2.0, 4.0, 6.0)


class TestGenerateFunction:
    def test_hoists_host_inputs(self):
        result = result_of(3, "Vector(obj.pos) * e1")
        module = generate_function(result, ["obj"], mode="flattened")
        source = ast.unparse(module)
        assert source.startswith("def kernel(obj):")
        assert "_input0 = obj.pos" in source
        assert "getcomponent(obj.pos" not in source

        env = dict(RUNTIME_NAMESPACE)
        exec(compile(module, "<test>", "exec"), env)
        pos = type("P", (), {"pos": (1.0, 2.0, 3.0)})()
        # x e1 = x1 - x2 e12 - x3 e13
        assert env["kernel"](pos) == (1.0, -2.0, -3.0, 0)

    def test_plain_names_not_hoisted(self):
        module = generate_function(result_of(3, "x: Vector\nx"), ["x"], name="identity")
        source = ast.unparse(module)
        assert source.startswith("def identity(x):")
        assert "_input" not in source
