# Tests for compiler/parser.py

import ast

import pytest
import sympy

from compiler.errors import ExpressionSyntaxError, MalformedBindingError
from compiler.expression import (
    SCALAR, VECTOR, Annotation, Argument, Call, FunctionBinding, GradeSpec,
    HostExpr, Literal, ReferenceBinding, Symbol,
)
from compiler.parser import parse_expression, parse_function, parse_program, parse_type


def sym(name):
    return Symbol(name)


# ── Expressions ──────────────────────────────────────────────────────

class TestOperators:
    @pytest.mark.parametrize("source, name", [
        ("a + b", "add"),
        ("a - b", "subtract"),
        ("a * b", "geometric_product"),
        ("a ^ b", "outer_product"),
        ("a | b", "inner_product"),
        ("a << b", "left_contraction"),
        ("a >> b", "right_contraction"),
        ("a & b", "exterior_antiproduct"),
        ("a / b", "division"),
    ])
    def test_binary(self, source, name):
        assert parse_expression(source) == Call(name, (sym("a"), sym("b")))

    def test_unary(self):
        assert parse_expression("-a") == Call("negate", (sym("a"),))
        assert parse_expression("~a") == Call("reverse", (sym("a"),))
        assert parse_expression("+a") == sym("a")

    def test_literals(self):
        assert parse_expression("2") == Literal(sympy.Integer(2))
        assert parse_expression("-2") == Literal(sympy.Integer(-2))
        assert parse_expression("0.5") == Literal(sympy.Float(0.5))

    def test_power_keeps_integer_exponent(self):
        assert parse_expression("x ** -1") == Call("power", (sym("x"), Literal(sympy.Integer(-1))))

    def test_precedence(self):
        # Python precedence: * binds tighter than ^
        expected = Call("outer_product", (Call("geometric_product", (sym("a"), sym("b"))), sym("c")))
        assert parse_expression("a * b ^ c") == expected

    def test_call(self):
        assert parse_expression("f(a, 1)") == Call("f", (sym("a"), Literal(sympy.Integer(1))))


class TestAnnotations:
    def test_inline(self):
        assert parse_expression("Vector(x)") == Annotation(sym("x"), VECTOR)
        assert parse_expression("Scalar(x)") == Annotation(sym("x"), SCALAR)

    def test_kvector(self):
        node = parse_expression("KVector(x, 2)")
        assert node.operand == sym("x")
        assert node.spec.grades == (2,)

    def test_multivector_grades(self):
        node = parse_expression("Multivector(x, (0, 2))")
        assert node.spec.grades == (0, 2)
        assert parse_expression("Multivector(x)").spec.grades is None

    def test_wrong_operand_count(self):
        with pytest.raises(ExpressionSyntaxError):
            parse_expression("Vector(x, y)")
        with pytest.raises(ExpressionSyntaxError):
            parse_expression("KVector(x)")

    def test_grade_must_be_literal(self):
        with pytest.raises(ExpressionSyntaxError):
            parse_expression("KVector(x, k)")

    @pytest.mark.parametrize("source, grades", [
        ("int", (0,)),
        ("float", (0,)),
        ("Bivector", (2,)),
        ("3", (3,)),
        ("(1, 3)", (1, 3)),
        ("KVector[2]", (2,)),
    ])
    def test_type_specs(self, source, grades):
        assert parse_type(ast.parse(source, mode="eval").body).grades == grades

    def test_antiscalar_resolves_to_top_grade(self):
        spec = parse_type(ast.parse("Antiscalar", mode="eval").body)
        assert spec.resolve(4) == (4,)

    def test_unknown_type(self):
        with pytest.raises(ExpressionSyntaxError):
            parse_type(ast.parse("Spinor", mode="eval").body)


class TestHostExpressions:
    @pytest.mark.parametrize("source", ["a.b", "xs[0]", "f(a)(b)", "np.array(v)"])
    def test_opaque(self, source):
        assert parse_expression(source) == HostExpr(source)

    def test_inside_operation(self):
        node = parse_expression("Vector(p.position) * e1")
        assert node == Call("geometric_product", (Annotation(HostExpr("p.position"), VECTOR), sym("e1")))


class TestSyntaxErrors:
    @pytest.mark.parametrize("source", [
        "a % b",
        "a // b",
        "a @ b",
        "a < b",
        "a and b",
        "not a",
        "f(x=1)",
        "f(*xs)",
        "'text'",
        "True",
        "1j",
        "[a, b]",
        "a if b else c",
        "a +",
    ])
    def test_rejected(self, source):
        with pytest.raises(ExpressionSyntaxError):
            parse_expression(source)


# ── Programs ─────────────────────────────────────────────────────────

class TestPrograms:
    def test_references(self):
        program = parse_program("x: Vector\ny = x * e1\ny")
        assert program.bindings == (
            ("x", ReferenceBinding(Annotation(sym("x"), VECTOR))),
            ("y", ReferenceBinding(Call("geometric_product", (sym("x"), sym("e1"))))),
        )
        assert program.expression == sym("y")

    def test_annotated_assignment(self):
        program = parse_program("b: Bivector = x ^ y\nb")
        (name, binding), = program.bindings
        assert name == "b"
        assert binding.rhs == Annotation(Call("outer_product", (sym("x"), sym("y"))), GradeSpec((2,), name="Bivector"))

    def test_dedent(self):
        program = parse_program("""
            x: Vector
            x
        """)
        assert program.expression == sym("x")

    def test_lambda(self):
        program = parse_program("rot = lambda r, v: r * v * ~r\nrot(e12, e1)")
        (name, binding), = program.bindings
        assert name == "rot"
        assert binding.arity == 2
        assert binding.body == Call("geometric_product", (
            Call("geometric_product", (Argument(0), Argument(1))),
            Call("reverse", (Argument(0),)),
        ))

    def test_def_with_docstring_and_locals(self):
        source = "\n".join([
            "def f(a, b):",
            "    '''Project-ish.'''",
            "    c = a * b",
            "    return c + a",
            "f(e1, e2)",
        ])
        (name, binding), = parse_program(source).bindings
        assert name == "f"
        assert binding == FunctionBinding(2, Call("add", (
            Call("geometric_product", (Argument(0), Argument(1))),
            Argument(0),
        )))

    def test_last_statement_must_be_expression(self):
        with pytest.raises(ExpressionSyntaxError):
            parse_program("x = e1")

    def test_expression_in_the_middle(self):
        with pytest.raises(ExpressionSyntaxError):
            parse_program("e1\ne2")

    def test_empty(self):
        with pytest.raises(ExpressionSyntaxError):
            parse_program("")

    def test_accepts_ast(self):
        tree = ast.parse("x: int\nx")
        assert parse_program(tree).expression == sym("x")


class TestMalformedFunctions:
    @pytest.mark.parametrize("source", [
        "def f(a: Vector):\n    return a",
        "def f(a=1):\n    return a",
        "def f(*a):\n    return a",
        "def f(**a):\n    return a",
        "def f(a, *, b):\n    return a",
        "@dec\ndef f(a):\n    return a",
        "def f(a) -> Vector:\n    return a",
        "def f(a):\n    a = e1\n    return a",
        "def f(a):\n    a += e1\n    return a",
        "f = lambda a: a.x",
        "f = lambda a=1: a",
        "f = lambda a: g(a)[0]",
    ])
    def test_rejected(self, source):
        with pytest.raises(MalformedBindingError):
            parse_program(source + "\nf(e1)")

    def test_missing_return(self):
        with pytest.raises(ExpressionSyntaxError):
            parse_program("def f(a):\n    b = a\nf(e1)")

    def test_parse_function_forms(self):
        expected = FunctionBinding(1, Call("reverse", (Argument(0),)))
        assert parse_function("lambda a: ~a") == expected
        assert parse_function("f = lambda a: ~a") == expected
        assert parse_function("def f(a):\n    return ~a") == expected

    def test_parse_function_rejects_reference(self):
        with pytest.raises(MalformedBindingError):
            parse_function("x = e1")
