# SymGA: Symbolic Geometric Algebra Code Generation
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.
# We believe Geometric Algebra is the future of AI, and we want
# the industry to build upon this "unbending" paradigm.

"""Built-in bindings.

Primitive functions wrap one :class:`~compiler.expression.Op` each; derived
functions are written in the surface language on top of them and call
other bindings by name, so overriding ``geometric_product`` also changes
``sandwich_product``, ``inverse`` and friends.
"""

from types import MappingProxyType
from typing import Dict

from compiler.expression import (
    OP_ARITY, Call, FunctionBinding, Op, Operation, ReferenceBinding, arg,
)
from compiler.parser import parse_function


def _primitive(op: Op) -> FunctionBinding:
    arity = OP_ARITY[op]
    return FunctionBinding(arity, Operation(op, tuple(arg(i) for i in range(arity))))


_DERIVED = {
    "subtract": "lambda a, b: add(a, negate(b))",
    "wedge": "lambda a, b: outer_product(a, b)",
    "dot": "lambda a, b: inner_product(a, b)",
    "conjugate": "lambda a: reverse(involute(a))",
    "antireverse": "lambda a: left_complement(reverse(right_complement(a)))",
    "exterior_antiproduct":
        "lambda a, b: left_complement(outer_product(right_complement(a), right_complement(b)))",
    "regressive_product": "lambda a, b: exterior_antiproduct(a, b)",
    "antiwedge": "lambda a, b: exterior_antiproduct(a, b)",
    "commutator_product":
        "lambda a, b: scalar_division(subtract(geometric_product(a, b), geometric_product(b, a)), 2)",
    "anticommutator_product":
        "lambda a, b: scalar_division(add(geometric_product(a, b), geometric_product(b, a)), 2)",
    "magnitude2": "lambda a: scalar_product(a, reverse(a))",
    "inverse": "lambda a: scalar_division(reverse(a), geometric_product(a, reverse(a)))",
    "division": "lambda a, b: geometric_product(a, inverse(b))",
    "sandwich_product": "lambda r, x: geometric_product(geometric_product(r, x), reverse(r))",
    "versor_product": "lambda v, x: geometric_product(geometric_product(v, x), inverse(v))",
    "project": "lambda a, b: geometric_product(inner_product(a, b), inverse(b))",
    "reject": "lambda a, b: geometric_product(outer_product(a, b), inverse(b))",
    "scalar": "lambda a: grade(a, 0)",
    "vector": "lambda a: grade(a, 1)",
    "bivector": "lambda a: grade(a, 2)",
    "trivector": "lambda a: grade(a, 3)",
    # Top grade without knowing the dimension: complement it down to grade 0
    "antiscalar": "lambda a: left_complement(grade(right_complement(a), 0))",
}


def _build_functions() -> Dict[str, FunctionBinding]:
    table = {op.value: _primitive(op) for op in Op}
    for name, source in _DERIVED.items():
        table[name] = parse_function(source)
    return table


BUILTIN_FUNCTIONS = MappingProxyType(_build_functions())

BUILTIN_REFERENCES = MappingProxyType({
    "I": ReferenceBinding(Call("pseudoscalar", ())),
})
