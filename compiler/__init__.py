# SymGA: Symbolic Geometric Algebra Code Generation (C) 2026 Eunkyum Kim
# Licensed under the Apache License, Version 2.0 | "Unbending" Paradigm

"""Compiler pipeline: parse, expand bindings, evaluate symbolically, generate code.

Provides the expression tree, the binding table and expander, the symbolic
evaluator, the Python code generator, and the surface entry points.
"""

__version__ = "0.1.0"

from .errors import (
    SymGAError,
    ExpressionSyntaxError,
    ArityError,
    MalformedBindingError,
    UnboundReferenceError,
    CyclicBindingError,
    AlgebraicTypeError,
    InternalInvariantError,
    BindingOverrideWarning,
)
from .expression import Op, GradeSpec, FunctionBinding, ReferenceBinding
from .parser import parse_program, parse_expression, parse_function
from .bindings import VariableInfo, expand
from .evaluate import evaluate, evaluate_multivector
from .codegen import Flatten, generate, generate_source, generate_function
from .frontend import (
    Compilation,
    compile_expression,
    codegen_expression,
    codegen_source,
    ga_eval,
    ga_function,
)

__all__ = [
    "__version__",
    # errors
    "SymGAError",
    "ExpressionSyntaxError",
    "ArityError",
    "MalformedBindingError",
    "UnboundReferenceError",
    "CyclicBindingError",
    "AlgebraicTypeError",
    "InternalInvariantError",
    "BindingOverrideWarning",
    # tree and bindings
    "Op",
    "GradeSpec",
    "FunctionBinding",
    "ReferenceBinding",
    "VariableInfo",
    # pipeline
    "parse_program",
    "parse_expression",
    "parse_function",
    "expand",
    "evaluate",
    "evaluate_multivector",
    "Flatten",
    "generate",
    "generate_source",
    "generate_function",
    # entry points
    "Compilation",
    "compile_expression",
    "codegen_expression",
    "codegen_source",
    "ga_eval",
    "ga_function",
]
