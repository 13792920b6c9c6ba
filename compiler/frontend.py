# SymGA: Symbolic Geometric Algebra Code Generation
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.
# We believe Geometric Algebra is the future of AI, and we want
# the industry to build upon this "unbending" paradigm.

"""Surface entry points: source text in, Python code or values out.

Example:
    >>> codegen_source(3, "x: Vector\\ny: Vector\\nx ^ y")
    'construct(KVector[2, 3], (getcomponent(x, 0) * getcomponent(y, 1) - ...'
    >>> ga_eval(3, "Vector(a) | Vector(b)", {"a": (1, 2, 3), "b": (4, 5, 6)})
    KVector[0, 3](32)
"""

import ast
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Sequence, Union

from core.kvector import RUNTIME_NAMESPACE
from core.signature import Signature, SignatureSpec
from compiler.bindings import VariableInfo, expand
from compiler.codegen import Flatten, TypeLike, generate, generate_function
from compiler.evaluate import Result, evaluate
from compiler.expression import Node
from compiler.parser import Source, parse_program
from log import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Compilation:
    """Every stage of one compilation.

    Attributes:
        signature: The algebra compiled against.
        expanded: Expression tree after binding expansion.
        result: Evaluated multivector, or its grade partition.
        code: Generated Python expression.
        source: ``ast.unparse`` of :attr:`code`.
    """
    signature: Signature
    expanded: Node
    result: Result
    code: ast.expr
    source: str


def compile_expression(
    sig: SignatureSpec,
    source: Source,
    flatten: Union[str, Flatten] = Flatten.NESTED,
    T: TypeLike = None,
    varinfo: Optional[VariableInfo] = None,
) -> Compilation:
    """Runs parse, expand, evaluate and generate on ``source``.

    Bindings defined in ``source`` are applied on top of ``varinfo`` (or
    the built-ins), in order.
    """
    signature = Signature.from_spec(sig)
    program = parse_program(source)
    info = (varinfo or VariableInfo()).extended(program.bindings)
    expanded = expand(program.expression, info)
    result = evaluate(signature, expanded)
    code = generate(result, flatten, T)
    text = ast.unparse(code)
    logger.debug("Compiled under %s: %s", signature, text)
    return Compilation(signature, expanded, result, code, text)


def codegen_expression(
    sig: SignatureSpec,
    source: Source,
    flatten: Union[str, Flatten] = Flatten.NESTED,
    T: TypeLike = None,
    varinfo: Optional[VariableInfo] = None,
) -> ast.expr:
    """Python expression computing ``source`` under ``sig``."""
    return compile_expression(sig, source, flatten, T, varinfo).code


def codegen_source(sig: SignatureSpec, source: Source, **kwargs) -> str:
    return compile_expression(sig, source, **kwargs).source


def ga_eval(
    sig: SignatureSpec,
    source: Source,
    namespace: Optional[Mapping[str, Any]] = None,
    flatten: Union[str, Flatten] = Flatten.NESTED,
    T: Any = None,
    varinfo: Optional[VariableInfo] = None,
):
    """Compiles ``source`` and evaluates the result against host values.

    Args:
        sig: Signature of the algebra.
        source: Program source.
        namespace: Host values the generated code refers to.
        flatten: Output layout.
        T: Output type. A non-string object is bound as ``T`` in the
            evaluation namespace.
        varinfo: Extra bindings.

    Returns:
        Whatever the generated expression builds: a :class:`KVector`, a
        tuple, or an instance of ``T``.
    """
    env = {**RUNTIME_NAMESPACE, **(namespace or {})}
    type_source = T
    if T is not None and not isinstance(T, (str, ast.expr)):
        env["T"] = T
        type_source = "T"
    compilation = compile_expression(sig, source, flatten, type_source, varinfo)
    code = compile(ast.Expression(body=compilation.code), "<symga>", "eval")
    return eval(code, env)


def ga_function(
    sig: SignatureSpec,
    source: Source,
    args: Sequence[str],
    name: str = "kernel",
    flatten: Union[str, Flatten] = Flatten.NESTED,
    T: Any = None,
    varinfo: Optional[VariableInfo] = None,
    namespace: Optional[Mapping[str, Any]] = None,
) -> Callable:
    """Compiles ``source`` into a Python function of the host inputs ``args``.

    Example:
        >>> rotate = ga_function(3, "R: (0, 2)\\nx: Vector\\nvector(R * x * ~R)", ["R", "x"])
        >>> rotate(rotor, point)
    """
    env = {**RUNTIME_NAMESPACE, **(namespace or {})}
    type_source = T
    if T is not None and not isinstance(T, (str, ast.expr)):
        env["T"] = T
        type_source = "T"
    compilation = compile_expression(sig, source, flatten, type_source, varinfo)
    module = generate_function(compilation.result, args, name, flatten, type_source)
    logger.debug("Generated function:\n%s", ast.unparse(module))
    exec(compile(module, "<symga>", "exec"), env)
    return env[name]
