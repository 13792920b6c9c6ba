# SymGA: Symbolic Geometric Algebra Code Generation
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.
# We believe Geometric Algebra is the future of AI, and we want
# the industry to build upon this "unbending" paradigm.

"""SymGA CLI Entry Point. Give it an expression, get Python back.

Compiles the configured program and logs the generated source.
"""

import ast

import hydra
from omegaconf import DictConfig, OmegaConf

from core.signature import Signature
from compiler.bindings import VariableInfo
from compiler.codegen import generate_function
from compiler.frontend import compile_expression
from log import get_logger

logger = get_logger(__name__)


def run(cfg: DictConfig) -> str:
    """Compiles ``cfg.expression`` and returns the generated source.

    Args:
        cfg (DictConfig): The plan.

    Returns:
        str: Generated expression, or a function definition when
        ``cfg.function.args`` is non-empty.
    """
    signature = Signature.from_spec(cfg.signature)
    bindings = OmegaConf.to_container(cfg.bindings, resolve=True) or {}
    varinfo = VariableInfo(
        refs=bindings.get("refs") or {},
        funcs=bindings.get("funcs") or {},
        warn_override=cfg.warn_override,
    )

    compilation = compile_expression(signature, cfg.expression, cfg.flatten, cfg.type, varinfo)
    args = list(cfg.function.args or [])
    if args:
        module = generate_function(compilation.result, args, cfg.function.name, cfg.flatten, cfg.type)
        source = ast.unparse(module)
    else:
        source = compilation.source

    logger.info("Compiled under %s (%s)", signature, cfg.flatten)
    logger.info("\n%s", source)
    return source


@hydra.main(version_base=None, config_path="conf", config_name="config")
def main(cfg: DictConfig):
    """The Boss. Delegates the work.

    Args:
        cfg (DictConfig): The plan.
    """
    logger.debug("Config:\n%s", OmegaConf.to_yaml(cfg))
    run(cfg)


if __name__ == "__main__":
    main()
