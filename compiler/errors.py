# SymGA: Symbolic Geometric Algebra Code Generation
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.
# We believe Geometric Algebra is the future of AI, and we want
# the industry to build upon this "unbending" paradigm.

"""Error taxonomy of the compiler.

Every failure is fatal to the compilation that raised it. The single
recoverable condition, overriding a built-in binding, is reported through
:mod:`warnings` with :class:`BindingOverrideWarning`.
"""


class SymGAError(Exception):
    """Base class of all compilation errors."""


class ExpressionSyntaxError(SymGAError):
    """Source uses syntax or operators outside the supported surface."""


class ArityError(ExpressionSyntaxError):
    """A function was called with the wrong number of arguments."""


class MalformedBindingError(SymGAError):
    """A reference or function definition is ill-formed."""


class UnboundReferenceError(SymGAError):
    """A name is neither bound, a basis blade, nor usable as a host value."""


class CyclicBindingError(SymGAError):
    """Expansion re-entered a binding that is still being expanded."""


class AlgebraicTypeError(SymGAError):
    """An operation received operands it is not defined for."""


class InternalInvariantError(SymGAError):
    """A state the pipeline should never reach, e.g. unexpanded nodes in the engine."""


class BindingOverrideWarning(UserWarning):
    """A user binding replaces a built-in one."""
