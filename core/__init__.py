# SymGA: Symbolic Geometric Algebra Code Generation (C) 2026 Eunkyum Kim
# Licensed under the Apache License, Version 2.0 | "Unbending" Paradigm

"""Core mathematical kernel for Geometric Algebra.

Provides metric signatures, bitmask blade arithmetic, the symbolic Clifford
algebra and multivector wrapper, the dense tensor bridge, and the runtime
containers generated code builds.
"""

from .signature import Signature
from .algebra import CliffordAlgebra
from .multivector import Multivector
from .dense import DenseAlgebra
from .kvector import (
    KVector,
    KVectorType,
    getcomponent,
    construct,
    register_constructor,
    component_reader,
    scalar_reader,
    RUNTIME_NAMESPACE,
)

__all__ = [
    # algebra
    "Signature",
    "CliffordAlgebra",
    "Multivector",
    "DenseAlgebra",
    # runtime
    "KVector",
    "KVectorType",
    "getcomponent",
    "construct",
    "register_constructor",
    "component_reader",
    "scalar_reader",
    "RUNTIME_NAMESPACE",
]
