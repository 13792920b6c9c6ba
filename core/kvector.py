# SymGA: Symbolic Geometric Algebra Code Generation
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.
# We believe Geometric Algebra is the future of AI, and we want
# the industry to build upon this "unbending" paradigm.

"""Runtime containers and the component contract used by generated code.

Generated code reads host inputs through :func:`getcomponent` and builds
its outputs through :func:`construct`; :class:`KVector` is the default
output type in nested mode. Components of a grade-k element are ordered by
the canonical blade order of :mod:`core.blade`.
"""

from dataclasses import dataclass
from functools import singledispatch
from math import comb
from typing import Any, Callable, Dict, Sequence, Tuple

import torch


@dataclass(frozen=True)
class KVectorType:
    """Type object for ``KVector[grade, dim]``; calling it builds an instance."""

    grade: int
    dim: int

    def __call__(self, components: Sequence) -> "KVector":
        return KVector(self.grade, self.dim, components)

    def __repr__(self):
        return f"KVector[{self.grade}, {self.dim}]"


class KVector:
    """Geometric k-vector with ``C(dim, grade)`` components.

    Components may be Python numbers or tensors of any matching shape.

    Example:
        >>> KVector(2, 3, (1.0, 2.0, 3.0))
        KVector[2, 3](1.0, 2.0, 3.0)
    """

    __slots__ = ("grade", "dim", "components")

    def __init__(self, grade: int, dim: int, components: Sequence):
        components = tuple(components)
        expected = comb(dim, grade)
        if not 0 <= grade <= dim:
            raise ValueError(f"Grade {grade} out of range for dimension {dim}")
        if len(components) != expected:
            raise ValueError(
                f"A grade-{grade} element of a {dim}-dimensional algebra has "
                f"{expected} components, got {len(components)}"
            )
        self.grade = grade
        self.dim = dim
        self.components = components

    def __class_getitem__(cls, item: Tuple[int, int]) -> KVectorType:
        grade, dim = item
        return KVectorType(grade, dim)

    def __getitem__(self, i: int):
        return self.components[i]

    def __len__(self) -> int:
        return len(self.components)

    def __iter__(self):
        return iter(self.components)

    def __eq__(self, other):
        if not isinstance(other, KVector):
            return NotImplemented
        return (
            self.grade == other.grade
            and self.dim == other.dim
            and all(_same(a, b) for a, b in zip(self.components, other.components))
        )

    __hash__ = None

    def to_tensor(self) -> torch.Tensor:
        """Stacks the components on a new last axis, ``[..., C(dim, grade)]``."""
        return stack_components(self.components)

    def __repr__(self):
        return f"KVector[{self.grade}, {self.dim}]({', '.join(map(repr, self.components))})"


def stack_components(components: Sequence) -> torch.Tensor:
    """Stacks numbers and tensors on a new last axis, broadcasting and promoting dtypes."""
    tensors = [
        c if isinstance(c, torch.Tensor) else torch.tensor(c, dtype=torch.get_default_dtype())
        for c in components
    ]
    dtype = tensors[0].dtype
    for t in tensors[1:]:
        dtype = torch.promote_types(dtype, t.dtype)
    return torch.stack(torch.broadcast_tensors(*[t.to(dtype) for t in tensors]), dim=-1)


def _same(a, b) -> bool:
    if isinstance(a, torch.Tensor) or isinstance(b, torch.Tensor):
        return bool(torch.equal(torch.as_tensor(a), torch.as_tensor(b)))
    return a == b


# ----------------------------------------------------------------------
# Component contract
# ----------------------------------------------------------------------

_NO_INDEX = object()


def getcomponent(obj, i=_NO_INDEX):
    """Reads the ``i``-th component of a geometric input.

    ``getcomponent(obj)`` is used for scalars and antiscalars and returns the
    object itself by default; ``getcomponent(obj, i)`` falls back to
    ``obj[i]``. Register new host types on :func:`component_reader`.
    """
    if i is _NO_INDEX:
        return scalar_reader(obj)
    return component_reader(obj, i)


@singledispatch
def component_reader(obj, i: int):
    return obj[i]


@component_reader.register
def _(obj: torch.Tensor, i: int):
    # Dense layout: components run along the last axis.
    return obj[..., i]


@singledispatch
def scalar_reader(obj):
    return obj


@scalar_reader.register
def _(obj: KVector):
    return obj.components[0]


_CONSTRUCTORS: Dict[Any, Callable] = {}


def register_constructor(T, factory: Callable[[Tuple], Any]) -> None:
    """Overrides how ``construct(T, components)`` builds instances of ``T``."""
    _CONSTRUCTORS[T] = factory


def construct(T, components: Tuple):
    """Builds an instance of ``T`` from a tuple of components.

    Defaults to ``T(components)``.
    """
    factory = _CONSTRUCTORS.get(T)
    if factory is not None:
        return factory(components)
    return T(components)


register_constructor(tuple, tuple)
register_constructor(torch.Tensor, stack_components)

# Names generated code refers to.
RUNTIME_NAMESPACE = {
    "getcomponent": getcomponent,
    "construct": construct,
    "KVector": KVector,
}
