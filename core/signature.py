# SymGA: Symbolic Geometric Algebra Code Generation
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.
# We believe Geometric Algebra is the future of AI, and we want
# the industry to build upon this "unbending" paradigm.

"""Metric signatures of Euclidean and pseudo-Euclidean spaces.

A signature ``Cl(p, q, r)`` has ``p`` basis vectors squaring to ``+1``,
followed by ``q`` squaring to ``-1`` and ``r`` degenerate ones squaring
to ``0``. The metric evaluates to zero between two distinct basis vectors.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass
from typing import Sequence, Union

SignatureSpec = Union["Signature", int, Sequence[int], str]


@dataclass(frozen=True)
class Signature:
    """Immutable metric signature.

    Attributes:
        positive (int): Basis vectors squaring to +1.
        negative (int): Basis vectors squaring to -1.
        degenerate (int): Basis vectors squaring to 0.
    """

    positive: int
    negative: int = 0
    degenerate: int = 0

    def __post_init__(self):
        for field_name in ("positive", "negative", "degenerate"):
            value = getattr(self, field_name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{field_name} must be an integer, got {value!r}")
            if value < 0:
                raise ValueError(f"{field_name} must be non-negative, got {value}")

    @classmethod
    def from_spec(cls, spec: SignatureSpec) -> "Signature":
        """Builds a signature from an integer, a 1/2/3-tuple or its source text.

        Args:
            spec: ``3``, ``(3, 0, 1)``, ``[1, 3]``, ``"(3, 0, 1)"`` or a
                :class:`Signature` (returned unchanged).

        Returns:
            Signature: The parsed signature. Unspecified counts default to zero.
        """
        if isinstance(spec, Signature):
            return spec
        if isinstance(spec, str):
            try:
                spec = ast.literal_eval(spec.strip())
            except (ValueError, SyntaxError) as e:
                raise ValueError(f"Invalid signature literal {spec!r}") from e
        if isinstance(spec, int) and not isinstance(spec, bool):
            return cls(spec)
        if isinstance(spec, (tuple, list)) or hasattr(spec, "__iter__"):
            counts = tuple(spec)
            if not 1 <= len(counts) <= 3:
                raise ValueError(
                    f"Signature must have 1, 2 or 3 entries, got {len(counts)}"
                )
            return cls(*(int(c) if _is_integral(c) else c for c in counts))
        raise ValueError(f"Cannot interpret {spec!r} as a signature")

    @property
    def dimension(self) -> int:
        """Number of basis vectors (p + q + r)."""
        return self.positive + self.negative + self.degenerate

    @property
    def is_degenerate(self) -> bool:
        return self.degenerate > 0

    def metric(self, i: int) -> int:
        """Square of basis vector ``i`` (0-based).

        Args:
            i (int): Basis index in ``[0, dimension)``.

        Returns:
            int: +1, -1 or 0.
        """
        if not 0 <= i < self.dimension:
            raise IndexError(f"Basis index {i} out of range for {self}")
        if i < self.positive:
            return 1
        if i < self.positive + self.negative:
            return -1
        return 0

    def __str__(self) -> str:
        return f"Cl({self.positive},{self.negative},{self.degenerate})"


def _is_integral(value) -> bool:
    # OmegaConf list items land here
    return not isinstance(value, bool) and hasattr(value, "__index__")
