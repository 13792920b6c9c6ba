# SymGA: Symbolic Geometric Algebra Code Generation
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.
# We believe Geometric Algebra is the future of AI, and we want
# the industry to build upon this "unbending" paradigm.

"""Dense tensor bridge.

Multivectors stored as ``[..., 2^n]`` tensors indexed by blade mask, the
layout used by tensor-based GA kernels. :class:`DenseAlgebra` multiplies
them with a precomputed Cayley table, and :meth:`DenseAlgebra.embed` /
:meth:`DenseAlgebra.extract` translate between that layout and the
canonical component order of compiled kernels.
"""

from typing import Dict, Sequence, Tuple

import torch

from core import blade
from core.signature import Signature, SignatureSpec


class DenseAlgebra:
    """Numeric Clifford algebra over dense coefficient tensors.

    Attributes:
        signature (Signature): Metric signature.
        n (int): Total dimensions.
        dim (int): Total basis elements (2^n).
        device (str): Computation device.
    """
    _CACHED_TABLES: Dict[Tuple[Signature, str], Tuple[torch.Tensor, ...]] = {}

    def __init__(self, signature: SignatureSpec, device='cpu'):
        self.signature = Signature.from_spec(signature)
        self.n = self.signature.dimension
        assert self.n <= 12, f"Dense layout limited to 12 dimensions, got {self.n}"
        self.dim = 2 ** self.n
        self.device = device

        cache_key = (self.signature, str(device))
        if cache_key not in DenseAlgebra._CACHED_TABLES:
            DenseAlgebra._CACHED_TABLES[cache_key] = self._generate_cayley_table()
        (
            self.cayley_indices,
            self.gp_signs,
            self.rev_signs,
            self.grade_of,
        ) = DenseAlgebra._CACHED_TABLES[cache_key]

    def _generate_cayley_table(self):
        """Precompute the Cayley table, reversion signs and blade grades."""
        indices = torch.arange(self.dim, device=self.device)
        # cayley_indices[i, k] = j such that e_i e_j lands on e_k
        cayley_indices = indices.unsqueeze(1) ^ indices.unsqueeze(0)

        gp_signs = torch.zeros(self.dim, self.dim, device=self.device)
        for i in range(self.dim):
            for k in range(self.dim):
                _, sign = blade.blade_product(i, i ^ k, self.signature)
                gp_signs[i, k] = sign

        grade_of = torch.tensor([blade.grade(m) for m in range(self.dim)], device=self.device)
        rev_signs = torch.tensor(
            [blade.reverse_sign(blade.grade(m)) for m in range(self.dim)],
            dtype=gp_signs.dtype, device=self.device,
        )
        return cayley_indices, gp_signs, rev_signs, grade_of

    def _check(self, x: torch.Tensor, name: str) -> None:
        assert x.ndim >= 1 and x.shape[-1] == self.dim, (
            f"{name}: last dim should be {self.dim} (algebra dim), got shape {tuple(x.shape)}"
        )

    def geometric_product(self, A: torch.Tensor, B: torch.Tensor) -> torch.Tensor:
        """Computes the Geometric Product of dense multivectors [..., dim]."""
        self._check(A, "geometric_product(A)")
        self._check(B, "geometric_product(B)")
        idx = self.cayley_indices.to(A.device)
        signs = self.gp_signs.to(device=A.device, dtype=A.dtype)
        B_gathered = B[..., idx]  # [..., D, D]
        return (A.unsqueeze(-1) * B_gathered * signs).sum(dim=-2)

    def reverse(self, mv: torch.Tensor) -> torch.Tensor:
        return mv * self.rev_signs.to(device=mv.device, dtype=mv.dtype)

    def grade_projection(self, mv: torch.Tensor, grade: int) -> torch.Tensor:
        mask = (self.grade_of == grade).to(mv.device)
        return torch.where(mask, mv, torch.zeros_like(mv))

    def embed(self, components: Sequence, grades: Sequence[int]) -> torch.Tensor:
        """Scatters canonically ordered components into a dense tensor.

        Args:
            components: Components of the given grades, grades ascending and
                canonical order within each grade (the flattened layout).
            grades: The grades the components cover.

        Returns:
            torch.Tensor: Dense multivector [..., dim].
        """
        masks = [m for k in sorted(grades) for m in blade.blades_of_grade(self.n, k)]
        assert len(masks) == len(components), (
            f"Expected {len(masks)} components for grades {tuple(grades)}, got {len(components)}"
        )
        values = [torch.as_tensor(c, dtype=torch.get_default_dtype()) if not isinstance(c, torch.Tensor) else c
                  for c in components]
        values = torch.broadcast_tensors(*values)
        out = torch.zeros(*values[0].shape, self.dim, dtype=values[0].dtype, device=values[0].device)
        for mask, value in zip(masks, values):
            out[..., mask] = value
        return out

    def extract(self, mv: torch.Tensor, grades: Sequence[int]) -> Tuple[torch.Tensor, ...]:
        """Gathers the components of ``grades`` from a dense tensor, canonical order."""
        self._check(mv, "extract(mv)")
        return tuple(mv[..., m] for k in sorted(grades) for m in blade.blades_of_grade(self.n, k))

    def basis(self, name_or_indices) -> torch.Tensor:
        """Dense basis blade from a surface name (``"e12"``) or 0-based indices."""
        idx = blade.parse_blade_name(name_or_indices) if isinstance(name_or_indices, str) else name_or_indices
        if idx is None:
            raise ValueError(f"{name_or_indices!r} is not a basis blade name")
        mask, sign = blade.canonicalize(idx, self.signature)
        out = torch.zeros(self.dim, device=self.device)
        out[mask] = sign
        return out
