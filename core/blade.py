# SymGA: Symbolic Geometric Algebra Code Generation
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.
# We believe Geometric Algebra is the future of AI, and we want
# the industry to build upon this "unbending" paradigm.

"""Basis blades as bitmasks.

Bit ``i`` of a blade mask is set when basis vector ``e_{i+1}`` takes part
in the blade. Masks are always canonical (ascending indices, no repeats);
the sign picked up while reaching canonical form is carried separately.

Canonical blade order within a grade is the lexicographic order of the
sorted index tuples, i.e. ``itertools.combinations(range(n), k)``.
"""

import re
from functools import lru_cache
from itertools import combinations
from typing import Optional, Sequence, Tuple

from core.signature import Signature

_COMPACT_NAME = re.compile(r"^e([1-9]+)$")
_SEPARATED_NAME = re.compile(r"^e(?:_([1-9][0-9]*))+$")


def grade(mask: int) -> int:
    """Number of basis vectors in the blade."""
    return bin(mask).count('1')


def indices(mask: int) -> Tuple[int, ...]:
    """0-based basis indices of the blade, ascending."""
    out = []
    bit = 0
    while mask:
        if mask & 1:
            out.append(bit)
        mask >>= 1
        bit += 1
    return tuple(out)


def mask_of(idx: Sequence[int]) -> int:
    """Bitmask of a set of distinct 0-based indices."""
    mask = 0
    for i in idx:
        if mask & (1 << i):
            raise ValueError(f"Repeated basis index {i + 1} in {tuple(idx)}")
        mask |= 1 << i
    return mask


def reordering_sign(a: int, b: int) -> int:
    """Sign picked up by sorting the concatenation ``a b`` of two blades.

    Every basis vector of ``a`` has to move past each basis vector of ``b``
    with a strictly lower index; each adjacent transposition flips the sign.
    """
    a >>= 1
    swaps = 0
    while a:
        swaps += grade(a & b)
        a >>= 1
    return -1 if swaps & 1 else 1


def metric_factor(common: int, signature: Signature) -> int:
    """Product of the squares of the basis vectors shared by two blades."""
    factor = 1
    for i in indices(common):
        factor *= signature.metric(i)
        if factor == 0:
            return 0
    return factor


def blade_product(a: int, b: int, signature: Signature) -> Tuple[int, int]:
    """Geometric product of two basis blades.

    Args:
        a (int): Left blade mask.
        b (int): Right blade mask.
        signature (Signature): Metric used to contract shared basis vectors.

    Returns:
        Tuple[int, int]: Result mask (symmetric difference) and sign in
        {-1, 0, +1}. A zero sign means a degenerate basis vector was squared.
    """
    factor = metric_factor(a & b, signature)
    if factor == 0:
        return a ^ b, 0
    return a ^ b, reordering_sign(a, b) * factor


def canonicalize(idx: Sequence[int], signature: Optional[Signature] = None) -> Tuple[int, int]:
    """Brings a product of basis vectors to canonical form.

    Repeated indices are contracted through ``signature``; without a
    signature they are rejected.

    Args:
        idx: 0-based basis indices in product order, e.g. ``(1, 0)`` for e2e1.
        signature: Metric for contracting repeated indices.

    Returns:
        Tuple[int, int]: Canonical mask and sign. ``canonicalize`` of an
        already canonical index tuple returns sign +1.
    """
    mask, sign = 0, 1
    for i in idx:
        if mask & (1 << i) and signature is None:
            raise ValueError(f"Repeated basis index {i + 1} needs a signature to contract")
        if signature is None:
            sign *= reordering_sign(mask, 1 << i)
            mask |= 1 << i
        else:
            mask, s = blade_product(mask, 1 << i, signature)
            sign *= s
            if sign == 0:
                return mask, 0
    return mask, sign


def reverse_sign(k: int) -> int:
    """Reversion sign (-1)^(k(k-1)/2) of a grade-k blade."""
    return -1 if (k * (k - 1) // 2) & 1 else 1


def involution_sign(k: int) -> int:
    """Grade involution sign (-1)^k."""
    return -1 if k & 1 else 1


@lru_cache(maxsize=None)
def blades_of_grade(n: int, k: int) -> Tuple[int, ...]:
    """Masks of all grade-k blades of an n-dimensional space, canonical order."""
    return tuple(mask_of(c) for c in combinations(range(n), k))


@lru_cache(maxsize=None)
def linear_index(n: int, mask: int) -> int:
    """Position of ``mask`` among the blades of its grade."""
    return blades_of_grade(n, grade(mask)).index(mask)


def blade_name(mask: int) -> str:
    """Surface name of a blade: ``e12``, ``e_3_10``; the scalar blade is ``1``."""
    idx = [i + 1 for i in indices(mask)]
    if not idx:
        return "1"
    if all(i < 10 for i in idx):
        return "e" + "".join(str(i) for i in idx)
    return "e_" + "_".join(str(i) for i in idx)


def parse_blade_name(name: str) -> Optional[Tuple[int, ...]]:
    """Parses ``e1``, ``e21`` or ``e_1_12`` into 0-based indices, in product order.

    Returns ``None`` when ``name`` does not denote a basis blade.
    """
    m = _COMPACT_NAME.match(name)
    if m:
        return tuple(int(c) - 1 for c in m.group(1))
    if _SEPARATED_NAME.match(name):
        return tuple(int(part) - 1 for part in name.split("_")[1:])
    return None
