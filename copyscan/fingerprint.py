#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CopyScan - Winnowing Fingerprints

Moss-style document fingerprints: hash every k-gram of the normalized
text, keep the minimum hash of each window of w consecutive k-grams
(robust winnowing), and sort the result.

The k-gram hash is the 31-multiplier polynomial over UTF-16 code units,
reduced mod 2^32 and read as a signed 32-bit integer, so fingerprints
match those of any other implementation using that hash.
"""

import sys
from array import array
from typing import List, Sequence

_MASK = 0xFFFFFFFF
_MULTIPLIER = 31


def code_units(text: str) -> List[int]:
    """UTF-16 code units of a string (surrogate pairs for astral chars)"""
    units = array("H")
    units.frombytes(text.encode("utf-16-le", "surrogatepass"))
    if sys.byteorder == "big":
        units.byteswap()
    return units.tolist()


def _signed(value: int) -> int:
    return value - (1 << 32) if value & 0x80000000 else value


def hash_units(units: Sequence[int]) -> int:
    h = 0
    for unit in units:
        h = (h * _MULTIPLIER + unit) & _MASK
    return _signed(h)


def string_hash(text: str) -> int:
    """h(0) = 0, h(i+1) = 31 * h(i) + c(i) mod 2^32, as signed int32"""
    return hash_units(code_units(text))


def kgram_hashes(units: Sequence[int], k: int) -> List[int]:
    """
    Hash every length-k window of a code unit sequence.

    Uses a rolling update, equal to hashing each window from scratch.
    """
    n = len(units)
    if n < k:
        return []

    top = pow(_MULTIPLIER, k - 1, 1 << 32)
    h = 0
    for unit in units[:k]:
        h = (h * _MULTIPLIER + unit) & _MASK
    hashes = [_signed(h)]
    for i in range(k, n):
        h = ((h - units[i - k] * top) * _MULTIPLIER + units[i]) & _MASK
        hashes.append(_signed(h))
    return hashes


def winnow(hashes: Sequence[int], w: int) -> List[int]:
    """
    Select fingerprints from k-gram hashes by robust winnowing.

    Each window of w hashes contributes its rightmost minimum, except that
    a previously recorded minimum still inside the window and still equal
    to the window minimum is kept without being recorded again. Fewer than
    w hashes form a single window.

    Args:
        hashes: k-gram hashes in text order
        w: Window size

    Returns:
        Recorded hashes in selection order
    """
    n = len(hashes)
    if n == 0:
        return []

    selected: List[int] = []
    chosen = -1
    for start in range(max(1, n - w + 1)):
        end = min(start + w, n)
        lowest = min(hashes[start:end])
        if chosen >= start and hashes[chosen] == lowest:
            continue
        chosen = end - 1
        while hashes[chosen] != lowest:
            chosen -= 1
        selected.append(lowest)
    return selected


def fingerprint(text: str, k: int, w: int) -> List[int]:
    """
    Sorted winnowed fingerprint of a normalized text.

    Texts of at most k code units fingerprint to their single hash.
    """
    units = code_units(text)
    if len(units) <= k:
        return [hash_units(units)]
    return sorted(winnow(kgram_hashes(units, k), w))
