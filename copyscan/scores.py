#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CopyScan - Score Table and Persistence

Dense int32 score vectors, one per enabled comparator, indexed by pair id.

Saved stream layout, one section per comparator in the order MOSS,
TOKEN_EDIT, AHU_ISO, BYTE_EDIT:

    enabled flag    1 byte (0 or 1)
    scores          pair_count x int32 big-endian, only if enabled

followed by an opaque caller blob running to the end of the stream. TREE_EDIT
has no section of its own; callers that keep those scores put them in the blob.
"""

import struct
from array import array
from typing import BinaryIO, Dict, Iterable, List, Optional, Tuple

from .config import COMPARATOR_ORDER, PERSISTENCE_ORDER, Comparator
from .errors import ScanFormatError
from .levenshtein import INFINITE


class ScoreTable:
    """Per-comparator score vectors aligned with the pair list"""

    def __init__(self, pair_count: int, comparators: Iterable[Comparator] = ()):
        self.pair_count = pair_count
        self._scores: Dict[Comparator, array] = {}
        for comparator in comparators:
            self.enable(comparator)

    def enable(self, comparator: Comparator) -> array:
        """Allocate (or return) the zeroed vector for a comparator"""
        if comparator not in self._scores:
            self._scores[comparator] = array("i", [0]) * self.pair_count
        return self._scores[comparator]

    @property
    def comparators(self) -> List[Comparator]:
        """Comparators with scores, in reporting order"""
        return [c for c in COMPARATOR_ORDER if c in self._scores]

    def __contains__(self, comparator: Comparator) -> bool:
        return comparator in self._scores

    def __getitem__(self, comparator: Comparator) -> array:
        return self._scores[comparator]

    def get(self, comparator: Comparator) -> Optional[array]:
        return self._scores.get(comparator)

    def score(self, comparator: Comparator, pid: int) -> int:
        return self._scores[comparator][pid]

    def is_incomparable(self, comparator: Comparator, pid: int) -> bool:
        return self._scores[comparator][pid] == INFINITE

    def __eq__(self, other) -> bool:
        if not isinstance(other, ScoreTable):
            return NotImplemented
        return self.pair_count == other.pair_count and self._scores == other._scores

    def __repr__(self) -> str:
        names = ", ".join(c.value for c in self.comparators)
        return f"ScoreTable(pairs={self.pair_count}, comparators=[{names}])"


def save_scores(stream: BinaryIO, table: ScoreTable, blob: bytes = b""):
    """
    Write a score table and caller blob to a binary stream.

    Only the PERSISTENCE_ORDER sections are written; TREE_EDIT scores, if any,
    are left to the caller blob.
    """
    for comparator in PERSISTENCE_ORDER:
        scores = table.get(comparator)
        if scores is None:
            stream.write(b"\x00")
            continue
        stream.write(b"\x01")
        stream.write(struct.pack(f">{table.pair_count}i", *scores))
    stream.write(blob)


def load_scores(stream: BinaryIO, pair_count: int) -> Tuple[ScoreTable, bytes]:
    """
    Read a stream written by save_scores.

    Args:
        stream: Binary stream positioned at the first section
        pair_count: Number of pairs the table was saved with

    Returns:
        (score table, caller blob)

    Raises:
        ScanFormatError: on a truncated stream or an invalid section flag
    """
    table = ScoreTable(pair_count)
    size = 4 * pair_count

    for comparator in PERSISTENCE_ORDER:
        flag = stream.read(1)
        if len(flag) != 1:
            raise ScanFormatError(f"Stream ends before the {comparator.title} section")
        if flag == b"\x00":
            continue
        if flag != b"\x01":
            raise ScanFormatError(
                f"Invalid flag {flag[0]:#04x} for the {comparator.title} section"
            )

        data = stream.read(size)
        if len(data) != size:
            raise ScanFormatError(
                f"{comparator.title} section truncated: "
                f"expected {size} bytes, got {len(data)}"
            )
        scores = table.enable(comparator)
        scores[:] = array("i", struct.unpack(f">{pair_count}i", data))

    return table, stream.read()
