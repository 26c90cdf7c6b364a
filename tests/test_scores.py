#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CopyScan Test Suite - Score Table and Persistence Tests

Tests for ScoreTable and the save/load stream format.
"""

import io
import struct

import pytest

from copyscan.config import Comparator
from copyscan.errors import ScanFormatError
from copyscan.levenshtein import INFINITE
from copyscan.scores import ScoreTable, load_scores, save_scores


def make_table():
    table = ScoreTable(3, [Comparator.TOKEN_EDIT, Comparator.BYTE_EDIT])
    token = table[Comparator.TOKEN_EDIT]
    token[1] = 7
    token[2] = INFINITE
    table[Comparator.BYTE_EDIT][0] = 12
    table[Comparator.BYTE_EDIT][2] = 2**31 - 2
    return table


class TestScoreTable:
    """Tests for ScoreTable"""

    def test_vectors_start_at_zero(self):
        table = ScoreTable(4, [Comparator.MOSS])
        assert list(table[Comparator.MOSS]) == [0, 0, 0, 0]
        assert Comparator.MOSS in table
        assert Comparator.TREE_EDIT not in table
        assert table.get(Comparator.TREE_EDIT) is None

    def test_comparators_in_persistence_order(self):
        enabled = [Comparator.TREE_EDIT, Comparator.BYTE_EDIT, Comparator.MOSS]
        table = ScoreTable(1, enabled)
        assert table.comparators == [
            Comparator.MOSS,
            Comparator.BYTE_EDIT,
            Comparator.TREE_EDIT,
        ]

    def test_incomparable(self):
        table = make_table()
        assert table.is_incomparable(Comparator.TOKEN_EDIT, 2)
        assert not table.is_incomparable(Comparator.TOKEN_EDIT, 1)


class TestPersistence:
    """Tests for save_scores and load_scores"""

    def test_layout(self):
        stream = io.BytesIO()
        save_scores(stream, make_table(), b"BLOB")
        data = stream.getvalue()

        token = struct.pack(">3i", 0, 7, INFINITE)
        byte = struct.pack(">3i", 12, 0, 2**31 - 2)
        # MOSS, TOKEN_EDIT, AHU_ISO, BYTE_EDIT, blob
        expected = b"\x00\x01" + token + b"\x00\x01" + byte + b"BLOB"
        assert data == expected

    def test_round_trip(self):
        table = make_table()
        stream = io.BytesIO()
        save_scores(stream, table, b"\x00\x01report")
        stream.seek(0)

        loaded, blob = load_scores(stream, 3)
        assert loaded == table
        assert loaded.comparators == table.comparators
        assert blob == b"\x00\x01report"

    def test_empty_blob_and_no_pairs(self):
        table = ScoreTable(0, [Comparator.AHU_ISO])
        stream = io.BytesIO()
        save_scores(stream, table)
        assert stream.getvalue() == b"\x00\x00\x01\x00"
        stream.seek(0)
        loaded, blob = load_scores(stream, 0)
        assert loaded == table
        assert blob == b""

    def test_load_four_section_stream(self):
        data = b"\x01" + struct.pack(">2i", 3, 7) + b"\x00\x00\x00" + b"\x00report"
        loaded, blob = load_scores(io.BytesIO(data), 2)
        assert loaded.comparators == [Comparator.MOSS]
        assert list(loaded[Comparator.MOSS]) == [3, 7]
        assert blob == b"\x00report"

    def test_tree_edit_has_no_section(self):
        table = ScoreTable(2, [Comparator.TREE_EDIT])
        table[Comparator.TREE_EDIT][1] = 5
        stream = io.BytesIO()
        save_scores(stream, table, b"tail")
        assert stream.getvalue() == b"\x00\x00\x00\x00tail"

        stream.seek(0)
        loaded, blob = load_scores(stream, 2)
        assert loaded.comparators == []
        assert blob == b"tail"

    def test_truncated_section(self):
        stream = io.BytesIO()
        save_scores(stream, make_table())
        data = stream.getvalue()
        with pytest.raises(ScanFormatError, match="truncated"):
            load_scores(io.BytesIO(data[:10]), 3)

    def test_missing_sections(self):
        with pytest.raises(ScanFormatError, match="ends before"):
            load_scores(io.BytesIO(b"\x00\x00"), 3)

    def test_bad_flag(self):
        with pytest.raises(ScanFormatError, match="Invalid flag"):
            load_scores(io.BytesIO(b"\x07"), 3)
