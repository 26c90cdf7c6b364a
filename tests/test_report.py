#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CopyScan Test Suite - Ranking Report Tests

Tests for pair ranking and the text and JSON ranking writers.
"""

import io
import json

import pytest

from copyscan.config import Comparator
from copyscan.errors import ConfigError
from copyscan.levenshtein import INFINITE
from copyscan.pairs import ScanInputs
from copyscan.report import format_score, rank_pairs, write_ranking, write_ranking_json
from copyscan.scores import ScoreTable


@pytest.fixture
def inputs():
    return ScanInputs(
        files=["a.c", "b.c", "c.c", "d.c"], pairs=[(0, 1), (0, 2), (1, 2), (2, 3)]
    )


@pytest.fixture
def table():
    table = ScoreTable(4, [Comparator.MOSS, Comparator.TOKEN_EDIT])
    moss = table[Comparator.MOSS]
    token = table[Comparator.TOKEN_EDIT]
    for pid, (m, t) in enumerate([(5, 9), (2, 4), (5, 1), (0, INFINITE)]):
        moss[pid] = m
        token[pid] = t
    return table


class TestRankPairs:
    """Tests for rank_pairs"""

    def test_default_is_first_in_persistence_order(self, table):
        # moss ascending, tie between pairs 0 and 2 broken by token score
        assert rank_pairs(table) == [3, 1, 2, 0]

    def test_incomparable_sorts_last(self, table):
        assert rank_pairs(table, Comparator.TOKEN_EDIT) == [2, 1, 0, 3]

    def test_ties_fall_back_to_pair_id(self):
        table = ScoreTable(3, [Comparator.AHU_ISO])
        assert rank_pairs(table) == [0, 1, 2]

    def test_missing_comparator(self, table):
        with pytest.raises(ConfigError):
            rank_pairs(table, Comparator.TREE_EDIT)

    def test_empty_table(self):
        assert rank_pairs(ScoreTable(0)) == []


class TestWriters:
    """Tests for write_ranking and write_ranking_json"""

    def test_format_score(self):
        assert format_score(12) == "12"
        assert format_score(INFINITE) == "inf"

    def test_text_report(self, inputs, table):
        out = io.StringIO()
        write_ranking(out, inputs, table, rank_pairs(table), limit=2)
        assert out.getvalue() == (
            "Pair 1:\n"
            "  c.c\n"
            "  d.c\n"
            "  Moss: 0\n"
            "  Token Distance: inf\n"
            "\n"
            "Pair 2:\n"
            "  a.c\n"
            "  c.c\n"
            "  Moss: 2\n"
            "  Token Distance: 4\n"
            "\n"
        )

    def test_json_report(self, inputs, table):
        out = io.StringIO()
        write_ranking_json(out, inputs, table, rank_pairs(table))
        document = json.loads(out.getvalue())

        assert document["comparators"] == ["moss", "token"]
        assert document["pair_count"] == 4
        assert [p["pair"] for p in document["pairs"]] == [3, 1, 2, 0]
        first = document["pairs"][0]
        assert first["rank"] == 1
        assert (first["first"], first["second"]) == ("c.c", "d.c")
        assert first["scores"] == {"moss": 0, "token": None}
