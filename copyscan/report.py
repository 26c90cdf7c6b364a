#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CopyScan - Ranking Reports

Orders pairs by one comparator's score, most similar first, and writes
the ranking as plain text or JSON. Incomparable pairs sort last.
"""

import json
from typing import Any, Dict, List, Optional, TextIO

from .config import Comparator
from .errors import ConfigError
from .levenshtein import INFINITE
from .pairs import ScanInputs
from .scores import ScoreTable


def format_score(value: int) -> str:
    return "inf" if value == INFINITE else str(value)


def rank_pairs(table: ScoreTable, comparator: Optional[Comparator] = None) -> List[int]:
    """
    Rank pair ids by ascending score.

    Args:
        table: Scores of a finished scan
        comparator: Primary sort key; defaults to the first comparator of
            the table in persistence order

    Returns:
        Pair ids; ties are broken by the remaining comparators in
        persistence order, then by pair id
    """
    order = table.comparators
    if not order:
        return []
    if comparator is None:
        comparator = order[0]
    if comparator not in table:
        raise ConfigError(f"No {comparator.title} scores to rank by")

    keys = [table[comparator]] + [table[c] for c in order if c is not comparator]
    return sorted(
        range(table.pair_count), key=lambda pid: [k[pid] for k in keys] + [pid]
    )


def ranking_entries(
    inputs: ScanInputs,
    table: ScoreTable,
    ranking: List[int],
    limit: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """Build one record per ranked pair: rank, both paths and all scores"""
    if limit is not None:
        ranking = ranking[:limit]

    entries = []
    for rank, pid in enumerate(ranking, 1):
        first, second = inputs.pair_paths(pid)
        entries.append(
            {
                "rank": rank,
                "pair": pid,
                "first": first,
                "second": second,
                "scores": {c: table.score(c, pid) for c in table.comparators},
            }
        )
    return entries


def write_ranking(
    stream: TextIO,
    inputs: ScanInputs,
    table: ScoreTable,
    ranking: List[int],
    limit: Optional[int] = None,
):
    """Write the ranking as text, one block per pair"""
    for entry in ranking_entries(inputs, table, ranking, limit):
        stream.write(f"Pair {entry['rank']}:\n")
        stream.write(f"  {entry['first']}\n")
        stream.write(f"  {entry['second']}\n")
        for comparator, value in entry["scores"].items():
            stream.write(f"  {comparator.title}: {format_score(value)}\n")
        stream.write("\n")


def write_ranking_json(
    stream: TextIO,
    inputs: ScanInputs,
    table: ScoreTable,
    ranking: List[int],
    limit: Optional[int] = None,
):
    """Write the ranking as JSON; incomparable scores become null"""
    pairs = []
    for entry in ranking_entries(inputs, table, ranking, limit):
        entry["scores"] = {
            c.value: (None if v == INFINITE else v) for c, v in entry["scores"].items()
        }
        pairs.append(entry)

    document = {
        "comparators": [c.value for c in table.comparators],
        "file_count": inputs.file_count,
        "pair_count": inputs.pair_count,
        "pairs": pairs,
    }
    json.dump(document, stream, indent=2)
    stream.write("\n")
