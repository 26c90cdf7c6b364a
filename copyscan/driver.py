#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CopyScan - Scan Driver

Runs the enabled comparators one after another. Each comparator gets two
phases on the worker pool: preprocessing (one unit per file, building the
comparator's artefact) and comparison (one unit per pair, writing one
score). Phases never overlap.
"""

import logging
import threading
from typing import Optional, Sequence, Tuple

from .comparators import BaseComparator, build_comparators
from .config import ScanConfig
from .context import ScanContext
from .progress import ProgressObserver
from .scores import ScoreTable

logger = logging.getLogger(__name__)


class ScanDriver:
    """Two-phase pipeline over a ScanContext"""

    def __init__(self, ctx: ScanContext):
        self.ctx = ctx
        self.comparators = build_comparators(ctx.config)

    def run(self) -> ScoreTable:
        """
        Score every pair with every enabled comparator.

        Returns:
            Complete score table

        Raises:
            ScanCancelled: if the halt flag is raised; no scores are returned
            ScanFault: if too many files cannot be read
        """
        ctx = self.ctx
        table = ScoreTable(ctx.pair_count, ctx.config.ordered_comparators())
        logger.debug(
            "Scanning %d files, %d pairs with %s",
            ctx.file_count,
            ctx.pair_count,
            ", ".join(c.name for c in self.comparators),
        )
        for comparator in self.comparators:
            self.run_comparator(comparator, table)
        return table

    def run_comparator(self, comparator: BaseComparator, table: ScoreTable):
        ctx = self.ctx
        artefacts = [None] * ctx.file_count

        def preprocess(fid: int):
            artefacts[fid] = comparator.preprocess(ctx, fid)

        ctx.pool.run(f"{comparator.name} preprocessing", ctx.file_count, preprocess)
        ctx.check_unreadable()

        scores = table[comparator.kind]
        pairs = ctx.pairs

        def compare(pid: int):
            a, b = pairs[pid]
            scores[pid] = comparator.compare(artefacts[a], artefacts[b])

        ctx.pool.run(f"{comparator.name} comparison", ctx.pair_count, compare)


def run_scan(
    files: Sequence[str],
    pairs: Sequence[Tuple[int, int]],
    config: ScanConfig,
    observer: Optional[ProgressObserver] = None,
    halt: Optional[threading.Event] = None,
) -> ScoreTable:
    """
    Score a pair list.

    Args:
        files: Paths indexed by file id
        pairs: (file id, file id) tuples indexed by pair id
        config: Scan configuration, validated before any work starts
        observer: Called as observer(phase, completed, total)
        halt: Event that cancels the scan when set

    Returns:
        ScoreTable with one vector per enabled comparator
    """
    config.validate()
    with ScanContext(files, pairs, config, observer=observer, halt=halt) as ctx:
        return ScanDriver(ctx).run()
