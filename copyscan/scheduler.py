#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CopyScan - Striped Worker Pool

Runs one scan phase on a fixed number of threads. Worker t handles work
units t, t + T, t + 2T, ... so every output slot has exactly one writer
and no queue or per-item locking is needed. Workers check the halt flag
between units. A worker error stops the remaining stripes of its phase
without touching the halt flag.

Threads share one interpreter lock, so the pure Python kernels gain
little from extra workers; rapidfuzz and tree-sitter release it.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable

from .errors import ScanCancelled
from .progress import ProgressTracker

logger = logging.getLogger(__name__)


class StripedPool:
    """Fixed-size pool executing phases in striped order"""

    def __init__(
        self, threads: int, halt: threading.Event, progress: ProgressTracker
    ):
        self.threads = max(1, threads)
        self.halt = halt
        self.progress = progress

    def run(self, phase: str, count: int, work: Callable[[int], None]):
        """
        Call work(index) for every index in [0, count) and wait for all.

        Args:
            phase: Phase name reported to the progress tracker
            count: Number of work units
            work: Callable processing one unit

        Raises:
            ScanCancelled: if the halt flag was raised before the phase ended
        """
        if self.halt.is_set():
            raise ScanCancelled(phase)

        logger.debug("Phase %s: %d units on %d threads", phase, count, self.threads)
        self.progress.start_phase(phase, count)
        workers = min(self.threads, count)
        # Private to this phase; the caller's halt flag only means cancellation
        stop = threading.Event()

        if workers > 0:
            with ThreadPoolExecutor(
                max_workers=workers, thread_name_prefix="copyscan"
            ) as executor:
                futures = [
                    executor.submit(self._run_stripe, start, workers, count, work, stop)
                    for start in range(workers)
                ]
                try:
                    for future in as_completed(futures):
                        future.result()
                except KeyboardInterrupt:
                    logger.info("Interrupted, stopping workers")
                    self.halt.set()
                except BaseException:
                    # Stop the other stripes, then let the error through
                    stop.set()
                    raise

        if self.halt.is_set():
            logger.info("Scan cancelled during %s", phase)
            raise ScanCancelled(phase)

        self.progress.finish_phase()
        logger.debug("Phase %s finished", phase)

    def _run_stripe(self, start: int, step: int, count: int, work, stop):
        for index in range(start, count, step):
            if self.halt.is_set() or stop.is_set():
                return
            work(index)
            self.progress.advance()
