#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CopyScan - Scan Context

All state belonging to one scan: inputs, configuration, the per-file
cache, the halt flag, progress and the worker pool. Created per run and
closed when the run ends, which empties the cache.
"""

import threading
from typing import List, Optional, Sequence, Tuple

from .config import ScanConfig
from .errors import ConfigError, ScanFault
from .parse_cache import ParseCache
from .progress import ProgressObserver, ProgressTracker
from .scheduler import StripedPool


class ScanContext:
    """State shared by the phases of a single scan"""

    def __init__(
        self,
        files: Sequence[str],
        pairs: Sequence[Tuple[int, int]],
        config: ScanConfig,
        observer: Optional[ProgressObserver] = None,
        halt: Optional[threading.Event] = None,
    ):
        self.files: List[str] = list(files)
        self.pairs: List[Tuple[int, int]] = [tuple(p) for p in pairs]
        self.config = config
        self.cache = ParseCache()
        self.halt = halt if halt is not None else threading.Event()
        self.progress = ProgressTracker(observer)
        self.pool = StripedPool(config.threads, self.halt, self.progress)
        self._check_pairs()

    def _check_pairs(self):
        count = len(self.files)
        for pid, (a, b) in enumerate(self.pairs):
            if not (0 <= a < count and 0 <= b < count):
                raise ConfigError(f"Pair {pid} refers to a file id out of range")
            if a == b:
                raise ConfigError(f"Pair {pid} pairs file {a} with itself")

    @property
    def file_count(self) -> int:
        return len(self.files)

    @property
    def pair_count(self) -> int:
        return len(self.pairs)

    @property
    def unreadable(self) -> List[str]:
        return self.cache.unreadable

    def check_unreadable(self):
        """Raise ScanFault if too large a share of the files could not be read"""
        unreadable = self.unreadable
        limit = self.config.max_unreadable_fraction
        if self.files and len(unreadable) > limit * len(self.files):
            raise ScanFault(unreadable, len(self.files), limit)

    def close(self):
        self.cache.clear()

    def __enter__(self) -> "ScanContext":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
