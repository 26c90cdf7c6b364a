#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CopyScan - Progress Tracking

Shared progress counter for scan phases. Workers report finished units;
the observer is called under the tracker's lock so it always sees
monotonically increasing counts.
"""

import threading
from typing import Callable, Optional, Tuple

ProgressObserver = Callable[[str, int, int], None]


class ProgressTracker:
    """Per-phase completion counter with an optional observer"""

    def __init__(self, observer: Optional[ProgressObserver] = None):
        self.observer = observer
        self._lock = threading.Lock()
        self.phase: Optional[str] = None
        self.completed = 0
        self.total = 0
        self.phases_completed = 0

    def start_phase(self, phase: str, total: int):
        with self._lock:
            self.phase = phase
            self.completed = 0
            self.total = total
            self._notify()

    def advance(self, count: int = 1):
        """Record finished work units"""
        with self._lock:
            self.completed += count
            self._notify()

    def finish_phase(self):
        with self._lock:
            self.phases_completed += 1

    def snapshot(self) -> Tuple[Optional[str], int, int]:
        with self._lock:
            return self.phase, self.completed, self.total

    def _notify(self):
        if self.observer is not None:
            self.observer(self.phase, self.completed, self.total)
