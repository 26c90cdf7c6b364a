#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CopyScan - Error Types

Run-level failures raised by the similarity engine. Per-file problems
(unreadable files, lexer and parser errors) are not errors at this level:
they turn into missing artefacts and incomparable scores.
"""

from typing import List, Optional


class CopyScanError(Exception):
    """Base class for all copyscan errors"""


class ConfigError(CopyScanError, ValueError):
    """Invalid scan configuration, detected before any worker starts"""


class ScanCancelled(CopyScanError):
    """The scan was halted; no scores are delivered"""

    def __init__(self, phase: Optional[str] = None):
        self.phase = phase
        msg = "Scan cancelled"
        if phase:
            msg += f" during {phase}"
        super().__init__(msg)


class ScanFault(CopyScanError):
    """Too many input files could not be read"""

    def __init__(self, unreadable: List[str], total: int, limit: float):
        self.unreadable = list(unreadable)
        self.total = total
        self.limit = limit
        super().__init__(
            f"{len(self.unreadable)} of {total} files could not be read "
            f"(limit {limit:.0%})"
        )


class ScanFormatError(CopyScanError):
    """Saved scan stream is truncated or malformed"""


class SourceParseError(CopyScanError):
    """A source file could not be lexed or parsed cleanly"""

    def __init__(
        self, path: str, line: int, column: int, detail: str = "syntax error"
    ):
        self.path = path
        self.line = line
        self.column = column
        self.detail = detail
        super().__init__(f"{path}:{line}:{column}: {detail}")
