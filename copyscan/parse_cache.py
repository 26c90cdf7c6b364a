#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CopyScan - Source and Parse Cache

Per-scan memo of file contents and parse results. Every comparator that
needs the bytes, tokens or tree of a file goes through this cache, so each
file is read and parsed at most once per scan no matter how many
comparators are enabled. Failures are cached too and logged only once.
"""

import logging
import threading
from typing import Dict, List, Optional

from .errors import SourceParseError
from .languages import language_for_path
from .syntax import ParsedSource, parse_source

logger = logging.getLogger(__name__)


class ParseCache:
    """Thread-safe memo of file bytes and ParsedSource results keyed by path"""

    def __init__(self):
        self._lock = threading.Lock()
        self._contents: Dict[str, Optional[bytes]] = {}
        self._parsed: Dict[str, Optional[ParsedSource]] = {}
        self._unreadable: Dict[str, str] = {}
        self._unparsed: Dict[str, str] = {}

    def read(self, path: str) -> Optional[bytes]:
        """
        Return the raw bytes of a file.

        Returns:
            File contents, or None if the file cannot be read
        """
        with self._lock:
            if path in self._contents:
                return self._contents[path]

        try:
            with open(path, "rb") as f:
                data = f.read()
        except (IOError, OSError) as e:
            data = None
            reason = e.strerror or str(e)
            logger.warning("Cannot read %s: %s", path, reason)
            with self._lock:
                self._unreadable[path] = reason

        with self._lock:
            self._contents[path] = data
        return data

    def parse(self, path: str) -> Optional[ParsedSource]:
        """
        Return the tokens and parse tree of a file.

        Returns:
            ParsedSource, or None when the file is unreadable, has no
            supported language, or does not lex and parse cleanly
        """
        with self._lock:
            if path in self._parsed:
                return self._parsed[path]

        parsed = None
        spec = language_for_path(path)
        data = self.read(path)
        if spec is None:
            self._mark_unparsed(path, "no lexer for this file type")
        elif data is not None:
            try:
                parsed = parse_source(path, data.decode("utf-8", "replace"), spec)
            except SourceParseError as e:
                self._mark_unparsed(path, str(e))
                logger.warning("%s parse failed: %s", spec.name, e)

        with self._lock:
            self._parsed[path] = parsed
        return parsed

    def _mark_unparsed(self, path: str, reason: str):
        with self._lock:
            self._unparsed[path] = reason
        logger.debug("No syntax artefacts for %s: %s", path, reason)

    @property
    def unreadable(self) -> List[str]:
        """Paths that could not be read, sorted"""
        with self._lock:
            return sorted(self._unreadable)

    @property
    def unparsed(self) -> Dict[str, str]:
        """Paths without tokens or tree, mapped to the reason"""
        with self._lock:
            return dict(self._unparsed)

    def clear(self):
        """Drop every cached entry"""
        with self._lock:
            self._contents.clear()
            self._parsed.clear()
            self._unreadable.clear()
            self._unparsed.clear()
