#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CopyScan - Scan Inputs

File discovery and pair generation. Scan entries name a directory (or a
single file) plus a file name pattern; matched files are paired up
according to the entry kind and turned into the dense file and pair
arrays the engine works on.
"""

import fnmatch
import os
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Set, Tuple

from .errors import ConfigError


@dataclass(frozen=True, order=True)
class FilePair:
    """Unordered pair of distinct files, stored with the smaller path first"""

    first: str
    second: str

    def __post_init__(self):
        if self.first == self.second:
            raise ValueError(f"A file cannot be paired with itself: {self.first}")
        if self.first > self.second:
            first, second = self.second, self.first
            object.__setattr__(self, "first", first)
            object.__setattr__(self, "second", second)

    def __str__(self) -> str:
        return f"{{{self.first}, {self.second}}}"


class ScanEntryType(Enum):
    """How the files of an entry are paired"""

    NORMAL = "normal"  # against every other file
    OLD_SEMESTER = "old"  # only against files of other entries
    SINGLE_FILE = "single"  # the path itself, against every other file


@dataclass
class ScanEntry:
    """One source of files for a scan"""

    path: str
    pattern: str = ""
    kind: ScanEntryType = ScanEntryType.NORMAL
    is_regex: bool = False

    def matches(self, name: str) -> bool:
        """Whether a bare file name is selected by this entry's pattern"""
        if self.is_regex:
            return re.fullmatch(self.pattern, name) is not None
        return fnmatch.fnmatchcase(name, self.pattern)

    def files(self) -> List[str]:
        """
        Find the files of this entry.

        Returns:
            Absolute paths, sorted. Directories are searched recursively.
        """
        if self.kind is ScanEntryType.SINGLE_FILE:
            return [os.path.abspath(self.path)]

        if self.is_regex:
            try:
                re.compile(self.pattern)
            except re.error as e:
                raise ConfigError(f"Invalid regex '{self.pattern}': {e}") from e
        if not os.path.isdir(self.path):
            raise ConfigError(f"Not a directory: {self.path}")

        found = []
        for root, dirs, names in os.walk(self.path):
            dirs.sort()
            for name in names:
                if self.matches(name):
                    found.append(os.path.abspath(os.path.join(root, name)))
        return sorted(found)


def generate_pairs(entries: Iterable[ScanEntry]) -> Set[FilePair]:
    """
    Build the deduplicated pair set for a list of scan entries.

    Files of NORMAL and SINGLE_FILE entries are paired with every other
    file; OLD_SEMESTER files are never paired with each other.
    """
    left: List[str] = []
    right: List[str] = []
    for entry in entries:
        files = entry.files()
        left.extend(files)
        if entry.kind is not ScanEntryType.OLD_SEMESTER:
            right.extend(files)

    pairs = set()
    for a in left:
        for b in right:
            if a != b:
                pairs.add(FilePair(a, b))
    return pairs


@dataclass
class ScanInputs:
    """Dense file and pair arrays for one scan"""

    files: List[str] = field(default_factory=list)
    pairs: List[Tuple[int, int]] = field(default_factory=list)

    def __post_init__(self):
        self._index: Dict[str, int] = {path: i for i, path in enumerate(self.files)}

    @classmethod
    def from_pairs(cls, pairs: Iterable[FilePair]) -> "ScanInputs":
        """Number files in path order and pairs in (first, second) order"""
        ordered = sorted(set(pairs))
        files = sorted({p.first for p in ordered} | {p.second for p in ordered})
        index = {path: i for i, path in enumerate(files)}
        return cls(
            files=files, pairs=[(index[p.first], index[p.second]) for p in ordered]
        )

    @classmethod
    def from_entries(cls, entries: Iterable[ScanEntry]) -> "ScanInputs":
        return cls.from_pairs(generate_pairs(entries))

    @property
    def file_count(self) -> int:
        return len(self.files)

    @property
    def pair_count(self) -> int:
        return len(self.pairs)

    def index_of(self, path: str) -> int:
        return self._index[path]

    def pair_paths(self, pid: int) -> Tuple[str, str]:
        a, b = self.pairs[pid]
        return self.files[a], self.files[b]

    def file_pair(self, pid: int) -> FilePair:
        return FilePair(*self.pair_paths(pid))
