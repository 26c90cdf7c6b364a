#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CopyScan - Scan Configuration

Option records for a scan: which comparators run, how many worker threads
they use, how text is normalized, and the Moss winnowing parameters.
Configurations come from code, from a JSON document, or from the CLI.
"""

import json
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List

from .errors import ConfigError


class Comparator(Enum):
    """Similarity metrics the engine can compute for a pair"""

    BYTE_EDIT = "byte"
    TOKEN_EDIT = "token"
    MOSS = "moss"
    TREE_EDIT = "tree"
    AHU_ISO = "ahu"

    @property
    def title(self) -> str:
        return COMPARATOR_TITLES[self]

    @classmethod
    def parse(cls, name: str) -> "Comparator":
        """Look up a comparator by short name ("moss") or member name ("MOSS")"""
        key = str(name).strip()
        for member in cls:
            if key.lower() == member.value or key.upper() == member.name:
                return member
        choices = ", ".join(m.value for m in cls)
        raise ConfigError(f"Unknown comparator '{name}' (choose from {choices})")


COMPARATOR_TITLES = {
    Comparator.BYTE_EDIT: "Edit Distance",
    Comparator.TOKEN_EDIT: "Token Distance",
    Comparator.MOSS: "Moss",
    Comparator.TREE_EDIT: "AST Distance",
    Comparator.AHU_ISO: "AST Isomorphism",
}

# Execution and reporting order
COMPARATOR_ORDER = [
    Comparator.MOSS,
    Comparator.TOKEN_EDIT,
    Comparator.AHU_ISO,
    Comparator.BYTE_EDIT,
    Comparator.TREE_EDIT,
]

# Sections of a saved score stream; TREE_EDIT scores travel in the caller blob
PERSISTENCE_ORDER = COMPARATOR_ORDER[:4]


class NormalizerMode(Enum):
    """How a source file is turned into comparable text"""

    NONE = "none"
    WHITESPACE_ONLY = "whitespace"
    VARIABLES = "variables"

    @classmethod
    def parse(cls, name: str) -> "NormalizerMode":
        key = str(name).strip()
        for member in cls:
            if key.lower() == member.value or key.upper() == member.name:
                return member
        choices = ", ".join(m.value for m in cls)
        raise ConfigError(f"Unknown normalizer '{name}' (choose from {choices})")


DEFAULT_COMPARATORS = frozenset({Comparator.MOSS, Comparator.TOKEN_EDIT})
DEFAULT_K = 15
DEFAULT_W = 8
DEFAULT_UNREADABLE_FRACTION = 0.5


def default_threads() -> int:
    """Worker count when none is configured: one per CPU"""
    return os.cpu_count() or 1


@dataclass(frozen=True)
class MossConfig:
    """Winnowing parameters: k-gram size and window size"""

    k: int = DEFAULT_K
    w: int = DEFAULT_W


@dataclass
class ScanConfig:
    """Complete configuration record for one scan"""

    threads: int = field(default_factory=default_threads)
    enabled: FrozenSet[Comparator] = DEFAULT_COMPARATORS
    normalizer: NormalizerMode = NormalizerMode.VARIABLES
    moss: MossConfig = field(default_factory=MossConfig)
    max_unreadable_fraction: float = DEFAULT_UNREADABLE_FRACTION

    def __post_init__(self):
        self.enabled = frozenset(self.enabled)

    def validate(self) -> "ScanConfig":
        """
        Check every option, raising ConfigError on the first problem.

        Returns:
            self, so calls can be chained
        """
        if not _is_int(self.threads) or self.threads < 1:
            raise ConfigError(f"threads must be >= 1, got {self.threads!r}")
        if not self.enabled:
            raise ConfigError("No comparators enabled")
        for comparator in self.enabled:
            if not isinstance(comparator, Comparator):
                raise ConfigError(f"Not a comparator: {comparator!r}")
        if not isinstance(self.normalizer, NormalizerMode):
            raise ConfigError(f"Not a normalizer mode: {self.normalizer!r}")
        if not _is_int(self.moss.k) or self.moss.k < 1:
            raise ConfigError(f"Moss k must be >= 1, got {self.moss.k!r}")
        if not _is_int(self.moss.w) or self.moss.w < 1:
            raise ConfigError(f"Moss w must be >= 1, got {self.moss.w!r}")
        fraction = self.max_unreadable_fraction
        if isinstance(fraction, bool) or not isinstance(fraction, (int, float)):
            raise ConfigError("max_unreadable_fraction must be a number")
        if not 0.0 <= fraction <= 1.0:
            raise ConfigError(
                f"max_unreadable_fraction must be within [0, 1], got {fraction}"
            )
        return self

    def ordered_comparators(self) -> List[Comparator]:
        """Enabled comparators in execution order"""
        return [c for c in COMPARATOR_ORDER if c in self.enabled]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "threads": self.threads,
            "enabled": [c.value for c in self.ordered_comparators()],
            "normalizer": self.normalizer.value,
            "moss": {"k": self.moss.k, "w": self.moss.w},
            "max_unreadable_fraction": self.max_unreadable_fraction,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScanConfig":
        """
        Build a configuration from a JSON-style mapping.

        Missing keys keep their defaults; unknown keys are rejected.
        """
        if not isinstance(data, dict):
            raise ConfigError("Configuration must be a JSON object")

        known = {"threads", "enabled", "normalizer", "moss", "max_unreadable_fraction"}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

        config = cls()
        if "threads" in data:
            config.threads = data["threads"]
        if "enabled" in data:
            config.enabled = parse_comparators(data["enabled"])
        if "normalizer" in data:
            config.normalizer = NormalizerMode.parse(data["normalizer"])
        if "moss" in data:
            moss = data["moss"]
            if not isinstance(moss, dict) or set(moss) - {"k", "w"}:
                raise ConfigError("moss must be an object with keys k and w")
            config.moss = MossConfig(
                k=moss.get("k", DEFAULT_K), w=moss.get("w", DEFAULT_W)
            )
        if "max_unreadable_fraction" in data:
            config.max_unreadable_fraction = data["max_unreadable_fraction"]
        return config.validate()


def parse_comparators(names: Iterable[str]) -> FrozenSet[Comparator]:
    """Parse comparator names; a single string may be comma separated"""
    if isinstance(names, str):
        names = [n for n in names.split(",") if n.strip()]
    return frozenset(Comparator.parse(n) for n in names)


def load_config(path: str) -> ScanConfig:
    """Read a ScanConfig from a JSON file"""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (IOError, OSError) as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e
    return ScanConfig.from_dict(data)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
