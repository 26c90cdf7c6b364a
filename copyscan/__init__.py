# CopyScan Python Package

__version__ = "1.0.0"

from .config import (
    COMPARATOR_ORDER,
    PERSISTENCE_ORDER,
    Comparator,
    MossConfig,
    NormalizerMode,
    ScanConfig,
    load_config,
)
from .driver import run_scan
from .errors import (
    ConfigError,
    CopyScanError,
    ScanCancelled,
    ScanFault,
    ScanFormatError,
    SourceParseError,
)
from .fingerprint import fingerprint, string_hash
from .levenshtein import INFINITE, edit_distance
from .pairs import FilePair, ScanEntry, ScanEntryType, ScanInputs, generate_pairs
from .report import rank_pairs, write_ranking, write_ranking_json
from .scores import ScoreTable, load_scores, save_scores

__all__ = [
    "run_scan",
    "ScanConfig",
    "MossConfig",
    "Comparator",
    "NormalizerMode",
    "COMPARATOR_ORDER",
    "PERSISTENCE_ORDER",
    "load_config",
    "ScoreTable",
    "save_scores",
    "load_scores",
    "FilePair",
    "ScanEntry",
    "ScanEntryType",
    "ScanInputs",
    "generate_pairs",
    "rank_pairs",
    "write_ranking",
    "write_ranking_json",
    "fingerprint",
    "string_hash",
    "edit_distance",
    "INFINITE",
    "CopyScanError",
    "ConfigError",
    "ScanCancelled",
    "ScanFault",
    "ScanFormatError",
    "SourceParseError",
]
