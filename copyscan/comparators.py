#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CopyScan - Comparators

Each comparator turns a file into a private artefact once (preprocess)
and scores a pair of artefacts (compare). Lower scores mean more similar;
INFINITE marks a pair where one side has no artefact.
"""

from typing import Dict, List, Optional

from .config import Comparator, ScanConfig
from .fingerprint import fingerprint
from .isomorphism import canonical_name
from .levenshtein import INFINITE, edit_distance
from .normalizer import normalize_file
from .tree_edit import TreeAux, build_tree_aux, tree_edit_distance


class BaseComparator:
    """Common interface of all comparators"""

    kind: Comparator

    def __init__(self, config: ScanConfig):
        self.config = config

    @property
    def name(self) -> str:
        return self.kind.title

    def preprocess(self, ctx, fid: int):
        """Build the artefact for file fid of the scan context"""
        raise NotImplementedError

    def compare(self, a, b) -> int:
        """Score two artefacts"""
        raise NotImplementedError


class ByteEditComparator(BaseComparator):
    """Levenshtein distance between normalized file texts"""

    kind = Comparator.BYTE_EDIT

    def preprocess(self, ctx, fid: int) -> bytes:
        return normalize_file(ctx.files[fid], self.config.normalizer, ctx.cache)

    def compare(self, a: bytes, b: bytes) -> int:
        return edit_distance(a, b)


class TokenEditComparator(BaseComparator):
    """Levenshtein distance between token type sequences"""

    kind = Comparator.TOKEN_EDIT

    def preprocess(self, ctx, fid: int) -> Optional[List[int]]:
        parsed = ctx.cache.parse(ctx.files[fid])
        return parsed.token_kinds() if parsed is not None else None

    def compare(self, a: Optional[List[int]], b: Optional[List[int]]) -> int:
        if a is None or b is None:
            return INFINITE
        return edit_distance(a, b)


class MossComparator(BaseComparator):
    """Levenshtein distance between sorted winnowed fingerprints"""

    kind = Comparator.MOSS

    def preprocess(self, ctx, fid: int) -> List[int]:
        text = normalize_file(ctx.files[fid], self.config.normalizer, ctx.cache)
        moss = self.config.moss
        return fingerprint(text.decode("utf-8", "replace"), moss.k, moss.w)

    def compare(self, a: List[int], b: List[int]) -> int:
        return edit_distance(a, b)


class TreeEditComparator(BaseComparator):
    """Zhang-Shasha edit distance between parse trees"""

    kind = Comparator.TREE_EDIT

    def preprocess(self, ctx, fid: int) -> Optional[TreeAux]:
        parsed = ctx.cache.parse(ctx.files[fid])
        return build_tree_aux(parsed.tree) if parsed is not None else None

    def compare(self, a: Optional[TreeAux], b: Optional[TreeAux]) -> int:
        if a is None or b is None:
            return INFINITE
        return tree_edit_distance(a, b)


class IsomorphismComparator(BaseComparator):
    """0 when both parse trees have the same shape, 1 otherwise"""

    kind = Comparator.AHU_ISO

    def preprocess(self, ctx, fid: int) -> Optional[str]:
        parsed = ctx.cache.parse(ctx.files[fid])
        return canonical_name(parsed.tree) if parsed is not None else None

    def compare(self, a: Optional[str], b: Optional[str]) -> int:
        if a is None or b is None:
            return INFINITE
        return 0 if a == b else 1


COMPARATOR_CLASSES: Dict[Comparator, type] = {
    cls.kind: cls
    for cls in (
        ByteEditComparator,
        TokenEditComparator,
        MossComparator,
        TreeEditComparator,
        IsomorphismComparator,
    )
}


def build_comparators(config: ScanConfig) -> List[BaseComparator]:
    """Instantiate the enabled comparators in execution order"""
    return [COMPARATOR_CLASSES[c](config) for c in config.ordered_comparators()]
