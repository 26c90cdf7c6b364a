#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CopyScan - Tree Isomorphism

AHU canonical names for rooted trees. A node's name is "1", the sorted
concatenation of its children's names, then "0". Labels are ignored, so
two trees get the same name exactly when they have the same shape up to
reordering of siblings.
"""

from typing import List, Optional

from .syntax import SyntaxTree


def canonical_name(tree: SyntaxTree) -> str:
    """Canonical name of the whole tree"""
    names: List[Optional[str]] = [None] * tree.size
    # Pre-order storage puts every child after its parent
    for node in range(tree.size - 1, -1, -1):
        kids = tree.children[node]
        parts = sorted(names[c] for c in kids)
        for c in kids:
            names[c] = None
        names[node] = "1" + "".join(parts) + "0"
    return names[0] if names else ""
