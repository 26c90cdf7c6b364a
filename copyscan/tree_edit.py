#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CopyScan - Tree Edit Distance

Zhang-Shasha ordered tree edit distance with unit costs. Each tree is
first flattened into post-order arrays (TreeAux); the distance then runs
a forest-distance table for every pair of key roots.
"""

from array import array
from dataclasses import dataclass
from typing import List

from .syntax import SyntaxTree


@dataclass
class TreeAux:
    """
    Post-order view of a tree for Zhang-Shasha.

    labels[i] is the label of the i-th node in post-order (the root is
    last), lmd[i] the post-order index of its leftmost leaf descendant,
    keyroots the ascending post-order indices of the root and of every
    node that is not its parent's first child.
    """

    labels: List[str]
    lmd: List[int]
    keyroots: List[int]

    @property
    def size(self) -> int:
        return len(self.labels)


def build_tree_aux(tree: SyntaxTree) -> TreeAux:
    """Compute post-order labels, leftmost descendants and key roots"""
    size = tree.size
    children = tree.children

    order: List[int] = []
    stack = [(0, False)]
    while stack:
        node, expanded = stack.pop()
        if expanded:
            order.append(node)
            continue
        stack.append((node, True))
        for child in reversed(children[node]):
            stack.append((child, False))

    post = [0] * size
    for index, node in enumerate(order):
        post[node] = index

    lmd = [0] * size
    for index, node in enumerate(order):
        kids = children[node]
        # First child precedes its parent in post-order
        lmd[index] = lmd[post[kids[0]]] if kids else index

    keyroots = []
    for index, node in enumerate(order):
        parent = tree.parents[node]
        if parent < 0 or children[parent][0] != node:
            keyroots.append(index)

    labels = [tree.labels[node] for node in order]
    return TreeAux(labels=labels, lmd=lmd, keyroots=keyroots)


def tree_edit_distance(a: TreeAux, b: TreeAux) -> int:
    """
    Minimum number of node inserts, deletes and relabels turning a into b.

    Args:
        a: First tree
        b: Second tree

    Returns:
        Edit distance between the two trees
    """
    la, lb = a.lmd, b.lmd
    labels_a, labels_b = a.labels, b.labels
    tdist = [array("i", [0]) * b.size for _ in range(a.size)]

    for p in a.keyroots:
        lp = la[p]
        for q in b.keyroots:
            lq = lb[q]
            cols = q - lq + 2

            fdist = [list(range(cols))]
            for i in range(1, p - lp + 2):
                fdist.append([i] + [0] * (cols - 1))

            for k in range(lp, p + 1):
                i = k - lp + 1
                row = fdist[i]
                above = fdist[i - 1]
                lk = la[k]
                tree_row = tdist[k]
                label_k = labels_a[k]
                for l in range(lq, q + 1):
                    j = l - lq + 1
                    ll = lb[l]
                    if lk == lp and ll == lq:
                        cost = 0 if label_k == labels_b[l] else 1
                        d = min(above[j - 1] + cost, above[j] + 1, row[j - 1] + 1)
                        tree_row[l] = d
                        row[j] = d
                    else:
                        d = fdist[lk - lp][ll - lq] + tree_row[l]
                        row[j] = min(d, above[j] + 1, row[j - 1] + 1)

    return tdist[a.size - 1][b.size - 1]
