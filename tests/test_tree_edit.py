#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CopyScan Test Suite - Tree Edit Distance Tests

Tests for post-order flattening and Zhang-Shasha distances on small
hand-checked trees.
"""

import pytest

from copyscan.tree_edit import build_tree_aux, tree_edit_distance

from conftest import leaf, make_tree


def distance(a, b):
    aux_a = build_tree_aux(make_tree(a))
    aux_b = build_tree_aux(make_tree(b))
    return tree_edit_distance(aux_a, aux_b)


class TestTreeAux:
    """Tests for build_tree_aux"""

    def test_postorder_arrays(self):
        # a(b(c, d), e)
        aux = build_tree_aux(
            make_tree(("a", [("b", [leaf("c"), leaf("d")]), leaf("e")]))
        )
        assert aux.labels == ["c", "d", "b", "e", "a"]
        assert aux.lmd == [0, 1, 0, 3, 0]
        assert aux.keyroots == [1, 3, 4]
        assert aux.size == 5

    def test_single_node(self):
        aux = build_tree_aux(make_tree(leaf("root")))
        assert aux.labels == ["root"]
        assert aux.lmd == [0]
        assert aux.keyroots == [0]

    def test_deep_chain(self):
        shape = leaf("x")
        for _ in range(5000):
            shape = ("n", [shape])
        aux = build_tree_aux(make_tree(shape))
        assert aux.size == 5001
        assert aux.labels[-1] == "n"
        assert aux.keyroots == [5000]
        assert all(l == 0 for l in aux.lmd)


class TestTreeEditDistance:
    """Tests for tree_edit_distance"""

    @pytest.mark.parametrize(
        "a,b,expected",
        [
            (leaf("a"), leaf("a"), 0),
            (leaf("a"), leaf("b"), 1),
            (leaf("a"), ("a", [leaf("b")]), 1),
            (("a", [leaf("b"), leaf("c")]), ("a", [leaf("c")]), 1),
            (("a", [("b", [leaf("c"), leaf("d")])]), ("a", [leaf("c"), leaf("d")]), 1),
            (("a", [leaf("b"), leaf("c")]), ("a", [leaf("c"), leaf("b")]), 2),
            (("a", [leaf("b"), leaf("c")]), ("x", [leaf("y"), leaf("z")]), 3),
        ],
    )
    def test_small_trees(self, a, b, expected):
        assert distance(a, b) == expected

    def test_classic_example(self):
        # f(d(a, c(b)), e) -> f(c(d(a, b)), e)
        t1 = ("f", [("d", [leaf("a"), ("c", [leaf("b")])]), leaf("e")])
        t2 = ("f", [("c", [("d", [leaf("a"), leaf("b")])]), leaf("e")])
        assert distance(t1, t2) == 2
        assert distance(t2, t1) == 2

    def test_size_difference_lower_bound(self):
        small = ("r", [leaf("a")])
        big = ("r", [leaf("a"), leaf("b"), ("c", [leaf("d"), leaf("e")])])
        assert distance(small, big) >= 6 - 2
        assert distance(small, big) == 4
