#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CopyScan Test Suite - Scan Driver Tests

End-to-end scans over small source files: the literal boundary scenarios,
determinism, cancellation and failure handling.
"""

import os
import threading
from unittest.mock import patch

import pytest

from copyscan.comparators import build_comparators
from copyscan.config import Comparator, MossConfig, NormalizerMode, ScanConfig
from copyscan.context import ScanContext
from copyscan.driver import run_scan
from copyscan.errors import ConfigError, ScanCancelled, ScanFault
from copyscan.levenshtein import INFINITE
from copyscan.parse_cache import ParseCache

from conftest import ALL_COMPARATORS, SAMPLE_C, SAMPLE_C_RENAMED, SAMPLE_JAVA


def scan_two(make_file, first, second, config, names=("a/main.c", "b/main.c")):
    """Scan a single pair and return {comparator: score}"""
    files = [make_file(names[0], first), make_file(names[1], second)]
    table = run_scan(files, [(0, 1)], config)
    return {c: table.score(c, 0) for c in table.comparators}


class TestBoundaryScenarios:
    """Literal scenarios with known scores"""

    def test_identical_files(self, make_file, all_config):
        src = "int main(){return 0;}"
        scores = scan_two(make_file, src, src, all_config)
        assert scores == {c: 0 for c in ALL_COMPARATORS}

    def test_renamed_variable(self, make_file, all_config):
        scores = scan_two(make_file, "int x=1;", "int y=1;", all_config)
        assert scores[Comparator.TOKEN_EDIT] == 0
        assert scores[Comparator.MOSS] == 0
        assert scores[Comparator.TREE_EDIT] == 0
        assert scores[Comparator.AHU_ISO] == 0

    def test_renamed_variable_raw_bytes(self, make_file):
        config = ScanConfig(
            threads=1, enabled={Comparator.BYTE_EDIT}, normalizer=NormalizerMode.NONE
        )
        scores = scan_two(make_file, "int x=1;", "int y=1;", config)
        assert scores[Comparator.BYTE_EDIT] == 1

    def test_macro_inlined(self, make_file, all_config):
        macro = "#define N 10\nint a[N];\n"
        scores = scan_two(make_file, macro, "int a[10];\n", all_config)
        assert scores[Comparator.MOSS] == 0
        assert scores[Comparator.BYTE_EDIT] == 0

    def test_unparseable_file(self, make_file, all_config):
        scores = scan_two(make_file, "@@@ this is { not code", SAMPLE_C, all_config)
        assert scores[Comparator.TOKEN_EDIT] == INFINITE
        assert scores[Comparator.TREE_EDIT] == INFINITE
        assert scores[Comparator.AHU_ISO] == INFINITE
        assert 0 < scores[Comparator.BYTE_EDIT] < INFINITE
        assert 0 < scores[Comparator.MOSS] < INFINITE

    def test_empty_versus_hello(self, make_file):
        config = ScanConfig(
            threads=2, enabled={Comparator.BYTE_EDIT}, normalizer=NormalizerMode.NONE
        )
        names = ("empty.txt", "hello.txt")
        scores = scan_two(make_file, "", "hello", config, names=names)
        assert scores[Comparator.BYTE_EDIT] == 5

    def test_text_of_exactly_k(self, make_file):
        config = ScanConfig(
            threads=2,
            enabled={Comparator.MOSS},
            normalizer=NormalizerMode.WHITESPACE_ONLY,
            moss=MossConfig(k=15, w=8),
        )
        names = ("a.txt", "b.txt")
        scores = scan_two(
            make_file, "abcdefg hijklmno\n", "ABCDEFG\tHIJKLMNO", config, names=names
        )
        assert scores[Comparator.MOSS] == 0


class TestScanProperties:
    """Invariants over whole scans"""

    @pytest.fixture
    def corpus(self, make_file):
        return [
            make_file("s1/main.c", SAMPLE_C),
            make_file("s2/main.c", SAMPLE_C_RENAMED),
            make_file("s3/main.c", "int main(void) { return 1; }\n"),
            make_file("s4/Counter.java", SAMPLE_JAVA),
        ]

    def all_pairs(self, count):
        return [(a, b) for a in range(count) for b in range(a + 1, count)]

    def test_scores_non_negative(self, corpus, all_config):
        table = run_scan(corpus, self.all_pairs(4), all_config)
        for comparator in table.comparators:
            assert all(score >= 0 for score in table[comparator])

    def test_renamed_copy_is_closest(self, corpus, all_config):
        table = run_scan(corpus, self.all_pairs(4), all_config)
        token = table[Comparator.TOKEN_EDIT]
        assert token[0] == 0
        assert token[0] < min(token[1:])

    def test_deterministic_across_thread_counts(self, corpus):
        pairs = self.all_pairs(4)
        one = run_scan(corpus, pairs, ScanConfig(threads=1, enabled=ALL_COMPARATORS))
        many = run_scan(corpus, pairs, ScanConfig(threads=3, enabled=ALL_COMPARATORS))
        assert one == many

    def test_swapping_files_keeps_scores(self, corpus, all_config):
        forward = run_scan(corpus[:2], [(0, 1)], all_config)
        backward = run_scan([corpus[1], corpus[0]], [(0, 1)], all_config)
        assert forward == backward

    def test_self_comparison_is_zero(self, corpus, all_config):
        with ScanContext(corpus, [], all_config) as ctx:
            for comparator in build_comparators(all_config):
                for fid in range(len(corpus)):
                    artefact = comparator.preprocess(ctx, fid)
                    assert comparator.compare(artefact, artefact) == 0

    def test_tree_distance_bounded_by_size_difference(self, corpus):
        config = ScanConfig(threads=1, enabled={Comparator.TREE_EDIT})
        with ScanContext(corpus, [], config) as ctx:
            trees = [ctx.cache.parse(path).tree for path in corpus]
        table = run_scan(corpus, self.all_pairs(4), config)
        for pid, (a, b) in enumerate(self.all_pairs(4)):
            gap = abs(trees[a].size - trees[b].size)
            assert table.score(Comparator.TREE_EDIT, pid) >= gap

    def test_phases_reported_in_order(self, corpus):
        seen = []

        def observer(phase, completed, total):
            if not seen or seen[-1] != phase:
                seen.append(phase)

        config = ScanConfig(threads=2)
        run_scan(corpus, self.all_pairs(4), config, observer=observer)
        assert seen == [
            "Moss preprocessing",
            "Moss comparison",
            "Token Distance preprocessing",
            "Token Distance comparison",
        ]

    def test_cache_cleared_after_scan(self, corpus):
        with patch.object(ParseCache, "clear") as clear:
            run_scan(corpus, [(0, 1)], ScanConfig(threads=1))
        clear.assert_called_once()


class TestScanFailures:
    """Cancellation, configuration and I/O failures"""

    def test_invalid_config_fails_fast(self, make_file):
        path = make_file("a.c", "int a;")
        config = ScanConfig(moss=MossConfig(k=0))
        with patch.object(ParseCache, "read") as read:
            with pytest.raises(ConfigError):
                run_scan([path, path + "x"], [(0, 1)], config)
        read.assert_not_called()

    def test_bad_pair_ids(self, make_file):
        path = make_file("a.c", "int a;")
        with pytest.raises(ConfigError):
            run_scan([path], [(0, 1)], ScanConfig(threads=1))
        with pytest.raises(ConfigError):
            run_scan([path], [(0, 0)], ScanConfig(threads=1))

    def test_halt_before_start(self, make_file):
        files = [make_file("a.c", "int a;"), make_file("b.c", "int b;")]
        halt = threading.Event()
        halt.set()
        with pytest.raises(ScanCancelled):
            run_scan(files, [(0, 1)], ScanConfig(threads=1), halt=halt)

    def test_halt_from_observer(self, make_file):
        files = [make_file(f"s{i}/main.c", SAMPLE_C) for i in range(6)]
        pairs = [(a, b) for a in range(6) for b in range(a + 1, 6)]
        halt = threading.Event()

        def observer(phase, completed, total):
            if phase.endswith("comparison"):
                halt.set()

        with pytest.raises(ScanCancelled) as info:
            run_scan(files, pairs, ScanConfig(threads=2), observer=observer, halt=halt)
        assert info.value.phase == "Moss comparison"

    def test_too_many_unreadable_files(self, make_file, temp_dir):
        present = make_file("a.c", "int a;")
        missing = [os.path.join(temp_dir, f"missing{i}.c") for i in range(2)]
        with pytest.raises(ScanFault) as info:
            run_scan([present] + missing, [(0, 1), (0, 2)], ScanConfig(threads=1))
        assert sorted(info.value.unreadable) == sorted(missing)
        assert info.value.total == 3

    def test_unreadable_files_within_limit(self, make_file, temp_dir):
        present = make_file("a.c", "int a;")
        missing = os.path.join(temp_dir, "missing.c")
        config = ScanConfig(threads=1, enabled=ALL_COMPARATORS)
        table = run_scan([present, missing], [(0, 1)], config)
        assert table.score(Comparator.TOKEN_EDIT, 0) == INFINITE
        assert table.score(Comparator.BYTE_EDIT, 0) == len(b"intVAR;")
