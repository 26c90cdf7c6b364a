#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Pytest configuration for CopyScan tests.

This file is automatically loaded by pytest and sets up the Python path
to allow importing the copyscan package from the parent directory, plus
shared fixtures for temporary source trees.
"""

import logging
import os
import shutil
import sys
import tempfile

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from copyscan.config import Comparator, ScanConfig  # noqa: E402
from copyscan.syntax import SyntaxTree  # noqa: E402

ALL_COMPARATORS = frozenset(Comparator)

SAMPLE_C = """\
#include <stdio.h>
#define LIMIT 10

/* Sum the numbers below LIMIT */
int sum(void) {
    int total = 0;
    for (int i = 0; i < LIMIT; i++) {
        total += i;
    }
    return total;
}

int main(void) {
    printf("%d\\n", sum());
    return 0;
}
"""

SAMPLE_C_RENAMED = """\
#include <stdio.h>
#define LIMIT 10

int sum(void) {
    int acc = 0;
    for (int k = 0; k < LIMIT; k++) {
        acc += k;
    }
    return acc;
}

int main(void) {
    printf("%d\\n", sum());
    return 0;
}
"""

SAMPLE_JAVA = """\
public class Counter {
    private int count;

    // Increment and return the new value
    public int next(int step) {
        count = count + step;
        return count;
    }
}
"""


def make_tree(shape):
    """Build a SyntaxTree from nested (label, [children]) tuples"""
    tree = SyntaxTree()
    stack = [(shape, -1)]
    while stack:
        (label, kids), parent = stack.pop()
        index = tree.add_node(label, parent)
        for kid in reversed(kids):
            stack.append((kid, index))
    return tree


def leaf(label):
    return (label, [])


@pytest.fixture
def temp_dir():
    """Create a temporary directory removed after the test"""
    path = tempfile.mkdtemp(prefix="copyscan_test_")
    yield path
    shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def make_file(temp_dir):
    """Factory writing a file below temp_dir and returning its path"""

    def _make(relpath, content):
        path = os.path.join(temp_dir, relpath)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        mode = "wb" if isinstance(content, bytes) else "w"
        with open(path, mode) as f:
            f.write(content)
        return path

    return _make


@pytest.fixture
def all_config():
    """Configuration with every comparator enabled on two threads"""
    return ScanConfig(threads=2, enabled=ALL_COMPARATORS)


@pytest.fixture(autouse=True)
def reset_copyscan_logger():
    """Undo handlers and propagation changes made by the CLI"""
    yield
    logger = logging.getLogger("copyscan")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
