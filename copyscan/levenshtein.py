#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CopyScan - Edit Distance Kernel

Unit-cost Levenshtein distance over bytes, token ids or fingerprints,
computed by rapidfuzz. Results are clamped below INFINITE, which is
reserved for incomparable pairs.
"""

import logging
from typing import Sequence

from rapidfuzz.distance import Levenshtein

logger = logging.getLogger(__name__)

# Score of a pair that lacks a required artefact (int32 max)
INFINITE = 2**31 - 1
SATURATED = INFINITE - 1


def edit_distance(a: Sequence, b: Sequence) -> int:
    """
    Levenshtein distance with insert, delete and substitute all costing 1.

    Args:
        a: First sequence (bytes, str or list of ints)
        b: Second sequence of the same kind

    Returns:
        Distance, saturated at INFINITE - 1
    """
    if max(len(a), len(b)) >= SATURATED:
        logger.warning(
            "Edit distance input of %d items exceeds the score range",
            max(len(a), len(b)),
        )
        return SATURATED

    distance = Levenshtein.distance(a, b)
    if distance >= SATURATED:
        logger.warning("Edit distance %d saturated to %d", distance, SATURATED)
        return SATURATED
    return distance
