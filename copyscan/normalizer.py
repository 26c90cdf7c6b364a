#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CopyScan - Text Normalization

Turns a source file into the byte string compared by the edit distance
and Moss comparators.

Modes:
- NONE: raw file bytes
- WHITESPACE_ONLY: ASCII whitespace dropped, ASCII letters lowercased
- VARIABLES: the file's tokens concatenated with every identifier in a
  variable-use position replaced by a sentinel; files without a working
  lexer fall back to WHITESPACE_ONLY
"""

from .config import NormalizerMode
from .parse_cache import ParseCache

_WHITESPACE = b" \t\r\n"
_LOWERCASE = bytes.maketrans(
    b"ABCDEFGHIJKLMNOPQRSTUVWXYZ", b"abcdefghijklmnopqrstuvwxyz"
)


def text_normalize(data: bytes, mode: NormalizerMode) -> bytes:
    """Lexer-free normalization used directly and as the fallback"""
    if mode is NormalizerMode.NONE:
        return bytes(data)
    return data.translate(_LOWERCASE, _WHITESPACE)


def normalize_file(path: str, mode: NormalizerMode, cache: ParseCache) -> bytes:
    """
    Normalize one file.

    Args:
        path: File to read
        mode: Normalizer mode
        cache: Per-scan cache holding file contents and parses

    Returns:
        Normalized bytes; empty when the file cannot be read
    """
    data = cache.read(path)
    if data is None:
        return b""

    if mode is NormalizerMode.VARIABLES:
        parsed = cache.parse(path)
        if parsed is not None:
            return parsed.normalized_text().encode("utf-8")
        mode = NormalizerMode.WHITESPACE_ONLY

    return text_normalize(data, mode)
