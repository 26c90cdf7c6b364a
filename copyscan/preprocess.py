#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CopyScan - C Preprocessing

A deliberately small preprocessor run before the C lexer:

- backslash-newline continuations are joined
- every directive line (first non-blank character '#') is dropped
- simple object-like ``#define NAME VALUE`` macros are expanded once

Parameterized macros and #include resolution are not supported. Expansion
only replaces whole identifier tokens outside comments and literals, and
the replacement text is not rescanned.
"""

import re
from typing import Dict, Tuple

_CONTINUATION = re.compile(r"\\\r?\n")
_DIRECTIVE = re.compile(r"^\s*#")
_DEFINE = re.compile(r"^\s*#\s*define\s+([A-Za-z_]\w*)(\(?)(.*)$")
_COMMENT = re.compile(r"/\*.*?\*/|//[^\n]*", re.DOTALL)

# Lexemes that must be copied through untouched, plus identifiers
_C_LEXEME = re.compile(
    r"""
      (?P<comment>/\*.*?\*/|//[^\n]*)
    | (?P<literal>"(?:\\.|[^"\\\n])*"|'(?:\\.|[^'\\\n])*')
    | (?P<number>\.?\d(?:[eEpP][+-]|[\w.])*)
    | (?P<ident>[A-Za-z_]\w*)
    """,
    re.VERBOSE | re.DOTALL,
)


def join_continuations(text: str) -> str:
    """Join lines ending in a backslash with the following line"""
    return _CONTINUATION.sub("", text)


def strip_directives(text: str) -> Tuple[str, Dict[str, str]]:
    """
    Blank out preprocessor directive lines.

    Args:
        text: Source text with continuations already joined

    Returns:
        Tuple of (text without directives, object-like macro table)
    """
    defines: Dict[str, str] = {}
    lines = []
    for line in text.split("\n"):
        if not _DIRECTIVE.match(line):
            lines.append(line)
            continue

        match = _DEFINE.match(line)
        if match and not match.group(2):
            value = _COMMENT.sub(" ", match.group(3)).strip()
            defines[match.group(1)] = value
        # Keep the line so positions after it do not move
        lines.append("")
    return "\n".join(lines), defines


def expand_macros(text: str, defines: Dict[str, str]) -> str:
    """Replace identifier tokens naming a macro with its value, in one pass"""
    if not defines:
        return text

    def replace(match):
        name = match.group("ident")
        if name is not None and name in defines:
            return defines[name]
        return match.group(0)

    return _C_LEXEME.sub(replace, text)


def preprocess_c(text: str) -> str:
    """Run the full C preprocessing pipeline on source text"""
    stripped, defines = strip_directives(join_continuations(text))
    return expand_macros(stripped, defines)
