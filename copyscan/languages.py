#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CopyScan - Supported Languages

Maps file extensions onto tree-sitter grammars and records, per language,
which syntax nodes are treated as single tokens and which identifier
positions are not variable uses.
"""

import os
import threading
from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, Optional, Tuple

import tree_sitter_c as tsc
import tree_sitter_java as tsjava
from tree_sitter import Language, Parser

from .preprocess import preprocess_c

IDENTIFIER = "identifier"


@dataclass(frozen=True)
class LanguageSpec:
    """Everything the engine needs to lex and parse one language"""

    name: str
    extensions: Tuple[str, ...]
    grammar: Language
    # Nodes lexed as one token even though the grammar gives them children
    atomic_types: FrozenSet[str]
    # Parents under which an identifier names something other than a variable
    non_variable_parents: FrozenSet[str]
    preprocess: Optional[Callable[[str], str]] = None
    # (node type, parent type) pairs renamed even though the node is no identifier
    extra_variable_positions: FrozenSet[Tuple[str, str]] = frozenset()

    def is_variable_use(self, node_type: str, parent_type: Optional[str]) -> bool:
        """Whether a leaf in this position is renamed by normalization"""
        if (node_type, parent_type) in self.extra_variable_positions:
            return True
        if node_type != IDENTIFIER:
            return False
        return parent_type not in self.non_variable_parents


C = LanguageSpec(
    name="C",
    extensions=(".c",),
    grammar=Language(tsc.language()),
    atomic_types=frozenset({"string_literal", "char_literal", "system_lib_string"}),
    non_variable_parents=frozenset(
        {
            "enumerator",
            "macro_type_specifier",
            "attribute",
            "preproc_def",
            "preproc_function_def",
            "preproc_params",
            "preproc_defined",
            "preproc_ifdef",
            "preproc_call",
        }
    ),
    preprocess=preprocess_c,
    # Member names in p.a and q->a
    extra_variable_positions=frozenset({("field_identifier", "field_expression")}),
)

JAVA = LanguageSpec(
    name="Java",
    extensions=(".java",),
    grammar=Language(tsjava.language()),
    atomic_types=frozenset({"string_literal", "character_literal", "text_block"}),
    non_variable_parents=frozenset(
        {
            "class_declaration",
            "interface_declaration",
            "enum_declaration",
            "record_declaration",
            "annotation_type_declaration",
            "annotation_type_element_declaration",
            "method_declaration",
            "constructor_declaration",
            "compact_constructor_declaration",
            "enum_constant",
            "scoped_identifier",
            "package_declaration",
            "import_declaration",
            "module_declaration",
            "annotation",
            "marker_annotation",
            "element_value_pair",
            "labeled_statement",
            "break_statement",
            "continue_statement",
        }
    ),
)

LANGUAGES = (C, JAVA)

EXTENSION_MAP: Dict[str, LanguageSpec] = {
    ext: spec for spec in LANGUAGES for ext in spec.extensions
}

_local = threading.local()


def language_for_path(path: str) -> Optional[LanguageSpec]:
    """Determine the language of a file from its extension"""
    ext = os.path.splitext(path)[1]
    return EXTENSION_MAP.get(ext)


def get_parser(spec: LanguageSpec) -> Parser:
    """Return this thread's parser for a language (parsers are not shareable)"""
    parsers = getattr(_local, "parsers", None)
    if parsers is None:
        parsers = _local.parsers = {}
    parser = parsers.get(spec.name)
    if parser is None:
        parser = parsers[spec.name] = Parser(spec.grammar)
    return parser
