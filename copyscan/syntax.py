#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CopyScan - Syntax Trees and Token Streams

Converts a tree-sitter parse into the engine's own representation: an
index-based parse tree (labels, parent links, child lists) and the ordered
token stream with comments removed. The tree-sitter objects are dropped
once the conversion is done.
"""

from dataclasses import dataclass, field
from typing import List, NamedTuple

from .errors import SourceParseError
from .languages import LanguageSpec, get_parser

# Replacement text for identifiers in variable-use positions
VARIABLE_SENTINEL = "VAR"


class Token(NamedTuple):
    """One lexical token: grammar symbol id, source text, variable-use flag"""

    kind: int
    text: str
    variable: bool


@dataclass
class SyntaxTree:
    """
    Rooted ordered tree stored as parallel arrays in pre-order.

    Node 0 is the root. parents[i] is -1 for the root; children[i] lists
    the child indices of node i from left to right.
    """

    labels: List[str] = field(default_factory=list)
    parents: List[int] = field(default_factory=list)
    children: List[List[int]] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.labels)

    def add_node(self, label: str, parent: int) -> int:
        index = len(self.labels)
        self.labels.append(label)
        self.parents.append(parent)
        self.children.append([])
        if parent >= 0:
            self.children[parent].append(index)
        return index


@dataclass
class ParsedSource:
    """Result of lexing and parsing one file"""

    path: str
    language: LanguageSpec
    text: str  # text fed to the parser, after any preprocessing
    tree: SyntaxTree
    tokens: List[Token]

    def token_kinds(self) -> List[int]:
        return [t.kind for t in self.tokens]

    def normalized_text(self, rename_variables: bool = True) -> str:
        """Concatenate token texts, optionally replacing variable uses"""
        if not rename_variables:
            return "".join(t.text for t in self.tokens)
        return "".join(
            VARIABLE_SENTINEL if t.variable else t.text for t in self.tokens
        )


def parse_source(path: str, text: str, spec: LanguageSpec) -> ParsedSource:
    """
    Preprocess, lex and parse source text.

    Args:
        path: File the text came from (used in error messages)
        text: Decoded file contents
        spec: Language to parse as

    Returns:
        ParsedSource with tree and tokens

    Raises:
        SourceParseError: if the parser reports any error or missing node
    """
    if spec.preprocess is not None:
        text = spec.preprocess(text)
    source = text.encode("utf-8")

    ts_tree = get_parser(spec).parse(source)
    root = ts_tree.root_node
    if root.has_error:
        node = _first_error(root)
        line, column = node.start_point if node is not None else root.start_point
        detail = f"unexpected {node.type!r}" if node is not None else "syntax error"
        if node is not None and node.is_missing:
            detail = f"missing {node.type!r}"
        raise SourceParseError(path, line + 1, column + 1, detail)

    tree = SyntaxTree()
    tokens: List[Token] = []

    # Iterative pre-order walk; parse trees are deeper than the recursion limit
    stack = [(root, -1, None)]
    while stack:
        node, parent, parent_type = stack.pop()
        if node.is_extra:
            continue

        index = tree.add_node(node.type, parent)
        is_token = node.child_count == 0 or node.type in spec.atomic_types
        if is_token and parent >= 0:
            tokens.append(
                Token(
                    node.kind_id,
                    source[node.start_byte : node.end_byte].decode("utf-8", "replace"),
                    spec.is_variable_use(node.type, parent_type),
                )
            )
            continue
        if is_token:
            continue

        for child in reversed(node.children):
            stack.append((child, index, node.type))

    return ParsedSource(path=path, language=spec, text=text, tree=tree, tokens=tokens)


def _first_error(root):
    """Find the first ERROR or MISSING node in document order"""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node
        if node.has_error:
            stack.extend(reversed(node.children))
    return None
