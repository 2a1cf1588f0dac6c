"""Tree-sitter parser wrapper for contract sources.

Usage:
    parser = RustParser()
    tree = parser.parse(code_bytes, path)
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Union

import tree_sitter
import tree_sitter_rust

from ..exceptions import ParsingError

LANGUAGE_NAME = "rust"

_LANGUAGE = tree_sitter.Language(tree_sitter_rust.language())


class RustParser:
    """Wrapper around tree-sitter for Rust parsing.

    tree-sitter parsers are not safe to share between threads, so each
    thread gets its own lazily created instance.
    """

    def __init__(self) -> None:
        self._local = threading.local()

    @property
    def language(self) -> tree_sitter.Language:
        return _LANGUAGE

    def _parser(self) -> tree_sitter.Parser:
        parser = getattr(self._local, "parser", None)
        if parser is None:
            parser = tree_sitter.Parser(_LANGUAGE)
            self._local.parser = parser
        return parser

    def parse(self, code: bytes, path: Union[str, Path] = "<memory>") -> tree_sitter.Tree:
        """Parse code and return syntax tree.

        Args:
            code: Source code as bytes
            path: File path, used in error reports

        Returns:
            Tree whose root has no error nodes

        Raises:
            ParsingError: If the source does not parse cleanly
        """
        tree = self._parser().parse(code)
        root = tree.root_node
        if root.has_error:
            line = _first_error_line(root)
            reason = "syntax error" if line is None else f"syntax error near line {line}"
            raise ParsingError(Path(path), LANGUAGE_NAME, reason)
        return tree


def _first_error_line(node: tree_sitter.Node) -> int | None:
    """1-based line of the first ERROR or MISSING node, if one is found."""
    if node.is_error or node.is_missing:
        return node.start_point[0] + 1
    for child in node.children:
        if child.has_error or child.is_missing:
            line = _first_error_line(child)
            if line is not None:
                return line
    return None
