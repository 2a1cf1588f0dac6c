"""Parsing layer: tree-sitter Rust sources to the SourceFile model."""

from .normalizer import TreeSitterNormalizer
from .syntax import FunctionDecl, SourceFile, SyntaxVisitor
from .treesitter_parser import RustParser

__all__ = [
    "RustParser",
    "TreeSitterNormalizer",
    "SourceFile",
    "FunctionDecl",
    "SyntaxVisitor",
]
