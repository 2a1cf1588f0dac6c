"""Normalizer: converts tree-sitter Rust parse trees to SourceFile.

This module takes tree-sitter parse trees and produces the language-neutral
SourceFile model. Grammar details (field names, node kinds, how outer
attributes attach to items) are handled here so that the metric visitors
never see a raw tree-sitter node.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional, Union

from .syntax import (
    Attribute,
    BinaryExpr,
    Block,
    ForExpr,
    FunctionDecl,
    IfExpr,
    ImplBlock,
    Item,
    LoopExpr,
    MatchArm,
    MatchExpr,
    ModuleDecl,
    OtherExpr,
    Parameter,
    SourceFile,
    Statement,
    StatementKind,
    SyntaxNode,
    TraitDecl,
    TryExpr,
    WhileExpr,
)
from .treesitter_parser import RustParser

logger = logging.getLogger(__name__)

# Children of a block that are not statements
_NON_STATEMENTS = frozenset(
    {
        "line_comment",
        "block_comment",
        "attribute_item",
        "inner_attribute_item",
        "empty_statement",
        "label",
    }
)

# Skipped while walking generic expressions
_TRIVIA = frozenset({"line_comment", "block_comment", "attribute_item", "inner_attribute_item"})

_COMMENTS = frozenset({"line_comment", "block_comment"})

# Macro bodies are token streams, never statements or branches
_OPAQUE = frozenset({"macro_invocation", "token_tree", "macro_definition"})


class TreeSitterNormalizer:
    """Converts tree-sitter parse trees to SourceFile.

    Usage:
        normalizer = TreeSitterNormalizer()
        source = normalizer.parse_file(content, "programs/vault/src/lib.rs")
    """

    def __init__(self, parser: Optional[RustParser] = None) -> None:
        self._parser = parser or RustParser()

    def parse_file(self, content: Union[str, bytes], path: str) -> SourceFile:
        """Parse file content and return SourceFile.

        Args:
            content: File content
            path: File path for the result

        Returns:
            SourceFile with every item-level declaration

        Raises:
            ParsingError: If the content does not parse cleanly
        """
        code = content.encode("utf-8") if isinstance(content, str) else content
        tree = self._parser.parse(code, Path(path))
        return self.normalize(tree.root_node, code, path)

    def normalize(self, root: Any, code: bytes, path: str) -> SourceFile:
        """Convert an already parsed ``source_file`` node."""
        items = _Converter(code).convert_items(root)
        logger.debug(f"Normalized {path}: {len(items)} top-level items")
        return SourceFile(path=path, items=items)


class _Converter:
    """Per-file conversion state (the source bytes for argument slicing)."""

    def __init__(self, code: bytes) -> None:
        self._code = code

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    def convert_items(self, container: Any) -> list[Item]:
        """Convert the items of a source_file or declaration_list."""
        items: list[Item] = []
        for node, attributes in self._with_attributes(container.named_children):
            item = self._convert_item(node, attributes)
            if item is not None:
                items.append(item)
        return items

    def _convert_item(self, node: Any, attributes: list[Attribute]) -> Optional[Item]:
        if node.type in ("function_item", "function_signature_item"):
            return self._convert_function(node, attributes)
        if node.type == "impl_item":
            return self._convert_impl(node)
        if node.type == "trait_item":
            return self._convert_trait(node)
        if node.type == "mod_item":
            return self._convert_module(node)
        return None

    def _convert_function(self, node: Any, attributes: list[Attribute]) -> FunctionDecl:
        visibility = None
        for child in node.children:
            if child.type == "visibility_modifier":
                visibility = "".join(self._text(child).split())
                break

        body_node = node.child_by_field_name("body")
        parameters_node = node.child_by_field_name("parameters")
        return FunctionDecl(
            name=self._text(node.child_by_field_name("name")),
            visibility=visibility,
            attributes=attributes,
            parameters=self._convert_parameters(parameters_node) if parameters_node else [],
            body=self.convert_block(body_node) if body_node is not None else None,
            start_line=node.start_point[0] + 1,
            end_line=node.end_point[0] + 1,
        )

    def _convert_impl(self, node: Any) -> ImplBlock:
        trait_node = node.child_by_field_name("trait")
        return ImplBlock(
            type_name=self._text(node.child_by_field_name("type")),
            trait_name=self._text(trait_node) if trait_node is not None else None,
            methods=self._convert_methods(node.child_by_field_name("body")),
        )

    def _convert_trait(self, node: Any) -> TraitDecl:
        return TraitDecl(
            name=self._text(node.child_by_field_name("name")),
            methods=self._convert_methods(node.child_by_field_name("body")),
        )

    def _convert_module(self, node: Any) -> ModuleDecl:
        body = node.child_by_field_name("body")
        return ModuleDecl(
            name=self._text(node.child_by_field_name("name")),
            items=self.convert_items(body) if body is not None else [],
        )

    def _convert_methods(self, body: Any) -> list[FunctionDecl]:
        if body is None:
            return []
        return [
            self._convert_function(node, attributes)
            for node, attributes in self._with_attributes(body.named_children)
            if node.type in ("function_item", "function_signature_item")
        ]

    def _with_attributes(self, nodes: list[Any]) -> list[tuple[Any, list[Attribute]]]:
        """Pair each node with the outer attributes directly preceding it."""
        paired: list[tuple[Any, list[Attribute]]] = []
        pending: list[Attribute] = []
        for node in nodes:
            if node.type == "attribute_item":
                attribute = self._convert_attribute(node)
                if attribute is not None:
                    pending.append(attribute)
            elif node.type in _COMMENTS:
                continue
            else:
                paired.append((node, pending))
                pending = []
        return paired

    # ------------------------------------------------------------------
    # Attributes and parameters
    # ------------------------------------------------------------------

    def _convert_attribute(self, node: Any) -> Optional[Attribute]:
        attr = next((c for c in node.named_children if c.type == "attribute"), None)
        if attr is None or not attr.named_children:
            return None

        path = "".join(self._text(attr.named_children[0]).split())
        arguments_node = attr.child_by_field_name("arguments")
        if arguments_node is None:
            return Attribute(path=path)
        return Attribute(path=path, arguments=self._split_arguments(arguments_node))

    def _split_arguments(self, token_tree: Any) -> tuple[str, ...]:
        """Split a delimited token tree on its top-level commas."""
        tokens = token_tree.children[1:-1]
        groups: list[list[Any]] = [[]]
        for token in tokens:
            if token.type == ",":
                groups.append([])
            elif token.type not in _COMMENTS:
                groups[-1].append(token)

        arguments = []
        for group in groups:
            if not group:
                continue
            text = self._code[group[0].start_byte : group[-1].end_byte]
            arguments.append(text.decode("utf-8", errors="replace").strip())
        return tuple(arguments)

    def _convert_parameters(self, node: Any) -> list[Parameter]:
        parameters: list[Parameter] = []
        for child, attributes in self._with_attributes(node.named_children):
            if child.type == "self_parameter":
                parameters.append(Parameter(name="self", attributes=tuple(attributes)))
            elif child.type == "parameter":
                pattern = child.child_by_field_name("pattern")
                type_node = child.child_by_field_name("type")
                parameters.append(
                    Parameter(
                        name=self._text(pattern) if pattern is not None else "_",
                        type_path=tuple(self._type_path(type_node)) if type_node else (),
                        attributes=tuple(attributes),
                    )
                )
        return parameters

    def _type_path(self, node: Any) -> list[str]:
        """Path segments of a type, generic arguments stripped."""
        kind = node.type
        if kind in ("type_identifier", "identifier", "crate", "self", "super", "primitive_type"):
            return [self._text(node)]
        if kind == "generic_type":
            inner = node.child_by_field_name("type")
            return self._type_path(inner) if inner is not None else []
        if kind in ("scoped_type_identifier", "scoped_identifier"):
            segments: list[str] = []
            path = node.child_by_field_name("path")
            if path is not None:
                segments.extend(self._type_path(path))
            name = node.child_by_field_name("name")
            if name is not None:
                segments.append(self._text(name))
            return segments
        return []

    # ------------------------------------------------------------------
    # Bodies
    # ------------------------------------------------------------------

    def convert_block(self, node: Any) -> Block:
        block = Block()
        for child, attributes in self._with_attributes(node.named_children):
            if child.type in _NON_STATEMENTS:
                continue
            block.statements.append(self._convert_statement(child, attributes))
        return block

    def _convert_statement(self, node: Any, attributes: list[Attribute]) -> Statement:
        kind = node.type
        if kind == "let_declaration":
            expressions = [
                self.convert_expr(part)
                for part in (
                    node.child_by_field_name("value"),
                    node.child_by_field_name("alternative"),
                )
                if part is not None
            ]
            return Statement(StatementKind.LET, expressions=expressions)

        if kind == "expression_statement":
            inner = [c for c in node.named_children if c.type not in _TRIVIA]
            is_macro = len(inner) == 1 and inner[0].type == "macro_invocation"
            return Statement(
                StatementKind.MACRO if is_macro else StatementKind.EXPR,
                expressions=[self.convert_expr(c) for c in inner],
            )

        if kind == "macro_invocation":
            return Statement(StatementKind.MACRO, expressions=[self.convert_expr(node)])

        if kind.endswith(("_item", "_declaration")) or kind in _OPAQUE:
            return Statement(StatementKind.ITEM, item=self._convert_item(node, attributes))

        # Trailing expression without a semicolon
        return Statement(StatementKind.EXPR, expressions=[self.convert_expr(node)])

    def convert_expr(self, node: Any) -> SyntaxNode:
        kind = node.type

        if kind == "block":
            return self.convert_block(node)

        if kind in ("if_expression", "if_let_expression"):
            return self._convert_if(node)

        if kind == "while_expression":
            return WhileExpr(
                condition=self._convert_condition(node.child_by_field_name("condition")),
                body=self.convert_block(node.child_by_field_name("body")),
            )

        if kind == "while_let_expression":
            return WhileExpr(
                condition=self.convert_expr(node.child_by_field_name("value")),
                body=self.convert_block(node.child_by_field_name("body")),
            )

        if kind == "for_expression":
            return ForExpr(
                iterable=self.convert_expr(node.child_by_field_name("value")),
                body=self.convert_block(node.child_by_field_name("body")),
            )

        if kind == "loop_expression":
            return LoopExpr(body=self.convert_block(node.child_by_field_name("body")))

        if kind == "match_expression":
            return self._convert_match(node)

        if kind == "binary_expression":
            return self._convert_binary(node)

        if kind == "try_expression":
            operand = next(c for c in node.named_children if c.type not in _TRIVIA)
            return TryExpr(operand=self.convert_expr(operand))

        if kind in _OPAQUE:
            return OtherExpr(kind=kind)

        return OtherExpr(
            kind=kind,
            parts=[self.convert_expr(c) for c in node.named_children if c.type not in _TRIVIA],
        )

    def _convert_binary(self, node: Any) -> SyntaxNode:
        """Convert a binary chain, walking its left spine in a loop.

        Generated code can chain hundreds of operators (``a0 + a1 + ...``);
        only the right operands are converted recursively.
        """
        spine = []
        while node.type == "binary_expression":
            spine.append(node)
            node = node.child_by_field_name("left")

        expr = self.convert_expr(node)
        for link in reversed(spine):
            operator = link.child_by_field_name("operator")
            expr = BinaryExpr(
                operator=operator.type if operator is not None else "",
                left=expr,
                right=self.convert_expr(link.child_by_field_name("right")),
            )
        return expr

    def _convert_if(self, node: Any) -> IfExpr:
        if node.type == "if_let_expression":
            condition = self.convert_expr(node.child_by_field_name("value"))
        else:
            condition = self._convert_condition(node.child_by_field_name("condition"))

        alternative: Optional[Union[Block, IfExpr]] = None
        else_clause = node.child_by_field_name("alternative")
        if else_clause is not None:
            branch = next(
                c
                for c in else_clause.named_children
                if c.type in ("block", "if_expression", "if_let_expression")
            )
            if branch.type == "block":
                alternative = self.convert_block(branch)
            else:
                alternative = self._convert_if(branch)

        return IfExpr(
            condition=condition,
            consequence=self.convert_block(node.child_by_field_name("consequence")),
            alternative=alternative,
        )

    def _convert_condition(self, node: Any) -> SyntaxNode:
        """Convert an if/while condition, unwrapping ``let`` patterns.

        The ``&&`` joining a let chain is part of the conditional syntax
        rather than a binary expression, so it is not surfaced as one.
        """
        if node.type == "let_condition":
            value = node.child_by_field_name("value")
            return OtherExpr(kind="let_condition", parts=[self.convert_expr(value)])
        if node.type == "let_chain":
            return OtherExpr(
                kind="let_chain",
                parts=[
                    self._convert_condition(c)
                    for c in node.named_children
                    if c.type not in _TRIVIA
                ],
            )
        return self.convert_expr(node)

    def _convert_match(self, node: Any) -> MatchExpr:
        match = MatchExpr(scrutinee=self.convert_expr(node.child_by_field_name("value")))
        body = node.child_by_field_name("body")
        if body is None:
            return match

        for arm in body.named_children:
            if arm.type not in ("match_arm", "last_match_arm"):
                continue
            guard: Optional[SyntaxNode] = None
            pattern = arm.child_by_field_name("pattern")
            if pattern is not None:
                condition = pattern.child_by_field_name("condition")
                if condition is not None:
                    guard = self._convert_condition(condition)
            value = arm.child_by_field_name("value")
            match.arms.append(
                MatchArm(
                    guard=guard,
                    body=self.convert_expr(value) if value is not None else OtherExpr(),
                )
            )
        return match

    def _text(self, node: Any) -> str:
        if node is None or node.text is None:
            return ""
        return node.text.decode("utf-8", errors="replace")
