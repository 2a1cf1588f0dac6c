"""Syntax models for parsed contract source files.

SourceFile is the language-neutral tree the metric visitors consume:
    - Items: functions, implementation blocks, inline modules, traits
    - Per-function: name, visibility, attributes, typed parameters, body
    - Bodies: blocks of statements and the branching expressions inside them

Only the shapes the metrics care about are modelled. Everything else in an
expression collapses into OtherExpr, which keeps its children so that nested
branches are still reachable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Optional, Union


@dataclass(frozen=True)
class Attribute:
    """An outer attribute such as ``#[account(mut, signer)]``.

    Attributes:
        path: Attribute path as written (e.g. "account", "anchor_lang::instruction")
        arguments: Top-level comma-separated argument texts, or None when the
            attribute has no parenthesised argument list
    """

    path: str
    arguments: Optional[tuple[str, ...]] = None

    @property
    def name(self) -> str:
        """Last path segment."""
        return self.path.rsplit("::", 1)[-1]


@dataclass(frozen=True)
class Parameter:
    """A function parameter.

    Attributes:
        name: Pattern text ("self" for receivers)
        type_path: Path segments of the declared type with generic
            arguments stripped; empty for receivers and non-path types
        attributes: Outer attributes attached to the parameter
    """

    name: str
    type_path: tuple[str, ...] = ()
    attributes: tuple[Attribute, ...] = ()


class SyntaxNode:
    """Base class for body nodes; children() yields sub-nodes in source order."""

    def children(self) -> Iterator[SyntaxNode]:
        return iter(())


class StatementKind(Enum):
    LET = "let"
    EXPR = "expr"
    ITEM = "item"
    MACRO = "macro"


@dataclass
class Block(SyntaxNode):
    statements: list[Statement] = field(default_factory=list)

    def children(self) -> Iterator[SyntaxNode]:
        return iter(self.statements)


@dataclass
class Statement(SyntaxNode):
    """One statement of a block.

    A trailing expression without a semicolon is a statement too. Item
    statements carry the nested declaration in ``item``; the others carry
    their expressions in ``expressions``.
    """

    kind: StatementKind
    expressions: list[SyntaxNode] = field(default_factory=list)
    item: Optional[Item] = None

    def children(self) -> Iterator[SyntaxNode]:
        yield from self.expressions
        if self.item is not None:
            yield self.item


@dataclass
class IfExpr(SyntaxNode):
    """Conditional; ``alternative`` is a Block or a chained IfExpr."""

    condition: SyntaxNode
    consequence: Block
    alternative: Optional[Union[Block, IfExpr]] = None

    def children(self) -> Iterator[SyntaxNode]:
        yield self.condition
        yield self.consequence
        if self.alternative is not None:
            yield self.alternative


@dataclass
class WhileExpr(SyntaxNode):
    condition: SyntaxNode
    body: Block

    def children(self) -> Iterator[SyntaxNode]:
        yield self.condition
        yield self.body


@dataclass
class ForExpr(SyntaxNode):
    iterable: SyntaxNode
    body: Block

    def children(self) -> Iterator[SyntaxNode]:
        yield self.iterable
        yield self.body


@dataclass
class LoopExpr(SyntaxNode):
    body: Block

    def children(self) -> Iterator[SyntaxNode]:
        yield self.body


@dataclass
class MatchArm(SyntaxNode):
    guard: Optional[SyntaxNode]
    body: SyntaxNode

    def children(self) -> Iterator[SyntaxNode]:
        if self.guard is not None:
            yield self.guard
        yield self.body


@dataclass
class MatchExpr(SyntaxNode):
    scrutinee: SyntaxNode
    arms: list[MatchArm] = field(default_factory=list)

    def children(self) -> Iterator[SyntaxNode]:
        yield self.scrutinee
        yield from self.arms


@dataclass
class BinaryExpr(SyntaxNode):
    """Binary operation.

    ``a + b + c`` nests to the left, so a long chain is one deep spine of
    BinaryExpr nodes. chain() and children() walk that spine in a loop, which
    keeps visitors flat no matter how many operators are chained.
    """

    operator: str
    left: SyntaxNode
    right: SyntaxNode

    @property
    def is_logical(self) -> bool:
        return self.operator in ("&&", "||")

    def chain(self) -> list[BinaryExpr]:
        """This node and every BinaryExpr down its left spine, outermost first."""
        links: list[BinaryExpr] = []
        node: SyntaxNode = self
        while isinstance(node, BinaryExpr):
            links.append(node)
            node = node.left
        return links

    def children(self) -> Iterator[SyntaxNode]:
        """Operands of the whole left-nested chain, in source order."""
        links = self.chain()
        yield links[-1].left
        for link in reversed(links):
            yield link.right


@dataclass
class TryExpr(SyntaxNode):
    """Error propagation (``expr?``)."""

    operand: SyntaxNode

    def children(self) -> Iterator[SyntaxNode]:
        yield self.operand


@dataclass
class OtherExpr(SyntaxNode):
    """Any expression without metric significance of its own."""

    kind: str = ""
    parts: list[SyntaxNode] = field(default_factory=list)

    def children(self) -> Iterator[SyntaxNode]:
        return iter(self.parts)


@dataclass
class FunctionDecl(SyntaxNode):
    """A function or method definition.

    Attributes:
        name: Function name
        visibility: Visibility modifier text ("pub", "pub(crate)", ...) or None
        attributes: Outer attributes
        parameters: Parameters in declaration order
        body: Function body; None for bodiless trait signatures
        start_line: Starting line number (1-indexed)
        end_line: Ending line number (1-indexed)
    """

    name: str
    visibility: Optional[str] = None
    attributes: list[Attribute] = field(default_factory=list)
    parameters: list[Parameter] = field(default_factory=list)
    body: Optional[Block] = None
    start_line: int = 0
    end_line: int = 0

    @property
    def is_public(self) -> bool:
        """True only for unrestricted ``pub``."""
        return self.visibility == "pub"

    def children(self) -> Iterator[SyntaxNode]:
        if self.body is not None:
            yield self.body


@dataclass
class ImplBlock(SyntaxNode):
    type_name: str
    trait_name: Optional[str] = None
    methods: list[FunctionDecl] = field(default_factory=list)

    def children(self) -> Iterator[SyntaxNode]:
        return iter(self.methods)


@dataclass
class TraitDecl(SyntaxNode):
    name: str
    methods: list[FunctionDecl] = field(default_factory=list)

    def children(self) -> Iterator[SyntaxNode]:
        return iter(self.methods)


@dataclass
class ModuleDecl(SyntaxNode):
    name: str
    items: list[Item] = field(default_factory=list)

    def children(self) -> Iterator[SyntaxNode]:
        return iter(self.items)


Item = Union[FunctionDecl, ImplBlock, TraitDecl, ModuleDecl]


@dataclass
class SourceFile:
    """A parsed source file.

    Attributes:
        path: File path relative to the workspace root
        items: Top-level items in source order
    """

    path: str
    items: list[Item] = field(default_factory=list)

    def iter_functions(self) -> Iterator[FunctionDecl]:
        """Yield every item-level function that has a body.

        Covers top-level functions, inline modules (recursively), methods of
        implementation blocks and trait methods with a default body. Functions
        nested inside other function bodies are not yielded here.
        """
        yield from _iter_item_functions(self.items)


def _iter_item_functions(items: list[Item]) -> Iterator[FunctionDecl]:
    for item in items:
        if isinstance(item, FunctionDecl):
            if item.body is not None:
                yield item
        elif isinstance(item, (ImplBlock, TraitDecl)):
            for method in item.methods:
                if method.body is not None:
                    yield method
        elif isinstance(item, ModuleDecl):
            yield from _iter_item_functions(item.items)


class SyntaxVisitor:
    """Walks a body tree, dispatching on node class name.

    Subclasses define ``visit_<ClassName>`` methods; nodes without one go to
    generic_visit, which visits children in source order. Extra positional
    arguments (such as a nesting depth) are passed through unchanged.
    """

    def visit(self, node: SyntaxNode, *args: Any) -> None:
        method = getattr(self, f"visit_{type(node).__name__}", self.generic_visit)
        method(node, *args)

    def generic_visit(self, node: SyntaxNode, *args: Any) -> None:
        for child in node.children():
            self.visit(child, *args)
