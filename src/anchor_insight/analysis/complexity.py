"""Cyclomatic and cognitive complexity of function bodies.

Cyclomatic complexity starts at 1 and grows by one per decision point:

    if / while / for / loop      +1
    match with N arms            +(N - 1)
    match arm guard              +1
    && and ||                    +1 per operator
    ? (error propagation)        +1

Cognitive complexity is the deepest nesting of branching and looping
constructs. Depth is threaded through the walk as an argument, so leaving a
construct restores the outer depth without any bookkeeping.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..config import DEFAULT_HANDLER_RULES, HandlerRules
from ..scanning.syntax import (
    BinaryExpr,
    ForExpr,
    FunctionDecl,
    IfExpr,
    ImplBlock,
    LoopExpr,
    MatchArm,
    MatchExpr,
    ModuleDecl,
    SyntaxVisitor,
    TraitDecl,
    TryExpr,
    WhileExpr,
)


@dataclass(frozen=True)
class ComplexityScore:
    cyclomatic: int
    cognitive: int


class ComplexityVisitor(SyntaxVisitor):
    """Scores a single function body.

    Nested function, impl, trait and module definitions are not entered;
    they are scored as functions of their own.
    """

    def __init__(self) -> None:
        self.complexity = 1
        self.max_depth = 0

    def score(self, fn: FunctionDecl) -> ComplexityScore:
        self.complexity = 1
        self.max_depth = 0
        if fn.body is not None:
            self.visit(fn.body, 0)
        return ComplexityScore(cyclomatic=self.complexity, cognitive=self.max_depth)

    def _enter(self, depth: int) -> int:
        inner = depth + 1
        self.max_depth = max(self.max_depth, inner)
        return inner

    def visit_IfExpr(self, node: IfExpr, depth: int) -> None:
        self.complexity += 1
        # An else-if chain is an IfExpr inside the alternative, one level deeper
        self.generic_visit(node, self._enter(depth))

    def visit_WhileExpr(self, node: WhileExpr, depth: int) -> None:
        self.complexity += 1
        self.generic_visit(node, self._enter(depth))

    def visit_ForExpr(self, node: ForExpr, depth: int) -> None:
        self.complexity += 1
        self.visit(node.iterable, depth)
        self.visit(node.body, self._enter(depth))

    def visit_LoopExpr(self, node: LoopExpr, depth: int) -> None:
        self.complexity += 1
        self.generic_visit(node, self._enter(depth))

    def visit_MatchExpr(self, node: MatchExpr, depth: int) -> None:
        self.complexity += max(len(node.arms) - 1, 0)
        self.generic_visit(node, self._enter(depth))

    def visit_MatchArm(self, node: MatchArm, depth: int) -> None:
        if node.guard is not None:
            self.complexity += 1
        self.generic_visit(node, depth)

    def visit_BinaryExpr(self, node: BinaryExpr, depth: int) -> None:
        # children() skips the inner links of the chain, so count them here
        self.complexity += sum(1 for link in node.chain() if link.is_logical)
        self.generic_visit(node, depth)

    def visit_TryExpr(self, node: TryExpr, depth: int) -> None:
        self.complexity += 1
        self.generic_visit(node, depth)

    def visit_FunctionDecl(self, node: FunctionDecl, depth: int) -> None:
        pass

    def visit_ImplBlock(self, node: ImplBlock, depth: int) -> None:
        pass

    def visit_TraitDecl(self, node: TraitDecl, depth: int) -> None:
        pass

    def visit_ModuleDecl(self, node: ModuleDecl, depth: int) -> None:
        pass


def function_complexity(fn: FunctionDecl) -> ComplexityScore:
    """Cyclomatic and cognitive complexity of one function."""
    return ComplexityVisitor().score(fn)


def constraint_complexity(fn: FunctionDecl, rules: HandlerRules = DEFAULT_HANDLER_RULES) -> int:
    """Count account-constraint attributes on a handler and its parameters.

    An attribute counts when its name is a constraint marker and it carries a
    non-empty argument list. This is a shallow count; the constraint
    expressions themselves are not interpreted.
    """
    attributes = list(fn.attributes)
    for param in fn.parameters:
        attributes.extend(param.attributes)
    return sum(
        1 for attr in attributes if attr.name in rules.constraint_attributes and attr.arguments
    )
