"""Total statement count (TSC) per function.

Statements are counted on the syntax tree, not on text, so blank lines,
comments and comment-like string contents never change the result. A
function or method defined inside another function's body opens its own
count; the declaration itself is a single statement of the outer function.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

from ..scanning.syntax import FunctionDecl, Statement, SyntaxVisitor


@dataclass
class _Tally:
    function: FunctionDecl
    count: int = 0


class StatementCounter(SyntaxVisitor):
    """Counts statements for a function and every function nested in it.

    Usage:
        for fn, statements in StatementCounter().count(decl):
            ...
    """

    def __init__(self) -> None:
        self._tallies: list[_Tally] = []
        self._current: Optional[_Tally] = None

    def count(self, fn: FunctionDecl) -> list[tuple[FunctionDecl, int]]:
        """Return ``(function, statement_count)`` pairs.

        The first pair is ``fn`` itself; nested definitions follow in source
        order, each enclosing function before the functions nested in it.
        """
        self._tallies = []
        self._current = None
        self.visit(fn)
        return [(tally.function, tally.count) for tally in self._tallies]

    @contextmanager
    def _counting(self, fn: FunctionDecl) -> Iterator[None]:
        # Reserve the slot on entry so enclosing functions precede nested ones
        tally = _Tally(fn)
        self._tallies.append(tally)
        previous, self._current = self._current, tally
        try:
            yield
        finally:
            self._current = previous

    def visit_FunctionDecl(self, node: FunctionDecl) -> None:
        if node.body is None:
            return
        with self._counting(node):
            self.visit(node.body)

    def visit_Statement(self, node: Statement) -> None:
        if self._current is not None:
            self._current.count += 1
        self.generic_visit(node)


def statement_count(fn: FunctionDecl) -> int:
    """Statements belonging to ``fn`` alone."""
    return StatementCounter().count(fn)[0][1] if fn.body is not None else 0
