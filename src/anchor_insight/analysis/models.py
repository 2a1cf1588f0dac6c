"""Metric records at function, file and workspace level.

FunctionRecord is produced once per function and never changes. FileMetrics
folds the records of one file; WorkspaceMetrics folds FileMetrics across a
selection. Both aggregates keep raw integer sums and derive means only when
read, so folding order never changes a result.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .scoring import code_volume_factor, function_factor, round_half_up


@dataclass(frozen=True)
class FunctionRecord:
    """Metrics for one function or method.

    Attributes:
        name: Function name
        is_handler: Whether the function is a contract entry point
        cyclomatic_complexity: Independent paths through the body (>= 1)
        cognitive_complexity: Deepest nesting of branches and loops
        statement_count: Statements in the body, nested functions excluded
        constraint_complexity: Account-constraint attributes; set for handlers only
        start_line: Starting line number (1-indexed)
    """

    name: str
    is_handler: bool
    cyclomatic_complexity: int
    cognitive_complexity: int
    statement_count: int
    constraint_complexity: Optional[int] = None
    start_line: int = 0

    def __post_init__(self) -> None:
        if self.cyclomatic_complexity < 1:
            raise ValueError("cyclomatic_complexity must be at least 1")
        if self.cognitive_complexity < 0 or self.statement_count < 0:
            raise ValueError("counts must be non-negative")
        if (self.constraint_complexity is not None) != self.is_handler:
            raise ValueError("constraint_complexity is set exactly when is_handler is true")


@dataclass
class FileMetrics:
    """Per-file rollup of FunctionRecords."""

    path: str
    records: list[FunctionRecord] = field(default_factory=list)

    def add(self, record: FunctionRecord) -> None:
        self.records.append(record)

    @property
    def total_functions(self) -> int:
        return len(self.records)

    @property
    def total_statements(self) -> int:
        return sum(r.statement_count for r in self.records)

    @property
    def complexity_sum(self) -> int:
        return sum(r.cyclomatic_complexity for r in self.records)

    @property
    def cognitive_sum(self) -> int:
        return sum(r.cognitive_complexity for r in self.records)

    @property
    def max_complexity(self) -> int:
        return max((r.cyclomatic_complexity for r in self.records), default=0)

    @property
    def max_cognitive_complexity(self) -> int:
        return max((r.cognitive_complexity for r in self.records), default=0)

    @property
    def max_constraint_complexity(self) -> int:
        return max(
            (r.constraint_complexity or 0 for r in self.records if r.is_handler), default=0
        )

    @property
    def avg_complexity(self) -> float:
        return self.complexity_sum / self.total_functions if self.records else 0.0

    @property
    def avg_cognitive_complexity(self) -> float:
        return self.cognitive_sum / self.total_functions if self.records else 0.0

    @property
    def handler_count(self) -> int:
        return sum(1 for r in self.records if r.is_handler)


@dataclass
class WorkspaceMetrics:
    """Workspace rollup of every successfully analyzed file.

    Attributes:
        total_functions: Functions across all analyzed files
        total_statements: Statements across all analyzed files
        handler_count: Contract handlers across all analyzed files
        complexity_sum: Sum of cyclomatic complexity over all functions
        cognitive_sum: Sum of cognitive complexity over all functions
        max_complexity: Highest cyclomatic complexity of any function
        max_cognitive_complexity: Deepest nesting of any function
        max_constraint_complexity: Most constraint attributes on one handler
        files_analyzed: Files that contributed metrics
        files_skipped: Files that were selected but could not be analyzed
        files_with_handlers: Analyzed files declaring at least one handler
        files: Per-file metrics, for reporting
    """

    total_functions: int = 0
    total_statements: int = 0
    handler_count: int = 0
    complexity_sum: int = 0
    cognitive_sum: int = 0
    max_complexity: int = 0
    max_cognitive_complexity: int = 0
    max_constraint_complexity: int = 0
    files_analyzed: int = 0
    files_skipped: int = 0
    files_with_handlers: int = 0
    files: list[FileMetrics] = field(default_factory=list)

    def add_file(self, metrics: FileMetrics) -> None:
        """Fold one analyzed file into the rollup."""
        self.total_functions += metrics.total_functions
        self.total_statements += metrics.total_statements
        self.handler_count += metrics.handler_count
        self.complexity_sum += metrics.complexity_sum
        self.cognitive_sum += metrics.cognitive_sum
        self.max_complexity = max(self.max_complexity, metrics.max_complexity)
        self.max_cognitive_complexity = max(
            self.max_cognitive_complexity, metrics.max_cognitive_complexity
        )
        self.max_constraint_complexity = max(
            self.max_constraint_complexity, metrics.max_constraint_complexity
        )
        self.files_analyzed += 1
        if metrics.handler_count:
            self.files_with_handlers += 1
        self.files.append(metrics)

    def add_skipped(self, count: int = 1) -> None:
        self.files_skipped += count

    def merge(self, other: WorkspaceMetrics) -> WorkspaceMetrics:
        """Combine two partial rollups into a new one.

        Associative and commutative on every metric, so shards may be folded
        in any order. ``files`` is kept sorted by path.
        """
        return WorkspaceMetrics(
            total_functions=self.total_functions + other.total_functions,
            total_statements=self.total_statements + other.total_statements,
            handler_count=self.handler_count + other.handler_count,
            complexity_sum=self.complexity_sum + other.complexity_sum,
            cognitive_sum=self.cognitive_sum + other.cognitive_sum,
            max_complexity=max(self.max_complexity, other.max_complexity),
            max_cognitive_complexity=max(
                self.max_cognitive_complexity, other.max_cognitive_complexity
            ),
            max_constraint_complexity=max(
                self.max_constraint_complexity, other.max_constraint_complexity
            ),
            files_analyzed=self.files_analyzed + other.files_analyzed,
            files_skipped=self.files_skipped + other.files_skipped,
            files_with_handlers=self.files_with_handlers + other.files_with_handlers,
            files=sorted([*self.files, *other.files], key=lambda f: f.path),
        )

    @property
    def avg_complexity(self) -> float:
        """Mean cyclomatic complexity per function, weighted across files."""
        return self.complexity_sum / self.total_functions if self.total_functions else 0.0

    @property
    def avg_cognitive_complexity(self) -> float:
        """Mean cognitive complexity per function, weighted across files."""
        return self.cognitive_sum / self.total_functions if self.total_functions else 0.0

    @property
    def code_volume_factor(self) -> float:
        return code_volume_factor(self.total_statements)

    @property
    def function_factor(self) -> float:
        return function_factor(self.total_functions)

    @property
    def handler_density(self) -> float:
        """Handlers per file that declares any handler."""
        if not self.files_with_handlers:
            return 0.0
        return self.handler_count / self.files_with_handlers

    def to_dict(self) -> dict[str, Any]:
        """Flat key/value view for downstream consumers."""
        return {
            "total_functions": self.total_functions,
            "total_statements": self.total_statements,
            "handler_count": self.handler_count,
            "max_complexity": self.max_complexity,
            "max_cognitive_complexity": self.max_cognitive_complexity,
            "max_constraint_complexity": self.max_constraint_complexity,
            "avg_complexity": round_half_up(self.avg_complexity),
            "avg_cognitive_complexity": round_half_up(self.avg_cognitive_complexity),
            "code_volume_factor": self.code_volume_factor,
            "function_factor": self.function_factor,
            "handler_density": round_half_up(self.handler_density),
            "files_analyzed": self.files_analyzed,
            "files_skipped": self.files_skipped,
            "files_with_handlers": self.files_with_handlers,
        }
