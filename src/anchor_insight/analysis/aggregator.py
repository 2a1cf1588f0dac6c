"""File and workspace aggregation.

analyze_source runs the handler classifier, complexity visitor and statement
counter once per function of a parsed file. aggregate_workspace folds the
resulting FileMetrics into a WorkspaceMetrics.
"""

from __future__ import annotations

import logging
from typing import Iterable

from ..config import DEFAULT_CONFIG, AnalysisConfig
from ..scanning.syntax import FunctionDecl, SourceFile
from .complexity import constraint_complexity, function_complexity
from .handlers import is_contract_handler
from .models import FileMetrics, FunctionRecord, WorkspaceMetrics
from .statements import StatementCounter

logger = logging.getLogger(__name__)


def analyze_function(
    fn: FunctionDecl, config: AnalysisConfig = DEFAULT_CONFIG
) -> list[FunctionRecord]:
    """Records for ``fn`` followed by one for each function nested in its body."""
    records = []
    for decl, statements in StatementCounter().count(fn):
        is_handler = is_contract_handler(decl, config.handlers)
        score = function_complexity(decl)
        records.append(
            FunctionRecord(
                name=decl.name,
                is_handler=is_handler,
                cyclomatic_complexity=score.cyclomatic,
                cognitive_complexity=score.cognitive,
                statement_count=statements,
                constraint_complexity=(
                    constraint_complexity(decl, config.handlers) if is_handler else None
                ),
                start_line=decl.start_line,
            )
        )
    return records


def analyze_source(source: SourceFile, config: AnalysisConfig = DEFAULT_CONFIG) -> FileMetrics:
    """Fold every function of a parsed file into FileMetrics."""
    metrics = FileMetrics(path=source.path)
    for fn in source.iter_functions():
        for record in analyze_function(fn, config):
            metrics.add(record)

    logger.debug(
        f"{source.path}: {metrics.total_functions} functions, "
        f"{metrics.handler_count} handlers, {metrics.total_statements} statements"
    )
    return metrics


def aggregate_file(path: str, records: Iterable[FunctionRecord]) -> FileMetrics:
    """FileMetrics over already computed records."""
    metrics = FileMetrics(path=path)
    for record in records:
        metrics.add(record)
    return metrics


def aggregate_workspace(files: Iterable[FileMetrics], skipped: int = 0) -> WorkspaceMetrics:
    """Fold analyzed files, plus a count of skipped ones, into WorkspaceMetrics."""
    workspace = WorkspaceMetrics()
    for metrics in files:
        workspace.add_file(metrics)
    workspace.add_skipped(skipped)
    return workspace
