"""Structural metrics: handler classification, complexity, statement volume."""

from .aggregator import aggregate_file, aggregate_workspace, analyze_function, analyze_source
from .complexity import ComplexityScore, constraint_complexity, function_complexity
from .handlers import is_contract_handler
from .models import FileMetrics, FunctionRecord, WorkspaceMetrics
from .scoring import code_volume_factor, function_factor
from .statements import StatementCounter, statement_count
from .workspace import WorkspaceAnalyzer

__all__ = [
    "is_contract_handler",
    "ComplexityScore",
    "function_complexity",
    "constraint_complexity",
    "StatementCounter",
    "statement_count",
    "code_volume_factor",
    "function_factor",
    "FunctionRecord",
    "FileMetrics",
    "WorkspaceMetrics",
    "analyze_function",
    "analyze_source",
    "aggregate_file",
    "aggregate_workspace",
    "WorkspaceAnalyzer",
]
