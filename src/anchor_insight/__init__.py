"""
Anchor Insight - Structural Metrics for Solana/Anchor Programs

Classifies contract handlers and measures cyclomatic complexity, nesting
depth and statement volume of Rust smart-contract sources, rolled up per
file and per workspace.
"""

__version__ = "0.1.0"

from .analysis import FileMetrics, FunctionRecord, WorkspaceMetrics, is_contract_handler
from .api import analyze_workspace
from .config import AnalysisConfig, load_config

__all__ = [
    "analyze_workspace",  # Main entry point
    "AnalysisConfig",
    "load_config",
    "is_contract_handler",
    "FunctionRecord",
    "FileMetrics",
    "WorkspaceMetrics",
]
