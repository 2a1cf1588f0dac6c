"""Public API for Anchor Insight.

Example:
    >>> from anchor_insight import analyze_workspace
    >>>
    >>> metrics = analyze_workspace(
    ...     "/path/to/anchor-project",
    ...     ["programs/vault/src/lib.rs", "programs/vault/src/state.rs"],
    ... )
    >>> metrics.code_volume_factor
    0.0
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence, Union

from .analysis.models import WorkspaceMetrics
from .analysis.workspace import WorkspaceAnalyzer
from .config import load_config
from .logging_config import get_logger

logger = get_logger(__name__)


def analyze_workspace(
    root: Union[str, Path],
    files: Sequence[Union[str, Path]],
    config_file: Optional[Path] = None,
    **overrides,
) -> WorkspaceMetrics:
    """Compute structural metrics for a selection of workspace files.

    Args:
        root: Workspace root directory
        files: Paths relative to root; selection is the caller's job
        config_file: Optional explicit config file path
        **overrides: Configuration overrides (e.g. workers=4, max_file_size_mb=2.0)

    Returns:
        WorkspaceMetrics for every file that could be analyzed

    Raises:
        InvalidPathError: If root is not a directory
        NoAnalyzableFilesError: If none of the files could be analyzed
        ConfigurationError: If configuration is invalid
    """
    config = load_config(config_file=config_file, **overrides)
    logger.debug(f"Analyzing {len(files)} files under {root}")
    return WorkspaceAnalyzer(root, config).analyze(files)
