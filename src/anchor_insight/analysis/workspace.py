"""WorkspaceAnalyzer: metrics for an explicit selection of workspace files.

Usage:
    analyzer = WorkspaceAnalyzer(Path("my-anchor-project"))
    metrics = analyzer.analyze(["programs/vault/src/lib.rs"])

Per-file failures (unsupported extension, unreadable, oversized, malformed
source) are logged and counted as skipped. Only a run in which no file at
all could be analyzed is reported to the caller, as NoAnalyzableFilesError.
"""

from __future__ import annotations

import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor, TimeoutError, as_completed
from pathlib import Path
from typing import Optional, Sequence, Union

from ..config import DEFAULT_CONFIG, AnalysisConfig
from ..exceptions import (
    FileAccessError,
    InvalidPathError,
    NoAnalyzableFilesError,
    ParsingError,
    UnsupportedLanguageError,
)
from ..scanning.normalizer import TreeSitterNormalizer
from ..scanning.treesitter_parser import LANGUAGE_NAME
from .aggregator import aggregate_workspace, analyze_source
from .models import FileMetrics, WorkspaceMetrics

logger = logging.getLogger(__name__)

# Default worker count: use CPU count, capped at 8 to avoid overwhelming I/O
_DEFAULT_WORKERS = min(os.cpu_count() or 4, 8)

PathLike = Union[str, Path]


class WorkspaceAnalyzer:
    """Computes WorkspaceMetrics for files under a workspace root.

    Attributes:
        root: Workspace root directory
        config: Analysis configuration
    """

    def __init__(self, root: PathLike, config: AnalysisConfig = DEFAULT_CONFIG) -> None:
        """Initialize analyzer.

        Args:
            root: Workspace root; selected paths are resolved against it
            config: Analysis configuration

        Raises:
            InvalidPathError: If root is not an existing directory
        """
        self.root = Path(root)
        if not self.root.exists():
            raise InvalidPathError(self.root, "does not exist")
        if not self.root.is_dir():
            raise InvalidPathError(self.root, "not a directory")
        self.config = config
        self._normalizer = TreeSitterNormalizer()

    def analyze(self, files: Sequence[PathLike]) -> WorkspaceMetrics:
        """Analyze the selected files.

        Args:
            files: Paths relative to the workspace root

        Returns:
            WorkspaceMetrics over every file that could be analyzed

        Raises:
            NoAnalyzableFilesError: If no selected file could be analyzed
        """
        files = list(files)
        workers = self.config.workers or _DEFAULT_WORKERS
        if self.config.parallel and workers > 1 and len(files) >= self.config.parallel_threshold:
            metrics = self._analyze_parallel(files, workers)
        else:
            metrics = self._analyze_sequential(files)

        logger.info(
            f"Analyzed {metrics.files_analyzed}/{len(files)} files "
            f"({metrics.files_skipped} skipped, {metrics.total_functions} functions)"
        )
        if metrics.files_analyzed == 0:
            raise NoAnalyzableFilesError(requested=len(files), skipped=metrics.files_skipped)
        return metrics

    def analyze_file(self, rel_path: PathLike) -> FileMetrics:
        """Analyze one file.

        Raises:
            UnsupportedLanguageError: If the extension is not a source extension
            FileAccessError: If the file is missing, too large or unreadable
            ParsingError: If the source does not parse or nests too deeply
        """
        path = self.root / rel_path
        display = Path(rel_path).as_posix()

        if path.suffix not in self.config.source_extensions:
            raise UnsupportedLanguageError(Path(rel_path), self.config.source_extensions)
        if not path.exists():
            raise FileAccessError(path, "file not found")
        if not path.is_file():
            raise FileAccessError(path, "not a regular file")

        try:
            size = path.stat().st_size
            if size > self.config.max_file_size_bytes:
                raise FileAccessError(
                    path, f"{size} bytes exceeds limit of {self.config.max_file_size_bytes}"
                )
            code = path.read_bytes()
        except OSError as e:
            raise FileAccessError(path, str(e)) from e

        try:
            code.decode("utf-8")
        except UnicodeDecodeError as e:
            raise FileAccessError(path, f"not valid UTF-8: {e.reason}") from e

        try:
            source = self._normalizer.parse_file(code, display)
            return analyze_source(source, self.config)
        except RecursionError as e:
            raise ParsingError(path, LANGUAGE_NAME, "nesting too deep") from e

    def _analyze_shard(self, rel_path: PathLike) -> WorkspaceMetrics:
        """One file's contribution: analyzed, or counted as skipped."""
        try:
            return aggregate_workspace([self.analyze_file(rel_path)])
        except UnsupportedLanguageError as e:
            logger.debug(f"Skipping {rel_path}: {e}")
        except (FileAccessError, ParsingError) as e:
            logger.warning(f"Skipping {rel_path}: {e}")
        return aggregate_workspace([], skipped=1)

    def _analyze_sequential(self, files: list[PathLike]) -> WorkspaceMetrics:
        metrics = WorkspaceMetrics()
        deadline = self._deadline()
        for index, rel_path in enumerate(files):
            if deadline is not None and time.monotonic() >= deadline:
                remaining = len(files) - index
                logger.warning(f"Timed out; skipping {remaining} remaining files")
                metrics.add_skipped(remaining)
                break
            metrics = metrics.merge(self._analyze_shard(rel_path))
        return metrics

    def _analyze_parallel(self, files: list[PathLike], workers: int) -> WorkspaceMetrics:
        metrics = WorkspaceMetrics()
        executor = ThreadPoolExecutor(max_workers=workers)
        futures = {executor.submit(self._analyze_shard, fp): fp for fp in files}
        pending = set(futures)
        try:
            for future in as_completed(futures, timeout=self.config.timeout_seconds):
                pending.discard(future)
                metrics = metrics.merge(future.result())
        except TimeoutError:
            logger.warning(f"Timed out; skipping {len(pending)} unfinished files")
            metrics.add_skipped(len(pending))
        finally:
            # Abandoned files keep running to completion in the background
            executor.shutdown(wait=not pending, cancel_futures=True)
        return metrics

    def _deadline(self) -> Optional[float]:
        if self.config.timeout_seconds is None:
            return None
        return time.monotonic() + self.config.timeout_seconds
