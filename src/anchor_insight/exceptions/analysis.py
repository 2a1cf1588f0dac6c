"""Analysis-related exceptions: file access, parsing, empty selections."""

from pathlib import Path
from typing import Sequence

from .base import AnchorInsightError


class AnalysisError(AnchorInsightError):
    """Base class for analysis-related errors."""
    pass


class FileAccessError(AnalysisError):
    """Raised when a file cannot be accessed or read."""

    def __init__(self, filepath: Path, reason: str):
        super().__init__(
            f"Cannot access file: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class ParsingError(AnalysisError):
    """Raised when file content cannot be parsed."""

    def __init__(self, filepath: Path, language: str, reason: str):
        super().__init__(
            f"Failed to parse {language} file: {filepath}",
            details={"filepath": str(filepath), "language": language, "reason": reason},
        )
        self.filepath = filepath
        self.language = language
        self.reason = reason


class UnsupportedLanguageError(AnalysisError):
    """Raised when a selected file is not a contract source file."""

    def __init__(self, filepath: Path, supported_extensions: Sequence[str]):
        super().__init__(
            f"Unsupported source file: {filepath}",
            details={"filepath": str(filepath), "supported": ", ".join(supported_extensions)},
        )
        self.filepath = filepath
        self.supported_extensions = list(supported_extensions)


class NoAnalyzableFilesError(AnalysisError):
    """Raised when not a single file of a selection could be analyzed.

    Kept distinct from an all-zero result: an empty metrics object would be
    indistinguishable from a codebase that simply has no complexity.
    """

    def __init__(self, requested: int, skipped: int):
        super().__init__(
            "No files were successfully analyzed",
            details={"requested": str(requested), "skipped": str(skipped)},
        )
        self.requested = requested
        self.skipped = skipped
