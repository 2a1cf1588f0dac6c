"""Exception hierarchy for Anchor Insight."""

from .analysis import (
    AnalysisError,
    FileAccessError,
    NoAnalyzableFilesError,
    ParsingError,
    UnsupportedLanguageError,
)
from .base import AnchorInsightError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
)

__all__ = [
    "AnchorInsightError",
    "AnalysisError",
    "FileAccessError",
    "ParsingError",
    "UnsupportedLanguageError",
    "NoAnalyzableFilesError",
    "ConfigurationError",
    "InvalidPathError",
    "InvalidConfigError",
]
