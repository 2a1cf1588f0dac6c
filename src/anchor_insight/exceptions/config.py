"""Configuration exceptions: workspace paths and settings."""

from pathlib import Path
from typing import Any, Optional

from .base import AnchorInsightError


class ConfigurationError(AnchorInsightError):
    """Base class for configuration-related errors."""

    pass


class InvalidPathError(ConfigurationError):
    """Raised when a workspace root is missing or not a directory."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Invalid path: {path}", details={"path": str(path), "reason": reason})
        self.path = path
        self.reason = reason


class InvalidConfigError(ConfigurationError):
    """Raised when a configuration value fails validation.

    ``source`` names where the value came from (a TOML file, an environment
    variable or "overrides") when that is known.
    """

    def __init__(self, key: str, value: Any, reason: str, source: Optional[str] = None):
        details = {"key": key, "value": str(value), "reason": reason}
        if source is not None:
            details["source"] = source
        super().__init__(f"Invalid configuration for {key}: {value}", details=details)
        self.key = key
        self.value = value
        self.reason = reason
        self.source = source
