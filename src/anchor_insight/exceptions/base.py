"""Base exception for Anchor Insight."""

from typing import Any, Dict, Optional


class AnchorInsightError(Exception):
    """Base exception for all Anchor Insight errors.

    ``details`` holds string-valued context (paths, reasons, counts) that is
    shown after the message and included in machine-readable error output.
    """

    def __init__(self, message: str, details: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Error payload for JSON output."""
        return {
            "type": type(self).__name__,
            "message": self.message,
            "details": dict(self.details),
        }
