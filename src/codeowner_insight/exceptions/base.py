"""Base exception for codeowner-insight."""

from typing import Any, Dict, Optional

from .taxonomy import ErrorCode, stage_for


class CodeownerInsightError(Exception):
    """Base exception for all codeowner-insight errors.

    Subclasses pin ``code``; the stage is derived from it so the CLI can tell
    the user where a run stopped.
    """

    code: ErrorCode = ErrorCode.CI100

    def __init__(self, message: str, details: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    @property
    def stage(self) -> str:
        return stage_for(self.code)

    def __str__(self) -> str:
        prefix = f"[{self.code.value}] {self.message}"
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{prefix} ({details_str})"
        return prefix

    def to_json(self) -> Dict[str, Any]:
        """Structured logging format."""
        return {
            "error_code": self.code.value,
            "stage": self.stage,
            "message": self.message,
            "details": self.details,
        }
