"""Membership roster and GitHub exceptions."""

from pathlib import Path
from typing import Optional

from .base import CodeownerInsightError
from .taxonomy import ErrorCode


class RosterFormatError(CodeownerInsightError):
    """Raised when a roster line does not have exactly three fields."""

    code = ErrorCode.CI301

    def __init__(self, path: Path, line_number: int, line: str):
        super().__init__(
            f"Invalid roster line: {line!r}",
            details={"path": str(path), "line_number": str(line_number)},
        )
        self.path = path
        self.line_number = line_number
        self.line = line


class RosterReadError(CodeownerInsightError):
    """Raised when a roster file cannot be read or written."""

    code = ErrorCode.CI302

    def __init__(self, path: Path, reason: str):
        super().__init__(
            f"Cannot access roster file: {path}",
            details={"path": str(path), "reason": reason},
        )
        self.path = path
        self.reason = reason


class GithubApiError(CodeownerInsightError):
    """Raised when the GitHub API call fails or returns an unexpected payload."""

    code = ErrorCode.CI401

    def __init__(self, reason: str, url: Optional[str] = None, status: Optional[int] = None):
        details = {"reason": reason}
        if url:
            details["url"] = url
        if status is not None:
            details["status"] = str(status)
        super().__init__("GitHub API request failed", details=details)
        self.reason = reason
        self.url = url
        self.status = status


class GithubTokenError(GithubApiError):
    """Raised when no GitHub token can be obtained."""

    code = ErrorCode.CI402
