"""Ingestion and repository-access exceptions."""

from typing import Dict, Optional, Sequence

from .base import CodeownerInsightError
from .taxonomy import ErrorCode


class HistoryError(CodeownerInsightError):
    """Base class for errors reading commit history."""

    code = ErrorCode.CI100


class CommitParseError(HistoryError):
    """Raised when the history stream has a malformed commit block."""

    code = ErrorCode.CI101

    def __init__(
        self,
        reason: str,
        line_number: int,
        line: Optional[str] = None,
        commit_id: Optional[str] = None,
    ):
        details: Dict[str, str] = {"line_number": str(line_number)}
        if line is not None:
            details["line"] = repr(line)
        if commit_id:
            details["commit"] = commit_id
        super().__init__(f"Malformed commit stream: {reason}", details=details)
        self.reason = reason
        self.line_number = line_number
        self.line = line
        self.commit_id = commit_id


class GitCommandError(HistoryError):
    """Raised when git cannot be run or exits with an error."""

    code = ErrorCode.CI102

    def __init__(self, args: Sequence[str], reason: str, returncode: Optional[int] = None):
        details = {"command": " ".join(args), "reason": reason}
        if returncode is not None:
            details["returncode"] = str(returncode)
        super().__init__("git command failed", details=details)
        self.args_list = list(args)
        self.reason = reason
        self.returncode = returncode


class FileReadError(CodeownerInsightError):
    """Raised when repository content at a commit cannot be read.

    A path that simply does not exist at the commit is not an error.
    """

    code = ErrorCode.CI201

    def __init__(self, commit_id: str, path: str, reason: str):
        super().__init__(
            f"Cannot read {path} at {commit_id}",
            details={"commit": commit_id, "path": path, "reason": reason},
        )
        self.commit_id = commit_id
        self.path = path
        self.reason = reason
