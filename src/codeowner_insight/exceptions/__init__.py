"""Exception hierarchy for codeowner-insight."""

from .base import CodeownerInsightError
from .config import ConfigurationError, InvalidConfigError
from .history import CommitParseError, FileReadError, GitCommandError, HistoryError
from .roster import GithubApiError, GithubTokenError, RosterFormatError, RosterReadError
from .taxonomy import ErrorCode

__all__ = [
    "CodeownerInsightError",
    "ErrorCode",
    "HistoryError",
    "CommitParseError",
    "GitCommandError",
    "FileReadError",
    "RosterFormatError",
    "RosterReadError",
    "GithubApiError",
    "GithubTokenError",
    "ConfigurationError",
    "InvalidConfigError",
]
