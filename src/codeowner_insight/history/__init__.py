"""History ingestion: commit records, stream parser, git-backed source."""

from .git import GitHistorySource
from .models import CommitAuthor, CommitRecord, FileChangeRecord
from .parser import CommitStreamParser, parse_commits
from .source import HistorySource

__all__ = [
    "CommitAuthor",
    "CommitRecord",
    "FileChangeRecord",
    "CommitStreamParser",
    "GitHistorySource",
    "HistorySource",
    "parse_commits",
]
