"""Data models for commit history ingestion."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


@dataclass(frozen=True)
class CommitAuthor:
    name: str
    email: str

    @property
    def key(self) -> tuple[str, str]:
        """Identity used to group contributions: (name, email)."""
        return (self.name, self.email)


@dataclass(frozen=True)
class FileChangeRecord:
    path: str
    insertions: int  # 0 for binary files
    deletions: int  # 0 for binary files
    old_path: Optional[str] = None  # source path when git reports a rename


@dataclass(frozen=True)
class CommitRecord:
    id: str
    author: CommitAuthor
    timestamp: int  # unix seconds
    changes: tuple[FileChangeRecord, ...] = ()

    @property
    def date(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc)

    @property
    def changed_paths(self) -> frozenset[str]:
        """Every path the commit touched, including the source side of renames."""
        paths = {change.path for change in self.changes}
        paths.update(change.old_path for change in self.changes if change.old_path)
        return frozenset(paths)
