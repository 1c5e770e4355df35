"""Interface the attribution core pulls history through."""

from __future__ import annotations

from typing import Iterator, Optional, Protocol, runtime_checkable

from .models import CommitRecord


@runtime_checkable
class HistorySource(Protocol):
    """Ordered commit enumerator plus point-in-time file access.

    ``commits()`` is single-pass: callers must not expect to iterate it
    twice. ``read_file_at_commit`` returns None when the path did not exist
    at that commit and raises FileReadError for any other failure.
    """

    def commits(self) -> Iterator[CommitRecord]: ...

    def read_file_at_commit(self, commit_id: str, path: str) -> Optional[str]: ...
