r"""Decode a line-oriented ``git log`` export into CommitRecords.

The stream is produced by::

    git log --format=COMMIT%n%H%n%at%n%an%n%ae --numstat

and looks like this for each commit::

    COMMIT
    <sha>
    <unix timestamp>
    <author name>
    <author email>
    <blank>
    <insertions>\t<deletions>\t<path>
    ...

Structure is enforced strictly: any deviation ends the stream with a
CommitParseError and the parser does not resynchronize. Numeric change
counts are lenient since git prints ``-`` for binary files.
"""

from __future__ import annotations

import re
from typing import Iterable, Iterator, Optional

from ..exceptions import CommitParseError
from .models import CommitAuthor, CommitRecord, FileChangeRecord

SENTINEL = "COMMIT"
GIT_LOG_FORMAT = f"--format={SENTINEL}%n%H%n%at%n%an%n%ae"

_METADATA_FIELDS = ("commit id", "timestamp", "author name", "author email")

_RENAME_BRACES = re.compile(r"\{([^{}]*) => ([^{}]*)\}")


def _parse_count(raw: str) -> int:
    try:
        return max(0, int(raw))
    except ValueError:
        return 0


_C_ESCAPES = {"a": 7, "b": 8, "t": 9, "n": 10, "v": 11, "f": 12, "r": 13, '"': 34, "\\": 92}
_OCTAL = re.compile(r"[0-7]{3}")


def _unquote_path(raw: str) -> str:
    """Undo git's C-style quoting (``"caf\\303\\251.go"``) of unusual paths."""
    if len(raw) < 2 or not (raw.startswith('"') and raw.endswith('"')):
        return raw
    body = raw[1:-1]
    out = bytearray()
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == "\\" and i + 1 < len(body):
            if _OCTAL.match(body, i + 1):
                out.append(int(body[i + 1 : i + 4], 8))
                i += 4
                continue
            if body[i + 1] in _C_ESCAPES:
                out.append(_C_ESCAPES[body[i + 1]])
                i += 2
                continue
        out.extend(ch.encode("utf-8"))
        i += 1
    return out.decode("utf-8", errors="replace")


def _collapse(path: str) -> str:
    while "//" in path:
        path = path.replace("//", "/")
    return path.lstrip("/")


def _rename_paths(raw: str) -> tuple[Optional[str], str]:
    """Split a numstat path into (source, destination); source is None unless renamed.

    Handles ``a/{old => new}/f`` and ``old => new``.
    """
    if " => " not in raw:
        return None, _unquote_path(raw)
    if "{" in raw:
        old = _RENAME_BRACES.sub(lambda m: m.group(1), raw)
        new = _RENAME_BRACES.sub(lambda m: m.group(2), raw)
        return _collapse(old), _collapse(new)
    old, new = raw.split(" => ", 1)
    return _unquote_path(old), _unquote_path(new)


def _destination_path(raw: str) -> str:
    return _rename_paths(raw)[1]


class CommitStreamParser:
    """Lazy, single-pass iterator of CommitRecords over text lines.

    After an error (or the end of input) the parser is exhausted; the
    underlying line source is not rewindable.
    """

    def __init__(self, lines: Iterable[str], sentinel: str = SENTINEL):
        self._lines = iter(lines)
        self._sentinel = sentinel
        self._pending: Optional[str] = None
        self._line_number = 0
        self._exhausted = False

    def __iter__(self) -> Iterator[CommitRecord]:
        return self

    def __next__(self) -> CommitRecord:
        if self._exhausted:
            raise StopIteration
        try:
            commit = self._next_commit()
        except CommitParseError:
            self._exhausted = True
            raise
        if commit is None:
            self._exhausted = True
            raise StopIteration
        return commit

    @property
    def line_number(self) -> int:
        """Number of lines consumed so far."""
        return self._line_number

    def _peek(self) -> Optional[str]:
        if self._pending is None:
            raw = next(self._lines, None)
            if raw is None:
                return None
            self._pending = raw.rstrip("\r\n")
        return self._pending

    def _read(self) -> Optional[str]:
        line = self._peek()
        if line is not None:
            self._pending = None
            self._line_number += 1
        return line

    def _next_commit(self) -> Optional[CommitRecord]:
        line = self._read()
        if line is None:
            return None
        if line != self._sentinel:
            raise CommitParseError(
                f"expected {self._sentinel!r} sentinel", self._line_number, line
            )

        metadata = []
        for field in _METADATA_FIELDS:
            value = self._read()
            if value is None:
                raise CommitParseError(
                    f"input ended before {field}",
                    self._line_number,
                    commit_id=metadata[0] if metadata else None,
                )
            metadata.append(value)
        commit_id, raw_timestamp, author_name, author_email = metadata

        try:
            timestamp = int(raw_timestamp)
        except ValueError:
            raise CommitParseError(
                "timestamp is not an integer", self._line_number - 2, raw_timestamp, commit_id
            )

        separator = self._peek()
        if separator is not None and separator != self._sentinel:
            # A sentinel here means the commit touched no files.
            if separator.strip():
                raise CommitParseError(
                    "expected blank separator line", self._line_number + 1, separator, commit_id
                )
            self._read()

        changes = []
        while True:
            line = self._peek()
            if line is None or line == self._sentinel:
                break
            self._read()
            if not line.strip():
                following = self._peek()
                if following is None or following == self._sentinel:
                    # one blank line may close a change block
                    break
                raise CommitParseError(
                    "blank line inside file changes", self._line_number, line, commit_id
                )
            parts = line.split("\t")
            if len(parts) != 3:
                raise CommitParseError(
                    "file change line needs insertions, deletions and path",
                    self._line_number,
                    line,
                    commit_id,
                )
            old_path, path = _rename_paths(parts[2])
            changes.append(
                FileChangeRecord(
                    path=path,
                    insertions=_parse_count(parts[0]),
                    deletions=_parse_count(parts[1]),
                    old_path=old_path,
                )
            )

        return CommitRecord(
            id=commit_id,
            author=CommitAuthor(name=author_name, email=author_email),
            timestamp=timestamp,
            changes=tuple(changes),
        )


def parse_commits(lines: Iterable[str]) -> CommitStreamParser:
    """Convenience wrapper: ``for commit in parse_commits(lines)``."""
    return CommitStreamParser(lines)
