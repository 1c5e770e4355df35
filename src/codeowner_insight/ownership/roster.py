"""Flat TSV persistence for membership rosters.

Format: a header line, then ``author_email<TAB>author_name<TAB>owner_group``
per record. An empty field means the value is absent.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from ..exceptions import RosterFormatError, RosterReadError
from ..logging_config import get_logger
from .membership import MembershipEntry

logger = get_logger(__name__)

HEADER = "author_email\tauthor_name\towner_group"


def write_roster(entries: Iterable[MembershipEntry], path: Path) -> int:
    """Write entries to ``path``; returns the number of records written."""
    path = Path(path)
    lines = [HEADER]
    for entry in entries:
        lines.append(
            f"{entry.author_email or ''}\t{entry.author_name or ''}\t{entry.owner_group}"
        )
    try:
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    except OSError as e:
        raise RosterReadError(path, str(e))
    logger.info("Wrote %d roster entries to %s", len(lines) - 1, path)
    return len(lines) - 1


def read_roster(path: Path) -> list[MembershipEntry]:
    """Read a roster file. The first line is a header and is skipped."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise RosterReadError(path, str(e))

    entries = []
    for line_number, line in enumerate(text.splitlines()[1:], start=2):
        parts = line.split("\t")
        if len(parts) != 3:
            raise RosterFormatError(path, line_number, line)
        email, name, group = parts
        entries.append(
            MembershipEntry(
                author_email=email or None,
                author_name=name or None,
                owner_group=group,
            )
        )
    logger.debug("Read %d roster entries from %s", len(entries), path)
    return entries
