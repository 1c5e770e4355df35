"""Team membership roster and lookup index."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Iterable, Optional


@dataclass(frozen=True)
class MembershipEntry:
    """One roster row: an author identity that belongs to an owner group.

    Either identity field may be absent; email and name match independently.
    """

    author_email: Optional[str]
    author_name: Optional[str]
    owner_group: str

    def matches(self, author_name: str, author_email: str) -> bool:
        return (
            self.author_email is not None and self.author_email.lower() == author_email.lower()
        ) or (self.author_name is not None and self.author_name.lower() == author_name.lower())


class MembershipIndex:
    """Case-insensitive author -> owner groups lookup, built once per run."""

    def __init__(self, entries: Iterable[MembershipEntry]):
        self._by_email: dict[str, set[str]] = defaultdict(set)
        self._by_name: dict[str, set[str]] = defaultdict(set)
        self._size = 0
        for entry in entries:
            if entry.author_email:
                self._by_email[entry.author_email.lower()].add(entry.owner_group)
            if entry.author_name:
                self._by_name[entry.author_name.lower()].add(entry.owner_group)
            self._size += 1

    def __len__(self) -> int:
        return self._size

    def groups_for(self, author_name: str, author_email: str) -> set[str]:
        groups: set[str] = set()
        if author_email:
            groups |= self._by_email.get(author_email.lower(), set())
        if author_name:
            groups |= self._by_name.get(author_name.lower(), set())
        return groups

    def is_member(self, author_name: str, author_email: str, owner_group: str) -> bool:
        return owner_group in self.groups_for(author_name, author_email)

    def membership_flags(
        self, author_name: str, author_email: str, owners: Iterable[str]
    ) -> dict[str, bool]:
        """Per-owner membership of one author, in ``owners`` order."""
        groups = self.groups_for(author_name, author_email)
        return {owner: owner in groups for owner in owners}
