"""Annotate commits with owner groups and author membership."""

from __future__ import annotations

from typing import Iterable, Iterator, Optional

from ..history.models import CommitRecord
from ..logging_config import get_logger
from ..ownership.membership import MembershipIndex
from ..ownership.resolver import OwnershipResolver
from ..ownership.rules import OwnershipRuleSet
from .models import EnrichedChange, EnrichedCommit

logger = get_logger(__name__)


def enrich_commit(
    commit: CommitRecord,
    rule_set: OwnershipRuleSet,
    memberships: Optional[MembershipIndex] = None,
) -> EnrichedCommit:
    """Attach owners and per-owner membership flags to each change of ``commit``."""
    author = commit.author

    changes = []
    for change in commit.changes:
        owners = rule_set.owners_of(change.path) if rule_set.found else None
        membership = None
        if memberships is not None:
            membership = memberships.membership_flags(author.name, author.email, owners or ())
        changes.append(EnrichedChange(change=change, owners=owners, owner_membership=membership))
    return EnrichedCommit(commit=commit, changes=tuple(changes))


class EnrichmentStage:
    """Pull-style stage: CommitRecord in, EnrichedCommit out.

    Commits must arrive in the order the resolver's cache expects; the stage
    never reorders or buffers.
    """

    def __init__(
        self,
        commits: Iterable[CommitRecord],
        resolver: OwnershipResolver,
        memberships: Optional[MembershipIndex] = None,
    ):
        self._commits = iter(commits)
        self.resolver = resolver
        self.memberships = memberships

    def __iter__(self) -> Iterator[EnrichedCommit]:
        return self

    def __next__(self) -> EnrichedCommit:
        commit = next(self._commits)
        rule_set = self.resolver.resolve(commit)
        return enrich_commit(commit, rule_set, self.memberships)

    def close(self) -> None:
        """Release the upstream commit stream (e.g. a running git process)."""
        close = getattr(self._commits, "close", None)
        if close is not None:
            close()
