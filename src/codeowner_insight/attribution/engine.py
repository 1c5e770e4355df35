"""Attribution engine: fold enriched commits into owner and contributor totals.

Two views are maintained side by side:

Owner view
    Every owner of a change gets the full raw counts of that change (no
    k-way split), filed under "team" when the author is a member of that
    owner group and "others" otherwise. Commit counters advance once per
    change row, so a commit touching three owned files counts three times.

Contributor view
    Each change lands in exactly one bucket per author: its first owner, or
    the unowned label when nothing owns it.

Adjusted credit is insertion-proportional. Within one commit, the weight of
an owned change is its insertions over the insertions of all owned changes,
split equally among the change's owners. Summed over a commit the weights
come to 1.0, or 0.0 when the commit has no owned insertions.
"""

from __future__ import annotations

from ..logging_config import get_logger
from .models import (
    ContributorAccumulator,
    EnrichedChange,
    EnrichedCommit,
    OwnerAccumulator,
)

logger = get_logger(__name__)


def commit_weights(commit: EnrichedCommit) -> list[float]:
    """Per-owner adjusted weight for each change of ``commit``, in change order.

    A change with k owners gets ``insertions / k / denominator`` per owner;
    unowned changes get 0.
    """
    denominator = sum(c.insertions for c in commit.changes if c.is_owned)
    if denominator == 0:
        return [0.0] * len(commit.changes)
    weights = []
    for change in commit.changes:
        if change.is_owned:
            weights.append(change.insertions / len(change.owners) / denominator)
        else:
            weights.append(0.0)
    return weights


class AttributionEngine:
    """Mutable accumulator over a stream of EnrichedCommit values."""

    def __init__(self, adjusted: bool = False, unowned_label: str = "unowned"):
        self.adjusted = adjusted
        self.unowned_label = unowned_label
        self.owners: dict[str, OwnerAccumulator] = {}
        self.contributors: dict[tuple[str, str], ContributorAccumulator] = {}
        self.commits_processed = 0
        self.changes_processed = 0

    def apply(self, commit: EnrichedCommit) -> None:
        weights = commit_weights(commit) if self.adjusted else None
        for index, change in enumerate(commit.changes):
            weight = weights[index] if weights is not None else 0.0
            self._apply_owner_view(commit, change, weight)
            self._apply_contributor_view(commit, change, weight)
            self.changes_processed += 1
        self.commits_processed += 1

    def _apply_owner_view(self, commit: EnrichedCommit, change: EnrichedChange, weight: float) -> None:
        if not change.owners:
            return
        author = commit.author
        for owner in change.owners:
            acc = self.owners.get(owner)
            if acc is None:
                acc = self.owners[owner] = OwnerAccumulator(owner=owner)

            team = change.author_is_owner(owner)
            if team:
                acc.insertions_by_team += change.insertions
                acc.deletions_by_team += change.deletions
                acc.commits_by_team += 1
            else:
                acc.insertions_by_others += change.insertions
                acc.deletions_by_others += change.deletions
                acc.commits_by_others += 1

            if self.adjusted:
                if team:
                    acc.adjusted_changes_by_team += change.insertions
                    acc.adjusted_commits_by_team += weight
                else:
                    acc.adjusted_changes_by_others += change.insertions
                    acc.adjusted_commits_by_others += weight

            tally = acc.tally(author, team)
            tally.changes += change.insertions + change.deletions
            tally.commits += 1

    def _apply_contributor_view(
        self, commit: EnrichedCommit, change: EnrichedChange, weight: float
    ) -> None:
        author = commit.author
        acc = self.contributors.get(author.key)
        if acc is None:
            acc = self.contributors[author.key] = ContributorAccumulator(
                author_name=author.name, author_email=author.email
            )

        bucket = change.first_owner or self.unowned_label
        stats = acc.stats_for(bucket)
        stats.total_insertions += change.insertions
        stats.total_deletions += change.deletions
        stats.total_commits += 1
        if self.adjusted:
            stats.adjusted_changes += change.insertions
            stats.adjusted_commits += weight
