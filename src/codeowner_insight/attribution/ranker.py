"""Turn accumulators into sorted, truncated report rows.

Ordering is fully determined by the comparators below, never by dict
iteration order:

- contributor lists: metric descending, then name, then email;
- owner rows: owner name ascending;
- contributor rows: total change rows descending, then name, then email;
- per-owner breakdowns: total_commits descending, then owner name.
"""

from __future__ import annotations

from typing import Callable, Iterable

from .engine import AttributionEngine
from .models import (
    AdjustedTotals,
    ContributorAccumulator,
    ContributorInfo,
    ContributorReportRow,
    ContributorTally,
    OwnerAccumulator,
    OwnerBreakdown,
    OwnerReportRow,
)


def top_contributors(
    pool: dict[tuple[str, str], ContributorTally],
    metric: Callable[[ContributorTally], int],
    limit: int,
) -> tuple[ContributorInfo, ...]:
    ranked = sorted(pool.items(), key=lambda item: (-metric(item[1]), item[0][0], item[0][1]))
    return tuple(
        ContributorInfo(author_name=name, author_email=email, metric_value=metric(tally))
        for (name, email), tally in ranked[:limit]
    )


class Ranker:
    def __init__(self, top_n: int = 10, adjusted: bool = False):
        self.top_n = top_n
        self.adjusted = adjusted

    def owner_row(self, acc: OwnerAccumulator) -> OwnerReportRow:
        def by_changes(t: ContributorTally) -> int:
            return t.changes

        def by_commits(t: ContributorTally) -> int:
            return t.commits

        adjusted = None
        if self.adjusted:
            adjusted = AdjustedTotals(
                changes_by_team=acc.adjusted_changes_by_team,
                commits_by_team=acc.adjusted_commits_by_team,
                changes_by_others=acc.adjusted_changes_by_others,
                commits_by_others=acc.adjusted_commits_by_others,
            )

        return OwnerReportRow(
            owner=acc.owner,
            insertions_by_team=acc.insertions_by_team,
            deletions_by_team=acc.deletions_by_team,
            commits_by_team=acc.commits_by_team,
            insertions_by_others=acc.insertions_by_others,
            deletions_by_others=acc.deletions_by_others,
            commits_by_others=acc.commits_by_others,
            top_team_contributors_by_changes=top_contributors(
                acc.team_contributors, by_changes, self.top_n
            ),
            top_team_contributors_by_commits=top_contributors(
                acc.team_contributors, by_commits, self.top_n
            ),
            top_outside_contributors_by_changes=top_contributors(
                acc.outside_contributors, by_changes, self.top_n
            ),
            top_outside_contributors_by_commits=top_contributors(
                acc.outside_contributors, by_commits, self.top_n
            ),
            adjusted=adjusted,
        )

    def rank_owners(self, owners: Iterable[OwnerAccumulator]) -> list[OwnerReportRow]:
        return [self.owner_row(acc) for acc in sorted(owners, key=lambda a: a.owner)]

    def contributor_row(self, acc: ContributorAccumulator) -> ContributorReportRow:
        breakdowns = []
        for owner, stats in sorted(
            acc.by_owner.items(), key=lambda item: (-item[1].total_commits, item[0])
        ):
            breakdowns.append(
                OwnerBreakdown(
                    owner=owner,
                    total_insertions=stats.total_insertions,
                    total_deletions=stats.total_deletions,
                    total_commits=stats.total_commits,
                    adjusted_changes=stats.adjusted_changes if self.adjusted else None,
                    adjusted_commits=stats.adjusted_commits if self.adjusted else None,
                )
            )
        return ContributorReportRow(
            author_name=acc.author_name,
            author_email=acc.author_email,
            total_commits=acc.total_commits,
            owners=tuple(breakdowns),
        )

    def rank_contributors(
        self, contributors: Iterable[ContributorAccumulator]
    ) -> list[ContributorReportRow]:
        ordered = sorted(
            contributors, key=lambda a: (-a.total_commits, a.author_name, a.author_email)
        )
        return [self.contributor_row(acc) for acc in ordered]

    def rank(self, engine: AttributionEngine) -> tuple[list[OwnerReportRow], list[ContributorReportRow]]:
        return (
            self.rank_owners(engine.owners.values()),
            self.rank_contributors(engine.contributors.values()),
        )
