"""Data models for ownership attribution.

Enriched records flow out of the enrichment stage; accumulators are
mutated by the engine; report rows are the sorted, immutable output of the
ranker.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Optional

from ..history.models import CommitAuthor, CommitRecord, FileChangeRecord

ADJUSTED_PRECISION = 6


@dataclass(frozen=True)
class EnrichedChange:
    change: FileChangeRecord
    # None: no ownership file; (): file present, path unowned
    owners: Optional[tuple[str, ...]] = None
    # None: no roster supplied
    owner_membership: Optional[dict[str, bool]] = field(default=None, compare=False)

    @property
    def path(self) -> str:
        return self.change.path

    @property
    def insertions(self) -> int:
        return self.change.insertions

    @property
    def deletions(self) -> int:
        return self.change.deletions

    @property
    def is_owned(self) -> bool:
        return bool(self.owners)

    @property
    def first_owner(self) -> Optional[str]:
        return self.owners[0] if self.owners else None

    def author_is_owner(self, owner: str) -> bool:
        """Whether the commit author belongs to ``owner``; unknown counts as no."""
        if self.owner_membership is None:
            return False
        return self.owner_membership.get(owner, False)


@dataclass(frozen=True)
class EnrichedCommit:
    commit: CommitRecord
    changes: tuple[EnrichedChange, ...] = ()

    @property
    def id(self) -> str:
        return self.commit.id

    @property
    def author(self) -> CommitAuthor:
        return self.commit.author


@dataclass
class ContributorTally:
    changes: int = 0  # insertions + deletions
    commits: int = 0  # change rows, not distinct commits


@dataclass
class OwnerAccumulator:
    owner: str
    insertions_by_team: int = 0
    deletions_by_team: int = 0
    commits_by_team: int = 0
    insertions_by_others: int = 0
    deletions_by_others: int = 0
    commits_by_others: int = 0

    adjusted_changes_by_team: int = 0
    adjusted_commits_by_team: float = 0.0
    adjusted_changes_by_others: int = 0
    adjusted_commits_by_others: float = 0.0

    team_contributors: dict[tuple[str, str], ContributorTally] = field(default_factory=dict)
    outside_contributors: dict[tuple[str, str], ContributorTally] = field(default_factory=dict)

    def tally(self, author: CommitAuthor, team: bool) -> ContributorTally:
        pool = self.team_contributors if team else self.outside_contributors
        return pool.setdefault(author.key, ContributorTally())


@dataclass
class ContributorOwnerStats:
    total_insertions: int = 0
    total_deletions: int = 0
    total_commits: int = 0
    adjusted_changes: int = 0
    adjusted_commits: float = 0.0


@dataclass
class ContributorAccumulator:
    author_name: str
    author_email: str
    by_owner: dict[str, ContributorOwnerStats] = field(default_factory=dict)

    def stats_for(self, owner: str) -> ContributorOwnerStats:
        return self.by_owner.setdefault(owner, ContributorOwnerStats())

    @property
    def total_commits(self) -> int:
        return sum(stats.total_commits for stats in self.by_owner.values())


# ---------------------------------------------------------------------------
# Report rows
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ContributorInfo:
    author_name: str
    author_email: str
    metric_value: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class AdjustedTotals:
    changes_by_team: int
    commits_by_team: float
    changes_by_others: int
    commits_by_others: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "changes_by_team": self.changes_by_team,
            "commits_by_team": round(self.commits_by_team, ADJUSTED_PRECISION),
            "changes_by_others": self.changes_by_others,
            "commits_by_others": round(self.commits_by_others, ADJUSTED_PRECISION),
        }


@dataclass(frozen=True)
class OwnerReportRow:
    owner: str
    insertions_by_team: int
    deletions_by_team: int
    commits_by_team: int
    insertions_by_others: int
    deletions_by_others: int
    commits_by_others: int
    top_team_contributors_by_changes: tuple[ContributorInfo, ...] = ()
    top_team_contributors_by_commits: tuple[ContributorInfo, ...] = ()
    top_outside_contributors_by_changes: tuple[ContributorInfo, ...] = ()
    top_outside_contributors_by_commits: tuple[ContributorInfo, ...] = ()
    adjusted: Optional[AdjustedTotals] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "owner": self.owner,
            "insertions_by_team": self.insertions_by_team,
            "deletions_by_team": self.deletions_by_team,
            "commits_by_team": self.commits_by_team,
            "insertions_by_others": self.insertions_by_others,
            "deletions_by_others": self.deletions_by_others,
            "commits_by_others": self.commits_by_others,
        }
        if self.adjusted is not None:
            data["adjusted"] = self.adjusted.to_dict()
        for name in (
            "top_team_contributors_by_changes",
            "top_team_contributors_by_commits",
            "top_outside_contributors_by_changes",
            "top_outside_contributors_by_commits",
        ):
            data[name] = [c.to_dict() for c in getattr(self, name)]
        return data


@dataclass(frozen=True)
class OwnerBreakdown:
    owner: str
    total_insertions: int
    total_deletions: int
    total_commits: int
    adjusted_changes: Optional[int] = None
    adjusted_commits: Optional[float] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "owner": self.owner,
            "total_insertions": self.total_insertions,
            "total_deletions": self.total_deletions,
            "total_commits": self.total_commits,
        }
        if self.adjusted_changes is not None:
            data["adjusted_changes"] = self.adjusted_changes
            data["adjusted_commits"] = round(self.adjusted_commits or 0.0, ADJUSTED_PRECISION)
        return data


@dataclass(frozen=True)
class ContributorReportRow:
    author_name: str
    author_email: str
    total_commits: int
    owners: tuple[OwnerBreakdown, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "author_name": self.author_name,
            "author_email": self.author_email,
            "total_commits": self.total_commits,
            "owners": [o.to_dict() for o in self.owners],
        }
