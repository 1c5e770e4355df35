"""Tests for ranking and report-row construction."""

import json

from codeowner_insight.attribution.models import (
    ContributorAccumulator,
    ContributorOwnerStats,
    ContributorTally,
    OwnerAccumulator,
)
from codeowner_insight.attribution.ranker import Ranker, top_contributors


def pool(**tallies):
    """{name: (changes, commits)} -> pool keyed by (name, email)."""
    return {
        (name, f"{name.lower()}@example.com"): ContributorTally(changes, commits)
        for name, (changes, commits) in tallies.items()
    }


class TestTopContributors:
    def test_sorted_by_metric_descending(self):
        ranked = top_contributors(
            pool(Alice=(5, 1), Bob=(50, 2), Carol=(20, 9)), lambda t: t.changes, 10
        )
        assert [c.author_name for c in ranked] == ["Bob", "Carol", "Alice"]
        assert [c.metric_value for c in ranked] == [50, 20, 5]

    def test_ties_break_on_name_then_email(self):
        tallies = {
            ("Bob", "z@example.com"): ContributorTally(10, 1),
            ("Alice", "b@example.com"): ContributorTally(10, 1),
            ("Bob", "a@example.com"): ContributorTally(10, 1),
        }
        ranked = top_contributors(tallies, lambda t: t.changes, 10)
        assert [(c.author_name, c.author_email) for c in ranked] == [
            ("Alice", "b@example.com"),
            ("Bob", "a@example.com"),
            ("Bob", "z@example.com"),
        ]

    def test_truncates_to_limit(self):
        tallies = {(f"dev{i:02d}", "x"): ContributorTally(i, i) for i in range(25)}
        ranked = top_contributors(tallies, lambda t: t.commits, 10)
        assert len(ranked) == 10
        assert ranked[0].metric_value == 24

    def test_empty_pool(self):
        assert top_contributors({}, lambda t: t.changes, 10) == ()


class TestOwnerRows:
    def test_rows_sorted_by_owner_name(self):
        owners = [OwnerAccumulator("@zeta"), OwnerAccumulator("@alpha"), OwnerAccumulator("@mid")]
        rows = Ranker().rank_owners(owners)
        assert [r.owner for r in rows] == ["@alpha", "@mid", "@zeta"]

    def test_four_lists(self):
        acc = OwnerAccumulator(
            "@t",
            team_contributors=pool(Alice=(100, 1), Dan=(5, 7)),
            outside_contributors=pool(Bob=(3, 3), Eve=(30, 1)),
        )
        row = Ranker(top_n=1).owner_row(acc)
        assert [c.author_name for c in row.top_team_contributors_by_changes] == ["Alice"]
        assert [c.author_name for c in row.top_team_contributors_by_commits] == ["Dan"]
        assert [c.author_name for c in row.top_outside_contributors_by_changes] == ["Eve"]
        assert [c.author_name for c in row.top_outside_contributors_by_commits] == ["Bob"]

    def test_adjusted_block_only_when_enabled(self):
        acc = OwnerAccumulator("@t", adjusted_commits_by_team=0.3333333333)
        assert Ranker().owner_row(acc).adjusted is None
        assert "adjusted" not in Ranker().owner_row(acc).to_dict()

        data = Ranker(adjusted=True).owner_row(acc).to_dict()
        assert data["adjusted"]["commits_by_team"] == 0.333333


class TestContributorRows:
    def test_sorted_by_total_commits_then_name(self):
        def contributor(name, *counts):
            acc = ContributorAccumulator(name, f"{name.lower()}@example.com")
            for i, count in enumerate(counts):
                acc.by_owner[f"@o{i}"] = ContributorOwnerStats(total_commits=count)
            return acc

        rows = Ranker().rank_contributors(
            [contributor("Carol", 1), contributor("Bob", 2, 2), contributor("Alice", 1)]
        )
        assert [r.author_name for r in rows] == ["Bob", "Alice", "Carol"]
        assert rows[0].total_commits == 4

    def test_breakdown_sorted_by_commits_then_owner(self):
        acc = ContributorAccumulator("Alice", "alice@example.com")
        acc.by_owner["unowned"] = ContributorOwnerStats(total_commits=2)
        acc.by_owner["@b"] = ContributorOwnerStats(total_commits=5)
        acc.by_owner["@a"] = ContributorOwnerStats(total_commits=2)
        row = Ranker().contributor_row(acc)
        assert [o.owner for o in row.owners] == ["@b", "@a", "unowned"]

    def test_adjusted_fields_in_dict(self):
        acc = ContributorAccumulator("Alice", "alice@example.com")
        acc.by_owner["@a"] = ContributorOwnerStats(
            total_insertions=3, total_commits=1, adjusted_changes=3, adjusted_commits=0.5
        )
        plain = Ranker().contributor_row(acc).to_dict()
        assert "adjusted_changes" not in plain["owners"][0]

        adjusted = Ranker(adjusted=True).contributor_row(acc).to_dict()
        assert adjusted["owners"][0]["adjusted_changes"] == 3
        assert adjusted["owners"][0]["adjusted_commits"] == 0.5

    def test_json_serializable(self):
        acc = ContributorAccumulator("Alice", "alice@example.com")
        acc.by_owner["@a"] = ContributorOwnerStats(total_commits=1)
        json.dumps(Ranker(adjusted=True).contributor_row(acc).to_dict())
