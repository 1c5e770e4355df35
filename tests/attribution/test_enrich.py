"""Tests for the enrichment stage."""

from conftest import ALICE, BOB, FakeHistorySource, make_commit

from codeowner_insight.attribution.enrich import EnrichmentStage, enrich_commit
from codeowner_insight.ownership import MembershipEntry, MembershipIndex, OwnershipResolver
from codeowner_insight.ownership.rules import OwnershipRuleSet

RULES = OwnershipRuleSet.parse(
    "*.go @team1 @team2\n/docs/ @docs\n/vendor/\n", source_path="CODEOWNERS"
)
ROSTER = MembershipIndex([MembershipEntry("alice@example.com", "Alice", "@team2")])


class TestEnrichCommit:
    def test_owners_and_membership_per_owner(self):
        commit = make_commit("c1", ALICE, [("a.go", 3, 1)])
        change = enrich_commit(commit, RULES, ROSTER).changes[0]
        assert change.owners == ("@team1", "@team2")
        assert change.owner_membership == {"@team1": False, "@team2": True}
        assert not change.author_is_owner("@team1")
        assert change.author_is_owner("@team2")
        assert change.first_owner == "@team1"

    def test_unmatched_path_has_empty_owners(self):
        commit = make_commit("c1", ALICE, [("README.md", 1, 0)])
        change = enrich_commit(commit, RULES, ROSTER).changes[0]
        assert change.owners == ()
        assert not change.is_owned
        assert change.first_owner is None

    def test_owner_less_rule_is_unowned(self):
        commit = make_commit("c1", ALICE, [("vendor/lib.c", 1, 0)])
        assert enrich_commit(commit, RULES).changes[0].owners == ()

    def test_no_codeowners_file_gives_none(self):
        commit = make_commit("c1", ALICE, [("a.go", 1, 0)])
        change = enrich_commit(commit, OwnershipRuleSet.empty(), ROSTER).changes[0]
        assert change.owners is None
        assert change.owner_membership == {}

    def test_without_roster_membership_is_unknown(self):
        commit = make_commit("c1", BOB, [("a.go", 1, 0)])
        change = enrich_commit(commit, RULES).changes[0]
        assert change.owner_membership is None
        assert not change.author_is_owner("@team1")

    def test_change_order_is_preserved(self):
        commit = make_commit("c1", ALICE, [("z.go", 1, 0), ("a.go", 1, 0), ("docs/x", 1, 0)])
        enriched = enrich_commit(commit, RULES, ROSTER)
        assert [c.path for c in enriched.changes] == ["z.go", "a.go", "docs/x"]
        assert enriched.id == "c1"
        assert enriched.author == ALICE


class TestEnrichmentStage:
    def test_pulls_commits_lazily_in_order(self):
        commits = [
            make_commit("c1", ALICE, [("a.go", 1, 0)]),
            make_commit("c2", BOB, [("a.go", 2, 0)]),
        ]
        source = FakeHistorySource(commits, files={"c1": {"CODEOWNERS": "* @team1"}})
        stage = EnrichmentStage(source.commits(), OwnershipResolver(source))

        first = next(stage)
        assert first.id == "c1"
        assert first.changes[0].owners == ("@team1",)
        assert [e.id for e in stage] == ["c2"]

    def test_close_without_closable_upstream(self):
        source = FakeHistorySource([])
        stage = EnrichmentStage(source.commits(), OwnershipResolver(source))
        stage.close()
        assert list(stage) == []
