"""Tests for the membership index and roster TSV persistence."""

import pytest

from codeowner_insight.exceptions import RosterFormatError, RosterReadError
from codeowner_insight.ownership.membership import MembershipEntry, MembershipIndex
from codeowner_insight.ownership.roster import HEADER, read_roster, write_roster

ENTRIES = [
    MembershipEntry("alice@example.com", "Alice", "@org/core"),
    MembershipEntry(None, "Bob Builder", "@org/core"),
    MembershipEntry("carol@example.com", None, "@org/web"),
    MembershipEntry("alice@example.com", "Alice", "@org/web"),
]


class TestMembershipIndex:
    def test_email_match_is_case_insensitive(self):
        index = MembershipIndex(ENTRIES)
        assert index.is_member("Someone Else", "ALICE@Example.com", "@org/core")

    def test_name_match_is_case_insensitive(self):
        index = MembershipIndex(ENTRIES)
        assert index.is_member("bob builder", "bob@elsewhere.com", "@org/core")

    def test_absent_fields_never_match(self):
        index = MembershipIndex(ENTRIES)
        # Carol has no name on record; an empty name must not match it
        assert not index.is_member("", "nobody@example.com", "@org/web")
        assert index.is_member("", "carol@example.com", "@org/web")

    def test_wrong_group(self):
        index = MembershipIndex(ENTRIES)
        assert not index.is_member("Bob Builder", "", "@org/web")

    def test_groups_for(self):
        index = MembershipIndex(ENTRIES)
        assert index.groups_for("Alice", "alice@example.com") == {"@org/core", "@org/web"}
        assert index.groups_for("Zed", "zed@example.com") == set()

    def test_membership_flags(self):
        index = MembershipIndex(ENTRIES)
        flags = index.membership_flags("Carol", "carol@example.com", ["@org/core", "@org/web"])
        assert flags == {"@org/core": False, "@org/web": True}

    def test_entry_matches(self):
        entry = MembershipEntry(None, "Bob Builder", "@org/core")
        assert entry.matches("BOB BUILDER", "x@y")
        assert not entry.matches("Bob", "x@y")

    def test_len(self):
        assert len(MembershipIndex(ENTRIES)) == 4


class TestRosterFile:
    def test_round_trip_preserves_absent_fields(self, tmp_path):
        path = tmp_path / "roster.tsv"
        assert write_roster(ENTRIES, path) == 4
        assert set(read_roster(path)) == set(ENTRIES)

    def test_header_is_written(self, tmp_path):
        path = tmp_path / "roster.tsv"
        write_roster(ENTRIES[:1], path)
        lines = path.read_text().splitlines()
        assert lines[0] == HEADER
        assert lines[1] == "alice@example.com\tAlice\t@org/core"

    def test_empty_roster(self, tmp_path):
        path = tmp_path / "roster.tsv"
        write_roster([], path)
        assert read_roster(path) == []

    def test_wrong_field_count_reports_line(self, tmp_path):
        path = tmp_path / "roster.tsv"
        path.write_text(f"{HEADER}\na@x\tA\t@g\nbroken\tline\n")
        with pytest.raises(RosterFormatError) as exc:
            read_roster(path)
        assert exc.value.line_number == 3
        assert exc.value.line == "broken\tline"
        assert exc.value.stage == "roster"

    def test_missing_file(self, tmp_path):
        with pytest.raises(RosterReadError):
            read_roster(tmp_path / "nope.tsv")
