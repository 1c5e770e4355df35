"""Tests for the git log stream parser."""

import pytest

from codeowner_insight.exceptions import CommitParseError
from codeowner_insight.history.models import CommitAuthor, FileChangeRecord
from codeowner_insight.history.parser import (
    SENTINEL,
    CommitStreamParser,
    _destination_path,
    _rename_paths,
    _unquote_path,
    parse_commits,
)

SHA_A = "a" * 40
SHA_B = "b" * 40


def block(sha=SHA_A, ts="1700000000", name="Alice", email="alice@example.com", changes=()):
    lines = [SENTINEL, sha, ts, name, email, ""]
    lines.extend(changes)
    return lines


class TestWellFormedStreams:
    """Streams as git produces them."""

    def test_single_commit(self):
        commits = list(parse_commits(block(changes=["10\t2\tsrc/a.py", "1\t0\tREADME.md"])))

        assert len(commits) == 1
        commit = commits[0]
        assert commit.id == SHA_A
        assert commit.timestamp == 1700000000
        assert commit.author == CommitAuthor("Alice", "alice@example.com")
        assert commit.changes == (
            FileChangeRecord("src/a.py", 10, 2),
            FileChangeRecord("README.md", 1, 0),
        )

    def test_multiple_commits_in_order(self):
        lines = block(SHA_A, changes=["1\t1\ta.py"]) + block(SHA_B, changes=["2\t0\tb.py"])
        commits = list(parse_commits(lines))
        assert [c.id for c in commits] == [SHA_A, SHA_B]
        assert commits[1].changes[0].path == "b.py"

    def test_trailing_newlines_are_stripped(self):
        lines = [line + "\r\n" for line in block(changes=["3\t4\tdocs/x.md"])]
        commit = next(parse_commits(lines))
        assert commit.author.email == "alice@example.com"
        assert commit.changes[0] == FileChangeRecord("docs/x.md", 3, 4)

    def test_empty_input_yields_nothing(self):
        assert list(parse_commits([])) == []

    def test_commit_without_changes_followed_by_sentinel(self):
        """A sentinel where the separator is expected is an empty commit."""
        lines = [SENTINEL, SHA_A, "1700000000", "Alice", "alice@example.com"]
        lines += block(SHA_B, changes=["1\t0\tb.py"])
        commits = list(parse_commits(lines))
        assert commits[0].changes == ()
        assert commits[1].id == SHA_B

    def test_commit_without_separator_at_end_of_input(self):
        lines = [SENTINEL, SHA_A, "1700000000", "Alice", "alice@example.com"]
        commits = list(parse_commits(lines))
        assert len(commits) == 1
        assert commits[0].changes == ()

    def test_blank_line_before_next_sentinel_is_skipped(self):
        lines = block(SHA_A, changes=["1\t0\ta.py", ""]) + block(SHA_B)
        commits = list(parse_commits(lines))
        assert [len(c.changes) for c in commits] == [1, 0]

    def test_blank_line_at_end_of_input_is_skipped(self):
        commits = list(parse_commits(block(changes=["1\t0\ta.py", ""])))
        assert len(commits[0].changes) == 1


class TestLenientCounts:
    """Numeric fields never abort ingestion."""

    def test_binary_file_counts_default_to_zero(self):
        commit = next(parse_commits(block(changes=["-\t-\tassets/logo.png"])))
        assert commit.changes[0] == FileChangeRecord("assets/logo.png", 0, 0)

    def test_garbage_counts_default_to_zero(self):
        commit = next(parse_commits(block(changes=["x\t7\ta.py"])))
        assert commit.changes[0].insertions == 0
        assert commit.changes[0].deletions == 7

    def test_negative_counts_clamped(self):
        commit = next(parse_commits(block(changes=["-3\t2\ta.py"])))
        assert commit.changes[0].insertions == 0


class TestStructuralErrors:
    """Malformed structure ends the stream with CommitParseError."""

    def test_missing_sentinel(self):
        with pytest.raises(CommitParseError) as exc:
            list(parse_commits(["not-a-sentinel", SHA_A]))
        assert exc.value.line_number == 1
        assert exc.value.line == "not-a-sentinel"

    def test_truncated_metadata(self):
        with pytest.raises(CommitParseError) as exc:
            list(parse_commits([SENTINEL, SHA_A, "1700000000"]))
        assert exc.value.commit_id == SHA_A
        assert "author name" in exc.value.reason

    def test_non_integer_timestamp(self):
        with pytest.raises(CommitParseError) as exc:
            list(parse_commits(block(ts="yesterday")))
        assert exc.value.line == "yesterday"
        assert exc.value.line_number == 3

    def test_non_blank_separator(self):
        lines = [SENTINEL, SHA_A, "1700000000", "Alice", "alice@example.com", "oops"]
        with pytest.raises(CommitParseError) as exc:
            list(parse_commits(lines))
        assert exc.value.line == "oops"
        assert exc.value.line_number == 6

    def test_blank_line_between_change_lines(self):
        with pytest.raises(CommitParseError) as exc:
            list(parse_commits(block(changes=["1\t0\ta.py", "", "2\t0\tb.py"])))
        assert exc.value.line_number == 8
        assert exc.value.commit_id == SHA_A

    def test_two_blank_lines_before_sentinel(self):
        with pytest.raises(CommitParseError):
            list(parse_commits(block(SHA_A, changes=["1\t0\ta.py", "", ""]) + block(SHA_B)))

    def test_change_line_with_wrong_field_count(self):
        with pytest.raises(CommitParseError) as exc:
            list(parse_commits(block(changes=["1\t2"])))
        assert exc.value.commit_id == SHA_A
        assert exc.value.code.value == "CI101"

    def test_error_after_good_commit_keeps_prefix(self):
        parser = CommitStreamParser(block(SHA_A, changes=["1\t0\ta.py"]) + [SENTINEL, SHA_B])
        first = next(parser)
        assert first.id == SHA_A
        with pytest.raises(CommitParseError):
            next(parser)
        # exhausted after an error
        assert list(parser) == []

    def test_line_number_tracks_consumed_lines(self):
        parser = CommitStreamParser(block(changes=["1\t0\ta.py"]))
        next(parser)
        assert parser.line_number == 7


class TestRenamePaths:
    """numstat rename notation resolves to the destination path."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("src/a.py", "src/a.py"),
            ("old.py => new.py", "new.py"),
            ("src/{old => new}/a.py", "src/new/a.py"),
            ("src/{ => sub}/a.py", "src/sub/a.py"),
            ("src/{sub => }/a.py", "src/a.py"),
        ],
    )
    def test_destination_path(self, raw, expected):
        assert _destination_path(raw) == expected

    def test_rename_in_stream(self):
        commit = next(parse_commits(block(changes=["0\t0\tlib/{a => b}.py"])))
        assert commit.changes[0].path == "lib/b.py"

    def test_rename_keeps_source_path(self):
        commit = next(parse_commits(block(changes=["0\t0\tCODEOWNERS => OWNERS.bak"])))
        change = commit.changes[0]
        assert (change.old_path, change.path) == ("CODEOWNERS", "OWNERS.bak")
        assert commit.changed_paths == {"CODEOWNERS", "OWNERS.bak"}

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("src/a.py", (None, "src/a.py")),
            ("src/{old => new}/a.py", ("src/old/a.py", "src/new/a.py")),
            ("{.github => }/CODEOWNERS", (".github/CODEOWNERS", "CODEOWNERS")),
        ],
    )
    def test_rename_paths(self, raw, expected):
        assert _rename_paths(raw) == expected


class TestQuotedPaths:
    """git C-quotes paths with unusual characters."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ('"src/caf\\303\\251.go"', "src/café.go"),
            ('"tab\\there.txt"', "tab\there.txt"),
            ('"say \\"hi\\".md"', 'say "hi".md'),
            ("plain.txt", "plain.txt"),
            ('"', '"'),
        ],
    )
    def test_unquote_path(self, raw, expected):
        assert _unquote_path(raw) == expected

    def test_quoted_path_in_stream(self):
        commit = next(parse_commits(block(changes=['3\t0\t"src/caf\\303\\251.go"'])))
        assert commit.changes[0].path == "src/café.go"
