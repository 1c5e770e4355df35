"""Tests for the exception hierarchy and error codes."""

import pytest

from codeowner_insight.exceptions import (
    CodeownerInsightError,
    CommitParseError,
    ConfigurationError,
    ErrorCode,
    FileReadError,
    GitCommandError,
    GithubApiError,
    GithubTokenError,
    HistoryError,
    InvalidConfigError,
    RosterFormatError,
    RosterReadError,
)
from codeowner_insight.exceptions.taxonomy import stage_for


class TestHierarchy:
    @pytest.mark.parametrize(
        "error, code, stage",
        [
            (CommitParseError("bad", 3, "x", "abc"), ErrorCode.CI101, "ingestion"),
            (GitCommandError(["git", "log"], "boom", 128), ErrorCode.CI102, "ingestion"),
            (FileReadError("abc", "CODEOWNERS", "denied"), ErrorCode.CI201, "ownership"),
            (RosterFormatError("r.tsv", 4, "a\tb"), ErrorCode.CI301, "roster"),
            (RosterReadError("r.tsv", "missing"), ErrorCode.CI302, "roster"),
            (GithubApiError("nope", url="https://x", status=404), ErrorCode.CI401, "github"),
            (GithubTokenError("no token"), ErrorCode.CI402, "github"),
            (InvalidConfigError("top_n", 0, "too small"), ErrorCode.CI501, "configuration"),
        ],
    )
    def test_codes_and_stages(self, error, code, stage):
        assert isinstance(error, CodeownerInsightError)
        assert error.code is code
        assert error.stage == stage

    def test_subclass_relationships(self):
        assert issubclass(CommitParseError, HistoryError)
        assert issubclass(GitCommandError, HistoryError)
        assert issubclass(GithubTokenError, GithubApiError)
        assert issubclass(InvalidConfigError, ConfigurationError)

    def test_stage_for_unknown_prefix(self):
        assert stage_for(ErrorCode.CI100) == "ingestion"


class TestRendering:
    def test_str_includes_code_and_details(self):
        error = FileReadError("abc123", "CODEOWNERS", "permission denied")
        text = str(error)
        assert text.startswith("[CI201] Cannot read CODEOWNERS at abc123")
        assert "commit=abc123" in text
        assert "reason=permission denied" in text

    def test_str_without_details(self):
        assert str(ConfigurationError("broken")) == "[CI500] broken"

    def test_parse_error_context(self):
        error = CommitParseError("expected blank separator line", 6, "oops", "deadbeef")
        assert error.details["line_number"] == "6"
        assert error.details["commit"] == "deadbeef"
        assert "separator" in error.message

    def test_to_json(self):
        data = GithubApiError("Not Found", url="https://api.github.com/x", status=404).to_json()
        assert data["error_code"] == "CI401"
        assert data["stage"] == "github"
        assert data["details"]["status"] == "404"
