"""Shared test fixtures for codeowner-insight tests."""

import os
import shutil
import subprocess
from pathlib import Path
from typing import Iterator, Optional

import pytest

from codeowner_insight.history.models import CommitAuthor, CommitRecord, FileChangeRecord

ALICE = CommitAuthor("Alice", "alice@example.com")
BOB = CommitAuthor("Bob", "bob@example.com")
CAROL = CommitAuthor("Carol", "carol@example.com")


def make_commit(
    sha: str,
    author: CommitAuthor,
    changes: list[tuple[str, int, int]],
    timestamp: int = 1_700_000_000,
) -> CommitRecord:
    """Create a commit from (path, insertions, deletions) tuples."""
    return CommitRecord(
        id=sha,
        author=author,
        timestamp=timestamp,
        changes=tuple(FileChangeRecord(path, ins, dels) for path, ins, dels in changes),
    )


class FakeHistorySource:
    """In-memory HistorySource.

    ``files`` maps commit id -> {path: content}; a path missing from a
    commit's mapping does not exist at that commit. Every read is recorded
    in ``reads``.
    """

    def __init__(
        self,
        commits: list[CommitRecord],
        files: Optional[dict[str, dict[str, str]]] = None,
    ):
        self._commits = commits
        self.files = files or {}
        self.reads: list[tuple[str, str]] = []

    def commits(self) -> Iterator[CommitRecord]:
        return iter(self._commits)

    def read_file_at_commit(self, commit_id: str, path: str) -> Optional[str]:
        self.reads.append((commit_id, path))
        return self.files.get(commit_id, {}).get(path)


@pytest.fixture
def fake_source_factory():
    return FakeHistorySource


# ---------------------------------------------------------------------------
# Throwaway git repositories
# ---------------------------------------------------------------------------

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


class GitRepo:
    """Minimal driver for a scratch repository with controlled dates."""

    def __init__(self, path: Path):
        self.path = path
        path.mkdir(parents=True, exist_ok=True)
        self._git("init", "-q")
        self._git("config", "user.name", "Test")
        self._git("config", "user.email", "test@example.com")
        self._git("config", "commit.gpgsign", "false")

    def _git(self, *args: str, env: Optional[dict] = None) -> str:
        result = subprocess.run(
            ["git", "-C", str(self.path), *args],
            capture_output=True,
            text=True,
            check=True,
            env=env,
        )
        return result.stdout

    def commit(
        self,
        files: dict[str, str],
        when: str,
        author: CommitAuthor = ALICE,
        message: str = "change",
        moves: Optional[dict[str, str]] = None,
    ) -> str:
        """Write ``files``, apply ``moves`` (old -> new) and commit; ``when`` is ISO-8601."""
        for old, new in (moves or {}).items():
            self._git("mv", old, new)
        for rel, content in files.items():
            target = self.path / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content)
            self._git("add", rel)
        env = dict(os.environ)
        env.update(
            {
                "GIT_AUTHOR_NAME": author.name,
                "GIT_AUTHOR_EMAIL": author.email,
                "GIT_AUTHOR_DATE": when,
                "GIT_COMMITTER_NAME": author.name,
                "GIT_COMMITTER_EMAIL": author.email,
                "GIT_COMMITTER_DATE": when,
            }
        )
        self._git("commit", "-q", "-m", message, env=env)
        return self._git("rev-parse", "HEAD").strip()


@pytest.fixture
def git_repo(tmp_path):
    return GitRepo(tmp_path / "repo")
