"""Read commit history and file contents from a local repository via git."""

from __future__ import annotations

import subprocess
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Optional, Sequence

from ..exceptions import FileReadError, GitCommandError
from ..logging_config import get_logger
from .models import CommitRecord
from .parser import GIT_LOG_FORMAT, CommitStreamParser

logger = get_logger(__name__)


def _as_utc(when: datetime) -> datetime:
    if when.tzinfo is None:
        return when.replace(tzinfo=timezone.utc)
    return when


def _git_date(when: datetime) -> str:
    """Render a datetime the way git's date parser reads it unambiguously."""
    return _as_utc(when).astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M:%S +0000")


class GitHistorySource:
    """HistorySource backed by ``git log --numstat`` and ``git show``.

    Commits stream straight from the git process into the parser.
    ``oldest_first`` walks history chronologically, the order the ownership
    cache expects.
    """

    def __init__(
        self,
        repo_path: str | Path,
        since: Optional[str] = None,
        until: Optional[str] = None,
        oldest_first: bool = True,
        no_merges: bool = True,
        timeout_seconds: int = 30,
    ):
        self.repo_path = str(Path(repo_path).resolve())
        self.since = since
        self.until = until
        self.oldest_first = oldest_first
        self.no_merges = no_merges
        self.timeout_seconds = timeout_seconds

    def is_git_repo(self) -> bool:
        try:
            result = subprocess.run(
                ["git", "-C", self.repo_path, "rev-parse", "--git-dir"],
                capture_output=True,
                text=True,
                timeout=5,
            )
            return result.returncode == 0
        except (FileNotFoundError, subprocess.TimeoutExpired):
            return False

    def log_command(self) -> list[str]:
        # raw UTF-8 paths in numstat output instead of "caf\303\251" quoting
        cmd = ["git", "-C", self.repo_path, "-c", "core.quotePath=false", "log"]
        if self.no_merges:
            cmd.append("--no-merges")
        if self.oldest_first:
            cmd.append("--reverse")
        cmd.extend([GIT_LOG_FORMAT, "--numstat"])
        if self.since:
            cmd.append(f"--since={self.since}")
        if self.until:
            cmd.append(f"--until={self.until}")
        return cmd

    def commits(self) -> Iterator[CommitRecord]:
        cmd = self.log_command()
        logger.debug("Streaming history: %s", " ".join(cmd))
        # stderr goes to a file: an unread pipe would stall git once it fills
        with tempfile.TemporaryFile() as err_file:
            try:
                proc = subprocess.Popen(
                    cmd,
                    stdout=subprocess.PIPE,
                    stderr=err_file,
                    text=True,
                    encoding="utf-8",
                    errors="replace",
                )
            except FileNotFoundError:
                raise GitCommandError(cmd, "git executable not found")

            try:
                stdout = proc.stdout
                if stdout is None:
                    raise GitCommandError(cmd, "could not capture stdout")
                yield from CommitStreamParser(stdout)

                try:
                    returncode = proc.wait(timeout=self.timeout_seconds)
                except subprocess.TimeoutExpired:
                    raise GitCommandError(cmd, f"timed out after {self.timeout_seconds}s")
                if returncode != 0:
                    err_file.seek(0)
                    stderr = err_file.read().decode("utf-8", errors="replace").strip()
                    raise GitCommandError(cmd, stderr or "git log failed", returncode)
            finally:
                # Consumer may stop early (limit, cancellation, parse error)
                if proc.poll() is None:
                    proc.kill()
                    proc.wait()
                if proc.stdout:
                    proc.stdout.close()

    def read_file_at_commit(self, commit_id: str, path: str) -> Optional[str]:
        cmd = ["git", "-C", self.repo_path, "show", f"{commit_id}:{path}"]
        try:
            result = subprocess.run(cmd, capture_output=True, timeout=self.timeout_seconds)
        except FileNotFoundError:
            raise FileReadError(commit_id, path, "git executable not found")
        except subprocess.TimeoutExpired:
            raise FileReadError(commit_id, path, f"git show timed out after {self.timeout_seconds}s")

        if result.returncode == 0:
            try:
                return result.stdout.decode("utf-8")
            except UnicodeDecodeError as e:
                raise FileReadError(commit_id, path, f"not valid UTF-8: {e}")

        stderr = result.stderr.decode("utf-8", errors="replace").strip()
        if stderr.startswith("fatal: path"):
            return None
        raise FileReadError(commit_id, path, stderr or f"git show exited {result.returncode}")

    def first_commit_on_or_after(self, when: datetime) -> Optional[str]:
        """Oldest commit whose commit date is at or after ``when``."""
        cutoff = int(_as_utc(when).timestamp())
        for sha, ts in self._dated_commits(["--reverse", f"--since={_git_date(when)}"]):
            if ts >= cutoff:
                return sha
        return None

    def last_commit_before(self, when: datetime) -> Optional[str]:
        """Newest commit whose commit date is strictly before ``when``."""
        cutoff = int(_as_utc(when).timestamp())
        for sha, ts in self._dated_commits([f"--until={_git_date(when)}"]):
            if ts < cutoff:
                return sha
        return None

    def file_versions(self, path: str) -> list[tuple[str, int]]:
        """(commit id, commit timestamp) of every commit touching ``path``, newest first."""
        return self._dated_commits(["--", path])

    def _dated_commits(self, extra: Sequence[str]) -> list[tuple[str, int]]:
        out = self._run(["log", "--format=%H %ct", *extra])
        pairs = []
        for line in out.splitlines():
            sha, _, ts = line.strip().partition(" ")
            if sha and ts:
                pairs.append((sha, int(ts)))
        return pairs

    def _run(self, args: Sequence[str]) -> str:
        cmd = ["git", "-C", self.repo_path, *args]
        logger.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd, capture_output=True, text=True, timeout=self.timeout_seconds
            )
        except FileNotFoundError:
            raise GitCommandError(cmd, "git executable not found")
        except subprocess.TimeoutExpired:
            raise GitCommandError(cmd, f"timed out after {self.timeout_seconds}s")
        if result.returncode != 0:
            raise GitCommandError(cmd, result.stderr.strip() or "git failed", result.returncode)
        return result.stdout
