"""Progress display while commits stream through the pipeline."""

from __future__ import annotations

from typing import Any, Optional

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TaskID, TextColumn, TimeElapsedColumn


class CommitProgress:
    """Spinner with a running commit count, drawn on stderr.

    Disabled progress is a no-op so callers need no branching.
    """

    def __init__(self, enabled: bool = True, console: Optional[Console] = None):
        self.enabled = enabled
        self.console = console or Console(stderr=True)
        self._progress: Optional[Progress] = None
        self._task_id: Optional[TaskID] = None

    def __enter__(self) -> CommitProgress:
        if self.enabled:
            self._progress = Progress(
                SpinnerColumn(),
                TextColumn("[bold]{task.description}"),
                TimeElapsedColumn(),
                console=self.console,
                transient=True,
            )
            self._progress.start()
            self._task_id = self._progress.add_task("Reading history...", total=None)
        return self

    def __exit__(self, *exc: Any) -> None:
        if self._progress is not None:
            self._progress.stop()
            self._progress = None

    def on_commit(self, count: int, commit: Any = None) -> None:
        if self._progress is None or self._task_id is None:
            return
        self._progress.update(self._task_id, description=f"Processed {count} commits")
