"""Shared CLI helpers."""

import json
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator, Optional

import click
import typer
from rich.console import Console

from ..config import AttributionConfig, load_config
from ..exceptions import CodeownerInsightError
from ..history import GitHistorySource
from ..logging_config import get_logger
from ..ownership import MembershipIndex, read_roster

console = Console()
logger = get_logger(__name__)


def resolve_config(ctx: typer.Context, **overrides: Any) -> AttributionConfig:
    """Build config from the root options plus per-command overrides."""
    obj = ctx.obj or {}
    return load_config(
        config_file=obj.get("config"),
        verbose=obj.get("verbose", False),
        quiet=obj.get("quiet", False),
        **overrides,
    )


def repo_path(ctx: typer.Context) -> Path:
    return (ctx.obj or {}).get("path", Path.cwd())


def is_verbose(ctx: typer.Context) -> bool:
    return bool((ctx.obj or {}).get("verbose", False))


def make_source(
    ctx: typer.Context,
    config: AttributionConfig,
    since: Optional[str] = None,
    until: Optional[str] = None,
) -> GitHistorySource:
    source = GitHistorySource(
        repo_path(ctx),
        since=since,
        until=until,
        oldest_first=config.oldest_first,
        no_merges=config.no_merges,
        timeout_seconds=config.request_timeout_seconds,
    )
    if not source.is_git_repo():
        console.print(f"[red]Not a git repository:[/red] {source.repo_path}")
        raise typer.Exit(1)
    return source


def load_memberships(path: Optional[Path]) -> Optional[MembershipIndex]:
    if path is None:
        return None
    index = MembershipIndex(read_roster(path))
    logger.info("Loaded %d roster entries from %s", len(index), path)
    return index


def parse_date(value: str) -> datetime:
    """ISO date or datetime; naive values are read as UTC."""
    try:
        when = datetime.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(f"expected an ISO date such as 2024-01-31, got {value!r}")
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return when


def print_json(data: Any) -> None:
    print(json.dumps(data, indent=2))


@contextmanager
def command_errors(verbose: bool = False) -> Iterator[None]:
    """Map failures to exit codes: 1 for errors, 130 for Ctrl-C."""
    try:
        yield
    except (typer.Exit, click.ClickException):
        raise
    except CodeownerInsightError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        console.print("\n[yellow]Interrupted[/yellow]")
        raise typer.Exit(130)
    except Exception as e:
        if verbose:
            logger.exception("Unexpected error")
        else:
            logger.error(f"Unexpected error: {e} (run with -v for the traceback)")
        raise typer.Exit(1)
