"""Root callback: global options shared by every subcommand."""

from pathlib import Path
from typing import Optional

import typer

from ..logging_config import setup_logging, verbosity_from_flags
from . import app
from ._common import console


def _version_callback(value: bool) -> None:
    if value:
        from .. import __version__

        console.print(
            f"[bold cyan]codeowner-insight[/bold cyan] version [green]{__version__}[/green]"
        )
        raise typer.Exit(0)


@app.callback()
def root(
    ctx: typer.Context,
    path: Optional[Path] = typer.Option(
        None,
        "-C",
        "--path",
        help="Repository to analyze (default: current directory)",
        exists=True,
        file_okay=False,
        dir_okay=True,
        readable=True,
    ),
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only log errors",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Also append logs to this file",
        hidden=True,
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
):
    """
    Attribute commit history to CODEOWNERS teams and outside contributors.

    [bold cyan]Examples:[/bold cyan]

      codeowner-insight analyze-owners --memberships roster.tsv

      codeowner-insight -C /path/to/repo analyze-contributors --adjusted --json

      codeowner-insight fetch-memberships --org my-org -o roster.tsv
    """
    ctx.ensure_object(dict)
    ctx.obj["path"] = Path(path) if path else Path.cwd()
    ctx.obj["config"] = config
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    setup_logging(
        verbosity_from_flags(verbose, quiet), log_file=str(log_file) if log_file else None
    )
