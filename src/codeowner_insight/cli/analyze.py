"""Attribution commands: per-owner and per-contributor reports."""

from pathlib import Path
from typing import Optional

import typer

from ..pipeline import AnalysisResult, analyze
from . import app
from ._common import (
    command_errors,
    console,
    is_verbose,
    load_memberships,
    make_source,
    print_json,
    resolve_config,
)
from ._display import contributor_table, owner_table, print_owner_details
from .progress import CommitProgress


def _run(
    ctx: typer.Context,
    memberships: Optional[Path],
    since: Optional[str],
    until: Optional[str],
    adjusted: bool,
    top: Optional[int],
    max_commits: Optional[int],
    show_progress: bool,
) -> tuple[AnalysisResult, bool]:
    config = resolve_config(
        ctx,
        adjusted=True if adjusted else None,
        top_n=top,
        max_commits=max_commits,
    )
    source = make_source(ctx, config, since=since, until=until)
    index = load_memberships(memberships)
    with CommitProgress(enabled=show_progress and config.verbosity != "quiet") as progress:
        result = analyze(source, index, config, on_commit=progress.on_commit)
    return result, config.adjusted


_memberships_option = typer.Option(
    None,
    "--memberships",
    "-m",
    help="Roster TSV (author_email, author_name, owner_group); without it everyone is an outsider",
    exists=True,
    dir_okay=False,
    readable=True,
)


@app.command("analyze-owners")
def analyze_owners(
    ctx: typer.Context,
    memberships: Optional[Path] = _memberships_option,
    since: Optional[str] = typer.Option(None, "--since", help="Only commits after this date"),
    until: Optional[str] = typer.Option(None, "--until", help="Only commits before this date"),
    adjusted: bool = typer.Option(
        False, "--adjusted", help="Also compute insertion-proportional credit"
    ),
    top: Optional[int] = typer.Option(
        None, "--top", help="Contributors per ranked list (default: 10)", min=1
    ),
    max_commits: Optional[int] = typer.Option(
        None, "--max-commits", help="Stop after this many commits", min=1
    ),
    details: bool = typer.Option(
        False, "--details", "-d", help="Show the top contributor lists per owner"
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
):
    """
    Report, per owner group, how much of its code was changed by the team vs. outsiders.

    [bold cyan]Examples:[/bold cyan]

      codeowner-insight analyze-owners -m roster.tsv

      codeowner-insight analyze-owners -m roster.tsv --adjusted --details

      codeowner-insight analyze-owners -m roster.tsv --since 2024-01-01 --json
    """
    with command_errors(is_verbose(ctx)):
        result, is_adjusted = _run(
            ctx, memberships, since, until, adjusted, top, max_commits, not json_output
        )

        if json_output:
            print_json([row.to_dict() for row in result.owners])
            return

        if not result.owners:
            console.print("[yellow]No owned changes found.[/yellow]")
            return

        console.print()
        console.print(
            f"[bold cyan]OWNERSHIP[/bold cyan] -- {len(result.owners)} owner groups, "
            f"{result.commits_processed} commits"
        )
        console.print()
        console.print(owner_table(result.owners, is_adjusted))
        if details:
            for row in result.owners:
                print_owner_details(row)
        console.print()


@app.command("analyze-contributors")
def analyze_contributors(
    ctx: typer.Context,
    memberships: Optional[Path] = _memberships_option,
    since: Optional[str] = typer.Option(None, "--since", help="Only commits after this date"),
    until: Optional[str] = typer.Option(None, "--until", help="Only commits before this date"),
    adjusted: bool = typer.Option(
        False, "--adjusted", help="Also compute insertion-proportional credit"
    ),
    max_commits: Optional[int] = typer.Option(
        None, "--max-commits", help="Stop after this many commits", min=1
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
):
    """
    Report how each contributor's changes spread across owner groups.

    A file with several owners is counted under its first owner only; files
    no rule owns are counted under "unowned".
    """
    with command_errors(is_verbose(ctx)):
        result, is_adjusted = _run(
            ctx, memberships, since, until, adjusted, None, max_commits, not json_output
        )

        if json_output:
            print_json([row.to_dict() for row in result.contributors])
            return

        if not result.contributors:
            console.print("[yellow]No commits found.[/yellow]")
            return

        console.print()
        console.print(
            f"[bold cyan]CONTRIBUTORS[/bold cyan] -- {len(result.contributors)} authors, "
            f"{result.commits_processed} commits"
        )
        console.print()
        console.print(contributor_table(result.contributors, is_adjusted))
        console.print()
