"""CODEOWNERS commands: inspect the ownership file and annotate history with it."""

from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from ..logging_config import get_logger
from ..ownership import OwnershipRuleSet, load_codeowners
from ..pipeline import enriched_commits
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
from ._display import enriched_commit_to_dict, print_enriched_commit

logger = get_logger(__name__)


@app.command("get-codeowners")
def get_codeowners(
    ctx: typer.Context,
    commit: str = typer.Option("HEAD", "--commit", help="Commit to read the file at"),
):
    """
    Print the CODEOWNERS file in force at a commit.

    Checks .github/CODEOWNERS, CODEOWNERS and docs/CODEOWNERS in that order.
    """
    with command_errors(is_verbose(ctx)):
        config = resolve_config(ctx)
        source = make_source(ctx, config)
        location, content = load_codeowners(source, commit, config.codeowners_locations)
        if content is None:
            console.print(f"[yellow]No CODEOWNERS file at {escape(commit)}[/yellow]")
            raise typer.Exit(1)
        logger.info("Read %s at %s", location, commit)
        print(content, end="" if content.endswith("\n") else "\n")


@app.command("list-owners")
def list_owners(
    ctx: typer.Context,
    commit: str = typer.Option("HEAD", "--commit", help="Commit to read the file at"),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
):
    """List every owner group named by the CODEOWNERS file at a commit."""
    with command_errors(is_verbose(ctx)):
        config = resolve_config(ctx)
        source = make_source(ctx, config)
        location, content = load_codeowners(source, commit, config.codeowners_locations)
        rule_set = (
            OwnershipRuleSet.parse(content, source_path=location)
            if content is not None
            else OwnershipRuleSet.empty()
        )
        owners = rule_set.all_owners()

        if json_output:
            print_json(owners)
            return
        if not rule_set.found:
            console.print(f"[yellow]No CODEOWNERS file at {escape(commit)}[/yellow]")
            return
        for owner in owners:
            console.print(escape(owner))


@app.command("print-commits-with-codeowners")
def print_commits_with_codeowners(
    ctx: typer.Context,
    memberships: Optional[Path] = typer.Option(
        None,
        "--memberships",
        "-m",
        help="Roster TSV; highlights owners the author belongs to",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    since: Optional[str] = typer.Option(None, "--since", help="Only commits after this date"),
    until: Optional[str] = typer.Option(None, "--until", help="Only commits before this date"),
    limit: Optional[int] = typer.Option(
        None, "--limit", "-n", help="Stop after this many commits", min=1
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
):
    """
    Print commits with the owner groups of every changed file.

    Owners are resolved against the CODEOWNERS file in force at each commit.
    """
    with command_errors(is_verbose(ctx)):
        config = resolve_config(ctx)
        source = make_source(ctx, config, since=since, until=until)
        index = load_memberships(memberships)

        collected = []
        stage = enriched_commits(source, index, config)
        try:
            for count, enriched in enumerate(stage, start=1):
                if json_output:
                    collected.append(enriched_commit_to_dict(enriched))
                else:
                    print_enriched_commit(enriched)
                if limit is not None and count >= limit:
                    break
        finally:
            stage.close()

        if json_output:
            print_json(collected)
