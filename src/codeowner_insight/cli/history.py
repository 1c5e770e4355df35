"""History commands: print parsed commits, look up commits by date."""

from typing import Optional

import click
import typer

from . import app
from ._common import (
    command_errors,
    console,
    is_verbose,
    make_source,
    parse_date,
    print_json,
    resolve_config,
)
from ._display import commit_to_dict, print_commit


@app.command("print-commits")
def print_commits(
    ctx: typer.Context,
    since: Optional[str] = typer.Option(None, "--since", help="Only commits after this date"),
    until: Optional[str] = typer.Option(None, "--until", help="Only commits before this date"),
    order: str = typer.Option(
        "oldest",
        "--order",
        help="History order: oldest | newest first",
        click_type=click.Choice(["oldest", "newest"], case_sensitive=False),
    ),
    include_merges: bool = typer.Option(False, "--include-merges", help="Include merge commits"),
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
    Print the commits and per-file line counts read from git history.

    [bold cyan]Examples:[/bold cyan]

      codeowner-insight print-commits --since 2024-01-01 -n 20
    """
    with command_errors(is_verbose(ctx)):
        config = resolve_config(
            ctx,
            oldest_first=order.lower() == "oldest",
            no_merges=False if include_merges else None,
        )
        source = make_source(ctx, config, since=since, until=until)

        collected = []
        commits = source.commits()
        try:
            for count, commit in enumerate(commits, start=1):
                if json_output:
                    collected.append(commit_to_dict(commit))
                else:
                    print_commit(commit)
                if limit is not None and count >= limit:
                    break
        finally:
            commits.close()

        if json_output:
            print_json(collected)


@app.command("find-commit")
def find_commit(
    ctx: typer.Context,
    on_or_after: Optional[str] = typer.Option(
        None, "--on-or-after", help="First commit at or after this ISO date"
    ),
    before: Optional[str] = typer.Option(
        None, "--before", help="Last commit strictly before this ISO date"
    ),
):
    """
    Find the commit that bounds a date: first on/after it, or last before it.

    [bold cyan]Examples:[/bold cyan]

      codeowner-insight find-commit --on-or-after 2024-01-01

      codeowner-insight find-commit --before "2024-07-01T00:00:00+02:00"
    """
    if (on_or_after is None) == (before is None):
        raise typer.BadParameter("pass exactly one of --on-or-after or --before")

    with command_errors(is_verbose(ctx)):
        config = resolve_config(ctx)
        source = make_source(ctx, config)
        if on_or_after is not None:
            commit_id = source.first_commit_on_or_after(parse_date(on_or_after))
        else:
            commit_id = source.last_commit_before(parse_date(before))

        if commit_id is None:
            console.print("[yellow]No matching commit[/yellow]")
            raise typer.Exit(1)
        print(commit_id)
