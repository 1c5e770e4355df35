"""Roster command: build team memberships from the GitHub API."""

from pathlib import Path
from typing import Optional

import typer

from ..github import GithubApi, fetch_memberships as fetch_roster, get_token
from ..ownership import write_roster
from . import app
from ._common import command_errors, console, is_verbose, resolve_config


@app.command("fetch-memberships")
def fetch_memberships(
    ctx: typer.Context,
    output: Path = typer.Option(
        ...,
        "--output",
        "-o",
        help="Roster TSV to write",
        dir_okay=False,
        writable=True,
    ),
    orgs: Optional[list[str]] = typer.Option(
        None,
        "--org",
        help="Organization to read (repeatable; default: every org you belong to)",
    ),
):
    """
    Write a membership roster for every team of the given GitHub organizations.

    Authenticates with GITHUB_TOKEN, or with `gh auth token` when unset.
    Owner groups are written as @org/team, the form CODEOWNERS uses.
    """
    with command_errors(is_verbose(ctx)):
        config = resolve_config(ctx)
        with GithubApi(
            get_token(),
            base_url=config.github_api_url,
            timeout_seconds=config.request_timeout_seconds,
        ) as api:
            with console.status("Fetching team memberships...") as status:

                def on_team(slug: str, members: int) -> None:
                    status.update(f"Fetched {slug} ({members} members)")

                entries = fetch_roster(api, orgs or None, on_team=on_team)

        count = write_roster(entries, output)
        console.print(f"[green]Wrote {count} memberships to[/green] {output}")
