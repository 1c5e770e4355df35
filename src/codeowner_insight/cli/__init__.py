"""CLI entry point - registers all subcommands."""

import typer

app = typer.Typer(
    name="codeowner-insight",
    help="codeowner-insight - attribute git history to CODEOWNERS teams",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


# Import subcommands to register them
from .root import root as _root_callback  # noqa: F401, E402
from .history import print_commits as _print_commits, find_commit as _find_commit  # noqa: F401, E402
from .codeowners import (  # noqa: F401, E402
    get_codeowners as _get_codeowners,
    list_owners as _list_owners,
    print_commits_with_codeowners as _print_commits_with_codeowners,
)
from .analyze import analyze_owners as _analyze_owners, analyze_contributors as _analyze_contributors  # noqa: F401, E402
from .memberships import fetch_memberships as _fetch_memberships  # noqa: F401, E402


def main() -> None:
    app()
