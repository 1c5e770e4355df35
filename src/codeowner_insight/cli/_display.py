"""Rich rendering for commits and reports."""

from typing import Optional, Sequence

from rich.markup import escape
from rich.table import Table

from ..attribution.models import (
    ContributorInfo,
    ContributorReportRow,
    EnrichedCommit,
    OwnerReportRow,
)
from ..history.models import CommitRecord
from ._common import console


def commit_to_dict(commit: CommitRecord) -> dict:
    return {
        "id": commit.id,
        "timestamp": commit.timestamp,
        "author_name": commit.author.name,
        "author_email": commit.author.email,
        "changes": [
            {"path": c.path, "insertions": c.insertions, "deletions": c.deletions}
            for c in commit.changes
        ],
    }


def enriched_commit_to_dict(enriched: EnrichedCommit) -> dict:
    data = commit_to_dict(enriched.commit)
    for change_dict, change in zip(data["changes"], enriched.changes):
        change_dict["owners"] = list(change.owners) if change.owners is not None else None
        if change.owner_membership is not None:
            change_dict["author_is_owner"] = {
                owner: change.author_is_owner(owner) for owner in change.owners or ()
            }
    return data


def _commit_header(commit: CommitRecord) -> str:
    return (
        f"[bold yellow]{commit.id[:12]}[/bold yellow] "
        f"[dim]{commit.date:%Y-%m-%d %H:%M}[/dim] "
        f"{escape(commit.author.name)} <{escape(commit.author.email)}>"
    )


def print_commit(commit: CommitRecord) -> None:
    console.print(_commit_header(commit))
    for change in commit.changes:
        console.print(
            f"  [green]+{change.insertions}[/green] [red]-{change.deletions}[/red] "
            f"{escape(change.path)}"
        )


def print_enriched_commit(enriched: EnrichedCommit) -> None:
    console.print(_commit_header(enriched.commit))
    for change in enriched.changes:
        if change.owners is None:
            owners = "[dim]no CODEOWNERS[/dim]"
        elif not change.owners:
            owners = "[dim]unowned[/dim]"
        else:
            parts = []
            for owner in change.owners:
                label = escape(owner)
                if change.owner_membership is not None and change.author_is_owner(owner):
                    label = f"[bold cyan]{label}[/bold cyan]"
                parts.append(label)
            owners = ", ".join(parts)
        console.print(
            f"  [green]+{change.insertions}[/green] [red]-{change.deletions}[/red] "
            f"{escape(change.path)}  {owners}"
        )


def owner_table(rows: Sequence[OwnerReportRow], adjusted: bool) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=True)
    table.add_column("Owner", min_width=16)
    table.add_column("Team +", justify="right", style="green")
    table.add_column("Team -", justify="right", style="red")
    table.add_column("Team changes", justify="right")
    table.add_column("Others +", justify="right", style="green")
    table.add_column("Others -", justify="right", style="red")
    table.add_column("Others changes", justify="right")
    if adjusted:
        table.add_column("Adj. team", justify="right")
        table.add_column("Adj. others", justify="right")

    for row in rows:
        cells = [
            escape(row.owner),
            str(row.insertions_by_team),
            str(row.deletions_by_team),
            str(row.commits_by_team),
            str(row.insertions_by_others),
            str(row.deletions_by_others),
            str(row.commits_by_others),
        ]
        if adjusted and row.adjusted is not None:
            cells.append(f"{row.adjusted.commits_by_team:.2f}")
            cells.append(f"{row.adjusted.commits_by_others:.2f}")
        table.add_row(*cells)
    return table


def _contributor_list(title: str, contributors: Sequence[ContributorInfo]) -> Optional[Table]:
    if not contributors:
        return None
    table = Table(title=title, title_justify="left", show_header=False, box=None, pad_edge=False)
    table.add_column("Value", justify="right", style="bold")
    table.add_column("Contributor")
    for c in contributors:
        table.add_row(str(c.metric_value), f"{escape(c.author_name)} <{escape(c.author_email)}>")
    return table


def print_owner_details(row: OwnerReportRow) -> None:
    console.print()
    console.print(f"[bold cyan]{escape(row.owner)}[/bold cyan]")
    lists = [
        ("Team, by lines changed", row.top_team_contributors_by_changes),
        ("Team, by changes", row.top_team_contributors_by_commits),
        ("Outside, by lines changed", row.top_outside_contributors_by_changes),
        ("Outside, by changes", row.top_outside_contributors_by_commits),
    ]
    for title, contributors in lists:
        table = _contributor_list(title, contributors)
        if table is not None:
            console.print(table)


def contributor_table(rows: Sequence[ContributorReportRow], adjusted: bool) -> Table:
    table = Table(show_header=True, show_lines=True, pad_edge=True)
    table.add_column("Contributor", min_width=24)
    table.add_column("Owner")
    table.add_column("+", justify="right", style="green")
    table.add_column("-", justify="right", style="red")
    table.add_column("Changes", justify="right")
    if adjusted:
        table.add_column("Adj. lines", justify="right")
        table.add_column("Adj. commits", justify="right")

    for row in rows:
        who = f"{escape(row.author_name)}\n[dim]{escape(row.author_email)}[/dim]"
        owners = "\n".join(escape(o.owner) for o in row.owners)
        cells = [
            who,
            owners,
            "\n".join(str(o.total_insertions) for o in row.owners),
            "\n".join(str(o.total_deletions) for o in row.owners),
            "\n".join(str(o.total_commits) for o in row.owners),
        ]
        if adjusted:
            cells.append("\n".join(str(o.adjusted_changes or 0) for o in row.owners))
            cells.append("\n".join(f"{o.adjusted_commits or 0.0:.2f}" for o in row.owners))
        table.add_row(*cells)
    return table
