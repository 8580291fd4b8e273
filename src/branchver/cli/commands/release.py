"""Implementation of the release command.

The release command commits a changelog stub for the next minor version
and tags it. With dry-run it only shows what would be released.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from rich.markup import escape
from rich.panel import Panel

from branchver.config import load_config
from branchver.core.merge import derive_version
from branchver.core.release import plan_release, write_release
from branchver.exceptions import BranchverError
from branchver.vcs import GitRepository

if TYPE_CHECKING:
    from rich.console import Console


def run_release(
    path: str | None,
    dry_run: bool,
    console: Console,
    err_console: Console,
) -> None:
    """Run the release command.

    Args:
        path: Path to the git repository (defaults to the current directory)
        dry_run: Show the release without writing anything
        console: Console for standard output
        err_console: Console for error output
    """
    project_path = Path(path) if path else Path.cwd()

    try:
        repo = GitRepository(project_path)
        config = load_config(repo.path)
        head = repo.head_oid()
        current = derive_version(repo, config, head=head)
        plan = plan_release(current, config.release, head=head)
    except BranchverError as e:
        err_console.print(f"[red]Error:[/] {escape(str(e))}", highlight=False)
        raise SystemExit(1) from e

    if dry_run:
        console.print(
            Panel(
                f"[bold]Would release [green]{plan.version}[/] from [cyan]{plan.current}[/]:[/]\n\n"
                f"  • Write [cyan]{plan.changelog}[/]\n"
                f"  • Commit [cyan]{plan.commit_message}[/]\n"
                f"  • Tag [cyan]{plan.tag}[/]",
                title="[yellow]Dry Run Preview[/]",
                border_style="yellow",
            )
        )
        return

    try:
        write_release(repo, plan, config.release)
    except BranchverError as e:
        err_console.print(f"[red]Error:[/] {escape(str(e))}", highlight=False)
        raise SystemExit(1) from e
