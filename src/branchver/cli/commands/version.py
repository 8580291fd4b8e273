"""Implementation of the default command: print the derived version."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from rich.markup import escape

from branchver.config import load_config
from branchver.core.merge import derive_version
from branchver.exceptions import BranchverError
from branchver.vcs import GitRepository

if TYPE_CHECKING:
    from rich.console import Console


def run_version(path: str | None, console: Console, err_console: Console) -> None:
    """Print the version of the checkout at ``path``.

    Args:
        path: Path to the git repository (defaults to the current directory)
        console: Console for standard output
        err_console: Console for error output
    """
    project_path = Path(path) if path else Path.cwd()

    try:
        repo = GitRepository(project_path)
        config = load_config(repo.path)
        version = derive_version(repo, config)
    except BranchverError as e:
        err_console.print(f"[red]Error:[/] {escape(str(e))}", highlight=False)
        raise SystemExit(1) from e

    console.print(str(version), markup=False, highlight=False)
