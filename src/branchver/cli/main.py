"""Command line entry point for branchver."""

from __future__ import annotations

import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from branchver import __version__
from branchver.cli.commands.release import run_release
from branchver.cli.commands.version import run_version

app = typer.Typer(
    name="branchver",
    help="Find the version of the current git commit from its branch and history.",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()
err_console = Console(stderr=True)


def setup_logging(verbose: bool) -> None:
    """Send branchver's diagnostic trace to stderr, DEBUG when verbose."""
    logger = logging.getLogger("branchver")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = RichHandler(console=err_console, show_time=False, show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"branchver {__version__}", highlight=False)
        raise typer.Exit()


@app.command()
def main(
    git: Annotated[
        str,
        typer.Option("--git", "-g", help="Path to the git repository."),
    ] = ".",
    release: Annotated[
        bool,
        typer.Option("--release", "-r", help="Commit and tag the next minor release."),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="With --release: show the release, change nothing."),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Print the diagnostic trace to stderr."),
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=_version_callback,
            is_eager=True,
            help="Show the branchver version and exit.",
        ),
    ] = None,
) -> None:
    """Print the version of the current commit, or cut a release with --release."""
    if dry_run and not release:
        raise typer.BadParameter("--dry-run only applies together with --release")

    setup_logging(verbose)

    if release:
        run_release(git, dry_run, console, err_console)
    else:
        run_version(git, console, err_console)
