"""Command line entry point for versionize."""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console

from versionize import __version__
from versionize.logging import configure_logging

app = typer.Typer(
    name="versionize",
    help="Semantic versioning and changelogs from conventional commits.",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"versionize {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log warnings and errors"),
    json_log: bool = typer.Option(False, "--json-log", help="Log as JSON lines"),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the versionize version and exit",
    ),
) -> None:
    configure_logging(verbose=verbose, quiet=quiet, json_log=json_log)


@app.command("update")
def update(
    path: Optional[str] = typer.Argument(None, help="Project directory (default: cwd)"),
    execute: bool = typer.Option(False, "--execute", help="Apply changes instead of a dry run"),
    release_as: Optional[str] = typer.Option(
        None, "--release-as", help="Release this version instead of the computed one"
    ),
    changelog_all: bool = typer.Option(
        False, "--changelog-all", help="Include all commit types in the changelog"
    ),
    ignore_insignificant: bool = typer.Option(
        False,
        "--ignore-insignificant-commits",
        help="Do nothing when no commit warrants a version bump",
    ),
) -> None:
    """Bump the version and update the changelog."""
    from versionize.cli.commands.update import run_update

    run_update(
        path=path,
        execute=execute,
        release_as=release_as,
        changelog_all=changelog_all,
        ignore_insignificant=ignore_insignificant,
        console=console,
        err_console=err_console,
    )


@app.command("inspect")
def inspect(
    path: Optional[str] = typer.Argument(None, help="Project directory (default: cwd)"),
) -> None:
    """Print the current project version."""
    from versionize.cli.commands.inspect import run_inspect

    run_inspect(path, console, err_console)
