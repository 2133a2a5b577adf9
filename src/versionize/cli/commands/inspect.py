"""Implementation of the 'inspect' command."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from versionize.project.pyproject import Projects

if TYPE_CHECKING:
    from rich.console import Console


def run_inspect(path: str | None, console: Console, err_console: Console) -> None:
    """Print the version shared by the project's pyproject.toml files."""
    project_path = Path(path) if path else Path.cwd()
    projects = Projects.discover(project_path)

    if projects.is_empty():
        err_console.print(f"[red]Error:[/] No versioned pyproject.toml found in {project_path}")
        raise SystemExit(1)
    if projects.has_inconsistent_versioning():
        err_console.print("[red]Error:[/] Projects have inconsistent versions")
        raise SystemExit(1)

    console.print(str(projects.version))
