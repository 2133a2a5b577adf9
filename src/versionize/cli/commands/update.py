"""Implementation of the 'update' command.

The update command bumps the project version and writes the changelog
locally. Committing and tagging the result is left to the user.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from rich.panel import Panel

from versionize.config import load_config
from versionize.core.changelog import Changelog
from versionize.core.commits import filter_skip_release_commits, parse_commits
from versionize.core.links import PlainLinkBuilder, create_link_builder
from versionize.core.version import BumpType, SemanticVersion, calculate_bump
from versionize.exceptions import VersionizeError
from versionize.logging import get_logger
from versionize.project.pyproject import Projects
from versionize.vcs import GitRepository

if TYPE_CHECKING:
    from rich.console import Console

    from versionize.config.models import VersionizeConfig
    from versionize.core.links import LinkBuilder

log = get_logger(__name__)


def run_update(
    path: str | None,
    execute: bool,
    release_as: str | None,
    changelog_all: bool,
    ignore_insignificant: bool,
    console: Console,
    err_console: Console,
) -> None:
    """Run the update command.

    Args:
        path: Optional path to project directory
        execute: Whether to actually apply changes
        release_as: Manual version override (e.g., "2.0.0")
        changelog_all: Include every commit type in the changelog
        ignore_insignificant: Stop quietly when no commit warrants a bump
        console: Console for standard output
        err_console: Console for error output
    """
    project_path = Path(path) if path else Path.cwd()

    try:
        config = load_config(project_path)
        repo = GitRepository(project_path)
    except VersionizeError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e

    if not config.allow_dirty and repo.is_dirty():
        err_console.print(
            "[red]Error:[/] Repository has uncommitted changes.\n"
            "Commit or stash them, or use [cyan]allow_dirty = true[/] in config."
        )
        raise SystemExit(1)

    projects = Projects.discover(project_path)
    if projects.is_empty():
        err_console.print(f"[red]Error:[/] No versioned pyproject.toml found in {project_path}")
        raise SystemExit(1)
    if projects.has_inconsistent_versioning():
        err_console.print("[red]Error:[/] Projects have inconsistent versions:")
        for project_file in projects.project_files():
            err_console.print(f"  • {project_file}")
        raise SystemExit(1)

    current_version = projects.version

    latest_tag = repo.get_latest_tag(f"{config.effective_tag_prefix}*")
    is_first_release = latest_tag is None

    raw_commits = filter_skip_release_commits(
        repo.get_commits_since_tag(latest_tag),
        config.commits.skip_release_patterns,
    )
    commits = parse_commits(raw_commits)
    bump_type = calculate_bump(commits, config.commits)

    if release_as:
        try:
            next_version = SemanticVersion.parse(release_as)
        except VersionizeError as e:
            err_console.print(f"[red]Invalid version format:[/] {e}")
            raise SystemExit(1) from e
    elif is_first_release:
        next_version = current_version
    else:
        if bump_type == BumpType.NONE and ignore_insignificant:
            console.print("[yellow]No significant commits since the last release. Nothing to do.[/]")
            return
        next_version = current_version.bump(bump_type)

    log.info(
        "release_planned",
        current=str(current_version),
        next=str(next_version),
        bump=str(bump_type),
        commits=len(commits),
    )

    mode_str = "[green]EXECUTING[/]" if execute else "[yellow]DRY-RUN[/]"
    if is_first_release:
        console.print(f"\n{mode_str} - First release! Releasing [green]{next_version}[/]\n")
    else:
        console.print(
            f"\n{mode_str} - Updating from [cyan]{current_version}[/] to [green]{next_version}[/]\n"
        )

    changelog_path = config.effective_changelog_path

    if not execute:
        console.print(
            Panel(
                "[bold]Would make the following changes:[/]\n\n"
                f"  • Update version in {len(projects.project_files())} pyproject.toml file(s)\n"
                f"  • Add {next_version} to [cyan]{changelog_path}[/]",
                title="[yellow]Dry Run Preview[/]",
                border_style="yellow",
            )
        )
        console.print("\n[dim]Run with [cyan]--execute[/] to apply these changes.[/]")
        return

    try:
        if next_version != current_version:
            projects.write_version(next_version)
            console.print("  [green]✓[/] Updated version in pyproject.toml")

        if config.changelog.enabled:
            changelog = Changelog.discover(project_path, changelog_path)
            changelog.write(
                next_version,
                datetime.now().astimezone(),
                _link_builder(repo, config),
                commits,
                include_all=changelog_all or config.changelog.include_all,
            )
            console.print(f"  [green]✓[/] Updated {changelog_path}")
    except VersionizeError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e

    tag = f"{config.effective_tag_prefix}{next_version}"
    console.print(
        Panel(
            f"[green]Successfully updated to version {next_version}![/]\n\n"
            "Next steps:\n"
            "  1. Review the changes\n"
            f"  2. Commit: [cyan]git add . && git commit -m "
            f"'chore(release): {next_version}'[/]\n"
            f"  3. Tag: [cyan]git tag {tag}[/]",
            title="[green]Update Complete[/]",
            border_style="green",
        )
    )


def _link_builder(repo: GitRepository, config: VersionizeConfig) -> LinkBuilder:
    if not config.github.links:
        return PlainLinkBuilder()
    return create_link_builder(repo.get_remote_url(config.github.remote))
