"""Changelog generation from conventional commits.

Each release becomes one Markdown block::

    <a name="1.1.0"></a>
    ## [1.1.0](https://www.github.com/org/repo/releases/tag/v1.1.0) (18-10-2026)

    ### Features

    * add a feature ([b360d6a](https://www.github.com/org/repo/commit/b360d6a...))

New blocks are merged into the existing document by searching for the
``<a name="..."></a>`` anchors: the newest release goes right before the
first anchor, and any text above it is kept as is. A document without
anchors gets the block appended at the end.
"""

from __future__ import annotations

import os
import re
import tempfile
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from versionize.core.commits import CommitType
from versionize.exceptions import ChangelogError
from versionize.logging import get_logger

if TYPE_CHECKING:
    from datetime import datetime

    from versionize.core.commits import ConventionalCommit
    from versionize.core.links import LinkBuilder
    from versionize.core.version import SemanticVersion

log = get_logger(__name__)

CHANGELOG_FILENAME = "CHANGELOG.md"
ANCHOR_PATTERN = re.compile(r'<a name="\d+\.\d+\.\d+[^"]*"></a>')

BREAKING = "breaking"

# Render order. Only the first three are written unless all commits are included.
SECTION_TITLES: dict[str, str] = {
    BREAKING: "Breaking Changes",
    CommitType.FEAT: "Features",
    CommitType.FIX: "Bug Fixes",
    CommitType.PERF: "Performance Improvements",
    CommitType.REVERT: "Reverts",
    CommitType.DOCS: "Documentation",
    CommitType.STYLE: "Styles",
    CommitType.REFACTOR: "Code Refactoring",
    CommitType.TEST: "Tests",
    CommitType.BUILD: "Build System",
    CommitType.CI: "Continuous Integration",
    CommitType.CHORE: "Chores",
    CommitType.OTHER: "Other",
}


def section_for(commit: ConventionalCommit) -> str:
    """Return the section key a commit is listed under."""
    return BREAKING if commit.is_breaking else commit.type


def is_changelog_worthy(commit: ConventionalCommit) -> bool:
    return commit.is_breaking or commit.type in (CommitType.FEAT, CommitType.FIX)


def format_date(timestamp: datetime) -> str:
    """Format a release date as ``d-M-yyyy`` without zero padding."""
    return f"{timestamp.day}-{timestamp.month}-{timestamp.year}"


def group_commits(
    commits: Iterable[ConventionalCommit],
    *,
    include_all: bool = False,
) -> dict[str, list[ConventionalCommit]]:
    """Group commits into changelog sections.

    Sections come back in render order and only when non-empty. Commits keep
    their relative input order inside a section.
    """
    grouped: dict[str, list[ConventionalCommit]] = {key: [] for key in SECTION_TITLES}
    for commit in commits:
        if include_all or is_changelog_worthy(commit):
            grouped[section_for(commit)].append(commit)
    return {key: entries for key, entries in grouped.items() if entries}


def render_release(
    version: SemanticVersion,
    timestamp: datetime,
    link_builder: LinkBuilder,
    commits: Iterable[ConventionalCommit],
    *,
    include_all: bool = False,
) -> str:
    """Render the Markdown block for one release."""
    parts = [
        f'<a name="{version}"></a>\n',
        f"## {link_builder.build_version_link(version)} ({format_date(timestamp)})\n\n",
    ]
    for key, entries in group_commits(commits, include_all=include_all).items():
        parts.append(f"### {SECTION_TITLES[key]}\n\n")
        for commit in entries:
            link = link_builder.build_commit_link(commit.sha)
            suffix = f" ({link})" if link else ""
            parts.append(f"* {commit.subject}{suffix}\n")
        parts.append("\n")
    return "".join(parts)


def merge_changelog(existing: str, block: str) -> str:
    """Merge a rendered release block into existing changelog text."""
    if not existing:
        return block

    anchor = ANCHOR_PATTERN.search(existing)
    if anchor is None:
        if existing.endswith("\n\n"):
            separator = ""
        elif existing.endswith("\n"):
            separator = "\n"
        else:
            separator = "\n\n"
        return f"{existing}{separator}{block}"

    return existing[: anchor.start()] + block + existing[anchor.start() :]


def _atomic_write(path: Path, content: str) -> None:
    mode = path.stat().st_mode & 0o777 if path.exists() else 0o644
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}-", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
    except BaseException:
        Path(tmp_path).unlink(missing_ok=True)
        raise


class Changelog:
    """A changelog document bound to a file path.

    Use :meth:`discover` rather than the constructor. Nothing is written to
    disk until :meth:`write` is called.
    """

    def __init__(self, file_path: Path, content: str = "") -> None:
        self._file_path = file_path
        self._content = content

    @classmethod
    def discover(
        cls,
        directory: Path | str,
        filename: Path | str = CHANGELOG_FILENAME,
    ) -> Changelog:
        """Locate the changelog inside ``directory``.

        A missing file yields an empty document bound to the same path.
        """
        file_path = Path(directory) / filename
        content = file_path.read_text(encoding="utf-8") if file_path.is_file() else ""
        log.debug("changelog_discovered", path=str(file_path), exists=bool(content))
        return cls(file_path, content)

    @property
    def file_path(self) -> Path:
        return self._file_path

    @property
    def content(self) -> str:
        return self._content

    @property
    def header(self) -> str:
        """Free-form text above the first release block."""
        anchor = ANCHOR_PATTERN.search(self._content)
        return self._content if anchor is None else self._content[: anchor.start()]

    @property
    def release_blocks(self) -> list[str]:
        """Release blocks, newest first, each starting at its anchor."""
        starts = [m.start() for m in ANCHOR_PATTERN.finditer(self._content)]
        ends = [*starts[1:], len(self._content)]
        return [self._content[start:end] for start, end in zip(starts, ends, strict=True)]

    def write(
        self,
        version: SemanticVersion,
        timestamp: datetime,
        link_builder: LinkBuilder,
        commits: Sequence[ConventionalCommit],
        include_all: bool = False,
    ) -> None:
        """Add a release block for ``version`` and persist the document.

        Raises:
            ChangelogError: If the file cannot be written. The file on disk is
                left untouched in that case.
        """
        block = render_release(version, timestamp, link_builder, commits, include_all=include_all)
        merged = merge_changelog(self._content, block)

        try:
            _atomic_write(self._file_path, merged)
        except OSError as e:
            raise ChangelogError(f"Could not write {self._file_path}: {e}") from e

        self._content = merged
        log.info("changelog_written", path=str(self._file_path), version=str(version))
