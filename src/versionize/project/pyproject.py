"""pyproject.toml version manipulation.

This module reads and updates the version number in pyproject.toml files
and groups every versioned pyproject.toml below a directory into a
:class:`Projects` set that is bumped as a unit.

Updates use regex-based replacement rather than full TOML rewriting so
formatting and comments survive.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from versionize.core.version import SemanticVersion
from versionize.exceptions import InvalidVersionError, ProjectError, VersionNotFoundError
from versionize.logging import get_logger

log = get_logger(__name__)

PYPROJECT_FILENAME = "pyproject.toml"
IGNORED_DIRECTORIES = frozenset({".git", ".hg", ".tox", ".nox", ".venv", "venv", "node_modules"})

# [project] takes precedence over [tool.poetry]
_SECTION_PATTERNS = (
    r"^\[project\].*?(?=^\[|\Z)",
    r"^\[tool\.poetry\].*?(?=^\[|\Z)",
)
_VERSION_LINE = re.compile(r'^(version\s*=\s*)["\']([^"\']+)["\']', re.MULTILINE)


def get_pyproject_version(pyproject_path: Path) -> str:
    """Get the version from a pyproject.toml.

    Raises:
        VersionNotFoundError: If neither [project] nor [tool.poetry] has a version
    """
    content = pyproject_path.read_text(encoding="utf-8")

    for section_pattern in _SECTION_PATTERNS:
        section = re.search(section_pattern, content, re.MULTILINE | re.DOTALL)
        if section is None:
            continue
        match = _VERSION_LINE.search(section.group(0))
        if match:
            return match.group(2)

    raise VersionNotFoundError(
        f"Could not find version in {pyproject_path}. "
        "Expected [project].version or [tool.poetry].version."
    )


def update_pyproject_version(pyproject_path: Path, new_version: str) -> None:
    """Set the version in a pyproject.toml, preserving formatting.

    Raises:
        VersionNotFoundError: If no version field exists
    """
    content = pyproject_path.read_text(encoding="utf-8")

    def replace_version(match: re.Match[str]) -> str:
        return _VERSION_LINE.sub(rf'\g<1>"{new_version}"', match.group(0), count=1)

    for section_pattern in _SECTION_PATTERNS:
        section = re.search(section_pattern, content, re.MULTILINE | re.DOTALL)
        if section is None or not _VERSION_LINE.search(section.group(0)):
            continue
        new_content = re.sub(
            section_pattern,
            replace_version,
            content,
            count=1,
            flags=re.MULTILINE | re.DOTALL,
        )
        pyproject_path.write_text(new_content, encoding="utf-8")
        log.debug("manifest_updated", path=str(pyproject_path), version=new_version)
        return

    raise VersionNotFoundError(
        f"Could not find version to update in {pyproject_path}. "
        "Expected [project].version or [tool.poetry].version."
    )


@dataclass(frozen=True)
class Project:
    """A pyproject.toml with a semantic version."""

    path: Path
    version: SemanticVersion

    @classmethod
    def create(cls, path: Path) -> Project:
        return cls(path, SemanticVersion.parse(get_pyproject_version(path)))

    @staticmethod
    def is_versionable(path: Path) -> bool:
        try:
            SemanticVersion.parse(get_pyproject_version(path))
        except (VersionNotFoundError, InvalidVersionError):
            return False
        return True

    def write_version(self, version: SemanticVersion) -> None:
        update_pyproject_version(self.path, str(version))


def _iter_pyprojects(directory: Path) -> Iterator[Path]:
    for path in sorted(directory.rglob(PYPROJECT_FILENAME)):
        relative_parts = path.relative_to(directory).parts[:-1]
        if any(part in IGNORED_DIRECTORIES or part.startswith(".") for part in relative_parts):
            continue
        yield path


class Projects:
    """Every versioned pyproject.toml below a working directory."""

    def __init__(self, projects: list[Project]) -> None:
        self._projects = projects

    @classmethod
    def discover(cls, working_directory: Path) -> Projects:
        projects = [
            Project.create(path)
            for path in _iter_pyprojects(working_directory)
            if Project.is_versionable(path)
        ]
        log.debug("projects_discovered", count=len(projects), directory=str(working_directory))
        return cls(projects)

    def is_empty(self) -> bool:
        return not self._projects

    def has_inconsistent_versioning(self) -> bool:
        if not self._projects:
            return True
        first = self._projects[0].version
        return any(p.version != first for p in self._projects)

    @property
    def version(self) -> SemanticVersion:
        """Version shared by the discovered projects.

        Raises:
            ProjectError: If no project was discovered
        """
        if not self._projects:
            raise ProjectError("No versioned pyproject.toml found")
        return self._projects[0].version

    def write_version(self, next_version: SemanticVersion) -> None:
        for project in self._projects:
            project.write_version(next_version)

    def project_files(self) -> list[Path]:
        return [p.path for p in self._projects]
