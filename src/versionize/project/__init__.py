"""Project manifest handling."""

from __future__ import annotations

from versionize.project.pyproject import (
    Project,
    Projects,
    get_pyproject_version,
    update_pyproject_version,
)

__all__ = [
    "Project",
    "Projects",
    "get_pyproject_version",
    "update_pyproject_version",
]
