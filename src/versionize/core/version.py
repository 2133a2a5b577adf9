"""Semantic versions and the bump decision.

The bump is a pure function of the parsed commits:

- any breaking change -> MAJOR
- else any minor type (``feat``) -> MINOR
- else any patch type (``fix``) -> PATCH
- else NONE

Only the highest-priority rule fires. A ``0.x.y`` version is bumped with the
same arithmetic as any other; whether 0.x lines get pre-release treatment is
left to the caller.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING

from versionize.exceptions import InvalidVersionError
from versionize.logging import get_logger

if TYPE_CHECKING:
    from versionize.config.models import CommitsConfig
    from versionize.core.commits import ConventionalCommit

log = get_logger(__name__)

_VERSION_RE = re.compile(r"^v?(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)$")


class BumpType(IntEnum):
    """Version bump, ordered by precedence."""

    NONE = 0
    PATCH = 1
    MINOR = 2
    MAJOR = 3

    def __str__(self) -> str:
        return self.name.lower()


@dataclass(frozen=True, order=True)
class SemanticVersion:
    """A ``major.minor.patch`` version.

    Ordering compares major, then minor, then patch.
    """

    major: int
    minor: int
    patch: int

    def __post_init__(self) -> None:
        if min(self.major, self.minor, self.patch) < 0:
            raise InvalidVersionError(f"Version components must be non-negative: {self!r}")

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    @classmethod
    def parse(cls, value: str) -> SemanticVersion:
        """Parse ``"1.2.3"`` (or ``"v1.2.3"``).

        Raises:
            InvalidVersionError: If the string is not a version triple
        """
        match = _VERSION_RE.match(value.strip())
        if match is None:
            raise InvalidVersionError(f"Invalid semantic version: {value!r}")
        return cls(int(match["major"]), int(match["minor"]), int(match["patch"]))

    def bump(self, bump_type: BumpType) -> SemanticVersion:
        """Return the version after applying ``bump_type``."""
        if bump_type == BumpType.MAJOR:
            return SemanticVersion(self.major + 1, 0, 0)
        if bump_type == BumpType.MINOR:
            return SemanticVersion(self.major, self.minor + 1, 0)
        if bump_type == BumpType.PATCH:
            return SemanticVersion(self.major, self.minor, self.patch + 1)
        return self


def calculate_bump(
    commits: Iterable[ConventionalCommit],
    config: CommitsConfig | None = None,
) -> BumpType:
    """Fold parsed commits into a single bump decision.

    Args:
        commits: Parsed commits, in any order
        config: Type-to-bump mapping; defaults to feat=minor, fix=patch

    Returns:
        The highest bump any commit qualifies for
    """
    minor_types = set(config.types_minor) if config else {"feat"}
    patch_types = set(config.types_patch) if config else {"fix"}

    bump = BumpType.NONE
    for commit in commits:
        if commit.is_breaking:
            bump = BumpType.MAJOR
            break
        if commit.type in minor_types:
            bump = max(bump, BumpType.MINOR)
        elif commit.type in patch_types:
            bump = max(bump, BumpType.PATCH)

    log.debug("bump_calculated", bump=str(bump))
    return bump


def next_version(
    current: SemanticVersion,
    commits: Iterable[ConventionalCommit],
    config: CommitsConfig | None = None,
) -> SemanticVersion:
    """Compute the version that follows ``current`` for ``commits``.

    Returns ``current`` unchanged when no commit qualifies for a bump.
    """
    return current.bump(calculate_bump(commits, config))
