"""Core business logic for versionize.

This module contains the fundamental building blocks:
- Conventional commit parsing
- Semantic version bumps
- Changelog rendering and merging
- Commit and release links
"""

from __future__ import annotations

from versionize.core.changelog import Changelog, merge_changelog, render_release
from versionize.core.commits import (
    CommitType,
    ConventionalCommit,
    ConventionalCommitParser,
    RawCommit,
    filter_skip_release_commits,
    parse_commits,
)
from versionize.core.links import (
    GithubLinkBuilder,
    LinkBuilder,
    PlainLinkBuilder,
    create_link_builder,
)
from versionize.core.version import BumpType, SemanticVersion, calculate_bump, next_version

__all__ = [
    # Version
    "BumpType",
    # Changelog
    "Changelog",
    # Commits
    "CommitType",
    "ConventionalCommit",
    "ConventionalCommitParser",
    # Links
    "GithubLinkBuilder",
    "LinkBuilder",
    "PlainLinkBuilder",
    "RawCommit",
    "SemanticVersion",
    "calculate_bump",
    "create_link_builder",
    "filter_skip_release_commits",
    "merge_changelog",
    "next_version",
    "parse_commits",
    "render_release",
]
