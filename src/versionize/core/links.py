"""Commit and version references for changelog entries.

A link builder renders a commit identifier or a release version as either
plain text or a hyperlink to the hosting provider.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from versionize.exceptions import InvalidRemoteUrlError

if TYPE_CHECKING:
    from versionize.core.version import SemanticVersion

SHORT_SHA_LENGTH = 7

_GITHUB_REMOTE_PATTERNS = (
    re.compile(r"^https://github\.com/(?P<org>[^/\s]+)/(?P<repo>[^/\s]+?)(?:\.git)?/?$"),
    re.compile(r"^git@github\.com:(?P<org>[^/\s]+)/(?P<repo>[^/\s]+?)(?:\.git)?$"),
)


@runtime_checkable
class LinkBuilder(Protocol):
    def build_commit_link(self, sha: str) -> str: ...

    def build_version_link(self, version: SemanticVersion) -> str: ...


class PlainLinkBuilder:
    """Renders versions as plain text and leaves commits unreferenced."""

    def build_commit_link(self, sha: str) -> str:
        return ""

    def build_version_link(self, version: SemanticVersion) -> str:
        return str(version)


class GithubLinkBuilder:
    """Renders references as links into a GitHub repository.

    Args:
        remote_url: ``https://github.com/<org>/<repo>.git`` or
            ``git@github.com:<org>/<repo>.git``

    Raises:
        InvalidRemoteUrlError: If ``remote_url`` has any other shape
    """

    def __init__(self, remote_url: str) -> None:
        self.organization, self.repository = parse_github_remote(remote_url)

    @property
    def base_url(self) -> str:
        return f"https://www.github.com/{self.organization}/{self.repository}"

    def build_commit_link(self, sha: str) -> str:
        return f"[{sha[:SHORT_SHA_LENGTH]}]({self.base_url}/commit/{sha})"

    def build_version_link(self, version: SemanticVersion) -> str:
        return f"[{version}]({self.base_url}/releases/tag/v{version})"


def parse_github_remote(remote_url: str) -> tuple[str, str]:
    """Split a GitHub remote into ``(organization, repository)``."""
    for pattern in _GITHUB_REMOTE_PATTERNS:
        match = pattern.match(remote_url.strip())
        if match:
            return match["org"], match["repo"]
    raise InvalidRemoteUrlError(remote_url)


def is_github_remote(remote_url: str) -> bool:
    return any(p.match(remote_url.strip()) for p in _GITHUB_REMOTE_PATTERNS)


def create_link_builder(remote_url: str | None) -> LinkBuilder:
    """Pick a link builder for a git remote.

    GitHub remotes get hyperlinks; anything else, or no remote at all,
    falls back to plain references.
    """
    if remote_url and is_github_remote(remote_url):
        return GithubLinkBuilder(remote_url)
    return PlainLinkBuilder()
