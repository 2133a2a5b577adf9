"""Exception hierarchy for versionize.

All errors raised by versionize derive from :class:`VersionizeError`
so callers can catch them with a single ``except`` clause.

Malformed commit messages are never errors: they degrade to
``other``-typed commits instead.
"""

from __future__ import annotations


class VersionizeError(Exception):
    """Base class for all versionize errors."""


# Configuration


class ConfigError(VersionizeError):
    """Configuration could not be loaded or is invalid."""


class ConfigNotFoundError(ConfigError):
    """No pyproject.toml could be located."""


class ConfigValidationError(ConfigError):
    """Configuration values failed validation."""


class InvalidRemoteUrlError(ConfigValidationError):
    """A git remote URL does not have a supported shape."""

    def __init__(self, remote_url: str) -> None:
        self.remote_url = remote_url
        super().__init__(
            f"Remote url {remote_url!r} is not a supported GitHub remote. "
            "Expected https://github.com/<org>/<repo>.git or git@github.com:<org>/<repo>.git"
        )


# Versions


class VersionError(VersionizeError):
    """Version handling failed."""


class InvalidVersionError(VersionError):
    """A version string is not a valid major.minor.patch triple."""


# Changelog


class ChangelogError(VersionizeError):
    """The changelog could not be written."""


# Project manifests


class ProjectError(VersionizeError):
    """A project manifest could not be read or updated."""


class VersionNotFoundError(ProjectError):
    """A project manifest carries no version field."""


# Version control


class GitError(VersionizeError):
    """A git command failed."""

    def __init__(self, message: str, stderr: str | None = None) -> None:
        self.stderr = stderr
        if stderr:
            message = f"{message}: {stderr.strip()}"
        super().__init__(message)
