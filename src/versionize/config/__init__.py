"""Configuration management for versionize."""

from __future__ import annotations

from versionize.config.loader import load_config
from versionize.config.models import (
    ChangelogConfig,
    CommitsConfig,
    GitHubConfig,
    VersionConfig,
    VersionizeConfig,
)

__all__ = [
    "ChangelogConfig",
    "CommitsConfig",
    "GitHubConfig",
    "VersionConfig",
    "VersionizeConfig",
    "load_config",
]
