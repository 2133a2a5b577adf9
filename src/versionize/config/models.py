"""Configuration models for versionize.

Configuration lives in ``pyproject.toml`` under ``[tool.versionize]``::

    [tool.versionize]
    allow_dirty = false

    [tool.versionize.changelog]
    path = "CHANGELOG.md"
    include_all = false

    [tool.versionize.commits]
    types_minor = ["feat"]
    types_patch = ["fix"]
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CommitsConfig(BaseModel):
    """How commit types map onto version bumps."""

    model_config = ConfigDict(extra="forbid")

    types_minor: list[str] = Field(default_factory=lambda: ["feat"])
    types_patch: list[str] = Field(default_factory=lambda: ["fix"])
    skip_release_patterns: list[str] = Field(
        default_factory=lambda: ["[skip release]", "[release skip]", "[no release]"]
    )


class ChangelogConfig(BaseModel):
    """Changelog generation settings."""

    model_config = ConfigDict(extra="forbid")

    enabled: bool = True
    path: Path = Path("CHANGELOG.md")
    include_all: bool = False

    @field_validator("path")
    @classmethod
    def _relative_path(cls, value: Path) -> Path:
        if value.is_absolute():
            raise ValueError("changelog path must be relative to the project directory")
        return value


class VersionConfig(BaseModel):
    """Version and tag settings."""

    model_config = ConfigDict(extra="forbid")

    tag_prefix: str = "v"


class GitHubConfig(BaseModel):
    """Remote used to build commit and release links."""

    model_config = ConfigDict(extra="forbid")

    remote: str = "origin"
    links: bool = True


class VersionizeConfig(BaseModel):
    """Root configuration object."""

    model_config = ConfigDict(extra="forbid")

    allow_dirty: bool = False
    commits: CommitsConfig = Field(default_factory=CommitsConfig)
    changelog: ChangelogConfig = Field(default_factory=ChangelogConfig)
    version: VersionConfig = Field(default_factory=VersionConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)

    @property
    def effective_tag_prefix(self) -> str:
        return self.version.tag_prefix

    @property
    def effective_changelog_path(self) -> Path:
        return self.changelog.path
