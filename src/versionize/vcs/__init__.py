"""Version control access."""

from __future__ import annotations

from versionize.vcs.git import GitRepository

__all__ = ["GitRepository"]
