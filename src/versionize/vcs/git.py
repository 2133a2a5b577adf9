"""Read-only access to a git repository.

git is called as a subprocess and its output parsed. Nothing here commits,
tags or pushes.
"""

from __future__ import annotations

import subprocess
from pathlib import Path

from versionize.core.commits import RawCommit
from versionize.exceptions import GitError
from versionize.logging import get_logger

log = get_logger(__name__)

_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"


class GitRepository:
    """A git working tree rooted at ``path``.

    Raises:
        GitError: If ``path`` is not inside a git repository
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._run("rev-parse", "--git-dir")

    def _run(self, *args: str, check: bool = True) -> subprocess.CompletedProcess[str]:
        try:
            return subprocess.run(
                ["git", *args],
                capture_output=True,
                text=True,
                check=check,
                cwd=self.path,
            )
        except FileNotFoundError as e:
            raise GitError("git executable not found") from e
        except subprocess.CalledProcessError as e:
            raise GitError(f"git {args[0]} failed with exit code {e.returncode}", e.stderr) from e

    def is_dirty(self) -> bool:
        return bool(self._run("status", "--porcelain").stdout.strip())

    def get_latest_tag(self, pattern: str = "v*") -> str | None:
        """Return the most recent tag reachable from HEAD matching ``pattern``."""
        result = self._run("describe", "--tags", "--abbrev=0", "--match", pattern, check=False)
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def get_commits_since_tag(self, tag: str | None) -> list[RawCommit]:
        """Return commits after ``tag`` (or all commits), newest first."""
        revision = f"{tag}..HEAD" if tag else "HEAD"
        result = self._run("log", f"--format=%H{_FIELD_SEP}%B{_RECORD_SEP}", revision, check=False)
        if result.returncode != 0:
            # Empty repositories have no HEAD.
            log.debug("git_log_failed", stderr=result.stderr.strip())
            return []

        commits = []
        for record in result.stdout.split(_RECORD_SEP):
            record = record.strip()
            if not record:
                continue
            sha, _, message = record.partition(_FIELD_SEP)
            commits.append(RawCommit(sha=sha.strip(), message=message.strip()))

        log.debug("commits_collected", since=tag, count=len(commits))
        return commits

    def get_remote_url(self, name: str = "origin") -> str | None:
        result = self._run("remote", "get-url", name, check=False)
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None
