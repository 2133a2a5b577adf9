"""Shared fixtures for versionize tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
import structlog

from versionize.core.commits import ConventionalCommit, ConventionalCommitParser, RawCommit

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture(autouse=True)
def _restore_logging():
    """Undo logging configuration done by CLI invocations."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def parser() -> ConventionalCommitParser:
    return ConventionalCommitParser()


@pytest.fixture
def parse(parser: ConventionalCommitParser):
    """Parse ``(sha, message)`` into a ConventionalCommit."""

    def _parse(sha: str, message: str) -> ConventionalCommit:
        return parser.parse(RawCommit(sha=sha, message=message))

    return _parse


@pytest.fixture
def feat_commit() -> RawCommit:
    return RawCommit("feat1234567890", "feat: add user authentication")


@pytest.fixture
def fix_commit() -> RawCommit:
    return RawCommit("fix1234567890", "fix(core): resolve memory leak")


@pytest.fixture
def breaking_commit() -> RawCommit:
    return RawCommit(
        "break1234567890",
        "feat(api)!: redesign endpoints\n\nBREAKING CHANGE: v1 endpoints removed",
    )


@pytest.fixture
def sample_commits() -> list[RawCommit]:
    return [
        RawCommit("a" * 40, "feat: add feature"),
        RawCommit("b" * 40, "fix(api): fix bug"),
        RawCommit("c" * 40, "docs: update readme"),
        RawCommit("d" * 40, "chore: bump deps"),
        RawCommit("e" * 40, "feat!: drop python 3.10"),
        RawCommit("f" * 40, "Merge branch 'main'"),
    ]


@pytest.fixture
def temp_project(tmp_path: Path) -> Path:
    """A project directory with a versioned pyproject.toml."""
    (tmp_path / "pyproject.toml").write_text(
        """\
[project]
name = "test-project"
# keep this comment
version = "1.0.0"
description = "A test project"

[tool.versionize]
allow_dirty = true
"""
    )
    return tmp_path
