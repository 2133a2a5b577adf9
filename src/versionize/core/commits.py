"""Conventional commit parsing.

Parses commit messages following the Conventional Commits convention::

    <type>[(<scope>)][!]: <subject>

    [body]

    [BREAKING CHANGE: <description>]

Parsing is total: a message that does not follow the convention becomes an
``other`` commit whose subject is the first line of the message. Only a
``BREAKING CHANGE:`` footer can still mark such a commit as breaking.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from versionize.logging import get_logger

log = get_logger(__name__)

HEADER_PATTERN = re.compile(
    r"^(?P<type>\w+)(?:\((?P<scope>[^)]*)\))?(?P<breaking>!)?: (?P<subject>.*)$"
)
BREAKING_CHANGE_FOOTER = "BREAKING CHANGE:"


class CommitType(StrEnum):
    FEAT = "feat"
    FIX = "fix"
    DOCS = "docs"
    STYLE = "style"
    REFACTOR = "refactor"
    PERF = "perf"
    TEST = "test"
    BUILD = "build"
    CI = "ci"
    CHORE = "chore"
    REVERT = "revert"
    OTHER = "other"


_RECOGNIZED_TYPES = frozenset(t.value for t in CommitType if t is not CommitType.OTHER)


@dataclass(frozen=True)
class RawCommit:
    """A commit as supplied by version control."""

    sha: str
    message: str


@dataclass(frozen=True)
class ConventionalCommit:
    """A parsed commit.

    Attributes:
        sha: Full commit identifier
        type: Commit type, ``other`` for non-conforming messages
        scope: Text inside the header parentheses, if any
        subject: Description from the header (or the whole first line)
        body: Text after the header, if any
        is_breaking: ``!`` in the header or a ``BREAKING CHANGE:`` footer
    """

    sha: str
    type: CommitType
    subject: str
    scope: str | None = None
    body: str | None = None
    is_breaking: bool = False

    @property
    def short_sha(self) -> str:
        return self.sha[:7]


@dataclass(frozen=True)
class RecognizedHeader:
    type: CommitType
    scope: str | None
    subject: str
    breaking: bool


@dataclass(frozen=True)
class FallbackHeader:
    raw_subject: str


def parse_header(line: str) -> RecognizedHeader | FallbackHeader:
    """Match a header line against the convention."""
    match = HEADER_PATTERN.match(line)
    if match is None or match["type"] not in _RECOGNIZED_TYPES:
        return FallbackHeader(raw_subject=line)
    return RecognizedHeader(
        type=CommitType(match["type"]),
        scope=match["scope"] or None,
        subject=match["subject"].strip(),
        breaking=match["breaking"] is not None,
    )


def has_breaking_change_footer(message: str) -> bool:
    return any(line.startswith(BREAKING_CHANGE_FOOTER) for line in message.splitlines())


def _split_body(lines: list[str]) -> str | None:
    rest = lines[1:]
    for i, line in enumerate(rest):
        if not line.strip():
            rest = rest[i + 1 :]
            break
    body = "\n".join(rest).strip()
    return body or None


class ConventionalCommitParser:
    """Turns raw commits into :class:`ConventionalCommit` records."""

    def parse(self, commit: RawCommit) -> ConventionalCommit:
        lines = commit.message.rstrip().splitlines() or [""]
        header = parse_header(lines[0].strip())
        body = _split_body(lines)
        footer_breaking = has_breaking_change_footer(commit.message)

        if isinstance(header, FallbackHeader):
            return ConventionalCommit(
                sha=commit.sha,
                type=CommitType.OTHER,
                subject=header.raw_subject,
                body=body,
                is_breaking=footer_breaking,
            )

        return ConventionalCommit(
            sha=commit.sha,
            type=header.type,
            scope=header.scope,
            subject=header.subject,
            body=body,
            is_breaking=header.breaking or footer_breaking,
        )


def parse_commits(
    commits: Iterable[RawCommit],
    parser: ConventionalCommitParser | None = None,
) -> list[ConventionalCommit]:
    """Parse commits, keeping input order."""
    parser = parser or ConventionalCommitParser()
    parsed = [parser.parse(commit) for commit in commits]
    log.debug(
        "commits_parsed",
        total=len(parsed),
        conventional=sum(1 for c in parsed if c.type is not CommitType.OTHER),
    )
    return parsed


def filter_skip_release_commits(
    commits: Iterable[RawCommit],
    patterns: Iterable[str],
) -> list[RawCommit]:
    """Drop commits whose message carries a skip-release marker.

    Markers are matched case-insensitively anywhere in the message.
    """
    lowered = [p.lower() for p in patterns]
    if not lowered:
        return list(commits)
    return [c for c in commits if not any(p in c.message.lower() for p in lowered)]
