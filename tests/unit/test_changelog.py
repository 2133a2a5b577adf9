"""Unit tests for changelog generation."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from unittest.mock import patch

import pytest

from versionize.core.changelog import (
    Changelog,
    format_date,
    group_commits,
    merge_changelog,
    render_release,
)
from versionize.core.links import GithubLinkBuilder, PlainLinkBuilder
from versionize.core.version import SemanticVersion
from versionize.exceptions import ChangelogError

# Earliest representable timestamp, renders as "1-1-1".
EPOCH = datetime(1, 1, 1)


@pytest.fixture
def plain() -> PlainLinkBuilder:
    return PlainLinkBuilder()


class TestDiscover:
    """Tests for Changelog.discover()."""

    def test_exposes_file_path(self, tmp_path: Path):
        changelog = Changelog.discover(tmp_path)

        assert changelog.file_path == tmp_path / "CHANGELOG.md"

    def test_does_not_create_file(self, tmp_path: Path):
        changelog = Changelog.discover(tmp_path)

        assert not changelog.file_path.exists()
        assert changelog.content == ""
        assert changelog.header == ""
        assert changelog.release_blocks == []

    def test_custom_filename(self, tmp_path: Path):
        changelog = Changelog.discover(tmp_path, "docs/HISTORY.md")

        assert changelog.file_path == tmp_path / "docs" / "HISTORY.md"

    def test_loads_existing_content(self, tmp_path: Path):
        (tmp_path / "CHANGELOG.md").write_text(
            '# Changelog\n\n<a name="1.1.0"></a>\n## 1.1.0 (1-1-1)\n\n'
            '<a name="1.0.0"></a>\n## 1.0.0 (1-1-1)\n\n'
        )
        changelog = Changelog.discover(tmp_path)

        assert changelog.header == "# Changelog\n\n"
        assert changelog.release_blocks == [
            '<a name="1.1.0"></a>\n## 1.1.0 (1-1-1)\n\n',
            '<a name="1.0.0"></a>\n## 1.0.0 (1-1-1)\n\n',
        ]


class TestWrite:
    """Tests for Changelog.write()."""

    def test_empty_commits_still_writes_heading(self, tmp_path: Path, plain):
        changelog = Changelog.discover(tmp_path)
        changelog.write(SemanticVersion(1, 1, 0), EPOCH, plain, [])

        assert changelog.file_path.is_file()
        assert changelog.file_path.read_text() == '<a name="1.1.0"></a>\n## 1.1.0 (1-1-1)\n\n'

    def test_fix_feat_and_breaking_sections(self, tmp_path: Path, plain, parse):
        changelog = Changelog.discover(tmp_path)
        changelog.write(
            SemanticVersion(1, 1, 0),
            EPOCH,
            plain,
            [
                parse("a360d6a307909c6e571b29d4a329fd786c5d4543", "fix: a fix"),
                parse("b360d6a307909c6e571b29d4a329fd786c5d4543", "feat: a feature"),
                parse(
                    "c360d6a307909c6e571b29d4a329fd786c5d4543",
                    "feat: a breaking change feature\nBREAKING CHANGE: this will break everything",
                ),
            ],
        )

        assert changelog.file_path.read_text() == (
            '<a name="1.1.0"></a>\n'
            "## 1.1.0 (1-1-1)\n\n"
            "### Breaking Changes\n\n"
            "* a breaking change feature\n\n"
            "### Features\n\n"
            "* a feature\n\n"
            "### Bug Fixes\n\n"
            "* a fix\n\n"
        )

    def test_appends_at_end_if_changelog_has_no_releases(self, tmp_path: Path, plain, parse):
        (tmp_path / "CHANGELOG.md").write_text(
            "# Should be kept by versionize\n\nSome information about the changelog"
        )
        changelog = Changelog.discover(tmp_path)
        changelog.write(
            SemanticVersion(1, 0, 0),
            EPOCH,
            plain,
            [parse("a360d6a307909c6e571b29d4a329fd786c5d4543", "fix: a fix in version 1.0.0")],
        )

        assert changelog.file_path.read_text() == (
            "# Should be kept by versionize\n\nSome information about the changelog\n\n"
            '<a name="1.0.0"></a>\n## 1.0.0 (1-1-1)\n\n### Bug Fixes\n\n'
            "* a fix in version 1.0.0\n\n"
        )

    @pytest.mark.parametrize(
        "remote",
        ["https://github.com/organization/repository.git", "git@github.com:organization/repository.git"],
    )
    def test_github_links(self, tmp_path: Path, parse, remote: str):
        changelog = Changelog.discover(tmp_path)
        changelog.write(
            SemanticVersion(1, 0, 0),
            EPOCH,
            GithubLinkBuilder(remote),
            [parse("a360d6a307909c6e571b29d4a329fd786c5d4543", "fix: a fix in version 1.0.0")],
        )
        contents = changelog.file_path.read_text()

        assert (
            "* a fix in version 1.0.0 ([a360d6a](https://www.github.com/organization/repository/"
            "commit/a360d6a307909c6e571b29d4a329fd786c5d4543))"
        ) in contents
        assert (
            "## [1.0.0](https://www.github.com/organization/repository/releases/tag/v1.0.0) (1-1-1)"
        ) in contents

    def test_sequential_writes_put_newest_first(self, tmp_path: Path, plain, parse):
        changelog = Changelog.discover(tmp_path)
        changelog.write(
            SemanticVersion(1, 0, 0), EPOCH, plain, [parse("a" * 40, "fix: a fix in version 1.0.0")]
        )
        changelog.write(
            SemanticVersion(1, 1, 0), EPOCH, plain, [parse("b" * 40, "fix: a fix in version 1.1.0")]
        )
        contents = changelog.file_path.read_text()

        assert '<a name="1.0.0"></a>' in contents
        assert '<a name="1.1.0"></a>' in contents
        assert contents.index('<a name="1.1.0"></a>') < contents.index("a fix in version 1.1.0")
        assert contents.index("a fix in version 1.1.0") < contents.index('<a name="1.0.0"></a>')
        assert contents.index('<a name="1.0.0"></a>') < contents.index("a fix in version 1.0.0")

    def test_rediscovered_changelog_keeps_header_above_releases(self, tmp_path: Path, plain, parse):
        (tmp_path / "CHANGELOG.md").write_text("# Changelog\n\nAll notable changes.\n")
        Changelog.discover(tmp_path).write(
            SemanticVersion(1, 0, 0), EPOCH, plain, [parse("a" * 40, "fix: first")]
        )
        Changelog.discover(tmp_path).write(
            SemanticVersion(2, 0, 0), EPOCH, plain, [parse("b" * 40, "feat!: second")]
        )
        changelog = Changelog.discover(tmp_path)

        assert changelog.header == "# Changelog\n\nAll notable changes.\n\n"
        assert [block.splitlines()[0] for block in changelog.release_blocks] == [
            '<a name="2.0.0"></a>',
            '<a name="1.0.0"></a>',
        ]

    def test_include_all(self, tmp_path: Path, plain, parse):
        changelog = Changelog.discover(tmp_path)
        changelog.write(
            SemanticVersion(1, 1, 0),
            EPOCH,
            plain,
            [
                parse("a" * 40, "chore: nothing important"),
                parse("b" * 40, "chore: some foo bar"),
            ],
            include_all=True,
        )
        contents = changelog.file_path.read_text()

        assert "### Chores" in contents
        assert "nothing important" in contents
        assert "some foo bar" in contents

    def test_default_excludes_insignificant_commits(self, tmp_path: Path, plain, parse):
        changelog = Changelog.discover(tmp_path)
        changelog.write(
            SemanticVersion(1, 1, 0),
            EPOCH,
            plain,
            [parse("a" * 40, "chore: nothing important"), parse("b" * 40, "random commit")],
        )

        assert "nothing important" not in changelog.file_path.read_text()
        assert "random commit" not in changelog.file_path.read_text()

    def test_failed_write_leaves_file_untouched(self, tmp_path: Path, plain, parse):
        path = tmp_path / "CHANGELOG.md"
        path.write_text("# Existing\n")
        changelog = Changelog.discover(tmp_path)

        with patch("versionize.core.changelog.os.replace", side_effect=PermissionError("denied")):
            with pytest.raises(ChangelogError, match="denied"):
                changelog.write(SemanticVersion(1, 0, 0), EPOCH, plain, [parse("a" * 40, "fix: x")])

        assert path.read_text() == "# Existing\n"
        assert changelog.content == "# Existing\n"
        assert list(tmp_path.iterdir()) == [path]

    def test_preserves_file_mode_and_line_endings(self, tmp_path: Path, plain, parse):
        path = tmp_path / "CHANGELOG.md"
        path.write_text("# Existing\n")
        path.chmod(0o600)

        Changelog.discover(tmp_path).write(
            SemanticVersion(1, 0, 0), EPOCH, plain, [parse("a" * 40, "fix: x")]
        )

        assert path.stat().st_mode & 0o777 == 0o600
        assert b"\r\n" not in path.read_bytes()
        assert list(tmp_path.iterdir()) == [path]

    def test_missing_directory_raises(self, tmp_path: Path, plain):
        changelog = Changelog.discover(tmp_path / "missing")

        with pytest.raises(ChangelogError):
            changelog.write(SemanticVersion(1, 0, 0), EPOCH, plain, [])


class TestRenderRelease:
    """Tests for render_release() and group_commits()."""

    def test_section_order_with_include_all(self, parse, plain):
        commits = [
            parse("1" * 40, "docs: document it"),
            parse("2" * 40, "fix: fix it"),
            parse("3" * 40, "feat: build it"),
            parse("4" * 40, "whatever"),
        ]
        block = render_release(SemanticVersion(1, 0, 0), EPOCH, plain, commits, include_all=True)

        titles = [line for line in block.splitlines() if line.startswith("### ")]
        assert titles == ["### Features", "### Bug Fixes", "### Documentation", "### Other"]

    def test_entries_keep_input_order(self, parse):
        commits = [parse("1" * 40, "feat: zebra"), parse("2" * 40, "feat: apple")]
        grouped = group_commits(commits)

        assert [c.subject for c in grouped["feat"]] == ["zebra", "apple"]

    def test_breaking_commit_listed_once(self, parse):
        grouped = group_commits([parse("1" * 40, "feat!: big"), parse("2" * 40, "feat: small")])

        assert [c.subject for c in grouped["breaking"]] == ["big"]
        assert [c.subject for c in grouped["feat"]] == ["small"]

    def test_format_date(self):
        assert format_date(datetime(2024, 3, 7, 23, 59)) == "7-3-2024"


class TestMergeChangelog:
    """Tests for merge_changelog()."""

    BLOCK = '<a name="2.0.0"></a>\n## 2.0.0 (1-1-1)\n\n'

    def test_empty_document(self):
        assert merge_changelog("", self.BLOCK) == self.BLOCK

    def test_no_anchor_with_trailing_newline(self):
        assert merge_changelog("# Title\n", self.BLOCK) == "# Title\n\n" + self.BLOCK

    def test_no_anchor_with_blank_line(self):
        assert merge_changelog("# Title\n\n", self.BLOCK) == "# Title\n\n" + self.BLOCK

    def test_inserts_before_first_anchor(self):
        existing = '# Title\n\n<a name="1.0.0"></a>\n## 1.0.0 (1-1-1)\n\n'

        assert merge_changelog(existing, self.BLOCK) == (
            "# Title\n\n" + self.BLOCK + '<a name="1.0.0"></a>\n## 1.0.0 (1-1-1)\n\n'
        )

    def test_non_release_anchor_stays_in_header(self):
        existing = '<a name="top"></a>\n# Changelog\n\nNotes here.\n'

        assert merge_changelog(existing, self.BLOCK) == existing + "\n" + self.BLOCK

    def test_release_anchor_after_non_release_anchor(self):
        existing = '<a name="top"></a>\n# Changelog\n\n<a name="1.0.0"></a>\n## 1.0.0 (1-1-1)\n\n'

        assert merge_changelog(existing, self.BLOCK) == (
            '<a name="top"></a>\n# Changelog\n\n'
            + self.BLOCK
            + '<a name="1.0.0"></a>\n## 1.0.0 (1-1-1)\n\n'
        )


def test_header_keeps_non_release_anchor(tmp_path: Path, plain, parse):
    (tmp_path / "CHANGELOG.md").write_text('<a name="top"></a>\n# Changelog\n\nNotes here.\n')
    Changelog.discover(tmp_path).write(
        SemanticVersion(1, 0, 0), EPOCH, plain, [parse("a" * 40, "fix: x")]
    )
    changelog = Changelog.discover(tmp_path)

    assert changelog.header == '<a name="top"></a>\n# Changelog\n\nNotes here.\n\n'
    assert len(changelog.release_blocks) == 1
    assert changelog.release_blocks[0].startswith('<a name="1.0.0"></a>\n')
