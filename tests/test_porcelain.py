"""Tests for parsing git's porcelain output"""

import pytest

from git_worktree_manager.models.comparison import ChangeStatus
from git_worktree_manager.services.git.porcelain import (
    WorktreeListParser,
    is_dirty_status,
    parse_name_status,
)
from git_worktree_manager.utils.paths import PathNormalizer


SHA_MAIN = "1111111111111111111111111111111111111111"
SHA_FEATURE = "2222222222222222222222222222222222222222"
SHA_DETACHED = "3333333333333333333333333333333333333333"


@pytest.fixture
def parser():
    return WorktreeListParser(normalizer=PathNormalizer(case_insensitive=False))


class TestWorktreeListParser:
    """Test parsing of ``git worktree list --porcelain``."""

    def test_parse_typical_listing(self, parser):
        """Main, branch and detached records are all recognised."""
        output = (
            f"worktree /repos/project\n"
            f"HEAD {SHA_MAIN}\n"
            f"branch refs/heads/main\n"
            f"\n"
            f"worktree /repos/project-feature\n"
            f"HEAD {SHA_FEATURE}\n"
            f"branch refs/heads/feature/login\n"
            f"locked\n"
            f"\n"
            f"worktree /repos/project-detached\n"
            f"HEAD {SHA_DETACHED}\n"
            f"detached\n"
            f"prunable gitdir file points to non-existent location\n"
            f"\n"
        )

        worktrees = parser.parse(output)

        assert [wt.path for wt in worktrees] == [
            "/repos/project", "/repos/project-feature", "/repos/project-detached"
        ]
        main, feature, detached = worktrees

        assert main.is_main
        assert main.branch == "refs/heads/main"
        assert main.commit_sha == SHA_MAIN

        assert not feature.is_main
        assert feature.branch == "refs/heads/feature/login"
        assert feature.display_name == "feature/login"
        assert feature.is_locked
        assert not feature.is_prunable

        assert detached.branch is None
        assert detached.is_detached
        assert detached.is_prunable
        assert detached.display_name == SHA_DETACHED[:7]

    def test_last_record_without_trailing_blank_line(self, parser):
        """End of input terminates the final record."""
        output = f"worktree /repos/project\nHEAD {SHA_MAIN}\nbranch refs/heads/main"
        worktrees = parser.parse(output)
        assert len(worktrees) == 1
        assert worktrees[0].branch == "refs/heads/main"

    def test_record_without_head_is_dropped(self, parser):
        """Partial records are skipped without failing the listing."""
        output = (
            f"worktree /repos/project\n"
            f"HEAD {SHA_MAIN}\n"
            f"branch refs/heads/main\n"
            f"\n"
            f"worktree /repos/half-written\n"
            f"branch refs/heads/wip\n"
            f"\n"
        )
        worktrees = parser.parse(output)
        assert [wt.path for wt in worktrees] == ["/repos/project"]

    def test_duplicate_paths_are_collapsed(self, parser):
        """The same location listed twice yields one record."""
        output = (
            f"worktree /repos/project\n"
            f"HEAD {SHA_MAIN}\n"
            f"\n"
            f"worktree /repos/other/../project\n"
            f"HEAD {SHA_FEATURE}\n"
            f"\n"
        )
        worktrees = parser.parse(output)
        assert len(worktrees) == 1
        assert worktrees[0].commit_sha == SHA_MAIN

    def test_duplicate_paths_case_insensitive(self):
        """Paths differing only by case collapse on case-insensitive filesystems."""
        parser = WorktreeListParser(normalizer=PathNormalizer(case_insensitive=True))
        output = (
            f"worktree /repos/Project\n"
            f"HEAD {SHA_MAIN}\n"
            f"\n"
            f"worktree /repos/project\n"
            f"HEAD {SHA_FEATURE}\n"
            f"\n"
        )
        assert len(parser.parse(output)) == 1

    def test_empty_output(self, parser):
        assert parser.parse("") == []
        assert parser.parse("\n\n") == []

    def test_bare_record(self, parser):
        """A bare entry is flagged and classified as main."""
        output = (
            f"worktree /repos/project.git\n"
            f"HEAD {SHA_MAIN}\n"
            f"bare\n"
            f"\n"
        )
        worktrees = parser.parse(output)
        assert worktrees[0].is_bare
        assert worktrees[0].is_main

    def test_at_most_one_main(self):
        """When the classifier flags several records only the first stays main."""
        parser = WorktreeListParser(classifier=lambda path, is_bare, default: True)
        output = (
            f"worktree /repos/a\nHEAD {SHA_MAIN}\n\n"
            f"worktree /repos/b\nHEAD {SHA_FEATURE}\n\n"
            f"worktree /repos/c\nHEAD {SHA_DETACHED}\n\n"
        )
        worktrees = parser.parse(output)
        assert [wt.is_main for wt in worktrees] == [True, False, False]

    def test_zero_main_is_not_forced(self):
        """A listing where no record is main is returned as is."""
        parser = WorktreeListParser(classifier=lambda path, is_bare, default: False)
        output = f"worktree /repos/a\nHEAD {SHA_MAIN}\n\nworktree /repos/b\nHEAD {SHA_FEATURE}\n\n"
        assert not any(wt.is_main for wt in parser.parse(output))

    def test_default_if_unknown_only_for_first_record(self):
        """Only the first record gets the benefit of the doubt."""
        calls = []

        def classifier(path, is_bare, default):
            calls.append((path, default))
            return default

        parser = WorktreeListParser(classifier=classifier)
        output = f"worktree /repos/a\nHEAD {SHA_MAIN}\n\nworktree /repos/b\nHEAD {SHA_FEATURE}\n\n"
        worktrees = parser.parse(output)

        assert calls == [("/repos/a", True), ("/repos/b", False)]
        assert worktrees[0].is_main
        assert not worktrees[1].is_main

    def test_unknown_attributes_are_ignored(self, parser):
        output = f"worktree /repos/a\nHEAD {SHA_MAIN}\nsomething-new value\nbranch refs/heads/main\n\n"
        worktrees = parser.parse(output)
        assert worktrees[0].branch == "refs/heads/main"

    def test_path_with_spaces(self, parser):
        output = f"worktree /repos/my project\nHEAD {SHA_MAIN}\n\n"
        assert parser.parse(output)[0].path == "/repos/my project"


class TestDirtyStatus:
    """Test interpretation of ``git status --porcelain``."""

    def test_clean(self):
        assert not is_dirty_status("")
        assert not is_dirty_status("\n")

    def test_modified(self):
        assert is_dirty_status(" M README.md\n")

    def test_untracked_counts_as_dirty(self):
        assert is_dirty_status("?? notes.txt\n")


class TestNameStatus:
    """Test parsing of ``git diff --name-status -z``."""

    def test_basic_statuses(self):
        output = "M\0README.md\0A\0src/new.py\0D\0old.txt\0"
        entries = parse_name_status(output)

        assert [e.status for e in entries] == [
            ChangeStatus.MODIFIED, ChangeStatus.ADDED, ChangeStatus.DELETED
        ]
        assert entries[0].source_path == entries[0].target_path == "README.md"
        assert entries[1].source_path is None
        assert entries[1].target_path == "src/new.py"
        assert entries[2].source_path == "old.txt"
        assert entries[2].target_path is None

    def test_rename_with_similarity(self):
        entries = parse_name_status("R087\0docs/old.md\0docs/new.md\0")
        assert len(entries) == 1
        entry = entries[0]
        assert entry.status is ChangeStatus.RENAMED
        assert entry.source_path == "docs/old.md"
        assert entry.target_path == "docs/new.md"
        assert entry.similarity == 87
        assert str(entry) == "renamed: docs/old.md -> docs/new.md (87%)"

    def test_copy_followed_by_other_entries(self):
        entries = parse_name_status("C100\0a.txt\0b.txt\0M\0c.txt\0")
        assert entries[0].status is ChangeStatus.COPIED
        assert entries[0].similarity == 100
        assert entries[1].display_path == "c.txt"

    def test_paths_are_taken_verbatim(self):
        """Tabs, quotes and non-ASCII characters need no unquoting."""
        entries = parse_name_status('A\0café.txt\0M\0with\ttab "quoted".txt\0')
        assert [e.display_path for e in entries] == ["café.txt", 'with\ttab "quoted".txt']

    def test_type_change_reported_as_modified(self):
        entry = parse_name_status("T\0link\0")[0]
        assert entry.status is ChangeStatus.MODIFIED

    def test_truncated_entries_are_skipped(self):
        assert parse_name_status("R090\0only-one-path\0") == []
        assert parse_name_status("M\0") == []
        assert parse_name_status("") == []
