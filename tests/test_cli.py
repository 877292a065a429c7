"""Tests for the command-line interface"""

from unittest.mock import patch

import pytest

from git_worktree_manager.cli.args import parse_args
from git_worktree_manager.cli.main import main
from git_worktree_manager.logging_config import setup_logging


class TestArgs:

    def test_create_defaults(self):
        args = parse_args(["create", "feature/x"])
        assert args.command == "create"
        assert args.branch == "feature/x"
        assert args.path is None
        assert not args.existing
        assert not args.allow_initial_commit

    def test_global_options(self):
        args = parse_args(["-C", "/repos/shop", "--timeout", "5", "-v", "list"])
        assert args.repo == "/repos/shop"
        assert args.timeout == 5.0
        assert args.verbose

    def test_command_required(self):
        with pytest.raises(SystemExit):
            parse_args([])


class TestMain:
    """Run the CLI against real repositories."""

    def test_list(self, git_repo, capsys):
        assert main(["-C", git_repo.working_dir, "list"]) == 0
        assert "main" in capsys.readouterr().out

    def test_list_outside_repository(self, temp_dir, capsys):
        assert main(["-C", str(temp_dir), "list"]) == 1
        assert "No worktrees found" in capsys.readouterr().out

    def test_current(self, git_repo, capsys):
        assert main(["-C", git_repo.working_dir, "current"]) == 0
        assert "main @" in capsys.readouterr().out

    def test_create_default_path(self, git_repo, temp_dir):
        assert main(["-C", git_repo.working_dir, "create", "feature/x"]) == 0
        assert (temp_dir / "test_repo-feature-x").is_dir()

    def test_create_rejects_reserved_name(self, git_repo, temp_dir, capsys):
        assert main(["-C", git_repo.working_dir, "create", "x", str(temp_dir / "CON")]) == 1
        assert "reserved" in capsys.readouterr().out

    def test_create_in_empty_repository_needs_permission(self, empty_repo, temp_dir):
        target = str(temp_dir / "first")
        assert main(["-C", empty_repo.working_dir, "create", "first", target]) == 1
        assert main(["-C", empty_repo.working_dir, "create", "first", target,
                     "--allow-initial-commit"]) == 0

    def test_compare_and_merge_by_name(self, git_repo_with_worktree, commit_file, capsys):
        repo, linked_path = git_repo_with_worktree
        commit_file(linked_path, "feature.txt", "feature\n", "Add feature")

        assert main(["-C", repo.working_dir, "compare", "main", "linked", "--files"]) == 0
        assert "feature.txt" in capsys.readouterr().out

        assert main(["-C", repo.working_dir, "merge", "linked", "main", "--ff-only"]) == 0
        assert "Merged feature/linked into main" in capsys.readouterr().out

    def test_compare_unknown_worktree(self, git_repo, capsys):
        assert main(["-C", git_repo.working_dir, "compare", "main", "nope"]) == 1
        assert "no worktree matches 'nope'" in capsys.readouterr().out

    def test_move_main_fails(self, git_repo, temp_dir, capsys):
        assert main(["-C", git_repo.working_dir, "move", git_repo.working_dir, str(temp_dir / "x")]) == 1
        assert "Renaming the main worktree is not supported." in capsys.readouterr().out

    def test_delete(self, git_repo_with_worktree):
        repo, linked_path = git_repo_with_worktree
        assert main(["-C", repo.working_dir, "delete", str(linked_path)]) == 0
        assert not linked_path.exists()

    def test_debug_prints_threading_and_config(self, git_repo, temp_dir, capsys):
        log_file = temp_dir / "logs" / "debug.log"
        try:
            with patch("git_worktree_manager.logging_config.get_log_file", return_value=log_file):
                assert main(["--debug", "-C", git_repo.working_dir, "list"]) == 0
        finally:
            setup_logging()

        out = capsys.readouterr().out
        assert "Debug mode enabled" in out
        assert "Threading mode:" in out
        assert "command_timeout: 30.0" in out
        assert log_file.is_file()
