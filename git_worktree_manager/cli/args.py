"""Command-line argument parsing for git-worktree-manager."""

import argparse

from git_worktree_manager.__version__ import __version__


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="git-worktree-manager",
        description="Manage multiple worktrees of one git repository",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information for troubleshooting"
    )
    parser.add_argument("--version", action="version", version=f"git-worktree-manager {__version__}")
    parser.add_argument(
        "-C",
        "--repo",
        default=None,
        metavar="PATH",
        help="Run as if started in PATH (default: current directory)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        metavar="SECONDS",
        help="Kill git commands that run longer than this (default: 30)",
    )

    commands = parser.add_subparsers(dest="command", metavar="COMMAND")
    commands.required = True

    commands.add_parser("list", help="List all worktrees")
    commands.add_parser("current", help="Show the worktree containing the repository path")

    create = commands.add_parser("create", help="Create a new worktree")
    create.add_argument("branch", help="Branch to create (or check out with --existing)")
    create.add_argument(
        "path",
        nargs="?",
        help="Worktree directory (default: <project>-<branch> next to the project)",
    )
    create.add_argument(
        "--existing",
        action="store_true",
        help="Check out an existing branch instead of creating a new one",
    )
    create.add_argument(
        "--allow-initial-commit",
        action="store_true",
        help="Create an empty initial commit if the repository has no history",
    )
    create.add_argument("-m", "--message", default=None, help="Message for the initial commit")

    delete = commands.add_parser("delete", help="Remove a worktree")
    delete.add_argument("path", help="Worktree directory")
    delete.add_argument(
        "--force", action="store_true", help="Remove even with uncommitted changes or a lock"
    )

    move = commands.add_parser("move", help="Move or rename a worktree")
    move.add_argument("old_path", help="Current worktree directory")
    move.add_argument("new_path", help="New worktree directory")

    compare = commands.add_parser("compare", help="Compare two clean worktrees")
    compare.add_argument("source", help="Source worktree (path, folder name or branch)")
    compare.add_argument("target", help="Target worktree (path, folder name or branch)")
    compare.add_argument("--files", action="store_true", help="Only list changed files")
    compare.add_argument("--diff", action="store_true", help="Print the full diff")

    merge = commands.add_parser("merge", help="Merge one worktree's branch into another")
    merge.add_argument("source", help="Worktree to merge from (path, folder name or branch)")
    merge.add_argument("target", help="Worktree to merge into (path, folder name or branch)")
    merge.add_argument(
        "--ff-only", action="store_true", help="Refuse to merge unless it is a fast-forward"
    )

    return parser


def parse_args(argv=None):
    """Parse command-line arguments."""
    return build_parser().parse_args(argv)
