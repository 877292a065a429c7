"""Git-facing building blocks: command execution and output parsing."""

from .classifier import MainWorktreeClassifier, determine_if_main_worktree
from .porcelain import ParserState, WorktreeListParser, is_dirty_status, parse_name_status
from .runner import CommandOutput, CommandRunner

__all__ = [
    "CommandOutput",
    "CommandRunner",
    "MainWorktreeClassifier",
    "determine_if_main_worktree",
    "ParserState",
    "WorktreeListParser",
    "is_dirty_status",
    "parse_name_status",
]
