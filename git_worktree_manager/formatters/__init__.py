"""Formatting helpers for git-worktree-manager output."""

from .worktree import (
    build_changes_table,
    build_worktree_table,
    format_flags,
    format_outcome,
)

__all__ = [
    "build_changes_table",
    "build_worktree_table",
    "format_flags",
    "format_outcome",
]
