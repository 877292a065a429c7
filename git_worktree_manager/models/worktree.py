"""Worktree data models."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from git_worktree_manager.constants import REF_PREFIXES, SHORT_HASH_LENGTH


def strip_ref_prefix(ref: str) -> str:
    """Strip refs/heads/, refs/remotes/ or refs/tags/ from a reference name."""
    for prefix in REF_PREFIXES:
        if ref.startswith(prefix):
            return ref[len(prefix):]
    return ref


@dataclass(frozen=True)
class WorktreeInfo:
    """Information about a git worktree.

    Instances are snapshots: every listing builds new ones from disk and
    nothing mutates them afterwards.
    """

    path: str
    branch: Optional[str]  # Full ref, e.g. refs/heads/main. None = detached HEAD
    commit_sha: str
    is_locked: bool = False
    is_prunable: bool = False
    is_bare: bool = False
    is_main: bool = False  # Is this the primary checkout?

    @property
    def name(self) -> str:
        """Last component of the worktree path."""
        return Path(self.path).name or self.path

    @property
    def short_commit(self) -> str:
        return self.commit_sha[:SHORT_HASH_LENGTH]

    @property
    def is_detached(self) -> bool:
        return not self.branch

    @property
    def branch_name(self) -> str:
        """Local branch name without refs/heads/, empty when detached."""
        if self.branch and self.branch.startswith("refs/heads/"):
            return self.branch[len("refs/heads/"):]
        return ""

    @property
    def display_name(self) -> str:
        """Branch without its ref prefix, or the short commit when detached."""
        if self.branch:
            return strip_ref_prefix(self.branch)
        return self.short_commit

    @property
    def ref(self) -> str:
        """Revision usable in diff/merge invocations for this worktree."""
        return self.branch or self.commit_sha

    def __str__(self) -> str:
        """String representation of worktree."""
        main_marker = " (main)" if self.is_main else ""
        return f"{self.display_name} @ {self.path}{main_marker}"
