"""Data models for git-worktree-manager."""

from .worktree import WorktreeInfo, strip_ref_prefix
from .comparison import ChangeStatus, ComparisonEntry
from .result import (
    BootstrapState,
    CreateRequest,
    Failure,
    OperationOutcome,
    RequiresInitialCommit,
    Success,
)

__all__ = [
    "WorktreeInfo",
    "strip_ref_prefix",
    "ChangeStatus",
    "ComparisonEntry",
    "BootstrapState",
    "CreateRequest",
    "Failure",
    "OperationOutcome",
    "RequiresInitialCommit",
    "Success",
]
