"""
git-worktree-manager - Manage multiple git worktrees of one repository
"""

from .__version__ import __version__
from .config import Config
from .models import CreateRequest, Failure, RequiresInitialCommit, Success, WorktreeInfo
from .services import WorktreeService

__all__ = [
    "Config",
    "CreateRequest",
    "Failure",
    "RequiresInitialCommit",
    "Success",
    "WorktreeInfo",
    "WorktreeService",
    "__version__",
]
