"""Services for git-worktree-manager."""

from .notifier import ChangeNotifier, Subscription
from .worktree_service import WorktreeService

__all__ = ["ChangeNotifier", "Subscription", "WorktreeService"]
