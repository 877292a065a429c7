"""Utility functions for git-worktree-manager.

This package provides utility modules:
- paths: Path normalisation, comparison and validation
- threading: Worker sizing, foreground-thread guard and future helpers
"""

from .paths import (
    OSFamily,
    PathNormalizer,
    detect_os_family,
    suggest_directory_name,
    validate_worktree_path,
)
from .threading import (
    assert_background_thread,
    combine_futures,
    get_optimal_worker_count,
    get_threading_info,
    on_complete,
)

__all__ = [
    # Paths
    "OSFamily",
    "PathNormalizer",
    "detect_os_family",
    "suggest_directory_name",
    "validate_worktree_path",
    # Threading
    "assert_background_thread",
    "combine_futures",
    "get_optimal_worker_count",
    "get_threading_info",
    "on_complete",
]
