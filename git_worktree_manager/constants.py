"""Shared constants for git-worktree-manager."""

from typing import List, Tuple

# Git invocation
DEFAULT_COMMAND_TIMEOUT = 30.0  # seconds
DEFAULT_INITIAL_COMMIT_MESSAGE = "Initial commit created by Git Worktree Manager"

# Reference prefixes stripped for display
REF_PREFIXES: Tuple[str, ...] = ("refs/heads/", "refs/remotes/", "refs/tags/")
SHORT_HASH_LENGTH = 7

# Marker file/directory inside every checkout
GIT_MARKER = ".git"
GITDIR_PREFIX = "gitdir:"
# Linked worktree metadata always lives under <common-dir>/worktrees/<name>
WORKTREES_SEGMENT = "worktrees"

# Path validation for new worktrees
MAX_PATH_LENGTH = 260  # Windows MAX_PATH
WINDOWS_RESERVED_NAMES = frozenset({
    "CON", "PRN", "AUX", "NUL",
    "COM1", "COM2", "COM3", "COM4", "COM5", "COM6", "COM7", "COM8", "COM9",
    "LPT1", "LPT2", "LPT3", "LPT4", "LPT5", "LPT6", "LPT7", "LPT8", "LPT9",
})


# Column definitions for the CLI listing: (key, label)
LIST_COLUMNS: List[Tuple[str, str]] = [
    ("marker", ""),
    ("name", "Name"),
    ("branch", "Branch"),
    ("commit", "Commit"),
    ("flags", "Flags"),
    ("path", "Path"),
]

# Symbol constants
SYMBOL_CURRENT = "*"
SYMBOL_MAIN = "main"
SYMBOL_LOCKED = "locked"
SYMBOL_PRUNABLE = "prunable"
SYMBOL_BARE = "bare"


# CLI colors (Rich color names) keyed by change status
CHANGE_COLORS = {
    "modified": "yellow",
    "added": "green",
    "deleted": "red",
    "renamed": "cyan",
    "copied": "cyan",
}
