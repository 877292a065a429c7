"""Custom exceptions for git-worktree-manager

Domain conditions are raised inside the service and converted into
``Failure`` outcomes at the operation boundary, keeping the summary in
``str(exc)`` and the user-facing explanation in ``exc.details``.
"""

from enum import Enum
from typing import Optional, Sequence, Tuple


class ErrorKind(Enum):
    """Classification attached to a Failure outcome."""
    PROJECT_PATH_UNRESOLVABLE = "project-path-unresolvable"
    SUBPROCESS_LAUNCH_FAILURE = "subprocess-launch-failure"
    NON_ZERO_EXIT = "non-zero-exit"
    PATH_COLLISION = "path-collision"
    NAME_COLLISION = "name-collision"
    MAIN_WORKTREE_IMMUTABLE = "main-worktree-immutable"
    UNCOMMITTED_CHANGES_BLOCK_COMPARE = "uncommitted-changes-block-compare"
    BOOTSTRAP_REQUIRED = "bootstrap-required"
    MISSING_WORKTREE_PATH = "missing-worktree-path"
    UNEXPECTED = "unexpected"


class GitWorktreeManagerError(Exception):
    """Base exception for all git-worktree-manager errors."""

    kind = ErrorKind.UNEXPECTED

    def __init__(self, message: str, details: Optional[str] = None):
        self.details = details
        super().__init__(message)


class ProjectPathUnresolvable(GitWorktreeManagerError):
    """The project root does not exist on disk."""

    kind = ErrorKind.PROJECT_PATH_UNRESOLVABLE

    def __init__(self, path: Optional[str] = None):
        self.path = path
        super().__init__("Project path not found", path)


class SubprocessLaunchFailure(GitWorktreeManagerError):
    """The git binary cannot be started at all."""

    kind = ErrorKind.SUBPROCESS_LAUNCH_FAILURE

    def __init__(self, executable: str, message: Optional[str] = None):
        self.executable = executable

        error_msg = f"Could not launch '{executable}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class NonZeroExit(GitWorktreeManagerError):
    """A git command finished with a non-zero exit status."""

    kind = ErrorKind.NON_ZERO_EXIT

    def __init__(self, summary: str, args: Sequence[str], exit_code: int, stderr: str):
        self.command_args = list(args)
        self.exit_code = exit_code
        self.stderr = stderr
        super().__init__(summary, stderr)


class PathCollision(GitWorktreeManagerError):
    """A worktree already occupies the requested path."""

    kind = ErrorKind.PATH_COLLISION

    def __init__(self, existing_path: str):
        self.existing_path = existing_path
        super().__init__(
            f"A worktree already exists at '{existing_path}'.",
            "Choose a different folder name for the new worktree.",
        )


class NameCollision(GitWorktreeManagerError):
    """A worktree with the same directory name exists elsewhere."""

    kind = ErrorKind.NAME_COLLISION

    def __init__(self, name: str, existing_path: str):
        self.name = name
        self.existing_path = existing_path
        super().__init__(
            f"A worktree named '{name}' already exists.",
            f"Existing worktree location: {existing_path}",
        )


class MainWorktreeImmutable(GitWorktreeManagerError):
    """The primary checkout cannot be moved."""

    kind = ErrorKind.MAIN_WORKTREE_IMMUTABLE

    def __init__(self, path: str):
        self.path = path
        super().__init__(
            "Renaming the main worktree is not supported.",
            f"Git requires the primary worktree to remain at {path}.",
        )


class UncommittedChangesBlockCompare(GitWorktreeManagerError):
    """One or both sides of a comparison have uncommitted changes.

    Args:
        dirty: (display name, path) for every dirty worktree
    """

    kind = ErrorKind.UNCOMMITTED_CHANGES_BLOCK_COMPARE

    def __init__(self, dirty: Sequence[Tuple[str, str]]):
        self.dirty = list(dirty)
        summary = "\n".join(f'"{name}" at {path}' for name, path in self.dirty)
        super().__init__(
            "Uncommitted changes detected.",
            f"Commit, stash, or discard changes in:\n{summary}",
        )


class BootstrapRequired(GitWorktreeManagerError):
    """The repository has no commits and the caller has not allowed one."""

    kind = ErrorKind.BOOTSTRAP_REQUIRED

    def __init__(self):
        super().__init__("Repository has no commits")


class ForegroundThreadViolation(GitWorktreeManagerError):
    """A git command was about to run on the caller's foreground thread."""

    def __init__(self, thread_name: str):
        self.thread_name = thread_name
        super().__init__(f"git commands must not run on the foreground thread '{thread_name}'")
