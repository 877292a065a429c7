"""Main worktree detection based on the ``.git`` marker of a checkout."""

import os
from pathlib import PurePath
from typing import Optional

from git_worktree_manager.constants import GIT_MARKER, GITDIR_PREFIX, WORKTREES_SEGMENT
from git_worktree_manager.logging_config import get_logger
from git_worktree_manager.utils.paths import PathLike, PathNormalizer

logger = get_logger(__name__)


class MainWorktreeClassifier:
    """Decides whether a checkout is the primary one.

    Checks, in order:

    1. Bare repositories are main.
    2. A ``.git`` directory is main (classic single checkout layout).
    3. A ``.git`` symlink, or a ``.git`` file holding ``gitdir: <target>``,
       is main unless the resolved target has a ``worktrees`` segment. Git
       keeps linked worktree metadata in ``<common-dir>/worktrees/<name>``.
    4. Anything else returns ``default_if_unknown``.
    """

    def __init__(self, normalizer: Optional[PathNormalizer] = None):
        self.normalizer = normalizer or PathNormalizer()

    def classify(self, path: PathLike, is_bare: bool, default_if_unknown: bool = False) -> bool:
        if is_bare:
            return True

        git_location = os.path.join(os.fspath(path), GIT_MARKER)

        # isdir() follows links; a symlinked marker is judged by its target below
        if os.path.isdir(git_location) and not os.path.islink(git_location):
            return True

        if os.path.islink(git_location):
            try:
                target = os.readlink(git_location)
            except OSError as e:
                logger.debug(f"Could not read symlink {git_location}: {e}")
                return default_if_unknown
            return self._classify_gitdir(git_location, target, default_if_unknown)

        if os.path.isfile(git_location):
            target = self._read_gitdir_pointer(git_location)
            if target is None:
                return default_if_unknown
            return self._classify_gitdir(git_location, target, default_if_unknown)

        return default_if_unknown

    __call__ = classify

    @staticmethod
    def _read_gitdir_pointer(git_file: str) -> Optional[str]:
        """Return the value of the first ``gitdir:`` line, or None."""
        try:
            with open(git_file, encoding="utf-8") as f:
                contents = f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Could not read {git_file}: {e}")
            return None

        for line in contents.splitlines():
            line = line.strip()
            if line.lower().startswith(GITDIR_PREFIX):
                value = line[len(GITDIR_PREFIX):].strip()
                return value or None
        return None

    def _classify_gitdir(self, git_location: str, target: str, default_if_unknown: bool) -> bool:
        resolved = self.resolve_gitdir(git_location, target)
        if resolved is None:
            return default_if_unknown
        return not has_worktrees_segment(resolved)

    def resolve_gitdir(self, git_location: str, target: str) -> Optional[str]:
        """Resolve a gitdir pointer: absolute as-is, relative against the marker's parent."""
        if not target:
            return None
        if os.path.isabs(target):
            candidate = target
        else:
            candidate = os.path.join(os.path.dirname(git_location), target)
        return self.normalizer.normalize_lexical(candidate)


def has_worktrees_segment(path: PathLike) -> bool:
    """True when any segment of ``path`` is exactly ``worktrees``."""
    return WORKTREES_SEGMENT in PurePath(path).parts


def determine_if_main_worktree(path: PathLike, is_bare: bool, default_if_unknown: bool = False) -> bool:
    """Classify ``path`` with a default :class:`MainWorktreeClassifier`."""
    return MainWorktreeClassifier().classify(path, is_bare, default_if_unknown)
