"""Path normalisation and comparison for worktree locations."""

import os
import platform
import re
from enum import Enum
from pathlib import Path, PurePath
from typing import Optional, Union

from git_worktree_manager.constants import MAX_PATH_LENGTH, WINDOWS_RESERVED_NAMES
from git_worktree_manager.logging_config import get_logger

logger = get_logger(__name__)

PathLike = Union[str, os.PathLike]


class OSFamily(Enum):
    """Operating system families that matter for path comparison."""
    WINDOWS = "windows"
    MACOS = "macos"
    LINUX = "linux"
    OTHER = "other"

    @property
    def case_insensitive(self) -> bool:
        """Default filesystems on Windows and macOS ignore case."""
        return self in (OSFamily.WINDOWS, OSFamily.MACOS)


def detect_os_family(system_name: Optional[str] = None) -> OSFamily:
    """Detect the OS family from ``platform.system()`` or the given name."""
    name = (system_name if system_name is not None else platform.system()).lower()
    if name.startswith("win") or name.startswith("cygwin"):
        return OSFamily.WINDOWS
    if "darwin" in name or "mac" in name:
        return OSFamily.MACOS
    if "linux" in name:
        return OSFamily.LINUX
    return OSFamily.OTHER


class PathNormalizer:
    """Canonicalise paths and compare them the way the host filesystem would.

    Args:
        os_family: Override the detected OS family (useful in tests).
        case_insensitive: Override case handling directly; takes precedence
            over ``os_family``.
    """

    def __init__(self, os_family: Optional[OSFamily] = None,
                 case_insensitive: Optional[bool] = None):
        self.os_family = os_family or detect_os_family()
        self._case_insensitive = case_insensitive

    @property
    def case_insensitive(self) -> bool:
        if self._case_insensitive is not None:
            return self._case_insensitive
        return self.os_family.case_insensitive

    def normalize(self, path: PathLike) -> str:
        """Resolve symlinks where possible, otherwise absolutise lexically.

        Never raises for unreadable or missing locations.
        """
        try:
            return str(Path(path).resolve())
        except (OSError, RuntimeError) as e:
            logger.debug(f"Could not resolve {path}, using lexical normalisation: {e}")
            return self.normalize_lexical(path)

    @staticmethod
    def normalize_lexical(path: PathLike) -> str:
        """Absolute path with ``.``/``..`` collapsed, without touching the filesystem."""
        return os.path.normpath(os.path.abspath(os.fspath(path)))

    def _key(self, value: str) -> str:
        return value.casefold() if self.case_insensitive else value

    def equal(self, a: PathLike, b: PathLike) -> bool:
        """True when both paths name the same location."""
        return self._key(self.normalize(a)) == self._key(self.normalize(b))

    def names_equal(self, a: str, b: str) -> bool:
        """Compare two single path segments using the filesystem's case rules."""
        return self._key(a) == self._key(b)

    def contains(self, parent: PathLike, child: PathLike) -> bool:
        """True when ``child`` is ``parent`` or lies somewhere beneath it."""
        parent_parts = [self._key(p) for p in PurePath(self.normalize(parent)).parts]
        child_parts = [self._key(p) for p in PurePath(self.normalize(child)).parts]
        return child_parts[:len(parent_parts)] == parent_parts

    def depth(self, path: PathLike) -> int:
        """Number of segments in the normalised path."""
        return len(PurePath(self.normalize(path)).parts)


def suggest_directory_name(project_path: Optional[PathLike], branch_name: str) -> str:
    """Suggest a worktree folder name of the form ``<project>-<branch>``.

    Characters other than letters, digits, dots, underscores and hyphens
    (slashes included) collapse into a single hyphen.
    """
    project_name = Path(project_path).name if project_path else ""
    project_name = project_name or "project"
    sanitized = re.sub(r"[^A-Za-z0-9._-]+", "-", branch_name).strip("-.")
    return f"{project_name}-{sanitized}"


def is_windows_reserved_name(name: str) -> bool:
    """Check a file name (extension ignored) against Windows device names."""
    stem = name.rsplit(".", 1)[0] if "." in name else name
    return stem.upper() in WINDOWS_RESERVED_NAMES


def validate_worktree_path(path: str) -> Optional[str]:
    """Return a problem description for a requested worktree path, or None if usable."""
    path = path.strip()
    if not path:
        return "Worktree path cannot be empty"

    if len(path) > MAX_PATH_LENGTH:
        return (f"Path is too long ({len(path)} characters). Maximum is "
                f"{MAX_PATH_LENGTH} characters for Windows compatibility.")

    directory_name = PurePath(path).name
    if is_windows_reserved_name(directory_name):
        return f"Directory name '{directory_name}' is a reserved Windows filename and cannot be used."

    return None
