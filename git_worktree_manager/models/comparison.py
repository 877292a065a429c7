"""Comparison result models."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ChangeStatus(Enum):
    """Kind of change reported for a file between two worktrees."""
    MODIFIED = "modified"
    ADDED = "added"
    DELETED = "deleted"
    RENAMED = "renamed"
    COPIED = "copied"

    @classmethod
    def from_code(cls, code: str) -> "ChangeStatus":
        """Map a ``--name-status`` letter (M, A, D, R, C, ...) to a status.

        Type changes, unmerged and unknown entries are reported as modified.
        """
        return _STATUS_CODES.get(code[:1].upper(), cls.MODIFIED)


_STATUS_CODES = {
    "M": ChangeStatus.MODIFIED,
    "A": ChangeStatus.ADDED,
    "D": ChangeStatus.DELETED,
    "R": ChangeStatus.RENAMED,
    "C": ChangeStatus.COPIED,
}


@dataclass(frozen=True)
class ComparisonEntry:
    """One changed file between the source and target of a comparison."""

    status: ChangeStatus
    source_path: Optional[str] = None
    target_path: Optional[str] = None
    similarity: Optional[int] = None  # Percentage, renames and copies only

    @property
    def display_path(self) -> str:
        return self.target_path or self.source_path or ""

    def __str__(self) -> str:
        if self.status in (ChangeStatus.RENAMED, ChangeStatus.COPIED):
            score = f" ({self.similarity}%)" if self.similarity is not None else ""
            return f"{self.status.value}: {self.source_path} -> {self.target_path}{score}"
        return f"{self.status.value}: {self.display_path}"
