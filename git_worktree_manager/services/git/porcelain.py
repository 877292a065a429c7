"""Parsers for git's machine-readable output."""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, List, Optional

from git_worktree_manager.logging_config import get_logger
from git_worktree_manager.models.comparison import ChangeStatus, ComparisonEntry
from git_worktree_manager.models.worktree import WorktreeInfo
from git_worktree_manager.services.git.classifier import MainWorktreeClassifier
from git_worktree_manager.utils.paths import PathNormalizer

logger = get_logger(__name__)

# (path, is_bare, default_if_unknown) -> is_main
Classifier = Callable[[str, bool, bool], bool]


class ParserState(Enum):
    """States of the ``worktree list --porcelain`` parser."""
    EXPECT_MARKER = "expect-marker"  # Looking for "worktree <path>"
    IN_RECORD = "in-record"  # Collecting attribute lines until a blank line


@dataclass
class _PendingRecord:
    path: str
    commit_sha: str = ""
    branch: Optional[str] = None
    is_locked: bool = False
    is_prunable: bool = False
    is_bare: bool = False


class WorktreeListParser:
    """Turns ``git worktree list --porcelain`` output into WorktreeInfo records.

    Format::

        worktree /path/to/main
        HEAD 1234abcd...
        branch refs/heads/main

        worktree /path/to/linked
        HEAD 5678ef01...
        detached
        locked reason text

    Records without a HEAD line are dropped silently; git may print partial
    entries while another process is changing the worktree set.
    """

    def __init__(self, classifier: Optional[Classifier] = None,
                 normalizer: Optional[PathNormalizer] = None):
        self.normalizer = normalizer or PathNormalizer()
        self.classifier = classifier or MainWorktreeClassifier(self.normalizer)

    def parse(self, output: str) -> List[WorktreeInfo]:
        records: List[WorktreeInfo] = []
        state = ParserState.EXPECT_MARKER
        pending: Optional[_PendingRecord] = None

        for raw_line in output.splitlines():
            line = raw_line.strip()

            if state is ParserState.EXPECT_MARKER:
                if line.startswith("worktree "):
                    pending = _PendingRecord(path=line[len("worktree "):].strip())
                    state = ParserState.IN_RECORD
                elif line:
                    logger.debug(f"Ignoring porcelain line outside a record: {line!r}")
                continue

            if not line:
                self._finish(pending, records)
                pending = None
                state = ParserState.EXPECT_MARKER
                continue

            self._apply_attribute(pending, line)

        # EOF also ends a record
        if state is ParserState.IN_RECORD:
            self._finish(pending, records)

        return self._ensure_single_main(records)

    @staticmethod
    def _apply_attribute(pending: _PendingRecord, line: str) -> None:
        keyword, _, value = line.partition(" ")
        value = value.strip()

        if keyword == "HEAD":
            pending.commit_sha = value
        elif keyword == "branch":
            pending.branch = value or None
        elif keyword == "detached":
            pending.branch = None
        elif keyword == "bare":
            pending.is_bare = True
        elif keyword == "locked":  # "locked" or "locked <reason>"
            pending.is_locked = True
        elif keyword == "prunable":  # "prunable" or "prunable <reason>"
            pending.is_prunable = True
        else:
            logger.debug(f"Unexpected porcelain attribute: {line!r}")

    def _finish(self, pending: _PendingRecord, records: List[WorktreeInfo]) -> None:
        if not pending.path or not pending.commit_sha:
            logger.debug(f"Dropping incomplete worktree record for {pending.path!r}")
            return

        if any(self.normalizer.equal(pending.path, existing.path) for existing in records):
            logger.debug(f"Dropping duplicate worktree record for {pending.path}")
            return

        is_main = self.classifier(pending.path, pending.is_bare, not records)
        records.append(
            WorktreeInfo(
                path=pending.path,
                branch=pending.branch,
                commit_sha=pending.commit_sha,
                is_locked=pending.is_locked,
                is_prunable=pending.is_prunable,
                is_bare=pending.is_bare,
                is_main=is_main,
            )
        )

    @staticmethod
    def _ensure_single_main(records: List[WorktreeInfo]) -> List[WorktreeInfo]:
        """Demote all but the first main record; git always lists the main worktree first."""
        main_indexes = [i for i, record in enumerate(records) if record.is_main]
        if len(main_indexes) <= 1:
            return records

        keep = main_indexes[0]
        logger.debug(
            f"Classifier flagged {len(main_indexes)} main worktrees, keeping {records[keep].path}"
        )
        return [replace(record, is_main=i == keep) for i, record in enumerate(records)]


def is_dirty_status(output: str) -> bool:
    """True when ``git status --porcelain`` reported anything (untracked files included)."""
    return bool(output.strip())


def parse_name_status(output: str) -> List[ComparisonEntry]:
    """Parse ``git diff --name-status -z`` output.

    Fields are NUL separated so paths arrive unquoted: a status code
    (``M``, ``A``, ``D``, ``R087``, ``C075`` ...) followed by one path, or by
    the old and new path for renames and copies.
    """
    fields = output.split("\0")
    entries: List[ComparisonEntry] = []
    index = 0

    while index < len(fields):
        code = fields[index].strip()
        index += 1
        if not code:
            continue

        status = ChangeStatus.from_code(code)
        path_count = 2 if status in (ChangeStatus.RENAMED, ChangeStatus.COPIED) else 1
        paths = fields[index:index + path_count]
        index += path_count
        if len(paths) < path_count or not all(paths):
            logger.debug(f"Skipping truncated name-status entry for code {code!r}")
            continue

        if path_count == 2:
            score = code[1:]
            entries.append(ComparisonEntry(
                status=status,
                source_path=paths[0],
                target_path=paths[1],
                similarity=int(score) if score.isdigit() else None,
            ))
        elif status is ChangeStatus.ADDED:
            entries.append(ComparisonEntry(status=status, target_path=paths[0]))
        elif status is ChangeStatus.DELETED:
            entries.append(ComparisonEntry(status=status, source_path=paths[0]))
        else:
            entries.append(ComparisonEntry(status=status, source_path=paths[0], target_path=paths[0]))

    return entries
