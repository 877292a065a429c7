"""Worktree and outcome formatting for the console."""

from typing import Iterable, List, Optional

from rich.markup import escape
from rich.table import Table

from git_worktree_manager.constants import (
    CHANGE_COLORS,
    LIST_COLUMNS,
    SYMBOL_BARE,
    SYMBOL_CURRENT,
    SYMBOL_LOCKED,
    SYMBOL_MAIN,
    SYMBOL_PRUNABLE,
)
from git_worktree_manager.models.comparison import ComparisonEntry
from git_worktree_manager.models.result import OperationOutcome
from git_worktree_manager.models.worktree import WorktreeInfo


def format_flags(worktree: WorktreeInfo) -> str:
    """Comma separated flags such as ``main, locked``."""
    flags: List[str] = []
    if worktree.is_main:
        flags.append(SYMBOL_MAIN)
    if worktree.is_bare:
        flags.append(SYMBOL_BARE)
    if worktree.is_locked:
        flags.append(SYMBOL_LOCKED)
    if worktree.is_prunable:
        flags.append(SYMBOL_PRUNABLE)
    return ", ".join(flags)


def build_worktree_table(worktrees: Iterable[WorktreeInfo],
                         current: Optional[WorktreeInfo] = None) -> Table:
    """Build the table printed by ``list``; the current worktree is starred."""
    table = Table(show_header=True, header_style="bold")
    for _, label in LIST_COLUMNS:
        table.add_column(label)

    for wt in worktrees:
        is_current = current is not None and wt.path == current.path
        branch = wt.display_name if wt.branch else "(detached)"
        style = "green" if is_current else ("cyan" if wt.is_main else None)
        table.add_row(
            SYMBOL_CURRENT if is_current else "",
            escape(wt.name),
            escape(branch),
            wt.short_commit,
            format_flags(wt),
            escape(wt.path),
            style=style,
        )
    return table


def _entry_path(entry: ComparisonEntry) -> str:
    if entry.source_path and entry.target_path and entry.source_path != entry.target_path:
        return f"{entry.source_path} -> {entry.target_path}"
    return entry.display_path


def build_changes_table(entries: Iterable[ComparisonEntry]) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("Status")
    table.add_column("Path")
    table.add_column("Similarity", justify="right")
    for entry in entries:
        color = CHANGE_COLORS.get(entry.status.value, "white")
        similarity = f"{entry.similarity}%" if entry.similarity is not None else ""
        table.add_row(f"[{color}]{entry.status.value}[/{color}]", escape(_entry_path(entry)), similarity)
    return table


def format_outcome(outcome: OperationOutcome) -> str:
    """One-line rich markup summary of an operation outcome."""
    if outcome.is_success:
        return f"[green]{escape(outcome.message)}[/green]"
    if outcome.requires_initial_commit:
        return f"[yellow]{escape(outcome.message)}[/yellow]"
    return f"[red]Error: {escape(outcome.error)}[/red]"
