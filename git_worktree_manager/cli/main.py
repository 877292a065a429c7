"""Command-line interface for git-worktree-manager"""

import os
import sys
from typing import List, Optional

from rich.console import Console

from git_worktree_manager.cli.args import parse_args
from git_worktree_manager.config import Config
from git_worktree_manager.formatters import build_changes_table, build_worktree_table, format_outcome
from git_worktree_manager.logging_config import setup_logging
from git_worktree_manager.models.result import OperationOutcome, RequiresInitialCommit
from git_worktree_manager.models.worktree import WorktreeInfo
from git_worktree_manager.services.worktree_service import WorktreeService
from git_worktree_manager.utils.paths import suggest_directory_name, validate_worktree_path
from git_worktree_manager.utils.threading import get_threading_info

console = Console()


def find_worktree(service: WorktreeService, worktrees: List[WorktreeInfo],
                  selector: str) -> Optional[WorktreeInfo]:
    """Resolve a path, folder name or branch name to a listed worktree."""
    candidate = os.path.join(service.project_path, selector)
    for wt in worktrees:
        if service.normalizer.equal(candidate, wt.path):
            return wt
    for wt in worktrees:
        if service.normalizer.names_equal(wt.name, selector) or wt.display_name == selector:
            return wt
    return None


def _print_outcome(outcome: OperationOutcome) -> int:
    console.print(format_outcome(outcome))
    if outcome.is_failure and outcome.details:
        console.print(outcome.details, markup=False, highlight=False)
    return 0 if outcome.is_success else 1


def _run_list(service: WorktreeService) -> int:
    worktrees, current = service.list_with_current().result()
    if not worktrees:
        console.print("[yellow]No worktrees found (is this a git repository?)[/yellow]")
        return 1
    console.print(build_worktree_table(worktrees, current))
    return 0


def _run_current(service: WorktreeService) -> int:
    current = service.get_current_worktree().result()
    if current is None:
        console.print("[yellow]Not inside a git worktree[/yellow]")
        return 1
    console.print(f"{current.display_name} @ {current.path}", markup=False, highlight=False)
    return 0


def _run_create(service: WorktreeService, args) -> int:
    path = args.path
    if not path:
        parent = os.path.dirname(os.path.abspath(service.project_path))
        path = os.path.join(parent, suggest_directory_name(service.project_path, args.branch))

    problem = validate_worktree_path(path)
    if problem:
        console.print(f"[red]Error: {problem}[/red]")
        return 1

    outcome = service.create_worktree(
        path,
        args.branch,
        create_branch=not args.existing,
        allow_initial_commit=args.allow_initial_commit,
        commit_message=args.message,
    ).result()

    if isinstance(outcome, RequiresInitialCommit):
        console.print(format_outcome(outcome))
        if not sys.stdin.isatty():
            console.print("Re-run with --allow-initial-commit to create an empty initial commit.")
            return 1
        response = console.input("Create an empty initial commit and continue? [y/N] ")
        if response.strip().lower() != "y":
            console.print("[yellow]Cancelled[/yellow]")
            return 1
        outcome = service.submit(outcome.request.confirm()).result()

    return _print_outcome(outcome)


def _select_pair(service: WorktreeService, args):
    worktrees = service.list_worktrees().result()
    source = find_worktree(service, worktrees, args.source)
    target = find_worktree(service, worktrees, args.target)
    for selector, found in ((args.source, source), (args.target, target)):
        if found is None:
            console.print(f"[red]Error: no worktree matches '{selector}'[/red]")
    return source, target


def _run_compare(service: WorktreeService, args) -> int:
    source, target = _select_pair(service, args)
    if source is None or target is None:
        return 1

    outcome = service.compare_worktrees(source, target, files_only=args.files).result()
    if not outcome.is_success:
        return _print_outcome(outcome)

    if outcome.changes:
        console.print(outcome.message, markup=False, highlight=False)
        console.print(build_changes_table(outcome.changes))
    else:
        console.print(outcome.message, markup=False, highlight=False)
    if args.diff and outcome.details and not args.files:
        console.print(outcome.details, markup=False, highlight=False)
    return 0


def _run_merge(service: WorktreeService, args) -> int:
    source, target = _select_pair(service, args)
    if source is None or target is None:
        return 1

    outcome = service.merge_worktree(source, target, fast_forward_only=args.ff_only).result()
    code = _print_outcome(outcome)
    if outcome.is_success and outcome.details:
        console.print(outcome.details, markup=False, highlight=False)
    return code


def main(argv=None) -> int:
    """Main entry point for the application."""
    parsed_args = None
    try:
        parsed_args = parse_args(argv)

        setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

        config_values = {"verbose": parsed_args.verbose, "debug": parsed_args.debug}
        if parsed_args.timeout is not None:
            config_values["command_timeout"] = parsed_args.timeout
        config = Config.from_dict(config_values)

        if parsed_args.debug:
            console.print("[yellow]Debug mode enabled[/yellow]")
            threading_info = get_threading_info()
            console.print("[yellow]Threading Information:[/yellow]")
            console.print(f"  Python version: {threading_info['python_version']}")
            console.print(f"  Threading mode: {threading_info['mode']}")
            console.print(f"  Optimal workers: {threading_info['optimal_workers']}")
            console.print("[yellow]Configuration:[/yellow]")
            for key, value in config.to_dict().items():
                console.print(f"  {key}: {value}")

        repo_path = os.path.abspath(parsed_args.repo or os.getcwd())
        with WorktreeService(repo_path, config) as service:
            if parsed_args.command == "list":
                return _run_list(service)
            if parsed_args.command == "current":
                return _run_current(service)
            if parsed_args.command == "create":
                return _run_create(service, parsed_args)
            if parsed_args.command == "delete":
                return _print_outcome(service.delete_worktree(parsed_args.path, parsed_args.force).result())
            if parsed_args.command == "move":
                return _print_outcome(
                    service.move_worktree(parsed_args.old_path, parsed_args.new_path).result()
                )
            if parsed_args.command == "compare":
                return _run_compare(service, parsed_args)
            if parsed_args.command == "merge":
                return _run_merge(service, parsed_args)

        console.print(f"[red]Unknown command: {parsed_args.command}[/red]")
        return 1
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        if parsed_args is not None and parsed_args.debug:
            console.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())
