"""Worktree orchestration service for git-worktree-manager."""

import os
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, List, Optional, Tuple, TypeVar, Union

import git

from git_worktree_manager.config import Config
from git_worktree_manager.exceptions import (
    BootstrapRequired,
    ErrorKind,
    ForegroundThreadViolation,
    GitWorktreeManagerError,
    MainWorktreeImmutable,
    NameCollision,
    NonZeroExit,
    PathCollision,
    ProjectPathUnresolvable,
    SubprocessLaunchFailure,
    UncommittedChangesBlockCompare,
)
from git_worktree_manager.logging_config import get_logger
from git_worktree_manager.models.result import (
    BootstrapState,
    CreateRequest,
    Failure,
    OperationOutcome,
    RequiresInitialCommit,
    Success,
)
from git_worktree_manager.models.worktree import WorktreeInfo
from git_worktree_manager.services.git.porcelain import (
    WorktreeListParser,
    is_dirty_status,
    parse_name_status,
)
from git_worktree_manager.services.git.runner import CommandOutput, CommandRunner
from git_worktree_manager.services.notifier import ChangeNotifier, Subscription, WorktreeChangeListener
from git_worktree_manager.utils.paths import PathLike, PathNormalizer
from git_worktree_manager.utils.threading import combine_futures, get_optimal_worker_count

logger = get_logger(__name__)

T = TypeVar("T")


class WorktreeService:
    """Service for managing git worktrees.

    Every public operation returns a :class:`concurrent.futures.Future` and
    runs on the service's worker pool. Nothing is cached: each call reads
    the repository state from disk again.
    """

    def __init__(self, project_path: PathLike, config: Union[Config, dict, None] = None,
                 runner: Optional[CommandRunner] = None,
                 normalizer: Optional[PathNormalizer] = None,
                 foreground_thread: Optional[threading.Thread] = None):
        """Initialize the worktree service.

        Args:
            project_path: Working root of the caller (any checkout of the repository)
            config: Configuration dict or Config object
            runner: Command runner to use instead of one built from config
            normalizer: Path normalizer to use instead of one built from config
            foreground_thread: Thread on which git must never run; defaults
                to the thread constructing the service
        """
        if isinstance(config, dict):
            config = Config.from_dict(config)
        self.config = config or Config()
        self.project_path = os.fspath(project_path)

        self.normalizer = normalizer or PathNormalizer(case_insensitive=self.config.case_insensitive)
        self.runner = runner or CommandRunner(
            git_executable=self.config.git_executable,
            timeout=self.config.command_timeout,
            foreground_thread=foreground_thread or threading.current_thread(),
        )
        self.parser = WorktreeListParser(normalizer=self.normalizer)
        self.notifier = ChangeNotifier()

        max_workers = get_optimal_worker_count(self.config.workers)
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="worktree")
        logger.debug(f"Worktree service for {self.project_path} using {max_workers} workers")

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self, wait: bool = True) -> None:
        """Shut down the worker pool."""
        logger.debug("Closing worktree service")
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "WorktreeService":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Change notifications
    # ------------------------------------------------------------------

    def subscribe(self, listener: WorktreeChangeListener) -> Subscription:
        """Register a listener called after every successful mutation."""
        return self.notifier.subscribe(listener)

    def unsubscribe(self, subscription: Subscription) -> bool:
        return self.notifier.unsubscribe(subscription)

    # ------------------------------------------------------------------
    # Public asynchronous API
    # ------------------------------------------------------------------

    def list_worktrees(self) -> "Future[List[WorktreeInfo]]":
        """List all worktrees; resolves to an empty list when git or the repository is unavailable."""
        return self._run_async("list_worktrees", self._list_worktrees)

    def get_current_worktree(self) -> "Future[Optional[WorktreeInfo]]":
        """Find the worktree enclosing the project path, or None."""
        return self._run_async("get_current_worktree", self._current_worktree)

    def list_with_current(self) -> "Future[Tuple[List[WorktreeInfo], Optional[WorktreeInfo]]]":
        """Run the listing and current-worktree lookup in parallel and join them."""
        return combine_futures(self.list_worktrees(), self.get_current_worktree())

    def create_worktree(self, path: PathLike, branch: str, create_branch: bool = True,
                        allow_initial_commit: bool = False,
                        commit_message: Optional[str] = None) -> "Future[OperationOutcome]":
        """Create a worktree at ``path`` checking out ``branch``.

        Args:
            path: Destination directory (relative paths are taken from the project path)
            branch: Branch to create, or existing branch to check out
            create_branch: Create ``branch`` (True) or use an existing one (False)
            allow_initial_commit: Permit an empty bootstrap commit in a repository without history
            commit_message: Message for the bootstrap commit

        Returns:
            Future resolving to Success, Failure, or RequiresInitialCommit carrying
            the request to confirm and resubmit with :meth:`submit`
        """
        request = CreateRequest(
            path=os.fspath(path),
            branch=branch,
            create_branch=create_branch,
            allow_initial_commit=allow_initial_commit,
            commit_message=commit_message or self.config.initial_commit_message,
        )
        return self.submit(request)

    def submit(self, request: CreateRequest) -> "Future[OperationOutcome]":
        """Run a create plan from the beginning."""
        return self._run_async("create_worktree", self._outcome, "creating", self._create, request)

    def delete_worktree(self, path: PathLike, force: bool = False) -> "Future[OperationOutcome]":
        """Remove the worktree at ``path``; ``force`` also removes dirty or locked worktrees."""
        return self._run_async("delete_worktree", self._outcome, "deleting", self._delete, path, force)

    def move_worktree(self, old_path: PathLike, new_path: PathLike) -> "Future[OperationOutcome]":
        """Move/rename a linked worktree. The main worktree cannot be moved."""
        return self._run_async("move_worktree", self._outcome, "moving", self._move, old_path, new_path)

    def compare_worktrees(self, source: WorktreeInfo, target: WorktreeInfo,
                          files_only: bool = False) -> "Future[OperationOutcome]":
        """Diff ``source..target``.

        Both worktrees must be clean. With ``files_only`` the Success carries
        one ComparisonEntry per changed file; otherwise it carries the diff
        stat as message and the full diff as details.
        """
        return self._run_async(
            "compare_worktrees", self._outcome, "comparing", self._compare, source, target, files_only
        )

    def merge_worktree(self, source: WorktreeInfo, target: WorktreeInfo,
                       fast_forward_only: bool = False) -> "Future[OperationOutcome]":
        """Merge ``source``'s branch (or commit) into the checkout at ``target``."""
        return self._run_async(
            "merge_worktree", self._outcome, "merging", self._merge, source, target, fast_forward_only
        )

    def is_git_available(self) -> "Future[bool]":
        return self._run_async("is_git_available", self.runner.is_git_available)

    def is_git_repository(self) -> bool:
        """Check whether the project path lies inside a git repository.

        Reads the repository with GitPython and spawns no process, so it is
        safe to call from the foreground thread.
        """
        try:
            repo = git.Repo(self.project_path, search_parent_directories=True)
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError):
            return False
        repo.close()
        return True

    # ------------------------------------------------------------------
    # Background plumbing
    # ------------------------------------------------------------------

    def _run_async(self, operation: str, task: Callable[..., T], *args) -> "Future[T]":
        """Submit ``task`` to the worker pool, logging failures consistently."""

        def _task() -> T:
            try:
                return task(*args)
            except Exception as e:
                logger.warning(f"Async operation '{operation}' failed: {e}")
                raise

        return self._executor.submit(_task)

    def _outcome(self, verb: str, body: Callable[..., OperationOutcome], *args) -> OperationOutcome:
        """Run an operation body and convert raised conditions into a Failure."""
        try:
            return body(*args)
        except ForegroundThreadViolation:
            raise
        except ProjectPathUnresolvable as e:
            return Failure(str(e), e.details, kind=e.kind)
        except SubprocessLaunchFailure as e:
            logger.error(f"Error {verb} worktree: {e}")
            return Failure(f"Error {verb} worktree", str(e), kind=e.kind)
        except NonZeroExit as e:
            logger.warning(f"{e}: {e.stderr}")
            return Failure(str(e), e.details, kind=e.kind)
        except GitWorktreeManagerError as e:
            logger.info(f"{e} {e.details or ''}".strip())
            return Failure(str(e), e.details, kind=e.kind)
        except Exception as e:
            logger.error(f"Unexpected error {verb} worktree: {e}")
            return Failure(f"Error {verb} worktree", str(e) or "Unknown error", kind=ErrorKind.UNEXPECTED)

    def _require_project_path(self) -> str:
        if not os.path.exists(self.project_path):
            raise ProjectPathUnresolvable(self.project_path)
        return self.project_path

    def _resolve(self, path: PathLike) -> str:
        """Anchor relative paths at the project path, as git would."""
        return os.path.join(self.project_path, os.fspath(path))

    def _git(self, working_dir: PathLike, *args: str, summary: str) -> CommandOutput:
        """Run git and raise NonZeroExit carrying ``summary`` when it fails."""
        output = self.runner.execute(working_dir, *args)
        if not output.ok:
            raise NonZeroExit(summary, args, output.exit_code, output.error_text())
        return output

    # ------------------------------------------------------------------
    # Synchronous operation bodies (worker threads only)
    # ------------------------------------------------------------------

    def _list_worktrees(self) -> List[WorktreeInfo]:
        try:
            project = self._require_project_path()
            output = self.runner.execute(project, "worktree", "list", "--porcelain")
        except (ProjectPathUnresolvable, SubprocessLaunchFailure) as e:
            logger.debug(f"Could not list worktrees: {e}")
            return []

        if not output.ok:
            logger.warning(f"Failed to list worktrees: {output.error_text()}")
            return []

        worktrees = self.parser.parse(output.stdout)
        logger.debug(f"Found {len(worktrees)} worktrees")
        for wt in worktrees:
            logger.debug(f"  {wt}")
        return worktrees

    def _current_worktree(self) -> Optional[WorktreeInfo]:
        if not os.path.exists(self.project_path):
            return None

        enclosing = [
            wt for wt in self._list_worktrees()
            if self.normalizer.contains(wt.path, self.project_path)
        ]
        if not enclosing:
            return None
        # Linked worktrees may live inside the main checkout; the deepest root wins
        return max(enclosing, key=lambda wt: self.normalizer.depth(wt.path))

    def _check_collisions(self, target: str, worktrees: List[WorktreeInfo]) -> None:
        for existing in worktrees:
            if self.normalizer.equal(target, existing.path):
                raise PathCollision(existing.path)

        target_name = os.path.basename(self.normalizer.normalize(target))
        if not target_name:
            return
        for existing in worktrees:
            if self.normalizer.names_equal(existing.name, target_name):
                raise NameCollision(target_name, existing.path)

    def _ensure_history(self, project: str, request: CreateRequest) -> bool:
        """Make sure HEAD points at a commit.

        Returns True when a bootstrap commit had to be created.

        Raises:
            BootstrapRequired: The repository is empty and the plan is unconfirmed
        """
        if self.runner.has_commits(project):
            return False

        if request.bootstrap_state is BootstrapState.PENDING_CONFIRMATION:
            raise BootstrapRequired()

        self._git(project, "commit", "--allow-empty", "-m", request.commit_message,
                  summary="Failed to create initial commit")
        logger.info(f"Created initial commit in repository at {project}")
        return True

    def _create(self, request: CreateRequest) -> OperationOutcome:
        project = self._require_project_path()
        target = self._resolve(request.path)

        # Gather existing worktrees early to enforce both path and name uniqueness
        self._check_collisions(target, self._list_worktrees())

        try:
            initial_commit_created = self._ensure_history(project, request)
        except BootstrapRequired as e:
            logger.info(f"Not creating {target}: {e}")
            return RequiresInitialCommit(str(e), request)

        args = ["worktree", "add"]
        if request.create_branch:
            args += ["-b", request.branch, target]
            if self.runner.has_commits(project):
                args.append("HEAD")
        else:
            args += [target, request.branch]

        self._git(project, *args, summary="Failed to create worktree")
        logger.info(f"Created worktree at {target} for branch {request.branch}")
        self.notifier.notify()

        if initial_commit_created:
            return Success(f"Created initial commit and worktree '{request.branch}' at {target}")
        return Success(f"Created worktree '{request.branch}' at {target}")

    def _delete(self, path: PathLike, force: bool) -> OperationOutcome:
        project = self._require_project_path()
        target = self._resolve(path)

        args = ["worktree", "remove"]
        if force:
            args.append("--force")
        args.append(target)

        self._git(project, *args, summary="Failed to delete worktree")
        logger.info(f"Removed worktree at {target}")
        self.notifier.notify()
        return Success(f"Deleted worktree at {target}")

    def _move(self, old_path: PathLike, new_path: PathLike) -> OperationOutcome:
        project = self._require_project_path()
        source = self._resolve(old_path)
        destination = self._resolve(new_path)

        # Snapshot the current worktrees to refuse relocating the primary checkout
        for existing in self._list_worktrees():
            if self.normalizer.equal(source, existing.path):
                if existing.is_main:
                    raise MainWorktreeImmutable(existing.path)
                break

        self._git(project, "worktree", "move", source, destination, summary="Failed to move worktree")
        logger.info(f"Moved worktree from {source} to {destination}")
        self.notifier.notify()
        return Success(f"Moved worktree from {source} to {destination}")

    def _compare(self, source: WorktreeInfo, target: WorktreeInfo, files_only: bool) -> OperationOutcome:
        project = self._require_project_path()

        dirty: List[WorktreeInfo] = []
        for worktree in (source, target):
            if not os.path.isdir(worktree.path):
                return Failure(
                    "Failed to compare worktrees",
                    f"Worktree path does not exist: {worktree.path}",
                    kind=ErrorKind.MISSING_WORKTREE_PATH,
                )
            status = self._git(worktree.path, "status", "--porcelain",
                               summary=f"Failed to compare worktrees: unable to inspect {worktree.display_name}")
            if is_dirty_status(status.stdout) and worktree not in dirty:
                dirty.append(worktree)

        if dirty:
            raise UncommittedChangesBlockCompare([(wt.display_name, wt.path) for wt in dirty])

        diff_range = f"{source.ref}..{target.ref}"

        if files_only:
            output = self._git(project, "diff", "--name-status", "-z", diff_range,
                               summary="Failed to compare worktrees")
            entries = parse_name_status(output.stdout)
            if not entries:
                return Success(f"No differences between {source.display_name} and {target.display_name}")
            noun = "file" if len(entries) == 1 else "files"
            return Success(
                f"{len(entries)} {noun} changed between {source.display_name} and {target.display_name}",
                "\n".join(str(entry) for entry in entries),
                tuple(entries),
            )

        stat = self._git(project, "diff", "--stat", "--no-color", diff_range,
                         summary="Failed to compare worktrees")
        diff = self._git(project, "diff", "--no-color", diff_range,
                         summary="Failed to compare worktrees")

        stat_text = stat.stdout.strip()
        summary = stat_text or f"No differences between {source.display_name} and {target.display_name}"
        return Success(summary, diff.stdout.strip() or None)

    def _merge(self, source: WorktreeInfo, target: WorktreeInfo, fast_forward_only: bool) -> OperationOutcome:
        if not os.path.isdir(target.path):
            return Failure(
                f"Target worktree path does not exist: {target.path}",
                kind=ErrorKind.MISSING_WORKTREE_PATH,
            )

        args = ["merge"]
        if fast_forward_only:
            args.append("--ff-only")
        args.append(source.ref)

        output = self._git(target.path, *args,
                           summary=f"Failed to merge {source.display_name} into {target.display_name}")
        logger.info(f"Merged {source.display_name} into {target.display_name}")
        self.notifier.notify()
        return Success(
            f"Merged {source.display_name} into {target.display_name}",
            output.stdout.strip() or None,
        )
