"""Subprocess execution of the git binary."""

import os
import subprocess
import sys
import threading
from dataclasses import dataclass
from typing import List, Optional, Tuple

import git
from git.exc import GitCommandNotFound

from git_worktree_manager.constants import DEFAULT_COMMAND_TIMEOUT
from git_worktree_manager.exceptions import SubprocessLaunchFailure
from git_worktree_manager.logging_config import get_logger
from git_worktree_manager.utils.paths import PathLike
from git_worktree_manager.utils.threading import assert_background_thread

logger = get_logger(__name__)

# GitPython only implements kill_after_timeout outside Windows
KILL_AFTER_TIMEOUT_SUPPORTED = sys.platform != "win32"
# Exit status reported for commands killed at the timeout (SIGKILL)
TIMEOUT_EXIT_CODE = -9


def _decode(data) -> str:
    """Decode raw process output, dropping one trailing newline like GitPython does."""
    if not data:
        return ""
    text = data.decode("utf-8", errors="replace") if isinstance(data, bytes) else data
    return text[:-1] if text.endswith("\n") else text


@dataclass(frozen=True)
class CommandOutput:
    """Captured result of one git invocation."""

    exit_code: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    def error_text(self) -> str:
        """Trimmed stderr, falling back to stdout (merge reports conflicts there)."""
        return self.stderr.strip() or self.stdout.strip() or "Unknown error"


class CommandRunner:
    """Runs git commands through GitPython and captures their output.

    A non-zero exit status is returned, not raised. Only a command that
    cannot be started raises :class:`SubprocessLaunchFailure`.
    """

    def __init__(self, git_executable: str = "git",
                 timeout: float = DEFAULT_COMMAND_TIMEOUT,
                 foreground_thread: Optional[threading.Thread] = None):
        """Initialize the runner.

        Args:
            git_executable: Name or path of the git binary
            timeout: Seconds after which a running command is killed
            foreground_thread: Thread on which commands must never run
                (None disables the check)
        """
        self.git_executable = git_executable
        self.timeout = timeout
        self.foreground_thread = foreground_thread

    def execute(self, working_dir: Optional[PathLike], *args: str) -> CommandOutput:
        """Run ``git <args>`` in ``working_dir`` and capture exit code, stdout and stderr.

        Args:
            working_dir: Directory to run in, or None for the process directory
            *args: Arguments passed to git

        Raises:
            ForegroundThreadViolation: When called on the foreground thread
            SubprocessLaunchFailure: When git cannot be started
        """
        assert_background_thread(self.foreground_thread)

        cwd = os.fspath(working_dir) if working_dir is not None else None
        # GitPython silently falls back to the process directory for unusable
        # working directories, so reject them up front.
        if cwd is not None and not os.path.isdir(cwd):
            raise SubprocessLaunchFailure(
                self.git_executable, f"working directory does not exist: {cwd}"
            )

        command = [self.git_executable, *args]
        logger.debug(f"Running {' '.join(command)} in {cwd or os.getcwd()}")

        try:
            if KILL_AFTER_TIMEOUT_SUPPORTED:
                status, stdout, stderr = git.Git(cwd).execute(
                    command,
                    with_extended_output=True,
                    with_exceptions=False,
                    kill_after_timeout=self.timeout,
                )
            else:
                status, stdout, stderr = self._execute_with_deadline(cwd, command)
        except GitCommandNotFound as e:
            raise SubprocessLaunchFailure(self.git_executable, str(e)) from e

        output = CommandOutput(exit_code=status, stdout=stdout or "", stderr=stderr or "")
        if not output.ok:
            logger.debug(f"git {' '.join(args)} exited with {status}: {output.stderr.strip()}")
        return output

    def _execute_with_deadline(self, cwd: Optional[str], command: List[str]) -> Tuple[int, str, str]:
        """Run ``command`` as a process and kill it once the timeout expires.

        GitPython refuses ``kill_after_timeout`` on Windows, so the deadline is
        enforced here with ``communicate(timeout=...)`` instead.
        """
        handle = git.Git(cwd).execute(command, as_process=True)
        try:
            stdout, stderr = handle.communicate(timeout=self.timeout)
        except subprocess.TimeoutExpired:
            handle.kill()
            message = f'Timeout: the command "{" ".join(command)}" did not complete in {self.timeout:g} secs.'
            logger.warning(message)
            return TIMEOUT_EXIT_CODE, "", message
        return handle.returncode, _decode(stdout), _decode(stderr)

    def is_git_available(self) -> bool:
        """Check whether ``git --version`` runs successfully."""
        try:
            return self.execute(None, "--version").ok
        except SubprocessLaunchFailure:
            return False

    def has_commits(self, repo_path: PathLike) -> bool:
        """Check whether HEAD resolves to a commit in ``repo_path``."""
        try:
            return self.execute(repo_path, "rev-parse", "HEAD").ok
        except SubprocessLaunchFailure as e:
            logger.debug(f"Could not check commits in {repo_path}: {e}")
            return False
