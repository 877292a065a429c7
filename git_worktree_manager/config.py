"""Configuration handling for git-worktree-manager"""

from dataclasses import dataclass
from typing import Optional

from git_worktree_manager.constants import DEFAULT_COMMAND_TIMEOUT, DEFAULT_INITIAL_COMMIT_MESSAGE


@dataclass
class Config:
    """Configuration for git-worktree-manager with validation."""

    # Git invocation
    git_executable: str = "git"
    command_timeout: float = DEFAULT_COMMAND_TIMEOUT  # seconds

    # Background execution
    workers: Optional[int] = None  # Number of pool workers (None = auto-detect)

    # Bootstrap commit used when a repository has no history yet
    initial_commit_message: str = DEFAULT_INITIAL_COMMIT_MESSAGE

    # Path comparison (None = detect from the operating system)
    case_insensitive: Optional[bool] = None

    # Output modes
    verbose: bool = False
    debug: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_git_executable()
        self._validate_command_timeout()
        self._validate_workers()
        self._validate_initial_commit_message()

    def _validate_git_executable(self):
        """Validate git_executable is not empty."""
        if not self.git_executable or not self.git_executable.strip():
            raise ValueError("git_executable cannot be empty")
        self.git_executable = self.git_executable.strip()

    def _validate_command_timeout(self):
        """Validate command_timeout is positive."""
        if self.command_timeout <= 0:
            raise ValueError(f"command_timeout must be positive, got {self.command_timeout}")

    def _validate_workers(self):
        """Validate workers is positive when given."""
        if self.workers is not None and self.workers <= 0:
            raise ValueError(f"workers must be positive, got {self.workers}")

    def _validate_initial_commit_message(self):
        """Validate initial_commit_message is not blank."""
        if not self.initial_commit_message or not self.initial_commit_message.strip():
            raise ValueError("initial_commit_message cannot be empty")

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "git_executable": self.git_executable,
            "command_timeout": self.command_timeout,
            "workers": self.workers,
            "initial_commit_message": self.initial_commit_message,
            "case_insensitive": self.case_insensitive,
            "verbose": self.verbose,
            "debug": self.debug,
        }

    def get(self, key: str, default=None):
        """Get config value by key."""
        return getattr(self, key, default)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary, ignoring unknown keys."""
        known_fields = {
            "git_executable",
            "command_timeout",
            "workers",
            "initial_commit_message",
            "case_insensitive",
            "verbose",
            "debug",
        }

        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)
