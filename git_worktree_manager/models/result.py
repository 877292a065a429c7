"""Operation outcome models.

Every mutating or comparing operation resolves to exactly one of
:class:`Success`, :class:`Failure` or :class:`RequiresInitialCommit`.
The last one is not an error: it hands back the :class:`CreateRequest`
that produced it so the caller can confirm it and submit it again.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Tuple, Union

from git_worktree_manager.constants import DEFAULT_INITIAL_COMMIT_MESSAGE
from git_worktree_manager.exceptions import ErrorKind
from git_worktree_manager.models.comparison import ComparisonEntry


class BootstrapState(Enum):
    """Whether a create plan may seed an empty repository with a commit."""
    PENDING_CONFIRMATION = "pending-confirmation"
    CONFIRMED = "confirmed"


@dataclass(frozen=True)
class CreateRequest:
    """Everything needed to run a create operation from the start."""

    path: str
    branch: str
    create_branch: bool = True
    allow_initial_commit: bool = False
    commit_message: str = DEFAULT_INITIAL_COMMIT_MESSAGE

    @property
    def bootstrap_state(self) -> BootstrapState:
        if self.allow_initial_commit:
            return BootstrapState.CONFIRMED
        return BootstrapState.PENDING_CONFIRMATION

    def confirm(self) -> "CreateRequest":
        """Return a copy of this plan that is allowed to create the initial commit."""
        return replace(self, allow_initial_commit=True)


class _OutcomeHelpers:
    """Accessors shared by all outcome variants."""

    @property
    def is_success(self) -> bool:
        return isinstance(self, Success)

    @property
    def is_failure(self) -> bool:
        return isinstance(self, Failure)

    @property
    def requires_initial_commit(self) -> bool:
        return isinstance(self, RequiresInitialCommit)

    def success_message(self) -> Optional[str]:
        return self.message if isinstance(self, Success) else None

    def error_message(self) -> Optional[str]:
        if isinstance(self, Failure):
            return self.error
        if isinstance(self, RequiresInitialCommit):
            return self.message
        return None

    def error_details(self) -> Optional[str]:
        return self.details if isinstance(self, Failure) else None


@dataclass(frozen=True)
class Success(_OutcomeHelpers):
    """Operation completed successfully."""

    message: str = "Operation completed successfully"
    details: Optional[str] = None
    changes: Tuple[ComparisonEntry, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Failure(_OutcomeHelpers):
    """Operation failed; ``details`` carries git's stderr when there is one."""

    error: str
    details: Optional[str] = None
    kind: ErrorKind = ErrorKind.UNEXPECTED


@dataclass(frozen=True)
class RequiresInitialCommit(_OutcomeHelpers):
    """The repository has no commits and the plan was not confirmed."""

    message: str = "Repository has no commits"
    request: Optional[CreateRequest] = None


OperationOutcome = Union[Success, Failure, RequiresInitialCommit]
