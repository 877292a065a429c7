"""Observer registry for worktree set changes."""

from threading import Lock
from typing import Callable, Dict

from git_worktree_manager.logging_config import get_logger

logger = get_logger(__name__)

WorktreeChangeListener = Callable[[], None]


class Subscription:
    """Handle returned by :meth:`ChangeNotifier.subscribe`.

    Can be used as a context manager so the listener lives exactly as long
    as the ``with`` block.
    """

    def __init__(self, notifier: "ChangeNotifier", token: int):
        self._notifier = notifier
        self._token = token

    @property
    def active(self) -> bool:
        return self._notifier.is_subscribed(self)

    def unsubscribe(self) -> bool:
        return self._notifier.unsubscribe(self)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.unsubscribe()


class ChangeNotifier:
    """Broadcasts "the set of worktrees may have changed" to listeners.

    Listeners are called on the thread that performed the change, in
    subscription order. A failing listener is logged and does not stop the
    others.
    """

    def __init__(self):
        self._listeners: Dict[int, WorktreeChangeListener] = {}
        self._next_token = 0
        self._lock = Lock()  # Thread safety for listener registry

    def subscribe(self, listener: WorktreeChangeListener) -> Subscription:
        with self._lock:
            token = self._next_token
            self._next_token += 1
            self._listeners[token] = listener
        return Subscription(self, token)

    def unsubscribe(self, subscription: Subscription) -> bool:
        """Remove a listener. Returns False if it was already removed."""
        with self._lock:
            return self._listeners.pop(subscription._token, None) is not None

    def is_subscribed(self, subscription: Subscription) -> bool:
        with self._lock:
            return subscription._token in self._listeners

    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)

    def notify(self) -> None:
        # Snapshot so listeners may unsubscribe themselves while being notified
        with self._lock:
            listeners = list(self._listeners.values())

        logger.debug(f"Notifying {len(listeners)} worktree change listener(s)")
        for listener in listeners:
            try:
                listener()
            except Exception as e:
                logger.error(f"Worktree change listener {listener!r} failed: {e}")
