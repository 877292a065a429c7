"""Threading utilities: worker sizing, foreground-thread guard and future plumbing."""

import os
import sys
import threading
from concurrent.futures import Future
from typing import Any, Callable, Dict, Optional, Tuple, TypeVar

from git_worktree_manager.exceptions import ForegroundThreadViolation
from git_worktree_manager.logging_config import get_logger

logger = get_logger(__name__)

A = TypeVar("A")
B = TypeVar("B")
T = TypeVar("T")


def is_free_threading_enabled() -> bool:
    """Detect if Python is running with free-threading enabled.

    Returns:
        True if running on Python 3.13+ with GIL disabled (free-threading mode)
        False if running with GIL enabled or Python < 3.13
    """
    # sys._is_gil_enabled() only exists on 3.13+
    return hasattr(sys, "_is_gil_enabled") and not sys._is_gil_enabled()


def get_python_threading_mode() -> str:
    """Get a description of the current threading mode."""
    if hasattr(sys, "_is_gil_enabled"):
        return "GIL-enabled" if sys._is_gil_enabled() else "free-threading"
    return "GIL-enabled (Python < 3.13)"


def get_optimal_worker_count(user_specified: Optional[int] = None) -> int:
    """Calculate the background pool size.

    Args:
        user_specified: User-specified worker count, if provided

    Returns:
        Number of workers; never less than 2 so joined reads can progress
    """
    if user_specified is not None and user_specified > 0:
        return max(2, user_specified)

    cpu_count = os.cpu_count() or 1

    if is_free_threading_enabled():
        return min(64, cpu_count * 2)

    # Git subprocesses are I/O bound: CPU_count + 4, capped at 32
    return min(32, cpu_count + 4)


def get_threading_info() -> Dict[str, Any]:
    """Get information about the Python threading configuration."""
    return {
        "mode": get_python_threading_mode(),
        "free_threading": is_free_threading_enabled(),
        "cpu_count": os.cpu_count() or 1,
        "optimal_workers": get_optimal_worker_count(),
        "python_version": f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}",
    }


def assert_background_thread(foreground: Optional[threading.Thread]) -> None:
    """Raise ForegroundThreadViolation when called on ``foreground``.

    Passing None disables the check.
    """
    if foreground is None:
        return
    current = threading.current_thread()
    if current is foreground:
        raise ForegroundThreadViolation(current.name)


def combine_futures(first: "Future[A]", second: "Future[B]") -> "Future[Tuple[A, B]]":
    """Join two independent futures into one future of their pair.

    The combined future fails with the first exception observed. No pool
    worker is held while waiting.
    """
    combined: "Future[Tuple[A, B]]" = Future()
    lock = threading.Lock()

    def _on_done(_: Future) -> None:
        with lock:
            if combined.done():
                return
            for future in (first, second):
                if future.done() and future.exception() is not None:
                    combined.set_exception(future.exception())
                    return
            if first.done() and second.done():
                combined.set_result((first.result(), second.result()))

    first.add_done_callback(_on_done)
    second.add_done_callback(_on_done)
    return combined


def on_complete(
    future: "Future[T]",
    on_success: Callable[[T], None],
    on_error: Optional[Callable[[BaseException], None]] = None,
    dispatch: Optional[Callable[[Callable[[], None]], Any]] = None,
) -> None:
    """Deliver a future's outcome to callbacks, optionally on another thread.

    Args:
        future: Future returned by a WorktreeService operation
        on_success: Called with the result
        on_error: Called with the exception; when omitted the error is logged
        dispatch: Schedules a zero-argument callable on the caller's thread of
            choice (e.g. ``queue.put`` or ``loop.call_soon_threadsafe``). When
            omitted, callbacks run on the thread that completed the future.
    """

    def _deliver(done: "Future[T]") -> None:
        error = done.exception()
        if error is None:
            result = done.result()
            callback = lambda: on_success(result)  # noqa: E731
        elif on_error is not None:
            callback = lambda: on_error(error)  # noqa: E731
        else:
            def callback():
                logger.error(f"Background worktree operation failed: {error}")

        if dispatch is None:
            callback()
        else:
            dispatch(callback)

    future.add_done_callback(_deliver)
