"""
Action Lock Module

A time-boxed gate that rejects new feedback actions while the previous
action is still settling (queue advance, exit animation).
"""

import logging
import threading
from functools import partial
from typing import Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_LOCK_DURATION_MS = 500


class ActionLock:
    """Boolean gate released by a scheduled, cancellable timer."""

    def __init__(
        self,
        duration_ms: int = DEFAULT_LOCK_DURATION_MS,
        timer_factory: Callable[[float, Callable[[], None]], threading.Timer] = threading.Timer,
    ):
        """Initialize the lock.

        Args:
            duration_ms: Default lock duration used by engage()
            timer_factory: Callable building a startable, cancellable timer
                from (interval_seconds, function); threading.Timer by default
        """
        self.duration_ms = duration_ms
        self._timer_factory = timer_factory
        self._locked = False
        self._timer: Optional[threading.Timer] = None
        self._engagements = 0
        self._mutex = threading.Lock()

    def is_locked(self) -> bool:
        """Synchronous check used by action entry points."""
        return self._locked

    def engage(self, duration_ms: Optional[int] = None) -> None:
        """Lock now and schedule the release after ``duration_ms``."""
        if duration_ms is None:
            duration_ms = self.duration_ms
        with self._mutex:
            if self._timer is not None:
                self._timer.cancel()
            self._engagements += 1
            timer = self._timer_factory(duration_ms / 1000.0, partial(self._expire, self._engagements))
            if hasattr(timer, "daemon"):
                timer.daemon = True
            self._timer = timer
            self._locked = True
        logger.debug(f"Action lock engaged for {duration_ms}ms")
        timer.start()

    def release(self) -> None:
        """Unlock immediately and cancel any pending release."""
        with self._mutex:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._locked = False

    def _expire(self, engagement: int) -> None:
        with self._mutex:
            # a cancelled timer may still fire; only the latest one releases
            if engagement != self._engagements:
                return
            self._timer = None
            self._locked = False
        logger.debug("Action lock released")
