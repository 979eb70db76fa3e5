"""
Shared test doubles for the swipe session tests.
"""

from concurrent.futures import Future
from typing import Any, Callable, List, Optional

import pytest

from swipe_service import KeyValueStore, SwipeSession


def paper(pid: str, **fields) -> dict:
    """Upstream record for a paper."""
    record = {"paperId": pid, "title": f"Paper {pid}"}
    record.update(fields)
    return record


def papers(*pids: str) -> List[dict]:
    return [paper(pid) for pid in pids]


class ManualTimer:
    """Stand-in for threading.Timer that only fires when told to."""

    def __init__(self, interval: float, function: Callable[[], None]):
        self.interval = interval
        self.function = function
        self.started = False
        self.cancelled = False
        self.daemon = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        self.function()


class TimerFactory:
    """Builds ManualTimers and remembers them."""

    def __init__(self):
        self.timers: List[ManualTimer] = []

    def __call__(self, interval: float, function: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(interval, function)
        self.timers.append(timer)
        return timer

    @property
    def last(self) -> ManualTimer:
        return self.timers[-1]

    def fire_all(self) -> None:
        for timer in list(self.timers):
            if not timer.cancelled:
                timer.fire()


class DeferredExecutor:
    """Executor that queues work until run_pending() is called."""

    def __init__(self):
        self.pending: List[tuple] = []
        self.submitted = 0

    def submit(self, fn: Callable, *args, **kwargs) -> Future:
        future = Future()
        self.pending.append((future, fn, args, kwargs))
        self.submitted += 1
        return future

    def run_pending(self) -> None:
        pending, self.pending = self.pending, []
        for future, fn, args, kwargs in pending:
            try:
                future.set_result(fn(*args, **kwargs))
            except Exception as exc:
                future.set_exception(exc)

    def shutdown(self, wait: bool = True) -> None:
        self.pending.clear()


class FakeFeedClient:
    """In-memory replacement for PaperFeedClient.

    ``feed_responses`` and ``recommendation_responses`` are consumed in order;
    once exhausted the last one is repeated. An exception instance in either
    list is raised instead of returned.
    """

    def __init__(self, feed_responses: Optional[List[Any]] = None,
                 recommendation_responses: Optional[List[Any]] = None):
        self.feed_responses = list(feed_responses or [[]])
        self.recommendation_responses = list(recommendation_responses or [[]])
        self.feed_calls: List[tuple] = []
        self.recommendation_calls: List[tuple] = []
        self.reset_calls = 0
        self.reset_error: Optional[Exception] = None
        self.closed = False

    @staticmethod
    def _next(responses: List[Any]) -> Any:
        response = responses.pop(0) if len(responses) > 1 else responses[0]
        if isinstance(response, Exception):
            raise response
        return response

    def get_feed(self, limit: int, field: Optional[str] = None) -> Any:
        self.feed_calls.append((limit, field))
        return self._next(self.feed_responses)

    def get_recommendations(self, positive_ids: List[str], negative_ids: List[str]) -> Any:
        self.recommendation_calls.append((list(positive_ids), list(negative_ids)))
        return self._next(self.recommendation_responses)

    def reset_fallback(self) -> None:
        self.reset_calls += 1
        if self.reset_error is not None:
            raise self.reset_error

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def timers():
    return TimerFactory()


@pytest.fixture
def executor():
    return DeferredExecutor()


@pytest.fixture
def storage(tmp_path):
    return KeyValueStore(tmp_path / "storage.json")


@pytest.fixture
def make_session(storage, executor, timers):
    """Build a SwipeSession over a FakeFeedClient; call start() yourself."""
    def _make(client: FakeFeedClient, **kwargs) -> SwipeSession:
        kwargs.setdefault("executor", executor)
        kwargs.setdefault("timer_factory", timers)
        return SwipeSession(client, kwargs.pop("storage", storage), **kwargs)
    return _make
