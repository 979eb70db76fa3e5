"""
Swipe Session

Wires the session core together and exposes the contract the presentation
layer calls: like / dislike / skip / reset, topic selection, the history
panel preference and read access to the visible state.
"""

import logging
import threading
from concurrent.futures import Executor
from functools import partial
from pathlib import Path
from typing import Callable, List, Optional

from .action_lock import ActionLock
from .batch_source import FallbackSource, RecommendationSource
from .feed_client import PaperFeedClient
from .feedback_recorder import FeedbackRecorder
from .models import FeedStatus, Paper, SessionSnapshot, SessionState
from .queue_manager import QueueManager
from .seen_tracker import seen_for
from .session_store import KeyValueStore, SessionStore

logger = logging.getLogger(__name__)


class SwipeSession:
    """One user's swipe session over the upstream paper service."""

    def __init__(
        self,
        client: PaperFeedClient,
        storage: KeyValueStore,
        batch_limit: int = 5,
        lock_duration_ms: int = 500,
        recommendation_interval: int = 5,
        executor: Optional[Executor] = None,
        timer_factory: Callable = threading.Timer,
    ):
        self.client = client
        self.state = SessionState()
        self.storage = storage
        self.store = SessionStore(storage)
        self.lock = ActionLock(lock_duration_ms, timer_factory=timer_factory)

        seen = partial(seen_for, self.state)
        self.fallback_source = FallbackSource(client, seen)
        self.recommendation_source = RecommendationSource(client, seen)
        self.queue = QueueManager(
            self.state,
            self.fallback_source,
            self.recommendation_source,
            batch_limit=batch_limit,
            recommendation_interval=recommendation_interval,
            executor=executor,
        )
        self.recorder = FeedbackRecorder(
            self.state, self.queue, self.store, self.lock, self.fallback_source
        )
        self.show_history = False
        self.started = False

    @classmethod
    def from_config(cls, feed_config, session_config, **kwargs) -> "SwipeSession":
        """Build a session from ``FeedConfig`` and ``SessionConfig``."""
        client = PaperFeedClient(feed_config.base_url, timeout=feed_config.timeout)
        storage = KeyValueStore(Path(session_config.storage_file))
        return cls(
            client,
            storage,
            batch_limit=feed_config.batch_limit,
            lock_duration_ms=session_config.lock_duration_ms,
            recommendation_interval=session_config.recommendation_interval,
            **kwargs,
        )

    def start(self) -> None:
        """Restore durable state, then load the first batch. Runs once."""
        if self.started:
            return
        self.recorder.apply_restored(self.store.restore())
        self.show_history = self.store.load_show_history()
        self.queue.field = self.store.load_selected_field()
        self.started = True
        self.queue.load_initial()

    # Presentation callbacks

    def on_like(self) -> bool:
        return self.recorder.record_like()

    def on_dislike(self) -> bool:
        return self.recorder.record_dislike()

    def on_skip(self) -> bool:
        return self.recorder.record_skip()

    def on_reset_session(self) -> None:
        self.recorder.reset_session()

    def retry(self) -> None:
        """Try again after an error or an empty batch."""
        self.queue.retry()

    def select_field(self, field: str) -> None:
        """Switch the topic filter and restart the feed; history is kept."""
        field = (field or "").strip()
        logger.info(f"Switching topic filter to {field!r}")
        self.store.save_selected_field(field)
        self.fallback_source.reset_cursor()
        self.queue.restart(field=field)

    def toggle_history(self) -> bool:
        self.show_history = not self.show_history
        self.store.save_show_history(self.show_history)
        return self.show_history

    # Read access

    @property
    def current_paper(self) -> Optional[Paper]:
        return self.queue.current_paper

    @property
    def loading(self) -> bool:
        return self.queue.loading

    @property
    def error(self) -> str:
        return self.queue.error

    @property
    def locked(self) -> bool:
        return self.lock.is_locked()

    @property
    def selected_field(self) -> str:
        return self.queue.field

    @property
    def liked_papers(self) -> List[Paper]:
        return list(self.state.liked)

    @property
    def disliked_papers(self) -> List[Paper]:
        return list(self.state.disliked)

    def snapshot(self) -> SessionSnapshot:
        with self.queue.mutex:
            return SessionSnapshot(
                current_paper=self.queue.current_paper,
                status=self.queue.status if self.started else FeedStatus.LOADING,
                loading=self.queue.loading,
                error=self.queue.error,
                locked=self.lock.is_locked(),
                liked_papers=self.liked_papers,
                disliked_papers=self.disliked_papers,
                show_history=self.show_history,
                selected_field=self.queue.field,
                storage_kb=self.storage.size_kb(),
            )

    def close(self) -> None:
        self.lock.release()
        self.queue.close()
        self.client.close()
