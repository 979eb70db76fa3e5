"""
Feedback Recorder Module

The single entry point for changing session history. Each action checks the
action lock and the presence of a current paper, records the outcome,
persists the changed collection and advances the queue.
"""

import logging
from typing import Optional

from .action_lock import ActionLock
from .batch_source import FallbackSource
from .models import Paper, RestoredSession, SessionState, StorageKeys
from .queue_manager import QueueManager
from .session_store import SessionStore

logger = logging.getLogger(__name__)


class FeedbackRecorder:
    """Applies like / dislike / skip outcomes to the session."""

    def __init__(
        self,
        state: SessionState,
        queue: QueueManager,
        store: SessionStore,
        lock: ActionLock,
        fallback_source: FallbackSource,
    ):
        self.state = state
        self.queue = queue
        self.store = store
        self.lock = lock
        self.fallback_source = fallback_source

    def apply_restored(self, restored: RestoredSession) -> None:
        """Load the collections read back at startup, dropping cross-list duplicates."""
        self.state.clear()
        for paper in restored.liked:
            if paper.paper_id not in self.state.liked_ids:
                self.state.liked.append(paper)
        liked_ids = set(self.state.liked_ids)
        for paper in restored.disliked:
            if paper.paper_id in liked_ids:
                logger.warning(f"Paper {paper.paper_id} stored as both liked and disliked; keeping the like")
                continue
            if paper.paper_id not in self.state.disliked_ids:
                self.state.disliked.append(paper)
        for pid in restored.skipped_ids:
            if pid not in self.state.skipped_ids:
                self.state.skipped_ids.append(pid)

    def _can_act(self) -> bool:
        return not self.lock.is_locked() and self.queue.current_paper is not None

    def record_like(self, paper: Optional[Paper] = None) -> bool:
        """Record a like for ``paper`` (the current paper by default).

        Returns:
            False if the action was ignored because of the lock or an empty view
        """
        return self._record_feedback(paper, liked=True)

    def record_dislike(self, paper: Optional[Paper] = None) -> bool:
        """Record a dislike; see record_like()."""
        return self._record_feedback(paper, liked=False)

    def _record_feedback(self, paper: Optional[Paper], liked: bool) -> bool:
        with self.queue.mutex:
            if not self._can_act():
                return False
            paper = paper or self.queue.current_paper
            self.lock.engage()

            if liked:
                target, key = self.state.liked, StorageKeys.LIKED
            else:
                target, key = self.state.disliked, StorageKeys.DISLIKED

            # feedback is terminal: an id already liked or disliked stays where it is
            if paper.paper_id in self.state.liked_ids or paper.paper_id in self.state.disliked_ids:
                logger.debug(f"Paper {paper.paper_id} already has feedback, not recording again")
            else:
                target.append(paper)
                self.store.persist(key, target)

            self.queue.advance()
            return True

    def record_skip(self, paper: Optional[Paper] = None) -> bool:
        """Record a skip: only the id is kept, the paper is excluded for good."""
        with self.queue.mutex:
            if not self._can_act():
                return False
            paper = paper or self.queue.current_paper
            self.lock.engage()

            if paper.paper_id not in self.state.skipped_ids:
                self.state.skipped_ids.append(paper.paper_id)
                self.store.persist(StorageKeys.SKIPPED, self.state.skipped_ids)

            self.queue.advance()
            return True

    def reset_session(self) -> None:
        """Forget everything: upstream cursor, history, queues and durable state."""
        self.fallback_source.reset_cursor()
        with self.queue.mutex:
            logger.info("Resetting session")
            self.state.clear()
            self.store.clear()
            self.queue.restart()
