"""
Queue Manager Module

Holds the fallback and recommendation queues and the currently displayed
paper, and implements the advance / backfill algorithm:

1. count the action; every ``recommendation_interval`` actions a
   recommendation batch is requested in the background,
2. move to the next paper of the fallback queue,
3. or promote the recommendation queue to be the new fallback queue,
4. or fetch a new fallback batch synchronously.

All state changes happen under ``mutex`` so fetch completions and user
actions never interleave.
"""

import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from functools import partial
from typing import List, Optional, Set

from .batch_source import FallbackSource, RecommendationSource
from .models import BatchResult, FeedStatus, Paper, SessionState
from .seen_tracker import filter_unseen, seen_for

logger = logging.getLogger(__name__)

DEFAULT_BATCH_LIMIT = 5
DEFAULT_RECOMMENDATION_INTERVAL = 5


class QueueManager:
    """Orchestrates the two batch sources and the visible paper."""

    def __init__(
        self,
        state: SessionState,
        fallback_source: FallbackSource,
        recommendation_source: RecommendationSource,
        batch_limit: int = DEFAULT_BATCH_LIMIT,
        recommendation_interval: int = DEFAULT_RECOMMENDATION_INTERVAL,
        executor: Optional[Executor] = None,
    ):
        """Initialize the manager.

        Args:
            state: Session history, read to build the seen set and the
                recommendation request
            fallback_source: Default feed supply
            recommendation_source: Personalised batch supply
            batch_limit: Number of papers requested per fallback fetch
            recommendation_interval: A recommendation batch is requested on
                every multiple of this many actions
            executor: Runs background recommendation fetches; a single
                worker thread pool by default
        """
        if recommendation_interval < 1:
            raise ValueError("recommendation_interval must be at least 1")

        self.state = state
        self.fallback_source = fallback_source
        self.recommendation_source = recommendation_source
        self.batch_limit = batch_limit
        self.recommendation_interval = recommendation_interval
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="recommendations"
        )

        self.mutex = threading.RLock()
        self.fallback_queue: List[Paper] = []
        self.recommendation_queue: List[Paper] = []
        self.current_paper: Optional[Paper] = None
        self.action_count = 0
        self.status = FeedStatus.LOADING
        self.error = ""
        self.last_recommendation_error: Optional[str] = None
        self.field = ""
        # bumped by restart(); fetch results tagged with an older value are dropped
        self.generation = 0
        self.pending_recommendation: Optional[Future] = None

    @property
    def loading(self) -> bool:
        return self.status is FeedStatus.LOADING

    def _seen(self) -> Set[str]:
        return seen_for(self.state)

    def _show(self, queue: List[Paper]) -> None:
        self.fallback_queue = queue
        self.current_paper = queue[0]
        self.status = FeedStatus.READY

    def load_initial(self) -> None:
        """Fetch the first fallback batch and publish its head."""
        with self.mutex:
            self.current_paper = None
            self._fetch_fallback()

    def _fetch_fallback(self) -> None:
        """Synchronous fallback fetch; the caller holds the mutex."""
        generation = self.generation
        self.status = FeedStatus.LOADING

        result = self.fallback_source.fetch(self.batch_limit, self.field or None)
        if generation != self.generation:
            logger.info("Discarding stale feed batch from before a restart")
            return

        self._apply_fallback(result)

    def _apply_fallback(self, result: BatchResult) -> None:
        if not result.ok:
            # queue contents stay as they are; the error slot shows the failure
            self.error = result.error
            self.current_paper = None
            self.status = FeedStatus.ERROR
            return

        self.error = ""
        papers = filter_unseen(result.papers, self._seen())
        if papers:
            self._show(papers)
        else:
            self.fallback_queue = []
            self.current_paper = None
            self.status = FeedStatus.EMPTY

    def advance(self) -> None:
        """Move to the next paper after a like, dislike or skip."""
        with self.mutex:
            self.action_count += 1
            refresh = self.action_count % self.recommendation_interval == 0

            seen = self._seen()
            remainder = filter_unseen(self.fallback_queue[1:], seen)
            if remainder:
                self._show(remainder)
            else:
                promoted = filter_unseen(self.recommendation_queue, seen)
                self.recommendation_queue = []
                if promoted:
                    logger.debug(f"Promoting {len(promoted)} recommendations to the feed queue")
                    self._show(promoted)
                else:
                    self.fallback_queue = []
                    self.current_paper = None
                    # the next paper now comes from the feed, so the request
                    # goes out before the blocking feed round trip
                    if refresh:
                        self._request_recommendations()
                        refresh = False
                    self._fetch_fallback()

            # submitted once the next paper is chosen so the batch can only
            # ever refill a later advance
            if refresh:
                self._request_recommendations()

    def retry(self) -> None:
        """Recover from an empty or error state without a user action."""
        with self.mutex:
            if self.current_paper is not None or self.loading:
                return
            promoted = filter_unseen(self.recommendation_queue, self._seen())
            self.recommendation_queue = []
            if promoted:
                self.error = ""
                self._show(promoted)
            else:
                self._fetch_fallback()

    def _request_recommendations(self) -> None:
        generation = self.generation
        positive = self.state.liked_ids
        negative = self.state.disliked_ids
        logger.info(
            f"Action {self.action_count}: requesting recommendations "
            f"({len(positive)} positive, {len(negative)} negative)"
        )
        future = self._executor.submit(self.recommendation_source.fetch, positive, negative)
        self.pending_recommendation = future
        future.add_done_callback(partial(self._on_recommendations, generation))

    def _on_recommendations(self, generation: int, future: Future) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.error(f"Recommendation fetch raised: {exc!r}")
            return
        result: BatchResult = future.result()

        with self.mutex:
            if generation != self.generation:
                logger.info("Discarding stale recommendation batch from before a restart")
                return
            if not result.ok:
                self.last_recommendation_error = result.error
                return
            self.last_recommendation_error = None
            if not result.replace:
                return
            # filtered again: feedback may have landed while the request was in flight
            self.recommendation_queue = filter_unseen(result.papers, self._seen())
            logger.info(f"Recommendation queue refilled with {len(self.recommendation_queue)} papers")

    def restart(self, field: Optional[str] = None) -> None:
        """Discard both queues and in-flight results, then load a fresh batch.

        Args:
            field: New topic filter; None keeps the current one
        """
        with self.mutex:
            self.generation += 1
            if field is not None:
                self.field = field
            self.fallback_queue = []
            self.recommendation_queue = []
            self.current_paper = None
            self.action_count = 0
            self.error = ""
            self.last_recommendation_error = None
            self.pending_recommendation = None
            self._fetch_fallback()

    def close(self) -> None:
        """Stop the background executor if this manager created it."""
        if self._owns_executor:
            self._executor.shutdown(wait=False)
