"""
Batch Source Module

The two upstream supplies of papers. Both filter every batch against the
seen set before it can reach a queue, and both turn every failure into a
``BatchResult`` instead of raising.
"""

import logging
from typing import Callable, List, Optional, Set

from .feed_client import FeedClientError, PaperFeedClient
from .models import BatchResult, parse_papers
from .seen_tracker import filter_unseen

logger = logging.getLogger(__name__)

SeenProvider = Callable[[], Set[str]]


class BatchSource:
    """Shared post-processing for upstream batches."""

    name = "batch"

    def __init__(self, client: PaperFeedClient, seen_provider: SeenProvider):
        """Initialize the source.

        Args:
            client: Upstream HTTP client
            seen_provider: Returns the current seen set; called at filter
                time so the latest feedback is always honoured
        """
        self.client = client
        self.seen_provider = seen_provider

    def _filtered(self, records: list) -> BatchResult:
        papers = parse_papers(records, source=self.name)
        kept = filter_unseen(papers, self.seen_provider())
        dropped = len(papers) - len(kept)
        if dropped:
            logger.debug(f"[{self.name}] filtered {dropped} already-seen papers")
        return BatchResult(papers=kept)


class FallbackSource(BatchSource):
    """Default, non-personalised feed."""

    name = "feed"

    def fetch(self, limit: int, field: Optional[str] = None) -> BatchResult:
        try:
            data = self.client.get_feed(limit, field or None)
        except FeedClientError as e:
            logger.error(f"Feed fetch failed: {e}")
            return BatchResult(error=f"Network error: {e}")

        if isinstance(data, dict) and data.get("error"):
            logger.error(f"Feed returned error: {data['error']}")
            return BatchResult(error=str(data["error"]))
        if not isinstance(data, list):
            logger.error(f"Unexpected format from /feed: {type(data).__name__}")
            return BatchResult(error="Unexpected response from feed")

        return self._filtered(data)

    def reset_cursor(self) -> bool:
        """Ask upstream to forget its feed cursor.

        Returns:
            False if upstream could not be reached; the local restart goes ahead regardless
        """
        try:
            self.client.reset_fallback()
        except FeedClientError as e:
            logger.warning(f"Feed cursor reset failed: {e}")
            return False
        return True


class RecommendationSource(BatchSource):
    """Personalised batch scored from the like/dislike signal."""

    name = "recommendations"

    def fetch(self, positive_ids: List[str], negative_ids: List[str]) -> BatchResult:
        try:
            data = self.client.get_recommendations(positive_ids, negative_ids)
        except FeedClientError as e:
            logger.error(f"Recommendation batch fetch failed: {e}")
            return BatchResult(error=f"Network error: {e}")

        if not isinstance(data, list):
            # tolerated: the existing recommendation queue is left as it is
            logger.warning(f"Unexpected format in /recommendations: {data!r}")
            return BatchResult(replace=False)

        return self._filtered(data)
