# Swipe service package: queue and feedback-state core of the paper swipe app

from .action_lock import ActionLock, DEFAULT_LOCK_DURATION_MS
from .batch_source import BatchSource, FallbackSource, RecommendationSource
from .feed_client import FeedClientError, PaperFeedClient
from .feedback_recorder import FeedbackRecorder
from .queue_manager import QueueManager
from .seen_tracker import filter_unseen, seen_for, seen_ids
from .session import SwipeSession
from .session_store import KeyValueStore, SessionStore
from .logging_config import (
    setup_logging,
    stop_logging,
    ThreadSafeLoggingConfig,
)

__all__ = [
    "ActionLock",
    "DEFAULT_LOCK_DURATION_MS",
    "BatchSource",
    "FallbackSource",
    "RecommendationSource",
    "FeedClientError",
    "PaperFeedClient",
    "FeedbackRecorder",
    "QueueManager",
    "filter_unseen",
    "seen_for",
    "seen_ids",
    "SwipeSession",
    "KeyValueStore",
    "SessionStore",
    "setup_logging",
    "stop_logging",
    "ThreadSafeLoggingConfig",
]
