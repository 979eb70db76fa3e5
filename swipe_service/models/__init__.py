"""
Models package for the swipe session core.

This package contains the paper model and the dataclasses describing
session state, fetch outcomes and presentation snapshots.
"""

from .paper import Paper, parse_papers

from .session_models import (
    BatchResult,
    FeedStatus,
    RestoredSession,
    SessionSnapshot,
    SessionState,
    StorageKeys,
)

__all__ = [
    "Paper",
    "parse_papers",
    "BatchResult",
    "FeedStatus",
    "RestoredSession",
    "SessionSnapshot",
    "SessionState",
    "StorageKeys",
]
