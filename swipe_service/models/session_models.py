"""
Session-related data models.

This module contains the in-memory session state, fetch results and the
status values the presentation layer renders from.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .paper import Paper


class StorageKeys:
    """Keys used in the durable key/value store."""

    LIKED = "likedPapers"
    DISLIKED = "dislikedPapers"
    SKIPPED = "skippedIds"

    # UI preferences, not part of the session history
    SELECTED_FIELD = "selectedField"
    SHOW_HISTORY = "showHistory"

    SESSION_KEYS = (LIKED, DISLIKED, SKIPPED)


class FeedStatus(Enum):
    """State of the visible item."""

    LOADING = "loading"
    READY = "ready"
    EMPTY = "empty"
    ERROR = "error"


@dataclass
class SessionState:
    """Liked, disliked and skipped history for one session.

    Only FeedbackRecorder mutates this object; everything else reads it.
    """

    liked: List[Paper] = field(default_factory=list)
    disliked: List[Paper] = field(default_factory=list)
    skipped_ids: List[str] = field(default_factory=list)

    @property
    def liked_ids(self) -> List[str]:
        return [p.paper_id for p in self.liked]

    @property
    def disliked_ids(self) -> List[str]:
        return [p.paper_id for p in self.disliked]

    def clear(self) -> None:
        """Empty all three collections in place."""
        self.liked.clear()
        self.disliked.clear()
        self.skipped_ids.clear()


@dataclass
class RestoredSession:
    """Collections read back from durable storage at startup."""

    liked: List[Paper] = field(default_factory=list)
    disliked: List[Paper] = field(default_factory=list)
    skipped_ids: List[str] = field(default_factory=list)


@dataclass
class BatchResult:
    """Outcome of one batch fetch, already filtered against the seen set."""

    papers: List[Paper] = field(default_factory=list)
    error: Optional[str] = None
    # False when upstream sent nothing usable and the current queue should stand
    replace: bool = True

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class SessionSnapshot:
    """Everything the presentation layer reads from the core."""

    current_paper: Optional[Paper]
    status: FeedStatus
    loading: bool
    error: str
    locked: bool
    liked_papers: List[Paper]
    disliked_papers: List[Paper]
    show_history: bool
    selected_field: str
    storage_kb: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "paper": self.current_paper.to_dict() if self.current_paper else None,
            "status": self.status.value,
            "loading": self.loading,
            "error": self.error,
            "locked": self.locked,
            "liked_papers": [p.to_dict() for p in self.liked_papers],
            "disliked_papers": [p.to_dict() for p in self.disliked_papers],
            "liked_ids": [p.paper_id for p in self.liked_papers],
            "disliked_ids": [p.paper_id for p in self.disliked_papers],
            "show_history": self.show_history,
            "selected_field": self.selected_field,
            "storage_kb": self.storage_kb,
        }
