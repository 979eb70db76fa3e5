"""
Session Store Module

Durable key/value persistence for the swipe session. ``KeyValueStore`` keeps
string values in a single JSON file, the process-side counterpart of browser
local storage. ``SessionStore`` reads the liked/disliked/skipped collections
back once at startup and writes each collection as it changes.
"""

import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional

from .models import Paper, RestoredSession, StorageKeys, parse_papers

logger = logging.getLogger(__name__)


class KeyValueStore:
    """String key/value store backed by one JSON file."""

    def __init__(self, storage_file: Path):
        """Initialize the store.

        Args:
            storage_file: JSON file holding all keys; created on first write
        """
        self.storage_file = Path(storage_file)
        self._lock = threading.RLock()

    def _load(self) -> Dict[str, str]:
        """Load the whole file; unreadable content reads as empty."""
        try:
            data = json.loads(self.storage_file.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            # ValueError covers both JSONDecodeError and UnicodeDecodeError
            logger.warning(f"Storage file {self.storage_file} is unreadable, treating as empty: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Storage file {self.storage_file} does not hold an object, treating as empty")
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _save(self, data: Dict[str, str]) -> None:
        try:
            self.storage_file.parent.mkdir(parents=True, exist_ok=True)
            self.storage_file.write_text(
                json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8"
            )
        except OSError as e:
            logger.error(f"Failed to write storage file {self.storage_file}: {e}")

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            data = self._load()
            data[key] = value
            self._save(data)

    def remove_item(self, key: str) -> None:
        with self._lock:
            data = self._load()
            if key in data:
                del data[key]
                self._save(data)

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._load().keys())

    def size_kb(self) -> float:
        """Approximate storage usage in KB (key plus value characters)."""
        with self._lock:
            total = sum(len(k) + len(v) for k, v in self._load().items())
        return round(total / 1024, 1)


class SessionStore:
    """Restores and persists the three session collections."""

    def __init__(self, store: KeyValueStore):
        self.store = store
        self._restored = False

    @property
    def restored(self) -> bool:
        return self._restored

    def _read_list(self, key: str) -> List[Any]:
        """Decode one JSON list slot; anything else reads as empty."""
        raw = self.store.get_item(key)
        if raw is None:
            return []
        try:
            value = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Malformed stored value for {key}, ignoring it: {e}")
            return []
        if not isinstance(value, list):
            logger.warning(f"Stored value for {key} is not a list, ignoring it")
            return []
        return value

    def restore(self) -> RestoredSession:
        """Read durable storage once.

        Never raises: a missing or malformed slot resolves to an empty
        collection without affecting the other two.
        """
        liked = parse_papers(self._read_list(StorageKeys.LIKED), source=StorageKeys.LIKED)
        disliked = parse_papers(self._read_list(StorageKeys.DISLIKED), source=StorageKeys.DISLIKED)
        skipped = [
            str(pid) for pid in self._read_list(StorageKeys.SKIPPED)
            if isinstance(pid, (str, int)) and not isinstance(pid, bool)
        ]

        self._restored = True
        logger.info(
            f"Restored session: {len(liked)} liked, {len(disliked)} disliked, {len(skipped)} skipped"
        )
        return RestoredSession(liked=liked, disliked=disliked, skipped_ids=skipped)

    def persist(self, key: str, value: List[Any]) -> bool:
        """Write one collection.

        Ignored until restore() has run so that not-yet-loaded durable state
        is never overwritten with empty defaults.

        Returns:
            True if the value was written
        """
        if not self._restored:
            logger.debug(f"Skipping persist of {key} before restore")
            return False
        if key not in StorageKeys.SESSION_KEYS:
            raise ValueError(f"Unknown session key: {key}")

        encoded = [item.to_dict() if isinstance(item, Paper) else item for item in value]
        self.store.set_item(key, json.dumps(encoded, ensure_ascii=False))
        return True

    def clear(self) -> None:
        """Remove all three session keys."""
        for key in StorageKeys.SESSION_KEYS:
            self.store.remove_item(key)

    # UI preferences

    def load_selected_field(self) -> str:
        return self.store.get_item(StorageKeys.SELECTED_FIELD) or ""

    def save_selected_field(self, field: str) -> None:
        self.store.set_item(StorageKeys.SELECTED_FIELD, field)

    def load_show_history(self) -> bool:
        raw = self.store.get_item(StorageKeys.SHOW_HISTORY)
        if raw is None:
            return False
        try:
            return json.loads(raw) is True
        except json.JSONDecodeError:
            return False

    def save_show_history(self, show: bool) -> None:
        self.store.set_item(StorageKeys.SHOW_HISTORY, json.dumps(bool(show)))
