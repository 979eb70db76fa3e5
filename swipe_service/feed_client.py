"""
Feed Client Module

HTTP transport for the upstream paper service: the default feed, the
personalised recommendation batch and the fallback cursor reset.
"""

import logging
from typing import Any, List, Optional

import requests

logger = logging.getLogger(__name__)


class FeedClientError(Exception):
    """Raised when an upstream request fails or returns undecodable data."""


class PaperFeedClient:
    """Thin wrapper around the three upstream endpoints."""

    def __init__(self, base_url: str, timeout: float = 10.0):
        """Initialize the client.

        Args:
            base_url: Root URL of the paper service
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({"Accept": "application/json"})

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _decode(self, response: requests.Response, path: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise FeedClientError(f"Invalid JSON from {path}: {e}") from e

    def get_feed(self, limit: int, field: Optional[str] = None) -> Any:
        """GET /feed. Returns the decoded body (a list, or an ``{error}`` object).

        Raises:
            FeedClientError: On network errors or undecodable bodies
        """
        params = {"limit": limit}
        if field:
            params["field"] = field
        logger.debug(f"Fetching feed batch limit={limit} field={field!r}")
        try:
            response = self.session.get(self._url("/feed"), params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise FeedClientError(str(e)) from e
        return self._decode(response, "/feed")

    def get_recommendations(self, positive_ids: List[str], negative_ids: List[str]) -> Any:
        """POST /recommendations with the accumulated feedback signal.

        Raises:
            FeedClientError: On network errors, HTTP errors or undecodable bodies
        """
        body = {
            "positivePaperIds": list(positive_ids),
            "negativePaperIds": list(negative_ids),
        }
        logger.debug(f"Requesting recommendations: {len(positive_ids)} positive, {len(negative_ids)} negative")
        try:
            response = self.session.post(
                self._url("/recommendations"), json=body, timeout=self.timeout
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise FeedClientError(str(e)) from e
        return self._decode(response, "/recommendations")

    def reset_fallback(self) -> None:
        """POST /reset-fallback so upstream forgets its feed cursor.

        Raises:
            FeedClientError: On network or HTTP errors
        """
        try:
            response = self.session.post(self._url("/reset-fallback"), timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise FeedClientError(str(e)) from e

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()
