"""HTTP client the dashboard uses to talk to the match API."""
import logging
from typing import List, Optional

import requests

from config.settings import settings
from src.errors import ApiClientError
from src.models import Match, MatchPayload

logger = logging.getLogger(__name__)


class MatchApiClient:
    def __init__(self, base_url: str = None, timeout: float = None,
                 session: Optional[requests.Session] = None):
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.timeout = timeout or settings.API_TIMEOUT
        self.session = session or requests.Session()

    def _request(self, method: str, path: str, payload: Optional[MatchPayload] = None):
        url = f"{self.base_url}{path}"
        body = payload.model_dump(mode="json") if payload is not None else None
        try:
            response = self.session.request(method, url, json=body, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise ApiClientError(f"Cannot reach the match API: {e}") from e

        if not response.ok:
            try:
                message = response.json().get("error", response.text)
            except ValueError:
                message = response.text
            logger.error(f"{method} {url} returned {response.status_code}: {message}")
            raise ApiClientError(message or f"HTTP {response.status_code}", response.status_code)
        return response.json()

    def health(self) -> dict:
        return self._request("GET", "/health")

    def list_matches(self) -> List[Match]:
        return [Match.from_row(row) for row in self._request("GET", "/api/matches")]

    def create_match(self, payload: MatchPayload) -> Match:
        return Match.from_row(self._request("POST", "/api/matches", payload))

    def update_match(self, match_id: int, payload: MatchPayload) -> Match:
        return Match.from_row(self._request("PUT", f"/api/matches/{match_id}", payload))

    def delete_match(self, match_id: int) -> str:
        return self._request("DELETE", f"/api/matches/{match_id}").get("message", "")

    def save_match(self, payload: MatchPayload, editing_id: Optional[int] = None) -> Match:
        """Update when a match is being edited, create otherwise."""
        if editing_id is not None:
            return self.update_match(editing_id, payload)
        return self.create_match(payload)
