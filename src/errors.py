"""Error taxonomy shared by the store, the API and the dashboard client."""
from typing import Optional


class MatchTrackerError(Exception):
    """Base class for all application errors."""


class ValidationError(MatchTrackerError):
    """A payload is missing a required field or carries a malformed value."""


class StoreError(MatchTrackerError):
    """The persistence backend failed. Never retried."""


class MatchNotFoundError(MatchTrackerError):
    """No stored match has the requested id (strict existence checking only)."""

    def __init__(self, match_id: int):
        super().__init__(f"Match {match_id} not found")
        self.match_id = match_id


class ApiClientError(MatchTrackerError):
    """An HTTP call from the dashboard to the API failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
