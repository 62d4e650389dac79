"""
Record store interface.
Both backends (embedded SQLite file, managed Supabase table) implement it,
so the API never knows which one it talks to.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from src.models import Match, MatchPayload


class MatchStore(ABC):
    """Interface for match data access"""

    backend: str = "unknown"

    @abstractmethod
    def list_all(self) -> List[Match]:
        """All matches, newest date first"""

    @abstractmethod
    def insert(self, payload: MatchPayload) -> Match:
        """Store a new match and return it with its assigned id"""

    @abstractmethod
    def update(self, match_id: int, payload: MatchPayload) -> Optional[Match]:
        """Replace every field except id. None when no row matched"""

    @abstractmethod
    def delete(self, match_id: int) -> bool:
        """Remove a match. False when no row matched"""

    @abstractmethod
    def ping(self) -> bool:
        """Cheap connectivity check"""
