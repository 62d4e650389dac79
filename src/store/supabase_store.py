"""
Supabase implementation of the match store.
Talks to the managed Postgres table through the supabase client.
"""

import logging
from typing import List, Optional

from supabase import Client, create_client

from src.errors import StoreError
from src.models import Match, MatchPayload
from src.store.base import MatchStore

logger = logging.getLogger(__name__)


class SupabaseMatchStore(MatchStore):
    """Supabase implementation of match store"""

    backend = "supabase"

    def __init__(self, url: str = "", key: str = "", table: str = "matches",
                 client: Optional[Client] = None):
        if client is None:
            if not url or not key:
                raise StoreError(
                    "Supabase credentials not configured "
                    "(required: SUPABASE_URL, SUPABASE_KEY or SUPABASE_ANON_KEY)"
                )
            client = create_client(url, key)
        self.client = client
        self.table = table

    def _query(self):
        return self.client.table(self.table)

    def list_all(self) -> List[Match]:
        try:
            response = self._query().select("*").order("date", desc=True).order("id", desc=True).execute()
        except Exception as e:
            raise StoreError("Failed to list matches") from e
        return [Match.from_row(d) for d in response.data or []]

    def insert(self, payload: MatchPayload) -> Match:
        try:
            response = self._query().insert(payload.to_record()).execute()
        except Exception as e:
            raise StoreError("Failed to insert match") from e
        if not response.data:
            raise StoreError("Insert returned no row")
        match = Match.from_row(response.data[0])
        logger.info(f"Inserted match {match.id}")
        return match

    def update(self, match_id: int, payload: MatchPayload) -> Optional[Match]:
        try:
            response = self._query().update(payload.to_record()).eq("id", match_id).execute()
        except Exception as e:
            raise StoreError(f"Failed to update match {match_id}") from e
        if not response.data:
            return None
        logger.info(f"Updated match {match_id}")
        return Match.from_row(response.data[0])

    def delete(self, match_id: int) -> bool:
        try:
            response = self._query().delete().eq("id", match_id).execute()
        except Exception as e:
            raise StoreError(f"Failed to delete match {match_id}") from e
        deleted = bool(response.data)
        if deleted:
            logger.info(f"Deleted match {match_id}")
        return deleted

    def ping(self) -> bool:
        try:
            self._query().select("id").limit(1).execute()
            return True
        except Exception as e:
            logger.warning(f"Supabase ping failed: {e}")
            return False
