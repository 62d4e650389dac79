from config.settings import Settings
from src.errors import StoreError
from src.store.base import MatchStore
from src.store.sql_store import SqlMatchStore
from src.store.supabase_store import SupabaseMatchStore
from src.utils.constants import STORE_BACKENDS


def get_store(settings: Settings) -> MatchStore:
    """Build the record store selected by STORE_BACKEND."""
    backend = settings.STORE_BACKEND.lower()
    if backend not in STORE_BACKENDS:
        raise StoreError(f"Unknown STORE_BACKEND '{settings.STORE_BACKEND}', expected one of {STORE_BACKENDS}")
    if backend == "supabase":
        return SupabaseMatchStore(
            url=settings.SUPABASE_URL,
            key=settings.SUPABASE_KEY,
            table=settings.MATCHES_TABLE,
        )
    return SqlMatchStore(settings.STORE_URL)

