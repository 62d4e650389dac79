from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from config.settings import Settings
from src.errors import StoreError
from src.models import MatchPayload, MatchStatus
from src.store.factory import get_store
from src.store.sql_store import MatchRow, SqlMatchStore
from src.store.supabase_store import SupabaseMatchStore


@pytest.fixture
def sql_store(tmp_path):
    return SqlMatchStore(f"sqlite:///{tmp_path / 'matches.db'}")


def make_payload(**overrides):
    data = {"date": "2024-05-01", "club": "Club Litoral", "team": "Ana / Marta"}
    data.update(overrides)
    return MatchPayload(**data)


def test_sql_store_roundtrip(sql_store):
    created = sql_store.insert(make_payload(time="19:00", result="6-3 6-4", status="Won"))
    assert created.id is not None

    [stored] = sql_store.list_all()
    assert stored == created
    assert stored.status == MatchStatus.WON


def test_sql_store_never_reuses_ids(sql_store):
    first = sql_store.insert(make_payload())
    second = sql_store.insert(make_payload())
    assert sql_store.delete(second.id) is True

    third = sql_store.insert(make_payload())
    assert third.id not in (first.id, second.id)


def test_sql_store_missing_rows(sql_store):
    assert sql_store.update(42, make_payload()) is None
    assert sql_store.delete(42) is False


def test_sql_store_update_keeps_id(sql_store):
    created = sql_store.insert(make_payload())
    updated = sql_store.update(created.id, make_payload(team="Eva / Lucia", status="Lost"))
    assert updated.id == created.id
    assert updated.team == "Eva / Lucia"
    assert updated.status == MatchStatus.LOST


def test_sql_store_reads_legacy_status(sql_store):
    with sql_store.Session.begin() as session:
        session.add(MatchRow(date="2024-02-01", club="A", team="B", status="Perdido"))
        session.add(MatchRow(date="2024-02-02", club="A", team="B", status=None))

    statuses = [m.status for m in sql_store.list_all()]
    assert statuses == [MatchStatus.PENDING, MatchStatus.LOST]


def test_sql_store_ping(sql_store):
    assert sql_store.ping() is True


@pytest.fixture
def supabase_client():
    return MagicMock()


def test_supabase_list_orders_by_date(supabase_client):
    table = supabase_client.table.return_value
    ordered = table.select.return_value.order.return_value.order.return_value
    ordered.execute.return_value = SimpleNamespace(data=[
        {"id": 3, "date": "2024-06-01", "time": "18:00:00", "club": "A", "team": "B",
         "result": None, "status": "Ganado", "created_at": "2024-05-01T10:00:00"},
    ])

    store = SupabaseMatchStore(client=supabase_client)
    [match] = store.list_all()

    supabase_client.table.assert_called_with("matches")
    table.select.return_value.order.assert_called_with("date", desc=True)
    assert match.id == 3
    assert match.time == "18:00:00"
    assert match.status == MatchStatus.WON


def test_supabase_insert_returns_created_row(supabase_client):
    table = supabase_client.table.return_value
    table.insert.return_value.execute.return_value = SimpleNamespace(data=[
        {"id": 7, "date": "2024-05-01", "time": None, "club": "Club Litoral",
         "team": "Ana / Marta", "result": None, "status": "Pending"},
    ])

    store = SupabaseMatchStore(client=supabase_client, table="partidos")
    created = store.insert(make_payload())

    supabase_client.table.assert_called_with("partidos")
    sent = table.insert.call_args.args[0]
    assert sent["status"] == "Pending"
    assert "id" not in sent
    assert created.id == 7


def test_supabase_update_and_delete_without_match(supabase_client):
    table = supabase_client.table.return_value
    table.update.return_value.eq.return_value.execute.return_value = SimpleNamespace(data=[])
    table.delete.return_value.eq.return_value.execute.return_value = SimpleNamespace(data=[])

    store = SupabaseMatchStore(client=supabase_client)
    assert store.update(5, make_payload()) is None
    assert store.delete(5) is False
    table.delete.return_value.eq.assert_called_with("id", 5)


def test_supabase_errors_become_store_errors(supabase_client):
    table = supabase_client.table.return_value
    table.select.return_value.order.return_value.order.return_value.execute.side_effect = RuntimeError("boom")

    store = SupabaseMatchStore(client=supabase_client)
    with pytest.raises(StoreError):
        store.list_all()


def test_supabase_requires_credentials():
    with pytest.raises(StoreError):
        SupabaseMatchStore(url="", key="")


def test_get_store_selects_backend(tmp_path):
    local = Settings(_env_file=None, STORE_BACKEND="local", DATABASE_URL=f"sqlite:///{tmp_path / 'x.db'}")
    assert isinstance(get_store(local), SqlMatchStore)

    with pytest.raises(StoreError):
        get_store(Settings(_env_file=None, STORE_BACKEND="mongo"))

    with pytest.raises(StoreError):
        get_store(Settings(_env_file=None, STORE_BACKEND="supabase", SUPABASE_URL="", SUPABASE_KEY=""))
