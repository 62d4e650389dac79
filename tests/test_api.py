import pytest
from fastapi.testclient import TestClient

import src.api.app as api_module
from config.settings import settings
from src.api.app import app, get_match_store
from src.errors import StoreError
from src.store.base import MatchStore


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "DATABASE_URL", f"sqlite:///{tmp_path / 'matches.db'}")
    monkeypatch.setattr(settings, "STORE_BACKEND", "local")
    monkeypatch.setattr(api_module, "_store", None)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def strict(monkeypatch):
    monkeypatch.setattr(settings, "STRICT_EXISTENCE_CHECKING", True)


def make_payload(**overrides):
    payload = {
        "date": "2024-05-01",
        "time": "18:30",
        "club": "Club Litoral",
        "team": "Ana / Marta",
        "result": "",
        "status": "Pending",
    }
    payload.update(overrides)
    return payload


def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["backend"] == "local"
    assert data["store_ok"] is True


def test_create_assigns_fresh_ids(client):
    ids = []
    for day in ["2024-05-01", "2024-05-02", "2024-05-03"]:
        response = client.post("/api/matches", json=make_payload(date=day))
        assert response.status_code == 201
        data = response.json()
        assert data["date"] == day
        ids.append(data["id"])
    assert len(set(ids)) == 3


def test_create_normalizes_optional_fields(client):
    response = client.post("/api/matches", json={"date": "2024-05-01", "club": "A", "team": "B", "time": ""})
    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "Pending"
    assert data["time"] is None
    assert data["result"] is None


def test_create_missing_club_is_rejected(client):
    response = client.post("/api/matches", json={"date": "2024-01-01", "team": "X"})
    assert response.status_code == 400
    assert response.json() == {"error": "Missing required fields"}
    assert client.get("/api/matches").json() == []


@pytest.mark.parametrize("field", ["date", "club", "team"])
def test_create_empty_required_field_is_rejected(client, field):
    response = client.post("/api/matches", json=make_payload(**{field: ""}))
    assert response.status_code == 400
    assert response.json()["error"] == "Missing required fields"


def test_create_rejects_unknown_status(client):
    response = client.post("/api/matches", json=make_payload(status="Draw"))
    assert response.status_code == 400
    assert "Invalid match data" in response.json()["error"]


def test_create_accepts_legacy_status_label(client):
    response = client.post("/api/matches", json=make_payload(status="Ganado"))
    assert response.status_code == 201
    assert response.json()["status"] == "Won"


def test_update_then_list_shows_new_fields(client):
    created = client.post("/api/matches", json=make_payload()).json()

    response = client.put(
        f"/api/matches/{created['id']}",
        json=make_payload(result="6-4 6-2", status="Won", club="Padel Norte"),
    )
    assert response.status_code == 200
    assert response.json()["id"] == created["id"]

    listed = client.get("/api/matches").json()
    assert len(listed) == 1
    assert listed[0]["id"] == created["id"]
    assert listed[0]["result"] == "6-4 6-2"
    assert listed[0]["status"] == "Won"
    assert listed[0]["club"] == "Padel Norte"


def test_update_requires_same_fields_as_create(client):
    created = client.post("/api/matches", json=make_payload()).json()
    response = client.put(f"/api/matches/{created['id']}", json={"date": "2024-05-01", "club": "A"})
    assert response.status_code == 400
    assert client.get("/api/matches").json()[0]["team"] == "Ana / Marta"


def test_update_unknown_id_echoes_payload_when_not_strict(client):
    response = client.put("/api/matches/999", json=make_payload())
    assert response.status_code == 200
    assert response.json()["id"] == 999
    assert client.get("/api/matches").json() == []


def test_update_unknown_id_is_404_when_strict(client, strict):
    response = client.put("/api/matches/999", json=make_payload())
    assert response.status_code == 404
    assert "999" in response.json()["error"]


def test_delete_then_list_excludes_id(client):
    keep = client.post("/api/matches", json=make_payload(date="2024-05-01")).json()
    drop = client.post("/api/matches", json=make_payload(date="2024-05-02")).json()

    response = client.delete(f"/api/matches/{drop['id']}")
    assert response.status_code == 200
    assert "message" in response.json()

    ids = [m["id"] for m in client.get("/api/matches").json()]
    assert ids == [keep["id"]]


def test_delete_unknown_id_succeeds_when_not_strict(client):
    response = client.delete("/api/matches/12345")
    assert response.status_code == 200
    assert "message" in response.json()


def test_delete_unknown_id_is_404_when_strict(client, strict):
    response = client.delete("/api/matches/12345")
    assert response.status_code == 404


def test_list_is_ordered_by_date_descending(client):
    for day in ["2024-03-10", "2024-11-02", "2023-12-31", "2024-06-15"]:
        client.post("/api/matches", json=make_payload(date=day))

    dates = [m["date"] for m in client.get("/api/matches").json()]
    assert dates == ["2024-11-02", "2024-06-15", "2024-03-10", "2023-12-31"]


class BrokenStore(MatchStore):
    backend = "broken"

    def list_all(self):
        raise StoreError("connection refused")

    def insert(self, payload):
        raise StoreError("connection refused")

    def update(self, match_id, payload):
        raise StoreError("connection refused")

    def delete(self, match_id):
        raise StoreError("connection refused")

    def ping(self):
        return False


@pytest.fixture
def broken_client(client):
    app.dependency_overrides[get_match_store] = BrokenStore
    yield client
    app.dependency_overrides.clear()


def test_store_failure_maps_to_500(broken_client):
    response = broken_client.get("/api/matches")
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch matches"}

    assert broken_client.post("/api/matches", json=make_payload()).status_code == 500
    assert broken_client.put("/api/matches/1", json=make_payload()).status_code == 500
    assert broken_client.delete("/api/matches/1").status_code == 500


def test_validation_runs_before_store(broken_client):
    response = broken_client.post("/api/matches", json={"date": "2024-01-01", "team": "X"})
    assert response.status_code == 400


def test_health_reports_degraded_store(broken_client):
    data = broken_client.get("/health").json()
    assert data["status"] == "degraded"
    assert data["store_ok"] is False


@pytest.mark.parametrize("overrides", [
    {"date": "20240615"},
    {"date": "2024-W24-6"},
    {"date": "2024-6-15"},
    {"date": "2024-02-30"},
    {"time": "1830"},
    {"time": "18:30:00+02:00"},
    {"time": "7:05"},
])
def test_create_rejects_non_canonical_date_or_time(client, overrides):
    response = client.post("/api/matches", json=make_payload(**overrides))
    assert response.status_code == 400
    assert "Invalid match data" in response.json()["error"]
    assert client.get("/api/matches").json() == []


def test_update_rejects_non_canonical_date(client):
    created = client.post("/api/matches", json=make_payload()).json()
    response = client.put(f"/api/matches/{created['id']}", json=make_payload(date="20240615"))
    assert response.status_code == 400
    assert client.get("/api/matches").json()[0]["date"] == "2024-05-01"


def test_create_accepts_time_with_seconds(client):
    response = client.post("/api/matches", json=make_payload(time="18:30:00"))
    assert response.status_code == 201
    assert response.json()["time"] == "18:30:00"


def test_error_bodies_are_documented(client):
    paths = client.get("/openapi.json").json()["paths"]
    error_ref = "#/components/schemas/ErrorResponse"

    create = paths["/api/matches"]["post"]["responses"]
    assert create["400"]["content"]["application/json"]["schema"]["$ref"] == error_ref
    assert create["500"]["content"]["application/json"]["schema"]["$ref"] == error_ref

    update = paths["/api/matches/{match_id}"]["put"]["responses"]
    assert update["404"]["content"]["application/json"]["schema"]["$ref"] == error_ref


def test_non_integer_id_is_rejected(client):
    response = client.delete("/api/matches/abc")
    assert response.status_code == 400
    assert "error" in response.json()
