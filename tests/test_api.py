from conftest import OWNER
from habit_ledger.app.core.config import settings
from habit_ledger.app.core.security import hash_password
from habit_ledger.app.core.errors import StoreUnavailable
from habit_ledger.app.services.record_store import MemoryRecordStore, get_record_store


def test_login_issues_token_for_owner(client, monkeypatch):
    monkeypatch.setattr(settings, "owner_username", "admin")
    monkeypatch.setattr(settings, "owner_password_hash", "")
    monkeypatch.setattr(settings, "owner_password", "admin123")

    response = client.post("/api/v1/auth/login", json={"username": "admin", "password": "admin123"})

    assert response.status_code == 200
    token = response.json()["access_token"]
    assert response.json()["token_type"] == "bearer"
    listed = client.get("/api/v1/habits/2024-01-05", headers={"Authorization": f"Bearer {token}"})
    assert listed.status_code == 200


def test_login_rejects_bad_password(client):
    response = client.post("/api/v1/auth/login", json={"username": "admin", "password": "nope"})

    assert response.status_code == 401
    assert response.json() == {"detail": "Invalid credentials"}


def test_login_checks_configured_password_hash(client, monkeypatch):
    monkeypatch.setattr(settings, "owner_username", "admin")
    monkeypatch.setattr(settings, "owner_password_hash", hash_password("s3cret"))

    good = client.post("/api/v1/auth/login", json={"username": "admin", "password": "s3cret"})
    plain = client.post("/api/v1/auth/login", json={"username": "admin", "password": settings.owner_password})

    assert good.status_code == 200
    assert plain.status_code == 401


def test_routes_require_a_valid_token(client):
    assert client.get("/api/v1/habits/2024-01-05").status_code == 401
    assert client.get("/api/v1/trends", headers={"Authorization": "Bearer garbage"}).status_code == 401


def test_create_list_delete_round(client, auth_headers):
    created = client.post(
        "/api/v1/habits",
        json={"date": "2024-01-05", "name": "Run", "note": "5k"},
        headers=auth_headers,
    )
    assert created.status_code == 201
    habit_id = created.json()["id"]

    listed = client.get("/api/v1/habits/2024-01-05", headers=auth_headers).json()
    assert len(listed) == 1
    assert listed[0]["id"] == habit_id
    assert listed[0]["name"] == "Run"
    assert listed[0]["note"] == "5k"
    assert listed[0]["completed"] is True
    assert "owner" not in listed[0]

    assert client.delete(f"/api/v1/habits/{habit_id}", headers=auth_headers).status_code == 204
    assert client.get("/api/v1/habits/2024-01-05", headers=auth_headers).json() == []

    second = client.delete(f"/api/v1/habits/{habit_id}", headers=auth_headers)
    assert second.status_code == 404
    assert second.json() == {"detail": f"Habit {habit_id} not found"}


def test_records_are_stored_under_token_owner(client, auth_headers, app_store):
    client.post("/api/v1/habits", json={"date": "2024-01-05", "name": "Run"}, headers=auth_headers)

    assert [r.owner for r in app_store.get_by_owner(OWNER)] == [OWNER]


def test_create_validation_errors(client, auth_headers):
    bad_date = client.post("/api/v1/habits", json={"date": "2024-02-30", "name": "Run"}, headers=auth_headers)
    empty_name = client.post("/api/v1/habits", json={"date": "2024-02-01", "name": "  "}, headers=auth_headers)

    assert bad_date.status_code == 422
    assert empty_name.status_code == 422
    assert empty_name.json() == {"detail": "name must not be empty"}


def test_trends_and_suggestions(client, auth_headers):
    for payload in (
        {"date": "2024-01-05", "name": "Run", "note": "first"},
        {"date": "2024-01-05", "name": "run ", "note": "second"},
        {"date": "2024-01-06", "name": "Read", "completed": False},
    ):
        client.post("/api/v1/habits", json=payload, headers=auth_headers)

    trends = client.get("/api/v1/trends", headers=auth_headers).json()
    suggestions = client.get("/api/v1/habits/suggestions", headers=auth_headers).json()

    assert trends == [{"date": "2024-01-05", "count": 2}]
    assert suggestions == [{"name": "Read", "note": None}, {"name": "Run", "note": "first"}]


def test_range_listing(client, auth_headers):
    for day in ("2023-12-31", "2024-01-01", "2024-01-31", "2024-02-01"):
        client.post("/api/v1/habits", json={"date": day, "name": "Run"}, headers=auth_headers)

    response = client.get(
        "/api/v1/habits", params={"start": "2024-01-01", "end": "2024-01-31"}, headers=auth_headers
    )
    inverted = client.get(
        "/api/v1/habits", params={"start": "2024-01-31", "end": "2024-01-01"}, headers=auth_headers
    )

    assert [r["date"] for r in response.json()] == ["2024-01-01", "2024-01-31"]
    assert inverted.status_code == 422


class DownStore(MemoryRecordStore):
    def get_by_owner(self, owner):
        raise StoreUnavailable("Record store unavailable")


def test_store_outage_maps_to_503(app, client, auth_headers):
    app.dependency_overrides[get_record_store] = DownStore

    response = client.get("/api/v1/trends", headers=auth_headers)

    assert response.status_code == 503
    assert response.json() == {"detail": "Record store unavailable"}
