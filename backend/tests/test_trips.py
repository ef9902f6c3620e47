from __future__ import annotations

from datetime import date

from sqlalchemy.exc import OperationalError

from trippino.core.db import session_scope
from trippino.models.orm import City, Transportation
from trippino.repositories import TripRepository

from backend.tests.utils.db import auth_headers, create_session, create_user


def _create_trip(client, headers, name: str = "Summer loop") -> int:
    resp = client.post("/api/trips", json={"name": name}, headers=headers)
    assert resp.status_code == 200
    return resp.json()["data"]["trip_id"]


def test_trip_crud_flow(client, user_headers):
    payload = {"name": "Integration trip", "start_date": date.today().isoformat()}

    create_resp = client.post("/api/trips", json=payload, headers=user_headers)
    assert create_resp.status_code == 200
    created = create_resp.json()["data"]
    trip_id = created["trip_id"]
    assert created["trip"]["name"] == "Integration trip"

    client.post(
        f"/api/trips/{trip_id}/cities",
        json={"name": "Lisbon"},
        headers=user_headers,
    )

    list_resp = client.get("/api/trips", headers=user_headers)
    assert list_resp.status_code == 200
    trips = list_resp.json()["data"]
    assert trips[0]["name"] == "Integration trip"
    assert trips[0]["city_count"] == 1

    detail_resp = client.get(f"/api/trips/{trip_id}", headers=user_headers)
    assert detail_resp.status_code == 200
    detail = detail_resp.json()["data"]
    assert [city["name"] for city in detail["cities"]] == ["Lisbon"]
    assert detail["transportation"] == []

    update_resp = client.put(
        f"/api/trips/{trip_id}",
        json={"name": "Renamed trip", "start_date": ""},
        headers=user_headers,
    )
    assert update_resp.status_code == 200
    updated = update_resp.json()["data"]
    assert updated["name"] == "Renamed trip"
    assert updated["start_date"] is None

    delete_resp = client.delete(f"/api/trips/{trip_id}", headers=user_headers)
    assert delete_resp.status_code == 200
    assert delete_resp.json()["data"] == {"deleted": True}

    missing_resp = client.get(f"/api/trips/{trip_id}", headers=user_headers)
    assert missing_resp.status_code == 404
    assert missing_resp.json()["code"] == 14004


def test_trips_require_session(client):
    resp = client.get("/api/trips")
    assert resp.status_code == 401
    body = resp.json()
    assert body["code"] == 14010
    assert body["msg"] == "not authenticated"

    bad = client.get("/api/trips", headers=auth_headers("no-such-session"))
    assert bad.status_code == 401


def test_session_lookup_storage_failure_is_enveloped(
    client, user_headers, monkeypatch
):
    def _boom(self, sid):
        raise OperationalError("SELECT sessions", {}, Exception("database is locked"))

    monkeypatch.setattr(TripRepository, "get_session_owner", _boom)

    resp = client.get("/api/trips", headers=user_headers)

    assert resp.status_code == 500
    assert resp.json() == {"code": 14500, "msg": "server error", "data": None}


def test_session_cookie_is_accepted(client):
    sid = create_session(create_user())
    client.cookies.set("trippino_sid", sid)
    try:
        resp = client.get("/api/trips")
    finally:
        client.cookies.clear()
    assert resp.status_code == 200
    assert resp.json()["data"] == []


def test_foreign_trip_looks_missing(client, user_headers):
    trip_id = _create_trip(client, user_headers)
    other_headers = auth_headers(create_session(create_user()))

    foreign = client.get(f"/api/trips/{trip_id}", headers=other_headers)
    missing = client.get("/api/trips/999999", headers=other_headers)

    assert foreign.status_code == missing.status_code == 404
    assert foreign.json() == missing.json()

    delete_resp = client.delete(f"/api/trips/{trip_id}", headers=other_headers)
    assert delete_resp.status_code == 404
    assert client.get(f"/api/trips/{trip_id}", headers=user_headers).status_code == 200


def test_trip_validation_errors(client, user_headers):
    blank = client.post("/api/trips", json={"name": "   "}, headers=user_headers)
    assert blank.status_code == 400
    assert blank.json()["code"] == 14001

    malformed = client.post("/api/trips", json={}, headers=user_headers)
    assert malformed.status_code == 400
    assert malformed.json()["code"] == 14001
    assert "name" in malformed.json()["msg"]

    trip_id = _create_trip(client, user_headers)
    empty = client.put(f"/api/trips/{trip_id}", json={}, headers=user_headers)
    assert empty.status_code == 400
    assert empty.json()["code"] == 14002


def test_delete_trip_cascades_cities_and_legs(client, user_headers):
    trip_id = _create_trip(client, user_headers)
    first = client.post(
        f"/api/trips/{trip_id}/cities", json={"name": "Porto"}, headers=user_headers
    ).json()["data"]
    second = client.post(
        f"/api/trips/{trip_id}/cities", json={"name": "Madrid"}, headers=user_headers
    ).json()["data"]
    client.put(
        f"/api/trips/{trip_id}/cities/{first['id']}/transportation",
        json={"to_city_id": second["id"], "mode": "train"},
        headers=user_headers,
    )

    assert client.delete(f"/api/trips/{trip_id}", headers=user_headers).status_code == 200

    with session_scope() as session:
        assert session.query(City).filter_by(trip_id=trip_id).count() == 0
        assert session.query(Transportation).filter_by(trip_id=trip_id).count() == 0
