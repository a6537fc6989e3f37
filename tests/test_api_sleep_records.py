from __future__ import annotations

from datetime import datetime, timedelta

from sqlalchemy import func, select

from app.db.models import SleepRecord


def _freeze(monkeypatch, when: datetime) -> None:
    monkeypatch.setattr("app.utils.clock.utcnow", lambda: when)


def _record_count(db) -> int:
    return db.execute(select(func.count(SleepRecord.id))).scalar_one()


def test_missing_user_id_is_unauthorized(api_client) -> None:
    r = api_client.post("/api/v1/sleep_records", json={})
    assert r.status_code == 401
    assert r.json() == {
        "error": "User not found",
        "message": "Please provide a valid user_id parameter",
    }


def test_unknown_user_is_unauthorized(api_client) -> None:
    r = api_client.post("/api/v1/sleep_records", json={"user_id": 999999})
    assert r.status_code == 401
    assert r.json()["error"] == "User not found"


def test_first_call_creates_open_record(api_client, db, make_user, monkeypatch) -> None:
    user = make_user()
    _freeze(monkeypatch, datetime(2023, 12, 25, 22, 0, 0))

    r = api_client.post("/api/v1/sleep_records", json={"user_id": user.id})
    assert r.status_code == 201
    body = r.json()
    assert body["message"] == "Sleep record created successfully"
    record = body["sleep_record"]
    assert record["user_id"] == user.id
    assert record["bed_time"] == "2023-12-25T22:00:00Z"
    assert record["wakeup_time"] is None
    assert record["sleeping"] is True
    assert record["duration_in_hours"] is None
    assert record["id"]
    assert record["created_at"] and record["updated_at"]
    assert _record_count(db) == 1


def test_second_call_sets_wakeup_time(api_client, db, make_user, monkeypatch) -> None:
    user = make_user()
    bed = datetime(2023, 12, 25, 22, 0, 0)
    _freeze(monkeypatch, bed)
    created = api_client.post("/api/v1/sleep_records", json={"user_id": user.id}).json()["sleep_record"]

    _freeze(monkeypatch, bed + timedelta(hours=8))
    r = api_client.post("/api/v1/sleep_records", json={"user_id": user.id})
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Wakeup time updated successfully"
    record = body["sleep_record"]
    assert record["id"] == created["id"]
    assert record["bed_time"] == "2023-12-25T22:00:00Z"
    assert record["wakeup_time"] == "2023-12-26T06:00:00Z"
    assert record["sleeping"] is False
    assert record["duration_in_hours"] == 8.0
    assert _record_count(db) == 1


def test_user_id_in_query_string(api_client, make_user) -> None:
    user = make_user()
    r = api_client.post(f"/api/v1/sleep_records?user_id={user.id}")
    assert r.status_code == 201


def test_alternating_calls_keep_single_open_record(api_client, db, make_user, monkeypatch) -> None:
    user = make_user()
    start = datetime(2024, 1, 1, 21, 0, 0)
    codes = []
    for i in range(5):
        _freeze(monkeypatch, start + timedelta(hours=i))
        codes.append(api_client.post("/api/v1/sleep_records", json={"user_id": user.id}).status_code)

    assert codes == [201, 200, 201, 200, 201]
    db.expire_all()
    open_records = db.execute(
        select(SleepRecord).where(SleepRecord.user_id == user.id, SleepRecord.wakeup_time.is_(None))
    ).scalars().all()
    assert len(open_records) == 1


def test_malformed_json_body(api_client, make_user) -> None:
    make_user()
    r = api_client.post(
        "/api/v1/sleep_records",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert r.status_code == 422
    assert r.json()["error"] == "Malformed request"


def test_user_id_wider_than_64_bits_is_unauthorized(api_client) -> None:
    r = api_client.post("/api/v1/sleep_records", json={"user_id": 10**20})
    assert r.status_code == 401
    assert r.json()["message"] == "Please provide a valid user_id parameter"
