from __future__ import annotations

from datetime import datetime

from sqlalchemy import func, select

from app.db.crud.follow import create_follow
from app.db.crud.sleep import create_sleep_record
from app.db.models import Follow


def _follow_count(db) -> int:
    db.expire_all()
    return db.execute(select(func.count(Follow.id))).scalar_one()


def _unfollow(api_client, payload: dict):
    return api_client.request("DELETE", "/api/v1/follows", json=payload)


def test_follow_requires_valid_user(api_client, make_user) -> None:
    followed = make_user()
    r = api_client.post("/api/v1/follows", json={"followed_id": followed.id})
    assert r.status_code == 401
    assert r.json() == {
        "error": "User not found",
        "message": "Please provide a valid user_id parameter",
    }


def test_follow_unknown_followed(api_client, make_user) -> None:
    follower = make_user()
    for payload in ({"user_id": follower.id}, {"user_id": follower.id, "followed_id": 999999}):
        r = api_client.post("/api/v1/follows", json=payload)
        assert r.status_code == 404
        assert r.json() == {
            "error": "User not found",
            "message": "The user you want to follow does not exist",
        }


def test_follow_flow(api_client, db, make_user) -> None:
    follower, followed = make_user(name="Alice"), make_user(name="Bob")

    r = api_client.post("/api/v1/follows", json={"user_id": follower.id, "followed_id": followed.id})
    assert r.status_code == 201
    body = r.json()
    assert body["message"] == "Successfully followed user"
    follow = body["follow"]
    assert follow["follower_id"] == follower.id
    assert follow["followed_id"] == followed.id
    assert follow["follower_name"] == "Alice"
    assert follow["followed_name"] == "Bob"
    assert follow["id"]
    assert follow["created_at"].endswith("Z")

    again = api_client.post("/api/v1/follows", json={"user_id": follower.id, "followed_id": followed.id})
    assert again.status_code == 422
    assert again.json() == {
        "error": "Unable to follow user",
        "message": "Follower already following this user",
    }
    assert _follow_count(db) == 1


def test_self_follow(api_client, db, make_user) -> None:
    user = make_user()
    r = api_client.post("/api/v1/follows", json={"user_id": user.id, "followed_id": user.id})
    assert r.status_code == 422
    assert r.json() == {
        "error": "Unable to follow user",
        "message": "Followed cannot follow yourself",
    }
    assert _follow_count(db) == 0


def test_unfollow(api_client, db, make_user) -> None:
    follower, followed = make_user(), make_user()
    create_follow(db, follower=follower, followed_id=followed.id)

    r = _unfollow(api_client, {"user_id": follower.id, "followed_id": followed.id})
    assert r.status_code == 200
    assert r.json()["message"] == "Successfully unfollowed user"
    assert r.json()["follow"]["followed_id"] == followed.id
    assert _follow_count(db) == 0

    missing = _unfollow(api_client, {"user_id": follower.id, "followed_id": followed.id})
    assert missing.status_code == 404
    assert missing.json() == {
        "error": "Follow relationship not found",
        "message": "You are not following this user",
    }


def test_unfollow_unknown_user(api_client, make_user) -> None:
    follower = make_user()
    r = _unfollow(api_client, {"user_id": follower.id, "followed_id": 999999})
    assert r.status_code == 404
    assert r.json()["message"] == "The user you want to unfollow does not exist"


def test_feed_without_followees(api_client, make_user) -> None:
    user = make_user()
    r = api_client.get("/api/v1/follows/sleep_records", params={"user_id": user.id})
    assert r.status_code == 200
    assert r.json() == {
        "message": "No sleep records found",
        "sleep_records": [],
        "pagination": {"current_page": 1, "per_page": 25, "total_pages": 0, "total_count": 0},
    }


def test_feed_pages_through_followees(api_client, db, make_user) -> None:
    a, b, c = make_user(name="A"), make_user(name="B"), make_user(name="C")
    create_follow(db, follower=a, followed_id=b.id)
    create_follow(db, follower=a, followed_id=c.id)
    create_sleep_record(
        db, user_id=b.id, bed_time=datetime(2023, 1, 1, 22, 0), wakeup_time=datetime(2023, 1, 2, 6, 0)
    )
    create_sleep_record(db, user_id=c.id, bed_time=datetime(2023, 1, 2, 0, 0))

    page1 = api_client.get("/api/v1/follows/sleep_records", params={"user_id": a.id, "limit": 1, "page": 1})
    assert page1.status_code == 200
    body = page1.json()
    assert body["message"] == "Sleep records retrieved successfully"
    assert body["pagination"] == {"current_page": 1, "per_page": 1, "total_pages": 2, "total_count": 2}
    [first] = body["sleep_records"]
    assert first["user_name"] == "C"
    assert first["bed_time"] == "2023-01-02T00:00:00Z"
    assert first["sleeping"] is True
    assert first["duration_in_hours"] is None

    page2 = api_client.get("/api/v1/follows/sleep_records", params={"user_id": a.id, "limit": 1, "page": 2})
    [second] = page2.json()["sleep_records"]
    assert second["user_name"] == "B"
    assert second["wakeup_time"] == "2023-01-02T06:00:00Z"
    assert second["duration_in_hours"] == 8.0
    assert second["sleeping"] is False


def test_feed_clamps_bad_pagination_params(api_client, db, make_user) -> None:
    a, b = make_user(), make_user()
    create_follow(db, follower=a, followed_id=b.id)
    create_sleep_record(db, user_id=b.id, bed_time=datetime(2023, 1, 1, 22, 0))

    r = api_client.get("/api/v1/follows/sleep_records", params={"user_id": a.id, "page": -1, "limit": 150})
    assert r.status_code == 200
    pagination = r.json()["pagination"]
    assert pagination["current_page"] == 1
    assert pagination["per_page"] == 100
    assert pagination["total_pages"] == 1


def test_feed_followees_without_records(api_client, db, make_user) -> None:
    a, b = make_user(), make_user()
    create_follow(db, follower=a, followed_id=b.id)

    r = api_client.get("/api/v1/follows/sleep_records", params={"user_id": a.id})
    assert r.json()["message"] == "Sleep records retrieved successfully"
    assert r.json()["pagination"]["total_pages"] == 0


def test_followed_id_wider_than_64_bits_is_not_found(api_client, db, make_user) -> None:
    follower = make_user()
    r = api_client.post("/api/v1/follows", json={"user_id": follower.id, "followed_id": 10**20})
    assert r.status_code == 404
    assert r.json()["message"] == "The user you want to follow does not exist"

    r = _unfollow(api_client, {"user_id": follower.id, "followed_id": str(10**20)})
    assert r.status_code == 404
    assert _follow_count(db) == 0


def test_feed_page_far_past_the_end_is_empty(api_client, db, make_user) -> None:
    a, b = make_user(), make_user()
    create_follow(db, follower=a, followed_id=b.id)
    create_sleep_record(db, user_id=b.id, bed_time=datetime(2023, 1, 1, 22, 0))

    r = api_client.get(
        "/api/v1/follows/sleep_records",
        params={"user_id": a.id, "page": str(10**20), "limit": 100},
    )
    assert r.status_code == 200
    body = r.json()
    assert body["sleep_records"] == []
    assert body["pagination"]["total_count"] == 1
    assert body["pagination"]["current_page"] > 1
