"""
Synthetic data for local development and load testing.

Users get generated names, sleep records are spread over the last 30 days
with 6-10 hour sessions, and follow edges are unique non-self pairs.
"""
import logging
import random
from datetime import datetime, timedelta
from typing import Callable, Optional
from sqlalchemy import delete, func, insert, select
from sqlalchemy.orm import Session

from app.db.models.follow import Follow
from app.db.models.sleep import SleepRecord
from app.db.models.user import User
from app.utils.clock import utcnow
from app.utils.passwords import hash_password

logger = logging.getLogger(__name__)

FIRST_NAMES = [
    "Ava", "Ben", "Chloe", "Daniel", "Elena", "Felix", "Grace", "Hiro", "Isla", "Jonah",
    "Kira", "Liam", "Maya", "Noah", "Olive", "Priya", "Quinn", "Rosa", "Sam", "Tariq",
]
LAST_NAMES = [
    "Anders", "Brooks", "Castillo", "Dubois", "Ekwueme", "Fischer", "Garcia", "Haddad",
    "Ivanova", "Jensen", "Kowalski", "Lopez", "Moreau", "Nakamura", "Okafor", "Petrov",
]
DEFAULT_PASSWORD = "password123"


def clear_database(db: Session) -> None:
    db.execute(delete(Follow))
    db.execute(delete(SleepRecord))
    db.execute(delete(User))
    db.commit()


def _batches(total: int, size: int):
    for start in range(0, total, size):
        yield range(start, min(start + size, total))


def seed_users(db: Session, count: int, *, batch_size: int, rng: random.Random, now: datetime) -> list[int]:
    password_hash = hash_password(DEFAULT_PASSWORD)
    for batch in _batches(count, batch_size):
        rows = []
        for i in batch:
            created = now - timedelta(seconds=rng.randint(0, 365 * 24 * 3600))
            rows.append({
                "name": f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}",
                "email": f"user{i + 1}@example.com",
                "password_hash": password_hash,
                "created_at": created,
                "updated_at": now,
            })
        db.execute(insert(User), rows)
        db.commit()
    return list(db.execute(select(User.id)).scalars().all())


def seed_sleep_records(
    db: Session,
    count: int,
    user_ids: list[int],
    *,
    batch_size: int,
    rng: random.Random,
    now: datetime,
    open_ratio: float = 0.05,
) -> int:
    """
    Completed sessions start between 30 days and 10 hours ago, so every one of
    them has woken up by ``now``. A share of users then gets an open session
    from the last 8 hours, which is always their latest record.
    """
    if not user_ids:
        return 0
    inserted = 0
    for batch in _batches(count, batch_size):
        rows = []
        for _ in batch:
            bed_time = now - timedelta(seconds=rng.randint(10 * 3600, 30 * 24 * 3600))
            wakeup_time = bed_time + timedelta(minutes=rng.randint(6 * 60, 10 * 60))
            rows.append({
                "user_id": rng.choice(user_ids),
                "bed_time": bed_time,
                "wakeup_time": wakeup_time,
                "created_at": bed_time,
                "updated_at": wakeup_time,
            })
        db.execute(insert(SleepRecord), rows)
        db.commit()
        inserted += len(rows)

    sleeping = rng.sample(user_ids, int(len(user_ids) * open_ratio))
    for batch in _batches(len(sleeping), batch_size):
        rows = []
        for i in batch:
            bed_time = now - timedelta(seconds=rng.randint(0, 8 * 3600))
            rows.append({
                "user_id": sleeping[i],
                "bed_time": bed_time,
                "wakeup_time": None,
                "created_at": bed_time,
                "updated_at": bed_time,
            })
        db.execute(insert(SleepRecord), rows)
        db.commit()
        inserted += len(rows)
    return inserted


def seed_follows(db: Session, count: int, user_ids: list[int], *, batch_size: int, rng: random.Random) -> int:
    max_edges = len(user_ids) * (len(user_ids) - 1)
    target = min(count, max_edges)
    seen: set[tuple[int, int]] = set()
    pending: list[dict] = []
    inserted = 0
    while len(seen) < target:
        follower_id, followed_id = rng.sample(user_ids, 2)
        if (follower_id, followed_id) in seen:
            continue
        seen.add((follower_id, followed_id))
        pending.append({"follower_id": follower_id, "followed_id": followed_id})
        if len(pending) >= batch_size:
            db.execute(insert(Follow), pending)
            db.commit()
            inserted += len(pending)
            pending = []
    if pending:
        db.execute(insert(Follow), pending)
        db.commit()
        inserted += len(pending)
    return inserted


def seed_database(
    db: Session,
    *,
    users: int,
    sleep_records: int,
    follows: int,
    batch_size: int = 1_000,
    rng: Optional[random.Random] = None,
    progress: Callable[[str], None] = logger.info,
) -> dict:
    rng = rng or random.Random()
    now = utcnow()

    progress("Clearing existing data...")
    clear_database(db)

    progress(f"Seeding {users} users...")
    user_ids = seed_users(db, users, batch_size=batch_size, rng=rng, now=now)

    progress(f"Seeding {sleep_records} sleep records...")
    record_count = seed_sleep_records(db, sleep_records, user_ids, batch_size=batch_size, rng=rng, now=now)

    progress(f"Seeding {follows} follows...")
    follow_count = seed_follows(db, follows, user_ids, batch_size=batch_size, rng=rng)

    return {"users": len(user_ids), "sleep_records": record_count, "follows": follow_count}


def summarize(db: Session) -> dict:
    """Counts, per-user averages and a sample user's relationships."""
    user_count = db.execute(select(func.count(User.id))).scalar_one()
    record_count = db.execute(select(func.count(SleepRecord.id))).scalar_one()
    follow_count = db.execute(select(func.count(Follow.id))).scalar_one()
    open_count = db.execute(
        select(func.count(SleepRecord.id)).where(SleepRecord.wakeup_time.is_(None))
    ).scalar_one()

    summary = {
        "users": user_count,
        "sleep_records": record_count,
        "follows": follow_count,
        "open_sleep_records": open_count,
        "avg_sleep_records_per_user": round(record_count / user_count, 2) if user_count else 0.0,
        "avg_follows_per_user": round(follow_count / user_count, 2) if user_count else 0.0,
        "sample_user": None,
    }

    sample = db.execute(select(User).order_by(User.id).limit(1)).scalar_one_or_none()
    if sample is not None:
        summary["sample_user"] = {
            "id": sample.id,
            "name": sample.name,
            "sleep_records": len(sample.sleep_records),
            "following": len(sample.following),
            "followers": len(sample.followers),
        }
    return summary
