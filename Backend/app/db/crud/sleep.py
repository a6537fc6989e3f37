import logging
from datetime import datetime
from typing import NamedTuple, Optional
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import UnprocessableError
from app.db.models.sleep import SleepRecord
from app.db.models.user import User
from app.utils.clock import utcnow

logger = logging.getLogger(__name__)

CREATED = "created"
UPDATED = "updated"


class SleepToggle(NamedTuple):
    record: SleepRecord
    status: str


def get_latest_sleep_record(db: Session, *, user_id: int) -> Optional[SleepRecord]:
    """Most recently created record for the user."""
    stmt = (
        select(SleepRecord)
        .where(SleepRecord.user_id == user_id)
        .order_by(SleepRecord.created_at.desc(), SleepRecord.id.desc())
        .limit(1)
    )
    return db.execute(stmt).scalar_one_or_none()


def get_open_sleep_records(db: Session, *, user_id: int) -> list[SleepRecord]:
    stmt = select(SleepRecord).where(
        SleepRecord.user_id == user_id,
        SleepRecord.wakeup_time.is_(None),
    )
    return list(db.execute(stmt).scalars().all())


def create_sleep_record(
    db: Session,
    *,
    user_id: int,
    bed_time: datetime,
    wakeup_time: Optional[datetime] = None,
    created_at: Optional[datetime] = None,
) -> SleepRecord:
    db_obj = SleepRecord(user_id=user_id, bed_time=bed_time, wakeup_time=wakeup_time)
    if created_at is not None:
        db_obj.created_at = created_at
        db_obj.updated_at = created_at
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj


def toggle_sleep_record(db: Session, *, user: User, now: Optional[datetime] = None) -> SleepToggle:
    """
    Flip the user between awake and asleep.

    If the latest record is still open it is closed with ``wakeup_time = now``
    (status ``updated``); otherwise a new open record starting at ``now`` is
    created (status ``created``).
    """
    now = now or utcnow()
    latest = get_latest_sleep_record(db, user_id=user.id)

    if latest is not None and latest.sleeping:
        latest.wakeup_time = now
        latest.updated_at = now
        db.add(latest)
        db.commit()
        db.refresh(latest)
        logger.info("User %s woke up, sleep record %s closed", user.id, latest.id)
        return SleepToggle(latest, UPDATED)

    record = SleepRecord(user_id=user.id, bed_time=now, created_at=now, updated_at=now)
    db.add(record)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning("User %s already has an open sleep record, toggle rejected", user.id)
        raise UnprocessableError(
            "User already has a sleep record in progress",
            error="Unable to record sleep",
        )
    db.refresh(record)
    logger.info("User %s went to bed, sleep record %s opened", user.id, record.id)
    return SleepToggle(record, CREATED)
