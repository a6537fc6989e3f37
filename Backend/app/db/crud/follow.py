import logging
import math
from dataclasses import dataclass
from typing import Any, Optional
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.core.errors import NotFoundError, UnprocessableError
from app.db.models.follow import Follow
from app.db.models.sleep import SleepRecord
from app.db.models.user import User
from app.utils.params import parse_int

logger = logging.getLogger(__name__)

ALREADY_FOLLOWING = "Follower already following this user"
CANNOT_FOLLOW_SELF = "Followed cannot follow yourself"


@dataclass
class FeedPage:
    records: list[SleepRecord]
    page: int
    per_page: int
    total_count: int
    has_followees: bool = True

    @property
    def total_pages(self) -> int:
        if self.total_count == 0:
            return 0
        return math.ceil(self.total_count / self.per_page)


def get_follow(db: Session, *, follower_id: int, followed_id: int) -> Optional[Follow]:
    stmt = (
        select(Follow)
        .where(Follow.follower_id == follower_id, Follow.followed_id == followed_id)
        .options(joinedload(Follow.follower), joinedload(Follow.followed))
    )
    return db.execute(stmt).scalar_one_or_none()


def _resolve_followed(db: Session, followed_id: Any, *, action: str) -> User:
    followed = None
    parsed = parse_int(followed_id)
    if parsed is not None:
        followed = db.get(User, parsed)
    if followed is None:
        raise NotFoundError(f"The user you want to {action} does not exist", error="User not found")
    return followed


def create_follow(db: Session, *, follower: User, followed_id: Any) -> Follow:
    followed = _resolve_followed(db, followed_id, action="follow")

    if followed.id == follower.id:
        raise UnprocessableError(CANNOT_FOLLOW_SELF, error="Unable to follow user")
    if get_follow(db, follower_id=follower.id, followed_id=followed.id):
        raise UnprocessableError(ALREADY_FOLLOWING, error="Unable to follow user")

    follow = Follow(follower_id=follower.id, followed_id=followed.id)
    db.add(follow)
    try:
        db.commit()
    except IntegrityError:
        # lost a race against an identical request
        db.rollback()
        logger.warning("Duplicate follow %s -> %s rejected by constraint", follower.id, followed.id)
        raise UnprocessableError(ALREADY_FOLLOWING, error="Unable to follow user")
    db.refresh(follow)
    logger.info("User %s followed user %s", follower.id, followed.id)
    return follow


def destroy_follow(db: Session, *, follower: User, followed_id: Any) -> Follow:
    followed = _resolve_followed(db, followed_id, action="unfollow")

    follow = get_follow(db, follower_id=follower.id, followed_id=followed.id)
    if follow is None:
        raise NotFoundError("You are not following this user", error="Follow relationship not found")

    db.delete(follow)
    db.commit()
    logger.info("User %s unfollowed user %s", follower.id, followed.id)
    return follow


def get_followee_ids(db: Session, *, user_id: int) -> list[int]:
    stmt = select(Follow.followed_id).where(Follow.follower_id == user_id)
    return list(db.execute(stmt).scalars().all())


def get_followed_sleep_records(db: Session, *, user: User, page: int, limit: int) -> FeedPage:
    """
    Sleep records of every user ``user`` follows, newest bed time first,
    sliced to one page.
    """
    followee_ids = get_followee_ids(db, user_id=user.id)
    if not followee_ids:
        return FeedPage(records=[], page=page, per_page=limit, total_count=0, has_followees=False)

    count_stmt = select(func.count(SleepRecord.id)).where(SleepRecord.user_id.in_(followee_ids))
    total_count = db.execute(count_stmt).scalar_one()

    stmt = (
        select(SleepRecord)
        .where(SleepRecord.user_id.in_(followee_ids))
        .options(joinedload(SleepRecord.user))
        .order_by(SleepRecord.bed_time.desc(), SleepRecord.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    records = list(db.execute(stmt).scalars().all())
    return FeedPage(records=records, page=page, per_page=limit, total_count=total_count)
