from typing import Any
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.dependencies import get_db, get_current_user, get_request_params
from app.db.crud.follow import create_follow, destroy_follow, get_followed_sleep_records
from app.db.models.user import User
from app.db.schemas.common import Pagination
from app.db.schemas.follow import FollowRead, FollowResponse
from app.db.schemas.sleep import FeedResponse, SleepRecordWithUserRead
from app.utils.params import normalize_page, normalize_limit

router = APIRouter(prefix="/follows", tags=["Follows"])


@router.post("", response_model=FollowResponse, status_code=status.HTTP_201_CREATED)
def follow_user(
    params: dict[str, Any] = Depends(get_request_params),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    follow = create_follow(db, follower=user, followed_id=params.get("followed_id"))
    return FollowResponse(message="Successfully followed user", follow=FollowRead.from_follow(follow))


@router.delete("", response_model=FollowResponse)
def unfollow_user(
    params: dict[str, Any] = Depends(get_request_params),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    follow = destroy_follow(db, follower=user, followed_id=params.get("followed_id"))
    return FollowResponse(message="Successfully unfollowed user", follow=FollowRead.from_follow(follow))


@router.get("/sleep_records", response_model=FeedResponse)
def followed_sleep_records(
    params: dict[str, Any] = Depends(get_request_params),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    page = normalize_page(params.get("page"))
    limit = normalize_limit(params.get("limit"))

    feed = get_followed_sleep_records(db, user=user, page=page, limit=limit)
    message = "Sleep records retrieved successfully" if feed.has_followees else "No sleep records found"
    return FeedResponse(
        message=message,
        sleep_records=[SleepRecordWithUserRead.from_record(r) for r in feed.records],
        pagination=Pagination(
            current_page=feed.page,
            per_page=feed.per_page,
            total_pages=feed.total_pages,
            total_count=feed.total_count,
        ),
    )
