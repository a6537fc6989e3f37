from __future__ import annotations
from pydantic import BaseModel
from app.db.models.follow import Follow
from app.db.schemas.common import UtcDateTime


class FollowRead(BaseModel):
    id: int
    follower_id: int
    followed_id: int
    follower_name: str
    followed_name: str
    created_at: UtcDateTime
    updated_at: UtcDateTime

    @classmethod
    def from_follow(cls, follow: Follow) -> "FollowRead":
        return cls(
            id=follow.id,
            follower_id=follow.follower_id,
            followed_id=follow.followed_id,
            follower_name=follow.follower.name,
            followed_name=follow.followed.name,
            created_at=follow.created_at,
            updated_at=follow.updated_at,
        )


class FollowResponse(BaseModel):
    message: str
    follow: FollowRead
