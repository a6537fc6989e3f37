from __future__ import annotations
from datetime import datetime
from typing import TYPE_CHECKING
from sqlalchemy import DateTime, Integer, ForeignKey, UniqueConstraint, CheckConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.db.base import Base
from app.utils.clock import utcnow

if TYPE_CHECKING:
    from app.db.models.user import User


class Follow(Base):
    """
    Directed edge: ``follower`` follows ``followed``.
    The composite unique constraint doubles as the index for follower lookups.
    """
    __tablename__ = "follows"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    follower_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    followed_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    follower: Mapped["User"] = relationship("User", foreign_keys=[follower_id],
                                            back_populates="following_relationships")
    followed: Mapped["User"] = relationship("User", foreign_keys=[followed_id],
                                            back_populates="follower_relationships")

    __table_args__ = (
        UniqueConstraint("follower_id", "followed_id", name="uq_follows_follower_followed"),
        CheckConstraint("follower_id <> followed_id", name="ck_follows_not_self"),
        Index("ix_follows_followed_id", "followed_id"),
    )
