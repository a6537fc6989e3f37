from __future__ import annotations
from datetime import datetime
from typing import TYPE_CHECKING
from sqlalchemy import DateTime, Integer, ForeignKey, Index, text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.db.base import Base
from app.utils.clock import utcnow

if TYPE_CHECKING:
    from app.db.models.user import User


class SleepRecord(Base):
    __tablename__ = "sleep_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer,
                                         ForeignKey("users.id", ondelete="CASCADE"),
                                         index=True, nullable=False)
    bed_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    wakeup_time: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    user: Mapped["User"] = relationship("User", back_populates="sleep_records")

    __table_args__ = (
        Index("ix_sleep_records_bed_time", "bed_time"),
        # one open (not yet woken up) record per user
        Index(
            "uq_sleep_records_open_per_user",
            "user_id",
            unique=True,
            sqlite_where=text("wakeup_time IS NULL"),
            postgresql_where=text("wakeup_time IS NULL"),
        ),
    )

    @property
    def sleeping(self) -> bool:
        return self.wakeup_time is None

    @property
    def duration_in_hours(self) -> float | None:
        if self.bed_time is None or self.wakeup_time is None:
            return None
        return (self.wakeup_time - self.bed_time).total_seconds() / 3600.0
