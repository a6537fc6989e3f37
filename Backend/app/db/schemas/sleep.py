from __future__ import annotations
from pydantic import BaseModel, ConfigDict
from app.db.models.sleep import SleepRecord
from app.db.schemas.common import UtcDateTime, Pagination


class SleepRecordRead(BaseModel):
    id: int
    user_id: int
    bed_time: UtcDateTime
    wakeup_time: UtcDateTime | None
    duration_in_hours: float | None
    sleeping: bool
    created_at: UtcDateTime
    updated_at: UtcDateTime
    model_config = ConfigDict(from_attributes=True)


class SleepRecordWithUserRead(SleepRecordRead):
    user_name: str

    @classmethod
    def from_record(cls, record: SleepRecord) -> "SleepRecordWithUserRead":
        return cls(
            id=record.id,
            user_id=record.user_id,
            user_name=record.user.name,
            bed_time=record.bed_time,
            wakeup_time=record.wakeup_time,
            duration_in_hours=record.duration_in_hours,
            sleeping=record.sleeping,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


class SleepRecordResponse(BaseModel):
    message: str
    sleep_record: SleepRecordRead


class FeedResponse(BaseModel):
    message: str
    sleep_records: list[SleepRecordWithUserRead]
    pagination: Pagination
