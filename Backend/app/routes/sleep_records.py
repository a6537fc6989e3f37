from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.dependencies import get_db, get_current_user
from app.db.crud.sleep import toggle_sleep_record, CREATED
from app.db.models.user import User
from app.db.schemas.sleep import SleepRecordRead, SleepRecordResponse
from app.utils import clock

router = APIRouter(prefix="/sleep_records", tags=["Sleep Records"])


@router.post("", response_model=SleepRecordResponse, status_code=status.HTTP_201_CREATED)
def clock_in_or_out(
    response: Response,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Start a sleep session, or end the one in progress."""
    record, result = toggle_sleep_record(db, user=user, now=clock.utcnow())
    if result == CREATED:
        message = "Sleep record created successfully"
    else:
        response.status_code = status.HTTP_200_OK
        message = "Wakeup time updated successfully"
    return SleepRecordResponse(message=message, sleep_record=SleepRecordRead.model_validate(record))
