from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.dependencies import get_db
from app.db.crud.user import create_user
from app.db.schemas.user import UserCreate, UserRead, UserResponse

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register_user(payload: UserCreate, db: Session = Depends(get_db)):
    user = create_user(db, payload)
    return UserResponse(message="User registered successfully", user=UserRead.model_validate(user))
