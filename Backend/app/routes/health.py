from fastapi import APIRouter, Depends

from app.db.models.user import User
from app.db.schemas.user import AuthCheckResponse, UserSummary
from app.dependencies import get_authenticated_user

router = APIRouter(tags=["Health"])


@router.get("/up")
def health_check():
    return {"status": "ok"}


@router.get("/test_auth", response_model=AuthCheckResponse)
def test_auth(user: User = Depends(get_authenticated_user)):
    return AuthCheckResponse(
        message="Authentication successful!",
        user=UserSummary.model_validate(user),
    )
