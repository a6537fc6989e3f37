# app/routes/api_v1.py
from fastapi import APIRouter
from app.db.schemas.common import ErrorResponse
from .sleep_records import router as sleep_records_router
from .follows import router as follows_router

router = APIRouter(
    prefix="/api/v1",
    responses={
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
router.include_router(sleep_records_router)   # /api/v1/sleep_records
router.include_router(follows_router)         # /api/v1/follows, /api/v1/follows/sleep_records
