from datetime import datetime
from typing import Annotated
from pydantic import BaseModel, PlainSerializer
from app.utils.clock import isoformat_z

# Rendered as e.g. "2023-12-25T22:00:00Z"
UtcDateTime = Annotated[datetime, PlainSerializer(isoformat_z, return_type=str)]


class Pagination(BaseModel):
    current_page: int
    per_page: int
    total_pages: int
    total_count: int


class ErrorResponse(BaseModel):
    error: str
    message: str
