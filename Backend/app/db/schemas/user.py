from pydantic import BaseModel, ConfigDict, Field, field_validator
from app.db.schemas.common import UtcDateTime

# ----------- User Schemas -----------

class UserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=6, max_length=128)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name can't be blank")
        return v

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, v: str) -> str:
        v = v.strip().lower()
        local, _, domain = v.partition("@")
        if not local or "." not in domain:
            raise ValueError("Email is invalid")
        return v


class UserRead(BaseModel):
    id: int
    name: str
    email: str
    created_at: UtcDateTime
    updated_at: UtcDateTime
    model_config = ConfigDict(from_attributes=True)


class UserSummary(BaseModel):
    id: int
    name: str
    email: str
    model_config = ConfigDict(from_attributes=True)


class UserResponse(BaseModel):
    message: str
    user: UserRead


class AuthCheckResponse(BaseModel):
    message: str
    user: UserSummary
