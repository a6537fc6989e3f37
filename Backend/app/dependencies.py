import json
import logging
from typing import Any
from fastapi import Depends, Request
from fastapi.security import HTTPBasicCredentials
from sqlalchemy.orm import Session

from app.auth.basic import basic_scheme, verify_basic_credentials
from app.config import API_REQUIRE_BASIC_AUTH
from app.core.errors import UnauthorizedError, UnprocessableError
from app.db.crud.user import get_user
from app.db.engine import SessionLocal
from app.db.models.user import User
from app.utils.params import parse_int

logger = logging.getLogger(__name__)

INVALID_USER_MESSAGE = "Please provide a valid user_id parameter"


# --- Database Dependency ---
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


async def get_request_params(request: Request) -> dict[str, Any]:
    """Query string merged with a JSON object body; body keys win."""
    params: dict[str, Any] = dict(request.query_params)
    body = await request.body()
    if body.strip():
        try:
            data = json.loads(body)
        except ValueError:
            raise UnprocessableError("Request body is not valid JSON", error="Malformed request")
        if isinstance(data, dict):
            params.update(data)
    return params


# --- Acting user for /api/v1 ---
def get_current_user(
    params: dict[str, Any] = Depends(get_request_params),
    creds: HTTPBasicCredentials | None = Depends(basic_scheme),
    db: Session = Depends(get_db),
) -> User:
    requested_id = parse_int(params.get("user_id"))

    if creds is not None or API_REQUIRE_BASIC_AUTH:
        authed = verify_basic_credentials(db, creds)
        if requested_id is not None and requested_id != authed.id:
            logger.warning("User %s attempted to act as user_id=%s", authed.id, requested_id)
            raise UnauthorizedError("Credentials do not match user_id", error="User not found")
        return authed

    user = get_user(db, requested_id)
    if not user:
        raise UnauthorizedError(INVALID_USER_MESSAGE, error="User not found")
    return user


def get_authenticated_user(
    creds: HTTPBasicCredentials | None = Depends(basic_scheme),
    db: Session = Depends(get_db),
) -> User:
    return verify_basic_credentials(db, creds)
