# app/auth/basic.py
from fastapi import Depends
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from sqlalchemy.orm import Session

from app.core.errors import UnauthorizedError
from app.db.crud.user import authenticate
from app.db.models.user import User

REALM = "Application"

basic_scheme = HTTPBasic(auto_error=False, realm=REALM)


def challenge(message: str = "Invalid email or password") -> UnauthorizedError:
    return UnauthorizedError(
        message,
        error="HTTP Basic: Access denied",
        headers={"WWW-Authenticate": f'Basic realm="{REALM}"'},
    )


def verify_basic_credentials(db: Session, creds: HTTPBasicCredentials | None) -> User:
    """Resolve Basic credentials (email:password) to a user or raise 401."""
    if creds is None or not creds.username:
        raise challenge("Authentication credentials were not provided")
    user = authenticate(db, creds.username, creds.password)
    if user is None:
        raise challenge()
    return user
