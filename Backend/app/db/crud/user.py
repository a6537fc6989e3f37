import logging
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import UnprocessableError
from app.db.models.user import User
from app.db.schemas.user import UserCreate
from app.utils.passwords import hash_password, verify_password

logger = logging.getLogger(__name__)


def get_user(db: Session, user_id: int | None) -> User | None:
    if user_id is None:
        return None
    return db.get(User, user_id)


def get_user_by_email(db: Session, email: str) -> User | None:
    stmt = select(User).where(User.email == email.strip().lower())
    return db.execute(stmt).scalar_one_or_none()


def create_user(db: Session, payload: UserCreate) -> User:
    if get_user_by_email(db, payload.email):
        raise UnprocessableError("Email has already been taken", error="Unable to register user")

    user = User(name=payload.name, email=payload.email, password_hash=hash_password(payload.password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning("Concurrent registration for %s rejected by unique constraint", payload.email)
        raise UnprocessableError("Email has already been taken", error="Unable to register user")
    db.refresh(user)
    logger.info("Registered user id=%s", user.id)
    return user


def authenticate(db: Session, email: str, password: str) -> User | None:
    """Return the user whose stored hash matches ``password``, else None."""
    user = get_user_by_email(db, email)
    if user is None or not verify_password(user.password_hash, password):
        return None
    return user
