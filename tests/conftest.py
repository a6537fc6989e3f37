from __future__ import annotations

import os
import tempfile
from pathlib import Path

import pytest


_TEST_ROOT = Path(tempfile.mkdtemp(prefix="goodnight_test_"))
_DB_PATH = _TEST_ROOT / "goodnight_test.db"

os.environ["SQLALCHEMY_DATABASE_URL"] = f"sqlite:///{_DB_PATH}"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["API_REQUIRE_BASIC_AUTH"] = "false"
os.environ.pop("REDIS_URL", None)

PASSWORD = "password123"


@pytest.fixture(autouse=True)
def fresh_schema():
    from app.db.base import Base
    from app.db.engine import engine
    import app.db.models  # noqa: F401

    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    yield


@pytest.fixture()
def db():
    from app.db.engine import SessionLocal

    with SessionLocal() as session:
        yield session


@pytest.fixture()
def api_client():
    from fastapi.testclient import TestClient

    from app.main import app

    return TestClient(app)


@pytest.fixture()
def make_user(db):
    from app.db.models import User
    from app.utils.passwords import hash_password

    counter = {"n": 0}

    def _make(name: str | None = None, email: str | None = None, password: str = PASSWORD) -> User:
        counter["n"] += 1
        n = counter["n"]
        user = User(
            name=name or f"Test User {n}",
            email=email or f"user{n}@example.com",
            password_hash=hash_password(password),
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture()
def basic_auth():
    import base64

    def _headers(email: str, password: str = PASSWORD) -> dict[str, str]:
        token = base64.b64encode(f"{email}:{password}".encode("utf-8")).decode("ascii")
        return {"Authorization": f"Basic {token}"}

    return _headers
