import os
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


SQLALCHEMY_DATABASE_URL = os.getenv("SQLALCHEMY_DATABASE_URL", "sqlite:///./goodnight.db")

REDIS_URL = os.getenv("REDIS_URL")

RATE_LIMIT_ENABLED = _env_bool("RATE_LIMIT_ENABLED", "true")
RATE_LIMIT_NUMBER = int(os.getenv("RATE_LIMIT_NUMBER", "300"))
RATE_LIMIT_PERIOD = int(os.getenv("RATE_LIMIT_PERIOD", "300"))

API_REQUIRE_BASIC_AUTH = _env_bool("API_REQUIRE_BASIC_AUTH", "false")

FEED_DEFAULT_LIMIT = int(os.getenv("FEED_DEFAULT_LIMIT", "25"))
FEED_MAX_LIMIT = int(os.getenv("FEED_MAX_LIMIT", "100"))

CORS_ALLOW_ORIGINS = [
    o.strip() for o in os.getenv("CORS_ALLOW_ORIGINS", "http://localhost:8080").split(",") if o.strip()
]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
