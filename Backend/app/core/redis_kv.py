from typing import Optional
import redis

from app.config import REDIS_URL

NAMESPACE = "goodnight:throttle:"

_client: Optional[redis.Redis] = None


def get_client() -> redis.Redis:
    global _client
    if _client is None:
        if not REDIS_URL:
            raise RuntimeError("REDIS_URL is not configured")
        _client = redis.Redis.from_url(REDIS_URL, decode_responses=True)
    return _client


def _key(name: str) -> str:
    return f"{NAMESPACE}{name}"


def incr_counter(name: str, ttl_seconds: int, client: Optional[redis.Redis] = None) -> int:
    """Increment a counter, giving it a TTL the first time it is seen."""
    r = client or get_client()
    key = _key(name)
    pipe = r.pipeline()
    pipe.incr(key)
    pipe.expire(key, ttl_seconds, nx=True)
    count, _ = pipe.execute()
    return int(count)
