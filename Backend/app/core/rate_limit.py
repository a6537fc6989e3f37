import logging
import time
from dataclasses import dataclass
from threading import Lock
from typing import Optional, Protocol

from fastapi import Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from app.config import RATE_LIMIT_ENABLED, RATE_LIMIT_NUMBER, RATE_LIMIT_PERIOD, REDIS_URL
from app.core import redis_kv

logger = logging.getLogger(__name__)


class CounterStore(Protocol):
    def incr(self, key: str, ttl_seconds: int) -> int: ...


class MemoryCounterStore:
    def __init__(self) -> None:
        self._lock = Lock()
        self._counts: dict[str, tuple[int, float]] = {}

    def incr(self, key: str, ttl_seconds: int) -> int:
        now = time.monotonic()
        with self._lock:
            count, expires = self._counts.get(key, (0, now + ttl_seconds))
            if expires <= now:
                count, expires = 0, now + ttl_seconds
            count += 1
            self._counts[key] = (count, expires)
            if len(self._counts) > 10_000:
                self._counts = {k: v for k, v in self._counts.items() if v[1] > now}
            return count


class RedisCounterStore:
    def __init__(self, client=None) -> None:
        self._client = client

    def incr(self, key: str, ttl_seconds: int) -> int:
        return redis_kv.incr_counter(key, ttl_seconds, client=self._client)


@dataclass
class ThrottleResult:
    allowed: bool
    limit: int
    count: int
    reset_at: int
    retry_after: int

    @property
    def remaining(self) -> int:
        return max(self.limit - self.count, 0)


class RateLimiter:
    """
    Fixed-window throttle: at most ``limit`` requests per ``period`` seconds
    for each discriminator (the client IP).
    """

    def __init__(self, *, limit: int, period: int, store: CounterStore, enabled: bool = True):
        self.limit = limit
        self.period = period
        self.store = store
        self.enabled = enabled

    def hit(self, discriminator: str, now: Optional[float] = None) -> ThrottleResult:
        now_s = int(now if now is not None else time.time())
        window = now_s // self.period
        reset_at = now_s + (self.period - now_s % self.period)
        count = self.store.incr(f"req/ip:{discriminator}:{window}", self.period)
        return ThrottleResult(
            allowed=count <= self.limit,
            limit=self.limit,
            count=count,
            reset_at=reset_at,
            retry_after=max(reset_at - now_s, 1),
        )


def build_rate_limiter() -> RateLimiter:
    store: CounterStore = RedisCounterStore() if REDIS_URL else MemoryCounterStore()
    return RateLimiter(
        limit=RATE_LIMIT_NUMBER,
        period=RATE_LIMIT_PERIOD,
        store=store,
        enabled=RATE_LIMIT_ENABLED,
    )


def client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


async def rate_limit_middleware(request: Request, call_next):
    limiter: RateLimiter | None = getattr(request.app.state, "rate_limiter", None)
    if limiter is None or not limiter.enabled:
        return await call_next(request)

    ip = client_ip(request)
    result = await run_in_threadpool(limiter.hit, ip)
    if not result.allowed:
        logger.warning("Throttled %s %s from %s", request.method, request.url.path, ip)
        return JSONResponse(
            status_code=429,
            content={"error": "Request Throttled"},
            headers={
                "RateLimit-Limit": str(result.limit),
                "RateLimit-Remaining": "0",
                "RateLimit-Reset": str(result.reset_at),
                "Retry-After": str(result.retry_after),
            },
        )
    return await call_next(request)
