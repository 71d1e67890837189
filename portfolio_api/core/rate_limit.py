"""
Rate Limiting Module
Fixed-window rate limiting for the contact endpoint, keyed by client IP.
"""

import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional

import redis.asyncio as aioredis
import structlog
from fastapi import Request

from portfolio_api.core.config import Settings

logger = structlog.get_logger(__name__)

UNKNOWN_CLIENT = "unknown"


# =============================================================================
# Rate Limit State
# =============================================================================


@dataclass
class RateLimitRecord:
    """Requests seen for one client in its current window."""

    count: int
    reset_time: float

    def is_expired(self, now: float) -> bool:
        return now > self.reset_time


class BaseRateLimiter(ABC):
    """Abstract base class for rate limiter backends."""

    def __init__(self, limit: int, window: int):
        self.limit = limit
        self.window = window

    @abstractmethod
    async def allow(self, client_key: str) -> bool:
        """Record a request for client_key and report whether it is admitted."""
        pass

    @abstractmethod
    async def retry_after(self, client_key: str) -> int:
        """Seconds until client_key's current window resets."""
        pass

    async def close(self) -> None:
        """Release backend resources."""
        return None


# =============================================================================
# In-Memory Rate Limiter
# =============================================================================


class InMemoryRateLimiter(BaseRateLimiter):
    """
    Process-local fixed window rate limiter.

    Each client gets a RateLimitRecord that is replaced once its window has
    passed. Stale records are only reset when their client comes back; they
    are never swept, so the map grows with the number of distinct clients
    for the life of the process. State is lost on restart and is not shared
    between instances.
    """

    def __init__(
        self,
        limit: int,
        window: int,
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__(limit, window)
        self._clock = clock
        self._records: dict[str, RateLimitRecord] = {}
        # Read-then-increment must be atomic under threaded servers
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._records)

    def get_record(self, client_key: str) -> Optional[RateLimitRecord]:
        return self._records.get(client_key)

    def check(self, client_key: str) -> bool:
        """Synchronous core of allow()."""
        now = self._clock()
        with self._lock:
            record = self._records.get(client_key)

            if record is None or record.is_expired(now):
                self._records[client_key] = RateLimitRecord(count=1, reset_time=now + self.window)
                return True

            if record.count >= self.limit:
                return False

            record.count += 1
            return True

    async def allow(self, client_key: str) -> bool:
        return self.check(client_key)

    async def retry_after(self, client_key: str) -> int:
        record = self._records.get(client_key)
        if record is None:
            return 0
        remaining = record.reset_time - self._clock()
        return max(0, int(remaining) + 1)

    def reset(self) -> None:
        with self._lock:
            self._records.clear()


# =============================================================================
# Redis Rate Limiter
# =============================================================================


class RedisRateLimiter(BaseRateLimiter):
    """
    Redis-backed fixed window rate limiter.

    The first request of a window creates the counter with a TTL equal to
    the window; later requests increment it. Counters are shared by every
    instance pointing at the same Redis. If Redis is unreachable, requests
    are counted by an in-memory limiter instead so limiting stays enforced.
    """

    def __init__(
        self,
        redis_url: str,
        limit: int,
        window: int,
        fallback: Optional[InMemoryRateLimiter] = None,
        key_prefix: str = "rate_limit:contact",
    ):
        super().__init__(limit, window)
        self.redis_url = redis_url
        self.key_prefix = key_prefix
        self.fallback = fallback or InMemoryRateLimiter(limit, window)
        self._redis: Optional[aioredis.Redis] = None
        self._redis_available = True

    def build_key(self, client_key: str) -> str:
        return f"{self.key_prefix}:{client_key}"

    async def get_redis(self) -> aioredis.Redis:
        """Get or create Redis connection."""
        if self._redis is None:
            self._redis = aioredis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
        return self._redis

    async def close(self) -> None:
        """Close Redis connection."""
        if self._redis:
            await self._redis.aclose()
            self._redis = None

    def _mark_unavailable(self, error: Exception) -> None:
        if self._redis_available:
            logger.warning("redis_rate_limit_unavailable", error=str(error), fallback="memory")
            self._redis_available = False

    async def allow(self, client_key: str) -> bool:
        key = self.build_key(client_key)
        try:
            redis = await self.get_redis()
            pipe = redis.pipeline()
            pipe.set(key, 0, ex=self.window, nx=True)
            pipe.incr(key)
            results = await pipe.execute()
        except Exception as e:
            self._mark_unavailable(e)
            return await self.fallback.allow(client_key)

        if not self._redis_available:
            logger.info("redis_rate_limit_recovered")
            self._redis_available = True

        count = int(results[1])
        return count <= self.limit

    async def retry_after(self, client_key: str) -> int:
        try:
            redis = await self.get_redis()
            ttl = await redis.ttl(self.build_key(client_key))
        except Exception as e:
            self._mark_unavailable(e)
            return await self.fallback.retry_after(client_key)
        return int(ttl) if ttl and ttl > 0 else self.window


# =============================================================================
# Helper Functions
# =============================================================================


def get_client_key(request: Request, trust_proxy_headers: bool = True) -> str:
    """
    Extract the rate limit key for a request.

    Behind a proxy the first X-Forwarded-For entry (or X-Real-IP) is used.
    Requests with no attributable address share the "unknown" bucket.
    """
    if trust_proxy_headers:
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            # Take the first IP in the chain (client IP)
            first = forwarded_for.split(",")[0].strip()
            if first:
                return first
        real_ip = request.headers.get("X-Real-IP")
        if real_ip and real_ip.strip():
            return real_ip.strip()
        return UNKNOWN_CLIENT

    return request.client.host if request.client else UNKNOWN_CLIENT


def create_rate_limiter(settings: Settings) -> Optional[BaseRateLimiter]:
    """Build the configured limiter, or None when rate limiting is disabled."""
    if not settings.rate_limit_enabled:
        logger.info("rate_limit_disabled")
        return None

    limit = settings.rate_limit_contact_requests
    window = settings.rate_limit_contact_window

    if settings.rate_limit_backend.lower() == "redis":
        logger.info("rate_limit_backend", backend="redis", limit=limit, window=window)
        return RedisRateLimiter(settings.redis_url, limit, window)

    logger.info("rate_limit_backend", backend="memory", limit=limit, window=window)
    return InMemoryRateLimiter(limit, window)
