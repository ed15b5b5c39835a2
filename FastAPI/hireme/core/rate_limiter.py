import logging
import threading
import time

from hireme.config import settings

logger = logging.getLogger(__name__)


class InMemoryRateLimiter:
    """
    Simple in-memory fixed-window rate limiter.
    Good for single-instance deployments and tests. Counts are lost on restart.
    """

    sweep_interval_seconds = 60

    def __init__(self) -> None:
        self._lock = threading.Lock()
        # key -> (count, window_start, window_seconds)
        self._state: dict[str, tuple[int, float, int]] = {}
        self._last_sweep = time.time()

    def _sweep(self, now: float) -> None:
        """Drop keys whose window has already closed."""
        expired = [k for k, (_, start, window) in self._state.items() if now - start >= window]
        for k in expired:
            del self._state[k]
        self._last_sweep = now

    def check(self, key: str, limit: int, window_seconds: int) -> tuple[bool, int]:
        """
        Returns (allowed, retry_after_seconds).
        """
        now = time.time()
        with self._lock:
            if now - self._last_sweep >= self.sweep_interval_seconds:
                self._sweep(now)
            count, window_start, _ = self._state.get(key, (0, now, window_seconds))
            if now - window_start >= window_seconds:
                count = 0
                window_start = now
            if count >= limit:
                retry_after = max(1, int(window_seconds - (now - window_start)))
                return False, retry_after
            self._state[key] = (count + 1, window_start, window_seconds)
            return True, 0

    async def allow(self, key: str, limit: int, window_seconds: int) -> tuple[bool, int]:
        return self.check(key, limit, window_seconds)


class RedisRateLimiter:
    """
    Fixed-window limiter backed by Redis keyed counters with a TTL.
    Survives process restarts and is shared by every API instance.
    Expects a ``redis.asyncio`` client.
    """

    key_prefix = "hireme:rl"

    def __init__(self, client) -> None:
        self._client = client

    async def allow(self, key: str, limit: int, window_seconds: int) -> tuple[bool, int]:
        now = int(time.time())
        window = now // window_seconds
        window_key = f"{self.key_prefix}:{key}:{window}"
        try:
            pipe = self._client.pipeline(transaction=True)
            pipe.incr(window_key)
            pipe.expire(window_key, window_seconds + 1)
            count = (await pipe.execute())[0]
        except Exception as e:
            # Counter store unavailable: let the request through rather than fail it.
            logger.warning("Rate limit store unavailable, allowing request: %s", e)
            return True, 0
        if count > limit:
            retry_after = max(1, (window + 1) * window_seconds - now)
            return False, retry_after
        return True, 0


def build_rate_limiter(redis_url: str | None = None):
    url = redis_url if redis_url is not None else settings.redis_url
    if not url:
        logger.info("REDIS_URL not set; using in-memory rate limiter")
        return InMemoryRateLimiter()

    import redis.asyncio as aioredis

    client = aioredis.from_url(url, socket_connect_timeout=5, socket_timeout=5)
    logger.info("Using Redis rate limiter")
    return RedisRateLimiter(client)


rate_limiter = build_rate_limiter()
