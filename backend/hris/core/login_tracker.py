"""
Login attempt tracking for brute-force protection.
Uses Redis when REDIS_URL is configured, in-memory storage otherwise.
"""

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Optional

import redis.asyncio as aioredis

from hris.core.config import settings

logger = logging.getLogger("hris.login_tracker")


class LoginTrackerBackend:
    """Base class for login tracking backends."""

    async def record_failed_attempt(self, key: str) -> int:
        """Record a failed attempt and return the current count."""
        raise NotImplementedError

    async def is_locked(self, key: str) -> tuple[bool, int]:
        """Check if account is locked. Returns (is_locked, remaining_seconds)."""
        raise NotImplementedError

    async def set_locked(self, key: str, duration_seconds: int) -> None:
        raise NotImplementedError

    async def reset(self, key: str) -> None:
        """Reset attempts and lock status on successful login."""
        raise NotImplementedError


class InMemoryLoginTracker(LoginTrackerBackend):
    """
    In-memory login tracker for single-instance deployments.
    Not suitable for horizontal scaling.
    """

    def __init__(self):
        self._attempts: dict[str, list[datetime]] = {}
        self._locked_until: dict[str, datetime] = {}
        self._lock = asyncio.Lock()

    def _prune_attempts(self, key: str) -> None:
        cutoff = datetime.utcnow() - timedelta(minutes=settings.LOGIN_ATTEMPT_WINDOW_MINUTES)
        if key in self._attempts:
            self._attempts[key] = [ts for ts in self._attempts[key] if ts >= cutoff]

    async def record_failed_attempt(self, key: str) -> int:
        async with self._lock:
            self._prune_attempts(key)
            self._attempts.setdefault(key, []).append(datetime.utcnow())
            return len(self._attempts[key])

    async def is_locked(self, key: str) -> tuple[bool, int]:
        async with self._lock:
            locked_until = self._locked_until.get(key)
            if locked_until and locked_until > datetime.utcnow():
                return True, int((locked_until - datetime.utcnow()).total_seconds())
            if locked_until:
                self._locked_until.pop(key, None)
            return False, 0

    async def set_locked(self, key: str, duration_seconds: int) -> None:
        async with self._lock:
            self._locked_until[key] = datetime.utcnow() + timedelta(seconds=duration_seconds)

    async def reset(self, key: str) -> None:
        async with self._lock:
            self._attempts.pop(key, None)
            self._locked_until.pop(key, None)


class RedisLoginTracker(LoginTrackerBackend):
    """
    Redis-backed login tracker for horizontal scaling.
    Uses Redis INCR with TTL for attempt counting and separate lock keys.
    """

    def __init__(self, redis_url: str):
        self._redis = aioredis.from_url(redis_url, encoding="utf-8", decode_responses=True)

    def _attempts_key(self, key: str) -> str:
        return f"hris:login:attempts:{key}"

    def _lock_key(self, key: str) -> str:
        return f"hris:login:locked:{key}"

    async def record_failed_attempt(self, key: str) -> int:
        attempts_key = self._attempts_key(key)
        pipe = self._redis.pipeline()
        pipe.incr(attempts_key)
        pipe.expire(attempts_key, settings.LOGIN_ATTEMPT_WINDOW_MINUTES * 60)
        results = await pipe.execute()
        return results[0]

    async def is_locked(self, key: str) -> tuple[bool, int]:
        ttl = await self._redis.ttl(self._lock_key(key))
        if ttl > 0:
            return True, ttl
        return False, 0

    async def set_locked(self, key: str, duration_seconds: int) -> None:
        await self._redis.setex(self._lock_key(key), duration_seconds, "locked")
        logger.warning(f"Account locked: {key} for {duration_seconds}s")

    async def reset(self, key: str) -> None:
        await self._redis.delete(self._attempts_key(key), self._lock_key(key))


_tracker: Optional[LoginTrackerBackend] = None


def get_login_tracker() -> LoginTrackerBackend:
    """Return the process-wide login tracker."""
    global _tracker
    if _tracker is None:
        if settings.REDIS_URL:
            _tracker = RedisLoginTracker(settings.REDIS_URL)
            logger.info("Login tracker using Redis backend")
        else:
            _tracker = InMemoryLoginTracker()
    return _tracker
