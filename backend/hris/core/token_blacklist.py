"""
Token blacklist for JWT revocation.

Logged-out access tokens are kept until their natural expiry. Redis is used
when REDIS_URL is configured so revocations survive restarts and are shared
between workers; otherwise an in-process dictionary is used.
"""

import logging
import threading
from datetime import datetime, timedelta
from typing import Dict, Optional

import redis.asyncio as aioredis

from hris.core.config import settings

logger = logging.getLogger("hris.token_blacklist")

_memory_blacklist: Dict[str, datetime] = {}
_last_cleanup: datetime = datetime.utcnow()
_cleanup_interval = timedelta(minutes=5)
_blacklist_lock = threading.Lock()

_redis_client: Optional[aioredis.Redis] = None

BLACKLIST_KEY_PREFIX = "hris:token:blacklist:"


def _get_redis_client() -> Optional[aioredis.Redis]:
    """Lazily create the Redis client. Returns None when REDIS_URL is unset."""
    global _redis_client

    if not settings.REDIS_URL:
        return None

    if _redis_client is None:
        _redis_client = aioredis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
        )
        logger.info("Token blacklist using Redis backend")
    return _redis_client


def _cleanup_expired_tokens() -> None:
    """Remove expired tokens from the in-memory blacklist."""
    global _last_cleanup
    now = datetime.utcnow()

    if now - _last_cleanup < _cleanup_interval:
        return

    with _blacklist_lock:
        expired_tokens = [token for token, expiry in _memory_blacklist.items() if expiry < now]
        for token in expired_tokens:
            _memory_blacklist.pop(token, None)

        if expired_tokens:
            logger.debug(f"Cleaned up {len(expired_tokens)} expired tokens from in-memory blacklist")

        _last_cleanup = now


async def blacklist_token(token: str, expires_at: datetime) -> None:
    """
    Add a token to the blacklist.

    Args:
        token: The JWT token to blacklist
        expires_at: When the token expires (blacklist entry auto-removes after this)
    """
    if expires_at <= datetime.utcnow():
        return

    redis_client = _get_redis_client()
    if redis_client is not None:
        ttl = int((expires_at - datetime.utcnow()).total_seconds())
        if ttl > 0:
            await redis_client.setex(f"{BLACKLIST_KEY_PREFIX}{token}", ttl, "1")
            logger.debug(f"Token blacklisted in Redis until {expires_at.isoformat()}")
        return

    with _blacklist_lock:
        _memory_blacklist[token] = expires_at
    logger.debug(f"Token blacklisted in memory until {expires_at.isoformat()}")
    _cleanup_expired_tokens()


async def is_token_blacklisted(token: str) -> bool:
    """Return True if the token was revoked and has not expired yet."""
    redis_client = _get_redis_client()
    if redis_client is not None:
        return bool(await redis_client.exists(f"{BLACKLIST_KEY_PREFIX}{token}"))

    with _blacklist_lock:
        expiry = _memory_blacklist.get(token)
        if expiry is None:
            return False
        if expiry < datetime.utcnow():
            _memory_blacklist.pop(token, None)
            return False
        return True


def clear_blacklist() -> None:
    """Clear the in-memory blacklist (mainly for testing)."""
    with _blacklist_lock:
        _memory_blacklist.clear()
    logger.warning("Token blacklist cleared from memory")


def get_backend_info() -> dict:
    """Describe the active blacklist backend (for the health endpoint)."""
    return {
        "backend": "redis" if settings.REDIS_URL else "memory",
        "memory_size": len(_memory_blacklist),
    }
