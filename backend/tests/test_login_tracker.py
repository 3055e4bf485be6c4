"""
Tests for hris/core/login_tracker.py - failed login tracking and lockout.
"""
import asyncio
from datetime import datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest


class TestInMemoryLoginTracker:
    """Test the in-memory login tracker."""

    async def test_record_failed_attempt_increments_count(self):
        """Failed attempt should increment the counter."""
        from hris.core.login_tracker import InMemoryLoginTracker

        tracker = InMemoryLoginTracker()
        key = "budi@example.com::127.0.0.1"

        assert await tracker.record_failed_attempt(key) == 1
        assert await tracker.record_failed_attempt(key) == 2
        assert await tracker.record_failed_attempt(key) == 3

    async def test_reset_clears_attempts(self):
        from hris.core.login_tracker import InMemoryLoginTracker

        tracker = InMemoryLoginTracker()
        key = "reset::127.0.0.1"

        await tracker.record_failed_attempt(key)
        await tracker.set_locked(key, 60)
        await tracker.reset(key)

        assert await tracker.is_locked(key) == (False, 0)
        assert await tracker.record_failed_attempt(key) == 1

    async def test_set_locked_and_check(self):
        from hris.core.login_tracker import InMemoryLoginTracker

        tracker = InMemoryLoginTracker()
        key = "locked::127.0.0.1"

        await tracker.set_locked(key, 60)
        is_locked, remaining = await tracker.is_locked(key)

        assert is_locked is True
        assert 0 < remaining <= 60

    async def test_expired_lock_is_cleared(self):
        from hris.core.login_tracker import InMemoryLoginTracker

        tracker = InMemoryLoginTracker()
        key = "expired::127.0.0.1"

        await tracker.set_locked(key, 0)
        await asyncio.sleep(0.01)

        assert await tracker.is_locked(key) == (False, 0)

    async def test_prune_old_attempts(self):
        """Attempts outside the window do not count."""
        from hris.core.login_tracker import InMemoryLoginTracker

        tracker = InMemoryLoginTracker()
        key = "prune::127.0.0.1"
        old_time = datetime.utcnow() - timedelta(days=1)
        tracker._attempts[key] = [old_time, old_time]

        assert await tracker.record_failed_attempt(key) == 1

    async def test_keys_are_independent(self):
        from hris.core.login_tracker import InMemoryLoginTracker

        tracker = InMemoryLoginTracker()
        await tracker.set_locked("a::1.1.1.1", 60)

        assert (await tracker.is_locked("a::2.2.2.2"))[0] is False


class TestRedisLoginTracker:
    """Test the Redis-backed login tracker."""

    @pytest.fixture
    def tracker(self):
        from hris.core.login_tracker import RedisLoginTracker

        tracker = RedisLoginTracker("redis://localhost:6379/0")
        tracker._redis = MagicMock()
        tracker._redis.ttl = AsyncMock(return_value=-2)
        tracker._redis.setex = AsyncMock()
        tracker._redis.delete = AsyncMock()
        return tracker

    async def test_record_failed_attempt_uses_pipeline(self, tracker):
        pipe = MagicMock()
        pipe.execute = AsyncMock(return_value=[3, True])
        tracker._redis.pipeline.return_value = pipe

        count = await tracker.record_failed_attempt("user::ip")

        assert count == 3
        pipe.incr.assert_called_once_with("hris:login:attempts:user::ip")
        pipe.expire.assert_called_once()

    async def test_is_locked_reads_ttl(self, tracker):
        tracker._redis.ttl.return_value = 300

        assert await tracker.is_locked("user::ip") == (True, 300)
        tracker._redis.ttl.assert_awaited_once_with("hris:login:locked:user::ip")

    async def test_not_locked_without_key(self, tracker):
        assert await tracker.is_locked("user::ip") == (False, 0)

    async def test_set_locked_uses_expiry(self, tracker):
        await tracker.set_locked("user::ip", 900)

        tracker._redis.setex.assert_awaited_once_with("hris:login:locked:user::ip", 900, "locked")

    async def test_reset_deletes_both_keys(self, tracker):
        await tracker.reset("user::ip")

        tracker._redis.delete.assert_awaited_once_with(
            "hris:login:attempts:user::ip", "hris:login:locked:user::ip"
        )


class TestGetLoginTracker:
    def test_in_memory_without_redis(self, monkeypatch):
        from hris.core import login_tracker

        monkeypatch.setattr(login_tracker, "_tracker", None)
        monkeypatch.setattr(login_tracker.settings, "REDIS_URL", None)

        tracker = login_tracker.get_login_tracker()

        assert isinstance(tracker, login_tracker.InMemoryLoginTracker)
        assert login_tracker.get_login_tracker() is tracker
