"""Redis lease used to elect a single sweeping instance."""

import logging
import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import redis.asyncio as redis

from seat_reservation.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


class DistributedLockError(Exception):
    """Exception raised when the lock backend cannot be reached."""

    pass


class DistributedLock:
    """
    Redis-based lease.

    Uses SET NX EX for acquisition and a Lua compare-and-delete for release
    so an instance never frees a lease that timed out and was taken over.

    Only the expiry reaper uses this, to avoid redundant sweeps across
    instances. Seat and reservation rows never depend on it.
    """

    # Lua script for safe lock release (only release if we own the lock)
    RELEASE_SCRIPT = """
    if redis.call("get", KEYS[1]) == ARGV[1] then
        return redis.call("del", KEYS[1])
    else
        return 0
    end
    """

    def __init__(
        self,
        redis_client: redis.Redis,
        key: str,
        timeout_seconds: int | None = None,
    ):
        """
        Initialize distributed lock.

        Args:
            redis_client: Redis client instance
            key: Lock key name
            timeout_seconds: Lease expiration time in seconds
        """
        self.redis = redis_client
        self.key = f"lock:{key}"
        self.timeout_seconds = timeout_seconds or settings.SWEEP_LOCK_TIMEOUT_SECONDS
        self.token: str | None = None
        self._release_script = self.redis.register_script(self.RELEASE_SCRIPT)

    async def acquire(self) -> bool:
        """
        Try once to take the lease.

        Returns:
            True if the lease was acquired, False if another owner holds it.
        """
        token = str(uuid.uuid4())
        try:
            acquired = await self.redis.set(
                self.key,
                token,
                nx=True,
                ex=self.timeout_seconds,
            )
        except redis.RedisError as e:
            raise DistributedLockError(f"Failed to acquire lock for key: {self.key}") from e

        if acquired:
            self.token = token
            return True
        return False

    async def release(self) -> bool:
        """
        Release the lease.

        Returns:
            True if the lease was released, False if we didn't own it.
        """
        if self.token is None:
            return False

        try:
            result = await self._release_script(keys=[self.key], args=[self.token])
        except redis.RedisError as e:
            # The lease times out on its own
            logger.warning(f"Failed to release lock {self.key}: {e}")
            return False
        finally:
            self.token = None
        return bool(result)


@asynccontextmanager
async def try_lock(
    redis_client: redis.Redis,
    key: str,
    timeout_seconds: int | None = None,
) -> AsyncGenerator[bool, None]:
    """
    Context manager yielding whether the lease was taken.

    Usage:
        async with try_lock(redis, "reaper") as acquired:
            if acquired:
                ...

    Raises:
        DistributedLockError: If Redis cannot be reached
    """
    lock = DistributedLock(redis_client, key, timeout_seconds)
    acquired = await lock.acquire()

    try:
        yield acquired
    finally:
        if acquired:
            await lock.release()
