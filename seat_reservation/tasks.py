"""Background tasks: the expiry reaper."""

import asyncio
import logging
from datetime import datetime
from typing import Awaitable, Callable

import redis.asyncio as redis
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from seat_reservation.config import get_settings
from seat_reservation.database import SessionLocal
from seat_reservation.distributed_lock import DistributedLockError, try_lock
from seat_reservation.redis_client import get_redis
from seat_reservation.services.reservation_service import ReservationService

logger = logging.getLogger(__name__)

settings = get_settings()


class ExpiryReaper:
    """
    Sole authority for clock-driven expiry.

    Each pass voids active holds whose expires_at has passed and releases
    their seats. Passes are safe to run concurrently with each other and
    with cancel; the Redis lease only stops instances duplicating work.
    """

    LOCK_KEY = "reaper:sweep"

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
        redis_factory: Callable[[], Awaitable[redis.Redis]] = get_redis,
        interval_seconds: int | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.session_factory = session_factory or SessionLocal
        self.redis_factory = redis_factory
        self.interval_seconds = interval_seconds or settings.REAPER_INTERVAL_SECONDS
        self.clock = clock

    async def run_once(self) -> int:
        """Run one pass and return the number of seats released."""
        async with self.session_factory() as db:
            service = ReservationService(db, clock=self.clock)
            return await service.expire_old_reservations()

    async def sweep(self) -> int:
        """Run one pass if this instance wins the sweep lease."""
        try:
            redis_client = await self.redis_factory()
            async with try_lock(redis_client, self.LOCK_KEY) as acquired:
                if not acquired:
                    logger.debug("Another instance holds the sweep lease, skipping pass")
                    return 0
                return await self.run_once()
        except DistributedLockError as e:
            logger.warning(f"Sweep lease unavailable, sweeping without it: {e}")
            return await self.run_once()

    async def run_forever(self) -> None:
        """Sweep every interval until cancelled."""
        logger.info(
            f"Starting expiry reaper, interval {self.interval_seconds}s"
        )

        while True:
            try:
                released = await self.sweep()
                if released > 0:
                    logger.info(f"Reaper released {released} seats")
            except Exception as e:
                logger.error(f"Error in reaper pass: {e}")

            await asyncio.sleep(self.interval_seconds)


class BackgroundTaskManager:
    """Manager for background tasks."""

    def __init__(self, reaper: ExpiryReaper | None = None):
        self.reaper = reaper or ExpiryReaper()
        self.tasks: list[asyncio.Task] = []

    async def start(self) -> None:
        """Start all background tasks."""
        self.tasks.append(asyncio.create_task(self.reaper.run_forever()))
        logger.info("Background tasks started")

    async def stop(self) -> None:
        """Stop all background tasks."""
        for task in self.tasks:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        self.tasks.clear()
        logger.info("Background tasks stopped")


# Global instance
background_tasks = BackgroundTaskManager()
