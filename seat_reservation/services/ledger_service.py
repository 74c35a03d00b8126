"""Reservation ledger."""

from datetime import datetime

from sqlalchemy import and_, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from seat_reservation.models.reservation import Reservation, ReservationStatus


class LedgerService:
    """
    Durable record of holds, keyed by reservation_id.

    Like SeatService, writes are flushed but never committed here.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, reservation: Reservation) -> int:
        """Append a reservation and return its id."""
        self.db.add(reservation)
        await self.db.flush()
        return reservation.reservation_id

    async def get(self, reservation_id: int) -> Reservation | None:
        """Get reservation by ID, bypassing any stale identity-map copy."""
        result = await self.db.execute(
            select(Reservation)
            .where(Reservation.reservation_id == reservation_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def update_status(
        self,
        reservation_id: int,
        expected_status: ReservationStatus,
        new_status: ReservationStatus,
    ) -> bool:
        """Compare-and-set the reservation status."""
        result = await self.db.execute(
            update(Reservation)
            .where(
                and_(
                    Reservation.reservation_id == reservation_id,
                    Reservation.status == expected_status,
                )
            )
            .values(status=new_status)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def extend_expiry(self, reservation_id: int, new_expires_at: datetime) -> bool:
        """Push expires_at forward; only legal while active and strictly later."""
        result = await self.db.execute(
            update(Reservation)
            .where(
                and_(
                    Reservation.reservation_id == reservation_id,
                    Reservation.status == ReservationStatus.ACTIVE,
                    Reservation.expires_at < new_expires_at,
                )
            )
            .values(expires_at=new_expires_at)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def scan_expiring(self, now: datetime, limit: int = 500) -> list[Reservation]:
        """Active reservations whose expires_at is at or before ``now``."""
        result = await self.db.execute(
            select(Reservation)
            .where(
                and_(
                    Reservation.status == ReservationStatus.ACTIVE,
                    Reservation.expires_at <= now,
                )
            )
            .order_by(Reservation.expires_at)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def get_active_for_seat(self, event_id: int, seat_id: str) -> Reservation | None:
        """Get the active reservation holding a seat, if any."""
        result = await self.db.execute(
            select(Reservation).where(
                and_(
                    Reservation.event_id == event_id,
                    Reservation.seat_id == seat_id,
                    Reservation.status == ReservationStatus.ACTIVE,
                )
            )
        )
        return result.scalar_one_or_none()

    async def count_active_for_event(self, event_id: int) -> int:
        result = await self.db.execute(
            select(func.count())
            .select_from(Reservation)
            .where(
                and_(
                    Reservation.event_id == event_id,
                    Reservation.status == ReservationStatus.ACTIVE,
                )
            )
        )
        return result.scalar() or 0

    async def list_by_holder(
        self,
        holder_id: str,
        event_id: int | None = None,
        status: ReservationStatus | None = None,
    ) -> list[Reservation]:
        """Get reservations for a holder."""
        query = select(Reservation).where(Reservation.holder_id == holder_id)

        if event_id is not None:
            query = query.where(Reservation.event_id == event_id)
        if status is not None:
            query = query.where(Reservation.status == status)

        query = query.order_by(Reservation.created_at.desc())

        result = await self.db.execute(query)
        return list(result.scalars().all())
