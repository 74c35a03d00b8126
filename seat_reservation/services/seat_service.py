"""Seat inventory store."""

from sqlalchemy import and_, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from seat_reservation.models.reservation import Reservation, ReservationStatus
from seat_reservation.models.seat import Seat, SeatCategory, SeatStatus


class SeatService:
    """
    Durable record of every seat for an event.

    Writes never commit: the caller owns the transaction so a status flip
    can share it with the matching ledger write.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def add_seats(self, seats: list[Seat]) -> list[Seat]:
        """Add seats for a new event."""
        self.db.add_all(seats)
        await self.db.flush()
        return seats

    async def get(self, event_id: int, seat_id: str) -> Seat | None:
        """Get seat by (event_id, seat_id)."""
        result = await self.db.execute(
            select(Seat)
            .where(and_(Seat.event_id == event_id, Seat.seat_id == seat_id))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_by_event(
        self,
        event_id: int,
        status: SeatStatus | None = None,
        category: SeatCategory | None = None,
    ) -> list[Seat]:
        """Get seats for an event with optional filtering."""
        query = select(Seat).where(Seat.event_id == event_id)

        if status is not None:
            query = query.where(Seat.status == status)
        if category is not None:
            query = query.where(Seat.category == category)

        query = query.order_by(Seat.row, Seat.number).execution_options(
            populate_existing=True
        )

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def count_by_status(self, event_id: int) -> dict[SeatStatus, int]:
        """Count seats per status for an event."""
        result = await self.db.execute(
            select(Seat.status, func.count())
            .where(Seat.event_id == event_id)
            .group_by(Seat.status)
        )
        counts = {seat_status: 0 for seat_status in SeatStatus}
        for seat_status, count in result.all():
            counts[seat_status] = count
        return counts

    async def compare_and_set_status(
        self,
        event_id: int,
        seat_id: str,
        expected_status: SeatStatus,
        new_status: SeatStatus,
    ) -> bool:
        """
        Atomically move a seat from one status to another.

        The predicate and the write run as one conditional UPDATE, so the
        database row lock is the only serialization point. Bumps ``version``
        on success.

        Returns:
            True if this call performed the transition
        """
        result = await self.db.execute(
            update(Seat)
            .where(
                and_(
                    Seat.event_id == event_id,
                    Seat.seat_id == seat_id,
                    Seat.status == expected_status,
                )
            )
            .values(status=new_status, version=Seat.version + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def _has_active_reservation(self):
        return (
            select(Reservation.reservation_id)
            .where(
                and_(
                    Reservation.event_id == Seat.event_id,
                    Reservation.seat_id == Seat.seat_id,
                    Reservation.status == ReservationStatus.ACTIVE,
                )
            )
            .correlate(Seat)
            .exists()
        )

    async def list_orphaned_holds(self, limit: int = 500) -> list[Seat]:
        """Find held seats with no active reservation behind them."""
        result = await self.db.execute(
            select(Seat)
            .where(and_(Seat.status == SeatStatus.HELD, ~self._has_active_reservation()))
            .limit(limit)
        )
        return list(result.scalars().all())

    async def release_orphaned_hold(self, event_id: int, seat_id: str) -> bool:
        """
        Release a held seat whose reservation is already terminal.

        Same compare-and-set as compare_and_set_status, with the extra
        condition that no active reservation references the seat.
        """
        result = await self.db.execute(
            update(Seat)
            .where(
                and_(
                    Seat.event_id == event_id,
                    Seat.seat_id == seat_id,
                    Seat.status == SeatStatus.HELD,
                    ~self._has_active_reservation(),
                )
            )
            .values(status=SeatStatus.AVAILABLE, version=Seat.version + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
