"""Reservation engine: hold, extend, cancel, confirm and expiry."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timedelta
from typing import AsyncGenerator, Callable

from sqlalchemy.ext.asyncio import AsyncSession
from ulid import ULID

from seat_reservation.config import get_settings
from seat_reservation.exceptions import (
    InventoryCorruption,
    NotFound,
    PaymentDeclined,
    ReservationError,
    ReservationExpired,
    ReservationNotActive,
    SeatUnavailable,
)
from seat_reservation.models.event import Event, EventStatus
from seat_reservation.models.reservation import Reservation, ReservationStatus
from seat_reservation.models.seat import SeatStatus
from seat_reservation.models.ticket import Ticket
from seat_reservation.schemas.reservation import PaymentOutcome, PaymentStatus
from seat_reservation.services.ledger_service import LedgerService
from seat_reservation.services.seat_service import SeatService

logger = logging.getLogger(__name__)

settings = get_settings()


class ReservationService:
    """
    Mutates the seat inventory and the reservation ledger together.

    Every operation is one database transaction over the session shared by
    both stores. Mutual exclusion comes only from the single-row
    compare-and-set statements in SeatService and LedgerService; there is
    no application-level lock, so any number of instances may run this
    against the same database.
    """

    def __init__(
        self,
        db: AsyncSession,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.db = db
        self.clock = clock
        self.seats = SeatService(db)
        self.ledger = LedgerService(db)

    @asynccontextmanager
    async def _transaction(self) -> AsyncGenerator[None, None]:
        """Commit on success, roll back and re-raise on any error."""
        try:
            yield
        except BaseException:
            await self.db.rollback()
            raise
        else:
            await self.db.commit()

    async def _get_or_raise(self, reservation_id: int) -> Reservation:
        reservation = await self.ledger.get(reservation_id)
        if reservation is None:
            raise NotFound(f"Reservation {reservation_id} not found")
        return reservation

    @staticmethod
    def _not_active_error(reservation: Reservation | None) -> ReservationError:
        if reservation is not None and reservation.status is ReservationStatus.EXPIRED:
            return ReservationExpired()
        if reservation is not None and reservation.status.is_terminal:
            return ReservationNotActive(
                f"Reservation {reservation.reservation_id} is already {reservation.status.value}"
            )
        return ReservationNotActive("Reservation was resolved by a concurrent request")

    async def hold(
        self,
        event_id: int,
        seat_id: str,
        holder_id: str,
        duration: timedelta | None = None,
    ) -> Reservation:
        """
        Hold a seat for a buyer.

        Args:
            event_id: Event ID
            seat_id: Seat label within the event
            holder_id: Buyer requesting the hold
            duration: Hold length, defaults to RESERVATION_TIMEOUT_SECONDS

        Returns:
            The active reservation

        Raises:
            NotFound: If the seat does not exist
            SeatUnavailable: If the seat is not available or the race was lost
        """
        if duration is None:
            duration = timedelta(seconds=settings.RESERVATION_TIMEOUT_SECONDS)
        if duration <= timedelta(0):
            raise ReservationError("Hold duration must be positive")

        async with self._transaction():
            seat = await self.seats.get(event_id, seat_id)
            if seat is None:
                raise NotFound(f"Seat {seat_id} not found for event {event_id}")

            event = await self.db.get(Event, event_id, populate_existing=True)
            if event is None or event.status is not EventStatus.ON_SALE:
                raise SeatUnavailable(f"Event {event_id} is not on sale")

            # Lost races return immediately; the caller re-polls the seat map
            if not await self.seats.compare_and_set_status(
                event_id, seat_id, SeatStatus.AVAILABLE, SeatStatus.HELD
            ):
                logger.debug(f"Hold declined for seat {event_id}/{seat_id}, holder {holder_id}")
                raise SeatUnavailable()

            now = self.clock()
            reservation = Reservation(
                event_id=event_id,
                seat_id=seat_id,
                holder_id=holder_id,
                created_at=now,
                expires_at=now + duration,
                status=ReservationStatus.ACTIVE,
            )
            await self.ledger.create(reservation)

        logger.info(
            f"Seat {event_id}/{seat_id} held by {holder_id} "
            f"as reservation {reservation.reservation_id} until {reservation.expires_at}"
        )
        return reservation

    async def extend(self, reservation_id: int, additional: timedelta) -> Reservation:
        """
        Push an active hold's expiry forward.

        The expiry check against the clock is advisory; the status column is
        authoritative because the reaper may already have flipped it.

        Raises:
            NotFound: If the reservation does not exist
            ReservationExpired: If the hold is no longer active
        """
        if additional <= timedelta(0):
            raise ReservationError("Extension must be positive")

        async with self._transaction():
            reservation = await self._get_or_raise(reservation_id)
            if reservation.status is not ReservationStatus.ACTIVE:
                raise ReservationExpired()
            if reservation.expires_at <= self.clock():
                raise ReservationExpired()

            new_expires_at = reservation.expires_at + additional
            if not await self.ledger.extend_expiry(reservation_id, new_expires_at):
                raise ReservationExpired()

        logger.info(f"Reservation {reservation_id} extended until {new_expires_at}")
        return await self._get_or_raise(reservation_id)

    async def cancel(self, reservation_id: int) -> bool:
        """
        Cancel a hold and release its seat.

        The ledger transitions first and the seat is only released by whoever
        wins that transition, so cancel and the reaper never both release.

        Returns:
            True if this call cancelled the hold, False if it was already terminal

        Raises:
            NotFound: If the reservation does not exist
        """
        async with self._transaction():
            reservation = await self._get_or_raise(reservation_id)
            if not await self.ledger.update_status(
                reservation_id, ReservationStatus.ACTIVE, ReservationStatus.CANCELLED
            ):
                logger.debug(f"Cancel of reservation {reservation_id} was a no-op")
                return False

            if not await self.seats.compare_and_set_status(
                reservation.event_id,
                reservation.seat_id,
                SeatStatus.HELD,
                SeatStatus.AVAILABLE,
            ):
                logger.warning(
                    f"Seat {reservation.event_id}/{reservation.seat_id} was not held "
                    f"when reservation {reservation_id} was cancelled"
                )

        logger.info(f"Reservation {reservation_id} cancelled")
        return True

    async def confirm(self, reservation_id: int, payment_outcome: PaymentOutcome) -> Ticket:
        """
        Turn an active hold into a sold seat and a ticket.

        Invoked by the payment collaborator after funds are captured.

        Raises:
            NotFound: If the reservation does not exist
            ReservationExpired: If the hold expired before payment landed
            ReservationNotActive: If the hold was cancelled or already confirmed
            PaymentDeclined: If the outcome reports a failed payment
            InventoryCorruption: If the seat was not held by this reservation
        """
        try:
            async with self._transaction():
                reservation = await self._get_or_raise(reservation_id)
                if reservation.status is not ReservationStatus.ACTIVE:
                    raise self._not_active_error(reservation)

                if payment_outcome.status is not PaymentStatus.SUCCEEDED:
                    raise PaymentDeclined(
                        f"Payment for reservation {reservation_id} was not captured"
                    )

                if not await self.ledger.update_status(
                    reservation_id, ReservationStatus.ACTIVE, ReservationStatus.CONFIRMED
                ):
                    raise self._not_active_error(await self.ledger.get(reservation_id))

                if not await self.seats.compare_and_set_status(
                    reservation.event_id,
                    reservation.seat_id,
                    SeatStatus.HELD,
                    SeatStatus.SOLD,
                ):
                    logger.critical(
                        f"Inventory corruption: reservation {reservation_id} won confirmation "
                        f"but seat {reservation.event_id}/{reservation.seat_id} was not held"
                    )
                    raise InventoryCorruption()

                seat = await self.seats.get(reservation.event_id, reservation.seat_id)
                ticket = Ticket(
                    ticket_number=f"TK-{str(ULID())}",
                    reservation_id=reservation_id,
                    event_id=reservation.event_id,
                    seat_id=reservation.seat_id,
                    holder_id=reservation.holder_id,
                    category=seat.category,
                    price=seat.price,
                    payment_reference=payment_outcome.payment_reference,
                    issued_at=self.clock(),
                )
                self.db.add(ticket)
                await self.db.flush()
        except InventoryCorruption:
            await self._void_hold(reservation_id)
            raise

        logger.info(
            f"Reservation {reservation_id} confirmed, ticket {ticket.ticket_number} "
            f"issued to {ticket.holder_id}"
        )
        return ticket

    async def _void_hold(self, reservation_id: int) -> None:
        """Retire a hold that no longer owns its seat, leaving the seat untouched."""
        async with self._transaction():
            voided = await self.ledger.update_status(
                reservation_id, ReservationStatus.ACTIVE, ReservationStatus.CANCELLED
            )
        if voided:
            logger.critical(f"Reservation {reservation_id} voided after inventory corruption")

    async def get_reservation(self, reservation_id: int) -> Reservation:
        """Get reservation by ID."""
        return await self._get_or_raise(reservation_id)

    async def get_user_reservations(
        self,
        holder_id: str,
        event_id: int | None = None,
        active_only: bool = True,
    ) -> list[Reservation]:
        """Get reservations for a holder."""
        return await self.ledger.list_by_holder(
            holder_id,
            event_id=event_id,
            status=ReservationStatus.ACTIVE if active_only else None,
        )

    async def _expire_one(self, reservation_id: int, event_id: int, seat_id: str) -> bool:
        async with self._transaction():
            if not await self.ledger.update_status(
                reservation_id, ReservationStatus.ACTIVE, ReservationStatus.EXPIRED
            ):
                # Confirmed or cancelled between scan and update
                return False

            if not await self.seats.compare_and_set_status(
                event_id, seat_id, SeatStatus.HELD, SeatStatus.AVAILABLE
            ):
                logger.warning(
                    f"Seat {event_id}/{seat_id} was not held "
                    f"when reservation {reservation_id} expired"
                )
                return False
        return True

    async def _release_orphaned_holds(self, limit: int) -> int:
        orphans = [
            (seat.event_id, seat.seat_id)
            for seat in await self.seats.list_orphaned_holds(limit)
        ]
        await self.db.commit()

        released = 0
        for event_id, seat_id in orphans:
            try:
                async with self._transaction():
                    if await self.seats.release_orphaned_hold(event_id, seat_id):
                        released += 1
                        logger.warning(f"Released orphaned hold on seat {event_id}/{seat_id}")
            except Exception as e:
                logger.error(f"Failed to release orphaned seat {event_id}/{seat_id}: {e}")
        return released

    async def expire_old_reservations(
        self,
        now: datetime | None = None,
        limit: int | None = None,
    ) -> int:
        """
        Expire timed-out holds and release their seats.

        Each reservation is resolved in its own transaction; a failure on one
        row is logged and the sweep moves on.

        Returns:
            Number of seats released
        """
        now = now or self.clock()
        limit = limit or settings.REAPER_BATCH_SIZE

        candidates = [
            (r.reservation_id, r.event_id, r.seat_id)
            for r in await self.ledger.scan_expiring(now, limit)
        ]
        await self.db.commit()

        released = 0
        for reservation_id, event_id, seat_id in candidates:
            try:
                if await self._expire_one(reservation_id, event_id, seat_id):
                    released += 1
            except Exception as e:
                logger.error(f"Failed to expire reservation {reservation_id}: {e}")

        released += await self._release_orphaned_holds(limit)

        if released:
            logger.info(f"Released {released} seats from expired holds")
        return released
