"""Reservation engine tests: hold, extend, cancel and confirm."""

import asyncio
from datetime import timedelta
from decimal import Decimal

import pytest

from seat_reservation.exceptions import (
    InventoryCorruption,
    NotFound,
    PaymentDeclined,
    ReservationError,
    ReservationExpired,
    ReservationNotActive,
    SeatUnavailable,
)
from seat_reservation.models.reservation import ReservationStatus
from seat_reservation.models.seat import SeatCategory, SeatStatus
from seat_reservation.schemas.reservation import PaymentOutcome, PaymentStatus
from seat_reservation.services.event_service import EventService
from seat_reservation.services.seat_service import SeatService
from seat_reservation.services.ticket_service import TicketService

PAID = PaymentOutcome(status=PaymentStatus.SUCCEEDED, payment_reference="pi_123")


class TestHold:
    @pytest.mark.asyncio
    async def test_hold_available_seat(self, call_engine, read_seat, event_id, clock):
        reservation = await call_engine("hold", event_id, "A1", "u1")

        assert reservation.reservation_id is not None
        assert reservation.status is ReservationStatus.ACTIVE
        assert reservation.holder_id == "u1"
        assert reservation.created_at == clock()
        assert reservation.expires_at == clock() + timedelta(minutes=10)

        seat = await read_seat(event_id, "A1")
        assert seat.status is SeatStatus.HELD
        assert seat.version == 1

    @pytest.mark.asyncio
    async def test_hold_custom_duration(self, call_engine, event_id, clock):
        reservation = await call_engine(
            "hold", event_id, "A1", "u1", duration=timedelta(seconds=90)
        )
        assert reservation.expires_at == clock() + timedelta(seconds=90)

    @pytest.mark.asyncio
    async def test_hold_rejects_non_positive_duration(self, call_engine, event_id):
        with pytest.raises(ReservationError):
            await call_engine("hold", event_id, "A1", "u1", duration=timedelta(0))

    @pytest.mark.asyncio
    async def test_hold_unknown_seat(self, call_engine, event_id):
        with pytest.raises(NotFound):
            await call_engine("hold", event_id, "Z9", "u1")

    @pytest.mark.asyncio
    async def test_hold_already_held_seat(self, call_engine, event_id):
        await call_engine("hold", event_id, "A1", "u1")
        with pytest.raises(SeatUnavailable):
            await call_engine("hold", event_id, "A1", "u2")

    @pytest.mark.asyncio
    async def test_hold_sold_seat(self, call_engine, event_id):
        reservation = await call_engine("hold", event_id, "A1", "u1")
        await call_engine("confirm", reservation.reservation_id, PAID)

        with pytest.raises(SeatUnavailable):
            await call_engine("hold", event_id, "A1", "u2")

    @pytest.mark.asyncio
    async def test_hold_on_archived_event(self, call_engine, session_factory, event_id):
        async with session_factory() as db:
            await EventService(db).archive_event(event_id)

        with pytest.raises(SeatUnavailable):
            await call_engine("hold", event_id, "A1", "u1")

    @pytest.mark.asyncio
    async def test_no_double_hold(self, call_engine, read_seat, event_id):
        """Concurrent holds on one seat: exactly one wins."""
        attempts = 10
        results = await asyncio.gather(
            *(call_engine("hold", event_id, "B2", f"buyer-{i}") for i in range(attempts)),
            return_exceptions=True,
        )

        winners = [r for r in results if not isinstance(r, Exception)]
        losers = [r for r in results if isinstance(r, Exception)]
        assert len(winners) == 1
        assert len(losers) == attempts - 1
        assert all(isinstance(e, SeatUnavailable) for e in losers)

        seat = await read_seat(event_id, "B2")
        assert seat.status is SeatStatus.HELD
        assert seat.version == 1

    @pytest.mark.asyncio
    async def test_concurrent_holds_on_different_seats_all_succeed(self, call_engine, event_id):
        results = await asyncio.gather(
            *(call_engine("hold", event_id, f"A{n}", f"buyer-{n}") for n in range(1, 6))
        )
        assert len({r.reservation_id for r in results}) == 5


class TestExtend:
    @pytest.mark.asyncio
    async def test_extend_pushes_expiry_forward(self, call_engine, event_id):
        reservation = await call_engine("hold", event_id, "A1", "u1")

        extended = await call_engine(
            "extend", reservation.reservation_id, timedelta(minutes=5)
        )
        assert extended.expires_at == reservation.expires_at + timedelta(minutes=5)

        again = await call_engine("extend", reservation.reservation_id, timedelta(seconds=1))
        assert again.expires_at > extended.expires_at

    @pytest.mark.asyncio
    async def test_extend_unknown_reservation(self, call_engine, event_id):
        with pytest.raises(NotFound):
            await call_engine("extend", 9999, timedelta(minutes=5))

    @pytest.mark.asyncio
    async def test_extend_rejects_non_positive(self, call_engine, event_id):
        reservation = await call_engine("hold", event_id, "A1", "u1")
        with pytest.raises(ReservationError):
            await call_engine("extend", reservation.reservation_id, timedelta(0))

    @pytest.mark.asyncio
    async def test_extend_cancelled_fails(self, call_engine, event_id):
        reservation = await call_engine("hold", event_id, "A1", "u1")
        await call_engine("cancel", reservation.reservation_id)

        with pytest.raises(ReservationExpired):
            await call_engine("extend", reservation.reservation_id, timedelta(minutes=5))

    @pytest.mark.asyncio
    async def test_extend_confirmed_fails(self, call_engine, event_id):
        reservation = await call_engine("hold", event_id, "A1", "u1")
        await call_engine("confirm", reservation.reservation_id, PAID)

        with pytest.raises(ReservationExpired):
            await call_engine("extend", reservation.reservation_id, timedelta(minutes=5))

    @pytest.mark.asyncio
    async def test_extend_expired_fails(self, call_engine, event_id, clock):
        reservation = await call_engine(
            "hold", event_id, "A1", "u1", duration=timedelta(seconds=30)
        )
        clock.advance(31)
        await call_engine("expire_old_reservations")

        with pytest.raises(ReservationExpired):
            await call_engine("extend", reservation.reservation_id, timedelta(minutes=5))

    @pytest.mark.asyncio
    async def test_extend_past_deadline_before_reaper_runs(
        self, call_engine, read_reservation, event_id, clock
    ):
        reservation = await call_engine(
            "hold", event_id, "A1", "u1", duration=timedelta(seconds=30)
        )
        clock.advance(30)

        with pytest.raises(ReservationExpired):
            await call_engine("extend", reservation.reservation_id, timedelta(minutes=5))

        unchanged = await read_reservation(reservation.reservation_id)
        assert unchanged.expires_at == reservation.expires_at


class TestCancel:
    @pytest.mark.asyncio
    async def test_cancel_releases_seat(self, call_engine, read_seat, read_reservation, event_id):
        reservation = await call_engine("hold", event_id, "A1", "u1")

        assert await call_engine("cancel", reservation.reservation_id) is True

        assert (await read_reservation(reservation.reservation_id)).status is ReservationStatus.CANCELLED
        seat = await read_seat(event_id, "A1")
        assert seat.status is SeatStatus.AVAILABLE
        assert seat.version == 2

        # Seat can be held again by someone else
        await call_engine("hold", event_id, "A1", "u2")

    @pytest.mark.asyncio
    async def test_cancel_is_idempotent(self, call_engine, read_seat, event_id):
        reservation = await call_engine("hold", event_id, "A1", "u1")
        await call_engine("cancel", reservation.reservation_id)

        assert await call_engine("cancel", reservation.reservation_id) is False
        assert (await read_seat(event_id, "A1")).version == 2

    @pytest.mark.asyncio
    async def test_cancel_confirmed_is_noop(self, call_engine, read_seat, read_reservation, event_id):
        reservation = await call_engine("hold", event_id, "A1", "u1")
        await call_engine("confirm", reservation.reservation_id, PAID)

        assert await call_engine("cancel", reservation.reservation_id) is False
        assert (await read_reservation(reservation.reservation_id)).status is ReservationStatus.CONFIRMED
        assert (await read_seat(event_id, "A1")).status is SeatStatus.SOLD

    @pytest.mark.asyncio
    async def test_cancel_unknown_reservation(self, call_engine, event_id):
        with pytest.raises(NotFound):
            await call_engine("cancel", 9999)


class TestConfirm:
    @pytest.mark.asyncio
    async def test_confirm_issues_ticket(
        self, call_engine, read_seat, read_reservation, session_factory, event_id, clock
    ):
        reservation = await call_engine("hold", event_id, "A1", "u1")

        ticket = await call_engine("confirm", reservation.reservation_id, PAID)

        assert ticket.ticket_number.startswith("TK-")
        assert ticket.reservation_id == reservation.reservation_id
        assert ticket.seat_id == "A1"
        assert ticket.holder_id == "u1"
        assert ticket.category is SeatCategory.VIP
        assert ticket.price == Decimal("250.00")
        assert ticket.payment_reference == "pi_123"
        assert ticket.issued_at == clock()

        assert (await read_seat(event_id, "A1")).status is SeatStatus.SOLD
        assert (await read_reservation(reservation.reservation_id)).status is ReservationStatus.CONFIRMED

    @pytest.mark.asyncio
    async def test_no_double_confirm(self, call_engine, session_factory, event_id):
        reservation = await call_engine("hold", event_id, "A1", "u1")

        results = await asyncio.gather(
            *(call_engine("confirm", reservation.reservation_id, PAID) for _ in range(5)),
            return_exceptions=True,
        )

        tickets = [r for r in results if not isinstance(r, Exception)]
        errors = [r for r in results if isinstance(r, Exception)]
        assert len(tickets) == 1
        assert all(isinstance(e, ReservationNotActive) for e in errors)

        async with session_factory() as db:
            issued = await TicketService(db).get_tickets_for_seat(event_id, "A1")
        assert len(issued) == 1

    @pytest.mark.asyncio
    async def test_confirm_after_expiry(self, call_engine, session_factory, event_id, clock):
        reservation = await call_engine(
            "hold", event_id, "A1", "u1", duration=timedelta(seconds=60)
        )
        clock.advance(61)
        await call_engine("expire_old_reservations")

        with pytest.raises(ReservationExpired):
            await call_engine("confirm", reservation.reservation_id, PAID)

        async with session_factory() as db:
            assert await TicketService(db).get_tickets_for_seat(event_id, "A1") == []

    @pytest.mark.asyncio
    async def test_confirm_after_cancel(self, call_engine, event_id):
        reservation = await call_engine("hold", event_id, "A1", "u1")
        await call_engine("cancel", reservation.reservation_id)

        with pytest.raises(ReservationNotActive):
            await call_engine("confirm", reservation.reservation_id, PAID)

    @pytest.mark.asyncio
    async def test_failed_payment_keeps_hold(
        self, call_engine, read_seat, read_reservation, event_id
    ):
        reservation = await call_engine("hold", event_id, "A1", "u1")

        with pytest.raises(PaymentDeclined):
            await call_engine(
                "confirm",
                reservation.reservation_id,
                PaymentOutcome(status=PaymentStatus.FAILED),
            )

        assert (await read_reservation(reservation.reservation_id)).status is ReservationStatus.ACTIVE
        assert (await read_seat(event_id, "A1")).status is SeatStatus.HELD

        # Payment can be retried while the hold lives
        await call_engine("confirm", reservation.reservation_id, PAID)

    @pytest.mark.asyncio
    async def test_confirm_when_seat_not_held_is_corruption(
        self, call_engine, read_seat, read_reservation, session_factory, event_id
    ):
        reservation = await call_engine("hold", event_id, "A1", "u1")

        # Simulate a broken invariant: the seat was released behind the ledger's back
        async with session_factory() as db:
            assert await SeatService(db).compare_and_set_status(
                event_id, "A1", SeatStatus.HELD, SeatStatus.AVAILABLE
            )
            await db.commit()

        with pytest.raises(InventoryCorruption):
            await call_engine("confirm", reservation.reservation_id, PAID)

        # No sale or ticket was kept, and the hold is retired
        assert (await read_reservation(reservation.reservation_id)).status is ReservationStatus.CANCELLED
        assert (await read_seat(event_id, "A1")).status is SeatStatus.AVAILABLE
        async with session_factory() as db:
            assert await TicketService(db).get_tickets_for_seat(event_id, "A1") == []

    @pytest.mark.asyncio
    async def test_corrupted_hold_cannot_release_next_buyers_seat(
        self, call_engine, read_seat, read_reservation, session_factory, event_id, clock
    ):
        first = await call_engine("hold", event_id, "A1", "u1", duration=timedelta(seconds=60))

        async with session_factory() as db:
            await SeatService(db).compare_and_set_status(
                event_id, "A1", SeatStatus.HELD, SeatStatus.AVAILABLE
            )
            await db.commit()

        with pytest.raises(InventoryCorruption):
            await call_engine("confirm", first.reservation_id, PAID)

        second = await call_engine("hold", event_id, "A1", "u2", duration=timedelta(minutes=10))
        clock.advance(61)

        assert await call_engine("expire_old_reservations") == 0
        assert (await read_seat(event_id, "A1")).status is SeatStatus.HELD
        assert (await read_reservation(second.reservation_id)).status is ReservationStatus.ACTIVE

        with pytest.raises(ReservationNotActive):
            await call_engine("confirm", first.reservation_id, PAID)


class TestQueries:
    @pytest.mark.asyncio
    async def test_get_user_reservations(self, call_engine, event_id):
        first = await call_engine("hold", event_id, "A1", "u1")
        await call_engine("hold", event_id, "A2", "u1")
        await call_engine("hold", event_id, "A3", "u2")
        await call_engine("cancel", first.reservation_id)

        active = await call_engine("get_user_reservations", "u1")
        assert [r.seat_id for r in active] == ["A2"]

        everything = await call_engine("get_user_reservations", "u1", active_only=False)
        assert {r.seat_id for r in everything} == {"A1", "A2"}

    @pytest.mark.asyncio
    async def test_get_reservation_not_found(self, call_engine, event_id):
        with pytest.raises(NotFound):
            await call_engine("get_reservation", 12345)
