"""Event setup and teardown."""

import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from seat_reservation.exceptions import EventHasActiveHolds, NotFound
from seat_reservation.models.event import Event, EventPricing, EventStatus
from seat_reservation.models.seat import Seat, SeatStatus
from seat_reservation.schemas.event import EventCreate
from seat_reservation.services.ledger_service import LedgerService
from seat_reservation.services.seat_service import SeatService

logger = logging.getLogger(__name__)


class EventService:
    """Service for event lifecycle: seat inventory is created here and never resized."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.seats = SeatService(db)
        self.ledger = LedgerService(db)

    async def create_event(self, event_data: EventCreate) -> Event:
        """Create an event, its category prices and every seat."""
        event = Event(
            event_name=event_data.event_name,
            event_date=event_data.event_date,
            venue_name=event_data.venue_name,
            status=EventStatus.ON_SALE,
            pricing=[
                EventPricing(category=category, price=price)
                for category, price in event_data.pricing.items()
            ],
        )
        self.db.add(event)
        await self.db.flush()

        seats = []
        for layout in event_data.rows:
            price = event_data.pricing[layout.category]
            for number in range(layout.start_number, layout.start_number + layout.seat_count):
                seats.append(
                    Seat(
                        event_id=event.event_id,
                        seat_id=f"{layout.row}{number}",
                        row=layout.row,
                        number=number,
                        category=layout.category,
                        price=price,
                        status=SeatStatus.AVAILABLE,
                        version=0,
                    )
                )
        await self.seats.add_seats(seats)

        await self.db.commit()
        logger.info(f"Created event {event.event_id} with {len(seats)} seats")
        return await self.get_event(event.event_id)

    async def get_event(self, event_id: int) -> Event | None:
        """Get event by ID."""
        result = await self.db.execute(
            select(Event)
            .where(Event.event_id == event_id)
            .options(selectinload(Event.pricing))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_event_with_seat_counts(self, event_id: int) -> dict | None:
        """Get event with seat count statistics."""
        event = await self.get_event(event_id)
        if not event:
            return None

        counts = await self.seats.count_by_status(event_id)

        return {
            "event": event,
            "total_seats": sum(counts.values()),
            "available_seat_count": counts[SeatStatus.AVAILABLE],
            "held_seat_count": counts[SeatStatus.HELD],
            "sold_seat_count": counts[SeatStatus.SOLD],
        }

    async def archive_event(self, event_id: int) -> Event:
        """
        Close an event to new holds.

        Refused while any hold is still active so no buyer loses a seat
        mid-checkout.
        """
        event = await self.get_event(event_id)
        if not event:
            raise NotFound(f"Event {event_id} not found")

        if event.status is EventStatus.ARCHIVED:
            return event

        active = await self.ledger.count_active_for_event(event_id)
        if active:
            await self.db.rollback()
            raise EventHasActiveHolds(
                f"Event {event_id} still has {active} active holds"
            )

        event.status = EventStatus.ARCHIVED
        event.archived_at = datetime.now()
        await self.db.commit()

        logger.info(f"Archived event {event_id}")
        return await self.get_event(event_id)
