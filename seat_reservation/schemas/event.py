"""Event schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Annotated

from pydantic import Field, model_validator

from seat_reservation.models.event import EventStatus
from seat_reservation.models.seat import SeatCategory
from seat_reservation.schemas.common import BaseSchema


class RowLayout(BaseSchema):
    """One row of seats; seat ids are the row label followed by the number."""

    row: str = Field(..., min_length=1, max_length=10)
    seat_count: int = Field(..., ge=1, le=500)
    category: SeatCategory
    start_number: int = Field(1, ge=1, le=9999)


class EventCreate(BaseSchema):
    """Schema for creating an event together with its seat inventory."""

    event_name: str = Field(..., min_length=1, max_length=255)
    event_date: datetime
    venue_name: str | None = Field(None, max_length=255)
    pricing: dict[SeatCategory, Annotated[Decimal, Field(gt=0, decimal_places=2)]]
    rows: list[RowLayout] = Field(..., min_length=1)

    @model_validator(mode="after")
    def check_layout(self) -> "EventCreate":
        labels = [r.row for r in self.rows]
        if len(labels) != len(set(labels)):
            raise ValueError("Row labels must be unique")

        seat_ids = [
            f"{r.row}{number}"
            for r in self.rows
            for number in range(r.start_number, r.start_number + r.seat_count)
        ]
        if len(seat_ids) != len(set(seat_ids)):
            raise ValueError("Row layout produces duplicate seat ids")

        missing = {r.category for r in self.rows} - set(self.pricing)
        if missing:
            names = ", ".join(sorted(c.value for c in missing))
            raise ValueError(f"No price given for categories: {names}")
        return self


class PricingResponse(BaseSchema):
    category: SeatCategory
    price: Decimal


class EventResponse(BaseSchema):
    """Schema for event response."""

    event_id: int
    event_name: str
    event_date: datetime
    venue_name: str | None
    status: EventStatus
    created_at: datetime | None = None
    archived_at: datetime | None = None
    pricing: list[PricingResponse] = []


class EventDetailResponse(EventResponse):
    """Schema for detailed event response with seat info."""

    total_seats: int = 0
    available_seat_count: int = 0
    held_seat_count: int = 0
    sold_seat_count: int = 0
