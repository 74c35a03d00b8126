"""Seat schemas."""

from datetime import datetime
from decimal import Decimal

from seat_reservation.models.seat import SeatCategory, SeatStatus
from seat_reservation.schemas.common import BaseSchema


class SeatResponse(BaseSchema):
    """Schema for seat response."""

    event_id: int
    seat_id: str
    row: str
    number: int
    category: SeatCategory
    price: Decimal
    status: SeatStatus
    created_at: datetime | None = None


class SeatMapSummary(BaseSchema):
    """Seat counts per status."""

    total: int
    available: int
    held: int
    sold: int


class SeatMapResponse(BaseSchema):
    """Read-only snapshot of an event's seats."""

    event_id: int
    summary: SeatMapSummary
    seats: list[SeatResponse]
