"""Ticket schemas."""

from datetime import datetime
from decimal import Decimal

from seat_reservation.models.seat import SeatCategory
from seat_reservation.schemas.common import BaseSchema


class TicketResponse(BaseSchema):
    """Schema for ticket response."""

    ticket_id: int
    ticket_number: str
    reservation_id: int
    event_id: int
    seat_id: str
    holder_id: str
    category: SeatCategory
    price: Decimal
    payment_reference: str | None = None
    issued_at: datetime
