"""SQLAlchemy models."""

from seat_reservation.models.base import Base
from seat_reservation.models.event import Event, EventPricing, EventStatus
from seat_reservation.models.reservation import Reservation, ReservationStatus
from seat_reservation.models.seat import Seat, SeatCategory, SeatStatus
from seat_reservation.models.ticket import Ticket

__all__ = [
    "Base",
    "Event",
    "EventPricing",
    "EventStatus",
    "Seat",
    "SeatCategory",
    "SeatStatus",
    "Reservation",
    "ReservationStatus",
    "Ticket",
]
