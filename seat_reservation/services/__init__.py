"""Services package."""

from seat_reservation.services.event_service import EventService
from seat_reservation.services.ledger_service import LedgerService
from seat_reservation.services.reservation_service import ReservationService
from seat_reservation.services.seat_service import SeatService
from seat_reservation.services.ticket_service import TicketService

__all__ = [
    "EventService",
    "SeatService",
    "LedgerService",
    "ReservationService",
    "TicketService",
]
