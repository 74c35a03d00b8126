"""Pydantic schemas for API request/response."""

from seat_reservation.schemas.event import EventCreate, EventDetailResponse, EventResponse, RowLayout
from seat_reservation.schemas.reservation import (
    CleanupResponse,
    HoldRequest,
    PaymentOutcome,
    PaymentStatus,
    ReservationConfirmRequest,
    ReservationExtendRequest,
    ReservationExtendResponse,
    ReservationResponse,
)
from seat_reservation.schemas.seat import SeatMapResponse, SeatMapSummary, SeatResponse
from seat_reservation.schemas.ticket import TicketResponse

__all__ = [
    "EventCreate",
    "EventResponse",
    "EventDetailResponse",
    "RowLayout",
    "SeatResponse",
    "SeatMapResponse",
    "SeatMapSummary",
    "HoldRequest",
    "ReservationResponse",
    "ReservationExtendRequest",
    "ReservationExtendResponse",
    "ReservationConfirmRequest",
    "PaymentOutcome",
    "PaymentStatus",
    "CleanupResponse",
    "TicketResponse",
]
