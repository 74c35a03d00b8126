"""Reservation engine errors and their HTTP mapping."""

from fastapi import status

SEAT_GONE_MESSAGE = "Seat is no longer available, please choose again"


class ReservationError(Exception):
    """Base class for reservation engine errors."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    error: str = "Reservation Error"

    def __init__(self, message: str | None = None):
        self.message = message or self.error
        super().__init__(self.message)


class NotFound(ReservationError):
    """Unknown event, seat or reservation id."""

    status_code = status.HTTP_404_NOT_FOUND
    error = "Not Found"


class SeatUnavailable(ReservationError):
    """Hold lost the race, or the seat is already held or sold."""

    status_code = status.HTTP_409_CONFLICT
    error = "Seat Unavailable"

    def __init__(self, message: str | None = None):
        super().__init__(message or SEAT_GONE_MESSAGE)


class ReservationExpired(ReservationError):
    """The hold is no longer active."""

    status_code = status.HTTP_410_GONE
    error = "Reservation Expired"

    def __init__(self, message: str | None = None):
        super().__init__(message or SEAT_GONE_MESSAGE)


class ReservationNotActive(ReservationError):
    """The reservation already reached a terminal state."""

    status_code = status.HTTP_409_CONFLICT
    error = "Reservation Not Active"


class PaymentDeclined(ReservationError):
    """Payment collaborator reported a failed capture."""

    status_code = status.HTTP_402_PAYMENT_REQUIRED
    error = "Payment Declined"


class EventHasActiveHolds(ReservationError):
    """Event cannot be archived while seats are held."""

    status_code = status.HTTP_409_CONFLICT
    error = "Event Has Active Holds"


class InventoryCorruption(ReservationError):
    """
    A confirm-time consistency check failed.

    Two holders believed they owned the same seat. Fatal: never retried,
    never exposed to clients beyond a generic 500.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "Internal Server Error"
