"""Reservation schemas."""

from datetime import datetime
from enum import Enum

from pydantic import Field

from seat_reservation.config import get_settings
from seat_reservation.models.reservation import ReservationStatus
from seat_reservation.schemas.common import BaseSchema

settings = get_settings()


class PaymentStatus(str, Enum):
    """Outcome reported by the payment collaborator."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"


class HoldRequest(BaseSchema):
    """Schema for holding a seat."""

    event_id: int
    seat_id: str = Field(..., min_length=1, max_length=20)
    holder_id: str = Field(..., min_length=1, max_length=50)
    duration_seconds: int | None = Field(None, ge=1, le=settings.MAX_HOLD_SECONDS)


class ReservationResponse(BaseSchema):
    """Schema for reservation response."""

    reservation_id: int
    event_id: int
    seat_id: str
    holder_id: str
    status: ReservationStatus
    created_at: datetime
    expires_at: datetime


class ReservationExtendRequest(BaseSchema):
    """Schema for extending a hold."""

    additional_seconds: int = Field(..., ge=1, le=settings.MAX_EXTEND_SECONDS)


class ReservationExtendResponse(BaseSchema):
    """Schema for extend response."""

    reservation_id: int
    new_expires_at: datetime


class PaymentOutcome(BaseSchema):
    """Payment result as reported by the payment collaborator."""

    status: PaymentStatus
    payment_reference: str | None = Field(None, max_length=100)


class ReservationConfirmRequest(BaseSchema):
    """Schema for confirming a hold after payment."""

    payment_outcome: PaymentOutcome


class CleanupResponse(BaseSchema):
    """Result of a manual reaper pass."""

    released_count: int
