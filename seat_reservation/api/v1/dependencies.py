"""API dependencies."""

import secrets
from datetime import datetime
from typing import Annotated, Callable

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from seat_reservation.config import get_settings
from seat_reservation.database import get_db
from seat_reservation.services.event_service import EventService
from seat_reservation.services.reservation_service import ReservationService
from seat_reservation.services.seat_service import SeatService
from seat_reservation.services.ticket_service import TicketService

settings = get_settings()

# Type aliases
DBSession = Annotated[AsyncSession, Depends(get_db)]


def get_clock() -> Callable[[], datetime]:
    """Clock used for hold timestamps; overridden in tests."""
    return datetime.now


Clock = Annotated[Callable[[], datetime], Depends(get_clock)]


async def get_current_user_id(
    x_user_id: Annotated[str | None, Header()] = None,
) -> str | None:
    """
    Get the caller's user ID from header, if sent.
    In a real application, this would verify JWT tokens, etc.
    """
    return x_user_id


CurrentUser = Annotated[str | None, Depends(get_current_user_id)]


async def verify_payment_collaborator(
    x_payment_token: Annotated[str | None, Header()] = None,
) -> None:
    """Only the payment collaborator may confirm holds."""
    if not x_payment_token or not secrets.compare_digest(
        x_payment_token, settings.PAYMENT_COLLABORATOR_TOKEN
    ):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the payment collaborator can confirm reservations",
        )


def ensure_same_user(current_user: str | None, holder_id: str) -> None:
    """Reject callers acting for another holder."""
    if current_user is not None and current_user != holder_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Cannot act on another user's reservation",
        )


def get_event_service(db: DBSession) -> EventService:
    """Get event service."""
    return EventService(db)


def get_seat_service(db: DBSession) -> SeatService:
    """Get seat service."""
    return SeatService(db)


def get_reservation_service(db: DBSession, clock: Clock) -> ReservationService:
    """Get reservation service."""
    return ReservationService(db, clock=clock)


def get_ticket_service(db: DBSession) -> TicketService:
    """Get ticket service."""
    return TicketService(db)


# Annotated dependencies
EventServiceDep = Annotated[EventService, Depends(get_event_service)]
SeatServiceDep = Annotated[SeatService, Depends(get_seat_service)]
ReservationServiceDep = Annotated[ReservationService, Depends(get_reservation_service)]
TicketServiceDep = Annotated[TicketService, Depends(get_ticket_service)]
