"""Reservations API endpoints."""

from datetime import timedelta

from fastapi import APIRouter, Depends, Response, status

from seat_reservation.api.v1.dependencies import (
    CurrentUser,
    ReservationServiceDep,
    ensure_same_user,
    verify_payment_collaborator,
)
from seat_reservation.schemas.reservation import (
    CleanupResponse,
    HoldRequest,
    ReservationConfirmRequest,
    ReservationExtendRequest,
    ReservationExtendResponse,
    ReservationResponse,
)
from seat_reservation.schemas.ticket import TicketResponse

router = APIRouter()


@router.post(
    "",
    response_model=ReservationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Hold a seat",
)
async def hold_seat(
    hold_data: HoldRequest,
    current_user: CurrentUser,
    reservation_service: ReservationServiceDep,
) -> ReservationResponse:
    """
    Hold one seat for a buyer.

    Exactly one of any number of concurrent holds on the same seat succeeds;
    the rest get 409 and should re-poll the seat map. Holds expire after
    `duration_seconds` (default 10 minutes).
    """
    ensure_same_user(current_user, hold_data.holder_id)

    duration = (
        timedelta(seconds=hold_data.duration_seconds)
        if hold_data.duration_seconds
        else None
    )
    reservation = await reservation_service.hold(
        event_id=hold_data.event_id,
        seat_id=hold_data.seat_id,
        holder_id=hold_data.holder_id,
        duration=duration,
    )
    return ReservationResponse.model_validate(reservation)


@router.post(
    "/cleanup",
    response_model=CleanupResponse,
    summary="Run an expiry pass",
)
async def cleanup_expired(
    reservation_service: ReservationServiceDep,
) -> CleanupResponse:
    """Manually trigger the reaper pass that also runs on a timer."""
    released = await reservation_service.expire_old_reservations()
    return CleanupResponse(released_count=released)


@router.get(
    "",
    response_model=list[ReservationResponse],
    summary="Get holder reservations",
)
async def get_user_reservations(
    holder_id: str,
    current_user: CurrentUser,
    reservation_service: ReservationServiceDep,
    event_id: int | None = None,
    active_only: bool = True,
) -> list[ReservationResponse]:
    """Get reservations for a holder."""
    ensure_same_user(current_user, holder_id)

    reservations = await reservation_service.get_user_reservations(
        holder_id=holder_id,
        event_id=event_id,
        active_only=active_only,
    )
    return [ReservationResponse.model_validate(r) for r in reservations]


@router.get(
    "/{reservation_id}",
    response_model=ReservationResponse,
    summary="Get reservation details",
)
async def get_reservation(
    reservation_id: int,
    current_user: CurrentUser,
    reservation_service: ReservationServiceDep,
) -> ReservationResponse:
    """Get reservation details."""
    reservation = await reservation_service.get_reservation(reservation_id)
    ensure_same_user(current_user, reservation.holder_id)
    return ReservationResponse.model_validate(reservation)


@router.put(
    "/{reservation_id}/extend",
    response_model=ReservationExtendResponse,
    summary="Extend a hold",
)
async def extend_reservation(
    reservation_id: int,
    extend_data: ReservationExtendRequest,
    current_user: CurrentUser,
    reservation_service: ReservationServiceDep,
) -> ReservationExtendResponse:
    """Push an active hold's expiry forward. 410 once the hold is gone."""
    reservation = await reservation_service.get_reservation(reservation_id)
    ensure_same_user(current_user, reservation.holder_id)

    reservation = await reservation_service.extend(
        reservation_id,
        timedelta(seconds=extend_data.additional_seconds),
    )
    return ReservationExtendResponse(
        reservation_id=reservation.reservation_id,
        new_expires_at=reservation.expires_at,
    )


@router.delete(
    "/{reservation_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Cancel a hold",
)
async def cancel_reservation(
    reservation_id: int,
    current_user: CurrentUser,
    reservation_service: ReservationServiceDep,
) -> Response:
    """Cancel a hold. Idempotent: a terminal reservation is left as is."""
    reservation = await reservation_service.get_reservation(reservation_id)
    ensure_same_user(current_user, reservation.holder_id)

    await reservation_service.cancel(reservation_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{reservation_id}/confirm",
    response_model=TicketResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Confirm a paid hold",
    dependencies=[Depends(verify_payment_collaborator)],
)
async def confirm_reservation(
    reservation_id: int,
    confirm_data: ReservationConfirmRequest,
    reservation_service: ReservationServiceDep,
) -> TicketResponse:
    """
    Mark the seat sold and issue the ticket.

    Called by the payment collaborator once funds are captured.
    """
    ticket = await reservation_service.confirm(reservation_id, confirm_data.payment_outcome)
    return TicketResponse.model_validate(ticket)
