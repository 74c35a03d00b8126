"""Seat map API endpoints."""

from fastapi import APIRouter, HTTPException, Query, status

from seat_reservation.api.v1.dependencies import EventServiceDep, SeatServiceDep
from seat_reservation.models.seat import SeatCategory, SeatStatus
from seat_reservation.schemas.seat import SeatMapResponse, SeatMapSummary, SeatResponse

router = APIRouter()


@router.get(
    "/{event_id}",
    response_model=SeatMapResponse,
    summary="Get seat map",
)
async def get_seatmap(
    event_id: int,
    event_service: EventServiceDep,
    seat_service: SeatServiceDep,
    status_filter: SeatStatus | None = Query(None, alias="status"),
    category: SeatCategory | None = None,
) -> SeatMapResponse:
    """
    Read-only snapshot of every seat and its status.

    Statuses can change the moment this returns; a hold is the only way to
    claim a seat.
    """
    event = await event_service.get_event(event_id)
    if not event:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Event not found",
        )

    seats = await seat_service.list_by_event(event_id, status=status_filter, category=category)
    counts = await seat_service.count_by_status(event_id)

    return SeatMapResponse(
        event_id=event_id,
        summary=SeatMapSummary(
            total=sum(counts.values()),
            available=counts[SeatStatus.AVAILABLE],
            held=counts[SeatStatus.HELD],
            sold=counts[SeatStatus.SOLD],
        ),
        seats=[SeatResponse.model_validate(s) for s in seats],
    )


@router.get(
    "/{event_id}/seats/{seat_id}",
    response_model=SeatResponse,
    summary="Get seat details",
)
async def get_seat(
    event_id: int,
    seat_id: str,
    seat_service: SeatServiceDep,
) -> SeatResponse:
    """Get seat details by ID."""
    seat = await seat_service.get(event_id, seat_id)
    if not seat:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Seat not found",
        )
    return SeatResponse.model_validate(seat)
