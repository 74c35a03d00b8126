"""Events API endpoints."""

from fastapi import APIRouter, HTTPException, status

from seat_reservation.api.v1.dependencies import EventServiceDep
from seat_reservation.schemas.event import EventCreate, EventDetailResponse, EventResponse

router = APIRouter()


@router.post(
    "",
    response_model=EventResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an event and its seats",
)
async def create_event(
    event_data: EventCreate,
    event_service: EventServiceDep,
) -> EventResponse:
    """
    Create an event with a fixed seat inventory.

    Every row produces `seat_count` seats priced at the row category's price.
    Capacity and prices cannot change afterwards.
    """
    event = await event_service.create_event(event_data)
    return EventResponse.model_validate(event)


@router.get(
    "/{event_id}",
    response_model=EventDetailResponse,
    summary="Get event details",
)
async def get_event(
    event_id: int,
    event_service: EventServiceDep,
) -> EventDetailResponse:
    """Get event details with seat statistics."""
    result = await event_service.get_event_with_seat_counts(event_id)
    if not result:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Event not found",
        )

    event = result.pop("event")
    return EventDetailResponse(
        **EventResponse.model_validate(event).model_dump(),
        **result,
    )


@router.post(
    "/{event_id}/archive",
    response_model=EventResponse,
    summary="Archive an event",
)
async def archive_event(
    event_id: int,
    event_service: EventServiceDep,
) -> EventResponse:
    """Close the event to new holds. Refused with 409 while holds are active."""
    event = await event_service.archive_event(event_id)
    return EventResponse.model_validate(event)
