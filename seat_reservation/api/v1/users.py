"""User-facing ticket endpoints."""

from fastapi import APIRouter

from seat_reservation.api.v1.dependencies import CurrentUser, TicketServiceDep, ensure_same_user
from seat_reservation.schemas.ticket import TicketResponse

router = APIRouter()


@router.get(
    "/{holder_id}/tickets",
    response_model=list[TicketResponse],
    summary="Get tickets for a holder",
)
async def get_user_tickets(
    holder_id: str,
    current_user: CurrentUser,
    ticket_service: TicketServiceDep,
    event_id: int | None = None,
) -> list[TicketResponse]:
    """List tickets issued to a holder, newest first."""
    ensure_same_user(current_user, holder_id)

    tickets = await ticket_service.get_user_tickets(holder_id, event_id=event_id)
    return [TicketResponse.model_validate(t) for t in tickets]
