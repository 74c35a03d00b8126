"""Ticket lookup endpoints."""

from fastapi import APIRouter, HTTPException, status

from seat_reservation.api.v1.dependencies import CurrentUser, TicketServiceDep, ensure_same_user
from seat_reservation.schemas.ticket import TicketResponse

router = APIRouter()


@router.get(
    "/{ticket_id}",
    response_model=TicketResponse,
    summary="Get ticket details",
)
async def get_ticket(
    ticket_id: int,
    current_user: CurrentUser,
    ticket_service: TicketServiceDep,
) -> TicketResponse:
    """Get an issued ticket by ID."""
    ticket = await ticket_service.get_ticket(ticket_id)
    if not ticket:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Ticket not found",
        )
    ensure_same_user(current_user, ticket.holder_id)
    return TicketResponse.model_validate(ticket)
