"""Ticket queries."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from seat_reservation.models.ticket import Ticket


class TicketService:
    """Read-only access to issued tickets."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_ticket(self, ticket_id: int) -> Ticket | None:
        """Get ticket by ID."""
        result = await self.db.execute(select(Ticket).where(Ticket.ticket_id == ticket_id))
        return result.scalar_one_or_none()

    async def get_user_tickets(self, holder_id: str, event_id: int | None = None) -> list[Ticket]:
        """Get tickets issued to a holder, newest first."""
        query = select(Ticket).where(Ticket.holder_id == holder_id)

        if event_id is not None:
            query = query.where(Ticket.event_id == event_id)

        query = query.order_by(Ticket.issued_at.desc())

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_tickets_for_seat(self, event_id: int, seat_id: str) -> list[Ticket]:
        result = await self.db.execute(
            select(Ticket).where(Ticket.event_id == event_id, Ticket.seat_id == seat_id)
        )
        return list(result.scalars().all())
