"""Ticket model."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    BigInteger,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from seat_reservation.models.base import Base, BigIntPK
from seat_reservation.models.seat import SeatCategory


class Ticket(Base):
    """Ticket issued once per confirmed reservation. Immutable after issue."""

    __tablename__ = "tickets"

    ticket_id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    ticket_number: Mapped[str] = mapped_column(String(50), nullable=False)
    reservation_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("reservations.reservation_id"), nullable=False
    )
    event_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    seat_id: Mapped[str] = mapped_column(String(20), nullable=False)
    holder_id: Mapped[str] = mapped_column(String(50), nullable=False)
    category: Mapped[SeatCategory] = mapped_column(Enum(SeatCategory), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    payment_reference: Mapped[str | None] = mapped_column(String(100))
    issued_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    __table_args__ = (
        UniqueConstraint("reservation_id", name="uk_ticket_reservation"),
        UniqueConstraint("ticket_number", name="uk_ticket_number"),
        Index("idx_ticket_holder", "holder_id"),
        Index("idx_ticket_event_seat", "event_id", "seat_id"),
    )
