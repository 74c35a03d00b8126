"""Event model."""

import enum
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    BigInteger,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Numeric,
    String,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from seat_reservation.models.base import Base, BigIntPK
from seat_reservation.models.seat import SeatCategory

if TYPE_CHECKING:
    from seat_reservation.models.seat import Seat


class EventStatus(str, enum.Enum):
    """Event status enum."""

    ON_SALE = "on_sale"
    ARCHIVED = "archived"


class Event(Base):
    """Event model owning a fixed-capacity seat inventory."""

    __tablename__ = "events"

    event_id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    event_name: Mapped[str] = mapped_column(String(255), nullable=False)
    event_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    venue_name: Mapped[str | None] = mapped_column(String(255))
    status: Mapped[EventStatus] = mapped_column(
        Enum(EventStatus), default=EventStatus.ON_SALE
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.current_timestamp()
    )
    archived_at: Mapped[datetime | None] = mapped_column(DateTime)

    # Relationships
    seats: Mapped[list["Seat"]] = relationship("Seat", back_populates="event")
    pricing: Mapped[list["EventPricing"]] = relationship(
        "EventPricing", back_populates="event", cascade="all, delete-orphan"
    )

    __table_args__ = (Index("idx_event_status", "status"),)


class EventPricing(Base):
    """One price per seat category, fixed when the event is created."""

    __tablename__ = "event_pricing"

    event_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("events.event_id"), primary_key=True
    )
    category: Mapped[SeatCategory] = mapped_column(Enum(SeatCategory), primary_key=True)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    event: Mapped["Event"] = relationship("Event", back_populates="pricing")
