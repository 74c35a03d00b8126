"""Seat model."""

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
    Integer,
    Numeric,
    String,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from seat_reservation.models.base import Base

if TYPE_CHECKING:
    from seat_reservation.models.event import Event


class SeatCategory(str, enum.Enum):
    """Seat pricing tier."""

    VIP = "vip"
    FAN_PIT = "fan-pit"
    GENERAL = "general"
    BALCONY = "balcony"


class SeatStatus(str, enum.Enum):
    """Seat status enum."""

    AVAILABLE = "available"
    HELD = "held"
    SOLD = "sold"


class Seat(Base):
    """Seat model keyed by (event_id, seat_id).

    Only ``status`` and ``version`` change after the event is set up, and
    both change exclusively through the compare-and-set in SeatService.
    """

    __tablename__ = "seats"

    event_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("events.event_id"), primary_key=True
    )
    seat_id: Mapped[str] = mapped_column(String(20), primary_key=True)
    row: Mapped[str] = mapped_column(String(20), nullable=False)
    number: Mapped[int] = mapped_column(Integer, nullable=False)
    category: Mapped[SeatCategory] = mapped_column(Enum(SeatCategory), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    status: Mapped[SeatStatus] = mapped_column(Enum(SeatStatus), default=SeatStatus.AVAILABLE)
    version: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.current_timestamp()
    )

    # Relationships
    event: Mapped["Event"] = relationship("Event", back_populates="seats")

    __table_args__ = (
        Index("idx_seat_event_status", "event_id", "status"),
        Index("idx_seat_event_category", "event_id", "category"),
    )
