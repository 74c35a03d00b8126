"""Reservation model."""

import enum
from datetime import datetime

from sqlalchemy import (
    BigInteger,
    DateTime,
    Enum,
    ForeignKeyConstraint,
    Index,
    String,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from seat_reservation.models.base import Base, BigIntPK


class ReservationStatus(str, enum.Enum):
    """Reservation status enum."""

    ACTIVE = "active"
    EXPIRED = "expired"
    CANCELLED = "cancelled"
    CONFIRMED = "confirmed"

    @property
    def is_terminal(self) -> bool:
        return self is not ReservationStatus.ACTIVE


class Reservation(Base):
    """Reservation model representing a time-bounded seat hold.

    Rows are never deleted; terminal reservations are kept for audit.
    """

    __tablename__ = "reservations"

    reservation_id: Mapped[int] = mapped_column(
        BigIntPK, primary_key=True, autoincrement=True
    )
    event_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    seat_id: Mapped[str] = mapped_column(String(20), nullable=False)
    holder_id: Mapped[str] = mapped_column(String(50), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    status: Mapped[ReservationStatus] = mapped_column(
        Enum(ReservationStatus), default=ReservationStatus.ACTIVE, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime, onupdate=func.current_timestamp()
    )

    __table_args__ = (
        ForeignKeyConstraint(
            ["event_id", "seat_id"],
            ["seats.event_id", "seats.seat_id"],
        ),
        Index("idx_reservation_seat", "event_id", "seat_id"),
        Index("idx_reservation_expires_at", "expires_at"),
        Index("idx_reservation_status_expires", "status", "expires_at"),
        Index("idx_reservation_holder", "holder_id"),
    )
