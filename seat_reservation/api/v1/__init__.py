"""API v1 routers package."""

from seat_reservation.api.v1.events import router as events_router
from seat_reservation.api.v1.reservations import router as reservations_router
from seat_reservation.api.v1.seatmap import router as seatmap_router
from seat_reservation.api.v1.tickets import router as tickets_router
from seat_reservation.api.v1.users import router as users_router

__all__ = [
    "events_router",
    "seatmap_router",
    "reservations_router",
    "users_router",
    "tickets_router",
]
