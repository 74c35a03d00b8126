"""API v1 main router."""

from fastapi import APIRouter

from seat_reservation.api.v1.events import router as events_router
from seat_reservation.api.v1.reservations import router as reservations_router
from seat_reservation.api.v1.seatmap import router as seatmap_router
from seat_reservation.api.v1.tickets import router as tickets_router
from seat_reservation.api.v1.users import router as users_router

router = APIRouter(prefix="/v1")

router.include_router(events_router, prefix="/events", tags=["Events"])
router.include_router(seatmap_router, prefix="/seatmap", tags=["Seat Map"])
router.include_router(reservations_router, prefix="/reservations", tags=["Reservations"])
router.include_router(users_router, prefix="/users", tags=["Tickets"])
router.include_router(tickets_router, prefix="/tickets", tags=["Tickets"])
