"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from seat_reservation.api.v1.router import router as v1_router
from seat_reservation.config import get_settings
from seat_reservation.database import init_models
from seat_reservation.exceptions import InventoryCorruption, ReservationError
from seat_reservation.redis_client import close_redis, get_redis, redis_healthy
from seat_reservation.schemas.common import ErrorResponse
from seat_reservation.tasks import background_tasks


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info("Starting Seat Reservation Engine...")

    await init_models()
    logger.info("Database schema ready")

    await get_redis()

    if settings.REAPER_ENABLED:
        await background_tasks.start()

    yield

    # Shutdown
    logger.info("Shutting down Seat Reservation Engine...")

    await background_tasks.stop()

    await close_redis()
    logger.info("Redis connection closed")


async def reservation_error_handler(request: Request, error: ReservationError) -> JSONResponse:
    """Map engine errors to HTTP responses."""
    if isinstance(error, InventoryCorruption):
        # Detail stays in the logs; clients only see a generic failure
        logger.critical(
            f"Inventory corruption on {request.method} {request.url.path}: {error.message}"
        )
        detail = None
    else:
        detail = error.message

    return JSONResponse(
        status_code=error.status_code,
        content=ErrorResponse(
            error=error.error,
            detail=detail,
            timestamp=datetime.now(),
        ).model_dump(mode="json"),
    )


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="""
## Seat Reservation Engine

Holds a specific seat for a specific buyer for a bounded time, guarantees
that no two concurrent buyers can hold or buy the same seat, and reclaims
abandoned holds automatically.

- **Compare-and-set**: every seat and reservation change is one conditional
  row update; a lost race returns 409 immediately
- **Bounded holds**: every hold has a hard TTL, extendable only while active
- **Expiry reaper**: background sweep releasing seats from timed-out holds

### Workflow
1. Fetch the seat map
2. Hold a seat (`POST /api/v1/reservations`)
3. Optionally extend the hold
4. The payment collaborator confirms the hold, issuing the ticket
5. Or cancel the hold; abandoned holds are released by the reaper
        """,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include API routers
    app.include_router(v1_router, prefix="/api")

    # Health check endpoint
    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": settings.APP_VERSION,
            "redis": "up" if await redis_healthy() else "down",
        }

    app.add_exception_handler(ReservationError, reservation_error_handler)

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle uncaught exceptions."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal Server Error",
                "detail": str(exc) if settings.DEBUG else None,
            },
        )

    return app


# Create application instance
app = create_app()


def run():
    """Run the application with uvicorn."""
    uvicorn.run(
        "seat_reservation.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    run()
