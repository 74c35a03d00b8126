"""Shared fixtures: an on-disk SQLite database per test and a controllable clock."""

import os
from datetime import datetime, timedelta
from decimal import Decimal

# Settings are cached on first import, so the test environment goes in first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["REAPER_ENABLED"] = "false"
os.environ["PAYMENT_COLLABORATOR_TOKEN"] = "test-payment-token"

from httpx import ASGITransport, AsyncClient  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402

from seat_reservation.api.v1.dependencies import get_clock  # noqa: E402
from seat_reservation.database import build_engine, build_session_factory, get_db, init_models  # noqa: E402
from seat_reservation.main import app  # noqa: E402
from seat_reservation.models.seat import SeatCategory  # noqa: E402
from seat_reservation.schemas.event import EventCreate, RowLayout  # noqa: E402
from seat_reservation.services.event_service import EventService  # noqa: E402
from seat_reservation.services.ledger_service import LedgerService  # noqa: E402
from seat_reservation.services.reservation_service import ReservationService  # noqa: E402
from seat_reservation.services.seat_service import SeatService  # noqa: E402

PAYMENT_HEADERS = {"X-Payment-Token": "test-payment-token"}


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2026, 10, 19, 12, 0, 0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> datetime:
        self.now += timedelta(seconds=seconds)
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest_asyncio.fixture
async def async_engine(tmp_path):
    """Create an engine over a fresh SQLite file."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'seats.db'}")
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(async_engine):
    return build_session_factory(async_engine)


@pytest.fixture
def call_engine(session_factory, clock):
    """Run one engine operation in its own session, like one request."""

    async def _call(operation: str, *args, **kwargs):
        async with session_factory() as db:
            service = ReservationService(db, clock=clock)
            return await getattr(service, operation)(*args, **kwargs)

    return _call


@pytest.fixture
def read_seat(session_factory):
    async def _read(event_id: int, seat_id: str):
        async with session_factory() as db:
            return await SeatService(db).get(event_id, seat_id)

    return _read


@pytest.fixture
def read_reservation(session_factory):
    async def _read(reservation_id: int):
        async with session_factory() as db:
            return await LedgerService(db).get(reservation_id)

    return _read


def sample_event() -> EventCreate:
    return EventCreate(
        event_name="Arena Night",
        event_date=datetime(2026, 12, 31, 20, 0, 0),
        venue_name="Main Arena",
        pricing={
            SeatCategory.VIP: Decimal("250.00"),
            SeatCategory.GENERAL: Decimal("80.00"),
        },
        rows=[
            RowLayout(row="A", seat_count=5, category=SeatCategory.VIP),
            RowLayout(row="B", seat_count=5, category=SeatCategory.GENERAL),
        ],
    )


@pytest_asyncio.fixture
async def event_id(session_factory):
    """An on-sale event with seats A1-A5 (vip) and B1-B5 (general)."""
    async with session_factory() as db:
        event = await EventService(db).create_event(sample_event())
        return event.event_id


@pytest_asyncio.fixture
async def async_client(session_factory, clock):
    """Create async test client bound to the per-test database."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
