"""Shared fixtures: an in-memory ledger store, a controllable clock and a small society."""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from society_engine.api.app import create_app
from society_engine.api.dependencies import get_clock
from society_engine.config import Settings, get_settings
from society_engine.models.user import UserRole
from society_engine.services import (
    BillingService,
    BookingService,
    ComplaintService,
    DirectoryService,
    LedgerStore,
    VisitorService,
    get_store,
)
from society_engine.services.activity_service import ActivityService
from society_engine.services.broadcast_service import BroadcastService
from society_engine.services.dashboard_service import DashboardService

FLOORS = 7
FLATS_PER_FLOOR = 4


class FrozenClock:
    """Clock that only moves when a test moves it."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def settings() -> Settings:
    """Default settings, ignoring any local .env file."""
    return Settings(_env_file=None, database_url="sqlite://")


@pytest.fixture
def store():
    """Fresh in-memory store with the full schema."""
    ledger = LedgerStore("sqlite://", timeout=1.0, max_retries=2)
    ledger.create_all()
    yield ledger
    ledger.dispose()


@pytest.fixture
def clock() -> FrozenClock:
    """Clock frozen at 2026-03-10 09:00 UTC."""
    return FrozenClock(datetime(2026, 3, 10, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def directory(store) -> DirectoryService:
    return DirectoryService(store)


@pytest.fixture
def flats(directory):
    """Tower A: 7 floors x 4 flats = 28 flats (A-101 .. A-704)."""
    created = []
    for floor in range(1, FLOORS + 1):
        for n in range(1, FLATS_PER_FLOOR + 1):
            flat = directory.add_flat("A", floor, f"{floor}0{n}", owner_name=f"Owner {floor}{n}")
            created.append(flat)
    return created


@pytest.fixture
def admin(directory):
    return directory.add_user("Admin User", UserRole.ADMIN, email="admin@society.com")


@pytest.fixture
def guard(directory):
    return directory.add_user("Security Guard", UserRole.SECURITY, email="security@society.com")


@pytest.fixture
def resident(directory, flats):
    return directory.add_user("Rajesh Kumar", UserRole.RESIDENT, flat_id="A-101")


@pytest.fixture
def billing(store, clock) -> BillingService:
    return BillingService(store, clock)


@pytest.fixture
def bookings(store, settings, clock) -> BookingService:
    return BookingService(store, settings, clock)


@pytest.fixture
def visitors(store, clock) -> VisitorService:
    return VisitorService(store, clock)


@pytest.fixture
def complaints(store, settings, clock) -> ComplaintService:
    return ComplaintService(store, settings, clock)


@pytest.fixture
def broadcasts(store, settings, clock) -> BroadcastService:
    return BroadcastService(store, settings, clock)


@pytest.fixture
def activity(store) -> ActivityService:
    return ActivityService(store)


@pytest.fixture
def dashboards(store, settings, clock) -> DashboardService:
    return DashboardService(store, settings, clock)


@pytest.fixture
def client(store, settings, clock):
    """API client wired to the test store, settings and clock."""
    app = create_app(settings)
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_clock] = lambda: clock
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
