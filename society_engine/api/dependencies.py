"""FastAPI dependencies shared by the routers."""

from datetime import datetime
from typing import Callable

from fastapi import Depends, Header

from society_engine.config import Settings, get_settings
from society_engine.models import utc_now
from society_engine.services import (
    ActivityService,
    BillingService,
    BookingService,
    BroadcastService,
    ComplaintService,
    DashboardService,
    DirectoryService,
    LedgerStore,
    VisitorService,
    get_store,
)

Clock = Callable[[], datetime]


def get_clock() -> Clock:
    """Time source for commands (overridden in tests)."""
    return utc_now


def get_actor_id(x_actor_id: int | None = Header(default=None)) -> int | None:
    """Acting user, as asserted by the authenticating front end."""
    return x_actor_id


def get_billing_service(
    store: LedgerStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
) -> BillingService:
    return BillingService(store, clock)


def get_booking_service(
    store: LedgerStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
    clock: Clock = Depends(get_clock),
) -> BookingService:
    return BookingService(store, settings, clock)


def get_visitor_service(
    store: LedgerStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
) -> VisitorService:
    return VisitorService(store, clock)


def get_complaint_service(
    store: LedgerStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
    clock: Clock = Depends(get_clock),
) -> ComplaintService:
    return ComplaintService(store, settings, clock)


def get_broadcast_service(
    store: LedgerStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
    clock: Clock = Depends(get_clock),
) -> BroadcastService:
    return BroadcastService(store, settings, clock)


def get_activity_service(store: LedgerStore = Depends(get_store)) -> ActivityService:
    return ActivityService(store)


def get_directory_service(store: LedgerStore = Depends(get_store)) -> DirectoryService:
    return DirectoryService(store)


def get_dashboard_service(
    store: LedgerStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
    clock: Clock = Depends(get_clock),
) -> DashboardService:
    return DashboardService(store, settings, clock)
