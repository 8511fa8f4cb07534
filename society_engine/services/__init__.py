"""Engine services and the shared ledger store."""

from functools import lru_cache

from society_engine.config import get_settings
from society_engine.services.activity_service import ActivityService
from society_engine.services.billing_service import BillingPeriod, BillingService
from society_engine.services.booking_service import BookingService
from society_engine.services.broadcast_service import BroadcastService
from society_engine.services.complaint_service import ComplaintService
from society_engine.services.dashboard_service import DashboardService
from society_engine.services.directory_service import DirectoryService
from society_engine.services.ledger_store import LedgerStore
from society_engine.services.visitor_service import VisitorService


@lru_cache
def get_store() -> LedgerStore:
    """Process-wide ledger store built from settings."""
    return LedgerStore.from_settings(get_settings())


__all__ = [
    "ActivityService",
    "BillingPeriod",
    "BillingService",
    "BookingService",
    "BroadcastService",
    "ComplaintService",
    "DashboardService",
    "DirectoryService",
    "LedgerStore",
    "VisitorService",
    "get_store",
]
