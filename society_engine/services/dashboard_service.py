"""Dashboard aggregates, computed on demand from the ledger store."""

from datetime import datetime
from typing import Callable, NamedTuple

from sqlalchemy import func, select

from society_engine.config import Settings, get_settings
from society_engine.models import utc_now
from society_engine.models.bill import BillStatus, MaintenanceBill
from society_engine.models.booking import Booking
from society_engine.models.complaint import Complaint, ComplaintStatus
from society_engine.models.flat import Flat
from society_engine.models.visitor import VisitorSession
from society_engine.services.billing_service import BillingService
from society_engine.services.booking_service import BookingService
from society_engine.services.complaint_service import ComplaintService
from society_engine.services.directory_service import DirectoryService, latest_bill_status_by_flat
from society_engine.services.ledger_store import LedgerStore
from society_engine.services.visitor_service import VisitorService


class AdminStats(NamedTuple):
    """Society-wide figures for the admin dashboard."""

    total_flats: int
    paid_flats: int
    unpaid_flats: int
    total_collected: int
    total_pending: int
    visitors_inside: int
    open_complaints: int


class ResidentDashboard(NamedTuple):
    """Everything a resident's home screen shows for their flat."""

    flat: Flat
    maintenance_status: BillStatus | None
    bills: list[MaintenanceBill]
    complaints: list[Complaint]
    upcoming_bookings: list[Booking]
    visitors: list[VisitorSession]


class DashboardService:
    """Read-only aggregate queries. Nothing here is cached or mutated."""

    def __init__(
        self,
        store: LedgerStore,
        settings: Settings | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.settings = settings or get_settings()
        self.clock = clock

    def admin_stats(self) -> AdminStats:
        """Compute the admin dashboard figures.

        A flat counts as paid when its most recent bill is PAID; unbilled flats count
        as unpaid.
        """
        latest = latest_bill_status_by_flat(self.store)
        summary = BillingService(self.store).billing_summary()

        with self.store.session() as db:
            total_flats = int(db.execute(select(func.count(Flat.id))).scalar() or 0)
            open_complaints = int(
                db.execute(
                    select(func.count(Complaint.id)).where(
                        Complaint.status != ComplaintStatus.RESOLVED
                    )
                ).scalar()
                or 0
            )

        paid_flats = sum(1 for status in latest.values() if status == BillStatus.PAID)
        return AdminStats(
            total_flats=total_flats,
            paid_flats=paid_flats,
            unpaid_flats=total_flats - paid_flats,
            total_collected=summary.total_collected,
            total_pending=summary.total_pending,
            visitors_inside=len(VisitorService(self.store).list_open_sessions()),
            open_complaints=open_complaints,
        )

    def resident_dashboard(self, flat_id: str) -> ResidentDashboard:
        """Collect a flat's bills, complaints, upcoming bookings and visitor history.

        Raises:
            NotFoundError: No such flat
        """
        flat = DirectoryService(self.store).get_flat(flat_id)
        bills = BillingService(self.store).list_bills(flat_id=flat_id)
        return ResidentDashboard(
            flat=flat,
            maintenance_status=bills[0].status if bills else None,
            bills=bills,
            complaints=ComplaintService(self.store, self.settings).list_complaints(flat_id=flat_id),
            upcoming_bookings=BookingService(self.store, self.settings).list_bookings(
                flat_id=flat_id, from_date=self.clock().date()
            ),
            visitors=VisitorService(self.store).list_history(flat_id=flat_id),
        )


__all__ = ["DashboardService", "AdminStats", "ResidentDashboard"]
