"""Integration tests: engine-wide properties across services sharing one store."""

from datetime import date
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from society_engine.models.activity_log import ActivityAction
from society_engine.models.bill import BillStatus
from society_engine.models.complaint import ComplaintStatus
from society_engine.models.visitor import VisitorStatus
from society_engine.services import BillingService
from society_engine.services.errors import (
    AlreadyOutError,
    AlreadyPaidError,
    InvalidTransitionError,
    PastDateError,
    SlotTakenError,
    TransientStoreError,
)

MORNING = "06:00 AM - 08:00 AM"

pytestmark = pytest.mark.integration


class FlakyBillingService(BillingService):
    """Billing service whose store keeps failing for one flat."""

    failing_flat = "A-301"

    def _create_bill(self, db, flat_id, **kwargs):
        if flat_id == self.failing_flat:
            locked = Exception("database is locked")
            raise OperationalError("INSERT INTO maintenance_bills", {}, locked)
        return super()._create_bill(db, flat_id=flat_id, **kwargs)


class TestScenarios:
    """Walkthroughs of the main engine flows."""

    def test_generate_and_regenerate(self, billing, flats):
        """Verify generation for a period is idempotent."""
        first = billing.generate_bills("March", 2026, 1500, "2026-03-10")
        assert len(first.created) == 28
        assert all(bill.status == BillStatus.UNPAID for bill in first.bills)

        repeat = billing.generate_bills("March", 2026, 1500, "2026-03-10")
        assert repeat.created == []
        assert {b.id for b in repeat.bills} == {b.id for b in first.bills}

    def test_booking_then_conflict(self, bookings, flats, clock):
        """Verify a booked slot rejects the next request for it."""
        bookings.request_booking("Gym", "2026-03-20", MORNING, "A-101")

        with pytest.raises(SlotTakenError):
            bookings.request_booking("Gym", "2026-03-20", MORNING, "A-202")

        with pytest.raises(PastDateError):
            bookings.request_booking("Gym", "2026-03-01", MORNING, "A-202")

    def test_visitor_in_and_out(self, visitors, flats):
        """Verify a visit moves from IN to OUT exactly once."""
        session = visitors.check_in("Rahul Sharma", "A", "A-101")
        assert session.status == VisitorStatus.IN

        closed = visitors.check_out(session.id)
        assert closed.status == VisitorStatus.OUT
        assert closed.exit_time is not None

        with pytest.raises(AlreadyOutError):
            visitors.check_out(session.id)

    def test_payment_then_repeat(self, billing, flats):
        """Verify a bill accepts one payment only."""
        bill = billing.generate_bills("March", 2026, 1500, "2026-03-10").bills[0]

        paid = billing.record_payment(bill.id, "ONLINE", "TXN123")
        assert paid.status == BillStatus.PAID
        assert billing.get_payment_for_bill(bill.id) is not None

        with pytest.raises(AlreadyPaidError):
            billing.record_payment(bill.id, "ONLINE", "TXN123")

    def test_complaint_skip_then_reopen(self, complaints, flats):
        """Verify a complaint may skip to Resolved but never reopen."""
        complaint = complaints.raise_complaint("A-101", "Leak", "Bathroom ceiling leak", "Water")
        assert complaint.status == ComplaintStatus.PENDING

        resolved = complaints.advance_status(complaint.id, ComplaintStatus.RESOLVED)
        assert resolved.status == ComplaintStatus.RESOLVED

        with pytest.raises(InvalidTransitionError):
            complaints.advance_status(complaint.id, ComplaintStatus.PENDING)


class TestRetrySafety:
    """Commands interrupted by store failures can be retried safely."""

    def test_generation_resumes_after_store_failure(self, store, clock, activity, flats):
        """Verify a rerun after a store failure bills only the flats left over."""
        flaky = FlakyBillingService(store, clock)

        with patch("society_engine.services.ledger_store.time.sleep"):
            with pytest.raises(TransientStoreError):
                flaky.generate_bills("March", 2026, 1500, "2026-03-10")

        # Flats billed before the failure keep their bills
        partial_bills = flaky.list_bills()
        assert 0 < len(partial_bills) < 28
        assert "A-301" not in {b.flat_id for b in partial_bills}

        result = BillingService(store, clock).generate_bills("March", 2026, 1500, "2026-03-10")

        assert len(result.bills) == 28
        assert len(result.created) == 28 - len(partial_bills)
        assert activity.count_by_action(ActivityAction.GENERATE_BILLS) == 28


class TestLogCompleteness:
    """Every successful mutation has exactly one log entry; failures have none."""

    def test_counts_match_successes(self, billing, bookings, visitors, complaints, activity, flats):
        """Verify log entries per action equal the successful commands of that kind."""
        generated = billing.generate_bills("March", 2026, 1500, "2026-03-10")
        billing.generate_bills("March", 2026, 1500, "2026-03-10")

        billing.record_payment(generated.bills[0].id, "ONLINE", "TXN1")
        with pytest.raises(AlreadyPaidError):
            billing.record_payment(generated.bills[0].id, "ONLINE", "TXN2")

        bookings.request_booking("Gym", date(2026, 3, 12), MORNING, "A-101")
        with pytest.raises(SlotTakenError):
            bookings.request_booking("Gym", date(2026, 3, 12), MORNING, "A-102")

        session = visitors.check_in("Courier", "A", "A-101")
        visitors.check_out(session.id)
        with pytest.raises(AlreadyOutError):
            visitors.check_out(session.id)

        complaint = complaints.raise_complaint("A-101", "Leak", "Ceiling leak", "Water")
        complaints.advance_status(complaint.id, "In Progress")
        complaints.advance_status(complaint.id, "Resolved")
        with pytest.raises(InvalidTransitionError):
            complaints.advance_status(complaint.id, "Pending")

        expected = {
            ActivityAction.GENERATE_BILLS: 28,
            ActivityAction.RECORD_PAYMENT: 1,
            ActivityAction.BOOK_AMENITY: 1,
            ActivityAction.VISITOR_ENTRY: 1,
            ActivityAction.VISITOR_EXIT: 1,
            ActivityAction.RAISE_COMPLAINT: 1,
            ActivityAction.UPDATE_COMPLAINT: 2,
        }
        for action, count in expected.items():
            assert activity.count_by_action(action) == count, action
        assert len(activity.list_entries(limit=1000)) == sum(expected.values())
