"""Unit tests for dashboard_service.py."""

from datetime import date
from unittest.mock import patch

import pytest

from society_engine.models.bill import BillStatus
from society_engine.models.visitor import VisitorStatus
from society_engine.services.dashboard_service import DashboardService
from society_engine.services.errors import NotFoundError


class TestAdminStats:
    """Tests for DashboardService.admin_stats."""

    def test_empty_society(self, dashboards):
        """Verify an empty store yields all-zero figures."""
        stats = dashboards.admin_stats()

        assert stats.total_flats == 0
        assert stats.paid_flats == 0
        assert stats.visitors_inside == 0
        assert stats.open_complaints == 0

    def test_figures(self, dashboards, billing, visitors, complaints, flats):
        """Verify paid flats, collections, open visits and open complaints are counted."""
        result = billing.generate_bills("March", 2026, 2500, "2026-03-31")
        billing.record_payment(result.bills[0].id, "ONLINE", "TXN1")
        billing.record_payment(result.bills[1].id, "ONLINE", "TXN2")
        inside = visitors.check_in("Courier", "A", "A-101")
        left = visitors.check_in("Plumber", "A", "A-102")
        visitors.check_out(left.id)
        done = complaints.raise_complaint("A-101", "Lift stuck", "Between floors", "Lift")
        complaints.raise_complaint("A-102", "Dirty lobby", "Not cleaned", "Cleaning")
        complaints.advance_status(done.id, "Resolved")

        stats = dashboards.admin_stats()

        assert stats.total_flats == 28
        assert stats.paid_flats == 2
        assert stats.unpaid_flats == 26
        assert stats.total_collected == 5000
        assert stats.total_pending == 26 * 2500
        assert stats.visitors_inside == 1
        assert stats.open_complaints == 1
        assert inside.id != left.id

    def test_unbilled_flats_count_as_unpaid(self, dashboards, flats):
        """Verify flats without any bill are reported as unpaid."""
        stats = dashboards.admin_stats()

        assert stats.total_flats == 28
        assert stats.unpaid_flats == 28


class TestResidentDashboard:
    """Tests for DashboardService.resident_dashboard."""

    def test_collects_flat_records(self, dashboards, billing, bookings, complaints, flats):
        """Verify bills, complaints and bookings are limited to the requested flat."""
        billing.generate_bills("February", 2026, 2000, "2026-02-28")
        march = billing.generate_bills("March", 2026, 2500, "2026-03-31")
        billing.record_payment(march.bills[0].id, "ONLINE", "TXN1")
        bookings.request_booking("Gym", "2026-03-12", "06:00 AM - 08:00 AM", "A-101")
        bookings.request_booking("Gym", "2026-03-12", "08:00 AM - 10:00 AM", "A-102")
        complaints.raise_complaint("A-101", "Lift stuck", "Between floors", "Lift")

        board = dashboards.resident_dashboard("A-101")

        assert board.flat.id == "A-101"
        assert board.maintenance_status == BillStatus.PAID
        assert [(b.month, b.year) for b in board.bills] == [(3, 2026), (2, 2026)]
        assert len(board.complaints) == 1
        assert [b.booking_date for b in board.upcoming_bookings] == [date(2026, 3, 12)]

    def test_visitor_history(self, dashboards, visitors, flats, clock):
        """Verify the flat's visits are listed newest first, open and closed alike."""
        courier = visitors.check_in("Courier", "A", "A-101")
        visitors.check_out(courier.id)
        clock.advance(hours=1)
        plumber = visitors.check_in("Plumber", "A", "A-101")
        visitors.check_in("Guest", "A", "A-102")

        board = dashboards.resident_dashboard("A-101")

        assert [v.id for v in board.visitors] == [plumber.id, courier.id]
        assert [v.status for v in board.visitors] == [VisitorStatus.IN, VisitorStatus.OUT]

    def test_no_visitors(self, dashboards, flats):
        """Verify a flat nobody visited has an empty history."""
        assert dashboards.resident_dashboard("A-101").visitors == []

    def test_past_bookings_not_upcoming(self, dashboards, bookings, flats, clock):
        """Verify bookings before today are left out of upcoming bookings."""
        bookings.request_booking("Gym", "2026-03-11", "06:00 AM - 08:00 AM", "A-101")
        clock.advance(days=2)

        assert dashboards.resident_dashboard("A-101").upcoming_bookings == []

    def test_unbilled_flat(self, dashboards, flats):
        """Verify a flat without bills has no maintenance status."""
        assert dashboards.resident_dashboard("A-704").maintenance_status is None

    def test_unknown_flat(self, dashboards):
        """Verify an unknown flat raises NotFoundError."""
        with pytest.raises(NotFoundError):
            dashboards.resident_dashboard("Z-101")

    def test_uses_injected_settings(self, store, settings, clock, flats):
        """Verify the dashboard hands its own settings to the services it queries."""
        with (
            patch("society_engine.services.dashboard_service.get_settings") as dashboard_default,
            patch("society_engine.services.booking_service.get_settings") as booking_default,
            patch("society_engine.services.complaint_service.get_settings") as complaint_default,
        ):
            dashboards = DashboardService(store, settings, clock)
            dashboards.resident_dashboard("A-101")

        assert dashboards.settings is settings
        dashboard_default.assert_not_called()
        booking_default.assert_not_called()
        complaint_default.assert_not_called()
