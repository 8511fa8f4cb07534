"""Unit tests for broadcast_service.py."""

from datetime import date

import pytest

from society_engine.models.activity_log import ActivityAction
from society_engine.models.broadcast import ALL_TOWERS, AlertSeverity
from society_engine.services.errors import ValidationError


class TestAlerts:
    """Tests for emergency alerts."""

    def test_create_alert_for_tower(self, broadcasts):
        """Verify an alert targets an upper-cased tower with the given severity."""
        alert = broadcasts.create_alert("b", "Water cut", "No water 2-4 PM", "High")

        assert alert.id is not None
        assert alert.tower == "B"
        assert alert.severity == AlertSeverity.HIGH

    def test_create_alert_for_all_towers(self, broadcasts):
        """Verify "all" targets every tower and severity defaults to Low."""
        alert = broadcasts.create_alert("all", "Fire drill", "Drill at 11 AM")

        assert alert.tower == ALL_TOWERS
        assert alert.severity == AlertSeverity.LOW

    def test_unknown_tower(self, broadcasts):
        """Verify an unconfigured tower is rejected."""
        with pytest.raises(ValidationError, match="Unknown tower"):
            broadcasts.create_alert("Z", "Fire drill", "Drill at 11 AM")

    def test_unknown_severity(self, broadcasts):
        """Verify an unknown severity is rejected."""
        with pytest.raises(ValidationError):
            broadcasts.create_alert("A", "Fire drill", "Drill at 11 AM", "Critical")

    def test_blank_message(self, broadcasts):
        """Verify an alert needs a message."""
        with pytest.raises(ValidationError, match="Alert message is required"):
            broadcasts.create_alert("A", "Fire drill", "")

    def test_list_alerts_for_tower_includes_all(self, broadcasts, clock):
        """Verify a tower's alerts include society-wide ones, newest first."""
        everyone = broadcasts.create_alert("All", "Fire drill", "Drill at 11 AM")
        clock.advance(minutes=1)
        tower_a = broadcasts.create_alert("A", "Lift maintenance", "Lift off 2-3 PM")
        clock.advance(minutes=1)
        broadcasts.create_alert("B", "Water cut", "No water 2-4 PM")

        assert [a.id for a in broadcasts.list_alerts(tower="A")] == [tower_a.id, everyone.id]
        assert len(broadcasts.list_alerts()) == 3

    def test_logged(self, broadcasts, activity, admin):
        """Verify alert creation is logged with the target tower."""
        broadcasts.create_alert("A", "Lift maintenance", "Lift off 2-3 PM", "Medium", admin.id)

        [entry] = activity.list_entries(action=ActivityAction.CREATE_ALERT)
        assert entry.user_name == "Admin User"
        assert "Tower A" in entry.details


class TestEventsAndNotices:
    """Tests for events and notices."""

    def test_create_event(self, broadcasts):
        """Verify an event stores its ISO date."""
        event = broadcasts.create_event("Holi", "Colours in the clubhouse", "2026-03-14")

        assert event.event_date == date(2026, 3, 14)

    def test_event_bad_date(self, broadcasts):
        """Verify a non-ISO event date is rejected."""
        with pytest.raises(ValidationError):
            broadcasts.create_event("Holi Celebration", "Colours", "14/03/2026")

    def test_list_events_in_date_order(self, broadcasts):
        """Verify events list soonest first and filter by start date."""
        later = broadcasts.create_event("Diwali", "Lights", "2026-11-08")
        sooner = broadcasts.create_event("Holi", "Colours", "2026-03-14")

        assert [e.id for e in broadcasts.list_events()] == [sooner.id, later.id]
        assert [e.id for e in broadcasts.list_events(from_date=date(2026, 4, 1))] == [later.id]

    def test_create_and_list_notices(self, broadcasts, clock):
        """Verify notices list newest first and honour the limit."""
        first = broadcasts.create_notice("AGM", "Sunday 10 AM")
        clock.advance(days=1)
        second = broadcasts.create_notice("Parking", "New stickers available")

        assert [n.id for n in broadcasts.list_notices()] == [second.id, first.id]
        assert [n.id for n in broadcasts.list_notices(limit=1)] == [second.id]

    def test_notice_requires_title(self, broadcasts):
        """Verify a blank notice title is rejected."""
        with pytest.raises(ValidationError):
            broadcasts.create_notice(" ", "Sunday 10 AM")

    def test_each_creation_logged(self, broadcasts, activity):
        """Verify event and notice creation each get one log entry."""
        broadcasts.create_event("Holi", "Colours", "2026-03-14")
        broadcasts.create_notice("AGM", "Sunday 10 AM")

        assert activity.count_by_action(ActivityAction.CREATE_EVENT) == 1
        assert activity.count_by_action(ActivityAction.CREATE_NOTICE) == 1
