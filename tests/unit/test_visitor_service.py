"""Unit tests for visitor_service.py."""

import pytest

from society_engine.models.activity_log import ActivityAction
from society_engine.models.visitor import VisitorStatus
from society_engine.services.errors import AlreadyOutError, NotFoundError, ValidationError


class TestCheckIn:
    """Tests for VisitorService.check_in."""

    def test_opens_session(self, visitors, flats, clock):
        """Verify check-in opens an IN session stamped with the current time."""
        visitor = visitors.check_in("Ramesh Delivery", "A", "A-101")

        assert visitor.id is not None
        assert visitor.status == VisitorStatus.IN
        assert visitor.entry_time == clock.now
        assert visitor.exit_time is None
        assert visitor.tower == "A"

    def test_tower_is_normalized(self, visitors, flats):
        """Verify the tower label is trimmed and upper-cased."""
        assert visitors.check_in("Courier", " a ", "A-101").tower == "A"

    def test_same_name_may_have_several_open_sessions(self, visitors, flats):
        """Verify visitor names need not be unique across open sessions."""
        first = visitors.check_in("Courier", "A", "A-101")
        second = visitors.check_in("Courier", "A", "A-102")

        assert first.id != second.id
        assert len(visitors.list_open_sessions()) == 2

    def test_blank_name(self, visitors, flats):
        """Verify a blank visitor name is rejected."""
        with pytest.raises(ValidationError, match="name is required"):
            visitors.check_in("  ", "A", "A-101")

    def test_unknown_flat(self, visitors, flats):
        """Verify check-in to an unknown flat raises NotFoundError."""
        with pytest.raises(NotFoundError):
            visitors.check_in("Courier", "A", "A-999")

    def test_tower_must_match_flat(self, visitors, flats):
        """Verify the tower must be the flat's own tower."""
        with pytest.raises(ValidationError, match="is in tower A"):
            visitors.check_in("Courier", "B", "A-101")

    def test_logged(self, visitors, activity, guard, flats):
        """Verify check-in is logged under the guard."""
        visitors.check_in("Courier", "A", "A-101", actor_id=guard.id)

        [entry] = activity.list_entries(action=ActivityAction.VISITOR_ENTRY)
        assert entry.user_name == "Security Guard"
        assert "Courier" in entry.details


class TestCheckOut:
    """Tests for VisitorService.check_out."""

    def test_closes_session(self, visitors, flats, clock):
        """Verify check-out sets status OUT and the exit time."""
        opened = visitors.check_in("Courier", "A", "A-101")
        exit_at = clock.advance(minutes=25)

        closed = visitors.check_out(opened.id)

        assert closed.status == VisitorStatus.OUT
        assert closed.exit_time is not None
        assert closed.exit_time.replace(tzinfo=None) == exit_at.replace(tzinfo=None)

    def test_second_checkout_rejected_and_exit_time_kept(self, visitors, flats, clock):
        """Verify a repeat check-out raises AlreadyOutError and keeps the first exit time."""
        opened = visitors.check_in("Courier", "A", "A-101")
        clock.advance(minutes=10)
        visitors.check_out(opened.id)
        first_exit = visitors.get_session(opened.id).exit_time
        clock.advance(minutes=30)

        with pytest.raises(AlreadyOutError) as exc_info:
            visitors.check_out(opened.id)

        assert exc_info.value.code == "already_out"
        assert visitors.get_session(opened.id).exit_time == first_exit

    def test_unknown_session(self, visitors):
        """Verify checking out an unknown session raises NotFoundError."""
        with pytest.raises(NotFoundError, match="Visitor session 42 not found"):
            visitors.check_out(42)

    def test_exit_not_before_entry(self, visitors, flats, clock):
        """Verify the exit time is never before the entry time."""
        opened = visitors.check_in("Courier", "A", "A-101")
        clock.advance(seconds=1)
        visitors.check_out(opened.id)

        stored = visitors.get_session(opened.id)
        assert stored.exit_time >= stored.entry_time

    def test_logged_once(self, visitors, activity, flats):
        """Verify only the successful check-out is logged."""
        opened = visitors.check_in("Courier", "A", "A-101")
        visitors.check_out(opened.id)
        with pytest.raises(AlreadyOutError):
            visitors.check_out(opened.id)

        entries = activity.list_entries(action=ActivityAction.VISITOR_EXIT)
        assert len(entries) == 1
        assert entries[0].user_name == "System"


class TestQueries:
    """Tests for visitor listings."""

    def test_open_sessions_oldest_first(self, visitors, directory, flats, clock):
        """Verify open sessions list oldest first and filter by tower."""
        directory.add_flat("B", 1, "101")
        first = visitors.check_in("First", "A", "A-101")
        clock.advance(minutes=5)
        second = visitors.check_in("Second", "B", "B-101")
        clock.advance(minutes=5)
        third = visitors.check_in("Third", "A", "A-102")
        visitors.check_out(third.id)

        assert [v.id for v in visitors.list_open_sessions()] == [first.id, second.id]
        assert [v.id for v in visitors.list_open_sessions(tower="b")] == [second.id]

    def test_history_newest_first(self, visitors, flats, clock):
        """Verify history includes closed sessions, newest first, with a limit."""
        first = visitors.check_in("First", "A", "A-101")
        clock.advance(minutes=5)
        second = visitors.check_in("Second", "A", "A-101")
        visitors.check_out(first.id)

        history = visitors.list_history(flat_id="A-101")
        assert [v.id for v in history] == [second.id, first.id]
        assert visitors.list_history(limit=1)[0].id == second.id
