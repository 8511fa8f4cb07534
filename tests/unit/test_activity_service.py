"""Unit tests for activity_service.py."""

import pytest

from society_engine.models.activity_log import ActivityAction
from society_engine.services.activity_service import SYSTEM_ACTOR, ActivityService
from society_engine.services.errors import NotFoundError


class TestLog:
    """Tests for ActivityService.log inside a store transaction."""

    def test_system_actor(self, store, activity, clock):
        """Verify an entry without an actor is attributed to the system."""
        store.run(
            lambda db: ActivityService.log(
                db, ActivityAction.CREATE_NOTICE, "Notice posted", clock()
            )
        )

        [entry] = activity.list_entries()
        assert entry.user_id is None
        assert entry.user_name == SYSTEM_ACTOR
        assert entry.details == "Notice posted"

    def test_named_actor(self, store, activity, admin, clock):
        """Verify an entry records the acting user's name."""
        store.run(
            lambda db: ActivityService.log(
                db, ActivityAction.CREATE_NOTICE, "Notice posted", clock(), admin.id
            )
        )

        [entry] = activity.list_entries(actor_id=admin.id)
        assert entry.user_name == "Admin User"

    def test_unknown_actor(self, store, activity, clock):
        """Verify an unknown actor id fails and leaves no entry behind."""
        with pytest.raises(NotFoundError, match="User 12 not found"):
            store.run(
                lambda db: ActivityService.log(
                    db, ActivityAction.CREATE_NOTICE, "Notice posted", clock(), 12
                )
            )

        assert activity.list_entries() == []


class TestQueries:
    """Tests for activity log queries."""

    def test_newest_first_with_limit(self, broadcasts, activity, clock):
        """Verify entries come back newest first and honour the limit."""
        broadcasts.create_notice("First", "one")
        clock.advance(minutes=1)
        broadcasts.create_notice("Second", "two")
        clock.advance(minutes=1)
        broadcasts.create_event("Third", "three", "2026-04-01")

        entries = activity.list_entries()
        assert [e.action for e in entries] == [
            ActivityAction.CREATE_EVENT,
            ActivityAction.CREATE_NOTICE,
            ActivityAction.CREATE_NOTICE,
        ]
        assert "Second" in entries[1].details
        assert len(activity.list_entries(limit=2)) == 2

    def test_filter_and_count_by_action(self, broadcasts, activity):
        """Verify entries can be filtered and counted by action kind."""
        broadcasts.create_notice("First", "one")
        broadcasts.create_notice("Second", "two")
        broadcasts.create_alert("All", "Drill", "Fire drill at noon")

        notices = activity.list_entries(action=ActivityAction.CREATE_NOTICE)
        assert len(notices) == 2
        assert activity.count_by_action(ActivityAction.CREATE_ALERT) == 1
        assert activity.count_by_action(ActivityAction.VISITOR_EXIT) == 0
