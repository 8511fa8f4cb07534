"""Unit tests for directory_service.py."""

import pytest

from society_engine.models.bill import BillStatus
from society_engine.models.flat import flat_code
from society_engine.models.user import UserRole
from society_engine.services.errors import NotFoundError, ValidationError


def _statuses(directory):
    return {item.flat.id: item.maintenance_status for item in directory.list_flats_with_status()}


def test_flat_code():
    """Verify flat codes are trimmed and upper-cased as TOWER-NUMBER."""
    assert flat_code(" a", "101 ") == "A-101"


class TestFlats:
    """Tests for flat records."""

    def test_add_flat(self, directory):
        """Verify a flat is stored under its code with its owner."""
        flat = directory.add_flat("A", 1, "101", owner_name="Rajesh Kumar")

        assert flat.id == "A-101"
        assert directory.get_flat("A-101").owner_name == "Rajesh Kumar"

    def test_add_flat_is_idempotent(self, directory):
        """Verify adding an existing flat returns it unchanged."""
        directory.add_flat("A", 1, "101", owner_name="Rajesh Kumar")
        again = directory.add_flat("A", 1, "101", owner_name="Someone Else")

        assert again.owner_name == "Rajesh Kumar"
        assert len(directory.list_flats()) == 1

    def test_add_flat_requires_number(self, directory):
        """Verify a blank flat number is rejected."""
        with pytest.raises(ValidationError):
            directory.add_flat("A", 1, " ")

    def test_get_flat_not_found(self, directory):
        """Verify get_flat raises NotFoundError for an unknown code."""
        with pytest.raises(NotFoundError, match="Flat A-101 not found"):
            directory.get_flat("A-101")

    def test_list_flats_ordered_and_filtered(self, directory):
        """Verify flats list in code order and filter by tower case-insensitively."""
        directory.add_flat("B", 1, "101")
        directory.add_flat("A", 2, "201")
        directory.add_flat("A", 1, "102")
        directory.add_flat("A", 1, "101")

        assert [f.id for f in directory.list_flats()] == ["A-101", "A-102", "A-201", "B-101"]
        assert [f.id for f in directory.list_flats(tower="b")] == ["B-101"]

    def test_status_follows_most_recent_bill(self, directory, billing, flats):
        """Verify maintenance status follows each flat's most recent bill."""
        feb = billing.generate_bills("February", 2026, 2000, "2026-02-28")
        billing.record_payment(feb.bills[0].id, "ONLINE", "TXN-FEB")
        directory.add_flat("B", 1, "101")

        statuses = _statuses(directory)
        assert statuses["A-101"] == BillStatus.PAID
        assert statuses["A-102"] == BillStatus.UNPAID
        assert statuses["B-101"] is None

        # A newer unpaid bill replaces the paid one as the current status
        billing.generate_bills("March", 2026, 2500, "2026-03-31")
        statuses = _statuses(directory)
        assert statuses["A-101"] == BillStatus.UNPAID


class TestUsers:
    """Tests for user records."""

    def test_add_resident(self, directory, flats):
        """Verify a resident is linked to a flat and found by email."""
        user = directory.add_user("Rajesh Kumar", flat_id="A-101", email="rajesh@example.com")

        assert user.role == UserRole.RESIDENT
        assert directory.get_user(user.id).flat_id == "A-101"
        assert directory.find_user_by_email("rajesh@example.com").id == user.id

    def test_resident_requires_flat(self, directory):
        """Verify a resident without a flat is rejected."""
        with pytest.raises(ValidationError, match="linked to a flat"):
            directory.add_user("Rajesh Kumar")

    def test_unknown_flat(self, directory):
        """Verify linking a user to an unknown flat raises NotFoundError."""
        with pytest.raises(NotFoundError):
            directory.add_user("Rajesh Kumar", flat_id="A-101")

    def test_staff_without_flat(self, directory):
        """Verify staff users need no flat."""
        guard = directory.add_user("Security Guard", UserRole.SECURITY)

        assert guard.flat_id is None

    def test_get_user_not_found(self, directory):
        """Verify get_user raises NotFoundError for an unknown id."""
        with pytest.raises(NotFoundError, match="User 1 not found"):
            directory.get_user(1)

    def test_find_unknown_email(self, directory):
        """Verify an unregistered email finds nobody."""
        assert directory.find_user_by_email("nobody@example.com") is None
