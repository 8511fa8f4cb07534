"""Directory of flats and users referenced by the engine."""

import logging
from typing import NamedTuple

from sqlalchemy import func, select

from society_engine.models.bill import BillStatus, MaintenanceBill
from society_engine.models.flat import Flat, flat_code
from society_engine.models.user import User, UserRole
from society_engine.services.errors import NotFoundError, ValidationError
from society_engine.services.ledger_store import LedgerStore

logger = logging.getLogger(__name__)


class FlatStatus(NamedTuple):
    """Flat with its maintenance status derived from its most recent bill.

    maintenance_status is None for a flat that has never been billed.
    """

    flat: Flat
    maintenance_status: BillStatus | None


class DirectoryService:
    """Service for Flat and User records.

    Flats and users are created by registration and setup tooling outside the
    engine's command set; they are not activity-logged.
    """

    def __init__(self, store: LedgerStore):
        self.store = store

    def add_flat(
        self,
        tower: str,
        floor: int,
        flat_number: str,
        owner_name: str | None = None,
    ) -> Flat:
        """Create a flat, or return the existing one with the same code.

        Returns:
            The flat identified by "<tower>-<flat_number>"
        """
        if not tower or not str(flat_number).strip():
            raise ValidationError("Tower and flat number are required")

        code = flat_code(tower, flat_number)

        def command(db):
            flat = db.get(Flat, code)
            if flat is None:
                flat = Flat(
                    id=code,
                    tower=tower.strip().upper(),
                    floor=floor,
                    flat_number=str(flat_number).strip(),
                    owner_name=owner_name,
                )
                db.add(flat)
                db.flush()
                logger.debug("Created flat %s", code)
            return flat

        return self.store.run(command, f"flat setup {code}")

    def get_flat(self, flat_id: str) -> Flat:
        """Get flat by code.

        Raises:
            NotFoundError: No such flat
        """
        with self.store.session() as db:
            flat = db.get(Flat, flat_id)
            if flat is None:
                raise NotFoundError("Flat", flat_id)
            return flat

    def list_flats(self, tower: str | None = None) -> list[Flat]:
        """List flats ordered by tower, floor and flat number."""
        stmt = select(Flat)
        if tower is not None:
            stmt = stmt.where(Flat.tower == tower.upper())
        stmt = stmt.order_by(Flat.tower, Flat.floor, Flat.flat_number)

        with self.store.session() as db:
            return list(db.execute(stmt).scalars().all())

    def list_flats_with_status(self, tower: str | None = None) -> list[FlatStatus]:
        """List flats with maintenance status taken from each flat's most recent bill."""
        latest = latest_bill_status_by_flat(self.store)
        return [FlatStatus(flat, latest.get(flat.id)) for flat in self.list_flats(tower)]

    def add_user(
        self,
        name: str,
        role: UserRole = UserRole.RESIDENT,
        flat_id: str | None = None,
        email: str | None = None,
        phone: str | None = None,
    ) -> User:
        """Register a user identity that commands can be attributed to.

        Raises:
            ValidationError: Blank name, or a resident without a flat
            NotFoundError: flat_id does not exist
        """
        if not name or not name.strip():
            raise ValidationError("User name is required")
        if role == UserRole.RESIDENT and flat_id is None:
            raise ValidationError("Residents must be linked to a flat")

        def command(db):
            if flat_id is not None and db.get(Flat, flat_id) is None:
                raise NotFoundError("Flat", flat_id)
            user = User(name=name.strip(), role=role, flat_id=flat_id, email=email, phone=phone)
            db.add(user)
            db.flush()
            return user

        user = self.store.run(command, f"user setup {name}")
        logger.info("Registered %s user %s (id=%d)", role.value, user.name, user.id)
        return user

    def get_user(self, user_id: int) -> User:
        """Get user by ID.

        Raises:
            NotFoundError: No such user
        """
        with self.store.session() as db:
            user = db.get(User, user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            return user

    def find_user_by_email(self, email: str) -> User | None:
        """Get user by email address, if registered."""
        with self.store.session() as db:
            return db.execute(select(User).where(User.email == email)).scalar_one_or_none()


def latest_bill_status_by_flat(store: LedgerStore) -> dict[str, BillStatus]:
    """Map flat code -> status of that flat's most recent bill (by year, month)."""
    period_key = MaintenanceBill.year * 100 + MaintenanceBill.month
    latest = (
        select(
            MaintenanceBill.flat_id.label("flat_id"),
            func.max(period_key).label("period_key"),
        )
        .group_by(MaintenanceBill.flat_id)
        .subquery()
    )
    stmt = select(MaintenanceBill.flat_id, MaintenanceBill.status).join(
        latest,
        (MaintenanceBill.flat_id == latest.c.flat_id) & (period_key == latest.c.period_key),
    )

    with store.session() as db:
        return {flat_id: status for flat_id, status in db.execute(stmt).all()}


__all__ = ["DirectoryService", "FlatStatus", "latest_bill_status_by_flat"]
