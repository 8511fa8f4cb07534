"""Complaint workflow: raising complaints and moving them forward."""

import logging
from datetime import datetime
from functools import partial
from typing import Callable

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from society_engine.config import Settings, get_settings
from society_engine.models import utc_now
from society_engine.models.activity_log import ActivityAction
from society_engine.models.complaint import Complaint, ComplaintStatus
from society_engine.models.flat import Flat
from society_engine.services.activity_service import ActivityService
from society_engine.services.errors import (
    InvalidCategoryError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from society_engine.services.ledger_store import LedgerStore
from society_engine.services.parsers import parse_enum

logger = logging.getLogger(__name__)


def check_transition(current: ComplaintStatus, new_status: ComplaintStatus) -> None:
    """Allow only forward moves: Pending -> In Progress -> Resolved.

    Skipping forward (Pending -> Resolved) is allowed; staying put or moving back is not.

    Raises:
        InvalidTransitionError: If new_status does not come after current
    """
    if new_status.rank <= current.rank:
        raise InvalidTransitionError(
            f"Cannot move complaint from '{current.value}' to '{new_status.value}'"
        )


class ComplaintService:
    """Service owning Complaint records and their status."""

    def __init__(
        self,
        store: LedgerStore,
        settings: Settings | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.settings = settings or get_settings()
        self.clock = clock

    def raise_complaint(
        self,
        flat_id: str,
        title: str,
        description: str,
        category: str,
        actor_id: int | None = None,
    ) -> Complaint:
        """Create a PENDING complaint for a flat.

        Raises:
            ValidationError: Blank title/description or unknown category
            NotFoundError: Flat does not exist
        """
        if not title or not title.strip():
            raise ValidationError("Complaint title is required")
        if not description or not description.strip():
            raise ValidationError("Complaint description is required")
        if category not in self.settings.complaint_categories:
            raise InvalidCategoryError(
                f"Unknown category '{category}'. "
                f"Choose one of: {', '.join(self.settings.complaint_categories)}"
            )

        command = partial(
            self._create_complaint,
            flat_id=flat_id,
            title=title.strip(),
            description=description.strip(),
            category=category,
            actor_id=actor_id,
        )
        complaint = self.store.run(command, f"complaint from {flat_id}")
        logger.info("Complaint %d raised by flat %s (%s)", complaint.id, flat_id, category)
        return complaint

    def _create_complaint(
        self,
        db: Session,
        flat_id: str,
        title: str,
        description: str,
        category: str,
        actor_id: int | None,
    ) -> Complaint:
        if db.get(Flat, flat_id) is None:
            raise NotFoundError("Flat", flat_id)

        now = self.clock()
        complaint = Complaint(
            flat_id=flat_id,
            title=title,
            description=description,
            category=category,
            status=ComplaintStatus.PENDING,
            created_at=now,
            updated_at=now,
        )
        db.add(complaint)
        db.flush()

        ActivityService.log(
            db,
            ActivityAction.RAISE_COMPLAINT,
            f"Flat {flat_id} raised {category} complaint: {title}",
            now,
            actor_id,
        )
        db.flush()
        return complaint

    def advance_status(
        self,
        complaint_id: int,
        new_status: ComplaintStatus | str,
        actor_id: int | None = None,
    ) -> Complaint:
        """Move a complaint forward to new_status.

        Args:
            complaint_id: Complaint to update
            new_status: Target status (enum member, "In Progress" or "IN_PROGRESS")
            actor_id: Admin who changed the status (optional)

        Raises:
            ValidationError: Unknown status name
            NotFoundError: No such complaint
            InvalidTransitionError: Target does not come after the current status
        """
        try:
            target = parse_enum(ComplaintStatus, new_status)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        try:
            complaint = self.store.run(
                partial(
                    self._apply_status,
                    complaint_id=complaint_id,
                    new_status=target,
                    actor_id=actor_id,
                ),
                f"status change of complaint {complaint_id}",
            )
        except (NotFoundError, InvalidTransitionError) as e:
            logger.warning("Complaint %d status change rejected: %s", complaint_id, e.message)
            raise

        logger.info("Complaint %d moved to %s", complaint_id, target.value)
        return complaint

    def _apply_status(
        self,
        db: Session,
        complaint_id: int,
        new_status: ComplaintStatus,
        actor_id: int | None,
    ) -> Complaint:
        complaint = db.get(Complaint, complaint_id)
        if complaint is None:
            raise NotFoundError("Complaint", complaint_id)

        previous = complaint.status
        check_transition(previous, new_status)

        now = self.clock()

        # Compare-and-set against the status the transition was checked from
        result = db.execute(
            update(Complaint)
            .where(Complaint.id == complaint_id, Complaint.status == previous)
            .values(status=new_status, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise InvalidTransitionError(
                f"Complaint {complaint_id} was updated concurrently; reload and try again"
            )
        db.refresh(complaint)

        ActivityService.log(
            db,
            ActivityAction.UPDATE_COMPLAINT,
            f"Complaint {complaint_id} ({complaint.title}) moved from "
            f"{previous.value} to {new_status.value}",
            now,
            actor_id,
        )
        db.flush()
        return complaint

    def get_complaint(self, complaint_id: int) -> Complaint:
        """Get complaint by ID.

        Raises:
            NotFoundError: No such complaint
        """
        with self.store.session() as db:
            complaint = db.get(Complaint, complaint_id)
            if complaint is None:
                raise NotFoundError("Complaint", complaint_id)
            return complaint

    def list_complaints(
        self,
        flat_id: str | None = None,
        status: ComplaintStatus | None = None,
    ) -> list[Complaint]:
        """List complaints newest first, optionally filtered by flat and status."""
        stmt = select(Complaint)
        if flat_id is not None:
            stmt = stmt.where(Complaint.flat_id == flat_id)
        if status is not None:
            stmt = stmt.where(Complaint.status == status)
        stmt = stmt.order_by(Complaint.created_at.desc(), Complaint.id.desc())

        with self.store.session() as db:
            return list(db.execute(stmt).scalars().all())


__all__ = ["ComplaintService", "check_transition"]
