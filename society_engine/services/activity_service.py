"""Activity log service: writes and queries the append-only audit trail."""

from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from society_engine.models.activity_log import ActivityAction, ActivityLogEntry
from society_engine.models.user import User
from society_engine.services.errors import NotFoundError
from society_engine.services.ledger_store import LedgerStore

SYSTEM_ACTOR = "System"


class ActivityService:
    """Service for activity log operations.

    ActivityService.log() is called by every other service inside the transaction of
    the mutation it records, so the entry and the mutation commit or roll back
    together. The query methods are pure reads used by dashboards and audit views.
    """

    def __init__(self, store: LedgerStore):
        self.store = store

    @staticmethod
    def log(
        db: Session,
        action: ActivityAction,
        details: str,
        timestamp: datetime,
        actor_id: int | None = None,
    ) -> ActivityLogEntry:
        """Add an activity log entry to the current transaction.

        Args:
            db: Session of the transaction performing the mutation
            action: Kind of mutation
            details: Human-readable description
            timestamp: Time of the mutation
            actor_id: User who performed the action (None for system actions)

        Returns:
            Created ActivityLogEntry (flushed with the transaction)

        Raises:
            NotFoundError: If actor_id does not reference a known user
        """
        user_name = SYSTEM_ACTOR
        if actor_id is not None:
            actor = db.get(User, actor_id)
            if actor is None:
                raise NotFoundError("User", actor_id)
            user_name = actor.name

        entry = ActivityLogEntry(
            user_id=actor_id,
            user_name=user_name,
            action=action,
            details=details,
            timestamp=timestamp,
        )
        db.add(entry)
        return entry

    def list_entries(
        self,
        limit: int = 100,
        action: ActivityAction | None = None,
        actor_id: int | None = None,
    ) -> list[ActivityLogEntry]:
        """List entries newest first, optionally filtered by action or actor."""
        stmt = select(ActivityLogEntry)
        if action is not None:
            stmt = stmt.where(ActivityLogEntry.action == action)
        if actor_id is not None:
            stmt = stmt.where(ActivityLogEntry.user_id == actor_id)
        stmt = stmt.order_by(ActivityLogEntry.timestamp.desc(), ActivityLogEntry.id.desc()).limit(
            limit
        )

        with self.store.session() as db:
            return list(db.execute(stmt).scalars().all())

    def count_by_action(self, action: ActivityAction) -> int:
        """Count entries recorded for one action kind."""
        with self.store.session() as db:
            result = db.execute(
                select(func.count(ActivityLogEntry.id)).where(ActivityLogEntry.action == action)
            )
            return int(result.scalar() or 0)


__all__ = ["ActivityService", "SYSTEM_ACTOR"]
