"""Visitor session tracker: gate check-in and check-out."""

import logging
from datetime import datetime
from functools import partial
from typing import Callable

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from society_engine.models import utc_now
from society_engine.models.activity_log import ActivityAction
from society_engine.models.flat import Flat
from society_engine.models.visitor import VisitorSession, VisitorStatus
from society_engine.services.activity_service import ActivityService
from society_engine.services.errors import AlreadyOutError, NotFoundError, ValidationError
from society_engine.services.ledger_store import LedgerStore

logger = logging.getLogger(__name__)


class VisitorService:
    """Service owning VisitorSession records.

    A session moves IN -> OUT exactly once. Check-out is a compare-and-set on the
    session status, so the exit time written by the first successful check-out is
    never overwritten.
    """

    def __init__(self, store: LedgerStore, clock: Callable[[], datetime] = utc_now):
        self.store = store
        self.clock = clock

    def check_in(
        self,
        name: str,
        tower: str,
        flat_id: str,
        actor_id: int | None = None,
    ) -> VisitorSession:
        """Open a new visitor session with status IN.

        The same visitor name may have several open sessions; a check-in never
        reopens a closed session.

        Raises:
            ValidationError: Blank name, or tower does not match the flat
            NotFoundError: Flat does not exist
        """
        if not name or not name.strip():
            raise ValidationError("Visitor name is required")
        if not tower or not tower.strip():
            raise ValidationError("Tower is required")

        command = partial(
            self._open_session,
            name=name.strip(),
            tower=tower.strip().upper(),
            flat_id=flat_id,
            actor_id=actor_id,
        )
        visitor = self.store.run(command, f"check-in to {flat_id}")
        logger.info(
            "Visitor %s checked in to flat %s (session %d)", visitor.name, flat_id, visitor.id
        )
        return visitor

    def _open_session(
        self,
        db: Session,
        name: str,
        tower: str,
        flat_id: str,
        actor_id: int | None,
    ) -> VisitorSession:
        flat = db.get(Flat, flat_id)
        if flat is None:
            raise NotFoundError("Flat", flat_id)
        if flat.tower != tower:
            raise ValidationError(f"Flat {flat_id} is in tower {flat.tower}, not {tower}")

        now = self.clock()
        visitor = VisitorSession(
            name=name,
            tower=tower,
            flat_id=flat_id,
            entry_time=now,
            exit_time=None,
            status=VisitorStatus.IN,
        )
        db.add(visitor)
        db.flush()

        ActivityService.log(
            db,
            ActivityAction.VISITOR_ENTRY,
            f"Visitor {name} entered for flat {flat_id} (Tower {tower})",
            now,
            actor_id,
        )
        db.flush()
        return visitor

    def check_out(self, session_id: int, actor_id: int | None = None) -> VisitorSession:
        """Close a visitor session: set exit time and status OUT.

        Raises:
            NotFoundError: No such session
            AlreadyOutError: Session already checked out
        """
        try:
            visitor = self.store.run(
                partial(self._close_session, session_id=session_id, actor_id=actor_id),
                f"check-out of session {session_id}",
            )
        except (NotFoundError, AlreadyOutError) as e:
            logger.warning("Check-out rejected for session %d: %s", session_id, e.message)
            raise

        logger.info("Visitor %s checked out (session %d)", visitor.name, session_id)
        return visitor

    def _close_session(self, db: Session, session_id: int, actor_id: int | None) -> VisitorSession:
        now = self.clock()

        # Compare-and-set: only an IN session can be closed
        result = db.execute(
            update(VisitorSession)
            .where(VisitorSession.id == session_id, VisitorSession.status == VisitorStatus.IN)
            .values(status=VisitorStatus.OUT, exit_time=now)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            if db.get(VisitorSession, session_id) is None:
                raise NotFoundError("Visitor session", session_id)
            raise AlreadyOutError(f"Visitor session {session_id} is already checked out")

        visitor = db.get(VisitorSession, session_id, populate_existing=True)
        ActivityService.log(
            db,
            ActivityAction.VISITOR_EXIT,
            f"Visitor {visitor.name} exited from flat {visitor.flat_id} (Tower {visitor.tower})",
            now,
            actor_id,
        )
        db.flush()
        return visitor

    def get_session(self, session_id: int) -> VisitorSession:
        """Get visitor session by ID.

        Raises:
            NotFoundError: No such session
        """
        with self.store.session() as db:
            visitor = db.get(VisitorSession, session_id)
            if visitor is None:
                raise NotFoundError("Visitor session", session_id)
            return visitor

    def list_open_sessions(
        self, tower: str | None = None, flat_id: str | None = None
    ) -> list[VisitorSession]:
        """Visitors currently inside, oldest entry first."""
        return self._list(VisitorStatus.IN, tower, flat_id, newest_first=False)

    def list_history(
        self,
        tower: str | None = None,
        flat_id: str | None = None,
        limit: int = 100,
    ) -> list[VisitorSession]:
        """All sessions, newest entry first."""
        return self._list(None, tower, flat_id, newest_first=True, limit=limit)

    def _list(
        self,
        status: VisitorStatus | None,
        tower: str | None,
        flat_id: str | None,
        newest_first: bool,
        limit: int | None = None,
    ) -> list[VisitorSession]:
        stmt = select(VisitorSession)
        if status is not None:
            stmt = stmt.where(VisitorSession.status == status)
        if tower is not None:
            stmt = stmt.where(VisitorSession.tower == tower.upper())
        if flat_id is not None:
            stmt = stmt.where(VisitorSession.flat_id == flat_id)
        if newest_first:
            stmt = stmt.order_by(VisitorSession.entry_time.desc(), VisitorSession.id.desc())
        else:
            stmt = stmt.order_by(VisitorSession.entry_time, VisitorSession.id)
        if limit is not None:
            stmt = stmt.limit(limit)

        with self.store.session() as db:
            return list(db.execute(stmt).scalars().all())


__all__ = ["VisitorService"]
