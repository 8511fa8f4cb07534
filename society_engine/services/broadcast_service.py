"""Broadcasts: emergency alerts, events and notices."""

import logging
from datetime import date, datetime
from functools import partial
from typing import Callable

from sqlalchemy import select
from sqlalchemy.orm import Session

from society_engine.config import Settings, get_settings
from society_engine.models import utc_now
from society_engine.models.activity_log import ActivityAction
from society_engine.models.broadcast import ALL_TOWERS, Alert, AlertSeverity, Event, Notice
from society_engine.services.activity_service import ActivityService
from society_engine.services.errors import ValidationError
from society_engine.services.ledger_store import LedgerStore
from society_engine.services.parsers import parse_enum, parse_iso_date

logger = logging.getLogger(__name__)


def _require(value: str, field: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field} is required")
    return value.strip()


class BroadcastService:
    """Append-only broadcast records. Each creation is activity-logged."""

    def __init__(
        self,
        store: LedgerStore,
        settings: Settings | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.settings = settings or get_settings()
        self.clock = clock

    def create_alert(
        self,
        tower: str,
        title: str,
        message: str,
        severity: AlertSeverity | str = AlertSeverity.LOW,
        actor_id: int | None = None,
    ) -> Alert:
        """Broadcast an emergency alert to one tower or to "All".

        Raises:
            ValidationError: Unknown tower or severity, blank title/message
        """
        tower = _require(tower, "Target tower")
        target = ALL_TOWERS if tower.lower() == ALL_TOWERS.lower() else tower.upper()
        if target != ALL_TOWERS and target not in self.settings.towers:
            raise ValidationError(f"Unknown tower '{tower}'")
        try:
            level = parse_enum(AlertSeverity, severity)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        title = _require(title, "Alert title")
        build = partial(
            Alert,
            tower=target,
            title=title,
            message=_require(message, "Alert message"),
            severity=level,
        )
        audience = "all towers" if target == ALL_TOWERS else f"Tower {target}"
        alert = self.store.run(
            partial(
                self._publish,
                build=build,
                action=ActivityAction.CREATE_ALERT,
                details=f"{level.value} alert to {audience}: {title}",
                actor_id=actor_id,
            ),
            "alert broadcast",
        )
        logger.info("Alert %d broadcast to %s (%s)", alert.id, audience, level.value)
        return alert

    def create_event(
        self,
        title: str,
        description: str,
        event_date: date | str,
        actor_id: int | None = None,
    ) -> Event:
        """Announce a society event."""
        try:
            when = parse_iso_date(event_date)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        title = _require(title, "Event title")
        build = partial(
            Event,
            title=title,
            description=_require(description, "Event description"),
            event_date=when,
        )
        event = self.store.run(
            partial(
                self._publish,
                build=build,
                action=ActivityAction.CREATE_EVENT,
                details=f"Event '{title}' scheduled for {when.isoformat()}",
                actor_id=actor_id,
            ),
            "event announcement",
        )
        logger.info("Event %d created for %s", event.id, when)
        return event

    def create_notice(self, title: str, description: str, actor_id: int | None = None) -> Notice:
        """Post a notice to the notice board."""
        title = _require(title, "Notice title")
        build = partial(
            Notice, title=title, description=_require(description, "Notice description")
        )
        notice = self.store.run(
            partial(
                self._publish,
                build=build,
                action=ActivityAction.CREATE_NOTICE,
                details=f"Notice posted: {title}",
                actor_id=actor_id,
            ),
            "notice posting",
        )
        logger.info("Notice %d posted", notice.id)
        return notice

    def _publish(
        self,
        db: Session,
        build: Callable[..., Alert | Event | Notice],
        action: ActivityAction,
        details: str,
        actor_id: int | None,
    ) -> Alert | Event | Notice:
        now = self.clock()
        record = build(created_at=now, updated_at=now)
        db.add(record)
        db.flush()
        ActivityService.log(db, action, details, now, actor_id)
        db.flush()
        return record

    def list_alerts(self, tower: str | None = None, limit: int = 50) -> list[Alert]:
        """Alerts newest first; for a tower, includes alerts sent to all towers."""
        stmt = select(Alert)
        if tower is not None:
            stmt = stmt.where(Alert.tower.in_([tower.upper(), ALL_TOWERS]))
        stmt = stmt.order_by(Alert.created_at.desc(), Alert.id.desc()).limit(limit)

        with self.store.session() as db:
            return list(db.execute(stmt).scalars().all())

    def list_events(self, from_date: date | None = None) -> list[Event]:
        """Events in date order, optionally only those on or after from_date."""
        stmt = select(Event)
        if from_date is not None:
            stmt = stmt.where(Event.event_date >= from_date)
        stmt = stmt.order_by(Event.event_date, Event.id)

        with self.store.session() as db:
            return list(db.execute(stmt).scalars().all())

    def list_notices(self, limit: int = 50) -> list[Notice]:
        """Notices newest first."""
        stmt = select(Notice).order_by(Notice.created_at.desc(), Notice.id.desc()).limit(limit)

        with self.store.session() as db:
            return list(db.execute(stmt).scalars().all())


__all__ = ["BroadcastService"]
