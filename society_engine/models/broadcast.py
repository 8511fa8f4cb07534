"""Broadcast ORM models: alerts, events and notices.

These records are append-only; they carry no state machine.
"""

from datetime import date
from enum import Enum

from sqlalchemy import Date
from sqlalchemy import Enum as SQLEnum
from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from society_engine.models import Base, BaseModel

ALL_TOWERS = "All"


class AlertSeverity(str, Enum):
    """Severity of an emergency alert."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class Alert(Base, BaseModel):
    """Emergency alert targeting one tower or all towers."""

    __tablename__ = "alerts"

    tower: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        index=True,
        comment="Target tower label, or 'All'",
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    severity: Mapped[AlertSeverity] = mapped_column(
        SQLEnum(AlertSeverity, native_enum=False),
        nullable=False,
        default=AlertSeverity.LOW,
    )

    def __repr__(self) -> str:
        return f"<Alert(id={self.id}, tower={self.tower}, severity={self.severity})>"


class Event(Base, BaseModel):
    """Society event announced to all residents."""

    __tablename__ = "events"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    event_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, title={self.title}, date={self.event_date})>"


class Notice(Base, BaseModel):
    """Notice board entry."""

    __tablename__ = "notices"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<Notice(id={self.id}, title={self.title})>"


__all__ = ["ALL_TOWERS", "Alert", "AlertSeverity", "Event", "Notice"]
