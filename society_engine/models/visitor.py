"""Visitor session ORM model: one visit from gate entry to exit."""

from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime
from sqlalchemy import Enum as SQLEnum
from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from society_engine.models import Base, BaseModel


class VisitorStatus(str, Enum):
    """Presence of a visitor. OUT is terminal for a session."""

    IN = "In"
    OUT = "Out"


class VisitorSession(Base, BaseModel):
    """A visitor's presence interval.

    Visitors are identified by name only; the same name may have several open
    sessions. exit_time is set exactly when status is OUT.
    """

    __tablename__ = "visitor_sessions"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    tower: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    flat_id: Mapped[str] = mapped_column(
        ForeignKey("flats.id"),
        nullable=False,
        index=True,
        comment="Flat being visited",
    )
    entry_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    exit_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    status: Mapped[VisitorStatus] = mapped_column(
        SQLEnum(VisitorStatus, native_enum=False),
        nullable=False,
        default=VisitorStatus.IN,
    )

    __table_args__ = (Index("idx_visitor_status_tower", "status", "tower"),)

    def __repr__(self) -> str:
        return (
            f"<VisitorSession(id={self.id}, name={self.name}, flat_id={self.flat_id}, "
            f"status={self.status})>"
        )


__all__ = ["VisitorSession", "VisitorStatus"]
