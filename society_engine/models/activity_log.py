"""Activity log model: append-only audit trail of every engine mutation."""

from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime
from sqlalchemy import Enum as SQLEnum
from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from society_engine.models import Base, BaseModel


class ActivityAction(str, Enum):
    """Kinds of mutations recorded in the activity log."""

    GENERATE_BILLS = "GENERATE_BILLS"
    RECORD_PAYMENT = "RECORD_PAYMENT"
    BOOK_AMENITY = "BOOK_AMENITY"
    VISITOR_ENTRY = "VISITOR_ENTRY"
    VISITOR_EXIT = "VISITOR_EXIT"
    RAISE_COMPLAINT = "RAISE_COMPLAINT"
    UPDATE_COMPLAINT = "UPDATE_COMPLAINT"
    CREATE_ALERT = "CREATE_ALERT"
    CREATE_EVENT = "CREATE_EVENT"
    CREATE_NOTICE = "CREATE_NOTICE"


class ActivityLogEntry(Base, BaseModel):
    """One audit entry.

    Records who (user_id, user_name) did what (action) with a human-readable detail.
    Entries are written in the same transaction as the mutation they describe and
    are never updated or deleted.
    """

    __tablename__ = "activity_logs"

    user_id: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True)
    """User who performed the action. None for system actions."""

    user_name: Mapped[str] = mapped_column(String(255), nullable=False)
    """Display name of the actor at the time of the action."""

    action: Mapped[ActivityAction] = mapped_column(
        SQLEnum(ActivityAction, native_enum=False),
        nullable=False,
    )
    details: Mapped[str] = mapped_column(Text, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("idx_activity_action", "action"),
        Index("idx_activity_timestamp", "timestamp"),
    )

    def __repr__(self) -> str:
        return (
            f"<ActivityLogEntry(id={self.id}, action={self.action}, user_name={self.user_name}, "
            f"timestamp={self.timestamp})>"
        )


__all__ = ["ActivityLogEntry", "ActivityAction"]
