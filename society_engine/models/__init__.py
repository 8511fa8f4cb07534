"""ORM base for the ledger store and the public model exports."""

from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

# Declarative base shared by every table of the ledger store
Base = declarative_base()


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class BaseModel:
    """Mixin: integer primary key plus creation and modification timestamps."""

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        nullable=False,
    )


# Model modules import Base from here, so they are registered below its definition
from society_engine.models.activity_log import ActivityAction, ActivityLogEntry  # noqa: E402
from society_engine.models.bill import BillStatus, MaintenanceBill  # noqa: E402
from society_engine.models.booking import Booking  # noqa: E402
from society_engine.models.broadcast import Alert, AlertSeverity, Event, Notice  # noqa: E402
from society_engine.models.complaint import Complaint, ComplaintStatus  # noqa: E402
from society_engine.models.flat import Flat  # noqa: E402
from society_engine.models.payment import Payment  # noqa: E402
from society_engine.models.user import User, UserRole  # noqa: E402
from society_engine.models.visitor import VisitorSession, VisitorStatus  # noqa: E402

__all__ = [
    "Base",
    "BaseModel",
    "utc_now",
    "ActivityAction",
    "ActivityLogEntry",
    "Alert",
    "AlertSeverity",
    "BillStatus",
    "Booking",
    "Complaint",
    "ComplaintStatus",
    "Event",
    "Flat",
    "MaintenanceBill",
    "Notice",
    "Payment",
    "User",
    "UserRole",
    "VisitorSession",
    "VisitorStatus",
]
