"""Complaint ORM model with forward-only status."""

from enum import Enum

from sqlalchemy import Enum as SQLEnum
from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from society_engine.models import Base, BaseModel


class ComplaintStatus(str, Enum):
    """Complaint lifecycle, in forward order."""

    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    RESOLVED = "Resolved"

    @property
    def rank(self) -> int:
        """Position in the forward order (PENDING=0)."""
        return list(ComplaintStatus).index(self)


class Complaint(Base, BaseModel):
    """Issue raised by a flat for the society management."""

    __tablename__ = "complaints"

    flat_id: Mapped[str] = mapped_column(ForeignKey("flats.id"), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    status: Mapped[ComplaintStatus] = mapped_column(
        SQLEnum(ComplaintStatus, native_enum=False),
        nullable=False,
        default=ComplaintStatus.PENDING,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Complaint(id={self.id}, flat_id={self.flat_id}, status={self.status})>"


__all__ = ["Complaint", "ComplaintStatus"]
