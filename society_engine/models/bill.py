"""Maintenance bill ORM model: one bill per flat per billing period."""

from datetime import date
from enum import Enum

from sqlalchemy import Date
from sqlalchemy import Enum as SQLEnum
from sqlalchemy import ForeignKey, Index, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from society_engine.models import Base, BaseModel


class BillStatus(str, Enum):
    """Status of a maintenance bill. PAID is terminal."""

    UNPAID = "Unpaid"
    PAID = "Paid"


class MaintenanceBill(Base, BaseModel):
    """Model representing the maintenance charge of one flat for one billing period.

    The (flat_id, month, year) unique constraint is what makes bill generation
    idempotent under concurrent callers: a second insert for the same key fails at
    the store instead of producing a duplicate.
    """

    __tablename__ = "maintenance_bills"

    flat_id: Mapped[str] = mapped_column(
        ForeignKey("flats.id"),
        nullable=False,
        index=True,
    )
    month: Mapped[int] = mapped_column(Integer, nullable=False, comment="Billing month 1-12")
    year: Mapped[int] = mapped_column(Integer, nullable=False, comment="Billing year")
    amount: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Bill amount in currency minor units",
    )
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[BillStatus] = mapped_column(
        SQLEnum(BillStatus, native_enum=False),
        nullable=False,
        default=BillStatus.UNPAID,
        index=True,
    )

    # Relationships
    flat: Mapped["Flat"] = relationship(  # noqa: F821
        "Flat",
        back_populates="bills",
        foreign_keys=[flat_id],
    )
    payment: Mapped["Payment | None"] = relationship(  # noqa: F821
        "Payment",
        back_populates="bill",
        uselist=False,
    )

    __table_args__ = (
        UniqueConstraint("flat_id", "month", "year", name="uq_bill_flat_period"),
        Index("idx_bill_period", "year", "month"),
    )

    def __repr__(self) -> str:
        return (
            f"<MaintenanceBill(id={self.id}, flat_id={self.flat_id}, "
            f"period={self.month}/{self.year}, amount={self.amount}, status={self.status})>"
        )


__all__ = ["MaintenanceBill", "BillStatus"]
