"""Payment ORM model: confirmation of one maintenance bill being paid."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from society_engine.models import Base, BaseModel


class Payment(Base, BaseModel):
    """Model representing the payment of a maintenance bill.

    A payment exists iff its bill is PAID. bill_id is unique, so a second payment
    for the same bill cannot be committed even if two requests race.
    """

    __tablename__ = "payments"

    bill_id: Mapped[int] = mapped_column(
        ForeignKey("maintenance_bills.id"),
        nullable=False,
        unique=True,
        comment="Bill settled by this payment",
    )
    payment_mode: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
        comment="Payment mode as reported by the caller (e.g., ONLINE, CASH, CHEQUE)",
    )
    transaction_ref: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="External transaction reference",
    )
    paid_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    bill: Mapped["MaintenanceBill"] = relationship(  # noqa: F821
        "MaintenanceBill",
        back_populates="payment",
        foreign_keys=[bill_id],
    )

    def __repr__(self) -> str:
        return (
            f"<Payment(id={self.id}, bill_id={self.bill_id}, mode={self.payment_mode}, "
            f"ref={self.transaction_ref})>"
        )


__all__ = ["Payment"]
