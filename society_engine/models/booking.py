"""Amenity booking ORM model."""

from datetime import date

from sqlalchemy import Date, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from society_engine.models import Base, BaseModel


class Booking(Base, BaseModel):
    """Reservation of one amenity for one time slot on one date.

    The (amenity, booking_date, time_slot) unique constraint guarantees that two
    concurrent requests for the same slot cannot both be committed.
    """

    __tablename__ = "bookings"

    amenity: Mapped[str] = mapped_column(String(50), nullable=False)
    booking_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    time_slot: Mapped[str] = mapped_column(String(30), nullable=False)
    flat_id: Mapped[str] = mapped_column(
        ForeignKey("flats.id"),
        nullable=False,
        index=True,
        comment="Flat holding the reservation",
    )

    __table_args__ = (
        UniqueConstraint("amenity", "booking_date", "time_slot", name="uq_booking_amenity_slot"),
    )

    def __repr__(self) -> str:
        return (
            f"<Booking(id={self.id}, amenity={self.amenity}, date={self.booking_date}, "
            f"slot={self.time_slot}, flat_id={self.flat_id})>"
        )


__all__ = ["Booking"]
