"""Flat ORM model: one residential unit in a tower."""

from sqlalchemy import Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from society_engine.models import Base, BaseModel


def flat_code(tower: str, flat_number: str) -> str:
    """Build the stable flat identifier, e.g. ("A", "101") -> "A-101"."""
    return f"{tower.strip().upper()}-{str(flat_number).strip()}"


class Flat(Base, BaseModel):
    """Model representing a flat in a tower.

    The primary key is the human-readable flat code ("A-101") so that callers can
    reference flats the same way residents and security staff do. Maintenance status
    is not stored here: it is derived from the flat's most recent bill.
    """

    __tablename__ = "flats"

    id: Mapped[str] = mapped_column(
        String(20),
        primary_key=True,
        comment="Stable flat code: <tower>-<flat number>",
    )
    tower: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        index=True,
        comment="Tower label (e.g., 'A')",
    )
    floor: Mapped[int] = mapped_column(Integer, nullable=False)
    flat_number: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        comment="Flat number within the tower (e.g., '101')",
    )
    owner_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Relationships
    bills: Mapped[list["MaintenanceBill"]] = relationship(  # noqa: F821
        "MaintenanceBill",
        back_populates="flat",
    )
    residents: Mapped[list["User"]] = relationship(  # noqa: F821
        "User",
        back_populates="flat",
    )

    __table_args__ = (Index("idx_flat_tower_floor", "tower", "floor"),)

    def __repr__(self) -> str:
        return f"<Flat(id={self.id}, tower={self.tower}, floor={self.floor})>"


__all__ = ["Flat", "flat_code"]
