"""User ORM model: admins, residents and security staff."""

from enum import Enum

from sqlalchemy import Enum as SQLEnum
from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from society_engine.models import Base, BaseModel


class UserRole(str, Enum):
    """Role of a person using the society system."""

    ADMIN = "Admin"
    RESIDENT = "Resident"
    SECURITY = "Security"


class User(Base, BaseModel):
    """Person known to the engine.

    Registration and authentication happen outside the engine; here a user is only an
    identity that commands are attributed to in the activity log. Residents may be
    linked to the flat they live in.
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True, unique=True)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    role: Mapped[UserRole] = mapped_column(
        SQLEnum(UserRole, native_enum=False),
        nullable=False,
        default=UserRole.RESIDENT,
        index=True,
    )
    flat_id: Mapped[str | None] = mapped_column(
        ForeignKey("flats.id"),
        nullable=True,
        index=True,
        comment="Flat the resident lives in (residents only)",
    )

    flat: Mapped["Flat | None"] = relationship(  # noqa: F821
        "Flat",
        back_populates="residents",
        foreign_keys=[flat_id],
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, name={self.name}, role={self.role})>"


__all__ = ["User", "UserRole"]
