"""Booking scheduler: amenity reservations with one booking per amenity/date/slot."""

import logging
from datetime import date, datetime
from functools import partial
from typing import Callable

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from society_engine.config import Settings, get_settings
from society_engine.models import utc_now
from society_engine.models.activity_log import ActivityAction
from society_engine.models.booking import Booking
from society_engine.models.flat import Flat
from society_engine.services.activity_service import ActivityService
from society_engine.services.errors import (
    InvalidAmenityError,
    InvalidSlotError,
    NotFoundError,
    PastDateError,
    SlotTakenError,
    ValidationError,
)
from society_engine.services.ledger_store import LedgerStore
from society_engine.services.parsers import parse_iso_date

logger = logging.getLogger(__name__)


class BookingService:
    """Service owning Booking records.

    The slot check and the insert run in one transaction, and the
    (amenity, booking_date, time_slot) unique constraint backs the check, so two
    simultaneous requests for one slot produce exactly one booking and one
    SlotTakenError.
    """

    def __init__(
        self,
        store: LedgerStore,
        settings: Settings | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.settings = settings or get_settings()
        self.clock = clock

    def validate_request(self, amenity: str, booking_date: date | str, time_slot: str) -> date:
        """Check a booking request before any transaction is opened.

        Returns:
            The parsed booking date

        Raises:
            InvalidAmenityError: Unknown amenity
            InvalidSlotError: time_slot is not one of the configured slots
            ValidationError: Malformed date
            PastDateError: Date before today
        """
        if amenity not in self.settings.amenities:
            raise InvalidAmenityError(
                f"Unknown amenity '{amenity}'. Choose one of: {', '.join(self.settings.amenities)}"
            )
        if time_slot not in self.settings.time_slots:
            raise InvalidSlotError(f"Unknown time slot '{time_slot}'")
        try:
            parsed = parse_iso_date(booking_date)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        today = self.clock().date()
        if parsed < today:
            raise PastDateError(f"Cannot book {amenity} for past date {parsed.isoformat()}")
        return parsed

    def request_booking(
        self,
        amenity: str,
        booking_date: date | str,
        time_slot: str,
        flat_id: str,
        actor_id: int | None = None,
    ) -> Booking:
        """Reserve an amenity slot for a flat.

        Args:
            amenity: Amenity name (e.g., "Gym")
            booking_date: Date of the reservation (date or "YYYY-MM-DD")
            time_slot: One of the configured time slots
            flat_id: Flat making the reservation
            actor_id: User who made the request (optional)

        Returns:
            Created Booking

        Raises:
            ValidationError: Unknown amenity/slot, malformed or past date
            NotFoundError: Flat does not exist
            SlotTakenError: Slot already booked
        """
        parsed_date = self.validate_request(amenity, booking_date, time_slot)

        command = partial(
            self._create_booking,
            amenity=amenity,
            booking_date=parsed_date,
            time_slot=time_slot,
            flat_id=flat_id,
            actor_id=actor_id,
        )
        description = f"booking {amenity} {parsed_date.isoformat()} {time_slot}"
        try:
            booking = self.store.run(command, description)
        except IntegrityError as e:
            logger.warning("Booking race lost for %s by flat %s", description, flat_id)
            raise SlotTakenError(self._taken_message(amenity, parsed_date, time_slot)) from e
        except SlotTakenError:
            logger.warning("Booking rejected for %s by flat %s: slot taken", description, flat_id)
            raise

        logger.info("Booked %s for flat %s (booking %d)", description, flat_id, booking.id)
        return booking

    @staticmethod
    def _taken_message(amenity: str, booking_date: date, time_slot: str) -> str:
        return f"{amenity} is already booked on {booking_date.isoformat()} for {time_slot}"

    def _create_booking(
        self,
        db: Session,
        amenity: str,
        booking_date: date,
        time_slot: str,
        flat_id: str,
        actor_id: int | None,
    ) -> Booking:
        if db.get(Flat, flat_id) is None:
            raise NotFoundError("Flat", flat_id)

        existing = db.execute(
            select(Booking.id).where(
                Booking.amenity == amenity,
                Booking.booking_date == booking_date,
                Booking.time_slot == time_slot,
            )
        ).scalar_one_or_none()
        if existing is not None:
            raise SlotTakenError(self._taken_message(amenity, booking_date, time_slot))

        booking = Booking(
            amenity=amenity,
            booking_date=booking_date,
            time_slot=time_slot,
            flat_id=flat_id,
        )
        db.add(booking)
        db.flush()

        ActivityService.log(
            db,
            ActivityAction.BOOK_AMENITY,
            f"Flat {flat_id} booked {amenity} on {booking_date.isoformat()} ({time_slot})",
            self.clock(),
            actor_id,
        )
        db.flush()
        return booking

    def list_bookings(
        self,
        amenity: str | None = None,
        booking_date: date | None = None,
        flat_id: str | None = None,
        from_date: date | None = None,
    ) -> list[Booking]:
        """List bookings in calendar order, optionally filtered.

        Args:
            amenity: Only this amenity
            booking_date: Only this date
            flat_id: Only this flat's bookings
            from_date: Only bookings on or after this date
        """
        stmt = select(Booking)
        if amenity is not None:
            stmt = stmt.where(Booking.amenity == amenity)
        if booking_date is not None:
            stmt = stmt.where(Booking.booking_date == booking_date)
        if flat_id is not None:
            stmt = stmt.where(Booking.flat_id == flat_id)
        if from_date is not None:
            stmt = stmt.where(Booking.booking_date >= from_date)
        stmt = stmt.order_by(Booking.booking_date, Booking.amenity, Booking.id)

        with self.store.session() as db:
            return list(db.execute(stmt).scalars().all())

    def available_slots(self, amenity: str, booking_date: date | str) -> list[str]:
        """Configured slots of an amenity that are still free on a date."""
        if amenity not in self.settings.amenities:
            raise InvalidAmenityError(f"Unknown amenity '{amenity}'")
        try:
            parsed = parse_iso_date(booking_date)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        bookings = self.list_bookings(amenity=amenity, booking_date=parsed)
        taken = {booking.time_slot for booking in bookings}
        return [slot for slot in self.settings.time_slots if slot not in taken]


__all__ = ["BookingService"]
