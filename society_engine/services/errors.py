"""Engine error taxonomy.

Four kinds of failure reach callers:

- ValidationError: malformed input, rejected before any transaction starts.
- ConflictError: the target entity already satisfies or precludes the change.
- NotFoundError: a referenced entity does not exist.
- TransientStoreError: the store was unavailable or the transaction lost a
  conflict; the identical request may be retried.

Every error carries a stable machine-readable code and a message suitable for
showing to a user.
"""


class EngineError(Exception):
    """Base exception for engine errors."""

    code = "engine_error"

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        if code is not None:
            self.code = code
        super().__init__(message)


class ValidationError(EngineError):
    """Malformed command input (bad date, unknown slot, non-positive amount)."""

    code = "validation_error"


class InvalidSlotError(ValidationError):
    """Time slot is not one of the configured slots."""

    code = "invalid_slot"


class PastDateError(ValidationError):
    """Booking date lies in the past."""

    code = "past_date"


class InvalidAmenityError(ValidationError):
    """Amenity is not one of the configured amenities."""

    code = "invalid_amenity"


class InvalidAmountError(ValidationError):
    """Bill amount is not a positive integer."""

    code = "invalid_amount"


class InvalidPeriodError(ValidationError):
    """Billing period month/year cannot be interpreted."""

    code = "invalid_period"


class InvalidCategoryError(ValidationError):
    """Complaint category is not one of the configured categories."""

    code = "invalid_category"


class NotFoundError(EngineError):
    """Referenced entity does not exist."""

    code = "not_found"

    def __init__(self, entity: str, entity_id: object):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class ConflictError(EngineError):
    """Request conflicts with the current state of the target entity."""

    code = "conflict"


class AlreadyPaidError(ConflictError):
    """Bill is already paid."""

    code = "already_paid"


class SlotTakenError(ConflictError):
    """Amenity slot is already booked for that date."""

    code = "slot_taken"


class AlreadyOutError(ConflictError):
    """Visitor session is already checked out."""

    code = "already_out"


class InvalidTransitionError(ConflictError):
    """Requested complaint status does not move forward."""

    code = "invalid_transition"


class TransientStoreError(EngineError):
    """Store unavailable or transaction conflict; safe to retry."""

    code = "transient_store_error"


__all__ = [
    "EngineError",
    "ValidationError",
    "InvalidSlotError",
    "PastDateError",
    "InvalidAmenityError",
    "InvalidAmountError",
    "InvalidPeriodError",
    "InvalidCategoryError",
    "NotFoundError",
    "ConflictError",
    "AlreadyPaidError",
    "SlotTakenError",
    "AlreadyOutError",
    "InvalidTransitionError",
    "TransientStoreError",
]
