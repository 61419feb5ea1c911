'''
Domain errors raised by the hotel catalog and the room inventory manager.

Every error carries a short machine readable ``code`` so the API layer can
tell the failure kinds apart without inspecting messages.
'''


class InventoryError(Exception):
    """Base class for every error raised by the Hotels components."""

    code: str = "inventory_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(InventoryError):
    """The referenced hotel or room does not exist."""

    code = "not_found"


class ValidationError(InventoryError):
    """A field is missing, malformed, out of range or not unique."""

    code = "validation_error"


class HotelReferenceError(ValidationError):
    """A room points to a hotel that does not exist."""

    code = "referential_violation"


class CapacityExceededError(ValidationError):
    """The summed room quantity would exceed the hotel's max_rooms."""

    code = "capacity_exceeded"


class DuplicateRoomTypeError(ValidationError):
    """The hotel already has a room with the same type and accommodation."""

    code = "duplicate_room_type"


class PersistenceError(InventoryError):
    """Unexpected failure while talking to the database."""

    code = "persistence_failure"
