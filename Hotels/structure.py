'''
Structure class implementation for Hotels module.

Hotel and Room are the two persisted records. HotelWithRooms and
RoomWithHotel are the read shapes returned with their relations attached.
'''
from types import MappingProxyType
from uuid import UUID, uuid4
from typing import Literal, Mapping, Optional
from datetime import datetime
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator
from utils import utc_now, validate_timestamps

RoomType = Literal['Standard', 'Junior', 'Suite']
# upper bound of the Postgres INTEGER columns
MAX_INTEGER = 2**31 - 1

# room type -> accommodations a room of that type may offer
ACCOMMODATIONS_BY_TYPE: Mapping[str, frozenset[str]] = MappingProxyType({
    'Standard': frozenset({'Single', 'Double'}),
    'Junior': frozenset({'Triple', 'Quadruple'}),
    'Suite': frozenset({'Single', 'Double', 'Triple'}),
})


def is_allowed_accommodation(room_type: str, accommodation: str) -> bool:
    '''Check the accommodation against the policy table for room_type.'''
    return accommodation in ACCOMMODATIONS_BY_TYPE.get(room_type, frozenset())


def accommodation_error(room_type: str, accommodation: str) -> Optional[str]:
    '''Message explaining why room_type cannot offer accommodation, or None if it can.'''
    if is_allowed_accommodation(room_type, accommodation):
        return None
    allowed = ", ".join(sorted(ACCOMMODATIONS_BY_TYPE.get(room_type, ())))
    return (
        f"Accommodation '{accommodation}' is not valid for room type "
        f"'{room_type}' (allowed: {allowed})."
    )


def describe_validation_error(exc: ValidationError) -> str:
    """
    Flatten a pydantic ValidationError into a single readable sentence.

    Args:
        exc: Error raised while building a Hotel or Room.

    Returns:
        The individual error messages joined by ``; ``, each prefixed with the
        offending field when pydantic reports one.
    """
    messages = []
    for error in exc.errors():
        cause = error.get("ctx", {}).get("error")
        message = str(cause) if cause is not None else error["msg"]
        location = ".".join(str(part) for part in error["loc"])
        messages.append(f"{location}: {message}" if location else message)
    return "; ".join(messages)


class Room(BaseModel):

    id : UUID = Field(default_factory=lambda: uuid4(), frozen=True)
    hotel_id : UUID = Field(frozen=True)
    type : RoomType
    accommodation : str
    quantity : int = Field(le=MAX_INTEGER)
    created_at : datetime = Field(default_factory=utc_now, frozen=True)
    updated_at : datetime = Field(default_factory=utc_now)

    @field_validator("accommodation")
    @classmethod
    def strip_accommodation(cls, value: str) -> str:
        return value.strip()

    @model_validator(mode="after")
    def validate_structure(self):
        if self.quantity < 1:
            raise ValueError("Room quantity must be at least 1.")
        problem = accommodation_error(self.type, self.accommodation)
        if problem is not None:
            raise ValueError(problem)
        validate_timestamps(self.created_at, self.updated_at)
        return self

    def to_dict(self) -> dict[str, str | int]:
        """
        Serialize the room into a dictionary.

        Returns:
            dict[str, str | int]: Mapping with stringified identifiers and timestamps.
        """
        return {
            "id": str(self.id),
            "hotel_id": str(self.hotel_id),
            "type": self.type,
            "accommodation": self.accommodation,
            "quantity": self.quantity,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


class Hotel(BaseModel):

    id : UUID = Field(default_factory=lambda: uuid4(), frozen=True)
    name : str
    address : str
    city : str
    tax_id : str
    max_rooms : int = Field(le=MAX_INTEGER)
    created_at : datetime = Field(default_factory=utc_now, frozen=True)
    updated_at : datetime = Field(default_factory=utc_now)

    @field_validator("name", "address", "city", "tax_id")
    @classmethod
    def required_text(cls, value: str) -> str:
        """
        Strip surrounding whitespace and reject blank values.

        Raises:
            ValueError: If nothing is left after stripping.
        """
        stripped = value.strip()
        if not stripped:
            raise ValueError("must not be blank.")
        return stripped

    @model_validator(mode="after")
    def validate_structure(self):
        if self.max_rooms < 1:
            raise ValueError("Hotel max_rooms must be at least 1.")
        # enforce chronological consistency
        validate_timestamps(self.created_at, self.updated_at)
        return self

    def to_dict(self) -> dict[str, str | int]:
        """
        Serialize the hotel into a dictionary.

        Returns:
            dict[str, str | int]: Mapping with stringified identifiers and timestamps.
        """
        return {
            "id": str(self.id),
            "name": self.name,
            "address": self.address,
            "city": self.city,
            "tax_id": self.tax_id,
            "max_rooms": self.max_rooms,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


class HotelWithRooms(Hotel):
    """Hotel together with every room entry it owns."""

    rooms : list[Room] = Field(default_factory=list)

    @property
    def room_count(self) -> int:
        return sum(room.quantity for room in self.rooms)


class RoomWithHotel(Room):
    """Room entry together with the hotel it belongs to."""

    hotel : Hotel
