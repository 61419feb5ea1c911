"""Testing guidance for every Pydantic model.

Each test below exercises both the happy-path construction and the validation
errors for a specific model. When introducing a new Pydantic model, add a new
test that instantiates it with valid data and asserts the validators by feeding
invalid payloads as well.
"""

from datetime import datetime, timedelta, timezone
from types import MappingProxyType
from uuid import uuid4

import pytest
from pydantic import ValidationError

from Hotels.structure import (
    ACCOMMODATIONS_BY_TYPE,
    MAX_INTEGER,
    Hotel,
    HotelWithRooms,
    Room,
    RoomWithHotel,
    accommodation_error,
    describe_validation_error,
    is_allowed_accommodation,
)


def _hotel(**overrides) -> Hotel:
    payload = {
        "name": "Demo",
        "address": "Street 1",
        "city": "X",
        "tax_id": "T1",
        "max_rooms": 5,
    }
    payload.update(overrides)
    return Hotel(**payload)


def test_accommodation_policy_table_is_immutable() -> None:
    """Ensure the policy table cannot be edited at runtime."""
    assert isinstance(ACCOMMODATIONS_BY_TYPE, MappingProxyType)
    with pytest.raises(TypeError):
        ACCOMMODATIONS_BY_TYPE["Penthouse"] = frozenset({"Single"})  # type: ignore[index]
    assert ACCOMMODATIONS_BY_TYPE["Standard"] == {"Single", "Double"}
    assert ACCOMMODATIONS_BY_TYPE["Junior"] == {"Triple", "Quadruple"}
    assert ACCOMMODATIONS_BY_TYPE["Suite"] == {"Single", "Double", "Triple"}


@pytest.mark.parametrize(
    ("room_type", "accommodation", "allowed"),
    [
        ("Standard", "Double", True),
        ("Standard", "Triple", False),
        ("Junior", "Quadruple", True),
        ("Junior", "Double", False),
        ("Suite", "Triple", True),
        ("Suite", "Quadruple", False),
        ("Penthouse", "Single", False),
    ],
)
def test_is_allowed_accommodation(room_type: str, accommodation: str, allowed: bool) -> None:
    assert is_allowed_accommodation(room_type, accommodation) is allowed


def test_hotel_generates_id_and_timestamps() -> None:
    """Ensure Hotel fills in identifier and audit timestamps."""
    hotel = _hotel()

    assert hotel.id is not None
    assert hotel.created_at.tzinfo is not None
    assert hotel.updated_at >= hotel.created_at


def test_hotel_strips_and_rejects_blank_fields() -> None:
    """Ensure required text fields are trimmed and cannot be blank."""
    assert _hotel(name="  Demo  ").name == "Demo"

    with pytest.raises(ValidationError, match="must not be blank"):
        _hotel(city="   ")


def test_hotel_rejects_max_rooms_below_one() -> None:
    with pytest.raises(ValidationError, match="max_rooms must be at least 1"):
        _hotel(max_rooms=0)


def test_hotel_validates_timestamp_ordering() -> None:
    """Ensure Hotel raises when updated_at precedes created_at."""
    created_at = datetime(2024, 1, 1, tzinfo=timezone.utc)
    with pytest.raises(ValueError, match="date2 must be greater"):
        _hotel(created_at=created_at, updated_at=created_at - timedelta(hours=1))


def test_hotel_to_dict_stringifies_identifiers() -> None:
    hotel = _hotel()

    payload = hotel.to_dict()

    assert payload["id"] == str(hotel.id)
    assert payload["max_rooms"] == 5
    assert Hotel(**payload).model_dump() == hotel.model_dump()


def test_room_accepts_valid_payload() -> None:
    """Ensure Room creation succeeds with a valid payload."""
    room = Room(hotel_id=uuid4(), type="Suite", accommodation=" Triple ", quantity=2)

    assert room.accommodation == "Triple"
    assert room.quantity == 2


def test_room_rejects_unknown_type() -> None:
    with pytest.raises(ValidationError):
        Room(hotel_id=uuid4(), type="Penthouse", accommodation="Single", quantity=1)


def test_room_rejects_non_positive_quantity() -> None:
    """Ensure the Room validator enforces a positive quantity."""
    with pytest.raises(ValidationError, match="quantity must be at least 1"):
        Room(hotel_id=uuid4(), type="Standard", accommodation="Single", quantity=0)


def test_room_rejects_accommodation_not_offered_by_type() -> None:
    with pytest.raises(ValidationError, match="not valid for room type 'Junior'"):
        Room(hotel_id=uuid4(), type="Junior", accommodation="Double", quantity=1)


def test_accommodation_error_explains_the_policy() -> None:
    assert accommodation_error("Standard", "Double") is None
    assert accommodation_error("Junior", "Double") == (
        "Accommodation 'Double' is not valid for room type 'Junior' (allowed: Quadruple, Triple)."
    )


def test_integer_fields_stay_within_storage_range() -> None:
    assert _hotel(max_rooms=MAX_INTEGER).max_rooms == MAX_INTEGER
    with pytest.raises(ValidationError, match="max_rooms"):
        _hotel(max_rooms=MAX_INTEGER + 1)
    with pytest.raises(ValidationError, match="quantity"):
        Room(hotel_id=uuid4(), type="Standard", accommodation="Single", quantity=MAX_INTEGER + 1)


def test_describe_validation_error_is_readable() -> None:
    with pytest.raises(ValidationError) as excinfo:
        Room(hotel_id=uuid4(), type="Junior", accommodation="Double", quantity=1)

    message = describe_validation_error(excinfo.value)

    assert message == (
        "Accommodation 'Double' is not valid for room type 'Junior' "
        "(allowed: Quadruple, Triple)."
    )


def test_describe_validation_error_names_the_field() -> None:
    with pytest.raises(ValidationError) as excinfo:
        _hotel(address="")

    assert describe_validation_error(excinfo.value) == "address: must not be blank."


def test_relation_shapes() -> None:
    """Ensure the read models carry their attached relations."""
    hotel = _hotel()
    rooms = [
        Room(hotel_id=hotel.id, type="Standard", accommodation="Double", quantity=3),
        Room(hotel_id=hotel.id, type="Suite", accommodation="Single", quantity=1),
    ]

    with_rooms = HotelWithRooms(**hotel.model_dump(), rooms=rooms)
    with_hotel = RoomWithHotel(**rooms[0].model_dump(), hotel=hotel)

    assert with_rooms.room_count == 4
    assert with_hotel.hotel.id == hotel.id
    assert HotelWithRooms(**hotel.model_dump()).rooms == []
