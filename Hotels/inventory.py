'''
Room Inventory Manager: room entries scoped to a hotel.

A room entry counts the physical rooms sharing one type and accommodation.
Every mutation is checked against the owning hotel with
``check_room_inventory``, which needs no database and can be exercised on
its own.
'''
from __future__ import annotations

import logging
from typing import Any, Optional, Sequence
from uuid import UUID

from postgrest.exceptions import APIError
from pydantic import ValidationError as PydanticValidationError

from Database.db import is_check_violation, is_foreign_key_violation, is_unique_violation
from Hotels.catalog import HOTEL_TABLE_NAME, ROOMS_TABLE_NAME, HotelCatalog, execute_query
from Hotels.errors import (
    CapacityExceededError,
    DuplicateRoomTypeError,
    HotelReferenceError,
    InventoryError,
    NotFoundError,
    ValidationError,
)
from Hotels.structure import (
    Hotel,
    Room,
    RoomWithHotel,
    accommodation_error,
    describe_validation_error,
)
from utils import utc_now

logger = logging.getLogger(__name__)


def check_room_inventory(hotel: Hotel, rooms: Sequence[Room], proposed: Room) -> None:
    """
    Check a proposed room entry against the rooms a hotel already holds.

    ``rooms`` is the hotel's current room set. When ``proposed`` replaces one
    of them (same id) that entry is left out of both the duplicate and the
    capacity computation, so an update only counts the room's new quantity.

    Raises:
        ValidationError: The accommodation is not offered by the room type.
        DuplicateRoomTypeError: Another entry has the same type and accommodation.
        CapacityExceededError: The summed quantity would exceed max_rooms.
    """

    problem = accommodation_error(proposed.type, proposed.accommodation)
    if problem is not None:
        raise ValidationError(problem)

    siblings = [room for room in rooms if room.id != proposed.id]

    if any(
        room.type == proposed.type and room.accommodation == proposed.accommodation
        for room in siblings
    ):
        raise DuplicateRoomTypeError(
            f"The hotel already has a {proposed.type} room with {proposed.accommodation} accommodation."
        )

    total = sum(room.quantity for room in siblings) + proposed.quantity
    if total > hotel.max_rooms:
        raise CapacityExceededError(
            f"The total number of rooms ({total}) exceeds the hotel's maximum capacity "
            f"of {hotel.max_rooms}."
        )


def _build_room(**fields: Any) -> Room:
    try:
        return Room(**fields)
    except PydanticValidationError as exc:
        raise ValidationError(describe_validation_error(exc)) from exc


def _room_constraint_error(error: APIError) -> Optional[InventoryError]:
    if is_unique_violation(error):
        return DuplicateRoomTypeError(
            "The hotel already has a room with this type and accommodation."
        )
    if is_check_violation(error):
        return CapacityExceededError(
            "The total number of rooms exceeds the hotel's maximum capacity."
        )
    if is_foreign_key_violation(error):
        return HotelReferenceError("The selected hotel does not exist.")
    return None


class RoomInventoryManager:
    """CRUD operations over room entries, guarded by the hotel's invariants."""

    def __init__(self, db: Any, catalog: Optional[HotelCatalog] = None) -> None:
        self._db = db
        self._catalog = catalog if catalog is not None else HotelCatalog(db)

    def _fetch_room(self, room_id: UUID) -> Room:
        rows = execute_query(
            lambda: self._db.table(ROOMS_TABLE_NAME).select("*").eq("id", str(room_id)).execute(),
            "Unable to retrieve room due to an internal error.",
            {"room_id": str(room_id)},
        )
        if not rows:
            raise NotFoundError(f"No room found with id {room_id}")
        return Room(**rows[0])

    def list(self) -> list[RoomWithHotel]:
        """Return every room entry with its owning hotel attached."""

        hotel_rows = execute_query(
            lambda: self._db.table(HOTEL_TABLE_NAME).select("*").execute(),
            "Unable to retrieve hotels due to an internal error.",
            {},
        )
        hotels = {str(row["id"]): Hotel(**row) for row in hotel_rows}
        room_rows = execute_query(
            lambda: self._db.table(ROOMS_TABLE_NAME).select("*").execute(),
            "Unable to retrieve rooms due to an internal error.",
            {},
        )

        listed = []
        for row in room_rows:
            room = Room(**row)
            hotel = hotels.get(str(room.hotel_id))
            if hotel is None:
                logger.warning("Room without hotel skipped", extra={"room_id": str(room.id)})
                continue
            listed.append(RoomWithHotel(**room.model_dump(), hotel=hotel))
        return listed

    def get(self, room_id: UUID) -> RoomWithHotel:
        room = self._fetch_room(room_id)
        hotel = self._catalog.fetch_hotel(room.hotel_id)
        logger.info("Room retrieved", extra={"room_id": str(room_id)})
        return RoomWithHotel(**room.model_dump(), hotel=hotel)

    def create(self, hotel_id: UUID | str, type: str, accommodation: str, quantity: int) -> Room:
        """
        Validate and persist a new room entry for a hotel.

        Returns:
            The stored room with its generated id and timestamps.

        Raises:
            HotelReferenceError: If hotel_id does not match a hotel.
            ValidationError: Unknown type, quantity below 1, or an
                accommodation the type does not offer.
            DuplicateRoomTypeError: The hotel already lists this type and accommodation.
            CapacityExceededError: The hotel's max_rooms would be exceeded.
            PersistenceError: On database failures.
        """

        room = _build_room(
            hotel_id=hotel_id, type=type, accommodation=accommodation, quantity=quantity
        )

        try:
            hotel = self._catalog.fetch_hotel(room.hotel_id)
        except NotFoundError as exc:
            raise HotelReferenceError(f"The selected hotel {room.hotel_id} does not exist.") from exc

        check_room_inventory(hotel, self._catalog.fetch_rooms(hotel.id), room)

        rows = execute_query(
            lambda: self._db.table(ROOMS_TABLE_NAME).insert(room.to_dict()).execute(),
            "Unable to create room due to an internal error.",
            {"room_id": str(room.id), "hotel_id": str(hotel.id)},
            on_violation=_room_constraint_error,
        )

        created = Room(**rows[0]) if rows else room
        logger.info(
            "Room created",
            extra={"room_id": str(created.id), "hotel_id": str(hotel.id), "quantity": created.quantity},
        )
        return created

    def update(self, room_id: UUID, type: str, accommodation: str, quantity: int) -> Room:
        """
        Replace the type, accommodation and quantity of a room entry.

        The hotel total is recomputed without the room's previous quantity.

        Raises:
            NotFoundError: If the room does not exist.
            ValidationError: On invalid fields.
            DuplicateRoomTypeError: A sibling entry already has the new type and accommodation.
            CapacityExceededError: The hotel's max_rooms would be exceeded.
        """

        current = self._fetch_room(room_id)
        candidate = _build_room(
            **{
                **current.model_dump(),
                "type": type,
                "accommodation": accommodation,
                "quantity": quantity,
                "updated_at": utc_now(),
            }
        )

        hotel = self._catalog.fetch_hotel(current.hotel_id)
        check_room_inventory(hotel, self._catalog.fetch_rooms(hotel.id), candidate)

        updates = {
            "type": candidate.type,
            "accommodation": candidate.accommodation,
            "quantity": candidate.quantity,
            "updated_at": candidate.updated_at.isoformat(),
        }
        execute_query(
            lambda: self._db.table(ROOMS_TABLE_NAME).update(updates).eq("id", str(room_id)).execute(),
            "Unable to update room due to an internal error.",
            {"room_id": str(room_id), "hotel_id": str(hotel.id)},
            on_violation=_room_constraint_error,
        )

        logger.info("Room updated", extra={"room_id": str(room_id), "quantity": candidate.quantity})
        return self._fetch_room(room_id)

    def delete(self, room_id: UUID) -> None:
        """
        Delete a room entry.

        Raises:
            NotFoundError: If the room does not exist.
        """

        self._fetch_room(room_id)
        execute_query(
            lambda: self._db.table(ROOMS_TABLE_NAME).delete().eq("id", str(room_id)).execute(),
            "Unable to delete room due to an internal error.",
            {"room_id": str(room_id)},
        )
        logger.info("Room deleted", extra={"room_id": str(room_id)})
