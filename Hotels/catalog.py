'''
Hotel Catalog: owns the hotel records and exposes read helpers for the
rooms nested under them.

All methods are synchronous and talk to a Supabase-like client exposing
``table(name).select()/insert()/update()/delete().eq().execute()``.
'''
from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable, Optional
from uuid import UUID

from postgrest.exceptions import APIError
from pydantic import ValidationError as PydanticValidationError

from Database.db import is_check_violation, is_unique_violation
from Hotels.errors import (
    CapacityExceededError,
    InventoryError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from Hotels.structure import Hotel, HotelWithRooms, Room, describe_validation_error
from utils import utc_now

logger = logging.getLogger(__name__)

HOTEL_TABLE_NAME = "hotels"
ROOMS_TABLE_NAME = "rooms"
# raised by the hotels_enforce_stocked_rooms trigger
HOTEL_CAPACITY_TRIGGER_MESSAGE = "max_rooms below stocked rooms"

ViolationHandler = Callable[[APIError], Optional[InventoryError]]


def execute_query(
    query: Callable[[], Any],
    failure_detail: str,
    log_context: dict[str, Any],
    on_violation: Optional[ViolationHandler] = None,
) -> list[dict[str, Any]]:
    """
    Run a query builder and return its rows, translating storage failures.

    Args:
        query: Zero-argument callable executing the query.
        failure_detail: Message carried by the PersistenceError on failure.
        log_context: Extra context for the log record.
        on_violation: Maps a constraint error reported by the database onto a
            domain error. Returning None treats the error as a plain failure.

    Returns:
        The rows returned by the query (empty list when there are none).

    Raises:
        InventoryError: Whatever ``on_violation`` produced for a constraint error.
        PersistenceError: On any other database failure.
    """

    try:
        result = query()
    except APIError as exc:
        translated = on_violation(exc) if on_violation is not None else None
        if translated is not None:
            logger.info(
                "Write rejected by database constraint",
                extra={**log_context, "error_code": getattr(exc, "code", None)},
            )
            raise translated from exc
        logger.exception(failure_detail, extra=log_context)
        raise PersistenceError(failure_detail) from exc
    except Exception as exc:
        logger.exception(failure_detail, extra=log_context)
        raise PersistenceError(failure_detail) from exc

    return result.data or []


def _build_hotel(**fields: Any) -> Hotel:
    try:
        return Hotel(**fields)
    except PydanticValidationError as exc:
        raise ValidationError(describe_validation_error(exc)) from exc


def _hotel_constraint_error(error: APIError) -> Optional[InventoryError]:
    if is_unique_violation(error):
        return ValidationError("A hotel with this name or tax id already exists.")
    if is_check_violation(error):
        if HOTEL_CAPACITY_TRIGGER_MESSAGE in (error.message or ""):
            return CapacityExceededError(
                "The hotel already holds more rooms than the requested max_rooms."
            )
        return ValidationError("Hotel max_rooms must be at least 1.")
    return None


class HotelCatalog:
    """CRUD operations over hotel records."""

    def __init__(self, db: Any) -> None:
        self._db = db

    def fetch_hotel(self, hotel_id: UUID) -> Hotel:
        """
        Load a single hotel.

        Raises:
            NotFoundError: If no hotel has this id.
        """

        rows = execute_query(
            lambda: self._db.table(HOTEL_TABLE_NAME).select("*").eq("id", str(hotel_id)).execute(),
            "Unable to retrieve hotel due to an internal error.",
            {"hotel_id": str(hotel_id)},
        )
        if not rows:
            raise NotFoundError(f"No hotel found with id {hotel_id}")
        return Hotel(**rows[0])

    def fetch_rooms(self, hotel_id: UUID) -> list[Room]:
        """Load every room entry owned by a hotel (possibly none)."""

        rows = execute_query(
            lambda: self._db.table(ROOMS_TABLE_NAME).select("*").eq("hotel_id", str(hotel_id)).execute(),
            "Unable to retrieve rooms due to an internal error.",
            {"hotel_id": str(hotel_id)},
        )
        return [Room(**row) for row in rows]

    def list(self) -> list[HotelWithRooms]:
        """Return every hotel with its rooms attached."""

        hotel_rows = execute_query(
            lambda: self._db.table(HOTEL_TABLE_NAME).select("*").execute(),
            "Unable to retrieve hotels due to an internal error.",
            {},
        )
        room_rows = execute_query(
            lambda: self._db.table(ROOMS_TABLE_NAME).select("*").execute(),
            "Unable to retrieve rooms due to an internal error.",
            {},
        )

        rooms_by_hotel: dict[str, list[Room]] = defaultdict(list)
        for row in room_rows:
            room = Room(**row)
            rooms_by_hotel[str(room.hotel_id)].append(room)

        return [
            HotelWithRooms(**row, rooms=rooms_by_hotel.get(str(row["id"]), []))
            for row in hotel_rows
        ]

    def get(self, hotel_id: UUID) -> HotelWithRooms:
        hotel = self.fetch_hotel(hotel_id)
        rooms = self.fetch_rooms(hotel_id)
        logger.info("Hotel retrieved", extra={"hotel_id": str(hotel_id)})
        return HotelWithRooms(**hotel.model_dump(), rooms=rooms)

    def _ensure_unique(self, hotel: Hotel) -> None:
        """Reject a hotel whose name or tax id belongs to another hotel."""

        checks = (
            ("name", hotel.name, "The hotel name is already in use."),
            ("tax_id", hotel.tax_id, "The tax id is already registered for another hotel."),
        )
        for column, value, detail in checks:
            rows = execute_query(
                lambda: self._db.table(HOTEL_TABLE_NAME).select("*").eq(column, value).execute(),
                "Unable to validate hotel due to an internal error.",
                {"hotel_id": str(hotel.id), "column": column},
            )
            if any(str(row.get("id")) != str(hotel.id) for row in rows):
                logger.info("Duplicate hotel rejected", extra={"hotel_id": str(hotel.id), "column": column})
                raise ValidationError(detail)

    def create(self, name: str, address: str, city: str, tax_id: str, max_rooms: int) -> Hotel:
        """
        Validate and persist a new hotel.

        Returns:
            The stored hotel with its generated id and timestamps.

        Raises:
            ValidationError: Missing or blank field, max_rooms below 1, or a
                name/tax id already used by another hotel.
            PersistenceError: On database failures.
        """

        hotel = _build_hotel(
            name=name, address=address, city=city, tax_id=tax_id, max_rooms=max_rooms
        )
        self._ensure_unique(hotel)

        rows = execute_query(
            lambda: self._db.table(HOTEL_TABLE_NAME).insert(hotel.to_dict()).execute(),
            "Unable to create hotel due to an internal error.",
            {"hotel_id": str(hotel.id), "tax_id": hotel.tax_id},
            on_violation=_hotel_constraint_error,
        )

        created = Hotel(**rows[0]) if rows else hotel
        logger.info("Hotel created", extra={"hotel_id": str(created.id), "tax_id": created.tax_id})
        return created

    def update(
        self,
        hotel_id: UUID,
        name: str,
        address: str,
        city: str,
        tax_id: str,
        max_rooms: int,
    ) -> Hotel:
        """
        Replace the mutable fields of an existing hotel.

        A hotel may keep its own name and tax id. Lowering max_rooms below the
        quantity already stocked is rejected.

        Raises:
            NotFoundError: If the hotel does not exist.
            ValidationError: On invalid or duplicated fields.
            CapacityExceededError: If the hotel's rooms would not fit any more.
        """

        current = self.fetch_hotel(hotel_id)
        candidate = _build_hotel(
            **{
                **current.model_dump(),
                "name": name,
                "address": address,
                "city": city,
                "tax_id": tax_id,
                "max_rooms": max_rooms,
                "updated_at": utc_now(),
            }
        )
        self._ensure_unique(candidate)

        stocked = sum(room.quantity for room in self.fetch_rooms(hotel_id))
        if stocked > candidate.max_rooms:
            raise CapacityExceededError(
                f"The hotel already holds {stocked} rooms, more than the requested "
                f"max_rooms of {candidate.max_rooms}."
            )

        updates = candidate.to_dict()
        del updates["id"], updates["created_at"]
        execute_query(
            lambda: self._db.table(HOTEL_TABLE_NAME).update(updates).eq("id", str(hotel_id)).execute(),
            "Unable to update hotel due to an internal error.",
            {"hotel_id": str(hotel_id)},
            on_violation=_hotel_constraint_error,
        )

        logger.info("Hotel updated", extra={"hotel_id": str(hotel_id)})
        return self.fetch_hotel(hotel_id)

    def delete(self, hotel_id: UUID) -> None:
        """
        Delete a hotel. Its rooms go with it through the ON DELETE CASCADE
        foreign key, so the delete is a single statement.

        Raises:
            NotFoundError: If the hotel does not exist.
        """

        self.fetch_hotel(hotel_id)

        execute_query(
            lambda: self._db.table(HOTEL_TABLE_NAME).delete().eq("id", str(hotel_id)).execute(),
            "Unable to delete hotel due to an internal error.",
            {"hotel_id": str(hotel_id)},
        )
        logger.info("Hotel deleted", extra={"hotel_id": str(hotel_id)})
