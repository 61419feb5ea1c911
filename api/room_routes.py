"""Room-related FastAPI routes."""

import logging

from fastapi import APIRouter, Depends, Response, status

from Database.deps import get_db
from Hotels.inventory import RoomInventoryManager

from .models import (
    MessageResponse,
    RoomCreateFields,
    RoomDetailResponse,
    RoomFields,
    RoomListResponse,
    RoomResponse,
)
from .utils import _parse_id as _parse_room_id
from .utils import _run_operation

logger = logging.getLogger(__name__)

ROOM = "room"

# mount api router
room_router = APIRouter()

@room_router.get("/health", response_model=MessageResponse)
async def health_check() -> MessageResponse:
    """Quick liveness check for the room service."""

    return MessageResponse(status=status.HTTP_200_OK, message="Room service is healthy")

@room_router.get(
    "",
    response_model=RoomListResponse,
    status_code=status.HTTP_200_OK,
)
async def list_rooms(db=Depends(get_db)) -> RoomListResponse:
    """
    List every room entry with the hotel it belongs to.

    Args:
        db: Supabase client injected via dependency.

    Returns:
        RoomListResponse wrapping all rooms.
    """

    rooms = await _run_operation(RoomInventoryManager(db).list, logger=logger, log_context={})
    logger.info("Rooms listed", extra={"count": len(rooms)})
    return RoomListResponse(status=status.HTTP_200_OK, rooms=rooms)

@room_router.post(
    "",
    response_model=RoomResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_room(fields: RoomCreateFields, db=Depends(get_db)) -> RoomResponse:
    """
    Add a room entry to a hotel, enforcing the hotel's capacity and the
    uniqueness of its type/accommodation combinations.

    Args:
        fields: Room payload to persist.
        db: Supabase client injected via dependency.

    Returns:
        RoomResponse wrapping the created room.
    """

    created_room = await _run_operation(
        RoomInventoryManager(db).create,
        fields.hotel_id,
        fields.type,
        fields.accommodation,
        fields.quantity,
        logger=logger,
        log_context={"hotel_id": str(fields.hotel_id)},
    )
    return RoomResponse(status=status.HTTP_201_CREATED, room=created_room)


@room_router.get(
    "/{room_id}",
    response_model=RoomDetailResponse,
    status_code=status.HTTP_200_OK,
)
async def get_room(room_id: str, db=Depends(get_db)) -> RoomDetailResponse:
    """
    Retrieve a single room and its hotel by identifier.

    Args:
        room_id: UUID4 of the target room (path parameter).
        db: Supabase client injected via dependency.

    Returns:
        RoomDetailResponse wrapping the requested room.
    """

    guid = _parse_room_id(room_id, logger, ROOM)
    room = await _run_operation(
        RoomInventoryManager(db).get, guid, logger=logger, log_context={"room_id": room_id}
    )
    return RoomDetailResponse(status=status.HTTP_200_OK, room=room)


@room_router.put(
    "/{room_id}",
    response_model=RoomResponse,
    status_code=status.HTTP_200_OK,
)
async def update_room(room_id: str, fields: RoomFields, db=Depends(get_db)) -> RoomResponse:
    """
    Replace the type, accommodation and quantity of an existing room.

    Args:
        room_id: UUID4 of the room to update.
        fields: Full room payload.
        db: Supabase client injected via dependency.

    Returns:
        RoomResponse wrapping the updated room.
    """

    guid = _parse_room_id(room_id, logger, ROOM)
    updated_room = await _run_operation(
        RoomInventoryManager(db).update,
        guid,
        fields.type,
        fields.accommodation,
        fields.quantity,
        logger=logger,
        log_context={"room_id": room_id},
    )
    return RoomResponse(status=status.HTTP_200_OK, room=updated_room)


@room_router.delete(
    "/{room_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_room(room_id: str, db=Depends(get_db)) -> Response:
    """
    Delete an existing room by identifier.

    Args:
        room_id: UUID4 of the room to delete.
        db: Supabase client injected via dependency.

    Returns:
        Empty 204 response.
    """

    guid = _parse_room_id(room_id, logger, ROOM)
    await _run_operation(
        RoomInventoryManager(db).delete, guid, logger=logger, log_context={"room_id": room_id}
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
