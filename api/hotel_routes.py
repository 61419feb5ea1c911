"""Hotel-related FastAPI routes."""

import logging

from fastapi import APIRouter, Depends, Response, status

from Database.deps import get_db
from Hotels.catalog import HotelCatalog

from .models import (
    HotelDetailResponse,
    HotelFields,
    HotelListResponse,
    HotelResponse,
    MessageResponse,
)
from .utils import _parse_id as _parse_hotel_id
from .utils import _run_operation

logger = logging.getLogger(__name__)

HOTEL = "hotel"

# mount api router
hotel_router = APIRouter()

@hotel_router.get("/health", response_model=MessageResponse)
async def health_check() -> MessageResponse:
    """Quick liveness check for the hotel service."""

    return MessageResponse(status=status.HTTP_200_OK, message="Hotel service is healthy")

@hotel_router.get(
    "",
    response_model=HotelListResponse,
    status_code=status.HTTP_200_OK,
)
async def list_hotels(db=Depends(get_db)) -> HotelListResponse:
    """
    List every hotel with its rooms attached.

    Args:
        db: Supabase client injected via dependency.

    Returns:
        HotelListResponse wrapping all hotels.
    """

    hotels = await _run_operation(HotelCatalog(db).list, logger=logger, log_context={})
    logger.info("Hotels listed", extra={"count": len(hotels)})
    return HotelListResponse(status=status.HTTP_200_OK, hotels=hotels)

@hotel_router.post(
    "",
    response_model=HotelResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_hotel(fields: HotelFields, db=Depends(get_db)) -> HotelResponse:
    """
    Add a Hotel to the database if its name and tax id are not already taken.

    Args:
        fields: Hotel payload to persist.
        db: Supabase client injected via dependency.

    Returns:
        HotelResponse wrapping the created hotel.
    """

    created_hotel = await _run_operation(
        HotelCatalog(db).create,
        fields.name,
        fields.address,
        fields.city,
        fields.tax_id,
        fields.max_rooms,
        logger=logger,
        log_context={"tax_id": fields.tax_id},
    )
    return HotelResponse(status=status.HTTP_201_CREATED, hotel=created_hotel)


@hotel_router.get(
    "/{hotel_id}",
    response_model=HotelDetailResponse,
    status_code=status.HTTP_200_OK,
)
async def get_hotel(hotel_id: str, db=Depends(get_db)) -> HotelDetailResponse:
    """
    Retrieve a single hotel and its rooms by identifier.

    Args:
        hotel_id: UUID4 of the target hotel (path parameter).
        db: Supabase client injected via dependency.

    Returns:
        HotelDetailResponse wrapping the requested hotel.
    """

    guid = _parse_hotel_id(hotel_id, logger, HOTEL)
    hotel = await _run_operation(
        HotelCatalog(db).get, guid, logger=logger, log_context={"hotel_id": hotel_id}
    )
    return HotelDetailResponse(status=status.HTTP_200_OK, hotel=hotel)

@hotel_router.put(
    "/{hotel_id}",
    response_model=HotelResponse,
    status_code=status.HTTP_200_OK,
)
async def update_hotel(hotel_id: str, fields: HotelFields, db=Depends(get_db)) -> HotelResponse:
    """
    Replace the fields of an existing hotel.

    Args:
        hotel_id: UUID4 of the hotel to update.
        fields: Full hotel payload.
        db: Supabase client injected via dependency.

    Returns:
        HotelResponse wrapping the updated hotel.
    """

    guid = _parse_hotel_id(hotel_id, logger, HOTEL)
    updated_hotel = await _run_operation(
        HotelCatalog(db).update,
        guid,
        fields.name,
        fields.address,
        fields.city,
        fields.tax_id,
        fields.max_rooms,
        logger=logger,
        log_context={"hotel_id": hotel_id},
    )
    return HotelResponse(status=status.HTTP_200_OK, hotel=updated_hotel)


@hotel_router.delete(
    "/{hotel_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_hotel(hotel_id: str, db=Depends(get_db)) -> Response:
    """
    Delete an existing hotel, and the rooms it owns, by identifier.

    Args:
        hotel_id: UUID4 of the hotel to delete.
        db: Supabase client injected via dependency.

    Returns:
        Empty 204 response.
    """

    guid = _parse_hotel_id(hotel_id, logger, HOTEL)
    await _run_operation(
        HotelCatalog(db).delete, guid, logger=logger, log_context={"hotel_id": hotel_id}
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
