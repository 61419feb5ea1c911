"""Shared API request and response models for the Hotel Inventory service."""

from uuid import UUID

from pydantic import BaseModel

from Hotels.structure import Hotel, HotelWithRooms, Room, RoomWithHotel


class HotelFields(BaseModel):
    """Payload accepted when creating or replacing a hotel."""

    name : str
    address : str
    city : str
    tax_id : str
    max_rooms : int


class RoomFields(BaseModel):
    """Payload accepted when replacing an existing room entry."""

    type : str
    accommodation : str
    quantity : int


class RoomCreateFields(RoomFields):
    """Payload accepted when creating a room entry for a hotel."""

    hotel_id : UUID


class MessageResponse(BaseModel):
    """Envelope for simple string responses."""

    status: int
    message: str


class HotelResponse(BaseModel):
    """Envelope for responses that include a hotel resource."""

    status: int
    hotel: Hotel


class HotelDetailResponse(BaseModel):
    """Envelope for a hotel returned together with its rooms."""

    status: int
    hotel: HotelWithRooms


class HotelListResponse(BaseModel):
    """Envelope for responses that include a list of hotels with their rooms."""

    status: int
    hotels: list[HotelWithRooms]


class RoomResponse(BaseModel):
    """Envelope for responses that include a room resource."""

    status: int
    room: Room


class RoomDetailResponse(BaseModel):
    """Envelope for a room returned together with its hotel."""

    status: int
    room: RoomWithHotel


class RoomListResponse(BaseModel):
    """Envelope for responses that include a list of rooms resource."""

    status: int
    rooms: list[RoomWithHotel]
