"""
Booking Service Models
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from core.validation import parse_datetime

PaymentMethod = Literal["KHALTI", "ESEWA", "STRIPE", "CARD", "PAY_AT_PROPERTY"]

DEALS_PAGE_SIZE = 12
LOCATION_SEARCH_LIMIT = "10"
MIN_LOCATION_QUERY = 2


class BookedRoom(BaseModel):
    roomId: int = Field(..., gt=0)
    adults: int = Field(..., ge=1)
    children: int = Field(..., ge=0)


class GuestBooking(BaseModel):
    """Booking made without an account"""
    homestayId: int = Field(..., gt=0)
    checkInDate: str
    checkOutDate: str
    rooms: List[BookedRoom]
    paymentMethod: PaymentMethod
    transactionId: Optional[str] = None
    guestName: str
    guestEmail: EmailStr
    guestPhone: str

    @field_validator("checkInDate")
    @classmethod
    def validate_check_in(cls, v):
        if parse_datetime(v) is None:
            raise ValueError("Invalid check-in date format")
        return v

    @field_validator("checkOutDate")
    @classmethod
    def validate_check_out(cls, v):
        if parse_datetime(v) is None:
            raise ValueError("Invalid check-out date format")
        return v

    @field_validator("rooms")
    @classmethod
    def validate_rooms(cls, v):
        if not v:
            raise ValueError("At least one room is required")
        return v

    @field_validator("guestName")
    @classmethod
    def validate_guest_name(cls, v):
        if not v:
            raise ValueError("Guest name is required")
        return v

    @field_validator("guestPhone")
    @classmethod
    def validate_guest_phone(cls, v):
        if not v:
            raise ValueError("Guest phone is required")
        return v


class DealsSearch(BaseModel):
    """Browser deal search; field names differ from the backend's"""
    page: Optional[Any] = None
    limit: Optional[Any] = None
    location: Optional[str] = None
    checkIn: Optional[str] = None
    checkOut: Optional[str] = None
    rooms: Optional[List[Any]] = None

    def to_backend(self) -> Dict[str, Any]:
        """checkIn/checkOut become checkInDate/checkOutDate; empty filters are dropped"""
        payload: Dict[str, Any] = {
            "page": self.page or 1,
            "limit": self.limit or DEALS_PAGE_SIZE,
        }
        if self.location:
            payload["location"] = self.location
        if self.checkIn:
            payload["checkInDate"] = self.checkIn
        if self.checkOut:
            payload["checkOutDate"] = self.checkOut
        if self.rooms:
            payload["rooms"] = self.rooms
        return payload


class ConfirmPaymentRequest(BaseModel):
    groupBookingId: Optional[Any] = None
    transactionId: Optional[Any] = None
    metadata: Optional[Dict[str, Any]] = None


__all__ = [
    "PaymentMethod",
    "BookedRoom",
    "GuestBooking",
    "DealsSearch",
    "ConfirmPaymentRequest",
    "DEALS_PAGE_SIZE",
    "LOCATION_SEARCH_LIMIT",
    "MIN_LOCATION_QUERY",
]
