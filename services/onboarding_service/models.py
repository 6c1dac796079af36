"""
Onboarding Service Models

Step schemas for the property-listing wizard. Cross-field rules live in
model validators so they apply wherever a step is validated.
"""

import re
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

CONTACT_NUMBER_PATTERN = re.compile(r"^\+\d{9,15}$")
OWNER_MOBILE_PATTERN = re.compile(r"^\d{10}$")

MAX_IMAGES = 10
MAX_TAGS_PER_IMAGE = 6
MAX_CUSTOM_FACILITIES = 10
MAX_TOTAL_ROOMS = 50


# ====================
# Step 1 - Owner and property
# ====================


def _check_contact_number(value: str) -> str:
    if not CONTACT_NUMBER_PATTERN.match(value):
        raise ValueError("Enter a valid phone number (e.g., +9779801169431)")
    return value


class Step1Details(BaseModel):
    """Property and owner contact details (document scans travel as files)"""
    model_config = ConfigDict(extra="allow")

    propertyName: str = Field(..., min_length=3, max_length=100)
    propertyAddress: str = Field(..., min_length=1, max_length=255)
    contactNumber: str
    documentType: Optional[Literal["passport", "citizenship"]] = None

    @field_validator("contactNumber")
    @classmethod
    def validate_contact_number(cls, v):
        return _check_contact_number(v)


class Step1Update(BaseModel):
    """Partial step 1 update; only the fields sent are checked"""
    model_config = ConfigDict(extra="allow")

    propertyName: Optional[str] = Field(None, min_length=3, max_length=100)
    propertyAddress: Optional[str] = Field(None, min_length=1, max_length=255)
    contactNumber: Optional[str] = None
    documentType: Optional[Literal["passport", "citizenship"]] = None

    @field_validator("contactNumber")
    @classmethod
    def validate_contact_number(cls, v):
        return _check_contact_number(v) if v is not None else v


# ====================
# Step 2 - Description and images
# ====================


class ImageMetadata(BaseModel):
    """One image entry; entries without url are new uploads"""
    model_config = ConfigDict(extra="allow")

    tags: List[str] = Field(default_factory=list, max_length=MAX_TAGS_PER_IMAGE)
    isMain: bool = False
    url: Optional[str] = None

    @property
    def is_new(self) -> bool:
        return not self.url


class Step2Submission(BaseModel):
    """Description plus the image set"""
    description: str = Field(..., min_length=10, max_length=1000)
    images: List[ImageMetadata] = Field(..., min_length=1, max_length=MAX_IMAGES)

    @model_validator(mode="after")
    def validate_single_main_image(self):
        if sum(1 for image in self.images if image.isMain) != 1:
            raise ValueError("Exactly one image must be marked as main")
        return self


# ====================
# Step 3 - Facilities
# ====================


class CustomFacility(BaseModel):
    name: str = Field(..., min_length=1)


class Step3Facilities(BaseModel):
    """Selected default facility ids and host-defined custom facilities"""
    facilityIds: Optional[List[int]] = None
    customFacilities: Optional[List[CustomFacility]] = Field(None, max_length=MAX_CUSTOM_FACILITIES)

    @field_validator("customFacilities")
    @classmethod
    def validate_unique_names(cls, v):
        if v:
            names = [facility.name.strip().lower() for facility in v]
            if len(names) != len(set(names)):
                raise ValueError("Custom facility names must be unique")
        return v

    @property
    def is_empty(self) -> bool:
        return not self.facilityIds and not self.customFacilities


# ====================
# Step 4 - Rooms
# ====================


class RoomOccupancy(BaseModel):
    adults: int = Field(..., ge=0)
    children: int = Field(..., ge=0)


class RoomPrice(BaseModel):
    value: float = Field(..., ge=1, le=100000)
    currency: Literal["USD", "NPR"]


class Room(BaseModel):
    """One room definition"""
    model_config = ConfigDict(extra="allow")

    id: Union[str, int]
    name: str = Field(..., min_length=3)
    maxOccupancy: RoomOccupancy
    minOccupancy: RoomOccupancy
    price: RoomPrice

    @field_validator("id")
    @classmethod
    def validate_id(cls, v):
        if v in ("", 0):
            raise ValueError("Room ID is required")
        return v

    @model_validator(mode="after")
    def validate_occupancy_range(self):
        if self.maxOccupancy.adults < 1:
            raise ValueError("At least 1 adult is required")
        if (
            self.minOccupancy.adults > self.maxOccupancy.adults
            or self.minOccupancy.children > self.maxOccupancy.children
        ):
            raise ValueError("Min occupancy cannot exceed max occupancy")
        return self


class Step4Rooms(BaseModel):
    """Room count and the room list; the two must agree"""
    totalRooms: int = Field(..., ge=1, le=MAX_TOTAL_ROOMS, strict=True)
    rooms: List[Room]

    @model_validator(mode="after")
    def validate_room_count(self):
        if len(self.rooms) != self.totalRooms:
            raise ValueError("Number of rooms must match totalRooms")
        return self


# ====================
# Finalize - Owner account
# ====================


class FinalizeRequest(BaseModel):
    """Owner account created when the wizard is finalized"""
    name: str = Field(..., min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    mobileNumber: Optional[str] = None
    password: str = Field(..., min_length=8, max_length=100)

    @field_validator("mobileNumber")
    @classmethod
    def validate_mobile(cls, v):
        if v is not None and not OWNER_MOBILE_PATTERN.match(v):
            raise ValueError("Mobile number must be 10 digits")
        return v

    @model_validator(mode="after")
    def validate_contact(self):
        if not self.email and not self.mobileNumber:
            raise ValueError("Either email or mobile number must be provided")
        return self
