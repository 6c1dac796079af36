"""
Campaign Service Models

Request bodies and query strings for the QR-code campaign routes.
Validated models are dumped with exclude_none before forwarding, so only
the fields the client sent reach the backend.
"""

from typing import Annotated, Any, List, Literal, Optional

from pydantic import (
    AfterValidator,
    AnyHttpUrl,
    BaseModel,
    EmailStr,
    Field,
    field_validator,
    model_validator,
)

from core.validation import UUID_PATTERN, parse_datetime

MAX_QR_CODES_PER_BATCH = 1000
MAX_BULK_HOMESTAYS = 100
MAX_REVIEW_IMAGES = 5


def _check_qr_code(value: str) -> str:
    if not UUID_PATTERN.match(value):
        raise ValueError("Invalid QR code format")
    return value


def _check_date(value: Optional[str], message: str) -> Optional[str]:
    if value is not None and parse_datetime(value) is None:
        raise ValueError(message)
    return value


QrCode = Annotated[str, AfterValidator(_check_qr_code)]


# ====================
# Campaign management
# ====================


class CampaignCreate(BaseModel):
    """New campaign (admin)"""
    name: str = Field(..., max_length=100)
    description: Optional[str] = None
    qrCodeTemplate: Optional[str] = None
    startDate: str
    endDate: Optional[str] = None
    discountPercentage: Optional[float] = Field(None, ge=0, le=100)
    discountValidDays: Optional[int] = Field(None, ge=1)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if len(v) < 3:
            raise ValueError("Campaign name must be at least 3 characters")
        return v

    @field_validator("startDate")
    @classmethod
    def validate_start_date(cls, v):
        return _check_date(v, "Invalid start date format")

    @field_validator("endDate")
    @classmethod
    def validate_end_date(cls, v):
        return _check_date(v, "Invalid end date format")


class CampaignUpdate(BaseModel):
    """Partial campaign update (admin)"""
    name: Optional[str] = Field(None, min_length=3, max_length=100)
    description: Optional[str] = None
    qrCodeTemplate: Optional[str] = None
    isActive: Optional[bool] = None
    startDate: Optional[str] = None
    endDate: Optional[str] = None
    discountPercentage: Optional[float] = Field(None, ge=0, le=100)
    discountValidDays: Optional[int] = Field(None, ge=1)

    @field_validator("startDate")
    @classmethod
    def validate_start_date(cls, v):
        return _check_date(v, "Invalid start date format")

    @field_validator("endDate")
    @classmethod
    def validate_end_date(cls, v):
        return _check_date(v, "Invalid end date format")


class GenerateQRCodes(BaseModel):
    """Bulk QR code generation for a campaign"""
    campaignId: int
    count: int

    @field_validator("campaignId")
    @classmethod
    def validate_campaign_id(cls, v):
        if v <= 0:
            raise ValueError("Campaign ID must be a positive number")
        return v

    @field_validator("count")
    @classmethod
    def validate_count(cls, v):
        if v < 1:
            raise ValueError("Must generate at least 1 QR code")
        if v > MAX_QR_CODES_PER_BATCH:
            raise ValueError(f"Cannot generate more than {MAX_QR_CODES_PER_BATCH} QR codes at once")
        return v


# ====================
# Homestay registration
# ====================


class HostContactMixin(BaseModel):
    """A registered homestay needs a host email or a host phone"""
    hostEmail: Optional[EmailStr] = None
    hostPhone: Optional[str] = None

    @model_validator(mode="after")
    def validate_host_contact(self):
        if not self.hostEmail and not self.hostPhone:
            raise ValueError("Either host email or host phone must be provided")
        return self


class HomestayRegistration(HostContactMixin):
    """Field agent registers a homestay against a printed QR code"""
    qrCode: QrCode
    campaignId: int = Field(..., gt=0)
    name: str = Field(..., max_length=200)
    address: str = Field(..., max_length=500)
    contactNumber: str
    assignedBy: Optional[str] = None
    fieldNotes: Optional[str] = Field(None, max_length=1000)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if len(v) < 2:
            raise ValueError("Homestay name must be at least 2 characters")
        return v

    @field_validator("address")
    @classmethod
    def validate_address(cls, v):
        if len(v) < 5:
            raise ValueError("Address must be at least 5 characters")
        return v

    @field_validator("contactNumber")
    @classmethod
    def validate_contact_number(cls, v):
        if len(v) < 10:
            raise ValueError("Contact number must be at least 10 characters")
        return v


class BulkHomestayEntry(HostContactMixin):
    qrCode: QrCode
    name: str = Field(..., min_length=2, max_length=200)
    address: str = Field(..., min_length=5, max_length=500)
    contactNumber: str = Field(..., min_length=10)


class BulkHomestayRegistration(BaseModel):
    """Up to 100 homestays registered in one call"""
    campaignId: int = Field(..., gt=0)
    assignedBy: str
    homestays: List[BulkHomestayEntry]

    @field_validator("assignedBy")
    @classmethod
    def validate_assigned_by(cls, v):
        if len(v) < 2:
            raise ValueError("Assigned by must be at least 2 characters")
        return v

    @field_validator("homestays")
    @classmethod
    def validate_homestays(cls, v):
        if not v:
            raise ValueError("At least one homestay is required")
        if len(v) > MAX_BULK_HOMESTAYS:
            raise ValueError(f"Cannot register more than {MAX_BULK_HOMESTAYS} homestays at once")
        return v


# ====================
# QR scan and review flow
# ====================


class TrackQRScan(BaseModel):
    qrCode: QrCode
    deviceInfo: Optional[Any] = None


class VerifyUser(BaseModel):
    """Guest identifies themselves before an OTP is sent"""
    qrCode: QrCode
    contact: str
    contactType: str

    @field_validator("contact")
    @classmethod
    def validate_contact(cls, v):
        if len(v) < 3:
            raise ValueError("Contact must be at least 3 characters")
        return v

    @field_validator("contactType")
    @classmethod
    def validate_contact_type(cls, v):
        if v not in ("email", "phone"):
            raise ValueError("Contact type must be either email or phone")
        return v


class VerifyOTP(BaseModel):
    qrCode: QrCode
    contact: str = Field(..., min_length=3)
    code: str

    @field_validator("code")
    @classmethod
    def validate_code(cls, v):
        if len(v) != 6:
            raise ValueError("OTP must be exactly 6 digits")
        return v


class CompleteRegistration(VerifyOTP):
    """OTP-verified guest creates an account to leave a review"""
    contactType: Literal["email", "phone"]
    name: str = Field(..., max_length=100)
    password: str = Field(..., max_length=100)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if len(v) < 2:
            raise ValueError("Name must be at least 2 characters")
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        if len(v) < 8:
            raise ValueError("Password must be at least 8 characters")
        return v


class SubmitReview(BaseModel):
    """Guest review of a stay, tied to the scanned QR code"""
    qrCode: QrCode
    rating: float
    description: Optional[str] = None
    checkInDate: str
    checkOutDate: str
    images: Optional[List[AnyHttpUrl]] = None
    deviceInfo: Optional[Any] = None

    @field_validator("rating")
    @classmethod
    def validate_rating(cls, v):
        if v < 1:
            raise ValueError("Rating must be at least 1")
        if v > 5:
            raise ValueError("Rating must be at most 5")
        return v

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        if v is not None and len(v) > 2000:
            raise ValueError("Description must be at most 2000 characters")
        return v

    @field_validator("checkInDate")
    @classmethod
    def validate_check_in(cls, v):
        return _check_date(v, "Invalid check-in date format")

    @field_validator("checkOutDate")
    @classmethod
    def validate_check_out(cls, v):
        return _check_date(v, "Invalid check-out date format")

    @field_validator("images")
    @classmethod
    def validate_images(cls, v):
        if v is not None and len(v) > MAX_REVIEW_IMAGES:
            raise ValueError(f"Maximum {MAX_REVIEW_IMAGES} images allowed")
        return v

    @model_validator(mode="after")
    def validate_stay_dates(self):
        check_in = parse_datetime(self.checkInDate)
        check_out = parse_datetime(self.checkOutDate)
        if check_in.tzinfo is None and check_out.tzinfo is not None:
            check_out = check_out.replace(tzinfo=None)
        elif check_out.tzinfo is None and check_in.tzinfo is not None:
            check_in = check_in.replace(tzinfo=None)
        if check_out <= check_in:
            raise ValueError("Check-out date must be after check-in date")
        return self


# ====================
# Admin review moderation
# ====================


class VerifyReview(BaseModel):
    isVerified: bool
    isPublished: bool
    adminNotes: Optional[str] = Field(None, max_length=1000)


class RespondToReview(BaseModel):
    response: str

    @field_validator("response")
    @classmethod
    def validate_response(cls, v):
        if len(v) < 10:
            raise ValueError("Response must be at least 10 characters")
        if len(v) > 1000:
            raise ValueError("Response must be at most 1000 characters")
        return v


# ====================
# Discounts
# ====================


class ValidateDiscount(BaseModel):
    discountCode: str

    @field_validator("discountCode")
    @classmethod
    def validate_discount_code(cls, v):
        if not v:
            raise ValueError("Discount code is required")
        return v


# ====================
# Query strings
# ====================


class PageQuery(BaseModel):
    page: int = Field(1, ge=1)
    limit: int = Field(20, ge=1, le=100)


class CampaignHomestaysQuery(PageQuery):
    isActive: Optional[bool] = None
    search: Optional[str] = None


class ReviewsQuery(PageQuery):
    isVerified: Optional[bool] = None
    isPublished: Optional[bool] = None
    campaignId: Optional[int] = Field(None, gt=0)
    homestayId: Optional[int] = Field(None, gt=0)


class DiscountsQuery(BaseModel):
    isUsed: Optional[bool] = None
    includeExpired: bool = False


__all__ = [
    "CampaignCreate",
    "CampaignUpdate",
    "GenerateQRCodes",
    "HomestayRegistration",
    "BulkHomestayEntry",
    "BulkHomestayRegistration",
    "TrackQRScan",
    "VerifyUser",
    "VerifyOTP",
    "CompleteRegistration",
    "SubmitReview",
    "VerifyReview",
    "RespondToReview",
    "ValidateDiscount",
    "PageQuery",
    "CampaignHomestaysQuery",
    "ReviewsQuery",
    "DiscountsQuery",
]
