"""
Authentication Service Models

Request bodies for the auth proxy routes and the session user shape.
"""

from typing import Optional, List
from pydantic import BaseModel, Field, EmailStr, field_validator, model_validator

from core.validation import PHONE_PATTERN, SIX_DIGIT_CODE


# Request Models

class LoginRequest(BaseModel):
    """Credentials login request"""
    email: EmailStr = Field(..., description="User email")
    password: str = Field(..., min_length=1, description="User password")


class RegisterRequest(BaseModel):
    """Guest registration request"""
    name: str = Field(..., min_length=1, description="Display name")
    email: EmailStr = Field(..., description="User email")
    password: str = Field(..., min_length=1, description="User password")


class SessionUpdateRequest(BaseModel):
    """Client-pushed token update"""
    action: Optional[str] = None
    accessToken: Optional[str] = None
    refreshToken: Optional[str] = None
    expiresIn: Optional[int] = None


class ContactChoiceMixin(BaseModel):
    """Exactly one of email / mobileNumber identifies the account"""
    email: Optional[EmailStr] = None
    mobileNumber: Optional[str] = None

    @field_validator("mobileNumber")
    @classmethod
    def validate_mobile(cls, v):
        if v is not None and not PHONE_PATTERN.match(v):
            raise ValueError("Invalid mobile number")
        return v

    @model_validator(mode="after")
    def validate_single_contact(self):
        if not self.email and not self.mobileNumber:
            raise ValueError("Either email or mobile number is required")
        if self.email and self.mobileNumber:
            raise ValueError("Provide either email or mobile number, not both")
        return self

    def contact_payload(self) -> dict:
        """Only the contact field that was provided"""
        if self.email:
            return {"email": self.email}
        return {"mobileNumber": self.mobileNumber}


class ContactCodeRequest(ContactChoiceMixin):
    """OTP code validation request"""
    code: str

    @field_validator("code")
    @classmethod
    def validate_code(cls, v):
        if len(v) != 6:
            raise ValueError("OTP must be 6 digits")
        if not SIX_DIGIT_CODE.match(v):
            raise ValueError("OTP must be numeric")
        return v


# Response Models

class SessionUser(BaseModel):
    """User fields the backend returns on login/register"""
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    permissions: List[str] = Field(default_factory=list)
    isEmailVerified: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        return str(v)

    @field_validator("permissions", mode="before")
    @classmethod
    def default_permissions(cls, v):
        return v or []

    @field_validator("isEmailVerified", mode="before")
    @classmethod
    def default_verified(cls, v):
        return bool(v)
