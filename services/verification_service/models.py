"""
Verification Service Models
"""

from pydantic import BaseModel, EmailStr, field_validator

from core.validation import SIX_DIGIT_CODE
from services.auth_service.models import ContactChoiceMixin, ContactCodeRequest


class ForgotPasswordRequest(ContactChoiceMixin):
    """Start a password reset for an email or mobile number"""
    pass


class ResendVerificationRequest(BaseModel):
    """Resend the email verification OTP"""
    email: EmailStr


class ResetPasswordCodeRequest(ContactChoiceMixin):
    """Reset a password with the code that was sent out"""
    newPassword: str
    code: str

    @field_validator("newPassword")
    @classmethod
    def validate_password(cls, v):
        if len(v) < 8:
            raise ValueError("Password must be at least 8 characters")
        return v

    @field_validator("code")
    @classmethod
    def validate_code(cls, v):
        if len(v) != 6:
            raise ValueError("Code must be 6 digits")
        if not SIX_DIGIT_CODE.match(v):
            raise ValueError("Code must be numeric")
        return v


class VerifyCodeRequest(ContactCodeRequest):
    """Verify the OTP sent during sign-up"""
    pass


class ContactSupportRequest(BaseModel):
    """Support message from the contact form"""
    name: str
    email: EmailStr
    subject: str
    message: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if len(v) < 2:
            raise ValueError("Name must be at least 2 characters")
        return v

    @field_validator("subject")
    @classmethod
    def validate_subject(cls, v):
        if len(v) < 3:
            raise ValueError("Subject must be at least 3 characters")
        return v

    @field_validator("message")
    @classmethod
    def validate_message(cls, v):
        if len(v) < 10:
            raise ValueError("Message must be at least 10 characters")
        return v
