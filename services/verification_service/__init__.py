"""
Verification Service

OTP, password-reset and support-contact proxy routes.
"""

from .verification_service import VerificationService

__all__ = ["VerificationService"]
