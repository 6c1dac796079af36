"""
Verification API Routes
"""

from typing import Any

from fastapi import APIRouter, Depends

from gateway.dependencies import get_verification_service, json_body

from .verification_service import VerificationService

router = APIRouter(prefix="/api/verification", tags=["verification"])
email_router = APIRouter(prefix="/api/email", tags=["verification"])


@router.post("/forgot-password")
async def forgot_password(
    body: Any = Depends(json_body),
    service: VerificationService = Depends(get_verification_service),
):
    return (await service.forgot_password(body)).to_response()


@router.post("/resend-verification")
async def resend_verification(
    body: Any = Depends(json_body),
    service: VerificationService = Depends(get_verification_service),
):
    return (await service.resend_verification(body)).to_response()


@router.post("/reset-password-code")
async def reset_password_code(
    body: Any = Depends(json_body),
    service: VerificationService = Depends(get_verification_service),
):
    return (await service.reset_password_code(body)).to_response()


@router.post("/verify-code")
async def verify_code(
    body: Any = Depends(json_body),
    service: VerificationService = Depends(get_verification_service),
):
    return (await service.verify_code(body)).to_response()


@email_router.post("/contact-support")
async def contact_support(
    body: Any = Depends(json_body),
    service: VerificationService = Depends(get_verification_service),
):
    """Send a support message from the contact form"""
    return (await service.contact_support(body)).to_response()
