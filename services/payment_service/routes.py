"""
Payment API Routes

/api/stripe, /api/khalti and /api/esewa. Verification routes read the
optional session so signed-in bookings are confirmed with the user's token.
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Request

from core.session_manager import SessionClaims
from gateway.dependencies import get_optional_session, get_payment_service, json_body

from .payment_service import PaymentService

stripe_router = APIRouter(prefix="/api/stripe", tags=["payments"])
khalti_router = APIRouter(prefix="/api/khalti", tags=["payments"])
esewa_router = APIRouter(prefix="/api/esewa", tags=["payments"])


def request_origin(request: Request) -> str:
    """Origin header of the browser, or this server's base URL"""
    origin = request.headers.get("origin")
    if origin and origin != "null":
        return origin.rstrip("/")
    return str(request.base_url).rstrip("/")


def _access_token(session: Optional[SessionClaims]) -> Optional[str]:
    return session.access_token if session else None


# ====================
# Stripe
# ====================


@stripe_router.post("/checkout")
async def stripe_checkout(
    request: Request,
    body: Any = Depends(json_body),
    service: PaymentService = Depends(get_payment_service),
):
    return (await service.stripe_checkout(body, request_origin(request))).to_response()


@stripe_router.post("/verify")
async def stripe_verify(
    body: Any = Depends(json_body),
    session: Optional[SessionClaims] = Depends(get_optional_session),
    service: PaymentService = Depends(get_payment_service),
):
    return (await service.stripe_verify(body, _access_token(session))).to_response()


# ====================
# Khalti
# ====================


@khalti_router.post("/initiate")
async def khalti_initiate(
    request: Request,
    body: Any = Depends(json_body),
    service: PaymentService = Depends(get_payment_service),
):
    return (await service.khalti_initiate(body, request_origin(request))).to_response()


@khalti_router.post("/verify")
async def khalti_verify(
    body: Any = Depends(json_body),
    session: Optional[SessionClaims] = Depends(get_optional_session),
    service: PaymentService = Depends(get_payment_service),
):
    return (await service.khalti_verify(body, _access_token(session))).to_response()


# ====================
# eSewa
# ====================


@esewa_router.post("/initiate")
async def esewa_initiate(
    request: Request,
    body: Any = Depends(json_body),
    service: PaymentService = Depends(get_payment_service),
):
    """Signed form fields for the eSewa payment page"""
    return (await service.esewa_initiate(body, request_origin(request))).to_response()


@esewa_router.post("/verify")
async def esewa_verify(
    body: Any = Depends(json_body),
    session: Optional[SessionClaims] = Depends(get_optional_session),
    service: PaymentService = Depends(get_payment_service),
):
    return (await service.esewa_verify(body, _access_token(session))).to_response()
