"""
Gateway Dependencies

FastAPI dependencies that hand route modules their service and the
caller's session. The factory is attached to app.state by the lifespan.
"""

import json
import logging
from typing import Any, Optional

from fastapi import Depends, HTTPException, Request, status

from core.errors import UnauthorizedError, SessionExpiredError
from core.session_manager import SessionClaims
from services.auth_service import AuthService, SessionResolution
from services.booking_service import BookingService
from services.campaign_service import CampaignService
from services.homestay_service import HomestayService
from services.onboarding_service import OnboardingService
from services.payment_service import PaymentService
from services.sitemap_service import SitemapService
from services.verification_service import VerificationService

from .factory import GatewayFactory

logger = logging.getLogger(__name__)


def get_gateway_factory(request: Request) -> GatewayFactory:
    """Get the gateway factory from the running app"""
    factory = getattr(request.app.state, "factory", None)
    if factory is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not initialized",
        )
    return factory


def get_auth_service(factory: GatewayFactory = Depends(get_gateway_factory)) -> AuthService:
    return factory.auth_service


def get_verification_service(factory: GatewayFactory = Depends(get_gateway_factory)) -> VerificationService:
    return factory.verification_service


def get_onboarding_service(factory: GatewayFactory = Depends(get_gateway_factory)) -> OnboardingService:
    return factory.onboarding_service


def get_campaign_service(factory: GatewayFactory = Depends(get_gateway_factory)) -> CampaignService:
    return factory.campaign_service


def get_booking_service(factory: GatewayFactory = Depends(get_gateway_factory)) -> BookingService:
    return factory.booking_service


def get_homestay_service(factory: GatewayFactory = Depends(get_gateway_factory)) -> HomestayService:
    return factory.homestay_service


def get_payment_service(factory: GatewayFactory = Depends(get_gateway_factory)) -> PaymentService:
    return factory.payment_service


def get_sitemap_service(factory: GatewayFactory = Depends(get_gateway_factory)) -> SitemapService:
    return factory.sitemap_service


# ====================
# Request body
# ====================


async def json_body(request: Request) -> Any:
    """Raw JSON body; None when the body is empty or not JSON"""
    raw = await request.body()
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        logger.debug(f"Ignoring non-JSON body on {request.url.path}")
        return None


# ====================
# Session
# ====================


def remember_session(request: Request, claims: SessionClaims) -> None:
    """Ask the session middleware to re-issue the cookie with these claims"""
    request.state.session_update = claims


def forget_session(request: Request) -> None:
    """Ask the session middleware to delete the cookie"""
    request.state.clear_session = True


async def resolve_request_session(
    request: Request,
    factory: GatewayFactory = Depends(get_gateway_factory),
) -> SessionResolution:
    """Read the session cookie once per request, refreshing it if needed"""
    cached = getattr(request.state, "session_resolution", None)
    if cached is not None:
        return cached

    token = request.cookies.get(factory.config.session.cookie_name)
    resolution = await factory.auth_service.resolve_session(token)
    request.state.session_resolution = resolution

    if resolution.expired:
        forget_session(request)
    elif resolution.refreshed and resolution.claims is not None:
        remember_session(request, resolution.claims)
    return resolution


async def get_optional_session(
    resolution: SessionResolution = Depends(resolve_request_session),
) -> Optional[SessionClaims]:
    """Signed-in session or None"""
    return resolution.claims


async def get_active_session(
    resolution: SessionResolution = Depends(resolve_request_session),
) -> Optional[SessionClaims]:
    """Signed-in session or None; a session whose refresh failed is SessionExpired"""
    if resolution.expired:
        raise SessionExpiredError()
    return resolution.claims


async def require_admin_session(
    session: Optional[SessionClaims] = Depends(get_active_session),
) -> SessionClaims:
    """Signed-in ADMIN session; 401 otherwise"""
    if session is None or not session.is_admin:
        raise UnauthorizedError("Unauthorized")
    return session
