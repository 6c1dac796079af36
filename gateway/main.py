"""
Homestay Gateway - Main Application

民宿平台 BFF 网关主应用：会话 Cookie、后端代理与支付回调
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import httpx
import stripe
import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from core.config import get_settings
from core.errors import GatewayError, SessionExpiredError
from services.auth_service.routes import router as auth_router, users_router
from services.booking_service.routes import router as bookings_router, communities_router
from services.campaign_service.routes import router as campaign_router
from services.homestay_service.routes import (
    router as homestays_router,
    defaults_router,
    uploads_router,
)
from services.onboarding_service.routes import router as onboarding_router
from services.payment_service.routes import stripe_router, khalti_router, esewa_router
from services.sitemap_service.routes import router as sitemap_router
from services.verification_service.routes import router as verification_router, email_router

from .dependencies import forget_session
from .factory import get_factory, close_factory
from .proxy_routes import router as proxy_router
from .routes_registry import SERVICE_METADATA, get_route_metadata

# Initialize config
config = get_settings()

# Setup logging
config.logging.setup()
logger = logging.getLogger(__name__)


# =============================================================================
# Lifespan
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    # Startup
    owns_factory = getattr(app.state, "factory", None) is None
    if owns_factory:
        app.state.factory = await get_factory()

    route_meta = get_route_metadata()
    logger.info(
        f"{SERVICE_METADATA['service_name']} started: {route_meta['route_count']} routes "
        f"({route_meta['groups']})"
    )

    yield

    # Shutdown
    if owns_factory:
        await close_factory()
        app.state.factory = None
    logger.info(f"{SERVICE_METADATA['service_name']} shutdown completed")


app = FastAPI(
    title="Homestay Gateway",
    description="Backend-for-frontend gateway for the homestay marketplace",
    version=SERVICE_METADATA["version"],
    lifespan=lifespan,
)


# =============================================================================
# Session cookie
# =============================================================================

@app.middleware("http")
async def session_cookie_middleware(request: Request, call_next):
    """Write back whatever session change the route asked for"""
    response = await call_next(request)

    factory = getattr(request.app.state, "factory", None)
    session_config = factory.config.session if factory is not None else config.session
    if getattr(request.state, "clear_session", False):
        response.delete_cookie(session_config.cookie_name, path="/")
        return response

    claims = getattr(request.state, "session_update", None)
    if claims is not None and factory is not None:
        response.set_cookie(
            session_config.cookie_name,
            factory.session_manager.issue(claims),
            max_age=session_config.max_age,
            path="/",
            httponly=True,
            secure=session_config.cookie_secure,
            samesite="lax",
        )
    return response


# =============================================================================
# Error handlers
# =============================================================================

@app.exception_handler(GatewayError)
async def gateway_error_handler(request: Request, exc: GatewayError):
    if isinstance(exc, SessionExpiredError):
        forget_session(request)
    return JSONResponse(status_code=exc.status_code, content=exc.payload)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request", "details": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(ValidationError)
async def model_validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(
        status_code=400,
        content={
            "error": "Invalid request",
            "details": exc.errors(include_url=False, include_context=False),
        },
    )


@app.exception_handler(stripe.StripeError)
async def stripe_error_handler(request: Request, exc: stripe.StripeError):
    logger.error(f"Stripe error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"error": exc.user_message or str(exc)},
    )


@app.exception_handler(httpx.HTTPError)
async def backend_transport_error_handler(request: Request, exc: httpx.HTTPError):
    logger.error(f"Backend call failed on {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "details": str(exc)},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "details": str(exc)},
    )


# =============================================================================
# Routes
# =============================================================================

app.include_router(auth_router)
app.include_router(users_router)
app.include_router(verification_router)
app.include_router(email_router)
app.include_router(onboarding_router)
app.include_router(campaign_router)
app.include_router(bookings_router)
app.include_router(communities_router)
app.include_router(stripe_router)
app.include_router(khalti_router)
app.include_router(esewa_router)
app.include_router(homestays_router)
app.include_router(defaults_router)
app.include_router(uploads_router)
app.include_router(sitemap_router)
app.include_router(proxy_router)


# =============================================================================
# Health Check Endpoints
# =============================================================================

@app.get("/")
async def root():
    """Gateway info"""
    return {
        **SERVICE_METADATA,
        "routes": get_route_metadata(),
        "timestamp": datetime.now(tz=timezone.utc).isoformat(),
    }


@app.get("/health")
async def health_check():
    """Service health check"""
    return {
        "status": "healthy",
        "service": SERVICE_METADATA["service_name"],
        "version": SERVICE_METADATA["version"],
    }


@app.get("/health/ready")
async def readiness_check(request: Request):
    """Backend reachability"""
    factory = getattr(request.app.state, "factory", None)
    if factory is None:
        return JSONResponse(status_code=503, content={"status": "not_ready", "backend": "uninitialized"})

    backend_ok = await factory.backend.health_check()
    if not backend_ok:
        return JSONResponse(status_code=503, content={"status": "not_ready", "backend": "unreachable"})
    return {"status": "ready", "backend": "reachable"}


@app.get("/health/live")
async def liveness_check():
    return {"status": "alive"}


# =============================================================================
# Main Entry Point
# =============================================================================

if __name__ == "__main__":
    uvicorn.run(
        "gateway.main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level=config.logging.log_level.lower(),
    )
