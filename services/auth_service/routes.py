"""
Auth API Routes

Session sign-in/out plus the auth endpoints proxied to the backend.
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from core.auth_dependencies import require_bearer_token
from core.errors import GatewayError
from core.session_manager import SessionClaims
from core.validation import first_error_message, parse_model
from gateway.dependencies import (
    get_active_session,
    get_auth_service,
    get_gateway_factory,
    get_optional_session,
    json_body,
    remember_session,
    forget_session,
)
from gateway.factory import GatewayFactory

from .auth_service import AuthService
from .models import LoginRequest, RegisterRequest, SessionUpdateRequest

router = APIRouter(prefix="/api/auth", tags=["auth"])
users_router = APIRouter(prefix="/api/users", tags=["auth"])


@router.post("/login")
async def login(
    request: Request,
    body: Any = Depends(json_body),
    service: AuthService = Depends(get_auth_service),
):
    """Sign in with email/password and set the session cookie"""
    try:
        credentials = parse_model(LoginRequest, body)
    except ValidationError as e:
        raise GatewayError(first_error_message(e), status_code=400)

    claims = await service.login(credentials)
    remember_session(request, claims)
    return {"user": claims.to_user()}


@router.post("/register", status_code=201)
async def register(
    request: Request,
    body: Any = Depends(json_body),
    service: AuthService = Depends(get_auth_service),
):
    """Register a guest account and start a session for it"""
    try:
        registration = parse_model(RegisterRequest, body)
    except ValidationError as e:
        raise GatewayError(first_error_message(e), status_code=400)

    claims = await service.register(registration)
    remember_session(request, claims)
    return {"user": claims.to_user()}


@router.post("/logout")
async def logout(request: Request):
    forget_session(request)
    return {"success": True}


@router.get("/session")
async def get_session(
    session: Optional[SessionClaims] = Depends(get_optional_session),
    factory: GatewayFactory = Depends(get_gateway_factory),
):
    """Current session user, or {} when signed out"""
    if session is None:
        return {}
    return {
        "user": session.to_user(),
        "isTokenNearExpiry": factory.session_manager.is_token_near_expiry(session),
    }


@router.get("/me")
async def get_me(
    request: Request,
    session: Optional[SessionClaims] = Depends(get_active_session),
    service: AuthService = Depends(get_auth_service),
):
    """Validate the session against the backend"""
    result, claims = await service.get_current_user(session)
    if claims is not session:
        remember_session(request, claims)
    return result.to_response()


@router.post("/refresh")
async def refresh(
    request: Request,
    body: Any = Depends(json_body),
    session: Optional[SessionClaims] = Depends(get_optional_session),
    service: AuthService = Depends(get_auth_service),
):
    """Refresh the backend token from the body token or the session"""
    token = body.get("token") if isinstance(body, dict) else None
    if not token and session is not None:
        token = session.refresh_token

    result = await service.relay_refresh(token, request.headers.get("cookie"))
    return result.to_response()


@router.post("/session-update")
async def session_update(
    request: Request,
    body: Any = Depends(json_body),
    session: Optional[SessionClaims] = Depends(get_active_session),
    service: AuthService = Depends(get_auth_service),
):
    """Store tokens the browser obtained on its own"""
    update = SessionUpdateRequest.model_validate(body if isinstance(body, dict) else {})
    claims = service.update_tokens(session, update)
    remember_session(request, claims)
    return JSONResponse(
        status_code=200,
        content={"success": True, "message": "Tokens updated successfully"},
    )


@router.post("/validate-code")
async def validate_code(
    body: Any = Depends(json_body),
    service: AuthService = Depends(get_auth_service),
):
    result = await service.validate_code(body)
    return result.to_response()


@users_router.get("/me")
async def get_user_profile(
    access_token: str = Depends(require_bearer_token),
    service: AuthService = Depends(get_auth_service),
):
    """Profile for the bearer token the browser sent"""
    result = await service.get_user_profile(access_token)
    return result.to_response()
