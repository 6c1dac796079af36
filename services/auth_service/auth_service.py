"""
Auth Service - Business Logic

Signs users in against the backend, keeps the backend access token fresh
inside the session cookie, and proxies the auth endpoints.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

import httpx
from pydantic import ValidationError

from core.backend_client import read_json, error_message, bearer_headers
from core.errors import StatusMessageError, UnauthorizedError, SessionExpiredError
from core.relay import RelayResult, passthrough
from core.session_manager import SessionClaims, SessionManager, TokenState, REFRESH_ERROR
from core.validation import first_error_message, parse_model

from .models import (
    LoginRequest,
    RegisterRequest,
    SessionUpdateRequest,
    ContactCodeRequest,
    SessionUser,
)
from .protocols import (
    BackendClientProtocol,
    AuthServiceError,
    InvalidCredentialsError,
    RegistrationError,
    TokenRefreshError,
)

logger = logging.getLogger(__name__)

BackendCall = Callable[[Optional[str]], Awaitable[httpx.Response]]


@dataclass
class SessionResolution:
    """Outcome of reading the session cookie for one request"""
    claims: Optional[SessionClaims] = None
    refreshed: bool = False
    expired: bool = False


class AuthService:
    """Auth business logic"""

    def __init__(self, backend: BackendClientProtocol, session_manager: SessionManager):
        self.backend = backend
        self.sessions = session_manager

    # =============================================================================
    # Sign-in
    # =============================================================================

    async def login(self, request: LoginRequest) -> SessionClaims:
        """Exchange credentials for backend tokens and build the session"""
        response = await self.backend.post(
            "/auth/login",
            json={"email": request.email, "password": request.password},
        )
        body = read_json(response)
        if not response.is_success:
            raise InvalidCredentialsError(error_message(body, "Invalid credentials"))

        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, dict) or not isinstance(data.get("user"), dict):
            raise AuthServiceError("Invalid response from server", status_code=502)

        user = SessionUser.model_validate(data["user"])
        access_token = data.get("accessToken")
        logger.info(f"User {user.id} signed in")
        return SessionClaims(
            user_id=user.id,
            name=user.name,
            email=user.email,
            role=user.role,
            permissions=user.permissions,
            is_email_verified=user.isEmailVerified,
            access_token=access_token,
            refresh_token=data.get("refreshToken"),
            token_expiry=self.sessions.expiry_for(access_token, data.get("expiresIn")),
        )

    async def register(self, request: RegisterRequest) -> SessionClaims:
        """Register a guest; the resulting session has no access token yet"""
        response = await self.backend.post(
            "/auth/register-guest",
            json={"name": request.name, "email": request.email, "password": request.password},
        )
        body = read_json(response)
        if not response.is_success:
            raise RegistrationError(error_message(body, "Failed to register guest"))

        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, dict) or "id" not in data:
            raise AuthServiceError("Invalid response from server", status_code=502)

        user = SessionUser.model_validate(data)
        logger.info(f"Registered guest {user.id}")
        return SessionClaims(
            user_id=user.id,
            name=user.name,
            email=user.email,
            role=user.role,
            permissions=user.permissions,
            is_email_verified=user.isEmailVerified,
        )

    # =============================================================================
    # Token refresh
    # =============================================================================

    async def refresh_tokens(self, refresh_token: str) -> Dict[str, Any]:
        """
        Single refresh call against the backend

        Returns:
            {accessToken, refreshToken?, expiresIn?}

        Raises:
            TokenRefreshError: backend refused or answered without a token
        """
        response = await self.backend.post("/auth/refresh", json={"token": refresh_token})
        body = read_json(response)
        if not response.is_success:
            raise TokenRefreshError(error_message(body, "Failed to refresh token"))

        data = body.get("data", body) if isinstance(body, dict) else None
        access_token = data.get("accessToken") if isinstance(data, dict) else None
        if not access_token:
            raise TokenRefreshError("Refresh response carried no access token")
        return {
            "accessToken": access_token,
            "refreshToken": data.get("refreshToken"),
            "expiresIn": data.get("expiresIn"),
        }

    async def refresh_session(self, claims: SessionClaims) -> SessionClaims:
        """Refresh the access token held by a session"""
        if not claims.refresh_token:
            raise TokenRefreshError("No refresh token in session")
        tokens = await self.refresh_tokens(claims.refresh_token)
        logger.info(f"Refreshed access token for user {claims.user_id}")
        return self.sessions.with_tokens(
            claims,
            access_token=tokens["accessToken"],
            refresh_token=tokens["refreshToken"],
            expires_in=tokens["expiresIn"],
        )

    async def resolve_session(self, token: Optional[str]) -> SessionResolution:
        """
        Decode the session cookie and refresh it when the access token is
        about to expire

        A session is refreshed at most once per request. A failed refresh
        marks the session expired so the caller signs the browser out.
        """
        if not token:
            return SessionResolution()

        claims = self.sessions.decode(token)
        if claims is None:
            return SessionResolution()
        if claims.has_refresh_error:
            return SessionResolution(expired=True)

        state = self.sessions.token_state(claims)
        if state is TokenState.VALID:
            return SessionResolution(claims=claims)

        if not claims.refresh_token:
            if state is TokenState.EXPIRED:
                logger.info(f"Access token expired for user {claims.user_id}, no refresh token")
                return SessionResolution(expired=True)
            return SessionResolution(claims=claims)

        try:
            refreshed = await self.refresh_session(claims)
        except (TokenRefreshError, httpx.HTTPError) as e:
            logger.warning(f"{REFRESH_ERROR} for user {claims.user_id}: {e}")
            return SessionResolution(expired=True)
        return SessionResolution(claims=refreshed, refreshed=True)

    async def call_with_refresh(
        self, claims: SessionClaims, call: BackendCall
    ) -> Tuple[httpx.Response, SessionClaims]:
        """
        Run a backend call; on 401 refresh once and retry once

        Returns:
            (response, claims) where claims carry any refreshed token

        Raises:
            SessionExpiredError: the retry needed a refresh that failed
        """
        response = await call(claims.access_token)
        if response.status_code != 401 or not claims.refresh_token:
            return response, claims

        logger.info(f"Backend returned 401 for user {claims.user_id}, attempting refresh")
        try:
            claims = await self.refresh_session(claims)
        except (TokenRefreshError, httpx.HTTPError) as e:
            logger.warning(f"Refresh after 401 failed: {e}")
            raise SessionExpiredError()
        response = await call(claims.access_token)
        return response, claims

    # =============================================================================
    # Proxied auth endpoints
    # =============================================================================

    async def get_current_user(
        self, claims: Optional[SessionClaims]
    ) -> Tuple[RelayResult, Optional[SessionClaims]]:
        """Validate the session against backend /auth/me"""
        if claims is None or not claims.access_token:
            raise StatusMessageError("Not authenticated", status_code=401)

        async def fetch_me(access_token: Optional[str]) -> httpx.Response:
            return await self.backend.get("/auth/me", headers=bearer_headers(access_token))

        response, claims = await self.call_with_refresh(claims, fetch_me)
        if response.status_code == 401:
            raise StatusMessageError("Token expired or invalid", status_code=401)
        if not response.is_success:
            raise StatusMessageError("Failed to validate session", status_code=response.status_code)

        body = read_json(response)
        data = body.get("data", body) if isinstance(body, dict) else body
        return RelayResult(
            body={"status": "success", "message": "User retrieved successfully", "data": data},
        ), claims

    async def relay_refresh(
        self, token: Optional[str], cookie_header: Optional[str]
    ) -> RelayResult:
        """Forward a refresh request (body token or session token) with the browser cookies"""
        headers = {"Cookie": cookie_header} if cookie_header else None
        payload = {"token": token} if token else None
        response = await self.backend.post("/auth/refresh", json=payload, headers=headers)
        if not response.is_success:
            logger.warning(f"Backend refresh failed with {response.status_code}")
            raise StatusMessageError("Failed to refresh token", status_code=response.status_code)

        body = read_json(response)
        data = body.get("data") or body if isinstance(body, dict) else body
        relay_headers = {}
        set_cookie = response.headers.get("set-cookie")
        if set_cookie:
            relay_headers["Set-Cookie"] = set_cookie
        return RelayResult(
            body={"status": "success", "message": "Token refreshed successfully", "data": data},
            headers=relay_headers,
        )

    def update_tokens(
        self, claims: Optional[SessionClaims], request: SessionUpdateRequest
    ) -> SessionClaims:
        """Store client-provided tokens in the session"""
        if claims is None:
            raise UnauthorizedError("Not authenticated", payload={"message": "Not authenticated"})
        if request.action != "updateTokens" or not request.accessToken:
            raise AuthServiceError("Invalid action", status_code=400, payload={"message": "Invalid action"})
        return self.sessions.with_tokens(
            claims,
            access_token=request.accessToken,
            refresh_token=request.refreshToken,
            expires_in=request.expiresIn,
        )

    async def validate_code(self, body: Any) -> RelayResult:
        """Validate an OTP code for an email or mobile number"""
        try:
            request = parse_model(ContactCodeRequest, body)
        except ValidationError as e:
            raise StatusMessageError(first_error_message(e))

        payload = {**request.contact_payload(), "code": request.code}
        response = await self.backend.post("/auth/validate-code", json=payload)
        return passthrough(response)

    async def get_user_profile(self, access_token: str) -> RelayResult:
        """Fetch /users/me with a caller-provided bearer token"""
        response = await self.backend.get("/users/me", headers=bearer_headers(access_token))
        body = read_json(response)
        if not response.is_success:
            raise AuthServiceError(
                f"Backend error: {response.status_code}",
                status_code=response.status_code,
                payload={
                    "error": f"Backend error: {response.status_code}",
                    "details": body if body is not None else response.text,
                },
            )
        return RelayResult(body=body if body is not None else {})


__all__ = ["AuthService", "SessionResolution"]
