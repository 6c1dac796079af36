"""
Auth Service Protocols

Defines interfaces for dependency injection and testing.
"""

from typing import Any, Dict, Optional, Protocol

import httpx

from core.errors import GatewayError, UnauthorizedError, SessionExpiredError


class BackendClientProtocol(Protocol):
    """Subset of the backend client the auth service uses"""

    async def get(
        self,
        path: str,
        params: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> httpx.Response:
        ...

    async def post(
        self,
        path: str,
        json: Optional[Any] = None,
        data: Optional[Dict[str, Any]] = None,
        files: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> httpx.Response:
        ...


# ====================
# Custom Exceptions
# ====================


class AuthServiceError(GatewayError):
    """Base exception for auth service errors"""
    pass


class InvalidCredentialsError(AuthServiceError):
    """Raised when the backend rejects a login"""
    status_code = 401


class RegistrationError(AuthServiceError):
    """Raised when the backend rejects a guest registration"""
    status_code = 400


class TokenRefreshError(AuthServiceError):
    """Raised when the backend refuses a refresh token"""
    status_code = 401


__all__ = [
    "BackendClientProtocol",
    "AuthServiceError",
    "InvalidCredentialsError",
    "RegistrationError",
    "TokenRefreshError",
    "UnauthorizedError",
    "SessionExpiredError",
]
