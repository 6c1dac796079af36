"""
Auth Service

Session sign-in, token refresh and the auth proxy routes.
"""

from .auth_service import AuthService, SessionResolution

__all__ = ["AuthService", "SessionResolution"]
