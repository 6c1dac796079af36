"""
Session Token Manager for the homestay gateway

Issues the signed browser session cookie that carries the backend's
access/refresh tokens, and classifies how close the access token is to
expiry.
"""

import jwt
import time
import uuid
import secrets
import logging
from typing import Dict, Any, Optional, List
from enum import Enum
from dataclasses import dataclass, field, replace

logger = logging.getLogger(__name__)

REFRESH_ERROR = "RefreshAccessTokenError"


class TokenState(Enum):
    """Backend access token lifecycle as seen by the gateway"""
    VALID = "valid"
    EXPIRING = "expiring"
    EXPIRED = "expired"


@dataclass
class SessionClaims:
    """Claims carried by the session cookie"""
    user_id: str
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    permissions: List[str] = field(default_factory=list)
    is_email_verified: bool = False
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    token_expiry: Optional[int] = None  # epoch milliseconds
    error: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return (self.role or "").upper() == "ADMIN"

    @property
    def has_refresh_error(self) -> bool:
        return self.error == REFRESH_ERROR

    def to_user(self) -> Dict[str, Any]:
        """Session user as exposed to the browser (no tokens except access)"""
        return {
            "id": self.user_id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "permissions": self.permissions,
            "isEmailVerified": self.is_email_verified,
            "accessToken": self.access_token,
            "tokenExpiry": self.token_expiry,
        }


def now_ms() -> int:
    return int(time.time() * 1000)


class SessionManager:
    """
    Session cookie manager

    Features:
    - HS256-signed session tokens carrying backend credentials
    - Access-token expiry classification (valid / expiring / expired)
    - Expiry discovery from backend response or access token `exp`
    """

    def __init__(
        self,
        secret_key: Optional[str] = None,
        algorithm: str = "HS256",
        issuer: str = "homestay_gateway",
        max_age: int = 2592000,
        refresh_threshold_seconds: int = 300,
        near_expiry_seconds: int = 600,
    ):
        """
        Initialize Session Manager

        Args:
            secret_key: Secret key for signing session tokens (auto-generated if not provided)
            algorithm: JWT algorithm (default: HS256)
            issuer: Token issuer identifier
            max_age: Session lifetime in seconds
            refresh_threshold_seconds: Refresh when less than this remains
            near_expiry_seconds: Threshold reported as "near expiry"
        """
        self.secret_key = secret_key or self._generate_secret()
        self.algorithm = algorithm
        self.issuer = issuer
        self.max_age = max_age
        self.refresh_threshold_ms = refresh_threshold_seconds * 1000
        self.near_expiry_ms = near_expiry_seconds * 1000

        if not secret_key:
            logger.warning(
                "No SESSION_SECRET provided - using generated secret. "
                "Sessions will not survive a restart!"
            )

    def _generate_secret(self) -> str:
        """Generate a secure random secret"""
        return secrets.token_urlsafe(64)

    def issue(self, claims: SessionClaims) -> str:
        """
        Sign a session token

        Args:
            claims: Session claims

        Returns:
            JWT session token string
        """
        now = int(time.time())
        payload = {
            "iss": self.issuer,
            "sub": claims.user_id,
            "iat": now,
            "exp": now + self.max_age,
            "jti": str(uuid.uuid4()),
            "name": claims.name,
            "email": claims.email,
            "role": claims.role,
            "permissions": claims.permissions,
            "isEmailVerified": claims.is_email_verified,
            "accessToken": claims.access_token,
            "refreshToken": claims.refresh_token,
            "tokenExpiry": claims.token_expiry,
            "error": claims.error,
        }

        # Remove None values
        payload = {k: v for k, v in payload.items() if v is not None}

        token = jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
        logger.debug(f"Issued session for user: {claims.user_id}")
        return token

    def decode(self, token: str) -> Optional[SessionClaims]:
        """
        Verify and decode a session token

        Returns:
            SessionClaims, or None when the token is invalid or expired
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                issuer=self.issuer,
            )
        except jwt.ExpiredSignatureError:
            logger.debug("Session token has expired")
            return None
        except jwt.InvalidTokenError as e:
            logger.debug(f"Invalid session token: {e}")
            return None

        return SessionClaims(
            user_id=str(payload.get("sub", "")),
            name=payload.get("name"),
            email=payload.get("email"),
            role=payload.get("role"),
            permissions=payload.get("permissions") or [],
            is_email_verified=bool(payload.get("isEmailVerified", False)),
            access_token=payload.get("accessToken"),
            refresh_token=payload.get("refreshToken"),
            token_expiry=payload.get("tokenExpiry"),
            error=payload.get("error"),
        )

    def token_state(self, claims: SessionClaims, now: Optional[int] = None) -> TokenState:
        """Classify the backend access token; no known expiry counts as valid"""
        if claims.token_expiry is None:
            return TokenState.VALID
        remaining = claims.token_expiry - (now if now is not None else now_ms())
        if remaining <= 0:
            return TokenState.EXPIRED
        if remaining < self.refresh_threshold_ms:
            return TokenState.EXPIRING
        return TokenState.VALID

    def is_token_near_expiry(self, claims: SessionClaims, now: Optional[int] = None) -> bool:
        if claims.token_expiry is None:
            return False
        remaining = claims.token_expiry - (now if now is not None else now_ms())
        return remaining < self.near_expiry_ms

    def with_tokens(
        self,
        claims: SessionClaims,
        access_token: str,
        refresh_token: Optional[str] = None,
        expires_in: Optional[int] = None,
    ) -> SessionClaims:
        """Copy of the claims carrying a fresh access token"""
        return replace(
            claims,
            access_token=access_token,
            refresh_token=refresh_token or claims.refresh_token,
            token_expiry=self.expiry_for(access_token, expires_in),
            error=None,
        )

    def expiry_for(self, access_token: Optional[str], expires_in: Optional[int] = None) -> Optional[int]:
        """
        Work out the access token expiry in epoch milliseconds

        Prefers the backend's `expiresIn` (seconds), then the token's own
        `exp` claim. Returns None for opaque tokens with no hint.
        """
        if expires_in:
            return now_ms() + int(expires_in) * 1000
        if not access_token:
            return None
        exp = self.decode_without_verification(access_token).get("exp")
        if isinstance(exp, (int, float)):
            return int(exp * 1000)
        return None

    def decode_without_verification(self, token: str) -> Dict[str, Any]:
        """
        Decode a backend token without verification (expiry inspection only)

        Args:
            token: JWT token string

        Returns:
            Decoded payload, empty for opaque tokens
        """
        try:
            return jwt.decode(token, options={"verify_signature": False})
        except jwt.InvalidTokenError as e:
            logger.debug(f"Access token is not a decodable JWT: {e}")
            return {}


__all__ = [
    "REFRESH_ERROR",
    "TokenState",
    "SessionClaims",
    "SessionManager",
    "now_ms",
]
