#!/usr/bin/env python3
"""Browser session configuration"""
import os
from dataclasses import dataclass
from typing import Optional


def _bool(val: str) -> bool:
    return val.lower() == "true"

def _int(val: str, default: int) -> int:
    try:
        return int(val) if val else default
    except ValueError:
        return default


@dataclass
class SessionConfig:
    """Signed session cookie settings"""
    secret: Optional[str] = None
    algorithm: str = "HS256"
    cookie_name: str = "homestay-session"
    max_age: int = 2592000  # 30 days
    cookie_secure: bool = False

    # Refresh the backend access token when less than this remains
    refresh_threshold_seconds: int = 300
    # Clients are told the token is near expiry below this
    near_expiry_seconds: int = 600

    @classmethod
    def from_env(cls) -> 'SessionConfig':
        env = os.getenv("ENV") or os.getenv("ENVIRONMENT", "development")
        return cls(
            secret=os.getenv("SESSION_SECRET"),
            algorithm=os.getenv("SESSION_ALGORITHM", "HS256"),
            cookie_name=os.getenv("SESSION_COOKIE_NAME", "homestay-session"),
            max_age=_int(os.getenv("SESSION_MAX_AGE", "2592000"), 2592000),
            cookie_secure=_bool(os.getenv("COOKIE_SECURE", "true" if env == "production" else "false")),
            refresh_threshold_seconds=_int(os.getenv("REFRESH_THRESHOLD_SECONDS", "300"), 300),
            near_expiry_seconds=_int(os.getenv("NEAR_EXPIRY_SECONDS", "600"), 600),
        )
