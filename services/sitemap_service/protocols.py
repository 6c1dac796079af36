"""
Sitemap Service Protocols
"""

from typing import Any, Optional

from core.errors import GatewayError, UnauthorizedError


class SitemapError(GatewayError):
    """Base exception for sitemap errors ({error, details?})"""

    def __init__(self, message: str, status_code: Optional[int] = None, details: Any = None, **extra: Any):
        payload = {"error": message, **extra}
        if details is not None:
            payload["details"] = details
        super().__init__(message, status_code=status_code, payload=payload)


class SitemapFetchError(SitemapError):
    """Backend homestay search failed"""

    def __init__(self, details: str):
        super().__init__(
            "Failed to fetch homestays",
            status_code=500,
            details=details,
            success=False,
            data=[],
            total=0,
        )


class AdminRequiredError(UnauthorizedError):
    def __init__(self):
        super().__init__("Unauthorized. Admin access required.")


__all__ = ["SitemapError", "SitemapFetchError", "AdminRequiredError"]
