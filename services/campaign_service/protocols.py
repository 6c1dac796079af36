"""
Campaign Service Protocols

Exceptions raised by the campaign proxy.
"""

from typing import Any, Dict, List

from core.errors import StatusMessageError


class CampaignServiceError(StatusMessageError):
    """Base exception for campaign errors ({status: "error", message})"""
    pass


class CampaignValidationError(CampaignServiceError):
    """Body or query failed validation; errors are grouped per property"""

    def __init__(self, message: str, errors: List[Dict[str, Any]]):
        super().__init__(message, status_code=400, errors=errors)
        self.errors = errors


class CampaignAuthRequiredError(CampaignServiceError):
    """Protected campaign route called without an Authorization header"""

    def __init__(self, message: str = "Authorization header required"):
        super().__init__(message, status_code=401)


__all__ = [
    "CampaignServiceError",
    "CampaignValidationError",
    "CampaignAuthRequiredError",
]
