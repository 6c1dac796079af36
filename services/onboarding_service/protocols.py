"""
Onboarding Service Protocols
"""

from typing import Any, Optional

from core.errors import GatewayError


# ====================
# Custom Exceptions
# ====================


class OnboardingError(GatewayError):
    """Base exception for onboarding errors, rendered as {"error": ...}"""
    status_code = 400


class OnboardingMessageError(OnboardingError):
    """Onboarding error rendered as {"message": ...} (steps 1 and 4)"""
    message_key = "message"


class InvalidSessionIdError(OnboardingError):
    """Raised before any backend call when the wizard session id is malformed"""

    def __init__(self, message_key: str = "error"):
        super().__init__("Invalid session ID format")
        self.message_key = message_key


class OnboardingValidationError(OnboardingError):
    """Raised when a step payload fails validation"""

    def __init__(self, message: str, details: Optional[Any] = None, message_key: str = "error"):
        payload = {message_key: message}
        if details is not None:
            payload["details"] = details
        super().__init__(message, payload=payload)


__all__ = [
    "OnboardingError",
    "OnboardingMessageError",
    "InvalidSessionIdError",
    "OnboardingValidationError",
]
