"""
Verification Service Protocols
"""

from core.errors import StatusMessageError


class VerificationServiceError(StatusMessageError):
    """Base exception for verification errors ({status: "error", message})"""
    pass


class InvalidBackendResponseError(VerificationServiceError):
    """Raised when the backend answers with a body that is not JSON"""

    def __init__(self):
        super().__init__("Invalid response from server", status_code=500)


__all__ = ["VerificationServiceError", "InvalidBackendResponseError"]
