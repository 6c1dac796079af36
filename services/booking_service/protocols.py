"""
Booking Service Protocols
"""

from typing import Any, Optional

from core.errors import GatewayError


class BookingServiceError(GatewayError):
    """Base exception for booking errors ({error, details?})"""

    def __init__(self, message: str, status_code: Optional[int] = None, details: Any = None):
        payload = {"error": message}
        if details is not None:
            payload["details"] = details
        super().__init__(message, status_code=status_code, payload=payload)
        self.details = details


class InvalidBookingError(BookingServiceError):
    """Guest booking body failed validation"""

    def __init__(self, details: Any):
        super().__init__("Invalid input data", status_code=400, details=details)


class ConfirmPaymentError(BookingServiceError):
    """Backend refused the payment confirmation; body keeps its answer"""

    def __init__(self, message: str, status_code: int, body: Any = None):
        super().__init__(message, status_code=status_code)
        self.body = body


class CommunityNotFoundError(BookingServiceError):
    def __init__(self):
        super().__init__("Community not found", status_code=404)


__all__ = [
    "BookingServiceError",
    "InvalidBookingError",
    "ConfirmPaymentError",
    "CommunityNotFoundError",
]
