"""
Payment Service Protocols

Exceptions raised by the payment provider flows.
"""

from typing import Any, Optional

from core.errors import GatewayError


class PaymentError(GatewayError):
    """Payment failure rendered as {error, details?, error_key?}"""

    status_code = 400

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Any = None,
        error_key: Optional[str] = None,
    ):
        payload = {"error": message}
        if details is not None:
            payload["details"] = details
        if error_key is not None:
            payload["error_key"] = error_key
        super().__init__(message, status_code=status_code, payload=payload)
        self.details = details
        self.error_key = error_key


class PaymentNotConfiguredError(PaymentError):
    """Provider credentials are missing from the environment"""

    def __init__(self, provider: str, error_key: Optional[str] = None):
        super().__init__(
            f"{provider} secret key is not configured", status_code=500, error_key=error_key
        )


class PaymentNotCompletedError(PaymentError):
    def __init__(self, status: Any, **kwargs: Any):
        super().__init__(f"Payment not completed. Status: {status}", status_code=400, **kwargs)
        self.payment_status = status


class InvalidSignatureError(PaymentError):
    """eSewa callback signature does not match the signed fields"""

    def __init__(self):
        super().__init__("Invalid eSewa signature", status_code=400)


__all__ = [
    "PaymentError",
    "PaymentNotConfiguredError",
    "PaymentNotCompletedError",
    "InvalidSignatureError",
]
