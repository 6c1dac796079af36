"""
Gateway error types

Every route failure the browser sees is a JSON body plus a status code.
Services raise a GatewayError subclass and gateway.main maps it to a
JSONResponse, the same way each service maps its own exceptions.
"""

from typing import Any, Dict, Optional


class GatewayError(Exception):
    """Base exception for gateway errors"""

    status_code: int = 500
    message_key: str = "error"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        payload: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self._payload = payload

    @property
    def payload(self) -> Dict[str, Any]:
        """JSON body returned to the client"""
        if self._payload is not None:
            return self._payload
        return {self.message_key: self.message}


class StatusMessageError(GatewayError):
    """Error rendered as {"status": "error", "message": ...}"""

    status_code = 400

    def __init__(self, message: str, status_code: Optional[int] = None, **extra: Any):
        payload = {"status": "error", "message": message, **extra}
        super().__init__(message, status_code=status_code, payload=payload)


class UnauthorizedError(GatewayError):
    """Caller has no usable session or credentials"""

    status_code = 401


class SessionExpiredError(UnauthorizedError):
    """Session refresh failed; the browser must sign in again"""

    SIGNIN_CALLBACK = "/signin?error=SessionExpired"

    def __init__(self, message: str = "SessionExpired"):
        super().__init__(
            message,
            payload={"error": "SessionExpired", "callbackUrl": self.SIGNIN_CALLBACK},
        )


__all__ = [
    "GatewayError",
    "StatusMessageError",
    "UnauthorizedError",
    "SessionExpiredError",
]
