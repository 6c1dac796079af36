"""
Backend response relay helpers

Proxy routes hand the backend's JSON body and status code back to the
browser. Services return a RelayResult and raise a GatewayError for
backend failures; routes turn the result into a JSONResponse.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx
from fastapi.responses import JSONResponse

from .backend_client import read_json, error_message
from .errors import GatewayError


@dataclass
class RelayResult:
    """Body and status to send back to the browser"""
    body: Any
    status_code: int = 200
    headers: Dict[str, str] = field(default_factory=dict)

    def to_response(self) -> JSONResponse:
        return JSONResponse(
            status_code=self.status_code,
            content=self.body,
            headers=self.headers or None,
        )


def passthrough(response: httpx.Response, headers: Optional[Dict[str, str]] = None) -> RelayResult:
    """Relay status and body unchanged, success or not"""
    body = read_json(response)
    return RelayResult(
        body=body if body is not None else {},
        status_code=response.status_code,
        headers=headers or {},
    )


def relay(
    response: httpx.Response,
    default_error: str,
    shape: str = "error",
    status_code: Optional[int] = None,
) -> RelayResult:
    """
    Relay a successful backend response, raise for a failed one

    Args:
        response: Backend response
        default_error: Message used when the backend sends none
        shape: Error body shape - "error" ({error}), "message" ({message})
               or "status" ({status: "error", message})
        status_code: Override the success status (backend status otherwise)
    """
    body = read_json(response)
    if response.is_success:
        return RelayResult(
            body=body if body is not None else {},
            status_code=status_code or response.status_code,
        )
    raise backend_error(response.status_code, error_message(body, default_error), shape)


def backend_error(status_code: int, message: str, shape: str = "error") -> GatewayError:
    """GatewayError carrying a backend failure in the requested body shape"""
    if shape == "status":
        payload = {"status": "error", "message": message}
    elif shape == "message":
        payload = {"message": message}
    else:
        payload = {"error": message}
    return GatewayError(message, status_code=status_code, payload=payload)


__all__ = ["RelayResult", "passthrough", "relay", "backend_error"]
