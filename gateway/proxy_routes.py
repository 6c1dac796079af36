"""
Generic Backend Proxy

/api/backend/{path} forwards any call to the backend with the session's
access token. Status and body are relayed unchanged.
"""

import logging
from typing import Any, Optional

import httpx
from fastapi import APIRouter, Depends, Request

from core.backend_client import bearer_headers
from core.errors import GatewayError, UnauthorizedError
from core.relay import passthrough
from core.session_manager import SessionClaims
from services.auth_service import AuthService

from .dependencies import get_active_session, get_auth_service, json_body, remember_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/backend", tags=["proxy"])

BODY_METHODS = ("POST", "PUT", "PATCH")
PROXY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


@router.api_route("/{path:path}", methods=PROXY_METHODS)
async def proxy_to_backend(
    path: str,
    request: Request,
    body: Any = Depends(json_body),
    session: Optional[SessionClaims] = Depends(get_active_session),
    service: AuthService = Depends(get_auth_service),
):
    """Forward the call as the signed-in user"""
    if session is None or not session.access_token:
        raise UnauthorizedError(
            "Unauthorized - No access token found",
            payload={"message": "Unauthorized - No access token found"},
        )

    method = request.method
    payload = body if method in BODY_METHODS else None
    params = request.query_params.multi_items() or None

    async def forward(access_token: Optional[str]) -> httpx.Response:
        return await service.backend.request(
            method,
            f"/{path}",
            params=params,
            json=payload,
            headers=bearer_headers(access_token),
        )

    try:
        response, claims = await service.call_with_refresh(session, forward)
    except httpx.HTTPError as e:
        logger.error(f"Backend proxy error on {method} /{path}: {e}")
        raise GatewayError(
            str(e),
            status_code=500,
            payload={"message": "Internal server error while proxying request", "error": str(e)},
        )

    if claims is not session:
        remember_session(request, claims)
    return passthrough(response).to_response()
