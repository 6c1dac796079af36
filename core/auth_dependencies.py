"""
FastAPI Authentication Dependencies

Header-based credentials the browser forwards to the backend.
Session-cookie dependencies live in gateway.dependencies because they
need the configured auth service.
"""

from fastapi import Header
from typing import Optional
import logging

from .errors import UnauthorizedError

logger = logging.getLogger(__name__)


async def optional_authorization(
    authorization: Optional[str] = Header(None),
) -> Optional[str]:
    """
    可选认证依赖：原样返回 Authorization 头（可能为None）

    使用示例：
        @router.get("/{campaign_id}/qr-codes")
        async def list_qr_codes(
            authorization: Optional[str] = Depends(optional_authorization)
        ):
            ...
    """
    return authorization or None


async def require_bearer_token(
    authorization: Optional[str] = Header(None),
) -> str:
    """
    认证依赖：要求 "Bearer <token>" 格式的 Authorization 头

    Returns:
        token: 去掉 "Bearer " 前缀的令牌

    Raises:
        UnauthorizedError 401: 头缺失或格式错误
    """
    if not authorization or not authorization.startswith("Bearer "):
        logger.debug("Rejected request without bearer token")
        raise UnauthorizedError("Missing or invalid authorization header")
    return authorization[len("Bearer "):]


__all__ = [
    "optional_authorization",
    "require_bearer_token",
]
