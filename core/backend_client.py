"""
Backend API Client

所有路由共享的外部 homestay 后端客户端
"""

import httpx
import logging
from typing import Optional, Dict, Any, List, Tuple

logger = logging.getLogger(__name__)

FileField = Tuple[str, Tuple[str, bytes, str]]


class BackendClient:
    """
    外部后端客户端

    自动处理：
    1. 统一的 API_BASE_URL
    2. HTTP 客户端管理（连接池复用）
    3. 超时控制（可按调用覆盖）
    4. Bearer 认证头

    使用示例：
        client = BackendClient("http://backend:3001")
        response = await client.get("/homestays/search", params={"page": 1})
        body = read_json(response)
    """

    service_name: str = "homestay_backend"

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        初始化后端客户端

        Args:
            base_url: 后端基础URL（API_BASE_URL）
            timeout: 默认请求超时时间（秒）
            transport: 可选的 httpx 传输层（测试时注入 MockTransport）
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout

        self.client = httpx.AsyncClient(
            timeout=timeout,
            headers={"Accept": "application/json"},
            transport=transport,
        )

        logger.debug(f"Initialized {self.service_name} client: {self.base_url}")

    async def close(self):
        """关闭HTTP客户端"""
        await self.client.aclose()
        logger.debug(f"Closed {self.service_name} client")

    # ========================================
    # HTTP 方法封装
    # ========================================

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[Any] = None,
        json: Optional[Any] = None,
        data: Optional[Dict[str, Any]] = None,
        files: Optional[List[FileField]] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> httpx.Response:
        """发送请求到后端，path 相对于 API_BASE_URL"""
        url = f"{self.base_url}{path}"
        logger.debug(f"{method} {url}")
        response = await self.client.request(
            method,
            url,
            params=params,
            json=json,
            data=data,
            files=files,
            headers=headers,
            timeout=timeout if timeout is not None else self.timeout,
        )
        if response.status_code >= 400:
            logger.warning(f"Backend {method} {path} returned {response.status_code}")
        return response

    async def get(
        self,
        path: str,
        params: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> httpx.Response:
        """GET 请求"""
        return await self.request("GET", path, params=params, headers=headers, timeout=timeout)

    async def post(
        self,
        path: str,
        json: Optional[Any] = None,
        data: Optional[Dict[str, Any]] = None,
        files: Optional[List[FileField]] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> httpx.Response:
        """POST 请求"""
        return await self.request(
            "POST", path, json=json, data=data, files=files, headers=headers, timeout=timeout
        )

    async def put(
        self,
        path: str,
        json: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> httpx.Response:
        """PUT 请求"""
        return await self.request("PUT", path, json=json, headers=headers, timeout=timeout)

    async def patch(
        self,
        path: str,
        json: Optional[Any] = None,
        data: Optional[Dict[str, Any]] = None,
        files: Optional[List[FileField]] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> httpx.Response:
        """PATCH 请求"""
        return await self.request(
            "PATCH", path, json=json, data=data, files=files, headers=headers, timeout=timeout
        )

    async def delete(
        self,
        path: str,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> httpx.Response:
        """DELETE 请求"""
        return await self.request("DELETE", path, headers=headers, timeout=timeout)

    async def health_check(self) -> bool:
        """
        健康检查

        Returns:
            后端是否可达
        """
        try:
            response = await self.get("/health", timeout=5.0)
            return response.status_code < 500
        except httpx.HTTPError as e:
            logger.warning(f"{self.service_name} health check failed: {e}")
            return False


def read_json(response: httpx.Response) -> Any:
    """Parse a backend body; None when it is empty or not JSON"""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None


def error_message(body: Any, default: str) -> str:
    """Pick the backend's message/error text, falling back to default"""
    if isinstance(body, dict):
        for key in ("message", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
            if isinstance(value, list) and value:
                return str(value[0])
    return default


def bearer_headers(access_token: Optional[str]) -> Dict[str, str]:
    """Authorization header for a backend access token"""
    if not access_token:
        return {}
    return {"Authorization": f"Bearer {access_token}"}


__all__ = ["BackendClient", "read_json", "error_message", "bearer_headers"]
