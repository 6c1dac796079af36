"""
Sitemap Service - Business Logic

Approved homestays come from the backend search; admins push changed
homestays into the cache or rebuild it from the backend.
"""

import logging
from datetime import datetime, timezone
from typing import Any, List

import httpx
from pydantic import ValidationError

from core.backend_client import BackendClient, read_json
from core.relay import RelayResult

from .models import SITEMAP_SEARCH_LIMIT, SitemapHomestay
from .protocols import SitemapError, SitemapFetchError
from .sitemap_cache import SitemapCache

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _homestay_list(data: Any) -> List[Any]:
    """Search answers come as a bare list, {data: [...]} or {homestays: [...]}"""
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for key in ("data", "homestays"):
            if isinstance(data.get(key), list):
                return data[key]
    return []


class SitemapService:
    """Sitemap business logic"""

    def __init__(self, backend: BackendClient, cache: SitemapCache):
        self.backend = backend
        self.cache = cache

    async def fetch_approved(self) -> List[SitemapHomestay]:
        """APPROVED homestays from the backend search"""
        try:
            response = await self.backend.get(
                "/homestays/search", params={"page": 1, "limit": SITEMAP_SEARCH_LIMIT}
            )
        except httpx.HTTPError as e:
            logger.error(f"Sitemap homestay fetch failed: {e}")
            raise SitemapFetchError(str(e))

        if not response.is_success:
            logger.error(f"Sitemap homestay fetch returned {response.status_code}")
            raise SitemapFetchError(f"Backend API error: {response.status_code} - {response.text}")

        homestays = [
            SitemapHomestay.from_backend(raw)
            for raw in _homestay_list(read_json(response))
            if isinstance(raw, dict) and raw.get("id") is not None
        ]
        return [h for h in homestays if h.is_approved]

    async def approved_homestays(self) -> RelayResult:
        homestays = await self.fetch_approved()
        return RelayResult(
            body={
                "success": True,
                "data": [h.model_dump() for h in homestays],
                "total": len(homestays),
            },
            headers={"Cache-Control": "no-store"},
        )

    async def update(self, body: Any) -> RelayResult:
        """Upsert the homestays an admin pushed"""
        raw = body.get("homestays") if isinstance(body, dict) else None
        if not isinstance(raw, list):
            raise SitemapError("Invalid request. Expected array of homestays.", status_code=400)

        try:
            homestays = [SitemapHomestay.model_validate(entry) for entry in raw]
        except ValidationError as e:
            raise SitemapError(
                "Invalid request. Expected array of homestays.", status_code=400, details=str(e)
            )

        processed = await self.cache.upsert(homestays)
        stats = await self.cache.stats()
        return RelayResult(
            body={
                "success": True,
                "message": f"Sitemap updated with {processed} homestays",
                "timestamp": _now(),
                "processed": processed,
                "stats": stats.model_dump(),
            }
        )

    async def update_status(self) -> RelayResult:
        stats = await self.cache.stats()
        return RelayResult(
            body={
                "success": True,
                "sitemapCount": stats.approved,
                "lastUpdate": stats.lastUpdated or _now(),
                "stats": stats.model_dump(),
            }
        )

    async def revalidate(self) -> RelayResult:
        """Rebuild the cache from the backend's approved homestays"""
        homestays = await self.fetch_approved()
        await self.cache.replace_all(homestays)
        stats = await self.cache.stats()
        logger.info(f"Sitemap revalidated with {len(homestays)} approved homestays")
        return RelayResult(
            body={
                "success": True,
                "message": "Sitemap revalidated successfully",
                "timestamp": _now(),
                "stats": stats.model_dump(),
            }
        )

    async def status(self) -> RelayResult:
        return RelayResult(
            body={"success": True, "message": "Sitemap API is operational", "timestamp": _now()}
        )


__all__ = ["SitemapService"]
