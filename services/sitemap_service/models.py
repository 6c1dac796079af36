"""
Sitemap Service Models
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict

APPROVED = "APPROVED"
SITEMAP_SEARCH_LIMIT = 1000


class SitemapHomestay(BaseModel):
    """One sitemap entry; the cache is keyed by id"""
    model_config = ConfigDict(extra="ignore")

    id: Union[int, str]
    name: str = "Unnamed Homestay"
    address: str = "Nepal"
    updatedAt: Optional[str] = None
    status: Optional[str] = None

    @property
    def is_approved(self) -> bool:
        return self.status == APPROVED

    @classmethod
    def from_backend(cls, raw: Dict[str, Any]) -> "SitemapHomestay":
        """Backend search entry with the sitemap defaults filled in"""
        return cls(
            id=raw.get("id"),
            name=raw.get("name") or "Unnamed Homestay",
            address=raw.get("address") or "Nepal",
            updatedAt=raw.get("updatedAt") or datetime.now(timezone.utc).isoformat(),
            status=raw.get("status"),
        )


class SitemapStats(BaseModel):
    total: int = 0
    approved: int = 0
    lastUpdated: Optional[str] = None


__all__ = ["APPROVED", "SITEMAP_SEARCH_LIMIT", "SitemapHomestay", "SitemapStats"]
