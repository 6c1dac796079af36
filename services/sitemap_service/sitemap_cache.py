"""
Sitemap cache

JSON file holding the homestays the sitemap lists. Writes are serialised
with an asyncio.Lock; file access runs in a worker thread.
"""

import asyncio
import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Union

from .models import SitemapHomestay, SitemapStats

logger = logging.getLogger(__name__)


class SitemapCache:
    """File-backed homestay list, upserted by id"""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._lock = asyncio.Lock()

    # ====================
    # File access
    # ====================

    def _read(self) -> List[SitemapHomestay]:
        if not self.path.exists():
            return []
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except ValueError as e:
            logger.warning(f"Sitemap cache {self.path} is unreadable, treating as empty: {e}")
            return []
        if not isinstance(raw, list):
            return []
        return [SitemapHomestay.model_validate(entry) for entry in raw if isinstance(entry, dict)]

    def _write(self, homestays: List[SitemapHomestay]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(
            json.dumps([h.model_dump() for h in homestays], indent=2), encoding="utf-8"
        )
        os.replace(tmp_path, self.path)

    # ====================
    # Operations
    # ====================

    async def upsert(self, homestays: Iterable[SitemapHomestay]) -> int:
        """Add or replace entries by id; returns the number written"""
        incoming = list(homestays)
        async with self._lock:
            current = await asyncio.to_thread(self._read)
            by_id: Dict[str, SitemapHomestay] = {str(h.id): h for h in current}
            for homestay in incoming:
                by_id[str(homestay.id)] = homestay
            await asyncio.to_thread(self._write, list(by_id.values()))
        logger.info(f"Sitemap cache upserted {len(incoming)} homestays ({len(by_id)} total)")
        return len(incoming)

    async def replace_all(self, homestays: Iterable[SitemapHomestay]) -> int:
        """Swap the whole list in one write; readers never see an empty cache"""
        replacement = list(homestays)
        async with self._lock:
            await asyncio.to_thread(self._write, replacement)
        logger.info(f"Sitemap cache replaced with {len(replacement)} homestays")
        return len(replacement)

    async def get_all(self) -> List[SitemapHomestay]:
        return await asyncio.to_thread(self._read)

    async def get_approved(self) -> List[SitemapHomestay]:
        return [h for h in await self.get_all() if h.is_approved]

    async def stats(self) -> SitemapStats:
        """Entry counts and the file's modification time"""
        homestays = await self.get_all()
        last_updated = None
        if self.path.exists():
            mtime = self.path.stat().st_mtime
            last_updated = datetime.fromtimestamp(mtime, tz=timezone.utc).isoformat()
        return SitemapStats(
            total=len(homestays),
            approved=sum(1 for h in homestays if h.is_approved),
            lastUpdated=last_updated,
        )

    async def clear(self) -> None:
        async with self._lock:
            if self.path.exists():
                await asyncio.to_thread(self.path.unlink)
        logger.info("Sitemap cache cleared")


__all__ = ["SitemapCache"]
