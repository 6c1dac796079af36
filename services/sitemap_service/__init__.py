"""
Sitemap Service

Approved homestays for the sitemap, plus the admin-maintained cache the
sitemap generator reads from.
"""

from .sitemap_cache import SitemapCache
from .sitemap_service import SitemapService

__all__ = ["SitemapService", "SitemapCache"]
