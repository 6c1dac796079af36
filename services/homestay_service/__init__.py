"""
Homestay Service

Public homestay browsing (search, details, deals, destinations), the
listing defaults (area units, bed types, currencies) and S3 uploads.
"""

from .homestay_service import HomestayService

__all__ = ["HomestayService"]
