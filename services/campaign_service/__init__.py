"""
Campaign Service

QR-code campaigns: homestay registration by field agents, guest reviews
and review discounts.
"""

from .campaign_service import CampaignService

__all__ = ["CampaignService"]
