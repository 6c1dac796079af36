"""
Onboarding Service

Property-listing wizard: per-step validation and persistence to the
backend, one step at a time.
"""

from .onboarding_service import OnboardingService

__all__ = ["OnboardingService"]
