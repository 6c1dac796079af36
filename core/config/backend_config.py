#!/usr/bin/env python3
"""Backend API configuration

The external homestay backend that every proxy route forwards to.
"""
import os
from dataclasses import dataclass


def _float(val: str, default: float) -> float:
    try:
        return float(val) if val else default
    except ValueError:
        return default


@dataclass
class BackendConfig:
    """External backend endpoint and outbound timeouts"""
    api_base_url: str = "http://localhost:3001"

    # Timeouts (seconds)
    default_timeout: float = 30.0
    onboarding_step3_timeout: float = 5.0
    onboarding_step4_timeout: float = 10.0
    payment_timeout: float = 10.0

    @classmethod
    def from_env(cls) -> 'BackendConfig':
        return cls(
            api_base_url=os.getenv("API_BASE_URL", "http://localhost:3001").rstrip("/"),
            default_timeout=_float(os.getenv("BACKEND_TIMEOUT", "30"), 30.0),
            onboarding_step3_timeout=_float(os.getenv("ONBOARDING_STEP3_TIMEOUT", "5"), 5.0),
            onboarding_step4_timeout=_float(os.getenv("ONBOARDING_STEP4_TIMEOUT", "10"), 10.0),
            payment_timeout=_float(os.getenv("PAYMENT_TIMEOUT", "10"), 10.0),
        )
