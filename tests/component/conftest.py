"""
Component Test Layer Configuration

Services run against a faked backend (httpx.MockTransport); no network.

Structure:
    tests/component/
    ├── auth/        Sign-in and session refresh
    ├── booking/     Availability, deals, guest bookings
    ├── campaign/    QR campaigns and reviews
    ├── homestay/    Homestay lookups, defaults, uploads
    ├── onboarding/  Listing wizard
    ├── payment/     Stripe, Khalti, eSewa
    ├── sitemap/     Sitemap cache
    └── mocks/       Mock implementations

Usage:
    pytest tests/component -v
    pytest tests/component/auth -v
"""
import os
import sys

import httpx
import pytest
import pytest_asyncio

# Add project root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from core.backend_client import BackendClient
from services.auth_service import AuthService
from services.booking_service import BookingService
from services.campaign_service import CampaignService
from services.homestay_service import HomestayService
from services.onboarding_service import OnboardingService
from services.payment_service import PaymentService
from services.sitemap_service import SitemapCache, SitemapService
from tests.component.mocks import MockBackend
from tests.conftest import TestConfig


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure custom markers"""
    config.addinivalue_line(
        "markers", "component: marks tests as component tests"
    )


# =============================================================================
# Backend Fixtures
# =============================================================================

@pytest.fixture
def backend() -> MockBackend:
    """Fresh fake backend"""
    return MockBackend()


@pytest_asyncio.fixture
async def backend_client(backend):
    """BackendClient wired to the fake backend"""
    client = BackendClient(TestConfig.BACKEND_URL, transport=backend.transport)
    yield client
    await client.close()


@pytest_asyncio.fixture
async def provider_client(backend):
    """Client for the payment providers, answered by the same fake"""
    client = httpx.AsyncClient(transport=backend.transport)
    yield client
    await client.aclose()


# =============================================================================
# Service Fixtures
# =============================================================================

@pytest.fixture
def auth_service(backend_client, session_manager) -> AuthService:
    return AuthService(backend_client, session_manager)


@pytest.fixture
def onboarding_service(backend_client, gateway_config) -> OnboardingService:
    return OnboardingService(backend_client, gateway_config.backend)


@pytest.fixture
def campaign_service(backend_client) -> CampaignService:
    return CampaignService(backend_client)


@pytest.fixture
def booking_service(backend_client) -> BookingService:
    return BookingService(backend_client)


@pytest.fixture
def homestay_service(backend_client) -> HomestayService:
    return HomestayService(backend_client)


@pytest.fixture
def payment_service(booking_service, gateway_config, provider_client) -> PaymentService:
    return PaymentService(booking_service, gateway_config.payments, provider_client=provider_client)


@pytest.fixture
def sitemap_service(backend_client, gateway_config) -> SitemapService:
    return SitemapService(backend_client, SitemapCache(gateway_config.sitemap_cache_path))
