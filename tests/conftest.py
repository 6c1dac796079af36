"""
Root conftest.py - Global fixtures and configuration for all test layers.

Test Layers:
    - api/        : HTTP tests through the ASGI app, backend faked
    - component/  : Service tests against a faked backend
    - unit/       : Pure functions and models, no I/O
"""
import os
import sys

import pytest

# Set testing environment BEFORE any imports
os.environ["ENV"] = "testing"
os.environ["ENVIRONMENT"] = "testing"

# Add project root to path
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

from core.config import (
    BackendConfig,
    GatewayConfig,
    LoggingConfig,
    PaymentConfig,
    SessionConfig,
)
from core.session_manager import SessionManager


# =============================================================================
# Test Configuration
# =============================================================================

class TestConfig:
    """Centralized test configuration"""

    BACKEND_URL = "http://backend.test"
    SESSION_SECRET = "test-session-secret"
    STRIPE_KEY = "sk_test_gateway"
    KHALTI_KEY = "test_khalti_secret"
    # eSewa's published UAT secret
    ESEWA_KEY = "8gBm/:&EnhH.1/q"
    ESEWA_PRODUCT_CODE = "EPAYTEST"


def pytest_configure(config):
    """Configure custom markers"""
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line("markers", "component: marks tests as component tests")
    config.addinivalue_line("markers", "api: marks tests as API tests")


# =============================================================================
# Config Fixtures
# =============================================================================

@pytest.fixture
def gateway_config(tmp_path) -> GatewayConfig:
    """Gateway config pointing at the fake backend, with test credentials"""
    return GatewayConfig(
        environment="testing",
        debug=False,
        sitemap_cache_path=str(tmp_path / "sitemap-cache.json"),
        logging=LoggingConfig(log_level="DEBUG", environment="testing"),
        backend=BackendConfig(api_base_url=TestConfig.BACKEND_URL),
        session=SessionConfig(secret=TestConfig.SESSION_SECRET),
        payments=PaymentConfig(
            stripe_secret_key=TestConfig.STRIPE_KEY,
            khalti_secret_key=TestConfig.KHALTI_KEY,
            esewa_secret_key=TestConfig.ESEWA_KEY,
            esewa_product_code=TestConfig.ESEWA_PRODUCT_CODE,
        ),
    )


@pytest.fixture
def session_manager(gateway_config: GatewayConfig) -> SessionManager:
    session = gateway_config.session
    return SessionManager(
        secret_key=session.secret,
        max_age=session.max_age,
        refresh_threshold_seconds=session.refresh_threshold_seconds,
        near_expiry_seconds=session.near_expiry_seconds,
    )
