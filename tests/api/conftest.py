"""
API Test Layer Configuration

Requests go through the real FastAPI app (routes, session middleware,
error handlers) over httpx.ASGITransport. The backend and the payment
providers are faked with MockBackend, so no network is needed.

Usage:
    pytest tests/api -v                    # Run all API tests
    pytest tests/api -v -k "session"       # Run session API tests
    pytest tests/api -v --tb=short         # Short traceback
"""

import os
import sys
from typing import AsyncGenerator, Dict

import httpx
import pytest
import pytest_asyncio

# Add project root
sys.path.insert(
    0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
)

from core.session_manager import SessionClaims
from gateway.factory import GatewayFactory
from gateway.main import app
from tests.component.mocks import MockBackend


# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Configure custom markers"""
    config.addinivalue_line("markers", "api: marks tests as API tests")


# =============================================================================
# Gateway Fixtures
# =============================================================================


@pytest.fixture
def backend() -> MockBackend:
    """Fake backend behind the gateway"""
    return MockBackend()


@pytest_asyncio.fixture
async def gateway_factory(gateway_config, backend) -> AsyncGenerator[GatewayFactory, None]:
    """
    Factory wired to the fake backend and attached to the app

    ASGITransport does not run the lifespan, so the factory is attached
    here and the lifespan never builds its own.
    """
    factory = GatewayFactory(gateway_config, transport=backend.transport)
    await factory.initialize()
    app.state.factory = factory
    yield factory
    app.state.factory = None
    await factory.close()


@pytest_asyncio.fixture
async def client(gateway_factory) -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client talking to the app in-process"""
    transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c


@pytest.fixture
def session_cookie(gateway_factory):
    """Build a Cookie header carrying a signed session for the given claims"""

    def _cookie(claims: SessionClaims) -> Dict[str, str]:
        cookie_name = gateway_factory.config.session.cookie_name
        token = gateway_factory.session_manager.issue(claims)
        return {"Cookie": f"{cookie_name}={token}"}

    return _cookie
