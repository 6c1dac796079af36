"""
Auth Service Component Tests

Sign-in against the backend and the refresh-once rules for the session
cookie.

Usage:
    pytest tests/component/auth -v
"""
import time

import httpx
import pytest

from core.backend_client import bearer_headers
from core.errors import SessionExpiredError
from core.session_manager import REFRESH_ERROR
from services.auth_service.models import LoginRequest
from services.auth_service.protocols import AuthServiceError, InvalidCredentialsError, TokenRefreshError
from tests.component.mocks import MockHttpResponse
from tests.contracts.auth.data_contract import AuthTestDataFactory

pytestmark = [pytest.mark.component, pytest.mark.asyncio]


@pytest.fixture
def factory():
    return AuthTestDataFactory()


# =============================================================================
# AuthService.login()
# =============================================================================

class TestLogin:

    async def test_login_builds_session_claims(self, auth_service, backend, factory):
        body = factory.make_login_response(expires_in=3600, role="HOST")
        backend.set_response("POST", "/auth/login", json_data=body)

        claims = await auth_service.login(LoginRequest(**factory.make_login_request()))

        data = body["data"]
        assert claims.user_id == str(data["user"]["id"])
        assert claims.role == "HOST"
        assert claims.access_token == data["accessToken"]
        assert claims.refresh_token == data["refreshToken"]
        expected = int(time.time() * 1000) + 3600 * 1000
        assert abs(claims.token_expiry - expected) < 5000

    async def test_login_sends_credentials(self, auth_service, backend, factory):
        backend.set_response("POST", "/auth/login", json_data=factory.make_login_response())

        await auth_service.login(LoginRequest(**factory.make_login_request()))

        sent = backend.json_body(backend.last_request("POST", "/auth/login"))
        assert sent == {"email": "guest@example.com", "password": "correct-horse"}

    async def test_rejected_credentials(self, auth_service, backend, factory):
        backend.set_response("POST", "/auth/login", 401, {"message": "Invalid email or password"})

        with pytest.raises(InvalidCredentialsError) as exc_info:
            await auth_service.login(LoginRequest(**factory.make_login_request()))

        assert exc_info.value.status_code == 401
        assert exc_info.value.message == "Invalid email or password"

    async def test_malformed_backend_answer(self, auth_service, backend, factory):
        backend.set_response("POST", "/auth/login", json_data={"success": True})

        with pytest.raises(AuthServiceError) as exc_info:
            await auth_service.login(LoginRequest(**factory.make_login_request()))

        assert exc_info.value.status_code == 502


# =============================================================================
# AuthService.resolve_session()
# =============================================================================

class TestResolveSession:

    async def test_no_cookie(self, auth_service):
        resolution = await auth_service.resolve_session(None)

        assert resolution.claims is None
        assert not resolution.expired

    async def test_unreadable_cookie(self, auth_service):
        resolution = await auth_service.resolve_session("garbage")

        assert resolution.claims is None
        assert not resolution.expired

    async def test_valid_token_needs_no_backend(self, auth_service, session_manager, backend, factory):
        claims = factory.make_claims(token_expiry=factory.expiry_in(3600))

        resolution = await auth_service.resolve_session(session_manager.issue(claims))

        assert resolution.claims.user_id == claims.user_id
        assert not resolution.refreshed
        assert backend.requests == []

    async def test_expiring_token_refreshed_once(self, auth_service, session_manager, backend, factory):
        claims = factory.make_claims(token_expiry=factory.expiry_in(120))
        refreshed_body = factory.make_refresh_response(expires_in=3600)
        backend.set_response("POST", "/auth/refresh", json_data=refreshed_body)

        resolution = await auth_service.resolve_session(session_manager.issue(claims))

        assert resolution.refreshed
        assert resolution.claims.access_token == refreshed_body["data"]["accessToken"]
        assert resolution.claims.refresh_token == refreshed_body["data"]["refreshToken"]
        assert len(backend.calls("POST", "/auth/refresh")) == 1
        assert backend.json_body(backend.last_request()) == {"token": claims.refresh_token}

    async def test_expired_token_refreshed(self, auth_service, session_manager, backend, factory):
        claims = factory.make_claims(token_expiry=factory.expiry_in(-60))
        backend.set_response("POST", "/auth/refresh", json_data=factory.make_refresh_response())

        resolution = await auth_service.resolve_session(session_manager.issue(claims))

        assert resolution.refreshed
        assert not resolution.expired

    async def test_expired_without_refresh_token_signs_out(self, auth_service, session_manager, backend, factory):
        claims = factory.make_claims(token_expiry=factory.expiry_in(-60), with_refresh=False)

        resolution = await auth_service.resolve_session(session_manager.issue(claims))

        assert resolution.expired
        assert resolution.claims is None
        assert backend.requests == []

    async def test_expiring_without_refresh_token_kept(self, auth_service, session_manager, factory):
        claims = factory.make_claims(token_expiry=factory.expiry_in(120), with_refresh=False)

        resolution = await auth_service.resolve_session(session_manager.issue(claims))

        assert resolution.claims is not None
        assert not resolution.refreshed

    async def test_failed_refresh_signs_out(self, auth_service, session_manager, backend, factory):
        claims = factory.make_claims(token_expiry=factory.expiry_in(120))
        backend.set_response("POST", "/auth/refresh", 401, {"message": "Refresh token revoked"})

        resolution = await auth_service.resolve_session(session_manager.issue(claims))

        assert resolution.expired
        assert resolution.claims is None

    async def test_refresh_network_error_signs_out(self, auth_service, session_manager, backend, factory):
        claims = factory.make_claims(token_expiry=factory.expiry_in(120))
        backend.set_error(httpx.ConnectError("backend down"))

        resolution = await auth_service.resolve_session(session_manager.issue(claims))

        assert resolution.expired

    async def test_refresh_error_flag_signs_out(self, auth_service, session_manager, backend, factory):
        claims = factory.make_claims(token_expiry=factory.expiry_in(3600), error=REFRESH_ERROR)

        resolution = await auth_service.resolve_session(session_manager.issue(claims))

        assert resolution.expired
        assert backend.requests == []


# =============================================================================
# AuthService.refresh_tokens() / call_with_refresh()
# =============================================================================

class TestCallWithRefresh:

    async def test_refresh_accepts_unwrapped_body(self, auth_service, backend):
        backend.set_response("POST", "/auth/refresh", json_data={"accessToken": "at-2", "expiresIn": 60})

        tokens = await auth_service.refresh_tokens("rt-1")

        assert tokens["accessToken"] == "at-2"
        assert tokens["refreshToken"] is None

    async def test_refresh_without_access_token(self, auth_service, backend):
        backend.set_response("POST", "/auth/refresh", json_data={"data": {}})

        with pytest.raises(TokenRefreshError):
            await auth_service.refresh_tokens("rt-1")

    async def test_401_refreshes_and_retries_once(self, auth_service, backend_client, backend, factory):
        claims = factory.make_claims(token_expiry=factory.expiry_in(3600))
        backend.set_responses(
            "GET", "/bookings/my",
            MockHttpResponse(401, {"message": "jwt expired"}),
            MockHttpResponse(200, {"data": []}),
        )
        backend.set_response("POST", "/auth/refresh", json_data={"data": {"accessToken": "fresh-token"}})

        async def call(token):
            return await backend_client.get("/bookings/my", headers=bearer_headers(token))

        response, updated = await auth_service.call_with_refresh(claims, call)

        assert response.status_code == 200
        assert updated.access_token == "fresh-token"
        retries = backend.calls("GET", "/bookings/my")
        assert len(retries) == 2
        assert retries[-1].headers["Authorization"] == "Bearer fresh-token"

    async def test_401_without_refresh_token_is_returned(self, auth_service, backend_client, backend, factory):
        claims = factory.make_claims(with_refresh=False)
        backend.set_response("GET", "/bookings/my", 401, {"message": "jwt expired"})

        async def call(token):
            return await backend_client.get("/bookings/my", headers=bearer_headers(token))

        response, updated = await auth_service.call_with_refresh(claims, call)

        assert response.status_code == 401
        assert updated is claims
        assert backend.calls("POST", "/auth/refresh") == []

    async def test_failed_refresh_after_401(self, auth_service, backend_client, backend, factory):
        claims = factory.make_claims()
        backend.set_response("GET", "/bookings/my", 401, {"message": "jwt expired"})
        backend.set_response("POST", "/auth/refresh", 403, {"message": "revoked"})

        async def call(token):
            return await backend_client.get("/bookings/my", headers=bearer_headers(token))

        with pytest.raises(SessionExpiredError) as exc_info:
            await auth_service.call_with_refresh(claims, call)

        assert exc_info.value.payload == {
            "error": "SessionExpired",
            "callbackUrl": "/signin?error=SessionExpired",
        }
        assert len(backend.calls("GET", "/bookings/my")) == 1
