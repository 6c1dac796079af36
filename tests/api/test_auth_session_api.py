"""
Auth Session API Tests

Sign-in, the session cookie and its refresh through the HTTP surface.

Usage:
    pytest tests/api/test_auth_session_api.py -v
"""
import pytest

from tests.component.mocks.http_mock import MockHttpResponse
from tests.contracts.auth.data_contract import AuthTestDataFactory

pytestmark = [pytest.mark.api, pytest.mark.asyncio]

COOKIE = "homestay-session"


@pytest.fixture
def factory():
    return AuthTestDataFactory()


class TestLoginApi:

    async def test_login_sets_cookie(self, client, backend, factory):
        backend.set_response("POST", "/auth/login", 200, factory.make_login_response(name="Maya"))

        response = await client.post("/api/auth/login", json=factory.make_login_request())

        assert response.status_code == 200
        assert response.json()["user"]["name"] == "Maya"
        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith(f"{COOKIE}=")
        assert "HttpOnly" in set_cookie
        assert "Path=/" in set_cookie

    async def test_bad_email_never_reaches_backend(self, client, backend, factory):
        response = await client.post(
            "/api/auth/login", json=factory.make_invalid_login_request_bad_email()
        )

        assert response.status_code == 400
        assert "error" in response.json()
        assert backend.requests == []

    async def test_wrong_password(self, client, backend, factory):
        backend.set_response("POST", "/auth/login", 401, {"message": "Wrong password"})

        response = await client.post("/api/auth/login", json=factory.make_login_request())

        assert response.status_code == 401
        assert response.json() == {"error": "Wrong password"}
        assert "set-cookie" not in response.headers

    async def test_logout_deletes_cookie(self, client, session_cookie, factory):
        response = await client.post(
            "/api/auth/logout", headers=session_cookie(factory.make_claims())
        )

        assert response.json() == {"success": True}
        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith(f"{COOKIE}=")
        assert "Max-Age=0" in set_cookie


class TestSessionApi:

    async def test_signed_out(self, client):
        response = await client.get("/api/auth/session")

        assert response.status_code == 200
        assert response.json() == {}

    async def test_signed_in(self, client, session_cookie, factory):
        claims = factory.make_claims(token_expiry=factory.expiry_in(3600))

        response = await client.get("/api/auth/session", headers=session_cookie(claims))

        body = response.json()
        assert body["user"]["id"] == claims.user_id
        assert body["isTokenNearExpiry"] is False
        assert "set-cookie" not in response.headers

    async def test_near_expiry_flag(self, client, session_cookie, factory):
        claims = factory.make_claims(token_expiry=factory.expiry_in(480))

        response = await client.get("/api/auth/session", headers=session_cookie(claims))

        assert response.json()["isTokenNearExpiry"] is True

    async def test_expiring_session_refreshed_and_reissued(self, client, backend, session_cookie, factory):
        backend.set_response("POST", "/auth/refresh", 200, factory.make_refresh_response())
        claims = factory.make_claims(token_expiry=factory.expiry_in(60))

        response = await client.get("/api/auth/session", headers=session_cookie(claims))

        assert response.json()["user"]["accessToken"] != claims.access_token
        assert response.headers["set-cookie"].startswith(f"{COOKIE}=")
        assert len(backend.calls("POST", "/auth/refresh")) == 1

    async def test_expired_without_refresh_token_signs_out(self, client, backend, session_cookie, factory):
        claims = factory.make_claims(token_expiry=factory.expiry_in(-60), with_refresh=False)

        response = await client.get("/api/auth/session", headers=session_cookie(claims))

        assert response.json() == {}
        assert "Max-Age=0" in response.headers["set-cookie"]
        assert backend.requests == []

    async def test_tampered_cookie_is_ignored(self, client):
        response = await client.get(
            "/api/auth/session", headers={"Cookie": f"{COOKIE}=not-a-token"}
        )

        assert response.json() == {}


class TestCurrentUserApi:

    async def test_not_authenticated(self, client):
        response = await client.get("/api/auth/me")

        assert response.status_code == 401
        assert response.json() == {"status": "error", "message": "Not authenticated"}

    async def test_me(self, client, backend, session_cookie, factory):
        backend.set_response("GET", "/auth/me", 200, {"data": {"id": 1, "name": "Maya"}})

        response = await client.get("/api/auth/me", headers=session_cookie(factory.make_claims()))

        assert response.json() == {
            "status": "success",
            "message": "User retrieved successfully",
            "data": {"id": 1, "name": "Maya"},
        }

    async def test_me_refreshes_after_401(self, client, backend, session_cookie, factory):
        backend.set_responses(
            "GET", "/auth/me",
            MockHttpResponse(401, {"message": "expired"}),
            MockHttpResponse(200, {"data": {"id": 1}}),
        )
        backend.set_response("POST", "/auth/refresh", 200, factory.make_refresh_response())

        response = await client.get("/api/auth/me", headers=session_cookie(factory.make_claims()))

        assert response.status_code == 200
        assert response.headers["set-cookie"].startswith(f"{COOKIE}=")
        retried = backend.calls("GET", "/auth/me")[-1]
        assert retried.headers["Authorization"] != backend.calls("GET", "/auth/me")[0].headers["Authorization"]

    async def test_failed_session_refresh_is_session_expired(self, client, backend, session_cookie, factory):
        claims = factory.make_claims(token_expiry=factory.expiry_in(60))
        backend.set_response("POST", "/auth/refresh", 401, {"message": "revoked"})

        response = await client.get("/api/auth/me", headers=session_cookie(claims))

        assert response.status_code == 401
        assert response.json() == {"error": "SessionExpired", "callbackUrl": "/signin?error=SessionExpired"}
        assert "Max-Age=0" in response.headers["set-cookie"]
        assert backend.calls("GET", "/auth/me") == []


class TestSessionUpdateApi:

    async def test_tokens_stored(self, client, session_cookie, factory):
        response = await client.post(
            "/api/auth/session-update",
            json={"action": "updateTokens", "accessToken": factory.make_access_token(), "expiresIn": 3600},
            headers=session_cookie(factory.make_claims()),
        )

        assert response.json() == {"success": True, "message": "Tokens updated successfully"}
        assert response.headers["set-cookie"].startswith(f"{COOKIE}=")

    async def test_requires_session(self, client):
        response = await client.post(
            "/api/auth/session-update", json={"action": "updateTokens", "accessToken": "at"}
        )

        assert response.status_code == 401
        assert response.json() == {"message": "Not authenticated"}

    async def test_failed_session_refresh_is_session_expired(self, client, backend, session_cookie, factory):
        claims = factory.make_claims(token_expiry=factory.expiry_in(60))
        backend.set_response("POST", "/auth/refresh", 401, {"message": "revoked"})

        response = await client.post(
            "/api/auth/session-update",
            json={"action": "updateTokens", "accessToken": factory.make_access_token()},
            headers=session_cookie(claims),
        )

        assert response.status_code == 401
        assert response.json()["error"] == "SessionExpired"


class TestBearerProfileApi:

    async def test_missing_bearer(self, client):
        response = await client.get("/api/users/me")

        assert response.status_code == 401
        assert response.json() == {"error": "Missing or invalid authorization header"}

    async def test_profile_relayed(self, client, backend):
        backend.set_response("GET", "/users/me", 200, {"id": 3})

        response = await client.get("/api/users/me", headers={"Authorization": "Bearer at-3"})

        assert response.status_code == 200
        assert backend.last_request("GET", "/users/me").headers["Authorization"] == "Bearer at-3"
