"""
Marketplace API Tests

Bookings, homestay listings, uploads and payment callbacks over HTTP.

Usage:
    pytest tests/api/test_marketplace_api.py -v
"""
import pytest

from core.config import PaymentConfig
from services.homestay_service.models import NO_STORE
from tests.conftest import TestConfig
from tests.contracts.auth.data_contract import AuthTestDataFactory
from tests.contracts.booking.data_contract import BookingTestDataFactory
from tests.contracts.payment.data_contract import PaymentTestDataFactory

pytestmark = [pytest.mark.api, pytest.mark.asyncio]

ORIGIN = "https://stay.example.com"
ESEWA_STATUS = "/api/epay/transaction/status/"


@pytest.fixture
def bookings():
    return BookingTestDataFactory()


@pytest.fixture
def payments():
    return PaymentTestDataFactory()


class TestBookingApi:

    async def test_deals_fallback(self, client, backend):
        backend.set_response("POST", "/bookings/check-availability/deals", 500, {"message": "boom"})

        response = await client.post("/api/bookings/check-availability/deals", json={})

        assert response.status_code == 200
        assert response.json() == {"homestays": [], "totalPages": 0, "totalCount": 0}

    async def test_deals_not_taken_as_homestay_id(self, client, backend):
        backend.set_response("POST", "/bookings/check-availability/deals", 200, {"homestays": []})

        await client.post("/api/bookings/check-availability/deals", json={"location": "Pokhara"})

        assert backend.calls("POST", "/bookings/check-availability/deals")

    async def test_guest_booking_validated(self, client, backend, bookings):
        response = await client.post(
            "/api/bookings/guest", json=bookings.make_guest_booking(guestEmail="nope")
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid input data"
        assert backend.requests == []

    async def test_guest_booking_created(self, client, backend, bookings):
        backend.set_response("POST", "/bookings/guest", 200, {"groupBookingId": "GB-1"})

        response = await client.post("/api/bookings/guest", json=bookings.make_guest_booking())

        assert response.status_code == 201

    async def test_location_query_too_short(self, client, backend):
        response = await client.get("/api/bookings/locations/search", params={"query": "P"})

        assert response.json()["suggestions"] == []
        assert backend.requests == []


class TestHomestayApi:

    async def test_homestay_by_id(self, client, backend, bookings):
        backend.set_response("GET", "/homestays/7", 200, bookings.make_homestay(7))

        response = await client.get("/api/homestays/7")

        assert response.json()["id"] == 7
        assert response.headers["cache-control"] == NO_STORE

    async def test_unknown_homestay(self, client, backend):
        backend.set_response("GET", "/homestays/7", 404, {"message": "missing"})

        response = await client.get("/api/homestays/7")

        assert response.status_code == 404
        assert response.json() == {"error": "Homestay not found"}

    async def test_search_not_taken_as_homestay_id(self, client, backend):
        backend.set_response("GET", "/homestays/search", 200, {"data": []})

        response = await client.get("/api/homestays/search", params={"location": "Pokhara"})

        assert response.status_code == 200
        assert backend.last_request().url.path == "/homestays/search"

    async def test_bad_defaults(self, client, backend):
        backend.set_response("GET", "/admin/area-units", 200, {"items": []})

        response = await client.get("/api/default/area-units")

        assert response.status_code == 400
        assert response.json() == {"message": "Invalid area units data format"}

    async def test_upload_requires_file(self, client, backend):
        response = await client.post("/api/s3/upload/rooms", data={"caption": "pool"})

        assert response.status_code == 400
        assert response.json() == {"error": "File is required"}
        assert backend.requests == []

    async def test_upload(self, client, backend):
        backend.set_response("POST", "/s3/upload/rooms", 200, {"url": "https://cdn.example.com/a.jpg"})

        response = await client.post(
            "/api/s3/upload/rooms", files={"file": ("a.jpg", b"\xff\xd8a", "image/jpeg")}
        )

        assert response.json() == {"url": "https://cdn.example.com/a.jpg"}


class TestEsewaApi:

    async def test_initiate_uses_browser_origin(self, client):
        response = await client.post(
            "/api/esewa/initiate",
            json={"amount": 100, "transaction_uuid": "250610-162413"},
            headers={"Origin": ORIGIN},
        )

        body = response.json()
        assert response.status_code == 200
        assert body["payment_url"] == PaymentConfig.esewa_payment_url
        assert body["fields"]["success_url"] == f"{ORIGIN}/payment-callback"
        assert body["fields"]["signature"]

    async def test_verify_confirms_as_signed_in_user(self, client, backend, session_cookie, payments):
        claims = AuthTestDataFactory.make_claims()
        backend.set_response("GET", ESEWA_STATUS, 200, payments.make_esewa_status())
        backend.set_response("POST", "/bookings/confirm-payment", 200, {"id": "GB-1001"})
        data = payments.make_esewa_callback(TestConfig.ESEWA_KEY)

        response = await client.post(
            "/api/esewa/verify",
            json={"data": data, "bookingId": "GB-1001"},
            headers=session_cookie(claims),
        )

        assert response.json()["status"] == "CONFIRMED"
        confirm = backend.last_request("POST", "/bookings/confirm-payment")
        assert confirm.headers["Authorization"] == f"Bearer {claims.access_token}"

    async def test_tampered_callback_rejected(self, client, backend, payments):
        data = payments.make_esewa_callback(TestConfig.ESEWA_KEY, tamper=True)

        response = await client.post("/api/esewa/verify", json={"data": data, "bookingId": "GB-1001"})

        assert response.status_code == 400
        assert backend.requests == []
