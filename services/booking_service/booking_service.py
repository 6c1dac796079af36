"""
Booking Service - Business Logic

Availability and booking calls relayed to the backend. Payment
confirmation is shared with the payment providers.
"""

import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from core.backend_client import BackendClient, read_json, bearer_headers
from core.relay import RelayResult
from core.validation import error_details, parse_model

from .models import (
    GuestBooking,
    DealsSearch,
    ConfirmPaymentRequest,
    LOCATION_SEARCH_LIMIT,
    MIN_LOCATION_QUERY,
)
from .protocols import (
    BookingServiceError,
    InvalidBookingError,
    ConfirmPaymentError,
    CommunityNotFoundError,
)

logger = logging.getLogger(__name__)

EMPTY_DEALS = {"homestays": [], "totalPages": 0, "totalCount": 0}


def _relay_fixed(response: httpx.Response, message: str) -> RelayResult:
    """Relay a success as 200; a failure keeps the backend status with a fixed message"""
    if not response.is_success:
        raise BookingServiceError(message, status_code=response.status_code)
    body = read_json(response)
    return RelayResult(body=body if body is not None else {})


class BookingService:
    """Booking business logic"""

    def __init__(self, backend: BackendClient, confirm_timeout: Optional[float] = None):
        self.backend = backend
        self.confirm_timeout = confirm_timeout

    # =============================================================================
    # Availability
    # =============================================================================

    async def check_availability(self, body: Any) -> RelayResult:
        """Availability search across homestays"""
        response = await self.backend.post("/bookings/check-availability", json=body)
        return _relay_fixed(response, "Failed to fetch availability")

    async def check_homestay_availability(self, homestay_id: str, body: Any) -> RelayResult:
        """Rooms available at one homestay for the requested stay"""
        response = await self.backend.post(f"/bookings/check-availability/{homestay_id}", json=body)
        if not response.is_success:
            logger.error(f"Availability for homestay {homestay_id} failed: {response.status_code}")
            raise BookingServiceError(
                "Failed to check availability",
                status_code=500,
                details=f"Backend returned {response.status_code}: {response.text}",
            )

        data = read_json(response)
        if isinstance(data, dict):
            logger.debug(
                f"Homestay {homestay_id}: {len(data.get('availableRooms') or [])} rooms available, "
                f"last-minute deal: {bool(data.get('activeLastMinuteDeal'))}"
            )
        data = data if data is not None else {}
        return RelayResult(body=data, headers={"Cache-Control": "no-store"})

    async def search_deals(self, body: Any) -> RelayResult:
        """Deal search; any failure yields an empty page"""
        try:
            search = DealsSearch.model_validate(body if isinstance(body, dict) else {})
            response = await self.backend.post(
                "/bookings/check-availability/deals", json=search.to_backend()
            )
        except (ValidationError, httpx.HTTPError) as e:
            logger.warning(f"Deal search failed: {e}")
            return RelayResult(body=dict(EMPTY_DEALS))

        if not response.is_success:
            logger.warning(f"Deal search returned {response.status_code}")
            return RelayResult(body=dict(EMPTY_DEALS))
        return RelayResult(
            body=read_json(response) or {},
            headers={"Cache-Control": "no-store, max-age=0"},
        )

    async def search_locations(self, query: Optional[str], limit: Optional[str]) -> RelayResult:
        """Location suggestions for the search box"""
        if not query or len(query) < MIN_LOCATION_QUERY:
            return RelayResult(
                body={
                    "suggestions": [],
                    "query": query or "",
                    "message": f"Query must be at least {MIN_LOCATION_QUERY} characters",
                }
            )

        response = await self.backend.get(
            "/bookings/locations/search",
            params={"query": query, "limit": limit or LOCATION_SEARCH_LIMIT},
        )
        if not response.is_success:
            return RelayResult(
                body={"suggestions": [], "query": query, "error": "Failed to fetch locations"},
                status_code=response.status_code,
            )

        data = read_json(response) or {}
        return RelayResult(
            body={
                "suggestions": data.get("suggestions") or [],
                "query": data.get("query") or query,
            }
        )

    # =============================================================================
    # Bookings
    # =============================================================================

    async def create_guest_booking(self, body: Any) -> RelayResult:
        try:
            booking = parse_model(GuestBooking, body)
        except ValidationError as e:
            raise InvalidBookingError(error_details(e))

        response = await self.backend.post(
            "/bookings/guest", json=booking.model_dump(exclude_none=True)
        )
        data = read_json(response)
        if not response.is_success:
            data = data if isinstance(data, dict) else {}
            raise BookingServiceError(
                data.get("message") or "Failed to create booking",
                status_code=response.status_code,
                details=data.get("error") or "Unknown error",
            )

        logger.info(f"Guest booking created for homestay {booking.homestayId}")
        return RelayResult(body=data if data is not None else {}, status_code=201)

    async def confirm_payment(
        self,
        group_booking_id: Any,
        transaction_id: Any,
        metadata: Optional[Dict[str, Any]] = None,
        access_token: Optional[str] = None,
    ) -> RelayResult:
        """
        Mark a booking group as paid

        Args:
            group_booking_id: Booking group returned at checkout
            transaction_id: Provider transaction / payment intent id
            metadata: Provider details stored with the payment
            access_token: Sent as Bearer only when the caller is signed in

        Returns:
            {"status": "CONFIRMED", "booking": <backend body>}
        """
        if not group_booking_id or not transaction_id:
            raise BookingServiceError("Missing groupBookingId or transactionId", status_code=400)

        response = await self.backend.post(
            "/bookings/confirm-payment",
            json={
                "groupBookingId": group_booking_id,
                "transactionId": transaction_id,
                "metadata": metadata or {},
            },
            headers=bearer_headers(access_token) if access_token else None,
            timeout=self.confirm_timeout,
        )
        data = read_json(response)
        if not response.is_success:
            message = data.get("error") if isinstance(data, dict) else None
            logger.error(f"Confirm payment for {group_booking_id} failed: {response.status_code}")
            raise ConfirmPaymentError(
                message or "Failed to confirm payment", status_code=response.status_code, body=data
            )

        logger.info(f"Payment {transaction_id} confirmed for booking group {group_booking_id}")
        return RelayResult(body={"status": "CONFIRMED", "booking": data})

    async def confirm_payment_request(
        self, body: Any, access_token: Optional[str] = None
    ) -> RelayResult:
        request = ConfirmPaymentRequest.model_validate(body if isinstance(body, dict) else {})
        return await self.confirm_payment(
            request.groupBookingId, request.transactionId, request.metadata, access_token
        )

    # =============================================================================
    # Communities
    # =============================================================================

    async def get_community(self, community_id: str) -> RelayResult:
        """The backend only lists communities; pick one by id"""
        response = await self.backend.get("/communities")
        communities = _relay_fixed(response, "Failed to fetch communities").body
        try:
            wanted = int(community_id)
        except ValueError:
            raise CommunityNotFoundError()

        for community in communities if isinstance(communities, list) else []:
            if isinstance(community, dict) and community.get("id") == wanted:
                return RelayResult(body=community)
        raise CommunityNotFoundError()

    async def check_community_availability(self, body: Any) -> RelayResult:
        response = await self.backend.post("/communities/check-availability", json=body)
        return _relay_fixed(response, "Failed to check availability")

    async def create_community_booking(
        self, body: Any, authorization: Optional[str] = None
    ) -> RelayResult:
        headers = {"Authorization": authorization} if authorization else None
        response = await self.backend.post("/communities/bookings", json=body, headers=headers)
        return _relay_fixed(response, "Failed to create community booking")

    async def create_community_guest_booking(self, body: Any) -> RelayResult:
        response = await self.backend.post("/communities/bookings/guest", json=body)
        return _relay_fixed(response, "Failed to create community booking")


__all__ = ["BookingService"]
