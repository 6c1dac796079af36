"""
Booking API Routes

/api/bookings and /api/communities. The deals path is registered before
/check-availability/{homestay_id}.
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query

from core.auth_dependencies import optional_authorization
from core.session_manager import SessionClaims
from gateway.dependencies import get_booking_service, get_optional_session, json_body

from .booking_service import BookingService

router = APIRouter(prefix="/api/bookings", tags=["bookings"])
communities_router = APIRouter(prefix="/api/communities", tags=["communities"])


# ====================
# Availability
# ====================


@router.post("/check-availability")
async def check_availability(
    body: Any = Depends(json_body),
    service: BookingService = Depends(get_booking_service),
):
    return (await service.check_availability(body)).to_response()


@router.post("/check-availability/deals")
async def search_deals(
    body: Any = Depends(json_body),
    service: BookingService = Depends(get_booking_service),
):
    """Homestays with deals for the requested stay"""
    return (await service.search_deals(body)).to_response()


@router.post("/check-availability/{homestay_id}")
async def check_homestay_availability(
    homestay_id: str,
    body: Any = Depends(json_body),
    service: BookingService = Depends(get_booking_service),
):
    return (await service.check_homestay_availability(homestay_id, body)).to_response()


@router.get("/locations/search")
async def search_locations(
    query: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    service: BookingService = Depends(get_booking_service),
):
    return (await service.search_locations(query, limit)).to_response()


# ====================
# Bookings
# ====================


@router.post("/guest")
async def create_guest_booking(
    body: Any = Depends(json_body),
    service: BookingService = Depends(get_booking_service),
):
    return (await service.create_guest_booking(body)).to_response()


@router.post("/confirm-payment")
async def confirm_payment(
    body: Any = Depends(json_body),
    session: Optional[SessionClaims] = Depends(get_optional_session),
    service: BookingService = Depends(get_booking_service),
):
    """Confirm a paid booking; signed-in callers forward their token"""
    access_token = session.access_token if session else None
    return (await service.confirm_payment_request(body, access_token)).to_response()


# ====================
# Communities
# ====================


@communities_router.post("/check-availability")
async def check_community_availability(
    body: Any = Depends(json_body),
    service: BookingService = Depends(get_booking_service),
):
    return (await service.check_community_availability(body)).to_response()


@communities_router.post("/bookings")
async def create_community_booking(
    body: Any = Depends(json_body),
    authorization: Optional[str] = Depends(optional_authorization),
    service: BookingService = Depends(get_booking_service),
):
    return (await service.create_community_booking(body, authorization)).to_response()


@communities_router.post("/bookings/guest")
async def create_community_guest_booking(
    body: Any = Depends(json_body),
    service: BookingService = Depends(get_booking_service),
):
    return (await service.create_community_guest_booking(body)).to_response()


@communities_router.get("/{community_id}")
async def get_community(
    community_id: str,
    service: BookingService = Depends(get_booking_service),
):
    return (await service.get_community(community_id)).to_response()
