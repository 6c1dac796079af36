"""
Homestay API Routes

/api/homestays, /api/default and /api/s3. Listing paths are registered
before /{homestay_id}.
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, Request

from core.forms import read_form_payload
from gateway.dependencies import get_homestay_service, json_body

from .homestay_service import HomestayService

router = APIRouter(prefix="/api/homestays", tags=["homestays"])
defaults_router = APIRouter(prefix="/api/default", tags=["defaults"])
uploads_router = APIRouter(prefix="/api/s3", tags=["uploads"])


# ====================
# Listings
# ====================


@router.get("/search")
async def search_homestays(
    request: Request,
    service: HomestayService = Depends(get_homestay_service),
):
    result = await service.search(dict(request.query_params))
    return result.to_response()


@router.get("/top-homestays")
async def top_homestays(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    strategy: Optional[str] = Query(None),
    service: HomestayService = Depends(get_homestay_service),
):
    result = await service.top_homestays(page, limit, category, strategy)
    return result.to_response()


@router.get("/last-minute-deals")
async def last_minute_deals(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    service: HomestayService = Depends(get_homestay_service),
):
    return (await service.last_minute_deals(page, limit)).to_response()


@router.get("/locations")
async def locations(service: HomestayService = Depends(get_homestay_service)):
    return (await service.locations()).to_response()


@router.get("/destinations/top")
async def top_destinations(service: HomestayService = Depends(get_homestay_service)):
    return (await service.top_destinations()).to_response()


@router.get("/destinations/{destination_id}")
async def destination_homestays(
    destination_id: str,
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    service: HomestayService = Depends(get_homestay_service),
):
    result = await service.destination_homestays(destination_id, page, limit)
    return result.to_response()


# ====================
# Single homestay
# ====================


@router.get("/profile/{homestay_id}")
async def homestay_profile(
    homestay_id: str,
    service: HomestayService = Depends(get_homestay_service),
):
    return (await service.get_profile(homestay_id)).to_response()


@router.get("/slug/{slug}")
async def homestay_by_slug(slug: str, service: HomestayService = Depends(get_homestay_service)):
    return (await service.get_by_slug(slug)).to_response()


@router.post("/slug/{slug}")
async def homestay_availability_by_slug(
    slug: str,
    body: Any = Depends(json_body),
    service: HomestayService = Depends(get_homestay_service),
):
    """Homestay page data for the requested stay, looked up by slug"""
    return (await service.find_by_slug(slug, body)).to_response()


@router.get("/{homestay_id}")
async def get_homestay(homestay_id: str, service: HomestayService = Depends(get_homestay_service)):
    return (await service.get_homestay(homestay_id)).to_response()


# ====================
# Listing defaults
# ====================


@defaults_router.get("/area-units")
async def area_units(service: HomestayService = Depends(get_homestay_service)):
    return (await service.area_units()).to_response()


@defaults_router.get("/bed-types")
async def bed_types(service: HomestayService = Depends(get_homestay_service)):
    return (await service.bed_types()).to_response()


@defaults_router.get("/currencies")
async def currencies(service: HomestayService = Depends(get_homestay_service)):
    return (await service.currencies()).to_response()


# ====================
# Uploads
# ====================


@uploads_router.post("/upload/{folder}")
async def upload_file(
    folder: str,
    request: Request,
    service: HomestayService = Depends(get_homestay_service),
):
    form = await read_form_payload(request)
    return (await service.upload_file(folder, form)).to_response()
