"""
Homestay Service - Business Logic

Read-only homestay browsing relayed from the backend with the browser
cache headers each listing needs. Listing fallbacks keep the home page
rendering when the backend is down.
"""

import logging
import re
from typing import Any, Dict, List, Optional, Type

import httpx
from pydantic import BaseModel, ValidationError

from core.backend_client import BackendClient, read_json, error_message
from core.forms import FormPayload
from core.relay import RelayResult, backend_error

from .models import (
    SEARCH_PARAMS,
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    SLUG_SEARCH_LIMIT,
    SEARCH_CACHE,
    TOP_HOMESTAYS_CACHE,
    LOCATIONS_CACHE,
    NO_STORE,
    AreaUnit,
    BedType,
    Currency,
)
from .protocols import (
    HomestayServiceError,
    HomestayNotFoundError,
    InvalidDefaultsError,
    UploadError,
)

logger = logging.getLogger(__name__)

NUMERIC_ID = re.compile(r"^\d+$")
DEFAULTS_TIMEOUT = 10.0


def _empty_deals() -> Dict[str, Any]:
    return {"data": [], "total": 0, "page": 1, "limit": 12, "totalPages": 0}


class HomestayService:
    """Homestay business logic"""

    def __init__(self, backend: BackendClient):
        self.backend = backend

    # =============================================================================
    # Single homestay
    # =============================================================================

    async def get_homestay(self, homestay_id: str) -> RelayResult:
        response = await self.backend.get(f"/homestays/{homestay_id}")
        if not response.is_success:
            logger.info(f"Homestay {homestay_id} lookup returned {response.status_code}")
            raise HomestayNotFoundError()
        return RelayResult(body=read_json(response), headers={"Cache-Control": NO_STORE})

    async def get_by_slug(self, slug: str) -> RelayResult:
        """A numeric slug is an id; named slugs need the availability search (POST)"""
        if not NUMERIC_ID.match(slug):
            raise HomestayServiceError(
                "Use POST method for slug-based availability check", status_code=400
            )
        return await self.get_homestay(slug)

    async def find_by_slug(self, slug: str, body: Any) -> RelayResult:
        """Search availability for the stay in `body` and pick the homestay with this slug"""
        criteria = body if isinstance(body, dict) else {}
        response = await self.backend.post(
            "/bookings/check-availability",
            json={**criteria, "page": 1, "limit": SLUG_SEARCH_LIMIT, "sort": "PRICE_ASC"},
        )
        if not response.is_success:
            raise HomestayServiceError(
                f"Failed to fetch homestay details: {response.reason_phrase}",
                status_code=response.status_code,
            )

        data = read_json(response)
        homestays = data.get("homestays") if isinstance(data, dict) else None
        for homestay in homestays or []:
            if isinstance(homestay, dict) and homestay.get("slug") == slug:
                return RelayResult(body=homestay)
        raise HomestayNotFoundError()

    async def get_profile(self, homestay_id: str) -> RelayResult:
        response = await self.backend.get(f"/homestays/{homestay_id}")
        if not response.is_success:
            raise backend_error(response.status_code, "Failed to fetch homestay details")
        return RelayResult(body=read_json(response))

    # =============================================================================
    # Listings
    # =============================================================================

    async def search(self, query: Dict[str, str]) -> RelayResult:
        """Whitelisted search filters; page and limit always sent"""
        params = {
            name: query[name] for name in SEARCH_PARAMS if query.get(name) not in (None, "")
        }
        params.setdefault("page", DEFAULT_PAGE)
        params.setdefault("limit", DEFAULT_PAGE_SIZE)

        response = await self.backend.get("/homestays/search", params=params)
        if not response.is_success:
            logger.error(f"Homestay search failed: {response.status_code}")
            raise HomestayServiceError("Failed to search homestays", status_code=500)
        return RelayResult(body=read_json(response), headers={"Cache-Control": SEARCH_CACHE})

    async def top_homestays(
        self,
        page: Optional[str] = None,
        limit: Optional[str] = None,
        category: Optional[str] = None,
        strategy: Optional[str] = None,
    ) -> RelayResult:
        params = {"page": page or DEFAULT_PAGE, "limit": limit or DEFAULT_PAGE_SIZE}
        if category:
            params["category"] = category
        if strategy:
            params["strategy"] = strategy

        response = await self.backend.get("/homestays/top-homestays", params=params)
        if not response.is_success:
            logger.error(f"Top homestays failed: {response.status_code}")
            raise HomestayServiceError("Failed to fetch top homestays", status_code=500)
        return RelayResult(
            body=read_json(response), headers={"Cache-Control": TOP_HOMESTAYS_CACHE}
        )

    async def last_minute_deals(self, page: Optional[str], limit: Optional[str]) -> RelayResult:
        """Deals for the home page; failures answer 200 with an empty page"""
        params = {"page": page or DEFAULT_PAGE, "limit": limit or DEFAULT_PAGE_SIZE}
        try:
            response = await self.backend.get("/homestays/last-minute-deals", params=params)
        except httpx.HTTPError as e:
            logger.warning(f"Last-minute deals unavailable: {e}")
            return RelayResult(body={"error": "Internal server error", **_empty_deals()})

        if not response.is_success:
            logger.warning(f"Last-minute deals returned {response.status_code}")
            return RelayResult(
                body={
                    "error": "Failed to fetch deals from backend",
                    "details": response.text,
                    **_empty_deals(),
                }
            )
        return RelayResult(body=read_json(response), headers={"Cache-Control": NO_STORE})

    async def locations(self) -> RelayResult:
        """Every location with homestays; failures answer an empty list"""
        try:
            response = await self.backend.get("/homestays/locations/all")
        except httpx.HTTPError as e:
            logger.warning(f"Locations unavailable: {e}")
            return RelayResult(body={"locations": [], "total": 0})

        if not response.is_success:
            logger.warning(f"Locations returned {response.status_code}")
            return RelayResult(body={"locations": [], "total": 0})
        return RelayResult(body=read_json(response), headers={"Cache-Control": LOCATIONS_CACHE})

    async def top_destinations(self) -> RelayResult:
        response = await self.backend.get("/homestays/destinations/top")
        if not response.is_success:
            raise backend_error(response.status_code, "Failed to fetch top destinations", "status")
        return RelayResult(body=read_json(response))

    async def destination_homestays(
        self, destination_id: str, page: Optional[str], limit: Optional[str]
    ) -> RelayResult:
        response = await self.backend.get(
            f"/homestays/destinations/{destination_id}",
            params={"page": page or DEFAULT_PAGE, "limit": limit or DEFAULT_PAGE_SIZE},
        )
        if not response.is_success:
            raise backend_error(
                response.status_code, "Failed to fetch destination homestays", "status"
            )
        return RelayResult(body=read_json(response))

    # =============================================================================
    # Listing defaults
    # =============================================================================

    async def _defaults(self, path: str, model_cls: Type[BaseModel], kind: str) -> RelayResult:
        """Fetch an /admin defaults list and check every entry's shape"""
        response = await self.backend.get(f"/admin/{path}", timeout=DEFAULTS_TIMEOUT)
        body = read_json(response)
        if not response.is_success:
            raise backend_error(
                response.status_code, error_message(body, f"Failed to fetch {kind}"), "message"
            )
        if not isinstance(body, list):
            raise InvalidDefaultsError(kind)

        try:
            entries: List[BaseModel] = [model_cls.model_validate(entry) for entry in body]
        except ValidationError as e:
            logger.error(f"Backend {kind} failed validation: {e}")
            raise InvalidDefaultsError(kind)
        return RelayResult(body=[entry.model_dump() for entry in entries])

    async def area_units(self) -> RelayResult:
        return await self._defaults("area-units", AreaUnit, "area units")

    async def bed_types(self) -> RelayResult:
        return await self._defaults("bed-types", BedType, "bed types")

    async def currencies(self) -> RelayResult:
        return await self._defaults("currencies", Currency, "currencies")

    # =============================================================================
    # Uploads
    # =============================================================================

    async def upload_file(self, folder: str, form: FormPayload) -> RelayResult:
        """Forward the `file` part to the backend S3 upload"""
        if not folder:
            raise UploadError("Folder is required")
        files = form.files_named("file")
        if not files:
            raise UploadError("File is required")

        response = await self.backend.post(f"/s3/upload/{folder}", files=files[:1])
        body = read_json(response)
        if not response.is_success:
            raise backend_error(response.status_code, error_message(body, "Failed to upload file"))

        logger.info(f"Uploaded {files[0][1][0]} to {folder}")
        return RelayResult(body=body if body is not None else {})


__all__ = ["HomestayService"]
