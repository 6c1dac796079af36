"""
Homestay Service Models

Shapes the listing defaults must have before they reach the browser.
"""

from typing import Tuple, Union

from pydantic import BaseModel, Field

SEARCH_PARAMS: Tuple[str, ...] = (
    "page",
    "limit",
    "search",
    "destinationId",
    "location",
    "minPrice",
    "maxPrice",
    "minRating",
    "facilityIds",
    "guests",
    "sortBy",
    "vipAccess",
    "hasLastMinuteDeal",
)
DEFAULT_PAGE = "1"
DEFAULT_PAGE_SIZE = "12"
SLUG_SEARCH_LIMIT = 10

SEARCH_CACHE = "public, s-maxage=60, stale-while-revalidate=120"
TOP_HOMESTAYS_CACHE = "public, s-maxage=300, stale-while-revalidate=600"
LOCATIONS_CACHE = "public, s-maxage=3600, stale-while-revalidate=86400"
NO_STORE = "no-store, max-age=0"


class AreaUnit(BaseModel):
    id: int = Field(..., gt=0)
    name: str = Field(..., min_length=1)
    isDefault: bool


class BedType(BaseModel):
    id: int = Field(..., gt=0)
    name: str = Field(..., min_length=1)
    size: Union[int, float] = Field(..., gt=0)
    sizeUnit: str = Field(..., min_length=1)


class Currency(BaseModel):
    id: int = Field(..., gt=0)
    code: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    isDefault: bool


__all__ = [
    "SEARCH_PARAMS",
    "DEFAULT_PAGE",
    "DEFAULT_PAGE_SIZE",
    "SLUG_SEARCH_LIMIT",
    "SEARCH_CACHE",
    "TOP_HOMESTAYS_CACHE",
    "LOCATIONS_CACHE",
    "NO_STORE",
    "AreaUnit",
    "BedType",
    "Currency",
]
