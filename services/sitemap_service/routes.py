"""
Sitemap API Routes

Admin-only cache maintenance plus the public approved-homestay list.
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends

from core.session_manager import SessionClaims
from gateway.dependencies import (
    get_active_session,
    get_sitemap_service,
    json_body,
    require_admin_session,
)

from .protocols import AdminRequiredError
from .sitemap_service import SitemapService

router = APIRouter(prefix="/api/sitemap", tags=["sitemap"])


async def require_admin_for_write(
    session: Optional[SessionClaims] = Depends(get_active_session),
) -> SessionClaims:
    if session is None or not session.is_admin:
        raise AdminRequiredError()
    return session


@router.get("/homestays")
async def sitemap_homestays(service: SitemapService = Depends(get_sitemap_service)):
    """Approved homestays for the sitemap generator"""
    return (await service.approved_homestays()).to_response()


@router.post("/update", dependencies=[Depends(require_admin_for_write)])
async def update_sitemap(
    body: Any = Depends(json_body),
    service: SitemapService = Depends(get_sitemap_service),
):
    return (await service.update(body)).to_response()


@router.get("/update", dependencies=[Depends(require_admin_session)])
async def sitemap_stats(service: SitemapService = Depends(get_sitemap_service)):
    return (await service.update_status()).to_response()


@router.post("/revalidate", dependencies=[Depends(require_admin_for_write)])
async def revalidate_sitemap(service: SitemapService = Depends(get_sitemap_service)):
    return (await service.revalidate()).to_response()


@router.get("/revalidate", dependencies=[Depends(require_admin_session)])
async def sitemap_status(service: SitemapService = Depends(get_sitemap_service)):
    return (await service.status()).to_response()
