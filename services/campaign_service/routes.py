"""
Campaign API Routes

Static paths are registered before /{campaign_id} so they match first.
Protected routes take the Authorization header as optional and let the
service reject it after the body is validated.
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Header, Query, Request

from core.auth_dependencies import optional_authorization
from core.forms import read_form_payload
from gateway.dependencies import get_campaign_service, json_body

from .campaign_service import CampaignService

router = APIRouter(prefix="/api/campaign", tags=["campaign"])


# ====================
# Campaigns
# ====================


@router.get("")
async def list_campaigns(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    service: CampaignService = Depends(get_campaign_service),
):
    return (await service.list_campaigns(page, limit)).to_response()


@router.post("")
async def create_campaign(
    body: Any = Depends(json_body),
    authorization: Optional[str] = Depends(optional_authorization),
    service: CampaignService = Depends(get_campaign_service),
):
    """Create a campaign (admin)"""
    return (await service.create_campaign(body, authorization)).to_response()


# ====================
# QR codes
# ====================


@router.post("/qr-codes/generate")
async def generate_qr_codes(
    body: Any = Depends(json_body),
    authorization: Optional[str] = Depends(optional_authorization),
    service: CampaignService = Depends(get_campaign_service),
):
    return (await service.generate_qr_codes(body, authorization)).to_response()


@router.delete("/qr-codes/{qr_code_id}")
async def delete_qr_code(
    qr_code_id: str,
    authorization: Optional[str] = Depends(optional_authorization),
    service: CampaignService = Depends(get_campaign_service),
):
    return (await service.delete_qr_code(qr_code_id, authorization)).to_response()


@router.get("/qr/{qr_code}")
async def get_by_qr_code(qr_code: str, service: CampaignService = Depends(get_campaign_service)):
    return (await service.get_by_qr_code(qr_code)).to_response()


@router.post("/scan")
async def track_scan(
    body: Any = Depends(json_body),
    x_forwarded_for: Optional[str] = Header(None),
    x_real_ip: Optional[str] = Header(None),
    user_agent: Optional[str] = Header(None),
    service: CampaignService = Depends(get_campaign_service),
):
    """Record a QR scan with the visitor's address and agent"""
    result = await service.track_scan(body, x_forwarded_for, x_real_ip, user_agent)
    return result.to_response()


# ====================
# Homestay registration
# ====================


@router.post("/homestay/register")
async def register_homestay(
    body: Any = Depends(json_body),
    authorization: Optional[str] = Depends(optional_authorization),
    service: CampaignService = Depends(get_campaign_service),
):
    return (await service.register_homestay(body, authorization)).to_response()


@router.post("/homestay/bulk-register")
async def bulk_register_homestays(
    body: Any = Depends(json_body),
    authorization: Optional[str] = Depends(optional_authorization),
    service: CampaignService = Depends(get_campaign_service),
):
    return (await service.bulk_register_homestays(body, authorization)).to_response()


# ====================
# Guest review flow
# ====================


@router.post("/review/verify-user")
async def verify_user(
    body: Any = Depends(json_body),
    service: CampaignService = Depends(get_campaign_service),
):
    return (await service.verify_user(body)).to_response()


@router.post("/review/verify-otp")
async def verify_otp(
    body: Any = Depends(json_body),
    service: CampaignService = Depends(get_campaign_service),
):
    return (await service.verify_otp(body)).to_response()


@router.post("/review/complete-registration")
async def complete_registration(
    body: Any = Depends(json_body),
    service: CampaignService = Depends(get_campaign_service),
):
    return (await service.complete_registration(body)).to_response()


@router.post("/review/submit")
async def submit_review(
    body: Any = Depends(json_body),
    authorization: Optional[str] = Depends(optional_authorization),
    service: CampaignService = Depends(get_campaign_service),
):
    return (await service.submit_review(body, authorization)).to_response()


@router.post("/review/upload-images")
async def upload_review_images(
    request: Request,
    authorization: Optional[str] = Depends(optional_authorization),
    service: CampaignService = Depends(get_campaign_service),
):
    """Forward review photos as multipart"""
    form = await read_form_payload(request)
    return (await service.upload_review_images(form, authorization)).to_response()


# ====================
# Review moderation
# ====================


@router.get("/reviews/all")
async def list_reviews(
    request: Request,
    authorization: Optional[str] = Depends(optional_authorization),
    service: CampaignService = Depends(get_campaign_service),
):
    params = dict(request.query_params)
    return (await service.list_reviews(params, authorization)).to_response()


@router.put("/reviews/{review_id}/verify")
async def verify_review(
    review_id: str,
    body: Any = Depends(json_body),
    authorization: Optional[str] = Depends(optional_authorization),
    service: CampaignService = Depends(get_campaign_service),
):
    return (await service.verify_review(review_id, body, authorization)).to_response()


@router.post("/reviews/{review_id}/respond")
async def respond_to_review(
    review_id: str,
    body: Any = Depends(json_body),
    authorization: Optional[str] = Depends(optional_authorization),
    service: CampaignService = Depends(get_campaign_service),
):
    return (await service.respond_to_review(review_id, body, authorization)).to_response()


# ====================
# Discounts
# ====================


@router.get("/discounts/my")
async def my_discounts(
    isUsed: Optional[str] = Query(None),
    includeExpired: Optional[str] = Query(None),
    authorization: Optional[str] = Depends(optional_authorization),
    service: CampaignService = Depends(get_campaign_service),
):
    result = await service.my_discounts(isUsed, includeExpired, authorization)
    return result.to_response()


@router.post("/discounts/validate")
async def validate_discount(
    body: Any = Depends(json_body),
    authorization: Optional[str] = Depends(optional_authorization),
    service: CampaignService = Depends(get_campaign_service),
):
    return (await service.validate_discount(body, authorization)).to_response()


# ====================
# Single campaign
# ====================


@router.get("/{campaign_id}")
async def get_campaign(campaign_id: str, service: CampaignService = Depends(get_campaign_service)):
    return (await service.get_campaign(campaign_id)).to_response()


@router.put("/{campaign_id}")
async def update_campaign(
    campaign_id: str,
    body: Any = Depends(json_body),
    authorization: Optional[str] = Depends(optional_authorization),
    service: CampaignService = Depends(get_campaign_service),
):
    return (await service.update_campaign(campaign_id, body, authorization)).to_response()


@router.delete("/{campaign_id}")
async def delete_campaign(
    campaign_id: str,
    authorization: Optional[str] = Depends(optional_authorization),
    service: CampaignService = Depends(get_campaign_service),
):
    return (await service.delete_campaign(campaign_id, authorization)).to_response()


@router.get("/{campaign_id}/homestays")
async def list_campaign_homestays(
    campaign_id: str,
    request: Request,
    service: CampaignService = Depends(get_campaign_service),
):
    params = dict(request.query_params)
    return (await service.list_campaign_homestays(campaign_id, params)).to_response()


@router.get("/{campaign_id}/qr-codes")
async def list_qr_codes(
    campaign_id: str,
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    authorization: Optional[str] = Depends(optional_authorization),
    service: CampaignService = Depends(get_campaign_service),
):
    result = await service.list_qr_codes(campaign_id, page, limit, authorization)
    return result.to_response()
