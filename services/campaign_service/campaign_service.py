"""
Campaign Service - Business Logic

Thin proxy over the backend /campaign API. Bodies and queries are
validated before the Authorization header is checked, and backend
answers are relayed with their own status; successful creates answer 201.
"""

import logging
from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from core.backend_client import BackendClient
from core.forms import FormPayload
from core.relay import RelayResult, passthrough
from core.validation import constraint_errors, parse_model

from .models import (
    CampaignCreate,
    CampaignUpdate,
    GenerateQRCodes,
    HomestayRegistration,
    BulkHomestayRegistration,
    TrackQRScan,
    VerifyUser,
    VerifyOTP,
    CompleteRegistration,
    SubmitReview,
    VerifyReview,
    RespondToReview,
    ValidateDiscount,
    PageQuery,
    CampaignHomestaysQuery,
    ReviewsQuery,
    DiscountsQuery,
)
from .protocols import CampaignValidationError, CampaignAuthRequiredError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

INVALID_INPUT = "Invalid input provided"
INVALID_QUERY = "Invalid query parameters"
QR_CODES_PAGE_SIZE = "50"


def _query_string(query: BaseModel) -> Dict[str, str]:
    """Validated query as backend params; booleans as true/false, unset keys dropped"""
    params = {}
    for key, value in query.model_dump(exclude_none=True).items():
        params[key] = str(value).lower() if isinstance(value, bool) else str(value)
    return params


class CampaignService:
    """Campaign business logic"""

    def __init__(self, backend: BackendClient):
        self.backend = backend

    # =============================================================================
    # Helpers
    # =============================================================================

    @staticmethod
    def _validate(model_cls: Type[ModelT], data: Any, message: str = INVALID_INPUT) -> ModelT:
        try:
            return parse_model(model_cls, data)
        except ValidationError as e:
            logger.debug(f"{model_cls.__name__} rejected: {e}")
            raise CampaignValidationError(message, constraint_errors(e))

    @staticmethod
    def _require_auth(authorization: Optional[str], message: str = "Authorization header required") -> str:
        if not authorization:
            raise CampaignAuthRequiredError(message)
        return authorization

    async def _call(
        self,
        method: str,
        path: str,
        success_status: int = 200,
        authorization: Optional[str] = None,
        json: Any = None,
        params: Optional[Dict[str, str]] = None,
        headers: Optional[Dict[str, str]] = None,
        form: Optional[FormPayload] = None,
    ) -> RelayResult:
        """Forward to /campaign{path}; failures keep the backend status"""
        request_headers = dict(headers or {})
        if authorization:
            request_headers["Authorization"] = authorization

        if form is not None:
            response = await self.backend.request(
                method,
                f"/campaign{path}",
                data=form.data(),
                files=form.files or None,
                headers=request_headers,
            )
        else:
            response = await self.backend.request(
                method, f"/campaign{path}", json=json, params=params, headers=request_headers
            )

        result = passthrough(response)
        if response.is_success:
            result.status_code = success_status
        else:
            logger.info(f"Backend {method} /campaign{path} answered {response.status_code}")
        return result

    @staticmethod
    def _dump(model: BaseModel) -> Dict[str, Any]:
        return model.model_dump(mode="json", exclude_none=True)

    # =============================================================================
    # Campaigns
    # =============================================================================

    async def list_campaigns(self, page: Optional[str], limit: Optional[str]) -> RelayResult:
        query = self._validate(
            PageQuery, {"page": page or "1", "limit": limit or "20"}, INVALID_QUERY
        )
        return await self._call("GET", "", params=_query_string(query))

    async def create_campaign(self, body: Any, authorization: Optional[str]) -> RelayResult:
        campaign = self._validate(CampaignCreate, body)
        authorization = self._require_auth(authorization)
        result = await self._call(
            "POST", "", 201, authorization=authorization, json=self._dump(campaign)
        )
        logger.info(f"Campaign create relayed with status {result.status_code}")
        return result

    async def get_campaign(self, campaign_id: str) -> RelayResult:
        return await self._call("GET", f"/{campaign_id}")

    async def update_campaign(
        self, campaign_id: str, body: Any, authorization: Optional[str]
    ) -> RelayResult:
        update = self._validate(CampaignUpdate, body)
        authorization = self._require_auth(authorization)
        return await self._call(
            "PUT", f"/{campaign_id}", authorization=authorization, json=self._dump(update)
        )

    async def delete_campaign(self, campaign_id: str, authorization: Optional[str]) -> RelayResult:
        authorization = self._require_auth(authorization)
        return await self._call("DELETE", f"/{campaign_id}", authorization=authorization)

    async def list_campaign_homestays(
        self, campaign_id: str, params: Dict[str, Optional[str]]
    ) -> RelayResult:
        query = self._validate(
            CampaignHomestaysQuery,
            {
                "page": params.get("page") or "1",
                "limit": params.get("limit") or "20",
                "isActive": params.get("isActive") or None,
                "search": params.get("search") or None,
            },
            INVALID_QUERY,
        )
        return await self._call("GET", f"/{campaign_id}/homestays", params=_query_string(query))

    # =============================================================================
    # QR codes
    # =============================================================================

    async def list_qr_codes(
        self,
        campaign_id: str,
        page: Optional[str],
        limit: Optional[str],
        authorization: Optional[str],
    ) -> RelayResult:
        """QR codes of a campaign; the Authorization header is forwarded when present"""
        params = {"page": page or "1", "limit": limit or QR_CODES_PAGE_SIZE}
        return await self._call(
            "GET", f"/{campaign_id}/qr-codes", authorization=authorization, params=params
        )

    async def generate_qr_codes(self, body: Any, authorization: Optional[str]) -> RelayResult:
        request = self._validate(GenerateQRCodes, body)
        authorization = self._require_auth(authorization)
        result = await self._call(
            "POST", "/qr-codes/generate", 201, authorization=authorization, json=self._dump(request)
        )
        logger.info(f"Requested {request.count} QR codes for campaign {request.campaignId}")
        return result

    async def delete_qr_code(self, qr_code_id: str, authorization: Optional[str]) -> RelayResult:
        authorization = self._require_auth(authorization, "Authorization required")
        return await self._call("DELETE", f"/qr-codes/{qr_code_id}", authorization=authorization)

    async def get_by_qr_code(self, qr_code: str) -> RelayResult:
        """Homestay (or unassigned status) behind a printed QR code"""
        return await self._call("GET", f"/qr/{qr_code}")

    async def track_scan(
        self, body: Any, forwarded_for: Optional[str], real_ip: Optional[str], user_agent: Optional[str]
    ) -> RelayResult:
        scan = self._validate(TrackQRScan, body)
        headers = {
            "X-Forwarded-For": forwarded_for or real_ip or "unknown",
            "User-Agent": user_agent or "",
        }
        return await self._call("POST", "/scan", json=self._dump(scan), headers=headers)

    # =============================================================================
    # Homestay registration
    # =============================================================================

    async def register_homestay(self, body: Any, authorization: Optional[str]) -> RelayResult:
        registration = self._validate(HomestayRegistration, body)
        authorization = self._require_auth(authorization)
        result = await self._call(
            "POST",
            "/homestay/register",
            201,
            authorization=authorization,
            json=self._dump(registration),
        )
        logger.info(f"Homestay registration for QR {registration.qrCode}: {result.status_code}")
        return result

    async def bulk_register_homestays(self, body: Any, authorization: Optional[str]) -> RelayResult:
        registration = self._validate(BulkHomestayRegistration, body)
        authorization = self._require_auth(authorization)
        return await self._call(
            "POST",
            "/homestay/bulk-register",
            201,
            authorization=authorization,
            json=self._dump(registration),
        )

    # =============================================================================
    # Guest review flow
    # =============================================================================

    async def verify_user(self, body: Any) -> RelayResult:
        request = self._validate(VerifyUser, body)
        return await self._call("POST", "/review/verify-user", json=self._dump(request))

    async def verify_otp(self, body: Any) -> RelayResult:
        request = self._validate(VerifyOTP, body)
        return await self._call("POST", "/review/verify-otp", json=self._dump(request))

    async def complete_registration(self, body: Any) -> RelayResult:
        request = self._validate(CompleteRegistration, body)
        return await self._call("POST", "/review/complete-registration", json=self._dump(request))

    async def submit_review(self, body: Any, authorization: Optional[str]) -> RelayResult:
        review = self._validate(SubmitReview, body)
        authorization = self._require_auth(authorization)
        return await self._call(
            "POST", "/review/submit", 201, authorization=authorization, json=self._dump(review)
        )

    async def upload_review_images(
        self, form: FormPayload, authorization: Optional[str]
    ) -> RelayResult:
        authorization = self._require_auth(authorization)
        logger.debug(f"Forwarding {len(form.files_named('images'))} review image(s)")
        return await self._call(
            "POST", "/review/upload-images", 201, authorization=authorization, form=form
        )

    # =============================================================================
    # Review moderation
    # =============================================================================

    async def list_reviews(
        self, params: Dict[str, Optional[str]], authorization: Optional[str]
    ) -> RelayResult:
        query = self._validate(
            ReviewsQuery,
            {
                "page": params.get("page") or "1",
                "limit": params.get("limit") or "20",
                "isVerified": params.get("isVerified") or None,
                "isPublished": params.get("isPublished") or None,
                "campaignId": params.get("campaignId") or None,
                "homestayId": params.get("homestayId") or None,
            },
            INVALID_QUERY,
        )
        return await self._call(
            "GET", "/reviews/all", authorization=authorization, params=_query_string(query)
        )

    async def verify_review(
        self, review_id: str, body: Any, authorization: Optional[str]
    ) -> RelayResult:
        request = self._validate(VerifyReview, body)
        authorization = self._require_auth(authorization)
        return await self._call(
            "PUT", f"/reviews/{review_id}/verify", authorization=authorization, json=self._dump(request)
        )

    async def respond_to_review(
        self, review_id: str, body: Any, authorization: Optional[str]
    ) -> RelayResult:
        request = self._validate(RespondToReview, body)
        authorization = self._require_auth(authorization)
        return await self._call(
            "POST", f"/reviews/{review_id}/respond", authorization=authorization, json=self._dump(request)
        )

    # =============================================================================
    # Discounts
    # =============================================================================

    async def my_discounts(
        self, is_used: Optional[str], include_expired: Optional[str], authorization: Optional[str]
    ) -> RelayResult:
        authorization = self._require_auth(authorization)
        query = self._validate(
            DiscountsQuery,
            {"isUsed": is_used or None, "includeExpired": include_expired or "false"},
            INVALID_QUERY,
        )
        return await self._call(
            "GET", "/discounts/my", authorization=authorization, params=_query_string(query)
        )

    async def validate_discount(self, body: Any, authorization: Optional[str]) -> RelayResult:
        request = self._validate(ValidateDiscount, body)
        authorization = self._require_auth(authorization)
        return await self._call(
            "POST", "/discounts/validate", authorization=authorization, json=self._dump(request)
        )


__all__ = ["CampaignService"]
