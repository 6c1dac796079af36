"""
Verification Service - Business Logic

Validates OTP / password-reset / support requests and relays the backend
answer as-is.
"""

import logging
from typing import Any, Dict, Type

from pydantic import BaseModel, ValidationError

from core.backend_client import BackendClient, read_json, error_message
from core.relay import RelayResult
from core.validation import first_error_message, parse_model

from .models import (
    ForgotPasswordRequest,
    ResendVerificationRequest,
    ResetPasswordCodeRequest,
    VerifyCodeRequest,
    ContactSupportRequest,
)
from .protocols import VerificationServiceError, InvalidBackendResponseError

logger = logging.getLogger(__name__)


class VerificationService:
    """Verification business logic"""

    def __init__(self, backend: BackendClient):
        self.backend = backend

    def _validate(self, model_cls: Type[BaseModel], body: Any) -> BaseModel:
        try:
            return parse_model(model_cls, body)
        except ValidationError as e:
            raise VerificationServiceError(first_error_message(e))

    async def _relay_json(self, path: str, payload: Dict[str, Any]) -> RelayResult:
        """POST and pass the backend status/body through; non-JSON is a 500"""
        response = await self.backend.post(path, json=payload)
        result = read_json(response)
        if result is None:
            logger.error(f"Backend {path} returned a non-JSON body ({response.status_code})")
            raise InvalidBackendResponseError()
        return RelayResult(body=result, status_code=response.status_code)

    async def forgot_password(self, body: Any) -> RelayResult:
        request = self._validate(ForgotPasswordRequest, body)
        return await self._relay_json("/verification/forgot-password", request.contact_payload())

    async def resend_verification(self, body: Any) -> RelayResult:
        """Resend the verification OTP; success is normalised to {status, message}"""
        request = self._validate(ResendVerificationRequest, body)
        response = await self.backend.post(
            "/verification/resend-verification", json={"email": request.email}
        )
        result = read_json(response)
        if not response.is_success:
            raise VerificationServiceError(
                error_message(result, "Failed to resend OTP"), status_code=response.status_code
            )
        return RelayResult(
            body={"status": "success", "message": error_message(result, "New OTP sent to your email")},
        )

    async def reset_password_code(self, body: Any) -> RelayResult:
        request = self._validate(ResetPasswordCodeRequest, body)
        payload = {
            **request.contact_payload(),
            "code": request.code,
            "newPassword": request.newPassword,
        }
        return await self._relay_json("/verification/reset-password-code", payload)

    async def verify_code(self, body: Any) -> RelayResult:
        request = self._validate(VerifyCodeRequest, body)
        payload = {**request.contact_payload(), "code": request.code}
        return await self._relay_json("/verification/verify-code", payload)

    async def contact_support(self, body: Any) -> RelayResult:
        request = self._validate(ContactSupportRequest, body)
        return await self._relay_json("/email/contact-support", request.model_dump())


__all__ = ["VerificationService"]
