"""
Onboarding Service - Business Logic

Validates each wizard step independently and persists it to the backend.
A malformed session id is rejected before any backend call.
"""

import json
import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from core.backend_client import BackendClient, read_json, error_message
from core.config import BackendConfig
from core.forms import FormPayload
from core.relay import RelayResult, passthrough, relay, backend_error
from core.validation import error_details, first_error_message, is_valid_session_id

from .models import (
    Step1Details,
    Step1Update,
    ImageMetadata,
    Step2Submission,
    Step3Facilities,
    Step4Rooms,
    FinalizeRequest,
    MAX_TOTAL_ROOMS,
)
from .protocols import (
    OnboardingError,
    OnboardingMessageError,
    InvalidSessionIdError,
    OnboardingValidationError,
)

logger = logging.getLogger(__name__)

WRITE_METHODS = ("POST", "PATCH")


def _step4_error(exc: ValidationError) -> OnboardingValidationError:
    """Map a Step4Rooms failure to the wizard's message for the first broken rule"""
    errors = exc.errors()
    if any(error["loc"][:1] == ("totalRooms",) for error in errors):
        return OnboardingValidationError(
            f"totalRooms must be a positive integer between 1 and {MAX_TOTAL_ROOMS}",
            message_key="message",
        )
    if any(len(error["loc"]) > 1 for error in errors):
        return OnboardingValidationError(
            "Invalid room data structure", details=error_details(exc), message_key="message"
        )
    return OnboardingValidationError("Number of rooms must match totalRooms", message_key="message")


class OnboardingService:
    """Onboarding wizard business logic"""

    def __init__(self, backend: BackendClient, config: Optional[BackendConfig] = None):
        self.backend = backend
        config = config or BackendConfig()
        self.step3_timeout = config.onboarding_step3_timeout
        self.step4_timeout = config.onboarding_step4_timeout
        # finalize and facilities share the short step 3 budget
        self.short_timeout = config.onboarding_step3_timeout

    @staticmethod
    def _check_session_id(session_id: str, message_key: str = "error") -> None:
        if not is_valid_session_id(session_id):
            logger.warning(f"Rejected onboarding session id: {session_id!r}")
            raise InvalidSessionIdError(message_key)

    # =============================================================================
    # Session start
    # =============================================================================

    async def start(self) -> RelayResult:
        """Open a new wizard session on the backend"""
        response = await self.backend.post("/onboarding/start")
        return relay(response, "Failed to start onboarding session", status_code=200)

    # =============================================================================
    # Step 1 - owner and property details (multipart)
    # =============================================================================

    @staticmethod
    def _relay_step1(response: httpx.Response, action: str) -> RelayResult:
        content_type = response.headers.get("content-type", "")
        if "application/json" not in content_type:
            logger.error(f"Step 1 backend returned non-JSON ({response.status_code})")
            raise OnboardingMessageError("Invalid response from server", status_code=500)
        body = read_json(response)
        if not response.is_success:
            raise backend_error(
                response.status_code, error_message(body, f"Failed to {action} Step 1"), "message"
            )
        return RelayResult(body=body if body is not None else {})

    def _validate_step1(self, form: FormPayload, partial: bool) -> None:
        """Check the text fields; an update only checks the fields it sends"""
        fields = {
            name: form.get(name)
            for name in Step1Details.model_fields
            if form.get(name) is not None
        }
        try:
            (Step1Update if partial else Step1Details).model_validate(fields)
        except ValidationError as e:
            raise OnboardingValidationError(first_error_message(e), message_key="message")

    async def get_step1(self, session_id: str) -> RelayResult:
        self._check_session_id(session_id, "message")
        response = await self.backend.get(f"/onboarding/step1/{session_id}")
        return self._relay_step1(response, "fetch")

    async def submit_step1(self, session_id: str, form: FormPayload) -> RelayResult:
        self._check_session_id(session_id, "message")
        self._validate_step1(form, partial=False)
        response = await self.backend.post(
            f"/onboarding/step1/{session_id}", data=form.data(), files=form.files or None
        )
        return self._relay_step1(response, "submit")

    async def update_step1(
        self, session_id: str, form: Optional[FormPayload] = None, body: Any = None
    ) -> RelayResult:
        """Update step 1 from a multipart form or a JSON body"""
        self._check_session_id(session_id, "message")
        if form is not None:
            self._validate_step1(form, partial=True)
            response = await self.backend.patch(
                f"/onboarding/step1/{session_id}", data=form.data(), files=form.files or None
            )
        else:
            response = await self.backend.patch(f"/onboarding/step1/{session_id}", json=body)

        if response.status_code == 200 and not response.content:
            return RelayResult(body={})
        return self._relay_step1(response, "update")

    # =============================================================================
    # Step 2 - description and images (multipart)
    # =============================================================================

    @staticmethod
    def validate_step2(form: FormPayload) -> Step2Submission:
        """
        Step 2 rules, in order:
        description present, metadata a non-empty array, one file per new
        image, exactly one main image, then length limits.
        """
        description = form.get("description")
        raw_metadata = form.get("imageMetadata")
        images = form.files_named("images")

        if not description:
            raise OnboardingValidationError("Description is required")
        if not raw_metadata:
            raise OnboardingValidationError("imageMetadata is required")

        try:
            metadata = json.loads(raw_metadata)
        except ValueError as e:
            raise OnboardingValidationError(f"Invalid imageMetadata format: {e}")
        if not isinstance(metadata, list) or not metadata:
            raise OnboardingValidationError(
                "Invalid imageMetadata format: imageMetadata must be a non-empty array"
            )

        try:
            entries = [ImageMetadata.model_validate(entry) for entry in metadata]
        except ValidationError as e:
            raise OnboardingValidationError(f"Invalid imageMetadata format: {first_error_message(e)}")

        new_count = sum(1 for entry in entries if entry.is_new)
        if new_count != len(images):
            raise OnboardingValidationError(
                f"Expected {new_count} new image file(s), received {len(images)}"
            )
        if sum(1 for entry in entries if entry.isMain) != 1:
            raise OnboardingValidationError("Exactly one image must be marked as main")

        try:
            return Step2Submission(description=description, images=entries)
        except ValidationError as e:
            raise OnboardingValidationError(first_error_message(e), details=error_details(e))

    async def get_step2(self, session_id: str) -> RelayResult:
        self._check_session_id(session_id)
        response = await self.backend.get(f"/onboarding/step2/{session_id}")
        return relay(response, "Failed to fetch Step 2 data", status_code=200)

    async def save_step2(self, session_id: str, form: FormPayload, method: str) -> RelayResult:
        """Submit (POST) or update (PATCH) step 2"""
        self._check_session_id(session_id)
        self.validate_step2(form)

        data = {"description": form.get("description"), "imageMetadata": form.get("imageMetadata")}
        response = await self.backend.request(
            method,
            f"/onboarding/step2/{session_id}",
            data=data,
            files=form.files_named("images") or None,
        )
        action = "update" if method == "PATCH" else "submit"
        relay(response, f"Failed to {action} Step 2 to backend")
        return RelayResult(body={})

    # =============================================================================
    # Step 3 - facilities (JSON)
    # =============================================================================

    async def list_facilities(self) -> RelayResult:
        """Default facilities hosts can pick from"""
        response = await self.backend.get("/admin/facilities", timeout=self.short_timeout)
        return passthrough(response)

    async def get_step3(self, session_id: str) -> RelayResult:
        self._check_session_id(session_id)
        response = await self.backend.get(
            f"/onboarding/step3/{session_id}", timeout=self.step3_timeout
        )
        if response.status_code == 404:
            return RelayResult(body={"facilityIds": [], "customFacilities": []})
        if not response.is_success:
            return passthrough(response)

        try:
            facilities = Step3Facilities.model_validate(read_json(response))
        except ValidationError as e:
            logger.error(f"Backend returned malformed step 3 data: {e}")
            raise OnboardingValidationError("Invalid Step 3 data format", details=error_details(e))
        return RelayResult(body=facilities.model_dump(exclude_none=True))

    @staticmethod
    def validate_step3(body: Any) -> Step3Facilities:
        try:
            facilities = Step3Facilities.model_validate(body if body is not None else {})
        except ValidationError as e:
            raise OnboardingValidationError("Invalid data format", details=error_details(e))
        if facilities.is_empty:
            raise OnboardingValidationError("At least one facility (default or custom) is required")
        return facilities

    async def save_step3(self, session_id: str, body: Any, method: str) -> RelayResult:
        self._check_session_id(session_id)
        facilities = self.validate_step3(body)
        response = await self.backend.request(
            method,
            f"/onboarding/step3/{session_id}",
            json=facilities.model_dump(exclude_none=True),
            timeout=self.step3_timeout,
        )
        if not response.is_success:
            return passthrough(response)
        return RelayResult(body={})

    # =============================================================================
    # Step 4 - rooms (JSON)
    # =============================================================================

    @staticmethod
    def validate_step4(body: Any) -> None:
        """Room count and structure checks with the wizard's exact messages"""
        if not isinstance(body, dict):
            body = {}

        if body.get("totalRooms") is None or body.get("rooms") is None:
            raise OnboardingValidationError(
                "Missing required fields: totalRooms and rooms are required", message_key="message"
            )
        try:
            Step4Rooms.model_validate(body)
        except ValidationError as e:
            raise _step4_error(e)

    async def get_step4(self, session_id: str) -> RelayResult:
        self._check_session_id(session_id, "message")
        response = await self.backend.get(
            f"/onboarding/step4/{session_id}", timeout=self.step4_timeout
        )
        if response.status_code == 404:
            return RelayResult(body={"totalRooms": 1, "rooms": []})
        return relay(response, "Failed to fetch room information", shape="message", status_code=200)

    async def save_step4(self, session_id: str, body: Any, method: str) -> RelayResult:
        """POST answers 201, PATCH answers 200"""
        self._check_session_id(session_id, "message")
        self.validate_step4(body)

        response = await self.backend.request(
            method,
            f"/onboarding/step4/{session_id}",
            json=body,
            timeout=self.step4_timeout,
        )
        is_update = method == "PATCH"
        result = relay(
            response,
            f"Failed to {'update' if is_update else 'submit'} room information",
            shape="message",
        )
        logger.info(f"Step 4 {'updated' if is_update else 'submitted'} for session {session_id}")
        return RelayResult(
            body={
                "message": f"Step 4 {'updated' if is_update else 'submitted'} successfully",
                "data": result.body,
            },
            status_code=200 if is_update else 201,
        )

    # =============================================================================
    # Finalize - owner account
    # =============================================================================

    async def finalize(self, session_id: str, body: Any) -> RelayResult:
        """Create the owner account and close the wizard session"""
        self._check_session_id(session_id)
        try:
            request = FinalizeRequest.model_validate(body if body is not None else {})
        except ValidationError as e:
            raise OnboardingValidationError("Invalid request data", details=error_details(e))

        response = await self.backend.post(
            f"/onboarding/finalize/{session_id}",
            json=request.model_dump(exclude_none=True),
            timeout=self.short_timeout,
        )
        result = relay(response, "Failed to finalize session")
        logger.info(f"Onboarding session {session_id} finalized")
        return RelayResult(
            body={"message": "Session finalized successfully", "data": result.body},
        )

    # =============================================================================
    # Generic passthrough
    # =============================================================================

    async def forward(
        self,
        method: str,
        path: str,
        form: Optional[FormPayload] = None,
        body: Any = None,
    ) -> RelayResult:
        """Forward any other onboarding call unchanged"""
        if method in WRITE_METHODS and form is not None:
            response = await self.backend.request(
                method, f"/onboarding/{path}", data=form.data(), files=form.files or None
            )
        elif method in WRITE_METHODS:
            response = await self.backend.request(method, f"/onboarding/{path}", json=body)
        else:
            response = await self.backend.get(
                f"/onboarding/{path}", headers={"Cache-Control": "no-store"}
            )
        return relay(response, f"Failed to process {method} request", shape="message")


__all__ = ["OnboardingService", "OnboardingError"]
