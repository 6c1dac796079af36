"""
Onboarding Service Component Tests

Wizard steps against the faked backend. Validation failures must never
reach the backend.

Usage:
    pytest tests/component/onboarding -v
"""
import pytest

from core.errors import GatewayError
from services.onboarding_service.protocols import (
    InvalidSessionIdError,
    OnboardingMessageError,
    OnboardingValidationError,
)
from tests.contracts.onboarding.data_contract import OnboardingTestDataFactory

pytestmark = [pytest.mark.component, pytest.mark.asyncio]


@pytest.fixture
def factory():
    return OnboardingTestDataFactory()


@pytest.fixture
def session_id(factory):
    return factory.make_session_id()


class TestSessionIdGuard:
    """Malformed session ids are rejected before any backend call"""

    @pytest.mark.parametrize("step", ["get_step2", "get_step3", "get_step4"])
    async def test_get_rejected(self, onboarding_service, backend, factory, step):
        with pytest.raises(InvalidSessionIdError):
            await getattr(onboarding_service, step)(factory.make_invalid_session_id())

        assert backend.requests == []

    async def test_step1_uses_message_key(self, onboarding_service, backend, factory):
        with pytest.raises(InvalidSessionIdError) as exc_info:
            await onboarding_service.submit_step1(factory.make_invalid_session_id(), factory.make_step1_form())

        assert exc_info.value.payload == {"message": "Invalid session ID format"}
        assert exc_info.value.status_code == 400
        assert backend.requests == []

    async def test_step3_uses_error_key(self, onboarding_service, backend, factory):
        with pytest.raises(InvalidSessionIdError) as exc_info:
            await onboarding_service.save_step3(
                factory.make_invalid_session_id(), factory.make_step3_request(), "POST"
            )

        assert exc_info.value.payload == {"error": "Invalid session ID format"}
        assert backend.requests == []


class TestStart:

    async def test_start_relays_backend_session(self, onboarding_service, backend, session_id):
        backend.set_response("POST", "/onboarding/start", 201, {"sessionId": session_id})

        result = await onboarding_service.start()

        assert result.status_code == 200
        assert result.body == {"sessionId": session_id}

    async def test_start_failure(self, onboarding_service, backend):
        backend.set_response("POST", "/onboarding/start", 503, {"message": "maintenance"})

        with pytest.raises(GatewayError) as exc_info:
            await onboarding_service.start()

        assert exc_info.value.status_code == 503
        assert exc_info.value.payload == {"error": "maintenance"}


class TestStep1:

    async def test_submit_forwards_multipart(self, onboarding_service, backend, factory, session_id):
        path = f"/onboarding/step1/{session_id}"
        backend.set_response("POST", path, 201, {"id": 7})

        result = await onboarding_service.submit_step1(session_id, factory.make_step1_form())

        assert result.body == {"id": 7}
        request = backend.last_request("POST", path)
        assert request.headers["content-type"].startswith("multipart/form-data")
        assert b"Sunrise Homestay" in request.content
        assert b"documentFront" in request.content

    async def test_invalid_contact_number(self, onboarding_service, backend, factory, session_id):
        form = factory.make_step1_form(contactNumber="9801")

        with pytest.raises(OnboardingValidationError) as exc_info:
            await onboarding_service.submit_step1(session_id, form)

        assert exc_info.value.payload == {"message": "Enter a valid phone number (e.g., +9779801169431)"}
        assert backend.requests == []

    async def test_non_json_backend_answer(self, onboarding_service, backend, session_id):
        backend.set_response("GET", f"/onboarding/step1/{session_id}", 502, text="<html>Bad gateway</html>")

        with pytest.raises(OnboardingMessageError) as exc_info:
            await onboarding_service.get_step1(session_id)

        assert exc_info.value.status_code == 500
        assert exc_info.value.payload == {"message": "Invalid response from server"}

    async def test_update_with_empty_backend_body(self, onboarding_service, backend, session_id):
        backend.set_response("PATCH", f"/onboarding/step1/{session_id}", 200)

        result = await onboarding_service.update_step1(session_id, body={"propertyName": "Sunset"})

        assert result.body == {}


class TestStep2:

    async def test_save_sends_only_new_files(self, onboarding_service, backend, factory, session_id):
        path = f"/onboarding/step2/{session_id}"
        metadata = factory.make_image_metadata(count=3, existing=1)

        result = await onboarding_service.save_step2(
            session_id, factory.make_step2_form(metadata=metadata), "POST"
        )

        assert result.body == {}
        content = backend.last_request("POST", path).content
        assert content.count(b'name="images"') == 2

    async def test_invalid_images_never_sent(self, onboarding_service, backend, factory, session_id):
        form = factory.make_step2_form(metadata=factory.make_image_metadata(main_index=None))

        with pytest.raises(OnboardingValidationError):
            await onboarding_service.save_step2(session_id, form, "PATCH")

        assert backend.requests == []


class TestStep3:

    async def test_empty_facilities(self, onboarding_service, backend, factory, session_id):
        with pytest.raises(OnboardingValidationError) as exc_info:
            await onboarding_service.save_step3(
                session_id, factory.make_invalid_step3_request_empty(), "POST"
            )

        assert exc_info.value.status_code == 400
        assert exc_info.value.payload == {"error": "At least one facility (default or custom) is required"}
        assert backend.requests == []

    async def test_save_forwards_json(self, onboarding_service, backend, factory, session_id):
        path = f"/onboarding/step3/{session_id}"

        await onboarding_service.save_step3(session_id, factory.make_step3_request(), "PATCH")

        sent = backend.json_body(backend.last_request("PATCH", path))
        assert sent == {"facilityIds": [1, 4], "customFacilities": [{"name": "Rooftop yoga"}]}

    async def test_missing_step3_defaults(self, onboarding_service, backend, session_id):
        backend.set_response("GET", f"/onboarding/step3/{session_id}", 404, {"message": "not found"})

        result = await onboarding_service.get_step3(session_id)

        assert result.body == {"facilityIds": [], "customFacilities": []}

    async def test_backend_failure_passed_through(self, onboarding_service, backend, factory, session_id):
        backend.set_response("POST", f"/onboarding/step3/{session_id}", 409, {"message": "locked"})

        result = await onboarding_service.save_step3(session_id, factory.make_step3_request(), "POST")

        assert result.status_code == 409
        assert result.body == {"message": "locked"}


class TestStep4:

    async def test_submit_returns_201(self, onboarding_service, backend, factory, session_id):
        backend.set_response("POST", f"/onboarding/step4/{session_id}", json_data={"saved": 2})

        result = await onboarding_service.save_step4(session_id, factory.make_step4_request(2), "POST")

        assert result.status_code == 201
        assert result.body == {"message": "Step 4 submitted successfully", "data": {"saved": 2}}

    async def test_update_returns_200(self, onboarding_service, backend, factory, session_id):
        backend.set_response("PATCH", f"/onboarding/step4/{session_id}", json_data={"saved": 1})

        result = await onboarding_service.save_step4(session_id, factory.make_step4_request(1), "PATCH")

        assert result.status_code == 200
        assert result.body["message"] == "Step 4 updated successfully"

    async def test_count_mismatch_never_sent(self, onboarding_service, backend, factory, session_id):
        body = factory.make_step4_request(2)
        body["totalRooms"] = 3

        with pytest.raises(OnboardingValidationError) as exc_info:
            await onboarding_service.save_step4(session_id, body, "POST")

        assert exc_info.value.payload == {"message": "Number of rooms must match totalRooms"}
        assert backend.requests == []

    async def test_missing_step4_defaults(self, onboarding_service, backend, session_id):
        backend.set_response("GET", f"/onboarding/step4/{session_id}", 404, {})

        result = await onboarding_service.get_step4(session_id)

        assert result.body == {"totalRooms": 1, "rooms": []}


class TestFinalize:

    async def test_finalize(self, onboarding_service, backend, factory, session_id):
        backend.set_response("POST", f"/onboarding/finalize/{session_id}", json_data={"homestayId": 12})

        result = await onboarding_service.finalize(session_id, factory.make_finalize_request())

        assert result.body == {"message": "Session finalized successfully", "data": {"homestayId": 12}}
        sent = backend.json_body(backend.last_request())
        assert "mobileNumber" not in sent

    async def test_finalize_invalid(self, onboarding_service, backend, factory, session_id):
        with pytest.raises(OnboardingValidationError) as exc_info:
            await onboarding_service.finalize(session_id, factory.make_finalize_request(password="short"))

        assert exc_info.value.payload["error"] == "Invalid request data"
        assert backend.requests == []

    async def test_forward_get_disables_cache(self, onboarding_service, backend):
        backend.set_response("GET", "/onboarding/progress/abc", json_data={"step": 2})

        result = await onboarding_service.forward("GET", "progress/abc")

        assert result.body == {"step": 2}
        assert backend.last_request().headers["Cache-Control"] == "no-store"
