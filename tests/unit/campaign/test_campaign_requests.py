"""
Unit Tests for campaign request models

QR code format, host contact rule, review dates and rating bounds.
"""

import pytest
from pydantic import ValidationError

from core.validation import first_error_message
from services.campaign_service.models import (
    BulkHomestayRegistration,
    CampaignCreate,
    CompleteRegistration,
    GenerateQRCodes,
    HomestayRegistration,
    ReviewsQuery,
    SubmitReview,
    VerifyUser,
)
from tests.contracts.campaign.data_contract import CampaignTestDataFactory


@pytest.fixture
def factory():
    return CampaignTestDataFactory()


def _message(model, data) -> str:
    with pytest.raises(ValidationError) as exc_info:
        model.model_validate(data)
    return first_error_message(exc_info.value)


@pytest.mark.unit
class TestCampaignCreate:

    def test_valid_campaign(self, factory):
        campaign = CampaignCreate.model_validate(factory.make_campaign_create())

        assert campaign.discountPercentage == 10

    def test_short_name(self, factory):
        assert _message(CampaignCreate, factory.make_campaign_create(name="ab")) == (
            "Campaign name must be at least 3 characters"
        )

    def test_bad_start_date(self, factory):
        assert _message(CampaignCreate, factory.make_campaign_create(startDate="soon")) == (
            "Invalid start date format"
        )

    def test_discount_above_hundred(self, factory):
        with pytest.raises(ValidationError):
            CampaignCreate.model_validate(factory.make_campaign_create(discountPercentage=120))


@pytest.mark.unit
class TestGenerateQRCodes:

    @pytest.mark.parametrize(
        "count, message",
        [(0, "Must generate at least 1 QR code"), (1001, "Cannot generate more than 1000 QR codes at once")],
    )
    def test_count_bounds(self, count, message):
        assert _message(GenerateQRCodes, {"campaignId": 1, "count": count}) == message

    def test_campaign_id_positive(self):
        assert _message(GenerateQRCodes, {"campaignId": -2, "count": 5}) == (
            "Campaign ID must be a positive number"
        )


@pytest.mark.unit
class TestHomestayRegistration:

    def test_valid_registration(self, factory):
        registration = HomestayRegistration.model_validate(factory.make_homestay_registration())

        assert registration.hostEmail == "host@example.com"

    def test_qr_code_must_be_uuid(self, factory):
        assert _message(HomestayRegistration, factory.make_homestay_registration(qrCode="QR-123")) == (
            "Invalid QR code format"
        )

    def test_phone_alone_is_enough(self, factory):
        data = factory.make_homestay_registration(hostEmail=None, hostPhone="9801169431")

        assert HomestayRegistration.model_validate(data).hostPhone == "9801169431"

    def test_email_or_phone_required(self, factory):
        data = factory.make_homestay_registration(hostEmail=None)

        assert _message(HomestayRegistration, data) == "Either host email or host phone must be provided"

    def test_bulk_needs_entries(self, factory):
        data = {"campaignId": 3, "assignedBy": "Agent Rai", "homestays": []}

        assert _message(BulkHomestayRegistration, data) == "At least one homestay is required"


@pytest.mark.unit
class TestReviewFlow:

    def test_valid_review(self, factory):
        review = SubmitReview.model_validate(factory.make_review_submission())

        assert review.rating == 5

    @pytest.mark.parametrize(
        "rating, message",
        [(0, "Rating must be at least 1"), (6, "Rating must be at most 5")],
    )
    def test_rating_bounds(self, factory, rating, message):
        assert _message(SubmitReview, factory.make_review_submission(rating=rating)) == message

    def test_check_out_after_check_in(self, factory):
        data = factory.make_review_submission(checkInDate="2026-03-04", checkOutDate="2026-03-04")

        assert _message(SubmitReview, data) == "Check-out date must be after check-in date"

    def test_mixed_timezone_dates(self, factory):
        data = factory.make_review_submission(
            checkInDate="2026-03-01", checkOutDate="2026-03-02T10:00:00Z"
        )

        SubmitReview.model_validate(data)

    def test_too_many_images(self, factory):
        images = [f"https://cdn.example.com/r{i}.jpg" for i in range(6)]

        assert _message(SubmitReview, factory.make_review_submission(images=images)) == (
            "Maximum 5 images allowed"
        )

    def test_contact_type(self, factory):
        data = {"qrCode": factory.make_qr_code(), "contact": "guest@example.com", "contactType": "fax"}

        assert _message(VerifyUser, data) == "Contact type must be either email or phone"

    def test_complete_registration_password(self, factory):
        data = factory.make_complete_registration(password="short")

        assert _message(CompleteRegistration, data) == "Password must be at least 8 characters"

    def test_complete_registration_otp(self, factory):
        data = factory.make_complete_registration(code="123")

        assert _message(CompleteRegistration, data) == "OTP must be exactly 6 digits"


@pytest.mark.unit
class TestReviewsQuery:

    def test_string_booleans_parse(self):
        query = ReviewsQuery.model_validate({"isVerified": "false", "isPublished": "true", "page": "2"})

        assert query.isVerified is False
        assert query.isPublished is True
        assert query.page == 2

    def test_limit_capped(self):
        with pytest.raises(ValidationError):
            ReviewsQuery.model_validate({"limit": "500"})
