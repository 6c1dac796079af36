"""
Payment Service - Business Logic

Starts and verifies payments with Stripe, Khalti and eSewa. A verified
payment is confirmed on the booking backend; the caller's access token is
attached only for signed-in bookings.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx
import stripe

from core.backend_client import read_json
from core.config import PaymentConfig
from core.relay import RelayResult
from services.booking_service import BookingService, ConfirmPaymentError

from . import esewa
from .models import (
    STRIPE_MIN_AMOUNT,
    KHALTI_COMPLETED,
    ESEWA_COMPLETE,
    NPR,
    StripeCheckoutRequest,
    StripeVerifyRequest,
    KhaltiInitiateRequest,
    KhaltiVerifyRequest,
    KhaltiLookup,
    EsewaInitiateRequest,
    EsewaVerifyRequest,
)
from .protocols import (
    PaymentError,
    PaymentNotConfiguredError,
    PaymentNotCompletedError,
    InvalidSignatureError,
)

logger = logging.getLogger(__name__)


def _as_dict(body: Any) -> Dict[str, Any]:
    return body if isinstance(body, dict) else {}


class PaymentService:
    """Payment provider business logic"""

    def __init__(
        self,
        bookings: BookingService,
        config: Optional[PaymentConfig] = None,
        provider_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        初始化支付服务

        Args:
            bookings: 确认支付所用的预订服务
            config: 支付提供商凭据
            provider_client: 调用 Khalti / eSewa 的 HTTP 客户端
        """
        self.bookings = bookings
        self.config = config or PaymentConfig()
        self.provider_client = provider_client or httpx.AsyncClient(timeout=10.0)

        # 初始化Stripe
        if self.config.stripe_secret_key:
            stripe.api_key = self.config.stripe_secret_key
            if self.config.stripe_secret_key.startswith("sk_test_"):
                logger.info("Stripe TEST MODE active")
            else:
                logger.warning("Stripe LIVE MODE active - processing REAL transactions")
        else:
            logger.warning("No Stripe API key configured - Stripe checkout will fail")

    async def _confirm(
        self,
        booking_id: Any,
        transaction_id: Any,
        metadata: Dict[str, Any],
        access_token: Optional[str],
        error_key: Optional[str] = None,
        with_details: bool = False,
    ) -> RelayResult:
        """Confirm on the backend, re-raising a refusal in the provider's error shape"""
        try:
            return await self.bookings.confirm_payment(
                booking_id, transaction_id, metadata, access_token
            )
        except ConfirmPaymentError as e:
            raise PaymentError(
                e.message,
                status_code=e.status_code,
                details=e.body if with_details else None,
                error_key=error_key,
            )

    # =============================================================================
    # Stripe
    # =============================================================================

    async def stripe_checkout(self, body: Any, origin: str) -> RelayResult:
        """Create a Stripe Checkout Session for a booking"""
        request = StripeCheckoutRequest.model_validate(_as_dict(body))
        if not request.amount or not request.currency or not request.description or not request.booking_id:
            raise PaymentError(
                "Missing required fields: amount, currency, description, or bookingId",
                details={
                    "amount": request.amount,
                    "currency": request.currency,
                    "description": request.description,
                    "bookingId": request.booking_id,
                },
            )

        amount = request.amount
        if not isinstance(amount, int) or isinstance(amount, bool) or amount < STRIPE_MIN_AMOUNT:
            raise PaymentError(
                f"Amount must be an integer and at least {STRIPE_MIN_AMOUNT} cents in USD"
            )

        metadata = request.metadata or {}
        booking_id = request.booking_id
        try:
            session = stripe.checkout.Session.create(
                payment_method_types=["card"],
                line_items=[
                    {
                        "price_data": {
                            "currency": request.currency,
                            "product_data": {"name": request.description, "metadata": metadata},
                            "unit_amount": amount,
                        },
                        "quantity": 1,
                    }
                ],
                mode="payment",
                success_url=(
                    f"{origin}/payment-success?bookingId={booking_id}"
                    "&session_id={CHECKOUT_SESSION_ID}"
                ),
                cancel_url=f"{origin}/payment-cancel?bookingId={booking_id}",
                metadata=metadata,
            )
        except stripe.StripeError as e:
            logger.error(f"Failed to create Stripe checkout session: {e}")
            raise PaymentError(
                e.user_message or str(e) or "Failed to initiate Stripe payment", status_code=500
            )

        if not getattr(session, "id", None):
            raise PaymentError("Failed to create Stripe checkout session", status_code=500)

        logger.info(f"Stripe checkout session {session.id} created for booking {booking_id}")
        return RelayResult(body={"sessionId": session.id})

    async def stripe_verify(self, body: Any, access_token: Optional[str]) -> RelayResult:
        """Check a Checkout Session is paid, then confirm the booking"""
        request = StripeVerifyRequest.model_validate(_as_dict(body))
        if not request.sessionId or not request.bookingId:
            raise PaymentError(
                "Missing sessionId or bookingId",
                details={"sessionId": request.sessionId, "bookingId": request.bookingId},
            )

        try:
            session = stripe.checkout.Session.retrieve(
                request.sessionId, expand=["payment_intent"]
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe session lookup failed for {request.sessionId}: {e}")
            raise PaymentError(
                "Failed to confirm payment",
                status_code=e.http_status or 500,
                details=str(e),
            )

        if session.payment_status != "paid":
            raise PaymentNotCompletedError(
                session.payment_status, details={"payment_status": session.payment_status}
            )

        intent = session.payment_intent
        payment_intent_id = intent if isinstance(intent, str) else getattr(intent, "id", None)
        if not payment_intent_id:
            raise PaymentError(
                "No Payment Intent found for this session",
                details={"sessionId": request.sessionId},
            )

        metadata = dict(session.metadata or {})
        return await self._confirm(
            request.bookingId, payment_intent_id, metadata, access_token, with_details=True
        )

    # =============================================================================
    # Khalti
    # =============================================================================

    def _khalti_headers(self, error_key: Optional[str] = None) -> Dict[str, str]:
        if not self.config.khalti_secret_key:
            raise PaymentNotConfiguredError("Khalti", error_key=error_key)
        return {"Authorization": f"Key {self.config.khalti_secret_key}"}

    async def khalti_initiate(self, body: Any, origin: str) -> RelayResult:
        """Start a Khalti ePayment; returns {pidx, payment_url, ...}"""
        request = KhaltiInitiateRequest.model_validate(_as_dict(body))
        payload = {
            "return_url": f"{origin}/payment-callback",
            "website_url": origin,
            **request.model_dump(exclude_none=True),
        }
        response = await self.provider_client.post(
            self.config.khalti_initiate_url, json=payload, headers=self._khalti_headers()
        )
        data = read_json(response)
        if not response.is_success:
            data = _as_dict(data)
            logger.error(f"Khalti initiate failed ({response.status_code}): {data}")
            if data.get("error_key") == "validation_error":
                message = "Invalid payment details"
            else:
                message = data.get("message") or "Failed to initiate Khalti payment"
            raise PaymentError(message, status_code=response.status_code)

        logger.info(f"Khalti payment initiated for order {request.purchase_order_id}")
        return RelayResult(body=data if data is not None else {})

    async def khalti_verify(self, body: Any, access_token: Optional[str]) -> RelayResult:
        """Look up a Khalti payment by pidx and confirm the booking when Completed"""
        request = KhaltiVerifyRequest.model_validate(_as_dict(body))
        if not request.pidx or not request.bookingId:
            raise PaymentError("Missing pidx or bookingId", error_key="validation_error")

        headers = self._khalti_headers(error_key="server_error")
        lookup_url = self.config.khalti_initiate_url.replace("initiate", "lookup")
        response = await self.provider_client.post(
            lookup_url, json={"pidx": request.pidx}, headers=headers
        )
        data = read_json(response)
        if not response.is_success:
            details = _as_dict(data)
            if response.status_code == 401:
                message = "Invalid Khalti authorization key"
            elif details.get("error_key") == "validation_error":
                message = details.get("detail") or "Invalid pidx"
            else:
                message = "Failed to verify Khalti payment"
            logger.error(f"Khalti lookup failed for {request.pidx}: {response.status_code}")
            raise PaymentError(
                message,
                status_code=response.status_code,
                details=data if data is not None else response.text,
            )

        lookup = KhaltiLookup.model_validate(_as_dict(data))
        if lookup.status != KHALTI_COMPLETED:
            raise PaymentNotCompletedError(lookup.status, error_key="payment_error")

        metadata = {
            "purchase_order_id": lookup.purchase_order_id,
            "amount": lookup.total_amount,
            "currency": NPR,
            "transaction_timestamp": lookup.transaction_ts
            or datetime.now(timezone.utc).isoformat(),
            **lookup.merchant_fields(),
        }
        return await self._confirm(
            request.bookingId,
            lookup.transaction_id or request.pidx,
            metadata,
            access_token,
            error_key="confirmation_error",
        )

    # =============================================================================
    # eSewa
    # =============================================================================

    def _esewa_secret(self) -> str:
        if not self.config.esewa_secret_key:
            raise PaymentNotConfiguredError("eSewa")
        return self.config.esewa_secret_key

    async def esewa_initiate(self, body: Any, origin: str) -> RelayResult:
        """
        Signed form fields for the eSewa payment page

        The browser posts `fields` to `payment_url`.
        """
        request = EsewaInitiateRequest.model_validate(_as_dict(body))
        if request.amount is None or request.amount <= 0:
            raise PaymentError("Missing required fields: amount")
        secret = self._esewa_secret()

        total = request.total_amount
        if total is None:
            total = (
                request.amount
                + request.tax_amount
                + request.product_service_charge
                + request.product_delivery_charge
            )
        transaction_uuid = request.transaction_uuid or str(uuid.uuid4())

        fields = {
            "amount": esewa.format_amount(request.amount),
            "tax_amount": esewa.format_amount(request.tax_amount),
            "product_service_charge": esewa.format_amount(request.product_service_charge),
            "product_delivery_charge": esewa.format_amount(request.product_delivery_charge),
            "total_amount": esewa.format_amount(total),
            "transaction_uuid": transaction_uuid,
            "product_code": self.config.esewa_product_code,
            "success_url": request.success_url or f"{origin}/payment-callback",
            "failure_url": request.failure_url or f"{origin}/payment-cancel",
            "signed_field_names": esewa.REQUEST_SIGNED_FIELDS,
        }
        fields["signature"] = esewa.sign(secret, fields)

        logger.info(f"eSewa payment prepared: {transaction_uuid}")
        return RelayResult(
            body={
                "payment_url": self.config.esewa_payment_url,
                "pidx": transaction_uuid,
                "fields": fields,
            }
        )

    async def esewa_verify(self, body: Any, access_token: Optional[str]) -> RelayResult:
        """Verify the signed success callback and the transaction status, then confirm"""
        request = EsewaVerifyRequest.model_validate(_as_dict(body))
        if not request.data or not request.bookingId:
            raise PaymentError("Missing data or bookingId")
        secret = self._esewa_secret()

        payload = esewa.decode_callback(request.data)
        if payload is None:
            raise PaymentError("Invalid eSewa response")
        if not esewa.verify_signature(secret, payload):
            logger.warning(f"eSewa signature mismatch for {payload.get('transaction_uuid')}")
            raise InvalidSignatureError()
        if payload.get("status") != ESEWA_COMPLETE:
            raise PaymentNotCompletedError(payload.get("status"))

        total_amount = str(payload.get("total_amount", "")).replace(",", "")
        response = await self.provider_client.get(
            self.config.esewa_status_url,
            params={
                "product_code": payload.get("product_code") or self.config.esewa_product_code,
                "total_amount": total_amount,
                "transaction_uuid": payload.get("transaction_uuid"),
            },
        )
        status_body = _as_dict(read_json(response))
        if not response.is_success:
            raise PaymentError(
                "Failed to verify eSewa payment",
                status_code=response.status_code,
                details=status_body or response.text,
            )
        if status_body.get("status") != ESEWA_COMPLETE:
            raise PaymentNotCompletedError(status_body.get("status"))

        metadata = {
            "transaction_uuid": payload.get("transaction_uuid"),
            "transaction_code": payload.get("transaction_code"),
            "amount": total_amount,
            "currency": NPR,
            "product_code": payload.get("product_code"),
        }
        return await self._confirm(
            request.bookingId,
            payload.get("transaction_code") or payload.get("transaction_uuid"),
            metadata,
            access_token,
        )


__all__ = ["PaymentService"]
