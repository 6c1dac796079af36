"""
Payment Service Models

Request bodies for the provider routes. Required-field checks are done
in the service so each provider keeps its own error body.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

STRIPE_MIN_AMOUNT = 50
KHALTI_COMPLETED = "Completed"
ESEWA_COMPLETE = "COMPLETE"
NPR = "NPR"


class StripeCheckoutRequest(BaseModel):
    """amount is in the smallest currency unit"""
    amount: Optional[Any] = None
    currency: Optional[str] = None
    description: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    @property
    def booking_id(self) -> Optional[Any]:
        return (self.metadata or {}).get("bookingId")


class StripeVerifyRequest(BaseModel):
    sessionId: Optional[str] = None
    bookingId: Optional[Any] = None


class KhaltiInitiateRequest(BaseModel):
    """amount is in paisa"""
    amount: Optional[Any] = None
    purchase_order_id: Optional[Any] = None
    purchase_order_name: Optional[str] = None
    customer_info: Optional[Dict[str, Any]] = None
    amount_breakdown: Optional[List[Dict[str, Any]]] = None
    product_details: Optional[List[Dict[str, Any]]] = None


class KhaltiVerifyRequest(BaseModel):
    pidx: Optional[str] = None
    bookingId: Optional[Any] = None


class KhaltiLookup(BaseModel):
    """Khalti lookup answer; merchant_* extras are kept"""
    model_config = ConfigDict(extra="allow")

    status: Optional[str] = None
    purchase_order_id: Optional[Any] = None
    total_amount: Optional[Any] = None
    transaction_ts: Optional[str] = None
    transaction_id: Optional[str] = None

    def merchant_fields(self) -> Dict[str, Any]:
        """merchant_* extras with the prefix stripped"""
        extras = self.model_extra or {}
        return {
            key[len("merchant_"):]: value
            for key, value in extras.items()
            if key.startswith("merchant_")
        }


class EsewaInitiateRequest(BaseModel):
    """Amounts are in rupees; total_amount defaults to the sum of the parts"""
    amount: Optional[float] = None
    tax_amount: float = 0
    product_service_charge: float = 0
    product_delivery_charge: float = 0
    total_amount: Optional[float] = None
    transaction_uuid: Optional[str] = None
    success_url: Optional[str] = None
    failure_url: Optional[str] = None


class EsewaVerifyRequest(BaseModel):
    """data is the base64 payload eSewa appends to the success URL"""
    data: Optional[str] = None
    bookingId: Optional[Any] = None


__all__ = [
    "STRIPE_MIN_AMOUNT",
    "KHALTI_COMPLETED",
    "ESEWA_COMPLETE",
    "NPR",
    "StripeCheckoutRequest",
    "StripeVerifyRequest",
    "KhaltiInitiateRequest",
    "KhaltiVerifyRequest",
    "KhaltiLookup",
    "EsewaInitiateRequest",
    "EsewaVerifyRequest",
]
