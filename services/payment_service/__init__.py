"""
Payment Service

Stripe Checkout, Khalti and eSewa payment flows. Each verified payment
is confirmed against the booking backend.
"""

from .payment_service import PaymentService

__all__ = ["PaymentService"]
