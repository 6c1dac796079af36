#!/usr/bin/env python3
"""Payment provider configuration (Stripe, Khalti, eSewa)"""
import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class PaymentConfig:
    """Payment provider credentials and endpoints"""

    # Stripe
    stripe_secret_key: Optional[str] = None

    # Khalti
    khalti_secret_key: Optional[str] = None
    khalti_initiate_url: str = "https://dev.khalti.com/api/v2/epayment/initiate/"

    # eSewa ePay v2 (defaults are the public UAT values)
    esewa_secret_key: Optional[str] = None
    esewa_product_code: str = "EPAYTEST"
    esewa_payment_url: str = "https://rc-epay.esewa.com.np/api/epay/main/v2/form"
    esewa_status_url: str = "https://rc.esewa.com.np/api/epay/transaction/status/"

    @classmethod
    def from_env(cls) -> 'PaymentConfig':
        return cls(
            stripe_secret_key=os.getenv("STRIPE_SECRET_KEY"),
            khalti_secret_key=os.getenv("KHALTI_SECRET_KEY"),
            khalti_initiate_url=os.getenv(
                "KHALTI_INITIATE_URL", "https://dev.khalti.com/api/v2/epayment/initiate/"
            ),
            esewa_secret_key=os.getenv("ESEWA_SECRET_KEY"),
            esewa_product_code=os.getenv("ESEWA_PRODUCT_CODE", "EPAYTEST"),
            esewa_payment_url=os.getenv(
                "ESEWA_PAYMENT_URL", "https://rc-epay.esewa.com.np/api/epay/main/v2/form"
            ),
            esewa_status_url=os.getenv(
                "ESEWA_STATUS_URL", "https://rc.esewa.com.np/api/epay/transaction/status/"
            ),
        )
