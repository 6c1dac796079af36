"""
eSewa ePay v2 signing

eSewa signs "name=value" pairs joined by commas, in the order given by
signed_field_names, with HMAC-SHA256 and base64 output.
"""

import base64
import binascii
import hashlib
import hmac
import json
from typing import Any, Dict, Optional

REQUEST_SIGNED_FIELDS = "total_amount,transaction_uuid,product_code"


def format_amount(value: float) -> str:
    """100.0 -> "100", 99.5 -> "99.5"; the signed text must match the posted field"""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def signature_message(fields: Dict[str, Any], signed_field_names: str) -> str:
    return ",".join(
        f"{name}={fields.get(name, '')}" for name in signed_field_names.split(",") if name
    )


def sign(secret_key: str, fields: Dict[str, Any], signed_field_names: str = REQUEST_SIGNED_FIELDS) -> str:
    digest = hmac.new(
        secret_key.encode("utf-8"),
        signature_message(fields, signed_field_names).encode("utf-8"),
        hashlib.sha256,
    ).digest()
    return base64.b64encode(digest).decode("ascii")


def verify_signature(secret_key: str, payload: Dict[str, Any]) -> bool:
    """Check the signature eSewa put on its callback payload"""
    signed_field_names = payload.get("signed_field_names")
    signature = payload.get("signature")
    if not signed_field_names or not signature:
        return False
    expected = sign(secret_key, payload, signed_field_names)
    return hmac.compare_digest(expected, str(signature))


def decode_callback(data: str) -> Optional[Dict[str, Any]]:
    """Base64 JSON from the success redirect; None when it cannot be read"""
    try:
        decoded = base64.b64decode(data, validate=False)
        payload = json.loads(decoded)
    except (binascii.Error, ValueError):
        return None
    return payload if isinstance(payload, dict) else None


__all__ = [
    "REQUEST_SIGNED_FIELDS",
    "format_amount",
    "signature_message",
    "sign",
    "verify_signature",
    "decode_callback",
]
