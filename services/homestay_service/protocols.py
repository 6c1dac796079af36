"""
Homestay Service Protocols
"""

from core.errors import GatewayError


class HomestayServiceError(GatewayError):
    """Base exception for homestay errors ({error})"""
    pass


class HomestayNotFoundError(HomestayServiceError):
    status_code = 404

    def __init__(self):
        super().__init__("Homestay not found")


class InvalidDefaultsError(HomestayServiceError):
    """Backend defaults failed their shape check ({message})"""

    status_code = 400
    message_key = "message"

    def __init__(self, kind: str):
        super().__init__(f"Invalid {kind} data format")
        self.kind = kind


class UploadError(HomestayServiceError):
    status_code = 400


__all__ = [
    "HomestayServiceError",
    "HomestayNotFoundError",
    "InvalidDefaultsError",
    "UploadError",
]
