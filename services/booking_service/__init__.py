"""
Booking Service

Availability checks, guest bookings, payment confirmation and community
(multi-homestay) bookings.
"""

from .booking_service import BookingService
from .protocols import BookingServiceError, ConfirmPaymentError

__all__ = ["BookingService", "BookingServiceError", "ConfirmPaymentError"]
