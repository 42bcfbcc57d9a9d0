"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .availability import AvailabilityResult, AvailabilityService, BookingDataClientProtocol
from .booking_payload import BookingPayload, CustomerContact, build_booking_payload

__all__ = [
    "AvailabilityResult",
    "AvailabilityService",
    "BookingDataClientProtocol",
    "BookingPayload",
    "CustomerContact",
    "build_booking_payload",
]
