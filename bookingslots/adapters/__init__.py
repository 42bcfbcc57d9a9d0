"""
Adapters layer - Booking platform data sources.
"""

from .booking_api_client import BookingApiClient
from .snapshot_client import SnapshotClient

__all__ = ["BookingApiClient", "SnapshotClient"]
