"""
File-backed data source for working without the booking platform.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from pendulum import Date

from ..domain.durations import DEFAULT_DURATION_MINUTES
from ..domain.exceptions import BookingApiError
from ..domain.models import BlockedPeriod, Business, ExistingBooking
from ..domain.schedule import same_calendar_day
from ..domain.slot_calculator import GRID_MINUTES
from .records import parse_blocked_periods, parse_bookings, parse_business

logger = logging.getLogger(__name__)


class SnapshotClient:
    """
    Serves business, booking and blocked-slot data from one JSON file.

    File layout mirrors the platform responses:

        {
            "business": {"id": 1, "name": "...", "operating_hours": {...},
                         "services": [...], "staff": [...]},
            "bookings": [{"appointmentDate": "...", "appointmentTime": "09:00", ...}],
            "blockedSlots": [{"date": "...", "startTime": "12:00", "endTime": "12:45"}]
        }
    """

    def __init__(
        self,
        snapshot_path: Path,
        default_duration: int = DEFAULT_DURATION_MINUTES,
        cell_minutes: int = GRID_MINUTES,
    ):
        self.snapshot_path = snapshot_path
        self.default_duration = default_duration
        self.cell_minutes = cell_minutes
        self._data = self._load_snapshot()

    def _load_snapshot(self) -> Dict[str, Any]:
        """Load the snapshot JSON file."""
        if not self.snapshot_path.exists():
            raise FileNotFoundError(f"Snapshot file not found: {self.snapshot_path}")

        try:
            with open(self.snapshot_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as exc:
            raise BookingApiError(f"Invalid JSON in {self.snapshot_path}: {exc}") from exc

        if not isinstance(data, dict) or not isinstance(data.get("business"), dict):
            raise BookingApiError("Snapshot must be an object with a 'business' record.")

        return data

    def get_business(self, business_id: str | None = None) -> Business:
        """Return the snapshot's business; the id is only checked when given."""
        try:
            business = parse_business(self._data["business"], self.default_duration)
        except ValueError as exc:
            raise BookingApiError(f"Unusable business record: {exc}") from exc

        if business_id is not None and business.id is not None and str(business_id) != business.id:
            raise BookingApiError(f"Snapshot holds business {business.id}, not {business_id}")
        return business

    def get_bookings(self, business: Business, day: Date | None = None) -> List[ExistingBooking]:
        bookings = parse_bookings(self._data.get("bookings") or [], business, self.default_duration)
        if day is not None:
            bookings = [b for b in bookings if same_calendar_day(b.date, day)]
        return bookings

    def get_blocked_periods(
        self,
        business_id: str,
        day: Date | None = None,
        staff_name: str | None = None,
    ) -> List[BlockedPeriod]:
        """Blocked periods of the snapshot; ``staff_name`` matches exactly, like the platform endpoint."""
        blocks = parse_blocked_periods(self._data.get("blockedSlots") or [], self.cell_minutes)
        if day is not None:
            blocks = [b for b in blocks if same_calendar_day(b.date, day)]
        if staff_name:
            blocks = [b for b in blocks if b.staff_name == staff_name]
        return blocks
