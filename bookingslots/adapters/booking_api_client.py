"""
HTTP client for the booking platform's business, booking and blocked-slot endpoints.
"""

import logging
from typing import Any, Dict, List, Optional

import requests
from pendulum import Date

from ..domain.durations import DEFAULT_DURATION_MINUTES
from ..domain.exceptions import BookingApiError
from ..domain.models import BlockedPeriod, Business, ExistingBooking
from ..domain.slot_calculator import GRID_MINUTES
from .records import parse_blocked_periods, parse_bookings, parse_business

logger = logging.getLogger(__name__)


class BookingApiClient:
    """
    Read-only client for the data the availability engine consumes.

    Every response is converted into domain models at this boundary. The
    data is a snapshot: other users may book the same slot right after it
    was fetched.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
        default_duration: int = DEFAULT_DURATION_MINUTES,
        cell_minutes: int = GRID_MINUTES,
    ):
        """
        Initialize the API client.

        Args:
            base_url: Platform root, e.g. ``https://example.com``
            timeout: Per-request timeout in seconds
            session: Optional pre-configured requests session
            default_duration: Fallback for unusable service durations
            cell_minutes: Size of one blocked-slot cell
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.default_duration = default_duration
        self.cell_minutes = cell_minutes

    def get_business(self, business_id: str) -> Business:
        """Fetch a business record by id."""
        data = self._get_json(f"/api/businesses/{business_id}")
        return self._to_business(data)

    def get_business_by_slug(self, slug: str) -> Business:
        """Fetch a business record by its public slug."""
        data = self._get_json(f"/api/businesses/slug/{slug}")
        return self._to_business(data)

    def get_bookings(self, business: Business, day: Date | None = None) -> List[ExistingBooking]:
        """
        Fetch the bookings of a business, optionally for a single date.

        The business is needed to fill in durations of older bookings that
        were stored without one.
        """
        params: Dict[str, Any] = {"businessId": business.id}
        if day is not None:
            params["date"] = day.isoformat()

        data = self._get_json("/api/bookings", params=params)
        return parse_bookings(self._as_list(data, "bookings"), business, self.default_duration)

    def get_blocked_periods(
        self,
        business_id: str,
        day: Date | None = None,
        staff_name: str | None = None,
    ) -> List[BlockedPeriod]:
        """
        Fetch blocked periods of a business, optionally filtered by date and staff.

        The platform matches ``staffName`` exactly, so a staff filter leaves
        out business-wide blocks. Availability queries fetch without it.
        """
        params: Dict[str, Any] = {"businessId": business_id}
        if day is not None:
            params["date"] = day.isoformat()
        if staff_name:
            params["staffName"] = staff_name

        data = self._get_json("/api/blocked-slots", params=params)
        return parse_blocked_periods(self._as_list(data, "blocked slots"), self.cell_minutes)

    def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug("GET %s params=%s", url, params)

        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()

        except requests.exceptions.RequestException as e:
            raise BookingApiError(f"Request to {url} failed: {e}") from e

        except ValueError as e:
            raise BookingApiError(f"Response from {url} is not valid JSON: {e}") from e

    def _to_business(self, data: Any) -> Business:
        if not isinstance(data, dict):
            raise BookingApiError("Business response must be a JSON object")
        try:
            return parse_business(data, self.default_duration)
        except ValueError as e:
            raise BookingApiError(f"Unusable business record: {e}") from e

    @staticmethod
    def _as_list(data: Any, what: str) -> List[Any]:
        if not isinstance(data, list):
            raise BookingApiError(f"Expected a JSON list of {what}, got {type(data).__name__}")
        return data
