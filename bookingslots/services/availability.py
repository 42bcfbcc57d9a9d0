"""
Application services for finding bookable appointment times.

The service coordinates fetching business data, bookings and blocked periods
via a data client adapter and delegates the actual availability calculation
to the domain-level ``SlotCalculator``. This keeps the CLI thin and improves
testability by allowing the data source to be swapped via a simple protocol.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Protocol, Sequence, Tuple

import pendulum
from pendulum import Date, DateTime

from ..config import EngineSettings
from ..domain.compatibility import BookingSelection, eligible_staff
from ..domain.exceptions import UnknownSelectionError
from ..domain.models import (
    BlockedPeriod,
    Business,
    ExistingBooking,
    Service,
    StaffMember,
    TimeSlot,
    parse_time_of_day,
)
from ..domain.request import BookingRequest
from ..domain.schedule import is_date_disabled
from ..domain.slot_calculator import SlotCalculator

logger = logging.getLogger(__name__)


class BookingDataClientProtocol(Protocol):
    """Protocol describing the data client behaviour needed by the service."""

    def get_business(self, business_id: str) -> Business:
        """Return the business record."""

    def get_bookings(self, business: Business, day: Date | None = None) -> List[ExistingBooking]:
        """Return bookings of the business."""

    def get_blocked_periods(
        self,
        business_id: str,
        day: Date | None = None,
        staff_name: str | None = None,
    ) -> List[BlockedPeriod]:
        """Return blocked periods of the business."""


@dataclass(frozen=True)
class AvailabilityResult:
    """Bookable slots for a request, plus any selection warnings raised on the way."""
    request: BookingRequest
    slots: Tuple[TimeSlot, ...]
    warnings: Tuple[str, ...] = ()

    @property
    def times(self) -> List[str]:
        return [slot.label for slot in self.slots]


class AvailabilityService:
    """
    Orchestrates data retrieval and slot calculation.

    The displayed slots are a best-effort snapshot. Whoever creates the
    booking must re-check with ``is_slot_available`` right before writing.
    """

    def __init__(
        self,
        data_client: BookingDataClientProtocol,
        settings: EngineSettings | None = None,
    ) -> None:
        self._data_client = data_client
        self._settings = settings or EngineSettings()

    def find_slots(
        self,
        *,
        business_id: str,
        day: Date,
        service_names: Sequence[str],
        staff_name: str | None = None,
        now: DateTime,
    ) -> AvailabilityResult:
        """
        Fetch business data, bookings and blocks, and compute bookable slots.
        """
        business = self._data_client.get_business(business_id)
        return self.find_slots_for_business(
            business,
            day=day,
            service_names=service_names,
            staff_name=staff_name,
            now=now,
        )

    def find_slots_for_business(
        self,
        business: Business,
        *,
        day: Date,
        service_names: Sequence[str],
        staff_name: str | None = None,
        now: DateTime,
    ) -> AvailabilityResult:
        """Compute bookable slots for an already fetched business."""
        request, warnings = self.build_request(business, day, service_names, staff_name)

        # Not filtered by staff: business-wide blocks must reach the calculator
        bookings = self._data_client.get_bookings(business, day)
        blocked = self._data_client.get_blocked_periods(business.id or "", day)

        slots = self.calculate_slots(business, request, bookings, blocked, now)
        return AvailabilityResult(request=request, slots=tuple(slots), warnings=warnings)

    def calculate_slots(
        self,
        business: Business,
        request: BookingRequest,
        bookings: Sequence[ExistingBooking],
        blocked_periods: Sequence[BlockedPeriod],
        now: DateTime,
    ) -> List[TimeSlot]:
        """Calculate bookable slots from already fetched data."""
        calculator = self._build_calculator(business)
        return calculator.find_available_slots(request, bookings, blocked_periods, now)

    def build_request(
        self,
        business: Business,
        day: Date,
        service_names: Sequence[str],
        staff_name: str | None = None,
    ) -> Tuple[BookingRequest, Tuple[str, ...]]:
        """
        Resolve names into a consistent BookingRequest.

        The staff choice is applied after the services, so a staff member
        who cannot perform the services is dropped with a warning.

        Raises:
            UnknownSelectionError: If a service or staff name is not on the business
        """
        services = self._resolve_services(business, service_names)
        staff = self._resolve_staff(business, staff_name) if staff_name else None

        change = BookingSelection(staff=staff).with_services(services)

        for warning in change.warnings:
            logger.warning(warning)

        selection = change.selection
        request = BookingRequest(
            date=day,
            selected_services=selection.services,
            selected_staff=selection.staff,
            default_duration_minutes=self._settings.default_duration_minutes,
        )
        return request, change.warnings

    def eligible_staff(self, business: Business, service_names: Sequence[str]) -> List[StaffMember]:
        """Active staff members who can perform all the named services."""
        services = self._resolve_services(business, service_names)
        return eligible_staff(business.staff, services)

    def bookable_dates(
        self,
        business: Business,
        start: Date,
        days: int,
        today: Date,
        staff_name: str | None = None,
    ) -> List[Date]:
        """List dates in ``[start, start + days)`` that can be picked in the calendar."""
        staff = self._resolve_staff(business, staff_name) if staff_name else None
        current = pendulum.date(start.year, start.month, start.day)

        dates: List[Date] = []
        for _ in range(days):
            if not is_date_disabled(current, today, business.schedule, staff):
                dates.append(current)
            current = current.add(days=1)

        return dates

    def is_slot_available(
        self,
        *,
        business_id: str,
        day: Date,
        start_time: str,
        service_names: Sequence[str],
        staff_name: str | None = None,
        now: DateTime,
    ) -> bool:
        """
        Re-check a chosen start time against freshly fetched data.

        Returns False when the date is not selectable, when the staff choice
        had to be dropped, or when the time is no longer offered.
        """
        start = parse_time_of_day(start_time)
        business = self._data_client.get_business(business_id)
        result = self.find_slots_for_business(
            business,
            day=day,
            service_names=service_names,
            staff_name=staff_name,
            now=now,
        )

        if result.warnings:
            return False

        if is_date_disabled(day, now.date(), business.schedule, result.request.selected_staff):
            return False

        return any(slot.start == start for slot in result.slots)

    def _build_calculator(self, business: Business) -> SlotCalculator:
        return SlotCalculator(
            business_schedule=business.schedule,
            grid_minutes=self._settings.grid_minutes,
            min_lead_minutes=self._settings.min_lead_minutes,
            include_block_ends=self._settings.include_block_ends_in_gap_fill,
        )

    @staticmethod
    def _resolve_services(business: Business, service_names: Sequence[str]) -> List[Service]:
        services: List[Service] = []
        missing: List[str] = []

        for name in service_names:
            service = business.find_service(name)
            if service is None:
                missing.append(name)
            elif service not in services:
                services.append(service)

        if missing:
            raise UnknownSelectionError(
                f"Unknown service(s): {', '.join(missing)}. "
                f"Available: {', '.join(s.name for s in business.services) or 'none'}"
            )

        return services

    @staticmethod
    def _resolve_staff(business: Business, staff_name: str) -> StaffMember:
        staff = business.find_staff(staff_name)
        if staff is None:
            raise UnknownSelectionError(f"Unknown staff member: {staff_name}")
        return staff
