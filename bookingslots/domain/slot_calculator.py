"""
Core business logic for calculating bookable start times.

This is the heart of the application - pure domain logic without any
external dependencies (no API calls, no database, no I/O, no clock reads).
"""

import logging
from datetime import date as CalendarDate
from typing import Iterable, List, Sequence

from pendulum import DateTime

from .models import (
    BlockedPeriod,
    DayWindow,
    ExistingBooking,
    StaffMember,
    TimeRange,
    TimeSlot,
    WeeklySchedule,
)
from .request import BookingRequest
from .schedule import resolve_day_window, same_calendar_day

logger = logging.getLogger(__name__)

GRID_MINUTES = 15


def applies_to_selected_staff(staff_name: str | None, selected_staff: StaffMember | None) -> bool:
    """
    Staff matching rule for bookings and blocked periods.

    With no staff selected everything counts. A booking or block without a
    staff name counts for every staff member. Otherwise the names must match.
    """
    if selected_staff is None:
        return True
    if not staff_name:
        return True
    return staff_name == selected_staff.name


class SlotCalculator:
    """
    Calculates bookable start times for one date.

    Algorithm:
    1. Resolve the operating window for the date (staff override first)
    2. Build the grid of starts that let the whole service finish by closing
    3. For today, drop starts that are not after the current minute
    4. Drop starts whose full service interval overlaps a relevant booking,
       blocked period or staff break
    5. Add back the exact end of off-grid bookings (and blocks) when that
       start passes steps 2-4
    """

    def __init__(
        self,
        business_schedule: WeeklySchedule,
        grid_minutes: int = GRID_MINUTES,
        min_lead_minutes: int = 0,
        include_block_ends: bool = True,
    ):
        if grid_minutes <= 0:
            raise ValueError(f"grid_minutes must be positive, got {grid_minutes}")
        if min_lead_minutes < 0:
            raise ValueError(f"min_lead_minutes must not be negative, got {min_lead_minutes}")

        self.business_schedule = business_schedule
        self.grid_minutes = grid_minutes
        self.min_lead_minutes = min_lead_minutes
        self.include_block_ends = include_block_ends

    def find_available_slots(
        self,
        request: BookingRequest,
        bookings: Iterable[ExistingBooking],
        blocked_periods: Iterable[BlockedPeriod],
        now: DateTime,
    ) -> List[TimeSlot]:
        """
        Find all bookable start times for a booking request.

        Args:
            request: Date, selected services and optional staff member
            bookings: Existing bookings of the business (any date)
            blocked_periods: Blocked periods of the business (any date)
            now: Current local wall-clock time

        Returns:
            TimeSlot objects sorted by start time, without duplicates
        """
        day = request.date
        staff = request.selected_staff
        duration = request.total_duration_minutes

        if self._is_past_date(day, now):
            return []

        # Step 1: Resolve the operating window
        window = resolve_day_window(day, self.business_schedule, staff)
        if window.is_closed:
            logger.debug("No slots on %s: closed", day)
            return []

        # Step 2 + 3: Grid candidates inside the window, in the future
        candidates = self._generate_candidates(window, duration, day, now)

        # Step 4: Occupancy filter
        relevant_bookings = self._relevant_bookings(day, bookings, staff)
        relevant_blocks = self._relevant_blocks(day, blocked_periods, staff)
        occupied = self._occupied_ranges(relevant_bookings, relevant_blocks, staff)

        free = [start for start in candidates if self._is_free(start, duration, occupied)]

        # Step 5: Gap filling
        gap_starts = self._gap_fill_starts(
            window=window,
            duration=duration,
            day=day,
            now=now,
            bookings=relevant_bookings,
            blocks=relevant_blocks,
            occupied=occupied,
        )

        starts = sorted(set(free) | set(gap_starts))

        logger.debug(
            "%s: %d grid candidates, %d free, %d gap fills, %d occupied ranges",
            day,
            len(candidates),
            len(free),
            len(gap_starts),
            len(occupied),
        )

        return [TimeSlot(start=start, duration_minutes=duration) for start in starts]

    def available_times(
        self,
        request: BookingRequest,
        bookings: Iterable[ExistingBooking],
        blocked_periods: Iterable[BlockedPeriod],
        now: DateTime,
    ) -> List[str]:
        """Return the bookable start times as sorted ``HH:MM`` strings."""
        slots = self.find_available_slots(request, bookings, blocked_periods, now)
        return [slot.label for slot in slots]

    def _generate_candidates(
        self,
        window: DayWindow,
        duration: int,
        day: CalendarDate,
        now: DateTime,
    ) -> List[int]:
        """
        Enumerate grid-aligned starts so that the service ends by closing.

        Example (09:00 - 10:00, 30 min service):
        Result: [09:00, 09:15, 09:30]
        """
        latest_start = window.close - duration
        if latest_start < window.open:
            return []

        grid = self.grid_minutes
        first = -(-window.open // grid) * grid

        return [
            start for start in range(first, latest_start + 1, grid)
            if self._is_in_future(start, day, now)
        ]

    def _is_past_date(self, day: CalendarDate, now: DateTime) -> bool:
        return (day.year, day.month, day.day) < (now.year, now.month, now.day)

    def _is_in_future(self, start: int, day: CalendarDate, now: DateTime) -> bool:
        """Only starts strictly after the current minute (plus lead time) qualify today."""
        if not same_calendar_day(day, now):
            return True
        cutoff = now.hour * 60 + now.minute + self.min_lead_minutes
        return start > cutoff

    def _fits_window(self, start: int, duration: int, window: DayWindow) -> bool:
        return window.open <= start and start + duration <= window.close

    def _relevant_bookings(
        self,
        day: CalendarDate,
        bookings: Iterable[ExistingBooking],
        staff: StaffMember | None,
    ) -> List[ExistingBooking]:
        return [
            booking for booking in bookings
            if booking.occupies_time
            and same_calendar_day(booking.date, day)
            and applies_to_selected_staff(booking.staff_name, staff)
        ]

    def _relevant_blocks(
        self,
        day: CalendarDate,
        blocked_periods: Iterable[BlockedPeriod],
        staff: StaffMember | None,
    ) -> List[BlockedPeriod]:
        return [
            block for block in blocked_periods
            if same_calendar_day(block.date, day)
            and applies_to_selected_staff(block.staff_name, staff)
        ]

    def _occupied_ranges(
        self,
        bookings: Sequence[ExistingBooking],
        blocks: Sequence[BlockedPeriod],
        staff: StaffMember | None,
    ) -> List[TimeRange]:
        """
        Collect every interval a candidate must not overlap.

        Breaks only count when a specific staff member is selected.
        """
        occupied = [booking.as_range() for booking in bookings]
        occupied.extend(block.as_range() for block in blocks)

        if staff is not None:
            occupied.extend(break_interval.as_range() for break_interval in staff.breaks)

        return sorted(occupied, key=lambda r: r.start)

    def _is_free(self, start: int, duration: int, occupied: Sequence[TimeRange]) -> bool:
        requested = TimeRange(start=start, end=start + duration)
        return not any(requested.overlaps(busy) for busy in occupied)

    def _gap_fill_starts(
        self,
        *,
        window: DayWindow,
        duration: int,
        day: CalendarDate,
        now: DateTime,
        bookings: Sequence[ExistingBooking],
        blocks: Sequence[BlockedPeriod],
        occupied: Sequence[TimeRange],
    ) -> List[int]:
        """
        Reclaim time the grid strands after intervals that end off-grid.

        Example (booking 09:00 - 09:20, 10 min service):
        The grid offers 09:30 next; 09:20 is added as an extra start.

        Each end point is checked once against the same window, lateness
        and occupancy rules as grid starts. Added points are not chained.
        """
        end_points = {booking.end_time for booking in bookings}
        if self.include_block_ends:
            end_points.update(block.end_time for block in blocks)

        starts: List[int] = []
        for end in sorted(end_points):
            if end % self.grid_minutes == 0:
                continue
            if not self._fits_window(end, duration, window):
                continue
            if not self._is_in_future(end, day, now):
                continue
            if self._is_free(end, duration, occupied):
                starts.append(end)

        return starts
