"""
Domain layer - Pure business logic without external dependencies.
"""

from .compatibility import BookingSelection, SelectionChange, eligible_staff, is_staff_eligible
from .durations import resolve_duration
from .models import (
    BlockedPeriod,
    BookingStatus,
    BreakInterval,
    Business,
    DayWindow,
    ExistingBooking,
    Service,
    StaffMember,
    TimeRange,
    TimeSlot,
    WeeklySchedule,
)
from .request import BookingRequest
from .schedule import is_date_disabled, resolve_day_window, weekday_name
from .slot_calculator import SlotCalculator

__all__ = [
    "BlockedPeriod",
    "BookingRequest",
    "BookingSelection",
    "BookingStatus",
    "BreakInterval",
    "Business",
    "DayWindow",
    "ExistingBooking",
    "SelectionChange",
    "Service",
    "SlotCalculator",
    "StaffMember",
    "TimeRange",
    "TimeSlot",
    "WeeklySchedule",
    "eligible_staff",
    "is_date_disabled",
    "is_staff_eligible",
    "resolve_day_window",
    "resolve_duration",
    "weekday_name",
]
