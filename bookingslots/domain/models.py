"""
Domain models for the availability engine.

All wall-clock values are naive local times held as minutes since midnight.
``HH:MM`` strings only appear at the edges (parsing input, formatting output).
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple

from pendulum import Date

from .exceptions import ScheduleFormatError

MINUTES_PER_DAY = 24 * 60

# Index matches ``date.weekday()`` (0=Monday, 6=Sunday)
WEEKDAY_NAMES = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


def parse_time_of_day(value: str) -> int:
    """
    Parse a zero-padded ``HH:MM`` string into minutes since midnight.

    Raises:
        ScheduleFormatError: If the value is not a valid wall-clock time
    """
    if not isinstance(value, str):
        raise ScheduleFormatError(f"Time of day must be a 'HH:MM' string, got {value!r}")

    parts = value.strip().split(":")
    if len(parts) != 2 or not all(part.isdigit() for part in parts):
        raise ScheduleFormatError(f"Invalid time of day: {value!r}")

    hours, minutes = int(parts[0]), int(parts[1])
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        raise ScheduleFormatError(f"Time of day out of range: {value!r}")

    return hours * 60 + minutes


def format_time_of_day(minutes: int) -> str:
    """Format minutes since midnight as ``HH:MM``."""
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise ValueError(f"Minutes must be between 0 and {MINUTES_PER_DAY - 1}, got {minutes}")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


@dataclass(frozen=True)
class TimeRange:
    """
    Half-open range ``[start, end)`` of minutes since midnight.

    Invariant: start must be before end. ``end`` may run past midnight for
    bookings that spill over the day boundary.
    """
    start: int
    end: int

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start minute {self.start} must be before end minute {self.end}")

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return self.end - self.start

    def overlaps(self, other: "TimeRange") -> bool:
        """Check if this range overlaps with another."""
        return self.start < other.end and self.end > other.start

    def __str__(self) -> str:
        end = self.end % MINUTES_PER_DAY
        return f"{format_time_of_day(self.start)} - {format_time_of_day(end)}"


@dataclass(frozen=True)
class DayWindow:
    """
    Opening window for one weekday.

    Invariant: an open window has both ``open`` and ``close`` with open < close.
    ``close`` may be 1440: a window that runs until midnight.
    """
    is_closed: bool
    open: Optional[int] = None
    close: Optional[int] = None

    def __post_init__(self):
        if self.is_closed:
            return
        if self.open is None or self.close is None:
            raise ValueError("An open day window needs both open and close times")
        if not 0 <= self.open < MINUTES_PER_DAY or not 0 < self.close <= MINUTES_PER_DAY:
            raise ValueError(f"Window {self.open}-{self.close} is outside the day")
        if self.open >= self.close:
            raise ValueError(
                f"Opening time {format_time_of_day(self.open)} must be before "
                f"closing time {format_time_of_day(self.close % MINUTES_PER_DAY)}"
            )

    @classmethod
    def closed(cls) -> "DayWindow":
        return cls(is_closed=True)

    @classmethod
    def from_hours(cls, open_time: str, close_time: str) -> "DayWindow":
        """
        Build an open window from two ``HH:MM`` strings.

        A closing time of ``00:00`` is midnight at the end of the day.
        """
        close = parse_time_of_day(close_time)
        return cls(
            is_closed=False,
            open=parse_time_of_day(open_time),
            close=close or MINUTES_PER_DAY,
        )

    @property
    def is_open(self) -> bool:
        return not self.is_closed

    def as_range(self) -> TimeRange | None:
        if self.is_closed:
            return None
        return TimeRange(start=self.open, end=self.close)

    def __str__(self) -> str:
        if self.is_closed:
            return "closed"
        return f"{format_time_of_day(self.open)} - {format_time_of_day(self.close % MINUTES_PER_DAY)}"


@dataclass(frozen=True)
class WeeklySchedule:
    """
    Weekday name -> DayWindow.

    ``unset_days`` holds weekdays that were present in the source data but
    carried blank hours. For a staff override this means "does not work that
    day" for date selection, while slot generation falls back to the
    business window.
    """
    days: Dict[str, DayWindow] = field(default_factory=dict)
    unset_days: FrozenSet[str] = frozenset()

    def window_for(self, weekday: str) -> DayWindow | None:
        return self.days.get(weekday)

    def is_unset(self, weekday: str) -> bool:
        return weekday in self.unset_days


@dataclass(frozen=True)
class BreakInterval:
    """A recurring daily break owned by one staff member."""
    start: int
    end: int

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(
                f"Break start {format_time_of_day(self.start)} must be before "
                f"break end {format_time_of_day(self.end)}"
            )

    def as_range(self) -> TimeRange:
        return TimeRange(start=self.start, end=self.end)


@dataclass(frozen=True)
class Service:
    """A bookable service offered by a business."""
    name: str
    price: Decimal
    duration_label: str
    duration_minutes: int

    def __post_init__(self):
        if self.price < 0:
            raise ValueError(f"Service price must not be negative, got {self.price}")
        if self.duration_minutes <= 0:
            raise ValueError(f"Service duration must be positive, got {self.duration_minutes}")


@dataclass(frozen=True)
class StaffMember:
    """
    A staff member of a business.

    An empty ``assigned_service_names`` means the member handles every service.
    """
    name: str
    is_active: bool = True
    assigned_service_names: FrozenSet[str] = frozenset()
    operating_schedule: Optional[WeeklySchedule] = None
    breaks: Tuple[BreakInterval, ...] = ()

    @property
    def handles_all_services(self) -> bool:
        return not self.assigned_service_names


class BookingStatus(str, Enum):
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


@dataclass(frozen=True)
class ExistingBooking:
    """An already placed booking, read-only input to the engine."""
    date: Date
    start_time: int
    duration_minutes: int
    staff_name: Optional[str] = None
    status: BookingStatus = BookingStatus.PENDING

    def __post_init__(self):
        if self.duration_minutes <= 0:
            raise ValueError(f"Booking duration must be positive, got {self.duration_minutes}")

    @property
    def occupies_time(self) -> bool:
        return self.status != BookingStatus.CANCELLED

    @property
    def end_time(self) -> int:
        return self.start_time + self.duration_minutes

    def as_range(self) -> TimeRange:
        return TimeRange(start=self.start_time, end=self.end_time)


@dataclass(frozen=True)
class BlockedPeriod:
    """A period the business blocked for bookings, optionally for one staff member."""
    date: Date
    start_time: int
    end_time: int
    staff_name: Optional[str] = None

    def __post_init__(self):
        if self.start_time >= self.end_time:
            raise ValueError(
                f"Blocked period start {self.start_time} must be before end {self.end_time}"
            )

    def as_range(self) -> TimeRange:
        return TimeRange(start=self.start_time, end=self.end_time)


@dataclass(frozen=True)
class Business:
    """Snapshot of a business record as consumed by the engine."""
    name: str
    schedule: WeeklySchedule
    services: Tuple[Service, ...] = ()
    staff: Tuple[StaffMember, ...] = ()
    id: Optional[str] = None

    def find_service(self, name: str) -> Service | None:
        for service in self.services:
            if service.name == name:
                return service
        return None

    def find_staff(self, name: str) -> StaffMember | None:
        for member in self.staff:
            if member.name == name:
                return member
        return None


@dataclass(frozen=True)
class TimeSlot:
    """
    A bookable start time together with the duration it was computed for.
    """
    start: int
    duration_minutes: int

    @property
    def label(self) -> str:
        """The ``HH:MM`` start time handed to callers."""
        return format_time_of_day(self.start)

    @property
    def time_range(self) -> TimeRange:
        return TimeRange(start=self.start, end=self.start + self.duration_minutes)

    def format_display(self) -> str:
        """
        Format the slot for display.
        Format: HH:MM – HH:MM (N min)
        """
        end = (self.start + self.duration_minutes) % MINUTES_PER_DAY
        return f"{self.label} – {format_time_of_day(end)} ({self.duration_minutes} min)"
