"""
Wire records for the business, booking and blocked-slot JSON contracts.

Collaborator payloads are validated here once and converted into domain
models. Bad entries are logged and degraded (closed day, skipped break,
skipped booking) so the engine never has to guess field shapes.
"""

from __future__ import annotations

import logging
from datetime import date as CalendarDate
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Union

import pendulum
from pendulum import Date
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..domain.durations import DEFAULT_DURATION_MINUTES, resolve_duration
from ..domain.models import (
    WEEKDAY_NAMES,
    BlockedPeriod,
    BookingStatus,
    BreakInterval,
    Business,
    DayWindow,
    ExistingBooking,
    Service,
    StaffMember,
    WeeklySchedule,
    parse_time_of_day,
)
from ..domain.slot_calculator import GRID_MINUTES

logger = logging.getLogger(__name__)


def parse_calendar_date(value: Union[str, CalendarDate]) -> Date:
    """
    Reduce a date, datetime or ISO string to its calendar components.

    Timestamps keep the date exactly as written; no timezone conversion.
    """
    if isinstance(value, CalendarDate):
        return pendulum.date(value.year, value.month, value.day)

    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Expected an ISO date, got {value!r}")

    parsed = pendulum.parse(value.strip(), exact=True)
    if not isinstance(parsed, CalendarDate):
        raise ValueError(f"Expected an ISO date, got {value!r}")
    return pendulum.date(parsed.year, parsed.month, parsed.day)


class WireModel(BaseModel):
    """Base for collaborator records: unknown fields are ignored."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class DayHoursRecord(WireModel):
    open: Optional[str] = None
    close: Optional[str] = None
    closed: bool = False

    def to_window(self) -> DayWindow | None:
        """Convert to a DayWindow, or None when the hours are blank or unusable."""
        if self.closed:
            return DayWindow.closed()
        if not self.open or not self.close:
            return None
        try:
            return DayWindow.from_hours(self.open, self.close)
        except ValueError as exc:
            logger.warning("Ignoring day hours %s-%s: %s", self.open, self.close, exc)
            return None


def parse_weekly_schedule(raw: Optional[Mapping[str, Any]]) -> WeeklySchedule:
    """
    Build a WeeklySchedule from ``{weekday: {open, close, closed}}``.

    Weekdays missing from the mapping are absent; weekdays present with
    blank or malformed hours are recorded as unset.
    """
    if not raw:
        return WeeklySchedule()

    entries = {str(key).strip().lower(): value for key, value in raw.items()}
    days: Dict[str, DayWindow] = {}
    unset = set()

    for weekday in WEEKDAY_NAMES:
        if weekday not in entries:
            continue

        entry = entries[weekday]
        window = None
        if entry:
            try:
                window = DayHoursRecord.model_validate(entry).to_window()
            except ValidationError as exc:
                logger.warning("Malformed hours for %s: %s", weekday, exc.errors()[0]["msg"])

        if window is None:
            unset.add(weekday)
        else:
            days[weekday] = window

    return WeeklySchedule(days=days, unset_days=frozenset(unset))


class ServiceRecord(WireModel):
    name: str
    price: Optional[Decimal] = None
    duration: Union[int, float, str, None] = None

    def to_domain(self, default_duration: int = DEFAULT_DURATION_MINUTES) -> Service:
        minutes = resolve_duration(self.duration, default=default_duration)
        label = self.duration if isinstance(self.duration, str) else f"{minutes} min"
        return Service(
            name=self.name,
            price=self.price if self.price is not None else Decimal("0"),
            duration_label=label,
            duration_minutes=minutes,
        )


class BreakTimeRecord(WireModel):
    start_time: Optional[str] = Field(default=None, validation_alias=AliasChoices("startTime", "start_time"))
    end_time: Optional[str] = Field(default=None, validation_alias=AliasChoices("endTime", "end_time"))

    def to_domain(self) -> BreakInterval | None:
        if not self.start_time or not self.end_time:
            return None
        try:
            return BreakInterval(
                start=parse_time_of_day(self.start_time),
                end=parse_time_of_day(self.end_time),
            )
        except ValueError as exc:
            logger.warning("Ignoring break %s-%s: %s", self.start_time, self.end_time, exc)
            return None


class StaffRecord(WireModel):
    name: str
    is_active: bool = Field(default=True, validation_alias=AliasChoices("isActive", "is_active"))
    services: List[str] = Field(default_factory=list)
    operating_hours: Optional[Dict[str, Any]] = Field(
        default=None,
        validation_alias=AliasChoices("operatingHours", "operating_hours"),
    )
    break_times: List[Any] = Field(
        default_factory=list,
        validation_alias=AliasChoices("breakTimes", "break_times"),
    )

    @field_validator("services", "break_times", mode="before")
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("services", mode="before")
    @classmethod
    def service_names(cls, value: Any) -> Any:
        """Entries are stored either as names or as ``{name, ...}`` service objects."""
        if not isinstance(value, list):
            return value
        names = []
        for entry in value:
            if isinstance(entry, dict):
                entry = entry.get("name")
                if not entry:
                    continue
            names.append(entry)
        return names

    def to_domain(self) -> StaffMember:
        breaks: List[BreakInterval] = []
        for raw in self.break_times:
            try:
                interval = BreakTimeRecord.model_validate(raw).to_domain()
            except ValidationError:
                logger.warning("Skipping malformed break for %s: %r", self.name, raw)
                continue
            if interval is not None:
                breaks.append(interval)

        schedule = None
        if self.operating_hours:
            schedule = parse_weekly_schedule(self.operating_hours)

        return StaffMember(
            name=self.name,
            is_active=self.is_active,
            assigned_service_names=frozenset(self.services),
            operating_schedule=schedule,
            breaks=tuple(breaks),
        )


class BusinessRecord(WireModel):
    id: Optional[Union[int, str]] = None
    name: str = ""
    operating_hours: Optional[Dict[str, Any]] = Field(
        default=None,
        validation_alias=AliasChoices("operating_hours", "operatingHours"),
    )
    services: List[Any] = Field(default_factory=list)
    staff: List[Any] = Field(default_factory=list)

    @field_validator("services", "staff", mode="before")
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    def to_domain(self, default_duration: int = DEFAULT_DURATION_MINUTES) -> Business:
        services: List[Service] = []
        for raw in self.services:
            try:
                services.append(ServiceRecord.model_validate(raw).to_domain(default_duration))
            except ValueError as exc:
                # ValidationError is a ValueError too
                logger.warning("Skipping service %r of business %s: %s", raw, self.id, exc)

        staff: List[StaffMember] = []
        for raw in self.staff:
            try:
                staff.append(StaffRecord.model_validate(raw).to_domain())
            except ValidationError as exc:
                logger.warning("Skipping staff member %r of business %s: %s", raw, self.id, exc)

        return Business(
            id=str(self.id) if self.id is not None else None,
            name=self.name,
            schedule=parse_weekly_schedule(self.operating_hours),
            services=tuple(services),
            staff=tuple(staff),
        )


class BookingRecord(WireModel):
    appointment_date: Union[str, CalendarDate] = Field(
        validation_alias=AliasChoices("appointmentDate", "appointment_date"),
    )
    appointment_time: str = Field(validation_alias=AliasChoices("appointmentTime", "appointment_time"))
    service_duration: Union[int, float, str, None] = Field(
        default=None,
        validation_alias=AliasChoices("serviceDuration", "service_duration"),
    )
    service_name: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("serviceName", "service_name"),
    )
    staff_name: Optional[str] = Field(default=None, validation_alias=AliasChoices("staffName", "staff_name"))
    status: Optional[str] = None

    def to_domain(
        self,
        services: Optional[Mapping[str, Service]] = None,
        default_duration: int = DEFAULT_DURATION_MINUTES,
    ) -> ExistingBooking:
        """
        Convert to an ExistingBooking.

        A booking without a stored duration takes the duration of the
        business service with the same name.
        """
        if self.service_duration in (None, "", 0):
            service = (services or {}).get(self.service_name or "")
            duration = service.duration_minutes if service else default_duration
        else:
            duration = resolve_duration(self.service_duration, default=default_duration)

        try:
            status = BookingStatus((self.status or "PENDING").upper())
        except ValueError:
            logger.warning("Unknown booking status %r, treating as PENDING", self.status)
            status = BookingStatus.PENDING

        return ExistingBooking(
            date=parse_calendar_date(self.appointment_date),
            start_time=parse_time_of_day(self.appointment_time),
            duration_minutes=duration,
            staff_name=self.staff_name or None,
            status=status,
        )


class BlockedSlotRecord(WireModel):
    """
    A blocked slot as stored by the business dashboard.

    ``endTime`` names the start of the last blocked grid cell, so a single
    blocked cell has ``startTime == endTime``.
    """
    date: Union[str, CalendarDate]
    start_time: str = Field(validation_alias=AliasChoices("startTime", "start_time"))
    end_time: str = Field(validation_alias=AliasChoices("endTime", "end_time"))
    staff_name: Optional[str] = Field(default=None, validation_alias=AliasChoices("staffName", "staff_name"))

    def to_domain(self, cell_minutes: int = GRID_MINUTES) -> BlockedPeriod:
        return BlockedPeriod(
            date=parse_calendar_date(self.date),
            start_time=parse_time_of_day(self.start_time),
            end_time=parse_time_of_day(self.end_time) + cell_minutes,
            staff_name=self.staff_name or None,
        )


def parse_business(raw: Mapping[str, Any], default_duration: int = DEFAULT_DURATION_MINUTES) -> Business:
    """Validate a business payload; raises ValueError if it is not a business record at all."""
    return BusinessRecord.model_validate(raw).to_domain(default_duration)


def parse_bookings(
    raw_items: List[Any],
    business: Business | None = None,
    default_duration: int = DEFAULT_DURATION_MINUTES,
) -> List[ExistingBooking]:
    """Convert booking payloads, skipping entries that cannot be understood."""
    services = {service.name: service for service in business.services} if business else {}
    bookings: List[ExistingBooking] = []

    for raw in raw_items:
        try:
            bookings.append(BookingRecord.model_validate(raw).to_domain(services, default_duration))
        except ValueError as exc:
            logger.warning("Skipping booking %r: %s", raw, exc)

    return bookings


def parse_blocked_periods(raw_items: List[Any], cell_minutes: int = GRID_MINUTES) -> List[BlockedPeriod]:
    """Convert blocked-slot payloads, skipping entries that cannot be understood."""
    blocks: List[BlockedPeriod] = []

    for raw in raw_items:
        try:
            blocks.append(BlockedSlotRecord.model_validate(raw).to_domain(cell_minutes))
        except ValueError as exc:
            logger.warning("Skipping blocked slot %r: %s", raw, exc)

    return blocks
