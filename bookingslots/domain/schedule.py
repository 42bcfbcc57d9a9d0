"""
Operating-window resolution.

Every weekday lookup goes through ``weekday_name`` so all callers agree on
the same convention.
"""

from datetime import date as CalendarDate

from .models import WEEKDAY_NAMES, DayWindow, StaffMember, WeeklySchedule


def weekday_name(day: CalendarDate) -> str:
    """Return the lowercase English weekday name used as schedule key."""
    return WEEKDAY_NAMES[day.weekday()]


def same_calendar_day(first: CalendarDate, second: CalendarDate) -> bool:
    """Compare two dates (or datetimes) by their local calendar components only."""
    return (first.year, first.month, first.day) == (second.year, second.month, second.day)


def resolve_day_window(
    day: CalendarDate,
    business_schedule: WeeklySchedule,
    staff: StaffMember | None = None,
) -> DayWindow:
    """
    Determine the open/close window for a date.

    A staff override wins when it defines an open window for the weekday;
    otherwise the business window applies. No window at all means closed.
    """
    weekday = weekday_name(day)

    if staff is not None and staff.operating_schedule is not None:
        override = staff.operating_schedule.window_for(weekday)
        if override is not None and override.is_open:
            return override

    window = business_schedule.window_for(weekday)
    if window is None:
        return DayWindow.closed()
    return window


def staff_is_off(day: CalendarDate, staff: StaffMember) -> bool:
    """
    Check whether the staff member's own schedule takes them off on this date.

    Blank hours and an explicit closed flag both mean the member does not
    work that weekday, even if the business is open.
    """
    schedule = staff.operating_schedule
    if schedule is None:
        return False

    weekday = weekday_name(day)
    if schedule.is_unset(weekday):
        return True

    window = schedule.window_for(weekday)
    return window is not None and window.is_closed


def is_date_disabled(
    day: CalendarDate,
    today: CalendarDate,
    business_schedule: WeeklySchedule,
    staff: StaffMember | None = None,
) -> bool:
    """
    Check whether a calendar date must not be offered for selection.

    A date is disabled when it lies in the past, when its resolved window
    is closed, or when the selected staff member does not work that day.
    """
    if (day.year, day.month, day.day) < (today.year, today.month, today.day):
        return True

    if resolve_day_window(day, business_schedule, staff).is_closed:
        return True

    return staff is not None and staff_is_off(day, staff)
