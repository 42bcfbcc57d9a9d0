"""
Shared fixtures for the availability engine tests.
"""

from decimal import Decimal

import pendulum
import pytest

from bookingslots.domain.models import (
    WEEKDAY_NAMES,
    BreakInterval,
    Business,
    DayWindow,
    Service,
    StaffMember,
    WeeklySchedule,
    parse_time_of_day,
)

MONDAY = pendulum.date(2025, 3, 10)
SUNDAY = pendulum.date(2025, 3, 9)


def weekly(open_time="09:00", close_time="17:00", closed_days=()):
    """Same hours every day except ``closed_days``."""
    days = {}
    for name in WEEKDAY_NAMES:
        if name in closed_days:
            days[name] = DayWindow.closed()
        else:
            days[name] = DayWindow.from_hours(open_time, close_time)
    return WeeklySchedule(days=days)


def service(name, minutes, price="10"):
    return Service(name=name, price=Decimal(price), duration_label=f"{minutes} min", duration_minutes=minutes)


def break_at(start, end):
    return BreakInterval(start=parse_time_of_day(start), end=parse_time_of_day(end))


@pytest.fixture
def schedule():
    return weekly(closed_days=("sunday",))


@pytest.fixture
def haircut():
    return service("Haircut", 30, "10")


@pytest.fixture
def coloring():
    return service("Coloring", 90, "35")


@pytest.fixture
def business(schedule, haircut, coloring):
    return Business(
        id="7",
        name="Salloni Bora",
        schedule=schedule,
        services=(haircut, coloring),
        staff=(
            StaffMember(name="Arta", breaks=(break_at("12:00", "12:30"),)),
            StaffMember(name="Blerim", assigned_service_names=frozenset({"Haircut"})),
            StaffMember(name="Drita", is_active=False),
        ),
    )
