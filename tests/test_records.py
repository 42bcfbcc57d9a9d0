"""
Tests for converting platform JSON into domain models.
"""

from decimal import Decimal

import pendulum
import pytest

from bookingslots.adapters.records import (
    parse_blocked_periods,
    parse_bookings,
    parse_business,
    parse_calendar_date,
    parse_weekly_schedule,
)
from bookingslots.domain.models import BookingStatus, DayWindow


@pytest.fixture
def business_payload():
    return {
        "id": 7,
        "name": "Salloni Bora",
        "slug": "salloni-bora",
        "operating_hours": {
            "Monday": {"open": "09:00", "close": "17:00", "closed": False},
            "sunday": {"open": "", "close": "", "closed": True},
        },
        "services": [
            {"name": "Haircut", "price": 10, "duration": "30 min"},
            {"name": "Coloring", "price": "35.50", "duration": "1 orë 30 min"},
            {"name": "Mystery", "price": 5, "duration": "a while"},
            {"price": 3},
        ],
        "staff": [
            {
                "name": "Arta",
                "services": [],
                "breakTimes": [
                    {"startTime": "12:00", "endTime": "12:30"},
                    {"startTime": "14:00", "endTime": "13:00"},
                    {"startTime": "", "endTime": ""},
                ],
            },
            {
                "name": "Blerim",
                "isActive": False,
                "services": ["Haircut"],
                "operatingHours": {"monday": {"open": "12:00", "close": "17:00"}, "saturday": {}},
            },
            {"services": ["Haircut"]},
        ],
    }


class TestCalendarDate:
    """Tests for parse_calendar_date."""

    def test_plain_date(self):
        assert parse_calendar_date("2030-03-11") == pendulum.date(2030, 3, 11)

    def test_timestamp_keeps_written_date(self):
        """No timezone conversion: the calendar part is taken as written."""
        assert parse_calendar_date("2030-03-11T23:30:00.000Z") == pendulum.date(2030, 3, 11)

    def test_date_object(self):
        assert parse_calendar_date(pendulum.datetime(2030, 3, 11, 8, 0)) == pendulum.date(2030, 3, 11)

    @pytest.mark.parametrize("value", ["", "tomorrow", None])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_calendar_date(value)


class TestWeeklySchedule:
    """Tests for parse_weekly_schedule."""

    def test_open_and_closed_days(self):
        schedule = parse_weekly_schedule({
            "monday": {"open": "09:00", "close": "17:00", "closed": False},
            "sunday": {"closed": True},
        })

        assert schedule.window_for("monday") == DayWindow.from_hours("09:00", "17:00")
        assert schedule.window_for("sunday").is_closed
        assert schedule.window_for("tuesday") is None

    def test_blank_hours_are_unset(self):
        schedule = parse_weekly_schedule({"monday": {"open": "", "close": ""}, "tuesday": {}})

        assert schedule.window_for("monday") is None
        assert schedule.is_unset("monday")
        assert schedule.is_unset("tuesday")
        assert not schedule.is_unset("wednesday")

    def test_malformed_hours_are_unset(self):
        schedule = parse_weekly_schedule({
            "monday": {"open": "17:00", "close": "09:00"},
            "tuesday": {"open": "nine", "close": "17:00"},
            "wednesday": {"open": ["09:00"], "close": "17:00"},
        })

        assert schedule.days == {}
        assert schedule.unset_days == frozenset({"monday", "tuesday", "wednesday"})

    def test_close_at_midnight(self):
        schedule = parse_weekly_schedule({"friday": {"open": "18:00", "close": "00:00"}})

        assert schedule.window_for("friday").close == 1440
        assert not schedule.is_unset("friday")

    def test_empty(self):
        assert parse_weekly_schedule(None).days == {}


class TestBusiness:
    """Tests for parse_business."""

    def test_business_fields(self, business_payload):
        business = parse_business(business_payload)

        assert business.id == "7"
        assert business.name == "Salloni Bora"
        assert business.schedule.window_for("monday").open == 540
        assert business.schedule.window_for("sunday").is_closed

    def test_services(self, business_payload):
        """Durations come from labels; unusable labels fall back; nameless entries are skipped."""
        business = parse_business(business_payload)

        assert [s.name for s in business.services] == ["Haircut", "Coloring", "Mystery"]
        coloring = business.find_service("Coloring")
        assert coloring.duration_minutes == 90
        assert coloring.duration_label == "1 orë 30 min"
        assert coloring.price == Decimal("35.50")
        assert business.find_service("Mystery").duration_minutes == 30

    def test_staff(self, business_payload):
        business = parse_business(business_payload)

        assert [m.name for m in business.staff] == ["Arta", "Blerim"]

        arta = business.find_staff("Arta")
        assert arta.handles_all_services
        assert len(arta.breaks) == 1
        assert arta.breaks[0].start == 720
        assert arta.operating_schedule is None

        blerim = business.find_staff("Blerim")
        assert not blerim.is_active
        assert blerim.assigned_service_names == frozenset({"Haircut"})
        assert blerim.operating_schedule.window_for("monday") == DayWindow.from_hours("12:00", "17:00")
        assert blerim.operating_schedule.is_unset("saturday")

    def test_staff_services_given_as_objects(self):
        """Assigned services may be stored as service objects; nameless ones are dropped."""
        business = parse_business({
            "id": 7,
            "name": "Salloni Bora",
            "staff": [{"name": "Arta", "services": [{"name": "Haircut", "price": 10}, "Coloring", {"price": 3}]}],
        })

        arta = business.find_staff("Arta")
        assert arta is not None
        assert arta.assigned_service_names == frozenset({"Haircut", "Coloring"})

    def test_null_lists(self):
        business = parse_business({"id": "1", "name": "Empty", "services": None, "staff": None})

        assert business.services == ()
        assert business.staff == ()


class TestBookings:
    """Tests for parse_bookings."""

    def test_booking_fields(self):
        bookings = parse_bookings([{
            "appointmentDate": "2030-03-11T00:00:00.000Z",
            "appointmentTime": "09:00",
            "serviceDuration": 20,
            "staffName": "Arta",
            "status": "CONFIRMED",
        }])

        booking = bookings[0]
        assert booking.date == pendulum.date(2030, 3, 11)
        assert booking.start_time == 540
        assert booking.end_time == 560
        assert booking.staff_name == "Arta"
        assert booking.status == BookingStatus.CONFIRMED

    def test_duration_label(self):
        bookings = parse_bookings([{
            "appointmentDate": "2030-03-11",
            "appointmentTime": "10:00",
            "serviceDuration": "1 orë",
        }])

        assert bookings[0].duration_minutes == 60

    def test_missing_duration_uses_service(self, business_payload):
        business = parse_business(business_payload)

        bookings = parse_bookings(
            [
                {"appointmentDate": "2030-03-11", "appointmentTime": "10:00", "serviceName": "Coloring"},
                {"appointmentDate": "2030-03-11", "appointmentTime": "13:00", "serviceName": "Unknown"},
            ],
            business,
        )

        assert [b.duration_minutes for b in bookings] == [90, 30]

    def test_empty_staff_name_means_unassigned(self):
        bookings = parse_bookings([{"appointmentDate": "2030-03-11", "appointmentTime": "10:00", "staffName": ""}])

        assert bookings[0].staff_name is None

    def test_status_values(self):
        bookings = parse_bookings([
            {"appointmentDate": "2030-03-11", "appointmentTime": "10:00", "status": "cancelled"},
            {"appointmentDate": "2030-03-11", "appointmentTime": "11:00", "status": "NO_SHOW"},
        ])

        assert bookings[0].status == BookingStatus.CANCELLED
        assert bookings[1].status == BookingStatus.PENDING

    def test_malformed_bookings_skipped(self):
        bookings = parse_bookings([
            {"appointmentDate": "2030-03-11", "appointmentTime": "25:00"},
            {"appointmentTime": "10:00"},
            "not a booking",
            {"appointmentDate": "2030-03-11", "appointmentTime": "10:00"},
        ])

        assert len(bookings) == 1
        assert bookings[0].start_time == 600


class TestBlockedPeriods:
    """Tests for parse_blocked_periods."""

    def test_end_time_names_last_blocked_cell(self):
        """12:00-12:45 as stored blocks the cells 12:00, 12:15, 12:30 and 12:45."""
        blocks = parse_blocked_periods([
            {"date": "2030-03-11", "startTime": "12:00", "endTime": "12:45", "staffName": "Arta"},
        ])

        assert blocks[0].start_time == 720
        assert blocks[0].end_time == 780
        assert blocks[0].staff_name == "Arta"

    def test_single_cell(self):
        blocks = parse_blocked_periods([{"date": "2030-03-11", "startTime": "15:00", "endTime": "15:00"}])

        assert (blocks[0].start_time, blocks[0].end_time) == (900, 915)
        assert blocks[0].staff_name is None

    def test_custom_cell_size(self):
        blocks = parse_blocked_periods(
            [{"date": "2030-03-11", "startTime": "15:00", "endTime": "15:30"}],
            cell_minutes=30,
        )

        assert blocks[0].end_time == 960

    def test_malformed_blocks_skipped(self):
        blocks = parse_blocked_periods([
            {"date": "2030-03-11", "startTime": "15:00", "endTime": "14:00"},
            {"date": "2030-03-11", "startTime": "15:00"},
        ])

        assert blocks == []
