"""
Tests for domain models.
"""

from decimal import Decimal

import pytest

from bookingslots.domain.exceptions import ScheduleFormatError
from bookingslots.domain.models import (
    BlockedPeriod,
    BookingStatus,
    BreakInterval,
    DayWindow,
    ExistingBooking,
    Service,
    TimeRange,
    TimeSlot,
    format_time_of_day,
    parse_time_of_day,
)

from conftest import MONDAY


class TestTimeOfDay:
    """Tests for HH:MM parsing and formatting."""

    def test_parse_valid_times(self):
        """Test parsing zero-padded and short hours."""
        assert parse_time_of_day("00:00") == 0
        assert parse_time_of_day("09:15") == 555
        assert parse_time_of_day("9:05") == 545
        assert parse_time_of_day("23:59") == 1439

    @pytest.mark.parametrize("value", ["24:00", "12:60", "noon", "", "12", "1:2:3", None])
    def test_parse_invalid_times(self, value):
        """Test that malformed times raise ScheduleFormatError."""
        with pytest.raises(ScheduleFormatError):
            parse_time_of_day(value)

    def test_schedule_format_error_is_value_error(self):
        """Callers catching ValueError also catch format errors."""
        with pytest.raises(ValueError):
            parse_time_of_day("25:00")

    def test_format(self):
        """Test zero-padded formatting."""
        assert format_time_of_day(0) == "00:00"
        assert format_time_of_day(560) == "09:20"

    def test_format_out_of_range(self):
        with pytest.raises(ValueError):
            format_time_of_day(1440)


class TestTimeRange:
    """Tests for TimeRange model."""

    def test_create_valid_time_range(self):
        """Test creating a valid time range."""
        tr = TimeRange(start=540, end=1020)

        assert tr.duration_minutes() == 480  # 8 hours
        assert str(tr) == "09:00 - 17:00"

    def test_invalid_time_range_raises_error(self):
        """Test that creating an invalid time range raises ValueError."""
        with pytest.raises(ValueError, match="must be before end minute"):
            TimeRange(start=600, end=600)

    def test_overlaps(self):
        """Test half-open overlap detection."""
        morning = TimeRange(start=540, end=720)
        lunch = TimeRange(start=660, end=840)
        afternoon = TimeRange(start=840, end=1020)

        assert morning.overlaps(lunch)
        assert lunch.overlaps(morning)
        assert not lunch.overlaps(afternoon)
        assert not afternoon.overlaps(lunch)


class TestDayWindow:
    """Tests for DayWindow model."""

    def test_from_hours(self):
        window = DayWindow.from_hours("09:00", "17:00")

        assert window.is_open
        assert window.open == 540
        assert window.close == 1020
        assert str(window) == "09:00 - 17:00"

    def test_closed(self):
        window = DayWindow.closed()

        assert window.is_closed
        assert window.as_range() is None
        assert str(window) == "closed"

    def test_open_window_requires_both_times(self):
        with pytest.raises(ValueError, match="needs both"):
            DayWindow(is_closed=False, open=540)

    def test_open_must_precede_close(self):
        with pytest.raises(ValueError, match="must be before closing"):
            DayWindow.from_hours("17:00", "09:00")

    def test_closing_at_midnight(self):
        window = DayWindow.from_hours("18:00", "00:00")

        assert window.open == 1080
        assert window.close == 1440
        assert str(window) == "18:00 - 00:00"

    def test_window_past_midnight_rejected(self):
        with pytest.raises(ValueError, match="outside the day"):
            DayWindow(is_closed=False, open=1080, close=1455)


class TestOccupancyModels:
    """Tests for bookings, blocked periods and breaks."""

    def test_booking_range_and_status(self):
        booking = ExistingBooking(date=MONDAY, start_time=540, duration_minutes=20)

        assert booking.end_time == 560
        assert booking.as_range() == TimeRange(start=540, end=560)
        assert booking.occupies_time

    def test_cancelled_booking_does_not_occupy(self):
        booking = ExistingBooking(
            date=MONDAY,
            start_time=540,
            duration_minutes=20,
            status=BookingStatus.CANCELLED,
        )

        assert not booking.occupies_time

    def test_booking_needs_positive_duration(self):
        with pytest.raises(ValueError):
            ExistingBooking(date=MONDAY, start_time=540, duration_minutes=0)

    def test_blocked_period_order(self):
        with pytest.raises(ValueError):
            BlockedPeriod(date=MONDAY, start_time=600, end_time=600)

    def test_break_order(self):
        with pytest.raises(ValueError, match="Break start"):
            BreakInterval(start=750, end=720)

    def test_service_invariants(self):
        with pytest.raises(ValueError):
            Service(name="Haircut", price=Decimal("-1"), duration_label="30 min", duration_minutes=30)
        with pytest.raises(ValueError):
            Service(name="Haircut", price=Decimal("10"), duration_label="0 min", duration_minutes=0)


class TestTimeSlot:
    """Tests for TimeSlot output value."""

    def test_label_and_display(self):
        slot = TimeSlot(start=560, duration_minutes=10)

        assert slot.label == "09:20"
        assert slot.time_range == TimeRange(start=560, end=570)
        assert slot.format_display() == "09:20 – 09:30 (10 min)"
