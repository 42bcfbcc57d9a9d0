"""
Domain-specific exception hierarchy for the availability engine.
"""


class SlotEngineError(Exception):
    """Base class for all application-level errors."""


class ScheduleFormatError(SlotEngineError, ValueError):
    """Raised when time-of-day or schedule data cannot be parsed."""


class BookingApiError(SlotEngineError):
    """Raised when business, booking or blocked-period data cannot be fetched or parsed."""


class UnknownSelectionError(SlotEngineError, LookupError):
    """Raised when a requested service or staff member does not exist on the business."""
