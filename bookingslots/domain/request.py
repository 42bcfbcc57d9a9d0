"""
The transient booking request a customer builds in the wizard.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Tuple

from pendulum import Date

from .durations import DEFAULT_DURATION_MINUTES, total_duration, total_price
from .models import Service, StaffMember


@dataclass(frozen=True)
class BookingRequest:
    """
    Date, selected services and optional staff member for one availability query.

    Not persisted; the totals are handed on to the booking creation call.
    ``default_duration_minutes`` is the total used while no service is picked.
    """
    date: Date
    selected_services: Tuple[Service, ...] = ()
    selected_staff: Optional[StaffMember] = None
    default_duration_minutes: int = DEFAULT_DURATION_MINUTES

    @property
    def total_duration_minutes(self) -> int:
        return total_duration(
            (service.duration_minutes for service in self.selected_services),
            default=self.default_duration_minutes,
        )

    @property
    def total_price(self) -> Decimal:
        return total_price(service.price for service in self.selected_services)

    @property
    def staff_name(self) -> str:
        return self.selected_staff.name if self.selected_staff else ""

    @property
    def service_names(self) -> Tuple[str, ...]:
        return tuple(service.name for service in self.selected_services)
