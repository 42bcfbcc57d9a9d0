"""
Service/staff compatibility gate.

Decides which staff members can perform a selection of services and keeps
a (services, staff) selection consistent when either side changes.
"""

import logging
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Sequence, Tuple

from .models import Service, StaffMember

logger = logging.getLogger(__name__)


def is_staff_eligible(staff: StaffMember, services: Iterable[Service]) -> bool:
    """
    Check whether a staff member can perform every requested service.

    Names are compared exactly. An empty assignment means "handles everything".
    """
    if staff.handles_all_services:
        return True
    return all(service.name in staff.assigned_service_names for service in services)


def eligible_staff(staff: Sequence[StaffMember], services: Iterable[Service]) -> List[StaffMember]:
    """Active staff members that can perform all requested services, in input order."""
    services = list(services)
    return [
        member for member in staff
        if member.is_active and is_staff_eligible(member, services)
    ]


def is_service_selectable(service: Service, staff: StaffMember | None) -> bool:
    """Whether a service card can be picked given the currently chosen staff member."""
    if staff is None:
        return True
    return is_staff_eligible(staff, [service])


@dataclass(frozen=True)
class SelectionChange:
    """Result of changing one side of a selection."""
    selection: "BookingSelection"
    warnings: Tuple[str, ...] = ()
    dropped_services: Tuple[Service, ...] = ()
    dropped_staff: Optional[StaffMember] = None

    @property
    def has_conflict(self) -> bool:
        return bool(self.warnings)


@dataclass(frozen=True)
class BookingSelection:
    """
    Services and staff picked so far.

    Changing one side re-checks compatibility and drops the conflicting
    earlier choice, reporting a warning instead of keeping an invalid pair.
    """
    services: Tuple[Service, ...] = ()
    staff: Optional[StaffMember] = None

    def with_services(self, services: Iterable[Service]) -> SelectionChange:
        """Replace the service selection; an incompatible staff member is dropped."""
        services = tuple(services)
        staff = self.staff

        if staff is not None and not is_staff_eligible(staff, services):
            rejected = [s.name for s in services if s.name not in staff.assigned_service_names]
            warning = (
                f"{staff.name} does not offer {', '.join(rejected)}; "
                f"the staff selection was cleared."
            )
            logger.info("Dropping staff %r after service change", staff.name)
            return SelectionChange(
                selection=replace(self, services=services, staff=None),
                warnings=(warning,),
                dropped_staff=staff,
            )

        return SelectionChange(selection=replace(self, services=services))

    def toggle_service(self, service: Service) -> SelectionChange:
        """Add the service if absent, remove it if present."""
        if service in self.services:
            remaining = tuple(s for s in self.services if s != service)
            return self.with_services(remaining)
        return self.with_services(self.services + (service,))

    def with_staff(self, staff: StaffMember | None) -> SelectionChange:
        """Replace the staff member; services that member cannot perform are dropped."""
        if staff is None:
            return SelectionChange(selection=replace(self, staff=None))

        dropped = tuple(s for s in self.services if not is_staff_eligible(staff, [s]))
        if not dropped:
            return SelectionChange(selection=replace(self, staff=staff))

        kept = tuple(s for s in self.services if s not in dropped)
        warning = (
            f"{staff.name} does not offer {', '.join(s.name for s in dropped)}; "
            f"those services were removed from the selection."
        )
        logger.info("Dropping %d service(s) after choosing staff %r", len(dropped), staff.name)
        return SelectionChange(
            selection=replace(self, services=kept, staff=staff),
            warnings=(warning,),
            dropped_services=dropped,
        )

    @property
    def is_consistent(self) -> bool:
        return self.staff is None or is_staff_eligible(self.staff, self.services)
