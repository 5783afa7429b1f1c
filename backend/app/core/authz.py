# backend/app/core/authz.py
"""
Role-based permissions for booking status changes.

The booking lifecycle and the roles allowed to drive each edge are declared
in one table. ``BookingService`` consults it after checking that the caller
takes part in the booking.

    pending   -> confirmed  coach, admin
    pending   -> cancelled  student, coach, admin
    confirmed -> completed  coach, admin
    confirmed -> cancelled  student, coach, admin

``completed`` and ``cancelled`` are terminal.
"""

from typing import Dict, FrozenSet, Tuple

from app.core.enums import RoleName
from app.models.booking import BookingStatus

ALL_ROLES: FrozenSet[RoleName] = frozenset(RoleName)

BOOKING_TRANSITIONS: Dict[Tuple[BookingStatus, BookingStatus], FrozenSet[RoleName]] = {
    (BookingStatus.PENDING, BookingStatus.CONFIRMED): frozenset({RoleName.COACH, RoleName.ADMIN}),
    (BookingStatus.PENDING, BookingStatus.CANCELLED): ALL_ROLES,
    (BookingStatus.CONFIRMED, BookingStatus.COMPLETED): frozenset(
        {RoleName.COACH, RoleName.ADMIN}
    ),
    (BookingStatus.CONFIRMED, BookingStatus.CANCELLED): ALL_ROLES,
}

def is_transition_allowed(current: BookingStatus, requested: BookingStatus) -> bool:
    """Whether ``current -> requested`` is an edge of the lifecycle at all."""
    return (current, requested) in BOOKING_TRANSITIONS


def can_transition(role: RoleName, current: BookingStatus, requested: BookingStatus) -> bool:
    """Whether ``role`` may drive the ``current -> requested`` edge."""
    return role in BOOKING_TRANSITIONS.get((current, requested), frozenset())


def allowed_targets(role: RoleName, current: BookingStatus) -> list[BookingStatus]:
    """Statuses ``role`` may move a booking in ``current`` status to."""
    return [
        target
        for (source, target), roles in BOOKING_TRANSITIONS.items()
        if source == current and role in roles
    ]
