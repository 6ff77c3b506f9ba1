"""Appointment status transitions"""

import enum
import logging

from ...config import APPOINTMENT_TRANSITION_POLICY
from ...models import Appointment, AppointmentStatus
from ...shared.exceptions import InvalidTransitionError

logger = logging.getLogger(__name__)


class TransitionPolicy(str, enum.Enum):
    LENIENT = "lenient"  # disallowed transition leaves the status unchanged
    STRICT = "strict"  # disallowed transition raises InvalidTransitionError


# trigger -> (allowed source statuses, target status)
TRANSITIONS: dict[str, tuple[frozenset, AppointmentStatus]] = {
    "confirm": (frozenset({AppointmentStatus.REQUESTED}), AppointmentStatus.CONFIRMED),
    "start": (frozenset({AppointmentStatus.CONFIRMED}), AppointmentStatus.IN_PROGRESS),
    "complete": (frozenset({AppointmentStatus.IN_PROGRESS}), AppointmentStatus.COMPLETED),
    "cancel": (
        frozenset({AppointmentStatus.REQUESTED, AppointmentStatus.CONFIRMED}),
        AppointmentStatus.CANCELLED,
    ),
    "mark_no_show": (frozenset({AppointmentStatus.CONFIRMED}), AppointmentStatus.NO_SHOW),
}

# Statuses an appointment may be created in
INITIAL_STATUSES = (AppointmentStatus.REQUESTED, AppointmentStatus.CONFIRMED)


def default_policy() -> TransitionPolicy:
    try:
        return TransitionPolicy(APPOINTMENT_TRANSITION_POLICY)
    except ValueError:
        logger.warning(
            f"Unknown APPOINTMENT_TRANSITION_POLICY '{APPOINTMENT_TRANSITION_POLICY}', using lenient"
        )
        return TransitionPolicy.LENIENT


def can_transition(trigger: str, current: AppointmentStatus) -> bool:
    sources, _ = TRANSITIONS[trigger]
    return current in sources


def apply_transition(appointment: Appointment, trigger: str, policy: TransitionPolicy) -> bool:
    """
    Move an appointment along the lifecycle.

    Returns True when the status changed. When the current status is not a
    valid source for the trigger, returns False under the lenient policy and
    raises InvalidTransitionError under the strict one.
    """
    if trigger not in TRANSITIONS:
        raise ValueError(f"Unknown transition trigger: {trigger}")

    sources, target = TRANSITIONS[trigger]
    current = AppointmentStatus(appointment.status)

    if current not in sources:
        if policy == TransitionPolicy.STRICT:
            raise InvalidTransitionError(trigger, current)
        logger.info(
            f"Ignoring {trigger} for appointment {appointment.id}: status is {current.value}"
        )
        return False

    appointment.status = target
    return True
