# meeting_governance/services/meeting_lifecycle.py
from __future__ import annotations

from enum import Enum

from meeting_governance.core.errors import AlreadyTerminalError, InvalidTransitionError
from meeting_governance.schemas.meeting import MeetingStatus


class MeetingTransition(str, Enum):
    START = "start"
    RECESS = "recess"
    RESUME = "resume"
    ADJOURN = "adjourn"
    CANCEL = "cancel"


TERMINAL_STATUSES = frozenset({MeetingStatus.ADJOURNED, MeetingStatus.CANCELLED})

# transition -> (allowed source statuses, target status)
TRANSITIONS: dict[MeetingTransition, tuple[frozenset[MeetingStatus], MeetingStatus]] = {
    MeetingTransition.START: (
        frozenset({MeetingStatus.NOTICED}),
        MeetingStatus.IN_SESSION,
    ),
    MeetingTransition.RECESS: (
        frozenset({MeetingStatus.IN_SESSION}),
        MeetingStatus.RECESSED,
    ),
    MeetingTransition.RESUME: (
        frozenset({MeetingStatus.RECESSED}),
        MeetingStatus.IN_SESSION,
    ),
    MeetingTransition.ADJOURN: (
        frozenset({MeetingStatus.NOTICED, MeetingStatus.IN_SESSION, MeetingStatus.RECESSED}),
        MeetingStatus.ADJOURNED,
    ),
    MeetingTransition.CANCEL: (
        frozenset({
            MeetingStatus.PLANNED,
            MeetingStatus.NOTICED,
            MeetingStatus.IN_SESSION,
            MeetingStatus.RECESSED,
        }),
        MeetingStatus.CANCELLED,
    ),
}


def is_terminal(status: MeetingStatus | str) -> bool:
    return MeetingStatus(status) in TERMINAL_STATUSES


def allowed_transitions(current: MeetingStatus | str) -> list[MeetingTransition]:
    current = MeetingStatus(current)
    return [name for name, (sources, _) in TRANSITIONS.items() if current in sources]


def next_status(current: MeetingStatus | str, transition: MeetingTransition | str) -> MeetingStatus:
    """
    Target status of `transition` from `current`.

    Raises AlreadyTerminalError for any edge out of adjourned/cancelled and
    InvalidTransitionError for any other edge not in TRANSITIONS.
    """
    current = MeetingStatus(current)
    transition = MeetingTransition(transition)

    if current in TERMINAL_STATUSES:
        raise AlreadyTerminalError(
            f"Meeting is already {current.value}; cannot {transition.value}.",
            {"status": current.value, "transition": transition.value},
        )

    sources, target = TRANSITIONS[transition]
    if current not in sources:
        raise InvalidTransitionError(
            f"Cannot {transition.value} a meeting that is {current.value}.",
            {
                "status": current.value,
                "transition": transition.value,
                "allowed": [t.value for t in allowed_transitions(current)],
            },
        )
    return target
