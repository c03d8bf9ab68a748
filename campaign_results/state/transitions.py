"""
Transition table for result status changes.

Maps each event kind to the status it moves a record into and to the
statuses that suppress the write. Suppression only ever protects a later
funnel stage from being overwritten by an earlier one; SENDING_ERROR and
RETRY sit outside the funnel and never block a transition.
"""

from dataclasses import dataclass
from typing import Optional

from .models import EventKind, ResultStatus

# Funnel order. Statuses missing from this map are orthogonal.
FUNNEL_RANK: dict[ResultStatus, int] = {
    ResultStatus.QUEUED: 0,
    ResultStatus.SENT: 1,
    ResultStatus.OPENED: 2,
    ResultStatus.CLICKED: 3,
    ResultStatus.SUBMITTED_DATA: 4,
}

ORTHOGONAL_STATUSES = frozenset({ResultStatus.SENDING_ERROR, ResultStatus.RETRY})


@dataclass(frozen=True)
class TransitionRule:
    """How one event kind affects the record's status."""

    kind: EventKind
    target: Optional[ResultStatus]                   # None: status untouched
    blocked_by: frozenset = frozenset()

    def allows(self, current: ResultStatus) -> bool:
        """Whether the status write may proceed from ``current``."""
        return current not in self.blocked_by


def _dominating(status: ResultStatus) -> frozenset:
    """Funnel statuses strictly later than ``status``."""
    rank = FUNNEL_RANK[status]
    return frozenset(s for s, r in FUNNEL_RANK.items() if r > rank)


TRANSITION_RULES: dict[EventKind, TransitionRule] = {
    EventKind.SENT: TransitionRule(EventKind.SENT, ResultStatus.SENT),
    EventKind.SENDING_ERROR: TransitionRule(EventKind.SENDING_ERROR, ResultStatus.SENDING_ERROR),
    EventKind.OPENED: TransitionRule(
        EventKind.OPENED, ResultStatus.OPENED, _dominating(ResultStatus.OPENED)
    ),
    EventKind.CLICKED: TransitionRule(
        EventKind.CLICKED, ResultStatus.CLICKED, _dominating(ResultStatus.CLICKED)
    ),
    EventKind.SUBMITTED_DATA: TransitionRule(EventKind.SUBMITTED_DATA, ResultStatus.SUBMITTED_DATA),
    EventKind.REPORTED: TransitionRule(EventKind.REPORTED, None),
}


def get_rule(kind: EventKind) -> TransitionRule:
    """Transition rule for an event kind."""
    return TRANSITION_RULES[kind]


def is_regression(current: ResultStatus, target: ResultStatus) -> bool:
    """True when moving from ``current`` to ``target`` goes back down the funnel."""
    if current in ORTHOGONAL_STATUSES or target in ORTHOGONAL_STATUSES:
        return False
    return FUNNEL_RANK[target] < FUNNEL_RANK[current]
