"""Contract lifecycle rules.

Everything here is pure: callers pass ``now`` explicitly and persist the
result themselves. Dates are promoted to midnight datetimes, so a contract
ending on 2024-01-31 is expired at any moment after 2024-01-31 00:00.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from boardinghouse.core.exceptions import StateTransitionError
from boardinghouse.domain.state_machine import StateMachine
from boardinghouse.models.enums import ContractBadge, ContractStatus, RoomStatus

DEFAULT_EXPIRING_SOON_DAYS = 30
_ONE_DAY = timedelta(days=1)

# ``None`` is a contract that was created but never checked in.
CONTRACT_STATE_MACHINE = StateMachine(
    {
        None: {ContractStatus.ACTIVE},
        ContractStatus.ACTIVE: {ContractStatus.TERMINATED, ContractStatus.EXPIRED},
        ContractStatus.TERMINATED: {ContractStatus.ACTIVE},
        ContractStatus.EXPIRED: {ContractStatus.ACTIVE},
    }
)


def as_datetime(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def is_expired(end_date: date | datetime, now: date | datetime) -> bool:
    return as_datetime(end_date) < as_datetime(now)


def is_expiring_soon(
    end_date: date | datetime,
    now: date | datetime,
    threshold_days: int = DEFAULT_EXPIRING_SOON_DAYS,
) -> bool:
    end, current = as_datetime(end_date), as_datetime(now)
    return current < end <= current + timedelta(days=threshold_days)


def remaining_days(end_date: date | datetime, now: date | datetime) -> int:
    """Whole days left until ``end_date``; negative once it has passed.

    Partial days round away from zero so the sign always agrees with
    :func:`is_expired`.
    """
    days = (as_datetime(end_date) - as_datetime(now)) / _ONE_DAY
    return math.ceil(days) if days >= 0 else math.floor(days)


def contract_duration(start_date: date | datetime, end_date: date | datetime) -> int:
    return math.ceil(abs(as_datetime(end_date) - as_datetime(start_date)) / _ONE_DAY)


def effective_badge(
    status: ContractStatus | None,
    end_date: date | datetime,
    now: date | datetime,
    threshold_days: int = DEFAULT_EXPIRING_SOON_DAYS,
) -> ContractBadge | None:
    if status is None:
        return None
    if status is ContractStatus.ACTIVE and is_expiring_soon(end_date, now, threshold_days):
        return ContractBadge.ACTIVE_EXPIRING_SOON
    return ContractBadge(status.value)


@dataclass(frozen=True)
class TransitionPlan:
    """Validated status change plus the room status it implies."""

    current: ContractStatus | None
    target: ContractStatus
    room_status: RoomStatus

    @property
    def is_reactivation(self) -> bool:
        return self.current is not None and self.target is ContractStatus.ACTIVE


def allowed_targets(current: ContractStatus | None, allow_reactivation: bool = True) -> list[ContractStatus]:
    """Statuses reachable from ``current`` by the table alone, date guards aside."""
    targets = CONTRACT_STATE_MACHINE.targets(current)
    if current is not None and not allow_reactivation:
        targets.discard(ContractStatus.ACTIVE)
    return sorted(targets, key=lambda status: status.value)


def plan_transition(
    current: ContractStatus | None,
    target: ContractStatus,
    end_date: date | datetime,
    now: date | datetime,
    allow_reactivation: bool = True,
) -> TransitionPlan:
    """Validate ``current -> target`` and return the resulting plan.

    Raises:
        StateTransitionError: for self-transitions, pairs missing from the
            transition table, and pairs whose guard fails.
    """
    current_label = current.value if current is not None else None
    if current == target:
        raise StateTransitionError(current_label, target.value, "contract already has this status")
    CONTRACT_STATE_MACHINE.assert_transition(current, target)

    if target is ContractStatus.ACTIVE:
        if current is not None and not allow_reactivation:
            raise StateTransitionError(current_label, target.value, "contract reactivation is disabled")
        if not as_datetime(end_date) > as_datetime(now):
            raise StateTransitionError(current_label, target.value, "cannot check in an expired contract")
        return TransitionPlan(current=current, target=target, room_status=RoomStatus.OCCUPIED)

    if target is ContractStatus.EXPIRED and not is_expired(end_date, now):
        raise StateTransitionError(current_label, target.value, "contract end date has not passed yet")
    return TransitionPlan(current=current, target=target, room_status=RoomStatus.AVAILABLE)
