from __future__ import annotations

from datetime import date, datetime

import pytest

from boardinghouse.core.exceptions import StateTransitionError
from boardinghouse.domain.contract_status import (
    CONTRACT_STATE_MACHINE,
    contract_duration,
    effective_badge,
    is_expired,
    is_expiring_soon,
    plan_transition,
    remaining_days,
)
from boardinghouse.models import ContractBadge, ContractStatus, RoomStatus

START = date(2024, 1, 1)
END = date(2024, 1, 31)


def test_duration_of_january_contract_is_thirty_days():
    assert contract_duration(START, END) == 30
    assert contract_duration(END, START) == 30


def test_mid_term_contract_is_expiring_soon():
    now = datetime(2024, 1, 20)
    assert remaining_days(END, now) == 11
    assert is_expiring_soon(END, now) is True
    assert is_expired(END, now) is False
    assert effective_badge(ContractStatus.ACTIVE, END, now) is ContractBadge.ACTIVE_EXPIRING_SOON


def test_partial_day_rounds_remaining_up():
    assert remaining_days(END, datetime(2024, 1, 20, 10, 30)) == 11


def test_contract_past_end_date_is_expired():
    now = datetime(2024, 2, 5)
    assert remaining_days(END, now) == -5
    assert is_expired(END, now) is True
    assert is_expiring_soon(END, now) is False


def test_remaining_days_sign_agrees_with_is_expired():
    now = datetime(2024, 1, 31, 6, 0)
    assert is_expired(END, now) is True
    assert remaining_days(END, now) == -1


def test_end_date_exactly_threshold_away_is_expiring_soon():
    assert is_expiring_soon(date(2024, 3, 1), date(2024, 1, 31), threshold_days=30) is True
    assert is_expiring_soon(date(2024, 3, 2), date(2024, 1, 31), threshold_days=30) is False


def test_badge_for_far_future_active_contract_is_plain_active():
    assert effective_badge(ContractStatus.ACTIVE, date(2025, 1, 1), date(2024, 1, 1)) is ContractBadge.ACTIVE


def test_badge_follows_stored_terminal_status_and_pending_has_none():
    now = datetime(2024, 1, 20)
    assert effective_badge(ContractStatus.TERMINATED, END, now) is ContractBadge.TERMINATED
    assert effective_badge(ContractStatus.EXPIRED, END, now) is ContractBadge.EXPIRED
    assert effective_badge(None, END, now) is None


def test_check_in_plan_occupies_room():
    plan = plan_transition(None, ContractStatus.ACTIVE, END, datetime(2024, 1, 2))
    assert plan.room_status is RoomStatus.OCCUPIED
    assert plan.is_reactivation is False


def test_check_in_after_end_date_is_rejected():
    with pytest.raises(StateTransitionError, match="expired contract"):
        plan_transition(None, ContractStatus.ACTIVE, END, datetime(2024, 2, 1))


def test_self_transition_is_rejected():
    with pytest.raises(StateTransitionError, match="ACTIVE -> ACTIVE"):
        plan_transition(ContractStatus.ACTIVE, ContractStatus.ACTIVE, END, datetime(2024, 1, 2))


def test_check_out_plan_frees_room():
    plan = plan_transition(ContractStatus.ACTIVE, ContractStatus.TERMINATED, END, datetime(2024, 1, 10))
    assert plan.room_status is RoomStatus.AVAILABLE


def test_mark_expired_requires_passed_end_date():
    with pytest.raises(StateTransitionError, match="not passed"):
        plan_transition(ContractStatus.ACTIVE, ContractStatus.EXPIRED, END, datetime(2024, 1, 10))
    plan = plan_transition(ContractStatus.ACTIVE, ContractStatus.EXPIRED, END, datetime(2024, 2, 10))
    assert plan.room_status is RoomStatus.AVAILABLE


def test_pending_contract_cannot_be_terminated():
    with pytest.raises(StateTransitionError, match="PENDING -> TERMINATED"):
        plan_transition(None, ContractStatus.TERMINATED, END, datetime(2024, 1, 10))


def test_reactivation_honours_switch():
    plan = plan_transition(ContractStatus.TERMINATED, ContractStatus.ACTIVE, END, datetime(2024, 1, 10))
    assert plan.is_reactivation is True
    with pytest.raises(StateTransitionError, match="reactivation is disabled"):
        plan_transition(
            ContractStatus.TERMINATED,
            ContractStatus.ACTIVE,
            END,
            datetime(2024, 1, 10),
            allow_reactivation=False,
        )


def test_expired_contract_cannot_be_terminated():
    assert CONTRACT_STATE_MACHINE.can_transition(ContractStatus.EXPIRED, ContractStatus.TERMINATED) is False
