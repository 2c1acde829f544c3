from __future__ import annotations

import pytest

from boardinghouse.core.exceptions import StateTransitionError
from boardinghouse.domain.contract_status import CONTRACT_STATE_MACHINE, allowed_targets
from boardinghouse.models import ContractStatus


@pytest.mark.parametrize(
    "current, target",
    [
        (None, ContractStatus.ACTIVE),
        (ContractStatus.ACTIVE, ContractStatus.TERMINATED),
        (ContractStatus.ACTIVE, ContractStatus.EXPIRED),
        (ContractStatus.TERMINATED, ContractStatus.ACTIVE),
        (ContractStatus.EXPIRED, ContractStatus.ACTIVE),
    ],
)
def test_contract_table_allows_lifecycle_moves(current, target):
    assert CONTRACT_STATE_MACHINE.can_transition(current, target) is True
    CONTRACT_STATE_MACHINE.assert_transition(current, target)


def test_terminated_contract_cannot_expire():
    with pytest.raises(StateTransitionError) as excinfo:
        CONTRACT_STATE_MACHINE.assert_transition(ContractStatus.TERMINATED, ContractStatus.EXPIRED)
    assert excinfo.value.current == "TERMINATED"
    assert excinfo.value.target == "EXPIRED"
    assert excinfo.value.field == "status"


def test_pending_contract_is_labelled_in_errors():
    assert CONTRACT_STATE_MACHINE.targets(None) == {ContractStatus.ACTIVE}
    with pytest.raises(StateTransitionError, match="PENDING -> EXPIRED"):
        CONTRACT_STATE_MACHINE.assert_transition(None, ContractStatus.EXPIRED)


def test_allowed_targets_drop_reactivation_when_disabled():
    assert allowed_targets(ContractStatus.ACTIVE) == [ContractStatus.EXPIRED, ContractStatus.TERMINATED]
    assert allowed_targets(ContractStatus.EXPIRED) == [ContractStatus.ACTIVE]
    assert allowed_targets(ContractStatus.EXPIRED, allow_reactivation=False) == []
    assert allowed_targets(None, allow_reactivation=False) == [ContractStatus.ACTIVE]
