from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime

import pytest

from boardinghouse.core.config import get_config
from boardinghouse.core.exceptions import ConflictError, NotFoundError, ValidationError
from boardinghouse.models import BillStatus
from boardinghouse.services.bill_service import BillService
from boardinghouse.services.contract_service import ContractService


@pytest.fixture
def config():
    return replace(get_config(), DEFAULT_SERVICE_FEE=150_000, BILL_DUE_DAY=5)


@pytest.fixture
def active_contract(session, make_room, make_tenant, config):
    room = make_room(base_price=3_000_000)
    tenant = make_tenant()
    return ContractService(db=session, config=config).create_contract(
        room_id=room.id,
        start_date=date(2024, 1, 1),
        end_date=date(2024, 12, 31),
        deposit=3_000_000,
        tenant_ids=[tenant.id],
        primary_tenant_id=tenant.id,
        check_in=True,
        now=datetime(2024, 1, 2),
    )


def test_create_bill_sums_parts_and_defaults_due_date(session, active_contract, config):
    bill = BillService(db=session, config=config).create_bill(
        contract_id=active_contract.id,
        room_id=active_contract.room_id,
        month=12,
        year=2024,
        rent_amount=3_000_000,
        electric_amount=350_000,
        water_amount=100_000,
    )

    assert bill.total_amount == 3_450_000
    assert bill.status is BillStatus.UNPAID
    assert bill.due_date == date(2025, 1, 5)


def test_create_bill_rejects_mismatched_total(session, active_contract, config):
    with pytest.raises(ValidationError) as excinfo:
        BillService(db=session, config=config).create_bill(
            contract_id=active_contract.id,
            room_id=active_contract.room_id,
            month=2,
            year=2024,
            rent_amount=3_000_000,
            total_amount=2_000_000,
        )
    assert excinfo.value.field == "total_amount"


def test_create_bill_requires_matching_room(session, active_contract, config, make_room):
    other_room = make_room()
    with pytest.raises(ValidationError):
        BillService(db=session, config=config).create_bill(
            contract_id=active_contract.id,
            room_id=other_room.id,
            month=2,
            year=2024,
            rent_amount=3_000_000,
        )


def test_duplicate_period_conflicts(session, active_contract, config):
    service = BillService(db=session, config=config)
    kwargs = dict(contract_id=active_contract.id, room_id=active_contract.room_id, month=2, year=2024, rent_amount=1)
    service.create_bill(**kwargs)
    with pytest.raises(ConflictError):
        service.create_bill(**kwargs)


def test_invalid_month_is_rejected(session, active_contract, config):
    with pytest.raises(ValidationError):
        BillService(db=session, config=config).create_bill(
            contract_id=active_contract.id, room_id=active_contract.room_id, month=13, year=2024, rent_amount=1
        )


def test_pay_bill_once(session, active_contract, config):
    service = BillService(db=session, config=config)
    bill = service.create_bill(
        contract_id=active_contract.id, room_id=active_contract.room_id, month=2, year=2024, rent_amount=3_000_000
    )

    paid = service.pay_bill(bill.id, paid_date=date(2024, 3, 1))
    assert paid.status is BillStatus.PAID
    assert paid.paid_date == date(2024, 3, 1)

    with pytest.raises(ConflictError):
        service.pay_bill(bill.id)


def test_generate_monthly_bills_uses_base_price_plus_fee_and_skips_billed(session, active_contract, config):
    service = BillService(db=session, config=config)

    result = service.generate_monthly_bills(month=4, year=2024)
    assert len(result.generated) == 1
    bill = result.generated[0]
    assert bill.rent_amount == 3_000_000
    assert bill.service_amount == 150_000
    assert bill.total_amount == 3_150_000
    assert bill.due_date == date(2024, 5, 5)

    with pytest.raises(ConflictError):
        service.generate_monthly_bills(month=4, year=2024)


def test_generate_without_active_contracts_is_not_found(session, config):
    with pytest.raises(NotFoundError):
        BillService(db=session, config=config).generate_monthly_bills(month=4, year=2024)


def test_overdue_sweep_flags_unpaid_bills_past_due(session, active_contract, config):
    service = BillService(db=session, config=config)
    late = service.create_bill(
        contract_id=active_contract.id, room_id=active_contract.room_id, month=2, year=2024, rent_amount=1
    )
    on_time = service.create_bill(
        contract_id=active_contract.id, room_id=active_contract.room_id, month=3, year=2024, rent_amount=1
    )

    assert service.mark_overdue_bills(today=date(2024, 3, 20)) == 1

    session.expire_all()
    assert service.get_bill(late.id).status is BillStatus.OVERDUE
    assert service.get_bill(on_time.id).status is BillStatus.UNPAID


def test_bill_stats_splits_revenue(session, active_contract, config):
    service = BillService(db=session, config=config)
    first = service.create_bill(
        contract_id=active_contract.id, room_id=active_contract.room_id, month=2, year=2024, rent_amount=3_000_000
    )
    service.create_bill(
        contract_id=active_contract.id, room_id=active_contract.room_id, month=3, year=2024, rent_amount=2_000_000
    )
    service.pay_bill(first.id)

    stats = service.bill_stats()
    assert stats["total_bills"] == 2
    assert stats["paid_bills"] == 1
    assert stats["total_revenue"] == 3_000_000
    assert stats["pending_revenue"] == 2_000_000


def test_generate_skips_contracts_outside_the_month(session, active_contract, config, make_room, make_tenant):
    tenant = make_tenant("Hoang G")
    later = ContractService(db=session, config=config).create_contract(
        room_id=make_room().id,
        start_date=date(2024, 6, 1),
        end_date=date(2024, 11, 30),
        deposit=1_000_000,
        tenant_ids=[tenant.id],
        primary_tenant_id=tenant.id,
        check_in=True,
        now=datetime(2024, 1, 2),
    )
    service = BillService(db=session, config=config)

    april = service.generate_monthly_bills(month=4, year=2024)
    assert [bill.contract_id for bill in april.generated] == [active_contract.id]

    june = service.generate_monthly_bills(month=6, year=2024)
    assert sorted(bill.contract_id for bill in june.generated) == [active_contract.id, later.id]

    with pytest.raises(NotFoundError):
        service.generate_monthly_bills(month=2, year=2025)


def test_update_bill_recomputes_total(session, active_contract, config):
    service = BillService(db=session, config=config)
    bill = service.create_bill(
        contract_id=active_contract.id, room_id=active_contract.room_id, month=2, year=2024, rent_amount=3_000_000
    )

    updated = service.update_bill(bill.id, electric_amount=420_000, notes="Meter re-read")

    assert updated.total_amount == 3_420_000
    assert updated.notes == "Meter re-read"

    with pytest.raises(ValidationError) as excinfo:
        service.update_bill(bill.id, water_amount=50_000, total_amount=1)
    assert excinfo.value.field == "total_amount"
    assert bill.water_amount == 0


def test_paid_bill_amounts_are_frozen(session, active_contract, config):
    service = BillService(db=session, config=config)
    bill = service.create_bill(
        contract_id=active_contract.id, room_id=active_contract.room_id, month=2, year=2024, rent_amount=3_000_000
    )
    service.pay_bill(bill.id, paid_date=date(2024, 3, 1))

    with pytest.raises(ValidationError):
        service.update_bill(bill.id, rent_amount=2_500_000)

    assert service.update_bill(bill.id, notes="Paid in cash").notes == "Paid in cash"
