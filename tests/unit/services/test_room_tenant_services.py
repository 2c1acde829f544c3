from __future__ import annotations

from datetime import date, datetime

import pytest
from sqlalchemy import select

from boardinghouse.core.exceptions import ConflictError, ValidationError
from boardinghouse.models import Bill, Contract, ContractTenant, ResidencyRecord, ResidencyType, RoomStatus, Tenant
from boardinghouse.services.bill_service import BillService
from boardinghouse.services.contract_service import ContractService
from boardinghouse.services.room_service import RoomService
from boardinghouse.services.tenant_service import TenantService


def test_create_room_validates_fields(session):
    service = RoomService(db=session)
    with pytest.raises(ValidationError) as excinfo:
        service.create_room(number="101", floor=1, area=20.0, capacity=11, base_price=3_000_000)
    assert excinfo.value.field == "capacity"

    room = service.create_room(number=" 101 ", floor=1, area=20.0, capacity=2, base_price=3_000_000)
    assert room.number == "101"
    assert room.status is RoomStatus.AVAILABLE

    with pytest.raises(ConflictError):
        service.create_room(number="101", floor=2, area=18.0, capacity=1, base_price=2_000_000)


def test_rooms_cannot_be_marked_occupied_by_hand(session, make_room):
    room = make_room()
    with pytest.raises(ValidationError):
        RoomService(db=session).set_status(room.id, RoomStatus.OCCUPIED)


def test_room_with_active_contract_keeps_its_status(session, make_room, make_tenant):
    room = make_room()
    tenant = make_tenant()
    ContractService(db=session).create_contract(
        room_id=room.id,
        start_date=date(2024, 1, 1),
        end_date=date(2024, 12, 31),
        deposit=1_000_000,
        tenant_ids=[tenant.id],
        primary_tenant_id=tenant.id,
        check_in=True,
        now=datetime(2024, 1, 2),
    )

    with pytest.raises(ConflictError):
        RoomService(db=session).set_status(room.id, RoomStatus.MAINTENANCE)


def test_list_rooms_filters_by_status(session, make_room):
    make_room()
    reserved = make_room(status=RoomStatus.RESERVED)

    rooms = RoomService(db=session).list_rooms(status=RoomStatus.RESERVED)

    assert [room.id for room in rooms] == [reserved.id]


def test_tenant_id_card_is_unique(session):
    service = TenantService(db=session)
    service.create_tenant(full_name="Nguyen Van A", phone="0901234567", id_card="001090000001")
    with pytest.raises(ConflictError):
        service.create_tenant(full_name="Tran Van B", phone="0907654321", id_card="001090000001")


def test_tenant_search_matches_name_and_phone(session):
    service = TenantService(db=session)
    service.create_tenant(full_name="Nguyen Van A", phone="0901234567", id_card="001090000001")
    service.create_tenant(full_name="Tran Thi B", phone="0907654321", id_card="001090000002")

    assert [tenant.full_name for tenant in service.list_tenants(search="tran")] == ["Tran Thi B"]
    assert [tenant.full_name for tenant in service.list_tenants(search="1234")] == ["Nguyen Van A"]


def _lease(session, room, tenants, check_in=True, **overrides):
    params = dict(
        room_id=room.id,
        start_date=date(2024, 1, 1),
        end_date=date(2024, 12, 31),
        deposit=1_000_000,
        tenant_ids=[tenant.id for tenant in tenants],
        primary_tenant_id=tenants[0].id,
        check_in=check_in,
        now=datetime(2024, 1, 2),
    )
    params.update(overrides)
    return ContractService(db=session).create_contract(**params)


def test_delete_room_blocked_by_active_contract_or_unpaid_bill(session, make_room, make_tenant):
    room = make_room()
    contract = _lease(session, room, [make_tenant()])
    service = RoomService(db=session)

    with pytest.raises(ConflictError):
        service.delete_room(room.id)

    ContractService(db=session).check_out(contract.id, now=datetime(2024, 3, 10))
    with pytest.raises(ConflictError, match="unpaid"):
        service.delete_room(room.id)


def test_delete_room_removes_finished_contracts_and_paid_bills(session, make_room, make_tenant):
    room = make_room()
    tenant = make_tenant()
    contract = _lease(session, room, [tenant])
    ContractService(db=session).check_out(contract.id, now=datetime(2024, 3, 10))
    final_bill = session.scalar(select(Bill).where(Bill.contract_id == contract.id))
    BillService(db=session).pay_bill(final_bill.id, paid_date=date(2024, 3, 12))

    RoomService(db=session).delete_room(room.id)

    assert session.scalars(select(Contract)).all() == []
    assert session.scalars(select(Bill)).all() == []
    assert session.scalars(select(ContractTenant)).all() == []
    assert session.get(Tenant, tenant.id) is not None


def test_delete_tenant_blocked_while_on_active_or_sole_tenant(session, make_room, make_tenant):
    active_tenant, pending_tenant = make_tenant(), make_tenant("Tran Thi B")
    _lease(session, make_room(), [active_tenant])
    _lease(session, make_room(), [pending_tenant], check_in=False)
    service = TenantService(db=session)

    with pytest.raises(ConflictError, match="active"):
        service.delete_tenant(active_tenant.id)
    with pytest.raises(ConflictError, match="only tenant"):
        service.delete_tenant(pending_tenant.id)


def test_delete_primary_tenant_promotes_co_tenant(session, make_room, make_tenant):
    leaving, staying = make_tenant(), make_tenant("Tran Thi B")
    contract = _lease(session, make_room(), [leaving, staying], check_in=False)
    session.add(
        ResidencyRecord(tenant_id=leaving.id, type=ResidencyType.TEMPORARY_RESIDENCE, start_date=date(2024, 1, 1))
    )
    session.commit()

    TenantService(db=session).delete_tenant(leaving.id)

    session.expire_all()
    assert session.get(Tenant, leaving.id) is None
    assert session.scalars(select(ResidencyRecord)).all() == []
    links = session.get(Contract, contract.id).tenants
    assert [(link.tenant_id, link.is_primary) for link in links] == [(staying.id, True)]


def test_tenant_history_pages_newest_first(session, make_room, make_tenant):
    tenant = make_tenant()
    older = _lease(session, make_room(), [tenant], check_in=False, end_date=date(2024, 6, 30))
    newer = _lease(session, make_room(), [tenant], check_in=False, start_date=date(2024, 7, 1))
    service = TenantService(db=session)

    first_page = service.history(tenant.id, page=1, limit=1)
    assert (first_page.total, first_page.pages) == (2, 2)
    assert [link.contract_id for link in first_page.links] == [newer.id]
    assert [link.contract_id for link in service.history(tenant.id, page=2, limit=1).links] == [older.id]

    with pytest.raises(ValidationError):
        service.history(tenant.id, limit=51)
