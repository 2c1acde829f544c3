from __future__ import annotations

from datetime import date, datetime

import pytest

from boardinghouse.core.exceptions import ValidationError
from boardinghouse.models import Bill, BillStatus, Contract, ContractStatus, ContractTenant, ReportType, RoomStatus
from boardinghouse.services.report_service import ReportFilters, ReportService, iter_periods, percent

JANUARY = ReportFilters(start_date=date(2024, 1, 1), end_date=date(2024, 1, 31))


def _contract(session, room, tenant, status=ContractStatus.ACTIVE, start=date(2024, 1, 1), end=date(2024, 12, 31)):
    contract = Contract(
        contract_number=f"HD2024{room.id:04d}{tenant.id}",
        room_id=room.id,
        start_date=start,
        end_date=end,
        deposit=1_000_000,
        status=status,
        tenants=[ContractTenant(tenant_id=tenant.id, is_primary=True)],
    )
    session.add(contract)
    session.commit()
    return contract


def _bill(session, contract, amount, status, month=1, year=2024):
    bill = Bill(
        contract_id=contract.id,
        room_id=contract.room_id,
        month=month,
        year=year,
        rent_amount=amount,
        total_amount=amount,
        status=status,
        due_date=date(year, month, 28),
    )
    session.add(bill)
    session.commit()
    return bill


def test_iter_periods_covers_partial_months_across_year_end():
    periods = list(iter_periods(date(2023, 11, 15), date(2024, 2, 1)))
    assert [period.label for period in periods] == ["11/2023", "12/2023", "1/2024", "2/2024"]


def test_percent_rounds_half_up_and_guards_zero():
    assert percent(1, 8) == 13
    assert percent(2, 3) == 67
    assert percent(0, 0) == 0


def test_filters_reject_inverted_range():
    with pytest.raises(ValidationError):
        ReportFilters(start_date=date(2024, 2, 1), end_date=date(2024, 1, 1))


def test_revenue_splits_paid_and_pending(session, make_room, make_tenant):
    rooms = [make_room() for _ in range(3)]
    contracts = [_contract(session, room, make_tenant(f"Tenant {room.id}")) for room in rooms]
    _bill(session, contracts[0], 3_000_000, BillStatus.PAID)
    _bill(session, contracts[1], 3_000_000, BillStatus.PAID)
    _bill(session, contracts[2], 2_000_000, BillStatus.UNPAID)

    [row] = ReportService(db=session).revenue_rows(JANUARY)

    assert row.paid_revenue == 6_000_000
    assert row.pending_revenue == 2_000_000
    assert row.total_revenue == 8_000_000
    assert (row.paid_bills, row.unpaid_bills, row.total_bills) == (2, 1, 3)
    assert row.month_name == "January"


def test_overdue_bills_count_as_pending(session, make_room, make_tenant):
    contract = _contract(session, make_room(), make_tenant())
    _bill(session, contract, 1_500_000, BillStatus.OVERDUE)

    [row] = ReportService(db=session).bill_rows(JANUARY)

    assert row.overdue_bills == 1
    assert row.overdue_amount == 1_500_000
    assert row.pending_amount == 1_500_000
    assert row.average_bill_amount == 1_500_000


def test_room_filter_restricts_aggregates(session, make_room, make_tenant):
    first, second = make_room(), make_room()
    _bill(session, _contract(session, first, make_tenant("A")), 3_000_000, BillStatus.PAID)
    _bill(session, _contract(session, second, make_tenant("B")), 2_000_000, BillStatus.PAID)

    filters = ReportFilters(start_date=JANUARY.start_date, end_date=JANUARY.end_date, room_ids=(second.id,))
    [row] = ReportService(db=session).revenue_rows(filters)

    assert row.paid_revenue == 2_000_000


def test_occupancy_with_no_rooms_is_zero(session):
    [row] = ReportService(db=session).occupancy_rows(JANUARY)
    assert row.total_rooms == 0
    assert row.occupancy_rate == 0


def test_occupancy_counts_active_contracts_overlapping_period(session, make_room, make_tenant):
    occupied = make_room()
    make_room()
    make_room(created_at=datetime(2024, 3, 1))
    _contract(session, occupied, make_tenant(), start=date(2024, 2, 1))

    rows = ReportService(db=session).occupancy_rows(
        ReportFilters(start_date=date(2024, 1, 1), end_date=date(2024, 3, 31))
    )

    assert [(row.total_rooms, row.occupied_rooms, row.occupancy_rate) for row in rows] == [
        (2, 0, 0),
        (2, 1, 50),
        (3, 1, 33),
    ]


def test_terminated_contracts_do_not_occupy(session, make_room, make_tenant):
    room = make_room()
    _contract(session, room, make_tenant(), status=ContractStatus.TERMINATED)

    [row] = ReportService(db=session).occupancy_rows(JANUARY)
    assert row.occupied_rooms == 0


def test_summary_over_range(session, make_room, make_tenant):
    room = make_room()
    make_room()
    contract = _contract(session, room, make_tenant())
    _bill(session, contract, 3_000_000, BillStatus.PAID, month=1)
    _bill(session, contract, 3_000_000, BillStatus.UNPAID, month=2)

    summary = ReportService(db=session).summary(ReportFilters(start_date=date(2024, 1, 1), end_date=date(2024, 2, 29)))

    assert summary.total_revenue == 6_000_000
    assert summary.paid_revenue == 3_000_000
    assert summary.total_bills == 2
    assert summary.average_occupancy == 50.0
    assert summary.total_tenants == 1
    assert summary.total_contracts == 1
    assert summary.period == {"from": "2024-01-01", "to": "2024-02-29", "months": 2}


def test_empty_range_summary_is_all_zero(session):
    summary = ReportService(db=session).summary(JANUARY)
    assert summary.total_revenue == 0
    assert summary.total_bills == 0
    assert summary.average_occupancy == 0
    assert summary.total_tenants == 0


def test_build_report_envelope(session, make_room):
    make_room()
    report = ReportService(db=session).build_report("occupancy", JANUARY, now=datetime(2024, 2, 1))

    payload = report.as_dict()
    assert payload["type"] == ReportType.OCCUPANCY.value
    assert payload["total_records"] == 1
    assert payload["filters"]["start_date"] == "2024-01-01"
    assert payload["generated_at"] == datetime(2024, 2, 1)


def test_build_report_rejects_unknown_type(session):
    with pytest.raises(ValidationError):
        ReportService(db=session).build_report("tenants", JANUARY)


def test_room_entered_after_its_lease_began_counts_as_occupied(session, make_room, make_tenant):
    room = make_room(created_at=datetime(2024, 6, 15))
    make_room(created_at=datetime(2024, 6, 15))
    _contract(session, room, make_tenant(), start=date(2024, 1, 1), end=date(2024, 12, 31))

    [row] = ReportService(db=session).occupancy_rows(JANUARY)

    assert (row.total_rooms, row.occupied_rooms, row.occupancy_rate) == (1, 1, 100)


def test_dashboard_stats_reflect_current_room_status(session, make_room, make_tenant):
    rented = make_room(base_price=3_000_000, status=RoomStatus.OCCUPIED)
    make_room(base_price=2_000_000, status=RoomStatus.OCCUPIED)
    make_room()
    make_room(status=RoomStatus.MAINTENANCE)
    _contract(session, rented, make_tenant())

    stats = ReportService(db=session).dashboard_stats()

    assert (stats.total_rooms, stats.occupied_rooms, stats.available_rooms) == (4, 2, 1)
    assert stats.occupancy_rate == 50
    assert stats.total_tenants == 1
    assert stats.monthly_revenue == 5_000_000
