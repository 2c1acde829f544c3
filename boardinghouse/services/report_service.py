"""Report aggregation over bills, contracts and rooms.

Periods are calendar months. A range from 2024-01-15 to 2024-03-02 covers the
three periods 1/2024, 2/2024 and 3/2024; bills are attributed to the period
named by their ``month``/``year`` fields, not by their timestamps.
"""

from __future__ import annotations

import calendar
import logging
from collections.abc import Iterator
from dataclasses import asdict, dataclass, field
from datetime import date, datetime, time
from decimal import ROUND_HALF_UP, Decimal
from statistics import mean

from sqlalchemy import func, or_, select

from boardinghouse.core.exceptions import ValidationError
from boardinghouse.models import Bill, BillStatus, Contract, ContractStatus, ContractTenant, ReportType, Room, RoomStatus
from boardinghouse.services.base_service import BaseService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportFilters:
    start_date: date
    end_date: date
    room_ids: tuple[int, ...] | None = None

    def __post_init__(self) -> None:
        if self.start_date > self.end_date:
            raise ValidationError("Start date must not be after end date", field="start_date")

    def as_dict(self) -> dict:
        return {
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "room_ids": list(self.room_ids) if self.room_ids else None,
        }


@dataclass(frozen=True)
class Period:
    month: int
    year: int

    @property
    def label(self) -> str:
        return f"{self.month}/{self.year}"

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, calendar.monthrange(self.year, self.month)[1])


def iter_periods(start_date: date, end_date: date) -> Iterator[Period]:
    year, month = start_date.year, start_date.month
    while (year, month) <= (end_date.year, end_date.month):
        yield Period(month=month, year=year)
        year, month = (year + 1, 1) if month == 12 else (year, month + 1)


def percent(part: int, whole: int) -> int:
    """Integer percentage rounded half-up; ``0`` when ``whole`` is zero."""
    if whole <= 0:
        return 0
    value = Decimal(part) * 100 / Decimal(whole)
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass
class RevenueRow:
    period: str
    month: int
    year: int
    month_name: str
    paid_revenue: int = 0
    pending_revenue: int = 0
    total_revenue: int = 0
    paid_bills: int = 0
    unpaid_bills: int = 0
    overdue_bills: int = 0
    total_bills: int = 0


@dataclass
class OccupancyRow:
    period: str
    month: int
    year: int
    total_rooms: int = 0
    occupied_rooms: int = 0
    available_rooms: int = 0
    reserved_rooms: int = 0
    maintenance_rooms: int = 0
    occupancy_rate: int = 0


@dataclass
class BillRow:
    period: str
    month: int
    year: int
    total_bills: int = 0
    paid_bills: int = 0
    unpaid_bills: int = 0
    overdue_bills: int = 0
    total_amount: int = 0
    paid_amount: int = 0
    pending_amount: int = 0
    overdue_amount: int = 0
    average_bill_amount: float = 0.0


@dataclass
class ReportSummary:
    total_revenue: int
    paid_revenue: int
    total_bills: int
    average_occupancy: float
    total_tenants: int
    total_contracts: int
    period: dict


@dataclass(frozen=True)
class DashboardStats:
    total_rooms: int
    occupied_rooms: int
    available_rooms: int
    total_tenants: int
    occupancy_rate: int
    monthly_revenue: int


@dataclass
class Report:
    type: ReportType
    filters: dict
    summary: ReportSummary
    report_data: list = field(default_factory=list)
    generated_at: datetime | None = None

    @property
    def total_records(self) -> int:
        return len(self.report_data)

    def rows_as_dicts(self) -> list[dict]:
        return [asdict(row) for row in self.report_data]

    def as_dict(self) -> dict:
        return {
            "type": self.type.value,
            "filters": self.filters,
            "summary": asdict(self.summary),
            "report_data": self.rows_as_dicts(),
            "generated_at": self.generated_at,
            "total_records": self.total_records,
        }


class ReportService(BaseService):
    """Builds revenue, occupancy and bill reports for a date range."""

    # Query helpers

    @staticmethod
    def _period_key(year_column, month_column):
        return year_column * 100 + month_column

    def _bill_totals(self, filters: ReportFilters) -> dict[tuple[int, int], dict[BillStatus, tuple[int, int]]]:
        """``{(year, month): {status: (count, amount)}}`` for bills in range."""
        key = self._period_key(Bill.year, Bill.month)
        query = (
            select(
                Bill.year,
                Bill.month,
                Bill.status,
                func.count(Bill.id),
                func.coalesce(func.sum(Bill.total_amount), 0),
            )
            .where(
                key >= filters.start_date.year * 100 + filters.start_date.month,
                key <= filters.end_date.year * 100 + filters.end_date.month,
            )
            .group_by(Bill.year, Bill.month, Bill.status)
        )
        if filters.room_ids:
            query = query.where(Bill.room_id.in_(filters.room_ids))

        totals: dict[tuple[int, int], dict[BillStatus, tuple[int, int]]] = {}
        for year, month, status, count, amount in self.db.execute(query):
            totals.setdefault((year, month), {})[status] = (int(count), int(amount))
        return totals

    def _room_query(self, query, filters: ReportFilters):
        if filters.room_ids:
            query = query.where(Room.id.in_(filters.room_ids))
        return query

    @staticmethod
    def _leased_room_ids(first_day: date, last_day: date):
        return select(Contract.room_id).where(
            Contract.status == ContractStatus.ACTIVE,
            Contract.start_date <= last_day,
            Contract.end_date >= first_day,
        )

    def _rooms_existing_in(self, filters: ReportFilters, first_day: date, last_day: date) -> int:
        # Rooms entered after the fact still existed while a lease ran in them.
        cutoff = datetime.combine(last_day, time.max)
        query = select(func.count(Room.id)).where(
            or_(Room.created_at <= cutoff, Room.id.in_(self._leased_room_ids(first_day, last_day)))
        )
        return self.db.scalar(self._room_query(query, filters))

    def _occupied_rooms(self, filters: ReportFilters, first_day: date, last_day: date) -> int:
        query = select(func.count(Room.id)).where(Room.id.in_(self._leased_room_ids(first_day, last_day)))
        return self.db.scalar(self._room_query(query, filters))

    def _current_room_status_counts(self, filters: ReportFilters) -> dict[RoomStatus, int]:
        query = self._room_query(select(Room.status, func.count(Room.id)).group_by(Room.status), filters)
        return {status: int(count) for status, count in self.db.execute(query)}

    # Reports

    def revenue_rows(self, filters: ReportFilters) -> list[RevenueRow]:
        totals = self._bill_totals(filters)
        rows = []
        for period in iter_periods(filters.start_date, filters.end_date):
            by_status = totals.get((period.year, period.month), {})
            paid_count, paid_amount = by_status.get(BillStatus.PAID, (0, 0))
            unpaid_count, unpaid_amount = by_status.get(BillStatus.UNPAID, (0, 0))
            overdue_count, overdue_amount = by_status.get(BillStatus.OVERDUE, (0, 0))
            pending = unpaid_amount + overdue_amount
            rows.append(
                RevenueRow(
                    period=period.label,
                    month=period.month,
                    year=period.year,
                    month_name=calendar.month_name[period.month],
                    paid_revenue=paid_amount,
                    pending_revenue=pending,
                    total_revenue=paid_amount + pending,
                    paid_bills=paid_count,
                    unpaid_bills=unpaid_count,
                    overdue_bills=overdue_count,
                    total_bills=paid_count + unpaid_count + overdue_count,
                )
            )
        return rows

    def occupancy_rows(self, filters: ReportFilters) -> list[OccupancyRow]:
        current = self._current_room_status_counts(filters)
        rows = []
        for period in iter_periods(filters.start_date, filters.end_date):
            total_rooms = self._rooms_existing_in(filters, period.first_day, period.last_day)
            occupied = self._occupied_rooms(filters, period.first_day, period.last_day)
            rows.append(
                OccupancyRow(
                    period=period.label,
                    month=period.month,
                    year=period.year,
                    total_rooms=total_rooms,
                    occupied_rooms=occupied,
                    available_rooms=current.get(RoomStatus.AVAILABLE, 0),
                    reserved_rooms=current.get(RoomStatus.RESERVED, 0),
                    maintenance_rooms=current.get(RoomStatus.MAINTENANCE, 0),
                    occupancy_rate=percent(occupied, total_rooms),
                )
            )
        return rows

    def bill_rows(self, filters: ReportFilters) -> list[BillRow]:
        totals = self._bill_totals(filters)
        rows = []
        for period in iter_periods(filters.start_date, filters.end_date):
            by_status = totals.get((period.year, period.month), {})
            paid_count, paid_amount = by_status.get(BillStatus.PAID, (0, 0))
            unpaid_count, unpaid_amount = by_status.get(BillStatus.UNPAID, (0, 0))
            overdue_count, overdue_amount = by_status.get(BillStatus.OVERDUE, (0, 0))
            total_count = paid_count + unpaid_count + overdue_count
            total_amount = paid_amount + unpaid_amount + overdue_amount
            rows.append(
                BillRow(
                    period=period.label,
                    month=period.month,
                    year=period.year,
                    total_bills=total_count,
                    paid_bills=paid_count,
                    unpaid_bills=unpaid_count,
                    overdue_bills=overdue_count,
                    total_amount=total_amount,
                    paid_amount=paid_amount,
                    pending_amount=unpaid_amount + overdue_amount,
                    overdue_amount=overdue_amount,
                    average_bill_amount=round(total_amount / total_count, 2) if total_count else 0.0,
                )
            )
        return rows

    def summary(self, filters: ReportFilters) -> ReportSummary:
        revenue = self.revenue_rows(filters)
        occupancy = self.occupancy_rows(filters)

        tenants_query = (
            select(func.count(func.distinct(ContractTenant.tenant_id)))
            .join(Contract, Contract.id == ContractTenant.contract_id)
            .where(
                Contract.status == ContractStatus.ACTIVE,
                Contract.start_date <= filters.end_date,
                Contract.end_date >= filters.start_date,
            )
        )
        contracts_query = select(func.count(Contract.id)).where(
            Contract.start_date <= filters.end_date,
            Contract.end_date >= filters.start_date,
        )
        if filters.room_ids:
            tenants_query = tenants_query.where(Contract.room_id.in_(filters.room_ids))
            contracts_query = contracts_query.where(Contract.room_id.in_(filters.room_ids))

        rates = [row.occupancy_rate for row in occupancy]
        return ReportSummary(
            total_revenue=sum(row.total_revenue for row in revenue),
            paid_revenue=sum(row.paid_revenue for row in revenue),
            total_bills=sum(row.total_bills for row in revenue),
            average_occupancy=round(mean(rates), 2) if rates else 0.0,
            total_tenants=self.db.scalar(tenants_query),
            total_contracts=self.db.scalar(contracts_query),
            period={
                "from": filters.start_date.isoformat(),
                "to": filters.end_date.isoformat(),
                "months": len(occupancy),
            },
        )

    def dashboard_stats(self) -> DashboardStats:
        """Snapshot of the house right now; revenue is the rent roll of occupied rooms."""
        by_status = dict(self.db.execute(select(Room.status, func.count(Room.id)).group_by(Room.status)).all())
        total_rooms = sum(by_status.values())
        occupied = by_status.get(RoomStatus.OCCUPIED, 0)
        tenants = self.db.scalar(
            select(func.count(func.distinct(ContractTenant.tenant_id)))
            .join(Contract, Contract.id == ContractTenant.contract_id)
            .where(Contract.status == ContractStatus.ACTIVE)
        )
        rent_roll = self.db.scalar(
            select(func.coalesce(func.sum(Room.base_price), 0)).where(Room.status == RoomStatus.OCCUPIED)
        )
        return DashboardStats(
            total_rooms=total_rooms,
            occupied_rooms=occupied,
            available_rooms=by_status.get(RoomStatus.AVAILABLE, 0),
            total_tenants=tenants,
            occupancy_rate=percent(occupied, total_rooms),
            monthly_revenue=int(rent_roll),
        )

    def build_report(self, report_type: ReportType | str, filters: ReportFilters, now: datetime | None = None) -> Report:
        try:
            kind = ReportType(report_type)
        except ValueError as exc:
            raise ValidationError(f"Unknown report type: {report_type}", field="type") from exc

        builders = {
            ReportType.REVENUE: self.revenue_rows,
            ReportType.OCCUPANCY: self.occupancy_rows,
            ReportType.BILLS: self.bill_rows,
        }
        report = Report(
            type=kind,
            filters=filters.as_dict(),
            summary=self.summary(filters),
            report_data=builders[kind](filters),
            generated_at=self._now(now),
        )
        logger.info(
            "report.generated",
            extra={"event": "report.generated", "report_type": kind.value, "total_records": report.total_records},
        )
        return report
