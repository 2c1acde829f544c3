"""Bill service for billing and payment operations."""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass, field
from datetime import date, datetime

from sqlalchemy import func, select, update

from boardinghouse.core.exceptions import ConflictError, NotFoundError, ValidationError
from boardinghouse.models import Bill, BillStatus, Contract, ContractStatus
from boardinghouse.services.base_service import BaseService

logger = logging.getLogger(__name__)

MIN_BILL_YEAR = 2020
MAX_BILL_YEAR = 2100
BILL_PARTS = ("rent_amount", "electric_amount", "water_amount", "service_amount")


@dataclass
class GenerationResult:
    month: int
    year: int
    generated: list[Bill] = field(default_factory=list)
    skipped_contract_ids: list[int] = field(default_factory=list)


def _validate_period(month: int, year: int) -> None:
    if not 1 <= month <= 12:
        raise ValidationError("Month must be between 1 and 12", field="month")
    if not MIN_BILL_YEAR <= year <= MAX_BILL_YEAR:
        raise ValidationError(f"Year must be between {MIN_BILL_YEAR} and {MAX_BILL_YEAR}", field="year")


def _next_month(month: int, year: int) -> tuple[int, int]:
    return (1, year + 1) if month == 12 else (month + 1, year)


class BillService(BaseService):
    """Service for bill CRUD, payments, monthly generation and overdue sweeps."""

    def _due_date_for(self, month: int, year: int) -> date:
        due_month, due_year = _next_month(month, year)
        return date(due_year, due_month, self.config.BILL_DUE_DAY)

    def _existing_bill(self, contract_id: int, month: int, year: int) -> Bill | None:
        return self.db.scalar(
            select(Bill).where(Bill.contract_id == contract_id, Bill.month == month, Bill.year == year)
        )

    def create_bill(
        self,
        contract_id: int,
        room_id: int,
        month: int,
        year: int,
        rent_amount: int,
        electric_amount: int = 0,
        water_amount: int = 0,
        service_amount: int = 0,
        total_amount: int | None = None,
        due_date: date | None = None,
        status: BillStatus = BillStatus.UNPAID,
    ) -> Bill:
        _validate_period(month, year)
        contract = self._get_or_raise(Contract, contract_id, "Contract")
        if contract.status is not ContractStatus.ACTIVE:
            raise ValidationError("Bills can only be created for active contracts", field="contract_id")
        if contract.room_id != room_id:
            raise ValidationError("Room ID does not match the contract room", field="room_id")

        amounts = (rent_amount, electric_amount, water_amount, service_amount)
        if any(amount < 0 for amount in amounts):
            raise ValidationError("Bill amounts must not be negative")
        calculated_total = sum(amounts)
        if total_amount is not None and total_amount != calculated_total:
            raise ValidationError(
                "Total amount does not match the sum of individual amounts", field="total_amount"
            )
        if self._existing_bill(contract_id, month, year) is not None:
            raise ConflictError(f"Bill for {month}/{year} already exists for this contract")

        bill = Bill(
            contract_id=contract_id,
            room_id=room_id,
            month=month,
            year=year,
            rent_amount=rent_amount,
            electric_amount=electric_amount,
            water_amount=water_amount,
            service_amount=service_amount,
            total_amount=calculated_total,
            due_date=due_date or self._due_date_for(month, year),
            status=status,
        )
        self.db.add(bill)
        self.commit()
        logger.info(
            "bill.created",
            extra={"event": "bill.created", "bill_id": bill.id, "contract_id": contract_id, "period": f"{month}/{year}"},
        )
        return bill

    def get_bill(self, bill_id: int) -> Bill:
        return self._get_or_raise(Bill, bill_id, "Bill")

    def list_bills(
        self,
        status: BillStatus | None = None,
        contract_id: int | None = None,
        room_id: int | None = None,
        month: int | None = None,
        year: int | None = None,
    ) -> list[Bill]:
        query = select(Bill).order_by(Bill.year.desc(), Bill.month.desc(), Bill.id)
        if status is not None:
            query = query.where(Bill.status == status)
        if contract_id is not None:
            query = query.where(Bill.contract_id == contract_id)
        if room_id is not None:
            query = query.where(Bill.room_id == room_id)
        if month is not None:
            query = query.where(Bill.month == month)
        if year is not None:
            query = query.where(Bill.year == year)
        return list(self.db.scalars(query))

    def pay_bill(self, bill_id: int, paid_date: date | None = None, notes: str | None = None) -> Bill:
        bill = self.get_bill(bill_id)
        if bill.status is BillStatus.PAID:
            raise ConflictError(f"Bill {bill_id} was already paid on {bill.paid_date}")
        bill.status = BillStatus.PAID
        bill.paid_date = paid_date or self._today()
        if notes:
            bill.notes = notes
        self.commit()
        logger.info("bill.paid", extra={"event": "bill.paid", "bill_id": bill.id})
        return bill

    def update_bill(
        self,
        bill_id: int,
        rent_amount: int | None = None,
        electric_amount: int | None = None,
        water_amount: int | None = None,
        service_amount: int | None = None,
        total_amount: int | None = None,
        due_date: date | None = None,
        notes: str | None = None,
    ) -> Bill:
        """Correct a bill's amounts, due date or notes; the total is recomputed."""
        bill = self.get_bill(bill_id)
        given = dict(zip(BILL_PARTS, (rent_amount, electric_amount, water_amount, service_amount)))
        changes = {name: value for name, value in given.items() if value is not None}
        if bill.status is BillStatus.PAID and (changes or total_amount is not None):
            raise ValidationError("Amounts of a paid bill cannot be changed", field="status")
        if any(value < 0 for value in changes.values()):
            raise ValidationError("Bill amounts must not be negative")

        calculated_total = sum(changes.get(name, getattr(bill, name)) for name in BILL_PARTS)
        if total_amount is not None and total_amount != calculated_total:
            raise ValidationError(
                "Total amount does not match the sum of individual amounts", field="total_amount"
            )
        for name, value in changes.items():
            setattr(bill, name, value)
        bill.total_amount = calculated_total
        if due_date is not None:
            bill.due_date = due_date
        if notes is not None:
            bill.notes = notes
        self.commit()
        logger.info("bill.updated", extra={"event": "bill.updated", "bill_id": bill.id})
        return bill

    def delete_bill(self, bill_id: int) -> None:
        bill = self.get_bill(bill_id)
        if bill.status is BillStatus.PAID:
            raise ConflictError("Paid bills cannot be deleted")
        self.db.delete(bill)
        self.commit()

    def generate_monthly_bills(self, month: int, year: int) -> GenerationResult:
        """Bill every ACTIVE contract running during ``month``/``year`` that has no bill for it yet."""
        _validate_period(month, year)
        first_day = date(year, month, 1)
        last_day = date(year, month, calendar.monthrange(year, month)[1])
        contracts = list(
            self.db.scalars(
                select(Contract)
                .where(
                    Contract.status == ContractStatus.ACTIVE,
                    Contract.start_date <= last_day,
                    Contract.end_date >= first_day,
                )
                .order_by(Contract.id)
            )
        )
        if not contracts:
            raise NotFoundError(f"No active contracts run during {month}/{year}")

        result = GenerationResult(month=month, year=year)
        due_date = self._due_date_for(month, year)
        service_fee = self.config.DEFAULT_SERVICE_FEE
        for contract in contracts:
            if self._existing_bill(contract.id, month, year) is not None:
                result.skipped_contract_ids.append(contract.id)
                continue
            rent = contract.room.base_price
            bill = Bill(
                contract_id=contract.id,
                room_id=contract.room_id,
                month=month,
                year=year,
                rent_amount=rent,
                service_amount=service_fee,
                total_amount=rent + service_fee,
                due_date=due_date,
                status=BillStatus.UNPAID,
            )
            self.db.add(bill)
            result.generated.append(bill)

        if not result.generated:
            raise ConflictError(f"Bills for {month}/{year} have already been generated for all active contracts")
        self.commit()
        logger.info(
            "bill.generated",
            extra={
                "event": "bill.generated",
                "period": f"{month}/{year}",
                "generated": len(result.generated),
                "skipped": len(result.skipped_contract_ids),
            },
        )
        return result

    def mark_overdue_bills(self, today: date | None = None) -> int:
        """Flip UNPAID bills past their due date to OVERDUE; returns the count."""
        cutoff = self._today(today)
        outcome = self.db.execute(
            update(Bill)
            .where(Bill.status == BillStatus.UNPAID, Bill.due_date < cutoff)
            .values(status=BillStatus.OVERDUE)
        )
        self.commit()
        if outcome.rowcount:
            logger.info("bill.overdue_marked", extra={"event": "bill.overdue_marked", "count": outcome.rowcount})
        return outcome.rowcount

    def build_final_bill(self, contract: Contract, now: datetime) -> Bill | None:
        """Prorated bill for the check-out month, added to the session uncommitted.

        Returns ``None`` when the month is already billed or the contract had
        not started yet.
        """
        today = self._today(now)
        if self._existing_bill(contract.id, today.month, today.year) is not None:
            return None
        days_in_month = calendar.monthrange(today.year, today.month)[1]
        first_day = date(today.year, today.month, 1)
        occupied_from = max(contract.start_date, first_day)
        occupied_days = (today - occupied_from).days + 1
        if occupied_days <= 0:
            return None

        rent = int(contract.room.base_price * occupied_days / days_in_month + 0.5)
        service_fee = self.config.DEFAULT_SERVICE_FEE
        bill = Bill(
            contract_id=contract.id,
            room_id=contract.room_id,
            month=today.month,
            year=today.year,
            rent_amount=rent,
            service_amount=service_fee,
            total_amount=rent + service_fee,
            due_date=today,
            status=BillStatus.UNPAID,
            notes=f"Final bill at check-out ({occupied_days}/{days_in_month} days)",
        )
        self.db.add(bill)
        return bill

    def bill_stats(self) -> dict[str, int]:
        rows = self.db.execute(
            select(Bill.status, func.count(Bill.id), func.coalesce(func.sum(Bill.total_amount), 0)).group_by(
                Bill.status
            )
        ).all()
        counts = {status: (count, amount) for status, count, amount in rows}
        paid = counts.get(BillStatus.PAID, (0, 0))
        unpaid = counts.get(BillStatus.UNPAID, (0, 0))
        overdue = counts.get(BillStatus.OVERDUE, (0, 0))
        return {
            "total_bills": paid[0] + unpaid[0] + overdue[0],
            "paid_bills": paid[0],
            "unpaid_bills": unpaid[0],
            "overdue_bills": overdue[0],
            "total_revenue": int(paid[1]),
            "pending_revenue": int(unpaid[1] + overdue[1]),
        }
