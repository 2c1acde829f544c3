"""Contract service for lease lifecycle operations.

Every status change runs as one unit of work: load contract and room,
validate the transition, write both rows and commit. Room and Contract carry
version counters, so a concurrent writer that touched either row makes the
commit fail with :class:`ConflictError` instead of leaving two ACTIVE
contracts on one room.
"""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass
from datetime import date, datetime

from sqlalchemy import func, select
from sqlalchemy.orm import selectinload
from sqlalchemy.orm.attributes import flag_modified

from boardinghouse.core.exceptions import ConflictError, NotFoundError, ValidationError
from boardinghouse.domain.contract_status import (
    TransitionPlan,
    allowed_targets,
    contract_duration,
    effective_badge,
    is_expired,
    is_expiring_soon,
    plan_transition,
    remaining_days,
)
from boardinghouse.models import (
    Bill,
    BillStatus,
    Contract,
    ContractBadge,
    ContractStatus,
    ContractTenant,
    Room,
    RoomStatus,
    Tenant,
)
from boardinghouse.services.base_service import BaseService
from boardinghouse.services.bill_service import BillService

logger = logging.getLogger(__name__)

CONTRACT_NUMBER_PREFIX = "HD"


@dataclass(frozen=True)
class ContractTiming:
    """Derived, display-level facts about a contract at a point in time."""

    badge: ContractBadge | None
    is_expired: bool
    is_expiring_soon: bool
    remaining_days: int
    duration_days: int
    allowed_transitions: list[ContractStatus]


class ContractService(BaseService):
    """Service for contract CRUD and status transitions."""

    # Reads

    def get_contract(self, contract_id: int) -> Contract:
        contract = self.db.scalar(
            select(Contract)
            .where(Contract.id == contract_id)
            .options(selectinload(Contract.tenants).selectinload(ContractTenant.tenant), selectinload(Contract.room))
        )
        if contract is None:
            raise NotFoundError(f"Contract with ID {contract_id} does not exist")
        return contract

    def list_contracts(
        self,
        status: ContractStatus | None = None,
        room_id: int | None = None,
        tenant_id: int | None = None,
        pending_only: bool = False,
    ) -> list[Contract]:
        query = (
            select(Contract)
            .options(selectinload(Contract.tenants).selectinload(ContractTenant.tenant), selectinload(Contract.room))
            .order_by(Contract.created_at.desc(), Contract.id.desc())
        )
        if pending_only:
            query = query.where(Contract.status.is_(None))
        elif status is not None:
            query = query.where(Contract.status == status)
        if room_id is not None:
            query = query.where(Contract.room_id == room_id)
        if tenant_id is not None:
            query = query.where(Contract.tenants.any(ContractTenant.tenant_id == tenant_id))
        return list(self.db.scalars(query))

    def describe(self, contract: Contract, now: datetime | None = None) -> ContractTiming:
        current = self._now(now)
        threshold = self.config.EXPIRING_SOON_DAYS
        return ContractTiming(
            badge=effective_badge(contract.status, contract.end_date, current, threshold),
            is_expired=is_expired(contract.end_date, current),
            is_expiring_soon=is_expiring_soon(contract.end_date, current, threshold),
            remaining_days=remaining_days(contract.end_date, current),
            duration_days=contract_duration(contract.start_date, contract.end_date),
            allowed_transitions=allowed_targets(contract.status, self.config.ALLOW_CONTRACT_REACTIVATION),
        )

    def generate_contract_number(self, year: int | None = None) -> str:
        prefix = f"{CONTRACT_NUMBER_PREFIX}{year or self._today().year}"
        numbers = self.db.scalars(select(Contract.contract_number).where(Contract.contract_number.like(f"{prefix}%")))
        sequence = 0
        for number in numbers:
            suffix = number[len(prefix):]
            if suffix.isdigit():
                sequence = max(sequence, int(suffix))
        return f"{prefix}{sequence + 1:04d}"

    def contract_stats(self, now: datetime | None = None) -> dict[str, int]:
        today = self._today(now)
        counts = dict(
            self.db.execute(select(Contract.status, func.count(Contract.id)).group_by(Contract.status)).all()
        )
        this_month_end = date(today.year, today.month, calendar.monthrange(today.year, today.month)[1])
        next_year, next_month = (today.year + 1, 1) if today.month == 12 else (today.year, today.month + 1)
        next_month_start = date(next_year, next_month, 1)
        next_month_end = date(next_year, next_month, calendar.monthrange(next_year, next_month)[1])

        def _expiring_between(start: date, end: date) -> int:
            return self.db.scalar(
                select(func.count(Contract.id)).where(
                    Contract.status == ContractStatus.ACTIVE,
                    Contract.end_date >= start,
                    Contract.end_date <= end,
                )
            )

        return {
            "total": sum(counts.values()),
            "pending": counts.get(None, 0),
            "active": counts.get(ContractStatus.ACTIVE, 0),
            "expired": counts.get(ContractStatus.EXPIRED, 0),
            "terminated": counts.get(ContractStatus.TERMINATED, 0),
            "expiring_this_month": _expiring_between(today, this_month_end),
            "expiring_next_month": _expiring_between(next_month_start, next_month_end),
        }

    # Writes

    def _overlapping_active_contract(
        self, room_id: int, start_date: date, end_date: date, exclude_id: int | None = None
    ) -> Contract | None:
        query = select(Contract).where(
            Contract.room_id == room_id,
            Contract.status == ContractStatus.ACTIVE,
            Contract.start_date <= end_date,
            Contract.end_date >= start_date,
        )
        if exclude_id is not None:
            query = query.where(Contract.id != exclude_id)
        return self.db.scalar(query)

    def create_contract(
        self,
        room_id: int,
        start_date: date,
        end_date: date,
        deposit: int,
        tenant_ids: list[int],
        primary_tenant_id: int,
        contract_number: str | None = None,
        check_in: bool = False,
        now: datetime | None = None,
    ) -> Contract:
        """Create a contract with its tenant links.

        The contract starts without a status; pass ``check_in=True`` to
        activate it in the same transaction.
        """
        if end_date <= start_date:
            raise ValidationError("End date must be after start date", field="end_date")
        if deposit <= 0:
            raise ValidationError("Deposit must be a positive number", field="deposit")
        if not tenant_ids:
            raise ValidationError("At least one tenant is required", field="tenant_ids")
        if len(set(tenant_ids)) != len(tenant_ids):
            raise ValidationError("Tenant list contains duplicates", field="tenant_ids")
        if primary_tenant_id not in tenant_ids:
            raise ValidationError("Primary tenant must be included in the tenant list", field="primary_tenant_id")

        room = self._get_or_raise(Room, room_id, "Room")
        found = set(self.db.scalars(select(Tenant.id).where(Tenant.id.in_(tenant_ids))))
        missing = sorted(set(tenant_ids) - found)
        if missing:
            raise NotFoundError(f"Tenants not found: {', '.join(str(item) for item in missing)}", field="tenant_ids")
        if self._overlapping_active_contract(room.id, start_date, end_date) is not None:
            raise ConflictError(f"Room {room.number} is already occupied during the specified period", field="room_id")

        number = (contract_number or "").strip() or self.generate_contract_number()
        if self.db.scalar(select(Contract.id).where(Contract.contract_number == number)) is not None:
            raise ConflictError(f"Contract number {number} is already in use", field="contract_number")

        contract = Contract(
            contract_number=number,
            room=room,
            start_date=start_date,
            end_date=end_date,
            deposit=deposit,
            tenants=[
                ContractTenant(tenant_id=tenant_id, is_primary=tenant_id == primary_tenant_id)
                for tenant_id in tenant_ids
            ],
        )
        self.db.add(contract)
        if check_in:
            try:
                self.db.flush()
                self._apply_transition(contract, ContractStatus.ACTIVE, reason=None, now=self._now(now))
            except Exception:
                self.rollback()
                raise
        self.commit()
        logger.info(
            "contract.created",
            extra={"event": "contract.created", "contract_id": contract.id, "contract_number": number},
        )
        return contract

    def update_contract(
        self,
        contract_id: int,
        contract_number: str | None = None,
        room_id: int | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        deposit: int | None = None,
        tenant_ids: list[int] | None = None,
        primary_tenant_id: int | None = None,
    ) -> Contract:
        """Edit a contract's terms and tenants.

        Status is never changed here; extending ``end_date`` is what makes an
        EXPIRED contract eligible for reactivation again.
        """
        contract = self.get_contract(contract_id)
        new_start = start_date or contract.start_date
        new_end = end_date or contract.end_date
        if new_end <= new_start:
            raise ValidationError("End date must be after start date", field="end_date")
        if deposit is not None and deposit <= 0:
            raise ValidationError("Deposit must be a positive number", field="deposit")

        if contract_number is not None:
            number = contract_number.strip()
            if not number:
                raise ValidationError("Contract number must not be blank", field="contract_number")
            if number != contract.contract_number:
                taken = self.db.scalar(
                    select(Contract.id).where(Contract.contract_number == number, Contract.id != contract.id)
                )
                if taken is not None:
                    raise ConflictError(f"Contract number {number} is already in use", field="contract_number")
                contract.contract_number = number

        room = contract.room
        if room_id is not None and room_id != contract.room_id:
            if contract.status is ContractStatus.ACTIVE:
                raise ConflictError("Active contracts cannot move rooms; check out first", field="room_id")
            room = self._get_or_raise(Room, room_id, "Room")
        if room is not contract.room or new_start != contract.start_date or new_end != contract.end_date:
            clash = self._overlapping_active_contract(room.id, new_start, new_end, exclude_id=contract.id)
            if clash is not None:
                raise ConflictError(
                    f"Room {room.number} is already occupied during the specified period", field="room_id"
                )

        if tenant_ids is not None:
            self._replace_tenants(contract, tenant_ids, primary_tenant_id)
        elif primary_tenant_id is not None:
            self._replace_tenants(contract, [link.tenant_id for link in contract.tenants], primary_tenant_id)

        contract.room = room
        contract.start_date = new_start
        contract.end_date = new_end
        if deposit is not None:
            contract.deposit = deposit
        self.commit()
        logger.info(
            "contract.updated",
            extra={"event": "contract.updated", "contract_id": contract.id, "contract_number": contract.contract_number},
        )
        return contract

    def _replace_tenants(self, contract: Contract, tenant_ids: list[int], primary_tenant_id: int | None) -> None:
        if len(set(tenant_ids)) != len(tenant_ids):
            raise ValidationError("Tenant list contains duplicates", field="tenant_ids")
        found = set(self.db.scalars(select(Tenant.id).where(Tenant.id.in_(tenant_ids))))
        missing = sorted(set(tenant_ids) - found)
        if missing:
            raise NotFoundError(f"Tenants not found: {', '.join(str(item) for item in missing)}", field="tenant_ids")
        if primary_tenant_id is None:
            current = next((link.tenant_id for link in contract.tenants if link.is_primary), None)
            primary_tenant_id = current if current in tenant_ids else tenant_ids[0]
        elif primary_tenant_id not in tenant_ids:
            raise ValidationError("Primary tenant must be included in the tenant list", field="primary_tenant_id")

        existing = {link.tenant_id: link for link in contract.tenants}
        contract.tenants = [
            existing.get(tenant_id) or ContractTenant(tenant_id=tenant_id) for tenant_id in tenant_ids
        ]
        for link in contract.tenants:
            link.is_primary = link.tenant_id == primary_tenant_id

    def _apply_transition(
        self,
        contract: Contract,
        target: ContractStatus,
        reason: str | None,
        now: datetime,
    ) -> TransitionPlan:
        plan = plan_transition(
            current=contract.status,
            target=target,
            end_date=contract.end_date,
            now=now,
            allow_reactivation=self.config.ALLOW_CONTRACT_REACTIVATION,
        )
        room = contract.room
        if plan.target is ContractStatus.ACTIVE:
            if room.status is RoomStatus.MAINTENANCE:
                raise ConflictError(f"Room {room.number} is under maintenance", field="room_id")
            other = self.db.scalar(
                select(Contract).where(
                    Contract.room_id == room.id,
                    Contract.status == ContractStatus.ACTIVE,
                    Contract.id != contract.id,
                )
            )
            if other is not None:
                raise ConflictError(
                    f"Room {room.number} already has active contract {other.contract_number}", field="room_id"
                )
            contract.checked_in_at = now
            contract.terminated_at = None
        elif plan.target is ContractStatus.TERMINATED:
            contract.terminated_at = now

        contract.status = plan.target
        contract.status_reason = reason
        room.status = plan.room_status
        # Always bump the room version so racing check-ins collide on commit.
        flag_modified(room, "status")
        return plan

    def _transition(
        self,
        contract_id: int,
        target: ContractStatus,
        reason: str | None = None,
        now: datetime | None = None,
    ) -> Contract:
        contract = self.get_contract(contract_id)
        current = self._now(now)
        previous = contract.status
        try:
            plan = self._apply_transition(contract, target, reason=reason, now=current)
            if target is ContractStatus.TERMINATED:
                final_bill = BillService(db=self.db, config=self.config).build_final_bill(contract, current)
                if final_bill is not None:
                    logger.info(
                        "contract.final_bill_issued",
                        extra={"event": "contract.final_bill_issued", "contract_id": contract.id},
                    )
        except Exception:
            self.rollback()
            raise
        self.commit()
        logger.info(
            "contract.status_changed",
            extra={
                "event": "contract.status_changed",
                "contract_id": contract.id,
                "from_status": previous.value if previous else None,
                "to_status": target.value,
                "room_id": contract.room_id,
                "reactivated": plan.is_reactivation,
            },
        )
        return contract

    def check_in(self, contract_id: int, now: datetime | None = None) -> Contract:
        return self._transition(contract_id, ContractStatus.ACTIVE, now=now)

    def reactivate(self, contract_id: int, now: datetime | None = None) -> Contract:
        contract = self.get_contract(contract_id)
        if contract.status is None:
            raise ValidationError("Contract was never checked in; use check-in instead", field="status")
        return self._transition(contract_id, ContractStatus.ACTIVE, now=now)

    def check_out(self, contract_id: int, reason: str | None = None, now: datetime | None = None) -> Contract:
        return self._transition(contract_id, ContractStatus.TERMINATED, reason=reason, now=now)

    def mark_expired(self, contract_id: int, reason: str | None = None, now: datetime | None = None) -> Contract:
        return self._transition(contract_id, ContractStatus.EXPIRED, reason=reason, now=now)

    def update_status(
        self,
        contract_id: int,
        status: ContractStatus | str,
        reason: str | None = None,
        now: datetime | None = None,
    ) -> Contract:
        """Generic transition entry point used by the status endpoint."""
        try:
            target = ContractStatus(status)
        except ValueError as exc:
            raise ValidationError(f"Unknown contract status: {status}", field="status") from exc
        return self._transition(contract_id, target, reason=reason, now=now)

    def expire_overdue_contracts(self, now: datetime | None = None) -> list[Contract]:
        """Mark every ACTIVE contract that :func:`is_expired` at ``now`` as EXPIRED.

        All contracts flip in one transaction; any failure rolls the batch back.
        """
        current = self._now(now)
        candidates = self.db.scalars(
            select(Contract)
            .where(Contract.status == ContractStatus.ACTIVE, Contract.end_date <= current.date())
            .options(selectinload(Contract.room))
        )
        expired = [contract for contract in candidates if is_expired(contract.end_date, current)]
        try:
            for contract in expired:
                self._apply_transition(
                    contract, ContractStatus.EXPIRED, reason="Contract end date passed", now=current
                )
        except Exception:
            self.rollback()
            raise
        self.commit()
        if expired:
            logger.info("contract.expired_sweep", extra={"event": "contract.expired_sweep", "count": len(expired)})
        return expired

    def delete_contract(self, contract_id: int, confirm_contract_number: str | None = None) -> Contract:
        """Delete a contract together with its tenant links and bills.

        Active contracts must be checked out first. When unpaid bills would be
        deleted too, the caller has to echo the contract number.
        """
        contract = self.get_contract(contract_id)
        if contract.status is ContractStatus.ACTIVE:
            raise ConflictError("Active contracts cannot be deleted; check out first", field="status")
        unpaid = self.db.scalar(
            select(func.count(Bill.id)).where(
                Bill.contract_id == contract.id, Bill.status.in_([BillStatus.UNPAID, BillStatus.OVERDUE])
            )
        )
        if unpaid and confirm_contract_number != contract.contract_number:
            raise ValidationError(
                f"Contract has {unpaid} unpaid bill(s); confirm by entering the contract number",
                field="confirm_contract_number",
            )
        self.db.delete(contract)
        self.commit()
        logger.info(
            "contract.deleted",
            extra={
                "event": "contract.deleted",
                "contract_id": contract_id,
                "contract_number": contract.contract_number,
                "unpaid_bills_deleted": unpaid,
            },
        )
        return contract
