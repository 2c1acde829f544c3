"""Tenant service for tenant record operations."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import date

from sqlalchemy import func, or_, select
from sqlalchemy.orm import selectinload

from boardinghouse.core.exceptions import ConflictError, ValidationError
from boardinghouse.models import Contract, ContractStatus, ContractTenant, Tenant
from boardinghouse.services.base_service import BaseService

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = ("full_name", "phone", "id_card", "date_of_birth", "hometown")
MAX_HISTORY_PAGE_SIZE = 50


@dataclass
class TenantHistory:
    tenant: Tenant
    page: int
    limit: int
    total: int
    links: list[ContractTenant] = field(default_factory=list)

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit)


class TenantService(BaseService):
    """Service for tenant CRUD."""

    def _ensure_id_card_free(self, id_card: str, exclude_id: int | None = None) -> None:
        query = select(Tenant.id).where(Tenant.id_card == id_card)
        if exclude_id is not None:
            query = query.where(Tenant.id != exclude_id)
        if self.db.scalar(query) is not None:
            raise ConflictError(f"ID card {id_card} is already registered", field="id_card")

    def create_tenant(
        self,
        full_name: str,
        phone: str,
        id_card: str,
        date_of_birth: date | None = None,
        hometown: str | None = None,
    ) -> Tenant:
        if not full_name.strip():
            raise ValidationError("Full name is required", field="full_name")
        if date_of_birth is not None and date_of_birth >= self._today():
            raise ValidationError("Date of birth must be in the past", field="date_of_birth")
        self._ensure_id_card_free(id_card)

        tenant = Tenant(
            full_name=full_name.strip(),
            phone=phone.strip(),
            id_card=id_card.strip(),
            date_of_birth=date_of_birth,
            hometown=hometown,
        )
        self.db.add(tenant)
        self.commit()
        return tenant

    def get_tenant(self, tenant_id: int) -> Tenant:
        return self._get_or_raise(Tenant, tenant_id, "Tenant")

    def list_tenants(self, search: str | None = None) -> list[Tenant]:
        query = select(Tenant).order_by(Tenant.full_name)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.where(
                or_(Tenant.full_name.ilike(pattern), Tenant.phone.ilike(pattern), Tenant.id_card.ilike(pattern))
            )
        return list(self.db.scalars(query))

    def update_tenant(self, tenant_id: int, **fields) -> Tenant:
        tenant = self.get_tenant(tenant_id)
        unknown = set(fields) - set(_UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown tenant fields: {', '.join(sorted(unknown))}")
        changes = {key: value for key, value in fields.items() if value is not None}
        if "id_card" in changes:
            self._ensure_id_card_free(changes["id_card"], exclude_id=tenant.id)
        for key, value in changes.items():
            setattr(tenant, key, value)
        self.commit()
        return tenant

    def history(self, tenant_id: int, page: int = 1, limit: int = 10) -> TenantHistory:
        """Contracts the tenant has been on, newest first, with room and bills loaded."""
        if page < 1:
            raise ValidationError("Page must be at least 1", field="page")
        if not 1 <= limit <= MAX_HISTORY_PAGE_SIZE:
            raise ValidationError(f"Limit must be between 1 and {MAX_HISTORY_PAGE_SIZE}", field="limit")
        tenant = self.get_tenant(tenant_id)
        total = self.db.scalar(
            select(func.count()).select_from(ContractTenant).where(ContractTenant.tenant_id == tenant.id)
        )
        links = self.db.scalars(
            select(ContractTenant)
            .join(Contract, Contract.id == ContractTenant.contract_id)
            .where(ContractTenant.tenant_id == tenant.id)
            .options(
                selectinload(ContractTenant.contract).options(
                    selectinload(Contract.room), selectinload(Contract.bills)
                )
            )
            .order_by(Contract.start_date.desc(), Contract.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        return TenantHistory(tenant=tenant, page=page, limit=limit, total=total, links=list(links))

    def delete_tenant(self, tenant_id: int) -> None:
        """Delete a tenant, their residency records and their contract links.

        Blocked while the tenant is on an ACTIVE contract or is the only
        tenant of any contract. A removed primary tenant hands the role to
        the next tenant on that contract.
        """
        tenant = self.get_tenant(tenant_id)
        links = list(
            self.db.scalars(
                select(ContractTenant)
                .where(ContractTenant.tenant_id == tenant.id)
                .options(selectinload(ContractTenant.contract).selectinload(Contract.tenants))
            )
        )
        for link in links:
            contract = link.contract
            if contract.status is ContractStatus.ACTIVE:
                raise ConflictError(
                    f"Tenant is on active contract {contract.contract_number}; check out first", field="tenant_id"
                )
            if len(contract.tenants) == 1:
                raise ConflictError(
                    f"Tenant is the only tenant of contract {contract.contract_number}; delete the contract first",
                    field="tenant_id",
                )

        try:
            for link in links:
                contract = link.contract
                contract.tenants.remove(link)
                if link.is_primary:
                    contract.tenants[0].is_primary = True
            # Links must be gone before the tenant row goes.
            self.db.flush()
            self.db.delete(tenant)
        except Exception:
            self.rollback()
            raise
        self.commit()
        logger.info(
            "tenant.deleted",
            extra={"event": "tenant.deleted", "tenant_id": tenant_id, "contracts_unlinked": len(links)},
        )
