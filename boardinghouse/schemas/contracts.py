"""Contract request/response schemas."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, Field

from boardinghouse.models import ContractBadge, ContractStatus


class ContractCreateRequest(BaseModel):
    room_id: int = Field(ge=1)
    start_date: date
    end_date: date
    deposit: int
    tenant_ids: list[int] = Field(min_length=1)
    primary_tenant_id: int = Field(ge=1)
    contract_number: str | None = Field(default=None, max_length=64)
    check_in: bool = False


class ContractUpdateRequest(BaseModel):
    contract_number: str | None = Field(default=None, min_length=1, max_length=64)
    room_id: int | None = Field(default=None, ge=1)
    start_date: date | None = None
    end_date: date | None = None
    deposit: int | None = None
    tenant_ids: list[int] | None = Field(default=None, min_length=1)
    primary_tenant_id: int | None = Field(default=None, ge=1)


class ContractCheckoutRequest(BaseModel):
    reason: str | None = Field(default=None, max_length=2000)


class ContractStatusUpdateRequest(BaseModel):
    # Kept as a plain string so unknown targets reach the service and fail as 400.
    status: str = Field(min_length=1, max_length=40)
    reason: str | None = Field(default=None, max_length=2000)


class ContractTenantResponse(BaseModel):
    tenant_id: int
    full_name: str
    is_primary: bool


class ContractResponse(BaseModel):
    id: int
    contract_number: str
    room_id: int
    room_number: str
    start_date: date
    end_date: date
    deposit: int
    status: ContractStatus | None = None
    status_reason: str | None = None
    checked_in_at: datetime | None = None
    terminated_at: datetime | None = None
    version: int
    tenants: list[ContractTenantResponse]
    badge: ContractBadge | None = None
    is_expired: bool
    is_expiring_soon: bool
    remaining_days: int
    duration_days: int
    allowed_transitions: list[ContractStatus] = Field(default_factory=list)


class ContractNumberResponse(BaseModel):
    contract_number: str


class ContractStatsResponse(BaseModel):
    total: int
    pending: int
    active: int
    expired: int
    terminated: int
    expiring_this_month: int
    expiring_next_month: int


class ExpireSweepResponse(BaseModel):
    expired: int
    contract_ids: list[int]
