"""Tenant request/response schemas."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from boardinghouse.models import ContractStatus
from boardinghouse.schemas.bills import BillResponse


class TenantCreateRequest(BaseModel):
    full_name: str = Field(min_length=1, max_length=255)
    phone: str = Field(min_length=8, max_length=32)
    id_card: str = Field(min_length=9, max_length=32)
    date_of_birth: date | None = None
    hometown: str | None = Field(default=None, max_length=255)


class TenantUpdateRequest(BaseModel):
    full_name: str | None = Field(default=None, min_length=1, max_length=255)
    phone: str | None = Field(default=None, min_length=8, max_length=32)
    id_card: str | None = Field(default=None, min_length=9, max_length=32)
    date_of_birth: date | None = None
    hometown: str | None = Field(default=None, max_length=255)


class TenantResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    full_name: str
    phone: str
    id_card: str
    date_of_birth: date | None = None
    hometown: str | None = None
    created_at: datetime


class TenantContractHistoryItem(BaseModel):
    contract_id: int
    contract_number: str
    room_id: int
    room_number: str
    start_date: date
    end_date: date
    status: ContractStatus | None = None
    is_primary: bool
    bills: list[BillResponse]


class TenantHistoryResponse(BaseModel):
    tenant: TenantResponse
    page: int
    limit: int
    total: int
    pages: int
    contracts: list[TenantContractHistoryItem]
