"""Bill request/response schemas."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from boardinghouse.models import BillStatus


class BillCreateRequest(BaseModel):
    contract_id: int = Field(ge=1)
    room_id: int = Field(ge=1)
    month: int
    year: int
    rent_amount: int
    electric_amount: int = 0
    water_amount: int = 0
    service_amount: int = 0
    total_amount: int | None = None
    due_date: date | None = None


class BillUpdateRequest(BaseModel):
    rent_amount: int | None = None
    electric_amount: int | None = None
    water_amount: int | None = None
    service_amount: int | None = None
    total_amount: int | None = None
    due_date: date | None = None
    notes: str | None = Field(default=None, max_length=2000)


class BillPayRequest(BaseModel):
    paid_date: date | None = None
    notes: str | None = Field(default=None, max_length=2000)


class BillGenerateRequest(BaseModel):
    month: int
    year: int


class BillGenerateResponse(BaseModel):
    month: int
    year: int
    generated: int
    skipped_contract_ids: list[int]


class BillStatsResponse(BaseModel):
    total_bills: int
    paid_bills: int
    unpaid_bills: int
    overdue_bills: int
    total_revenue: int
    pending_revenue: int


class BillResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    contract_id: int
    room_id: int
    month: int
    year: int
    rent_amount: int
    electric_amount: int
    water_amount: int
    service_amount: int
    total_amount: int
    status: BillStatus
    due_date: date
    paid_date: date | None = None
    notes: str | None = None
    created_at: datetime
