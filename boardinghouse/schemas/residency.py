"""Residency record request/response schemas."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field

from boardinghouse.models import ResidencyType


class ResidencyCreateRequest(BaseModel):
    tenant_id: int = Field(ge=1)
    type: ResidencyType
    start_date: date
    end_date: date | None = None
    notes: str | None = Field(default=None, max_length=2000)


class ResidencyUpdateRequest(BaseModel):
    type: ResidencyType | None = None
    start_date: date | None = None
    end_date: date | None = None
    notes: str | None = Field(default=None, max_length=2000)


class ResidencyResponse(BaseModel):
    id: int
    tenant_id: int
    type: ResidencyType
    start_date: date
    end_date: date | None = None
    notes: str | None = None
    is_active: bool
