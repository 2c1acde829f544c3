"""Report response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel


class ReportSummaryResponse(BaseModel):
    total_revenue: int
    paid_revenue: int
    total_bills: int
    average_occupancy: float
    total_tenants: int
    total_contracts: int
    # {"from": ISO date, "to": ISO date, "months": int}
    period: dict[str, Any]


class ReportResponse(BaseModel):
    type: str
    filters: dict[str, Any]
    summary: ReportSummaryResponse
    report_data: list[dict[str, Any]]
    generated_at: datetime
    total_records: int


class DashboardStatsResponse(BaseModel):
    total_rooms: int
    occupied_rooms: int
    available_rooms: int
    total_tenants: int
    occupancy_rate: int
    monthly_revenue: int
