"""Dashboard endpoint for API v1."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, Header
from sqlalchemy.orm import Session

from boardinghouse.api.v1._authz import authorize
from boardinghouse.core.dependencies import get_db_session
from boardinghouse.schemas.reports import DashboardStatsResponse
from boardinghouse.services.report_service import ReportService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardStatsResponse)
def dashboard_stats(
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> DashboardStatsResponse:
    authorize(authorization, scopes=["reports.read"])
    return DashboardStatsResponse(**asdict(ReportService(db=db).dashboard_stats()))
