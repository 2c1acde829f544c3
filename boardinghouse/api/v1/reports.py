"""Report endpoints for API v1."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Header, Query, Response
from sqlalchemy.orm import Session

from boardinghouse.api.v1._authz import authorize
from boardinghouse.core.dependencies import get_db_session
from boardinghouse.models import ExportFormat, ReportType
from boardinghouse.schemas.reports import ReportResponse, ReportSummaryResponse
from boardinghouse.services.export_service import ExportService
from boardinghouse.services.report_service import ReportFilters, ReportService

router = APIRouter(prefix="/reports", tags=["reports"])


def _filters(start_date: date, end_date: date, room_ids: list[int] | None) -> ReportFilters:
    return ReportFilters(
        start_date=start_date,
        end_date=end_date,
        room_ids=tuple(room_ids) if room_ids else None,
    )


@router.get("/summary", response_model=ReportSummaryResponse)
def report_summary(
    start_date: date = Query(...),
    end_date: date = Query(...),
    room_ids: list[int] | None = Query(default=None),
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ReportSummaryResponse:
    authorize(authorization, scopes=["reports.read"])
    summary = ReportService(db=db).summary(_filters(start_date, end_date, room_ids))
    return ReportSummaryResponse.model_validate(summary, from_attributes=True)


@router.get("/export")
def export_report(
    report_type: ReportType = Query(alias="type"),
    export_format: ExportFormat = Query(alias="format"),
    start_date: date = Query(...),
    end_date: date = Query(...),
    room_ids: list[int] | None = Query(default=None),
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> Response:
    authorize(authorization, scopes=["reports.export"])
    report = ReportService(db=db).build_report(report_type, _filters(start_date, end_date, room_ids))
    exported = ExportService().export(report, export_format)
    return Response(
        content=exported.content,
        media_type=exported.media_type,
        headers={"Content-Disposition": f'attachment; filename="{exported.filename}"'},
    )


@router.get("/{report_type}", response_model=ReportResponse)
def get_report(
    report_type: ReportType,
    start_date: date = Query(...),
    end_date: date = Query(...),
    room_ids: list[int] | None = Query(default=None),
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ReportResponse:
    authorize(authorization, scopes=["reports.read"])
    report = ReportService(db=db).build_report(report_type, _filters(start_date, end_date, room_ids))
    return ReportResponse.model_validate(report.as_dict())
