from __future__ import annotations

from datetime import date, datetime
from io import BytesIO

import pandas as pd
import pytest

from boardinghouse.core.exceptions import ValidationError
from boardinghouse.services.export_service import EXCEL_MEDIA_TYPE, PDF_MEDIA_TYPE, ExportService
from boardinghouse.services.report_service import ReportFilters, ReportService

GENERATED_AT = datetime(2024, 4, 1, 8, 30)


@pytest.fixture
def revenue_report(session, make_room):
    make_room()
    filters = ReportFilters(start_date=date(2024, 1, 1), end_date=date(2024, 3, 31))
    return ReportService(db=session).build_report("revenue", filters, now=GENERATED_AT)


def test_excel_export_has_report_and_summary_sheets(revenue_report):
    result = ExportService().export(revenue_report, "excel")

    assert result.media_type == EXCEL_MEDIA_TYPE
    assert result.filename == "revenue-report-20240401-083000.xlsx"
    sheets = pd.read_excel(BytesIO(result.content), sheet_name=None)
    assert set(sheets) == {"Report", "Summary"}
    assert list(sheets["Report"]["Period"]) == ["1/2024", "2/2024", "3/2024"]


def test_pdf_export_produces_pdf_document(revenue_report):
    result = ExportService().export(revenue_report, "pdf", filename="q1.pdf")

    assert result.media_type == PDF_MEDIA_TYPE
    assert result.filename == "q1.pdf"
    assert result.content.startswith(b"%PDF")


def test_unknown_format_is_rejected(revenue_report):
    with pytest.raises(ValidationError):
        ExportService().export(revenue_report, "csv")
