"""Report export writers.

Excel workbooks are written with pandas on top of openpyxl; PDF documents are
laid out with reportlab platypus. Both render into memory and hand back bytes
for the HTTP layer to stream.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from io import BytesIO

import pandas as pd
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from boardinghouse.core.config import Config, get_config
from boardinghouse.core.exceptions import ValidationError
from boardinghouse.models import ExportFormat
from boardinghouse.services.report_service import Report

logger = logging.getLogger(__name__)

EXCEL_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
PDF_MEDIA_TYPE = "application/pdf"

COLUMN_TITLES = {
    "period": "Period",
    "month": "Month",
    "year": "Year",
    "month_name": "Month name",
    "paid_revenue": "Paid revenue",
    "pending_revenue": "Pending revenue",
    "total_revenue": "Total revenue",
    "paid_bills": "Paid bills",
    "unpaid_bills": "Unpaid bills",
    "overdue_bills": "Overdue bills",
    "total_bills": "Total bills",
    "total_rooms": "Total rooms",
    "occupied_rooms": "Occupied rooms",
    "available_rooms": "Available rooms",
    "reserved_rooms": "Reserved rooms",
    "maintenance_rooms": "Maintenance rooms",
    "occupancy_rate": "Occupancy rate (%)",
    "total_amount": "Total amount",
    "paid_amount": "Paid amount",
    "pending_amount": "Pending amount",
    "overdue_amount": "Overdue amount",
    "average_bill_amount": "Average bill amount",
}


@dataclass(frozen=True)
class ExportResult:
    content: bytes
    media_type: str
    filename: str


def default_filename(report: Report, export_format: ExportFormat, now: datetime) -> str:
    extension = "xlsx" if export_format is ExportFormat.EXCEL else "pdf"
    return f"{report.type.value}-report-{now.strftime('%Y%m%d-%H%M%S')}.{extension}"


def _summary_pairs(report: Report) -> list[tuple[str, str]]:
    summary = report.summary
    return [
        ("From", summary.period["from"]),
        ("To", summary.period["to"]),
        ("Months", str(summary.period["months"])),
        ("Total revenue", f"{summary.total_revenue:,}"),
        ("Paid revenue", f"{summary.paid_revenue:,}"),
        ("Total bills", str(summary.total_bills)),
        ("Average occupancy (%)", f"{summary.average_occupancy:.2f}"),
        ("Total tenants", str(summary.total_tenants)),
        ("Total contracts", str(summary.total_contracts)),
    ]


def _format_cell(column: str, value) -> str:
    if isinstance(value, float):
        return f"{value:,.2f}"
    if column.endswith(("_revenue", "_amount")):
        return f"{value:,}"
    return str(value)


class ExportService:
    def __init__(self, config: Config | None = None) -> None:
        self.config = config or get_config()

    def export(
        self,
        report: Report,
        export_format: ExportFormat | str,
        filename: str | None = None,
        now: datetime | None = None,
    ) -> ExportResult:
        try:
            fmt = ExportFormat(export_format)
        except ValueError as exc:
            raise ValidationError(f"Unsupported export format: {export_format}", field="format") from exc

        stamp = now or report.generated_at or datetime.now()
        name = filename or default_filename(report, fmt, stamp)
        if fmt is ExportFormat.EXCEL:
            result = ExportResult(self.to_excel(report), EXCEL_MEDIA_TYPE, name)
        else:
            result = ExportResult(self.to_pdf(report), PDF_MEDIA_TYPE, name)
        logger.info(
            "report.exported",
            extra={
                "event": "report.exported",
                "report_type": report.type.value,
                "format": fmt.value,
                "bytes": len(result.content),
            },
        )
        return result

    def to_excel(self, report: Report) -> bytes:
        rows = pd.DataFrame(report.rows_as_dicts())
        rows = rows.rename(columns=COLUMN_TITLES)
        summary = pd.DataFrame(_summary_pairs(report), columns=["Metric", "Value"])

        output = BytesIO()
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            rows.to_excel(writer, index=False, sheet_name="Report")
            summary.to_excel(writer, index=False, sheet_name="Summary")
        return output.getvalue()

    def to_pdf(self, report: Report) -> bytes:
        output = BytesIO()
        doc = SimpleDocTemplate(
            output,
            pagesize=landscape(A4),
            rightMargin=0.5 * inch,
            leftMargin=0.5 * inch,
            topMargin=0.5 * inch,
            bottomMargin=0.5 * inch,
        )
        styles = getSampleStyleSheet()
        title_style = ParagraphStyle(
            "ReportTitle",
            parent=styles["Heading1"],
            fontSize=20,
            textColor=colors.HexColor("#2C3E50"),
            spaceAfter=12,
            alignment=TA_CENTER,
        )

        elements = [
            Paragraph(self.config.EXPORT_COMPANY_NAME, title_style),
            Paragraph(f"{report.type.value.capitalize()} report", styles["Heading2"]),
            Paragraph(f"Generated at {report.generated_at:%Y-%m-%d %H:%M} UTC", styles["Normal"]),
            Spacer(1, 0.2 * inch),
        ]

        summary_table = Table(_summary_pairs(report), colWidths=[2.5 * inch, 2.5 * inch])
        summary_table.setStyle(
            TableStyle(
                [
                    ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, -1), 10),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
                    ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
                ]
            )
        )
        elements.extend([summary_table, Spacer(1, 0.3 * inch)])

        rows = report.rows_as_dicts()
        if rows:
            columns = list(rows[0].keys())
            data = [[COLUMN_TITLES.get(column, column) for column in columns]]
            data.extend([_format_cell(column, row[column]) for column in columns] for row in rows)
            data_table = Table(data, repeatRows=1)
            data_table.setStyle(
                TableStyle(
                    [
                        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#3498DB")),
                        ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
                        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                        ("FONTSIZE", (0, 0), (-1, -1), 8),
                        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#F8F9FA")]),
                        ("ALIGN", (1, 1), (-1, -1), "RIGHT"),
                        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
                    ]
                )
            )
            elements.append(data_table)
        else:
            elements.append(Paragraph("No data for the selected range.", styles["Normal"]))

        doc.build(elements)
        return output.getvalue()
