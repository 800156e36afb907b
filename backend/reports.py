"""PDF and Excel rendering of a month's records."""

import io
import logging
from dataclasses import dataclass
from typing import Any, Dict, List

import xlsxwriter
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from recap import to_money
from schemas import RecapResponse, ReportFormat

logger = logging.getLogger(__name__)

ACTIVITY_COLUMNS = ["date", "name", "category", "duration_hours", "output", "notes"]
FINANCE_COLUMNS = ["date", "category", "income", "expense", "net", "notes"]

PDF_MEDIA_TYPE = "application/pdf"
EXCEL_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@dataclass
class Report:
    content: bytes
    media_type: str
    filename: str


def _finance_row(f: Dict[str, Any]) -> Dict[str, Any]:
    income = to_money(f.get("income"))
    expense = to_money(f.get("expense"))
    return {**f, "income": income, "expense": expense, "net": income - expense}


def recap_lines(recap: RecapResponse) -> List[str]:
    by_cat = ", ".join(f"{k}: {v}" for k, v in recap.activities_by_category.items()) or "-"
    return [
        f"Monthly Report {recap.year}-{recap.month:02d}",
        f"Total activities: {recap.total_activities}",
        f"Activities by category: {by_cat}",
        f"Income: {recap.total_income:.2f}",
        f"Expense: {recap.total_expense:.2f}",
        f"Net: {recap.net:.2f}",
    ]


def render_pdf(recap: RecapResponse, activities: List[Dict[str, Any]], finances: List[Dict[str, Any]]) -> bytes:
    lines = recap_lines(recap)
    lines += ["", "Summary:"]
    lines += recap.summary.splitlines()
    lines += ["", "Activities:"]
    for a in activities:
        lines.append(
            f"{a.get('date')}  {a.get('name')}  [{a.get('category')}]  "
            f"{a.get('duration_hours', 0)}h  {a.get('output') or ''}"
        )
    lines += ["", "Finance:"]
    for f in map(_finance_row, finances):
        lines.append(
            f"{f.get('date')}  {f.get('category')}  income {f['income']:.2f}  "
            f"expense {f['expense']:.2f}  net {f['net']:.2f}"
        )

    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    _, height = A4
    top, bottom, leading = height - 42, 40, 14
    textobject = c.beginText(40, top)
    for line in lines:
        if textobject.getY() < bottom:
            c.drawText(textobject)
            c.showPage()
            textobject = c.beginText(40, top)
        textobject.textLine(line)
    c.drawText(textobject)
    c.showPage()
    c.save()
    return buffer.getvalue()


def render_excel(recap: RecapResponse, activities: List[Dict[str, Any]], finances: List[Dict[str, Any]]) -> bytes:
    output = io.BytesIO()
    workbook = xlsxwriter.Workbook(output, {"in_memory": True})
    bold = workbook.add_format({"bold": True})
    money = workbook.add_format({"num_format": "0.00"})

    ws0 = workbook.add_worksheet("Recap")
    ws0.write(0, 0, "period", bold)
    ws0.write(0, 1, f"{recap.year}-{recap.month:02d}")
    ws0.write(1, 0, "total_activities", bold)
    ws0.write(1, 1, recap.total_activities)
    ws0.write(2, 0, "total_income", bold)
    ws0.write_number(2, 1, float(recap.total_income), money)
    ws0.write(3, 0, "total_expense", bold)
    ws0.write_number(3, 1, float(recap.total_expense), money)
    ws0.write(4, 0, "net", bold)
    ws0.write_number(4, 1, float(recap.net), money)
    row = 6
    ws0.write(row, 0, "category", bold)
    ws0.write(row, 1, "count", bold)
    for category, count in recap.activities_by_category.items():
        row += 1
        ws0.write(row, 0, category)
        ws0.write(row, 1, count)
    ws0.write(row + 2, 0, "summary", bold)
    ws0.write(row + 2, 1, recap.summary)

    ws1 = workbook.add_worksheet("Activities")
    for i, h in enumerate(ACTIVITY_COLUMNS):
        ws1.write(0, i, h, bold)
    for r, a in enumerate(activities, start=1):
        ws1.write(r, 0, str(a.get("date")))
        ws1.write(r, 1, a.get("name"))
        ws1.write(r, 2, a.get("category"))
        ws1.write_number(r, 3, float(a.get("duration_hours") or 0))
        ws1.write(r, 4, a.get("output"))
        ws1.write(r, 5, a.get("notes"))

    ws2 = workbook.add_worksheet("Finance")
    for i, h in enumerate(FINANCE_COLUMNS):
        ws2.write(0, i, h, bold)
    for r, f in enumerate(map(_finance_row, finances), start=1):
        ws2.write(r, 0, str(f.get("date")))
        ws2.write(r, 1, f.get("category"))
        ws2.write_number(r, 2, float(f["income"]), money)
        ws2.write_number(r, 3, float(f["expense"]), money)
        ws2.write_number(r, 4, float(f["net"]), money)
        ws2.write(r, 5, f.get("notes"))

    workbook.close()
    return output.getvalue()


def render(fmt: ReportFormat, recap: RecapResponse, activities: List[Dict[str, Any]], finances: List[Dict[str, Any]]) -> Report:
    stem = f"report_{recap.year}_{recap.month:02d}"
    if fmt == ReportFormat.pdf:
        report = Report(render_pdf(recap, activities, finances), PDF_MEDIA_TYPE, f"{stem}.pdf")
    else:
        report = Report(render_excel(recap, activities, finances), EXCEL_MEDIA_TYPE, f"{stem}.xlsx")
    logger.info(f"Rendered {report.filename} ({len(report.content)} bytes)")
    return report
