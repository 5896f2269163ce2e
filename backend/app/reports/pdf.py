from __future__ import annotations

import io
from datetime import date

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from app.reports.schemas import DepartmentReport, FinancialHealthReport

TABLE_STYLE = TableStyle([
    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#f1f5f9")),
    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
    ("ALIGN", (1, 0), (-1, -1), "RIGHT"),
    ("GRID", (0, 0), (-1, -1), 0.5, colors.HexColor("#e2e8f0")),
    ("TOPPADDING", (0, 0), (-1, -1), 4),
    ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
])


def _build_doc(buffer):
    return SimpleDocTemplate(
        buffer, pagesize=A4,
        leftMargin=0.75 * inch, rightMargin=0.75 * inch,
        topMargin=0.75 * inch, bottomMargin=0.75 * inch,
    )


def _header_style():
    styles = getSampleStyleSheet()
    return ParagraphStyle("ReportTitle", parent=styles["Title"], fontSize=20, textColor=colors.HexColor("#1e3a5f"))


def _money(minor_units: int, currency: str) -> str:
    # Base-14 fonts have no glyph for most currency signs, so print the code.
    return f"{minor_units / 100:,.0f}".replace(",", " ") + f" {currency}"


def _table(rows: list[list], widths: list[float]) -> Table:
    t = Table(rows, colWidths=[w * inch for w in widths])
    t.setStyle(TABLE_STYLE)
    return t


def generate_department_pdf(
    report: DepartmentReport,
    business_name: str = "BizDesk",
    currency: str = "RUB",
    generated_on: date | None = None,
) -> bytes:
    buffer = io.BytesIO()
    doc = _build_doc(buffer)
    styles = getSampleStyleSheet()
    elements: list = []

    elements.append(Paragraph(business_name, _header_style()))
    elements.append(Paragraph(
        f"Tender Department Report: {generated_on or date.today()}", styles["Normal"]
    ))
    elements.append(Spacer(1, 20))

    o = report.overview
    elements.append(Paragraph("<b>Overview</b>", styles["Heading2"]))
    elements.append(_table([
        ["Metric", "Value"],
        ["Total tenders", o.total_tenders],
        ["Active", o.active_tenders],
        ["Won / lost / cancelled", f"{o.won_tenders} / {o.lost_tenders} / {o.cancelled_tenders}"],
        ["Win rate", f"{o.win_rate:.1f}%"],
        ["Total NMCK", _money(o.total_nmck, currency)],
        ["Contract value won", _money(o.total_contract_price, currency)],
        ["Avg processing days", o.avg_processing_days],
        ["Tenders per specialist", o.tenders_per_specialist],
    ], [4, 3]))
    elements.append(Spacer(1, 16))

    elements.append(Paragraph("<b>Specialists</b>", styles["Heading2"]))
    if report.specialists:
        rows = [["Name", "Tenders", "Won", "Lost", "Win rate", "NMCK"]]
        for s in report.specialists:
            rows.append([
                s.name, s.total_tenders, s.won_tenders, s.lost_tenders,
                f"{s.win_rate:.1f}%", _money(s.total_nmck, currency),
            ])
        elements.append(_table(rows, [2.2, 0.8, 0.7, 0.7, 0.9, 1.6]))
    else:
        elements.append(Paragraph("No specialists assigned.", styles["Normal"]))
    elements.append(Spacer(1, 16))

    elements.append(Paragraph("<b>Stages</b>", styles["Heading2"]))
    if report.stages:
        rows = [["Stage", "Tenders", "Share", "Avg days"]]
        for s in report.stages:
            rows.append([s.stage_name, s.count, f"{s.percent:.1f}%", s.avg_days_in_stage])
        elements.append(_table(rows, [3, 1.2, 1.2, 1.2]))
    else:
        elements.append(Paragraph("No tenders in department stages.", styles["Normal"]))
    elements.append(Spacer(1, 16))

    w = report.workload
    elements.append(Paragraph("<b>Workload</b>", styles["Heading2"]))
    elements.append(_table([
        ["Urgent", "This week", "Next week", "Overdue", "Active"],
        [w.urgent, w.this_week, w.next_week, w.overdue, w.total],
    ], [1.3] * 5))

    if report.loss_reasons:
        elements.append(Spacer(1, 16))
        elements.append(Paragraph("<b>Loss reasons</b>", styles["Heading2"]))
        rows = [["Reason", "Count", "Share"]]
        for r in report.loss_reasons:
            rows.append([r.reason, r.count, f"{r.percent:.1f}%"])
        elements.append(_table(rows, [4, 1.2, 1.2]))

    doc.build(elements)
    return buffer.getvalue()


def generate_health_pdf(report: FinancialHealthReport, business_name: str = "BizDesk") -> bytes:
    buffer = io.BytesIO()
    doc = _build_doc(buffer)
    styles = getSampleStyleSheet()
    elements: list = []

    elements.append(Paragraph(business_name, _header_style()))
    elements.append(Paragraph(f"Financial Health: {date.today()}", styles["Normal"]))
    elements.append(Spacer(1, 20))

    score_style = ParagraphStyle(
        "Score", parent=styles["Heading1"], textColor=colors.HexColor(report.color), fontSize=16
    )
    elements.append(Paragraph(f"Overall score: {report.overall_score} ({report.grade})", score_style))
    elements.append(Spacer(1, 12))

    rows = [["Category", "Score", "Weight", "Details"]]
    for name, category in report.categories:
        rows.append([name.title(), category.score, f"{category.weight:.0%}", category.details])
    elements.append(_table(rows, [1.3, 0.8, 0.8, 3.8]))
    elements.append(Spacer(1, 16))

    for insight in report.insights:
        elements.append(Paragraph(insight, styles["Normal"]))

    if report.recommendations:
        elements.append(Spacer(1, 16))
        elements.append(Paragraph("<b>Recommendations</b>", styles["Heading2"]))
        for r in report.recommendations:
            elements.append(Paragraph(f"<b>[{r.priority}] {r.title}</b>: {r.description}", styles["Normal"]))

    doc.build(elements)
    return buffer.getvalue()
