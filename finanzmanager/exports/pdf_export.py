"""
PDF report ("Finanzbericht") for a profile.

The report has three parts:
1. Header - profile name, responsible person, tax id, date of printing
2. Summary - income, expense, tax and profit over ALL entries
3. Table - every entry with a signed amount

NOTE: The summary deliberately ignores the profile's month filter, unlike
the on-screen summary and the webhook report. Printed reports have always
covered the whole ledger.

Building the content (PdfReport) is separate from rendering it with
reportlab, so the numbers can be checked without parsing a PDF.
"""

import io
from datetime import date
from typing import Optional
from xml.sax.saxutils import escape

from pydantic import BaseModel, Field
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from finanzmanager.exports.formatting import (
    format_currency,
    format_german_date,
    format_number,
    format_signed_amount,
)
from finanzmanager.models.ledger import Profile
from finanzmanager.queries.engine import overall_summary


TABLE_HEADER = ["Datum", "Info", "Betrag", "Typ"]
HEADER_FILL = colors.Color(15 / 255, 23 / 255, 42 / 255)
STRIPE_FILL = colors.HexColor("#f5f5f5")


class PdfReport(BaseModel):
    """Text content of a PDF report, ready to render."""

    title: str
    header_lines: list[str] = Field(default_factory=list)
    summary_lines: list[str] = Field(default_factory=list)
    profit_line: str
    table_rows: list[list[str]] = Field(default_factory=list)


def build_pdf_content(profile: Profile, today: Optional[date] = None) -> PdfReport:
    """Assemble the report text for a profile."""
    today = today or date.today()
    summary = overall_summary(profile)

    return PdfReport(
        title=f"Finanzbericht: {profile.name}",
        header_lines=[
            f"Verantwortlich: {profile.responsible or 'N/A'}",
            f"Steuernummer: {profile.tax_id or 'N/A'}",
            f"Datum: {format_german_date(today)}",
        ],
        summary_lines=[
            f"Einnahmen: {format_currency(summary.income)}",
            f"Ausgaben: {format_currency(summary.expense)}",
            f"Steuer ({format_number(profile.tax_rate)}%): {format_currency(summary.tax)}",
        ],
        profit_line=f"Gewinn: {format_currency(summary.net)}",
        table_rows=[
            [e.date, e.description, format_signed_amount(e), e.type.value]
            for e in profile.entries
        ],
    )


def render_pdf(report: PdfReport) -> bytes:
    """Render report content to PDF bytes with reportlab."""
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=14 * mm,
        rightMargin=14 * mm,
        topMargin=14 * mm,
        bottomMargin=14 * mm,
        title=report.title,
    )
    styles = getSampleStyleSheet()
    body = styles["Normal"]

    story = [Paragraph(escape(report.title), styles["Title"]), Spacer(1, 4 * mm)]
    story += [Paragraph(escape(line), body) for line in report.header_lines]
    story.append(Spacer(1, 6 * mm))
    story.append(Paragraph("Zusammenfassung:", body))
    story += [Paragraph(escape(line), body) for line in report.summary_lines]
    story.append(Paragraph(f"<b>{escape(report.profit_line)}</b>", body))
    story.append(Spacer(1, 8 * mm))

    rows = [TABLE_HEADER] + [
        [date_, Paragraph(escape(info), body), amount, kind]
        for date_, info, amount, kind in report.table_rows
    ]
    table = Table(rows, colWidths=[28 * mm, 92 * mm, 32 * mm, 30 * mm], repeatRows=1)
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), HEADER_FILL),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, STRIPE_FILL]),
        ("ALIGN", (2, 1), (2, -1), "RIGHT"),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
    ]))
    story.append(table)

    doc.build(story)
    return buffer.getvalue()


def profile_to_pdf(profile: Profile, today: Optional[date] = None) -> bytes:
    return render_pdf(build_pdf_content(profile, today))
