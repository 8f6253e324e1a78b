"""
Build the financial report PDF: totals, the daily income/expense/profit table
and the expense breakdowns, with "Page i of n" in every footer.
"""
import io
from typing import Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle

from ..config import settings
from ..i18n import translate
from ..services.labels import format_currency as format_money


FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"
HEADER_BG = colors.HexColor("#1f2937")
ZEBRA_BG = colors.HexColor("#f3f4f6")


def _numbered_canvas(locale: Optional[str]):
    """Canvas class that defers page output until the total page count is known."""

    class NumberedCanvas(canvas.Canvas):
        def __init__(self, *args, **kwargs):
            super().__init__(*args, **kwargs)
            self._saved_page_states = []

        def showPage(self):
            self._saved_page_states.append(dict(self.__dict__))
            self._startPage()

        def save(self):
            total = len(self._saved_page_states)
            for state in self._saved_page_states:
                self.__dict__.update(state)
                self._draw_footer(total)
                super().showPage()
            super().save()

        def _draw_footer(self, total: int):
            width, _ = self._pagesize
            self.setFont(FONT, 8)
            self.setFillColor(colors.grey)
            self.drawString(15 * mm, 10 * mm, settings.company_name)
            self.drawRightString(
                width - 15 * mm,
                10 * mm,
                translate("report.page", locale, page=self._pageNumber, pages=total),
            )

    return NumberedCanvas


def _table(rows, col_widths=None) -> Table:
    table = Table(rows, colWidths=col_widths, repeatRows=1)
    style = [
        ("FONT", (0, 0), (-1, 0), FONT_BOLD, 9),
        ("FONT", (0, 1), (-1, -1), FONT, 9),
        ("BACKGROUND", (0, 0), (-1, 0), HEADER_BG),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("ALIGN", (1, 0), (-1, -1), "RIGHT"),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.lightgrey),
        ("TOPPADDING", (0, 0), (-1, -1), 3),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
    ]
    for index in range(2, len(rows), 2):
        style.append(("BACKGROUND", (0, index), (-1, index), ZEBRA_BG))
    table.setStyle(TableStyle(style))
    return table


def build_financial_report_pdf(report: dict, locale: Optional[str] = None, compress: bool = True) -> bytes:
    """Render the dict produced by ``services.summaries.financial_report``."""
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=A4,
        leftMargin=15 * mm,
        rightMargin=15 * mm,
        topMargin=15 * mm,
        bottomMargin=20 * mm,
        title=translate("report.title", locale),
        author=settings.company_name,
        pageCompression=1 if compress else 0,
    )
    styles = getSampleStyleSheet()
    t = lambda key, **params: translate(key, locale, **params)  # noqa: E731

    story = [
        Paragraph(settings.company_name, styles["Heading3"]),
        Paragraph(t("report.title"), styles["Title"]),
        Paragraph(t("report.period", start=report["startDate"], end=report["endDate"]), styles["Normal"]),
        Spacer(1, 6 * mm),
    ]

    totals = report["totals"]
    story.append(_table(
        [
            [t("report.total_income"), t("report.total_expenses"), t("report.net_benefit")],
            [format_money(totals["income"]), format_money(totals["expense"]), format_money(totals["profit"])],
        ],
        col_widths=[60 * mm] * 3,
    ))
    story.append(Spacer(1, 8 * mm))

    series = report["timeSeries"]
    if series:
        rows = [[t("report.date"), t("report.income"), t("report.expense"), t("report.profit")]]
        for row in series:
            rows.append([
                row["date"],
                format_money(row["income"]),
                format_money(row["expense"]),
                format_money(row["profit"]),
            ])
        story.append(_table(rows, col_widths=[45 * mm] * 4))
    else:
        story.append(Paragraph(t("report.no_data"), styles["Italic"]))

    for heading, items in (
        ("report.by_category", report["categoryBreakdown"]),
        ("report.by_recipient", report["recipientBreakdown"]),
    ):
        if not items:
            continue
        story.append(Spacer(1, 8 * mm))
        story.append(Paragraph(t(heading), styles["Heading2"]))
        story.append(_table(
            [["", t("report.expense")]] + [[str(item["name"]), format_money(item["value"])] for item in items],
            col_widths=[120 * mm, 60 * mm],
        ))

    doc.build(story, canvasmaker=_numbered_canvas(locale))
    return buf.getvalue()
