# reports/pdf_report.py
from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.platypus import (
    Flowable,
    KeepTogether,
    PageBreak,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from analysis_modules.recommendations import RecommendationReport
from core.config import Config
from core.models import ReportModel
from reports.layout import (
    BarChart,
    Block,
    BulletList,
    Callout,
    KeyValueGrid,
    Section,
    SectionKind,
    SubHeading,
    TableBlock,
    TextBlock,
    Tone,
    build_document,
)

logger = logging.getLogger(__name__)

FONT_MAIN = "ReportSans"
FONT_BOLD = "ReportSans-Bold"
DEFAULT_FONT = "Helvetica"
DEFAULT_FONT_BOLD = "Helvetica-Bold"

PAGE_SIZE = A4
MARGIN_X = 20 * mm
MARGIN_Y = 25 * mm

ACCENT = colors.HexColor("#ff6347")
MUTED = colors.HexColor("#666666")
ZEBRA = colors.HexColor("#f9fafb")
GRID_FILL = colors.HexColor("#f8f9fa")

TONE_COLOR: Dict[Tone, colors.Color] = {
    Tone.HIGH: colors.HexColor("#ef4444"),
    Tone.MEDIUM: colors.HexColor("#f59e0b"),
    Tone.LOW: colors.HexColor("#3b82f6"),
    Tone.SAFE: colors.HexColor("#10b981"),
    Tone.NEUTRAL: colors.HexColor("#6b7280"),
}


@dataclass
class RenderedPdf:
    content: bytes
    page_count: int


def _register_fonts(regular: str = "", bold: str = "") -> Tuple[str, str]:
    if not regular:
        return DEFAULT_FONT, DEFAULT_FONT_BOLD

    try:
        pdfmetrics.registerFont(TTFont(FONT_MAIN, regular))
        pdfmetrics.registerFont(TTFont(FONT_BOLD, bold or regular))
        pdfmetrics.registerFontFamily(
            FONT_MAIN, normal=FONT_MAIN, bold=FONT_BOLD, italic=FONT_MAIN, boldItalic=FONT_BOLD
        )
    except Exception as e:
        logger.warning("Font registration failed for %s, using Helvetica: %s", regular, e)
        return DEFAULT_FONT, DEFAULT_FONT_BOLD
    return FONT_MAIN, FONT_BOLD


def _build_styles(font: str, bold: str) -> Dict[str, ParagraphStyle]:
    base = ParagraphStyle("body", fontName=font, fontSize=10, leading=14, spaceAfter=4)
    return {
        "body": base,
        "note": ParagraphStyle("note", parent=base, fontSize=8, leading=11, textColor=MUTED, spaceBefore=10),
        "logo": ParagraphStyle("logo", parent=base, fontName=bold, fontSize=28, leading=34, textColor=ACCENT,
                               alignment=TA_CENTER, spaceBefore=40),
        "title": ParagraphStyle("title", parent=base, fontName=bold, fontSize=24, leading=30,
                                alignment=TA_CENTER, spaceBefore=10),
        "subtitle": ParagraphStyle("subtitle", parent=base, fontSize=12, leading=16, textColor=MUTED,
                                   alignment=TA_CENTER, spaceAfter=30),
        "section": ParagraphStyle("section", parent=base, fontName=bold, fontSize=18, leading=22,
                                  textColor=ACCENT, spaceAfter=12),
        "subheading": ParagraphStyle("subheading", parent=base, fontName=bold, fontSize=13, leading=17,
                                     spaceBefore=12, spaceAfter=6),
        "cell": ParagraphStyle("cell", parent=base, fontSize=9, leading=11, spaceAfter=0),
        "cell_header": ParagraphStyle("cell_header", parent=base, fontName=bold, fontSize=9, leading=11,
                                      textColor=colors.white, spaceAfter=0),
        "label": ParagraphStyle("label", parent=base, fontSize=8, leading=10, textColor=MUTED, spaceAfter=0),
        "value": ParagraphStyle("value", parent=base, fontName=bold, fontSize=13, leading=16, spaceAfter=0),
        "callout_title": ParagraphStyle("callout_title", parent=base, fontName=bold, fontSize=11, leading=14),
        "bullet": ParagraphStyle("bullet", parent=base, leftIndent=14, bulletIndent=4),
    }


class RiskBar(Flowable):
    """Horizontal bar whose length is `fraction` of the plot width."""

    HEIGHT = 18
    LABEL_W = 90
    VALUE_W = 40

    def __init__(self, label: str, value: int, fraction: float, color: colors.Color, font: str, bold: str):
        super().__init__()
        self.label = label
        self.value = value
        self.fraction = max(0.0, min(1.0, fraction))
        self.color = color
        self.font = font
        self.bold = bold
        self.width = 0

    def wrap(self, availWidth, availHeight):
        self.width = availWidth
        return availWidth, self.HEIGHT + 4

    def bar_width(self) -> float:
        return (self.width - self.LABEL_W - self.VALUE_W) * self.fraction

    def draw(self):
        c = self.canv
        c.setFont(self.font, 9)
        c.setFillColor(colors.black)
        c.drawString(0, 5, self.label)

        plot_w = self.width - self.LABEL_W - self.VALUE_W
        c.setFillColor(GRID_FILL)
        c.rect(self.LABEL_W, 0, plot_w, self.HEIGHT, fill=True, stroke=False)

        if self.fraction > 0:
            c.setFillColor(self.color)
            c.rect(self.LABEL_W, 0, self.bar_width(), self.HEIGHT, fill=True, stroke=False)

        c.setFont(self.bold, 9)
        c.setFillColor(colors.black)
        c.drawString(self.LABEL_W + plot_w + 6, 5, str(self.value))


class _Serializer:
    def __init__(self, styles: Dict[str, ParagraphStyle], font: str, bold: str, width: float):
        self.styles = styles
        self.font = font
        self.bold = bold
        self.width = width

    def paragraph(self, markup: str, style: str = "body") -> Paragraph:
        return Paragraph(markup, self.styles[style])

    def grid(self, block: KeyValueGrid) -> Table:
        cells = [
            [self.paragraph(label, "label"), self.paragraph(value, "value")]
            for label, value in block.items
        ]
        # two label/value cards per row
        rows = []
        for i in range(0, len(cells), 2):
            pair = cells[i:i + 2]
            if len(pair) == 1:
                pair.append("")
            rows.append(pair)

        table = Table(rows, colWidths=[self.width / 2] * 2)
        style = [
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ("TOPPADDING", (0, 0), (-1, -1), 6),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
        ]
        for r, pair in enumerate(rows):
            for col, cell in enumerate(pair):
                if cell:
                    style.append(("BACKGROUND", (col, r), (col, r), GRID_FILL))
                    style.append(("LINEBEFORE", (col, r), (col, r), 3, ACCENT))
        table.setStyle(TableStyle(style))
        return table

    def table(self, block: TableBlock) -> Table:
        header = [self.paragraph(h, "cell_header") for h in block.header]
        rows: List[list] = [header]
        for r, row in enumerate(block.rows):
            cells = []
            for col, text in enumerate(row):
                if col == block.badge_column:
                    text = f"<font color='white'><b>{text}</b></font>"
                cells.append(self.paragraph(text, "cell"))
            rows.append(cells)

        style = [
            ("BACKGROUND", (0, 0), (-1, 0), ACCENT),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("LINEBELOW", (0, 1), (-1, -1), 0.5, colors.HexColor("#e5e7eb")),
        ]
        for r in range(1, len(rows)):
            if r % 2 == 0:
                style.append(("BACKGROUND", (0, r), (-1, r), ZEBRA))
        if block.badge_column is not None:
            for r, tone in enumerate(block.row_tones, start=1):
                col = block.badge_column
                style.append(("BACKGROUND", (col, r), (col, r), TONE_COLOR[tone]))

        if block.trailer:
            rows.append([self.paragraph(block.trailer, "cell")] + [""] * (len(block.header) - 1))
            last = len(rows) - 1
            style.append(("SPAN", (0, last), (-1, last)))
            style.append(("ALIGN", (0, last), (-1, last), "CENTER"))

        table = Table(rows, colWidths=[self.width * w for w in block.col_widths], repeatRows=1)
        table.setStyle(TableStyle(style))
        return table

    def callout(self, block: Callout) -> Table:
        content = [
            self.paragraph(block.title, "callout_title"),
            self.paragraph(block.text, "body"),
        ]
        table = Table([[content]], colWidths=[self.width])
        table.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, -1), colors.HexColor("#fff7ed")),
            ("LINEBEFORE", (0, 0), (0, -1), 4, TONE_COLOR[block.tone]),
            ("TOPPADDING", (0, 0), (-1, -1), 8),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 8),
        ]))
        return table

    def bullets(self, block: BulletList) -> list:
        items: list = [self.paragraph(block.title, "callout_title")]
        for text in block.items:
            items.append(Paragraph(text, self.styles["bullet"], bulletText="•"))
        return [KeepTogether(items)]

    def bars(self, block: BarChart) -> list:
        return [
            RiskBar(bar.label, bar.value, bar.fraction, TONE_COLOR[bar.tone], self.font, self.bold)
            for bar in block.bars
        ]

    def block(self, block: Block) -> list:
        if isinstance(block, SubHeading):
            return [self.paragraph(block.text, "subheading")]
        if isinstance(block, TextBlock):
            return [self.paragraph(block.text, block.style)]
        if isinstance(block, KeyValueGrid):
            return [self.grid(block), Spacer(1, 6)]
        if isinstance(block, BarChart):
            return self.bars(block)
        if isinstance(block, TableBlock):
            return [self.table(block), Spacer(1, 6)]
        if isinstance(block, Callout):
            return [Spacer(1, 8), self.callout(block), Spacer(1, 8)]
        if isinstance(block, BulletList):
            return self.bullets(block)
        raise TypeError(f"Unsupported block type: {type(block).__name__}")

    def story(self, sections: Sequence[Section]) -> list:
        flowables: list = []
        for i, section in enumerate(sections):
            if i > 0:
                flowables.append(PageBreak())
            if section.kind is not SectionKind.COVER:
                flowables.append(self.paragraph(section.title, "section"))
            for block in section.blocks:
                flowables.extend(self.block(block))
        return flowables


def _stamp(generated_at: datetime) -> str:
    return generated_at.strftime("%Y-%m-%d %H:%M:%S")


def _page_decorator(model: ReportModel, font: str, bold: str, pages: List[int]):
    width, height = PAGE_SIZE
    title = f"{Config.PRODUCT_NAME} Security Report"
    stamp = _stamp(model.generated_at)
    version = f"v{model.app_version}"

    def draw(c, doc):
        pages.append(c.getPageNumber())
        c.saveState()

        # Header
        c.setFont(bold, 9)
        c.setFillColor(ACCENT)
        c.drawString(MARGIN_X, height - 12 * mm, title)
        c.setFont(font, 8)
        c.setFillColor(MUTED)
        c.drawRightString(width - MARGIN_X, height - 12 * mm, f"Generated {stamp} | {version}")
        c.setStrokeColor(ACCENT)
        c.line(MARGIN_X, height - 14 * mm, width - MARGIN_X, height - 14 * mm)

        # Footer
        c.setStrokeColor(colors.grey)
        c.line(MARGIN_X, 15 * mm, width - MARGIN_X, 15 * mm)
        c.setFont(font, 8)
        c.drawString(MARGIN_X, 10 * mm, f"Generated by {Config.PRODUCT_NAME} {version} on {stamp}")
        c.drawRightString(width - MARGIN_X, 10 * mm, f"Page {c.getPageNumber()}")

        c.restoreState()

    return draw


def render_sections(model: ReportModel, sections: Sequence[Section]) -> RenderedPdf:
    font, bold = _register_fonts(Config.FONT_PATH, Config.FONT_BOLD_PATH)
    width, _ = PAGE_SIZE
    content_w = width - 2 * MARGIN_X

    serializer = _Serializer(_build_styles(font, bold), font, bold, content_w)
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=PAGE_SIZE,
        leftMargin=MARGIN_X,
        rightMargin=MARGIN_X,
        topMargin=MARGIN_Y,
        bottomMargin=MARGIN_Y,
        title=f"{Config.PRODUCT_NAME} Security Report",
        author=Config.PRODUCT_NAME,
    )

    pages: List[int] = []
    decorate = _page_decorator(model, font, bold, pages)
    doc.build(serializer.story(sections), onFirstPage=decorate, onLaterPages=decorate)
    return RenderedPdf(content=buffer.getvalue(), page_count=len(pages))


def render_pdf_report(
    model: ReportModel,
    advice: Optional[RecommendationReport] = None,
) -> RenderedPdf:
    return render_sections(model, build_document(model, advice))
