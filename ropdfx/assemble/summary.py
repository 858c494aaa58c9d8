"""The service and diagnostic summary report."""

from __future__ import annotations

import re
from typing import List, Optional

from reportlab.lib.units import mm

from ..records import CaseRecord, unique_citations
from ..render import (
    DEFAULT_DISCLAIMER,
    Column,
    FooterSpec,
    PageTemplate,
    RenderCursor,
    chips,
    content_box,
    info_card,
    numbered_cards,
    section_header,
    signature_boxes,
    status_rows,
    table,
)
from ..render.footer import SUMMARY_FOOTER_STYLE
from ..render.page import ImageOp, LineOp, RectOp, TextOp
from ..render.primitives import draw_line_of_text, measure_image
from ..render.styles import (
    ACCENT_BLUE,
    ACCENT_GREEN,
    ACCENT_ORANGE,
    ACCENT_PURPLE,
    ACCENT_RED,
    BG_PURPLE,
    FONT_BOLD,
    HEADER_TEXT,
    HEADER_TEXT_DIM,
    LIGHT_GRAY,
    NAVY,
    TEXT_SECONDARY,
    UNDERLINE_HEADER,
    WHITE,
    TextStyle,
)
from ..render.text import dedupe, truncate_to_width
from ..utils import format_long_date, format_short_date
from .base import DocumentAssembler, Section, draw_brand_mark
from .registry import register_document

BAND_HEIGHT = 48 * mm
LOGO_HEIGHT = 33.87 * mm
LOGO_MAX_WIDTH = 60 * mm
CITATION_LIMIT = 5

COMPANY_TEXT = TextStyle(font=FONT_BOLD, size=12, color=WHITE, leading=1.2)
ADDRESS_TEXT = TextStyle(size=8, color=HEADER_TEXT, leading=1.4)
WO_TEXT = TextStyle(font=FONT_BOLD, size=11, color=WHITE)
DATE_TEXT = TextStyle(size=9, color=HEADER_TEXT)
TIME_TEXT = TextStyle(size=9, color=HEADER_TEXT_DIM)
RUNNING_BRAND = TextStyle(font=FONT_BOLD, size=9, color=NAVY, leading=1.2)
SUBHEADING = TextStyle(font=FONT_BOLD, size=9, color=TEXT_SECONDARY)
CITATION_INDEX = TextStyle(font=FONT_BOLD, size=7, color=ACCENT_PURPLE)
CITATION_TITLE = TextStyle(size=8, color=TEXT_SECONDARY, leading=1.6)

_COMPLAINT_SEPARATORS = re.compile(r"[;\n]")


def split_complaints(complaint: Optional[str]) -> List[str]:
    """Split a complaint on ``;`` or newlines and drop repeats, ignoring case."""

    if not complaint:
        return []
    return dedupe(_COMPLAINT_SEPARATORS.split(complaint))


@register_document("summary")
class SummaryReport(DocumentAssembler):
    """
    Letterhead summary report of a work order.

    Only sections with data are included, so a sparse record yields a shorter
    report instead of empty headings.
    """

    title = "Service & Diagnostic Report"
    file_prefix = "WO"
    id_fallback = "Summary"
    header_style = UNDERLINE_HEADER

    @classmethod
    def default_template(cls) -> PageTemplate:
        return PageTemplate(margin=18 * mm, top_content=23 * mm, footer_reserve=22 * mm, footer_offset=10 * mm)

    # ------------------------------------------------------------------
    # Page chrome
    # ------------------------------------------------------------------
    def _header_text(self, cursor: RenderCursor, x: float, y: float, text: str, style: TextStyle, align: str = "left") -> None:
        cursor.draw_header(
            TextOp(x=x, y=y, text=text, font=style.font, size=style.size, color=style.color, align=align)
        )

    def draw_first_page_header(self, cursor: RenderCursor, record: CaseRecord) -> None:
        template = self.template
        branding = self.branding
        cursor.draw_header(RectOp(x=0, y=0, width=template.width, height=BAND_HEIGHT, fill=NAVY))

        text_x = template.margin
        if branding.has_logo:
            size = measure_image(branding.logo, LOGO_HEIGHT, LOGO_MAX_WIDTH)
            if size is not None:
                width, height = size
                cursor.draw_header(
                    ImageOp(x=template.margin, y=(BAND_HEIGHT - height) / 2, width=width, height=height, data=branding.logo)
                )
                text_x = template.margin + width + 6 * mm

        column_width = template.width / 2 + 20 * mm - text_x
        baseline = 10 * mm
        self._header_text(cursor, text_x, baseline, truncate_to_width(branding.company_name, COMPANY_TEXT, column_width), COMPANY_TEXT)
        baseline += 5 * mm
        detail_lines = list(branding.address_lines)
        if branding.contact_lines:
            detail_lines.append(" • ".join(branding.contact_lines))
        for line in detail_lines:
            self._header_text(cursor, text_x, baseline, truncate_to_width(line, ADDRESS_TEXT, column_width), ADDRESS_TEXT)
            baseline += 4 * mm

        right = template.right
        self._header_text(cursor, right, 14 * mm, f"WO #{record.display_id()}", WO_TEXT, align="right")
        self._header_text(cursor, right, 22 * mm, format_long_date(self.generated_at), DATE_TEXT, align="right")
        self._header_text(cursor, right, 29 * mm, self.generated_at.strftime("%I:%M %p"), TIME_TEXT, align="right")

        cursor.move_to(BAND_HEIGHT + 10 * mm)

    def draw_running_header(self, cursor: RenderCursor) -> None:
        template = self.template
        draw_brand_mark(
            cursor,
            self.branding,
            x=template.margin,
            top=8 * mm,
            target_height=7 * mm,
            max_width=40 * mm,
            fallback_style=RUNNING_BRAND,
        )
        rule_y = 17 * mm
        cursor.draw_header(LineOp(x1=template.margin, y1=rule_y, x2=template.right, y2=rule_y, color=LIGHT_GRAY, width=0.5))

    def footer_spec(self) -> FooterSpec:
        return FooterSpec(
            brand_label=self.branding.display_name,
            timestamp=self.timestamp,
            layout="split",
            disclaimer=DEFAULT_DISCLAIMER,
            style=SUMMARY_FOOTER_STYLE,
        )

    # ------------------------------------------------------------------
    # Body
    # ------------------------------------------------------------------
    def sections(self, record: CaseRecord):
        sections: List[Section] = []
        vehicle = record.vehicle
        if not vehicle.is_empty:
            fields = [
                ("UNIT / TRUCK NUMBER", vehicle.unit_id),
                ("VIN", vehicle.vin),
                None,
                ("YEAR / MAKE / MODEL", vehicle.year_make_model),
                ("CUSTOMER", record.customer_name),
                None,
                ("ENGINE", vehicle.engine),
                ("TRANSMISSION", vehicle.transmission),
                ("ODOMETER", vehicle.odometer_text),
            ]
            sections.append(
                Section(
                    "VEHICLE INFORMATION",
                    lambda cursor: info_card(cursor, fields, accent=ACCENT_BLUE),
                    accent=ACCENT_BLUE,
                    keep_with=40,
                )
            )

        work_order_fields = [
            ("WORK ORDER #", record.work_order_number),
            ("STATUS", record.status_text or "OPEN"),
            ("DATE IN", format_short_date(record.work_order_date) if record.work_order_date else None),
        ]
        sections.append(
            Section(
                "WORK ORDER SUMMARY",
                lambda cursor: info_card(cursor, work_order_fields, accent=ACCENT_PURPLE, background=BG_PURPLE),
                accent=ACCENT_PURPLE,
                keep_with=40,
            )
        )

        complaints = split_complaints(record.complaint)
        if complaints:
            sections.append(
                Section(
                    "CUSTOMER COMPLAINTS",
                    lambda cursor: self._complaints(cursor, complaints),
                    accent=ACCENT_RED,
                    keep_with=30,
                )
            )

        diagnostic = record.diagnostic
        if diagnostic is not None and diagnostic.diagnostic_summary:
            sections.append(
                Section(
                    "AI DIAGNOSTIC SUMMARY",
                    lambda cursor: content_box(cursor, diagnostic.diagnostic_summary, accent=ACCENT_BLUE),
                    accent=ACCENT_BLUE,
                    keep_with=30,
                )
            )
        if diagnostic is not None and diagnostic.probable_root_cause:
            sections.append(
                Section(
                    "PROBABLE ROOT CAUSE",
                    lambda cursor: content_box(cursor, diagnostic.probable_root_cause, accent=ACCENT_ORANGE),
                    accent=ACCENT_ORANGE,
                    keep_with=30,
                )
            )

        steps = diagnostic.recommended_repair_steps if diagnostic is not None else ()
        if steps or record.tasks:
            sections.append(
                Section(
                    "RECOMMENDED ACTIONS & TASKS",
                    lambda cursor: self._actions(cursor, record, steps),
                    accent=ACCENT_GREEN,
                    keep_with=30,
                )
            )

        if record.parts:
            sections.append(
                Section("PARTS USED", lambda cursor: self._parts(cursor, record), accent=ACCENT_PURPLE, keep_with=40)
            )
        if record.labor:
            sections.append(
                Section("LABOR SUMMARY", lambda cursor: self._labor(cursor, record), accent=ACCENT_ORANGE, keep_with=40)
            )
        if record.fault_codes:
            sections.append(
                Section(
                    "FAULT CODES DETECTED",
                    lambda cursor: chips(cursor, record.fault_codes),
                    accent=ACCENT_RED,
                    keep_with=20,
                )
            )
        return sections

    def _complaints(self, cursor: RenderCursor, complaints: List[str]) -> None:
        if len(complaints) == 1:
            content_box(cursor, complaints[0], accent=ACCENT_RED)
            return
        for complaint in complaints:
            content_box(cursor, complaint, accent=ACCENT_RED, padding=6, gap_after=5, bullet=True)

    def _actions(self, cursor: RenderCursor, record: CaseRecord, steps) -> None:
        if steps:
            numbered_cards(cursor, steps, accent=ACCENT_GREEN)
        if record.tasks:
            cursor.advance(4)
            cursor.check_page_break(SUBHEADING.line_height + 26)
            draw_line_of_text(cursor, "Work Order Tasks:", SUBHEADING, self.template.margin)
            status_rows(cursor, [(task.title, task.status) for task in record.tasks])

    def _parts(self, cursor: RenderCursor, record: CaseRecord) -> None:
        columns = (Column("PART NAME", 0.5), Column("PART #", 0.35), Column("QTY", 0.15, align="right"))
        rows = [(part.description or "Part", part.part_number, part.quantity_text) for part in record.parts]
        table(cursor, columns, rows)

    def _labor(self, cursor: RenderCursor, record: CaseRecord) -> None:
        columns = (Column("TECHNICIAN", 0.3), Column("DESCRIPTION", 0.5), Column("HOURS", 0.2, align="right"))
        rows = [
            (entry.technician_name or "Technician", entry.description or "Labor", entry.hours_text)
            for entry in record.labor
        ]
        table(cursor, columns, rows)

    def draw_signatures(self, cursor: RenderCursor, record: CaseRecord) -> None:
        cursor.advance(8)
        section_header(cursor, "SIGNATURES & APPROVAL", accent=NAVY, style=self.header_style, keep_with=35 * mm)
        signature_boxes(
            cursor,
            (
                ("Technician Signature", self.signature("technician")),
                ("Supervisor / Admin Approval", self.signature("supervisor")),
            ),
            date_text=format_long_date(self.generated_at),
        )

    def closing_sections(self, record: CaseRecord):
        diagnostic = record.diagnostic
        if diagnostic is None:
            return ()
        citations = unique_citations(diagnostic.citations)
        if not citations:
            return ()
        return (
            Section(
                f"KNOWLEDGE BASE SOURCES ({len(citations)})",
                lambda cursor: self._citations(cursor, citations[:CITATION_LIMIT]),
                accent=ACCENT_PURPLE,
                keep_with=CITATION_TITLE.line_height,
            ),
        )

    def _citations(self, cursor: RenderCursor, citations) -> None:
        template = self.template
        for index, citation in enumerate(citations, start=1):
            cursor.check_page_break(CITATION_TITLE.line_height)
            baseline = cursor.y + CITATION_TITLE.baseline_offset
            cursor.draw(
                TextOp(
                    x=template.margin + 2,
                    y=baseline,
                    text=f"[{index}]",
                    font=CITATION_INDEX.font,
                    size=CITATION_INDEX.size,
                    color=CITATION_INDEX.color,
                )
            )
            title = truncate_to_width(citation.title or "Knowledge Base Document", CITATION_TITLE, template.content_width - 22)
            draw_line_of_text(cursor, title, CITATION_TITLE, template.margin + 22)


__all__ = ["SummaryReport", "split_complaints"]
