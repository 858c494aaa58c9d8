"""The operational repair order packet."""

from __future__ import annotations

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm

from ..records import CaseRecord, DiagnosticContent
from ..render import (
    FooterSpec,
    PageTemplate,
    RenderCursor,
    bullet_list,
    label_value,
    labeled_text_block,
    numbered_list,
    section_header,
    signature_line,
    text_block,
)
from ..render.page import LineOp, TextOp
from ..render.primitives import draw_line_of_text
from ..render.styles import (
    BODY_TEXT,
    BRAND_SLATE,
    BRAND_TEAL,
    FONT_BOLD,
    LABEL_TEXT,
    MUTED_GRAY,
    TextStyle,
)
from ..render.text import text_width, truncate_to_width
from ..utils import format_short_date
from .base import DocumentAssembler, Section, draw_brand_mark
from .registry import register_document

BRAND_FALLBACK = TextStyle(font=FONT_BOLD, size=12, color=BRAND_TEAL, leading=1.2)
CONTACT_TEXT = TextStyle(size=8, color=MUTED_GRAY, leading=1.25)
TITLE_TEXT = TextStyle(font=FONT_BOLD, size=16, color=BRAND_SLATE, leading=1.2)
SUBTITLE_TEXT = TextStyle(size=9, color=MUTED_GRAY, leading=1.6)
META_LABEL = TextStyle(font=FONT_BOLD, size=9)
META_VALUE = TextStyle(size=9)

HEADER_RULE_Y = 18 * mm
INDENT = 5 * mm


@register_document("packet")
class RepairOrderPacket(DocumentAssembler):
    """
    Repair order packet: vehicle, customer and work order details, the
    diagnostic findings (or recorded cause and correction) and a signature
    block.
    """

    title = "Repair Order Packet"
    subtitle = "AI-Assisted Diagnostic Report"
    file_prefix = "RO_Packet"
    id_fallback = "WO"

    @classmethod
    def default_template(cls) -> PageTemplate:
        return PageTemplate(page_size=A4, margin=20 * mm, top_content=26 * mm)

    # ------------------------------------------------------------------
    # Page chrome
    # ------------------------------------------------------------------
    def _draw_brand_header(self, cursor: RenderCursor) -> None:
        template = self.template
        draw_brand_mark(
            cursor,
            self.branding,
            x=template.margin,
            top=8 * mm,
            target_height=8 * mm,
            max_width=60 * mm,
            fallback_style=BRAND_FALLBACK,
        )
        cursor.draw_header(
            LineOp(
                x1=template.margin,
                y1=HEADER_RULE_Y,
                x2=template.right,
                y2=HEADER_RULE_Y,
                color=BRAND_TEAL,
                width=1.7,
            )
        )

    def draw_running_header(self, cursor: RenderCursor) -> None:
        self._draw_brand_header(cursor)

    def draw_first_page_header(self, cursor: RenderCursor, record: CaseRecord) -> None:
        template = self.template
        self._draw_brand_header(cursor)

        baseline = 8 * mm
        for line in self.branding.contact_lines:
            cursor.draw_header(
                TextOp(
                    x=template.right,
                    y=baseline,
                    text=truncate_to_width(line, CONTACT_TEXT, template.content_width / 2),
                    font=CONTACT_TEXT.font,
                    size=CONTACT_TEXT.size,
                    color=CONTACT_TEXT.color,
                    align="right",
                )
            )
            baseline += CONTACT_TEXT.line_height

        for line in self.branding.address_lines:
            draw_line_of_text(cursor, truncate_to_width(line, CONTACT_TEXT, template.content_width), CONTACT_TEXT, template.margin)
        if self.branding.address_lines:
            cursor.advance(4)

        draw_line_of_text(cursor, self.title, TITLE_TEXT, template.margin)
        draw_line_of_text(cursor, self.subtitle, SUBTITLE_TEXT, template.margin)
        cursor.advance(4)
        self._draw_metadata_row(
            cursor,
            (
                ("Work Order", record.display_id()),
                ("Status", record.status_text or "PENDING"),
                ("Generated", self.timestamp),
            ),
        )
        cursor.advance(10)

    def _draw_metadata_row(self, cursor: RenderCursor, pairs) -> None:
        template = self.template
        column_width = template.content_width / len(pairs)
        widths = [column_width * 0.8, column_width * 0.8, column_width * 1.4]
        cursor.check_page_break(META_VALUE.line_height)
        baseline = cursor.y + META_VALUE.baseline_offset
        x = template.margin
        for (label, value), width in zip(pairs, widths):
            label_text = f"{label}: "
            label_width = text_width(label_text, META_LABEL)
            cursor.draw(TextOp(x=x, y=baseline, text=label_text, font=META_LABEL.font, size=META_LABEL.size))
            cursor.draw(
                TextOp(
                    x=x + label_width,
                    y=baseline,
                    text=truncate_to_width(value, META_VALUE, width - label_width - 4),
                    font=META_VALUE.font,
                    size=META_VALUE.size,
                    color=MUTED_GRAY if label == "Generated" else META_VALUE.color,
                )
            )
            x += width
        cursor.advance(META_VALUE.line_height)

    def footer_spec(self) -> FooterSpec:
        return FooterSpec(brand_label=self.branding.display_name, timestamp=self.timestamp)

    # ------------------------------------------------------------------
    # Body
    # ------------------------------------------------------------------
    def sections(self, record: CaseRecord):
        line = BODY_TEXT.line_height
        sections = [
            Section("VEHICLE INFORMATION", lambda cursor: self._vehicle(cursor, record), keep_with=line),
            Section("CUSTOMER INFORMATION", lambda cursor: label_value(cursor, "Customer Name", record.customer_name), keep_with=line),
            Section("WORK ORDER DETAILS", lambda cursor: self._work_order(cursor, record), keep_with=line),
        ]
        diagnostic = record.diagnostic
        if diagnostic is not None:
            sections.extend(self._diagnostic_sections(diagnostic))
        else:
            sections.append(
                Section(
                    "CAUSE / DIAGNOSIS",
                    lambda cursor: self._paragraph(cursor, record.cause or "No diagnosis recorded"),
                    keep_with=line,
                )
            )
            sections.append(
                Section(
                    "CORRECTION / WORK PERFORMED",
                    lambda cursor: self._paragraph(cursor, record.correction or "No correction recorded"),
                    keep_with=line,
                )
            )
        return sections

    def _paragraph(self, cursor: RenderCursor, text) -> None:
        text_block(cursor, text, x=self.template.margin + INDENT)

    def _vehicle(self, cursor: RenderCursor, record: CaseRecord) -> None:
        vehicle = record.vehicle
        make_model_year = f"{vehicle.make or 'N/A'} {vehicle.model or ''} ({vehicle.year or 'N/A'})".replace("  ", " ")
        label_value(cursor, "VIN", vehicle.vin)
        label_value(cursor, "Make / Model / Year", make_model_year)
        label_value(cursor, "Engine", vehicle.engine)
        label_value(cursor, "Odometer", vehicle.odometer_text)

    def _work_order(self, cursor: RenderCursor, record: CaseRecord) -> None:
        work_date = record.work_order_date or self.generated_at.date()
        label_value(cursor, "Work Order ID", record.display_id())
        label_value(cursor, "Status", record.status_text)
        label_value(cursor, "Date", format_short_date(work_date))
        cursor.advance(2)
        labeled_text_block(cursor, "Complaint", record.complaint, x=self.template.margin)
        if record.fault_codes:
            cursor.check_page_break(LABEL_TEXT.line_height + BODY_TEXT.line_height)
            draw_line_of_text(cursor, "Fault Codes:", LABEL_TEXT, self.template.margin)
            bullet_list(cursor, record.fault_codes, x=self.template.margin + INDENT)

    def _diagnostic_sections(self, diagnostic: DiagnosticContent):
        line = BODY_TEXT.line_height
        sections = [
            Section(
                "DIAGNOSTIC SUMMARY (AI-GENERATED)",
                lambda cursor: self._paragraph(cursor, diagnostic.diagnostic_summary),
                keep_with=line,
            ),
            Section(
                "PROBABLE ROOT CAUSE",
                lambda cursor: self._paragraph(cursor, diagnostic.probable_root_cause),
                keep_with=line,
            ),
            Section(
                "RECOMMENDED REPAIR STEPS",
                lambda cursor: numbered_list(
                    cursor, diagnostic.recommended_repair_steps, x=self.template.margin + INDENT
                ),
                keep_with=line,
            ),
        ]
        if diagnostic.safety_notes:
            sections.append(
                Section("SAFETY / NOTES", lambda cursor: self._paragraph(cursor, diagnostic.safety_notes), keep_with=line)
            )
        if diagnostic.citations:
            citations = [citation.describe(index) for index, citation in enumerate(diagnostic.citations, start=1)]
            sections.append(
                Section(
                    "CITATIONS (KNOWLEDGE BASE SOURCES)",
                    lambda cursor: numbered_list(
                        cursor,
                        citations,
                        style=BODY_TEXT.derive(size=9),
                        x=self.template.margin + INDENT,
                        strip_markers=False,
                    ),
                    keep_with=line,
                )
            )
        return sections

    def draw_signatures(self, cursor: RenderCursor, record: CaseRecord) -> None:
        cursor.advance(8)
        section_header(cursor, "SIGNATURES", accent=BRAND_TEAL, style=self.header_style, keep_with=80)
        cursor.advance(4)
        signature_line(cursor, "Technician Signature", self.signature("technician"))
        cursor.advance(10)
        authorized = self.signature("authorized_rep")
        if authorized is not None:
            signature_line(cursor, "Authorized Representative", authorized)
            cursor.advance(10)
        signature_line(cursor, "Customer Signature", self.signature("customer"))


__all__ = ["RepairOrderPacket"]
