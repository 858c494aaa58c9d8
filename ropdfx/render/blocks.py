"""
Composite blocks built from the layout primitives.

Cards, tables, chips and signature areas draw backgrounds behind their text, so
each of them decides up front how much of itself fits on the current page.
Blocks that are taller than a page are split at line or row boundaries.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from reportlab.lib.units import mm

from ..assets import SignatureAsset
from ..utils import format_short_date, get_logger
from .cursor import RenderCursor
from .page import CircleOp, Color, ImageOp, LineOp, RectOp, TextOp
from .primitives import PLACEHOLDER, measure_image
from .styles import (
    ACCENT_BLUE,
    ACCENT_GREEN,
    ACCENT_RED,
    BADGE_TEXT,
    BG_BLUE,
    BG_GREEN,
    BG_RED,
    BLACK,
    CARD_LABEL,
    CARD_VALUE,
    FONT_BOLD,
    FONT_ITALIC,
    LIGHT_BG,
    LIGHT_GRAY,
    NAVY,
    OFF_WHITE,
    SUMMARY_BODY,
    TABLE_CELL_TEXT,
    TABLE_HEADER_TEXT,
    TEXT_MUTED,
    TEXT_SECONDARY,
    WHITE,
    TextStyle,
    background_for,
)
from .text import TRUNCATION_MARKER, number_items, text_width, truncate_to_width, wrap_text

LOGGER = get_logger("ropdfx.render")

STATUS_BADGES = {
    "completed": (ACCENT_GREEN, BG_GREEN),
    "in_progress": (ACCENT_BLUE, BG_BLUE),
}


def _centered_baseline(top: float, height: float, style: TextStyle) -> float:
    return top + height / 2 + style.size * 0.35


def _text(x: float, y: float, text: str, style: TextStyle, align: str = "left") -> TextOp:
    return TextOp(x=x, y=y, text=text, font=style.font, size=style.size, color=style.color, align=align)


def content_box(
    cursor: RenderCursor,
    text: Optional[str],
    *,
    accent: Color,
    background: Optional[Color] = None,
    style: TextStyle = SUMMARY_BODY,
    padding: float = 7.0,
    gap_after: float = 8.0,
    bullet: bool = False,
) -> None:
    """
    Draw wrapped text on a tinted card with an accent bar on its left edge,
    or with an accent bullet before the first line when ``bullet`` is set.

    A card taller than the room left on the page is continued on the next
    page as a second card.
    """
    template = cursor.template
    fill = background or background_for(accent)
    text_x = template.margin + padding + (14 if bullet else 4)
    first_chunk = True
    lines = wrap_text(text.strip() if text and text.strip() else PLACEHOLDER, style, template.right - padding - text_x)
    line_height = style.line_height

    height = len(lines) * line_height + 2 * padding
    if height <= cursor.usable_height:
        cursor.check_page_break(height)

    pending = lines
    while pending:
        fitting = int((cursor.remaining - 2 * padding + 0.005) // line_height)
        if fitting < 1:
            cursor.new_page()
            continue
        chunk, pending = pending[:fitting], pending[fitting:]
        box_height = len(chunk) * line_height + 2 * padding
        top = cursor.y
        cursor.draw(RectOp(x=template.margin, y=top, width=template.content_width, height=box_height, fill=fill, radius=3))
        if not bullet:
            cursor.draw(RectOp(x=template.margin, y=top, width=2.5, height=box_height, fill=accent))
        elif first_chunk:
            cursor.draw(CircleOp(x=template.margin + padding + 4, y=top + padding + line_height / 2, radius=3, fill=accent))
        first_chunk = False
        for index, line in enumerate(chunk):
            cursor.draw(_text(text_x, top + padding + index * line_height + style.baseline_offset, line, style))
        cursor.advance(box_height)
    cursor.advance(gap_after)


def info_card(
    cursor: RenderCursor,
    fields: Sequence[Optional[Tuple[str, object]]],
    *,
    accent: Color,
    background: Color = OFF_WHITE,
    columns: int = 3,
    padding: float = 8.0,
    gap_after: float = 10.0,
    placeholder: str = PLACEHOLDER,
) -> None:
    """
    Draw a grid of label/value cells on a card.

    ``None`` entries leave their grid cell empty so related fields stay in the
    same column. Absent values show ``placeholder``.
    """
    if columns < 1:
        raise ValueError("columns must be at least 1")

    template = cursor.template
    inner_left = template.margin + padding + 4
    column_width = (template.right - padding - inner_left) / columns
    cell_height = CARD_LABEL.line_height + CARD_VALUE.line_height + 6
    rows = [list(fields[start:start + columns]) for start in range(0, len(fields), columns)]

    height = len(rows) * cell_height + 2 * padding
    if height <= cursor.usable_height:
        cursor.check_page_break(height)

    pending = rows
    while pending:
        fitting = int((cursor.remaining - 2 * padding + 0.005) // cell_height)
        if fitting < 1:
            cursor.new_page()
            continue
        chunk, pending = pending[:fitting], pending[fitting:]
        card_height = len(chunk) * cell_height + 2 * padding
        top = cursor.y
        cursor.draw(RectOp(x=template.margin, y=top, width=template.content_width, height=card_height, fill=background, radius=3))
        cursor.draw(RectOp(x=template.margin, y=top, width=2.5, height=card_height, fill=accent))
        for row_index, row in enumerate(chunk):
            cell_top = top + padding + row_index * cell_height
            for column_index, entry in enumerate(row):
                if entry is None:
                    continue
                label, value = entry
                x = inner_left + column_index * column_width
                shown = placeholder if value is None or str(value).strip() == "" else str(value).strip()
                cursor.draw(
                    _text(x, cell_top + CARD_LABEL.baseline_offset, truncate_to_width(label, CARD_LABEL, column_width - 6), CARD_LABEL)
                )
                cursor.draw(
                    _text(
                        x,
                        cell_top + CARD_LABEL.line_height + CARD_VALUE.baseline_offset,
                        truncate_to_width(shown, CARD_VALUE, column_width - 6),
                        CARD_VALUE,
                    )
                )
        cursor.advance(card_height)
    cursor.advance(gap_after)


@dataclass(frozen=True)
class Column:
    """A table column; ``width`` is a fraction of the content width."""

    title: str
    width: float
    align: str = "left"


def table(
    cursor: RenderCursor,
    columns: Sequence[Column],
    rows: Iterable[Sequence[object]],
    *,
    header_fill: Color = NAVY,
    stripe: Color = OFF_WHITE,
    header_height: float = 20.0,
    row_height: float = 18.0,
    gap_after: float = 10.0,
) -> int:
    """
    Draw a striped table and return the number of body rows.

    The header row is repeated at the top of every page the table continues on.
    Cells are truncated to their column width.
    """
    template = cursor.template
    total = sum(column.width for column in columns)
    if not columns or total <= 0:
        raise ValueError("A table needs at least one column with a positive width")

    edges: List[Tuple[float, float]] = []
    x = template.margin
    for column in columns:
        width = template.content_width * column.width / total
        edges.append((x, width))
        x += width

    def cell_op(column: Column, edge: Tuple[float, float], top: float, height: float, text: str, style: TextStyle) -> TextOp:
        left, width = edge
        shown = truncate_to_width(text, style, width - 10)
        baseline = _centered_baseline(top, height, style)
        if column.align == "right":
            return _text(left + width - 5, baseline, shown, style, align="right")
        if column.align == "center":
            return _text(left + width / 2, baseline, shown, style, align="center")
        return _text(left + 5, baseline, shown, style)

    def draw_header() -> None:
        top = cursor.y
        cursor.draw(RectOp(x=template.margin, y=top, width=template.content_width, height=header_height, fill=header_fill, radius=2))
        for column, edge in zip(columns, edges):
            cursor.draw(cell_op(column, edge, top, header_height, column.title, TABLE_HEADER_TEXT))
        cursor.advance(header_height + 2)

    cursor.check_page_break(header_height + 2 + row_height)
    draw_header()

    count = 0
    for index, row in enumerate(rows):
        if cursor.check_page_break(row_height):
            draw_header()
        top = cursor.y
        if index % 2 == 0:
            cursor.draw(RectOp(x=template.margin, y=top, width=template.content_width, height=row_height, fill=stripe))
        for column, edge, value in zip(columns, edges, row):
            text = PLACEHOLDER if value is None or str(value).strip() == "" else str(value)
            cursor.draw(cell_op(column, edge, top, row_height, text, TABLE_CELL_TEXT))
        cursor.advance(row_height)
        count += 1
    cursor.advance(gap_after)
    return count


def chips(
    cursor: RenderCursor,
    labels: Iterable[object],
    *,
    accent: Color = ACCENT_RED,
    background: Color = BG_RED,
    height: float = 16.0,
    spacing: float = 6.0,
    gap_after: float = 10.0,
) -> int:
    """Draw short labels as outlined chips, flowing onto new rows as needed."""

    template = cursor.template
    style = TextStyle(font=FONT_BOLD, size=8.5, color=accent)
    values = [str(label).strip() for label in labels if label is not None and str(label).strip()]
    if not values:
        return 0

    cursor.check_page_break(height)
    x = template.margin
    for value in values:
        text = truncate_to_width(value, style, template.content_width - 14)
        width = text_width(text, style) + 14
        if x > template.margin and x + width > template.right:
            cursor.advance(height + spacing)
            x = template.margin
            cursor.check_page_break(height)
        top = cursor.y
        cursor.draw(RectOp(x=x, y=top, width=width, height=height, fill=background, stroke=accent, line_width=0.75, radius=3))
        cursor.draw(_text(x + 7, _centered_baseline(top, height, style), text, style))
        x += width + spacing
    cursor.advance(height + gap_after)
    return len(values)


def numbered_cards(
    cursor: RenderCursor,
    items: Optional[Iterable[object]],
    *,
    accent: Color = ACCENT_GREEN,
    background: Optional[Color] = None,
    style: TextStyle = SUMMARY_BODY,
    padding: float = 6.0,
    spacing: float = 6.0,
) -> int:
    """
    Draw one tinted card per list item with its number in a filled circle.

    Numbering uses the same ordinal clean-up as the plain numbered list. A card
    that would not fit on an empty page is cut short with a truncation marker.
    """
    template = cursor.template
    fill = background or background_for(accent)
    number_style = TextStyle(font=FONT_BOLD, size=8, color=WHITE)
    text_x = template.margin + 32
    text_width_available = template.right - padding - text_x
    line_height = style.line_height
    badge_radius = 8.0

    entries = number_items(items)
    for entry in entries:
        ordinal, _, body = entry.partition(" ")
        lines = wrap_text(body, style, text_width_available)
        height = max(len(lines) * line_height, badge_radius * 2) + 2 * padding
        if height > cursor.usable_height:
            keep = max(int((cursor.usable_height - 2 * padding) // line_height), 1)
            LOGGER.warning("Numbered card %s is taller than a page; keeping %s of %s lines", ordinal, keep, len(lines))
            lines = lines[:keep]
            lines[-1] = truncate_to_width(f"{lines[-1]}{TRUNCATION_MARKER}", style, text_width_available)
            height = max(len(lines) * line_height, badge_radius * 2) + 2 * padding

        cursor.check_page_break(height)
        top = cursor.y
        cursor.draw(RectOp(x=template.margin, y=top, width=template.content_width, height=height, fill=fill, radius=3))
        center_y = top + padding + badge_radius
        cursor.draw(CircleOp(x=template.margin + 15, y=center_y, radius=badge_radius, fill=accent))
        cursor.draw(_text(template.margin + 15, center_y + number_style.size * 0.35, ordinal.rstrip("."), number_style, align="center"))
        for index, line in enumerate(lines):
            cursor.draw(_text(text_x, top + padding + index * line_height + style.baseline_offset, line, style))
        cursor.advance(height + spacing)
    return len(entries)


def status_rows(
    cursor: RenderCursor,
    rows: Iterable[Tuple[str, Optional[str]]],
    *,
    row_height: float = 26.0,
    spacing: float = 4.0,
    style: TextStyle = SUMMARY_BODY,
) -> int:
    """Draw numbered ``(title, status)`` rows with a status badge on the right."""

    template = cursor.template
    number_style = TextStyle(font=FONT_BOLD, size=7.5, color=WHITE)
    count = 0
    for index, (title, status) in enumerate(rows, start=1):
        cursor.check_page_break(row_height)
        top = cursor.y
        fill = OFF_WHITE if index % 2 else WHITE
        cursor.draw(RectOp(x=template.margin, y=top, width=template.content_width, height=row_height, fill=fill, radius=3))
        center_y = top + row_height / 2
        cursor.draw(CircleOp(x=template.margin + 14, y=center_y, radius=7, fill=NAVY))
        cursor.draw(_text(template.margin + 14, center_y + number_style.size * 0.35, str(index), number_style, align="center"))

        state = (status or "pending").strip().lower() or "pending"
        accent, badge_fill = STATUS_BADGES.get(state, (TEXT_MUTED, LIGHT_BG))
        badge_style = BADGE_TEXT.derive(color=accent)
        badge_text = state.replace("_", " ").upper()
        badge_width = text_width(badge_text, badge_style) + 16
        badge_height = 14.0
        badge_top = top + (row_height - badge_height) / 2
        badge_left = template.right - badge_width - 4
        cursor.draw(RectOp(x=badge_left, y=badge_top, width=badge_width, height=badge_height, fill=badge_fill, radius=3))
        cursor.draw(_text(badge_left + badge_width / 2, _centered_baseline(badge_top, badge_height, badge_style), badge_text, badge_style, align="center"))

        shown = truncate_to_width((title or "").strip() or "Untitled Task", style, badge_left - template.margin - 42)
        cursor.draw(_text(template.margin + 30, _centered_baseline(top, row_height, style), shown, style))
        cursor.advance(row_height + spacing)
        count += 1
    return count


def signature_line(
    cursor: RenderCursor,
    label: str,
    signature: Optional[SignatureAsset],
    *,
    line_width: float = 70 * mm,
    image_height: float = 12 * mm,
) -> None:
    """
    Draw a signature line with its label, optional captured image and signer
    name, next to a date line.
    """
    template = cursor.template
    label_style = TextStyle(size=9, color=BLACK)
    detail_style = TextStyle(font=FONT_ITALIC, size=8, color=BLACK)
    height = image_height + 4 + 30
    cursor.check_page_break(height)

    left = template.margin
    line_y = cursor.y + image_height + 4
    if signature is not None:
        size = measure_image(signature.image, image_height, 50 * mm)
        if size is not None:
            width, placed_height = size
            cursor.draw(ImageOp(x=left, y=line_y - placed_height - 2, width=width, height=placed_height, data=signature.image))

    cursor.draw(LineOp(x1=left, y1=line_y, x2=left + line_width, y2=line_y))
    cursor.draw(_text(left, line_y + 13, label, label_style))
    if signature is not None and signature.signer_name:
        cursor.draw(_text(left, line_y + 25, truncate_to_width(signature.signer_name, detail_style, line_width), detail_style))

    date_left = left + 90 * mm
    cursor.draw(LineOp(x1=date_left, y1=line_y, x2=date_left + 40 * mm, y2=line_y))
    cursor.draw(_text(date_left, line_y + 13, "Date", label_style))
    if signature is not None and signature.signed_at is not None:
        cursor.draw(_text(date_left, line_y + 25, signature.signed_at.strftime("%m/%d/%Y"), detail_style.derive(font=label_style.font)))
    cursor.advance(height)


def signature_boxes(
    cursor: RenderCursor,
    boxes: Sequence[Tuple[str, Optional[SignatureAsset]]],
    *,
    date_text: str,
    box_height: float = 35 * mm,
    spacing: float = 10.0,
    gap_after: float = 12.0,
) -> None:
    """Draw side-by-side signature boxes; unsigned boxes show "Not signed"."""

    if not boxes:
        return
    template = cursor.template
    title_style = TextStyle(font=FONT_BOLD, size=8, color=TEXT_SECONDARY)
    empty_style = TextStyle(font=FONT_ITALIC, size=8, color=LIGHT_GRAY)
    detail_style = TextStyle(size=7.5, color=TEXT_MUTED)
    box_width = (template.content_width - spacing * (len(boxes) - 1)) / len(boxes)

    cursor.check_page_break(box_height)
    top = cursor.y
    for index, (title, signature) in enumerate(boxes):
        left = template.margin + index * (box_width + spacing)
        cursor.draw(
            RectOp(x=left, y=top, width=box_width, height=box_height, fill=OFF_WHITE, stroke=LIGHT_GRAY, line_width=0.5, radius=4)
        )
        cursor.draw(_text(left + 10, top + 16, truncate_to_width(title.upper(), title_style, box_width - 20), title_style))

        size = measure_image(signature.image, 15 * mm, min(50 * mm, box_width - 30)) if signature else None
        if size is not None:
            width, height = size
            cursor.draw(ImageOp(x=left + 20, y=top + 10 * mm, width=width, height=height, data=signature.image))
        else:
            cursor.draw(_text(left + 10, top + 22 * mm, "Not signed", empty_style))

        if signature is not None and signature.signer_name:
            cursor.draw(_text(left + 10, top + 32 * mm, truncate_to_width(signature.signer_name, detail_style, box_width / 2), detail_style))
        signed_on = format_short_date(signature.signed_at) if signature and signature.signed_at else date_text
        cursor.draw(_text(left + box_width - 10, top + 32 * mm, f"Date: {signed_on}", detail_style, align="right"))
    cursor.advance(box_height + gap_after)


__all__ = [
    "Column",
    "STATUS_BADGES",
    "chips",
    "content_box",
    "info_card",
    "numbered_cards",
    "signature_boxes",
    "signature_line",
    "status_rows",
    "table",
]
