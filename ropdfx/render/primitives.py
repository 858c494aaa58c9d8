"""
Layout primitives.

Each primitive takes the cursor, its content and a style, asks the cursor for
its full height before writing anything, records its draw operations and
leaves the cursor below what it drew.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence, Tuple

from ..assets import image_size
from ..exceptions import AssetLoadFailure
from ..utils import get_logger
from .cursor import RenderCursor
from .page import Color, CircleOp, LineOp, RectOp, TextOp
from .styles import (
    BAR_HEADER,
    BODY_TEXT,
    BRAND_TEAL,
    FONT_ITALIC,
    LABEL_TEXT,
    MUTED_GRAY,
    HeaderStyle,
    TextStyle,
)
from .text import number_items, text_width, truncate_to_width, wrap_text

LOGGER = get_logger("ropdfx.render")

PLACEHOLDER = "N/A"
NO_STEPS_PLACEHOLDER = "No steps specified"


def _span(cursor: RenderCursor, x: Optional[float], width: Optional[float]) -> Tuple[float, float]:
    template = cursor.template
    left = template.margin if x is None else x
    available = template.right - left if width is None else width
    return left, available


def draw_line_of_text(
    cursor: RenderCursor,
    text: str,
    style: TextStyle,
    x: float,
    *,
    align: str = "left",
) -> None:
    """Draw one already-measured line at the cursor and advance by its line height."""

    cursor.draw(
        TextOp(
            x=x,
            y=cursor.y + style.baseline_offset,
            text=text,
            font=style.font,
            size=style.size,
            color=style.color,
            align=align,
        )
    )
    cursor.advance(style.line_height)


def flow_lines(cursor: RenderCursor, lines: Sequence[str], style: TextStyle, x: float) -> None:
    """
    Draw wrapped lines, keeping them together when they fit on one page.

    A block taller than a whole page is broken between lines.
    """
    height = len(lines) * style.line_height
    if height <= cursor.usable_height:
        cursor.check_page_break(height)
        for line in lines:
            draw_line_of_text(cursor, line, style, x)
        return

    LOGGER.debug("Text block of %s lines is taller than a page; flowing line by line", len(lines))
    for line in lines:
        cursor.check_page_break(style.line_height)
        draw_line_of_text(cursor, line, style, x)


def section_header(
    cursor: RenderCursor,
    title: str,
    *,
    accent: Color = BRAND_TEAL,
    style: HeaderStyle = BAR_HEADER,
    keep_with: float = 0.0,
) -> None:
    """
    Draw a section title as a filled accent bar or an underlined heading.

    Args:
        keep_with: Height of the content that should start on the same page
    """
    template = cursor.template
    block = style.height + style.gap_after
    if block + keep_with <= cursor.usable_height:
        cursor.check_page_break(block + keep_with)
    else:
        cursor.check_page_break(block)

    top = cursor.y
    text_style = style.text
    ascent_offset = text_style.size * 0.35
    label = truncate_to_width(title, text_style, template.content_width - 16)

    if style.variant == "bar":
        cursor.draw(
            RectOp(
                x=template.margin,
                y=top,
                width=template.content_width,
                height=style.height,
                fill=accent,
                radius=2,
            )
        )
        cursor.draw(
            TextOp(
                x=template.margin + 8,
                y=top + style.height / 2 + ascent_offset,
                text=label,
                font=text_style.font,
                size=text_style.size,
                color=text_style.color,
            )
        )
    elif style.variant == "underline":
        cursor.draw(CircleOp(x=template.margin + 3, y=top + style.height / 2 - 2, radius=3, fill=accent))
        cursor.draw(
            TextOp(
                x=template.margin + 12,
                y=top + style.height / 2 + ascent_offset - 2,
                text=label,
                font=text_style.font,
                size=text_style.size,
                color=text_style.color,
            )
        )
        cursor.draw(
            LineOp(
                x1=template.margin,
                y1=top + style.height - 1,
                x2=template.margin + min(style.underline_width, template.content_width),
                y2=top + style.height - 1,
                color=accent,
                width=1.5,
            )
        )
    else:
        raise ValueError(f"Unknown header variant '{style.variant}'")

    cursor.advance(block)


def label_value(
    cursor: RenderCursor,
    label: str,
    value: object,
    *,
    x: Optional[float] = None,
    width: Optional[float] = None,
    label_width: float = 120.0,
    label_style: TextStyle = LABEL_TEXT,
    value_style: TextStyle = BODY_TEXT,
    placeholder: str = PLACEHOLDER,
) -> None:
    """Draw ``label: value`` on one line; an absent value shows ``placeholder``."""

    left, available = _span(cursor, x, width)
    line_height = max(label_style.line_height, value_style.line_height)
    cursor.check_page_break(line_height)

    text = placeholder if value is None or str(value).strip() == "" else str(value).strip()
    baseline = cursor.y + max(label_style.baseline_offset, value_style.baseline_offset)
    cursor.draw(
        TextOp(
            x=left,
            y=baseline,
            text=truncate_to_width(f"{label}:", label_style, label_width - 4),
            font=label_style.font,
            size=label_style.size,
            color=label_style.color,
        )
    )
    cursor.draw(
        TextOp(
            x=left + label_width,
            y=baseline,
            text=truncate_to_width(text, value_style, available - label_width),
            font=value_style.font,
            size=value_style.size,
            color=value_style.color,
        )
    )
    cursor.advance(line_height)


def text_block(
    cursor: RenderCursor,
    text: Optional[str],
    *,
    style: TextStyle = BODY_TEXT,
    x: Optional[float] = None,
    width: Optional[float] = None,
    placeholder: str = PLACEHOLDER,
    gap_after: float = 4.0,
) -> int:
    """
    Draw a wrapped paragraph and return its line count.

    The wrapped height is measured before anything is drawn so the page-break
    check uses the real rendered height.
    """
    left, available = _span(cursor, x, width)
    content = text.strip() if text and text.strip() else placeholder
    lines = wrap_text(content, style, available)
    flow_lines(cursor, lines, style, left)
    cursor.advance(gap_after)
    return len(lines)


def labeled_text_block(
    cursor: RenderCursor,
    label: str,
    text: Optional[str],
    *,
    label_style: TextStyle = LABEL_TEXT,
    style: TextStyle = BODY_TEXT,
    x: Optional[float] = None,
    width: Optional[float] = None,
    placeholder: str = PLACEHOLDER,
    gap_after: float = 6.0,
) -> int:
    """Draw a bold label above a wrapped paragraph, keeping the label with its text."""

    left, available = _span(cursor, x, width)
    content = text.strip() if text and text.strip() else placeholder
    lines = wrap_text(content, style, available)
    total = label_style.line_height + len(lines) * style.line_height
    if total <= cursor.usable_height:
        cursor.check_page_break(total)
    else:
        cursor.check_page_break(label_style.line_height + style.line_height)

    draw_line_of_text(cursor, truncate_to_width(label, label_style, available), label_style, left)
    flow_lines(cursor, lines, style, left)
    cursor.advance(gap_after)
    return len(lines)


def numbered_list(
    cursor: RenderCursor,
    items: Optional[Iterable[object]],
    *,
    style: TextStyle = BODY_TEXT,
    x: Optional[float] = None,
    width: Optional[float] = None,
    placeholder: str = NO_STEPS_PLACEHOLDER,
    item_gap: float = 3.0,
    strip_markers: bool = True,
) -> int:
    """
    Draw a numbered list and return how many items were drawn.

    Upstream ordinals are stripped before numbering, and numbering restarts at
    1 for every call. Each item is kept whole on one page unless it is taller
    than a page. Continuation lines hang under the item text.
    """
    left, available = _span(cursor, x, width)
    numbered = number_items(items, strip_markers=strip_markers)
    if not numbered:
        text_block(
            cursor,
            placeholder,
            style=style.derive(font=FONT_ITALIC, color=MUTED_GRAY),
            x=left,
            width=available,
        )
        return 0

    for entry in numbered:
        prefix, _, body = entry.partition(" ")
        prefix = f"{prefix} "
        indent = text_width(prefix, style)
        body_lines = wrap_text(body, style, available - indent)
        height = len(body_lines) * style.line_height
        if height <= cursor.usable_height:
            cursor.check_page_break(height)
        for index, line in enumerate(body_lines):
            cursor.check_page_break(style.line_height)
            if index == 0:
                draw_line_of_text(cursor, prefix + line, style, left)
            else:
                draw_line_of_text(cursor, line, style, left + indent)
        cursor.advance(item_gap)
    return len(numbered)


def bullet_list(
    cursor: RenderCursor,
    items: Iterable[object],
    *,
    style: TextStyle = BODY_TEXT,
    bullet_color: Color = BRAND_TEAL,
    x: Optional[float] = None,
    width: Optional[float] = None,
    item_gap: float = 2.0,
) -> int:
    """Draw a bulleted list; blank items are skipped."""

    left, available = _span(cursor, x, width)
    indent = 12.0
    count = 0
    for item in items:
        text = str(item).strip() if item is not None else ""
        if not text:
            continue
        lines = wrap_text(text, style, available - indent)
        height = len(lines) * style.line_height
        if height <= cursor.usable_height:
            cursor.check_page_break(height)
        for index, line in enumerate(lines):
            cursor.check_page_break(style.line_height)
            if index == 0:
                cursor.draw(
                    CircleOp(x=left + 3, y=cursor.y + style.line_height / 2, radius=1.6, fill=bullet_color)
                )
            draw_line_of_text(cursor, line, style, left + indent)
        cursor.advance(item_gap)
        count += 1
    return count


def fit_image(
    native_width: float,
    native_height: float,
    target_height: float,
    max_width: float,
) -> Tuple[float, float]:
    """
    Size an image to ``target_height`` without distorting it.

    The width follows from the aspect ratio. When that width exceeds
    ``max_width`` the width is capped and the height re-derived from it.
    """
    if native_width <= 0 or native_height <= 0:
        raise ValueError("Image dimensions must be positive")
    if target_height <= 0 or max_width <= 0:
        raise ValueError("Target size must be positive")

    ratio = native_width / native_height
    width = target_height * ratio
    height = target_height
    if width > max_width:
        width = max_width
        height = width / ratio
    return width, height


def measure_image(data: Optional[bytes], target_height: float, max_width: float) -> Optional[Tuple[float, float]]:
    """Return the placed size of ``data``, or ``None`` when the image cannot be decoded."""

    if not data:
        return None
    try:
        native_width, native_height = image_size(data)
    except AssetLoadFailure as exc:
        LOGGER.warning("Image omitted from layout: %s", exc.message)
        return None
    return fit_image(native_width, native_height, target_height, max_width)


__all__ = [
    "NO_STEPS_PLACEHOLDER",
    "PLACEHOLDER",
    "bullet_list",
    "draw_line_of_text",
    "fit_image",
    "flow_lines",
    "label_value",
    "labeled_text_block",
    "measure_image",
    "numbered_list",
    "section_header",
    "text_block",
]
