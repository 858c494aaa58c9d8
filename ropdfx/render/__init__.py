"""Paginated rendering: cursor, layout primitives, footer stamping and PDF output."""

from __future__ import annotations

from .blocks import (
    Column,
    chips,
    content_box,
    info_card,
    numbered_cards,
    signature_boxes,
    signature_line,
    status_rows,
    table,
)
from .cursor import RenderCursor
from .footer import DEFAULT_DISCLAIMER, FooterSpec, footer_ops, page_label, stamp_footers
from .page import (
    BODY,
    FOOTER,
    HEADER,
    CircleOp,
    ImageOp,
    LineOp,
    PageBuffer,
    PageTemplate,
    RectOp,
    TextOp,
)
from .primitives import (
    NO_STEPS_PLACEHOLDER,
    PLACEHOLDER,
    bullet_list,
    fit_image,
    label_value,
    labeled_text_block,
    numbered_list,
    section_header,
    text_block,
)
from .text import number_items, strip_list_marker, truncate_to_width, wrap_text
from .writer import write_pdf

__all__ = [
    "BODY",
    "FOOTER",
    "HEADER",
    "CircleOp",
    "Column",
    "DEFAULT_DISCLAIMER",
    "FooterSpec",
    "ImageOp",
    "LineOp",
    "NO_STEPS_PLACEHOLDER",
    "PLACEHOLDER",
    "PageBuffer",
    "PageTemplate",
    "RectOp",
    "RenderCursor",
    "TextOp",
    "bullet_list",
    "chips",
    "content_box",
    "fit_image",
    "footer_ops",
    "info_card",
    "label_value",
    "labeled_text_block",
    "number_items",
    "numbered_cards",
    "numbered_list",
    "page_label",
    "section_header",
    "signature_boxes",
    "signature_line",
    "stamp_footers",
    "status_rows",
    "strip_list_marker",
    "table",
    "text_block",
    "truncate_to_width",
    "wrap_text",
    "write_pdf",
]
