"""
Second rendering pass: footer stamping.

The total page count is only known once every page of content has been laid
out, so footers are added to the finished page buffers afterwards. The body
region never reaches the reserved footer area, so stamping never overlaps
content.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .page import FOOTER, Color, DrawOp, LineOp, PageBuffer, PageTemplate, TextOp
from .styles import DISCLAIMER_GRAY, LIGHT_GRAY, MUTED_GRAY, RULE_GRAY, TextStyle
from .text import truncate_to_width

FOOTER_LAYOUTS = ("centered", "split")

DEFAULT_DISCLAIMER = "This document is for internal use. Information is provided as-is without warranty."


def page_label(number: int, total: int) -> str:
    return f"Page {number} of {total}"


@dataclass(frozen=True)
class FooterSpec:
    """
    Footer content shared by every page of one document.

    Attributes:
        brand_label: Generator or brand name, e.g. ``FleetWise AI``
        timestamp: Generation time, printed identically on every page
        layout: ``centered`` prints one line in the middle; ``split`` puts the
            brand left, the timestamp in the middle and the page label right
        disclaimer: Optional small print below the footer line
    """

    brand_label: str
    timestamp: str
    layout: str = "centered"
    disclaimer: Optional[str] = None
    style: TextStyle = TextStyle(size=8, color=MUTED_GRAY, leading=1.2)
    rule_color: Color = RULE_GRAY

    def __post_init__(self) -> None:
        if self.layout not in FOOTER_LAYOUTS:
            raise ValueError(f"Invalid footer layout '{self.layout}'. Choose from: {', '.join(FOOTER_LAYOUTS)}")

    def line_text(self, number: int, total: int) -> str:
        """The footer text of a centered footer."""

        return f"Generated by {self.brand_label} | {self.timestamp} | {page_label(number, total)}"


def footer_ops(spec: FooterSpec, template: PageTemplate, number: int, total: int) -> Tuple[DrawOp, ...]:
    """Build the footer drawing operations for page ``number`` of ``total``."""

    style = spec.style
    baseline = template.height - template.footer_offset
    rule_y = baseline - style.size - 2

    ops: list = [
        LineOp(
            x1=template.margin,
            y1=rule_y,
            x2=template.right,
            y2=rule_y,
            color=spec.rule_color,
            width=0.5,
            region=FOOTER,
        )
    ]

    def text(x: float, y: float, value: str, text_style: TextStyle, align: str) -> TextOp:
        return TextOp(
            x=x,
            y=y,
            text=value,
            font=text_style.font,
            size=text_style.size,
            color=text_style.color,
            align=align,
            region=FOOTER,
        )

    if spec.layout == "centered":
        line = truncate_to_width(spec.line_text(number, total), style, template.content_width)
        ops.append(text(template.width / 2, baseline, line, style, "center"))
    else:
        third = template.content_width / 3
        ops.append(text(template.margin, baseline, truncate_to_width(f"Generated by {spec.brand_label}", style, third), style, "left"))
        ops.append(text(template.width / 2, baseline, truncate_to_width(spec.timestamp, style, third), style, "center"))
        ops.append(text(template.right, baseline, page_label(number, total), style, "right"))

    if spec.disclaimer:
        small = style.derive(size=max(style.size - 1.5, 4), color=DISCLAIMER_GRAY)
        ops.append(
            text(
                template.width / 2,
                baseline + style.size + 2,
                truncate_to_width(spec.disclaimer, small, template.content_width),
                small,
                "center",
            )
        )
    return tuple(ops)


def stamp_footers(
    pages: Sequence[PageBuffer],
    template: PageTemplate,
    spec: FooterSpec,
) -> Tuple[PageBuffer, ...]:
    """
    Return new page buffers with a footer on every page.

    Pure function of its inputs: the total printed on each page is
    ``len(pages)`` and the given buffers are left untouched.
    """
    total = len(pages)
    if total == 0:
        raise ValueError("Cannot stamp footers on an empty document")
    stamped = []
    for number, page in enumerate(pages, start=1):
        if page.ops_in(FOOTER):
            raise ValueError(f"Page {number} already carries a footer")
        stamped.append(page.with_ops(footer_ops(spec, template, number, total)))
    return tuple(stamped)


SUMMARY_FOOTER_STYLE = TextStyle(size=7, color=LIGHT_GRAY, leading=1.2)

__all__ = [
    "DEFAULT_DISCLAIMER",
    "FOOTER_LAYOUTS",
    "FooterSpec",
    "SUMMARY_FOOTER_STYLE",
    "footer_ops",
    "page_label",
    "stamp_footers",
]
