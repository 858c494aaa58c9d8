"""
Page geometry and the immutable drawing operations recorded per page.

Coordinates are in PDF points measured from the top-left corner of the page,
with ``y`` growing downwards. The writer converts them to reportlab's
bottom-left origin when the document is serialized.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, Optional, Tuple, Union

from reportlab.lib.pagesizes import LETTER
from reportlab.lib.units import mm
from reportlab.pdfbase.pdfmetrics import getAscentDescent

Color = Tuple[int, int, int]

BODY = "body"
HEADER = "header"
FOOTER = "footer"


@dataclass(frozen=True)
class PageTemplate:
    """
    Fixed page geometry shared by every page of one document.

    Attributes:
        page_size: (width, height) in points
        margin: Left and right margin
        top_content: Where body content starts on continuation pages
        footer_reserve: Height at the bottom kept free for the footer
        footer_offset: Distance of the footer baseline from the bottom edge
    """

    page_size: Tuple[float, float] = LETTER
    margin: float = 18 * mm
    top_content: float = 26 * mm
    footer_reserve: float = 22 * mm
    footer_offset: float = 10 * mm

    def __post_init__(self) -> None:
        if self.footer_offset >= self.footer_reserve:
            raise ValueError("footer_offset must sit inside the reserved footer region")
        if self.top_content >= self.body_limit:
            raise ValueError("top_content leaves no room for body content")

    @property
    def width(self) -> float:
        return self.page_size[0]

    @property
    def height(self) -> float:
        return self.page_size[1]

    @property
    def content_width(self) -> float:
        return self.width - 2 * self.margin

    @property
    def right(self) -> float:
        return self.width - self.margin

    @property
    def body_limit(self) -> float:
        return self.height - self.footer_reserve

    @property
    def usable_height(self) -> float:
        return self.body_limit - self.top_content


@dataclass(frozen=True)
class TextOp:
    x: float
    y: float
    text: str
    font: str
    size: float
    color: Color = (0, 0, 0)
    align: str = "left"
    region: str = BODY

    @property
    def top(self) -> float:
        ascent, _ = getAscentDescent(self.font, self.size)
        return self.y - ascent

    @property
    def bottom(self) -> float:
        _, descent = getAscentDescent(self.font, self.size)
        return self.y - descent


@dataclass(frozen=True)
class RectOp:
    x: float
    y: float
    width: float
    height: float
    fill: Optional[Color] = None
    stroke: Optional[Color] = None
    line_width: float = 0.5
    radius: float = 0.0
    region: str = BODY

    @property
    def top(self) -> float:
        return self.y

    @property
    def bottom(self) -> float:
        return self.y + self.height


@dataclass(frozen=True)
class LineOp:
    x1: float
    y1: float
    x2: float
    y2: float
    color: Color = (0, 0, 0)
    width: float = 0.5
    region: str = BODY

    @property
    def top(self) -> float:
        return min(self.y1, self.y2) - self.width / 2

    @property
    def bottom(self) -> float:
        return max(self.y1, self.y2) + self.width / 2


@dataclass(frozen=True)
class CircleOp:
    x: float
    y: float
    radius: float
    fill: Color = (0, 0, 0)
    region: str = BODY

    @property
    def top(self) -> float:
        return self.y - self.radius

    @property
    def bottom(self) -> float:
        return self.y + self.radius


@dataclass(frozen=True)
class ImageOp:
    x: float
    y: float
    width: float
    height: float
    data: bytes = field(repr=False)
    region: str = BODY

    @property
    def top(self) -> float:
        return self.y

    @property
    def bottom(self) -> float:
        return self.y + self.height


DrawOp = Union[TextOp, RectOp, LineOp, CircleOp, ImageOp]


def in_region(op: DrawOp, region: str) -> DrawOp:
    return op if op.region == region else replace(op, region=region)


@dataclass(frozen=True)
class PageBuffer:
    """
    One finished page of first-pass content.

    Attributes:
        number: 1-indexed page number
        ops: Drawing operations in paint order
        content_bottom: Lowest point reached by body content on this page
    """

    number: int
    ops: Tuple[DrawOp, ...] = ()
    content_bottom: float = 0.0

    def ops_in(self, region: str) -> Tuple[DrawOp, ...]:
        return tuple(op for op in self.ops if op.region == region)

    def texts(self, region: Optional[str] = None) -> Tuple[str, ...]:
        return tuple(
            op.text
            for op in self.ops
            if isinstance(op, TextOp) and (region is None or op.region == region)
        )

    def with_ops(self, extra: Iterable[DrawOp]) -> "PageBuffer":
        return replace(self, ops=self.ops + tuple(extra))


__all__ = [
    "BODY",
    "HEADER",
    "FOOTER",
    "Color",
    "PageTemplate",
    "TextOp",
    "RectOp",
    "LineOp",
    "CircleOp",
    "ImageOp",
    "DrawOp",
    "PageBuffer",
    "in_region",
]
