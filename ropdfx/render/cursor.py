"""The render cursor: vertical position tracking and page-break policy."""

from __future__ import annotations

from typing import Callable, List, Optional, Tuple

from ..exceptions import RenderOverflow
from ..utils import get_logger
from .page import BODY, HEADER, DrawOp, PageBuffer, PageTemplate, in_region

LOGGER = get_logger("ropdfx.render")

_TOLERANCE = 0.01

RunningHeader = Callable[["RenderCursor"], None]


class RenderCursor:
    """
    Single-owner position tracker for one document assembly.

    Every layout primitive asks :meth:`check_page_break` for its full height
    before drawing. When the request does not fit above the reserved footer
    region a new page is opened, the running header is drawn on it and ``y``
    returns to ``template.top_content``.
    """

    def __init__(self, template: PageTemplate, *, running_header: Optional[RunningHeader] = None) -> None:
        self.template = template
        self.running_header = running_header
        self.page_index = 0
        self.y = template.top_content
        self._ops: List[DrawOp] = []
        self._pages: List[PageBuffer] = []
        self._content_bottom = 0.0
        self._finished = False

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------
    @property
    def limit(self) -> float:
        return self.template.body_limit

    @property
    def remaining(self) -> float:
        return max(self.limit - self.y, 0.0)

    @property
    def usable_height(self) -> float:
        return self.template.usable_height

    @property
    def page_number(self) -> int:
        return self.page_index + 1

    def fits(self, required: float) -> bool:
        return self.y + required <= self.limit + _TOLERANCE

    # ------------------------------------------------------------------
    # Page flow
    # ------------------------------------------------------------------
    def check_page_break(self, required: float) -> bool:
        """Open a new page unless ``required`` points fit below ``y``.

        Returns ``True`` when a page break happened.
        """
        if self.fits(required):
            return False
        self.new_page()
        return True

    def new_page(self) -> None:
        self._ensure_open()
        self._pages.append(self._seal())
        self._ops = []
        self._content_bottom = 0.0
        self.page_index += 1
        self.y = self.template.top_content
        LOGGER.debug("Started page %s", self.page_number)
        if self.running_header is not None:
            self.running_header(self)

    def advance(self, dy: float) -> None:
        """Move down by ``dy`` without ever passing the footer boundary."""

        self.y = min(self.y + dy, self.limit)

    def move_to(self, y: float) -> None:
        if y > self.limit + _TOLERANCE:
            raise RenderOverflow(f"Cannot move cursor to {y:.1f}pt, below the body limit {self.limit:.1f}pt")
        self.y = y

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------
    def draw(self, op: DrawOp) -> None:
        """Record a body operation on the current page."""

        self._ensure_open()
        op = in_region(op, BODY)
        if op.bottom > self.limit + _TOLERANCE:
            raise RenderOverflow(
                f"Body content reaches {op.bottom:.1f}pt on page {self.page_number}, "
                f"past the footer boundary at {self.limit:.1f}pt"
            )
        self._ops.append(op)
        self._content_bottom = max(self._content_bottom, op.bottom)

    def draw_header(self, op: DrawOp) -> None:
        """Record a header-region operation (page chrome, not body content)."""

        self._ensure_open()
        self._ops.append(in_region(op, HEADER))

    def finish(self) -> Tuple[PageBuffer, ...]:
        """Seal the last page and return every page of the first pass."""

        self._ensure_open()
        self._pages.append(self._seal())
        self._finished = True
        LOGGER.debug("Content pass finished with %s page(s)", len(self._pages))
        return tuple(self._pages)

    def _seal(self) -> PageBuffer:
        return PageBuffer(
            number=self.page_index + 1,
            ops=tuple(self._ops),
            content_bottom=self._content_bottom,
        )

    def _ensure_open(self) -> None:
        if self._finished:
            raise RuntimeError("RenderCursor has already been finished")


__all__ = ["RenderCursor", "RunningHeader"]
