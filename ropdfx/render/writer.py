"""Serialize laid-out page buffers to PDF bytes with reportlab."""

from __future__ import annotations

import io
from typing import Optional, Sequence

from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from ..utils import get_logger
from .page import CircleOp, Color, DrawOp, ImageOp, LineOp, PageBuffer, PageTemplate, RectOp, TextOp

LOGGER = get_logger("ropdfx.render")


def _rgb(color: Color):
    red, green, blue = color
    return red / 255.0, green / 255.0, blue / 255.0


def _draw(pdf: canvas.Canvas, op: DrawOp, page_height: float) -> None:
    if isinstance(op, TextOp):
        pdf.setFillColorRGB(*_rgb(op.color))
        pdf.setFont(op.font, op.size)
        y = page_height - op.y
        if op.align == "center":
            pdf.drawCentredString(op.x, y, op.text)
        elif op.align == "right":
            pdf.drawRightString(op.x, y, op.text)
        else:
            pdf.drawString(op.x, y, op.text)
    elif isinstance(op, RectOp):
        if op.fill is None and op.stroke is None:
            return
        if op.fill is not None:
            pdf.setFillColorRGB(*_rgb(op.fill))
        if op.stroke is not None:
            pdf.setStrokeColorRGB(*_rgb(op.stroke))
            pdf.setLineWidth(op.line_width)
        y = page_height - op.y - op.height
        stroke = 1 if op.stroke is not None else 0
        fill = 1 if op.fill is not None else 0
        if op.radius > 0:
            pdf.roundRect(op.x, y, op.width, op.height, op.radius, stroke=stroke, fill=fill)
        else:
            pdf.rect(op.x, y, op.width, op.height, stroke=stroke, fill=fill)
    elif isinstance(op, LineOp):
        pdf.setStrokeColorRGB(*_rgb(op.color))
        pdf.setLineWidth(op.width)
        pdf.line(op.x1, page_height - op.y1, op.x2, page_height - op.y2)
    elif isinstance(op, CircleOp):
        pdf.setFillColorRGB(*_rgb(op.fill))
        pdf.circle(op.x, page_height - op.y, op.radius, stroke=0, fill=1)
    elif isinstance(op, ImageOp):
        pdf.drawImage(
            ImageReader(io.BytesIO(op.data)),
            op.x,
            page_height - op.y - op.height,
            width=op.width,
            height=op.height,
            mask="auto",
        )
    else:
        raise TypeError(f"Unsupported draw operation: {type(op).__name__}")


def write_pdf(
    pages: Sequence[PageBuffer],
    template: PageTemplate,
    *,
    title: Optional[str] = None,
    author: Optional[str] = None,
    subject: Optional[str] = None,
) -> bytes:
    """
    Paint every page buffer onto a reportlab canvas and return the PDF bytes.

    Args:
        pages: Finished (footer-stamped) pages in order
        template: Geometry the pages were laid out with
        title: Document title metadata
        author: Document author metadata
        subject: Document subject metadata

    Returns:
        The encoded PDF
    """
    if not pages:
        raise ValueError("Cannot write a PDF without pages")

    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=template.page_size, pageCompression=1)
    if title:
        pdf.setTitle(title)
    if author:
        pdf.setAuthor(author)
    if subject:
        pdf.setSubject(subject)

    for page in pages:
        for op in page.ops:
            _draw(pdf, op, template.height)
        pdf.showPage()
    pdf.save()

    data = buffer.getvalue()
    LOGGER.debug("Wrote %s page(s), %s bytes", len(pages), len(data))
    return data


__all__ = ["write_pdf"]
