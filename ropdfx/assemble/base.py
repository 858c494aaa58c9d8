"""
Shared orchestration for document assembly.

An assembler lays out one record in two passes: the body flows through a
:class:`~ropdfx.render.RenderCursor`, then the finished pages are handed to
:func:`~ropdfx.render.stamp_footers` once their count is known. Nothing is
written to disk here; the caller receives the PDF bytes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, Optional, Sequence, Tuple, Union

from ..assets import BrandingAssets, SignatureAsset, signature_by_role
from ..records import CaseRecord
from ..render import FooterSpec, PageBuffer, PageTemplate, RenderCursor, section_header, stamp_footers, write_pdf
from ..render.page import Color, ImageOp, TextOp
from ..render.primitives import measure_image
from ..render.styles import BAR_HEADER, BRAND_TEAL, HeaderStyle, TextStyle
from ..render.text import text_width, truncate_to_width
from ..utils import ensure_output_dir, format_timestamp, get_logger
from .registry import registry

LOGGER = get_logger("ropdfx.assemble")

_UNSAFE_FILE_CHARS = re.compile(r"[^\w.-]+")


@dataclass(frozen=True)
class FinishedDocument:
    """
    A fully paginated PDF.

    Attributes:
        data: The encoded PDF
        page_count: Final number of pages, as printed in every footer
        file_name: Conventional download name
        kind: Document kind that produced it
    """

    data: bytes = field(repr=False)
    page_count: int
    file_name: str
    kind: str

    def save(self, directory: Union[str, Path]) -> Path:
        target = ensure_output_dir(directory) / self.file_name
        target.write_bytes(self.data)
        return target


@dataclass(frozen=True)
class Section:
    """A titled group of content, rendered inline and not retained."""

    title: str
    render: Callable[[RenderCursor], None]
    accent: Color = BRAND_TEAL
    keep_with: float = 0.0


def render_sections(
    cursor: RenderCursor,
    sections: Iterable[Section],
    header_style: HeaderStyle = BAR_HEADER,
    spacing: float = 6.0,
) -> int:
    count = 0
    for section in sections:
        section_header(cursor, section.title, accent=section.accent, style=header_style, keep_with=section.keep_with)
        section.render(cursor)
        cursor.advance(spacing)
        count += 1
    return count


def draw_brand_mark(
    cursor: RenderCursor,
    branding: BrandingAssets,
    *,
    x: float,
    top: float,
    target_height: float,
    max_width: float,
    fallback_style: TextStyle,
) -> Tuple[float, float]:
    """
    Draw the logo in the page header, or the brand name when there is no
    usable logo. Returns the width and height used.
    """
    size = measure_image(branding.logo, target_height, max_width)
    if size is not None:
        width, height = size
        cursor.draw_header(ImageOp(x=x, y=top, width=width, height=height, data=branding.logo))
        return width, height

    name = truncate_to_width(branding.display_name, fallback_style, max_width)
    cursor.draw_header(
        TextOp(
            x=x,
            y=top + fallback_style.baseline_offset,
            text=name,
            font=fallback_style.font,
            size=fallback_style.size,
            color=fallback_style.color,
        )
    )
    return text_width(name, fallback_style), fallback_style.line_height


def safe_file_component(value: str) -> str:
    return _UNSAFE_FILE_CHARS.sub("-", value).strip("-") or "document"


class DocumentAssembler:
    """
    Base class for document kinds.

    Subclasses provide the first-page header, the running header of later
    pages, the body and the footer; the base class runs the two passes.
    """

    kind: str = ""
    title: str = "Document"
    file_prefix: str = "Document"
    id_fallback: str = "N/A"
    header_style: HeaderStyle = BAR_HEADER

    def __init__(
        self,
        branding: Optional[BrandingAssets] = None,
        signatures: Sequence[SignatureAsset] = (),
        *,
        template: Optional[PageTemplate] = None,
        generated_at: Optional[datetime] = None,
    ) -> None:
        self.branding = branding or BrandingAssets()
        self.signatures = tuple(signatures)
        self.template = template or self.default_template()
        self.generated_at = generated_at or datetime.now()
        self.timestamp = format_timestamp(self.generated_at)

    @classmethod
    def default_template(cls) -> PageTemplate:
        return PageTemplate()

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------
    def draw_first_page_header(self, cursor: RenderCursor, record: CaseRecord) -> None:
        raise NotImplementedError

    def draw_running_header(self, cursor: RenderCursor) -> None:
        raise NotImplementedError

    def sections(self, record: CaseRecord) -> Sequence[Section]:
        raise NotImplementedError

    def draw_signatures(self, cursor: RenderCursor, record: CaseRecord) -> None:
        raise NotImplementedError

    def closing_sections(self, record: CaseRecord) -> Sequence[Section]:
        """Sections placed after the signature block."""

        return ()

    def footer_spec(self) -> FooterSpec:
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Orchestration
    # ------------------------------------------------------------------
    def signature(self, role: str) -> Optional[SignatureAsset]:
        return signature_by_role(self.signatures, role)

    def file_name(self, record: CaseRecord) -> str:
        identifier = safe_file_component(record.display_id(self.id_fallback))
        return f"{self.file_prefix}_{identifier}_{self.generated_at.date().isoformat()}.pdf"

    def layout(self, record: CaseRecord) -> Tuple[PageBuffer, ...]:
        """Run both passes and return the footer-stamped page buffers."""

        cursor = RenderCursor(self.template, running_header=self.draw_running_header)
        self.draw_first_page_header(cursor, record)
        section_count = render_sections(cursor, self.sections(record), self.header_style)
        self.draw_signatures(cursor, record)
        section_count += render_sections(cursor, self.closing_sections(record), self.header_style)
        LOGGER.debug("Laid out %s section(s) for %s", section_count, record.display_id())

        return stamp_footers(cursor.finish(), self.template, self.footer_spec())

    def build(self, record: CaseRecord) -> FinishedDocument:
        """Lay out ``record``, stamp footers and return the finished document."""

        pages = self.layout(record)
        data = write_pdf(
            pages,
            self.template,
            title=f"{self.title} {record.display_id()}",
            author=self.branding.display_name,
        )
        document = FinishedDocument(
            data=data,
            page_count=len(pages),
            file_name=self.file_name(record),
            kind=self.kind,
        )
        LOGGER.info(
            "Generated %s: %s page(s), %s bytes",
            document.file_name,
            document.page_count,
            len(data),
        )
        return document


def assemble(
    kind: str,
    record: CaseRecord,
    branding: Optional[BrandingAssets] = None,
    signatures: Sequence[SignatureAsset] = (),
    *,
    template: Optional[PageTemplate] = None,
    generated_at: Optional[datetime] = None,
) -> FinishedDocument:
    """Build a document of the registered ``kind`` from ``record``."""

    assembler_class = registry.resolve(kind)
    assembler = assembler_class(branding, signatures, template=template, generated_at=generated_at)
    return assembler.build(record)


__all__ = [
    "DocumentAssembler",
    "FinishedDocument",
    "Section",
    "assemble",
    "draw_brand_mark",
    "render_sections",
    "safe_file_component",
]
