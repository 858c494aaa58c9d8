"""
Type definitions for the extraction side of the pipeline.

This module defines the source document wrapper, the intermediate text
measurement, rasterized page images, the two extraction plans handed to the
recognition service, and the progress events emitted while routing.
"""

from __future__ import annotations

import base64
import io
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple, Union

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from ..exceptions import InvalidDocument
from .policy import RasterPolicy


@dataclass(frozen=True)
class SourceDocument:
    """
    One input PDF held in memory for the duration of an extraction request.

    Attributes:
        data: Raw PDF bytes
        page_count: Number of pages, always >= 1
        name: Original file name, forwarded to the recognition service
    """

    data: bytes = field(repr=False)
    page_count: int
    name: str = "document.pdf"

    @classmethod
    def from_bytes(cls, data: bytes, name: str = "document.pdf") -> "SourceDocument":
        if not data:
            raise InvalidDocument("PDF buffer is empty.")
        reader = open_reader(data)
        try:
            page_count = len(reader.pages)
        except Exception as exc:
            raise InvalidDocument(f"Unable to read page tree: {exc}") from exc
        if page_count == 0:
            raise InvalidDocument(f"PDF has no pages: {name}")
        return cls(data=bytes(data), page_count=page_count, name=name)

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "SourceDocument":
        source = Path(path)
        try:
            data = source.read_bytes()
        except OSError as exc:
            raise InvalidDocument(f"Unable to read PDF file: {source}. Error: {exc}") from exc
        return cls.from_bytes(data, name=source.name)


def open_reader(data: bytes) -> PdfReader:
    """Open ``data`` with pypdf, mapping every read failure to :class:`InvalidDocument`."""

    try:
        reader = PdfReader(io.BytesIO(data))
    except PdfReadError as exc:
        raise InvalidDocument(f"Corrupted or invalid PDF. Error: {exc}") from exc
    except Exception as exc:
        raise InvalidDocument(f"Unexpected error reading PDF: {exc}") from exc

    if reader.is_encrypted:
        try:
            unlocked = reader.decrypt("")
        except Exception as exc:
            raise InvalidDocument(f"Unable to decrypt PDF: {exc}") from exc
        if not unlocked:
            raise InvalidDocument("PDF is encrypted and cannot be read without a password.")
    return reader


@dataclass(frozen=True)
class ExtractedText:
    """Concatenated page text plus its trimmed length."""

    content: str
    page_texts: Tuple[str, ...] = ()

    @property
    def trimmed(self) -> str:
        return self.content.strip()

    @property
    def trimmed_length(self) -> int:
        return len(self.trimmed)


@dataclass(frozen=True)
class PageImage:
    """A single rasterized page encoded as JPEG."""

    page_number: int
    data: bytes = field(repr=False)
    width: int
    height: int
    mime_type: str = "image/jpeg"

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")


@dataclass(frozen=True)
class TextPlan:
    """Route the document's extracted text to the recognition service."""

    content: str
    file_name: str
    page_count: int

    kind = "text"


@dataclass(frozen=True)
class ImagePlan:
    """Route rasterized page images (scanned document) to the recognition service."""

    page_images: Tuple[PageImage, ...]
    file_name: str
    page_count: int
    policy: RasterPolicy
    ocr_text: Optional[str] = None

    kind = "image"


ExtractionPlan = Union[TextPlan, ImagePlan]


@dataclass(frozen=True)
class ProgressEvent:
    """
    Progress checkpoint emitted by the extraction router.

    The final event of every run has ``percent == 100`` and carries the plan.
    """

    phase: str
    percent: int
    message: str = ""
    plan: Optional[ExtractionPlan] = None

    @property
    def is_final(self) -> bool:
        return self.plan is not None
