"""Routing between direct text extraction and image-based recognition."""

from __future__ import annotations

from typing import Callable, Iterator, Optional, Protocol, Sequence

from ..utils import get_logger
from .policy import ExtractionConfig, RasterPolicy, select_raster_policy
from .raster import PageRasterizer
from .text import extract_text
from .types import (
    ExtractedText,
    ExtractionPlan,
    ImagePlan,
    PageImage,
    ProgressEvent,
    SourceDocument,
    TextPlan,
)

LOGGER = get_logger("ropdfx.extract")

TEXT_CHECKPOINTS = (10, 50, 100)
IMAGE_CHECKPOINTS = (10, 35, 65, 100)

TextExtractor = Callable[..., ExtractedText]
ProgressCallback = Callable[[ProgressEvent], None]


class Rasterizer(Protocol):
    """Anything able to turn the leading pages of a document into page images."""

    def rasterize(
        self,
        document: SourceDocument,
        policy: RasterPolicy,
        max_pages: int = 10,
    ) -> Sequence[PageImage]:
        """Return rendered pages ordered by page number."""


def is_scanned(extracted: ExtractedText, config: ExtractionConfig | None = None) -> bool:
    """Return ``True`` when the text yield is too low for the text path."""

    config = config or ExtractionConfig()
    length = extracted.trimmed_length
    # An empty yield always goes to the image path, whatever the threshold.
    return length == 0 or length < config.text_threshold


class ExtractionRouter:
    """
    Decide how a source PDF should be fed to the recognition service.

    The router reads the document's text first. Documents whose trimmed text is
    shorter than ``config.text_threshold`` are treated as scans: their leading
    pages are rasterized and returned as an :class:`ImagePlan`. Everything else
    becomes a :class:`TextPlan` carrying the extracted text.
    """

    def __init__(
        self,
        config: Optional[ExtractionConfig] = None,
        *,
        text_extractor: Optional[TextExtractor] = None,
        rasterizer: Optional[Rasterizer] = None,
    ) -> None:
        self.config = config or ExtractionConfig()
        self._extract_text = text_extractor or extract_text
        self._rasterizer: Rasterizer = rasterizer or PageRasterizer()

    def stream(self, document: SourceDocument) -> Iterator[ProgressEvent]:
        """Yield progress events; the last one carries the extraction plan."""

        config = self.config
        yield ProgressEvent("extracting_text", TEXT_CHECKPOINTS[0], "Extracting text from PDF...")
        extracted = self._extract_text(document, separator=config.page_separator)
        trimmed_length = extracted.trimmed_length

        if not is_scanned(extracted, config):
            LOGGER.info(
                "Routing %s to text path (%s characters over %s pages)",
                document.name,
                trimmed_length,
                document.page_count,
            )
            yield ProgressEvent("processing_text", TEXT_CHECKPOINTS[1], "Processing extracted text...")
            plan: ExtractionPlan = TextPlan(
                content=extracted.content,
                file_name=document.name,
                page_count=document.page_count,
            )
            yield ProgressEvent("complete", TEXT_CHECKPOINTS[2], "Text extraction complete", plan=plan)
            return

        policy = select_raster_policy(document.page_count, config)
        LOGGER.info(
            "Routing %s to image path (%s characters, %s pages, scale=%s, quality=%s)",
            document.name,
            trimmed_length,
            document.page_count,
            policy.scale,
            policy.quality,
        )
        yield ProgressEvent("rasterizing", IMAGE_CHECKPOINTS[1], "Scanned PDF detected, rendering pages...")
        images = tuple(self._rasterizer.rasterize(document, policy, config.max_pages))
        yield ProgressEvent("rasterized", IMAGE_CHECKPOINTS[2], f"Rendered {len(images)} page image(s)")
        plan = ImagePlan(
            page_images=images,
            file_name=document.name,
            page_count=document.page_count,
            policy=policy,
            ocr_text=extracted.trimmed or None,
        )
        yield ProgressEvent("complete", IMAGE_CHECKPOINTS[3], "Page images ready for recognition", plan=plan)

    def route(
        self,
        document: SourceDocument,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> ExtractionPlan:
        """Run :meth:`stream` to completion and return the final plan."""

        plan: Optional[ExtractionPlan] = None
        for event in self.stream(document):
            if progress_callback:
                progress_callback(event)
            if event.plan is not None:
                plan = event.plan
        if plan is None:  # pragma: no cover - stream always ends with a plan
            raise RuntimeError("Extraction finished without producing a plan")
        return plan


def route_document(
    document: SourceDocument,
    config: Optional[ExtractionConfig] = None,
    progress_callback: Optional[ProgressCallback] = None,
) -> ExtractionPlan:
    """Convenience wrapper building a default :class:`ExtractionRouter`."""

    return ExtractionRouter(config).route(document, progress_callback=progress_callback)


__all__ = [
    "ExtractionRouter",
    "Rasterizer",
    "is_scanned",
    "route_document",
    "TEXT_CHECKPOINTS",
    "IMAGE_CHECKPOINTS",
]
