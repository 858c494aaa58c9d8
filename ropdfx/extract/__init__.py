"""Extraction routing: text path versus page-image path."""

from __future__ import annotations

from .policy import (
    RASTER_POLICIES,
    ExtractionConfig,
    RasterPolicy,
    pages_to_rasterize,
    select_raster_policy,
)
from .raster import PageRasterizer
from .router import ExtractionRouter, is_scanned, route_document
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

__all__ = [
    "ExtractionConfig",
    "ExtractionRouter",
    "ExtractedText",
    "ExtractionPlan",
    "ImagePlan",
    "PageImage",
    "PageRasterizer",
    "ProgressEvent",
    "RASTER_POLICIES",
    "RasterPolicy",
    "SourceDocument",
    "TextPlan",
    "extract_text",
    "is_scanned",
    "pages_to_rasterize",
    "route_document",
    "select_raster_policy",
]
