"""Raster policy presets and extraction configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Literal

RasterPolicyName = Literal["detailed", "compact"]


@dataclass(frozen=True)
class RasterPolicy:
    """Scale/quality trade-off used when rendering pages to JPEG."""

    scale: float
    quality: float

    def __post_init__(self) -> None:
        if self.scale <= 0:
            raise ValueError(f"Raster scale must be positive, got {self.scale}")
        if not 0 < self.quality <= 1:
            raise ValueError(f"Raster quality must be within (0, 1], got {self.quality}")

    @property
    def jpeg_quality(self) -> int:
        return int(round(self.quality * 100))


RASTER_POLICIES: Dict[RasterPolicyName, RasterPolicy] = {
    "detailed": RasterPolicy(scale=1.5, quality=0.85),
    "compact": RasterPolicy(scale=1.2, quality=0.75),
}


@dataclass(frozen=True)
class ExtractionConfig:
    """
    Explicit configuration for one extraction router.

    Attributes:
        text_threshold: Minimum trimmed text length for the text path
        max_pages: Upper bound on rasterized pages for the image path
        policy_page_threshold: Page counts above this use the compact policy
        detailed_policy: Policy for short documents
        compact_policy: Policy for longer documents
        page_separator: Joiner placed between per-page texts
    """

    text_threshold: int = 100
    max_pages: int = 10
    policy_page_threshold: int = 6
    detailed_policy: RasterPolicy = field(default_factory=lambda: RASTER_POLICIES["detailed"])
    compact_policy: RasterPolicy = field(default_factory=lambda: RASTER_POLICIES["compact"])
    page_separator: str = "\n\n"

    def __post_init__(self) -> None:
        if self.text_threshold < 0:
            raise ValueError("text_threshold must be >= 0")
        if self.max_pages < 1:
            raise ValueError("max_pages must be >= 1")


def pages_to_rasterize(page_count: int, max_pages: int) -> int:
    return max(0, min(page_count, max_pages))


def select_raster_policy(page_count: int, config: ExtractionConfig | None = None) -> RasterPolicy:
    """Pick the raster policy for a document of ``page_count`` pages.

    The decision uses the capped page count, so heavier documents get a lower
    scale and quality and the recognition payload stays bounded.
    """

    config = config or ExtractionConfig()
    processed = pages_to_rasterize(page_count, config.max_pages)
    if processed > config.policy_page_threshold:
        return config.compact_policy
    return config.detailed_policy


__all__ = [
    "RasterPolicy",
    "RasterPolicyName",
    "RASTER_POLICIES",
    "ExtractionConfig",
    "pages_to_rasterize",
    "select_raster_policy",
]
