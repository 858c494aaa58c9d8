"""Text measurement, wrapping and list-marker helpers."""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Sequence

from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth

from ..utils import get_logger
from .styles import TextStyle

LOGGER = get_logger("ropdfx.render")

TRUNCATION_MARKER = "..."

# Leading ordinals such as "1. ", "2) " or "3 - " produced upstream.
LIST_MARKER = re.compile(r"^\s*\d+\s*[.)\-]\s*")


def text_width(text: str, style: TextStyle) -> float:
    return stringWidth(text, style.font, style.size)


def _break_long_line(line: str, style: TextStyle, max_width: float) -> List[str]:
    pieces: List[str] = []
    current = ""
    for char in line:
        if current and text_width(current + char, style) > max_width:
            pieces.append(current)
            current = char
        else:
            current += char
    pieces.append(current)
    return pieces


def wrap_text(text: Optional[str], style: TextStyle, max_width: float) -> List[str]:
    """
    Wrap ``text`` into lines no wider than ``max_width``.

    Words are kept whole where possible. A single token wider than the line is
    split across lines instead of running past the margin.
    """
    if max_width <= 0:
        raise ValueError("max_width must be positive")
    if not text:
        return []

    lines: List[str] = []
    for line in simpleSplit(str(text), style.font, style.size, max_width):
        if text_width(line, style) > max_width:
            lines.extend(_break_long_line(line, style, max_width))
        else:
            lines.append(line)
    return lines


def truncate_to_width(
    text: str,
    style: TextStyle,
    max_width: float,
    marker: str = TRUNCATION_MARKER,
) -> str:
    """Shorten ``text`` so it fits on a single line, ending with ``marker``."""

    if text_width(text, style) <= max_width:
        return text

    LOGGER.warning("Truncating %r to fit %.1fpt", text[:40], max_width)

    # Width grows with prefix length, so search for the longest prefix that fits.
    low, high = 0, len(text)
    while low < high:
        middle = (low + high + 1) // 2
        if text_width(text[:middle].rstrip() + marker, style) <= max_width:
            low = middle
        else:
            high = middle - 1
    return text[:low].rstrip() + marker


def strip_list_marker(item: object) -> str:
    return LIST_MARKER.sub("", str(item).strip(), count=1).strip()


def number_items(items: Optional[Iterable[object]], *, strip_markers: bool = True) -> List[str]:
    """
    Return ``items`` as ``"1. text"`` strings with any upstream numbering removed.

    Blank entries are dropped before numbering so the sequence has no gaps.
    """
    clean = strip_list_marker if strip_markers else (lambda item: str(item).strip())
    cleaned = [clean(item) for item in items or () if item is not None]
    cleaned = [item for item in cleaned if item]
    return [f"{index}. {item}" for index, item in enumerate(cleaned, start=1)]


def dedupe(values: Sequence[str]) -> List[str]:
    """Drop repeated entries, comparing case-insensitively, keeping first occurrences."""

    seen = set()
    unique: List[str] = []
    for value in values:
        normalized = value.strip().lower()
        if not normalized or normalized in seen:
            continue
        seen.add(normalized)
        unique.append(value.strip())
    return unique


__all__ = [
    "LIST_MARKER",
    "TRUNCATION_MARKER",
    "dedupe",
    "number_items",
    "strip_list_marker",
    "text_width",
    "truncate_to_width",
    "wrap_text",
]
