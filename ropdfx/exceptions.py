"""
Custom exceptions for ropdfx.

This module defines all custom exceptions used throughout the library.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional


class RoPdfError(Exception):
    """Base exception for all ropdfx errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def default_message(self) -> str:
        return "An unknown document pipeline error occurred."


class InvalidDocument(RoPdfError):
    """Raised when a source PDF is unreadable or has no pages."""

    @property
    def default_message(self) -> str:
        return "Invalid, unreadable or empty PDF document."


class RasterizationFailure(RoPdfError):
    """Raised when a page cannot be rendered to an image."""

    def __init__(self, message: str = "", *, page_number: Optional[int] = None) -> None:
        super().__init__(message)
        self.page_number = page_number

    @property
    def default_message(self) -> str:
        return "Unable to rasterize PDF page."


class RecognitionCallFailure(RoPdfError):
    """Raised when the external recognition service fails or reports failure."""

    def __init__(self, message: str = "", *, response: Optional[Mapping[str, Any]] = None) -> None:
        super().__init__(message)
        self.response = response

    @property
    def default_message(self) -> str:
        return "Recognition service call failed."


class AssetLoadFailure(RoPdfError):
    """Raised when a logo or signature image cannot be loaded."""

    def __init__(self, message: str = "", *, source: Any = None) -> None:
        super().__init__(message)
        self.source = source

    @property
    def default_message(self) -> str:
        return "Unable to load image asset."


class RenderOverflow(RoPdfError):
    """Raised when content cannot fit the page even after a page break."""

    @property
    def default_message(self) -> str:
        return "Content does not fit within the page body."


__all__ = [
    "RoPdfError",
    "InvalidDocument",
    "RasterizationFailure",
    "RecognitionCallFailure",
    "AssetLoadFailure",
    "RenderOverflow",
]
