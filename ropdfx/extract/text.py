"""Direct text extraction from PDF pages using pypdf."""

from __future__ import annotations

from typing import List

from ..utils import get_logger
from .types import ExtractedText, SourceDocument, open_reader

LOGGER = get_logger("ropdfx.extract.text")


def extract_text(document: SourceDocument, *, separator: str = "\n\n") -> ExtractedText:
    """
    Extract and concatenate the text of every page of ``document``.

    Args:
        document: Source PDF to read
        separator: String placed between consecutive page texts

    Returns:
        ExtractedText with the joined content and the per-page texts

    Raises:
        InvalidDocument: If the PDF cannot be opened
    """
    reader = open_reader(document.data)
    page_texts: List[str] = []

    for index, page in enumerate(reader.pages, start=1):
        try:
            text = page.extract_text() or ""
        except Exception as exc:
            # One broken content stream should not hide the text of the rest.
            LOGGER.warning("Text extraction failed on page %s of %s: %s", index, document.name, exc)
            text = ""
        LOGGER.debug("Page %s of %s yielded %s characters", index, document.name, len(text))
        page_texts.append(text)

    content = separator.join(text.strip() for text in page_texts).strip()
    return ExtractedText(content=content, page_texts=tuple(page_texts))


__all__ = ["extract_text"]
