"""Page rasterization for scanned documents using PyMuPDF and Pillow."""

from __future__ import annotations

import io
from typing import Any, List

from PIL import Image

from ..exceptions import InvalidDocument, RasterizationFailure
from ..utils import get_logger
from .policy import RasterPolicy, pages_to_rasterize
from .types import PageImage, SourceDocument

LOGGER = get_logger("ropdfx.extract.raster")


def _open_fitz(document: SourceDocument) -> Any:
    import fitz  # pymupdf

    try:
        return fitz.open(stream=document.data, filetype="pdf")
    except Exception as exc:
        raise InvalidDocument(f"Unable to open {document.name} for rendering: {exc}") from exc


def _encode_jpeg(width: int, height: int, samples: bytes, quality: int) -> bytes:
    image = Image.frombytes("RGB", (width, height), samples)
    buffer = io.BytesIO()
    image.save(buffer, format="JPEG", quality=quality)
    return buffer.getvalue()


class PageRasterizer:
    """Render PDF pages to JPEG images at a policy-controlled scale and quality."""

    def rasterize_page(self, document: SourceDocument, page_number: int, policy: RasterPolicy) -> PageImage:
        """Render a single 1-indexed page of ``document``."""

        fitz_doc = _open_fitz(document)
        try:
            return self._render(fitz_doc, page_number, policy)
        finally:
            fitz_doc.close()

    def rasterize(
        self,
        document: SourceDocument,
        policy: RasterPolicy,
        max_pages: int = 10,
    ) -> List[PageImage]:
        """
        Render up to ``max_pages`` leading pages of ``document``.

        Pages past the cap are skipped on purpose. A page that fails to render
        is logged and skipped; the run only fails when no page succeeds.

        Raises:
            RasterizationFailure: If none of the processed pages could be rendered
        """
        to_process = pages_to_rasterize(document.page_count, max_pages)
        if document.page_count > to_process:
            LOGGER.info(
                "Rasterizing first %s of %s pages of %s",
                to_process,
                document.page_count,
                document.name,
            )

        images: List[PageImage] = []
        fitz_doc = _open_fitz(document)
        try:
            for page_number in range(1, to_process + 1):
                try:
                    images.append(self._render(fitz_doc, page_number, policy))
                except RasterizationFailure as exc:
                    LOGGER.warning("Skipping page %s of %s: %s", page_number, document.name, exc)
        finally:
            fitz_doc.close()

        if not images:
            LOGGER.error("No pages of %s could be rasterized", document.name)
            raise RasterizationFailure(f"No pages of {document.name} could be rasterized.")
        return images

    def _render(self, fitz_doc: Any, page_number: int, policy: RasterPolicy) -> PageImage:
        import fitz  # pymupdf

        try:
            page = fitz_doc.load_page(page_number - 1)
            # Surface size follows the page's own viewport at the chosen scale.
            pixmap = page.get_pixmap(matrix=fitz.Matrix(policy.scale, policy.scale), alpha=False)
            try:
                width, height = pixmap.width, pixmap.height
                data = _encode_jpeg(width, height, pixmap.samples, policy.jpeg_quality)
            finally:
                # The surface is released before the next page is rendered.
                del pixmap
        except Exception as exc:
            raise RasterizationFailure(
                f"Page {page_number} could not be rendered: {exc}",
                page_number=page_number,
            ) from exc

        LOGGER.debug(
            "Rendered page %s at scale %s (%sx%s, %s bytes)",
            page_number,
            policy.scale,
            width,
            height,
            len(data),
        )
        return PageImage(page_number=page_number, data=data, width=width, height=height)


__all__ = ["PageRasterizer"]
