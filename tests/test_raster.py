from __future__ import annotations

import io

import pytest
from PIL import Image

from ropdfx.exceptions import InvalidDocument, RasterizationFailure
from ropdfx.extract import PageRasterizer, RasterPolicy, SourceDocument


class FlakyRasterizer(PageRasterizer):
    def __init__(self, failing_pages) -> None:
        self.failing_pages = set(failing_pages)

    def _render(self, fitz_doc, page_number, policy):
        if page_number in self.failing_pages:
            raise RasterizationFailure(f"page {page_number} is broken", page_number=page_number)
        return super()._render(fitz_doc, page_number, policy)


def test_surface_keeps_page_aspect_ratio(blank_pdf_factory) -> None:
    document = SourceDocument.from_bytes(blank_pdf_factory(1, width=200, height=400))

    image = PageRasterizer().rasterize_page(document, 1, RasterPolicy(1.5, 0.85))

    assert abs(image.width - 300) <= 1
    assert abs(image.height - 600) <= 1
    with Image.open(io.BytesIO(image.data)) as decoded:
        assert decoded.format == "JPEG"
        assert decoded.size == (image.width, image.height)


def test_rasterize_is_repeatable(blank_pdf_factory) -> None:
    document = SourceDocument.from_bytes(blank_pdf_factory(2))
    policy = RasterPolicy(1.2, 0.75)

    first = PageRasterizer().rasterize(document, policy)
    second = PageRasterizer().rasterize(document, policy)

    assert [image.data for image in first] == [image.data for image in second]


def test_failed_page_is_skipped(blank_pdf_factory) -> None:
    document = SourceDocument.from_bytes(blank_pdf_factory(4))

    images = FlakyRasterizer({2}).rasterize(document, RasterPolicy(1.0, 0.5))

    assert [image.page_number for image in images] == [1, 3, 4]


def test_all_pages_failing_raises(blank_pdf_factory) -> None:
    document = SourceDocument.from_bytes(blank_pdf_factory(2))

    with pytest.raises(RasterizationFailure):
        FlakyRasterizer({1, 2}).rasterize(document, RasterPolicy(1.0, 0.5))


def test_pages_past_cap_are_not_rendered(blank_pdf_factory) -> None:
    document = SourceDocument.from_bytes(blank_pdf_factory(5))

    images = PageRasterizer().rasterize(document, RasterPolicy(0.5, 0.5), max_pages=2)

    assert [image.page_number for image in images] == [1, 2]


def test_missing_page_raises_rasterization_failure(blank_pdf_factory) -> None:
    document = SourceDocument.from_bytes(blank_pdf_factory(1))

    with pytest.raises(RasterizationFailure) as excinfo:
        PageRasterizer().rasterize_page(document, 5, RasterPolicy(1.0, 0.5))
    assert excinfo.value.page_number == 5


def test_unopenable_document_is_invalid() -> None:
    document = SourceDocument(data=b"garbage", page_count=1)

    with pytest.raises(InvalidDocument):
        PageRasterizer().rasterize(document, RasterPolicy(1.0, 0.5))
