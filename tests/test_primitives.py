from __future__ import annotations

import re
from typing import Iterable, List

import pytest

from ropdfx.render import (
    BODY,
    PageBuffer,
    PageTemplate,
    RenderCursor,
    fit_image,
    label_value,
    labeled_text_block,
    numbered_list,
    section_header,
    text_block,
)
from ropdfx.render.primitives import measure_image
from ropdfx.render.styles import BODY_TEXT, UNDERLINE_HEADER

NUMBERED = re.compile(r"^(\d+)\. ")


def assert_within_body(pages: Iterable[PageBuffer], template: PageTemplate) -> None:
    for page in pages:
        for op in page.ops_in(BODY):
            assert op.bottom <= template.body_limit + 0.01, (page.number, op)


def body_texts(pages: Iterable[PageBuffer]) -> List[str]:
    return [text for page in pages for text in page.texts(BODY)]


@pytest.fixture()
def template() -> PageTemplate:
    return PageTemplate()


@pytest.fixture()
def cursor(template: PageTemplate) -> RenderCursor:
    return RenderCursor(template)


def test_numbered_list_keeps_numbering_across_page_break(cursor: RenderCursor, template: PageTemplate) -> None:
    cursor.move_to(template.body_limit - 3 * BODY_TEXT.line_height)
    steps = [f"{index}. Inspect component {index} for wear and document findings" for index in range(1, 13)]

    drawn = numbered_list(cursor, steps)
    pages = cursor.finish()

    assert drawn == 12
    assert len(pages) == 2
    numbers = [int(NUMBERED.match(text).group(1)) for text in body_texts(pages) if NUMBERED.match(text)]
    assert numbers == list(range(1, 13))
    assert_within_body(pages, template)


def test_numbered_list_strips_upstream_ordinals(cursor: RenderCursor) -> None:
    numbered_list(cursor, ["1. Replace filter", "Check seals", "3) Pressure test"])

    texts = body_texts(cursor.finish())

    assert texts == ["1. Replace filter", "2. Check seals", "3. Pressure test"]


def test_numbered_list_placeholder(cursor: RenderCursor) -> None:
    assert numbered_list(cursor, []) == 0

    assert body_texts(cursor.finish()) == ["No steps specified"]


def test_text_block_moves_whole_paragraph_to_next_page(cursor: RenderCursor, template: PageTemplate) -> None:
    cursor.move_to(template.body_limit - BODY_TEXT.line_height * 2)
    paragraph = "The charge air cooler showed a crack along the lower tank seam. " * 5

    lines = text_block(cursor, paragraph)
    pages = cursor.finish()

    assert lines > 2
    assert pages[0].texts(BODY) == ()
    assert len(pages[1].texts(BODY)) == lines


def test_text_block_taller_than_page_flows_by_line(cursor: RenderCursor, template: PageTemplate) -> None:
    paragraph = "Technician notes continue across several pages of findings. " * 200

    lines = text_block(cursor, paragraph)
    pages = cursor.finish()

    assert len(pages) >= 2
    assert len(body_texts(pages)) == lines
    assert_within_body(pages, template)


def test_text_block_placeholder(cursor: RenderCursor) -> None:
    text_block(cursor, "   ")

    assert body_texts(cursor.finish()) == ["N/A"]


def test_label_value_placeholder(cursor: RenderCursor) -> None:
    label_value(cursor, "VIN", None)
    label_value(cursor, "Unit", "4471")

    assert body_texts(cursor.finish()) == ["VIN:", "N/A", "Unit:", "4471"]


def test_labeled_text_block_keeps_label_with_text(cursor: RenderCursor, template: PageTemplate) -> None:
    cursor.move_to(template.body_limit - BODY_TEXT.line_height * 1.5)

    labeled_text_block(cursor, "Complaint", "Loss of power on grade")
    pages = cursor.finish()

    assert pages[0].texts(BODY) == ()
    assert pages[1].texts(BODY) == ("Complaint", "Loss of power on grade")


def test_section_header_moves_with_following_content(cursor: RenderCursor, template: PageTemplate) -> None:
    cursor.move_to(template.body_limit - 30)

    section_header(cursor, "CUSTOMER INFORMATION", keep_with=40)
    pages = cursor.finish()

    assert pages[0].texts(BODY) == ()
    assert pages[1].texts(BODY) == ("CUSTOMER INFORMATION",)


def test_underline_header_variant(cursor: RenderCursor) -> None:
    section_header(cursor, "Vehicle Information", style=UNDERLINE_HEADER)

    assert body_texts(cursor.finish()) == ["Vehicle Information"]


@pytest.mark.parametrize(
    ("native", "target", "max_width", "expected"),
    [
        ((400, 100), 50, 120, (120, 30)),
        ((100, 200), 50, 120, (25, 50)),
        ((300, 100), 40, 500, (120, 40)),
    ],
)
def test_fit_image(native, target, max_width, expected) -> None:
    width, height = fit_image(native[0], native[1], target, max_width)

    assert width == pytest.approx(expected[0])
    assert height == pytest.approx(expected[1])
    assert width / height == pytest.approx(native[0] / native[1])


def test_fit_image_rejects_empty_dimensions() -> None:
    with pytest.raises(ValueError):
        fit_image(0, 10, 10, 10)


def test_measure_image_fits_logo_within_width_cap(png_factory) -> None:
    assert measure_image(png_factory(200, 100), 40, 60) == pytest.approx((60, 30))
    assert measure_image(png_factory(100, 200), 40, 60) == pytest.approx((20, 40))


def test_measure_image_omits_missing_or_undecodable_image() -> None:
    assert measure_image(None, 40, 60) is None
    assert measure_image(b"not an image", 40, 60) is None
