from __future__ import annotations

import logging
from datetime import datetime

from ropdfx.exceptions import (
    AssetLoadFailure,
    InvalidDocument,
    RasterizationFailure,
    RecognitionCallFailure,
    RenderOverflow,
    RoPdfError,
)
from ropdfx.utils import (
    LOG_FORMAT,
    ensure_output_dir,
    format_file_size,
    format_long_date,
    format_short_date,
    format_timestamp,
    get_logger,
)


def test_timestamp_formats() -> None:
    moment = datetime(2026, 3, 5, 9, 7)

    assert format_timestamp(moment) == "March 5, 2026 at 09:07 AM"
    assert format_long_date(moment) == "March 5, 2026"
    assert format_short_date(moment.date()) == "Mar 5, 2026"


def test_format_file_size() -> None:
    assert format_file_size(512) == "512.0 B"
    assert format_file_size(1536) == "1.5 KB"


def test_ensure_output_dir(tmp_path) -> None:
    target = ensure_output_dir(tmp_path / "a" / "b")

    assert target.is_dir()


def test_get_logger_configures_single_handler() -> None:
    logger = get_logger("ropdfx.test-logger", level=logging.INFO)
    again = get_logger("ropdfx.test-logger")

    assert logger is again
    assert len(logger.handlers) == 1
    assert logger.handlers[0].formatter._fmt == LOG_FORMAT
    assert logger.level == logging.INFO


def test_exception_defaults() -> None:
    for error_class in (InvalidDocument, RasterizationFailure, RecognitionCallFailure, AssetLoadFailure, RenderOverflow):
        error = error_class()
        assert isinstance(error, RoPdfError)
        assert error.message == str(error) != ""

    assert RasterizationFailure("boom", page_number=3).page_number == 3
    assert RecognitionCallFailure(response={"error": "x"}).response == {"error": "x"}
    assert str(InvalidDocument("custom")) == "custom"
