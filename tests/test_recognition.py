from __future__ import annotations

import base64

import pytest

from ropdfx.exceptions import RecognitionCallFailure
from ropdfx.extract import ImagePlan, PageImage, RasterPolicy, TextPlan
from ropdfx.recognition import PARSE_OCR, PARSE_TEXT, build_payload, recognize


class RecordingClient:
    def __init__(self, response=None, error=None):
        self.response = response if response is not None else {"success": True, "data": {}}
        self.error = error
        self.payloads = []

    def invoke(self, payload):
        self.payloads.append(payload)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture()
def text_plan() -> TextPlan:
    return TextPlan(content="Repair order text", file_name="ro.pdf", page_count=1)


@pytest.fixture()
def image_plan() -> ImagePlan:
    images = (
        PageImage(page_number=2, data=b"second", width=10, height=10),
        PageImage(page_number=1, data=b"first", width=10, height=10),
    )
    return ImagePlan(page_images=images, file_name="scan.pdf", page_count=2, policy=RasterPolicy(1.5, 0.85), ocr_text="Scanned")


def test_text_payload(text_plan: TextPlan) -> None:
    payload = build_payload(text_plan, work_order_id="wo-1")

    assert payload == {"action": PARSE_TEXT, "content": "Repair order text", "fileName": "ro.pdf", "workOrderId": "wo-1"}


def test_image_payload_is_ordered_by_page(image_plan: ImagePlan) -> None:
    payload = build_payload(image_plan, file_name="renamed.pdf")

    assert payload["action"] == PARSE_OCR
    assert payload["fileName"] == "renamed.pdf"
    assert [image["pageNumber"] for image in payload["images"]] == [1, 2]
    assert base64.b64decode(payload["images"][0]["base64"]) == b"first"
    assert payload["ocrText"] == "Scanned"
    assert "workOrderId" not in payload


def test_recognize_calls_client_once(text_plan: TextPlan) -> None:
    client = RecordingClient({"success": True, "data": {"confidence": "low"}})

    response = recognize(text_plan, client)

    assert response["data"]["confidence"] == "low"
    assert len(client.payloads) == 1


@pytest.mark.parametrize("response", [{"success": False}, {"error": "Rate limited"}])
def test_reported_failure_raises(text_plan: TextPlan, response) -> None:
    client = RecordingClient(response)

    with pytest.raises(RecognitionCallFailure) as excinfo:
        recognize(text_plan, client)

    assert excinfo.value.response == response
    assert len(client.payloads) == 1


def test_transport_error_is_not_retried(text_plan: TextPlan) -> None:
    client = RecordingClient(error=ConnectionError("timeout"))

    with pytest.raises(RecognitionCallFailure, match="timeout"):
        recognize(text_plan, client)

    assert len(client.payloads) == 1


def test_unsupported_plan() -> None:
    with pytest.raises(TypeError):
        build_payload(object())
