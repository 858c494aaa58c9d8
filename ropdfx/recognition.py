"""
Payloads for the external recognition service and the single call seam.

The service itself (turning raw text or page images into structured fields)
lives elsewhere; this module only builds its request and interprets the
success flag of its response.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Protocol

from .exceptions import RecognitionCallFailure
from .extract.types import ExtractionPlan, ImagePlan, TextPlan
from .utils import get_logger

LOGGER = get_logger("ropdfx.recognition")

PARSE_TEXT = "parse_text"
PARSE_OCR = "parse_ocr"


class RecognitionClient(Protocol):
    """Transport to the recognition service."""

    def invoke(self, payload: Mapping[str, Any]) -> Mapping[str, Any]:
        """Send ``payload`` and return the decoded response body."""


def build_payload(
    plan: ExtractionPlan,
    file_name: Optional[str] = None,
    work_order_id: Optional[str] = None,
) -> Dict[str, Any]:
    """Return the request body for ``plan``.

    Text plans send the extracted content; image plans send the page images
    as base64 strings ordered by page number.
    """
    if not isinstance(plan, (TextPlan, ImagePlan)):
        raise TypeError(f"Unsupported extraction plan: {type(plan).__name__}")

    name = file_name or plan.file_name
    if isinstance(plan, TextPlan):
        payload: Dict[str, Any] = {"action": PARSE_TEXT, "content": plan.content, "fileName": name}
    else:
        payload = {
            "action": PARSE_OCR,
            "images": [
                {"pageNumber": image.page_number, "base64": image.to_base64()}
                for image in sorted(plan.page_images, key=lambda image: image.page_number)
            ],
            "fileName": name,
        }
        if plan.ocr_text:
            payload["ocrText"] = plan.ocr_text

    if work_order_id:
        payload["workOrderId"] = work_order_id
    return payload


def recognize(
    plan: ExtractionPlan,
    client: RecognitionClient,
    file_name: Optional[str] = None,
    work_order_id: Optional[str] = None,
) -> Mapping[str, Any]:
    """
    Send ``plan`` to the recognition service once and return its response.

    A transport error or a response reporting failure (``success: false``
    or an ``error`` field) raises :class:`RecognitionCallFailure`. Nothing is
    retried, and results the service marks as low confidence are returned
    unchanged for the caller to judge.

    Raises:
        RecognitionCallFailure: If the call fails or reports failure
    """
    payload = build_payload(plan, file_name=file_name, work_order_id=work_order_id)
    LOGGER.info("Sending %s request for %s", payload["action"], payload["fileName"])

    try:
        response = client.invoke(payload)
    except RecognitionCallFailure:
        raise
    except Exception as exc:
        LOGGER.error("Recognition call failed: %s", exc)
        raise RecognitionCallFailure(f"Recognition call failed: {exc}") from exc

    if not isinstance(response, Mapping):
        raise RecognitionCallFailure(f"Unexpected recognition response type: {type(response).__name__}")
    if response.get("success") is False or response.get("error"):
        message = response.get("error") or "Recognition service reported failure"
        LOGGER.error("Recognition failed for %s: %s", payload["fileName"], message)
        raise RecognitionCallFailure(str(message), response=response)
    return response


__all__ = ["PARSE_OCR", "PARSE_TEXT", "RecognitionClient", "build_payload", "recognize"]
