from __future__ import annotations

import io
import sys
from datetime import datetime
from pathlib import Path
from typing import Callable, Sequence

import pytest
from PIL import Image
from pypdf import PdfWriter
from reportlab.lib.pagesizes import LETTER
from reportlab.pdfgen import canvas

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

GENERATED_AT = datetime(2026, 10, 19, 14, 30)

REPAIR_ORDER_LINES = (
    "Unit 4471 reported loss of power on grade with check engine lamp.",
    "Technician verified fault codes and inspected the charge air cooler.",
)


def _text_pdf(pages: Sequence[str]) -> bytes:
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=LETTER)
    for text in pages:
        y = 720
        for line in text.splitlines():
            if line:
                pdf.setFont("Helvetica", 10)
                pdf.drawString(72, y, line)
            y -= 14
        pdf.showPage()
    pdf.save()
    return buffer.getvalue()


def _blank_pdf(page_count: int, width: float = 612, height: float = 792) -> bytes:
    writer = PdfWriter()
    for _ in range(page_count):
        writer.add_blank_page(width=width, height=height)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


@pytest.fixture()
def text_pdf_factory() -> Callable[[Sequence[str]], bytes]:
    return _text_pdf


@pytest.fixture()
def blank_pdf_factory() -> Callable[..., bytes]:
    return _blank_pdf


@pytest.fixture()
def text_rich_pdf() -> bytes:
    page = "\n".join(REPAIR_ORDER_LINES * 10)
    return _text_pdf([page, page, page])


@pytest.fixture()
def scanned_pdf() -> bytes:
    return _text_pdf(["Scanned page", "", ""])


@pytest.fixture()
def empty_pdf() -> bytes:
    writer = PdfWriter()
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


@pytest.fixture()
def png_factory() -> Callable[..., bytes]:
    def _create(width: int = 240, height: int = 80, color=(30, 112, 131)) -> bytes:
        buffer = io.BytesIO()
        Image.new("RGB", (width, height), color).save(buffer, format="PNG")
        return buffer.getvalue()

    return _create


@pytest.fixture()
def generated_at() -> datetime:
    return GENERATED_AT


@pytest.fixture()
def full_record_data() -> dict:
    return {
        "id": "3f2a9c1e-77aa-4d3e-9d55-0b7f2c1e8a10",
        "work_order_number": "WO-1001",
        "status": "in_progress",
        "work_order_date": "2026-10-17",
        "customer_name": "Northline Freight",
        "complaint": "Loss of power on grade; check engine light on\nloss of power on grade",
        "fault_codes": ["P0299", "SPN 102 FMI 18"],
        "vehicle": {
            "vin": "1FUJGLDR7CSBM1234",
            "unit_id": "4471",
            "year": 2019,
            "make": "Freightliner",
            "model": "Cascadia",
            "engine": {"manufacturer": "Detroit", "model": "DD15"},
            "transmission": "DT12",
            "odometer": 412880,
        },
        "diagnostic": {
            "diagnostic_summary": "Boost pressure is below the commanded value under load.",
            "probable_root_cause": "Cracked charge air cooler allowing boost leak.",
            "recommended_repair_steps": [
                "1. Replace filter",
                "Check seals",
                "3) Pressure test charge air cooler",
            ],
            "safety_notes": "Allow the engine to cool before removing CAC hoses.",
            "citations": [
                {"title": "DD15 Boost System Guide", "similarity": 0.87, "relevance": "boost diagnostics"},
                {"title": "dd15 boost system guide"},
                {"title": "CAC Pressure Test Procedure"},
            ],
        },
        "tasks": [
            {"title": "Pressure test CAC", "status": "completed"},
            {"title": "Replace CAC", "status": "in_progress"},
            {"title": "Road test", "status": "pending"},
        ],
        "parts": [
            {"description": "Charge air cooler", "part_number": "A680-501-01", "quantity": 1},
            {"name": "Hose clamp", "part_number": "HC-44", "quantity": "4"},
        ],
        "labor": [
            {"technician_name": "Jane Doe", "description": "Diagnosis", "hours": 1.5},
            {"technician_name": "Jane Doe", "description": "CAC replacement", "hours": "3.25"},
        ],
    }
