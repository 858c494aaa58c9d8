from __future__ import annotations

import io
import re

import pytest
from pypdf import PdfReader

from ropdfx.assemble import RepairOrderPacket, SummaryReport, assemble, registry
from ropdfx.assemble.registry import DocumentRegistry
from ropdfx.assemble.summary import split_complaints
from ropdfx.assets import BrandingAssets, SignatureAsset
from ropdfx.records import CaseRecord
from ropdfx.render import BODY, FOOTER, HEADER, ImageOp

PROFILE = {
    "display_name": "Acme Fleet",
    "legal_name": "Acme Fleet Services LLC",
    "phone": "(555) 010-2000",
    "email": "service@acme.example",
    "address_line1": "100 Depot Road",
    "city": "Dayton",
    "state": "OH",
    "postal_code": "45402",
}


def large_record_data(full_record_data: dict) -> dict:
    data = dict(full_record_data)
    data["complaint"] = "; ".join(f"Driver report {index}: intermittent power loss on grade" for index in range(30))
    diagnostic = dict(data["diagnostic"])
    diagnostic["recommended_repair_steps"] = [
        f"{index}. Inspect boost circuit component {index} and record the measured pressure drop under load"
        for index in range(1, 41)
    ]
    diagnostic["citations"] = [{"title": f"Service bulletin {index}"} for index in range(12)]
    data["diagnostic"] = diagnostic
    data["tasks"] = [{"title": f"Task {index}", "status": "pending"} for index in range(15)]
    data["parts"] = [{"description": f"Clamp {index}", "part_number": f"HC-{index}", "quantity": 2} for index in range(30)]
    data["labor"] = [{"technician_name": "Jane Doe", "description": f"Step {index}", "hours": 0.5} for index in range(20)]
    return data


def read_pages(data: bytes):
    return PdfReader(io.BytesIO(data)).pages


@pytest.fixture()
def record(full_record_data) -> CaseRecord:
    return CaseRecord.from_dict(full_record_data)


@pytest.fixture()
def branding() -> BrandingAssets:
    return BrandingAssets.from_profile(PROFILE)


def test_registry_knows_both_kinds() -> None:
    assert list(registry.kinds()) == ["packet", "summary"]
    assert registry.resolve("packet") is RepairOrderPacket
    assert registry.resolve("summary") is SummaryReport
    assert registry.get("invoice") is None


def test_registry_errors() -> None:
    with pytest.raises(KeyError):
        assemble("invoice", CaseRecord())

    local = DocumentRegistry()
    local.register("packet", RepairOrderPacket)
    with pytest.raises(ValueError):
        local.register("packet", SummaryReport)


@pytest.mark.parametrize("kind", ["packet", "summary"])
def test_every_page_has_matching_footer(kind, full_record_data, generated_at) -> None:
    record = CaseRecord.from_dict(large_record_data(full_record_data))

    document = assemble(kind, record, generated_at=generated_at)

    pages = read_pages(document.data)
    assert document.page_count == len(pages) > 1
    for number, page in enumerate(pages, start=1):
        text = page.extract_text()
        assert f"Page {number} of {document.page_count}" in text
        assert "October 19, 2026 at 02:30 PM" in text


@pytest.mark.parametrize("assembler_class", [RepairOrderPacket, SummaryReport])
def test_body_never_reaches_footer_region(assembler_class, full_record_data, generated_at, branding) -> None:
    record = CaseRecord.from_dict(large_record_data(full_record_data))
    assembler = assembler_class(branding, generated_at=generated_at)

    pages = assembler.layout(record)

    limit = assembler.template.body_limit
    for page in pages:
        for op in page.ops_in(BODY):
            assert op.bottom <= limit + 0.01
        for op in page.ops_in(FOOTER):
            assert op.top >= limit


def test_file_names(record, generated_at) -> None:
    assert assemble("packet", record, generated_at=generated_at).file_name == "RO_Packet_WO-1001_2026-10-19.pdf"
    assert assemble("summary", record, generated_at=generated_at).file_name == "WO_WO-1001_2026-10-19.pdf"
    assert assemble("packet", CaseRecord(), generated_at=generated_at).file_name == "RO_Packet_WO_2026-10-19.pdf"
    assert assemble("summary", CaseRecord(), generated_at=generated_at).file_name == "WO_Summary_2026-10-19.pdf"


def test_record_id_prefix_used_without_work_order_number(generated_at) -> None:
    record = CaseRecord(record_id="3f2a9c1e-77aa-4d3e")

    assert assemble("packet", record, generated_at=generated_at).file_name == "RO_Packet_3f2a9c1e_2026-10-19.pdf"


def test_empty_record_shows_placeholders(generated_at) -> None:
    pages = RepairOrderPacket(generated_at=generated_at).layout(CaseRecord())

    texts = [text for page in pages for text in page.texts(BODY)]
    assert "N/A" in texts
    assert "No diagnosis recorded" in texts
    assert "No correction recorded" in texts
    assert "Status: " in texts
    assert "PENDING" in texts


def test_packet_renumbers_repair_steps(record, generated_at) -> None:
    pages = RepairOrderPacket(generated_at=generated_at).layout(record)

    texts = [text for page in pages for text in page.texts(BODY)]
    assert "1. Replace filter" in texts
    assert "2. Check seals" in texts
    assert "3. Pressure test charge air cooler" in texts
    assert not any(re.match(r"^\d+\. \d+[.)]", text) for text in texts)


def test_packet_falls_back_to_cause_and_correction(generated_at) -> None:
    record = CaseRecord(cause="Failed turbo actuator", correction="Replaced actuator and calibrated")

    texts = [text for page in RepairOrderPacket(generated_at=generated_at).layout(record) for text in page.texts(BODY)]

    assert "CAUSE / DIAGNOSIS" in texts
    assert "Failed turbo actuator" in texts
    assert "DIAGNOSTIC SUMMARY (AI-GENERATED)" not in texts


def test_first_page_header_carries_contact_details(full_record_data, generated_at, branding) -> None:
    record = CaseRecord.from_dict(large_record_data(full_record_data))

    for assembler_class in (RepairOrderPacket, SummaryReport):
        pages = assembler_class(branding, generated_at=generated_at).layout(record)
        first = " ".join(pages[0].texts())
        assert "(555) 010-2000" in first
        for page in pages[1:]:
            header = page.texts(HEADER)
            assert header == ("Acme Fleet",)
            assert "(555) 010-2000" not in " ".join(page.texts())


def test_summary_report_sections(record, generated_at) -> None:
    pages = SummaryReport(generated_at=generated_at).layout(record)

    texts = [text for page in pages for text in page.texts(BODY)]
    assert "KNOWLEDGE BASE SOURCES (2)" in texts
    assert "PARTS USED" in texts
    assert "LABOR SUMMARY" in texts
    assert "FAULT CODES DETECTED" in texts
    assert texts.count("Not signed") == 2
    assert texts.index("SIGNATURES & APPROVAL") < texts.index("KNOWLEDGE BASE SOURCES (2)")
    assert "WO #WO-1001" in pages[0].texts(HEADER)


def test_summary_report_skips_empty_sections(generated_at) -> None:
    pages = SummaryReport(generated_at=generated_at).layout(CaseRecord(work_order_number="WO-7"))

    texts = [text for page in pages for text in page.texts(BODY)]
    assert len(pages) == 1
    assert "WORK ORDER SUMMARY" in texts
    assert "VEHICLE INFORMATION" not in texts
    assert "PARTS USED" not in texts
    assert not any(text.startswith("KNOWLEDGE BASE SOURCES") for text in texts)


def test_summary_citations_limited_to_five(full_record_data, generated_at) -> None:
    record = CaseRecord.from_dict(large_record_data(full_record_data))

    texts = [text for page in SummaryReport(generated_at=generated_at).layout(record) for text in page.texts(BODY)]

    assert "KNOWLEDGE BASE SOURCES (12)" in texts
    assert "[5]" in texts
    assert "[6]" not in texts


def test_bad_logo_and_signature_fall_back(record, generated_at) -> None:
    branding = BrandingAssets(display_name="Acme Fleet", logo=b"not an image")
    signatures = [SignatureAsset(role="technician", image=b"broken", signer_name="Jane Doe")]

    for kind in ("packet", "summary"):
        document = assemble(kind, record, branding, signatures, generated_at=generated_at)
        assert document.page_count >= 1

    pages = RepairOrderPacket(branding, signatures, generated_at=generated_at).layout(record)
    assert not any(isinstance(op, ImageOp) for page in pages for op in page.ops)
    assert "Acme Fleet" in pages[0].texts(HEADER)


def test_logo_and_signature_images_are_placed(record, generated_at, png_factory) -> None:
    branding = BrandingAssets(display_name="Acme Fleet", logo=png_factory(400, 100))
    signatures = [
        SignatureAsset(role="technician", image=png_factory(300, 100), signer_name="Jane Doe"),
        SignatureAsset(role="supervisor", image=png_factory(300, 100), signer_name="Sam Lee"),
    ]

    pages = SummaryReport(branding, signatures, generated_at=generated_at).layout(record)

    header_images = [op for op in pages[0].ops_in(HEADER) if isinstance(op, ImageOp)]
    body_images = [op for page in pages for op in page.ops_in(BODY) if isinstance(op, ImageOp)]
    assert len(header_images) == 1
    assert header_images[0].width / header_images[0].height == pytest.approx(4.0)
    assert len(body_images) == 2


def test_finished_document_save(record, generated_at, tmp_path) -> None:
    document = assemble("packet", record, generated_at=generated_at)

    path = document.save(tmp_path / "out")

    assert path.name == "RO_Packet_WO-1001_2026-10-19.pdf"
    assert path.read_bytes() == document.data


def test_split_complaints() -> None:
    assert split_complaints("Oil leak; brake noise\noil leak") == ["Oil leak", "brake noise"]
    assert split_complaints(None) == []


def test_packet_prints_vin_read_from_work_order(generated_at) -> None:
    record = CaseRecord.from_dict({"extracted_vin": "1FUJGLDR7CSBM9999"})

    texts = [text for page in RepairOrderPacket(generated_at=generated_at).layout(record) for text in page.texts(BODY)]

    assert "1FUJGLDR7CSBM9999" in texts
