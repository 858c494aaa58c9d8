"""
Structured case records consumed by the document assemblers.

Records usually come from the recognition service or a database row, so
:meth:`CaseRecord.from_dict` accepts partial input: every key is optional and
values that cannot be parsed are dropped with a warning instead of failing the
render.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from .utils import get_logger

LOGGER = get_logger("ropdfx.records")


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _number(value: Any, field_name: str) -> Optional[float]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return None
    try:
        return float(str(value).replace(",", ""))
    except (TypeError, ValueError):
        LOGGER.warning("Ignoring non-numeric %s: %r", field_name, value)
        return None


def _date(value: Any, field_name: str) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        LOGGER.warning("Ignoring unparseable %s: %r", field_name, value)
        return None


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Iterable) and not isinstance(value, (str, bytes, Mapping))


def _strings(value: Any, field_name: str) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        value = [value]
    elif not _is_sequence(value):
        LOGGER.warning("Ignoring %s that is not a list: %r", field_name, value)
        return ()
    return tuple(text for text in (_text(item) for item in value) if text)


def _mappings(value: Any, field_name: str) -> List[Mapping[str, Any]]:
    if not value:
        return []
    if not _is_sequence(value):
        LOGGER.warning("Ignoring %s that is not a list: %r", field_name, value)
        return []
    return [item for item in value if isinstance(item, Mapping)]


def _describe_component(value: Any) -> Optional[str]:
    """Engine and transmission come either as text or as ``{make|manufacturer, model}``."""

    if isinstance(value, Mapping):
        maker = _text(value.get("make") or value.get("manufacturer"))
        model = _text(value.get("model"))
        return " ".join(part for part in (maker, model) if part) or None
    return _text(value)


@dataclass(frozen=True)
class VehicleInfo:
    vin: Optional[str] = None
    unit_id: Optional[str] = None
    year: Optional[int] = None
    make: Optional[str] = None
    model: Optional[str] = None
    engine: Optional[str] = None
    transmission: Optional[str] = None
    odometer: Optional[float] = None
    engine_hours: Optional[float] = None

    @property
    def year_make_model(self) -> Optional[str]:
        parts = [str(self.year) if self.year else None, self.make, self.model]
        text = " ".join(part for part in parts if part)
        return text or None

    @property
    def odometer_text(self) -> Optional[str]:
        if self.odometer is None:
            return None
        return f"{self.odometer:,.0f} miles"

    @property
    def is_empty(self) -> bool:
        return all(getattr(self, name) is None for name in self.__dataclass_fields__)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "VehicleInfo":
        if not data:
            return cls()
        identity = data.get("identity") if isinstance(data.get("identity"), Mapping) else {}

        def pick(*keys: str) -> Any:
            for key in keys:
                for source in (identity, data):
                    if source.get(key) not in (None, ""):
                        return source.get(key)
            return None

        year = _number(pick("year"), "vehicle year")
        return cls(
            vin=_text(pick("vin")),
            unit_id=_text(pick("unit_id", "truck_number")),
            year=int(year) if year else None,
            make=_text(pick("make")),
            model=_text(pick("model")),
            engine=_describe_component(pick("engine")),
            transmission=_describe_component(pick("transmission")),
            odometer=_number(pick("odometer", "odometer_mi", "odometer_miles"), "odometer"),
            engine_hours=_number(pick("engine_hours"), "engine hours"),
        )

    def with_extracted(self, data: Mapping[str, Any]) -> "VehicleInfo":
        """
        Overlay the ``extracted_*`` values read off the work order itself.

        What the recognition step found on the document wins over the fleet
        record; fields it did not find keep their fleet value.
        """
        year = _number(data.get("extracted_year"), "extracted year")
        overrides = {
            "vin": _text(data.get("extracted_vin")),
            "unit_id": _text(data.get("extracted_unit_number")),
            "year": int(year) if year else None,
            "make": _text(data.get("extracted_make")),
            "model": _text(data.get("extracted_model")),
            "odometer": _number(data.get("extracted_odometer"), "extracted odometer"),
        }
        found = {name: value for name, value in overrides.items() if value is not None}
        return replace(self, **found) if found else self


@dataclass(frozen=True)
class Citation:
    title: Optional[str] = None
    relevance: Optional[str] = None
    similarity: Optional[float] = None
    source_index: Optional[int] = None

    def describe(self, position: int) -> str:
        """``Title (87% match) - relevance`` as printed in citation lists."""

        title = self.title or f"Source {self.source_index or position}"
        similarity = f" ({self.similarity * 100:.0f}% match)" if self.similarity else ""
        relevance = f" - {self.relevance}" if self.relevance else ""
        return f"{title}{similarity}{relevance}"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Citation":
        index = _number(data.get("source_index"), "citation index")
        return cls(
            title=_text(data.get("title")),
            relevance=_text(data.get("relevance")),
            similarity=_number(data.get("similarity"), "citation similarity"),
            source_index=int(index) if index is not None else None,
        )


def unique_citations(citations: Iterable[Citation], limit: Optional[int] = None) -> List[Citation]:
    """Drop untitled and repeated citations, comparing titles case-insensitively."""

    seen = set()
    unique: List[Citation] = []
    for citation in citations:
        key = (citation.title or "").strip().lower()
        if not key or key in seen:
            continue
        seen.add(key)
        unique.append(citation)
    return unique[:limit] if limit is not None else unique


@dataclass(frozen=True)
class DiagnosticContent:
    diagnostic_summary: Optional[str] = None
    probable_root_cause: Optional[str] = None
    recommended_repair_steps: Tuple[str, ...] = ()
    safety_notes: Optional[str] = None
    citations: Tuple[Citation, ...] = ()

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> Optional["DiagnosticContent"]:
        if not data:
            return None
        return cls(
            diagnostic_summary=_text(data.get("diagnostic_summary")),
            probable_root_cause=_text(data.get("probable_root_cause")),
            recommended_repair_steps=_strings(data.get("recommended_repair_steps"), "repair steps"),
            safety_notes=_text(data.get("safety_notes")),
            citations=tuple(Citation.from_dict(item) for item in _mappings(data.get("citations"), "citations")),
        )


@dataclass(frozen=True)
class TaskItem:
    title: Optional[str] = None
    status: Optional[str] = None


@dataclass(frozen=True)
class PartLine:
    description: Optional[str] = None
    part_number: Optional[str] = None
    quantity: float = 1

    @property
    def quantity_text(self) -> str:
        return f"{self.quantity:g}"


@dataclass(frozen=True)
class LaborEntry:
    technician_name: Optional[str] = None
    description: Optional[str] = None
    hours: Optional[float] = None

    @property
    def hours_text(self) -> str:
        return f"{self.hours or 0:.2f}"


@dataclass(frozen=True)
class CaseRecord:
    """
    One repair order with everything the assemblers can print.

    Only ``vehicle`` is always present; every other field may be missing.
    """

    work_order_number: Optional[str] = None
    record_id: Optional[str] = None
    status: Optional[str] = None
    work_order_date: Optional[date] = None
    customer_name: Optional[str] = None
    complaint: Optional[str] = None
    fault_codes: Tuple[str, ...] = ()
    cause: Optional[str] = None
    correction: Optional[str] = None
    vehicle: VehicleInfo = field(default_factory=VehicleInfo)
    diagnostic: Optional[DiagnosticContent] = None
    tasks: Tuple[TaskItem, ...] = ()
    parts: Tuple[PartLine, ...] = ()
    labor: Tuple[LaborEntry, ...] = ()

    def display_id(self, fallback: str = "N/A") -> str:
        if self.work_order_number:
            return self.work_order_number
        if self.record_id:
            return self.record_id[:8]
        return fallback

    @property
    def status_text(self) -> Optional[str]:
        if not self.status:
            return None
        return self.status.replace("_", " ").upper()

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "CaseRecord":
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise ValueError(f"Case record must be a JSON object, not {type(data).__name__}")
        vehicle_data = data.get("vehicle") or data.get("vehicle_info") or data.get("truck")
        diagnostic_data = data.get("diagnostic") or data.get("diagnostic_content")

        tasks = tuple(
            TaskItem(title=_text(item.get("title")), status=_text(item.get("status")))
            for item in _mappings(data.get("tasks"), "tasks")
        )
        parts = tuple(
            PartLine(
                description=_text(item.get("description") or item.get("name")),
                part_number=_text(item.get("part_number")),
                quantity=_number(item.get("quantity"), "part quantity") or 1,
            )
            for item in _mappings(data.get("parts"), "parts")
        )
        labor = tuple(
            LaborEntry(
                technician_name=_text(item.get("technician_name")),
                description=_text(item.get("description")),
                hours=_number(item.get("hours"), "labor hours"),
            )
            for item in _mappings(data.get("labor"), "labor")
        )

        return cls(
            work_order_number=_text(data.get("work_order_number")),
            record_id=_text(data.get("id") or data.get("record_id")),
            status=_text(data.get("status")),
            work_order_date=_date(data.get("work_order_date"), "work order date"),
            customer_name=_text(data.get("customer_name")),
            complaint=_text(data.get("complaint")),
            fault_codes=_strings(data.get("fault_codes"), "fault codes"),
            cause=_text(data.get("cause")),
            correction=_text(data.get("correction")),
            vehicle=VehicleInfo.from_dict(
                vehicle_data if isinstance(vehicle_data, Mapping) else None
            ).with_extracted(data),
            diagnostic=DiagnosticContent.from_dict(diagnostic_data if isinstance(diagnostic_data, Mapping) else None),
            tasks=tasks,
            parts=parts,
            labor=labor,
        )


__all__ = [
    "CaseRecord",
    "Citation",
    "DiagnosticContent",
    "LaborEntry",
    "PartLine",
    "TaskItem",
    "VehicleInfo",
    "unique_citations",
]
