"""Document assembly: the registered document kinds and the :func:`assemble` entry point."""

from __future__ import annotations

from .base import DocumentAssembler, FinishedDocument, Section, assemble, render_sections
from .packet import RepairOrderPacket
from .registry import DocumentRegistry, register_document, registry
from .summary import SummaryReport, split_complaints

__all__ = [
    "DocumentAssembler",
    "DocumentRegistry",
    "FinishedDocument",
    "RepairOrderPacket",
    "Section",
    "SummaryReport",
    "assemble",
    "register_document",
    "registry",
    "render_sections",
    "split_complaints",
]
