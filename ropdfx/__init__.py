"""
ropdfx - repair order PDF pipeline.

Routes incoming repair order PDFs to direct text extraction or page-image
recognition, and renders structured case records back into paginated,
branded PDF documents.

Quick Start:
    >>> from ropdfx import SourceDocument, route_document
    >>> plan = route_document(SourceDocument.from_path('repair_order.pdf'))

    >>> from ropdfx import CaseRecord, assemble
    >>> document = assemble('packet', CaseRecord.from_dict(data))
    >>> document.save('output/')

Main entry points:
    - ExtractionRouter / route_document: Decide between text and image extraction
    - assemble: Build a "packet" or "summary" document from a CaseRecord
    - recognize: Send an extraction plan to the recognition service

Exceptions:
    - RoPdfError: Base exception
    - InvalidDocument, RasterizationFailure, RecognitionCallFailure,
      AssetLoadFailure, RenderOverflow

For CLI usage, use the 'ropdfx' command after installation.
"""

from ropdfx.assemble import FinishedDocument, assemble
from ropdfx.assets import BrandingAssets, SignatureAsset, load_image_asset
from ropdfx.exceptions import (
    AssetLoadFailure,
    InvalidDocument,
    RasterizationFailure,
    RecognitionCallFailure,
    RenderOverflow,
    RoPdfError,
)
from ropdfx.extract import (
    ExtractionConfig,
    ExtractionRouter,
    ImagePlan,
    PageImage,
    ProgressEvent,
    RasterPolicy,
    SourceDocument,
    TextPlan,
    route_document,
)
from ropdfx.recognition import build_payload, recognize
from ropdfx.records import CaseRecord

__version__ = "1.0.0"

__all__ = [
    "AssetLoadFailure",
    "BrandingAssets",
    "CaseRecord",
    "ExtractionConfig",
    "ExtractionRouter",
    "FinishedDocument",
    "ImagePlan",
    "InvalidDocument",
    "PageImage",
    "ProgressEvent",
    "RasterPolicy",
    "RasterizationFailure",
    "RecognitionCallFailure",
    "RenderOverflow",
    "RoPdfError",
    "SignatureAsset",
    "SourceDocument",
    "TextPlan",
    "assemble",
    "build_payload",
    "load_image_asset",
    "recognize",
    "route_document",
    "__version__",
]
