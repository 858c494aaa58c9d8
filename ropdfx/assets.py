"""Branding and signature assets shared across every page of one document."""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Tuple, Union

from PIL import Image, UnidentifiedImageError

from .exceptions import AssetLoadFailure
from .utils import get_logger

LOGGER = get_logger("ropdfx.assets")

DEFAULT_BRAND = "FleetWise AI"
DOMESTIC_COUNTRIES = {"", "US", "USA", "UNITED STATES"}

SIGNATURE_ROLES = ("technician", "authorized_rep", "customer", "supervisor")

ImageSource = Union[str, Path, bytes, bytearray]


def read_image_asset(source: ImageSource) -> bytes:
    """
    Read an image from a path or byte buffer and check that Pillow can decode it.

    Raises:
        AssetLoadFailure: If the source is missing, unreadable or not an image
    """
    if isinstance(source, (bytes, bytearray)):
        data = bytes(source)
    else:
        path = Path(source)
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise AssetLoadFailure(f"Unable to read image file: {path}. Error: {exc}", source=source) from exc

    if not data:
        raise AssetLoadFailure("Image data is empty.", source=source)
    image_size(data, source=source)
    return data


def load_image_asset(source: Optional[ImageSource]) -> Optional[bytes]:
    """Like :func:`read_image_asset` but logs failures and returns ``None`` instead."""

    if source is None:
        return None
    try:
        return read_image_asset(source)
    except AssetLoadFailure as exc:
        LOGGER.warning("Skipping image asset: %s", exc.message)
        return None


def image_size(data: bytes, *, source: Any = None) -> Tuple[int, int]:
    """Return the pixel ``(width, height)`` of an encoded image."""

    try:
        with Image.open(io.BytesIO(data)) as image:
            image.verify()
            width, height = image.size
    except (UnidentifiedImageError, OSError, ValueError, SyntaxError) as exc:
        raise AssetLoadFailure(f"Unsupported or corrupted image: {exc}", source=source) from exc
    if width <= 0 or height <= 0:
        raise AssetLoadFailure("Image has no pixels.", source=source)
    return width, height


def _clean(value: Any) -> str:
    return str(value).strip() if value is not None else ""


@dataclass(frozen=True)
class BrandingAssets:
    """
    Logo and company details drawn in page headers and footers.

    Attributes:
        display_name: Brand shown in headers, and as text when there is no logo
        logo: Encoded logo image, if one could be loaded
        contact_lines: Phone, email and similar one-line contact details
        address_lines: Postal address, one entry per printed line
        legal_name: Registered company name, when it differs from the brand
    """

    display_name: str = DEFAULT_BRAND
    logo: Optional[bytes] = field(default=None, repr=False)
    contact_lines: Tuple[str, ...] = ()
    address_lines: Tuple[str, ...] = ()
    legal_name: Optional[str] = None

    @property
    def has_logo(self) -> bool:
        return bool(self.logo)

    @property
    def company_name(self) -> str:
        return self.legal_name or self.display_name

    @classmethod
    def from_profile(
        cls,
        profile: Optional[Mapping[str, Any]] = None,
        logo: Optional[ImageSource] = None,
    ) -> "BrandingAssets":
        """Build branding from a company profile mapping; missing keys are skipped."""

        profile = profile or {}
        display_name = _clean(profile.get("display_name") or profile.get("company_name")) or DEFAULT_BRAND
        legal_name = _clean(profile.get("legal_name")) or None

        contact_lines = tuple(
            line for line in (_clean(profile.get("phone")), _clean(profile.get("email"))) if line
        )

        address_lines = [
            line
            for line in (_clean(profile.get("address_line1")), _clean(profile.get("address_line2")))
            if line
        ]
        city = _clean(profile.get("city"))
        state = _clean(profile.get("state"))
        postal = _clean(profile.get("postal_code"))
        locality = ", ".join(part for part in (city, " ".join(p for p in (state, postal) if p)) if part)
        if locality:
            address_lines.append(locality)
        country = _clean(profile.get("country"))
        if country.upper() not in DOMESTIC_COUNTRIES:
            address_lines.append(country)

        return cls(
            display_name=display_name,
            logo=load_image_asset(logo),
            contact_lines=contact_lines,
            address_lines=tuple(address_lines),
            legal_name=legal_name,
        )


@dataclass(frozen=True)
class SignatureAsset:
    """A captured signature placed by the signature primitives."""

    role: str = "technician"
    image: Optional[bytes] = field(default=None, repr=False)
    signer_name: Optional[str] = None
    signed_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if self.role not in SIGNATURE_ROLES:
            raise ValueError(f"Unknown signature role '{self.role}'. Expected one of: {', '.join(SIGNATURE_ROLES)}")

    @property
    def is_signed(self) -> bool:
        return bool(self.image or self.signer_name)


def signature_by_role(signatures: Iterable[SignatureAsset], role: str) -> Optional[SignatureAsset]:
    """Return the first signature captured for ``role``."""

    for signature in signatures:
        if signature.role == role:
            return signature
    return None


__all__ = [
    "DEFAULT_BRAND",
    "SIGNATURE_ROLES",
    "BrandingAssets",
    "SignatureAsset",
    "image_size",
    "load_image_asset",
    "read_image_asset",
    "signature_by_role",
]
