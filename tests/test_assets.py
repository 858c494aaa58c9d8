from __future__ import annotations

import pytest

from ropdfx.assets import (
    DEFAULT_BRAND,
    BrandingAssets,
    SignatureAsset,
    image_size,
    load_image_asset,
    read_image_asset,
    signature_by_role,
)
from ropdfx.exceptions import AssetLoadFailure


def test_read_image_asset_from_path(tmp_path, png_factory) -> None:
    path = tmp_path / "logo.png"
    path.write_bytes(png_factory(120, 40))

    data = read_image_asset(path)

    assert image_size(data) == (120, 40)


def test_read_image_asset_failures(tmp_path) -> None:
    with pytest.raises(AssetLoadFailure) as excinfo:
        read_image_asset(tmp_path / "missing.png")
    assert excinfo.value.source == tmp_path / "missing.png"

    with pytest.raises(AssetLoadFailure):
        read_image_asset(b"")
    with pytest.raises(AssetLoadFailure):
        read_image_asset(b"<svg></svg>")


def test_load_image_asset_returns_none_on_failure(tmp_path) -> None:
    assert load_image_asset(None) is None
    assert load_image_asset(tmp_path / "missing.png") is None
    assert load_image_asset(b"not an image") is None


def test_branding_from_profile(png_factory) -> None:
    branding = BrandingAssets.from_profile(
        {
            "company_name": "Acme Fleet",
            "phone": "(555) 010-2000",
            "address_line1": "100 Depot Road",
            "city": "Windsor",
            "state": "ON",
            "postal_code": "N9A 1A1",
            "country": "Canada",
        },
        logo=png_factory(),
    )

    assert branding.display_name == "Acme Fleet"
    assert branding.company_name == "Acme Fleet"
    assert branding.has_logo
    assert branding.contact_lines == ("(555) 010-2000",)
    assert branding.address_lines == ("100 Depot Road", "Windsor, ON N9A 1A1", "Canada")


def test_branding_defaults() -> None:
    branding = BrandingAssets.from_profile({"country": "USA"}, logo=b"broken")

    assert branding.display_name == DEFAULT_BRAND
    assert not branding.has_logo
    assert branding.address_lines == ()


def test_signature_roles() -> None:
    signatures = [SignatureAsset(role="customer", signer_name="Pat Kim"), SignatureAsset(role="technician")]

    assert signature_by_role(signatures, "customer").signer_name == "Pat Kim"
    assert signature_by_role(signatures, "supervisor") is None
    assert not signatures[1].is_signed
    with pytest.raises(ValueError):
        SignatureAsset(role="driver")
