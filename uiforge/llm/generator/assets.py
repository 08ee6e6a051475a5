"""Reference asset conversion.

Turns caller-supplied reference assets into inline parts a provider can
accept. Only images are forwarded.
"""

from __future__ import annotations

from collections.abc import Sequence

from uiforge.project import AssetType, ReferenceAsset

from ..backend.base import ReferencePart, UnsupportedAssetError

DEFAULT_IMAGE_MIME = "image/png"


def split_data_uri(data: str) -> tuple[str, str]:
    """Split a possible data URI into (mime type, base64 payload).

    Everything up to the first comma is treated as the prefix. Data without
    a comma is returned unchanged with the default mime type.

    Example:
        >>> split_data_uri("data:image/jpeg;base64,/9j/4AAQ")
        ('image/jpeg', '/9j/4AAQ')
        >>> split_data_uri("iVBORw0KGgo")
        ('image/png', 'iVBORw0KGgo')
    """
    prefix, sep, payload = data.partition(",")
    if not sep:
        return DEFAULT_IMAGE_MIME, data

    mime = DEFAULT_IMAGE_MIME
    if prefix.startswith("data:"):
        declared = prefix[len("data:"):].split(";", 1)[0].strip()
        if declared:
            mime = declared
    return mime, payload


def to_reference_parts(assets: Sequence[ReferenceAsset] | None) -> list[ReferencePart]:
    """Convert reference assets into inline parts.

    Raises:
        UnsupportedAssetError: If any asset is not an image. Checked for all
            assets before any conversion so nothing is sent partially.
    """
    if not assets:
        return []

    for asset in assets:
        if asset.type != AssetType.IMAGE:
            label = f" '{asset.name}'" if asset.name else ""
            raise UnsupportedAssetError(
                f"Reference asset{label} of type '{asset.type.value}' cannot be "
                "sent to a provider; only image assets are supported"
            )

    parts = []
    for asset in assets:
        mime, payload = split_data_uri(asset.data)
        parts.append(ReferencePart(data=payload, mime_type=mime))
    return parts


__all__ = ["split_data_uri", "to_reference_parts", "DEFAULT_IMAGE_MIME"]
