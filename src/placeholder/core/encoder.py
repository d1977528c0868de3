"""Serialization of rendered images into the supported raster formats."""

from __future__ import annotations

import io

from PIL import Image

from placeholder.core.errors import EncodingError

# Canonical format -> (Pillow format name, save options, media type).
_ENCODINGS: dict[str, tuple[str, dict, str]] = {
    "png": ("PNG", {}, "image/png"),
    "jpeg": ("JPEG", {"quality": 90}, "image/jpeg"),
    "gif": ("GIF", {}, "image/gif"),
    "webp": ("WEBP", {"quality": 90}, "image/webp"),
}
_ENCODINGS["jpg"] = _ENCODINGS["jpeg"]


def media_type(image_format: str) -> str:
    """Content type for *image_format* (``image/png`` for unknown names)."""
    entry = _ENCODINGS.get(image_format.lower())
    return entry[2] if entry else "image/png"


def encode(image: Image.Image, image_format: str) -> bytes:
    """Encode *image* as *image_format*.

    - ``png``: lossless, default compression.
    - ``jpeg``/``jpg``: quality 90.
    - ``gif``: Pillow's default palette quantization, no loop metadata.
    - ``webp``: lossy, quality 90.

    Raises:
        EncodingError: If the format is unknown or Pillow fails to encode.
    """
    entry = _ENCODINGS.get(image_format.lower())
    if entry is None:
        raise EncodingError(f"unsupported image type: {image_format}")

    pil_format, options, _ = entry
    buffer = io.BytesIO()
    try:
        image.save(buffer, format=pil_format, **options)
    except (OSError, ValueError, KeyError) as e:
        raise EncodingError(f"failed to encode {image_format}: {e}") from e
    return buffer.getvalue()
