"""Request model and validation for placeholder images.

:func:`validate` turns the raw tokens of a placeholder URL into an immutable
:class:`ImageRequest`, applying the service defaults.  It is a pure function:
no font, cache, or configuration state is touched, so validation errors are
always reported before any generation resource is used.

Usage
-----
::

    from placeholder.core.request import validate

    req = validate("300x200", "jpg", "ff0000", None, "Hello")
    req.format            # "jpeg"
    req.background_rgb    # (255, 0, 0)
    req.fingerprint()     # 32-char hex cache key
"""

from __future__ import annotations

import hashlib
import re
from typing import Literal
from urllib.parse import unquote_to_bytes

from pydantic import BaseModel, ConfigDict, Field

from placeholder.core.errors import InvalidColor, InvalidSize, UnsupportedFormat

MAX_DIMENSION = 3000
DEFAULT_BACKGROUND = "cccccc"
DEFAULT_FOREGROUND = "666666"
DEFAULT_FORMAT = "png"

# Accepted format tokens mapped to their canonical name.
FORMAT_ALIASES: dict[str, str] = {
    "png": "png",
    "jpg": "jpeg",
    "jpeg": "jpeg",
    "gif": "gif",
    "webp": "webp",
}

_SIZE_RE = re.compile(r"^(\d+)x(\d+)$", re.ASCII)
_COLOR_RE = re.compile(r"^[0-9a-fA-F]{6}$", re.ASCII)
_BAD_ESCAPE_RE = re.compile(rb"%(?![0-9A-Fa-f]{2})")


class ImageRequest(BaseModel):
    """A validated, immutable placeholder image request.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        format: Canonical format name (``png``, ``jpeg``, ``gif``, ``webp``).
        background_color: Background color as 6 lower-case hex digits.
        foreground_color: Text color as 6 lower-case hex digits.
        text: Label to draw.  May contain surrogate escapes when the caller
            received bytes that are not valid UTF-8; the renderer replaces
            such text with a fixed placeholder.
    """

    model_config = ConfigDict(frozen=True)

    width: int = Field(..., ge=1)
    height: int = Field(..., ge=1)
    format: Literal["png", "jpeg", "gif", "webp"]
    background_color: str = Field(..., pattern=r"^[0-9a-f]{6}$")
    foreground_color: str = Field(..., pattern=r"^[0-9a-f]{6}$")
    text: str

    @property
    def background_rgb(self) -> tuple[int, int, int]:
        return hex_to_rgb(self.background_color)

    @property
    def foreground_rgb(self) -> tuple[int, int, int]:
        return hex_to_rgb(self.foreground_color)

    def fingerprint(self) -> str:
        """Return the cache key for this request.

        The key is an MD5 digest over every field that influences the
        encoded bytes.  Text is encoded with ``surrogatepass`` so any lone
        surrogate (invalid UTF-8 kept as escapes, or other invalid Unicode)
        still hashes deterministically and stays distinct from other text.
        """
        raw = (
            f"{self.width}x{self.height}_{self.format}_"
            f"{self.background_color}_{self.foreground_color}_{self.text}"
        )
        return hashlib.md5(raw.encode("utf-8", errors="surrogatepass")).hexdigest()


def hex_to_rgb(value: str) -> tuple[int, int, int]:
    """Convert ``"rrggbb"`` into an ``(r, g, b)`` tuple."""
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


def parse_size(size_token: str, max_dimension: int = MAX_DIMENSION) -> tuple[int, int]:
    """Parse a ``WIDTHxHEIGHT`` token.

    Raises:
        InvalidSize: If the token is malformed or either dimension falls
            outside ``[1, max_dimension]``.
    """
    match = _SIZE_RE.match(size_token or "")
    if match is None:
        raise InvalidSize("invalid size format, expected WIDTHxHEIGHT")

    width, height = int(match.group(1)), int(match.group(2))
    if not (1 <= width <= max_dimension and 1 <= height <= max_dimension):
        raise InvalidSize(
            f"size must be between 1x1 and {max_dimension}x{max_dimension}"
        )
    return width, height


def normalize_format(format_token: str | None, default: str = DEFAULT_FORMAT) -> str:
    """Return the canonical format name for *format_token*.

    Raises:
        UnsupportedFormat: If the token is not a supported format.
    """
    if not format_token:
        return default
    canonical = FORMAT_ALIASES.get(format_token.lower())
    if canonical is None:
        raise UnsupportedFormat(f"unsupported image type: {format_token}")
    return canonical


def _color_or_default(token: str | None, default: str, label: str) -> str:
    value = token or default
    if not _COLOR_RE.match(value):
        raise InvalidColor(f"invalid {label} color: {value}")
    return value.lower()


def validate(
    size_token: str,
    format_token: str | None = None,
    raw_bg: str | None = None,
    raw_fg: str | None = None,
    raw_text: str | None = None,
    *,
    max_dimension: int = MAX_DIMENSION,
    default_background: str = DEFAULT_BACKGROUND,
    default_foreground: str = DEFAULT_FOREGROUND,
    default_format: str = DEFAULT_FORMAT,
) -> ImageRequest:
    """Validate raw request tokens and apply defaults.

    Checks run in the order size, format, background, foreground, so the
    first problem found is the one reported.

    Args:
        size_token: ``WIDTHxHEIGHT``, e.g. ``"300x200"``.
        format_token: Format extension, or ``None``/empty for the default.
        raw_bg: Background color token, or ``None``/empty for the default.
        raw_fg: Foreground color token, or ``None``/empty for the default.
        raw_text: Already percent-decoded label, or ``None``/empty to use
            ``"{width}x{height}"``.

    Returns:
        The validated :class:`ImageRequest`.

    Raises:
        InvalidSize: Malformed or out-of-range size.
        UnsupportedFormat: Unknown format extension.
        InvalidColor: A color token that is not six hex digits.
    """
    width, height = parse_size(size_token, max_dimension)
    image_format = normalize_format(format_token, default_format)
    background = _color_or_default(raw_bg, default_background, "background")
    foreground = _color_or_default(raw_fg, default_foreground, "foreground")
    text = raw_text or f"{width}x{height}"

    return ImageRequest(
        width=width,
        height=height,
        format=image_format,
        background_color=background,
        foreground_color=foreground,
        text=text,
    )


def split_size_path(path_segment: str) -> tuple[str, str | None]:
    """Split ``"300x200.jpg"`` into ``("300x200", "jpg")``.

    A segment with no dot has no format.  A segment with more than one dot
    is returned whole as the size token, which then fails size validation.
    """
    parts = path_segment.split(".")
    if len(parts) == 2:
        return parts[0], parts[1]
    if len(parts) == 1:
        return parts[0], None
    return path_segment, None


def decode_text(raw: str | bytes) -> str:
    """Percent-decode a raw query token.

    ``+`` is read as a space.  A token with any malformed escape (``%`` not
    followed by two hex digits) is returned undecoded, ``+`` included.  Byte
    sequences that are not valid UTF-8 survive as surrogate escapes so
    the renderer can substitute its placeholder label.
    """
    if isinstance(raw, str):
        raw = raw.encode("utf-8", errors="surrogatepass")
    if _BAD_ESCAPE_RE.search(raw):
        return raw.decode("utf-8", errors="surrogateescape")
    return unquote_to_bytes(raw.replace(b"+", b" ")).decode("utf-8", errors="surrogateescape")
