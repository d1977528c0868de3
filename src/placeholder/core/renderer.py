"""Drawing of placeholder images.

:func:`render` paints the background and the centered label into a new RGB
image.  :func:`render_request` adds the font handling around it: it sizes
the label, borrows a face from the :class:`FontManager`, falls back to
Pillow's built-in font when no face can be built, and always returns the
face afterwards.
"""

from __future__ import annotations

import logging

from PIL import Image, ImageDraw, ImageFont

from placeholder.core.errors import FontUnavailable
from placeholder.core.font_manager import FontManager
from placeholder.core.layout import compute_anchor, compute_font_size
from placeholder.core.request import ImageRequest

logger = logging.getLogger(__name__)

INVALID_TEXT_LABEL = "Invalid UTF-8"


def sanitize_text(text: str) -> str:
    """Return *text*, or the placeholder label if it is not valid Unicode."""
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return INVALID_TEXT_LABEL
    return text


def measure_text_height(draw: ImageDraw.ImageDraw, text: str, face) -> float:
    """Height used for vertical centering.

    FreeType faces report their line height (ascent + descent), so the
    result does not depend on which glyphs the label contains.  Bitmap
    fonts fall back to the label's bounding box.
    """
    if isinstance(face, ImageFont.FreeTypeFont):
        ascent, descent = face.getmetrics()
        return float(ascent + descent)
    left, top, right, bottom = draw.textbbox((0, 0), text, font=face)
    return float(bottom - top)


def fallback_face(point_size: float):
    """Pillow's built-in font at *point_size*.

    A scalable face is returned when Pillow was built with FreeType; otherwise
    the fixed-size bitmap font.
    """
    return ImageFont.load_default(size=point_size)


def render(request: ImageRequest, face=None, point_size: float | None = None) -> Image.Image:
    """Draw *request* into a new image.

    Args:
        request: Validated request.
        face: Face to draw with.  ``None`` selects the built-in fallback
            font at *point_size*.
        point_size: Size for the fallback font; defaults to the computed
            layout size.

    Returns:
        An RGB :class:`~PIL.Image.Image` of ``request.width x request.height``.
    """
    text = sanitize_text(request.text)

    image = Image.new("RGB", (request.width, request.height), request.background_rgb)
    draw = ImageDraw.Draw(image)

    if face is None:
        if point_size is None:
            point_size = compute_font_size(request.width, request.height, request.text)
        face = fallback_face(point_size)

    text_height = measure_text_height(draw, text, face)
    x, y = compute_anchor(request.width, request.height, text_height)

    if isinstance(face, ImageFont.FreeTypeFont):
        draw.text((x, y), text, fill=request.foreground_rgb, font=face, anchor="mm")
    else:
        # Bitmap fonts have no anchor support; center the bounding box.
        left, top, right, bottom = draw.textbbox((0, 0), text, font=face)
        origin = (x - (left + right) / 2, y - (top + bottom) / 2)
        draw.text(origin, text, fill=request.foreground_rgb, font=face)

    return image


def render_request(request: ImageRequest, fonts: FontManager) -> Image.Image:
    """Render *request* with a face borrowed from *fonts*.

    Raises:
        FontUnavailable: If the font program itself failed to load.  A face
            that merely cannot be built at the computed size triggers the
            built-in fallback font instead.
    """
    # Sized from the original text: each invalid byte counts as one glyph.
    point_size = compute_font_size(request.width, request.height, request.text)

    # A broken font program is fatal; only per-size failures fall back.
    fonts.load()

    try:
        face = fonts.get_face(point_size)
    except FontUnavailable:
        logger.warning(
            "No face at %.2fpt for %dx%d, using the built-in font.",
            point_size,
            request.width,
            request.height,
        )
        return render(request, None, point_size)

    try:
        return render(request, face, point_size)
    finally:
        fonts.release_face(face)
