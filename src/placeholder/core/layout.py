"""Font sizing and text placement for placeholder labels.

Both functions are pure: the same inputs always give the same outputs, with
no hidden state.
"""

from __future__ import annotations

# Share of the image width the label may span.
TARGET_WIDTH_RATIO = 0.85

# Width of an average glyph relative to its point size.
GLYPH_WIDTH_FACTOR = 0.8

# Image size at which the dimension scale is 1.0.
BASELINE_DIMENSION = 200.0

MAX_FONT_SIZE = 150.0
MAX_FONT_RATIO = 0.4
MIN_FONT_SIZE = 12.0
MIN_FONT_RATIO = 0.02

# Upward shift of the anchor as a fraction of the measured line height.
# Empirical; not derived from font metrics.
VISUAL_OFFSET_RATIO = 0.15


def compute_font_size(width: int, height: int, text: str) -> float:
    """Pick a point size that fills the image without overflowing it.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        text: Label to be drawn; its code point count drives the size.

    Returns:
        Point size clamped to ``[max(12, min_dim*0.02), min(150, min_dim*0.4)]``.
        When the bounds cross, the lower bound wins.
    """
    min_dim = float(min(width, height))
    glyph_count = max(1, len(text))

    avg_char_width = (width * TARGET_WIDTH_RATIO) / glyph_count
    dimension_scale = min_dim / BASELINE_DIMENSION
    base_font_size = avg_char_width * GLYPH_WIDTH_FACTOR * dimension_scale

    max_font_size = min(MAX_FONT_SIZE, min_dim * MAX_FONT_RATIO)
    min_font_size = max(MIN_FONT_SIZE, min_dim * MIN_FONT_RATIO)

    font_size = base_font_size
    if font_size > max_font_size:
        font_size = max_font_size
    if font_size < min_font_size:
        font_size = min_font_size
    return font_size


def compute_anchor(width: int, height: int, measured_text_height: float) -> tuple[float, float]:
    """Return the point the label's middle is anchored to."""
    center_x = width / 2
    center_y = height / 2 - measured_text_height * VISUAL_OFFSET_RATIO
    return center_x, center_y
