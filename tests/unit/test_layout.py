"""Tests for placeholder.core.layout — font sizing and anchoring."""

from __future__ import annotations

import pytest

from placeholder.core.layout import VISUAL_OFFSET_RATIO, compute_anchor, compute_font_size


class TestComputeFontSize:
    """Font size heuristic."""

    def test_reference_size(self):
        """300x200 with the default label: 255/7 * 0.8 * 1.0."""
        assert compute_font_size(300, 200, "300x200") == pytest.approx(255 / 7 * 0.8)

    def test_repeated_calls_identical(self):
        """The function is pure: repeated calls give the same float."""
        first = compute_font_size(300, 200, "300x200")
        second = compute_font_size(300, 200, "300x200")
        assert repr(first) == repr(second)

    def test_clamped_to_absolute_maximum(self):
        """Large images with short labels stop at 150pt."""
        assert compute_font_size(3000, 3000, "A") == 150.0

    def test_clamped_to_relative_maximum(self):
        """The maximum is 40% of the smaller side below 375px."""
        assert compute_font_size(300, 100, "A") == pytest.approx(40.0)

    def test_clamped_to_absolute_minimum(self):
        """Long labels never go below 12pt."""
        assert compute_font_size(300, 200, "x" * 200) == 12.0

    def test_relative_minimum_above_twelve(self):
        """For very large images the minimum is 2% of the smaller side."""
        assert compute_font_size(3000, 3000, "x" * 5000) == pytest.approx(60.0)

    def test_minimum_wins_when_bounds_cross(self):
        """On tiny images the 12pt floor overrides the 40% ceiling."""
        assert compute_font_size(10, 10, "10x10") == 12.0

    def test_empty_text_counts_as_one_glyph(self):
        assert compute_font_size(300, 200, "") == compute_font_size(300, 200, "A")

    def test_counts_code_points_not_bytes(self):
        """Multi-byte characters count once each."""
        assert compute_font_size(600, 400, "日本") == compute_font_size(600, 400, "ab")

    def test_longer_text_is_smaller(self):
        assert compute_font_size(800, 600, "Hi") > compute_font_size(800, 600, "Hello World")


class TestComputeAnchor:
    """Anchor point for the label's middle."""

    def test_horizontal_center(self):
        x, _ = compute_anchor(300, 200, 40)
        assert x == 150

    def test_vertical_offset(self):
        _, y = compute_anchor(300, 200, 40)
        assert y == pytest.approx(100 - 40 * 0.15)

    def test_offset_ratio_constant(self):
        assert VISUAL_OFFSET_RATIO == 0.15

    def test_odd_dimensions(self):
        assert compute_anchor(301, 201, 0) == (150.5, 100.5)
