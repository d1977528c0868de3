"""Tests for placeholder.core.font_manager — font program and face pool.

Tests cover:
- One-time parsing of the font program, including concurrent first callers.
- Cached failures for broken or missing fonts.
- Exact-size face construction.
- Pool warm-up, reuse at the default size, and drop-on-full release.

Implementation Note
-------------------
The font program registry is process-wide and never forgets a source.  Each
test that counts parses therefore loads the font under a unique source
identifier (``uuid4``) so tests stay independent.
"""

from __future__ import annotations

import threading
import time
import uuid

import pytest
from PIL import ImageFont

import placeholder.core.font_manager as fm
from placeholder.core.config import BUNDLED_FONT_PATH, PlaceholderConfig
from placeholder.core.errors import FontUnavailable
from placeholder.core.font_manager import DEFAULT_POINT_SIZE, FontManager, load_font_program


def _unique_source(prefix: str = "font") -> str:
    return f"{prefix}-{uuid.uuid4().hex}"


@pytest.fixture
def parse_counter(monkeypatch):
    """Count calls to the underlying parser."""
    calls: list[str] = []
    original = fm._parse_program

    def counting_parse(source, data):
        calls.append(source)
        return original(source, data)

    monkeypatch.setattr(fm, "_parse_program", counting_parse)
    return calls


class TestFontProgram:
    """Process-wide one-time loading."""

    def test_bundled_font_loads(self):
        program = load_font_program(BUNDLED_FONT_PATH)
        assert program.family.startswith("Lato")
        assert program.data == BUNDLED_FONT_PATH.read_bytes()

    def test_parsed_once(self, font_bytes, parse_counter):
        source = _unique_source()
        first = load_font_program(source, font_bytes)
        second = load_font_program(source, font_bytes)

        assert first is second
        assert parse_counter == [source]

    def test_concurrent_first_callers_share_one_parse(self, font_bytes, parse_counter, monkeypatch):
        """Callers arriving during the parse block and reuse its result."""
        original = fm._parse_program

        def slow_parse(source, data):
            time.sleep(0.05)
            return original(source, data)

        monkeypatch.setattr(fm, "_parse_program", slow_parse)
        source = _unique_source()
        results: list = []
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            results.append(load_font_program(source, font_bytes))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(results) == 8
        assert all(result is results[0] for result in results)
        assert parse_counter == [source]

    def test_broken_font_fails(self):
        with pytest.raises(FontUnavailable, match="unavailable"):
            load_font_program(_unique_source("broken"), b"not a font")

    def test_failure_is_cached(self, parse_counter):
        """A failed parse is replayed without another attempt."""
        source = _unique_source("broken")
        for _ in range(3):
            with pytest.raises(FontUnavailable):
                load_font_program(source, b"not a font")
        assert parse_counter == [source]

    def test_missing_file_fails(self, temp_dir):
        with pytest.raises(FontUnavailable):
            load_font_program(temp_dir / "missing.ttf")

    def test_face_at_size(self):
        face = load_font_program(BUNDLED_FONT_PATH).face(31.5)
        assert isinstance(face, ImageFont.FreeTypeFont)
        assert face.size == 31.5


class TestFontManagerFaces:
    """Face construction at requested sizes."""

    @pytest.mark.parametrize("size", [12.0, 29.142857, 80.0, 150.0])
    def test_exact_requested_size(self, fonts, size):
        face = fonts.get_face(size)
        assert face.size == pytest.approx(size)

    def test_non_default_size_never_uses_pool(self, fonts):
        fonts.warm_up()
        before = fonts.pooled_faces
        face = fonts.get_face(40.0)
        assert face.size == 40.0
        assert fonts.pooled_faces == before

    def test_lazy_loading(self, font_bytes, parse_counter):
        """Constructing a manager does not parse the font."""
        source = _unique_source()
        manager = FontManager(source, data=font_bytes, pool_size=2)
        assert parse_counter == []
        manager.get_face(20)
        assert parse_counter == [source]

    def test_unavailable_font(self, temp_dir):
        manager = FontManager(temp_dir / "missing.ttf")
        assert manager.is_available is False
        with pytest.raises(FontUnavailable):
            manager.get_face(20)

    def test_available_font(self, fonts):
        assert fonts.is_available is True
        assert fonts.load().family.startswith("Lato")

    def test_face_construction_failure(self, fonts, monkeypatch):
        """A face that cannot be built is reported as FontUnavailable."""
        fonts.load()

        def broken_face(self, point_size):
            raise OSError("rasterizer failure")

        monkeypatch.setattr(fm.FontProgram, "face", broken_face)
        with pytest.raises(FontUnavailable, match="cannot build"):
            fonts.get_face(33.0)


class TestFontPool:
    """Bounded default-size face pool."""

    def test_warm_up_fills_pool(self, fonts):
        assert fonts.warm_up() == 4
        assert fonts.pooled_faces == 4

    def test_default_size_reuses_pooled_face(self, fonts):
        fonts.warm_up()
        face = fonts.get_face(DEFAULT_POINT_SIZE)
        assert face.size == DEFAULT_POINT_SIZE
        assert fonts.pooled_faces == 3

        fonts.release_face(face)
        assert fonts.pooled_faces == 4

    def test_empty_pool_builds_fresh_face(self, fonts):
        """Acquiring from an empty pool does not block."""
        face = fonts.get_face(DEFAULT_POINT_SIZE)
        assert face.size == DEFAULT_POINT_SIZE
        assert fonts.pooled_faces == 0

    def test_release_into_full_pool_drops(self, fonts):
        fonts.warm_up()
        extra = fonts.load().face(DEFAULT_POINT_SIZE)
        fonts.release_face(extra)
        assert fonts.pooled_faces == 4

    def test_release_other_size_dropped(self, fonts):
        face = fonts.get_face(55.0)
        fonts.release_face(face)
        assert fonts.pooled_faces == 0

    def test_release_none_ignored(self, fonts):
        fonts.release_face(None)
        assert fonts.pooled_faces == 0

    def test_pool_disabled(self):
        manager = FontManager(BUNDLED_FONT_PATH, pool_size=0)
        assert manager.warm_up() == 0
        face = manager.get_face(DEFAULT_POINT_SIZE)
        manager.release_face(face)
        assert manager.pooled_faces == 0

    def test_warm_up_on_broken_font_raises(self, temp_dir):
        manager = FontManager(temp_dir / "missing.ttf")
        with pytest.raises(FontUnavailable):
            manager.warm_up()

    def test_from_config(self):
        settings = PlaceholderConfig(font_pool_size=3, _env_file=None)
        manager = FontManager.from_config(settings)
        assert manager.pool_size == 3
        assert manager.load().family.startswith("Lato")
