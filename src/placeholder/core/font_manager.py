"""Font resource lifecycle for the Placeholder Image Service.

This module owns the single font program used to draw placeholder labels and
the faces derived from it.

Key Responsibilities
--------------------
- **One-time parse** — :func:`load_font_program` reads and parses a font
  source at most once per process.  Concurrent first callers block on a lock
  until the parse completes; later callers take a lock-free fast path.
- **Cached failure** — a font that fails to load is remembered, and every
  later caller gets :class:`~placeholder.core.errors.FontUnavailable`
  without another parse attempt.  There is no fallback font program.
- **Exact-size faces** — :meth:`FontManager.get_face` builds a fresh face
  for every requested point size.  Only faces at the fixed default size are
  pooled, so a pooled face is never handed out for another size.
- **Bounded face pool** — released default-size faces go back into a
  bounded queue.  Releasing into a full pool drops the face; acquiring from
  an empty pool builds a new one.  Neither side blocks.

Usage
-----
::

    from placeholder.core.font_manager import FontManager

    fonts = FontManager("/path/to/font.ttf", pool_size=32)
    fonts.warm_up()

    face = fonts.get_face(37.5)
    try:
        ...  # draw with face
    finally:
        fonts.release_face(face)
"""

from __future__ import annotations

import io
import logging
import queue
import threading
from dataclasses import dataclass
from pathlib import Path

from PIL import ImageFont

from placeholder.core.errors import FontUnavailable

logger = logging.getLogger(__name__)

# Point size of the faces kept in the pool.
DEFAULT_POINT_SIZE = 24.0

# ---------------------------------------------------------------------------
# Process-wide font program registry.
# Maps a source identifier to either the parsed FontProgram or the message of
# the failure that occurred while loading it.  Entries are never removed.
# ---------------------------------------------------------------------------
_program_lock = threading.Lock()
_programs: dict[str, FontProgram | str] = {}


@dataclass(frozen=True)
class FontProgram:
    """A decoded, read-only font shared by every face in the process.

    Attributes:
        source: Identifier the program was loaded under (usually a path).
        data: Raw font file bytes.
        family: Family name reported by the font.
        style: Style name reported by the font.
    """

    source: str
    data: bytes
    family: str
    style: str

    def face(self, point_size: float) -> ImageFont.FreeTypeFont:
        """Build a rasterization face at *point_size*."""
        return ImageFont.truetype(io.BytesIO(self.data), size=point_size)


def _parse_program(source: str, data: bytes | None) -> FontProgram:
    if data is None:
        data = Path(source).read_bytes()

    # A trial face validates the outline tables and yields the names.
    probe = ImageFont.truetype(io.BytesIO(data), size=DEFAULT_POINT_SIZE)
    family, style = probe.getname()
    return FontProgram(source=source, data=data, family=family or "", style=style or "")


def load_font_program(source: str | Path, data: bytes | None = None) -> FontProgram:
    """Return the font program for *source*, parsing it on first use.

    Args:
        source: Path of the font file, or any identifier when *data* is given.
        data: Font bytes to parse instead of reading *source* from disk.

    Returns:
        The shared :class:`FontProgram`.

    Raises:
        FontUnavailable: If the font could not be read or parsed, now or on
            any earlier attempt.
    """
    key = str(source)

    cached = _programs.get(key)
    if cached is None:
        with _program_lock:
            cached = _programs.get(key)
            if cached is None:
                logger.info("Parsing font program '%s'.", key)
                try:
                    cached = _parse_program(key, data)
                except (OSError, ValueError) as e:
                    logger.exception("Failed to load font program '%s'.", key)
                    cached = f"font '{key}' is unavailable: {e}"
                else:
                    logger.info(
                        "Font program '%s' loaded (%s %s, %d bytes).",
                        key,
                        cached.family,
                        cached.style,
                        len(cached.data),
                    )
                _programs[key] = cached

    if isinstance(cached, str):
        raise FontUnavailable(cached)
    return cached


class FontManager:
    """Hands out font faces derived from the process-wide font program.

    Attributes:
        _source (str):
            Identifier of the font program (a file path by default).
        _data (bytes | None):
            Font bytes to parse instead of reading ``_source``.
        _pool (queue.Queue | None):
            Bounded pool of default-size faces, or ``None`` when pooling is
            disabled (``pool_size=0``).
    """

    def __init__(
        self,
        source: str | Path,
        *,
        data: bytes | None = None,
        pool_size: int = 32,
        default_point_size: float = DEFAULT_POINT_SIZE,
    ) -> None:
        """Initialise the manager without touching the font.

        The font program is parsed lazily on the first face request, or
        eagerly by :meth:`warm_up`.

        Args:
            source: Font file path, or identifier when *data* is given.
            data: Optional in-memory font bytes.
            pool_size: Capacity of the default-size face pool.
            default_point_size: Point size of pooled faces.
        """
        self._source = str(source)
        self._data = data
        self.default_point_size = float(default_point_size)
        self.pool_size = pool_size
        self._pool: queue.Queue | None = queue.Queue(maxsize=pool_size) if pool_size > 0 else None

    @classmethod
    def from_config(cls, settings) -> FontManager:
        """Build a manager from a :class:`PlaceholderConfig`."""
        return cls(settings.resolved_font_path, pool_size=settings.font_pool_size)

    # -- Public interface ---------------------------------------------------

    def load(self) -> FontProgram:
        """Return the shared font program, parsing it on first call.

        Raises:
            FontUnavailable: If the font program cannot be loaded.
        """
        return load_font_program(self._source, self._data)

    @property
    def is_available(self) -> bool:
        """Whether the font program loaded successfully."""
        try:
            self.load()
        except FontUnavailable:
            return False
        return True

    def warm_up(self) -> int:
        """Parse the font program and fill the pool with default-size faces.

        Returns:
            Number of faces added to the pool.

        Raises:
            FontUnavailable: If the font program cannot be loaded.
        """
        program = self.load()
        if self._pool is None:
            return 0

        added = 0
        while True:
            try:
                face = program.face(self.default_point_size)
            except (OSError, ValueError):
                logger.warning("Could not build a %.1fpt face for the pool.", self.default_point_size)
                break
            try:
                self._pool.put_nowait(face)
            except queue.Full:
                break
            added += 1

        logger.info("Font face pool warmed with %d face(s) at %.1fpt.", added, self.default_point_size)
        return added

    def get_face(self, point_size: float) -> ImageFont.FreeTypeFont:
        """Return a face at exactly *point_size*.

        Pooled faces are only used when *point_size* equals the default
        size; every other size gets a freshly built face.

        Raises:
            FontUnavailable: If the font program is unusable or a face cannot
                be built at this size.
        """
        point_size = float(point_size)
        if self._pool is not None and point_size == self.default_point_size:
            try:
                return self._pool.get_nowait()
            except queue.Empty:
                pass

        program = self.load()
        try:
            return program.face(point_size)
        except (OSError, ValueError) as e:
            raise FontUnavailable(f"cannot build a {point_size:.2f}pt face: {e}") from e

    def release_face(self, face: ImageFont.FreeTypeFont | None) -> None:
        """Return *face* after use.

        Faces at the default size go back into the pool; anything else, and
        anything that does not fit into a full pool, is dropped.
        """
        if face is None or self._pool is None:
            return
        if getattr(face, "size", None) != self.default_point_size:
            return
        try:
            self._pool.put_nowait(face)
        except queue.Full:
            pass

    @property
    def pooled_faces(self) -> int:
        """Approximate number of faces currently waiting in the pool."""
        return self._pool.qsize() if self._pool is not None else 0
