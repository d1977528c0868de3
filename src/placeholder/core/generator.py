"""Placeholder image generation with result caching.

:class:`ImageGenerator` is the single entry point of the core.  It receives
a validated :class:`~placeholder.core.request.ImageRequest` and returns the
encoded bytes, consulting the result cache first.

Usage
-----
::

    from placeholder.core.config import config
    from placeholder.core.generator import ImageGenerator
    from placeholder.core.request import validate

    generator = ImageGenerator.from_config(config)
    result = generator.generate(validate("300x200"))
    result.media_type   # "image/png"
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from placeholder.core.cache import LRUCache
from placeholder.core.config import PlaceholderConfig
from placeholder.core.encoder import encode, media_type
from placeholder.core.font_manager import FontManager
from placeholder.core.renderer import render_request
from placeholder.core.request import ImageRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeneratedImage:
    """Encoded image handed back to the caller.

    Attributes:
        data: Encoded image bytes (shared with the cache, never mutated).
        format: Canonical format name.
        media_type: Content type matching ``format``.
        cache_key: Fingerprint of the request.
        cached: Whether the bytes came from the cache.
    """

    data: bytes
    format: str
    media_type: str
    cache_key: str
    cached: bool


class ImageGenerator:
    """Turns requests into encoded images, memoizing results.

    Attributes:
        cache (LRUCache):
            Result cache keyed by request fingerprint.
        fonts (FontManager):
            Source of font faces for the label.
    """

    def __init__(self, cache: LRUCache, fonts: FontManager) -> None:
        self.cache = cache
        self.fonts = fonts

    @classmethod
    def from_config(cls, settings: PlaceholderConfig) -> ImageGenerator:
        """Build a generator with a cache and font manager sized by *settings*."""
        cache = LRUCache(
            max_items=settings.cache_max_items,
            ttl_seconds=settings.cache_ttl_seconds,
        )
        return cls(cache, FontManager.from_config(settings))

    def generate(self, request: ImageRequest) -> GeneratedImage:
        """Return the encoded image for *request*.

        Concurrent misses on the same key may both render; the last one to
        finish wins the cache slot.  Nothing is cached when rendering or
        encoding fails.

        Raises:
            FontUnavailable: If the font program cannot be loaded.
            EncodingError: If the image cannot be serialized.
        """
        key = request.fingerprint()

        data = self.cache.get(key)
        if data is not None:
            return GeneratedImage(data, request.format, media_type(request.format), key, True)

        logger.debug(
            "Cache miss for %dx%d %s (%s), rendering.",
            request.width,
            request.height,
            request.format,
            key,
        )
        image = render_request(request, self.fonts)
        data = encode(image, request.format)

        self.cache.put(key, data)
        return GeneratedImage(data, request.format, media_type(request.format), key, False)
