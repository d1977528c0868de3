"""Core functionality for placeholder image generation.

This package turns a validated request into encoded image bytes and never
deals with transport concerns.

Architecture Overview
---------------------
Leaf-first:

1. **Errors** (errors.py): the closed set of failures the core reports.
2. **Configuration** (config.py): Pydantic Settings, ``PLACEHOLDER_`` prefix.
3. **Request model** (request.py): validation, defaults and fingerprinting.
4. **Font resources** (font_manager.py): one-time font parse and face pool.
5. **Layout** (layout.py): font size and anchor computation.
6. **Rendering** (renderer.py): background fill and centered label.
7. **Encoding** (encoder.py): PNG, JPEG, GIF and WebP serialization.
8. **Result cache** (cache.py): thread-safe LRU cache with TTL.
9. **Generator** (generator.py): cache lookup, render, encode, store.

Usage Example
-------------
    from placeholder.core import ImageGenerator, config, validate

    generator = ImageGenerator.from_config(config)
    result = generator.generate(validate("300x200", "webp"))
"""

from placeholder.core.cache import LRUCache
from placeholder.core.config import PlaceholderConfig, config
from placeholder.core.errors import (
    EncodingError,
    FontUnavailable,
    GenerationError,
    InvalidColor,
    InvalidSize,
    PlaceholderError,
    UnsupportedFormat,
    ValidationError,
)
from placeholder.core.font_manager import FontManager
from placeholder.core.generator import GeneratedImage, ImageGenerator
from placeholder.core.request import ImageRequest, validate

__all__ = [
    "EncodingError",
    "FontManager",
    "FontUnavailable",
    "GeneratedImage",
    "GenerationError",
    "ImageGenerator",
    "ImageRequest",
    "InvalidColor",
    "InvalidSize",
    "LRUCache",
    "PlaceholderConfig",
    "PlaceholderError",
    "UnsupportedFormat",
    "ValidationError",
    "config",
    "validate",
]
