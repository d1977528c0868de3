"""Placeholder Image Service - on-demand placeholder images for UI prototyping."""

__version__ = "0.1.0"

from placeholder.core.config import PlaceholderConfig, config
from placeholder.core.generator import GeneratedImage, ImageGenerator
from placeholder.core.request import ImageRequest, validate

__all__ = [
    "GeneratedImage",
    "ImageGenerator",
    "ImageRequest",
    "PlaceholderConfig",
    "config",
    "validate",
]
