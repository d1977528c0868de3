"""Configuration management for the Placeholder Image Service.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the PLACEHOLDER_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (PLACEHOLDER_* prefix)
2. .env file in the project root
3. Default values defined in PlaceholderConfig

Example .env file:
    PLACEHOLDER_MAX_DIMENSION=3000
    PLACEHOLDER_CACHE_MAX_ITEMS=10000
    PLACEHOLDER_CACHE_TTL_SECONDS=3600
    PLACEHOLDER_FONT_PATH=/opt/fonts/MyFont.otf

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time.
It is read by the HTTP layer and by :meth:`ImageGenerator.from_config`.  The
core components themselves never import it: caches, font managers and
generators receive their settings as constructor arguments so tests can
build them with small capacities and fake clocks.

Usage Example
-------------
    from placeholder.core.config import config

    print(config.max_dimension)
    print(config.cache_ttl_seconds)

    # Configuration is immutable after initialization
    # To change values, set environment variables and restart

Font Resource
-------------
Exactly one font program is used by the whole process.  When ``font_path``
is unset the Lato Regular font bundled inside the package is used.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Bundled font shipped as package data.
BUNDLED_FONT_PATH = Path(__file__).resolve().parent.parent / "fonts" / "Lato-Regular.ttf"


class PlaceholderConfig(BaseSettings):
    """Main configuration for the Placeholder Image Service.

    Values are loaded from environment variables with the PLACEHOLDER_ prefix,
    with fallback to defaults defined here.

    Attributes
    ----------
    Request Settings:
        max_dimension : int
            Largest accepted width or height in pixels
        default_background : str
            Background color used when a request omits ``bg``
        default_foreground : str
            Text color used when a request omits ``fg``
        default_format : str
            Image format used when the size token has no extension

    Cache Settings:
        cache_max_items : int
            Capacity of the in-memory result cache
        cache_ttl_seconds : float
            Seconds an entry stays valid since it was last stored or read

    Font Settings:
        font_pool_size : int
            Capacity of the default-size font face pool (0 disables it)
        font_path : Path | None
            Font program to embed; ``None`` selects the bundled font

    Server Settings:
        server_host : str
            Bind address for uvicorn
        server_port : int
            Port for uvicorn (1024-65535)
        log_level : str
            Root log level used by the CLI entry point
        cache_control : str
            ``Cache-Control`` header sent with every image response

    Examples
    --------
    Create a custom configuration:

        >>> custom_config = PlaceholderConfig(
        ...     cache_max_items=100,
        ...     cache_ttl_seconds=60,
        ... )

    Use the global configuration instance:

        >>> from placeholder.core.config import config
        >>> print(config.max_dimension)
        3000
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PLACEHOLDER_",
        case_sensitive=False,
    )

    # Request settings
    max_dimension: int = Field(
        default=3000,
        description="Largest accepted width or height in pixels",
        ge=1,
    )
    default_background: str = Field(
        default="cccccc",
        description="Background color (6 hex digits) used when none is requested",
        pattern=r"^[0-9a-fA-F]{6}$",
    )
    default_foreground: str = Field(
        default="666666",
        description="Text color (6 hex digits) used when none is requested",
        pattern=r"^[0-9a-fA-F]{6}$",
    )
    default_format: Literal["png", "jpeg", "gif", "webp"] = Field(
        default="png",
        description="Image format used when the request names none",
    )

    # Result cache
    cache_max_items: int = Field(
        default=10000,
        description="Maximum number of encoded images kept in memory",
        ge=1,
    )
    cache_ttl_seconds: float = Field(
        default=3600.0,
        description="Lifetime of a cache entry in seconds",
        gt=0,
    )

    # Font resource
    font_pool_size: int = Field(
        default=32,
        description="Number of default-size font faces kept for reuse",
        ge=0,
    )
    font_path: Path | None = Field(
        default=None,
        description="Font file to embed (None uses the bundled font)",
    )

    # Server settings
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address (0.0.0.0 for local network)",
    )
    server_port: int = Field(
        default=8080,
        description="Server port",
        ge=1024,
        le=65535,
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Log level for the CLI entry point",
    )
    cache_control: str = Field(
        default="public, max-age=31536000",
        description="Cache-Control header for image responses",
    )

    @field_validator("default_background", "default_foreground")
    @classmethod
    def _lowercase_hex(cls, value: str) -> str:
        return value.lower()

    @field_validator("log_level", mode="before")
    @classmethod
    def _uppercase_level(cls, value):
        if isinstance(value, str):
            return value.upper()
        return value

    @property
    def resolved_font_path(self) -> Path:
        """Path of the font program the service will load."""
        return self.font_path if self.font_path is not None else BUNDLED_FONT_PATH


# Global configuration instance
# Loads values from environment variables (PLACEHOLDER_* prefix) and .env file.
config = PlaceholderConfig()
