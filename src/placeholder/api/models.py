"""Pydantic response models for the Placeholder Image API.

Image responses are raw bytes; these models describe the JSON bodies the
API returns for errors and health checks, and feed the OpenAPI schema.

Models
------
ErrorResponse
    Body of every non-2xx response.
CacheStats
    Result cache counters reported by ``GET /health``.
HealthResponse
    Body of ``GET /health``.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error body returned for rejected or failed requests.

    Attributes:
        error: Human-readable description of the problem.
    """

    error: str = Field(..., description="Human-readable error message.")


class CacheStats(BaseModel):
    """Snapshot of the result cache.

    Attributes:
        size: Number of entries currently stored.
        capacity: Maximum number of entries.
        ttl_seconds: Lifetime of an entry.
        hits: Lookups answered from the cache.
        misses: Lookups that required generation.
    """

    size: int
    capacity: int
    ttl_seconds: float
    hits: int
    misses: int


class HealthResponse(BaseModel):
    """Body of ``GET /health``.

    Attributes:
        status: ``"ok"`` when the font program is usable, ``"down"`` otherwise.
        version: Package version.
        font: Family and style of the loaded font, if any.
        cache: Result cache statistics.
    """

    status: Literal["ok", "down"]
    version: str
    font: str | None = Field(default=None, description="Loaded font family and style.")
    cache: CacheStats
