"""Placeholder Image Service — FastAPI Application.

This module defines the FastAPI application, its routes, the mapping from
core errors to HTTP responses, and the ``main()`` CLI function that launches
the uvicorn server.

Architecture
------------
- **Generation** is delegated to :class:`~placeholder.core.generator.ImageGenerator`,
  created once per application in the lifespan handler and stored on
  ``app.state``.
- **Route handlers are synchronous**, so FastAPI runs them in its worker
  threadpool and image generation for concurrent requests proceeds in
  parallel.
- **Errors** raised by the core are translated by exception handlers into
  JSON bodies of the form ``{"error": "..."}``.

Endpoints
---------
========  ==============================  ==================================
Method    Path                            Purpose
========  ==============================  ==================================
GET       ``/api/placeholder/{size}``     Placeholder image (``300x200``,
                                          ``300x200.webp``; query ``bg``,
                                          ``fg``, ``text``)
GET       ``/health``                     Font availability and cache stats
========  ==============================  ==================================

Usage
-----
CLI (installed entry point)::

    placeholder

Direct invocation::

    python -m placeholder.api.main
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from urllib.parse import unquote_plus

from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from placeholder import __version__
from placeholder.api.models import CacheStats, ErrorResponse, HealthResponse
from placeholder.core.config import PlaceholderConfig, config
from placeholder.core.errors import FontUnavailable, GenerationError, ValidationError
from placeholder.core.generator import ImageGenerator
from placeholder.core.request import decode_text, split_size_path, validate

logger = logging.getLogger(__name__)

EXAMPLE_PATHS = (
    "/api/placeholder/300x200",
    "/api/placeholder/300x200.jpg",
    "/api/placeholder/250x150.gif",
    "/api/placeholder/500x300.webp",
    "/api/placeholder/400x200?bg=ff0000&fg=ffffff",
    "/api/placeholder/500x300?text=Hello%20World",
    "/api/placeholder/200x200.gif?bg=e91e63&fg=ffffff&text=Avatar",
)


def _raw_query_param(request: Request, name: str) -> bytes | None:
    """Return the still percent-encoded value of the first *name* parameter.

    Starlette decodes query values with replacement characters, which would
    hide invalid UTF-8 from the renderer.  Reading the raw query string keeps
    the original bytes for :func:`decode_text`.
    """
    query_string: bytes = request.scope.get("query_string", b"")
    for pair in query_string.split(b"&"):
        if not pair:
            continue
        key, _, value = pair.partition(b"=")
        if unquote_plus(key.decode("latin-1")) == name:
            return value
    return None


# ---------------------------------------------------------------------------
# Application lifecycle.
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the image generator and warm the font pool on startup.

    A font that fails to load does not stop the server: the failure is
    cached, image requests answer 500 and ``GET /health`` reports ``down``.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control back to the application for the duration of its lifetime.
    """
    settings: PlaceholderConfig = app.state.settings
    generator = ImageGenerator.from_config(settings)
    app.state.generator = generator

    try:
        generator.fonts.warm_up()
    except FontUnavailable:
        logger.error("Font program unavailable; image requests will fail until restart.")

    logger.info(
        "Placeholder service ready (cache: %d items, %.0fs TTL).",
        settings.cache_max_items,
        settings.cache_ttl_seconds,
    )
    for path in EXAMPLE_PATHS:
        logger.info("  e.g. http://%s:%d%s", settings.server_host, settings.server_port, path)

    yield

    generator.cache.clear()
    logger.info("Placeholder service stopped.")


# ---------------------------------------------------------------------------
# Error translation.
# ---------------------------------------------------------------------------


async def _validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": str(exc)})


async def _generation_error_handler(request: Request, exc: GenerationError) -> JSONResponse:
    logger.error("Generation failed for %s: %s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": str(exc)})


async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


# ---------------------------------------------------------------------------
# Application factory.
# ---------------------------------------------------------------------------


def create_app(settings: PlaceholderConfig | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Configuration to use.  Defaults to the global ``config``.

    Returns:
        A configured :class:`FastAPI` instance.
    """
    settings = settings or config

    app = FastAPI(
        title="Placeholder Image Service",
        description="On-demand placeholder images for UI prototyping.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Placeholder images are embedded from any origin.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
        max_age=86400,
    )

    app.add_exception_handler(ValidationError, _validation_error_handler)
    app.add_exception_handler(GenerationError, _generation_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)

    @app.get(
        "/api/placeholder/{size}",
        response_class=Response,
        responses={
            200: {"content": {"image/png": {}, "image/jpeg": {}, "image/gif": {}, "image/webp": {}}},
            400: {"model": ErrorResponse},
            500: {"model": ErrorResponse},
        },
    )
    def placeholder_image(
        size: str,
        request: Request,
        bg: str | None = Query(default=None, description="Background color, 6 hex digits."),
        fg: str | None = Query(default=None, description="Text color, 6 hex digits."),
        text: str | None = Query(default=None, description="Label text (default WIDTHxHEIGHT)."),
    ) -> Response:
        """Return a placeholder image.

        Args:
            size: ``WIDTHxHEIGHT`` with an optional ``.png``, ``.jpg``,
                ``.jpeg``, ``.gif`` or ``.webp`` extension.
            request: Incoming request (used for the raw ``text`` value).
            bg: Background color.
            fg: Foreground color.
            text: Label text; the raw query bytes are decoded instead of
                this value so invalid UTF-8 is detected downstream.

        Raises:
            ValidationError: 400 for a bad size, format or color.
            GenerationError: 500 when the image cannot be produced.
        """
        size_token, format_token = split_size_path(size)

        raw_text = _raw_query_param(request, "text")
        label = decode_text(raw_text) if raw_text else None

        image_request = validate(
            size_token,
            format_token,
            bg,
            fg,
            label,
            max_dimension=settings.max_dimension,
            default_background=settings.default_background,
            default_foreground=settings.default_foreground,
            default_format=settings.default_format,
        )

        generator: ImageGenerator = request.app.state.generator
        result = generator.generate(image_request)

        return Response(
            content=result.data,
            media_type=result.media_type,
            headers={"Cache-Control": settings.cache_control},
        )

    @app.get(
        "/health",
        response_model=HealthResponse,
        responses={503: {"model": HealthResponse}},
    )
    def health(request: Request):
        """Report font availability and cache statistics.

        Returns 503 while the font program is unavailable, since every image
        request would fail.
        """
        generator: ImageGenerator = request.app.state.generator
        cache = CacheStats(**generator.cache.stats())

        try:
            program = generator.fonts.load()
        except FontUnavailable:
            body = HealthResponse(status="down", version=__version__, cache=cache)
            return JSONResponse(status_code=503, content=body.model_dump())

        return HealthResponse(
            status="ok",
            version=__version__,
            font=f"{program.family} {program.style}".strip(),
            cache=cache,
        )

    return app


app = create_app()


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Reads host, port and log level from :data:`~placeholder.core.config.config`
    (``PLACEHOLDER_SERVER_HOST``, ``PLACEHOLDER_SERVER_PORT``,
    ``PLACEHOLDER_LOG_LEVEL``).  Defaults to ``0.0.0.0:8080``.

    This function is registered as the ``placeholder`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    uvicorn.run(
        "placeholder.api.main:app",
        host=config.server_host,
        port=config.server_port,
        reload=False,
    )


if __name__ == "__main__":
    main()
