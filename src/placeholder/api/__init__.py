"""Placeholder Image Service - FastAPI HTTP layer.

This package maps HTTP requests onto the generation core and core errors
onto HTTP responses.

Modules
-------
main
    FastAPI application, route handlers and the ``main()`` CLI entry point.
models
    Pydantic models for JSON responses.
"""
