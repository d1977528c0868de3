"""Shared pytest fixtures for placeholder tests."""

import shutil
import tempfile
from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from placeholder.api.main import create_app
from placeholder.core.cache import LRUCache
from placeholder.core.config import BUNDLED_FONT_PATH, PlaceholderConfig
from placeholder.core.font_manager import FontManager
from placeholder.core.generator import ImageGenerator


class FakeClock:
    """Manually advanced clock for cache expiry tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_config() -> PlaceholderConfig:
    """Create a test configuration that ignores the environment's .env file.

    Returns:
        PlaceholderConfig instance for testing
    """
    return PlaceholderConfig(
        cache_max_items=50,
        cache_ttl_seconds=60,
        font_pool_size=4,
        _env_file=None,
    )


@pytest.fixture
def font_bytes() -> bytes:
    """Raw bytes of the bundled font."""
    return BUNDLED_FONT_PATH.read_bytes()


@pytest.fixture
def fonts() -> FontManager:
    """Font manager over the bundled font with a small pool."""
    return FontManager(BUNDLED_FONT_PATH, pool_size=4)


@pytest.fixture
def clock() -> FakeClock:
    """A fake clock starting at t=1000s."""
    return FakeClock()


@pytest.fixture
def generator(fonts: FontManager, clock: FakeClock) -> ImageGenerator:
    """Image generator with a small cache driven by the fake clock."""
    return ImageGenerator(LRUCache(max_items=20, ttl_seconds=60, clock=clock), fonts)


@pytest.fixture
def test_client(test_config: PlaceholderConfig) -> Generator[TestClient, None, None]:
    """FastAPI test client with the application lifespan running.

    Yields:
        TestClient bound to a freshly created application
    """
    app = create_app(test_config)
    with TestClient(app) as client:
        yield client
