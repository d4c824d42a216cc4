"""
Pytest configuration for API integration tests
"""

import base64

import pytest
from fastapi.testclient import TestClient

from watimage.config import APIConfig, ImageConfig, Settings, SystemConfig


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode("utf-8")


@pytest.fixture
def api_settings():
    """Settings used by the test application"""
    return Settings(
        environment="test",
        image=ImageConfig(),
        api=APIConfig(max_upload_size_mb=1),
        system=SystemConfig(debug=False, log_level="DEBUG"),
    )


@pytest.fixture(scope="function")
def client(api_settings):
    """
    Create a test client around a freshly built app.
    Each test gets a fresh client to avoid state contamination.
    """
    from watimage.main import create_app

    app = create_app(api_settings)

    # Create test client (no context manager to avoid blocking)
    yield TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def png_b64(png_bytes):
    return b64(png_bytes)


@pytest.fixture
def watermark_b64(watermark_png_bytes):
    return b64(watermark_png_bytes)
