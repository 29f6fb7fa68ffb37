import httpx
import pytest
from unittest.mock import patch
from app.cache import json_cache
from app.core import config

@pytest.fixture(autouse=True)
def setup_test_environment(tmp_path):
    """Point file-backed settings at a temp dir and disable mock mode"""
    settings = config.settings
    original = {
        "USE_MOCK": settings.USE_MOCK,
        "GOOGLE_API_KEY": settings.GOOGLE_API_KEY,
        "JSON_DIR": settings.JSON_DIR,
        "ANALYSIS_RESULT_DIR": settings.ANALYSIS_RESULT_DIR,
        "ANALYSIS_TEST_DIR": settings.ANALYSIS_TEST_DIR,
    }

    json_dir = tmp_path / "json"
    result_dir = tmp_path / "result"
    test_dir = tmp_path / "test"
    for directory in (json_dir, result_dir, test_dir):
        directory.mkdir()

    settings.USE_MOCK = False
    settings.GOOGLE_API_KEY = None
    settings.JSON_DIR = str(json_dir)
    settings.ANALYSIS_RESULT_DIR = str(result_dir)
    settings.ANALYSIS_TEST_DIR = str(test_dir)
    json_cache.clear_all()

    yield

    for name, value in original.items():
        setattr(settings, name, value)
    json_cache.clear_all()

@pytest.fixture
def mock_http():
    """
    Route every client built by app.fetch.http_client to a handler.

    Usage: mock_http(handler) where handler takes an httpx.Request and returns
    (or awaits to) an httpx.Response.
    """
    patchers = []

    def install(handler):
        def factory(timeout=None, headers=None, max_connections=None):
            return httpx.AsyncClient(
                transport=httpx.MockTransport(handler),
                headers=headers,
                follow_redirects=True
            )

        patcher = patch("app.fetch.http_client.create_client", side_effect=factory)
        patchers.append(patcher)
        return patcher.start()

    yield install

    for patcher in patchers:
        patcher.stop()
