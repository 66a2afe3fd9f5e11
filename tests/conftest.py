"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests.
It sets TESTING so the .env file is not loaded, and provides the
environment the settings module needs at import time.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["TESTING"] = "true"

os.environ.setdefault("IMAGE_PROVIDER", "openai")
os.environ.setdefault("IMAGE_MODEL", "black-forest-labs/flux-schnell")
os.environ.setdefault("IMAGE_API_KEY", "test-image-key-123")
os.environ.setdefault("APP_RATE_LIMIT_ENABLED", "true")
os.environ.setdefault("APP_RATE_LIMIT_REQUESTS", "3")
os.environ.setdefault("APP_RATE_LIMIT_WINDOW_SECONDS", "86400")

import pytest  # noqa: E402


@pytest.fixture
def fresh_rate_limiter(monkeypatch: pytest.MonkeyPatch):
    """Give each test its own process-wide tracker instance."""
    from imagegen.core import rate_limit as rate_limit_module

    monkeypatch.setattr(rate_limit_module, "_limiter", None)
    monkeypatch.setattr(rate_limit_module, "_limiter_config", None)
    return rate_limit_module
