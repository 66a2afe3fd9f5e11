"""Tests for sensitive data filtering in logs."""

from __future__ import annotations

import json
import logging
from io import StringIO

import pytest

from imagegen.core.logging import (
    JsonFormatter,
    SensitiveDataFilter,
    clear_request_id,
    hash_identifier,
    set_request_id,
)


@pytest.fixture
def capture() -> tuple[logging.Logger, StringIO]:
    logger = logging.getLogger("test_redaction")
    logger.setLevel(logging.INFO)
    logger.handlers.clear()
    logger.propagate = False

    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.addFilter(SensitiveDataFilter())
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)
    return logger, stream


def test_sensitive_filter_redacts_credentials(capture) -> None:
    logger, stream = capture

    logger.info(
        "provider_event",
        extra={
            "api_key": "sk-secret-123",
            "authorization": "Bearer another-secret",
            "safe_field": "visible",
        },
    )

    output = stream.getvalue()
    assert "sk-secret-123" not in output
    assert "another-secret" not in output
    assert "[REDACTED]" in output
    assert "visible" in output


def test_prompt_and_image_payload_are_redacted(capture) -> None:
    logger, stream = capture

    logger.info(
        "generate_event",
        extra={
            "prompt": "portrait of my neighbour Alice",
            "image_b64": "iVBORw0KGgoAAAANSUhEUgAA",
            "prompt_chars": 30,
        },
    )

    output = stream.getvalue()
    assert "Alice" not in output
    assert "iVBORw0KGgo" not in output
    assert "prompt_chars" in output


def test_client_addresses_are_redacted_in_nested_fields(capture) -> None:
    logger, stream = capture

    logger.info(
        "nested_event",
        extra={
            "headers": {
                "X-Forwarded-For": "203.0.113.9",
                "user-agent": "pytest",
            },
        },
    )

    output = stream.getvalue()
    assert "203.0.113.9" not in output
    assert "pytest" in output


def test_safe_fields_pass_through(capture) -> None:
    logger, stream = capture

    logger.info(
        "rate_limit.allowed",
        extra={"client_hash": "abc123", "limit": 3, "remaining": 2, "window_s": 86400},
    )

    payload = json.loads(stream.getvalue())
    assert payload["message"] == "rate_limit.allowed"
    assert payload["client_hash"] == "abc123"
    assert payload["remaining"] == 2
    assert "[REDACTED]" not in stream.getvalue()


def test_request_id_from_context_is_included(capture) -> None:
    logger, stream = capture

    set_request_id("req-42")
    try:
        logger.info("with_context")
    finally:
        clear_request_id()

    assert json.loads(stream.getvalue())["request_id"] == "req-42"


def test_hash_identifier_is_stable_and_opaque() -> None:
    first = hash_identifier("198.51.100.7")

    assert first == hash_identifier("198.51.100.7")
    assert first != hash_identifier("198.51.100.8")
    assert len(first) == 16
    assert "198.51.100.7" not in first
