from __future__ import annotations

from fastapi.testclient import TestClient

from imagegen.main import app


client = TestClient(app)


def test_preserves_incoming_request_id_header():
    incoming_id = "test-request-id-123"
    resp = client.get("/health", headers={"X-Request-ID": incoming_id})

    assert resp.status_code == 200
    assert resp.headers.get("X-Request-ID") == incoming_id


def test_generates_request_id_when_missing():
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.headers.get("X-Request-ID")
    assert resp.headers.get("X-Request-Duration-ms") is not None


def test_rejected_requests_carry_request_id(fresh_rate_limiter, monkeypatch):
    monkeypatch.setattr(fresh_rate_limiter.settings.app, "rate_limit_requests", 1)
    headers = {"X-Forwarded-For": "192.0.2.200", "X-Request-ID": "req-throttled"}

    client.post("/v1/images/generate", json={"prompt": ""}, headers=headers)
    resp = client.post("/v1/images/generate", json={"prompt": ""}, headers=headers)

    assert resp.status_code == 429
    assert resp.headers.get("X-Request-ID") == "req-throttled"
