"""Tests for Prometheus metrics.

The prometheus-client default registry is global and counters only go
up, so every assertion is on a DELTA: read, act, read again.
"""

from __future__ import annotations

from fastapi.testclient import TestClient
from prometheus_client import REGISTRY

from tests.conftest import auth


def _get_sample(name: str, labels: dict | None = None) -> float:
    value = REGISTRY.get_sample_value(name, labels=labels or {})
    return value if value is not None else 0.0


def test_request_counter_increments(client: TestClient) -> None:
    labels = {"method": "GET", "endpoint": "/health", "status_code": "200"}
    before = _get_sample("http_requests_total", labels)
    client.get("/health")
    assert _get_sample("http_requests_total", labels) - before >= 1


def test_request_duration_histogram_observes(client: TestClient) -> None:
    labels = {"method": "GET", "endpoint": "/health"}
    before = _get_sample("http_request_duration_seconds_count", labels)
    client.get("/health")
    assert _get_sample("http_request_duration_seconds_count", labels) - before >= 1


def test_endpoint_label_uses_route_template(client: TestClient, admin_token: str) -> None:
    labels = {
        "method": "POST",
        "endpoint": "/api/credentials/{credential_id}/revoke",
        "status_code": "404",
    }
    before = _get_sample("http_requests_total", labels)
    client.post("/api/credentials/abc/revoke", headers=auth(admin_token))
    assert _get_sample("http_requests_total", labels) - before >= 1


def test_verification_outcomes_are_counted(client: TestClient) -> None:
    labels = {"outcome": "not_found"}
    before = _get_sample("credential_verifications_total", labels)
    client.post("/api/credentials/verify", json={"credentialId": "missing"})
    assert _get_sample("credential_verifications_total", labels) - before == 1


def test_revocations_are_counted(client: TestClient, admin_token: str) -> None:
    issued = client.post(
        "/api/credentials/issue",
        json={"studentId": "2024CSE001", "type": "certificate", "data": {}},
        headers=auth(admin_token),
    ).json()
    before = _get_sample("credential_revocations_total")
    client.post(f"/api/credentials/{issued['id']}/revoke", headers=auth(admin_token))
    assert _get_sample("credential_revocations_total") - before == 1


def test_metrics_endpoint_returns_prometheus_format(client: TestClient) -> None:
    client.get("/health")
    resp = client.get("/metrics")
    assert resp.status_code == 200
    assert "http_requests_total" in resp.text
    assert "credential_verifications_total" in resp.text


def test_metrics_endpoint_not_self_instrumented(client: TestClient) -> None:
    labels = {"method": "GET", "endpoint": "/metrics", "status_code": "200"}
    before = _get_sample("http_requests_total", labels)
    client.get("/metrics")
    client.get("/metrics")
    assert _get_sample("http_requests_total", labels) == before
