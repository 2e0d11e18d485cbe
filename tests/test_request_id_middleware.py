from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from resume_scan.core.app_factory import create_app


@pytest.fixture
def client(test_settings, make_llm, repository):
    app = create_app(test_settings, llm_client=make_llm(), repository=repository)
    with TestClient(app) as test_client:
        yield test_client


def test_preserves_incoming_request_id_header(client: TestClient) -> None:
    incoming_id = "test-request-id-123"
    resp = client.get("/health", headers={"X-Request-ID": incoming_id})

    assert resp.status_code == 200
    assert resp.headers.get("X-Request-ID") == incoming_id


def test_generates_request_id_when_missing(client: TestClient) -> None:
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.headers.get("X-Request-ID")
    assert resp.headers.get("X-Request-Duration-ms") is not None


def test_error_body_carries_request_id(client: TestClient) -> None:
    resp = client.post(
        "/api/analyze",
        data={"jobDescription": "Python developer"},
        headers={"X-Request-ID": "req-missing-file"},
    )

    assert resp.status_code == 400
    assert resp.json()["request_id"] == "req-missing-file"
