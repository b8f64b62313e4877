"""Tests for the HTTP API surface."""

import json

import pytest
from fastapi.testclient import TestClient

from netledger.api import routes
from netledger.api.server import app
from netledger.config import Config

from conftest import FakeResponse, make_exchange


@pytest.fixture
def client(mixed_ledger, monkeypatch):
    monkeypatch.setattr(Config, "DEFAULT_RESOURCE_TYPES", ["xhr", "fetch", "document"])
    monkeypatch.setattr(Config, "API_TOKEN", "")
    routes.set_ledger(mixed_ledger)
    yield TestClient(app)
    routes._ledger = routes._renderer = routes._browser = None


def _ids(response):
    return [json.loads(line)["id"] for line in response.text.splitlines()]


def test_list_applies_default_resource_types(client):
    response = client.get("/network/requests")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/x-ndjson")
    assert _ids(response) == ["d1", "x1", "f1"]


def test_list_with_empty_resource_types_lists_everything(client):
    response = client.get("/network/requests", params={"resource_types": ""})
    assert _ids(response) == ["d1", "s1", "x1", "i1", "f1", "i2"]


def test_list_methods_and_types_are_or_combined(client):
    response = client.get("/network/requests", params={"methods": ["post"], "resource_types": ["image"]})
    assert _ids(response) == ["x1", "i1", "i2"]


def test_list_lines_carry_request_snippet(client):
    response = client.get("/network/requests", params={"methods": "POST", "resource_types": ""})
    first = json.loads(response.text.splitlines()[0])
    assert first["request_body_snippet"] == '{"q":"term"}'
    assert first["status"] is None


def test_body_not_found(client):
    response = client.get("/network/requests/nope/body")
    assert response.status_code == 404
    assert response.json()["detail"] == "Request with id nope not found."


def test_body_pending_is_conflict(client):
    response = client.get("/network/requests/d1/body")
    assert response.status_code == 409
    assert "does not have a response" in response.json()["detail"]


def test_body_json(client, mixed_ledger):
    mixed_ledger.record(
        make_exchange(
            "j1",
            "GET",
            "fetch",
            response=FakeResponse(headers={"content-type": "application/json"}, body=b'{"a":[1,2,3,4,5,6,7]}'),
        )
    )
    data = client.get("/network/requests/j1/body").json()
    assert data["kind"] == "json"
    assert data["content"] == '{"a":[1,2,3,4,5,"... (truncated, original length: 7)"]}'
    assert data["original_byte_length"] == 21
    assert data["truncated"] is False


def test_body_image_is_raw(client, mixed_ledger):
    png = b"\x89PNG\r\n\x1a\n" + b"\x00" * 10_000
    mixed_ledger.record(
        make_exchange("p1", "GET", "image", response=FakeResponse(headers={"content-type": "image/png"}, body=png))
    )
    response = client.get("/network/requests/p1/body")
    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    assert response.content == png


def test_body_opaque(client, mixed_ledger):
    mixed_ledger.record(
        make_exchange("o1", response=FakeResponse(headers={"content-type": "font/woff2"}, body=b"wOF2"))
    )
    data = client.get("/network/requests/o1/body").json()
    assert data["kind"] == "opaque"
    assert data["content_type"] == "font/woff2"
    assert "cannot be displayed" in data["content"]


def test_body_fetch_failure_is_bad_gateway(client, mixed_ledger):
    response = FakeResponse(headers={"content-type": "text/plain"}, error=RuntimeError("boom\ntrace"))
    mixed_ledger.record(make_exchange("e1", response=response))
    result = client.get("/network/requests/e1/body")
    assert result.status_code == 502
    assert result.json()["detail"] == "Could not retrieve body for request e1: boom"


def test_status_reports_ledger_size(client):
    data = client.get("/status").json()
    assert data["status"] == "ok"
    assert data["exchanges"] == 6
    assert data["recording"] is False


def test_navigate_without_browser_is_unavailable(client):
    response = client.post("/navigate", json={"url": "https://example.com"})
    assert response.status_code == 503


def test_uninitialized_ledger_is_unavailable():
    routes._ledger = routes._renderer = None
    response = TestClient(app).get("/network/requests")
    assert response.status_code == 503


def test_bearer_token_required_when_configured(client, monkeypatch):
    monkeypatch.setattr(Config, "API_TOKEN", "secret")
    assert client.get("/status").status_code == 401
    assert client.get("/status", headers={"Authorization": "Bearer secret"}).status_code == 200
    assert client.get("/healthz").status_code == 200
    assert client.get("/status", headers={"Authorization": "Bearer wrong"}).status_code == 401


def test_rejection_advertises_bearer_scheme(client, monkeypatch):
    monkeypatch.setattr(Config, "API_TOKEN", "secret")
    response = client.get("/network/requests", headers={"Authorization": "Basic secret"})
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


def test_preflight_passes_without_token(client, monkeypatch):
    monkeypatch.setattr(Config, "API_TOKEN", "secret")
    response = client.options(
        "/status",
        headers={"Origin": "http://localhost", "Access-Control-Request-Method": "GET"},
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "http://localhost"


def test_body_json_over_byte_ceiling_is_flagged(client, mixed_ledger):
    body = json.dumps({f"key{i}": i for i in range(2000)}).encode()
    mixed_ledger.record(
        make_exchange("w1", "GET", "fetch", response=FakeResponse(headers={"content-type": "application/json"}, body=body))
    )
    data = client.get("/network/requests/w1/body").json()
    assert data["kind"] == "json"
    assert data["truncated"] is True
    assert data["content_type"] == "application/json"
