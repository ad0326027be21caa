"""
HTTP tests: workflow routes, cache headers, error envelopes, CORS and
security headers.
"""
import pytest
from fastapi.testclient import TestClient
from pydantic import ValidationError

from app.main import app
from config.settings import Settings, settings

client = TestClient(app)

ALLOWED_ORIGIN = "http://localhost:3000"


def test_health_endpoint_returns_ok():
    """Test that /health returns status: ok"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_list_endpoint_envelope_and_cache_headers(upstream):
    upstream.set_list({"workflows": [{"workflowId": "welcome"}], "totalCount": 4})
    upstream.set_detail("welcome", {"data": {"_id": "1", "workflowId": "welcome", "tags": "onboarding"}})

    response = client.get("/api/workflows")
    assert response.status_code == 200
    assert response.headers["X-Cache"] == "MISS"
    assert response.headers["X-Cache-Key"] == "full-workflows:page=0:pageSize=50"

    body = response.json()
    assert body["success"] is True
    assert body["data"]["totalCount"] == 4
    assert body["data"]["page"] == 0
    assert body["data"]["pageSize"] == 50
    item = body["data"]["data"][0]
    assert item["id"] == "1"
    assert item["workflowId"] == "welcome"
    assert item["tags"] == ["onboarding"]
    assert item["name"] == "1"

    assert client.get("/api/workflows").headers["X-Cache"] == "HIT"


def test_list_endpoint_refresh_param(upstream):
    client.get("/api/workflows")
    response = client.get("/api/workflows?refresh=1")
    assert response.headers["X-Cache"] == "MISS-REFRESH"
    assert upstream.count("list") == 2


def test_list_endpoint_upstream_failure(upstream):
    upstream.set_list(status_code=503, text="maintenance")

    response = client.get("/api/workflows")
    assert response.status_code == 503
    assert response.json() == {
        "success": False,
        "error": "API request failed",
        "details": "maintenance",
    }


def test_detail_endpoint(upstream):
    upstream.set_detail("digest", {"data": {"id": "digest", "status": "active"}})

    response = client.get("/api/workflows/digest")
    assert response.status_code == 200
    assert response.headers["X-Cache"] == "MISS"
    assert response.headers["X-Cache-Key"] == "detail:digest"
    data = response.json()["data"]
    assert data["active"] is True
    assert data["status"] == "active"


def test_detail_endpoint_propagates_upstream_status(upstream):
    response = client.get("/api/workflows/missing")
    assert response.status_code == 404
    assert response.json()["success"] is False
    assert response.json()["details"] == "not found"


def test_missing_api_key_returns_500(monkeypatch, upstream):
    monkeypatch.setattr(settings, "novu_secret_key", None)

    response = client.get("/api/workflows")
    assert response.status_code == 500
    assert "NOVU_SECRET_KEY" in response.json()["error"]
    assert upstream.calls == []


def test_security_headers_on_every_response():
    response = client.get("/health")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "SAMEORIGIN"
    assert response.headers["Referrer-Policy"] == "no-referrer"
    assert "max-age=63072000" in response.headers["Strict-Transport-Security"]


def test_allowed_origin_gets_cors_headers(upstream):
    response = client.get("/api/workflows", headers={"Origin": ALLOWED_ORIGIN})
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == ALLOWED_ORIGIN
    assert response.headers["access-control-allow-credentials"] == "true"


def test_disallowed_origin_is_rejected(upstream):
    response = client.get("/api/workflows", headers={"Origin": "https://evil.example"})
    assert response.status_code == 403
    assert response.json()["success"] is False
    assert upstream.calls == []


def test_preflight_from_allowed_origin():
    response = client.options(
        "/api/workflows",
        headers={"Origin": ALLOWED_ORIGIN, "Access-Control-Request-Method": "GET"},
    )
    assert response.status_code == 200
    assert response.headers["access-control-max-age"] == "86400"


def test_preflight_from_disallowed_origin_is_rejected(upstream):
    response = client.options(
        "/api/workflows",
        headers={"Origin": "https://evil.example", "Access-Control-Request-Method": "GET"},
    )
    assert response.status_code == 403
    assert response.json()["error"] == "CORS policy violation: Origin not allowed"
    assert "access-control-allow-origin" not in response.headers
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert upstream.calls == []


def test_detail_max_workers_must_be_positive():
    with pytest.raises(ValidationError):
        Settings(detail_max_workers=0)
    assert Settings(detail_max_workers=1).detail_max_workers == 1


def test_cache_stats_endpoint(upstream):
    client.get("/api/workflows")
    stats = client.get("/cache/stats").json()
    assert stats["workflow_list"]["misses"] == 1
    assert stats["workflow_detail"]["entries"] == 0
