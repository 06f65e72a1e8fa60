from fastapi.testclient import TestClient

from src.codekt.api.main import APP_NAME, app
from src.codekt.observability.metrics import sanitize_path


client = TestClient(app)


def test_root_reports_name_and_version():
    assert client.get("/").json() == {"name": APP_NAME, "version": "0.1.0"}


def test_health_endpoints():
    for path in ("/health", "/api/health"):
        body = client.get(path).json()
        assert body["status"] == "ok"
        assert body["timestamp"].endswith("Z")
        assert body["components"]["repo"] == "in-memory"


def test_metrics_exposes_latency_histogram():
    client.get("/api/projects/current")
    resp = client.get("/metrics")
    assert resp.status_code == 200
    assert "codekt_request_latency_seconds" in resp.text
    assert 'path="/projects"' in resp.text


def test_sanitize_path_collapses_mount_prefixes():
    assert sanitize_path("/api/kt/conversations/12/messages") == "/conversations"
    assert sanitize_path("/conversations/3") == "/conversations"
    assert sanitize_path("/api/files/content/src/App.tsx") == "/files"
    assert sanitize_path("/api") == "/"
    assert sanitize_path("") == "/"


def test_cors_allows_dashboard_origin():
    resp = client.options(
        "/api/projects/current",
        headers={"Origin": "http://localhost:5173", "Access-Control-Request-Method": "GET"},
    )
    assert resp.headers["access-control-allow-origin"] == "http://localhost:5173"
