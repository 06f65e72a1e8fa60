import pytest
from fastapi.testclient import TestClient

from src.codekt.api.main import app
from src.codekt.infrastructure.repository import InMemoryProjectRepository, get_repo


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def empty_client(client):
    repo = InMemoryProjectRepository(seed=False)
    app.dependency_overrides[get_repo] = lambda: repo
    return client


def test_current_project_is_seeded_demo(client):
    resp = client.get("/api/projects/current")
    assert resp.status_code == 200
    body = resp.json()
    assert body["name"] == "Demo Frontend App"
    assert body["rootPath"] == "./src"
    assert body["buildTool"] == "Vite"
    assert body["status"] == "completed"
    assert body["lastScanned"] is not None


def test_same_routes_are_served_without_api_prefix(client):
    assert client.get("/projects/current").json()["id"] == client.get("/api/projects/current").json()["id"]


def test_current_metrics(client):
    body = client.get("/api/projects/current/metrics").json()
    assert body["totalFiles"] == 45
    assert body["totalLines"] == 8500
    assert body["totalComponents"] == 24
    assert body["projectId"] == 1


def test_patch_metrics_only_touches_given_fields(client):
    resp = client.patch("/api/projects/current/metrics", json={"totalFiles": 50})
    assert resp.status_code == 200
    body = resp.json()
    assert body["totalFiles"] == 50
    assert body["totalLines"] == 8500


def test_listings_return_seeded_records(client):
    components = client.get("/api/projects/current/components").json()
    services = client.get("/api/projects/current/services").json()
    routes = client.get("/api/projects/current/routes").json()
    deps = client.get("/api/projects/current/dependencies").json()
    assert len(components) == 8
    assert components[0]["name"] == "AppSidebar"
    assert components[0]["filePath"] == "src/components/layout/AppSidebar.tsx"
    assert [s["name"] for s in services] == ["ApiService", "ThemeService", "StorageService", "AuthService"]
    assert services[3]["dependencies"] == ["ApiService"]
    assert [r["path"] for r in routes][:2] == ["/", "/architecture"]
    assert len(deps) == 8
    assert client.get("/api/projects/current/modules").json() == []


def test_architecture_starts_with_app_module(client):
    nodes = client.get("/api/projects/current/architecture").json()
    assert nodes[0]["id"] == "module-app"
    assert nodes[0]["filePath"] == "src/App.tsx"
    kinds = [n["type"] for n in nodes]
    assert kinds.count("page") == 6
    assert kinds.count("component") == 8
    assert kinds.count("service") == 4
    # pages, then components, then services
    assert kinds.index("page") < kinds.index("component") < kinds.index("service")


def test_flows_and_file_tree(client):
    flows = client.get("/api/projects/current/flows").json()
    assert [f["id"] for f in flows] == ["flow-login", "flow-chat", "flow-scan"]
    assert flows[0]["steps"][0]["id"] == "step-1"
    tree = client.get("/api/projects/current/files").json()
    assert any(node["type"] == "folder" for node in tree)


def test_configure_project_becomes_current(client):
    resp = client.post(
        "/api/projects/configure",
        json={"name": "Shop", "rootPath": "./app", "framework": "Vue"},
    )
    assert resp.status_code == 201
    project = resp.json()
    assert project["id"] == 2
    assert project["status"] == "pending"

    current = client.get("/api/projects/current").json()
    assert current["name"] == "Shop"
    metrics = client.get("/api/projects/current/metrics").json()
    assert metrics["totalFiles"] == 0
    assert metrics["projectId"] == 2
    assert client.get("/api/projects/current/components").json() == []
    assert len(client.get("/api/projects").json()) == 2


def test_create_component_on_current_project(client):
    resp = client.post(
        "/api/projects/current/components",
        json={"name": "Footer", "type": "layout", "filePath": "src/components/layout/Footer.tsx"},
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["id"] == 9
    assert body["projectId"] == 1
    assert body["props"] == []
    names = [c["name"] for c in client.get("/api/projects/current/components").json()]
    assert names[-1] == "Footer"


def test_create_route_requires_fields(client):
    resp = client.post("/api/projects/current/routes", json={"componentName": "Nope"})
    assert resp.status_code == 422


def test_scan_marks_project_scanning(client):
    resp = client.post("/api/projects/scan")
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "message": "Scan started"}
    assert client.get("/api/projects/current").json()["status"] == "scanning"


def test_file_content_known_and_placeholder(client):
    app_source = client.get("/api/files/content/src/App.tsx").json()
    assert "export default function App()" in app_source
    placeholder = client.get("/api/files/content/src/lib/missing.ts").json()
    assert placeholder.startswith("// File: src/lib/missing.ts")


def test_without_project(empty_client):
    assert empty_client.get("/api/projects/current").status_code == 404
    assert empty_client.get("/api/projects/current/metrics").status_code == 404
    assert empty_client.get("/api/projects/current/components").json() == []
    assert empty_client.get("/api/projects/current/architecture").json() == []
    assert empty_client.get("/api/projects").json() == []
    resp = empty_client.post(
        "/api/projects/current/services",
        json={"name": "X", "filePath": "x.ts"},
    )
    assert resp.status_code == 404
    assert empty_client.post("/api/projects/scan").json()["success"] is True


def test_configured_project_without_metrics_returns_empty_object(empty_client):
    from src.codekt.domain.models import ProjectCreate

    repo = app.dependency_overrides[get_repo]()
    repo.create_project(ProjectCreate(name="Bare"))
    assert empty_client.get("/api/projects/current/metrics").json() == {}
