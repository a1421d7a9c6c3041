from fastapi.testclient import TestClient
from algotrace.catalog import Catalog
from algotrace.config import Settings
from algotrace.generator import TraceGenerator
from algotrace.metrics import FixedMetrics
from algotrace.pipeline import TracePipeline
from algotrace.storage import Storage
from api.main import create_app

QUICKSORT_JS = "function quickSort(arr) { const pivot = arr[arr.length - 1]; }"

def _client():
    settings = Settings()
    catalog = Catalog.from_file(settings.catalog_path)
    pipeline = TracePipeline(catalog, generator=TraceGenerator(clock=lambda: 0), metrics=FixedMetrics(12.5, 4096))
    return TestClient(create_app(catalog, storage=Storage(), pipeline=pipeline, settings=settings))

def test_health():
    assert _client().get("/health").json() == {"ok": True}

def test_detect():
    r = _client().post("/api/algorithm/detect", json={"code": QUICKSORT_JS, "language": "javascript"})
    assert r.status_code == 200
    body = r.json()
    assert body["algorithmType"] == "sorting"
    assert 0 < body["confidence"] <= 1

def test_detect_and_execute_require_code_and_language():
    client = _client()
    for path in ("/api/algorithm/detect", "/api/execute"):
        r = client.post(path, json={"code": "x = 1"})
        assert r.status_code == 400
        assert r.json()["detail"] == "Code and language are required"
        assert client.post(path, json={"code": "", "language": "python"}).status_code == 400

def test_malformed_body_is_400():
    r = _client().post("/api/algorithm/detect", json={"code": ["not", "a", "string"], "language": "js"})
    assert r.status_code == 400
    assert r.json()["detail"] == "Invalid request data"
    assert r.json()["errors"]

def test_execute_sorting():
    r = _client().post("/api/execute", json={"code": QUICKSORT_JS, "language": "javascript"})
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["executionTime"] == 12.5
    assert body["finalState"] == [4, 7, 11, 12, 13, 15, 16, 18, 19]
    assert body["steps"][0]["action"] == "INIT_ARRAY"

def test_execute_with_input_override():
    r = _client().post("/api/execute", json={
        "code": "def binary_search(arr, target): pass", "language": "python",
        "input": {"array": [2, 4, 6], "target": 6},
    })
    assert r.json()["finalState"] == {"found": True, "index": 2, "target": 6}

def test_render_roundtrip():
    client = _client()
    steps = client.post("/api/execute", json={"code": QUICKSORT_JS, "language": "javascript"}).json()["steps"]
    r = client.post("/api/render", json={"step": steps[1]})
    assert r.status_code == 200
    assert r.json()["svg"].startswith("<svg")
    assert client.post("/api/render", json={"step": {"action": "FLY"}}).status_code == 400

def test_algorithms_endpoints():
    client = _client()
    items = client.get("/api/algorithms").json()
    assert items and "timeComplexity" in items[0]
    one = client.get(f"/api/algorithms/{items[0]['id']}").json()
    assert one["name"] == items[0]["name"]
    graph = client.get("/api/algorithms/category/graph").json()
    assert graph and all(a["category"] == "graph" for a in graph)
    assert client.get("/api/algorithms/missing").status_code == 404

def test_project_lifecycle():
    client = _client()
    r = client.post("/api/projects", json={"name": "demo", "language": "python", "code": "x", "isPublic": True})
    assert r.status_code == 201
    project = r.json()
    assert project["isPublic"] is True and "createdAt" in project

    assert [p["id"] for p in client.get("/api/projects/public").json()] == [project["id"]]
    r = client.patch(f"/api/projects/{project['id']}", json={"name": "renamed"})
    assert r.json()["name"] == "renamed"

    algorithm = client.get("/api/algorithms").json()[0]
    r = client.post("/api/visualizations", json={"projectId": project["id"], "algorithmId": algorithm["id"],
                                                 "steps": [], "duration": "3s"})
    assert r.status_code == 201
    vis = r.json()
    assert client.get(f"/api/projects/{project['id']}/visualizations").json()[0]["id"] == vis["id"]

    r = client.delete(f"/api/projects/{project['id']}")
    assert r.json() == {"message": "Project deleted successfully"}
    assert client.get(f"/api/projects/{project['id']}").status_code == 404
    assert client.get(f"/api/visualizations/{vis['id']}").json()["projectId"] is None

def test_project_errors():
    client = _client()
    assert client.post("/api/projects", json={"name": "demo"}).status_code == 400
    r = client.post("/api/projects", json={"userId": "ghost", "name": "d", "language": "py", "code": ""})
    assert r.status_code == 400
    assert client.patch("/api/projects/missing", json={"name": "x"}).status_code == 404
    assert client.delete("/api/projects/missing").status_code == 404
    assert client.get("/api/visualizations/missing").status_code == 404
    assert client.post("/api/visualizations", json={"projectId": "missing", "steps": []}).status_code == 400

def test_render_rejects_bad_payload_shapes():
    client = _client()
    bad_data = {"action": "EXECUTE", "dataStructures": [{"type": "array", "name": "a", "data": 5}]}
    bad_bounds = {"action": "EXECUTE", "dataStructures": [
        {"type": "array", "name": "a", "data": [1, 2], "left": "x", "right": 1}]}
    for step in (bad_data, bad_bounds):
        r = client.post("/api/render", json={"step": step})
        assert r.status_code == 400
        assert r.json()["detail"].startswith("Invalid step")

class _BrokenPipeline:
    def detect(self, code, language):
        raise RuntimeError("classifier exploded")

    def trace(self, code, language, input=None):
        raise RuntimeError("generator exploded")

def test_pipeline_faults_are_logged_as_flat_500(caplog):
    settings = Settings()
    client = TestClient(create_app(Catalog.from_file(settings.catalog_path), storage=Storage(),
                                   pipeline=_BrokenPipeline(), settings=settings))
    payload = {"code": "x = 1", "language": "python"}
    with caplog.at_level("ERROR", logger="api.main"):
        r = client.post("/api/algorithm/detect", json=payload)
        assert r.status_code == 500
        assert r.json() == {"detail": "Failed to detect algorithm"}
        r = client.post("/api/execute", json=payload)
        assert r.status_code == 500
        assert r.json() == {"detail": "Failed to execute code"}
    messages = [rec.getMessage() for rec in caplog.records if rec.name == "api.main"]
    assert "Error detecting algorithm" in messages
    assert "Error executing code" in messages
    assert all(rec.exc_info for rec in caplog.records if rec.name == "api.main")

def test_oversize_graph_input_falls_back_to_generic_walk():
    r = _client().post("/api/execute", json={
        "code": "graph dfs adjacency", "language": "javascript",
        "input": {"nodes": 3000000, "edges": []},
    })
    assert r.status_code == 200
    body = r.json()
    assert body["algorithmType"] == "graph"
    assert [s["action"] for s in body["steps"]] == ["EXECUTE"]
    assert body["finalState"] is None
