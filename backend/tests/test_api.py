import json
from unittest.mock import patch

from core.errors import AnalysisError, SchemaFetchError
from models.analysis import AnalyzeResponse


def test_health_check(client):
    with patch("api.health._check_ollama", return_value={"status": "up", "error": None}), \
         patch("api.health._check_ucode", return_value={"status": "up", "error": None}):

        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert response.json()["services"] == {
            "ollama": {"status": "up", "error": None},
            "ucode": {"status": "up", "error": None},
        }


def test_parse_endpoint(client):
    response = client.post("/api/dbml/parse", json={"dbml": "Table users {\n guid VARCHAR\n}\nRef: a.b > c.d"})
    assert response.status_code == 200
    data = response.json()
    assert data["tables"] == [{"name": "users", "columns": [{"name": "guid", "type": "VARCHAR"}]}]
    assert data["refs"] == [{"fromTable": "a", "fromColumn": "b", "toTable": "c", "toColumn": "d"}]


def test_standard_collection_endpoint(client, shop_dbml):
    response = client.post("/api/collections/standard", json={"dbml": shop_dbml, "project_id": "p1"})
    assert response.status_code == 200
    assert len(response.json()["item"]) == 7


def test_standard_collection_no_tables(client):
    response = client.post("/api/collections/standard", json={"dbml": "nothing"})
    assert response.status_code == 400
    assert response.json()["detail"] == "No tables found in the DBML content"


def test_ai_collection_endpoint(client, shop_dbml, shop_analysis):
    payload = {
        "dbml": shop_dbml,
        "project_id": "p1",
        "analysis": shop_analysis.model_dump(),
        "selected_tables": ["products"],
    }
    response = client.post("/api/collections/ai", json=payload)
    assert response.status_code == 200
    assert [f["name"] for f in response.json()["item"]] == ["📁 Files", "🛍️ Catalog"]


def test_analyze_endpoint_failure_is_502(client):
    with patch("api.analyze.run_analysis", side_effect=AnalysisError("AI returned invalid JSON")):
        response = client.post("/api/analyze", json={"dbml": "Table a {\n x INT\n}"})
    assert response.status_code == 502
    assert response.json()["detail"] == "AI returned invalid JSON"


def test_import_session_ai_flow(client, shop_dbml, shop_analysis):
    created = client.post("/api/imports", json={"project_id": "p1", "environment_id": "e1", "ai_enabled": True})
    assert created.status_code == 201
    sid = created.json()["session_id"]

    with patch("api.imports.run_analysis", return_value=AnalyzeResponse(analysis=shop_analysis, model="m")):
        state = client.post(f"/api/imports/{sid}/paste", json={"dbml": shop_dbml}).json()
    assert state["step"] == "ai-preview"
    assert state["selected_count"] == 4

    state = client.post(f"/api/imports/{sid}/selection/toggle", json={"table_name": "audit_log"}).json()
    assert state["selected_count"] == 3
    client.post(f"/api/imports/{sid}/selection/filter", json={"search": "ord"})
    rows = client.get(f"/api/imports/{sid}/tables").json()
    assert [r["name"] for r in rows] == ["orders", "order_products"]

    response = client.get(f"/api/imports/{sid}/collection")
    assert response.status_code == 200
    names = [f["name"] for f in json.loads(response.content)["item"]]
    assert "📦 Other Tables" not in names

    # Session is discarded after import
    assert client.get(f"/api/imports/{sid}").status_code == 404


def test_import_session_analysis_failure_and_fallback(client, shop_dbml):
    sid = client.post("/api/imports", json={"ai_enabled": True}).json()["session_id"]
    with patch("api.imports.run_analysis", side_effect=AnalysisError("AI analysis failed: timeout")):
        response = client.post(f"/api/imports/{sid}/paste", json={"dbml": shop_dbml})
    assert response.status_code == 502
    assert "timeout" in response.json()["detail"]

    state = client.post(f"/api/imports/{sid}/fallback").json()
    assert state["step"] == "preview"
    assert state["error"] is None
    assert client.get(f"/api/imports/{sid}/collection").status_code == 200


def test_import_session_fetch_failure(client):
    sid = client.post("/api/imports", json={"project_id": "p1", "environment_id": "e1"}).json()["session_id"]
    with patch("api.imports.UCodeClient.fetch_dbml", side_effect=SchemaFetchError("HTTP 401: Unauthorized")):
        response = client.post(f"/api/imports/{sid}/fetch")
    assert response.status_code == 502
    assert client.get(f"/api/imports/{sid}").json()["error"] == "HTTP 401: Unauthorized"


def test_import_session_errors(client):
    sid = client.post("/api/imports", json={}).json()["session_id"]
    assert client.post(f"/api/imports/{sid}/paste", json={"dbml": "no tables"}).status_code == 400
    assert client.post(f"/api/imports/{sid}/selection/select-all").status_code == 409
    assert client.get(f"/api/imports/{sid}/collection").status_code == 409
    assert client.post(f"/api/imports/{sid}/fetch").status_code == 400
    assert client.delete(f"/api/imports/{sid}").status_code == 200
    assert client.get("/api/imports/missing").status_code == 404
