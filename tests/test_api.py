import pytest
from fastapi.testclient import TestClient


def post_log(client: TestClient, path: str = "/api/log", **body):
    return client.post(path, json=body)


# --- submit ---


def test_submit_event_then_read_it_back(client: TestClient) -> None:
    response = post_log(
        client,
        type="error",
        title="Crash",
        description="npe",
        metadata={"screen": "Home"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["message"] == "Log entry created successfully"
    assert data["timestamp"].endswith("Z")

    logs = client.get("/api/logs", params={"type": "error", "limit": 10}).json()
    assert logs["count"] == 1
    assert logs["stream"] == "error"
    assert logs["file"] == "error_logs.txt"

    newest = logs["entries"][0]
    assert newest["title"] == "Crash"
    assert newest["type"] == "error"
    assert newest["description"] == "npe"
    assert newest["timestamp"] == data["timestamp"]
    assert newest["metadata"]["screen"] == "Home"
    assert newest["metadata"]["source"] == "react-native-app"
    assert newest["metadata"]["userAgent"] == "testclient"
    assert "ip" in newest["metadata"]


def test_submit_accepts_legacy_log_type(client: TestClient) -> None:
    assert post_log(client, type="log", title="Opened").status_code == 200
    entries = client.get("/api/logs", params={"type": "info"}).json()["entries"]
    assert [entry["title"] for entry in entries] == ["Opened"]


@pytest.mark.parametrize(
    "body, missing",
    [
        ({"title": "Crash"}, ["type"]),
        ({"type": "error"}, ["title"]),
        ({}, ["type", "title"]),
        ({"type": "error", "title": ""}, ["title"]),
    ],
)
def test_submit_rejects_missing_fields(client: TestClient, body: dict, missing: list) -> None:
    response = client.post("/api/log", json=body)
    assert response.status_code == 400
    data = response.json()
    assert data["success"] is False
    assert data["missing_fields"] == missing

    assert client.get("/api/logs").json()["count"] == 0


def test_submit_rejects_unknown_type(client: TestClient) -> None:
    response = post_log(client, type="warning", title="Careful")
    assert response.status_code == 400
    data = response.json()
    assert data["success"] is False
    assert data["invalid_type"] == "warning"
    assert "api-failed" in data["allowed_types"]

    assert client.get("/api/logs").json()["count"] == 0


def test_submit_rejects_non_object_metadata(client: TestClient) -> None:
    response = post_log(client, type="info", title="Open", metadata="screen=Home")
    assert response.status_code == 400
    assert response.json()["invalid_field"] == "metadata"


@pytest.mark.parametrize(
    "path, expected_type",
    [
        ("/api/log/api-failed", "api-failed"),
        ("/api/log/error", "error"),
        ("/api/log/info", "info"),
    ],
)
def test_convenience_routes_fix_the_type(client: TestClient, path: str, expected_type: str) -> None:
    response = post_log(client, path, title="Shortcut", description="d", metadata={"k": 1})
    assert response.status_code == 200

    (entry,) = client.get("/api/logs", params={"type": expected_type}).json()["entries"]
    assert entry["type"] == expected_type
    assert entry["title"] == "Shortcut"
    assert entry["metadata"]["k"] == 1


def test_convenience_route_ignores_type_in_body(client: TestClient) -> None:
    response = client.post("/api/log/error", json={"type": "info", "title": "Crash"})
    assert response.status_code == 200
    assert client.get("/api/logs", params={"type": "info"}).json()["count"] == 0
    assert client.get("/api/logs", params={"type": "error"}).json()["count"] == 1


def test_convenience_route_still_requires_title(client: TestClient) -> None:
    response = client.post("/api/log/api-failed", json={"description": "no title"})
    assert response.status_code == 400
    assert response.json()["missing_fields"] == ["title"]


# --- read ---


def test_read_defaults_to_aggregate_stream(client: TestClient) -> None:
    post_log(client, type="info", title="first")
    post_log(client, type="error", title="second", description="boom")

    logs = client.get("/api/logs").json()
    assert logs["stream"] == "aggregate"
    assert logs["file"] == "app_logs.txt"
    assert [entry["title"] for entry in logs["entries"]] == ["second", "first"]
    assert logs["entries"][0]["type"] == "error"
    assert logs["entries"][0]["description"] == "boom"


def test_read_unknown_type_falls_back_to_aggregate(client: TestClient) -> None:
    post_log(client, type="info", title="first")
    logs = client.get("/api/logs", params={"type": "nonsense"}).json()
    assert logs["stream"] == "aggregate"
    assert logs["count"] == 1


def test_read_respects_limit_newest_first(client: TestClient) -> None:
    for i in range(5):
        post_log(client, type="api-failed", title=f"call-{i}")

    logs = client.get("/api/logs", params={"type": "api-failed", "limit": 2}).json()
    assert [entry["title"] for entry in logs["entries"]] == ["call-4", "call-3"]
    assert logs["count"] == 2


def test_read_rejects_non_positive_limit(client: TestClient) -> None:
    assert client.get("/api/logs", params={"limit": 0}).status_code == 422


def test_read_empty_store(client: TestClient) -> None:
    logs = client.get("/api/logs", params={"type": "error"}).json()
    assert logs["success"] is True
    assert logs["entries"] == []
    assert logs["count"] == 0


# --- clear ---


def test_clear_single_type_keeps_aggregate(client: TestClient) -> None:
    post_log(client, type="error", title="Crash", description="npe", metadata={"screen": "Home"})

    response = client.delete("/api/logs", params={"type": "error"})
    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "cleared": True,
        "selector": "error",
        "message": "error logs cleared",
    }

    assert client.get("/api/logs", params={"type": "error"}).json()["entries"] == []
    aggregate = client.get("/api/logs").json()["entries"]
    assert [entry["title"] for entry in aggregate] == ["Crash"]


def test_clear_without_type_clears_everything_twice(client: TestClient) -> None:
    post_log(client, type="error", title="Crash")
    post_log(client, type="info", title="Open")

    for _ in range(2):
        response = client.delete("/api/logs")
        assert response.status_code == 200
        assert response.json()["selector"] == "all"

    for stream in (None, "info", "error", "api-failed"):
        params = {"type": stream} if stream else {}
        assert client.get("/api/logs", params=params).json()["count"] == 0


# --- health ---


def test_health_reports_ready(client: TestClient) -> None:
    data = client.get("/api/health").json()
    assert data["success"] is True
    assert data["ready"] is True
    assert data["version"] == "1.0.0"


def test_cors_headers_are_sent(client: TestClient) -> None:
    response = client.get("/api/health", headers={"Origin": "http://example.com"})
    assert response.headers["access-control-allow-origin"] == "*"


# --- storage failures ---


def test_submit_reports_storage_failure(client: TestClient, logs_dir) -> None:
    (logs_dir / "error_logs.txt").mkdir()

    response = post_log(client, type="error", title="Crash")
    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "error": "Failed to write log entry",
        "streams": ["error"],
    }


def test_read_reports_storage_failure(client: TestClient, logs_dir) -> None:
    (logs_dir / "info_logs.txt").mkdir()

    response = client.get("/api/logs", params={"type": "info"})
    assert response.status_code == 500
    assert response.json()["success"] is False
    assert response.json()["error"] == "Failed to access log storage"
