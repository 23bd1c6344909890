from fastapi.testclient import TestClient

from runtime.api.dashboard import render_dashboard
from runtime.models.log_models import Event, EventType, SummaryLine


def test_dashboard_shows_empty_state(client: TestClient) -> None:
    response = client.get("/logs")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert "No logs found" in response.text


def test_dashboard_lists_aggregate_entries(client: TestClient) -> None:
    client.post("/api/log", json={"type": "error", "title": "Crash", "description": "npe"})
    client.post("/api/log", json={"type": "info", "title": "Opened"})

    html = client.get("/logs").text
    assert "No logs found" not in html
    assert html.index("Opened") < html.index("Crash")
    assert "npe" in html
    assert '<option value="all" selected>' in html
    assert '<option value="50" selected>' in html


def test_dashboard_shows_metadata_for_typed_stream(client: TestClient) -> None:
    client.post(
        "/api/log",
        json={"type": "api-failed", "title": "GET /users", "metadata": {"status": 503}},
    )

    html = client.get("/logs", params={"type": "api-failed", "limit": 25}).text
    assert "GET /users" in html
    assert "Metadata:" in html
    assert "503" in html
    assert '<option value="api-failed" selected>' in html
    assert '<option value="25" selected>' in html


def test_render_dashboard_escapes_html_and_handles_raw_text() -> None:
    entries = [
        Event(
            timestamp="2025-01-01T00:00:00.000Z",
            type=EventType.ERROR,
            title="<script>alert(1)</script>",
        ),
        SummaryLine(title="unparsed aggregate line"),
        "raw record text",
    ]
    html = render_dashboard(entries, selected_type="error", limit=50)
    assert "<script>alert(1)</script>" not in html
    assert "&lt;script&gt;" in html
    assert "unparsed aggregate line" in html
    assert "raw record text" in html
