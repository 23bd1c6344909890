"""HTML dashboard for browsing stored events.

GET /logs?type=<all|info|error|api-failed>&limit=<n>

Reads through the same LogStore.read() contract as the JSON API (newest
first, best-effort parsed) and renders every entry shape: SummaryLine for
the aggregate stream, Event or raw text for typed streams.
"""

import json
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Query
from fastapi.responses import HTMLResponse
from jinja2 import Environment, select_autoescape

from ..models.log_models import LEGACY_INFO_ALIAS, Entry, Event, StreamSelector, SummaryLine
from .log_routes import require_log_store, resolve_stream


router = APIRouter()

_DEFAULT_LIMIT: int = 50

LIMIT_OPTIONS = (25, 50, 100, 200)

FILTER_OPTIONS = (
    ("all", "All Logs"),
    ("info", "Info Logs"),
    ("error", "Error Logs"),
    ("api-failed", "API Failed"),
)

_JINJA_ENV = Environment(autoescape=select_autoescape(default=True))

_DASHBOARD_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Logging Dashboard</title>
  <style>
    * { margin: 0; padding: 0; box-sizing: border-box; }
    body { font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif;
           background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
           min-height: 100vh; padding: 20px; }
    .container { max-width: 1200px; margin: 0 auto; background: white;
                 border-radius: 15px; box-shadow: 0 20px 40px rgba(0,0,0,0.1); overflow: hidden; }
    .header { background: linear-gradient(135deg, #4facfe 0%, #00f2fe 100%);
              color: white; padding: 30px; text-align: center; }
    .header h1 { font-size: 2.5em; margin-bottom: 10px; }
    .controls { padding: 25px; background: #f8f9fa; border-bottom: 1px solid #e9ecef; }
    .control-group { display: flex; gap: 15px; align-items: center; flex-wrap: wrap; }
    .control-group label { font-weight: 600; color: #495057; }
    select, button { padding: 10px 15px; border: 2px solid #dee2e6; border-radius: 8px; font-size: 14px; }
    button { background: linear-gradient(135deg, #4facfe 0%, #00f2fe 100%);
             color: white; border: none; cursor: pointer; font-weight: 600; }
    .logs-container { padding: 25px; max-height: 600px; overflow-y: auto; }
    .log-entry { background: #f8f9fa; border: 1px solid #e9ecef; border-radius: 10px;
                 padding: 20px; margin-bottom: 15px; }
    .log-entry.error { border-left: 5px solid #dc3545; background: #fff5f5; }
    .log-entry.api-failed { border-left: 5px solid #fd7e14; background: #fff8f0; }
    .log-entry.info { border-left: 5px solid #28a745; background: #f0fff4; }
    .log-header { display: flex; justify-content: space-between; align-items: center; margin-bottom: 10px; }
    .log-type { background: #6c757d; color: white; padding: 4px 12px; border-radius: 20px;
                font-size: 12px; font-weight: 600; text-transform: uppercase; }
    .log-type.error { background: #dc3545; }
    .log-type.api-failed { background: #fd7e14; }
    .log-type.info { background: #28a745; }
    .log-timestamp { color: #6c757d; font-size: 12px; font-family: 'Courier New', monospace; }
    .log-title { font-size: 1.2em; font-weight: 600; color: #212529; margin-bottom: 8px; }
    .log-description { color: #6c757d; line-height: 1.4; margin-bottom: 10px; }
    .log-metadata { background: #e9ecef; padding: 10px; border-radius: 5px;
                    font-family: 'Courier New', monospace; font-size: 12px; color: #495057;
                    max-height: 150px; overflow-y: auto; white-space: pre-wrap; }
    .empty-state { text-align: center; padding: 50px; color: #6c757d; }
  </style>
</head>
<body>
  <div class="container">
    <div class="header">
      <h1>Nogger</h1>
      <p>Real-time monitoring of your app logs</p>
    </div>

    <div class="controls">
      <div class="control-group">
        <label for="logType">Filter by type:</label>
        <select id="logType" onchange="filterLogs()">
          {% for value, label in filter_options %}
          <option value="{{ value }}"{% if value == selected_type %} selected{% endif %}>{{ label }}</option>
          {% endfor %}
        </select>

        <label for="limitSelect">Show:</label>
        <select id="limitSelect" onchange="filterLogs()">
          {% for option in limit_options %}
          <option value="{{ option }}"{% if option == limit %} selected{% endif %}>{{ option }} entries</option>
          {% endfor %}
        </select>

        <button onclick="clearLogs()">Clear Logs</button>
        <button onclick="location.reload()">Refresh</button>
      </div>
    </div>

    <div class="logs-container">
      {% if entries %}
      {% for entry in entries %}
      <div class="log-entry {{ entry.css_type }}">
        {% if entry.type %}
        <div class="log-header">
          <span class="log-type {{ entry.css_type }}">{{ entry.type }}</span>
          <span class="log-timestamp">{{ entry.timestamp }}</span>
        </div>
        {% endif %}
        <div class="log-title">{{ entry.title }}</div>
        {% if entry.description %}
        <div class="log-description">{{ entry.description }}</div>
        {% endif %}
        {% if entry.metadata %}
        <div class="log-metadata"><strong>Metadata:</strong>
{{ entry.metadata }}</div>
        {% endif %}
      </div>
      {% endfor %}
      {% else %}
      <div class="empty-state">
        <h3>No logs found</h3>
        <p>Logs will appear here when your app sends events</p>
      </div>
      {% endif %}
    </div>
  </div>

  <script>
    function filterLogs() {
      const type = document.getElementById('logType').value;
      const limit = document.getElementById('limitSelect').value;
      const url = new URL(window.location);
      url.searchParams.set('type', type);
      url.searchParams.set('limit', limit);
      window.location.href = url.toString();
    }

    async function clearLogs() {
      if (confirm('Are you sure you want to clear all logs?')) {
        try {
          const response = await fetch('/api/logs', { method: 'DELETE' });
          const result = await response.json();
          if (result.success) {
            alert('Logs cleared successfully');
            location.reload();
          } else {
            alert('Failed to clear logs: ' + result.error);
          }
        } catch (error) {
          alert('Error clearing logs: ' + error.message);
        }
      }
    }
  </script>
</body>
</html>"""


def init_dashboard(default_limit: int) -> None:
    global _DEFAULT_LIMIT
    _DEFAULT_LIMIT = default_limit


def _entry_view(entry: Entry) -> Dict[str, Any]:
    """Flatten any entry shape into the fields the template uses."""
    if isinstance(entry, Event):
        return {
            "css_type": entry.type.value,
            "type": entry.type.value,
            "timestamp": entry.timestamp,
            "title": entry.title,
            "description": entry.description,
            "metadata": json.dumps(entry.metadata, indent=2, ensure_ascii=False)
            if entry.metadata
            else "",
        }
    if isinstance(entry, SummaryLine):
        css_type = entry.type or ""
        # Legacy aggregate lines were tagged LOG for info events.
        if css_type == LEGACY_INFO_ALIAS:
            css_type = "info"
        return {
            "css_type": css_type,
            "type": entry.type,
            "timestamp": entry.timestamp,
            "title": entry.title,
            "description": entry.description,
            "metadata": "",
        }
    return {
        "css_type": "",
        "type": None,
        "timestamp": None,
        "title": entry,
        "description": None,
        "metadata": "",
    }


def render_dashboard(entries: List[Entry], selected_type: str, limit: int) -> str:
    template = _JINJA_ENV.from_string(_DASHBOARD_TEMPLATE)
    return template.render(
        entries=[_entry_view(entry) for entry in entries],
        selected_type=selected_type,
        limit=limit,
        filter_options=FILTER_OPTIONS,
        limit_options=LIMIT_OPTIONS,
    )


@router.get("/logs", response_class=HTMLResponse)
def logs_page(
    type: Optional[str] = None,
    limit: Optional[int] = Query(default=None, ge=1),
) -> HTMLResponse:
    log_store = require_log_store()
    stream = resolve_stream(type)
    limit = limit or _DEFAULT_LIMIT
    entries = log_store.read(stream, limit)

    selected_type = "all" if stream is StreamSelector.AGGREGATE else stream.value
    return HTMLResponse(content=render_dashboard(entries, selected_type, limit))
