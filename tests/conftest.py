import os
import tempfile

# The server module builds its default app at import time; keep that
# default store out of the working directory.
os.environ.setdefault("NOGGER_LOGS_DIR", tempfile.mkdtemp(prefix="nogger-default-"))

from datetime import datetime, timezone  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from core.events.event_validator import EventValidator  # noqa: E402
from runtime.api.server import create_app  # noqa: E402
from runtime.store.log_store import LogStore  # noqa: E402


FIXED_NOW = datetime(2025, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)


@pytest.fixture()
def logs_dir(tmp_path):
    return tmp_path / "logs"


@pytest.fixture()
def store(logs_dir) -> LogStore:
    return LogStore(logs_dir=logs_dir)


@pytest.fixture()
def validator() -> EventValidator:
    return EventValidator(now=lambda: FIXED_NOW)


@pytest.fixture()
def client(logs_dir) -> TestClient:
    """Create a test client for an app backed by a temporary log directory."""
    return TestClient(create_app(logs_dir=logs_dir))
