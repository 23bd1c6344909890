from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv


load_dotenv()


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(
            f"{name} must be an integer, got {raw!r}. Please fix your "
            "environment or .env file."
        ) from None


class Settings:
    """
    Central configuration for Nogger.

    Values are loaded once from environment variables (with sensible defaults)
    and then exposed via typed properties.
    """

    def __init__(self) -> None:
        # Event storage
        self._logs_dir = Path(os.getenv("NOGGER_LOGS_DIR", "logs"))
        self._default_read_limit = _int_from_env("NOGGER_DEFAULT_READ_LIMIT", 100)
        self._dashboard_limit = _int_from_env("NOGGER_DASHBOARD_LIMIT", 50)
        self._source_tag = os.getenv("NOGGER_SOURCE_TAG", "react-native-app")

        # HTTP server
        self._host = os.getenv("NOGGER_HOST", "0.0.0.0")
        self._port = _int_from_env("PORT", 3000)
        self._cors_origins = [
            origin.strip()
            for origin in os.getenv("NOGGER_CORS_ORIGINS", "*").split(",")
            if origin.strip()
        ]

        # Service's own diagnostics
        self._log_level = os.getenv("NOGGER_LOG_LEVEL", "INFO").upper()
        service_log_dir = os.getenv("NOGGER_SERVICE_LOG_DIR")
        self._service_log_dir = Path(service_log_dir) if service_log_dir else None

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    @property
    def logs_dir(self) -> Path:
        return self._logs_dir

    @property
    def default_read_limit(self) -> int:
        return self._default_read_limit

    @property
    def dashboard_limit(self) -> int:
        return self._dashboard_limit

    @property
    def source_tag(self) -> str:
        return self._source_tag

    # ------------------------------------------------------------------
    # HTTP server
    # ------------------------------------------------------------------

    @property
    def host(self) -> str:
        return self._host

    @property
    def port(self) -> int:
        return self._port

    @property
    def cors_origins(self) -> List[str]:
        return list(self._cors_origins)

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    @property
    def log_level(self) -> str:
        return self._log_level

    @property
    def service_log_dir(self) -> Optional[Path]:
        return self._service_log_dir


settings = Settings()
