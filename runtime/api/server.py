"""
FastAPI application entry point for the Nogger logging server.

Responsibilities:
- create the FastAPI app
- construct shared singletons (LogStore, EventValidator)
- translate domain errors into JSON responses
- include the /api routes and the /logs dashboard
"""

import logging
from pathlib import Path
from typing import Optional, Union

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from configs.settings import Settings, settings as default_settings
from core.events.event_validator import EventValidator
from exceptions.exceptions import EventValidationError, LogStoreIOError
from runtime import __version__
from runtime.store.log_store import LogStore
from . import dashboard, log_routes


logger = logging.getLogger(__name__)


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(EventValidationError)
    async def handle_validation_error(request: Request, exc: EventValidationError) -> JSONResponse:
        logger.warning("[API] Rejected event on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=400, content={"success": False, **exc.to_dict()})

    @app.exception_handler(LogStoreIOError)
    async def handle_store_error(request: Request, exc: LogStoreIOError) -> JSONResponse:
        logger.error("[API] Storage failure on %s %s: %s", request.method, request.url.path, exc)
        if request.method == "POST":
            message = "Failed to write log entry"
        else:
            message = "Failed to access log storage"
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": message, "streams": exc.streams},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("[API] Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Internal server error"},
        )


def create_app(
    logs_dir: Optional[Union[str, Path]] = None,
    config: Optional[Settings] = None,
) -> FastAPI:
    """Build the FastAPI app around a single shared LogStore.

    `logs_dir` overrides `config.logs_dir`; both default to the global
    settings.
    """
    config = config or default_settings

    # One store per process, shared by every handler.
    log_store = LogStore(logs_dir=logs_dir if logs_dir is not None else config.logs_dir)
    validator = EventValidator()

    app = FastAPI(title="Nogger Logging API", version=__version__)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _register_error_handlers(app)

    # Initialize the router modules with our shared objects, then include them.
    log_routes.init_routes(
        log_store=log_store,
        validator=validator,
        source_tag=config.source_tag,
        default_limit=config.default_read_limit,
    )
    dashboard.init_dashboard(default_limit=config.dashboard_limit)
    app.include_router(log_routes.router, prefix="/api")
    app.include_router(dashboard.router)

    logger.info("[API] Logs are saved in: %s", log_store.logs_dir.resolve())
    return app


app = create_app()
