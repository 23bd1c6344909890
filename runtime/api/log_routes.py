"""HTTP routes for submitting, reading and clearing events.

Exposes (mounted under /api):

- POST   /log             -> generic submission {type, title, description?, metadata?}
- POST   /log/api-failed  -> shorthand for type "api-failed"
- POST   /log/error       -> shorthand for type "error"
- POST   /log/info        -> shorthand for type "info"
- GET    /logs            -> most recent entries of a stream, newest first
- DELETE /logs            -> clear one stream or all of them
- GET    /health          -> readiness of the log directory
"""

import logging
from collections.abc import Mapping
from typing import Any, Dict, Optional

from fastapi import APIRouter, HTTPException, Query, Request

from core.events.event_validator import EventValidator
from runtime import __version__
from ..models.api_models import (
    ClearResponse,
    HealthResponse,
    LogRequest,
    LogResponse,
    LogsResponse,
    TypedLogRequest,
)
from ..models.log_models import (
    ClearSelector,
    EventType,
    StreamSelector,
    parse_event_type,
    utc_timestamp,
)
from ..store.log_store import STREAM_FILES, LogStore


logger = logging.getLogger(__name__)

router = APIRouter()


# Module-level references, to be initialized by the server.
_LOG_STORE: Optional[LogStore] = None
_VALIDATOR: Optional[EventValidator] = None
_SOURCE_TAG: str = "react-native-app"
_DEFAULT_LIMIT: int = 100


def init_routes(
    log_store: LogStore,
    validator: EventValidator,
    source_tag: str,
    default_limit: int,
) -> None:
    """Initialize module-level references used by the route handlers."""
    global _LOG_STORE, _VALIDATOR, _SOURCE_TAG, _DEFAULT_LIMIT
    _LOG_STORE = log_store
    _VALIDATOR = validator
    _SOURCE_TAG = source_tag
    _DEFAULT_LIMIT = default_limit


def require_log_store() -> LogStore:
    if _LOG_STORE is None:
        raise HTTPException(
            status_code=500,
            detail="LogStore is not configured on the server.",
        )
    return _LOG_STORE


def _require_validator() -> EventValidator:
    if _VALIDATOR is None:
        raise HTTPException(
            status_code=500,
            detail="EventValidator is not configured on the server.",
        )
    return _VALIDATOR


def resolve_stream(value: Optional[str]) -> StreamSelector:
    """Map a `type` query value to a stream; unknown or absent means aggregate."""
    if value is None:
        return StreamSelector.AGGREGATE
    event_type = parse_event_type(value)
    if event_type is None:
        return StreamSelector.AGGREGATE
    return StreamSelector.for_type(event_type)


def _resolve_clear_selector(value: Optional[str]) -> ClearSelector:
    if value == ClearSelector.AGGREGATE.value:
        return ClearSelector.AGGREGATE
    event_type = parse_event_type(value) if value is not None else None
    if event_type is None:
        return ClearSelector.ALL
    return ClearSelector(event_type.value)


def _with_caller_context(metadata: Any, request: Request) -> Any:
    """Merge caller identity into metadata; leave malformed metadata for the validator."""
    if metadata is None:
        metadata = {}
    if not isinstance(metadata, Mapping):
        return metadata
    return {
        **metadata,
        "userAgent": request.headers.get("user-agent"),
        "ip": request.client.host if request.client else None,
        "source": _SOURCE_TAG,
    }


def submit_event(raw: Dict[str, Any], request: Request) -> LogResponse:
    """Validate a submission, enrich it with caller context and store it.

    Shared by the generic route and the three convenience routes.
    EventValidationError and LogStoreIOError propagate to the app's
    exception handlers.
    """
    log_store = require_log_store()
    validator = _require_validator()

    submission = dict(raw)
    submission["metadata"] = _with_caller_context(submission.get("metadata"), request)

    event = validator.validate(submission)
    log_store.append(event)

    return LogResponse(
        message="Log entry created successfully",
        timestamp=event.timestamp,
    )


def _submit_typed(event_type: EventType, body: TypedLogRequest, request: Request) -> LogResponse:
    raw = body.model_dump()
    raw["type"] = event_type.value
    return submit_event(raw, request)


@router.post("/log", response_model=LogResponse)
def create_log(body: LogRequest, request: Request) -> LogResponse:
    """Generic logging endpoint."""
    return submit_event(body.model_dump(), request)


@router.post("/log/api-failed", response_model=LogResponse)
def create_api_failed_log(body: TypedLogRequest, request: Request) -> LogResponse:
    return _submit_typed(EventType.API_FAILED, body, request)


@router.post("/log/error", response_model=LogResponse)
def create_error_log(body: TypedLogRequest, request: Request) -> LogResponse:
    return _submit_typed(EventType.ERROR, body, request)


@router.post("/log/info", response_model=LogResponse)
def create_info_log(body: TypedLogRequest, request: Request) -> LogResponse:
    return _submit_typed(EventType.INFO, body, request)


@router.get("/logs", response_model=LogsResponse)
def read_logs(
    type: Optional[str] = None,
    limit: Optional[int] = Query(default=None, ge=1),
) -> LogsResponse:
    """Return the most recent entries of a stream, newest first.

    `type` selects a typed stream (info, log, error, api-failed); anything
    else reads the aggregate stream.
    """
    log_store = require_log_store()
    stream = resolve_stream(type)
    entries = log_store.read(stream, limit or _DEFAULT_LIMIT)
    return LogsResponse(
        entries=entries,
        count=len(entries),
        stream=stream.value,
        file=STREAM_FILES[stream],
    )


@router.delete("/logs", response_model=ClearResponse)
def clear_logs(type: Optional[str] = None) -> ClearResponse:
    """Clear one stream (`type` given and known) or every stream."""
    log_store = require_log_store()
    selector = _resolve_clear_selector(type)
    log_store.clear(selector)

    if selector is ClearSelector.ALL:
        message = "All logs cleared"
    else:
        message = f"{selector.value} logs cleared"
    return ClearResponse(selector=selector.value, message=message)


# --------------------------------------------------------
# Endpoint: GET /health
# --------------------------------------------------------
@router.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """
    Simple health check endpoint for uptime monitoring.
    """
    log_store = require_log_store()
    status = log_store.health()
    return HealthResponse(
        ready=status.ready,
        message="Logging API is running" if status.ready else "Log directory is not writable",
        timestamp=utc_timestamp(),
        version=__version__,
    )
