"""
HTTP request/response models for the Nogger API.
"""

from pydantic import BaseModel
from typing import Any, List, Optional, Union

from .log_models import Event, SummaryLine


class LogRequest(BaseModel):
    """
    Body of POST /api/log.

    Every field is optional at the schema level; presence and shape of
    `type` and `title` are checked by the EventValidator so that clients
    get the same structured error for every kind of bad input.
    """
    type: Optional[Any] = None
    title: Optional[Any] = None
    description: Optional[Any] = None
    metadata: Optional[Any] = None


class TypedLogRequest(BaseModel):
    """Body of the convenience routes (type is fixed by the route)."""
    title: Optional[Any] = None
    description: Optional[Any] = None
    metadata: Optional[Any] = None


class LogResponse(BaseModel):
    success: bool = True
    message: str
    timestamp: str


class LogsResponse(BaseModel):
    """
    entries (newest first):
      - aggregate stream: SummaryLine objects
      - typed streams: Event objects, or raw text for unparsable records
    """
    success: bool = True
    entries: List[Union[Event, SummaryLine, str]]
    count: int
    stream: str
    file: str


class ClearResponse(BaseModel):
    success: bool = True
    cleared: bool = True
    selector: str
    message: str


class HealthResponse(BaseModel):
    success: bool = True
    ready: bool
    message: str
    timestamp: str
    version: str
