"""
Event and stream models for the Nogger log store.

These describe:
- EventType enum (INFO, ERROR, API_FAILED) and the legacy "log" alias
- the immutable Event accepted by the store
- StreamSelector / ClearSelector naming the persisted partitions
- SummaryLine, the parsed form of an aggregate-stream line
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class EventType(str, Enum):
    INFO = "info"
    ERROR = "error"
    API_FAILED = "api-failed"


# Wire tag historically sent by clients for informational events.
LEGACY_INFO_ALIAS = "log"


def parse_event_type(value: str) -> Optional[EventType]:
    """Map a wire value (including the "log" alias) to an EventType, or None."""
    if value == LEGACY_INFO_ALIAS:
        return EventType.INFO
    try:
        return EventType(value)
    except ValueError:
        return None


class StreamSelector(str, Enum):
    AGGREGATE = "aggregate"
    INFO = "info"
    ERROR = "error"
    API_FAILED = "api-failed"

    @classmethod
    def for_type(cls, event_type: EventType) -> "StreamSelector":
        return cls(event_type.value)

    @property
    def is_typed(self) -> bool:
        return self is not StreamSelector.AGGREGATE


class ClearSelector(str, Enum):
    ALL = "all"
    AGGREGATE = "aggregate"
    INFO = "info"
    ERROR = "error"
    API_FAILED = "api-failed"


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2025-01-01T12:00:00.000Z."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


class Event(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: str
    type: EventType
    title: str = Field(min_length=1)
    description: str = ""
    metadata: Dict[str, Any] = Field(default_factory=dict)

    def to_summary_line(self) -> str:
        """Compact one-line form written to the aggregate stream.

        Line breaks inside title/description are folded into spaces so
        that every event stays on exactly one line.
        """
        line = f"[{self.timestamp}] [{self.type.value.upper()}] {_one_line(self.title)}"
        if self.description:
            line += f" - {_one_line(self.description)}"
        return line


def _one_line(text: str) -> str:
    return " ".join(text.splitlines())


class SummaryLine(BaseModel):
    """A parsed aggregate-stream line.

    Lines that do not match the compact format only carry `title`
    (the raw line).
    """
    timestamp: Optional[str] = None
    type: Optional[str] = None
    title: str
    description: Optional[str] = None


# A single item returned by LogStore.read().
Entry = Union[Event, SummaryLine, str]
