# events/event_validator.py
"""
Event validation for Nogger.

Turns an untyped submission (usually a decoded JSON body) into a canonical
Event, or rejects it:

    {
        "type": "error",              # required: info | error | api-failed ("log" = info)
        "title": "Crash",             # required, non-empty
        "description": "npe",         # optional, defaults to ""
        "metadata": {"screen": "Home"} # optional, defaults to {}
    }

The validator is a pure function of its input and its clock. It does NOT
know about FastAPI, request headers or the log files; the network layer
merges caller context (userAgent, ip, source) into metadata before handing
the submission over, and those keys pass through untouched.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional

from pydantic import JsonValue, TypeAdapter, ValidationError

from exceptions.exceptions import (
    InvalidFieldError,
    MissingFieldError,
    UnknownTypeError,
)
from runtime.models.log_models import (
    LEGACY_INFO_ALIAS,
    Event,
    EventType,
    parse_event_type,
    utc_timestamp,
)


REQUIRED_FIELDS = ("type", "title")

_METADATA_ADAPTER = TypeAdapter(Dict[str, JsonValue])

# Order matches the error message clients have always received.
ALLOWED_TYPES: List[str] = [
    EventType.API_FAILED.value,
    EventType.INFO.value,
    LEGACY_INFO_ALIAS,
    EventType.ERROR.value,
]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class EventValidator:
    """
    Validates raw submissions and builds immutable Event objects.

    Parameters
    ----------
    now:
        Clock used to stamp accepted events. Defaults to the current UTC
        time; tests can inject a fixed clock.
    """

    def __init__(self, now: Optional[Callable[[], datetime]] = None) -> None:
        self._now = now or _utc_now

    def validate(self, raw: Mapping[str, Any]) -> Event:
        """Return a canonical Event for `raw`.

        Raises
        ------
        MissingFieldError
            If `type` or `title` is absent, empty or not a string.
        UnknownTypeError
            If `type` is not one of the allowed types.
        InvalidFieldError
            If `description` or `metadata` has the wrong shape.
        """
        if not isinstance(raw, Mapping):
            raise InvalidFieldError("body", "expected an object")

        missing = [name for name in REQUIRED_FIELDS if not _is_text(raw.get(name))]
        if missing:
            raise MissingFieldError(missing)

        event_type = parse_event_type(raw["type"])
        if event_type is None:
            raise UnknownTypeError(raw["type"], ALLOWED_TYPES)

        description = raw.get("description")
        if description is None:
            description = ""
        elif not isinstance(description, str):
            raise InvalidFieldError("description", "expected a string")

        metadata = raw.get("metadata")
        if metadata is None:
            metadata = {}
        elif not isinstance(metadata, Mapping):
            raise InvalidFieldError("metadata", "expected an object")

        return Event(
            timestamp=utc_timestamp(self._now()),
            type=event_type,
            title=raw["title"],
            description=description,
            metadata=_copy_metadata(metadata),
        )


def _is_text(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def _copy_metadata(metadata: Mapping[str, Any]) -> Dict[str, Any]:
    """Deep-copy metadata, rejecting values that would not survive a JSON round trip.

    Tuples, sets, bytes and other non-JSON values are refused rather than
    silently converted, so a stored event reads back equal to the original.
    """
    # Keys must be strings to survive JSON serialization unchanged.
    keyed = {str(key): value for key, value in metadata.items()}
    try:
        return _METADATA_ADAPTER.validate_python(keyed)
    except ValidationError as e:
        raise InvalidFieldError("metadata", "values must be JSON values") from e
    except RecursionError as e:
        raise InvalidFieldError("metadata", "nested too deeply") from e


_default_validator = EventValidator()


def validate_event(raw: Mapping[str, Any]) -> Event:
    """Validate `raw` with a default (wall-clock) EventValidator."""
    return _default_validator.validate(raw)
