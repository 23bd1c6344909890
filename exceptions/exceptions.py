"""
Custom exceptions for Nogger.

These exceptions are intentionally simple and descriptive.
They are used across:

  - core/events/       (event validation)
  - runtime/store/     (durable log streams)
  - runtime/api/       (translated into HTTP responses)

Placing them at the project root (exceptions/) avoids circular imports
and keeps exception types consistent across modules.
"""


class EventValidationError(Exception):
    """
    Base class for a rejected event submission.

    Raised before anything is written; never partially applied.
    """

    def to_dict(self) -> dict:
        return {"error": str(self)}


class MissingFieldError(EventValidationError):
    """
    Raised when a required field (type, title) is absent or empty.

    The exception contains the list of missing field names.
    """

    def __init__(self, missing_fields):
        self.missing_fields = list(missing_fields)
        msg = "Missing required field(s): " + ", ".join(self.missing_fields)
        super().__init__(msg)

    def to_dict(self) -> dict:
        return {"error": str(self), "missing_fields": self.missing_fields}


class UnknownTypeError(EventValidationError):
    """
    Raised when the event type is not one of the allowed types.
    """

    def __init__(self, event_type, allowed_types):
        self.event_type = event_type
        self.allowed_types = list(allowed_types)
        msg = (
            f"Invalid event type {event_type!r}. Allowed types: "
            + ", ".join(self.allowed_types)
        )
        super().__init__(msg)

    def to_dict(self) -> dict:
        return {
            "error": str(self),
            "invalid_type": self.event_type,
            "allowed_types": self.allowed_types,
        }


class InvalidFieldError(EventValidationError):
    """
    Raised when an optional field is present but has the wrong shape,
    e.g. metadata that is not an object.
    """

    def __init__(self, field, details):
        self.field = field
        self.details = details
        super().__init__(f"Invalid field {field!r}: {details}")

    def to_dict(self) -> dict:
        return {"error": str(self), "invalid_field": self.field}


class LogStoreIOError(Exception):
    """
    Raised when a durable write or read against one or more streams fails.

    Not retried automatically. For appends, a write that already reached
    one stream is not rolled back.
    """

    def __init__(self, streams, cause=None):
        self.streams = list(streams)
        self.cause = cause
        msg = "I/O failure on stream(s): " + ", ".join(self.streams)
        if cause is not None:
            msg += f" ({cause})"
        super().__init__(msg)
