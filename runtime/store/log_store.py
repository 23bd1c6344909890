"""
LogStore: append-only, multi-stream event storage for Nogger.

Every accepted Event is written twice under `logs_dir`:

    app_logs.txt          one compact line per event (aggregate stream)
    <type>_logs.txt       one detailed record per event (typed stream)

A detailed record is the event as a single JSON document, followed by a
delimiter line of 50 "=" characters:

    {"timestamp": "...", "type": "error", "title": "Crash", ...}
    ==================================================

Older files may contain pretty-printed (multi-line) JSON records; reads
still recover those, and fall back to raw text for anything unparsable.
Records tagged "log" are read back as info events, but only from the
files listed above: the old `log_logs.txt` partition is never read or
cleared, so its contents must be moved into `info_logs.txt` by hand.

The two writes of one event are not atomic with respect to each other: a
crash in between can leave the event in only one stream. Within a stream,
each record is written under that stream's lock, so concurrent appends,
clears and reads never see a partial record.
"""

import json
import logging
import os
import re
import threading
from pathlib import Path
from typing import Dict, List, Union

from pydantic import BaseModel, ValidationError

from exceptions.exceptions import LogStoreIOError
from ..models.log_models import (
    LEGACY_INFO_ALIAS,
    ClearSelector,
    Entry,
    Event,
    StreamSelector,
    SummaryLine,
)


logger = logging.getLogger(__name__)

RECORD_DELIMITER = "=" * 50

STREAM_FILES: Dict[StreamSelector, str] = {
    StreamSelector.AGGREGATE: "app_logs.txt",
    StreamSelector.INFO: "info_logs.txt",
    StreamSelector.ERROR: "error_logs.txt",
    StreamSelector.API_FAILED: "api-failed_logs.txt",
}

# [<timestamp>] [<TYPE>] <title>[ - <description>]
_SUMMARY_LINE_RE = re.compile(r"^\[(.+?)\] \[(.+?)\] (.+?)(?:\s-\s(.+))?$")
_JSON_BLOCK_RE = re.compile(r"\{[\s\S]*\}")


class HealthStatus(BaseModel):
    ready: bool


class LogStore:
    """Durable aggregate + per-type event streams.

    Parameters
    ----------
    logs_dir:
        Directory holding the stream files. Created on construction if it
        does not exist yet. Stream files themselves are created lazily on
        the first append.

    One instance is meant to be created per process and shared by every
    request handler.
    """

    def __init__(self, logs_dir: Union[str, Path] = "logs") -> None:
        self.logs_dir = Path(logs_dir)
        self.logs_dir.mkdir(parents=True, exist_ok=True)
        self._locks: Dict[StreamSelector, threading.Lock] = {
            selector: threading.Lock() for selector in STREAM_FILES
        }

    def stream_path(self, selector: StreamSelector) -> Path:
        return self.logs_dir / STREAM_FILES[StreamSelector(selector)]

    # ------------------------------------------------------------------
    # Write path
    # ------------------------------------------------------------------

    def append(self, event: Event) -> None:
        """Append `event` to the aggregate stream and to its typed stream.

        Both writes are always attempted.

        Raises
        ------
        LogStoreIOError
            If either write failed. A write that succeeded is kept.
        """
        typed = StreamSelector.for_type(event.type)
        payload = json.dumps(event.model_dump(mode="json"), ensure_ascii=False)
        writes = [
            (StreamSelector.AGGREGATE, event.to_summary_line() + "\n"),
            (typed, f"{payload}\n{RECORD_DELIMITER}\n"),
        ]

        failed: List[str] = []
        cause = None
        for selector, text in writes:
            try:
                self._append_text(selector, text)
            except OSError as e:
                logger.error(
                    "[STORE] Failed to append %s event to %s stream: %s",
                    event.type.value,
                    selector.value,
                    e,
                )
                failed.append(selector.value)
                cause = e

        if failed:
            raise LogStoreIOError(failed, cause)

        logger.info("[STORE] Logged %s: %s", event.type.value, event.title)

    def _append_text(self, selector: StreamSelector, text: str) -> None:
        path = self.stream_path(selector)
        with self._locks[selector]:
            with path.open("a", encoding="utf-8") as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())

    # ------------------------------------------------------------------
    # Read path
    # ------------------------------------------------------------------

    def read(self, selector: StreamSelector, limit: int) -> List[Entry]:
        """Return at most `limit` entries of a stream, newest first.

        Aggregate lines are parsed into SummaryLine objects; typed records
        into Event objects, or the trimmed raw text if a record cannot be
        parsed. A stream that does not exist yet reads as empty.

        Raises
        ------
        ValueError
            If `limit` is not a positive integer.
        LogStoreIOError
            If the stream exists but cannot be read.
        """
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise ValueError(f"limit must be a positive integer, got {limit!r}")

        selector = StreamSelector(selector)
        data = self._snapshot(selector)
        if not data:
            return []

        if selector.is_typed:
            chunks = data.split("\n" + RECORD_DELIMITER)
        else:
            chunks = data.split("\n")

        chunks = [chunk for chunk in chunks if chunk.strip()]
        recent = chunks[-limit:]
        recent.reverse()

        if selector.is_typed:
            return [_parse_record(chunk) for chunk in recent]
        return [_parse_summary_line(chunk) for chunk in recent]

    def _snapshot(self, selector: StreamSelector) -> str:
        path = self.stream_path(selector)
        try:
            with self._locks[selector]:
                with path.open("r", encoding="utf-8", errors="replace") as f:
                    return f.read()
        except FileNotFoundError:
            return ""
        except OSError as e:
            logger.error("[STORE] Failed to read %s stream: %s", selector.value, e)
            raise LogStoreIOError([selector.value], e) from e

    # ------------------------------------------------------------------
    # Clear / health
    # ------------------------------------------------------------------

    def clear(self, selector: ClearSelector) -> None:
        """Truncate one stream, or every stream for ClearSelector.ALL.

        Clearing a stream that does not exist is not an error.
        """
        selector = ClearSelector(selector)
        if selector is ClearSelector.ALL:
            targets = list(STREAM_FILES)
        else:
            targets = [StreamSelector(selector.value)]

        for target in targets:
            self._truncate(target)
        logger.info("[STORE] Cleared %s logs", selector.value)

    def _truncate(self, selector: StreamSelector) -> None:
        path = self.stream_path(selector)
        try:
            with self._locks[selector]:
                with path.open("w", encoding="utf-8"):
                    pass
        except FileNotFoundError:
            # Logs directory might not exist; nothing to clear.
            logger.debug("[STORE] Nothing to clear for %s stream", selector.value)
        except OSError as e:
            logger.error("[STORE] Failed to clear %s stream: %s", selector.value, e)
            raise LogStoreIOError([selector.value], e) from e

    def health(self) -> HealthStatus:
        """Report whether the logs directory exists and is writable."""
        ready = self.logs_dir.is_dir() and os.access(self.logs_dir, os.W_OK)
        return HealthStatus(ready=ready)


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------


def _parse_summary_line(line: str) -> SummaryLine:
    line = line.rstrip("\r")
    match = _SUMMARY_LINE_RE.match(line)
    if match is None:
        return SummaryLine(title=line)
    timestamp, event_type, title, description = match.groups()
    return SummaryLine(
        timestamp=timestamp,
        type=event_type.lower(),
        title=title,
        description=description,
    )


def _parse_record(chunk: str) -> Entry:
    text = chunk.strip()
    # Deeply nested garbage can exhaust the decoder's recursion limit.
    try:
        data = json.loads(text)
    except (ValueError, RecursionError):
        match = _JSON_BLOCK_RE.search(text)
        if match is None:
            return text
        try:
            data = json.loads(match.group(0))
        except (ValueError, RecursionError):
            return text

    try:
        return Event.model_validate(_normalize_legacy_type(data))
    except (ValidationError, RecursionError):
        return text


def _normalize_legacy_type(data):
    # Records written by older clients carry the "log" tag for info events.
    if isinstance(data, dict) and data.get("type") == LEGACY_INFO_ALIAS:
        return {**data, "type": "info"}
    return data
