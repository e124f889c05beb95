"""Structured JSONL event logging."""

from __future__ import annotations

import json
import sys
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import TextIO

LEVELS = ("info", "warning", "error")
_LEVEL_RANK = {name: rank for rank, name in enumerate(LEVELS)}


@dataclass(slots=True, frozen=True)
class LogEvent:
    """One structured progress or decision event."""

    timestamp: str
    level: str
    event: str
    path: str | None
    details: dict[str, object]


def utc_timestamp() -> str:
    """Return an ISO-8601 UTC timestamp."""
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def sanitize_details(details: dict[str, object]) -> dict[str, object]:
    """Coerce detail values into JSON-safe primitives with sorted keys."""
    sanitized: dict[str, object] = {}
    for key in sorted(details.keys()):
        value = details[key]
        if isinstance(value, (str, int, float, bool)) or value is None:
            sanitized[key] = value
            continue
        if isinstance(value, Path):
            sanitized[key] = str(value)
            continue
        if isinstance(value, (list, tuple)):
            sanitized[key] = [
                item if isinstance(item, (str, int, float, bool)) else str(item) for item in value
            ]
            continue
        if isinstance(value, dict):
            sanitized[key] = sanitize_details({str(k): v for k, v in value.items()})
            continue
        sanitized[key] = str(value)
    return sanitized


class EventLogger:
    """Writes one JSON object per event to a stream and an optional file."""

    def __init__(
        self,
        stream: TextIO | None = None,
        path: Path | None = None,
        level: str = "info",
    ) -> None:
        if level not in _LEVEL_RANK:
            raise ValueError(f"Unknown log level '{level}'; expected one of {', '.join(LEVELS)}.")
        self._stream = stream if stream is not None else sys.stderr
        self._path = path
        self._threshold = _LEVEL_RANK[level]
        if self._path is not None:
            self._path.parent.mkdir(parents=True, exist_ok=True)

    def emit(
        self, level: str, event: str, path: object = None, **details: object
    ) -> LogEvent | None:
        """Write one event when it meets the configured level."""
        if _LEVEL_RANK[level] < self._threshold:
            return None
        record = LogEvent(
            timestamp=utc_timestamp(),
            level=level,
            event=event,
            path=None if path is None else str(path),
            details=sanitize_details(details),
        )
        line = json.dumps(asdict(record), sort_keys=True)
        self._stream.write(line + "\n")
        self._stream.flush()
        if self._path is not None:
            with self._path.open("a", encoding="utf-8") as handle:
                handle.write(line)
                handle.write("\n")
        return record

    def info(self, event: str, path: object = None, **details: object) -> LogEvent | None:
        return self.emit("info", event, path, **details)

    def warning(self, event: str, path: object = None, **details: object) -> LogEvent | None:
        return self.emit("warning", event, path, **details)

    def error(self, event: str, path: object = None, **details: object) -> LogEvent | None:
        return self.emit("error", event, path, **details)

