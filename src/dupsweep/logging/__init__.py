"""Structured logging utilities."""

from .events import LEVELS, EventLogger, LogEvent, sanitize_details, utc_timestamp

__all__ = ["EventLogger", "LEVELS", "LogEvent", "sanitize_details", "utc_timestamp"]
