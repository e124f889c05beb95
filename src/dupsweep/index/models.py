"""Typed models for the content index."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class FileRecord:
    """One regular file observed during the walk.

    ``path`` is relative to the scanned root and uses ``/`` separators, so it
    is unique within a run and doubles as the record identity.
    """

    path: str
    mtime_ns: int
    size: int


@dataclass(slots=True, frozen=True)
class Resolution:
    """Outcome of a tie-break between two records with the same fingerprint."""

    canonical: FileRecord
    duplicate: FileRecord


@dataclass(slots=True, frozen=True)
class WalkStats:
    """Deterministic counters for one walk."""

    files_seen: int
    files_hashed: int
    empty_skipped: int
    other_skipped: int
    excluded: int
    bytes_hashed: int
