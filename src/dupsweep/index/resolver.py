"""Canonical-file tie-break policy."""

from __future__ import annotations

from dupsweep.index.models import FileRecord, Resolution


def new_record_wins(old: FileRecord, new: FileRecord) -> bool:
    """Return True when ``new`` should replace ``old`` as canonical.

    The older file wins, and a shorter path also displaces the current
    canonical. When neither rule fires (equal timestamps and lengths
    included) the current canonical stays.
    """
    return old.mtime_ns > new.mtime_ns or len(old.path) > len(new.path)


def resolve(old: FileRecord, new: FileRecord) -> Resolution:
    """Pick the canonical record between ``old`` and ``new``."""
    if new_record_wins(old, new):
        return Resolution(canonical=new, duplicate=old)
    return Resolution(canonical=old, duplicate=new)
