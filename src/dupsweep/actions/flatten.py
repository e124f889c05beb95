"""Collision-free output names for flattened files."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import PurePosixPath

from dupsweep.index.models import FileRecord


class FlattenNamer:
    """Assigns unique file names within a single output directory.

    The first occurrence of a name is kept. Later occurrences become
    ``<stem>_<n><suffix>`` with ``n`` counting up from 1 per base name, and
    every candidate is checked against all names handed out so far.
    """

    def __init__(self) -> None:
        self._assigned: set[str] = set()
        self._next_counter: dict[str, int] = {}

    def assign(self, name: str) -> str:
        """Return a name that has not been assigned before."""
        if name not in self._assigned:
            self._assigned.add(name)
            return name
        stem, suffix = split_name(name)
        counter = self._next_counter.get(name, 1)
        candidate = f"{stem}_{counter}{suffix}"
        while candidate in self._assigned:
            counter += 1
            candidate = f"{stem}_{counter}{suffix}"
        self._next_counter[name] = counter + 1
        self._assigned.add(candidate)
        return candidate


def split_name(name: str) -> tuple[str, str]:
    """Split a file name into stem and last suffix."""
    pure = PurePosixPath(name)
    return pure.stem, pure.suffix


def plan_flatten(records: Iterable[FileRecord]) -> list[tuple[FileRecord, str]]:
    """Map records, in path order, to unique flattened names."""
    namer = FlattenNamer()
    ordered = sorted(records, key=lambda record: record.path)
    return [(record, namer.assign(PurePosixPath(record.path).name)) for record in ordered]
