"""Per-run mapping from content fingerprint to canonical file."""

from __future__ import annotations

from dupsweep.index.models import FileRecord
from dupsweep.index.resolver import resolve


class ContentIndex:
    """Tracks one canonical record per fingerprint and a flat duplicate set.

    Duplicates from every fingerprint share one collection keyed by the
    record path. For every fingerprint seen, its canonical record is the only
    record with that fingerprint absent from the duplicate collection.
    """

    def __init__(self) -> None:
        self._canonical: dict[str, FileRecord] = {}
        self._fingerprints: dict[str, str] = {}
        self._duplicates: dict[str, FileRecord] = {}

    def observe(self, fingerprint: str, record: FileRecord) -> FileRecord:
        """Add one record and return the canonical record for its fingerprint."""
        self._fingerprints[record.path] = fingerprint
        old = self._canonical.get(fingerprint)
        if old is None:
            self._canonical[fingerprint] = record
            return record
        outcome = resolve(old, record)
        if outcome.canonical is record:
            self._canonical[fingerprint] = record
            self._duplicates.pop(record.path, None)
            self._duplicates[old.path] = old
        else:
            self._duplicates[record.path] = record
        return outcome.canonical

    def canonical_records(self) -> tuple[FileRecord, ...]:
        """Return one record per fingerprint in path order."""
        return tuple(sorted(self._canonical.values(), key=lambda record: record.path))

    def duplicate_records(self) -> tuple[FileRecord, ...]:
        """Return every displaced record in path order."""
        return tuple(sorted(self._duplicates.values(), key=lambda record: record.path))

    def duplicate_groups(self) -> dict[str, tuple[FileRecord, ...]]:
        """Group duplicates under their fingerprint, canonical record first.

        Only fingerprints with at least one duplicate are included.
        """
        grouped: dict[str, list[FileRecord]] = {}
        for record in self.duplicate_records():
            grouped.setdefault(self._fingerprints[record.path], []).append(record)
        return {
            fingerprint: (self._canonical[fingerprint], *grouped[fingerprint])
            for fingerprint in sorted(grouped)
        }

    def reclaimable_bytes(self) -> int:
        """Return total size of all duplicate records."""
        return sum(record.size for record in self._duplicates.values())
