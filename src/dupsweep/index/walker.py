"""Deterministic tree walk feeding the content index."""

from __future__ import annotations

import fnmatch
import os
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path

from dupsweep.errors import ReadFailureError
from dupsweep.index.content_index import ContentIndex
from dupsweep.index.hashing import sha256_file
from dupsweep.index.models import FileRecord, WalkStats
from dupsweep.logging import EventLogger


@dataclass(slots=True, frozen=True)
class _CandidateFile:
    """Non-empty regular file found during traversal."""

    relative_path: str
    full_path: Path
    size: int
    mtime_ns: int


@dataclass(slots=True)
class _ScanCounters:
    files_seen: int = 0
    empty_skipped: int = 0
    other_skipped: int = 0
    excluded: int = 0


def walk_tree(
    root: Path,
    index: ContentIndex,
    logger: EventLogger,
    exclude_globs: tuple[str, ...] = (),
    prune_paths: Iterable[Path] = (),
    hasher: Callable[[Path], str] | None = None,
) -> WalkStats:
    """Fingerprint every regular non-empty file under ``root`` into ``index``.

    Files are observed in lexical order of their root-relative path. Any
    listing, stat or read error aborts the walk with ``ReadFailureError``.
    """
    digest_file = hasher or sha256_file
    resolved_root = root.resolve()
    counters = _ScanCounters()
    candidates = _scan_tree(
        root=resolved_root,
        logger=logger,
        exclude_globs=exclude_globs,
        prune_paths={path.resolve() for path in prune_paths},
        counters=counters,
    )
    candidates.sort(key=lambda item: item.relative_path)
    bytes_hashed = 0
    for candidate in candidates:
        fingerprint = digest_file(candidate.full_path)
        bytes_hashed += candidate.size
        record = FileRecord(
            path=candidate.relative_path,
            mtime_ns=candidate.mtime_ns,
            size=candidate.size,
        )
        canonical = index.observe(fingerprint, record)
        logger.info(
            "walk.file",
            candidate.relative_path,
            sha256=fingerprint,
            canonical=canonical.path,
        )
    return WalkStats(
        files_seen=counters.files_seen,
        files_hashed=len(candidates),
        empty_skipped=counters.empty_skipped,
        other_skipped=counters.other_skipped,
        excluded=counters.excluded,
        bytes_hashed=bytes_hashed,
    )


def should_exclude(relative_path: str, exclude_globs: tuple[str, ...]) -> bool:
    """Return True when a path matches configured ignore globs."""
    anchored = f"/{relative_path}"
    return any(
        fnmatch.fnmatch(relative_path, pattern) or fnmatch.fnmatch(anchored, pattern)
        for pattern in exclude_globs
    )


def _scan_tree(
    *,
    root: Path,
    logger: EventLogger,
    exclude_globs: tuple[str, ...],
    prune_paths: set[Path],
    counters: _ScanCounters,
) -> list[_CandidateFile]:
    """Walk tree with an explicit stack, never following symlinks."""
    candidates: list[_CandidateFile] = []
    stack: list[Path] = [root]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as entries:
                ordered_entries = sorted(entries, key=lambda item: item.name)
        except OSError as exc:
            raise ReadFailureError(
                f"Cannot list directory ({exc.strerror or exc})", str(current)
            ) from exc
        for entry in reversed(ordered_entries):
            full_path = Path(entry.path)
            relative = full_path.relative_to(root).as_posix()
            if entry.is_symlink():
                counters.other_skipped += 1
                logger.info("walk.skip_link", relative)
                continue
            if entry.is_dir(follow_symlinks=False):
                if should_exclude(f"{relative}/", exclude_globs) or full_path in prune_paths:
                    counters.excluded += 1
                    logger.info("walk.skip_excluded", relative, kind="directory")
                    continue
                stack.append(full_path)
                continue
            if not entry.is_file(follow_symlinks=False):
                counters.other_skipped += 1
                logger.info("walk.skip_special", relative)
                continue
            counters.files_seen += 1
            if should_exclude(relative, exclude_globs) or full_path in prune_paths:
                counters.excluded += 1
                logger.info("walk.skip_excluded", relative, kind="file")
                continue
            try:
                stat = entry.stat(follow_symlinks=False)
            except OSError as exc:
                raise ReadFailureError(
                    f"Cannot stat file ({exc.strerror or exc})", str(full_path)
                ) from exc
            if stat.st_size == 0:
                counters.empty_skipped += 1
                logger.info("walk.skip_empty", relative, size=0)
                continue
            candidates.append(
                _CandidateFile(
                    relative_path=relative,
                    full_path=full_path,
                    size=stat.st_size,
                    mtime_ns=stat.st_mtime_ns,
                )
            )
    return candidates
