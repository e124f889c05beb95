"""Run orchestration: preconditions, walk, then output actions."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from pathlib import Path

from dupsweep.actions import ActionExecutor
from dupsweep.config import RunConfig
from dupsweep.errors import (
    FlattenTargetExistsError,
    InputNotFoundError,
    OutputTargetConflictError,
)
from dupsweep.index import ContentIndex, FileRecord, WalkStats, walk_tree
from dupsweep.logging import EventLogger


@dataclass(slots=True, frozen=True)
class RunReport:
    """Outcome of one complete run."""

    walk: WalkStats
    canonical: tuple[FileRecord, ...]
    duplicates: tuple[FileRecord, ...]
    duplicate_groups: int
    reclaimable_bytes: int
    duplicates_copied: int
    duplicates_moved: int
    duplicates_removed: int
    flattened: dict[str, str]
    dry_run: bool

    def summary(self) -> dict[str, object]:
        """Return counters suitable for a summary event."""
        return {
            **asdict(self.walk),
            "canonical_files": len(self.canonical),
            "duplicate_files": len(self.duplicates),
            "duplicate_groups": self.duplicate_groups,
            "reclaimable_bytes": self.reclaimable_bytes,
            "duplicates_copied": self.duplicates_copied,
            "duplicates_moved": self.duplicates_moved,
            "duplicates_removed": self.duplicates_removed,
            "flattened_files": len(self.flattened),
            "dry_run": self.dry_run,
        }


def check_preconditions(config: RunConfig) -> None:
    """Fail before any walk when inputs or targets are unusable."""
    if not config.input_dir.exists():
        raise InputNotFoundError("Input directory does not exist", str(config.input_dir))
    if not config.input_dir.is_dir():
        raise InputNotFoundError("Input path is not a directory", str(config.input_dir))
    if config.flatten.enabled and config.flatten.target.exists():
        raise FlattenTargetExistsError(
            "Flatten directory must not exist", str(config.flatten.target)
        )
    if config.duplicates.mode not in ("copy", "move"):
        return
    dump = config.duplicates.target
    if config.input_dir.is_relative_to(dump):
        raise OutputTargetConflictError(
            "Dump directory must not be or contain the input directory", str(dump)
        )
    if config.flatten.enabled and _overlaps(dump, config.flatten.target):
        raise OutputTargetConflictError(
            "Dump and flatten directories must not overlap", str(config.flatten.target)
        )


def _overlaps(first: Path, second: Path) -> bool:
    return first.is_relative_to(second) or second.is_relative_to(first)


def run(config: RunConfig, logger: EventLogger) -> RunReport:
    """Execute one full dedup pass as described by ``config``."""
    check_preconditions(config)
    logger.info("run.start", config.input_dir, config=config.to_public_dict())

    root = config.input_dir
    index = ContentIndex()
    prune_paths = [config.duplicates.target]
    if config.flatten.enabled:
        prune_paths.append(config.flatten.target)
    if config.logging.file is not None:
        prune_paths.append(config.logging.file)
    stats = walk_tree(
        root,
        index,
        logger,
        exclude_globs=config.walk.exclude_globs,
        prune_paths=[path for path in prune_paths if path.is_relative_to(root)],
    )
    canonical = index.canonical_records()
    duplicates = index.duplicate_records()
    groups = index.duplicate_groups()
    for fingerprint, (kept, *losers) in groups.items():
        logger.info(
            "run.duplicate_group",
            kept.path,
            sha256=fingerprint,
            duplicates=[record.path for record in losers],
        )

    executor = ActionExecutor(logger, dry_run=config.dry_run)
    copied = moved = removed = 0
    mode = config.duplicates.mode
    if mode == "copy":
        copied = executor.copy_aside(duplicates, root, config.duplicates.target)
    elif mode == "move":
        moved = executor.move_aside(duplicates, root, config.duplicates.target)
    elif mode == "remove":
        removed = executor.remove_in_place(duplicates, root)

    flattened: dict[str, str] = {}
    if config.flatten.enabled:
        flattened = executor.flatten(
            canonical, root, config.flatten.target, move=config.flatten.move
        )

    report = RunReport(
        walk=stats,
        canonical=canonical,
        duplicates=duplicates,
        duplicate_groups=len(groups),
        reclaimable_bytes=index.reclaimable_bytes(),
        duplicates_copied=copied,
        duplicates_moved=moved,
        duplicates_removed=removed,
        flattened=flattened,
        dry_run=config.dry_run,
    )
    logger.info("run.summary", root, **report.summary())
    return report

