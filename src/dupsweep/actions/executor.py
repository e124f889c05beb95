"""Filesystem side effects for dedup decisions, with dry-run support."""

from __future__ import annotations

import os
import shutil
from collections.abc import Iterable
from pathlib import Path

from dupsweep.actions.flatten import plan_flatten
from dupsweep.errors import RenameFailureError, WriteFailureError
from dupsweep.index.models import FileRecord
from dupsweep.logging import EventLogger

_COPY_BUFFER_BYTES = 1024 * 1024


def _same_file(source: Path, target: Path) -> bool:
    return source.resolve() == target.resolve()


class ActionExecutor:
    """Copies, moves and removes files, or only logs when dry-running."""

    def __init__(self, logger: EventLogger, dry_run: bool = False) -> None:
        self._logger = logger
        self._dry_run = dry_run
        self._planned_dirs: set[Path] = set()

    def ensure_directory(self, path: Path) -> None:
        """Create ``path`` and its parents when missing."""
        if path in self._planned_dirs or path.is_dir():
            return
        self._planned_dirs.add(path)
        self._logger.info("action.mkdir", path, dry_run=self._dry_run)
        if self._dry_run:
            return
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise WriteFailureError(
                f"Cannot create directory ({exc.strerror or exc})", str(path)
            ) from exc

    def copy_file(self, source: Path, target: Path) -> None:
        """Copy file content to ``target``, replacing an existing file."""
        if _same_file(source, target):
            raise WriteFailureError(f"Cannot copy a file onto itself ({target})", str(source))
        self.ensure_directory(target.parent)
        self._logger.warning("action.copy", source, target=target, dry_run=self._dry_run)
        if self._dry_run:
            return
        try:
            with source.open("rb") as reader, target.open("wb") as writer:
                shutil.copyfileobj(reader, writer, _COPY_BUFFER_BYTES)
                writer.flush()
                os.fsync(writer.fileno())
        except OSError as exc:
            raise WriteFailureError(
                f"Cannot copy to {target} ({exc.strerror or exc})", str(source)
            ) from exc

    def move_file(self, source: Path, target: Path) -> None:
        """Rename ``source`` to ``target``; there is no copy fallback."""
        if _same_file(source, target):
            raise RenameFailureError(f"Cannot move a file onto itself ({target})", str(source))
        self.ensure_directory(target.parent)
        self._logger.warning("action.move", source, target=target, dry_run=self._dry_run)
        if self._dry_run:
            return
        try:
            os.rename(source, target)
        except OSError as exc:
            raise RenameFailureError(
                f"Cannot rename to {target} ({exc.strerror or exc})", str(source)
            ) from exc

    def remove_file(self, path: Path) -> None:
        """Delete one file."""
        self._logger.warning("action.remove", path, dry_run=self._dry_run)
        if self._dry_run:
            return
        try:
            path.unlink()
        except OSError as exc:
            raise WriteFailureError(
                f"Cannot remove file ({exc.strerror or exc})", str(path)
            ) from exc

    def copy_aside(self, records: Iterable[FileRecord], root: Path, target: Path) -> int:
        """Copy each record to the same relative path under ``target``."""
        self._logger.info("action.copy_aside", target, dry_run=self._dry_run)
        count = 0
        for record in records:
            self.copy_file(root / record.path, target / record.path)
            count += 1
        return count

    def move_aside(self, records: Iterable[FileRecord], root: Path, target: Path) -> int:
        """Move each record to the same relative path under ``target``."""
        self._logger.info("action.move_aside", target, dry_run=self._dry_run)
        count = 0
        for record in records:
            self.move_file(root / record.path, target / record.path)
            count += 1
        return count

    def remove_in_place(self, records: Iterable[FileRecord], root: Path) -> int:
        """Delete each record from the scanned tree."""
        self._logger.info("action.remove_in_place", root, dry_run=self._dry_run)
        count = 0
        for record in records:
            self.remove_file(root / record.path)
            count += 1
        return count

    def flatten(
        self,
        records: Iterable[FileRecord],
        root: Path,
        target: Path,
        move: bool = False,
    ) -> dict[str, str]:
        """Place every record directly in ``target`` under a unique name.

        Returns the mapping of relative source path to output file name.
        """
        self._logger.info("action.flatten", target, move=move, dry_run=self._dry_run)
        mapping: dict[str, str] = {}
        self.ensure_directory(target)
        for record, name in plan_flatten(records):
            if move:
                self.move_file(root / record.path, target / name)
            else:
                self.copy_file(root / record.path, target / name)
            mapping[record.path] = name
        return mapping
