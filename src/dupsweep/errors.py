"""Fatal error kinds raised during a dedup run."""

from __future__ import annotations


class DupsweepError(Exception):
    """Base class for errors that abort a run."""

    code = "dupsweep_error"

    def __init__(self, reason: str, path: str | None = None) -> None:
        super().__init__(reason if path is None else f"{reason}: {path}")
        self.reason = reason
        self.path = path


class InputNotFoundError(DupsweepError):
    """Raised when the input directory is missing or not a directory."""

    code = "input_not_found"


class FlattenTargetExistsError(DupsweepError):
    """Raised when flatten is enabled and its target already exists."""

    code = "flatten_target_exists"


class ReadFailureError(DupsweepError):
    """Raised when the tree cannot be listed or a file cannot be read."""

    code = "read_failure"


class WriteFailureError(DupsweepError):
    """Raised when creating directories, copying or deleting fails."""

    code = "write_failure"


class RenameFailureError(DupsweepError):
    """Raised when a move cannot be done as a rename."""

    code = "rename_failure"


class OutputTargetConflictError(DupsweepError):
    """Raised when output directories overlap the input or each other."""

    code = "output_target_conflict"
