"""Content-addressed file deduplication for a single directory tree."""

from .config import CliOverrides, RunConfig, load_effective_config
from .errors import (
    DupsweepError,
    FlattenTargetExistsError,
    InputNotFoundError,
    OutputTargetConflictError,
    ReadFailureError,
    RenameFailureError,
    WriteFailureError,
)
from .runner import RunReport, run

__all__ = [
    "CliOverrides",
    "DupsweepError",
    "FlattenTargetExistsError",
    "InputNotFoundError",
    "OutputTargetConflictError",
    "ReadFailureError",
    "RenameFailureError",
    "RunConfig",
    "RunReport",
    "WriteFailureError",
    "load_effective_config",
    "run",
]
