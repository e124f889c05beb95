"""Command-line entrypoint."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import TextIO

from dupsweep.config import CliOverrides, duplicate_mode_from_flags, load_effective_config
from dupsweep.errors import DupsweepError
from dupsweep.logging import LEVELS, EventLogger
from dupsweep.runner import run

EXIT_OK = 0
EXIT_RUN_FAILED = 1
EXIT_USAGE = 2


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for one dedup run."""
    parser = argparse.ArgumentParser(
        prog="dupsweep",
        description=(
            "Deduplicate files by content. When duplicates are found the oldest "
            "and shortest name wins. Empty files are skipped."
        ),
    )
    parser.add_argument("input_dir", metavar="INPUT_DIR")
    parser.add_argument(
        "--dryrun", action="store_true", help="Log every change without touching the filesystem."
    )
    parser.add_argument(
        "--ddir",
        default=None,
        help="Directory to save duplicate files into, keeping their relative path "
        "(default: ./dupdump).",
    )
    parser.add_argument(
        "--dedup", action="store_true", help="Save a copy of the duplicates to --ddir."
    )
    parser.add_argument(
        "--rdup",
        action="store_true",
        help="Remove duplicates from the input directory (moved to --ddir with --dedup).",
    )
    parser.add_argument(
        "--fdir",
        default=None,
        help="Directory to place all non-duplicate files into (default: ./flatten).",
    )
    parser.add_argument(
        "--flatten", action="store_true", help="Save all non-duplicate files to --fdir."
    )
    parser.add_argument(
        "--remove",
        action="store_true",
        help="Move non-duplicate files into --fdir instead of copying them.",
    )
    parser.add_argument("--config", default=None, help="Optional TOML configuration file.")
    parser.add_argument("--log-file", default=None, help="Also append JSONL events to a file.")
    parser.add_argument("--log-level", choices=LEVELS, default=None)
    parser.add_argument(
        "--exclude", action="append", default=[], metavar="GLOB", help="Skip matching paths."
    )
    return parser


def overrides_from_args(args: argparse.Namespace) -> CliOverrides:
    """Translate parsed flags into config overrides; unset flags stay None."""
    duplicate_mode = duplicate_mode_from_flags(args.dedup, args.rdup)
    return CliOverrides(
        dry_run=True if args.dryrun else None,
        duplicate_mode=None if duplicate_mode == "none" else duplicate_mode,
        duplicate_target=Path(args.ddir) if args.ddir is not None else None,
        flatten_enabled=True if args.flatten else None,
        flatten_target=Path(args.fdir) if args.fdir is not None else None,
        flatten_move=True if args.remove else None,
        exclude_globs=tuple(args.exclude),
        log_level=args.log_level,
        log_file=Path(args.log_file) if args.log_file is not None else None,
    )


def main(argv: list[str] | None = None, stream: TextIO | None = None) -> int:
    """Entrypoint for the dupsweep process."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    out = stream if stream is not None else sys.stderr
    try:
        config = load_effective_config(
            input_dir=Path(args.input_dir),
            config_path=Path(args.config) if args.config is not None else None,
            overrides=overrides_from_args(args),
        )
    except ValueError as exc:
        EventLogger(stream=out).error("run.invalid_config", None, reason=str(exc))
        return EXIT_USAGE
    try:
        logger = EventLogger(stream=out, path=config.logging.file, level=config.logging.level)
    except OSError as exc:
        EventLogger(stream=out).error("run.invalid_log_file", config.logging.file, reason=str(exc))
        return EXIT_USAGE
    try:
        run(config, logger)
    except DupsweepError as exc:
        logger.error("run.failed", exc.path, code=exc.code, reason=exc.reason)
        return EXIT_RUN_FAILED
    return EXIT_OK
