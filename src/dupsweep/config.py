"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path

from dupsweep.logging import LEVELS

DUPLICATE_MODES = ("none", "copy", "move", "remove")
DEFAULT_DUPLICATE_TARGET = Path("dupdump")
DEFAULT_FLATTEN_TARGET = Path("flatten")


@dataclass(slots=True, frozen=True)
class DuplicateConfig:
    """What to do with duplicate records."""

    mode: str
    target: Path


@dataclass(slots=True, frozen=True)
class FlattenConfig:
    """Flatten settings for canonical records."""

    enabled: bool
    target: Path
    move: bool


@dataclass(slots=True, frozen=True)
class WalkConfig:
    """Traversal filters."""

    exclude_globs: tuple[str, ...]


@dataclass(slots=True, frozen=True)
class LoggingConfig:
    """Event log settings."""

    level: str
    file: Path | None


@dataclass(slots=True, frozen=True)
class RunConfig:
    """Fully merged run configuration."""

    input_dir: Path
    dry_run: bool
    duplicates: DuplicateConfig
    flatten: FlattenConfig
    walk: WalkConfig
    logging: LoggingConfig

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot for the run log."""
        return {
            "input_dir": str(self.input_dir),
            "dry_run": self.dry_run,
            "duplicates": {
                "mode": self.duplicates.mode,
                "target": str(self.duplicates.target),
            },
            "flatten": {
                "enabled": self.flatten.enabled,
                "target": str(self.flatten.target),
                "move": self.flatten.move,
            },
            "walk": {"exclude_globs": list(self.walk.exclude_globs)},
            "logging": {
                "level": self.logging.level,
                "file": None if self.logging.file is None else str(self.logging.file),
            },
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional command-line values applied at highest precedence."""

    dry_run: bool | None = None
    duplicate_mode: str | None = None
    duplicate_target: Path | None = None
    flatten_enabled: bool | None = None
    flatten_target: Path | None = None
    flatten_move: bool | None = None
    exclude_globs: tuple[str, ...] = ()
    log_level: str | None = None
    log_file: Path | None = None


def duplicate_mode_from_flags(dedup: bool, rdup: bool) -> str:
    """Translate the dedup/rdup flag pair into a duplicate mode.

    ``--dedup`` copies duplicates aside, adding ``--rdup`` moves them
    instead, and ``--rdup`` alone removes them in place.
    """
    if dedup and rdup:
        return "move"
    if dedup:
        return "copy"
    if rdup:
        return "remove"
    return "none"


def default_config(input_dir: Path) -> RunConfig:
    """Build default config for a given input directory."""
    return RunConfig(
        input_dir=input_dir,
        dry_run=False,
        duplicates=DuplicateConfig(mode="none", target=DEFAULT_DUPLICATE_TARGET),
        flatten=FlattenConfig(enabled=False, target=DEFAULT_FLATTEN_TARGET, move=False),
        walk=WalkConfig(exclude_globs=()),
        logging=LoggingConfig(level="info", file=None),
    )


def load_config_file(config_path: Path | None) -> dict[str, object]:
    """Load an optional TOML config file."""
    if config_path is None:
        return {}
    if not config_path.is_file():
        raise ValueError(f"Config file '{config_path}' does not exist.")
    try:
        with config_path.open("rb") as handle:
            payload = tomllib.load(handle)
    except OSError as exc:
        raise ValueError(
            f"Config file '{config_path}' cannot be read ({exc.strerror or exc})."
        ) from exc
    if not isinstance(payload, dict):
        raise ValueError("Config file must contain a top-level table.")
    return payload


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{key}' must be a table.")
    return value


def _optional_bool(value: object, name: str, default: bool) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ValueError(f"Config field '{name}' must be a boolean.")
    return value


def _optional_path(value: object, name: str, default: Path | None) -> Path | None:
    if value is None:
        return default
    if not isinstance(value, str) or not value:
        raise ValueError(f"Config field '{name}' must be a non-empty string path.")
    return Path(value)


def _optional_choice(value: object, name: str, default: str, choices: tuple[str, ...]) -> str:
    if value is None:
        return default
    if not isinstance(value, str) or value not in choices:
        raise ValueError(f"Config field '{name}' must be one of: {', '.join(choices)}.")
    return value


def _tuple_of_strings(value: object, section: str, field: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise ValueError(f"Config field '{section}.{field}' must be a list of strings.")
    output: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError(f"Config field '{section}.{field}' must contain only strings.")
        output.append(item)
    return tuple(output)


def merge_config(base: RunConfig, payload: dict[str, object], overrides: CliOverrides) -> RunConfig:
    """Merge defaults, config file, then command-line overrides."""
    run_payload = _get_table(payload, "run")
    duplicates_payload = _get_table(payload, "duplicates")
    flatten_payload = _get_table(payload, "flatten")
    walk_payload = _get_table(payload, "walk")
    logging_payload = _get_table(payload, "logging")

    exclude_globs = base.walk.exclude_globs
    if "exclude_globs" in walk_payload:
        exclude_globs = _tuple_of_strings(walk_payload["exclude_globs"], "walk", "exclude_globs")

    merged = RunConfig(
        input_dir=base.input_dir,
        dry_run=_optional_bool(run_payload.get("dry_run"), "run.dry_run", base.dry_run),
        duplicates=DuplicateConfig(
            mode=_optional_choice(
                duplicates_payload.get("mode"),
                "duplicates.mode",
                base.duplicates.mode,
                DUPLICATE_MODES,
            ),
            target=_optional_path(
                duplicates_payload.get("target"), "duplicates.target", base.duplicates.target
            ),
        ),
        flatten=FlattenConfig(
            enabled=_optional_bool(
                flatten_payload.get("enabled"), "flatten.enabled", base.flatten.enabled
            ),
            target=_optional_path(
                flatten_payload.get("target"), "flatten.target", base.flatten.target
            ),
            move=_optional_bool(flatten_payload.get("move"), "flatten.move", base.flatten.move),
        ),
        walk=WalkConfig(exclude_globs=exclude_globs),
        logging=LoggingConfig(
            level=_optional_choice(
                logging_payload.get("level"), "logging.level", base.logging.level, LEVELS
            ),
            file=_optional_path(logging_payload.get("file"), "logging.file", base.logging.file),
        ),
    )
    return apply_cli_overrides(merged, overrides)


def apply_cli_overrides(config: RunConfig, overrides: CliOverrides) -> RunConfig:
    """Apply command-line overrides at highest precedence and resolve paths."""
    duplicate_mode = _optional_choice(
        overrides.duplicate_mode,
        "overrides.duplicate_mode",
        config.duplicates.mode,
        DUPLICATE_MODES,
    )
    log_level = _optional_choice(
        overrides.log_level, "overrides.log_level", config.logging.level, LEVELS
    )
    log_file = overrides.log_file or config.logging.file
    return RunConfig(
        input_dir=config.input_dir.resolve(),
        dry_run=overrides.dry_run if overrides.dry_run is not None else config.dry_run,
        duplicates=DuplicateConfig(
            mode=duplicate_mode,
            target=(overrides.duplicate_target or config.duplicates.target).resolve(),
        ),
        flatten=FlattenConfig(
            enabled=(
                overrides.flatten_enabled
                if overrides.flatten_enabled is not None
                else config.flatten.enabled
            ),
            target=(overrides.flatten_target or config.flatten.target).resolve(),
            move=(
                overrides.flatten_move
                if overrides.flatten_move is not None
                else config.flatten.move
            ),
        ),
        walk=WalkConfig(exclude_globs=config.walk.exclude_globs + overrides.exclude_globs),
        logging=LoggingConfig(
            level=log_level,
            file=None if log_file is None else log_file.resolve(),
        ),
    )


def load_effective_config(
    input_dir: Path,
    config_path: Path | None = None,
    overrides: CliOverrides | None = None,
) -> RunConfig:
    """Load effective config using merge order defaults -> config file -> overrides."""
    base = default_config(input_dir)
    payload = load_config_file(config_path)
    return merge_config(base, payload, overrides or CliOverrides())
