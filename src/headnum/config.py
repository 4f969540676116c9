"""
TOML-based config file loading for headnum.

Searches for `.headnum.toml`, `headnum.toml`, or `pyproject.toml [tool.headnum]`
walking up from the current directory. Config values are merged with CLI flags
using three-way precedence: explicit CLI flags > config file > built-in defaults.

Example `headnum.toml`:

    [numbering]
    max-level = 3
    format = "format_1"
    backup = false
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, TypeVar, cast

from headnum.numbering import NumberingFormat

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]


@dataclass
class HeadnumConfig:
    """
    Parsed config from a TOML file. Fields are `None` when not set in the config,
    so merging can tell "not configured" apart from "set to the default value".
    """

    max_level: int | None = None
    format: str | None = None
    backup: bool | None = None


# Config file search order (first match wins within each directory level)
_CONFIG_FILENAMES = [".headnum.toml", "headnum.toml", "pyproject.toml"]

_VALID_FIELDS = {f.name for f in fields(HeadnumConfig)}


def find_config_file(start_dir: Path) -> Path | None:
    """
    Walk up from `start_dir` looking for a config file. Returns the first
    found, or `None`. Search order per directory: `.headnum.toml` >
    `headnum.toml` > `pyproject.toml` (only if it has `[tool.headnum]`).
    """
    current = start_dir.resolve()
    while True:
        for filename in _CONFIG_FILENAMES:
            candidate = current / filename
            if candidate.is_file():
                if filename != "pyproject.toml" or _pyproject_has_headnum_section(candidate):
                    return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def _pyproject_has_headnum_section(path: Path) -> bool:
    """Check if a pyproject.toml has a [tool.headnum] section."""
    try:
        data = tomllib.loads(path.read_text())
        return "headnum" in data.get("tool", {})
    except (tomllib.TOMLDecodeError, OSError):
        return False


def load_config(config_path: Path) -> HeadnumConfig:
    """
    Load a `HeadnumConfig` from a TOML file, either a standalone `headnum.toml` /
    `.headnum.toml` or the `[tool.headnum]` table of a `pyproject.toml`.
    """
    data = tomllib.loads(config_path.read_text())

    if config_path.name == "pyproject.toml":
        data = data.get("tool", {}).get("headnum", {})

    return _parse_config_data(data)


def _parse_config_data(data: dict[str, Any]) -> HeadnumConfig:
    """Parse a flat or sectioned TOML dict into HeadnumConfig, validating values."""
    # Flatten sections: [numbering] merges into top level
    flat: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            flat.update(cast(dict[str, Any], value))
        else:
            flat[key] = value

    mapped: dict[str, Any] = {}
    for key, value in flat.items():
        snake_key = key.replace("-", "_")
        if snake_key in _VALID_FIELDS:
            mapped[snake_key] = value

    config = HeadnumConfig(**mapped)

    if config.max_level is not None and (
        isinstance(config.max_level, bool)
        or not isinstance(config.max_level, int)
        or config.max_level < 1
    ):
        raise ValueError(f"Invalid max-level in config: {config.max_level!r}")
    if config.format is not None:
        config.format = NumberingFormat.parse(config.format).value
    if config.backup is not None and not isinstance(config.backup, bool):
        raise ValueError(f"Invalid backup in config: {config.backup!r}")

    return config


_T = TypeVar("_T")


def merge_cli_with_config(
    cli_opts: _T,
    config: HeadnumConfig | None,
    explicit_flags: set[str],
) -> _T:
    """
    Merge CLI options with config file settings.

    Precedence: explicit CLI flags > config file > built-in defaults.
    The config's `backup` setting maps to the inverse `nobackup` option.
    """
    if config is None:
        return cli_opts

    for cfg_field in fields(HeadnumConfig):
        cfg_value = getattr(config, cfg_field.name)
        if cfg_value is None:
            continue  # Not set in config

        opt_name = cfg_field.name
        if opt_name == "backup":
            opt_name, cfg_value = "nobackup", not cfg_value

        if opt_name in explicit_flags:
            continue

        if hasattr(cli_opts, opt_name):
            setattr(cli_opts, opt_name, cfg_value)

    return cli_opts
