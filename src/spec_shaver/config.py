"""Config file discovery, loading and merging with CLI options."""

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from spec_shaver.console import Console
from spec_shaver.errors import ConfigError
from spec_shaver.parser.base import ReducerOptions

CONFIG_FILE_NAMES = (".spec-shaver.json", ".spec-shaver.config.json")
DEFAULT_OUTPUT = "reduced_schema.json"


class ConfigFile(ReducerOptions):
    """Reducer options plus settings that only the CLI uses."""

    output: str | None = None


def _read_config(path: Path) -> ConfigFile:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return ConfigFile.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as e:
        raise ConfigError(f"Failed to parse config file: {path}\n{e}") from e


def load_config(
    config_path: Path | None = None,
    cwd: Path | None = None,
    console: Console | None = None,
) -> ConfigFile | None:
    """Load an explicit config file, or discover one in ``cwd``.

    An explicit path that is missing or broken is an error. A discovered file
    that is broken is reported and ignored.
    """
    if config_path is not None:
        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")
        return _read_config(config_path)

    cwd = cwd or Path.cwd()
    for name in CONFIG_FILE_NAMES:
        candidate = cwd / name
        if candidate.exists():
            try:
                return _read_config(candidate)
            except ConfigError:
                (console or Console()).warn(f"Failed to parse {name}, ignoring...")
    return None


def merge_config(cli_options: dict[str, Any], config: ConfigFile | None) -> dict[str, Any]:
    """Overlay CLI options on config file values. ``None`` means "not given"."""
    merged: dict[str, Any] = {}
    if config is not None:
        merged.update(config.model_dump(exclude_unset=True))
    merged.update({key: value for key, value in cli_options.items() if value is not None})
    return merged


def create_default_config(output_path: Path = Path(".spec-shaver.json")) -> Path:
    """Write a config file holding every default value."""
    config = ConfigFile(output=DEFAULT_OUTPUT)
    data = config.model_dump(by_alias=True, exclude={"method_filter", "resolve_refs"})
    output_path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    return output_path
