from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any, Dict


DEFAULT_CONFIG_PATH = Path("config.toml")


class ConfigLoadError(RuntimeError):
    """Raised when ``config.toml`` exists but cannot be parsed."""


def load_raw_config(path: str | Path | None = None) -> Dict[str, Any]:
    """
    Load the bot configuration (config.toml by default).

    Returns an empty dict when the file is missing so callers can fall back to
    environment variables. A file that exists but is not valid TOML raises
    :class:`ConfigLoadError` instead of silently running with defaults.
    """
    target = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if not target.is_file():
        return {}

    try:
        with target.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigLoadError(f"Failed to parse {target}: {exc}") from exc


__all__ = ["load_raw_config", "ConfigLoadError", "DEFAULT_CONFIG_PATH"]
