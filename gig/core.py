"""Core helpers: logging, config loading, name normalization."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from colorama import Fore, Style


# ── Logging ──────────────────────────────────────────────────────────


def _level_color(levelno: int) -> str:
    if levelno >= logging.ERROR:
        return Fore.RED
    if levelno >= logging.WARNING:
        return Fore.YELLOW
    return Fore.CYAN


class ToolFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        color = _level_color(record.levelno)
        message = record.getMessage()
        return f"{color}[{record.levelname.lower()}]{Style.RESET_ALL} {message}"


logger = logging.getLogger("gig")
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(ToolFormatter())
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False


def set_verbose(verbose: bool) -> None:
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


# ── Config Loading ───────────────────────────────────────────────────

CONFIG_ENV = "GIG_CONFIG"
CONFIG_TYPES: dict[str, type] = {"output": str, "append": bool, "templates_dir": str}
CONFIG_KEYS = set(CONFIG_TYPES)


def default_config_path() -> Path:
    """Return the config path from ``$GIG_CONFIG`` or the XDG config dir."""
    env_path = os.environ.get(CONFIG_ENV)
    if env_path:
        return Path(env_path).expanduser()
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / "gig" / "config.yaml"


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load the user config file.

    A missing or empty file yields ``{}``.  Unknown keys are kept but
    reported at debug level so typos are discoverable with ``--verbose``.
    """
    path = config_path or default_config_path()
    if not path.exists():
        return {}
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise TypeError(f"{path.name} must contain a top-level mapping.")
    for key in sorted(set(data) - CONFIG_KEYS):
        logger.debug(f"Ignoring unknown config key '{key}' in {path}")
    for key, expected in CONFIG_TYPES.items():
        value = data.get(key)
        if value is not None and not isinstance(value, expected):
            raise TypeError(
                f"{path.name}: '{key}' must be a {expected.__name__}, "
                f"got {type(value).__name__} {value!r}."
            )
    return data


def config_path_value(config: dict[str, Any], key: str) -> Path | None:
    """Return ``config[key]`` as an expanded path, or None when unset."""
    value = config.get(key)
    if value is None or value == "":
        return None
    return Path(str(value)).expanduser()


# ── Normalization Helpers ────────────────────────────────────────────


def normalize_name(value: str) -> str:
    """Lowercase and trim a template reference for lookup."""
    return value.strip().lower()
