"""Configuration loading for kilo.

Settings come from an embedded default table, optionally overridden by a
user TOML file. The file is looked up at ``$KILO_CONFIG`` or
``~/.config/kilo/config.toml``; a missing file is not an error and a file
that cannot be parsed is logged and ignored.

Example ``config.toml``::

    [editor]
    tab_stop = 4
    quit_times = 2
    message_timeout = 5

    [logging]
    file_level = "DEBUG"
"""

from __future__ import annotations

import copy
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import toml

from .constants import KILO_MESSAGE_TIMEOUT, KILO_QUIT_TIMES, KILO_TAB_STOP

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: dict[str, Any] = {
    "editor": {
        "tab_stop": KILO_TAB_STOP,
        "quit_times": KILO_QUIT_TIMES,
        "message_timeout": KILO_MESSAGE_TIMEOUT,
    },
    "logging": {
        "file": os.path.join(tempfile.gettempdir(), "kilo.log"),
        "file_level": "INFO",
        "log_to_console": False,
        "console_level": "WARNING",
    },
}


def default_config_path() -> Path:
    env_path = os.environ.get("KILO_CONFIG")
    if env_path:
        return Path(env_path).expanduser()
    return Path.home() / ".config" / "kilo" / "config.toml"


def deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge ``override`` into a copy of ``base``."""
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_config(path: str | os.PathLike[str] | None = None) -> dict[str, Any]:
    config = copy.deepcopy(DEFAULT_CONFIG)

    config_path = Path(path) if path is not None else default_config_path()
    if config_path.is_file():
        try:
            user_config = toml.load(config_path)
        except (OSError, toml.TomlDecodeError) as exc:
            logger.error("Could not parse config '%s': %s. Using defaults.", config_path, exc)
        else:
            config = deep_merge(config, user_config)
            logger.info("Loaded config from %s", config_path)

    config["editor"] = _validated_editor_section(config.get("editor", {}))
    return config


def _validated_editor_section(section: Any) -> dict[str, Any]:
    defaults = DEFAULT_CONFIG["editor"]
    if not isinstance(section, dict):
        logger.warning("Ignoring malformed [editor] section: %r", section)
        return dict(defaults)

    result = dict(section)
    checks = {
        "tab_stop": lambda v: isinstance(v, int) and not isinstance(v, bool) and v > 0,
        "quit_times": lambda v: isinstance(v, int) and not isinstance(v, bool) and v >= 0,
        "message_timeout": lambda v: isinstance(v, (int, float))
        and not isinstance(v, bool)
        and v >= 0,
    }
    for key, valid in checks.items():
        value = result.get(key, defaults[key])
        if not valid(value):
            logger.warning("Invalid editor.%s=%r, using %r", key, value, defaults[key])
            value = defaults[key]
        result[key] = value
    return result
