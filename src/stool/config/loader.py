"""Config loader for stool.

Search order: $STOOL_CONFIG -> ./stool.yaml -> ./config.yaml -> platform config.
A missing configuration is not an error: every registry is simply empty.
"""

from __future__ import annotations

import logging
import os
import platform
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from stool.config.settings import StoolConfig
from stool.errors import ErrorKind, StoolError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "STOOL_CONFIG"


def get_platform_config_path() -> Path:
    """Return the platform-specific config.yaml path."""
    system = platform.system().lower()
    if system == "darwin":
        return Path.home() / "Library" / "Application Support" / "stool" / "config.yaml"
    if system == "windows":
        appdata = os.environ.get("APPDATA")
        if appdata:
            return Path(appdata) / "stool" / "config.yaml"
        return Path.home() / "AppData" / "Roaming" / "stool" / "config.yaml"

    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / "stool" / "config.yaml"
    return Path.home() / ".config" / "stool" / "config.yaml"


def get_config_search_paths() -> list[Path]:
    """Return config search paths in priority order."""
    return [
        Path("./stool.yaml"),
        Path("./config.yaml"),
        get_platform_config_path(),
    ]


def _find_config_file() -> Path | None:
    """Find the first existing config file in search order."""
    for path in get_config_search_paths():
        if path.is_file():
            return path
    return None


def resolve_config_path(config_path: Path | None = None) -> Path | None:
    """Resolve which file, if any, configuration is read from."""
    if config_path:
        return config_path
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return _find_config_file()


def _parse_yaml(path: Path) -> dict[str, Any]:
    """Parse a YAML file and return its top-level mapping."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise StoolError(
            ErrorKind.config_load_failed, f"Failed to read config file: {path}"
        ) from e

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise StoolError(
            ErrorKind.config_parse_error, f"Failed to parse YAML config {path}: {e}"
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise StoolError(
            ErrorKind.config_parse_error,
            f"Config {path} must be a mapping at the top level, got {type(data).__name__}",
        )
    return data


def load_config(config_path: Path | None = None) -> StoolConfig:
    """Load the server and registry configuration.

    Args:
        config_path: Explicit path to a config file. If None, ``$STOOL_CONFIG``
            and then the default locations are searched.

    Returns:
        StoolConfig with loaded or empty registries.

    Raises:
        StoolError: ``config_load_failed`` if an explicit file is missing or
            unreadable, ``config_parse_error`` if it is not valid YAML or does
            not match the expected shape.
    """
    explicit = config_path is not None or bool(os.environ.get(CONFIG_ENV_VAR))
    path = resolve_config_path(config_path)

    if path is None:
        logger.debug("No config file found; using empty configuration")
        return StoolConfig()

    if not path.exists():
        if explicit:
            raise StoolError(
                ErrorKind.config_load_failed,
                f"Configuration file not found at {path}. "
                "Check the path or omit --config to use the default search paths.",
            )
        return StoolConfig()

    logger.debug("Reading config from %s", path)
    data = _parse_yaml(path)

    try:
        config = StoolConfig.model_validate(data)
    except ValidationError as e:
        raise StoolError(ErrorKind.config_parse_error, f"Invalid config {path}: {e}") from e

    config.warn_ambiguous_credentials()
    return config
