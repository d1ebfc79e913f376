"""Config loading/saving and paths.

The configuration lives in ``~/.config/mux-controller/config.json``. A missing
file means defaults; command-line flags override whatever is loaded.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import dacite

from .exceptions import (
    ConfigLoadError,
    ConfigSaveError,
    ConfigValidationError,
    record_error,
)
from .models import AppConfig, load_config_from_dict, model_to_dict

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "mux-controller"
GLOBAL_CONFIG_PATH = CONFIG_DIR / "config.json"


def load_global_config() -> AppConfig:
    """
    Load global application configuration.

    Returns:
        AppConfig from the config file, or defaults if it does not exist.

    Raises:
        ConfigLoadError: If the config file exists but cannot be read or parsed.
        ConfigValidationError: If the file does not match the config schema.
    """
    if not GLOBAL_CONFIG_PATH.exists():
        logger.debug("No global config found, using defaults")
        return AppConfig()

    try:
        with open(GLOBAL_CONFIG_PATH, encoding="utf-8") as f:
            data = json.load(f)
        logger.debug("Loaded global config from %s", GLOBAL_CONFIG_PATH)
    except json.JSONDecodeError as e:
        logger.error("Invalid JSON in config file: %s", e)
        record_error(e)
        raise ConfigLoadError(
            f"Invalid JSON in config file at line {e.lineno}",
            file_path=str(GLOBAL_CONFIG_PATH),
            context={"line": e.lineno, "column": e.colno},
            cause=e,
        ) from e
    except OSError as e:
        logger.error("Failed to read config file: %s", e)
        record_error(e)
        raise ConfigLoadError(
            "Failed to read config file",
            file_path=str(GLOBAL_CONFIG_PATH),
            cause=e,
        ) from e

    if not isinstance(data, dict):
        raise ConfigValidationError(
            "Config file must contain a JSON object",
            value=data,
            expected="object",
        )

    try:
        return load_config_from_dict(data)
    except (dacite.DaciteError, ValueError) as e:
        # ValueError comes from casting an unknown enum value
        logger.error("Config schema validation failed: %s", e)
        record_error(e)
        raise ConfigValidationError(
            f"Config schema validation failed: {e}",
            context={"file_path": str(GLOBAL_CONFIG_PATH)},
            cause=e,
        ) from e


def save_global_config(config: AppConfig) -> None:
    """
    Save global application configuration, creating the directory if needed.

    Raises:
        ConfigSaveError: If the config cannot be saved.
    """
    try:
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        with open(GLOBAL_CONFIG_PATH, "w", encoding="utf-8") as f:
            json.dump(model_to_dict(config), f, indent=2)
        logger.debug("Saved global config to %s", GLOBAL_CONFIG_PATH)
    except OSError as e:
        logger.error("Failed to write config file: %s", e)
        record_error(e)
        raise ConfigSaveError(
            "Failed to write config file",
            file_path=str(GLOBAL_CONFIG_PATH),
            cause=e,
        ) from e

