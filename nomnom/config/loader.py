"""Configuration loading utilities."""

import json
import os
import re
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import ValidationError

from nomnom.config.schema import Config, RecoverySettings

_ENV_PREFIX = "NOMNOM_"
_FALSEY = {"0", "false", "no", "off"}
_PRESETS = {"quick", "standard", "persistent"}
_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def get_config_path() -> Path:
    """Get the default configuration file path."""
    return Path.home() / ".nomnom" / "config.json"


def load_config(config_path: Path | None = None) -> Config:
    """
    Load configuration from file or create default.

    Args:
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        Loaded configuration object.
    """
    path = config_path or get_config_path()

    if path.exists():
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
            config = Config.model_validate(convert_keys(data))
            _apply_env_overrides(config)
            return config
        except (json.JSONDecodeError, ValidationError, ValueError) as e:
            logger.warning("Failed to load config from {}: {}", path, e)
            logger.warning("Using default configuration.")

    config = Config()
    _apply_env_overrides(config)
    return config


def save_config(config: Config, config_path: Path | None = None) -> None:
    """
    Save configuration to file.

    Args:
        config: Configuration to save.
        config_path: Optional path to save to. Uses default if not provided.
    """
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    # Convert to camelCase format
    data = config.model_dump(exclude_none=True)
    data = convert_to_camel(data)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def _read_env() -> dict[str, str]:
    """NOMNOM_* variables from the process, with ./.env as a fallback."""
    env = {k: v for k, v in os.environ.items() if k.startswith(_ENV_PREFIX)}
    dotenv = Path.cwd() / ".env"
    if not dotenv.exists():
        return env

    for raw_line in dotenv.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip().removeprefix("export ").strip()
        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or not key.startswith(_ENV_PREFIX):
            continue
        env.setdefault(key, value.strip().strip("'\""))
    return env


def _apply_env_overrides(config: Config) -> None:
    """Apply non-file overrides.

    Supported overrides:
    - NOMNOM_RETRY_PRESET        -> recovery.defaults.preset
    - NOMNOM_RETRY_MAX_ATTEMPTS  -> recovery.defaults.max_attempts
    - NOMNOM_RECOVERY_LOGGING    -> recovery.enable_logging
    """
    env = _read_env()
    updates: dict[str, Any] = {}

    preset = env.get("NOMNOM_RETRY_PRESET", "").strip().lower()
    if preset in _PRESETS:
        updates["preset"] = preset
    elif preset:
        logger.warning("Ignoring unknown NOMNOM_RETRY_PRESET '{}'", preset)

    max_attempts = env.get("NOMNOM_RETRY_MAX_ATTEMPTS", "").strip()
    if max_attempts.isdigit() and int(max_attempts) >= 1:
        updates["max_attempts"] = int(max_attempts)
    elif max_attempts:
        logger.warning("Ignoring invalid NOMNOM_RETRY_MAX_ATTEMPTS '{}'", max_attempts)

    if updates:
        merged = config.recovery.model_dump()
        merged["defaults"].update(updates)
        try:
            config.recovery = RecoverySettings.model_validate(merged)
        except ValidationError as e:
            logger.warning("Ignoring retry overrides from environment {}: {}", updates, e)

    logging_flag = env.get("NOMNOM_RECOVERY_LOGGING", "").strip().lower()
    if logging_flag:
        config.recovery.enable_logging = logging_flag not in _FALSEY


def convert_keys(data: Any) -> Any:
    """Convert camelCase keys to snake_case for Pydantic."""
    if isinstance(data, dict):
        return {camel_to_snake(k): convert_keys(v) for k, v in data.items()}
    return data


def convert_to_camel(data: Any) -> Any:
    """Convert snake_case keys to camelCase."""
    if isinstance(data, dict):
        return {snake_to_camel(k): convert_to_camel(v) for k, v in data.items()}
    return data


def camel_to_snake(name: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def snake_to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)
