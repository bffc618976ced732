"""Provides functions for loading and accessing configuration settings.

Supports loading from .env files, environment variables, and a dedicated
YAML configuration file (~/.moviesdb/config.yaml).
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# --- Configuration Constants ---
DEFAULT_CONFIG_DIR = Path.home() / ".moviesdb"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"
ENV_FILE_NAME = ".env"

API_KEY = "MOVIESDB_API_KEY"
API_HOST = "MOVIESDB_API_HOST"
BASE_URL = "MOVIESDB_BASE_URL"
TIMEOUT_SECONDS = "MOVIESDB_TIMEOUT_SECONDS"
MAX_ATTEMPTS = "MOVIESDB_MAX_ATTEMPTS"
BACKOFF_BASE_SECONDS = "MOVIESDB_BACKOFF_BASE_SECONDS"
BACKOFF_MAX_DELAY_SECONDS = "MOVIESDB_BACKOFF_MAX_DELAY_SECONDS"
RATE_LIMIT_REQUESTS = "MOVIESDB_RATE_LIMIT_REQUESTS"
RATE_LIMIT_WINDOW_SECONDS = "MOVIESDB_RATE_LIMIT_WINDOW_SECONDS"

# Keys whose values must never reach the logs.
SECRET_KEYS = frozenset({API_KEY})

# --- Global Configuration Store ---
_config: Dict[str, Any] = {}
_test_config: Dict[str, Any] = {}
_loaded = False


def load_configuration(
    config_file: Optional[Path] = None,
    env_file: Optional[Path] = None,
    force: bool = False,
) -> None:
    """Loads configuration from environment, .env file, and YAML file.

    Priority order (highest to lowest):
    1. In-process overrides (set_config, used by tests and CLI flags)
    2. Environment Variables
    3. .env file (never overrides variables already in the environment)
    4. YAML configuration file

    Args:
        config_file: Path to the YAML configuration file (~/.moviesdb/config.yaml if None).
        env_file: Path to the .env file (searches upwards from cwd if None).
        force: Reload even if configuration was already loaded.
    """
    global _config, _loaded
    if _loaded and not force:
        logger.debug("Configuration already loaded.")
        return

    _config = {}
    config_file = config_file or DEFAULT_CONFIG_FILE

    # 1. YAML file (lowest priority)
    if config_file.exists():
        try:
            with open(config_file, "r", encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load or parse YAML config {config_file}: {e}")
        else:
            if isinstance(yaml_config, dict):
                _config.update(_flatten(yaml_config))
                logger.info(f"Loaded configuration from YAML: {config_file}")
            elif yaml_config is not None:
                logger.warning(f"YAML config file {config_file} did not contain a mapping.")
    else:
        logger.debug(f"YAML config file not found: {config_file}")

    # 2. .env file; override=False keeps real environment variables on top
    dotenv_path = env_file or find_dotenv_path()
    if dotenv_path and load_dotenv(dotenv_path=dotenv_path, override=False):
        logger.info(f"Loaded environment variables from: {dotenv_path}")
    else:
        logger.debug(".env file not found at or above current directory.")

    _loaded = True
    logger.debug("Configuration loading process completed.")


def _flatten(data: Dict[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Turns nested YAML mappings into dotted keys ('logging': {'level': x} -> 'logging.level')."""
    flat: Dict[str, Any] = {}
    for key, value in data.items():
        full_key = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(_flatten(value, prefix=f"{full_key}."))
        else:
            flat[full_key] = value
    return flat


def _coerce(value: str) -> Any:
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    try:
        return float(value) if "." in value else int(value)
    except ValueError:
        return value


def get_config(key: str, default: Any = None) -> Any:
    """Gets a configuration value by key.

    Dotted keys (e.g. 'logging.level') are also looked up in the environment as
    upper-case underscore names ('LOGGING_LEVEL').

    Args:
        key: The configuration key.
        default: Default value if the key is not found.

    Returns:
        The configuration value.
    """
    if key in _test_config:
        return _test_config[key]

    env_key = key.upper().replace(".", "_")
    if env_key in os.environ:
        raw = os.environ[env_key]
        return raw if key in SECRET_KEYS else _coerce(raw)

    if key in _config:
        return _config[key]

    shown = "***" if key in SECRET_KEYS else default
    logger.debug(f"Config key '{key}' not found in environment or loaded config. Returning default: {shown}")
    return default


def set_config(key: str, value: Any) -> None:
    """Sets an in-process override for `key` (highest priority)."""
    shown = "***" if key in SECRET_KEYS else value
    logger.debug(f"Setting config override: {key} = {shown}")
    _test_config[key] = value


def reset_config() -> None:
    """Drops overrides and loaded values; the next load_configuration reloads from disk."""
    global _config, _loaded
    _test_config.clear()
    _config = {}
    _loaded = False


def find_dotenv_path() -> Optional[Path]:
    """Searches for the .env file upwards from the current directory."""
    cwd = Path.cwd()
    for path in [cwd] + list(cwd.parents):
        env_path = path / ENV_FILE_NAME
        if env_path.is_file():
            return env_path
    return None


# --- Convenience Functions ---

def get_api_key() -> Optional[str]:
    key = get_config(API_KEY) or get_config("rapidapi.key")
    return str(key) if key else None


def get_api_host() -> str:
    return str(get_config(API_HOST) or get_config("rapidapi.host") or "moviesdatabase.p.rapidapi.com")


def get_float(key: str, default: float) -> float:
    value = get_config(key, default)
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning(f"Config key '{key}' has non-numeric value {value!r}; using {default}")
        return default


def get_int(key: str, default: Optional[int]) -> Optional[int]:
    value = get_config(key, default)
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning(f"Config key '{key}' has non-integer value {value!r}; using {default}")
        return default
