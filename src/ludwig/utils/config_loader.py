# src/ludwig/utils/config_loader.py
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ludwig.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    "logging": {"level": "WARNING", "modules": {}, "silenced": {}},
    "rules": {"tiers": [], "disabled": []},
    "compiler": {"workers": 1},
}


def load_config(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Loads the application configuration from settings.json.
    Falls back to the built-in defaults when the file is missing or malformed.
    """
    config_path = Path(path) if path else PathUtils.get_settings_file()
    try:
        if not config_path.exists():
            logger.warning("Configuration file not found at %s. Using defaults.", config_path)
            return json.loads(json.dumps(DEFAULT_CONFIG))

        with open(config_path, "r", encoding="utf-8") as f:
            loaded = json.load(f)
        if not isinstance(loaded, dict):
            raise ValueError("top-level value must be an object")
    except (OSError, ValueError) as e:
        logger.error("Failed to load %s: %s", config_path, e)
        return json.loads(json.dumps(DEFAULT_CONFIG))

    return _merge(DEFAULT_CONFIG, loaded)


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively overlays ``override`` on a copy of ``base``."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


CONFIG = load_config()


def get_nested_config(key_path: str, default: Optional[Any] = None, config: Optional[Dict[str, Any]] = None) -> Any:
    """
    Safely retrieves a nested value from a configuration dictionary.

    Uses a dot as a separator, e.g., 'compiler.workers'.

    Args:
        key_path (str): The dotted path to the configuration value.
        default (Any, optional): The default value to return if the key is not found.
        config (dict, optional): The configuration to read; the global CONFIG by default.
    """
    value: Any = CONFIG if config is None else config

    for key in key_path.split('.'):
        if isinstance(value, dict):
            value = value.get(key)
        else:
            return default

    return value if value is not None else default
