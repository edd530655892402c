import json
import logging
from typing import Any, Dict, Optional

from form_auditor.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)


def load_config() -> Dict[str, Any]:
    """Loads the auditor configuration from settings.json."""
    try:
        config_path = PathUtils.get_settings_file()

        if not config_path.exists():
            logger.warning("Configuration file 'settings.json' not found at %s. Using defaults.", config_path)
            return {}

        with open(config_path, "r", encoding="utf-8") as f:
            return json.load(f)

    except (OSError, json.JSONDecodeError) as e:
        logger.error("Failed to load settings.json: %s", e, exc_info=True)
        return {}


CONFIG = load_config()


def get_nested_config(key_path: str, default: Optional[Any] = None) -> Any:
    """
    Safely retrieves a nested value from the global CONFIG dictionary.

    Uses a dot as a separator, e.g., 'capture.frame_timeout_ms'.

    Args:
        key_path (str): The dotted path to the configuration value.
        default (Any, optional): The default value to return if the key is not found.

    Returns:
        Any: The configuration value or the provided default.
    """
    value = CONFIG

    for key in key_path.split('.'):
        if isinstance(value, dict):
            value = value.get(key)
        else:
            return default

    return value if value is not None else default
