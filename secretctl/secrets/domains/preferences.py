"""Persistent user preferences for secretctl.

Stored as JSON next to the default config file:
~/.config/secretctl/preferences.json
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "secretctl"
PREFERENCES_FILE = CONFIG_DIR / "preferences.json"


def _read() -> Dict[str, Any]:
    """Read the preferences file; a missing or unreadable file counts as empty."""
    if not PREFERENCES_FILE.exists():
        return {}

    try:
        with open(PREFERENCES_FILE, 'r') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Ignoring unreadable preferences file {PREFERENCES_FILE}: {e}")
        return {}

    if not isinstance(data, dict):
        logger.error(f"Ignoring preferences file {PREFERENCES_FILE}: expected a JSON object")
        return {}
    return data


def _write(preferences: Dict[str, Any]) -> None:
    PREFERENCES_FILE.parent.mkdir(parents=True, exist_ok=True)
    with open(PREFERENCES_FILE, 'w') as f:
        json.dump(preferences, f, indent=2)


def get_preference(key: str) -> Optional[str]:
    return _read().get(key)


def set_preference(key: str, value: str) -> None:
    """
    Store a preference value, overwriting any previous one.

    Args:
        key: Preference key
        value: Preference value
    """
    preferences = _read()
    preferences[key] = value
    _write(preferences)
    logger.info(f"Preference '{key}' set to: {value}")


def clear_preference(key: str) -> None:
    """Remove a preference; clearing an unset key is a no-op."""
    preferences = _read()
    if key not in preferences:
        logger.debug(f"Preference '{key}' not set, nothing to clear")
        return
    del preferences[key]
    _write(preferences)
    logger.info(f"Preference '{key}' cleared")
