"""Configuration loader for secretctl."""
import os
import math
import logging
from pathlib import Path
from typing import Dict, Any
import yaml

from . import preferences

logger = logging.getLogger(__name__)

SUPPORTED_AUTH_TYPES = ("service_account", "application_default")


class ConfigError(Exception):
    """Configuration error exception."""
    pass


class ConfigNotFoundError(ConfigError):
    """No config file exists at the preferred or default location."""
    pass


def default_config_path() -> Path:
    return preferences.CONFIG_DIR / "config.yml"


def _get_config_path() -> str:
    """
    Resolve the config file path.

    Priority order:
    1. Path stored with 'secret config set-path'
    2. Default location: ~/.config/secretctl/config.yml

    Returns:
        Absolute path to config file

    Raises:
        ConfigNotFoundError: If no config file exists in either location
    """
    config_path_pref = preferences.get_preference("config_path")
    if config_path_pref:
        config_path = Path(config_path_pref)
        if config_path.exists():
            logger.info(f"Using config from preference: {config_path}")
            return str(config_path)
        logger.warning(f"Config path from preference doesn't exist: {config_path}")

    default_config = default_config_path()
    if default_config.exists():
        logger.info(f"Using default config location: {default_config}")
        return str(default_config)

    raise ConfigNotFoundError(
        "Configuration file not found. Either:\n\n"
        f"1. Create {default_config}\n"
        "2. Point to an existing file: secret config set-path /path/to/config.yml\n"
        "3. Skip the file entirely by setting GCP_PROJECT (credentials then come\n"
        "   from Application Default Credentials)"
    )


def _validate_authentication(auth: Any, config_path: str) -> None:
    if not isinstance(auth, dict) or 'type' not in auth:
        raise ConfigError(
            f"Missing 'authentication.type' in config at {config_path}\n"
            f"Supported types: {', '.join(SUPPORTED_AUTH_TYPES)}"
        )

    if auth['type'] not in SUPPORTED_AUTH_TYPES:
        raise ConfigError(
            f"Unsupported authentication type: {auth['type']}\n"
            f"Supported types: {', '.join(SUPPORTED_AUTH_TYPES)}"
        )

    if auth['type'] != 'service_account':
        return

    service_account_path = auth.get('service_account_path')
    if not service_account_path:
        raise ConfigError(
            "Missing 'authentication.service_account_path' in config\n"
            "Please specify the absolute path to your service account JSON file."
        )

    if not os.path.exists(service_account_path):
        raise ConfigError(
            f"Service account file not found at: {service_account_path}\n"
            f"Please ensure the file exists or update the path in {config_path}"
        )

    if not os.path.isfile(service_account_path):
        raise ConfigError(f"Service account path is not a file: {service_account_path}")


def load_config() -> Dict[str, Any]:
    """
    Load and validate configuration from YAML file.

    The path is resolved on every call, so a new 'config set-path' takes
    effect without restarting the process.

    Returns:
        Dict with keys:
        - authentication: dict with type and, for service_account, service_account_path
        - gcp: dict with project_id and optional timeout (seconds)

    Raises:
        ConfigError: If the file is missing, unparsable or incomplete
    """
    config_path = _get_config_path()

    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML config at {config_path}: {e}")
    except OSError as e:
        raise ConfigError(f"Failed to read config file at {config_path}: {e}")

    if not config:
        raise ConfigError(f"Config file at {config_path} is empty")

    if not isinstance(config, dict):
        raise ConfigError(f"Config file at {config_path} must be a YAML mapping")

    if 'authentication' not in config:
        raise ConfigError(
            f"Missing 'authentication' section in config at {config_path}\n"
            f"Required format:\n"
            f"authentication:\n"
            f"  type: service_account\n"
            f"  service_account_path: /path/to/service-account.json"
        )
    _validate_authentication(config['authentication'], config_path)

    gcp = config.get('gcp')
    if not isinstance(gcp, dict):
        raise ConfigError(
            f"Missing 'gcp' section in config at {config_path}\n"
            f"Required format:\n"
            f"gcp:\n"
            f"  project_id: your-project-id"
        )

    if 'project_id' not in gcp:
        raise ConfigError("Missing 'gcp.project_id' in config")

    timeout = gcp.get('timeout')
    if timeout is not None:
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) \
                or not math.isfinite(timeout) or timeout <= 0:
            raise ConfigError(f"'gcp.timeout' must be a positive number of seconds, got: {timeout!r}")

    logger.info(f"Configuration loaded successfully from {config_path}")
    logger.debug(f"Using authentication type: {config['authentication']['type']}")
    logger.debug(f"Using project ID: {gcp['project_id']}")

    return config
