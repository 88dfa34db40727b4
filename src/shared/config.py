"""Loading of the updater configuration from ``config.yml`` and the environment."""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from .config_schema import UpdaterConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = os.getenv("BANLIST_CONFIG_FILE", "config.yml")

# Environment variables that override keys from the YAML file
ENV_OVERRIDES = {
    "BANLIST_URL": "banlist-url",
    "BANLIST_RETRIES": "retries",
    "BANLIST_MAX_BANDWIDTH": "max-bandwidth",
    "BANLIST_TIMEOUT": "timeout",
    "BANLIST_AUTO_CHECK_INTERVAL": "auto-check-interval",
}


class ConfigValidationError(Exception):
    """Raised when configuration loading or validation fails."""

    pass


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        logger.warning("Config file not found: %s. Using defaults.", path)
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigValidationError(f"Could not read {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigValidationError(f"{path} must contain a mapping of settings")
    return data


def load_config(
    path: Optional[os.PathLike] = None, env: Optional[Dict[str, str]] = None
) -> UpdaterConfig:
    """
    Load the updater configuration.

    Args:
        path: YAML file to read. Defaults to ``BANLIST_CONFIG_FILE``.
        env: Optional environment mapping. If None, uses os.environ.

    Returns:
        Validated UpdaterConfig instance.

    Raises:
        ConfigValidationError: If the file is malformed or a value is invalid.
    """
    env = dict(os.environ) if env is None else env
    config_path = Path(path if path is not None else DEFAULT_CONFIG_FILE)
    values = _read_yaml(config_path)
    for env_key, config_key in ENV_OVERRIDES.items():
        if env.get(env_key):
            values[config_key] = env[env_key]
    try:
        return UpdaterConfig.model_validate(values)
    except ValidationError as exc:
        raise ConfigValidationError(f"Invalid configuration: {exc}") from exc
