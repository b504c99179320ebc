"""
Project Cmxdump - Core Utilities

Logging, configuration loading and small helpers shared by the packages.
"""

import os
import re
import yaml
import logging
from pathlib import Path
from typing import Optional, Dict, Any
from logging.handlers import RotatingFileHandler


# Module logger
logger = logging.getLogger(__name__)

# Product-family prefix of Meraki wireless access points (MR33, MR46, ...)
WIRELESS_AP_PREFIX = "MR"

# A ${VAR} reference left behind by _expand_variables
_UNEXPANDED = re.compile(r"\$\{\w+\}")


class ConfigurationError(Exception):
    """Raised when configuration is missing or cannot be used."""


def setup_logging(
    log_dir: Optional[str] = None,
    log_level: str = "INFO",
    app_name: Optional[str] = None,
) -> logging.Logger:
    """
    Configure application logging.

    Args:
        log_dir: Directory for log files (console only when None)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        app_name: Logger name; the root logger when None

    Returns:
        Configured logger instance

    Raises:
        ConfigurationError: If log_level is not a logging level name
    """
    level = getattr(logging, str(log_level).upper(), None)
    if not isinstance(level, int):
        raise ConfigurationError(f"Unknown log level: {log_level!r}")

    logger = logging.getLogger(app_name)
    logger.setLevel(level)

    # Clear existing handlers
    logger.handlers.clear()

    if log_dir:
        Path(log_dir).mkdir(parents=True, exist_ok=True)

        # File handler with rotation (10MB, keep 5 backups)
        file_handler = RotatingFileHandler(
            Path(log_dir) / f"{app_name or 'cmxdump'}.log",
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        ))
        logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(
        "%(levelname)s - %(message)s"
    ))
    logger.addHandler(console_handler)

    return logger


def load_config(config_path: str = "config/config.yaml") -> Dict[str, Any]:
    """
    Load YAML configuration file.

    ``${VAR}`` placeholders in string values are expanded from the
    process environment.

    Args:
        config_path: Path to configuration file

    Returns:
        Configuration dictionary
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_file, "r") as f:
        config = yaml.safe_load(f) or {}

    if not isinstance(config, dict):
        raise ConfigurationError(f"Configuration root must be a mapping: {config_path}")

    return _expand_variables(config, dict(os.environ))


def _expand_variables(obj: Any, variables: Dict[str, str]) -> Any:
    """Recursively expand ${var} in config values."""
    if isinstance(obj, dict):
        return {k: _expand_variables(v, variables) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_variables(item, variables) for item in obj]
    elif isinstance(obj, str):
        for var, value in variables.items():
            obj = obj.replace(f"${{{var}}}", value)
        return obj
    return obj


def load_meraki_config(
    config_path: str = "config/config.yaml",
    overrides: Optional[Dict[str, Any]] = None,
):
    """
    Load the ``meraki`` section of a YAML file into a MerakiConfig.

    MERAKI_API_KEY and MERAKI_NETWORK_ID override the file values;
    non-empty entries of ``overrides`` take precedence over both.

    Args:
        config_path: Path to configuration file
        overrides: Values from the command line

    Returns:
        MerakiConfig

    Raises:
        ConfigurationError: If the API key is missing or a value is malformed
    """
    from .models import MerakiConfig

    config = load_config(config_path)
    section = dict(config.get("meraki") or {})

    # Placeholders whose variable was not set are treated as missing
    for key, value in list(section.items()):
        if isinstance(value, str) and _UNEXPANDED.search(value):
            logger.warning(f"meraki.{key} references an unset variable: {value}")
            del section[key]

    if os.environ.get("MERAKI_API_KEY"):
        section["api_key"] = os.environ["MERAKI_API_KEY"]
    if os.environ.get("MERAKI_NETWORK_ID"):
        section["network_id"] = os.environ["MERAKI_NETWORK_ID"]
    section.update({k: v for k, v in (overrides or {}).items() if v})

    meraki_config = MerakiConfig.from_dict(section)

    if not meraki_config.api_key:
        raise ConfigurationError("meraki.api_key is not set")

    logger.debug(f"Loaded Meraki configuration from {config_path}")
    return meraki_config


def has_model_prefix(model: Optional[str], prefix: str = WIRELESS_AP_PREFIX) -> bool:
    """
    Check a device model string against a product-family prefix.

    Models shorter than the prefix never match.

    Args:
        model: Device model, e.g. "MR33"
        prefix: Family code to compare against

    Returns:
        True if the model belongs to the family
    """
    if not isinstance(model, str) or len(model) < len(prefix):
        return False
    return model[:len(prefix)] == prefix
