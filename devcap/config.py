"""Loading of user defaults from a JSON configuration file."""

import os
import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

logger = logging.getLogger('devcap.config')

CONFIG_ENV_VAR = 'DEVCAP_CONFIG'
DEFAULT_CONFIG_NAME = '.devcap.json'


@dataclass
class DevcapConfig:
    """Defaults for the CLI options. Every field is optional."""
    path: Optional[str] = None
    author: Optional[str] = None
    period: Optional[str] = None
    show_origin: Optional[bool] = None
    color: Optional[bool] = None
    max_workers: Optional[int] = None


_EXPECTED_TYPES = {
    'path': str,
    'author': str,
    'period': str,
    'show_origin': bool,
    'color': bool,
    'max_workers': int,
}


def default_config_path() -> Path:
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / DEFAULT_CONFIG_NAME


def parse_config(data: dict) -> DevcapConfig:
    """
    Build a DevcapConfig from decoded JSON.

    Unknown keys are ignored; values of the wrong type are dropped with a warning.
    """
    values = {}
    for field in fields(DevcapConfig):
        if field.name not in data or data[field.name] is None:
            continue
        value = data[field.name]
        expected = _EXPECTED_TYPES[field.name]
        # bool is a subclass of int
        if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
            logger.warning(f"Ignoring config key '{field.name}': expected {expected.__name__}, got {type(value).__name__}")
            continue
        values[field.name] = value

    if values.get('max_workers') is not None and values['max_workers'] < 1:
        logger.warning("Ignoring config key 'max_workers': must be at least 1")
        del values['max_workers']

    return DevcapConfig(**values)


def load_config(config_file: Optional[str] = None) -> DevcapConfig:
    """
    Load the configuration file, falling back to defaults on any problem.

    Args:
        config_file: Explicit path; default $DEVCAP_CONFIG or ~/.devcap.json

    Returns:
        DevcapConfig (all None when the file is missing or unreadable)
    """
    config_path = Path(config_file).expanduser() if config_file else default_config_path()
    if not config_path.exists():
        return DevcapConfig()

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"Error reading config file {config_path}: {e}")
        return DevcapConfig()

    if not isinstance(data, dict):
        logger.warning(f"Config file {config_path} must contain a JSON object, ignoring it")
        return DevcapConfig()

    logger.info(f"Loaded configuration from {config_path}")
    return parse_config(data)
