"""
Configuration loading - file discovery, pointer files and env overrides.
"""

import logging
import os
from pathlib import Path

import yaml

from ..utils.constants import ENV_CAMERA_URL, ENV_PRECISION_LEVEL, ENV_VISUALIZE
from .validator import ConfigValidationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "config.yaml"


def find_config_file(config_path: str = DEFAULT_CONFIG_NAME) -> Path:
    """
    Find config file in standard locations.

    Search order:
    1. Specified path (if provided and not default)
    2. Current directory (config.yaml)
    3. ~/.config/perception-pipeline/config.yaml

    Args:
        config_path: User-specified config path

    Returns:
        Path to config file

    Raises:
        ConfigValidationError: If no config file found
    """
    if config_path != DEFAULT_CONFIG_NAME:
        specified = Path(config_path)
        if specified.exists():
            return specified
        raise ConfigValidationError(f"Specified config file not found: {config_path}")

    search_paths = [
        Path.cwd() / DEFAULT_CONFIG_NAME,
        Path.home() / ".config" / "perception-pipeline" / DEFAULT_CONFIG_NAME,
    ]

    for path in search_paths:
        if path.exists():
            logger.info(f"Using config: {path}")
            return path

    searched = ", ".join(str(p) for p in search_paths)
    raise ConfigValidationError(f"No config file found (searched: {searched})")


def load_config_file(config_path: str = DEFAULT_CONFIG_NAME) -> dict:
    """
    Load YAML config, following a pointer file if present.

    Supports pointer files: if config only contains `use: path/to/config.yaml`,
    that file is loaded instead (resolved relative to the pointer file).

    Raises:
        ConfigValidationError: If the file is missing or not valid YAML
    """
    config_file = find_config_file(config_path)

    try:
        with open(config_file, encoding="utf-8") as f:
            config = yaml.safe_load(f)

        if config and list(config.keys()) == ["use"]:
            pointer_path = Path(config_file).parent / config["use"]
            logger.info(f"Config pointer: {config_file} -> {pointer_path}")
            with open(pointer_path, encoding="utf-8") as f:
                config = yaml.safe_load(f)
            config_file = pointer_path

    except yaml.YAMLError as e:
        raise ConfigValidationError(f"Invalid YAML in {config_file}: {e}") from e
    except FileNotFoundError as e:
        raise ConfigValidationError(f"Config pointer target not found: {e.filename}") from e

    logger.info(f"Configuration loaded from {config_file}")
    return config or {}


def load_config_with_env(config: dict) -> dict:
    """
    Apply environment variable overrides.

    Args:
        config: Base configuration dictionary

    Returns:
        Configuration with environment variables applied
    """
    if ENV_CAMERA_URL in os.environ:
        logger.info(f"Using camera URL from environment: {ENV_CAMERA_URL}")
        config.setdefault("camera", {})["url"] = os.environ[ENV_CAMERA_URL]

    if ENV_PRECISION_LEVEL in os.environ:
        value = os.environ[ENV_PRECISION_LEVEL]
        logger.info(f"Using precision level from environment: {value}")
        try:
            config.setdefault("engine", {})["precision_level"] = int(value)
        except ValueError:
            raise ConfigValidationError(
                f"{ENV_PRECISION_LEVEL} must be an integer, got '{value}'"
            ) from None

    if ENV_VISUALIZE in os.environ:
        value = os.environ[ENV_VISUALIZE].strip().lower()
        config.setdefault("engine", {})["visualize"] = value in ("1", "true", "yes", "on")
        logger.info(f"Using visualize flag from environment: {value}")

    return config
