"""Configuration loader for the support mailer."""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .models import AppConfig
from .validators import check_for_warnings, emit_warnings

DEFAULT_CONFIG_LOCATIONS = (
    Path("config.yaml"),
    Path("config") / "config.yaml",
)


def load_config(config_path: Optional[Path] = None) -> tuple[AppConfig, EnvironmentConfig]:
    """
    Load and validate configuration from the optional YAML file and environment.

    File lookup:
    1. Use config_path if given (must exist)
    2. Try config.yaml in current directory
    3. Try ./config/config.yaml
    4. Otherwise use built-in defaults

    Args:
        config_path: Optional path to configuration file

    Returns:
        Tuple of (AppConfig, EnvironmentConfig) with validated configuration

    Raises:
        ConfigurationError: If configuration is invalid or an explicit file is missing
    """
    app_config = load_app_config(config_path)

    try:
        env_config = load_environment_config()
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(
            f"Failed to load environment configuration: {e}",
            suggestions=[
                "Copy .env.example to .env and fill in your credentials",
                "Ensure all required environment variables are set",
            ],
        )

    return app_config, env_config


def load_app_config(config_path: Optional[Path] = None) -> AppConfig:
    """
    Load the YAML part of the configuration only.

    Args:
        config_path: Optional path to configuration file

    Returns:
        Validated AppConfig (defaults when no file is found)

    Raises:
        ConfigurationError: If the file cannot be read, parsed, or validated
    """
    config_file = _find_config_file(config_path)
    if config_file is None:
        return AppConfig()

    try:
        with open(config_file, "r") as f:
            config_dict = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Failed to parse YAML configuration: {e}",
            suggestions=[
                "Check YAML syntax in your config file",
                "Ensure proper indentation (use spaces, not tabs)",
            ],
        )
    except OSError as e:
        raise ConfigurationError(
            f"Failed to read configuration file: {e}",
            suggestions=[
                f"Ensure {config_file} is readable",
                "Check file permissions",
            ],
        )

    if config_dict is None:
        return AppConfig()

    if not isinstance(config_dict, dict):
        raise ConfigurationError(
            f"Configuration file {config_file} must contain a mapping at the top level",
            suggestions=["Review config.example.yaml for the expected layout"],
        )

    warnings = check_for_warnings(config_dict)
    if warnings:
        emit_warnings(warnings)

    try:
        return AppConfig.model_validate(config_dict)
    except ValidationError as e:
        raise ConfigurationError.from_validation_error(
            "Configuration validation failed",
            e,
            suggestions=[
                "Review config.example.yaml for correct format",
                "Verify field types match the expected schema",
            ],
        )


def _find_config_file(config_path: Optional[Path] = None) -> Optional[Path]:
    """
    Find configuration file using fallback logic.

    Args:
        config_path: Optional explicit path to config file

    Returns:
        Path to configuration file, or None when no default file exists

    Raises:
        ConfigurationError: If an explicitly specified file does not exist
    """
    if config_path:
        if not config_path.exists():
            raise ConfigurationError(
                f"Specified configuration file not found: {config_path}",
                suggestions=[
                    f"Ensure {config_path} exists",
                    "Omit --config to run with built-in defaults",
                ],
            )
        return config_path

    for candidate in DEFAULT_CONFIG_LOCATIONS:
        if candidate.exists():
            return candidate

    return None
