"""Configuration management module for the SciTech support mailer."""

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_app_config, load_config
from .models import (
    AppConfig,
    EmailConfig,
    LogFormat,
    LogLevel,
    LoggingConfig,
    ServerConfig,
)

__all__ = [
    # Main loader functions
    "load_config",
    "load_app_config",
    "load_environment_config",
    # Configuration models
    "AppConfig",
    "ServerConfig",
    "EmailConfig",
    "LoggingConfig",
    "EnvironmentConfig",
    # Enums
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigurationError",
]
