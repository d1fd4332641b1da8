"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class ServerConfig(BaseModel):
    """HTTP server binding."""

    host: str = Field("0.0.0.0", min_length=1, description="Interface to bind")
    port: int = Field(8000, ge=1, le=65535, description="TCP port to listen on")

    @field_validator("host")
    @classmethod
    def strip_host(cls, v: str) -> str:
        """Strip whitespace from host."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("host cannot be empty")
        return stripped


class EmailConfig(BaseModel):
    """Email delivery settings.

    The default is a single delivery attempt. Setting max_retries above zero
    enables bounded exponential backoff between attempts.
    """

    max_retries: int = Field(
        0, ge=0, le=5, description="Retry attempts after a failed provider call"
    )
    retry_backoff_multiplier: float = Field(
        2.0, ge=1.0, le=5.0, description="Exponential backoff multiplier for retries"
    )
    retry_initial_delay: float = Field(
        1.0, ge=1.0, le=60.0, description="Initial retry delay in seconds"
    )
    http_request_timeout: Optional[float] = Field(
        None,
        ge=1.0,
        le=300.0,
        description="Timeout for identity and provider calls (seconds, none by default)",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True, "validate_default": True}


class AppConfig(BaseModel):
    """Root configuration object for the support mailer."""

    server: ServerConfig = Field(default_factory=ServerConfig, description="HTTP server")
    email: EmailConfig = Field(default_factory=EmailConfig, description="Email settings")
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

    model_config = {"extra": "forbid"}
