"""Environment variable loading and validation."""

import os
from typing import Optional
from urllib.parse import urlparse

from email_validator import EmailNotValidError, validate_email

from .exceptions import ConfigurationError

DEFAULT_SENDER = "no-reply@scitech.support"
DEFAULT_MESSAGE_STREAM = "outbound"
DEFAULT_EMAIL_API_URL = "https://api.postmarkapp.com/email"


class EnvironmentConfig:
    """Credentials and endpoints for the identity provider and email transport."""

    def __init__(
        self,
        supabase_url: str,
        supabase_anon_key: str,
        email_api_key: str,
        email_sender: Optional[str] = None,
        message_stream: Optional[str] = None,
        email_api_url: Optional[str] = None,
        log_level: Optional[str] = None,
        environment: Optional[str] = None,
    ):
        """Initialize environment configuration."""
        self.supabase_url = supabase_url.rstrip("/")
        self.supabase_anon_key = supabase_anon_key
        self.email_api_key = email_api_key
        self.email_sender = email_sender or DEFAULT_SENDER
        self.message_stream = message_stream or DEFAULT_MESSAGE_STREAM
        self.email_api_url = email_api_url or DEFAULT_EMAIL_API_URL
        self.log_level = log_level
        self.environment = environment or "local"


def load_environment_config() -> EnvironmentConfig:
    """
    Load and validate environment variables.

    Required environment variables:
    - SUPABASE_URL: Base URL of the Supabase project (identity provider)
    - SUPABASE_ANON_KEY: Public (anon) key of the Supabase project
    - EMAIL_API_KEY: Server token for the transactional email provider

    Optional environment variables:
    - EMAIL_SENDER: From address (default: no-reply@scitech.support)
    - EMAIL_MESSAGE_STREAM: Provider delivery stream (default: outbound)
    - EMAIL_API_URL: Provider send endpoint (default: Postmark)
    - LOG_LEVEL: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - ENVIRONMENT: Environment label used in logs (default: local)

    Returns:
        EnvironmentConfig object with validated values

    Raises:
        ConfigurationError: If required variables are missing or invalid
    """
    errors = []

    supabase_url = os.getenv("SUPABASE_URL")
    supabase_anon_key = os.getenv("SUPABASE_ANON_KEY")
    email_api_key = os.getenv("EMAIL_API_KEY")

    email_sender = os.getenv("EMAIL_SENDER")
    message_stream = os.getenv("EMAIL_MESSAGE_STREAM")
    email_api_url = os.getenv("EMAIL_API_URL")
    log_level = os.getenv("LOG_LEVEL")
    environment = os.getenv("ENVIRONMENT")

    if not supabase_url:
        errors.append("Missing required environment variable: SUPABASE_URL")
    elif not _is_http_url(supabase_url):
        errors.append(f"Invalid SUPABASE_URL: '{supabase_url}'. Must be an http(s) URL.")

    if not supabase_anon_key:
        errors.append("Missing required environment variable: SUPABASE_ANON_KEY")

    if not email_api_key:
        errors.append("Missing required environment variable: EMAIL_API_KEY")

    if email_api_url and not _is_http_url(email_api_url):
        errors.append(f"Invalid EMAIL_API_URL: '{email_api_url}'. Must be an http(s) URL.")

    if email_sender:
        try:
            validate_email(email_sender, check_deliverability=False)
        except EmailNotValidError as e:
            errors.append(f"Invalid email address in EMAIL_SENDER: '{email_sender}' - {e}")

    if log_level:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if log_level.upper() not in valid_levels:
            errors.append(
                f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(valid_levels)}"
            )

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and fill in your credentials",
                "Use the project URL and anon key from the Supabase dashboard",
                "Use a server token from the email provider for EMAIL_API_KEY",
            ],
        )

    return EnvironmentConfig(
        supabase_url=supabase_url,
        supabase_anon_key=supabase_anon_key,
        email_api_key=email_api_key,
        email_sender=email_sender,
        message_stream=message_stream,
        email_api_url=email_api_url,
        log_level=log_level.upper() if log_level else None,
        environment=environment,
    )


def _is_http_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)
