"""Main entry point for the SciTech support mailer service."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import sys
from pathlib import Path
from typing import Optional, Tuple

import uvicorn

from support_mailer.api import create_app
from support_mailer.config.environment import EnvironmentConfig
from support_mailer.config.exceptions import ConfigurationError
from support_mailer.config.loader import load_config
from support_mailer.config.models import AppConfig
from support_mailer.logging import get_logger
from support_mailer.logging.config import configure_logging
from support_mailer.notifications import NotificationService

logger = get_logger(__name__, component="cli")


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration and settle the effective log level.

    Log level priority: CLI > LOG_LEVEL environment variable > config file.

    Args:
        config_path: Path to configuration file (None for default lookup)
        log_level_override: Log level from CLI

    Returns:
        Tuple of (AppConfig, EnvironmentConfig)

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    if log_level_override:
        env_config.log_level = log_level_override
    elif not env_config.log_level:
        env_config.log_level = app_config.logging.level

    return app_config, env_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="SciTech Support Mailer - transactional email dispatch for the support portal"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml or config/config.yaml if present)",
    )
    parser.add_argument("--host", default=None, help="Interface to bind (overrides config)")
    parser.add_argument("--port", type=int, default=None, help="Port to listen on (overrides config)")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )
    parser.add_argument(
        "--check-config",
        action="store_true",
        help="Validate configuration and exit",
    )
    return parser


def main(argv: Optional[list] = None) -> int:
    """
    Main entry point for the support mailer.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    args = build_parser().parse_args(argv)

    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level)

        if args.check_config:
            print("✓ Configuration is valid")
            print(f"  - Identity provider: {env_config.supabase_url}")
            print(f"  - Sender: {env_config.email_sender} (stream: {env_config.message_stream})")
            print(f"  - Delivery attempts: {app_config.email.max_retries + 1}")
            return 0

        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=env_config.environment,
        )

        host = args.host or app_config.server.host
        port = args.port or app_config.server.port

        service = NotificationService.from_config(app_config, env_config)
        app = create_app(service)

        logger.info(
            "Support mailer starting",
            extra={
                "event": "service.starting",
                "host": host,
                "port": port,
                "log_level": env_config.log_level,
                "message_stream": env_config.message_stream,
            },
        )

        # log_config=None keeps the handlers installed by configure_logging
        uvicorn.run(app, host=host, port=port, log_config=None)

        logger.info("Support mailer stopped", extra={"event": "service.stopping"})
        return 0

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nShutdown requested by user", file=sys.stderr)
        return 0
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        logger.critical(
            "Fatal error during startup",
            extra={
                "event": "service.startup.failed",
                "error_type": type(e).__name__,
                "error": str(e),
            },
            exc_info=True,
        )
        return 1


if __name__ == "__main__":
    sys.exit(main())
