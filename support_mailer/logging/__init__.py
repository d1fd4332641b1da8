"""Structured logging helpers for the support mailer."""

import logging
from typing import Optional, Union

from .context import clear_log_context, get_log_context, log_context


class ComponentLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter that merges a fixed component field with per-call extra."""

    def process(self, msg, kwargs):
        # Per-call extra wins over the adapter's defaults
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def get_logger(
    name: str, component: Optional[str] = None
) -> Union[logging.Logger, ComponentLoggerAdapter]:
    """Get a logger, optionally tagging every record with a component.

    Example:
        >>> logger = get_logger(__name__, component="dispatch")
        >>> logger.info("Email sent", extra={"event": "dispatch.send.success"})
    """
    logger = logging.getLogger(name)

    if component:
        return ComponentLoggerAdapter(logger, {"component": component})

    return logger


__all__ = [
    "ComponentLoggerAdapter",
    "get_logger",
    "log_context",
    "get_log_context",
    "clear_log_context",
]
