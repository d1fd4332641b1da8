"""Soft checks on the YAML configuration.

These never stop the service from starting; they flag settings that are
valid but likely to surprise whoever runs it.
"""

import warnings
from typing import Any, Dict, List

# Below this many seconds a slow Supabase response turns into a 401
MIN_SENSIBLE_TIMEOUT = 5


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """Return human-readable warnings for a raw config mapping."""
    found = []

    email = config_dict.get("email") or {}
    if isinstance(email, dict):
        max_retries = email.get("max_retries", 0)
        if isinstance(max_retries, int) and max_retries > 0:
            found.append(
                f"email.max_retries={max_retries}: a provider timeout after acceptance "
                "can deliver the same email more than once"
            )

        timeout = email.get("http_request_timeout")
        if isinstance(timeout, (int, float)) and timeout < MIN_SENSIBLE_TIMEOUT:
            found.append(
                f"Short http_request_timeout ({timeout}s) may reject valid sessions "
                "when the identity provider is slow"
            )

    server = config_dict.get("server") or {}
    if isinstance(server, dict):
        port = server.get("port")
        if isinstance(port, int) and port < 1024:
            found.append(f"server.port={port} is a privileged port and may require root")

    return found


def emit_warnings(messages: List[str]) -> None:
    for message in messages:
        warnings.warn(message, UserWarning, stacklevel=2)
