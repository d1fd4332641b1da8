"""Request-scoped context for structured logging.

Fields bound here (request_id, email_type, ...) are copied onto every log
record emitted while the scope is active. Storage is a ContextVar, so each
request handled by the server's worker threads sees only its own fields.
"""

from contextvars import ContextVar, Token
from typing import Any, Dict, Optional

LogContextVar: ContextVar[Dict[str, Any]] = ContextVar("log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the fields bound in the current scope."""
    return LogContextVar.get().copy()


def bind_log_context(**fields: Any) -> Token:
    """Merge fields into the current context.

    Returns:
        Token for restoring the previous context with reset_log_context()
    """
    return LogContextVar.set({**LogContextVar.get(), **fields})


def reset_log_context(token: Token) -> None:
    """Restore the context captured by bind_log_context()."""
    LogContextVar.reset(token)


def clear_log_context() -> None:
    """Drop all bound fields. Used by tests."""
    LogContextVar.set({})


class log_context:
    """Context manager binding fields for the duration of a block.

    Example:
        >>> with log_context(request_id="4f1c", email_type="welcome_email"):
        ...     logger.info("Dispatching")  # carries request_id and email_type
    """

    def __init__(self, **fields: Any):
        self.fields = fields
        self.token: Optional[Token] = None

    def __enter__(self):
        self.token = bind_log_context(**self.fields)
        return self

    def bind(self, **fields: Any) -> None:
        """Add fields to this scope after it has been entered."""
        LogContextVar.set({**LogContextVar.get(), **fields})

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.token is not None:
            reset_log_context(self.token)
        return False
