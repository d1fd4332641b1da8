"""Notification dispatch for the SciTech support portal.

This package provides the complete send-email pipeline:
- NotificationService: authenticate, validate, render, send
- Request schemas: one pydantic model per email type
- SupabaseIdentityVerifier: bearer-token verification
- TemplateRenderer: Jinja2-based email rendering
- PostmarkTransport: provider API client
"""

from .identity import IdentityVerifier, SupabaseIdentityVerifier, extract_bearer_token
from .models import (
    CallerIdentity,
    DispatchError,
    DispatchResult,
    InvalidField,
    InvalidToken,
    MissingField,
    MissingKind,
    NotificationTemplateError,
    OutboundEmail,
    RenderedMessage,
    TransportError,
    TransportResult,
    Unauthenticated,
    UnexpectedError,
    UnknownKind,
)
from .schemas import (
    CommentNotificationRequest,
    NotificationRequest,
    PasswordResetRequest,
    WelcomeEmailRequest,
    parse_notification_request,
)
from .service import NotificationService
from .templates import TemplateRenderer
from .transport import EmailTransport, PostmarkTransport

__all__ = [
    # Main service
    "NotificationService",
    # Requests
    "NotificationRequest",
    "CommentNotificationRequest",
    "WelcomeEmailRequest",
    "PasswordResetRequest",
    "parse_notification_request",
    # Models and results
    "CallerIdentity",
    "RenderedMessage",
    "OutboundEmail",
    "TransportResult",
    "DispatchResult",
    # Exceptions
    "DispatchError",
    "MissingKind",
    "UnknownKind",
    "MissingField",
    "Unauthenticated",
    "InvalidField",
    "InvalidToken",
    "TransportError",
    "NotificationTemplateError",
    "UnexpectedError",
    # Components
    "IdentityVerifier",
    "SupabaseIdentityVerifier",
    "extract_bearer_token",
    "TemplateRenderer",
    "EmailTransport",
    "PostmarkTransport",
]
