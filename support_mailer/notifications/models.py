"""Data models and exceptions for notification dispatch.

Every failure a dispatch can end in is a DispatchError subclass carrying the
HTTP status and the message returned to the caller.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


class DispatchError(Exception):
    """Base exception for all dispatch failures."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.public_message = message


class MissingKind(DispatchError):
    """Request body has no email type."""

    status_code = 400

    def __init__(self):
        super().__init__("Email type is required")


class UnknownKind(DispatchError):
    """Request body names an email type this service cannot send."""

    status_code = 400

    def __init__(self, kind: Any):
        super().__init__("Invalid email type")
        self.kind = kind


class MissingField(DispatchError):
    """A field required by the email type is absent or empty."""

    status_code = 400

    def __init__(self, kind: str, field_names: List[str], message: str):
        super().__init__(message)
        self.kind = kind
        self.field_names = field_names


class InvalidField(DispatchError):
    """A field is present but its value cannot be used as text."""

    status_code = 400

    def __init__(self, kind: str, field_names: List[str]):
        super().__init__(f"Invalid value for {', '.join(field_names)}")
        self.kind = kind
        self.field_names = field_names


class Unauthenticated(DispatchError):
    """No bearer token was supplied."""

    status_code = 401

    def __init__(self):
        super().__init__("Authorization token required")


class InvalidToken(DispatchError):
    """The identity provider rejected the bearer token, or could not be reached."""

    status_code = 401

    def __init__(self, reason: Optional[str] = None):
        super().__init__("Invalid authorization token")
        self.reason = reason


class TransportError(DispatchError):
    """The email provider failed or refused the message."""

    status_code = 500

    def __init__(self, message: str, error_code: Optional[int] = None):
        super().__init__(message)
        self.error_code = error_code


class NotificationTemplateError(DispatchError):
    """Template rendering failed (missing template or variable)."""

    status_code = 500


class UnexpectedError(DispatchError):
    """Catch-all for failures outside the taxonomy above."""

    status_code = 500


@dataclass(frozen=True)
class CallerIdentity:
    """Authenticated caller, resolved from a bearer token for one request."""

    email: str
    user_id: Optional[str] = None

    @property
    def display_name(self) -> str:
        """Local part of the email address."""
        return self.email.split("@")[0]


@dataclass(frozen=True)
class RenderedMessage:
    """Subject and bodies of one notification email."""

    subject: str
    text_body: str
    html_body: str


@dataclass(frozen=True)
class OutboundEmail:
    """A rendered message addressed and ready for the transport."""

    sender: str
    to: str
    subject: str
    text_body: str
    html_body: str
    message_stream: str

    @classmethod
    def from_rendered(
        cls, rendered: RenderedMessage, sender: str, to: str, message_stream: str
    ) -> "OutboundEmail":
        return cls(
            sender=sender,
            to=to,
            subject=rendered.subject,
            text_body=rendered.text_body,
            html_body=rendered.html_body,
            message_stream=message_stream,
        )


@dataclass
class TransportResult:
    """Provider acknowledgement of an accepted message."""

    to: str
    message_id: Optional[str] = None
    submitted_at: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)


@dataclass
class DispatchResult:
    """Outcome of a successful dispatch.

    Attributes:
        email_type: Kind of email sent
        recipient: Address the email was sent to
        attempts: Number of provider calls made
        transport_result: Provider acknowledgement
    """

    email_type: str
    recipient: str
    attempts: int
    transport_result: TransportResult

    def to_response(self) -> Dict[str, Any]:
        return {"success": True}
