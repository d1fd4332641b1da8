"""Request validation for the send-email endpoint.

Each email type is a closed pydantic model whose ``type`` field is the
discriminator. parse_notification_request() maps validation failures to the
MissingKind / UnknownKind / MissingField / InvalidField errors the endpoint reports.
"""

from abc import abstractmethod
from typing import Annotated, Any, ClassVar, Dict, Literal, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

from .models import InvalidField, MissingField, MissingKind, UnknownKind

RequiredText = Annotated[str, Field(min_length=1)]


class _NotificationRequestBase(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    # 400 message when a required field is absent or empty
    missing_fields_message: ClassVar[str]

    @property
    @abstractmethod
    def recipient_address(self) -> str:
        """Address the email is delivered to."""

    @field_validator("*", mode="before")
    @classmethod
    def normalise_scalars(cls, v: Any, info: ValidationInfo) -> Any:
        # Falsy values count as absent; JSON numbers are accepted as text
        if info.field_name == "type":
            return v
        if v is None or (isinstance(v, (int, float)) and not v):
            if cls.model_fields[info.field_name].is_required():
                raise PydanticCustomError("missing", "Field required")
            return None
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


class CommentNotificationRequest(_NotificationRequestBase):
    """Tell a ticket owner that someone commented on their ticket."""

    missing_fields_message: ClassVar[str] = "Missing required fields for comment notification"

    type: Literal["comment_notification"] = "comment_notification"
    recipient: RequiredText
    ticket_no: RequiredText
    comment: RequiredText
    ticket_url: RequiredText

    @property
    def recipient_address(self) -> str:
        return self.recipient


class WelcomeEmailRequest(_NotificationRequestBase):
    """Greet a newly registered user."""

    missing_fields_message: ClassVar[str] = "Recipient email is required"

    type: Literal["welcome_email"] = "welcome_email"
    to: RequiredText
    full_name: Optional[str] = None

    @property
    def recipient_address(self) -> str:
        return self.to


class PasswordResetRequest(_NotificationRequestBase):
    """Deliver a password reset link."""

    missing_fields_message: ClassVar[str] = "Missing required fields for password reset"

    type: Literal["password_reset"] = "password_reset"
    to: RequiredText
    reset_link: RequiredText

    @property
    def recipient_address(self) -> str:
        return self.to


NotificationRequest = Annotated[
    Union[CommentNotificationRequest, WelcomeEmailRequest, PasswordResetRequest],
    Field(discriminator="type"),
]

# Validation error types reported as "missing" rather than "invalid"
MISSING_ERROR_TYPES = frozenset({"missing", "string_too_short"})

REQUEST_MODELS: Dict[str, Type[_NotificationRequestBase]] = {
    "comment_notification": CommentNotificationRequest,
    "welcome_email": WelcomeEmailRequest,
    "password_reset": PasswordResetRequest,
}


def parse_notification_request(body: Any) -> NotificationRequest:
    """Validate a parsed JSON body into a typed notification request.

    Args:
        body: Decoded JSON request body (any JSON value)

    Returns:
        CommentNotificationRequest, WelcomeEmailRequest or PasswordResetRequest

    Raises:
        MissingKind: If the body has no (or an empty) ``type``
        UnknownKind: If ``type`` is not a supported email type
        MissingField: If a field required by the type is absent or empty
        InvalidField: If a field is present but not text (e.g. an object or list)
    """
    if not isinstance(body, dict) or not body.get("type"):
        raise MissingKind()

    kind = body["type"]
    model = REQUEST_MODELS.get(kind) if isinstance(kind, str) else None
    if model is None:
        raise UnknownKind(kind)

    try:
        return model.model_validate(body)
    except ValidationError as e:
        errors = [err for err in e.errors() if err["loc"]]
        missing = sorted({str(err["loc"][0]) for err in errors if err["type"] in MISSING_ERROR_TYPES})
        if missing:
            raise MissingField(kind, missing, model.missing_fields_message) from e
        raise InvalidField(kind, sorted({str(err["loc"][0]) for err in errors})) from e
