"""Template context builders, one per email type."""

from typing import Callable, Dict

from .models import CallerIdentity
from .schemas import (
    CommentNotificationRequest,
    NotificationRequest,
    PasswordResetRequest,
    WelcomeEmailRequest,
)

# Greeting used when a new user registered without a name
DEFAULT_FULL_NAME = "there"


def _comment_notification_context(
    request: CommentNotificationRequest, caller: CallerIdentity
) -> Dict:
    return {
        "commenter_name": caller.display_name,
        "ticket_no": request.ticket_no,
        "comment": request.comment,
        "ticket_url": request.ticket_url,
    }


def _welcome_email_context(request: WelcomeEmailRequest, caller: CallerIdentity) -> Dict:
    return {"full_name": request.full_name or DEFAULT_FULL_NAME}


def _password_reset_context(request: PasswordResetRequest, caller: CallerIdentity) -> Dict:
    return {"reset_link": request.reset_link}


_CONTEXT_BUILDERS: Dict[str, Callable[..., Dict]] = {
    "comment_notification": _comment_notification_context,
    "welcome_email": _welcome_email_context,
    "password_reset": _password_reset_context,
}


def build_template_context(request: NotificationRequest, caller: CallerIdentity) -> Dict:
    """Build the template variables for a validated request.

    Args:
        request: Validated notification request
        caller: Authenticated caller (the commenter, for comment notifications)

    Returns:
        Dictionary of template variables for the request's email type
    """
    return _CONTEXT_BUILDERS[request.type](request, caller)
