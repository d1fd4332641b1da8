"""Template rendering for notification emails using Jinja2.

Every email type has three templates in the email_templates package
directory: ``<type>_subject.j2``, ``<type>_body.txt.j2`` and
``<type>_body.html.j2``. HTML templates autoescape all interpolated values;
subject and text templates are rendered verbatim.
"""

import logging

from jinja2 import Environment, PackageLoader, StrictUndefined, TemplateError, select_autoescape

from .models import CallerIdentity, NotificationTemplateError, RenderedMessage
from .payloads import build_template_context
from .schemas import NotificationRequest

logger = logging.getLogger(__name__)


class TemplateRenderer:
    """Renders subject, text and HTML bodies for a notification request.

    Rendering is a pure function of the request and the caller; compiled
    templates are cached by the Jinja2 environment.
    """

    def __init__(self, template_dir: str = "email_templates"):
        """Initialize template renderer with Jinja2 environment.

        Args:
            template_dir: Directory name within the support_mailer.notifications package
        """
        self.env = Environment(
            loader=PackageLoader("support_mailer.notifications", template_dir),
            autoescape=select_autoescape(enabled_extensions=("html.j2",), default=False),
            undefined=StrictUndefined,
        )

        logger.debug(f"Initialized TemplateRenderer with templates from {template_dir}")

    @staticmethod
    def template_names(email_type: str) -> dict:
        return {
            "subject": f"{email_type}_subject.j2",
            "text_body": f"{email_type}_body.txt.j2",
            "html_body": f"{email_type}_body.html.j2",
        }

    def render(self, request: NotificationRequest, caller: CallerIdentity) -> RenderedMessage:
        """Render the email for a validated request.

        Args:
            request: Validated notification request
            caller: Authenticated caller

        Returns:
            RenderedMessage with a single-line subject and both bodies

        Raises:
            NotificationTemplateError: If a template is missing or fails to render
        """
        context = build_template_context(request, caller)
        names = self.template_names(request.type)

        try:
            subject = self.env.get_template(names["subject"]).render(context)
            text_body = self.env.get_template(names["text_body"]).render(context)
            html_body = self.env.get_template(names["html_body"]).render(context)
        except TemplateError as e:
            error_msg = f"Template rendering failed for {request.type}: {e}"
            logger.error(error_msg, exc_info=True)
            raise NotificationTemplateError(error_msg) from e

        return RenderedMessage(
            subject=subject.strip().replace("\n", " "),
            text_body=text_body,
            html_body=html_body,
        )
