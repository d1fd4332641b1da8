"""Notification service: authenticates, validates, renders and sends one email.

This module provides the NotificationService class behind the send-email
endpoint. Collaborators (identity verifier, transport, renderer) are injected
once at construction so tests can substitute fakes.
"""

import logging
import time
from typing import Any, Callable, Optional, Tuple

from support_mailer.config.environment import DEFAULT_MESSAGE_STREAM, DEFAULT_SENDER, EnvironmentConfig
from support_mailer.config.models import AppConfig, EmailConfig
from support_mailer.logging import get_logger
from support_mailer.logging.context import log_context

from .identity import IdentityVerifier, SupabaseIdentityVerifier, extract_bearer_token
from .models import (
    CallerIdentity,
    DispatchError,
    DispatchResult,
    OutboundEmail,
    TransportError,
    TransportResult,
)
from .schemas import parse_notification_request
from .templates import TemplateRenderer
from .transport import EmailTransport, PostmarkTransport

logger = get_logger(__name__, component="dispatch")

MAX_RETRY_DELAY = 60.0


class NotificationService:
    """Service that dispatches one notification email per request.

    Flow:
    1. Authenticate the caller (bearer token -> identity provider)
    2. Validate the body into a typed request
    3. Render subject and bodies
    4. Send via the transport (single attempt unless retries are configured)

    Nothing is sent unless every earlier step succeeded.
    """

    def __init__(
        self,
        identity_verifier: IdentityVerifier,
        transport: EmailTransport,
        template_renderer: Optional[TemplateRenderer] = None,
        sender: str = DEFAULT_SENDER,
        message_stream: str = DEFAULT_MESSAGE_STREAM,
        email_config: Optional[EmailConfig] = None,
        sleep: Callable[[float], None] = time.sleep,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize notification service.

        Args:
            identity_verifier: Resolves bearer tokens to callers
            transport: Delivers rendered emails
            template_renderer: Template renderer instance (creates default if None)
            sender: From address for every email
            message_stream: Provider delivery stream identifier
            email_config: Retry settings (single attempt if None)
            sleep: Delay function used between retries
            logger_instance: Logger instance (uses module logger if None)
        """
        self.identity_verifier = identity_verifier
        self.transport = transport
        self.template_renderer = template_renderer or TemplateRenderer()
        self.sender = sender
        self.message_stream = message_stream
        self.email_config = email_config or EmailConfig()
        self._sleep = sleep
        self.logger = logger_instance or logger

    @classmethod
    def from_config(cls, app_config: AppConfig, env_config: EnvironmentConfig) -> "NotificationService":
        """Build the service with the Supabase verifier and Postmark transport."""
        timeout = app_config.email.http_request_timeout
        return cls(
            identity_verifier=SupabaseIdentityVerifier(
                env_config.supabase_url, env_config.supabase_anon_key, timeout=timeout
            ),
            transport=PostmarkTransport.from_environment(env_config, timeout=timeout),
            sender=env_config.email_sender,
            message_stream=env_config.message_stream,
            email_config=app_config.email,
        )

    def authenticate(self, authorization: Optional[str]) -> CallerIdentity:
        """Resolve the caller from an Authorization header value.

        Raises:
            Unauthenticated: If no bearer token was supplied
            InvalidToken: If the identity provider rejects the token
        """
        try:
            token = extract_bearer_token(authorization)
            return self.identity_verifier.verify(token)
        except DispatchError as e:
            self.logger.info(
                f"Rejected unauthenticated request: {e.public_message}",
                extra={"event": "dispatch.auth.failed", "error_type": type(e).__name__},
            )
            raise

    def dispatch(
        self,
        authorization: Optional[str],
        body: Any,
        request_id: Optional[str] = None,
    ) -> DispatchResult:
        """Handle one send-email request.

        Args:
            authorization: Raw Authorization header value (None if absent)
            body: Decoded JSON request body
            request_id: Identifier bound to the log context

        Returns:
            DispatchResult for the delivered email

        Raises:
            DispatchError: Subclass matching the failed step
        """
        with log_context(request_id=request_id) as scope:
            caller = self.authenticate(authorization)

            try:
                request = parse_notification_request(body)
            except DispatchError as e:
                self.logger.info(
                    f"Rejected invalid request: {e.public_message}",
                    extra={
                        "event": "dispatch.validation.failed",
                        "error_type": type(e).__name__,
                        "fields": getattr(e, "field_names", None),
                    },
                )
                raise

            scope.bind(email_type=request.type)
            self.logger.info(
                f"Dispatching {request.type}",
                extra={"event": "dispatch.received", "caller_id": caller.user_id},
            )

            rendered = self.template_renderer.render(request, caller)
            message = OutboundEmail.from_rendered(
                rendered,
                sender=self.sender,
                to=request.recipient_address,
                message_stream=self.message_stream,
            )

            transport_result, attempts = self._send_with_retry(message)

            self.logger.info(
                f"Sent {request.type} to {message.to} (attempts: {attempts})",
                extra={
                    "event": "dispatch.send.success",
                    "attempt": attempts,
                    "message_id": transport_result.message_id,
                },
            )
            return DispatchResult(
                email_type=request.type,
                recipient=message.to,
                attempts=attempts,
                transport_result=transport_result,
            )

    def _send_with_retry(self, message: OutboundEmail) -> Tuple[TransportResult, int]:
        max_attempts = self.email_config.max_retries + 1
        last_error: Optional[TransportError] = None

        for attempt in range(1, max_attempts + 1):
            if attempt > 1:
                delay = self.email_config.retry_initial_delay * (
                    self.email_config.retry_backoff_multiplier ** (attempt - 2)
                )
                delay = min(delay, MAX_RETRY_DELAY)
                self.logger.warning(
                    f"Retrying delivery to {message.to} (attempt {attempt}/{max_attempts}) after {delay:.1f}s delay",
                    extra={"event": "dispatch.send.attempt", "attempt": attempt},
                )
                self._sleep(delay)

            try:
                return self.transport.send(message), attempt
            except TransportError as e:
                last_error = e
                retry_remaining = attempt < max_attempts
                self.logger.log(
                    logging.WARNING if retry_remaining else logging.ERROR,
                    f"Delivery to {message.to} failed (attempt {attempt}/{max_attempts}): {e}",
                    extra={
                        "event": "dispatch.send.failure",
                        "attempt": attempt,
                        "error_type": type(e).__name__,
                        "retry_remaining": retry_remaining,
                    },
                )

        raise last_error
