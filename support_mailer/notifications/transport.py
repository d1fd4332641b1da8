"""Email transport: hands rendered messages to the transactional email provider.

One call to send() is one provider request. Retries, if enabled, belong to
the caller (NotificationService).
"""

from abc import ABC, abstractmethod
from typing import Optional

import requests

from support_mailer.config.environment import EnvironmentConfig
from support_mailer.logging import get_logger

from .models import OutboundEmail, TransportError, TransportResult

logger = get_logger(__name__, component="transport")


class EmailTransport(ABC):
    """Delivers a fully rendered and addressed email."""

    @abstractmethod
    def send(self, message: OutboundEmail) -> TransportResult:
        """Submit a message to the provider.

        Raises:
            TransportError: On network failure or provider rejection
        """


class PostmarkTransport(EmailTransport):
    """Transport for the Postmark email API.

    API Details:
        Endpoint: https://api.postmarkapp.com/email
        Method: POST
        Authentication: ``X-Postmark-Server-Token`` header
        Response: JSON with ``ErrorCode`` (0 on success), ``Message``,
            ``MessageID`` and ``SubmittedAt``
    """

    def __init__(
        self,
        api_key: str,
        api_url: str = "https://api.postmarkapp.com/email",
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Args:
            api_key: Provider server token
            api_url: Provider send endpoint
            timeout: Request timeout in seconds (None waits indefinitely)
            session: requests.Session to use (for connection reuse and mocking)
        """
        self.api_url = api_url
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({
            "Accept": "application/json",
            "Content-Type": "application/json",
            "X-Postmark-Server-Token": api_key,
        })

    @classmethod
    def from_environment(
        cls, env_config: EnvironmentConfig, timeout: Optional[float] = None
    ) -> "PostmarkTransport":
        return cls(api_key=env_config.email_api_key, api_url=env_config.email_api_url, timeout=timeout)

    @staticmethod
    def build_payload(message: OutboundEmail) -> dict:
        return {
            "From": message.sender,
            "To": message.to,
            "Subject": message.subject,
            "TextBody": message.text_body,
            "HtmlBody": message.html_body,
            "MessageStream": message.message_stream,
        }

    def send(self, message: OutboundEmail) -> TransportResult:
        try:
            response = self._session.post(
                self.api_url, json=self.build_payload(message), timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            error_msg = f"Network error during email delivery: {e}"
            logger.error(error_msg, extra={"event": "transport.send.error", "error_type": type(e).__name__})
            raise TransportError(error_msg) from e

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        error_code = data.get("ErrorCode", 0 if response.ok else None)
        if not response.ok or error_code:
            provider_message = data.get("Message") or f"HTTP {response.status_code}: {response.reason}"
            logger.error(
                f"Email provider rejected message: {provider_message}",
                extra={
                    "event": "transport.send.rejected",
                    "status_code": response.status_code,
                    "error_code": error_code,
                },
            )
            raise TransportError(provider_message, error_code=error_code)

        logger.debug(
            f"Message accepted by provider for {message.to}",
            extra={"event": "transport.send.accepted", "message_id": data.get("MessageID")},
        )
        return TransportResult(
            to=data.get("To", message.to),
            message_id=data.get("MessageID"),
            submitted_at=data.get("SubmittedAt"),
            raw=data,
        )
