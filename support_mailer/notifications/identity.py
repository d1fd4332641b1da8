"""Caller authentication against the hosted identity provider.

The endpoint only serves signed-in users of the support portal. The bearer
token from the Authorization header is a Supabase session JWT; it is
verified by asking Supabase Auth for the user it belongs to.
"""

from abc import ABC, abstractmethod
from typing import Optional

import requests

from support_mailer.logging import get_logger

from .models import CallerIdentity, InvalidToken, Unauthenticated

logger = get_logger(__name__, component="identity")

BEARER_SCHEME = "bearer"


def extract_bearer_token(authorization: Optional[str]) -> str:
    """Pull the token out of an ``Authorization: Bearer <token>`` header.

    Args:
        authorization: Raw header value, or None if the header is absent

    Returns:
        The token string

    Raises:
        Unauthenticated: If no token was supplied
        InvalidToken: If the header uses a scheme other than Bearer
    """
    if authorization is None or not authorization.strip():
        raise Unauthenticated()

    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != BEARER_SCHEME:
        raise InvalidToken(f"unsupported authorization scheme '{scheme}'")

    token = token.strip()
    if not token:
        raise Unauthenticated()

    return token


class IdentityVerifier(ABC):
    """Resolves a bearer token to the caller it was issued to."""

    @abstractmethod
    def verify(self, token: str) -> CallerIdentity:
        """Verify a token.

        Raises:
            InvalidToken: If the token is rejected or cannot be checked
        """


class SupabaseIdentityVerifier(IdentityVerifier):
    """Verifies Supabase session tokens via the Auth ``/user`` endpoint.

    API Details:
        Endpoint: {supabase_url}/auth/v1/user
        Method: GET
        Authentication: ``apikey`` header (project anon key) plus the
            caller's bearer token
        Response: JSON user object with ``id`` and ``email``
    """

    USER_PATH = "/auth/v1/user"

    def __init__(
        self,
        supabase_url: str,
        anon_key: str,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Args:
            supabase_url: Project base URL
            anon_key: Project public (anon) key
            timeout: Request timeout in seconds (None waits indefinitely)
            session: requests.Session to use (for connection reuse and mocking)
        """
        self.user_url = f"{supabase_url.rstrip('/')}{self.USER_PATH}"
        self.anon_key = anon_key
        self.timeout = timeout
        self._session = session or requests.Session()

    def verify(self, token: str) -> CallerIdentity:
        headers = {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {token}",
            "Accept": "application/json",
        }

        try:
            response = self._session.get(self.user_url, headers=headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.warning(
                f"Identity provider request failed: {e}",
                extra={"event": "identity.verify.error", "error_type": type(e).__name__},
            )
            raise InvalidToken(f"identity provider unreachable: {e}") from e

        if response.status_code >= 400:
            logger.info(
                f"Identity provider rejected token (HTTP {response.status_code})",
                extra={"event": "identity.verify.rejected", "status_code": response.status_code},
            )
            raise InvalidToken(f"HTTP {response.status_code}")

        try:
            user = response.json()
        except ValueError as e:
            raise InvalidToken("identity provider returned invalid JSON") from e

        email = user.get("email") if isinstance(user, dict) else None
        if not isinstance(email, str) or not email:
            raise InvalidToken("user has no email address")

        logger.debug(
            "Caller verified",
            extra={"event": "identity.verify.succeeded", "user_id": user.get("id")},
        )
        return CallerIdentity(email=email, user_id=user.get("id"))
