"""
API token authentication for the DNS gateway.
"""

import hmac
import re

from shared.errors import AuthenticationError
from shared.logging import get_logger
from ..domain.models import HeaderMap

BEARER_PATTERN = re.compile(r"Bearer\s+(\S+)", re.IGNORECASE)


class TokenAuthenticator:
    """Checks the caller's token against the configured gateway secret."""

    def __init__(self, api_token: str):
        self._api_token = api_token
        self.logger = get_logger("dns_gateway.auth")

    @staticmethod
    def extract_token(headers: HeaderMap) -> str:
        """Extract the candidate token from request headers.

        ``Authorization: Bearer <token>`` wins whenever an Authorization header
        is sent, even if it does not match the Bearer form; only without it is
        ``X-API-Token`` consulted.
        """
        auth_header = headers.get("Authorization")
        if auth_header is not None:
            match = BEARER_PATTERN.search(auth_header)
            return match.group(1) if match else ""

        return headers.get("X-API-Token") or ""

    def is_authorized(self, headers: HeaderMap) -> bool:
        candidate = self.extract_token(headers)
        return hmac.compare_digest(candidate.encode("utf-8"), self._api_token.encode("utf-8"))

    def authenticate(self, headers: HeaderMap) -> None:
        """Raise AuthenticationError unless the request carries the configured token."""
        if not self.is_authorized(headers):
            scheme = "bearer" if "Authorization" in headers else (
                "api_token" if "X-API-Token" in headers else "none"
            )
            self.logger.warning("Request authentication failed", scheme=scheme)
            raise AuthenticationError()
