"""Bearer transport for Google APIs.

Wraps an Authlib OAuth2Session so callers only issue requests; the access
token is checked and refreshed before each call.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import requests
from authlib.common.errors import AuthlibBaseError
from authlib.integrations.requests_client import OAuth2Session

from gtasks.exceptions import TokenError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class Transport:
    """HTTP transport that attaches a non-expired bearer token to every request.

    Refreshed tokens are persisted through the session's update_token callback.
    """

    # Seconds before expiry at which a token is treated as expired
    LEEWAY = 60

    def __init__(
        self,
        session: OAuth2Session,
        token_url: str,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.session = session
        self.token_url = token_url
        self.timeout = timeout

    def is_expired(self, now: float | None = None) -> bool:
        """Check whether the current access token needs a refresh."""
        expires_at = (self.session.token or {}).get("expires_at")
        if not expires_at:
            return False
        now = time.time() if now is None else now
        return expires_at - self.LEEWAY < now

    def ensure_active_token(self) -> None:
        """Refresh the access token once if it has expired.

        Raises:
            TokenError: If there is no token, no refresh token, or the refresh fails.
        """
        token = self.session.token
        if not token or not token.get("access_token"):
            raise TokenError("No access token available")

        if not self.is_expired():
            return

        refresh_token = token.get("refresh_token")
        if not refresh_token:
            raise TokenError("Access token expired and no refresh token is available")

        logger.info("Token expired, refreshing...")
        try:
            self.session.refresh_token(self.token_url, refresh_token=refresh_token)
        except (AuthlibBaseError, requests.RequestException) as e:
            raise TokenError(f"Failed to refresh token: {e}") from e

    def request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        """Issue an authenticated request.

        Args:
            method: HTTP method.
            url: Absolute URL.
            **kwargs: Passed through to requests (params, json, ...).

        Returns:
            The HTTP response. Status codes are not checked here.
        """
        self.ensure_active_token()
        kwargs.setdefault("timeout", self.timeout)
        logger.debug(f"{method} {url}")
        return self.session.request(method, url, **kwargs)
