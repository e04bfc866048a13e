"""Google OAuth management using Authlib.

This module obtains an authenticated transport for the Tasks API:
- Loads the installed-app client secret
- Loads the cached token, or runs the authorization-code flow in the console
- Persists tokens with owner-only permissions

Tokens are cached as JSON with the fields access_token, token_type,
refresh_token and expiry (RFC 3339).
"""

from __future__ import annotations

import json
import logging
import os
import re
import sys
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import requests
from authlib.common.errors import AuthlibBaseError
from authlib.integrations.requests_client import OAuth2Session

from gtasks.config import Config
from gtasks.exceptions import AuthError, ConfigError, CredentialsNotFoundError
from gtasks.google.transport import Transport

logger = logging.getLogger(__name__)

# If modifying this scope, delete the previously saved token.json.
TASKS_SCOPE = "https://www.googleapis.com/auth/tasks"


@dataclass(frozen=True)
class ClientSecret:
    """OAuth client descriptor from Google Cloud Console."""

    client_id: str
    client_secret: str
    auth_uri: str = "https://accounts.google.com/o/oauth2/auth"
    token_uri: str = "https://oauth2.googleapis.com/token"
    redirect_uri: str = "http://localhost"

    @classmethod
    def from_file(cls, path: str | Path) -> ClientSecret:
        """Load client credentials from a credentials.json file.

        Args:
            path: Path to the OAuth client credentials file.

        Returns:
            Parsed ClientSecret.

        Raises:
            CredentialsNotFoundError: If the file does not exist.
            ConfigError: If the file cannot be read or parsed.
        """
        path = Path(path)
        if not path.exists():
            raise CredentialsNotFoundError(str(path))

        try:
            with open(path) as f:
                creds = json.load(f)
        except (OSError, ValueError) as e:
            raise ConfigError(f"Unable to read client secret file {path}: {e}") from e

        # Handle both web and installed app credential formats
        if not isinstance(creds, dict):
            raise ConfigError(f"Unable to parse client secret file {path}: expected an object")
        if "installed" in creds:
            app_creds = creds["installed"]
        elif "web" in creds:
            app_creds = creds["web"]
        else:
            raise ConfigError(
                f"Unable to parse client secret file {path}: expected 'installed' or 'web' key"
            )

        try:
            client_id = app_creds["client_id"]
            client_secret = app_creds["client_secret"]
        except (KeyError, TypeError) as e:
            raise ConfigError(f"Unable to parse client secret file {path}: missing {e}") from e

        redirect_uris = app_creds.get("redirect_uris") or [cls.redirect_uri]
        return cls(
            client_id=client_id,
            client_secret=client_secret,
            auth_uri=app_creds.get("auth_uri", cls.auth_uri),
            token_uri=app_creds.get("token_uri", cls.token_uri),
            redirect_uri=redirect_uris[0],
        )


def _parse_expiry(expiry: str | None) -> float | None:
    """Convert an RFC 3339 expiry to a timestamp. Zero time means no expiry."""
    if not expiry:
        return None
    # Trim fractional seconds to microseconds
    expiry = re.sub(r"(\.\d{6})\d+", r"\1", expiry)
    dt = datetime.fromisoformat(expiry.replace("Z", "+00:00"))
    if dt.year <= 1:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.timestamp()


def _format_expiry(expires_at: float | None) -> str | None:
    if not expires_at:
        return None
    dt = datetime.fromtimestamp(expires_at, tz=timezone.utc)
    return dt.isoformat().replace("+00:00", "Z")


class TokenStore:
    """Reads and writes the cached OAuth token file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> dict[str, Any] | None:
        """Load token from storage.

        Any read or decode failure is treated as no cached token.

        Returns:
            Authlib token dict, or None if no usable token is cached.
        """
        if not self.path.exists():
            logger.info("No existing token found")
            return None

        try:
            with open(self.path) as f:
                token_data = json.load(f)

            access_token = token_data["access_token"]
            if not access_token:
                raise ValueError("empty access_token")

            # Convert cached token format to Authlib format
            token: dict[str, Any] = {
                "access_token": access_token,
                "token_type": token_data.get("token_type") or "Bearer",
            }
            if token_data.get("refresh_token"):
                token["refresh_token"] = token_data["refresh_token"]
            expires_at = _parse_expiry(token_data.get("expiry"))
            if expires_at is not None:
                token["expires_at"] = expires_at

        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning(f"Ignoring unreadable token cache {self.path}: {e!r}")
            return None

        logger.info(f"Loaded token from {self.path}")
        return token

    def save(
        self,
        token: dict[str, Any],
        refresh_token: str | None = None,
        access_token: str | None = None,
    ) -> None:
        """Save token to storage (Authlib update_token callback).

        The file is truncated and written with owner-only permissions.

        Raises:
            ConfigError: If the token file cannot be written.
        """
        if access_token:
            token["access_token"] = access_token
        if refresh_token and not token.get("refresh_token"):
            token["refresh_token"] = refresh_token

        token_data = {
            "access_token": token["access_token"],
            "token_type": token.get("token_type") or "Bearer",
            "refresh_token": token.get("refresh_token"),
            "expiry": _format_expiry(token.get("expires_at")),
        }

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w") as f:
                json.dump(token_data, f, indent=2)
            os.chmod(self.path, 0o600)
        except OSError as e:
            raise ConfigError(f"Unable to cache oauth token: {e}") from e

        logger.info(f"Token saved to {self.path}")


class GoogleOAuth:
    """Google OAuth management using Authlib.

    Handles the console authorization-code flow and token caching, and
    hands out a Transport for API calls.

    Example:
        >>> auth = GoogleOAuth(ClientSecret.from_file(path), TokenStore(token_path))
        >>> if not auth.is_authorized():
        ...     auth.authorize()
        >>> transport = auth.transport()
    """

    def __init__(
        self,
        client_secret: ClientSecret,
        store: TokenStore,
        scopes: list[str] | None = None,
    ):
        """Initialize Google OAuth.

        Args:
            client_secret: OAuth client descriptor.
            store: Token cache.
            scopes: Full scope URLs. Defaults to the Tasks scope.
        """
        self.client_secret = client_secret
        self.store = store
        self.scopes = scopes or [TASKS_SCOPE]

        self.session = OAuth2Session(
            client_id=client_secret.client_id,
            client_secret=client_secret.client_secret,
            scope=" ".join(self.scopes),
            redirect_uri=client_secret.redirect_uri,
            token=store.load(),
            update_token=store.save,
            token_endpoint_auth_method="client_secret_post",
        )

    def is_authorized(self) -> bool:
        """Check if a cached token is available."""
        return bool(self.session.token)

    def get_authorization_url(self) -> str:
        """Start OAuth authorization flow.

        Returns:
            Authorization URL for user to visit.
        """
        authorization_url, _state = self.session.create_authorization_url(
            self.client_secret.auth_uri,
            access_type="offline",
            prompt="consent",
        )
        return authorization_url

    def fetch_token(self, answer: str) -> dict[str, Any]:
        """Exchange an authorization code for a token and cache it.

        Args:
            answer: The one-time code, or the full redirect URL containing it.

        Returns:
            The fetched OAuth token dict.

        Raises:
            AuthError: If no code was given or the exchange fails.
        """
        answer = answer.strip()
        if not answer:
            raise AuthError("Unable to read authorization code: no code provided")

        try:
            if "code=" in answer:
                token = self.session.fetch_token(
                    self.client_secret.token_uri,
                    authorization_response=answer,
                )
            else:
                token = self.session.fetch_token(self.client_secret.token_uri, code=answer)
        except (AuthlibBaseError, requests.RequestException) as e:
            raise AuthError(f"Unable to retrieve token from web: {e}") from e

        self.session.token = token
        print(f"Saving credential file to: {self.store.path}", file=sys.stderr)
        self.store.save(token)
        return token

    def authorize(self, prompt: Callable[[], str] = input) -> dict[str, Any]:
        """Run the console authorization flow.

        Prints the authorization URL and blocks until the user enters the code.

        Args:
            prompt: Reads one line of user input.

        Returns:
            The fetched OAuth token dict.
        """
        url = self.get_authorization_url()
        print(
            "Go to the following link in your browser then type the authorization code:",
            file=sys.stderr,
        )
        print(url, file=sys.stderr)

        try:
            answer = prompt()
        except EOFError as e:
            raise AuthError("Unable to read authorization code: end of input") from e
        return self.fetch_token(answer)

    def transport(self) -> Transport:
        """Get a bearer transport for the current token."""
        return Transport(self.session, token_url=self.client_secret.token_uri)


def obtain_transport(config: Config, prompt: Callable[[], str] = input) -> Transport:
    """Get an authenticated transport, authorizing interactively if needed.

    Args:
        config: Resolved configuration paths.
        prompt: Reads the authorization code when no token is cached.

    Returns:
        Transport that attaches a valid bearer token to every request.

    Raises:
        ConfigError: If the client secret is missing or invalid.
        AuthError: If the authorization code exchange fails.
    """
    client_secret = ClientSecret.from_file(config.credentials_path)
    auth = GoogleOAuth(client_secret, TokenStore(config.token_path))
    if not auth.is_authorized():
        auth.authorize(prompt)
    return auth.transport()
