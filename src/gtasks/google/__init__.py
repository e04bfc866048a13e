"""Google OAuth and transport utilities."""

from gtasks.google.oauth import (
    TASKS_SCOPE,
    ClientSecret,
    GoogleOAuth,
    TokenStore,
    obtain_transport,
)
from gtasks.google.transport import Transport

__all__ = [
    "TASKS_SCOPE",
    "ClientSecret",
    "GoogleOAuth",
    "TokenStore",
    "Transport",
    "obtain_transport",
]
