"""Configuration paths.

Credentials live in a per-user configuration directory:
    credentials.json  - Google OAuth client credentials (installed app)
    token.json        - cached OAuth tokens

The directory is ``$GTASKS_CONFIG_DIR`` when set, otherwise ``gtasks``
under the platform's user configuration directory.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path

from gtasks.exceptions import ConfigError

APP_NAME = "gtasks"
CONFIG_DIR_ENV = "GTASKS_CONFIG_DIR"

CREDENTIALS_FILENAME = "credentials.json"
TOKEN_FILENAME = "token.json"


def user_config_dir(environ: dict[str, str] | None = None, platform: str | None = None) -> Path:
    """Get the platform's per-user configuration directory.

    Args:
        environ: Environment mapping. Defaults to os.environ.
        platform: Platform name. Defaults to sys.platform.

    Returns:
        Base configuration directory (without the app name).
    """
    environ = os.environ if environ is None else environ
    platform = platform or sys.platform

    if platform.startswith("win"):
        appdata = environ.get("APPDATA")
        if not appdata:
            raise ConfigError("Could not get user config directory: %APPDATA% is not defined")
        return Path(appdata)

    if platform == "darwin":
        return Path.home() / "Library" / "Application Support"

    xdg = environ.get("XDG_CONFIG_HOME")
    if xdg and Path(xdg).is_absolute():
        return Path(xdg)
    return Path.home() / ".config"


@dataclass(frozen=True)
class Config:
    """Resolved file locations for a single run."""

    config_dir: Path

    @property
    def credentials_path(self) -> Path:
        return self.config_dir / CREDENTIALS_FILENAME

    @property
    def token_path(self) -> Path:
        return self.config_dir / TOKEN_FILENAME

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> Config:
        """Build configuration from the environment.

        Args:
            environ: Environment mapping. Defaults to os.environ.

        Returns:
            Config rooted at the resolved configuration directory.
        """
        environ = os.environ if environ is None else environ
        override = environ.get(CONFIG_DIR_ENV)
        if override:
            return cls(config_dir=Path(override).expanduser())
        return cls(config_dir=user_config_dir(environ) / APP_NAME)

    def ensure_config_dir(self) -> Path:
        """Create the configuration directory if it doesn't exist.

        Returns:
            Path to the configuration directory.
        """
        self.config_dir.mkdir(parents=True, exist_ok=True)
        return self.config_dir
