"""gtasks exceptions."""


class GtasksError(Exception):
    """Base exception for all gtasks errors."""

    pass


class ConfigError(GtasksError):
    """Raised when configuration files are missing or invalid."""

    pass


class CredentialsNotFoundError(ConfigError):
    """Raised when the OAuth client secret file is not found."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(
            f"Unable to read client secret file: {path} not found. "
            "Download OAuth client credentials from Google Cloud Console."
        )


class AuthError(GtasksError):
    """Raised when authorization or token exchange fails."""

    pass


class TokenError(AuthError):
    """Raised when the cached token cannot be refreshed."""

    pass


class TaskListNotFoundError(GtasksError):
    """Raised when no task list has the requested name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Tasklist does not exist: {name!r}")


class TasksAPIError(GtasksError):
    """Raised when the Tasks API returns an error."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)
