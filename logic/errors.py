"""
Error taxonomy for the treasure map application.

Backend failures are caught where they happen and turned into
notifications. Only validation and missing-session errors reach the
HTTP layer, where main.py maps them to status codes.
"""


class TreasureMapError(Exception):
    """Base class for all application errors."""


class BackendError(TreasureMapError):
    """A read or write against the data store failed or timed out."""


class AuthenticationRequired(TreasureMapError):
    """An action needs a signed-in user and there is none."""

    def __init__(self, message: str = "Please sign in to save treasures"):
        super().__init__(message)


class AuthenticationError(TreasureMapError):
    """Sign-up or sign-in was rejected by the auth provider.

    The message is shown to the user as-is.
    """


class ValidationError(TreasureMapError):
    """Client-side input validation failed before anything was submitted."""

    def __init__(self, message: str, field: str = None):
        super().__init__(message)
        self.field = field
