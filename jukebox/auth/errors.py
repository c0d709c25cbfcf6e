"""Authentication errors.

Every error carries a human-readable ``reason`` that the login page shows
after the gating layer redirects there.
"""


class AuthError(Exception):
    """Base class for authentication and session failures."""

    reason = "Authentication required"

    def __init__(self, reason: str | None = None):
        if reason:
            self.reason = reason
        super().__init__(self.reason)


class InvalidCredentials(AuthError):
    """Unknown username or wrong password (deliberately indistinguishable)."""

    reason = "Invalid credentials"


class SessionNotFound(AuthError):
    reason = "Session not found, please log in again"


class SessionExpired(AuthError):
    reason = "Session expired, please log in again"


class MissingHandle(AuthError):
    reason = "Please log in first"
