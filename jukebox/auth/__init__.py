"""Authentication module."""

from jukebox.auth.errors import (
    AuthError,
    InvalidCredentials,
    MissingHandle,
    SessionExpired,
    SessionNotFound,
)
from jukebox.auth.identity import Account, IdentityStore
from jukebox.auth.session import (
    SessionManager,
    SessionStatus,
    SignedSessionManager,
    get_current_session_optional,
    require_session,
)

__all__ = [
    "Account",
    "AuthError",
    "IdentityStore",
    "InvalidCredentials",
    "MissingHandle",
    "SessionExpired",
    "SessionManager",
    "SessionNotFound",
    "SessionStatus",
    "SignedSessionManager",
    "get_current_session_optional",
    "require_session",
]
