"""Session management and access gating."""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable, Optional

from fastapi import Request
from jose import JWTError, jwt
from pydantic import BaseModel

from jukebox.auth.errors import MissingHandle, SessionExpired, SessionNotFound
from jukebox.auth.identity import Account, IdentityStore
from jukebox.auth.store import InMemorySessionStore, SessionData, SessionStore
from jukebox.config import Settings, get_session_secret

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
SESSION_COOKIE_NAME = "session"
TOKEN_FIELD = "token"
DEFAULT_TTL = timedelta(hours=24)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionStatus(str, Enum):
    """Outcome of verifying a session handle."""
    ACTIVE = "active"
    EXPIRED = "expired"
    NOT_FOUND = "not_found"
    MISSING = "missing"


class VerifyResult(BaseModel):
    """Verification outcome. ``context`` is set only for active sessions."""
    status: SessionStatus
    context: Optional[SessionData] = None

    @property
    def active(self) -> bool:
        return self.status is SessionStatus.ACTIVE


_STATUS_ERRORS = {
    SessionStatus.EXPIRED: SessionExpired,
    SessionStatus.NOT_FOUND: SessionNotFound,
    SessionStatus.MISSING: MissingHandle,
}


def _claims_to_data(claims: dict) -> SessionData:
    return SessionData(
        subject_id=int(claims["sub"]),
        username=claims["username"],
        issued_at=datetime.fromtimestamp(claims["iat"], tz=timezone.utc),
    )


class SessionManager:
    """
    Issues and checks session handles backed by a server-side table.

    Used by both the ``cookie`` strategy (handle travels in a cookie) and the
    ``token`` strategy (handle travels explicitly in query, form or header).
    The token strategy also sweeps expired entries whenever a session is
    created.
    """

    def __init__(
        self,
        store: SessionStore,
        identities: IdentityStore,
        ttl: timedelta = DEFAULT_TTL,
        strategy: str = "cookie",
        sweep_on_create: bool = False,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.store = store
        self.identities = identities
        self.ttl = ttl
        self.strategy = strategy
        self.sweep_on_create = sweep_on_create
        self.clock = clock

    @property
    def uses_cookie(self) -> bool:
        return self.strategy != "token"

    def _check_subject(self, account: Account) -> None:
        if self.identities.find_by_id(account.id) is None:
            raise ValueError(f"Cannot create a session for unknown account {account.id}")

    def _is_expired(self, data: SessionData, now: datetime) -> bool:
        return now - data.issued_at > self.ttl

    def create(self, account: Account) -> str:
        """Create a session for an account and return its handle."""
        self._check_subject(account)
        if self.sweep_on_create:
            self.sweep()

        handle = secrets.token_urlsafe(32)
        while self.store.get(handle) is not None:
            handle = secrets.token_urlsafe(32)

        self.store.put(handle, SessionData(
            subject_id=account.id,
            username=account.username,
            issued_at=self.clock(),
        ))
        logger.info(f"Created {self.strategy} session for {account.username}")
        return handle

    def verify(self, handle: Optional[str]) -> VerifyResult:
        """Check a handle. Never raises; failures come back as a status."""
        if not handle:
            return VerifyResult(status=SessionStatus.MISSING)

        data = self.store.get(handle)
        if data is None:
            return VerifyResult(status=SessionStatus.NOT_FOUND)

        if self._is_expired(data, self.clock()):
            self.store.delete(handle)
            logger.info(f"Session for {data.username} expired")
            return VerifyResult(status=SessionStatus.EXPIRED)

        return VerifyResult(status=SessionStatus.ACTIVE, context=data)

    def destroy(self, handle: str) -> None:
        """Remove a session. Destroying an unknown handle is a no-op."""
        self.store.delete(handle)

    def sweep(self) -> int:
        """Remove every expired entry and return how many were removed."""
        now = self.clock()
        removed = 0
        for key, data in self.store.items():
            if self._is_expired(data, now):
                self.store.delete(key)
                removed += 1
        if removed:
            logger.info(f"Swept {removed} expired session(s)")
        return removed

    def count(self) -> int:
        """Number of sessions held server-side."""
        return sum(1 for _ in self.store.items())

    def stats(self) -> dict:
        return {"sessions": self.count()}


class SignedSessionManager(SessionManager):
    """
    Sessions encoded entirely in a client-held JWT.

    The token is self-verifying, so a session minted by one process is
    accepted by any other process sharing the secret. The server-side store
    only remembers token ids revoked by logout, and only until those tokens
    would have expired anyway.
    """

    def __init__(
        self,
        secret: str,
        identities: IdentityStore,
        store: Optional[SessionStore] = None,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = _utcnow,
    ):
        super().__init__(
            store if store is not None else InMemorySessionStore(),
            identities,
            ttl=ttl,
            strategy="signed",
            clock=clock,
        )
        self._secret = secret

    def _decode(self, handle: str) -> Optional[dict]:
        try:
            # Expiry is checked against our own clock
            return jwt.decode(
                handle, self._secret, algorithms=[ALGORITHM],
                options={"verify_exp": False},
            )
        except JWTError as e:
            logger.warning(f"Invalid session token: {e}")
            return None

    def create(self, account: Account) -> str:
        self._check_subject(account)
        issued = int(self.clock().timestamp())
        claims = {
            "sub": str(account.id),
            "username": account.username,
            "iat": issued,
            "exp": issued + int(self.ttl.total_seconds()),
            "jti": secrets.token_urlsafe(16),
        }
        logger.info(f"Created signed session for {account.username}")
        return jwt.encode(claims, self._secret, algorithm=ALGORITHM)

    def verify(self, handle: Optional[str]) -> VerifyResult:
        if not handle:
            return VerifyResult(status=SessionStatus.MISSING)

        claims = self._decode(handle)
        if claims is None or self.store.get(claims.get("jti", "")) is not None:
            return VerifyResult(status=SessionStatus.NOT_FOUND)

        data = _claims_to_data(claims)
        if self._is_expired(data, self.clock()):
            return VerifyResult(status=SessionStatus.EXPIRED)

        return VerifyResult(status=SessionStatus.ACTIVE, context=data)

    def count(self) -> int:
        # Live signed sessions exist only on the client
        return 0

    def revoked_count(self) -> int:
        return sum(1 for _ in self.store.items())

    def stats(self) -> dict:
        return {"revoked": self.revoked_count()}

    def destroy(self, handle: str) -> None:
        claims = self._decode(handle) if handle else None
        if claims is None or "jti" not in claims:
            return
        self.store.put(claims["jti"], _claims_to_data(claims))


def build_session_manager(settings: Settings, identities: IdentityStore) -> SessionManager:
    """Create the session manager for the configured strategy."""
    ttl = timedelta(hours=settings.session_ttl_hours)
    if settings.session_strategy == "signed":
        return SignedSessionManager(get_session_secret(settings), identities, ttl=ttl)

    return SessionManager(
        InMemorySessionStore(),
        identities,
        ttl=ttl,
        strategy=settings.session_strategy,
        sweep_on_create=settings.session_strategy == "token",
    )


def get_session_manager(request: Request) -> SessionManager:
    """Get the process-wide session manager."""
    return request.app.state.sessions


async def extract_handle(request: Request) -> Optional[str]:
    """Pull the session handle from wherever the active strategy carries it."""
    manager = get_session_manager(request)
    if manager.uses_cookie:
        return request.cookies.get(SESSION_COOKIE_NAME)

    token = request.query_params.get(TOKEN_FIELD)
    if token:
        return token

    auth_header = request.headers.get("authorization", "")
    if auth_header.lower().startswith("bearer "):
        return auth_header[7:].strip() or None

    content_type = request.headers.get("content-type", "")
    if request.method == "POST" and (
        content_type.startswith("application/x-www-form-urlencoded")
        or content_type.startswith("multipart/form-data")
    ):
        form = await request.form()
        value = form.get(TOKEN_FIELD)
        if isinstance(value, str) and value:
            return value

    return None


async def get_current_session_optional(request: Request) -> Optional[SessionData]:
    """Get the current session, returns None if not authenticated."""
    handle = await extract_handle(request)
    result = get_session_manager(request).verify(handle)
    return result.context if result.active else None


async def require_session(request: Request) -> SessionData:
    """
    Gate a route behind a valid session.

    On success the session is attached to ``request.state.session`` and
    returned. Otherwise the matching AuthError is raised; the application's
    handler turns it into a redirect to the login page.
    """
    handle = await extract_handle(request)
    result = get_session_manager(request).verify(handle)
    if not result.active:
        raise _STATUS_ERRORS[result.status]()

    request.state.session = result.context
    request.state.session_handle = handle
    return result.context


def session_token(request: Request) -> Optional[str]:
    """Handle to propagate in links and forms, for the token strategy only."""
    if get_session_manager(request).uses_cookie:
        return None
    return getattr(request.state, "session_handle", None)


