"""Session table storage."""

from datetime import datetime
from typing import Iterator, Optional, Protocol, Tuple

from pydantic import BaseModel


class SessionData(BaseModel):
    """Session record kept under an opaque handle."""
    subject_id: int
    username: str
    issued_at: datetime


class SessionStore(Protocol):
    """Key-value interface the session managers depend on.

    Anything with these four methods can stand in for the in-memory table,
    e.g. a shared external key-value backend.
    """

    def get(self, key: str) -> Optional[SessionData]: ...

    def put(self, key: str, data: SessionData) -> None: ...

    def delete(self, key: str) -> None: ...

    def items(self) -> Iterator[Tuple[str, SessionData]]: ...


class InMemorySessionStore:
    """Process-local session table. Lost on restart."""

    def __init__(self):
        self._sessions: dict[str, SessionData] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def get(self, key: str) -> Optional[SessionData]:
        return self._sessions.get(key)

    def put(self, key: str, data: SessionData) -> None:
        self._sessions[key] = data

    def delete(self, key: str) -> None:
        self._sessions.pop(key, None)

    def items(self) -> Iterator[Tuple[str, SessionData]]:
        # Snapshot so callers may delete while iterating
        return iter(list(self._sessions.items()))
