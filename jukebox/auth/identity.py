"""Identity store holding the demo accounts."""

import logging
from typing import Iterable, Optional

from fastapi import Request
from pydantic import BaseModel, ConfigDict

from jukebox.auth.errors import InvalidCredentials

logger = logging.getLogger(__name__)


class Account(BaseModel):
    """A known account. Passwords are plaintext demo values."""
    model_config = ConfigDict(frozen=True)

    id: int
    username: str
    password: str


DEMO_ACCOUNTS = (
    Account(id=1, username="user1", password="password123"),
    Account(id=2, username="user2", password="password123"),
)


class IdentityStore:
    """Fixed, pre-seeded account table.

    The table is small and static, so lookups are plain linear scans.
    Accounts are never added, changed or removed after construction.
    """

    def __init__(self, accounts: Iterable[Account]):
        self._accounts = tuple(accounts)

    @classmethod
    def seeded(cls) -> "IdentityStore":
        """Create a store holding the demo accounts."""
        return cls(DEMO_ACCOUNTS)

    def __len__(self) -> int:
        return len(self._accounts)

    def find_by_username(self, username: str) -> Optional[Account]:
        """Exact, case-sensitive username lookup."""
        for account in self._accounts:
            if account.username == username:
                return account
        return None

    def find_by_id(self, account_id: int) -> Optional[Account]:
        for account in self._accounts:
            if account.id == account_id:
                return account
        return None

    def verify_credentials(self, username: str, password: str) -> Account:
        """
        Authenticate a username/password pair.

        Passwords are compared as plain strings; there is no hashing.

        Raises:
            InvalidCredentials: for an unknown username or a wrong password,
                with the same message in both cases.
        """
        account = self.find_by_username(username)
        if account is None or account.password != password:
            logger.info(f"Rejected credentials for username {username!r}")
            raise InvalidCredentials()
        return account


def get_identity_store(request: Request) -> IdentityStore:
    """Get the process-wide identity store."""
    return request.app.state.identities
