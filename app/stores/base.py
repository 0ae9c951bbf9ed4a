"""Storage contracts the account service depends on."""

from datetime import datetime
from typing import Any, Protocol, Sequence

from app.db.models.user import User


class OneTimeCode(Protocol):
    """Shape shared by every stored one-time code."""

    email: str
    code: str
    expires_at: datetime
    created_at: datetime


class CredentialStore(Protocol):
    """Persistence of user identity and hashed credentials."""

    async def exists(self, email: str) -> bool:
        """Return True when a user with this exact email is stored."""
        ...

    async def find_by_email(self, email: str) -> User | None:
        ...

    async def find_by_id(self, user_id: int) -> User | None:
        ...

    async def list_all(self) -> Sequence[User]:
        ...

    async def create(self, **fields: Any) -> User:
        """Insert a user and return it with generated columns populated."""
        ...

    async def update_by_email(self, email: str, **fields: Any) -> User | None:
        """Update a user in place. Return the updated user or None if absent."""
        ...


class OTPStore(Protocol):
    """Persistence of short-lived one-time codes keyed by email."""

    async def create(self, email: str, code: str, expires_at: datetime) -> OneTimeCode:
        ...

    async def find_by_email(self, email: str) -> OneTimeCode | None:
        """Return the oldest outstanding code for the email, or None."""
        ...

    async def delete_all_by_email(self, email: str) -> None:
        """Remove every code stored for the email."""
        ...
