"""In-memory implementations of the store protocols and mail gateway for testing."""

from datetime import datetime
from itertools import count
from typing import Any, Sequence

from app.db.base import utcnow
from app.db.models.user import User
from app.services.email import MailOptions
from app.stores.otp import OTPRecord


class FakeUserStore:
    def __init__(self) -> None:
        self.users: dict[str, User] = {}
        self.writes = 0
        self._ids = count(1)

    async def exists(self, email: str) -> bool:
        return email in self.users

    async def find_by_email(self, email: str) -> User | None:
        return self.users.get(email)

    async def find_by_id(self, user_id: int) -> User | None:
        return next((user for user in self.users.values() if user.id == user_id), None)

    async def list_all(self) -> Sequence[User]:
        return sorted(self.users.values(), key=lambda user: user.id)

    async def create(self, **fields: Any) -> User:
        now = utcnow()
        user = User(id=next(self._ids), created_at=now, updated_at=now, **fields)
        self.users[user.email] = user
        self.writes += 1
        return user

    async def update_by_email(self, email: str, **fields: Any) -> User | None:
        user = self.users.get(email)
        if user is None:
            return None
        for name, value in fields.items():
            setattr(user, name, value)
        user.updated_at = utcnow()
        self.writes += 1
        return user


class FakeOTPStore:
    def __init__(self) -> None:
        self.records: list[OTPRecord] = []
        self.writes = 0

    async def create(self, email: str, code: str, expires_at: datetime) -> OTPRecord:
        record = OTPRecord(email=email, code=code, expires_at=expires_at, created_at=utcnow())
        self.records.append(record)
        self.writes += 1
        return record

    async def find_by_email(self, email: str) -> OTPRecord | None:
        return next((record for record in self.records if record.email == email), None)

    async def delete_all_by_email(self, email: str) -> None:
        self.records = [record for record in self.records if record.email != email]
        self.writes += 1


class FakeMailer:
    """Collects outgoing messages; set `fail_with` to make `send` raise."""

    def __init__(self) -> None:
        self.sent: list[MailOptions] = []
        self.fail_with: Exception | None = None

    async def send(self, options: MailOptions) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append(options)

    def last_code_for(self, email: str) -> str:
        """Pull the code out of the latest message sent to `email`."""
        message = next(options for options in reversed(self.sent) if options.to == email)
        return message.html.split("<strong>", 1)[1].split("</strong>", 1)[0]
