"""One-time code stores: Redis (default) and the `otp_codes` table."""

import json
import math
from dataclasses import asdict, dataclass
from datetime import datetime

from redis.asyncio import Redis
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.base import utcnow
from app.db.models.otp import OTPCode


def _otp_key(email: str) -> str:
    """Generate the Redis key that scopes OTP records to a user's email."""
    return f"otp:{email}"


@dataclass(frozen=True)
class OTPRecord:
    """A one-time code as held in Redis."""

    email: str
    code: str
    expires_at: datetime
    created_at: datetime

    def to_json(self) -> str:
        data = asdict(self)
        data["expires_at"] = self.expires_at.isoformat()
        data["created_at"] = self.created_at.isoformat()
        return json.dumps(data)

    @classmethod
    def from_json(cls, raw: str) -> "OTPRecord":
        data = json.loads(raw)
        return cls(
            email=data["email"],
            code=data["code"],
            expires_at=datetime.fromisoformat(data["expires_at"]),
            created_at=datetime.fromisoformat(data["created_at"]),
        )


class RedisOTPStore:
    """Keep every code of an email in one Redis list, oldest first.

    The list key expires together with the newest code so abandoned codes do
    not linger; expiry is still enforced by `validate_otp` on read.
    """

    def __init__(self, redis_client: Redis):
        """Receive a Redis client (injected by FastAPI dependency graph)."""
        self.redis = redis_client

    async def create(self, email: str, code: str, expires_at: datetime) -> OTPRecord:
        record = OTPRecord(email=email, code=code, expires_at=expires_at, created_at=utcnow())
        key = _otp_key(email)
        await self.redis.rpush(key, record.to_json())
        # rounded up: the key must not vanish before the code expires
        await self.redis.pexpireat(key, math.ceil(expires_at.timestamp() * 1000))
        return record

    async def find_by_email(self, email: str) -> OTPRecord | None:
        raw = await self.redis.lindex(_otp_key(email), 0)
        if raw is None:
            return None
        return OTPRecord.from_json(raw)

    async def delete_all_by_email(self, email: str) -> None:
        await self.redis.delete(_otp_key(email))


class DatabaseOTPStore:
    """Store codes as `OTPCode` rows through a request-scoped session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, email: str, code: str, expires_at: datetime) -> OTPCode:
        record = OTPCode(email=email, code=code, expires_at=expires_at)
        self.session.add(record)
        await self.session.commit()
        await self.session.refresh(record)
        return record

    async def find_by_email(self, email: str) -> OTPCode | None:
        statement = (
            select(OTPCode)
            .where(OTPCode.email == email)
            .order_by(OTPCode.created_at, OTPCode.id)
            .limit(1)
        )
        return await self.session.scalar(statement)

    async def delete_all_by_email(self, email: str) -> None:
        await self.session.execute(delete(OTPCode).where(OTPCode.email == email))
        await self.session.commit()
