"""Password hashing and JWT issuance used by the account service."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import anyio
from jose import JWTError, jwt
from passlib.context import CryptContext

from app.core.config import Settings, settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.PASSWORD_HASH_ROUNDS,
)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a plaintext password against a stored bcrypt hash.

    The comparison itself is constant-time inside passlib. A hash that cannot
    be identified verifies as False instead of raising.
    """
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        logger.warning("Stored password hash could not be identified")
        return False


def get_password_hash(password: str) -> str:
    """Hash a password with bcrypt; a fresh salt is generated on every call."""
    return pwd_context.hash(password)


async def hash_password_async(password: str) -> str:
    """Run `get_password_hash` in a worker thread so the event loop stays free."""
    return await anyio.to_thread.run_sync(get_password_hash, password)


async def verify_password_async(plain_password: str, hashed_password: str) -> bool:
    """Run `verify_password` in a worker thread so the event loop stays free."""
    return await anyio.to_thread.run_sync(verify_password, plain_password, hashed_password)


class TokenIssuer:
    """Sign and verify access tokens with the secret held by `Settings`."""

    def __init__(self, config: Settings):
        self.secret_key = config.SECRET_KEY
        self.algorithm = config.ALGORITHM
        self.expires_delta = timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES)

    def issue(self, subject_id: int | str, expires_delta: Optional[timedelta] = None) -> str:
        """Return a JWT whose `sub` is the user id and whose `exp` is fixed from now."""
        expire = datetime.now(timezone.utc) + (expires_delta or self.expires_delta)
        to_encode = {"sub": str(subject_id), "exp": expire}
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def decode(self, token: str) -> Optional[str]:
        """Return the subject of a valid, unexpired token, otherwise None."""
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as exc:
            logger.debug("JWT verification failed: %s", exc)
            return None
        return payload.get("sub")
