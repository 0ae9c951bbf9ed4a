"""Dependency providers used by FastAPI endpoints.

These helpers expose database sessions, Redis clients, and composed services
through FastAPI's dependency injection system so route handlers remain thin.
"""

from typing import AsyncGenerator, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings, get_settings
from app.core.errors import UnauthorizedError
from app.core.security import TokenIssuer
from app.db.models.user import User
from app.db.redis import get_redis_client
from app.db.session import get_session
from app.services.account import AccountService
from app.services.email import NotificationGateway, build_email_gateway
from app.stores.base import OTPStore
from app.stores.otp import DatabaseOTPStore, RedisOTPStore
from app.stores.users import UserStore

bearer_scheme = HTTPBearer(auto_error=False)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async SQLAlchemy session tied to the shared engine."""

    async for session in get_session():
        yield session


def get_redis() -> Redis:
    """Return a singleton Redis client used for OTP storage."""
    return get_redis_client()


def get_token_issuer(config: Settings = Depends(get_settings)) -> TokenIssuer:
    return TokenIssuer(config)


def get_email_gateway(config: Settings = Depends(get_settings)) -> NotificationGateway:
    return build_email_gateway(config)


def get_otp_store(
    session: AsyncSession = Depends(get_db_session),
    config: Settings = Depends(get_settings),
) -> OTPStore:
    """Select the OTP store named by `OTP_BACKEND`."""
    if config.OTP_BACKEND == "database":
        return DatabaseOTPStore(session)
    return RedisOTPStore(get_redis())


async def get_account_service(
    session: AsyncSession = Depends(get_db_session),
    codes: OTPStore = Depends(get_otp_store),
    tokens: TokenIssuer = Depends(get_token_issuer),
    mailer: NotificationGateway = Depends(get_email_gateway),
    config: Settings = Depends(get_settings),
) -> AccountService:
    """Assemble AccountService with its stores, token issuer and mail gateway.

    Dependencies:
    - `AsyncSession` from `get_db_session` for user persistence.
    - The OTP store chosen by configuration (Redis or the database).
    - `TokenIssuer` and the email gateway, both built from `Settings`.
    """

    return AccountService(
        users=UserStore(session),
        codes=codes,
        tokens=tokens,
        mailer=mailer,
        config=config,
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    tokens: TokenIssuer = Depends(get_token_issuer),
    session: AsyncSession = Depends(get_db_session),
) -> User:
    """Resolve the bearer token to a stored user or fail with 401."""

    if credentials is None:
        raise UnauthorizedError("Not authenticated")

    subject = tokens.decode(credentials.credentials)
    if subject is None or not subject.isdigit():
        raise UnauthorizedError("Invalid authentication credentials")

    user = await UserStore(session).find_by_id(int(subject))
    if user is None:
        raise UnauthorizedError("Invalid authentication credentials")
    return user
