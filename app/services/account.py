"""Account domain logic orchestrating users, one-time codes, and JWT issuance."""

import logging
from dataclasses import dataclass
from typing import Sequence

from app.core.config import Settings
from app.core.errors import ConflictError, NotFoundError, UnauthorizedError
from app.core.security import TokenIssuer, hash_password_async, verify_password_async
from app.db.models.user import User
from app.services.email import OTP_EMAIL_SUBJECT, MailOptions, NotificationGateway, render_otp_email
from app.services.otp import issue_code, validate_otp
from app.stores.base import CredentialStore, OTPStore

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
USER_NOT_FOUND = "User not found"
INVALID_OTP = "OTP is not valid"

OTP_SENT = "OTP sent successfully"
EMAIL_VERIFIED = "Email verified successfully"
OTP_VERIFIED = "OTP verified successfully"
PASSWORD_RESET = "Password reset successfully"


@dataclass(frozen=True)
class AuthResult:
    """User plus the access token minted for them."""

    user: User
    token: str


class AccountService:
    """High-level service used by API routes.

    Every operation checks the user before touching one-time codes. There is
    no transaction across the two stores; writes are issued in a fixed order
    and an early failure aborts before the first write.
    """

    def __init__(
        self,
        users: CredentialStore,
        codes: OTPStore,
        tokens: TokenIssuer,
        mailer: NotificationGateway,
        config: Settings,
    ):
        self.users = users
        self.codes = codes
        self.tokens = tokens
        self.mailer = mailer
        self.config = config

    async def _issue_and_send_code(self, email: str) -> None:
        """Purge older codes, store a fresh one and deliver it.

        If delivery fails for any reason the new code is purged again so no
        undeliverable code stays active, and the error propagates.
        """
        await self.codes.delete_all_by_email(email)
        otp_code, expires_at = issue_code(self.config.OTP_LENGTH, self.config.OTP_EXPIRE_SECONDS)
        await self.codes.create(email, otp_code, expires_at)

        options = MailOptions(
            from_address=self.config.FROM_EMAIL or "",
            to=email,
            subject=OTP_EMAIL_SUBJECT,
            html=render_otp_email(otp_code, self.config.OTP_EXPIRE_SECONDS // 60),
        )
        try:
            await self.mailer.send(options)
        except Exception:
            await self.codes.delete_all_by_email(email)
            raise

    async def register(self, name: str, email: str, password: str) -> AuthResult:
        """Create an unverified user, mint their token and email them a code."""

        if await self.users.exists(email):
            raise ConflictError("User with this email already exists")

        user = await self.users.create(
            name=name,
            email=email,
            hashed_password=await hash_password_async(password),
            is_verified=False,
        )
        logger.info("Registered user %s", user.id)

        token = self.tokens.issue(user.id)
        await self._issue_and_send_code(email)
        return AuthResult(user=user, token=token)

    async def login(self, email: str, password: str) -> AuthResult:
        """Authenticate by password; unknown email and wrong password look the same."""

        user = await self.users.find_by_email(email)
        if user is None:
            raise UnauthorizedError(INVALID_CREDENTIALS)

        if not await verify_password_async(password, user.hashed_password):
            raise UnauthorizedError(INVALID_CREDENTIALS)

        return AuthResult(user=user, token=self.tokens.issue(user.id))

    async def request_code(self, email: str) -> str:
        """Send a fresh code for verification or password reset."""

        if not await self.users.exists(email):
            raise NotFoundError(USER_NOT_FOUND)

        await self._issue_and_send_code(email)
        return OTP_SENT

    async def _consume_code(self, email: str, submitted: str) -> None:
        if not await self.users.exists(email):
            raise NotFoundError(USER_NOT_FOUND)

        record = await self.codes.find_by_email(email)
        if record is None:
            raise UnauthorizedError(INVALID_OTP)

        if not validate_otp(submitted, record.code, record.expires_at):
            raise UnauthorizedError(INVALID_OTP)

    async def verify_email(self, email: str, submitted: str) -> str:
        """Accept a code once, mark the user verified and drop all their codes."""

        await self._consume_code(email, submitted)
        await self.users.update_by_email(email, is_verified=True)
        await self.codes.delete_all_by_email(email)
        logger.info("Email verified for %s", email)
        return EMAIL_VERIFIED

    async def verify_password_reset(self, email: str, submitted: str) -> str:
        """Accept a password-reset code once; the password itself is untouched."""

        await self._consume_code(email, submitted)
        await self.codes.delete_all_by_email(email)
        return OTP_VERIFIED

    async def reset_password(self, email: str, new_password: str) -> str:
        """Overwrite the password hash.

        Does not check that `verify_password_reset` succeeded beforehand; the
        client workflow sequences the two calls.
        """

        if not await self.users.exists(email):
            raise NotFoundError(USER_NOT_FOUND)

        hashed_password = await hash_password_async(new_password)
        user = await self.users.update_by_email(email, hashed_password=hashed_password)
        if user is None:
            raise NotFoundError(USER_NOT_FOUND)
        logger.info("Password reset for user %s", user.id)
        return PASSWORD_RESET

    async def list_users(self) -> Sequence[User]:
        return await self.users.list_all()

    async def get_user(self, user_id: int) -> User:
        user = await self.users.find_by_id(user_id)
        if user is None:
            raise NotFoundError(USER_NOT_FOUND)
        return user
