"""OTP generation and validation, independent of where codes are stored."""

import secrets
from datetime import datetime, timedelta, timezone

OTP_LENGTH = 6
OTP_EXPIRE_SECONDS = 600


def generate_otp(length: int = OTP_LENGTH) -> str:
    """Create a zero-padded numeric OTP with configurable length."""
    upper_bound = 10 ** length
    return f"{secrets.randbelow(upper_bound):0{length}d}"


def new_expiry(now: datetime | None = None, expire_seconds: int = OTP_EXPIRE_SECONDS) -> datetime:
    """Absolute expiry for a code issued at `now` (defaults to the current time)."""
    now = now or datetime.now(timezone.utc)
    return now + timedelta(seconds=expire_seconds)


def issue_code(length: int = OTP_LENGTH, expire_seconds: int = OTP_EXPIRE_SECONDS) -> tuple[str, datetime]:
    """Return a fresh code and the moment it stops being accepted."""
    return generate_otp(length), new_expiry(expire_seconds=expire_seconds)


def _as_utc(value: datetime) -> datetime:
    # some drivers hand back naive timestamps; they are stored as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def validate_otp(submitted: str, stored: str, expires_at: datetime, now: datetime | None = None) -> bool:
    """True iff the submitted code equals the stored one and has not expired.

    Comparison is exact: no trimming or case folding is applied, callers pass
    already-normalized values. A code is still valid at the expiry instant.
    """
    now = now or datetime.now(timezone.utc)
    if not secrets.compare_digest(submitted.encode(), stored.encode()):
        return False
    return _as_utc(now) <= _as_utc(expires_at)
