from app.stores.base import CredentialStore, OTPStore
from app.stores.otp import DatabaseOTPStore, OTPRecord, RedisOTPStore
from app.stores.users import UserStore

__all__ = [
    "CredentialStore",
    "DatabaseOTPStore",
    "OTPRecord",
    "OTPStore",
    "RedisOTPStore",
    "UserStore",
]
