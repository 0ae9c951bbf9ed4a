from app.db.models.otp import OTPCode
from app.db.models.user import User

__all__ = ["OTPCode", "User"]
