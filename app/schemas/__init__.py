from app.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from app.schemas.common import Message
from app.schemas.otp import OTPRequest, OTPVerify
from app.schemas.user import PasswordResetRequest, UserDetailResponse, UserListResponse

__all__ = [
    "AuthResponse",
    "LoginRequest",
    "Message",
    "OTPRequest",
    "OTPVerify",
    "PasswordResetRequest",
    "RegisterRequest",
    "UserDetailResponse",
    "UserListResponse",
    "UserResponse",
]
