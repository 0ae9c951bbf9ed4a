"""Pydantic schemas for authentication-related payloads and responses."""

from datetime import datetime

from pydantic import ConfigDict, EmailStr, Field, field_validator, model_validator

from app.schemas.common import CamelModel, Message, check_password_strength


class RegisterRequest(CamelModel):
    """Payload for registration requests."""

    name: str = Field(min_length=1)
    email: EmailStr
    password: str
    confirm_password: str = Field(min_length=1)

    @field_validator("password")
    @classmethod
    def password_strength(cls, value: str) -> str:
        return check_password_strength(value)

    @model_validator(mode="after")
    def passwords_match(self) -> "RegisterRequest":
        if self.password != self.confirm_password:
            raise ValueError("Passwords must match")
        return self


class LoginRequest(CamelModel):
    """Payload for login attempts."""

    email: EmailStr
    password: str = Field(min_length=1)


class UserResponse(CamelModel):
    """Response body representing a user record; never carries the hash."""

    id: int
    name: str
    email: EmailStr
    is_verified: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(Message):
    """Returned by register and login: the user plus a bearer token."""

    user: UserResponse
    token: str
