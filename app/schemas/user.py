"""Pydantic schemas for password reset and user lookup."""

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from app.schemas.auth import UserResponse
from app.schemas.common import CamelModel, check_password_strength


class PasswordResetRequest(CamelModel):
    email: EmailStr
    password: str
    confirm_password: str = Field(min_length=1)

    @field_validator("password")
    @classmethod
    def password_strength(cls, value: str) -> str:
        return check_password_strength(value)

    @model_validator(mode="after")
    def passwords_match(self) -> "PasswordResetRequest":
        if self.password != self.confirm_password:
            raise ValueError("Passwords must match")
        return self


class UserListResponse(BaseModel):
    users: list[UserResponse]
    count: int
    success: bool = True


class UserDetailResponse(BaseModel):
    user: UserResponse
