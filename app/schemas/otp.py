"""Pydantic schemas for OTP request and verification flows."""

from pydantic import BaseModel, EmailStr, Field


class OTPVerify(BaseModel):
    """Payload used when submitting a received OTP code for validation."""

    email: EmailStr
    otp: str = Field(min_length=1, max_length=6)


class OTPRequest(BaseModel):
    """Payload used to request a new OTP for a specific email."""

    email: EmailStr
