"""Shared lightweight schemas and validation helpers."""

import re

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

SPECIAL_CHARACTERS = re.compile(r"[!@#$%^&*(),.?\":{}|<>]")


class Message(BaseModel):
    """Standard response envelope used for plain text messages."""

    message: str


class CamelModel(BaseModel):
    """Accepts and emits camelCase keys (`confirmPassword`, `isVerified`)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def check_password_strength(password: str) -> str:
    if len(password) < 8:
        raise ValueError("Password must be at least 8 characters long")
    if not re.search(r"[0-9]", password):
        raise ValueError("Password must contain at least one number")
    if not SPECIAL_CHARACTERS.search(password):
        raise ValueError("Password must contain at least one special character")
    return password
