"""
Auth Schemas.

Request and response bodies for registration, login and profile.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, EmailStr, Field, field_serializer, field_validator

from notes_app.backend.schemas.base import CamelModel, to_utc_iso


def normalize_email(value: Any) -> Any:
    """Trim and lowercase an email; non-strings are left for validation to reject."""
    if isinstance(value, str):
        return value.strip().lower()
    return value


class Credentials(BaseModel):
    """Email and password pair."""

    email: EmailStr = Field(description="Account email", examples=["alice@example.com"])
    password: str = Field(description="Account password", examples=["s3cret!"])

    @field_validator("email", mode="before")
    @classmethod
    def clean_email(cls, value: Any) -> Any:
        return normalize_email(value)


class RegisterRequest(Credentials):
    """Schema for account registration."""


class LoginRequest(Credentials):
    """Schema for login."""


class UserResponse(CamelModel):
    """Public view of a user; never includes the password hash."""

    id: int
    email: str
    created_at: datetime
    updated_at: datetime

    @field_serializer("created_at", "updated_at")
    def serialize_timestamp(self, value: datetime) -> str:
        return to_utc_iso(value)


class AuthResponse(BaseModel):
    """Registration and login response body."""

    user: UserResponse
    token: str


class ProfileResponse(BaseModel):
    """Profile response body."""

    user: UserResponse
