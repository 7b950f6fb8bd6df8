"""Request/response schemas for auth endpoints."""

from typing import Any

from pydantic import BaseModel, EmailStr, Field, field_validator

from taskmanager.core.security import (
    EMAIL_MAX_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
)


def _normalize_email(v: str) -> str:
    email = v.strip().lower()
    if not email:
        raise ValueError("Email must not be blank.")
    if len(email) > EMAIL_MAX_LEN:
        raise ValueError(f"Email must be at most {EMAIL_MAX_LEN} characters.")
    return email


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: str = Field(..., min_length=1, description="Account email")
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN, description="Password")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return _normalize_email(v)


class RegisterRequest(BaseModel):
    """
    New account details.

    roles: optional list of role references, each {"name": "ROLE_ADMIN"} or {"id": 2}.
    Entries are resolved leniently at registration; anything unrecognised is skipped.
    """

    username: str = Field(..., min_length=USERNAME_MIN_LEN, max_length=USERNAME_MAX_LEN)
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)
    email: EmailStr
    roles: list[Any] | None = None

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        username = v.strip()
        if len(username) < USERNAME_MIN_LEN:
            raise ValueError(f"Username must be at least {USERNAME_MIN_LEN} characters.")
        return username

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return _normalize_email(v)


class ForgotPasswordRequest(BaseModel):
    email: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return _normalize_email(v)


class ResetPasswordRequest(BaseModel):
    token: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)


class TokenResponse(BaseModel):
    """JWT bearer token returned after successful login."""

    token: str = Field(..., description="JWT bearer token")


class MessageResponse(BaseModel):
    message: str

