"""
Pydantic models for user data.

Defines schemas for registration, login and reading public user
information.  Password hashes never leave the service layer.  E‑mail
addresses are normalized (trimmed and lower‑cased) during validation,
so every lookup and uniqueness check works on the normalized form.
"""

from typing import Any

from pydantic import BaseModel, EmailStr, Field, field_validator

PASSWORD_MIN_LENGTH = 6


class _Credentials(BaseModel):
    email: EmailStr = Field(..., examples=["user@example.com"])

    @field_validator("email", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("email")
    @classmethod
    def _lower(cls, value: str) -> str:
        return value.lower()


class RegisterRequest(_Credentials):
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH, examples=["strongpassword"])


class LoginRequest(_Credentials):
    password: str = Field(..., min_length=1)


class UserRead(BaseModel):
    """Public fields of a user."""

    id: int
    email: str


class RegisterResponse(BaseModel):
    message: str = "User registered successfully"
    userId: int


class LoginResponse(BaseModel):
    message: str = "Login successful"
    token: str
    user: UserRead
