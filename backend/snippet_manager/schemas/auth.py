"""
Snippet Manager Backend — Authentication Schemas
==================================================

What:  The authenticated principal, the auth-guard result, and the bodies
       of the account endpoints (sign-up, login, logout, password reset).
Why:   The auth guard and the account routes exchange these with the hosted
       auth client; keeping them typed makes the success/failure contract
       explicit (`AuthResult.success` decides, the other fields follow it).
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

from snippet_manager.constants import PASSWORD_MIN_LENGTH


class Principal(BaseModel):
    """The caller behind a verified bearer token."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    access_token: str


class AuthResult(BaseModel):
    """
    Outcome of verifying an Authorization header.

    success=True  → user_id and access_token are set, error is None
    success=False → error holds the client-facing reason
    """

    success: bool
    user_id: Optional[str] = None
    access_token: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, user_id: str, access_token: str) -> "AuthResult":
        return cls(success=True, user_id=user_id, access_token=access_token)

    @classmethod
    def failed(cls, error: str) -> "AuthResult":
        return cls(success=False, error=error)


# ── Account endpoints ─────────────────────────────────────────────────────


def _validate_email(value: Any) -> str:
    if value is None:
        raise PydanticCustomError("missing", "Email is required")
    if not isinstance(value, str):
        raise PydanticCustomError("string_type", "Email must be a string")
    email = value.strip()
    local, _, domain = email.partition("@")
    if not local or "." not in domain or domain.startswith(".") or domain.endswith("."):
        raise PydanticCustomError("email", "Invalid email address")
    return email


class CredentialsRequest(BaseModel):
    """Body of POST /api/auth/signup and /api/auth/login."""

    model_config = ConfigDict(extra="ignore")

    email: str = Field(default=None, validate_default=True)
    password: str = Field(default=None, validate_default=True)

    @field_validator("email", mode="before")
    @classmethod
    def validate_email(cls, value: Any) -> str:
        return _validate_email(value)

    @field_validator("password", mode="before")
    @classmethod
    def validate_password(cls, value: Any) -> str:
        if value is None:
            raise PydanticCustomError("missing", "Password is required")
        if not isinstance(value, str):
            raise PydanticCustomError("string_type", "Password must be a string")
        if len(value) < PASSWORD_MIN_LENGTH:
            raise PydanticCustomError(
                "password_too_short",
                f"Password must be at least {PASSWORD_MIN_LENGTH} characters",
            )
        return value


class ResetPasswordRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    email: str = Field(default=None, validate_default=True)

    @field_validator("email", mode="before")
    @classmethod
    def validate_email(cls, value: Any) -> str:
        return _validate_email(value)


class AuthUser(BaseModel):
    id: str
    email: Optional[str] = None


class SessionResponse(BaseModel):
    """
    Returned by sign-up and login.

    `access_token` is null after sign-up when the provider requires email
    confirmation before the first login.
    """

    user: AuthUser
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    token_type: str = "bearer"


class MessageResponse(BaseModel):
    message: str
