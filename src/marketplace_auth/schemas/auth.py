from datetime import datetime
from typing import Self

from pydantic import BaseModel, EmailStr, Field, model_validator

from src.marketplace_auth.schemas.user import UserRead


class RegisterRequest(BaseModel):
    """Account registration.

    Password strength and role are checked by the auth service so the
    violated rule can be reported precisely.
    """

    email: EmailStr
    username: str = Field(min_length=3, max_length=50)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    password: str = Field(max_length=128)
    confirm_password: str = Field(max_length=128)
    role: str = Field(
        max_length=20,
        json_schema_extra={"examples": ["fan", "artist", "producer"]},
    )

    @model_validator(mode="after")
    def passwords_match(self) -> Self:
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=128)


class AuthResponse(BaseModel):
    """Account view plus a freshly issued token pair."""

    user: UserRead
    access_token: str
    refresh_token: str
    expires_at: datetime
    token_type: str = "bearer"


class RefreshRequest(BaseModel):
    refresh_token: str


class RefreshResponse(BaseModel):
    access_token: str
    refresh_token: str
    expires_at: datetime
    token_type: str = "bearer"


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    token: str = Field(min_length=1, max_length=128)
    new_password: str = Field(max_length=128)
    confirm_password: str = Field(max_length=128)

    @model_validator(mode="after")
    def passwords_match(self) -> Self:
        if self.new_password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class ResendVerificationRequest(BaseModel):
    """Request to resend verification email."""

    email: EmailStr


class VerifyEmailResponse(BaseModel):
    """Response after email verification."""

    message: str
    user: UserRead


class MessageResponse(BaseModel):
    message: str


class RoleInfo(BaseModel):
    value: str
    label: str
    description: str
