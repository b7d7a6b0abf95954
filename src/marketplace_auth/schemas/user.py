from datetime import datetime
from typing import Self

from pydantic import BaseModel, EmailStr, Field, model_validator

from src.marketplace_auth.models.enums import UserRole, UserStatus


class UserRead(BaseModel):
    """Account view returned to clients. Never carries the password hash."""

    id: int
    email: EmailStr
    username: str
    first_name: str
    last_name: str
    role: str
    status: str
    email_verified: bool
    last_login_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ProfileUpdate(BaseModel):
    """Self-service profile changes. Role and status are admin-only."""

    email: EmailStr | None = None
    username: str | None = Field(None, min_length=3, max_length=50)
    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, min_length=1, max_length=100)


class AccountPatch(ProfileUpdate):
    """Partial account update. Only fields explicitly set are applied."""

    role: UserRole | None = None
    status: UserStatus | None = None


class AccountCreate(BaseModel):
    """Admin-created account. Any role may be assigned, including legacy ``buyer``."""

    email: EmailStr
    username: str = Field(min_length=3, max_length=50)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    password: str = Field(max_length=128)
    confirm_password: str = Field(max_length=128)
    role: UserRole

    @model_validator(mode="after")
    def passwords_match(self) -> Self:
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class UserList(BaseModel):
    items: list[UserRead]
    total: int
    limit: int
    offset: int
