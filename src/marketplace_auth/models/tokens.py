"""Single-use token models - email verification and password reset.

Only the SHA-256 digest of a token is stored. Rows are never deleted and
remain as an audit trail once consumed or expired.
"""

from datetime import datetime

from sqlmodel import Field, SQLModel

from src.marketplace_auth.models.base import utc_now


class EphemeralTokenBase(SQLModel):
    user_id: int = Field(foreign_key="users.id", index=True)
    token_hash: str = Field(max_length=64, unique=True, index=True)
    expires_at: datetime
    created_at: datetime = Field(default_factory=utc_now)


class EmailVerification(EphemeralTokenBase, table=True):
    __tablename__ = "email_verifications"

    id: int | None = Field(default=None, primary_key=True)
    verified_at: datetime | None = Field(default=None)


class PasswordReset(EphemeralTokenBase, table=True):
    __tablename__ = "password_resets"

    id: int | None = Field(default=None, primary_key=True)
    used_at: datetime | None = Field(default=None)
