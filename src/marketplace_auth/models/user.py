"""Account model."""

from datetime import datetime

from sqlmodel import Field, SQLModel

from src.marketplace_auth.models.base import utc_now
from src.marketplace_auth.models.enums import UserRole, UserStatus


class User(SQLModel, table=True):
    """Persisted account identity and credential record.

    Email and username are unique as stored (case-sensitive). Accounts are
    never deleted; deletion moves ``status`` to inactive.
    """

    __tablename__ = "users"

    id: int | None = Field(default=None, primary_key=True)
    email: str = Field(max_length=255, unique=True, index=True)
    username: str = Field(max_length=50, unique=True, index=True)
    first_name: str = Field(default="", max_length=100)
    last_name: str = Field(default="", max_length=100)
    password_hash: str = Field(max_length=255)
    role: str = Field(default=UserRole.FAN.value, max_length=20)
    status: str = Field(default=UserStatus.ACTIVE.value, max_length=20)
    email_verified: bool = Field(default=False)
    last_login_at: datetime | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE.value
