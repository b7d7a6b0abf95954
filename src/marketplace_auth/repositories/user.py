"""Repository for User entity."""

from typing import Any

from sqlalchemy import func
from sqlmodel import col, select, update

from src.marketplace_auth.models import User, utc_now
from src.marketplace_auth.repositories.base import BaseRepository

# Columns apply_changes may write. Column names never come from request input directly.
WRITABLE_COLUMNS: frozenset[str] = frozenset(
    {
        "email",
        "username",
        "first_name",
        "last_name",
        "role",
        "status",
        "password_hash",
        "email_verified",
        "last_login_at",
    }
)


class UserRepository(BaseRepository[User]):
    """Repository for User entity."""

    model = User

    async def get_by_email(self, email: str) -> User | None:
        """Get user by email address (exact, case-sensitive match)."""
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def exists_by_email(self, email: str) -> bool:
        """Check if a user with the given email exists."""
        result = await self.session.execute(select(User.id).where(User.email == email))
        return result.first() is not None

    async def exists_by_username(self, username: str) -> bool:
        result = await self.session.execute(select(User.id).where(User.username == username))
        return result.first() is not None

    async def apply_changes(self, user_id: int, values: dict[str, Any]) -> bool:
        """Apply column values to one account in a single parameterized UPDATE.

        ``updated_at`` is always bumped, including for an empty change set.
        Returns False when no account has the given id.
        """
        unknown = set(values) - WRITABLE_COLUMNS
        if unknown:
            raise ValueError(f"Unknown account columns: {sorted(unknown)}")

        result = await self.session.execute(
            update(User)
            .where(col(User.id) == user_id)
            .values(**values, updated_at=utc_now())
        )
        return bool(result.rowcount)  # type: ignore[attr-defined]

    async def list_accounts(self, limit: int, offset: int) -> tuple[list[User], int]:
        """Return a page of accounts, newest first, with the total count."""
        total = await self.session.scalar(select(func.count()).select_from(User))
        result = await self.session.execute(
            select(User)
            .order_by(col(User.created_at).desc(), col(User.id).desc())
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all()), int(total or 0)
