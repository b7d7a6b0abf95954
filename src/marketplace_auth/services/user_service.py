"""Account administration - creation, listing, inspection, updates and soft deletion."""

from collections.abc import Awaitable

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.marketplace_auth.core.exceptions import AppError, InternalError
from src.marketplace_auth.core.logging import get_logger
from src.marketplace_auth.core.security import PasswordHasher
from src.marketplace_auth.models import User
from src.marketplace_auth.schemas.user import AccountCreate, AccountPatch, UserList, UserRead
from src.marketplace_auth.services.account_service import AccountDraft, AccountService


class UserService:
    """Admin-facing account management."""

    def __init__(
        self,
        accounts: AccountService,
        session: AsyncSession,
        hasher: PasswordHasher,
        logger: structlog.stdlib.BoundLogger | None = None,
    ):
        self.accounts = accounts
        self.session = session
        self.hasher = hasher
        self.logger = logger or get_logger(__name__)

    async def list_users(self, limit: int, offset: int) -> UserList:
        users, total = await self.accounts.list_accounts(limit, offset)
        return UserList(
            items=[UserRead.model_validate(u) for u in users],
            total=total,
            limit=limit,
            offset=offset,
        )

    async def create_user(self, data: AccountCreate, actor_id: int) -> User:
        """Create an account on behalf of an admin.

        The account starts unverified and no verification email is sent;
        the owner can request one through resend-verification.
        """
        await self.accounts.ensure_available(data.email, data.username)
        password_hash = self.hasher.hash(data.password)

        user = await self._commit(
            self.accounts.create(
                AccountDraft(
                    email=data.email,
                    username=data.username,
                    first_name=data.first_name,
                    last_name=data.last_name,
                    password_hash=password_hash,
                    role=data.role,
                )
            )
        )
        self.logger.info("Account created by admin", user_id=user.id, actor_id=actor_id)
        return user

    async def get_user(self, user_id: int) -> User:
        return await self.accounts.find_by_id(user_id)

    async def update_user(self, user_id: int, patch: AccountPatch, actor_id: int) -> User:
        """Apply an admin patch, including role and status changes."""
        user = await self._commit(self.accounts.update_fields(user_id, patch))
        self.logger.info(
            "Account updated by admin",
            user_id=user_id,
            actor_id=actor_id,
            fields=sorted(patch.model_fields_set),
        )
        return user

    async def deactivate_user(self, user_id: int, actor_id: int) -> User:
        """Soft delete: the account becomes inactive and the row is kept."""
        user = await self._commit(self.accounts.deactivate(user_id))
        self.logger.info("Account deactivated", user_id=user_id, actor_id=actor_id)
        return user

    async def _commit(self, change: Awaitable[User]) -> User:
        try:
            user = await change
            await self.session.commit()
            return user
        except AppError:
            await self.session.rollback()
            raise
        except SQLAlchemyError as e:
            await self.session.rollback()
            self.logger.error("Database error", error=str(e))
            raise InternalError("Failed to save changes", code="DATABASE_ERROR") from e
