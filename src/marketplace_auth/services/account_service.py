"""Account state management - creation, uniqueness, verification and login state.

Methods flush but never commit; the calling service owns the transaction.
"""

from dataclasses import dataclass

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.marketplace_auth.core.exceptions import ConflictError, NotFoundError
from src.marketplace_auth.core.logging import get_logger
from src.marketplace_auth.models import User, UserRole, UserStatus, utc_now
from src.marketplace_auth.repositories import UserRepository
from src.marketplace_auth.schemas.user import AccountPatch


@dataclass(frozen=True)
class AccountDraft:
    """A new account. The password is already hashed."""

    email: str
    username: str
    first_name: str
    last_name: str
    password_hash: str
    role: UserRole


def _email_taken() -> ConflictError:
    return ConflictError("Email already registered", code="EMAIL_TAKEN")


def _username_taken() -> ConflictError:
    return ConflictError("Username already taken", code="USERNAME_TAKEN")


def _conflict_from(error: IntegrityError) -> ConflictError:
    # Check which constraint failed
    if "username" in str(error.orig).lower():
        return _username_taken()
    return _email_taken()


class AccountService:
    """Owns the account row lifecycle."""

    def __init__(
        self,
        user_repo: UserRepository,
        session: AsyncSession,
        logger: structlog.stdlib.BoundLogger | None = None,
    ):
        self.user_repo = user_repo
        self.session = session
        self.logger = logger or get_logger(__name__)

    async def exists_email(self, email: str) -> bool:
        return await self.user_repo.exists_by_email(email)

    async def exists_username(self, username: str) -> bool:
        return await self.user_repo.exists_by_username(username)

    async def ensure_available(self, email: str, username: str) -> None:
        """Raise ConflictError if the email or username is in use. Email is checked first."""
        if await self.exists_email(email):
            raise _email_taken()
        if await self.exists_username(username):
            raise _username_taken()

    async def create(self, draft: AccountDraft) -> User:
        """Insert a new unverified, active account.

        Uniqueness is checked first; a concurrent insert that slips past the
        check is caught by the unique constraints and reported the same way.
        """
        await self.ensure_available(draft.email, draft.username)

        user = User(
            email=draft.email,
            username=draft.username,
            first_name=draft.first_name,
            last_name=draft.last_name,
            password_hash=draft.password_hash,
            role=draft.role.value,
            status=UserStatus.ACTIVE.value,
            email_verified=False,
        )
        self.user_repo.add(user)
        try:
            await self.user_repo.flush()
        except IntegrityError as e:
            raise _conflict_from(e) from e
        return user

    async def find_by_email(self, email: str) -> User | None:
        return await self.user_repo.get_by_email(email)

    async def find_by_id(self, user_id: int) -> User:
        """Get an account by id or raise NotFoundError."""
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found", code="USER_NOT_FOUND")
        return user

    async def set_email_verified(self, user_id: int) -> User:
        return await self._apply(user_id, {"email_verified": True})

    async def set_password_hash(self, user_id: int, password_hash: str) -> User:
        return await self._apply(user_id, {"password_hash": password_hash})

    async def touch_last_login(self, user_id: int) -> User:
        return await self._apply(user_id, {"last_login_at": utc_now()})

    async def update_fields(self, user_id: int, patch: AccountPatch) -> User:
        """Apply only the fields set on the patch. ``updated_at`` is always bumped."""
        values = patch.model_dump(exclude_unset=True, exclude_none=True, mode="json")
        user = await self.find_by_id(user_id)

        if "email" in values and values["email"] != user.email:
            if await self.exists_email(values["email"]):
                raise _email_taken()
        if "username" in values and values["username"] != user.username:
            if await self.exists_username(values["username"]):
                raise _username_taken()

        try:
            return await self._apply(user_id, values)
        except IntegrityError as e:
            raise _conflict_from(e) from e

    async def deactivate(self, user_id: int) -> User:
        """Soft delete. The row is kept and can no longer log in."""
        return await self.update_fields(user_id, AccountPatch(status=UserStatus.INACTIVE))

    async def list_accounts(self, limit: int, offset: int) -> tuple[list[User], int]:
        return await self.user_repo.list_accounts(limit, offset)

    async def _apply(self, user_id: int, values: dict[str, object]) -> User:
        if not await self.user_repo.apply_changes(user_id, values):
            raise NotFoundError("User not found", code="USER_NOT_FOUND")
        user = await self.find_by_id(user_id)
        await self.session.refresh(user)
        return user
