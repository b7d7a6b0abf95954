"""Repositories for single-use tokens (email verification, password reset)."""

from typing import Any

from sqlmodel import col, select, update

from src.marketplace_auth.models import EmailVerification, PasswordReset, utc_now
from src.marketplace_auth.models.tokens import EphemeralTokenBase
from src.marketplace_auth.repositories.base import BaseRepository


class EphemeralTokenRepository[TokenModel: EphemeralTokenBase](BaseRepository[TokenModel]):
    """Lookup and consumption of single-use tokens by digest.

    Subclasses set ``consumed_field`` to the nullable timestamp column that
    marks a token as used.
    """

    consumed_field: str

    def _consumed_column(self) -> Any:
        return col(getattr(self.model, self.consumed_field))

    async def get_unconsumed_by_hash(self, token_hash: str) -> TokenModel | None:
        """Get a token that has not been consumed yet. Expiry is not checked here."""
        result = await self.session.execute(
            select(self.model).where(
                col(self.model.token_hash) == token_hash,
                self._consumed_column().is_(None),
            )
        )
        return result.scalar_one_or_none()

    async def mark_consumed(self, token_hash: str) -> bool:
        """Stamp the consumed timestamp. Returns False if already consumed or unknown."""
        result = await self.session.execute(
            update(self.model)
            .where(
                col(self.model.token_hash) == token_hash,
                self._consumed_column().is_(None),
            )
            .values({self.consumed_field: utc_now()})
            .execution_options(synchronize_session=False)
        )
        return bool(result.rowcount)  # type: ignore[attr-defined]

    async def list_for_user(self, user_id: int) -> list[TokenModel]:
        """All tokens issued to an account, newest first."""
        result = await self.session.execute(
            select(self.model)
            .where(col(self.model.user_id) == user_id)
            .order_by(col(self.model.created_at).desc())
        )
        return list(result.scalars().all())


class EmailVerificationRepository(EphemeralTokenRepository[EmailVerification]):
    model = EmailVerification
    consumed_field = "verified_at"


class PasswordResetRepository(EphemeralTokenRepository[PasswordReset]):
    model = PasswordReset
    consumed_field = "used_at"
