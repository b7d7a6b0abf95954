"""Single-use, time-bounded tokens for email verification and password reset.

Redeeming a token does not consume it. The caller marks it used after the
dependent change has been committed, so a failure in between leaves the
token valid for a retry.
"""

from datetime import timedelta
from enum import Enum

import structlog
from fastapi import status

from src.marketplace_auth.core.exceptions import TokenError, TokenErrorReason
from src.marketplace_auth.core.logging import get_logger
from src.marketplace_auth.core.security import generate_token, hash_token
from src.marketplace_auth.models import EmailVerification, PasswordReset, utc_now
from src.marketplace_auth.repositories import (
    EmailVerificationRepository,
    EphemeralTokenRepository,
    PasswordResetRepository,
)


class TokenKind(str, Enum):
    VERIFICATION = "verification"
    RESET = "reset"


class EphemeralTokenService:
    def __init__(
        self,
        verification_repo: EmailVerificationRepository,
        reset_repo: PasswordResetRepository,
        verification_ttl: timedelta = timedelta(hours=24),
        reset_ttl: timedelta = timedelta(hours=1),
        logger: structlog.stdlib.BoundLogger | None = None,
    ):
        self.verification_repo = verification_repo
        self.reset_repo = reset_repo
        self.verification_ttl = verification_ttl
        self.reset_ttl = reset_ttl
        self.logger = logger or get_logger(__name__)

    def _repo_for(self, kind: TokenKind) -> EphemeralTokenRepository:  # type: ignore[type-arg]
        return self.verification_repo if kind is TokenKind.VERIFICATION else self.reset_repo

    async def issue_verification(self, user_id: int) -> str:
        """Persist a new verification token (24h by default) and return its plaintext."""
        token = generate_token()
        self.verification_repo.add(
            EmailVerification(
                user_id=user_id,
                token_hash=hash_token(token),
                expires_at=utc_now() + self.verification_ttl,
            )
        )
        await self.verification_repo.flush()
        self.logger.debug("Verification token issued", user_id=user_id)
        return token

    async def issue_reset(self, user_id: int) -> str:
        """Persist a new password reset token (1h by default) and return its plaintext."""
        token = generate_token()
        self.reset_repo.add(
            PasswordReset(
                user_id=user_id,
                token_hash=hash_token(token),
                expires_at=utc_now() + self.reset_ttl,
            )
        )
        await self.reset_repo.flush()
        self.logger.debug("Password reset token issued", user_id=user_id)
        return token

    async def redeem(self, token: str, kind: TokenKind) -> int:
        """Return the owning account id of a usable token.

        Raises:
            TokenError: NOT_FOUND for unknown or already consumed tokens,
                EXPIRED once ``expires_at`` has passed. Expired tokens are
                not consumed.
        """
        row = await self._repo_for(kind).get_unconsumed_by_hash(hash_token(token))
        if row is None:
            raise TokenError(
                "Invalid or already used token",
                TokenErrorReason.NOT_FOUND,
                status_code=status.HTTP_400_BAD_REQUEST,
            )
        if utc_now() >= row.expires_at:
            raise TokenError(
                "Token has expired",
                TokenErrorReason.EXPIRED,
                code="TOKEN_EXPIRED",
                status_code=status.HTTP_400_BAD_REQUEST,
            )
        return row.user_id

    async def mark_used(self, token: str, kind: TokenKind) -> bool:
        """Consume a token. Returns False if it was already consumed."""
        return await self._repo_for(kind).mark_consumed(hash_token(token))
