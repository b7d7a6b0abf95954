"""Tests for single-use verification and reset tokens against the database."""

from datetime import timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from src.marketplace_auth.core.exceptions import TokenError, TokenErrorReason
from src.marketplace_auth.core.security import hash_token
from src.marketplace_auth.repositories import EmailVerificationRepository, PasswordResetRepository
from src.marketplace_auth.services import EphemeralTokenService, TokenKind
from tests.factories import EmailVerificationFactory, PasswordResetFactory, utc_now
from tests.helpers import create_user

pytestmark = [pytest.mark.integration, pytest.mark.asyncio]


class TestIssue:
    async def test_two_tokens_for_one_account_are_distinct(
        self, db_session: AsyncSession, token_service: EphemeralTokenService
    ) -> None:
        user = await create_user(db_session, email_verified=False)

        first = await token_service.issue_verification(user.id)
        second = await token_service.issue_verification(user.id)
        await db_session.commit()

        assert first != second
        rows = await EmailVerificationRepository(db_session).list_for_user(user.id)
        assert {r.token_hash for r in rows} == {hash_token(first), hash_token(second)}

    async def test_verification_expires_after_24_hours(
        self, db_session: AsyncSession, token_service: EphemeralTokenService
    ) -> None:
        user = await create_user(db_session, email_verified=False)

        await token_service.issue_verification(user.id)
        await db_session.commit()

        (row,) = await EmailVerificationRepository(db_session).list_for_user(user.id)
        assert abs(row.expires_at - row.created_at - timedelta(hours=24)) < timedelta(seconds=5)

    async def test_reset_expires_after_1_hour(
        self, db_session: AsyncSession, token_service: EphemeralTokenService
    ) -> None:
        user = await create_user(db_session)

        await token_service.issue_reset(user.id)
        await db_session.commit()

        (row,) = await PasswordResetRepository(db_session).list_for_user(user.id)
        assert abs(row.expires_at - row.created_at - timedelta(hours=1)) < timedelta(seconds=5)


class TestRedeem:
    async def test_valid_token_returns_owner(
        self, db_session: AsyncSession, token_service: EphemeralTokenService
    ) -> None:
        user = await create_user(db_session)
        token = await token_service.issue_reset(user.id)
        await db_session.commit()

        assert await token_service.redeem(token, TokenKind.RESET) == user.id

    async def test_redeem_does_not_consume(
        self, db_session: AsyncSession, token_service: EphemeralTokenService
    ) -> None:
        user = await create_user(db_session)
        token = await token_service.issue_reset(user.id)
        await db_session.commit()

        await token_service.redeem(token, TokenKind.RESET)

        assert await token_service.redeem(token, TokenKind.RESET) == user.id

    async def test_expired_token_is_rejected_but_not_consumed(
        self, db_session: AsyncSession, token_service: EphemeralTokenService
    ) -> None:
        user = await create_user(db_session, email_verified=False)
        row, token = EmailVerificationFactory.expired(user_id=user.id)
        db_session.add(row)
        await db_session.commit()

        with pytest.raises(TokenError) as exc_info:
            await token_service.redeem(token, TokenKind.VERIFICATION)

        assert exc_info.value.reason == TokenErrorReason.EXPIRED
        assert exc_info.value.code == "TOKEN_EXPIRED"
        assert exc_info.value.status_code == 400
        await db_session.refresh(row)
        assert row.verified_at is None

    async def test_consumed_token_is_not_found(
        self, db_session: AsyncSession, token_service: EphemeralTokenService
    ) -> None:
        user = await create_user(db_session)
        row, token = PasswordResetFactory.consumed(user_id=user.id)
        db_session.add(row)
        await db_session.commit()

        with pytest.raises(TokenError) as exc_info:
            await token_service.redeem(token, TokenKind.RESET)

        assert exc_info.value.reason == TokenErrorReason.NOT_FOUND
        assert exc_info.value.status_code == 400

    async def test_kinds_do_not_mix(
        self, db_session: AsyncSession, token_service: EphemeralTokenService
    ) -> None:
        user = await create_user(db_session)
        token = await token_service.issue_reset(user.id)
        await db_session.commit()

        with pytest.raises(TokenError) as exc_info:
            await token_service.redeem(token, TokenKind.VERIFICATION)

        assert exc_info.value.reason == TokenErrorReason.NOT_FOUND

    async def test_expiry_boundary_is_exclusive(
        self, db_session: AsyncSession, token_service: EphemeralTokenService
    ) -> None:
        user = await create_user(db_session)
        row, token = PasswordResetFactory.with_plaintext(
            user_id=user.id, expires_at=utc_now() - timedelta(microseconds=1)
        )
        db_session.add(row)
        await db_session.commit()

        with pytest.raises(TokenError) as exc_info:
            await token_service.redeem(token, TokenKind.RESET)

        assert exc_info.value.reason == TokenErrorReason.EXPIRED


class TestMarkUsed:
    async def test_mark_used_once(
        self, db_session: AsyncSession, token_service: EphemeralTokenService
    ) -> None:
        user = await create_user(db_session)
        token = await token_service.issue_reset(user.id)
        await db_session.commit()

        assert await token_service.mark_used(token, TokenKind.RESET) is True
        assert await token_service.mark_used(token, TokenKind.RESET) is False
        await db_session.commit()

        with pytest.raises(TokenError) as exc_info:
            await token_service.redeem(token, TokenKind.RESET)
        assert exc_info.value.reason == TokenErrorReason.NOT_FOUND

    async def test_unknown_token(self, token_service: EphemeralTokenService) -> None:
        assert await token_service.mark_used("never-issued", TokenKind.VERIFICATION) is False
