"""Authentication use cases - register, login, verify, password reset, token refresh.

AuthService composes the account, token and notification collaborators and
owns every commit and rollback. Notification and bookkeeping failures that
do not affect the outcome (verification and welcome emails, last-login
updates, marking tokens used) are logged and do not fail the request. A
failed password reset email does.

Only email sends are time-bounded (``email_send_timeout_seconds``); store
calls have no timeout of their own and end with the request task when it is
cancelled.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.marketplace_auth.core.exceptions import (
    AppError,
    AuthenticationError,
    InternalError,
    NotFoundError,
    TokenError,
    TokenErrorReason,
    ValidationError,
)
from src.marketplace_auth.core.logging import get_logger
from src.marketplace_auth.core.notifications import NotificationSender
from src.marketplace_auth.core.security import PasswordHasher, TokenIssuer, TokenPair
from src.marketplace_auth.models import REGISTRABLE_ROLES, User, UserRole
from src.marketplace_auth.schemas.auth import AuthResponse, RefreshResponse, RegisterRequest
from src.marketplace_auth.schemas.user import AccountPatch, ProfileUpdate, UserRead
from src.marketplace_auth.services.account_service import AccountDraft, AccountService
from src.marketplace_auth.services.ephemeral_token_service import EphemeralTokenService, TokenKind

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"


def parse_registrable_role(value: str) -> UserRole:
    """Map a requested role to UserRole, rejecting unknown and legacy roles."""
    allowed = ", ".join(sorted(r.value for r in REGISTRABLE_ROLES))
    error_message = f"Invalid role. Must be one of: {allowed}"
    try:
        role = UserRole(value)
    except ValueError as e:
        raise ValidationError(error_message, code="INVALID_ROLE") from e
    if role not in REGISTRABLE_ROLES:
        raise ValidationError(error_message, code="INVALID_ROLE")
    return role


class AuthService:
    def __init__(
        self,
        session: AsyncSession,
        accounts: AccountService,
        tokens: EphemeralTokenService,
        hasher: PasswordHasher,
        issuer: TokenIssuer,
        notifier: NotificationSender,
        logger: structlog.stdlib.BoundLogger | None = None,
    ):
        self.session = session
        self.accounts = accounts
        self.tokens = tokens
        self.hasher = hasher
        self.issuer = issuer
        self.notifier = notifier
        self.logger = logger or get_logger(__name__)

    @asynccontextmanager
    async def _transaction(self, operation: str) -> AsyncIterator[None]:
        """Commit on success, roll back on any error.

        Store failures are reported as InternalError without driver details.
        """
        try:
            yield
            await self.session.commit()
        except AppError:
            await self.session.rollback()
            raise
        except SQLAlchemyError as e:
            await self.session.rollback()
            self.logger.error("Database error", operation=operation, error=str(e))
            raise InternalError("Failed to save changes", code="DATABASE_ERROR") from e

    async def _mark_token_used(self, token: str, kind: TokenKind, user_id: int) -> None:
        try:
            await self.tokens.mark_used(token, kind)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            self.logger.warning(
                "Failed to mark token used", kind=kind.value, user_id=user_id, error=str(e)
            )

    def _auth_response(self, user: UserRead, pair: TokenPair) -> AuthResponse:
        return AuthResponse(
            user=user,
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
            expires_at=pair.access_expires_at,
        )

    async def register(self, data: RegisterRequest) -> AuthResponse:
        """Create an unverified account, send a verification link and issue tokens.

        A failed verification email does not fail registration; the user can
        ask for a new link.
        """
        role = parse_registrable_role(data.role)

        # Fail fast before the expensive hash
        await self.accounts.ensure_available(data.email, data.username)
        password_hash = self.hasher.hash(data.password)

        async with self._transaction("register"):
            user = await self.accounts.create(
                AccountDraft(
                    email=data.email,
                    username=data.username,
                    first_name=data.first_name,
                    last_name=data.last_name,
                    password_hash=password_hash,
                    role=role,
                )
            )
            token = await self.tokens.issue_verification(user.id)  # type: ignore[arg-type]

        if not await self.notifier.send_verification(user.email, user.username, token):
            self.logger.warning("Verification email not sent during registration", user_id=user.id)

        self.logger.info("Account registered", user_id=user.id, role=user.role)
        view = UserRead.model_validate(user)
        return self._auth_response(view, self.issuer.issue_pair(view.id, view.email, view.role))

    async def login(self, email: str, password: str) -> AuthResponse:
        """Authenticate and issue a token pair.

        Checks run in order: account exists, account active, password,
        email verified. Unknown email and wrong password share one error.
        """
        user = await self.accounts.find_by_email(email)
        if user is None:
            # Keep response time independent of whether the email exists
            self.hasher.verify(self.hasher.dummy_hash, password)
            raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

        if not user.is_active:
            raise AuthenticationError(
                "Account is not active",
                code="ACCOUNT_INACTIVE",
                status_code=status.HTTP_403_FORBIDDEN,
            )

        if not self.hasher.verify(user.password_hash, password):
            self.logger.info("Login failed", user_id=user.id)
            raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

        if not user.email_verified:
            raise AuthenticationError(
                "Please verify your email before logging in",
                code="EMAIL_NOT_VERIFIED",
                status_code=status.HTTP_403_FORBIDDEN,
            )

        # Rollback expires loaded rows, so keep a detached view of the account
        view = UserRead.model_validate(user)
        try:
            user = await self.accounts.touch_last_login(view.id)
            await self.session.commit()
            view = UserRead.model_validate(user)
        except SQLAlchemyError as e:
            await self.session.rollback()
            self.logger.warning("Failed to update last login", user_id=view.id, error=str(e))

        self.logger.info("Login succeeded", user_id=view.id)
        return self._auth_response(view, self.issuer.issue_pair(view.id, view.email, view.role))

    async def verify_email(self, token: str) -> UserRead:
        """Redeem a verification token and mark the account's email verified."""
        user_id = await self.tokens.redeem(token, TokenKind.VERIFICATION)

        async with self._transaction("verify_email"):
            user = await self.accounts.set_email_verified(user_id)
        view = UserRead.model_validate(user)

        await self._mark_token_used(token, TokenKind.VERIFICATION, user_id)

        if not await self.notifier.send_welcome(view.email, view.username, view.role):
            self.logger.warning("Welcome email not sent", user_id=user_id)

        self.logger.info("Email verified", user_id=user_id)
        return view

    async def resend_verification(self, email: str) -> None:
        """Issue a new verification token for an unverified account.

        Unknown and already verified emails are ignored so the response
        never reveals whether an account exists.
        """
        user = await self.accounts.find_by_email(email)
        if user is None:
            self.logger.info("Verification resend requested for unknown email")
            return
        if user.email_verified:
            self.logger.info("Verification resend requested for verified account", user_id=user.id)
            return

        async with self._transaction("resend_verification"):
            token = await self.tokens.issue_verification(user.id)  # type: ignore[arg-type]

        if not await self.notifier.send_verification(user.email, user.username, token):
            self.logger.warning("Verification email not resent", user_id=user.id)

    async def forgot_password(self, email: str) -> None:
        """Issue a password reset token and email it.

        Unknown emails succeed silently. A failed reset email is reported as
        InternalError.
        """
        user = await self.accounts.find_by_email(email)
        if user is None:
            self.logger.info("Password reset requested for unknown email")
            return

        async with self._transaction("forgot_password"):
            token = await self.tokens.issue_reset(user.id)  # type: ignore[arg-type]

        if not await self.notifier.send_password_reset(user.email, user.username, token):
            self.logger.error("Password reset email not sent", user_id=user.id)
            raise InternalError("Failed to send password reset email", code="EMAIL_SEND_FAILED")

        self.logger.info("Password reset requested", user_id=user.id)

    async def reset_password(self, token: str, new_password: str) -> None:
        """Redeem a reset token and replace the password hash.

        A weak new password leaves the token unconsumed.
        """
        user_id = await self.tokens.redeem(token, TokenKind.RESET)
        password_hash = self.hasher.hash(new_password)

        async with self._transaction("reset_password"):
            await self.accounts.set_password_hash(user_id, password_hash)

        await self._mark_token_used(token, TokenKind.RESET, user_id)
        self.logger.info("Password reset", user_id=user_id)

    async def refresh_token(self, refresh_token: str) -> RefreshResponse:
        """Mint a new access token. The refresh token is returned unchanged."""
        claims = self.issuer.validate_refresh(refresh_token)

        try:
            user = await self.accounts.find_by_id(claims.user_id)
        except NotFoundError as e:
            raise TokenError("Account no longer exists", TokenErrorReason.INVALID) from e

        if not user.is_active:
            raise AuthenticationError(
                "Account is not active",
                code="ACCOUNT_INACTIVE",
                status_code=status.HTTP_403_FORBIDDEN,
            )

        access_token, expires_at = self.issuer.refresh_access(refresh_token)
        return RefreshResponse(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_at=expires_at,
        )

    async def get_profile(self, user_id: int) -> User:
        return await self.accounts.find_by_id(user_id)

    async def update_profile(self, user_id: int, data: ProfileUpdate) -> User:
        patch = AccountPatch.model_validate(data.model_dump(exclude_unset=True))
        async with self._transaction("update_profile"):
            user = await self.accounts.update_fields(user_id, patch)
        self.logger.info("Profile updated", user_id=user_id)
        return user
