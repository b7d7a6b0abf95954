"""Service factory dependencies.

Password hasher, token issuer and notification sender are process-wide and
built once from settings. Tests replace them with dependency overrides.
"""

from datetime import timedelta
from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from src.marketplace_auth.api.dependencies.db import DBSession
from src.marketplace_auth.api.dependencies.repositories import (
    EmailVerificationRepo,
    PasswordResetRepo,
    UserRepo,
)
from src.marketplace_auth.core.config import get_settings
from src.marketplace_auth.core.notifications import NotificationSender, ResendNotificationSender
from src.marketplace_auth.core.security import PasswordHasher, SigningKey, TokenIssuer
from src.marketplace_auth.services import (
    AccountService,
    AuthService,
    EphemeralTokenService,
    UserService,
)


@lru_cache
def get_password_hasher() -> PasswordHasher:
    settings = get_settings()
    return PasswordHasher(
        time_cost=settings.argon2_time_cost,
        memory_cost=settings.argon2_memory_cost,
        parallelism=settings.argon2_parallelism,
    )


@lru_cache
def get_token_issuer() -> TokenIssuer:
    settings = get_settings()
    return TokenIssuer(
        access_key=SigningKey(settings.jwt_access_secret, settings.jwt_access_public_key),
        refresh_key=SigningKey(settings.jwt_refresh_secret, settings.jwt_refresh_public_key),
        algorithm=settings.jwt_algorithm,
        access_ttl=timedelta(hours=settings.access_token_expire_hours),
        refresh_ttl=timedelta(days=settings.refresh_token_expire_days),
        issuer=settings.jwt_issuer,
    )


@lru_cache
def get_notification_sender() -> NotificationSender:
    return ResendNotificationSender(get_settings())


Hasher = Annotated[PasswordHasher, Depends(get_password_hasher)]
Issuer = Annotated[TokenIssuer, Depends(get_token_issuer)]
Notifier = Annotated[NotificationSender, Depends(get_notification_sender)]


def get_account_service(user_repo: UserRepo, session: DBSession) -> AccountService:
    return AccountService(user_repo, session)


AccountServiceDep = Annotated[AccountService, Depends(get_account_service)]


def get_ephemeral_token_service(
    verification_repo: EmailVerificationRepo,
    reset_repo: PasswordResetRepo,
) -> EphemeralTokenService:
    settings = get_settings()
    return EphemeralTokenService(
        verification_repo,
        reset_repo,
        verification_ttl=timedelta(hours=settings.email_verification_expire_hours),
        reset_ttl=timedelta(hours=settings.password_reset_expire_hours),
    )


EphemeralTokenServiceDep = Annotated[EphemeralTokenService, Depends(get_ephemeral_token_service)]


def get_auth_service(
    session: DBSession,
    accounts: AccountServiceDep,
    tokens: EphemeralTokenServiceDep,
    hasher: Hasher,
    issuer: Issuer,
    notifier: Notifier,
) -> AuthService:
    """Get auth service with account, token and notification collaborators."""
    return AuthService(session, accounts, tokens, hasher, issuer, notifier)


def get_user_service(
    accounts: AccountServiceDep, session: DBSession, hasher: Hasher
) -> UserService:
    return UserService(accounts, session, hasher)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
